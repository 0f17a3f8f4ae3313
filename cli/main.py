"""Storefront preview CLI: fetch a storefront and write a sanitized preview.

Usage:
    python cli/main.py --help
    python cli/main.py sanitize https://www.stussy.com stussy
    python cli/main.py verify stussy

The ``sanitize-preview`` console script runs the ``sanitize`` command on its
own, so ``sanitize-preview <url> <name>`` works without a sub-command.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from storefront.xxx import
# ...` works when the CLI is invoked as `python cli/main.py` from any working
# directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from typing import Optional

import httpx
import typer

from storefront.config import settings
from storefront.sanitizer import (
    FetchTarget,
    fetch_page,
    sanitize_html,
    validate_name,
    verify_preview,
    write_preview,
)

USAGE = """\
Usage: sanitize-preview <url> <name>
Example: sanitize-preview https://www.stussy.com stussy"""

_VERBOSE_LIMIT = 20

app = typer.Typer(
    name="storefront-preview",
    help="Capture storefront pages as sanitized, embeddable previews.",
    no_args_is_help=True,
)


# ---------------------------------------------------------------------------
# sanitize
# ---------------------------------------------------------------------------
@app.command("sanitize")
def sanitize(
    url: Optional[str] = typer.Argument(None, help="Storefront URL to capture."),
    name: Optional[str] = typer.Argument(None, help="Output name (file stem)."),
    verbose: bool = typer.Option(False, "--verbose", help="List removed scripts."),
) -> None:
    """Fetch URL and write a sanitized preview to <previews-dir>/<name>.html."""
    if not url or not name:
        typer.echo(USAGE, err=True)
        raise typer.Exit(code=1)

    try:
        target = FetchTarget(url=url, name=name)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Fetching {target.url}...")
    try:
        raw = fetch_page(target.url)
    except httpx.HTTPStatusError as e:
        typer.echo(f"Failed to fetch: {e.response.status_code}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Fetched {len(raw.html)} bytes")

    result = sanitize_html(raw.html, target.origin)
    summary = write_preview(result.html, target.name)

    typer.echo(f"Wrote {summary.path}")
    typer.echo(f"Size: {summary.size_kb}KB ({summary.script_count} scripts remaining)")

    if verbose:
        removed = result.removed
        typer.echo(f"Removed {len(removed)} scripts, kept {len(result.kept)}")
        for decision in removed[:_VERBOSE_LIMIT]:
            typer.echo(f"  - {decision.label}  [{decision.reason}]")
        if len(removed) > _VERBOSE_LIMIT:
            typer.echo(f"  ... and {len(removed) - _VERBOSE_LIMIT} more")


def run_sanitize() -> None:
    """Entry-point for the standalone ``sanitize-preview`` script."""
    typer.run(sanitize)


# ---------------------------------------------------------------------------
# verify
# ---------------------------------------------------------------------------
@app.command("verify")
def verify(
    name: str = typer.Argument(..., help="Preview name to check."),
    origin: Optional[str] = typer.Option(
        None, help="Origin the page was captured from; enables third-party flagging."
    ),
) -> None:
    """Check a written preview for leftover vendor scripts and a single base tag."""
    try:
        validate_name(name)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    path = settings.preview_path(name)
    if not path.exists():
        typer.echo(f"No preview at {path}", err=True)
        raise typer.Exit(code=1)

    report = verify_preview(path.read_text(encoding="utf-8"), origin=origin)

    def _mark(flag: bool) -> str:
        return "ok  " if flag else "FAIL"

    typer.echo(f"[verify] {path}")
    typer.echo(f"  {_mark(report.base_tags == 1)} base tag ({report.base_tags} found)")
    typer.echo(f"  {_mark(report.has_robots_meta)} robots meta")
    typer.echo(f"  {_mark(report.has_overlay)} preview overlay")
    typer.echo(f"  {_mark(not report.vendor_scripts)} vendor scripts removed")
    for src in report.vendor_scripts:
        typer.echo(f"      - {src}")
    typer.echo(f"  {report.script_count} scripts remaining")
    if report.flagged_scripts:
        typer.echo(f"  Flagged {len(report.flagged_scripts)} unknown third-party scripts:")
        for src in report.flagged_scripts:
            typer.echo(f"      - {src}")

    if not report.ok:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
