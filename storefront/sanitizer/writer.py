"""Persist sanitized previews to the previews directory."""

from __future__ import annotations

import math
import re
from pathlib import Path
from typing import Optional

from storefront.config import settings
from storefront.sanitizer.models import PreviewSummary

_SCRIPT_OPEN_RE = re.compile(r"<script", re.IGNORECASE)


def count_scripts(html: str) -> int:
    """Number of ``<script`` occurrences left in *html*."""
    return len(_SCRIPT_OPEN_RE.findall(html))


def size_kb(html: str) -> int:
    """Length of *html* in kilobytes, rounded half-up."""
    return math.floor(len(html) / 1024 + 0.5)


def write_preview(html: str, name: str, previews_dir: Optional[Path] = None) -> PreviewSummary:
    """Write *html* to ``<previews_dir>/<name>.html``, replacing any earlier run."""
    if previews_dir is None:
        settings.ensure_previews_dir()
        directory = settings.previews_dir
    else:
        directory = Path(previews_dir)
        directory.mkdir(parents=True, exist_ok=True)

    path = directory / f"{name}.html"
    path.write_text(html, encoding="utf-8")

    return PreviewSummary(path=path, size_kb=size_kb(html), script_count=count_scripts(html))
