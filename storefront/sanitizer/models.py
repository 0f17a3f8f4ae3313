"""Data models for the sanitizer pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List
from urllib.parse import urlparse

KEEP = "keep"
REMOVE = "remove"


def validate_name(name: str) -> str:
    """Return *name* if it is usable as a file stem inside the previews directory.

    Raises:
        ValueError: For empty names, `.`/`..`, or names with path separators.
    """
    if not name or name in (".", "..") or "/" in name or "\\" in name:
        raise ValueError(f"Invalid preview name: {name!r}")
    return name


@dataclass
class FetchTarget:
    """A storefront URL and the stem of the preview file written for it."""

    url: str
    name: str

    def __post_init__(self) -> None:
        parsed = urlparse(self.url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Not an absolute URL: {self.url!r}")
        validate_name(self.name)

    @property
    def origin(self) -> str:
        """``scheme://host[:port]`` of :attr:`url`, without a trailing slash."""
        parsed = urlparse(self.url)
        return f"{parsed.scheme}://{parsed.netloc}"


@dataclass
class RawPage:
    """The raw HTTP response for a single URL fetch."""

    url: str
    html: str
    status_code: int


@dataclass
class ScriptDecision:
    """Outcome of classifying one ``<script>`` element."""

    action: str
    reason: str
    label: str


@dataclass
class SanitizeResult:
    """Rewritten HTML plus the decision taken for every script element."""

    html: str
    decisions: List[ScriptDecision] = field(default_factory=list)

    @property
    def removed(self) -> List[ScriptDecision]:
        return [d for d in self.decisions if d.action == REMOVE]

    @property
    def kept(self) -> List[ScriptDecision]:
        return [d for d in self.decisions if d.action == KEEP]


@dataclass
class PreviewSummary:
    """What the writer reports after persisting a preview."""

    path: Path
    size_kb: int
    script_count: int
