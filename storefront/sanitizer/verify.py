"""Offline checks over a written preview document."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional
from urllib.parse import urlparse

from storefront.sanitizer.models import REMOVE
from storefront.sanitizer.patterns import match_rule, script_src
from storefront.sanitizer.shim import OVERLAY_ID
from storefront.sanitizer.writer import count_scripts

_BASE_TAG_RE = re.compile(r"<base(?=[\s>/])", re.IGNORECASE)
_ROBOTS_META_RE = re.compile(
    r"""<meta\b[^>]*name=["']robots["'][^>]*content=["'][^"']*noindex""",
    re.IGNORECASE,
)
_SCRIPT_RE = re.compile(r"<script\b[^>]*>[\s\S]*?</script\s*>", re.IGNORECASE)


@dataclass
class VerifyReport:
    base_tags: int
    has_robots_meta: bool
    has_overlay: bool
    script_count: int
    vendor_scripts: List[str] = field(default_factory=list)
    flagged_scripts: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.base_tags == 1 and not self.vendor_scripts


def _is_third_party(src: str, host: Optional[str]) -> bool:
    netloc = urlparse(src).netloc
    if not netloc:
        return False
    return host is None or netloc.lower() != host.lower()


def verify_preview(html: str, origin: Optional[str] = None) -> VerifyReport:
    """Inspect *html* for leftovers the sanitizer should have removed.

    External scripts still matching a remove pattern are reported as vendor
    scripts.  External scripts on another host than *origin* that match no
    rule at all are flagged for a human to look at.
    """
    host = urlparse(origin).netloc if origin else None
    vendor: List[str] = []
    flagged: List[str] = []

    for match in _SCRIPT_RE.finditer(html):
        tag = match.group(0)
        src = script_src(tag)
        if not src:
            continue
        rule = match_rule(tag)
        if rule is None:
            if _is_third_party(src, host):
                flagged.append(src)
        elif rule.action == REMOVE:
            vendor.append(src)

    return VerifyReport(
        base_tags=len(_BASE_TAG_RE.findall(html)),
        has_robots_meta=_ROBOTS_META_RE.search(html) is not None,
        has_overlay=f'id="{OVERLAY_ID}"' in html,
        script_count=count_scripts(html),
        vendor_scripts=vendor,
        flagged_scripts=flagged,
    )
