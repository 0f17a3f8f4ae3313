"""Tag stripping: removes tracking markup from raw storefront HTML.

This is a text-rewriting pass, not a DOM transform.  It relies on tag
boundaries being discoverable by regex; malformed markup is out of scope.
"""

from __future__ import annotations

import re
from typing import List, Tuple

from storefront.sanitizer.models import KEEP, SanitizeResult, ScriptDecision
from storefront.sanitizer.patterns import classify_script, is_vendor_link

# Chat-widget custom elements, e.g. ``<gorgias-web-messenger-container>``.
CUSTOM_ELEMENT_PREFIXES: Tuple[str, ...] = ("gorgias",)

_ALTERNATE_LINK_RE = re.compile(
    r"""<link\b(?=[^>]*\brel\s*=\s*["']?alternate\b)(?=[^>]*\bhreflang\b)[^>]*>""",
    re.IGNORECASE,
)
_LINK_RE = re.compile(r"<link(?=[\s>/])[^>]*>", re.IGNORECASE)
_SCRIPT_RE = re.compile(r"<script\b[^>]*>[\s\S]*?</script\s*>", re.IGNORECASE)
_NOSCRIPT_RE = re.compile(r"<noscript\b[^>]*>[\s\S]*?</noscript\s*>", re.IGNORECASE)


def _custom_element_re(prefixes: Tuple[str, ...]) -> re.Pattern:
    alternatives = "|".join(re.escape(p) for p in prefixes)
    return re.compile(
        rf"<((?:{alternatives})-[\w-]+)\b[^>]*>(?:(?!<\1\b)[\s\S])*?</\1\s*>",
        re.IGNORECASE,
    )


_CUSTOM_ELEMENT_RE = _custom_element_re(CUSTOM_ELEMENT_PREFIXES)


def strip_alternate_links(html: str) -> str:
    """Remove ``<link rel="alternate" hreflang=…>`` tags."""
    return _ALTERNATE_LINK_RE.sub("", html)


def strip_vendor_links(html: str) -> str:
    """Remove preload/prefetch <link> tags pointing at blocked vendor code."""
    return _LINK_RE.sub(lambda m: "" if is_vendor_link(m.group(0)) else m.group(0), html)


def strip_scripts(html: str) -> Tuple[str, List[ScriptDecision]]:
    """Apply :func:`classify_script` to every script element.

    Returns the rewritten HTML and the decisions in document order.
    """
    decisions: List[ScriptDecision] = []

    def _replace(match: re.Match) -> str:
        tag = match.group(0)
        decision = classify_script(tag)
        decisions.append(decision)
        return tag if decision.action == KEEP else ""

    return _SCRIPT_RE.sub(_replace, html), decisions


def strip_noscript(html: str) -> str:
    """Remove every ``<noscript>`` element, content included."""
    return _NOSCRIPT_RE.sub("", html)


def strip_custom_elements(html: str) -> str:
    """Remove vendor chat-widget custom elements."""
    return _CUSTOM_ELEMENT_RE.sub("", html)


def strip_tags(html: str) -> SanitizeResult:
    """Run every stripping pass over *html*."""
    html = strip_alternate_links(html)
    html = strip_vendor_links(html)
    html, decisions = strip_scripts(html)
    html = strip_noscript(html)
    html = strip_custom_elements(html)
    return SanitizeResult(html=html, decisions=decisions)
