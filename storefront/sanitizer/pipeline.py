"""The sanitizing pipeline: strip, normalise, pin the origin, add shims."""

from __future__ import annotations

from storefront.sanitizer.models import SanitizeResult
from storefront.sanitizer.shim import inject_shims
from storefront.sanitizer.stripper import strip_tags
from storefront.sanitizer.urls import insert_base_tag, normalize_urls


def sanitize_html(html: str, origin: str) -> SanitizeResult:
    """Turn raw storefront *html* captured from *origin* into a preview document.

    Pure text transformation; no network or file access.
    """
    result = strip_tags(html)
    html = normalize_urls(result.html, origin)
    html = insert_base_tag(html, origin)
    html = inject_shims(html)
    return SanitizeResult(html=html, decisions=result.decisions)
