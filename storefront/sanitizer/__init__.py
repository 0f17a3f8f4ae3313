"""Sanitizer package: fetch a storefront page and rewrite it into a preview."""

from storefront.sanitizer.fetcher import fetch_page
from storefront.sanitizer.models import (
    FetchTarget,
    PreviewSummary,
    RawPage,
    SanitizeResult,
    validate_name,
)
from storefront.sanitizer.pipeline import sanitize_html
from storefront.sanitizer.verify import VerifyReport, verify_preview
from storefront.sanitizer.writer import write_preview

__all__ = [
    "fetch_page",
    "sanitize_html",
    "write_preview",
    "verify_preview",
    "validate_name",
    "FetchTarget",
    "RawPage",
    "SanitizeResult",
    "PreviewSummary",
    "VerifyReport",
]
