"""HTTP fetcher for storefront pages."""

from __future__ import annotations

import httpx

from storefront.config import settings
from storefront.sanitizer.models import RawPage


def _default_headers() -> dict:
    return {"User-Agent": settings.user_agent}


def fetch_page(url: str) -> RawPage:
    """Fetch *url* with a browser-like user agent and return a :class:`RawPage`.

    A single GET, redirects followed, no retries.

    Raises:
        httpx.HTTPStatusError: If the final response is not a 2xx.
    """
    with httpx.Client(
        headers=_default_headers(),
        timeout=settings.request_timeout,
        follow_redirects=True,
    ) as client:
        response = client.get(url)
        response.raise_for_status()
        html = response.text
        status_code = response.status_code

    return RawPage(url=url, html=html, status_code=status_code)
