"""URL normalisation so a captured page resolves assets without its host."""

from __future__ import annotations

import re

_ROOT_RELATIVE_RE = re.compile(r'(href|src)="/(?!/)')
_PROTOCOL_RELATIVE_RE = re.compile(r'(href|src)="//')
_BASE_TAG_RE = re.compile(r"<base(?=[\s>/])[^>]*>", re.IGNORECASE)
_HEAD_OPEN_RE = re.compile(r"<head(?=[\s>])[^>]*>", re.IGNORECASE)


def normalize_urls(html: str, origin: str) -> str:
    """Make root-relative and protocol-relative ``href``/``src`` values absolute.

    ``href="/x"`` becomes ``href="<origin>/x"`` and ``src="//cdn/x"`` becomes
    ``src="https://cdn/x"``.  Already-absolute values are left alone, so the
    function is idempotent.
    """
    origin = origin.rstrip("/")
    html = _ROOT_RELATIVE_RE.sub(lambda m: f'{m.group(1)}="{origin}/', html)
    html = _PROTOCOL_RELATIVE_RE.sub(lambda m: f'{m.group(1)}="https://', html)
    return html


def base_tag(origin: str) -> str:
    return f'<base href="{origin.rstrip("/")}/" target="_blank">'


def insert_base_tag(html: str, origin: str) -> str:
    """Pin *origin* with a ``<base>`` element as the first child of ``<head>``.

    Existing ``<base>`` elements are dropped first so the document ends up
    with exactly one.
    """
    html = _BASE_TAG_RE.sub("", html)
    return _HEAD_OPEN_RE.sub(
        lambda m: f"{m.group(0)}\n{base_tag(origin)}", html, count=1
    )
