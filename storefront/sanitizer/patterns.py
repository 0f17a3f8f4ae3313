"""Pattern tables deciding which ``<script>`` elements survive sanitizing.

Rules are evaluated in a fixed priority: every ``keep`` rule, then every
``remove`` rule, then the inline-config fallback.  The first matching rule
wins, so a theme bundle served from a tracking-sounding path is still kept.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from storefront.sanitizer.models import KEEP, REMOVE, ScriptDecision

# Inline scripts at or above this many characters are never kept by the
# fallback rule.
INLINE_SCRIPT_MAX_LENGTH = 5000

_INLINE_CONFIG_RE = re.compile(r"window\.(strings|currency|shopify|theme)", re.IGNORECASE)
_SRC_ATTR_RE = re.compile(r"""<script\b[^>]*?\ssrc\s*=\s*["']?([^"'\s>]*)""", re.IGNORECASE)
_INLINE_BODY_RE = re.compile(r"<script\b[^>]*>([\s\S]*?)</script\s*>", re.IGNORECASE)


@dataclass(frozen=True)
class ScriptRule:
    """A tagged matcher: *action* applies when *pattern* occurs in the tag."""

    action: str
    pattern: re.Pattern

    def matches(self, tag: str) -> bool:
        return self.pattern.search(tag) is not None


def _rules(action: str, *patterns: str) -> Tuple[ScriptRule, ...]:
    return tuple(ScriptRule(action, re.compile(p, re.IGNORECASE)) for p in patterns)


KEEP_RULES = _rules(
    KEEP,
    r"vendor\.js",
    r"theme\.js",
    r"application/ld\+json",
    r"text/template",
    r"application/json",
)

REMOVE_RULES = _rules(
    REMOVE,
    # Google
    r"gtm",
    r"google-analytics",
    r"googletagmanager",
    r"gtag",
    r"doubleclick",
    r"floodlight",
    # Social / marketing
    r"klaviyo",
    r"facebook",
    r"fbq",
    r"tiktok",
    r"ttq",
    r"pinterest",
    r"pintrk",
    r"attentive",
    r"sendlane",
    # Analytics / tracking
    r"monorail",
    r"trekkie",
    r"analytics",
    r"tracking",
    r"dataLayer",
    r"utm",
    r"elevar",
    r"littledata",
    r"segment",
    r"heap",
    r"hotjar",
    r"fullstory",
    r"logrocket",
    r"sentry",
    # Fraud / security
    r"signifyd",
    r"captcha",
    # Cookie consent
    r"pandectes",
    r"cookie-?consent",
    r"onetrust",
    # Payment providers
    r"afterpay",
    r"shopify_pay",
    r"shop-js",
    r"shop\.app",
    r"apple-pay",
    r"dynamic_checkout",
    r"buyer_consent",
    # Internationalization
    r"global-e",
    r"geolizr",
    r"international-messaging",
    r"language-welcome",
    # Shopify extras
    r"__st",
    r"shopify\.loadfeatures",
    r"preloads\.js",
    # Chat
    r"gorgias",
    r"zendesk",
    r"intercom",
    # Reviews / UGC
    r"yotpo",
    r"stamped",
    r"judgeme",
    r"loox",
    r"okendo",
    # A/B testing
    r"optimizely",
    r"vwo",
    r"abtasty",
    # More cookie consent
    r"osano",
    r"cookiebot",
    r"termly",
    r"iubenda",
    # Third-party apps
    r"revy\.io",
    r"xgen\.dev",
    r"hulkapps",
    r"dotlottie",
    r"imask",
    # Loyalty / rewards
    r"loyalty",
    r"smile\.io",
    r"yotpo-loyalty",
    # Accessibility overlays
    r"ada-base",
    r"accessibe",
    r"userway",
    # Redirects
    r"redirect",
)

SCRIPT_RULES: Tuple[ScriptRule, ...] = KEEP_RULES + REMOVE_RULES

# Preload/prefetch <link> hrefs pointing at vendor code whose <script> is
# removed above; left in place they still make the browser download it.
VENDOR_LINK_PATTERNS = tuple(
    re.compile(p, re.IGNORECASE)
    for p in (
        r"shop-js",
        r"gsap",
        r"ScrollTrigger",
        r"ScrambleTextPlugin",
        r"cdn\.jsdelivr\.net",
        r"checkout-web",
    )
)

_LINK_HREF_RE = re.compile(r"""\bhref\s*=\s*["']?([^"'\s>]*)""", re.IGNORECASE)


def script_src(tag: str) -> Optional[str]:
    """Return the ``src`` attribute of the opening ``<script>`` tag, if any."""
    match = _SRC_ATTR_RE.search(tag)
    if match:
        return match.group(1)
    return None


def script_label(tag: str) -> str:
    """Human-readable label for a script: its src, or a snippet of inline code."""
    src = script_src(tag)
    if src is not None:
        return src
    body = _INLINE_BODY_RE.search(tag)
    content = body.group(1).strip() if body else tag
    return f"inline: {content[:50]}..."


def match_rule(tag: str) -> Optional[ScriptRule]:
    """Return the first rule in :data:`SCRIPT_RULES` matching *tag*."""
    for rule in SCRIPT_RULES:
        if rule.matches(tag):
            return rule
    return None


def is_inline_config(tag: str) -> bool:
    """``True`` for a small inline script assigning a known config global."""
    return (
        _INLINE_CONFIG_RE.search(tag) is not None
        and len(tag) < INLINE_SCRIPT_MAX_LENGTH
    )


def classify_script(tag: str) -> ScriptDecision:
    """Decide whether the complete ``<script>…</script>`` element *tag* stays."""
    label = script_label(tag)

    rule = match_rule(tag)
    if rule is not None:
        return ScriptDecision(rule.action, rule.pattern.pattern, label)

    if script_src(tag) is None:
        if is_inline_config(tag):
            return ScriptDecision(KEEP, "inline-config", label)
        return ScriptDecision(REMOVE, "inline", label)

    return ScriptDecision(KEEP, "unmatched-external", label)


def is_vendor_link(tag: str) -> bool:
    """``True`` if the ``<link>`` tag's href matches :data:`VENDOR_LINK_PATTERNS`."""
    match = _LINK_HREF_RE.search(tag)
    if not match:
        return False
    href = match.group(1)
    return any(pattern.search(href) for pattern in VENDOR_LINK_PATTERNS)
