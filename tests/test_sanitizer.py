"""Tests for the text-rewriting passes: script rules, stripping, URLs, shims.

Everything here is pure string-in / string-out, so no mocking is needed.
"""

from __future__ import annotations

import pytest

from storefront.sanitizer.models import KEEP, REMOVE
from storefront.sanitizer.patterns import (
    INLINE_SCRIPT_MAX_LENGTH,
    KEEP_RULES,
    REMOVE_RULES,
    SCRIPT_RULES,
    classify_script,
    script_label,
    script_src,
)
from storefront.sanitizer.pipeline import sanitize_html
from storefront.sanitizer.shim import DRAWER_SCRIPT, HEAD_BLOCK, ROBOTS_META, inject_shims
from storefront.sanitizer.stripper import (
    strip_alternate_links,
    strip_custom_elements,
    strip_noscript,
    strip_scripts,
    strip_tags,
    strip_vendor_links,
)
from storefront.sanitizer.urls import base_tag, insert_base_tag, normalize_urls


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_ORIGIN = "https://example.com"

_STOREFRONT_HTML = """\
<!DOCTYPE html>
<html>
<head>
<title>Shop</title>
<link rel="alternate" hreflang="fr" href="https://example.com/fr">
<link rel="stylesheet" href="/cdn/theme.css">
<script src="https://www.googletagmanager.com/gtm.js"></script>
<script src="//cdn.example.com/assets/vendor.js"></script>
<script>window.theme = {"strings": {}};</script>
<script>console.log("hello");</script>
</head>
<body>
<noscript><img src="https://www.facebook.com/tr?id=1"></noscript>
<gorgias-web-messenger-container></gorgias-web-messenger-container>
<a href="/products">Products</a>
<img src="//cdn.example.com/hero.jpg">
<a href="https://other.example.org/x">Other</a>
</body>
</html>
"""


def _inline_config(length: int) -> str:
    """An inline config script padded to exactly *length* characters."""
    head = "<script>window.Shopify = {};/*"
    tail = "*/</script>"
    return head + "x" * (length - len(head) - len(tail)) + tail


# ---------------------------------------------------------------------------
# Pattern tables
# ---------------------------------------------------------------------------

class TestScriptRules:
    def test_keep_rules_come_first(self) -> None:
        assert SCRIPT_RULES[: len(KEEP_RULES)] == KEEP_RULES
        assert all(rule.action == KEEP for rule in KEEP_RULES)
        assert all(rule.action == REMOVE for rule in REMOVE_RULES)

    def test_rules_are_case_insensitive(self) -> None:
        tag = '<script src="https://cdn.KLAVIYO.com/onsite.js"></script>'
        assert classify_script(tag).action == REMOVE

    def test_keep_wins_over_remove(self) -> None:
        tag = '<script src="https://cdn.example.com/tracking/theme.js"></script>'
        decision = classify_script(tag)
        assert decision.action == KEEP
        assert decision.reason == r"theme\.js"

    def test_json_data_kept_even_with_tracking_words(self) -> None:
        tag = '<script type="application/json">{"analytics": true}</script>'
        assert classify_script(tag).action == KEEP

    def test_remove_pattern_drops_external(self) -> None:
        tag = '<script src="https://static.hotjar.com/c/hotjar.js"></script>'
        decision = classify_script(tag)
        assert decision.action == REMOVE
        assert decision.reason == "hotjar"

    def test_unknown_external_script_is_kept(self) -> None:
        tag = '<script src="https://cdn.example.com/widgets.js"></script>'
        decision = classify_script(tag)
        assert decision.action == KEEP
        assert decision.reason == "unmatched-external"

    def test_unknown_inline_script_is_removed(self) -> None:
        decision = classify_script("<script>console.log(1)</script>")
        assert decision.action == REMOVE
        assert decision.reason == "inline"

    def test_small_inline_config_is_kept(self) -> None:
        tag = _inline_config(INLINE_SCRIPT_MAX_LENGTH - 1)
        decision = classify_script(tag)
        assert decision.action == KEEP
        assert decision.reason == "inline-config"

    @pytest.mark.parametrize("length", [INLINE_SCRIPT_MAX_LENGTH, INLINE_SCRIPT_MAX_LENGTH + 100])
    def test_large_inline_config_is_removed(self, length: int) -> None:
        tag = _inline_config(length)
        assert len(tag) == length
        assert classify_script(tag).action == REMOVE

    def test_src_inside_inline_body_is_not_an_attribute(self) -> None:
        tag = '<script>var img = \'<img src="/x.png">\';</script>'
        assert script_src(tag) is None
        assert classify_script(tag).action == REMOVE


class TestScriptLabel:
    def test_external_label_is_src(self) -> None:
        assert script_label('<script async src="/a.js"></script>') == "/a.js"

    def test_inline_label_is_snippet(self) -> None:
        label = script_label("<script>  var a = 1;  </script>")
        assert label == "inline: var a = 1;..."


# ---------------------------------------------------------------------------
# Tag stripper
# ---------------------------------------------------------------------------

class TestStripper:
    def test_removes_alternate_hreflang_links(self) -> None:
        html = (
            '<link rel="alternate" hreflang="de" href="/de">'
            '<link hreflang="x-default" rel="alternate" href="/">'
            '<link rel="stylesheet" href="/a.css">'
        )
        assert strip_alternate_links(html) == '<link rel="stylesheet" href="/a.css">'

    def test_keeps_alternate_without_hreflang(self) -> None:
        html = '<link rel="alternate" type="application/rss+xml" href="/feed">'
        assert strip_alternate_links(html) == html

    def test_removes_all_noscript(self) -> None:
        html = "<body><noscript><img src=x></noscript><p>hi</p><NOSCRIPT a=1>y</NOSCRIPT></body>"
        out = strip_noscript(html)
        assert "noscript" not in out.lower()
        assert "<p>hi</p>" in out

    def test_removes_vendor_custom_elements(self) -> None:
        html = '<div><gorgias-chat id="c">loading</gorgias-chat><my-widget></my-widget></div>'
        assert strip_custom_elements(html) == "<div><my-widget></my-widget></div>"

    def test_custom_element_with_nested_markup(self) -> None:
        html = "<gorgias-chat-container><span>chat</span></gorgias-chat-container>ok"
        assert strip_custom_elements(html) == "ok"

    def test_removes_vendor_preload_links(self) -> None:
        html = (
            '<link rel="modulepreload" href="https://cdn.shopify.com/shopifycloud/shop-js/modules/v2/client.js">'
            '<link rel="preload" as="script" href="https://cdn.jsdelivr.net/npm/gsap/dist/gsap.min.js">'
            '<link rel="stylesheet" href="/cdn/theme.css">'
        )
        assert strip_vendor_links(html) == '<link rel="stylesheet" href="/cdn/theme.css">'

    def test_vendor_name_outside_href_is_kept(self) -> None:
        html = '<link rel="preload" data-owner="gsap" href="/cdn/app.js">'
        assert strip_vendor_links(html) == html

    def test_strip_scripts_records_decisions_in_order(self) -> None:
        html = (
            '<script src="https://x.com/theme.js"></script>'
            '<script src="https://connect.facebook.net/fbevents.js"></script>'
        )
        out, decisions = strip_scripts(html)
        assert out == '<script src="https://x.com/theme.js"></script>'
        assert [d.action for d in decisions] == [KEEP, REMOVE]
        assert decisions[1].label == "https://connect.facebook.net/fbevents.js"

    def test_keep_script_survives_verbatim(self) -> None:
        tag = '<script src="https://cdn.example.com/analytics/vendor.js" defer></script>'
        result = strip_tags(f"<head>{tag}</head>")
        assert tag in result.html

    def test_strip_tags_result_views(self) -> None:
        result = strip_tags(_STOREFRONT_HTML)
        assert len(result.decisions) == 4
        assert len(result.removed) == 2
        assert len(result.kept) == 2


# ---------------------------------------------------------------------------
# URL normalizer
# ---------------------------------------------------------------------------

class TestNormalizeUrls:
    def test_root_relative_becomes_absolute(self) -> None:
        html = '<a href="/products"><img src="/img/a.png">'
        assert normalize_urls(html, _ORIGIN) == (
            '<a href="https://example.com/products"><img src="https://example.com/img/a.png">'
        )

    def test_protocol_relative_becomes_https(self) -> None:
        html = '<script src="//cdn.shop.com/a.js"></script><a href="//x.com/">'
        assert normalize_urls(html, _ORIGIN) == (
            '<script src="https://cdn.shop.com/a.js"></script><a href="https://x.com/">'
        )

    def test_absolute_urls_unchanged(self) -> None:
        html = '<a href="https://other.org/p"><img src="http://x.com/a.png"><a href="#top">'
        assert normalize_urls(html, _ORIGIN) == html

    def test_trailing_slash_on_origin(self) -> None:
        assert normalize_urls('<a href="/a">', "https://example.com/") == (
            '<a href="https://example.com/a">'
        )

    def test_idempotent(self) -> None:
        once = normalize_urls(_STOREFRONT_HTML, _ORIGIN)
        assert normalize_urls(once, _ORIGIN) == once


class TestInsertBaseTag:
    def test_inserted_right_after_head(self) -> None:
        out = insert_base_tag("<html><head><title>t</title></head></html>", _ORIGIN)
        assert out == (
            '<html><head>\n<base href="https://example.com/" target="_blank">'
            "<title>t</title></head></html>"
        )

    def test_head_with_attributes(self) -> None:
        out = insert_base_tag('<head lang="en"></head>', _ORIGIN)
        assert out.startswith('<head lang="en">\n' + base_tag(_ORIGIN))

    def test_header_element_is_not_head(self) -> None:
        html = "<body><header>x</header></body>"
        assert insert_base_tag(html, _ORIGIN) == html

    def test_hyphenated_head_element_is_not_head(self) -> None:
        html = "<body><head-banner>x</head-banner></body>"
        assert insert_base_tag(html, _ORIGIN) == html

    def test_base_prefixed_element_survives(self) -> None:
        html = "<head></head><base-price>9</base-price>"
        out = insert_base_tag(html, _ORIGIN)
        assert "<base-price>9</base-price>" in out
        assert out.count(base_tag(_ORIGIN)) == 1

    def test_existing_base_replaced(self) -> None:
        html = '<head><base href="/"></head>'
        out = insert_base_tag(html, _ORIGIN)
        assert out.count("<base") == 1
        assert base_tag(_ORIGIN) in out

    def test_repeat_insert_keeps_single_base(self) -> None:
        once = insert_base_tag("<head></head>", _ORIGIN)
        assert insert_base_tag(once, _ORIGIN).count("<base") == 1


# ---------------------------------------------------------------------------
# Shim injector
# ---------------------------------------------------------------------------

class TestInjectShims:
    def test_blocks_placed_before_closing_tags(self) -> None:
        out = inject_shims("<html><head></head><body><p>x</p></body></html>")
        assert out == (
            "<html><head>" + HEAD_BLOCK + "</head><body><p>x</p>"
            + DRAWER_SCRIPT + "</body></html>"
        )

    def test_only_first_closing_tag_used(self) -> None:
        out = inject_shims("<head></head></head><body></body></body>")
        assert out.count(ROBOTS_META) == 1
        assert out.count('id="preview-overlay"') == 1

    def test_drawer_script_labels(self) -> None:
        assert "'SEARCH'" in DRAWER_SCRIPT
        assert "'CLOSE'" in DRAWER_SCRIPT
        assert "overlay.addEventListener('click', closeAll)" in DRAWER_SCRIPT

    def test_missing_tags_left_alone(self) -> None:
        assert inject_shims("<p>fragment</p>") == "<p>fragment</p>"


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

class TestSanitizeHtml:
    def test_end_to_end_example(self) -> None:
        html = sanitize_html(_STOREFRONT_HTML, _ORIGIN).html

        assert "googletagmanager" not in html
        assert '<a href="https://example.com/products">' in html
        assert html.count('<base href="https://example.com/" target="_blank">') == 1
        assert "<head>\n" + base_tag(_ORIGIN) in html

    def test_strips_tracking_markup(self) -> None:
        html = sanitize_html(_STOREFRONT_HTML, _ORIGIN).html

        assert "<noscript" not in html
        assert "gorgias-" not in html
        assert 'hreflang="fr"' not in html
        assert 'console.log("hello")' not in html

    def test_keeps_theme_and_config(self) -> None:
        html = sanitize_html(_STOREFRONT_HTML, _ORIGIN).html

        assert '<script src="https://cdn.example.com/assets/vendor.js"></script>' in html
        assert '<script>window.theme = {"strings": {}};</script>' in html
        assert '<link rel="stylesheet" href="https://example.com/cdn/theme.css">' in html
        assert '<img src="https://cdn.example.com/hero.jpg">' in html
        assert '<a href="https://other.example.org/x">' in html

    def test_shims_injected(self) -> None:
        html = sanitize_html(_STOREFRONT_HTML, _ORIGIN).html

        assert ROBOTS_META in html
        assert html.index(DRAWER_SCRIPT) < html.index("</body>")

    def test_shop_js_preload_and_script_both_removed(self) -> None:
        src = "https://cdn.shopify.com/shopifycloud/shop-js/modules/v2/client.js"
        raw = (
            f'<html><head><link rel="modulepreload" href="{src}">'
            f'<script src="{src}"></script></head><body></body></html>'
        )
        assert "shop-js" not in sanitize_html(raw, _ORIGIN).html

    def test_decisions_returned(self) -> None:
        result = sanitize_html(_STOREFRONT_HTML, _ORIGIN)
        removed = [d.label for d in result.removed]
        assert "https://www.googletagmanager.com/gtm.js" in removed
