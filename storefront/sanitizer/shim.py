"""Static CSS/JS injected so a captured storefront feels interactive.

The drawer script fakes the search and cart drawers with a shared overlay;
it runs in the host page's iframe and has no tie back to this process.
"""

from __future__ import annotations

SEARCH_OPEN_LABEL = "SEARCH"
SEARCH_CLOSE_LABEL = "CLOSE"
OVERLAY_ID = "preview-overlay"

ROBOTS_META = '<meta name="robots" content="noindex, nofollow">'

PREVIEW_STYLES = """
<style>
  /* Hide cookie consent / announcement bars */
  .site-announcement,
  [js-announcement-banner] {
    display: none !important;
  }

  /* Force hero visibility */
  [js-rotational-hero-block].hidden {
    display: block !important;
  }

  /* Preview mode overlay */
  .preview-overlay {
    position: fixed;
    top: 60px;
    left: 0;
    width: 100vw;
    height: calc(100vh - 60px);
    background: rgba(0,0,0,0.3);
    z-index: 9990;
    display: none;
  }
  .preview-overlay.open {
    display: block;
  }
  /* Keep header above overlay */
  .site-header, s-header, header, [id*="header"] {
    z-index: 9999 !important;
  }
  /* Search drawer */
  #SearchDrawer.preview-open,
  .search-drawer.preview-open,
  s-drawer[id="SearchDrawer"].preview-open {
    display: block !important;
    position: fixed !important;
    top: 60px !important;
    left: 0 !important;
    right: 0 !important;
    z-index: 9995 !important;
    background: white !important;
  }
  /* Cart drawer */
  .ajaxcart.preview-open,
  s-ajaxcart.preview-open {
    display: block !important;
    position: fixed !important;
    top: 0 !important;
    right: 0 !important;
    width: 50% !important;
    max-width: 500px !important;
    height: 100vh !important;
    z-index: 9995 !important;
    background: white !important;
  }
</style>
"""

DRAWER_SCRIPT = (
    """
<!-- Preview Mode Overlay and Controls -->
<div class="preview-overlay" id="%(overlay_id)s"></div>
<script>
(function() {
  const overlay = document.getElementById('%(overlay_id)s');
  const searchDrawer = document.querySelector('#SearchDrawer, .search-drawer');
  const cartDrawer = document.querySelector('.ajaxcart, s-ajaxcart');
  const searchOpenBtns = document.querySelectorAll('[js-open-search]');
  const searchCloseBtns = document.querySelectorAll('[js-close-search]');
  const cartOpenBtns = document.querySelectorAll('[js-cart-drawer-open]');
  const cartCloseBtns = document.querySelectorAll('[js-cart-drawer-close]');

  let searchOpen = false;
  let cartOpen = false;

  function openSearch() {
    searchOpen = true;
    overlay.classList.add('open');
    if (searchDrawer) {
      searchDrawer.classList.add('preview-open');
      searchDrawer.setAttribute('open', '');
    }
    searchOpenBtns.forEach(btn => {
      if (btn.textContent.trim() === '%(open_label)s') btn.textContent = '%(close_label)s';
    });
  }

  function closeSearch() {
    searchOpen = false;
    if (searchDrawer) {
      searchDrawer.classList.remove('preview-open');
      searchDrawer.removeAttribute('open');
    }
    if (!cartOpen) overlay.classList.remove('open');
    searchOpenBtns.forEach(btn => {
      if (btn.textContent.trim() === '%(close_label)s') btn.textContent = '%(open_label)s';
    });
  }

  function openCart() {
    cartOpen = true;
    overlay.classList.add('open');
    if (cartDrawer) {
      cartDrawer.classList.remove('hidden');
      cartDrawer.classList.add('preview-open');
      cartDrawer.setAttribute('open', '');
    }
  }

  function closeCart() {
    cartOpen = false;
    if (cartDrawer) {
      cartDrawer.classList.add('hidden');
      cartDrawer.classList.remove('preview-open');
      cartDrawer.removeAttribute('open');
    }
    if (!searchOpen) overlay.classList.remove('open');
  }

  function closeAll() {
    closeSearch();
    closeCart();
  }

  function bind(buttons, handler) {
    buttons.forEach(btn => {
      btn.addEventListener('click', (e) => {
        e.preventDefault();
        e.stopPropagation();
        handler();
      });
    });
  }

  bind(searchOpenBtns, () => (searchOpen ? closeSearch() : openSearch()));
  bind(searchCloseBtns, closeSearch);
  bind(cartOpenBtns, openCart);
  bind(cartCloseBtns, closeCart);

  overlay.addEventListener('click', closeAll);
})();
</script>
"""
    % {
        "overlay_id": OVERLAY_ID,
        "open_label": SEARCH_OPEN_LABEL,
        "close_label": SEARCH_CLOSE_LABEL,
    }
)

HEAD_BLOCK = ROBOTS_META + "\n" + PREVIEW_STYLES


def inject_shims(html: str) -> str:
    """Insert the head block before ``</head>`` and the drawer script before ``</body>``.

    Only the first occurrence of each closing tag is used; a document without
    one simply doesn't get that block.
    """
    html = html.replace("</head>", HEAD_BLOCK + "</head>", 1)
    html = html.replace("</body>", DRAWER_SCRIPT + "</body>", 1)
    return html
