"""djotpress renderers.

Available Renderers:
- HtmlRenderer: default djot HTML rendering
- SiteRenderer: HtmlRenderer plus the site's per-tag overrides

Thread Safety:
All per-render state lives in a RenderState created for each render() call.
"""

from djotpress.renderers.html import HtmlRenderer, RenderState
from djotpress.renderers.site import SiteRenderer, render

__all__ = ["HtmlRenderer", "RenderState", "SiteRenderer", "render"]
