"""Icon markup for admonitions and menu paths.

Icons render as Font Awesome ``<i>`` elements unless a resolver is
injected (for example one that inlines SVG).

Usage:
    from djotpress.icons import set_icon_resolver

    def svg_icons(name: str) -> str | None:
        return f'<svg class="icon"><use href="#{name}"/></svg>'

    set_icon_resolver(svg_icons)

Thread Safety:
    set_icon_resolver() should be called once at application startup,
    before any concurrent rendering. Updates are protected by a lock.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from markupsafe import Markup

from djotpress.templates import html


_icon_resolver: Callable[[str], str | None] | None = None
_resolver_lock = threading.Lock()


def set_icon_resolver(resolver: Callable[[str], str | None] | None) -> None:
    """Set the global icon resolver; pass None to restore the default.

    Example:
        >>> set_icon_resolver(lambda name: f'<svg>{name}</svg>')
        >>> icon("check")
        Markup('<svg>check</svg>')
    """
    global _icon_resolver
    with _resolver_lock:
        _icon_resolver = resolver


def icon(name: str) -> Markup:
    """Get icon markup by name.

    Args:
        name: Font Awesome icon name without the ``fa-`` prefix
            (e.g. "info-circle", "angle-right")

    Returns:
        Resolver output if a resolver is set and knows the icon,
        otherwise ``<i class="fa fa-NAME"></i>``
    """
    resolver = _icon_resolver
    if resolver is not None:
        markup = resolver(name)
        if markup:
            return Markup(markup)
    return html('<i class="fa fa-{}"></i>', name)


def has_icon_resolver() -> bool:
    """Check if an icon resolver is configured."""
    return _icon_resolver is not None
