"""Trusted-HTML helpers on top of markupsafe.

``Markup`` is the opaque "already rendered" HTML value passed between the
renderers and the site templates: it is never escaped again. Anything that
is not Markup gets escaped on interpolation.

Example:
    >>> html('<a href="{}">{}</a>', "/?a=1&b=2", "<b>")
    Markup('<a href="/?a=1&amp;b=2">&lt;b&gt;</a>')
"""

import datetime
from collections.abc import Iterable

from markupsafe import Markup, escape

from djotpress.config import get_render_config

__all__ = ["Markup", "escape", "html", "join", "time"]


def html(template: str, /, *args: object, **kwargs: object) -> Markup:
    """Fill a trusted template, escaping every non-Markup argument."""
    return Markup(template).format(*args, **kwargs)


def join(parts: Iterable[object], sep: str = "") -> Markup:
    """Concatenate fragments, escaping the ones that are not Markup."""
    return Markup(sep).join(parts)


def time(value: datetime.date, fmt: str | None = None) -> Markup:
    """Render a publish date as a ``<time>`` element.

    Args:
        value: date or datetime
        fmt: strftime format for the visible text; defaults to the
            configured ``date_format``
    """
    fmt = fmt or get_render_config().date_format
    return html(
        '<time class="meta" datetime="{}">{}</time>',
        value.strftime("%Y-%m-%d"),
        value.strftime(fmt),
    )
