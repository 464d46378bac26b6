"""
djotpress: djot rendering for a static site generator

Renders djot documents (loaded from djot's JSON AST) to HTML with site
conventions layered on top: admonitions, callout lists, figures, cited
blockquotes, heading self-anchors, publish dates, and page summaries.

Quick Start:
    >>> from djotpress import PageContext, parse, render
    >>> doc = parse(ast_json)  # output of `djot -t astjson post.dj`
    >>> ctx = PageContext(date=datetime.date(2024, 3, 1))
    >>> body = render(doc, ctx)
    >>> ctx.summary
    'First paragraph of the post.'

Inline fragments:
    >>> from djotpress import Node
    >>> Node.new_root({"tag": "span", "attr": {"class": "kbd"}, "text": "Ctrl+C"}).render()
    Markup('<kbd>Ctrl</kbd>+<kbd>C</kbd>')

Installation:
    pip install djotpress            # markupsafe + rosettes
    pip install djotpress[test]      # + pytest, hypothesis
"""

from collections.abc import Mapping
from typing import Any

from markupsafe import Markup

from djotpress.config import (
    RenderConfig,
    get_render_config,
    render_config_context,
    reset_render_config,
    set_render_config,
)
from djotpress.context import PageContext
from djotpress.errors import DjotpressError, NotRootError, ParseError, RenderError, UnhandledNodeError
from djotpress.nodes import Doc
from djotpress.renderers.html import HtmlRenderer
from djotpress.renderers.site import SiteRenderer, render
from djotpress.serialization import from_json, from_mapping, to_dict, to_json
from djotpress.text import get_string_content, has_class
from djotpress.view import Node

__version__ = "0.1.0"


def parse(source: str | Mapping[str, Any]) -> Doc:
    """Load a djot document from its JSON AST.

    Args:
        source: JSON text printed by ``djot -t astjson``, or the same
            structure already decoded

    Returns:
        Doc AST root node

    Raises:
        ParseError: If the input is not a valid djot ``doc`` AST
    """
    if isinstance(source, str):
        return from_json(source)
    return from_mapping(source)


__all__ = [  # noqa: RUF022 (grouped by category)
    # Version
    "__version__",
    # Core API
    "parse",
    "render",
    "PageContext",
    "Markup",
    "Doc",
    "get_string_content",
    "has_class",
    # Renderers
    "HtmlRenderer",
    "SiteRenderer",
    # Inline viewer
    "Node",
    # Serialization
    "from_json",
    "from_mapping",
    "to_dict",
    "to_json",
    # Configuration (ContextVar-based)
    "RenderConfig",
    "get_render_config",
    "set_render_config",
    "reset_render_config",
    "render_config_context",
    # Errors
    "DjotpressError",
    "ParseError",
    "RenderError",
    "UnhandledNodeError",
    "NotRootError",
]
