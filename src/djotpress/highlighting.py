"""Syntax highlighting for code blocks.

Code blocks are highlighted with Rosettes by default. Any object
implementing the Highlighter protocol, or a plain ``(code, language) -> str``
callable, can be injected instead.

Djot code blocks may carry a ``highlight`` attribute naming lines to
emphasize, e.g. ``{highlight="1,4-6"}``; parse_highlight_spec() turns it
into 1-indexed line numbers.

Usage:
    from djotpress.highlighting import set_highlighter

    def my_highlighter(code: str, language: str) -> str:
        return f'<pre class="language-{language}"><code>{code}</code></pre>'

    set_highlighter(my_highlighter)
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Protocol

import rosettes
from markupsafe import Markup

from djotpress.config import get_render_config
from djotpress.templates import html
from djotpress.utils.logger import get_logger

logger = get_logger(__name__)

_SPEC_PART = re.compile(r"^\s*(\d+)\s*(?:-\s*(\d+)\s*)?$")


class Highlighter(Protocol):
    """Protocol for syntax highlighters.

    Highlighters take code and language and return HTML markup
    with syntax highlighting applied.
    """

    def highlight(
        self,
        code: str,
        language: str,
        *,
        hl_lines: list[int] | None = None,
        show_linenos: bool = False,
    ) -> str:
        """Highlight code with syntax colors.

        Contract:
            - MUST escape HTML entities in code
            - MUST use CSS classes (not inline styles)
        """
        ...

    def supports_language(self, language: str) -> bool:
        """Check if highlighter supports the given language. MUST NOT raise."""
        ...


SimpleHighlighter = Callable[[str, str], str]


class RosettesHighlighter:
    """Rosettes-based syntax highlighter implementing Highlighter protocol."""

    def highlight(
        self,
        code: str,
        language: str,
        *,
        hl_lines: list[int] | None = None,
        show_linenos: bool = False,
    ) -> str:
        hl_set = set(hl_lines) if hl_lines else None
        result: str = rosettes.highlight(
            code,
            language=language,
            hl_lines=hl_set,
            show_linenos=show_linenos,
        )
        return result

    def supports_language(self, language: str) -> bool:
        try:
            result: bool = rosettes.supports_language(language)
            return result
        except Exception:
            logger.debug("Rosettes failed language lookup for %r", language, exc_info=True)
            return False


_DEFAULT_HIGHLIGHTER = RosettesHighlighter()
_highlighter: Highlighter | SimpleHighlighter = _DEFAULT_HIGHLIGHTER


def set_highlighter(highlighter: Highlighter | SimpleHighlighter | None) -> None:
    """Set the global syntax highlighter.

    Args:
        highlighter: A Highlighter protocol implementation, or a simple
            function that takes (code, language) and returns HTML.
            Pass None to restore the Rosettes highlighter.
    """
    global _highlighter
    _highlighter = highlighter if highlighter is not None else _DEFAULT_HIGHLIGHTER


def get_highlighter() -> Highlighter | SimpleHighlighter:
    """Get the current highlighter instance."""
    return _highlighter


def parse_highlight_spec(spec: str | None) -> list[int]:
    """Parse a line spec such as ``"1,3-5"`` into sorted line numbers.

    Malformed parts are skipped with a warning; an empty or missing spec
    yields an empty list.

    Example:
        >>> parse_highlight_spec("1,3-5")
        [1, 3, 4, 5]
    """
    if not spec:
        return []

    lines: set[int] = set()
    for part in spec.split(","):
        if not part.strip():
            continue
        match = _SPEC_PART.match(part)
        if match is None:
            logger.warning("Ignoring malformed highlight range %r in %r", part, spec)
            continue
        first = int(match.group(1))
        last = int(match.group(2) or first)
        lines.update(range(min(first, last), max(first, last) + 1))
    return sorted(lines)


def plain_code(code: str, language: str | None) -> Markup:
    """Unhighlighted fallback: escaped code in ``<pre><code>``."""
    if language:
        return html('<pre><code class="language-{}">{}</code></pre>', language, code)
    return html("<pre><code>{}</code></pre>", code)


def highlight(code: str, language: str | None, spec: str | None = None) -> Markup:
    """Highlight a code block with the configured highlighter.

    Falls back to plain_code() when highlighting is disabled in the
    render config, no language is given, or the highlighter does not
    know the language.

    Args:
        code: Source code to highlight
        language: Language identifier from the code fence
        spec: Optional highlight spec naming lines to emphasize

    Returns:
        Highlighted markup
    """
    config = get_render_config()
    if not language or not config.highlight:
        return plain_code(code, language)

    highlighter = _highlighter
    if hasattr(highlighter, "highlight") and callable(highlighter.highlight):
        if not highlighter.supports_language(language):
            logger.debug("No highlighter for language %r", language)
            return plain_code(code, language)
        return Markup(
            highlighter.highlight(
                code,
                language,
                hl_lines=parse_highlight_spec(spec) or None,
                show_linenos=config.show_linenos,
            )
        )
    return Markup(highlighter(code, language))
