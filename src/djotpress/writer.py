"""HtmlWriter: the output handle passed through every render call.

Appends fragments to a list and joins once at the end, O(n) total.
literal() takes trusted markup as-is; out() escapes text first.

Thread Safety:
    HtmlWriter instances are local to each render() call.

"""

from __future__ import annotations

from markupsafe import Markup, escape


class HtmlWriter:
    """Accumulates rendered HTML.

    Usage:
        >>> w = HtmlWriter()
        >>> w.literal("<h1>").out("Fish & Chips").literal("</h1>")
        >>> w.build()
        Markup('<h1>Fish &amp; Chips</h1>')

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def literal(self, s: str) -> HtmlWriter:
        """Append trusted markup unchanged (empty strings are skipped)."""
        if s:
            self._parts.append(s)
        return self

    def out(self, text: str) -> HtmlWriter:
        """Append text, HTML-escaped unless it is already Markup."""
        if text:
            self._parts.append(str(escape(text)))
        return self

    def build(self) -> Markup:
        """Join all parts into the final trusted markup."""
        return Markup("".join(self._parts))

    def __len__(self) -> int:
        """Return number of parts (not total length)."""
        return len(self._parts)
