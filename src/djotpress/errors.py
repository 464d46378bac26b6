"""Exception classes for djotpress.

Provides standardized exceptions for error handling throughout djotpress.
"""

from __future__ import annotations


class DjotpressError(Exception):
    """Base exception for all djotpress errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(DjotpressError):
    """Error while loading a djot AST.

    Raised when the JSON AST is malformed or contains an unknown node tag.
    """

    def __init__(self, message: str, tag: str | None = None) -> None:
        """Initialize parse error with the offending tag, if any.

        Args:
            message: Error description
            tag: djot node tag that could not be loaded (optional)
        """
        self.message = message
        self.tag = tag
        prefix = f"{tag}: " if tag else ""
        super().__init__(f"{prefix}{message}")


class RenderError(DjotpressError):
    """Error during HTML rendering.

    Raised when a renderer encounters a node it cannot turn into HTML.
    """

    pass


class UnhandledNodeError(RenderError):
    """No handler matches a node.

    Raised by the inline viewer for tags absent from both the substitution
    and handler tables, and for spans whose class has no known convention.
    """

    def __init__(self, tag: str, detail: str = "") -> None:
        """Initialize with the unhandled tag.

        Args:
            tag: Tag of the node that has no handler
            detail: Extra description (e.g. the raw node dump)
        """
        self.tag = tag
        suffix = f": {detail}" if detail else ""
        super().__init__(f"unhandled node {tag}{suffix}")


class NotRootError(DjotpressError):
    """A root-only operation was called on a child node."""

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(f"not a root: {tag!r} node has a parent")
