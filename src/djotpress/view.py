"""Read-only viewer for inline-span ASTs.

Renders the raw (dict-shaped) inline AST used by page fragments such as
images, keyboard shortcuts, and menu paths. Unlike the document renderer,
every node is its own error boundary: a node that fails to render is
replaced by an inline diagnostic and its siblings render normally.

The raw tree is indexed once into a NodeArena; a Node is a cursor of
(arena, index, context), so parent links are plain indices and child
cursors are cheap to create on every access.

Example:
    >>> root = Node.new_root({"tag": "span", "attr": {"class": "kbd"}, "text": "Ctrl+C"})
    >>> root.render()
    Markup('<kbd>Ctrl</kbd>+<kbd>C</kbd>')
"""

from __future__ import annotations

import json
import traceback
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from markupsafe import Markup, escape

from djotpress.errors import NotRootError, UnhandledNodeError
from djotpress.icons import icon
from djotpress.templates import html, join
from djotpress.text import SMART_PUNCTUATION
from djotpress.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class NodeArena:
    """Flat index of a raw AST: nodes with parent and child relations.

    Index 0 is the root; ``parents[0]`` is None.

    """

    nodes: tuple[Mapping[str, Any], ...]
    parents: tuple[int | None, ...]
    children: tuple[tuple[int, ...], ...]

    @classmethod
    def build(cls, root: Mapping[str, Any]) -> NodeArena:
        """Index ``root`` and all its descendants, breadth first."""
        nodes: list[Mapping[str, Any]] = [root]
        parents: list[int | None] = [None]
        children: list[list[int]] = [[]]

        index = 0
        while index < len(nodes):
            for raw in nodes[index].get("children") or ():
                children[index].append(len(nodes))
                nodes.append(raw)
                parents.append(index)
                children.append([])
            index += 1

        return cls(tuple(nodes), tuple(parents), tuple(tuple(kids) for kids in children))


class Node:
    """Cursor over one node of a NodeArena.

    The render context belongs to the root; every cursor derived from it
    carries the same context.

    """

    __slots__ = ("_arena", "_index", "ctx")

    def __init__(self, arena: NodeArena, index: int, ctx: Any = None) -> None:
        self._arena = arena
        self._index = index
        self.ctx = ctx

    @classmethod
    def new_root(cls, ast: Mapping[str, Any], ctx: Any = None) -> Node:
        return cls(NodeArena.build(ast), 0, ctx)

    def with_context(self, ctx: Any) -> Node:
        """New root over the same tree with a different context.

        Raises:
            NotRootError: If called on a node that has a parent.
        """
        if self.parent is not None:
            raise NotRootError(self.tag)
        return Node(self._arena, self._index, ctx)

    @property
    def ast(self) -> Mapping[str, Any]:
        return self._arena.nodes[self._index]

    @property
    def parent(self) -> Node | None:
        parent = self._arena.parents[self._index]
        if parent is None:
            return None
        return Node(self._arena, parent, self.ctx)

    @property
    def tag(self) -> str:
        return self.ast.get("tag", "")

    @property
    def children(self) -> list[Node]:
        """Fresh cursors for the children, in order."""
        return [Node(self._arena, index, self.ctx) for index in self._arena.children[self._index]]

    @property
    def text(self) -> str:
        """Own text, else the text of the first ``str`` child, else ''."""
        text = self.ast.get("text")
        if text is not None:
            return text
        child = self.child("str")
        return child.text if child is not None else ""

    @property
    def cls(self) -> str:
        return (self.ast.get("attr") or {}).get("class", "")

    def has_class(self, name: str) -> bool:
        return name in self.cls.split()

    @property
    def class_attr(self) -> Markup:
        return self.class_attr_extra()

    def class_attr_extra(self, extra: str = "") -> Markup:
        """`` class="..."`` for this node plus ``extra``; empty if no classes."""
        cls = self.cls
        if extra:
            cls = f"{cls} {extra}"
        if not cls.strip():
            return Markup("")
        return html(' class="{}"', cls.strip())

    @property
    def content(self) -> Markup:
        """Rendered output of all children, concatenated."""
        return join(child.render() for child in self.children)

    @property
    def references(self) -> Mapping[str, Mapping[str, str]]:
        """Reference table stored on the root."""
        return self._arena.nodes[0].get("references") or {}

    def child(self, tag: str) -> Node | None:
        """First child with the given tag."""
        return next((child for child in self.children if child.tag == tag), None)

    def render(self) -> Markup:
        """Render this node, or an inline diagnostic if that fails."""
        try:
            subst = SUBSTITUTIONS.get(self.tag)
            if subst is not None:
                return escape(subst)
            handler = VISITORS.get(self.tag)
            if handler is None:
                raise UnhandledNodeError(self.tag)
            return handler(self)
        except Exception as e:
            logger.exception("Failed to render %r node", self.tag)
            return html(
                "<strong>{}</strong>:<br>can't render {}<br/>{}",
                e,
                json.dumps(self.ast, default=str),
                traceback.format_exc(),
            )

    def __repr__(self) -> str:
        return f"Node(tag={self.tag!r}, index={self._index})"


# =============================================================================
# Handlers
# =============================================================================


def _render_image(node: Node) -> Markup:
    reference = node.ast.get("reference")
    if reference:
        href = node.references[reference]["destination"]
    else:
        href = node.ast.get("destination")

    if node.has_class("video"):
        return html('<video src="{}" controls=""></video>', href)

    attrs = join(html(' {}="{}"', key, value) for key, value in (node.ast.get("attr") or {}).items())
    return html('<img src="{}" alt="{}"{}>', href, node.text, attrs)


def _render_reference_definition(node: Node) -> Markup:
    return Markup("")


def _render_span(node: Node) -> Markup:
    """Spans must follow a known class convention: kbd or menu."""
    if node.has_class("kbd"):
        return join(
            html("{}<kbd>{}</kbd>", "+" if i else "", key)
            for i, key in enumerate(node.text.split("+"))
        )
    if node.has_class("menu"):
        content = str(node.content).replace("&gt;", str(icon("angle-right")))
        return html('<span class="menu">{}</span>', Markup(content))
    raise UnhandledNodeError("span", json.dumps(node.ast, default=str))


def _render_str(node: Node) -> Markup:
    return escape(node.text)


VISITORS: dict[str, Callable[[Node], Markup]] = {
    "image": _render_image,
    "reference_definition": _render_reference_definition,
    "span": _render_span,
    "str": _render_str,
}

SUBSTITUTIONS: dict[str, str] = {
    **SMART_PUNCTUATION,
    "softbreak": "\n",
}
