"""Default djot HTML renderer.

Renders the typed djot AST to HTML following djot's own HTML conventions.
Every node goes through render_node(), which subclasses override to apply
site policy and fall back to render_default() for anything they leave alone.

The writer operations available to an override are:
- render_default(node, w, state): the built-in rendering for the node
- render_children(node, w, state): only the node's children
- open_tag(tag, node, w, extra) / close_tag(tag, w): tags with the node's
  attributes (``extra`` attributes replace same-named ones)
- w.literal(markup) / w.out(text): trusted markup / escaped text

Thread Safety:
    All per-render state is encapsulated in RenderState, created fresh for
    each render() call. A renderer instance holds no mutable state.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from markupsafe import Markup, escape

from djotpress.context import PageContext
from djotpress.errors import RenderError
from djotpress.nodes import (
    AstNode,
    BlockQuote,
    Caption,
    Cell,
    CodeBlock,
    Definition,
    DefinitionList,
    DefinitionListItem,
    Delete,
    Div,
    Doc,
    DoubleQuoted,
    Email,
    Emph,
    Footnote,
    FootnoteReference,
    HardBreak,
    Heading,
    Image,
    Insert,
    Link,
    List,
    ListItem,
    Mark,
    Math,
    NonBreakingSpace,
    Para,
    RawBlock,
    RawInline,
    ReferenceDefinition,
    Row,
    Section,
    SingleQuoted,
    SmartPunctuation,
    SoftBreak,
    Span,
    Str,
    Strong,
    Subscript,
    Superscript,
    Symb,
    Table,
    Term,
    ThematicBreak,
    Url,
    Verbatim,
)
from djotpress.text import SMART_PUNCTUATION, get_string_content
from djotpress.utils.logger import get_logger
from djotpress.writer import HtmlWriter

logger = get_logger(__name__)

# Attributes consumed by the renderers and never emitted
RENDER_ONLY_ATTRIBUTES = frozenset({"cap", "highlight"})

_INLINE_TAGS: dict[type[AstNode], str] = {
    Emph: "em",
    Strong: "strong",
    Mark: "mark",
    Insert: "ins",
    Delete: "del",
    Superscript: "sup",
    Subscript: "sub",
    Span: "span",
}

# Ordered list marker letter -> <ol type>
_OL_TYPES: dict[str, str] = {"a": "a", "A": "A", "i": "i", "I": "I"}


@dataclass(slots=True)
class RenderState:
    """Per-render mutable state.

    Threaded explicitly through every render call instead of living on
    the renderer, so one renderer can serve any number of renders.

    Attributes:
        page: The caller's PageContext (read and written by overrides)
        doc: Document being rendered, for reference and footnote lookup
        section: Innermost enclosing Section, None at top level
        tight: Paragraphs render without <p> (direct children of a tight
            list item)
        list_tight: Tightness of the innermost enclosing list
        footnotes: Footnote labels in order of first reference

    """

    page: PageContext
    doc: Doc | None = None
    section: Section | None = None
    tight: bool = False
    list_tight: bool = False
    footnotes: list[str] = field(default_factory=list)

    def footnote_number(self, label: str) -> int:
        """1-based footnote number, assigned on first reference."""
        if label not in self.footnotes:
            self.footnotes.append(label)
        return self.footnotes.index(label) + 1


def render_attributes(node: AstNode, extra: Mapping[str, str] | None = None) -> str:
    """Serialize node attributes as `` key="value"`` pairs.

    ``extra`` attributes replace same-named node attributes; render-only
    attributes (``cap``, ``highlight``) are dropped.
    """
    attrs = {k: v for k, v in node.attributes.items() if k not in RENDER_ONLY_ATTRIBUTES}
    if extra:
        attrs.update(extra)
    return "".join(f' {key}="{escape(value)}"' for key, value in attrs.items())


class HtmlRenderer:
    """Render a djot AST to HTML.

    Usage:
        >>> renderer = HtmlRenderer()
        >>> renderer.render(doc)
        Markup('<p>Hello <strong>World</strong></p>\\n')

    """

    __slots__ = ()

    def render(self, doc: Doc, page: PageContext | None = None) -> Markup:
        """Render a document.

        Args:
            doc: Document AST root
            page: Page context; a throwaway one is used when omitted

        Returns:
            Rendered HTML
        """
        state = RenderState(page=page if page is not None else PageContext(), doc=doc)
        w = HtmlWriter()
        self.render_node(doc, w, state)
        if state.footnotes:
            self.render_endnotes(w, state)
        return w.build()

    # =========================================================================
    # Writer operations
    # =========================================================================

    def render_node(self, node: AstNode, w: HtmlWriter, state: RenderState) -> None:
        """Render one node. Subclasses override this to specialize tags."""
        self.render_default(node, w, state)

    def render_children(
        self, node: AstNode, w: HtmlWriter, state: RenderState, *, tight: bool = False
    ) -> None:
        """Render only the node's children."""
        previous = state.tight
        state.tight = tight
        try:
            for child in getattr(node, "children", ()):
                self.render_node(child, w, state)
        finally:
            state.tight = previous

    def open_tag(
        self,
        tag: str,
        node: AstNode,
        w: HtmlWriter,
        extra: Mapping[str, str] | None = None,
    ) -> None:
        w.literal(f"<{tag}{render_attributes(node, extra)}>")

    def close_tag(self, tag: str, w: HtmlWriter) -> None:
        w.literal(f"</{tag}>")

    # =========================================================================
    # Default rendering
    # =========================================================================

    def render_default(self, node: AstNode, w: HtmlWriter, state: RenderState) -> None:
        """Built-in rendering for every djot node kind."""
        match node:
            case Doc():
                self.render_children(node, w, state)
            case Section():
                self._render_container("section", node, w, state)
            case Heading():
                tag = f"h{node.level}"
                self.open_tag(tag, node, w)
                self.render_children(node, w, state)
                self.close_tag(tag, w)
                w.literal("\n")
            case Para():
                if state.tight:
                    self.render_children(node, w, state)
                    w.literal("\n")
                    return
                self.open_tag("p", node, w)
                self.render_children(node, w, state)
                self.close_tag("p", w)
                w.literal("\n")
            case BlockQuote():
                self._render_container("blockquote", node, w, state)
            case Div():
                self._render_container("div", node, w, state)
            case CodeBlock():
                self.open_tag("pre", node, w)
                lang_class = f' class="language-{escape(node.lang)}"' if node.lang else ""
                w.literal(f"<code{lang_class}>").out(node.text).literal("</code></pre>\n")
            case RawBlock():
                if node.format == "html":
                    w.literal(node.text)
            case ThematicBreak():
                self.open_tag("hr", node, w)
                w.literal("\n")
            case List():
                self._render_list(node, w, state)
            case ListItem():
                self.open_tag("li", node, w)
                w.literal("\n")
                if node.checkbox is not None:
                    checked = ' checked=""' if node.checkbox == "checked" else ""
                    w.literal(f'<input disabled="" type="checkbox"{checked}/>\n')
                self.render_children(node, w, state, tight=state.list_tight)
                self.close_tag("li", w)
                w.literal("\n")
            case DefinitionList():
                self._render_container("dl", node, w, state)
            case DefinitionListItem():
                self.render_children(node, w, state)
            case Term():
                self.open_tag("dt", node, w)
                self.render_children(node, w, state)
                self.close_tag("dt", w)
                w.literal("\n")
            case Definition():
                self._render_container("dd", node, w, state)
            case Table():
                self._render_container("table", node, w, state)
            case Caption():
                self.open_tag("caption", node, w)
                self.render_children(node, w, state)
                self.close_tag("caption", w)
                w.literal("\n")
            case Row():
                self._render_container("tr", node, w, state)
            case Cell():
                tag = "th" if node.head else "td"
                extra = {"style": f"text-align: {node.align};"} if node.align != "default" else None
                self.open_tag(tag, node, w, extra)
                self.render_children(node, w, state)
                self.close_tag(tag, w)
                w.literal("\n")
            case ReferenceDefinition() | Footnote():
                pass  # data only; footnotes render in the endnotes section
            case Str():
                w.out(node.text)
            case SoftBreak():
                w.literal("\n")
            case HardBreak():
                w.literal("<br>\n")
            case NonBreakingSpace():
                w.literal("&nbsp;")
            case SmartPunctuation():
                w.out(SMART_PUNCTUATION.get(node.type, node.text))
            case Symb():
                w.out(f":{node.alias}:")
            case Verbatim():
                self.open_tag("code", node, w)
                w.out(node.text)
                self.close_tag("code", w)
            case Math():
                kind, left, right = ("display", r"\[", r"\]") if node.display else ("inline", r"\(", r"\)")
                self.open_tag("span", node, w, {"class": f"math {kind}"})
                w.out(f"{left}{node.text}{right}")
                self.close_tag("span", w)
            case Url():
                self.open_tag("a", node, w, {"href": node.text})
                w.out(node.text)
                self.close_tag("a", w)
            case Email():
                self.open_tag("a", node, w, {"href": f"mailto:{node.text}"})
                w.out(node.text)
                self.close_tag("a", w)
            case RawInline():
                if node.format == "html":
                    w.literal(node.text)
            case FootnoteReference():
                number = state.footnote_number(node.text)
                w.literal(
                    f'<a id="fnref{number}" href="#fn{number}" role="doc-noteref">'
                    f"<sup>{number}</sup></a>"
                )
            case DoubleQuoted():
                w.literal("“")
                self.render_children(node, w, state)
                w.literal("”")
            case SingleQuoted():
                w.literal("‘")
                self.render_children(node, w, state)
                w.literal("’")
            case Emph() | Strong() | Mark() | Insert() | Delete() | Superscript() | Subscript() | Span():
                tag = _INLINE_TAGS[type(node)]
                self.open_tag(tag, node, w)
                self.render_children(node, w, state)
                self.close_tag(tag, w)
            case Link():
                self.open_tag("a", node, w, self._destination_attributes(node, "href", state))
                self.render_children(node, w, state)
                self.close_tag("a", w)
            case Image():
                extra = {"alt": get_string_content(node)}
                extra.update(self._destination_attributes(node, "src", state))
                self.open_tag("img", node, w, extra)
            case _:
                raise RenderError(f"no default rendering for {type(node).__name__}")

    def _render_container(
        self, tag: str, node: AstNode, w: HtmlWriter, state: RenderState
    ) -> None:
        self.open_tag(tag, node, w)
        w.literal("\n")
        self.render_children(node, w, state)
        self.close_tag(tag, w)
        w.literal("\n")

    def _render_list(self, node: List, w: HtmlWriter, state: RenderState) -> None:
        """Render <ul>/<ol>; ordered lists get ``start`` and ``type``."""
        extra: dict[str, str] = {}
        if node.ordered:
            tag = "ol"
            if node.start is not None and node.start != 1:
                extra["start"] = str(node.start)
            marker = node.style.strip("().")
            if marker in _OL_TYPES:
                extra["type"] = _OL_TYPES[marker]
        else:
            tag = "ul"
            if node.style == "X":
                extra["class"] = " ".join([*node.attributes.get("class", "").split(), "task-list"])

        previous = state.list_tight
        state.list_tight = node.tight
        try:
            self.open_tag(tag, node, w, extra)
            w.literal("\n")
            self.render_children(node, w, state)
            self.close_tag(tag, w)
            w.literal("\n")
        finally:
            state.list_tight = previous

    def render_endnotes(self, w: HtmlWriter, state: RenderState) -> None:
        """Render referenced footnotes, in order of first reference."""
        footnotes = state.doc.footnotes if state.doc is not None else {}
        w.literal('<section role="doc-endnotes">\n<hr>\n<ol>\n')
        # Footnotes may reference further footnotes, so the list can grow.
        index = 0
        while index < len(state.footnotes):
            label = state.footnotes[index]
            index += 1
            w.literal(f'<li id="fn{index}">\n')
            footnote = footnotes.get(label)
            if footnote is None:
                logger.warning("Footnote %r is referenced but never defined", label)
            else:
                self.render_children(footnote, w, state)
            w.literal(f'<p><a href="#fnref{index}" role="doc-backlink">↩︎</a></p>\n</li>\n')
        w.literal("</ol>\n</section>\n")

    def resolve_reference(
        self, node: Link | Image, state: RenderState
    ) -> ReferenceDefinition | None:
        """Definition behind ``node.reference``.

        Explicit references win over the implicit ones djot derives from
        heading ids.
        """
        if node.reference is None or state.doc is None:
            return None
        ref = state.doc.references.get(node.reference)
        if ref is None:
            ref = state.doc.auto_references.get(node.reference)
        if ref is None:
            logger.warning("Unresolved reference %r", node.reference)
        return ref

    def _destination_attributes(
        self, node: Link | Image, key: str, state: RenderState
    ) -> dict[str, str]:
        """``href``/``src`` for the node; a reference also lends its attributes."""
        if node.destination is not None:
            return {key: node.destination}
        ref = self.resolve_reference(node, state)
        if ref is None:
            return {}
        extra = {
            name: value
            for name, value in ref.attributes.items()
            if name not in node.attributes and name not in RENDER_ONLY_ATTRIBUTES
        }
        extra[key] = ref.destination
        return extra
