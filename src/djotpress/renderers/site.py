"""Site rendering policy on top of the default djot HTML renderer.

SiteRenderer specializes a handful of tags and defers everything else to
HtmlRenderer.render_default():

- section: flattened when it holds a level-1 heading
- heading: publish date on the title, self-anchor on section headings
- para: first paragraph becomes the page summary; lone images become figures
- list: ``1)`` lists are callout lists
- div: note/quiz/warn admonitions, block asides, details disclosures
- code_block: highlighted code in a figure
- blockquote: a trailing lone link becomes the citation

Node edits never touch the caller's tree: the overrides render transformed
copies made with dataclasses.replace().
"""

from dataclasses import replace

from markupsafe import Markup

from djotpress.config import get_render_config
from djotpress.context import PageContext
from djotpress.highlighting import highlight
from djotpress.icons import icon
from djotpress.nodes import (
    AstNode,
    BlockQuote,
    CodeBlock,
    Div,
    Doc,
    Heading,
    Image,
    Link,
    List,
    Para,
    RawInline,
    Section,
)
from djotpress.renderers.html import HtmlRenderer, RenderState
from djotpress.templates import html, time
from djotpress.text import class_list, get_string_content, has_class
from djotpress.utils.logger import get_logger
from djotpress.writer import HtmlWriter

logger = get_logger(__name__)

# Checked in order; the first class present wins.
ADMONITION_ICONS: tuple[tuple[str, str], ...] = (
    ("note", "info-circle"),
    ("quiz", "question-circle"),
    ("warn", "exclamation-circle"),
)


class SiteRenderer(HtmlRenderer):
    """HtmlRenderer with the site's per-tag overrides."""

    __slots__ = ()

    def render_node(self, node: AstNode, w: HtmlWriter, state: RenderState) -> None:
        match node:
            case Section():
                self._render_section(node, w, state)
            case Heading():
                self._render_heading(node, w, state)
            case Para():
                self._render_para(node, w, state)
            case List():
                self._render_callout_list(node, w, state)
            case Div():
                self._render_div(node, w, state)
            case CodeBlock():
                self._render_code_block(node, w)
            case BlockQuote():
                self._render_blockquote(node, w, state)
            case _:
                self.render_default(node, w, state)

    def _render_section(self, node: Section, w: HtmlWriter, state: RenderState) -> None:
        """Track the current section; drop the wrapper around titled sections."""
        previous = state.section
        state.section = node
        try:
            if any(isinstance(child, Heading) and child.level == 1 for child in node.children):
                self.render_children(node, w, state)
            else:
                self.render_default(node, w, state)
        finally:
            state.section = previous

    def _render_heading(self, node: Heading, w: HtmlWriter, state: RenderState) -> None:
        section = state.section
        is_section_title = (
            node.level > 1
            and section is not None
            and bool(section.children)
            and section.children[0] is node
        )

        if node.level == 1 and state.page.date:
            stamp = RawInline(format="html", text=str(time(state.page.date)))
            node = replace(node, children=(*node.children, stamp))

        if is_section_title:
            section_id = section.attributes.get("id")
            if section_id:
                anchor = Link(destination=f"#{section_id}", children=node.children)
                node = replace(node, children=(anchor,))

        self.render_default(node, w, state)

    def _render_para(self, node: Para, w: HtmlWriter, state: RenderState) -> None:
        if not state.page.summary:
            state.page.summary = get_string_content(node)

        if len(node.children) == 1 and isinstance(node.children[0], Image):
            self.open_tag("figure", node, w)
            self._render_title("figcaption", node, w)
            self.render_children(node, w, state)
            self.close_tag("figure", w)
            w.literal("\n")
            return

        self.render_default(node, w, state)

    def _render_callout_list(self, node: List, w: HtmlWriter, state: RenderState) -> None:
        if node.style == get_render_config().callout_style:
            classes = " ".join([*class_list(node), "callout"])
            node = replace(node, attributes={**node.attributes, "class": classes})
        self.render_default(node, w, state)

    def _render_div(self, node: Div, w: HtmlWriter, state: RenderState) -> None:
        """Class-driven div dispatch: admonitions, block asides, details."""
        admonition = next(
            (name for cls, name in ADMONITION_ICONS if has_class(node, cls)), None
        )
        if admonition is not None:
            self.open_tag("aside", node, w, {"class": "admn"})
            w.literal(icon(admonition))
            w.literal("<div>\n")
            self.render_children(node, w, state)
            w.literal("</div>")
            self.close_tag("aside", w)
            w.literal("\n")
            return

        if has_class(node, "block"):
            self.open_tag("aside", node, w, {"class": "block"})
            self._render_title("div", node, w)
            w.literal("\n")
            self.render_children(node, w, state)
            self.close_tag("aside", w)
            w.literal("\n")
            return

        if has_class(node, "details"):
            self.open_tag("details", node, w)
            w.literal("<summary>").out(node.attributes.get("cap", "")).literal("</summary>\n")
            self.render_children(node, w, state)
            self.close_tag("details", w)
            w.literal("\n")
            return

        self.render_default(node, w, state)

    def _render_code_block(self, node: CodeBlock, w: HtmlWriter) -> None:
        self.open_tag("figure", node, w, {"class": "code-block"})
        self._render_title("figcaption", node, w)
        w.literal(highlight(node.text, node.lang, node.attributes.get("highlight")))
        self.close_tag("figure", w)
        w.literal("\n")

    def _render_blockquote(self, node: BlockQuote, w: HtmlWriter, state: RenderState) -> None:
        """Blockquote in a figure; a last paragraph of one link is the source."""
        source: Link | None = None
        if node.children and isinstance(node.children[-1], Para):
            last = node.children[-1]
            if len(last.children) == 1 and isinstance(last.children[0], Link):
                source = last.children[0]
                node = replace(node, children=node.children[:-1])

        self.open_tag("figure", node, w, {"class": "blockquote"})
        w.literal("<blockquote>\n")
        self.render_children(node, w, state)
        w.literal("</blockquote>\n")
        if source is not None:
            w.literal("<figcaption><cite>")
            self.render_node(source, w, state)
            w.literal("</cite></figcaption>\n")
        self.close_tag("figure", w)
        w.literal("\n")

    def _render_title(self, tag: str, node: AstNode, w: HtmlWriter) -> None:
        """``<tag class="title">`` holding the ``cap`` attribute, if any."""
        cap = node.attributes.get("cap")
        if cap:
            w.literal(f'<{tag} class="title">').out(cap).literal(f"</{tag}>")


def render(doc: Doc, ctx: PageContext) -> Markup:
    """Render a page body with the site's overrides.

    Never raises: a failure anywhere in the document is logged and the
    whole output is replaced by a visible ``Error: ...`` message.

    Args:
        doc: Document to render
        ctx: Page context; ``ctx.summary`` is filled in from the first
            paragraph if it is empty

    Returns:
        Rendered HTML
    """
    try:
        return SiteRenderer().render(doc, ctx)
    except Exception as e:
        logger.exception("Failed to render document")
        return html("Error: {}", e)
