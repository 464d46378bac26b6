"""Typed djot AST nodes for djotpress.

All AST nodes are frozen, keyword-only dataclasses with slots for:
- Type safety: IDE autocomplete, catch errors at dev time
- Immutability: renderers derive edited copies with dataclasses.replace,
  so the same tree renders identically any number of times
- Pattern matching: match statements dispatch on node kind

Each class carries the djot tag it was loaded from in ``tag``.

Node Hierarchy:
AstNode (base)
├── Block
│   ├── Doc
│   ├── Section
│   ├── Heading
│   ├── Para
│   ├── BlockQuote
│   ├── Div
│   ├── CodeBlock
│   ├── RawBlock
│   ├── ThematicBreak
│   ├── List / ListItem
│   ├── DefinitionList / DefinitionListItem / Term / Definition
│   ├── Table / Row / Cell / Caption
│   ├── ReferenceDefinition
│   └── Footnote
└── Inline
    ├── Str, SoftBreak, HardBreak, NonBreakingSpace, SmartPunctuation, Symb
    ├── Verbatim, Math, Url, Email, RawInline, FootnoteReference
    ├── Emph, Strong, Mark, Insert, Delete, Superscript, Subscript
    ├── DoubleQuoted, SingleQuoted, Span
    └── Link, Image

"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar, Literal

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class AstNode:
    """Base class for all djot AST nodes.

    ``attributes`` holds the djot ``{#id .class key=value}`` attributes.

    """

    tag: ClassVar[str] = ""

    attributes: Mapping[str, str] = field(default_factory=dict)


# =============================================================================
# Inline Nodes
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class Str(AstNode):
    """Plain text."""

    tag: ClassVar[str] = "str"

    text: str


@dataclass(frozen=True, slots=True, kw_only=True)
class SoftBreak(AstNode):
    tag: ClassVar[str] = "soft_break"


@dataclass(frozen=True, slots=True, kw_only=True)
class HardBreak(AstNode):
    tag: ClassVar[str] = "hard_break"


@dataclass(frozen=True, slots=True, kw_only=True)
class NonBreakingSpace(AstNode):
    tag: ClassVar[str] = "non_breaking_space"


@dataclass(frozen=True, slots=True, kw_only=True)
class SmartPunctuation(AstNode):
    """Typographic punctuation produced from plain quotes, dashes, dots.

    ``type`` is one of left_single_quote, right_single_quote,
    left_double_quote, right_double_quote, ellipses, en_dash, em_dash.
    ``text`` is the source spelling.

    """

    tag: ClassVar[str] = "smart_punctuation"

    type: str
    text: str = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class Symb(AstNode):
    """Symbol reference.

    Djot: :alias:
    """

    tag: ClassVar[str] = "symb"

    alias: str


@dataclass(frozen=True, slots=True, kw_only=True)
class Verbatim(AstNode):
    """Inline code.

    Djot: `code`
    HTML: <code>code</code>
    """

    tag: ClassVar[str] = "verbatim"

    text: str


@dataclass(frozen=True, slots=True, kw_only=True)
class Math(AstNode):
    """Inline or display math.

    Djot: $`x` or $$`x`
    """

    tag: ClassVar[str] = "inline_math"

    text: str
    display: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class Url(AstNode):
    tag: ClassVar[str] = "url"

    text: str


@dataclass(frozen=True, slots=True, kw_only=True)
class Email(AstNode):
    tag: ClassVar[str] = "email"

    text: str


@dataclass(frozen=True, slots=True, kw_only=True)
class RawInline(AstNode):
    """Raw inline content in a named format.

    Djot: `<b>`{=html}
    HTML: passed through unchanged when format is html, dropped otherwise
    """

    tag: ClassVar[str] = "raw_inline"

    format: str
    text: str


@dataclass(frozen=True, slots=True, kw_only=True)
class FootnoteReference(AstNode):
    """Footnote reference.

    Djot: [^label]
    """

    tag: ClassVar[str] = "footnote_reference"

    text: str


@dataclass(frozen=True, slots=True, kw_only=True)
class Emph(AstNode):
    tag: ClassVar[str] = "emph"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Strong(AstNode):
    tag: ClassVar[str] = "strong"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Mark(AstNode):
    tag: ClassVar[str] = "mark"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Insert(AstNode):
    tag: ClassVar[str] = "insert"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Delete(AstNode):
    tag: ClassVar[str] = "delete"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Superscript(AstNode):
    tag: ClassVar[str] = "superscript"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Subscript(AstNode):
    tag: ClassVar[str] = "subscript"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class DoubleQuoted(AstNode):
    tag: ClassVar[str] = "double_quoted"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class SingleQuoted(AstNode):
    tag: ClassVar[str] = "single_quoted"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Span(AstNode):
    """Bracketed span with attributes.

    Djot: [text]{.kbd}
    HTML: <span class="kbd">text</span>
    """

    tag: ClassVar[str] = "span"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Link(AstNode):
    """Hyperlink.

    Either ``destination`` is set directly, or ``reference`` names an entry
    in the document's reference table.

    Djot: [text](url) or [text][ref]
    """

    tag: ClassVar[str] = "link"

    children: tuple[Inline, ...] = ()
    destination: str | None = None
    reference: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Image(AstNode):
    """Image; children hold the alt text.

    Djot: ![alt](url) or ![alt][ref]
    """

    tag: ClassVar[str] = "image"

    children: tuple[Inline, ...] = ()
    destination: str | None = None
    reference: str | None = None


type Inline = (
    Str
    | SoftBreak
    | HardBreak
    | NonBreakingSpace
    | SmartPunctuation
    | Symb
    | Verbatim
    | Math
    | Url
    | Email
    | RawInline
    | FootnoteReference
    | Emph
    | Strong
    | Mark
    | Insert
    | Delete
    | Superscript
    | Subscript
    | DoubleQuoted
    | SingleQuoted
    | Span
    | Link
    | Image
)


# =============================================================================
# Block Nodes
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class Para(AstNode):
    """Paragraph block.

    HTML: <p>text</p>
    """

    tag: ClassVar[str] = "para"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Heading(AstNode):
    """Heading.

    Djot: # Heading
    HTML: <h1>Heading</h1>
    """

    tag: ClassVar[str] = "heading"

    level: int
    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class ThematicBreak(AstNode):
    tag: ClassVar[str] = "thematic_break"


@dataclass(frozen=True, slots=True, kw_only=True)
class Section(AstNode):
    """Implicit section opened by a heading.

    The section, not the heading, carries the generated ``id``.
    """

    tag: ClassVar[str] = "section"

    children: tuple[Block, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Div(AstNode):
    """Fenced div.

    Djot: ::: note ... :::
    """

    tag: ClassVar[str] = "div"

    children: tuple[Block, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class CodeBlock(AstNode):
    """Fenced code block.

    Djot: ``` python ... ```
    """

    tag: ClassVar[str] = "code_block"

    text: str
    lang: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class RawBlock(AstNode):
    tag: ClassVar[str] = "raw_block"

    format: str
    text: str


@dataclass(frozen=True, slots=True, kw_only=True)
class BlockQuote(AstNode):
    """Block quote.

    Djot: > quoted text
    """

    tag: ClassVar[str] = "blockquote"

    children: tuple[Block, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class ListItem(AstNode):
    """List item; ``checkbox`` is set for task list items."""

    tag: ClassVar[str] = "list_item"

    children: tuple[Block, ...] = ()
    checkbox: Literal["checked", "unchecked"] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class List(AstNode):
    """Bullet, ordered, or task list.

    ``style`` is the marker as written: ``-``, ``+``, ``*`` for bullets,
    ``X`` for tasks, and templates like ``1.``, ``1)``, ``(a)``, ``i.`` for
    ordered lists.

    """

    tag: ClassVar[str] = "list"

    style: str
    children: tuple[ListItem, ...] = ()
    tight: bool = True
    start: int | None = None

    @property
    def ordered(self) -> bool:
        return self.style not in BULLET_STYLES and self.style != TASK_STYLE


BULLET_STYLES = frozenset({"-", "+", "*"})
TASK_STYLE = "X"


@dataclass(frozen=True, slots=True, kw_only=True)
class Term(AstNode):
    tag: ClassVar[str] = "term"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Definition(AstNode):
    tag: ClassVar[str] = "definition"

    children: tuple[Block, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class DefinitionListItem(AstNode):
    """One term with its definition."""

    tag: ClassVar[str] = "definition_list_item"

    children: tuple[Term | Definition, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class DefinitionList(AstNode):
    """Definition list.

    Djot: : term

          definition
    HTML: <dl><dt>term</dt><dd>definition</dd></dl>
    """

    tag: ClassVar[str] = "definition_list"

    children: tuple[DefinitionListItem, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Caption(AstNode):
    tag: ClassVar[str] = "caption"

    children: tuple[Inline, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Cell(AstNode):
    tag: ClassVar[str] = "cell"

    children: tuple[Inline, ...] = ()
    head: bool = False
    align: Literal["default", "left", "right", "center"] = "default"


@dataclass(frozen=True, slots=True, kw_only=True)
class Row(AstNode):
    tag: ClassVar[str] = "row"

    children: tuple[Cell, ...] = ()
    head: bool = False


@dataclass(frozen=True, slots=True, kw_only=True)
class Table(AstNode):
    """Pipe table; an optional Caption precedes the rows."""

    tag: ClassVar[str] = "table"

    children: tuple[Caption | Row, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class ReferenceDefinition(AstNode):
    """Link reference definition.

    Djot: [label]: https://example.com
    HTML: (data only, not rendered)
    """

    tag: ClassVar[str] = "reference"

    label: str
    destination: str


@dataclass(frozen=True, slots=True, kw_only=True)
class Footnote(AstNode):
    """Footnote definition.

    Djot: [^label]: text
    HTML: (rendered in the endnotes section)
    """

    tag: ClassVar[str] = "footnote"

    label: str
    children: tuple[Block, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class Doc(AstNode):
    """Root document node with its reference and footnote tables.

    ``auto_references`` holds the implicit heading references djot
    derives from section ids; explicit ``references`` take precedence.

    """

    tag: ClassVar[str] = "doc"

    children: tuple[Block, ...] = ()
    references: Mapping[str, ReferenceDefinition] = field(default_factory=dict)
    auto_references: Mapping[str, ReferenceDefinition] = field(default_factory=dict)
    footnotes: Mapping[str, Footnote] = field(default_factory=dict)


type Block = (
    Doc
    | Section
    | Heading
    | Para
    | BlockQuote
    | Div
    | CodeBlock
    | RawBlock
    | ThematicBreak
    | List
    | ListItem
    | DefinitionList
    | DefinitionListItem
    | Term
    | Definition
    | Table
    | Row
    | Cell
    | Caption
    | ReferenceDefinition
    | Footnote
)
