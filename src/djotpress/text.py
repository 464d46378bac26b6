"""Plain-text extraction and attribute helpers for djot AST nodes.

Example:
    >>> from djotpress.nodes import Para, Str, Emph
    >>> get_string_content(Para(children=(Str(text="Hello "), Emph(children=(Str(text="World"),)))))
    'Hello World'
"""

from djotpress.nodes import (
    AstNode,
    CodeBlock,
    Email,
    FootnoteReference,
    HardBreak,
    Math,
    NonBreakingSpace,
    RawBlock,
    RawInline,
    SmartPunctuation,
    SoftBreak,
    Str,
    Symb,
    Url,
    Verbatim,
)

# Typographic replacements shared by both renderers
SMART_PUNCTUATION: dict[str, str] = {
    "ellipses": "…",
    "left_single_quote": "‘",
    "right_single_quote": "’",
    "left_double_quote": "“",
    "right_double_quote": "”",
    "en_dash": "–",
    "em_dash": "—",
}


def get_string_content(node: AstNode) -> str:
    """Flatten a node to its plain text.

    Text-bearing leaves contribute their text, breaks contribute a newline,
    raw content and footnote references contribute nothing, containers
    concatenate their children.

    """
    match node:
        case Str() | Verbatim() | Math() | Url() | Email() | CodeBlock():
            return node.text
        case SmartPunctuation():
            return SMART_PUNCTUATION.get(node.type, node.text)
        case Symb():
            return f":{node.alias}:"
        case SoftBreak() | HardBreak():
            return "\n"
        case NonBreakingSpace():
            return " "
        case RawInline() | RawBlock() | FootnoteReference():
            return ""
        case _:
            children = getattr(node, "children", ())
            return "".join(get_string_content(child) for child in children)


def class_list(node: AstNode) -> list[str]:
    """Split the ``class`` attribute into its tokens."""
    return node.attributes.get("class", "").split()


def has_class(node: AstNode, cls: str) -> bool:
    """Check whether ``cls`` is one of the node's class tokens."""
    return cls in class_list(node)
