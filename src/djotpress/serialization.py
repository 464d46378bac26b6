"""Djot JSON AST loading and dumping.

Converts djot's JSON AST (as printed by ``djot -t astjson``) to typed
djotpress nodes and back. Nodes are discriminated by their ``tag`` field;
``pos`` information is ignored.

Example:
    from djotpress.serialization import from_json, to_json

    doc = from_json('{"tag": "doc", "children": [], "references": {}, "footnotes": {}}')
    assert from_json(to_json(doc)) == doc

Thread Safety:
    All functions are pure; safe to call from any thread.

"""

import json
from collections.abc import Callable, Mapping
from dataclasses import fields
from typing import Any

from djotpress.errors import ParseError
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

# Registry of djot tags to node classes
_NODE_TYPES: dict[str, type[AstNode]] = {
    cls.tag: cls
    for cls in (
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
}

# Older and alternative spellings of the same node kinds
_TAG_ALIASES: dict[str, str] = {
    "bullet_list": "list",
    "ordered_list": "list",
    "task_list": "list",
    "task_list_item": "list_item",
    "reference_definition": "reference",
    "softbreak": "soft_break",
    "hardbreak": "hard_break",
    "nbsp": "non_breaking_space",
}

# Node fields whose djot JSON key is spelled differently
_JSON_KEYS: dict[str, str] = {
    "auto_references": "autoReferences",
}

_DEFAULT_STYLES: dict[str, str] = {
    "bullet_list": "-",
    "ordered_list": "1.",
    "task_list": "X",
}


def from_dict(data: Mapping[str, Any]) -> AstNode:
    """Build a typed node from a djot JSON AST node.

    Args:
        data: Decoded JSON object with a ``tag`` field.

    Returns:
        Typed AST node (frozen dataclass).

    Raises:
        ParseError: If ``tag`` is missing or unknown, or a required field
            is absent.

    """
    raw_tag = data.get("tag")
    if not isinstance(raw_tag, str):
        raise ParseError("missing 'tag' field in AST node")

    if raw_tag in ("inline_math", "display_math"):
        return Math(
            attributes=dict(data.get("attributes") or {}),
            text=data.get("text", ""),
            display=raw_tag == "display_math",
        )

    tag = _TAG_ALIASES.get(raw_tag, raw_tag)
    node_cls = _NODE_TYPES.get(tag)
    if node_cls is None:
        raise ParseError("unknown node tag", tag=raw_tag)

    kwargs: dict[str, Any] = {}
    for f in fields(node_cls):
        key = _JSON_KEYS.get(f.name, f.name)
        if key in data:
            kwargs[f.name] = _load_field(f.name, data[key])

    if node_cls is List and "style" not in kwargs:
        kwargs["style"] = _DEFAULT_STYLES.get(raw_tag, "-")

    try:
        return node_cls(**kwargs)
    except TypeError as e:
        raise ParseError(str(e), tag=raw_tag) from e


_FieldLoader = Callable[[Any], Any]


def _load_children(value: Any) -> tuple[AstNode, ...]:
    return tuple(from_dict(item) for item in value or ())


def _load_table(value: Any) -> dict[str, Any]:
    return {key: from_dict(item) for key, item in (value or {}).items()}


_FIELD_LOADERS: dict[str, _FieldLoader] = {
    "children": _load_children,
    "attributes": lambda value: dict(value or {}),
    "references": _load_table,
    "auto_references": _load_table,
    "footnotes": _load_table,
}


def _load_field(name: str, value: Any) -> Any:
    loader = _FIELD_LOADERS.get(name)
    return loader(value) if loader else value


def to_dict(node: AstNode) -> dict[str, Any]:
    """Convert a typed node back to djot's JSON AST shape.

    Empty attribute maps are omitted, as djot does.

    """
    tag = "display_math" if isinstance(node, Math) and node.display else node.tag
    result: dict[str, Any] = {"tag": tag}

    for f in fields(node):
        value = getattr(node, f.name)
        if isinstance(node, Math) and f.name == "display":
            continue
        if f.name == "attributes":
            if value:
                result["attributes"] = dict(value)
            continue
        result[_JSON_KEYS.get(f.name, f.name)] = _dump_value(value)

    return result


def _dump_value(value: Any) -> Any:
    if isinstance(value, AstNode):
        return to_dict(value)
    if isinstance(value, tuple):
        return [_dump_value(item) for item in value]
    if isinstance(value, Mapping):
        return {key: _dump_value(item) for key, item in value.items()}
    return value


def from_json(data: str) -> Doc:
    """Load a Doc from a djot JSON AST string.

    Raises:
        ParseError: If the JSON is invalid or its root is not a ``doc``.

    """
    try:
        raw = json.loads(data)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON AST: {e}") from e
    return from_mapping(raw)


def from_mapping(raw: Any) -> Doc:
    """Load a Doc from an already decoded djot JSON AST."""
    if not isinstance(raw, Mapping):
        raise ParseError(f"expected a JSON object, got {type(raw).__name__}")
    node = from_dict(raw)
    if not isinstance(node, Doc):
        raise ParseError(f"expected a 'doc' root, got {node.tag!r}", tag=node.tag)
    return node


def to_json(doc: Doc, *, indent: int | None = None) -> str:
    """Serialize a Doc to a djot JSON AST string with sorted keys."""
    return json.dumps(to_dict(doc), sort_keys=True, indent=indent, ensure_ascii=False)
