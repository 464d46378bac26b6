"""Tests for the inline-span viewer (djotpress.view.Node)."""

from __future__ import annotations

import logging
from typing import Any

import pytest

from djotpress.errors import NotRootError
from djotpress.icons import set_icon_resolver
from djotpress.view import SUBSTITUTIONS, VISITORS, Node, NodeArena


def _str(text: str) -> dict[str, Any]:
    return {"tag": "str", "text": text}


def _span(cls: str, *children: dict[str, Any], **fields: Any) -> dict[str, Any]:
    return {"tag": "span", "attr": {"class": cls}, "children": list(children), **fields}


def _root(*children: dict[str, Any], **fields: Any) -> Node:
    return Node.new_root({"tag": "para", "children": list(children), **fields})


class TestNavigation:
    def test_children_wrap_raw_nodes_in_order(self) -> None:
        root = _root(_str("a"), _str("b"))
        assert [child.text for child in root.children] == ["a", "b"]

    def test_children_are_fresh_on_each_access(self) -> None:
        root = _root(_str("a"))
        assert root.children[0] is not root.children[0]
        assert root.children[0].ast is root.children[0].ast

    def test_parent_links(self) -> None:
        root = _root(_span("kbd", _str("x")))
        grandchild = root.children[0].children[0]
        assert grandchild.parent is not None
        assert grandchild.parent.tag == "span"
        assert root.parent is None

    def test_context_is_inherited(self) -> None:
        root = _root(_span("kbd", _str("x"))).with_context({"page": "home"})
        assert root.children[0].children[0].ctx == {"page": "home"}

    def test_references_come_from_root(self) -> None:
        root = _root(_span("menu", _str("x")), references={"a": {"destination": "/a"}})
        assert root.children[0].children[0].references == {"a": {"destination": "/a"}}

    def test_missing_references_table(self) -> None:
        assert _root().references == {}

    def test_child_lookup(self) -> None:
        root = _root({"tag": "image", "destination": "/x"}, _str("t"))
        child = root.child("str")
        assert child is not None
        assert child.text == "t"
        assert root.child("span") is None

    def test_leaf_has_no_children(self) -> None:
        assert _root().children == []


class TestWithContext:
    def test_root_gets_new_context(self) -> None:
        root = _root(_str("a"))
        other = root.with_context("ctx")
        assert other.ctx == "ctx"
        assert root.ctx is None
        assert other.ast is root.ast

    def test_non_root_raises(self) -> None:
        root = _root(_str("a"))
        with pytest.raises(NotRootError):
            root.children[0].with_context("ctx")


class TestAccessors:
    def test_text_prefers_own_text(self) -> None:
        node = Node.new_root({"tag": "span", "text": "own", "children": [_str("child")]})
        assert node.text == "own"

    def test_text_falls_back_to_str_child(self) -> None:
        assert Node.new_root(_span("kbd", _str("child"))).text == "child"

    def test_text_defaults_to_empty(self) -> None:
        assert Node.new_root({"tag": "span"}).text == ""

    def test_cls(self) -> None:
        assert Node.new_root(_span("kbd")).cls == "kbd"
        assert Node.new_root({"tag": "span"}).cls == ""

    def test_class_attr(self) -> None:
        node = Node.new_root(_span("a"))
        assert node.class_attr == ' class="a"'
        assert node.class_attr_extra("b") == ' class="a b"'

    def test_class_attr_empty(self) -> None:
        node = Node.new_root({"tag": "span"})
        assert node.class_attr == ""
        assert node.class_attr_extra("b") == ' class="b"'


class TestKbd:
    def test_keys_joined_by_plus(self) -> None:
        node = Node.new_root(_span("kbd", text="Ctrl+Alt+Del"))
        assert node.render() == "<kbd>Ctrl</kbd>+<kbd>Alt</kbd>+<kbd>Del</kbd>"

    def test_single_key(self) -> None:
        assert Node.new_root(_span("kbd", _str("Esc"))).render() == "<kbd>Esc</kbd>"

    def test_keys_are_escaped(self) -> None:
        assert Node.new_root(_span("kbd", text="<")).render() == "<kbd>&lt;</kbd>"


class TestMenu:
    def test_separators_become_chevrons(self) -> None:
        node = Node.new_root(_span("menu", _str("File > Save")))
        assert node.render() == (
            '<span class="menu">File <i class="fa fa-angle-right"></i> Save</span>'
        )

    def test_custom_icon_resolver(self) -> None:
        set_icon_resolver(lambda name: f"<svg>{name}</svg>")
        try:
            node = Node.new_root(_span("menu", _str("A>B")))
            assert node.render() == '<span class="menu">A<svg>angle-right</svg>B</span>'
        finally:
            set_icon_resolver(None)


class TestImage:
    def test_reference_wins_over_destination(self) -> None:
        root = _root(
            {"tag": "image", "reference": "fig1", "destination": "/local.png", "children": [_str("Fig")]},
            references={"fig1": {"destination": "/fig1.png"}},
        )
        assert root.children[0].render() == '<img src="/fig1.png" alt="Fig">'

    def test_direct_destination_and_attributes(self) -> None:
        node = Node.new_root(
            {"tag": "image", "destination": "/a.png", "attr": {"width": "100"}, "text": "A"}
        )
        assert node.render() == '<img src="/a.png" alt="A" width="100">'

    def test_video(self) -> None:
        node = Node.new_root({"tag": "image", "destination": "/a.mp4", "attr": {"class": "video"}})
        assert node.render() == '<video src="/a.mp4" controls=""></video>'

    def test_unknown_reference_renders_diagnostic(self) -> None:
        node = _root({"tag": "image", "reference": "missing"}).children[0]
        assert "can't render" in node.render()


class TestDispatch:
    def test_substitutions(self) -> None:
        assert Node.new_root({"tag": "em_dash"}).render() == "—"
        assert Node.new_root({"tag": "left_double_quote"}).render() == "“"
        assert Node.new_root({"tag": "softbreak"}).render() == "\n"

    def test_reference_definition_is_empty(self) -> None:
        assert Node.new_root({"tag": "reference_definition"}).render() == ""

    def test_tables_are_fixed(self) -> None:
        assert set(VISITORS) == {"image", "reference_definition", "span", "str"}
        assert set(SUBSTITUTIONS) == {
            "ellipses",
            "left_single_quote",
            "right_single_quote",
            "left_double_quote",
            "right_double_quote",
            "en_dash",
            "em_dash",
            "softbreak",
        }


class TestFailures:
    def test_unhandled_tag_does_not_stop_siblings(self) -> None:
        root = _root(_str("a"), {"tag": "table"}, _str("b"))
        content = str(root.content)
        assert content.startswith("a<strong>unhandled node table</strong>:<br>can't render ")
        assert content.endswith("b")

    def test_unknown_span_class(self) -> None:
        html = str(Node.new_root(_span("fancy", _str("x"))).render())
        assert "<strong>unhandled node span" in html
        assert "Traceback" in html

    def test_diagnostic_escapes_node_dump(self) -> None:
        html = str(Node.new_root({"tag": "blink", "text": "<script>"}).render())
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.ERROR, logger="djotpress.view"):
            Node.new_root({"tag": "blink"}).render()
        assert any("blink" in record.getMessage() for record in caplog.records)


class TestArena:
    def test_breadth_first_index(self) -> None:
        arena = NodeArena.build(
            {"tag": "para", "children": [_span("kbd", _str("x")), _str("y")]}
        )
        assert [node["tag"] for node in arena.nodes] == ["para", "span", "str", "str"]
        assert arena.parents == (None, 0, 0, 1)
        assert arena.children == ((1, 2), (3,), (), ())
