"""Tests for the site overrides and the top-level render()."""

from __future__ import annotations

import datetime
from collections.abc import Iterator

import pytest

from djotpress.config import RenderConfig, render_config_context
from djotpress.context import PageContext
from djotpress.highlighting import set_highlighter
from djotpress.nodes import (
    BlockQuote,
    CodeBlock,
    Div,
    Doc,
    Heading,
    Image,
    Link,
    List,
    ListItem,
    Para,
    Section,
    Str,
)
from djotpress.renderers.site import SiteRenderer, render


def _doc(*blocks) -> Doc:  # type: ignore[no-untyped-def]
    return Doc(children=tuple(blocks))


def _para(*inlines, **attrs: str) -> Para:  # type: ignore[no-untyped-def]
    return Para(attributes=attrs, children=tuple(inlines))


def _text(text: str) -> Str:
    return Str(text=text)


def _heading(level: int, text: str) -> Heading:
    return Heading(level=level, children=(_text(text),))


def _render(doc: Doc, ctx: PageContext | None = None) -> str:
    return str(render(doc, ctx if ctx is not None else PageContext()))


@pytest.fixture
def fake_highlighter() -> Iterator[list[tuple[str, str]]]:
    calls: list[tuple[str, str]] = []

    def highlighter(code: str, language: str) -> str:
        calls.append((code, language))
        return f'<pre class="hl-{language}">{code}</pre>'

    set_highlighter(highlighter)
    try:
        yield calls
    finally:
        set_highlighter(None)


class TestSections:
    def test_section_with_title_is_flattened(self) -> None:
        doc = _doc(
            Section(
                attributes={"id": "post"},
                children=(_heading(1, "Post"), _para(_text("body"))),
            )
        )
        html = _render(doc)
        assert "<section" not in html
        assert html == "<h1>Post</h1>\n<p>body</p>\n"

    def test_section_without_title_keeps_wrapper(self) -> None:
        doc = _doc(Section(attributes={"id": "part"}, children=(_para(_text("body")),)))
        assert _render(doc).startswith('<section id="part">\n')

    def test_title_heading_nested_deeper_does_not_flatten(self) -> None:
        doc = _doc(
            Section(
                attributes={"id": "outer"},
                children=(Div(children=(_heading(1, "Deep"),)),),
            )
        )
        assert '<section id="outer">' in _render(doc)


class TestHeadings:
    def test_title_gets_date(self) -> None:
        ctx = PageContext(date=datetime.date(2024, 3, 5))
        html = _render(_doc(_heading(1, "Post")), ctx)
        assert html == (
            '<h1>Post<time class="meta" datetime="2024-03-05">Mar 05, 2024</time></h1>\n'
        )

    def test_title_without_date(self) -> None:
        assert _render(_doc(_heading(1, "Post"))) == "<h1>Post</h1>\n"

    def test_date_only_on_level_one(self) -> None:
        ctx = PageContext(date=datetime.date(2024, 3, 5))
        assert "<time" not in _render(_doc(_heading(2, "Sub")), ctx)

    def test_section_heading_links_to_section(self) -> None:
        doc = _doc(Section(attributes={"id": "x"}, children=(_heading(2, "Usage"),)))
        assert '<h2><a href="#x">Usage</a></h2>' in _render(doc)

    def test_section_heading_without_id_is_plain(self) -> None:
        doc = _doc(Section(children=(_heading(2, "Usage"),)))
        html = _render(doc)
        assert "<h2>Usage</h2>" in html
        assert "<a" not in html

    def test_only_first_child_heading_is_linked(self) -> None:
        doc = _doc(
            Section(
                attributes={"id": "x"},
                children=(_para(_text("intro")), _heading(3, "Later")),
            )
        )
        assert "<h3>Later</h3>" in _render(doc)

    def test_nested_sections_link_to_their_own_id(self) -> None:
        doc = _doc(
            Section(
                attributes={"id": "outer"},
                children=(
                    _heading(2, "Outer"),
                    Section(attributes={"id": "inner"}, children=(_heading(3, "Inner"),)),
                ),
            )
        )
        html = _render(doc)
        assert '<h2><a href="#outer">Outer</a></h2>' in html
        assert '<h3><a href="#inner">Inner</a></h3>' in html

    def test_section_tracking_is_restored_after_titled_section(self) -> None:
        titled = Section(attributes={"id": "post"}, children=(_heading(1, "Post"),))
        doc = _doc(titled, _heading(2, "Loose"))
        assert "<h2>Loose</h2>" in _render(doc)


class TestSummary:
    def test_first_paragraph_becomes_summary(self) -> None:
        ctx = PageContext()
        _render(_doc(_heading(1, "T"), _para(_text("first")), _para(_text("second"))), ctx)
        assert ctx.summary == "first"

    def test_preset_summary_is_kept(self) -> None:
        ctx = PageContext(summary="from front matter")
        _render(_doc(_para(_text("first"))), ctx)
        assert ctx.summary == "from front matter"

    def test_summary_is_plain_text(self) -> None:
        ctx = PageContext()
        _render(_doc(_para(_text("a "), Link(destination="/", children=(_text("link"),)))), ctx)
        assert ctx.summary == "a link"


class TestFigures:
    def test_lone_image_becomes_figure(self) -> None:
        image = Image(destination="/cat.png", children=(_text("cat"),))
        html = _render(_doc(_para(image, cap="A cat", id="fig")))
        assert html == (
            '<figure id="fig"><figcaption class="title">A cat</figcaption>'
            '<img alt="cat" src="/cat.png"></figure>\n'
        )

    def test_figure_without_caption(self) -> None:
        image = Image(destination="/cat.png", children=(_text("cat"),))
        html = _render(_doc(_para(image)))
        assert "<figcaption" not in html
        assert html.startswith("<figure>")

    def test_image_with_text_stays_paragraph(self) -> None:
        image = Image(destination="/cat.png", children=(_text("cat"),))
        assert _render(_doc(_para(_text("see "), image))).startswith("<p>")


class TestCalloutLists:
    def _list(self, style: str, **attrs: str) -> List:
        item = ListItem(children=(_para(_text("step")),))
        return List(style=style, attributes=attrs, children=(item,))

    def test_paren_list_is_callout(self) -> None:
        assert _render(_doc(self._list("1)"))).startswith('<ol class="callout">')

    def test_callout_appends_to_existing_classes(self) -> None:
        html = _render(_doc(self._list("1)", **{"class": "steps"})))
        assert html.startswith('<ol class="steps callout">')

    def test_dot_list_is_not_callout(self) -> None:
        assert _render(_doc(self._list("1."))).startswith("<ol>")

    def test_callout_style_is_configurable(self) -> None:
        with render_config_context(RenderConfig(callout_style="(1)")):
            assert 'class="callout"' in _render(_doc(self._list("(1)")))
            assert 'class="callout"' not in _render(_doc(self._list("1)")))

    def test_callout_does_not_mutate_tree(self) -> None:
        lst = self._list("1)")
        _render(_doc(lst))
        assert lst.attributes == {}


class TestDivs:
    def _div(self, cls: str, **attrs: str) -> Div:
        return Div(attributes={"class": cls, **attrs}, children=(_para(_text("body")),))

    def test_warn_admonition(self) -> None:
        html = _render(_doc(self._div("warn")))
        assert html == (
            '<aside class="admn"><i class="fa fa-exclamation-circle"></i><div>\n'
            "<p>body</p>\n</div></aside>\n"
        )

    @pytest.mark.parametrize(
        ("cls", "icon"),
        [("note", "info-circle"), ("quiz", "question-circle")],
    )
    def test_other_admonitions(self, cls: str, icon: str) -> None:
        html = _render(_doc(self._div(cls)))
        assert html.startswith(f'<aside class="admn"><i class="fa fa-{icon}"></i>')

    def test_admonition_precedence(self) -> None:
        html = _render(_doc(self._div("warn note")))
        assert "fa-info-circle" in html
        assert "fa-exclamation-circle" not in html

    def test_block_with_caption(self) -> None:
        html = _render(_doc(self._div("block", cap="Note")))
        assert html == (
            '<aside class="block"><div class="title">Note</div>\n<p>body</p>\n</aside>\n'
        )

    def test_block_caption_is_escaped(self) -> None:
        html = _render(_doc(self._div("block", cap="<b>")))
        assert '<div class="title">&lt;b&gt;</div>' in html

    def test_details(self) -> None:
        html = _render(_doc(self._div("details", cap="More")))
        assert html == (
            '<details class="details"><summary>More</summary>\n<p>body</p>\n</details>\n'
        )

    def test_unknown_class_renders_plain_div(self) -> None:
        html = _render(_doc(self._div("sidebar")))
        assert html.startswith('<div class="sidebar">')
        assert "<aside" not in html


class TestCodeBlocks:
    def test_figure_with_caption(self, fake_highlighter: list[tuple[str, str]]) -> None:
        block = CodeBlock(lang="python", text="pass\n", attributes={"cap": "main.py"})
        html = _render(_doc(block))
        assert html == (
            '<figure class="code-block"><figcaption class="title">main.py</figcaption>'
            '<pre class="hl-python">pass\n</pre></figure>\n'
        )
        assert fake_highlighter == [("pass\n", "python")]

    def test_without_language_is_plain(self) -> None:
        html = _render(_doc(CodeBlock(text="a < b")))
        assert html == '<figure class="code-block"><pre><code>a &lt; b</code></pre></figure>\n'

    def test_highlighting_disabled(self, fake_highlighter: list[tuple[str, str]]) -> None:
        with render_config_context(RenderConfig(highlight=False)):
            html = _render(_doc(CodeBlock(lang="python", text="x")))
        assert '<pre><code class="language-python">x</code></pre>' in html
        assert fake_highlighter == []


class TestBlockquotes:
    def test_trailing_link_becomes_citation(self) -> None:
        source = Link(destination="https://example.com", children=(_text("Someone"),))
        quote = BlockQuote(children=(_para(_text("Wise words.")), _para(source)))
        html = _render(_doc(quote))
        assert html == (
            '<figure class="blockquote"><blockquote>\n<p>Wise words.</p>\n</blockquote>\n'
            '<figcaption><cite><a href="https://example.com">Someone</a></cite></figcaption>\n'
            "</figure>\n"
        )

    def test_without_citation(self) -> None:
        quote = BlockQuote(children=(_para(_text("Just a quote.")),))
        html = _render(_doc(quote))
        assert html.startswith('<figure class="blockquote"><blockquote>')
        assert "<figcaption>" not in html

    def test_link_with_text_is_not_a_citation(self) -> None:
        link = Link(destination="/", children=(_text("here"),))
        quote = BlockQuote(children=(_para(_text("see "), link),))
        assert "<figcaption>" not in _render(_doc(quote))

    def test_non_paragraph_last_child(self) -> None:
        quote = BlockQuote(children=(CodeBlock(text="x"),))
        assert "<figcaption>" not in _render(_doc(quote))


class TestRender:
    def test_same_tree_renders_identically_twice(self) -> None:
        doc = _doc(
            Section(attributes={"id": "x"}, children=(_heading(2, "Sub"),)),
            List(style="1)", children=(ListItem(children=(_para(_text("a")),)),)),
        )
        ctx = PageContext(date=datetime.date(2024, 1, 1))
        assert _render(doc, ctx) == _render(doc, ctx)

    def test_renderer_is_reusable(self) -> None:
        renderer = SiteRenderer()
        doc = _doc(_para(_text("x")))
        assert renderer.render(doc, PageContext()) == renderer.render(doc, PageContext())

    def test_failure_becomes_error_message(self) -> None:
        class Broken:
            pass

        doc = Doc(children=(Broken(),))  # type: ignore[arg-type]
        html = _render(doc)
        assert html.startswith("Error: ")
        assert "Broken" in html
