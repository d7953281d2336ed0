"""Tests for HTML to canonical document parsing."""

from __future__ import annotations

import logging

import pytest
from bs4 import ParserRejectedMarkup

from tejido import html_to_document, is_valid_document, render_html
from tejido.config import HtmlParseConfig
from tejido.diagnostics import Diagnostic, DiagnosticKind
from tejido.errors import ParseError
from tejido.nodes import Mark, Node, NodeType
from tejido.parsers.html import HtmlParser, finish_inline, parse_style

LOGGER = "tejido.parsers.html"


def _only_block(html: str, **options: object) -> Node:
    (block,) = html_to_document(html, options or None).content
    return block


def _texts(block: Node) -> list[tuple[str | None, list[str]]]:
    return [(n.text, [m.type for m in n.marks]) for n in block.content]


# =============================================================================
# Block structure
# =============================================================================


class TestBlocks:
    """Block tags map onto block nodes."""

    def test_empty(self) -> None:
        document = html_to_document("")
        assert document == Node(NodeType.DOC)
        assert is_valid_document(document)

    def test_paragraph(self) -> None:
        block = _only_block("<p>Hello</p>")
        assert block == Node(NodeType.PARAGRAPH, content=(Node(NodeType.TEXT, text="Hello"),))

    @pytest.mark.parametrize("level", range(1, 7))
    def test_heading_level(self, level: int) -> None:
        block = _only_block(f"<h{level}>T</h{level}>")
        assert block.attrs["level"] == level

    def test_block_attrs(self) -> None:
        block = _only_block('<h2 class="lead" id="top" style="text-align: center">T</h2>')
        assert dict(block.attrs) == {"level": 2, "class": "lead", "id": "top", "textAlign": "center"}

    def test_div_is_hoisted(self) -> None:
        document = html_to_document("<div><section><p>a</p></section><p>b</p></div>")
        assert [b.type for b in document.content] == ["paragraph", "paragraph"]

    def test_full_document(self) -> None:
        html = "<!DOCTYPE html><html><head><title>x</title></head><body><p>a</p></body></html>"
        assert [b.type for b in html_to_document(html).content] == ["paragraph"]

    def test_loose_inline_wrapped(self) -> None:
        document = html_to_document("Hello <b>you</b><p>para</p>tail")
        first, middle, last = document.content
        assert _texts(first) == [("Hello ", []), ("you", ["bold"])]
        assert middle.content[0].text == "para"
        assert last.content[0].text == "tail"

    def test_whitespace_between_blocks_dropped(self) -> None:
        document = html_to_document("<p>a</p>\n   \n<p>b</p>\n")
        assert len(document.content) == 2

    def test_blockquote(self) -> None:
        block = _only_block("<blockquote><p>q</p>loose</blockquote>")
        assert [c.type for c in block.content] == ["paragraph", "paragraph"]

    def test_horizontal_rule(self) -> None:
        assert _only_block("<hr>").type == NodeType.HORIZONTAL_RULE

    def test_script_and_style_dropped(self) -> None:
        document = html_to_document("<style>p {}</style><script>x()</script><p>a</p>")
        assert len(document.content) == 1


class TestLists:
    """Lists and items."""

    def test_bullet_list(self) -> None:
        block = _only_block("<ul><li>a</li><li><p>b</p></li></ul>")
        assert block.type == NodeType.BULLET_LIST
        assert [item.content[0].content[0].text for item in block.content] == ["a", "b"]

    def test_ordered_start(self) -> None:
        block = _only_block('<ol start="4"><li>a</li></ol>')
        assert block.attrs["order"] == 4

    def test_ordered_bad_start(self) -> None:
        assert _only_block('<ol start="x"><li>a</li></ol>').attrs["order"] == 1
        assert _only_block('<ol start="-3"><li>a</li></ol>').attrs["order"] == 1

    def test_ordered_start_zero(self) -> None:
        html = '<ol start="0"><li><p>a</p></li></ol>'
        assert _only_block(html).attrs["order"] == 0
        assert render_html(html_to_document(html)) == html

    def test_nested_list(self) -> None:
        block = _only_block("<ul><li>a<ul><li>b</li></ul></li></ul>")
        item = block.content[0]
        assert [c.type for c in item.content] == ["paragraph", "bullet_list"]

    def test_empty_item_gets_paragraph(self) -> None:
        block = _only_block("<ul><li></li></ul>")
        assert block.content[0].content == (Node(NodeType.PARAGRAPH),)

    def test_stray_content_joins_previous_item(self) -> None:
        block = _only_block("<ul><li>a</li>b</ul>")
        assert len(block.content) == 1
        assert [p.content[0].text for p in block.content[0].content] == ["a", "b"]


class TestCode:
    """pre keeps content verbatim."""

    def test_language_from_code_class(self) -> None:
        block = _only_block('<pre><code class="language-py">x  =  1\n\n  y</code></pre>')
        assert block.type == NodeType.CODE_BLOCK
        assert block.attrs["language"] == "py"
        assert block.content[0].text == "x  =  1\n\n  y"

    def test_leading_newline_stripped(self) -> None:
        block = _only_block("<pre>\n<b>a</b> b</pre>")
        assert block.attrs["language"] is None
        assert block.content[0].text == "a b"

    def test_inline_code_mark(self) -> None:
        assert _texts(_only_block("<p><code>x</code></p>")) == [("x", ["code"])]


class TestTables:
    """Tables look through section wrappers."""

    def test_table(self) -> None:
        html = (
            "<table><caption>c</caption><thead><tr><th>H</th></tr></thead>"
            '<tbody><tr><td colspan="2" style="background-color: red; text-align: right" '
            'data-colwidth="120">1</td></tr></tbody></table>'
        )
        table = _only_block(html)
        header, row = table.content
        assert header.content[0].type == NodeType.TABLE_HEADER
        assert dict(header.content[0].attrs) == {"colspan": 1, "rowspan": 1, "colwidth": None}
        cell = row.content[0]
        assert dict(cell.attrs) == {
            "colspan": 2,
            "rowspan": 1,
            "colwidth": [120],
            "backgroundColor": "red",
            "textAlign": "right",
        }
        assert cell.content[0].content[0].text == "1"

    def test_empty_cell_gets_paragraph(self) -> None:
        table = _only_block("<table><tr><td></td></tr></table>")
        assert table.content[0].content[0].content == (Node(NodeType.PARAGRAPH),)

    def test_width_attribute(self) -> None:
        table = _only_block('<table><tr><td width="80">x</td></tr></table>')
        assert table.content[0].content[0].attrs["colwidth"] == [80]

    def test_render_roundtrip(self) -> None:
        html = "<table><thead><tr><th><p>H</p></th></tr></thead><tbody><tr><td><p>1</p></td></tr></tbody></table>"
        assert render_html(html_to_document(html)) == html


class TestBloks:
    """Components embedded as ``div[data-blok]``."""

    def test_blok(self) -> None:
        block = _only_block("<div data-blok='{\"component\": \"hero\"}' data-blok-id=\"b1\"></div>")
        assert block.type == NodeType.BLOK
        assert block.attrs["id"] == "b1"
        assert block.attrs["body"] == [{"component": "hero"}]

    def test_invalid_blok_unwrapped(self, caplog: pytest.LogCaptureFixture) -> None:
        block = _only_block('<div data-blok="nope"><p>x</p></div>')
        assert block.type == NodeType.PARAGRAPH
        assert "Invalid JSON" in caplog.text


class TestDetails:
    """Disclosure widgets keep their summary/content structure."""

    def test_details(self) -> None:
        block = _only_block("<details><summary>Click to expand</summary><p>Hidden content</p></details>")
        assert block == Node(
            NodeType.DETAILS,
            content=(
                Node(NodeType.DETAILS_SUMMARY, content=(Node(NodeType.TEXT, text="Click to expand"),)),
                Node(
                    NodeType.DETAILS_CONTENT,
                    content=(Node(NodeType.PARAGRAPH, content=(Node(NodeType.TEXT, text="Hidden content"),)),),
                ),
            ),
        )

    def test_content_wrapper_looked_through(self) -> None:
        block = _only_block('<details><summary>S</summary><div data-type="detailsContent"><p>B</p></div></details>')
        summary, content = block.content
        assert summary.content[0].text == "S"
        assert [b.type for b in content.content] == [NodeType.PARAGRAPH]
        assert content.content[0].content[0].text == "B"

    def test_missing_summary_and_content(self) -> None:
        block = _only_block("<details></details>")
        assert block.content == (
            Node(NodeType.DETAILS_SUMMARY),
            Node(NodeType.DETAILS_CONTENT, content=(Node(NodeType.PARAGRAPH),)),
        )

    def test_summary_marks(self) -> None:
        block = _only_block("<details><summary>a <b>b</b></summary>x</details>")
        assert _texts(block.content[0]) == [("a ", []), ("b", ["bold"])]

    def test_stray_summary_is_paragraph(self) -> None:
        block = _only_block("<summary>S</summary>")
        assert block == Node(NodeType.PARAGRAPH, content=(Node(NodeType.TEXT, text="S"),))

    def test_render_roundtrip(self) -> None:
        html = '<details><summary>S</summary><div data-type="detailsContent"><p>B</p></div></details>'
        assert render_html(html_to_document(html)) == html


# =============================================================================
# Inline content
# =============================================================================


class TestMarks:
    """Mark nesting and attributes."""

    @pytest.mark.parametrize(
        ("tag", "mark_type"),
        [
            ("strong", "bold"),
            ("b", "bold"),
            ("em", "italic"),
            ("i", "italic"),
            ("u", "underline"),
            ("s", "strike"),
            ("del", "strike"),
            ("code", "code"),
            ("mark", "highlight"),
            ("sup", "superscript"),
            ("sub", "subscript"),
        ],
    )
    def test_simple_marks(self, tag: str, mark_type: str) -> None:
        assert _texts(_only_block(f"<p><{tag}>x</{tag}></p>")) == [("x", [mark_type])]

    def test_inner_element_comes_first(self) -> None:
        (node,) = _only_block('<p><a href="/u"><strong>x</strong></a></p>').content
        assert [m.type for m in node.marks] == ["bold", "link"]

        (node,) = _only_block('<p><strong><a href="/u">x</a></strong></p>').content
        assert [m.type for m in node.marks] == ["link", "bold"]

    def test_mark_nesting_renders_back(self) -> None:
        html = "<p><em><strong>x</strong></em> <u>y</u></p>"
        assert render_html(html_to_document(html)) == html

    def test_link_attrs(self) -> None:
        (node,) = _only_block(
            '<p><a href="/about" target="_blank" data-linktype="story" data-anchor="team">x</a></p>'
        ).content
        assert node.marks[0] == Mark(
            "link",
            {"href": "/about", "linktype": "story", "target": "_blank", "uuid": None, "anchor": "team"},
        )

    def test_mailto_link(self) -> None:
        (node,) = _only_block('<p><a href="mailto:me@x.y">m</a></p>').content
        assert node.marks[0].attrs["linktype"] == "email"
        assert node.marks[0].attrs["href"] == "me@x.y"

    def test_highlight_color(self) -> None:
        (node,) = _only_block('<p><mark data-color="#ff0">x</mark></p>').content
        assert node.marks[0] == Mark("highlight", {"color": "#ff0"})

    def test_span_marks(self) -> None:
        (node,) = _only_block('<p><span id="here" style="color: red">x</span></p>').content
        assert [(m.type, dict(m.attrs)) for m in node.marks] == [
            ("textStyle", {"color": "red"}),
            ("anchor", {"id": "here"}),
        ]

    def test_plain_span_unwrapped(self) -> None:
        assert _texts(_only_block("<p>a<span>b</span><font>c</font></p>")) == [("abc", [])]

    def test_comments_and_scripts_dropped(self) -> None:
        assert _texts(_only_block("<p>a<!-- note --><script>x()</script>b</p>")) == [("ab", [])]


class TestInlineNodes:
    """br, img and emoji."""

    def test_hard_break(self) -> None:
        block = _only_block("<p>a <br> b</p>")
        assert [n.type for n in block.content] == ["text", "hard_break", "text"]
        assert (block.content[0].text, block.content[2].text) == ("a", "b")

    def test_image(self) -> None:
        (image,) = _only_block('<p><img src="/x.png" alt="X"></p>').content
        assert dict(image.attrs) == {"src": "/x.png", "alt": "X", "title": ""}

    def test_top_level_image_wrapped(self) -> None:
        block = _only_block('<img src="/x.png">')
        assert block.type == NodeType.PARAGRAPH
        assert block.content[0].type == NodeType.IMAGE

    def test_emoji(self) -> None:
        (emoji,) = _only_block('<p><span data-type="emoji" data-name="smile" data-emoji="😄">😄</span></p>').content
        assert dict(emoji.attrs) == {"name": "smile", "emoji": "😄", "fallbackImage": None}

    def test_emoji_fallback_image(self) -> None:
        html = '<p><span data-type="emoji" data-name="party"><img src="/p.png"></span></p>'
        (emoji,) = _only_block(html).content
        assert emoji.attrs["fallbackImage"] == "/p.png"
        assert emoji.attrs["emoji"] is None


class TestWhitespace:
    """Whitespace collapses inside inline content."""

    def test_collapse_and_trim(self) -> None:
        block = _only_block("<p>  Hello   <em>big</em>   world  </p>")
        assert _texts(block) == [("Hello ", []), ("big", ["italic"]), (" world", [])]

    def test_newlines_collapse(self) -> None:
        assert _texts(_only_block("<p>a\n\tb</p>")) == [("a b", [])]

    def test_space_inside_mark_boundary(self) -> None:
        block = _only_block("<p><b>a </b> b</p>")
        assert _texts(block) == [("a ", ["bold"]), ("b", [])]

    def test_finish_inline_helper(self) -> None:
        nodes = [Node(NodeType.TEXT, text=" a "), Node(NodeType.HARD_BREAK), Node(NodeType.TEXT, text=" b ")]
        assert finish_inline(nodes) == [
            Node(NodeType.TEXT, text="a"),
            Node(NodeType.HARD_BREAK),
            Node(NodeType.TEXT, text="b"),
        ]


# =============================================================================
# Configuration and reporting
# =============================================================================


class TestReporting:
    """Unsupported attributes are logged and dropped."""

    def test_unsupported_attribute(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            block = _only_block('<p onclick="evil()">a</p>')
        assert "onclick" not in block.attrs
        assert "<p>: Unsupported attribute 'onclick' dropped" in caplog.text

    def test_unsupported_style(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            block = _only_block('<p style="font-size: 20px; text-align: left">a</p>')
        assert dict(block.attrs) == {"textAlign": "left"}
        assert "font-size" in caplog.text

    def test_link_extra_attribute_reported(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            (node,) = _only_block('<p><a href="/" rel="nofollow">x</a></p>').content
        assert "custom" not in node.marks[0].attrs
        assert "'rel'" in caplog.text

    def test_diagnostics_collected(self) -> None:
        diagnostics: list[Diagnostic] = []
        html_to_document('<p onclick="evil()">a</p>', diagnostics=diagnostics)
        (diagnostic,) = diagnostics
        assert diagnostic.kind == DiagnosticKind.PARSE
        assert diagnostic.node_type == "paragraph"
        assert isinstance(diagnostic.error, ParseError)
        assert diagnostic.error.tag == "p"
        assert diagnostic.message == "<p>: Unsupported attribute 'onclick' dropped"

    def test_invalid_blok_diagnostic(self) -> None:
        diagnostics: list[Diagnostic] = []
        html_to_document('<div data-blok="nope"><p>x</p></div>', diagnostics=diagnostics)
        assert [(d.kind, d.node_type) for d in diagnostics] == [(DiagnosticKind.PARSE, "blok")]
        assert "Invalid JSON" in diagnostics[0].message

    def test_clean_input_reports_nothing(self) -> None:
        diagnostics: list[Diagnostic] = []
        html_to_document("<p>a <strong>b</strong></p>", diagnostics=diagnostics)
        assert diagnostics == []

    def test_rejected_markup_kept_as_text(self, monkeypatch: pytest.MonkeyPatch) -> None:
        def reject(markup: str, features: str) -> None:
            raise ParserRejectedMarkup("cannot tokenize")

        monkeypatch.setattr("tejido.parsers.html.BeautifulSoup", reject)
        diagnostics: list[Diagnostic] = []
        document = html_to_document("<p>a   b</p>", diagnostics=diagnostics)
        assert document == Node(
            NodeType.DOC,
            content=(Node(NodeType.PARAGRAPH, content=(Node(NodeType.TEXT, text="<p>a b</p>"),)),),
        )
        (diagnostic,) = diagnostics
        assert diagnostic.kind == DiagnosticKind.PARSE
        assert diagnostic.message.startswith("HTML tokenizer rejected the markup")


class TestConfiguration:
    """HtmlParseConfig options."""

    def test_allowed_styles(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            (node,) = _only_block(
                '<p><span class="big other">x</span></p>', allowed_styles=("big",)
            ).content
        assert node.marks == (Mark("styled", {"class": "big"}),)
        assert "other" in caplog.text

    def test_custom_attributes(self) -> None:
        (node,) = _only_block(
            '<p><a href="/" rel="nofollow" data-x="1">x</a></p>', allow_custom_attributes=True
        ).content
        assert node.marks[0].attrs["custom"] == {"rel": "nofollow", "data-x": "1"}

    def test_tag_map_adds_and_removes(self) -> None:
        config = HtmlParseConfig(tag_map={"ins": "underline", "strong": None})
        (node,) = HtmlParser(config).parse("<p><strong><ins>x</ins></strong></p>").content[0].content
        assert [m.type for m in node.marks] == ["underline"]

    def test_tag_map_unknown_target(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger=LOGGER):
            parser = HtmlParser(HtmlParseConfig(tag_map={"x-card": "card"}))
        assert parser.parse("<x-card>a</x-card>").content[0].content[0].text == "a"
        assert "x-card" in caplog.text

    def test_dict_options(self) -> None:
        document = html_to_document('<p><span class="big">x</span></p>', {"allowed_styles": ["big"]})
        assert document.content[0].content[0].marks[0].type == "styled"


class TestHelpers:
    """Module helpers."""

    def test_parse_style(self) -> None:
        assert parse_style("color: red; ; bogus; TEXT-ALIGN:center;") == {
            "color": "red",
            "text-align": "center",
        }

    def test_parse_style_empty(self) -> None:
        assert parse_style(None) == {}

    @pytest.mark.parametrize("html", ["<p>", "</p>", "<ul><li>", "<table><td>x", "<<>>", "<a href=>x"])
    def test_malformed_never_raises(self, html: str) -> None:
        assert is_valid_document(html_to_document(html))
