"""Tests for the canonical node model and builders."""

from __future__ import annotations

import pytest

from tejido.nodes import (
    MARK_TYPES,
    NODE_TYPES,
    Mark,
    MarkType,
    Node,
    NodeType,
    doc,
    heading,
    mark,
    merge_text_nodes,
    paragraph,
    text,
)


class TestVocabulary:
    """Closed vocabularies for node and mark types."""

    def test_node_types_are_strings(self) -> None:
        assert NodeType.PARAGRAPH == "paragraph"
        assert NodeType.TABLE_HEADER == "tableHeader"
        assert "doc" in NODE_TYPES

    def test_mark_types(self) -> None:
        assert MarkType.BOLD == "bold"
        assert MarkType.TEXT_STYLE == "textStyle"
        assert "link" in MARK_TYPES

    def test_unknown_type_is_kept(self) -> None:
        node = Node("video")
        assert node.type == "video"
        assert node.is_known is False


class TestNode:
    """Node and Mark dataclass behavior."""

    def test_frozen(self) -> None:
        node = text("hi")
        with pytest.raises(AttributeError):
            node.text = "bye"  # type: ignore[misc]

    def test_attrs_are_read_only(self) -> None:
        node = heading(2, text("x"))
        with pytest.raises(TypeError):
            node.attrs["level"] = 3  # type: ignore[index]

    def test_lists_become_tuples(self) -> None:
        node = Node("paragraph", content=[text("a")], marks=[])
        assert isinstance(node.content, tuple)
        assert isinstance(node.marks, tuple)

    def test_children_alias(self) -> None:
        node = paragraph(text("a"), text("b"))
        assert node.children == node.content

    def test_enum_type_normalized_to_str(self) -> None:
        node = Node(NodeType.PARAGRAPH)
        assert type(node.type) is str

    def test_with_marks_appends_outermost(self) -> None:
        node = text("x", mark("bold")).with_marks(mark("link", href="/"))
        assert [m.type for m in node.marks] == ["bold", "link"]

    def test_equality(self) -> None:
        assert text("x", mark("bold")) == text("x", mark("bold"))
        assert text("x", mark("bold")) != text("x", mark("italic"))


class TestBuilders:
    """Module-level builder helpers."""

    def test_doc(self) -> None:
        root = doc(paragraph(text("a")))
        assert root.type == "doc"
        assert root.content[0].content[0].text == "a"

    def test_heading(self) -> None:
        node = heading(3, text("T"), textAlign="center")
        assert dict(node.attrs) == {"level": 3, "textAlign": "center"}

    def test_mark(self) -> None:
        m = mark("link", href="/about")
        assert isinstance(m, Mark)
        assert m.attrs["href"] == "/about"
        assert m.is_known


class TestMergeTextNodes:
    """Adjacent text leaves with equal marks merge."""

    def test_merges_equal_marks(self) -> None:
        merged = merge_text_nodes([text("a "), text("b")])
        assert merged == [text("a b")]

    def test_keeps_different_marks(self) -> None:
        nodes = [text("a"), text("b", mark("bold"))]
        assert merge_text_nodes(nodes) == nodes

    def test_drops_empty_text(self) -> None:
        assert merge_text_nodes([text(""), Node("hard_break")]) == [Node("hard_break")]
