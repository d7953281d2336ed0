"""Tests for tejido.serialization: JSON round-trip of canonical documents."""

from __future__ import annotations

import json

import pytest

from tejido.diagnostics import Diagnostic
from tejido.errors import DocumentError
from tejido.nodes import Node, doc, heading, mark, paragraph, text
from tejido.serialization import from_dict, from_json, to_dict, to_json


def _sample() -> Node:
    return doc(
        heading(2, text("Title")),
        paragraph(
            text("plain "),
            text("bold", mark("bold")),
            text(" link", mark("link", href="/about", linktype="story", anchor="team")),
        ),
        Node("bullet_list", content=(Node("list_item", content=(paragraph(text("item")),)),)),
    )


class TestToDict:
    """Storage shape produced by to_dict."""

    def test_doc_always_has_content(self) -> None:
        assert to_dict(doc()) == {"type": "doc", "content": []}

    def test_empty_keys_omitted(self) -> None:
        assert to_dict(Node("horizontal_rule")) == {"type": "horizontal_rule"}

    def test_text_with_marks(self) -> None:
        assert to_dict(text("x", mark("bold"))) == {
            "type": "text",
            "text": "x",
            "marks": [{"type": "bold"}],
        }


class TestFromDict:
    """Decoding JSON-shaped documents."""

    def test_children_alias(self) -> None:
        node = from_dict({"type": "doc", "children": [{"type": "paragraph"}]})
        assert node.content[0].type == "paragraph"

    def test_attrs_normalized(self) -> None:
        node = from_dict({"type": "heading", "attrs": {"level": 12}})
        assert node.attrs["level"] == 6

    def test_malformed_children_dropped(self) -> None:
        diagnostics: list[Diagnostic] = []
        node = from_dict(
            {"type": "doc", "content": [{"type": "paragraph"}, 42, {"no": "type"}]},
            diagnostics=diagnostics,
        )
        assert [c.type for c in node.content] == ["paragraph"]
        assert {d.path for d in diagnostics} == {"/content/1", "/content/2"}

    def test_strict_raises(self) -> None:
        with pytest.raises(DocumentError) as exc_info:
            from_dict({"type": "doc", "content": [42]}, strict=True)
        assert exc_info.value.path == "/content/0"

    def test_node_passes_through(self) -> None:
        node = _sample()
        assert from_dict(node) is node

    def test_unknown_type_kept(self) -> None:
        node = from_dict({"type": "doc", "content": [{"type": "video", "attrs": {"src": "v"}}]})
        assert node.content[0].type == "video"
        assert node.content[0].attrs["src"] == "v"


class TestJsonRoundTrip:
    """to_json / from_json."""

    def test_round_trip(self) -> None:
        original = _sample()
        assert from_json(to_json(original)) == original

    def test_deterministic(self) -> None:
        assert to_json(_sample()) == to_json(_sample())

    def test_sorted_keys(self) -> None:
        data = to_json(text("x", mark("bold")))
        assert list(json.loads(data)) == ["marks", "text", "type"]

    def test_unicode_kept(self) -> None:
        assert "😄" in to_json(doc(paragraph(text("😄"))))

    def test_indent(self) -> None:
        assert "\n" in to_json(doc(), indent=2)

    def test_invalid_json(self) -> None:
        with pytest.raises(json.JSONDecodeError):
            from_json("{")

    def test_strict_rejects_non_doc(self) -> None:
        with pytest.raises(DocumentError):
            from_json('{"type": "paragraph"}', strict=True)
