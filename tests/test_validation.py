"""Tests for structural validation and attribute normalization."""

from __future__ import annotations

from tejido.diagnostics import DiagnosticKind
from tejido.nodes import doc, paragraph, text
from tejido.validation import is_valid_document, normalize_attrs, validate_document


class TestIsValidDocument:
    """Root and child shape checks."""

    def test_empty_doc(self) -> None:
        assert is_valid_document({"type": "doc", "content": []})

    def test_node_doc(self) -> None:
        assert is_valid_document(doc(paragraph(text("x"))))

    def test_wrong_root(self) -> None:
        assert not is_valid_document({"type": "paragraph"})
        assert not is_valid_document(paragraph())

    def test_not_a_mapping(self) -> None:
        assert not is_valid_document("doc")
        assert not is_valid_document(None)

    def test_children_alias(self) -> None:
        assert is_valid_document({"type": "doc", "children": [{"type": "paragraph"}]})

    def test_unknown_child_type_is_structurally_valid(self) -> None:
        assert is_valid_document({"type": "doc", "content": [{"type": "video"}]})

    def test_text_requires_string(self) -> None:
        document = {"type": "doc", "content": [{"type": "text", "text": 3}]}
        assert not is_valid_document(document)

    def test_content_must_be_list(self) -> None:
        assert not is_valid_document({"type": "doc", "content": "nope"})


class TestValidateDocument:
    """Diagnostics carry JSON-pointer-like paths."""

    def test_mark_path(self) -> None:
        document = {
            "type": "doc",
            "content": [
                {
                    "type": "paragraph",
                    "content": [{"type": "text", "text": "x", "marks": [{"type": "bold"}, {}]}],
                }
            ],
        }
        problems = validate_document(document)
        assert len(problems) == 1
        assert problems[0].kind == DiagnosticKind.STRUCTURAL
        assert problems[0].path == "/content/0/content/0/marks/1"

    def test_root_problem_has_empty_path(self) -> None:
        problems = validate_document({"type": "heading"})
        assert [p.path for p in problems] == [""]

    def test_child_without_type(self) -> None:
        problems = validate_document({"type": "doc", "content": [{"text": "x"}]})
        assert problems[0].path == "/content/0"


class TestNormalizeAttrs:
    """Type-specific attribute coercion never raises."""

    def test_heading_level_clamped(self) -> None:
        assert normalize_attrs("heading", {"level": 9}) == {"level": 6}
        assert normalize_attrs("heading", {"level": 0}) == {"level": 1}
        assert normalize_attrs("heading", {"level": "big"}) == {"level": 1}
        assert normalize_attrs("heading", None) == {"level": 1}

    def test_ordered_list_order(self) -> None:
        assert normalize_attrs("ordered_list", {"order": "4"}) == {"order": 4}
        assert normalize_attrs("ordered_list", {"order": -2}) == {"order": 1}

    def test_ordered_list_may_start_at_zero(self) -> None:
        assert normalize_attrs("ordered_list", {"order": 0}) == {"order": 0}
        assert normalize_attrs("ordered_list", {"order": "0"}) == {"order": 0}

    def test_code_block_language(self) -> None:
        assert normalize_attrs("code_block", {"language": ""}) == {"language": None}
        assert normalize_attrs("code_block", {"language": 3}) == {"language": "3"}

    def test_link_type(self) -> None:
        assert normalize_attrs("link", {"linktype": "story"})["linktype"] == "story"
        assert normalize_attrs("link", {"linktype": "ftp"})["linktype"] == "url"
        assert normalize_attrs("link", {})["linktype"] == "url"

    def test_blok_body(self) -> None:
        assert normalize_attrs("blok", {"body": {"component": "a"}}) == {"body": [{"component": "a"}]}
        assert normalize_attrs("blok", {"body": "x"}) == {"body": []}

    def test_other_types_untouched(self) -> None:
        assert normalize_attrs("paragraph", {"class": "lead"}) == {"class": "lead"}
