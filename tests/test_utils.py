"""Tests for text and attribute helpers."""

import logging

import pytest

from tejido.utils import (
    attrs_to_string,
    attrs_to_style,
    clean_attrs,
    collapse_whitespace,
    escape_html,
    get_logger,
    join_styles,
)


class TestEscapeHtml:
    """escape_html is safe in content and attributes."""

    def test_specials(self) -> None:
        assert escape_html("<b>Tom & 'Jerry' \"x\"</b>") == (
            "&lt;b&gt;Tom &amp; &#x27;Jerry&#x27; &quot;x&quot;&lt;/b&gt;"
        )

    def test_empty(self) -> None:
        assert escape_html("") == ""

    def test_plain_unchanged(self) -> None:
        assert escape_html("héllo wörld") == "héllo wörld"


class TestAttributes:
    """Attribute serialization."""

    def test_clean_attrs(self) -> None:
        assert clean_attrs({"a": None, "b": "", "c": 0, "d": "x"}) == {"c": 0, "d": "x"}

    def test_attrs_to_style(self) -> None:
        assert attrs_to_style({"color": "red", "x": None, "font-size": "2em"}) == "color: red; font-size: 2em"

    def test_attrs_to_string(self) -> None:
        result = attrs_to_string(
            {"href": "/a?b=1&c=2", "hidden": True, "skip": False, "none": None, "style": {"color": "red"}}
        )
        assert result == 'href="/a?b=1&amp;c=2" hidden style="color: red"'

    def test_attrs_to_string_empty_style_mapping(self) -> None:
        assert attrs_to_string({"style": {}}) == ""

    @pytest.mark.parametrize(
        ("styles", "expected"),
        [
            (("color: red", None, "width: 1px;"), "color: red; width: 1px;"),
            ((None, ""), None),
        ],
    )
    def test_join_styles(self, styles: tuple[str | None, ...], expected: str | None) -> None:
        assert join_styles(*styles) == expected

    def test_collapse_whitespace(self) -> None:
        assert collapse_whitespace(" a \n\t b  ") == " a b "


class TestLogger:
    """get_logger namespaces under tejido."""

    def test_prefix_added(self) -> None:
        assert get_logger("mymodule").name == "tejido.mymodule"

    def test_prefix_not_duplicated(self) -> None:
        assert get_logger("tejido.parsers").name == "tejido.parsers"
        assert get_logger("tejido") is logging.getLogger("tejido")
