"""Tests for immutable configuration objects."""

from __future__ import annotations

import dataclasses

import pytest

from tejido.config import (
    HtmlParseConfig,
    MarkdownConfig,
    RenderOptions,
    get_markdown_config,
    markdown_config_context,
    reset_markdown_config,
    set_markdown_config,
)


class TestRenderOptions:
    """RenderOptions defaults and construction."""

    def test_defaults(self) -> None:
        options = RenderOptions()
        assert options.resolvers == {}
        assert options.render_fn is None
        assert options.keyed_resolvers is False
        assert options.on_error is None

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            RenderOptions().keyed_resolvers = True  # type: ignore[misc]

    def test_from_dict_ignores_unknown(self) -> None:
        options = RenderOptions.from_dict({"keyed_resolvers": True, "unknown": 1})
        assert options.keyed_resolvers is True


class TestMarkdownConfig:
    """MarkdownConfig and its ContextVar."""

    def test_defaults(self) -> None:
        config = MarkdownConfig()
        assert config.tables is True
        assert config.breaks is False

    def test_from_dict(self) -> None:
        config = MarkdownConfig.from_dict({"breaks": True, "tables": False, "bogus": 3})
        assert config == MarkdownConfig(breaks=True, tables=False)

    def test_context_restores_previous(self) -> None:
        outer = get_markdown_config()
        with markdown_config_context(MarkdownConfig(emoji=False)):
            assert get_markdown_config().emoji is False
        assert get_markdown_config() is outer

    def test_context_restores_on_error(self) -> None:
        outer = get_markdown_config()
        with pytest.raises(RuntimeError), markdown_config_context(MarkdownConfig(breaks=True)):
            raise RuntimeError("boom")
        assert get_markdown_config() is outer

    def test_set_and_reset(self) -> None:
        set_markdown_config(MarkdownConfig(strikethrough=False))
        assert get_markdown_config().strikethrough is False
        reset_markdown_config()
        assert get_markdown_config() == MarkdownConfig()


class TestHtmlParseConfig:
    """HtmlParseConfig construction."""

    def test_from_dict_coerces_styles(self) -> None:
        config = HtmlParseConfig.from_dict({"allowed_styles": ["big", "small"]})
        assert config.allowed_styles == ("big", "small")
        assert config.allow_custom_attributes is False

    def test_hashable_without_mappings(self) -> None:
        assert HtmlParseConfig(allowed_styles=("a",)).allowed_styles == ("a",)
