"""Configuration objects for rendering and parsing.

All configuration is immutable. Render options travel with each renderer
instance. Markdown parse configuration travels through a ContextVar so the
lexer, block parser and inline parser of one call read the same settings
without threading them through every constructor.

Usage:
    options = RenderOptions(keyed_resolvers=True)
    html = render_html(document, options)

    with markdown_config_context(MarkdownConfig(breaks=True)):
        document = Parser(source).parse()

"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, fields
from typing import Any

from tejido.diagnostics import ErrorCallback


def _filter_fields(cls: type, config_dict: Mapping[str, Any]) -> dict[str, Any]:
    valid_fields = {f.name for f in fields(cls)}
    return {k: v for k, v in config_dict.items() if k in valid_fields}


# =============================================================================
# Rendering
# =============================================================================


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Immutable render configuration.

    Attributes:
        resolvers: Overrides keyed by node or mark type
        render_fn: ``(tag, attrs, children) -> T``; an empty tag means a
            fragment of ``children``
        text_fn: ``(text, attrs) -> T``
        keyed_resolvers: Add a stable per-tag ``key`` attribute
        optimize_image: Hook ``(src, filters) -> src`` for image nodes
        image_filters: Passed to ``optimize_image`` unchanged
        component_resolver: ``(blok, id) -> T`` renders embedded components
        on_error: Called with every diagnostic raised during a render
    """

    resolvers: Mapping[str, Callable[..., Any]] = field(default_factory=dict)
    render_fn: Callable[..., Any] | None = None
    text_fn: Callable[..., Any] | None = None
    keyed_resolvers: bool = False
    optimize_image: Callable[[str, Any], str] | None = None
    image_filters: Any = None
    component_resolver: Callable[[Mapping[str, Any], str | None], Any] | None = None
    on_error: ErrorCallback | None = None

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> RenderOptions:
        """Create RenderOptions from a dictionary.

        Unknown keys are silently ignored.

        Example:
            >>> RenderOptions.from_dict({"keyed_resolvers": True, "x": 1}).keyed_resolvers
            True
        """
        return cls(**_filter_fields(cls, config_dict))


DEFAULT_RENDER_OPTIONS = RenderOptions()


# =============================================================================
# Markdown parsing
# =============================================================================


@dataclass(frozen=True, slots=True)
class MarkdownConfig:
    """Immutable Markdown parse configuration.

    Attributes:
        resolvers: Token-type overrides ``(token, children) -> Node | list | None``
        breaks: Treat newlines inside paragraphs as hard breaks
        tables: Enable GFM pipe tables
        strikethrough: Enable ``~~strike~~``
        emoji: Enable ``:shortcode:`` emoji
    """

    resolvers: Mapping[str, Callable[..., Any]] = field(default_factory=dict)
    breaks: bool = False
    tables: bool = True
    strikethrough: bool = True
    emoji: bool = True

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> MarkdownConfig:
        """Create MarkdownConfig from a dictionary, ignoring unknown keys."""
        return cls(**_filter_fields(cls, config_dict))


_DEFAULT_MARKDOWN_CONFIG: MarkdownConfig = MarkdownConfig()

_markdown_config: ContextVar[MarkdownConfig] = ContextVar(
    "markdown_config",
    default=_DEFAULT_MARKDOWN_CONFIG,
)


def get_markdown_config() -> MarkdownConfig:
    """Get the Markdown configuration active in this context."""
    return _markdown_config.get()


def set_markdown_config(config: MarkdownConfig) -> None:
    _markdown_config.set(config)


def reset_markdown_config() -> None:
    _markdown_config.set(_DEFAULT_MARKDOWN_CONFIG)


@contextmanager
def markdown_config_context(config: MarkdownConfig) -> Iterator[None]:
    """Temporarily activate ``config``.

    Restores the previous configuration even if an exception is raised.
    """
    previous = _markdown_config.get()
    _markdown_config.set(config)
    try:
        yield
    finally:
        _markdown_config.set(previous)


# =============================================================================
# HTML parsing
# =============================================================================


@dataclass(frozen=True, slots=True)
class HtmlParseConfig:
    """Immutable HTML parse configuration.

    Attributes:
        allowed_styles: Classes accepted for the ``styled`` mark on spans
        allow_custom_attributes: Keep unknown ``<a>`` attributes in
            ``link.attrs["custom"]`` instead of reporting them
        tag_map: Extra or replacement tag mappings; values are node or mark
            type names, or None to unwrap the tag
    """

    allowed_styles: tuple[str, ...] = ()
    allow_custom_attributes: bool = False
    tag_map: Mapping[str, str | None] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> HtmlParseConfig:
        """Create HtmlParseConfig from a dictionary, ignoring unknown keys."""
        filtered = _filter_fields(cls, config_dict)
        if "allowed_styles" in filtered:
            filtered["allowed_styles"] = tuple(filtered["allowed_styles"])
        return cls(**filtered)


DEFAULT_HTML_PARSE_CONFIG = HtmlParseConfig()


__all__ = [
    "DEFAULT_HTML_PARSE_CONFIG",
    "DEFAULT_RENDER_OPTIONS",
    "HtmlParseConfig",
    "MarkdownConfig",
    "RenderOptions",
    "get_markdown_config",
    "markdown_config_context",
    "reset_markdown_config",
    "set_markdown_config",
]
