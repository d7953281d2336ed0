"""
Tejido: rich-text document engine

A canonical tree model for rich text, a resolver-driven renderer generic
over its output type, and parsers that turn Markdown and HTML into the
same model.

Quick Start:
    >>> from tejido import markdown_to_document, render_html
    >>> doc = markdown_to_document("# Hello **World**")
    >>> render_html(doc)
    '<h1>Hello <strong>World</strong></h1>'

Custom Resolvers:
    >>> from tejido import render
    >>> def paragraph(node, ctx):
    ...     return ctx.render("div", {"class": "p"}, ctx.render_children(node))
    >>> render(markdown_to_document("Hi"), resolvers={"paragraph": paragraph})
    ['<div class="p">Hi</div>']

Other Output Types:
    Pass ``render_fn(tag, attrs, children)`` and ``text_fn(text, attrs)`` to
    build any tree (virtual DOM nodes, dicts, ...) instead of HTML strings.

Installation:
    pip install tejido
"""

from tejido.config import (
    DEFAULT_HTML_PARSE_CONFIG,
    DEFAULT_RENDER_OPTIONS,
    HtmlParseConfig,
    MarkdownConfig,
    RenderOptions,
    get_markdown_config,
    markdown_config_context,
    reset_markdown_config,
    set_markdown_config,
)
from tejido.diagnostics import Diagnostic, DiagnosticKind, ErrorCallback
from tejido.errors import DocumentError, ParseError, ResolverError, TejidoError
from tejido.nodes import (
    MARK_TYPES,
    NODE_TYPES,
    LinkType,
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
from tejido.parsers.html import HtmlParser, html_to_document
from tejido.parsers.markdown import DEFAULT_TOKEN_RESOLVERS, markdown_to_document
from tejido.registry import (
    EMPTY_RESOLVER,
    Resolver,
    ResolverRegistry,
    ResolverRegistryBuilder,
    create_registry,
    resolve,
)
from tejido.renderers import (
    DEFAULT_RESOLVERS,
    HtmlRenderer,
    RenderContext,
    RenderedMark,
    RenderResult,
    TreeRenderer,
    default_render_fn,
    default_text_fn,
    render,
    render_html,
    render_with_diagnostics,
)
from tejido.segment import BlokSegment, HtmlSegment, Segment, render_html_async, segment_document
from tejido.serialization import from_dict, from_json, to_dict, to_json
from tejido.validation import is_valid_document, normalize_attrs, validate_document

__version__ = "0.1.0"

__all__ = [  # noqa: RUF022 (grouped by category)
    # Version
    "__version__",
    # Core API
    "render",
    "render_html",
    "render_with_diagnostics",
    "render_html_async",
    "segment_document",
    "markdown_to_document",
    "html_to_document",
    # Model
    "Node",
    "Mark",
    "NodeType",
    "MarkType",
    "LinkType",
    "NODE_TYPES",
    "MARK_TYPES",
    # Builders
    "doc",
    "heading",
    "mark",
    "paragraph",
    "text",
    "merge_text_nodes",
    # Validation and serialization
    "is_valid_document",
    "validate_document",
    "normalize_attrs",
    "from_dict",
    "from_json",
    "to_dict",
    "to_json",
    # Registry
    "EMPTY_RESOLVER",
    "Resolver",
    "ResolverRegistry",
    "ResolverRegistryBuilder",
    "create_registry",
    "resolve",
    # Rendering
    "DEFAULT_RESOLVERS",
    "HtmlRenderer",
    "RenderContext",
    "RenderResult",
    "RenderedMark",
    "TreeRenderer",
    "default_render_fn",
    "default_text_fn",
    # Segments
    "BlokSegment",
    "HtmlSegment",
    "Segment",
    # Parsers
    "DEFAULT_TOKEN_RESOLVERS",
    "HtmlParser",
    # Configuration
    "DEFAULT_HTML_PARSE_CONFIG",
    "DEFAULT_RENDER_OPTIONS",
    "HtmlParseConfig",
    "MarkdownConfig",
    "RenderOptions",
    "get_markdown_config",
    "markdown_config_context",
    "reset_markdown_config",
    "set_markdown_config",
    # Errors and diagnostics
    "Diagnostic",
    "DiagnosticKind",
    "ErrorCallback",
    "DocumentError",
    "ParseError",
    "ResolverError",
    "TejidoError",
]
