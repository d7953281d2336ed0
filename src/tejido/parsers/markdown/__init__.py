"""Markdown to canonical document parser.

Two phases: the block lexer/parser builds a MarkdownToken tree, then token
resolvers turn it into canonical nodes. Callers customize the second phase
through ``MarkdownConfig.resolvers``.

Example:
    >>> doc = markdown_to_document("# Hello **World**")
    >>> doc.content[0].type, doc.content[0].attrs["level"]
    ('heading', 1)

"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tejido.config import MarkdownConfig, get_markdown_config, markdown_config_context
from tejido.diagnostics import Diagnostic
from tejido.nodes import Node, NodeType
from tejido.parsers.markdown.elements import MarkdownToken
from tejido.parsers.markdown.lexer import Lexer
from tejido.parsers.markdown.parser import MAX_NESTING_DEPTH, Parser
from tejido.parsers.markdown.resolvers import (
    DEFAULT_TOKEN_RESOLVERS,
    TokenResolver,
    resolve_tokens,
)
from tejido.parsers.markdown.tokens import Token, TokenType
from tejido.utils.logger import get_logger

logger = get_logger(__name__)


def markdown_to_document(
    text: str,
    options: MarkdownConfig | Mapping[str, Any] | None = None,
    *,
    diagnostics: list[Diagnostic] | None = None,
) -> Node:
    """Parse Markdown into a canonical ``doc`` node.

    Args:
        text: Markdown source
        options: MarkdownConfig, a dict of its fields, or None for the
            active configuration
        diagnostics: Optional list that receives PARSE diagnostics for
            input kept literal (invalid blok bodies, excessive nesting)

    Returns:
        Document root node. Never raises for malformed Markdown.
    """
    if options is None:
        config = get_markdown_config()
    elif isinstance(options, MarkdownConfig):
        config = options
    else:
        config = MarkdownConfig.from_dict(options)

    with markdown_config_context(config):
        tokens = Parser(text, diagnostics=diagnostics).parse()

    resolvers = {**DEFAULT_TOKEN_RESOLVERS, **config.resolvers}
    blocks = resolve_tokens(tokens, resolvers)
    logger.debug("Parsed %d Markdown blocks into %d nodes", len(tokens), len(blocks))
    return Node(NodeType.DOC, content=tuple(blocks))


__all__ = [
    "DEFAULT_TOKEN_RESOLVERS",
    "MAX_NESTING_DEPTH",
    "Lexer",
    "MarkdownToken",
    "Parser",
    "Token",
    "TokenResolver",
    "TokenType",
    "markdown_to_document",
    "resolve_tokens",
]
