"""Markdown block parser.

Consumes the lexer's block tokens and builds a MarkdownToken tree. List
items and block quotes re-enter block parsing on their dedented content
through a sub-parser, so nested lists and embedded blocks work at any
depth up to MAX_NESTING_DEPTH. Beyond that depth content stays literal.

List continuation:
Consecutive items form one list only while the kind matches: a different
bullet character, a switch between bullet and ordered, or a switch
between ``.`` and ``)`` starts a new list.

Thread Safety:
Parser instances are single-use. Configuration is read from the active
MarkdownConfig context.

Usage:
    >>> tokens = Parser("# Hello *world*").parse()
    >>> tokens[0].type, tokens[0].attrs["level"]
    ('heading', 1)

"""

from __future__ import annotations

import json
import logging

from tejido.config import get_markdown_config
from tejido.diagnostics import Diagnostic
from tejido.errors import ParseError
from tejido.parsers.markdown.elements import MarkdownToken
from tejido.parsers.markdown.inline import InlineParsingMixin
from tejido.parsers.markdown.lexer import Lexer
from tejido.parsers.markdown.tokens import Token, TokenType

logger = logging.getLogger(__name__)

MAX_NESTING_DEPTH = 64


class Parser(InlineParsingMixin):
    """Build a MarkdownToken tree from Markdown source."""

    __slots__ = ("_source", "_config", "_depth", "_tokens", "_pos", "_line_offset", "diagnostics")

    def __init__(
        self,
        source: str,
        *,
        depth: int = 0,
        line_offset: int = 0,
        diagnostics: list[Diagnostic] | None = None,
    ) -> None:
        """Initialize parser.

        Args:
            source: Markdown source
            depth: Container nesting depth (sub-parsers only)
            line_offset: Lines preceding ``source`` in the top-level input
            diagnostics: List receiving PARSE diagnostics; sub-parsers share it
        """
        self._source = source
        self.diagnostics: list[Diagnostic] = [] if diagnostics is None else diagnostics
        self._config = get_markdown_config()
        self._depth = depth
        self._line_offset = line_offset
        self._tokens: list[Token] = []
        self._pos = 0

    def parse(self) -> tuple[MarkdownToken, ...]:
        """Parse the source into block-level MarkdownTokens."""
        self._tokens = list(Lexer(self._source, tables=self._config.tables).tokenize())
        self._pos = 0
        blocks: list[MarkdownToken] = []

        while self._current.type is not TokenType.EOF:
            block = self._parse_block()
            if block is not None:
                blocks.append(block)
        return tuple(blocks)

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def _parse_block(self) -> MarkdownToken | None:
        token = self._current
        match token.type:
            case TokenType.BLANK_LINE:
                self._advance()
                return None
            case TokenType.ATX_HEADING:
                self._advance()
                level = token.meta["level"]
                return MarkdownToken(
                    "heading",
                    {"level": level},
                    children=self._parse_inline(token.value),
                    markup="#" * level,
                    lineno=token.lineno,
                )
            case TokenType.PARAGRAPH_LINE | TokenType.SETEXT_UNDERLINE:
                return self._parse_paragraph()
            case TokenType.THEMATIC_BREAK:
                self._advance()
                return MarkdownToken("hr", markup=token.value, lineno=token.lineno)
            case TokenType.FENCED_CODE:
                self._advance()
                return MarkdownToken(
                    "fence",
                    {"language": token.meta["language"] or None},
                    content=token.value,
                    markup=token.meta["markup"],
                    info=token.meta["info"],
                    lineno=token.lineno,
                )
            case TokenType.INDENTED_CODE:
                self._advance()
                return MarkdownToken("code_block", content=token.value, lineno=token.lineno)
            case TokenType.BLOCK_QUOTE:
                self._advance()
                return MarkdownToken(
                    "blockquote",
                    children=self._parse_nested(token.value, token.lineno, "blockquote"),
                    markup=">",
                    lineno=token.lineno,
                )
            case TokenType.LIST_ITEM:
                return self._parse_list()
            case TokenType.BLOK:
                self._advance()
                return self._parse_blok(token)
            case TokenType.TABLE:
                self._advance()
                return self._parse_table(token)
            case _:
                self._advance()
                return None

    def _parse_paragraph(self) -> MarkdownToken:
        first = self._current
        lines: list[str] = []
        while self._current.type is TokenType.PARAGRAPH_LINE:
            lines.append(self._advance().value)

        if self._current.type is TokenType.SETEXT_UNDERLINE and lines:
            underline = self._advance()
            level = underline.meta["level"]
            return MarkdownToken(
                "heading",
                {"level": level},
                children=self._parse_inline("\n".join(lines).strip()),
                markup=underline.value,
                lineno=first.lineno,
            )
        if not lines:
            # Stray underline with no paragraph above it
            lines.append(self._advance().value)

        text = "\n".join(lines).rstrip()
        return MarkdownToken("paragraph", children=self._parse_inline(text), lineno=first.lineno)

    def _degrade(self, message: str, lineno: int, node_type: str) -> None:
        error = ParseError(message, lineno + self._line_offset)
        logger.debug("%s", error)
        self.diagnostics.append(error.as_diagnostic(node_type))

    def _parse_nested(self, source: str, lineno: int, node_type: str) -> tuple[MarkdownToken, ...]:
        """Re-enter block parsing for container content."""
        if self._depth >= MAX_NESTING_DEPTH:
            self._degrade(f"nesting deeper than {MAX_NESTING_DEPTH}, content kept literal", lineno, node_type)
            text = source.strip()
            if not text:
                return ()
            return (MarkdownToken("paragraph", children=(MarkdownToken("text", content=text),)),)
        return Parser(
            source,
            depth=self._depth + 1,
            line_offset=self._line_offset + lineno - 1,
            diagnostics=self.diagnostics,
        ).parse()

    def _parse_list(self) -> MarkdownToken:
        first = self._current
        ordered = first.meta["ordered"]
        marker = first.meta["marker"]
        items: list[MarkdownToken] = []

        while True:
            token = self._current
            if token.type is not TokenType.LIST_ITEM:
                break
            if token.meta["ordered"] != ordered or token.meta["marker"] != marker:
                break
            self._advance()
            items.append(
                MarkdownToken(
                    "list_item",
                    children=self._parse_nested(token.value, token.lineno, "list_item"),
                    markup=marker,
                    lineno=token.lineno,
                )
            )
            # Blank lines between items keep the list going
            lookahead = self._pos
            while self._tokens[lookahead].type is TokenType.BLANK_LINE:
                lookahead += 1
            following = self._tokens[lookahead]
            if (
                following.type is TokenType.LIST_ITEM
                and following.meta["ordered"] == ordered
                and following.meta["marker"] == marker
            ):
                self._pos = lookahead

        if ordered:
            return MarkdownToken(
                "ordered_list",
                {"order": first.meta["number"]},
                children=tuple(items),
                markup=marker,
                lineno=first.lineno,
            )
        return MarkdownToken("bullet_list", children=tuple(items), markup=marker, lineno=first.lineno)

    def _parse_blok(self, token: Token) -> MarkdownToken:
        """Decode a blok body; invalid JSON degrades to a literal paragraph."""
        body_text = token.value.strip()
        try:
            data = json.loads(body_text) if body_text else []
        except ValueError:
            self._degrade("invalid JSON in blok body, kept as text", token.lineno, "blok")
            return self._literal_paragraph(token)

        if isinstance(data, dict):
            body = [data]
        elif isinstance(data, list) and all(isinstance(item, dict) for item in data):
            body = data
        else:
            self._degrade("blok body must be an object or a list of objects, kept as text", token.lineno, "blok")
            return self._literal_paragraph(token)

        return MarkdownToken(
            "blok",
            {"id": token.meta["id"], "body": body},
            content=token.value,
            markup=":::",
            lineno=token.lineno,
        )

    def _literal_paragraph(self, token: Token) -> MarkdownToken:
        text = token.meta["raw"]
        return MarkdownToken(
            "paragraph",
            children=self._parse_inline(text),
            lineno=token.lineno,
        )

    def _parse_table(self, token: Token) -> MarkdownToken:
        aligns = token.meta["aligns"]

        def row(cells: tuple[str, ...], cell_type: str) -> MarkdownToken:
            return MarkdownToken(
                "tr",
                children=tuple(
                    MarkdownToken(
                        cell_type,
                        {"textAlign": align} if align else {},
                        children=self._parse_inline(cell),
                    )
                    for cell, align in zip(cells, aligns, strict=False)
                ),
            )

        rows = [row(token.meta["header"], "th")]
        rows.extend(row(cells, "td") for cells in token.meta["rows"])
        return MarkdownToken("table", children=tuple(rows), lineno=token.lineno)


__all__ = ["MAX_NESTING_DEPTH", "Parser"]
