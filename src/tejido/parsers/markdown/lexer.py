"""Line-oriented block lexer for Markdown.

Scans the source one line at a time and classifies each line as the start
of a block construct. Constructs that span several lines (fences, list
items, block quotes, tables, bloks, indented code) are collected with
lookahead into a single token.

Thread Safety:
Lexer instances are single-use. Create one per source string.

Usage:
    >>> [t.type.name for t in Lexer("# Hi\\n\\ntext").tokenize()]
    ['ATX_HEADING', 'BLANK_LINE', 'PARAGRAPH_LINE', 'EOF']

"""

from __future__ import annotations

from collections.abc import Iterator

from tejido.parsers.markdown.classifiers import (
    BlokClassifierMixin,
    FenceClassifierMixin,
    HeadingClassifierMixin,
    ListClassifierMixin,
    QuoteClassifierMixin,
    TableClassifierMixin,
    ThematicClassifierMixin,
    _BLOK_OPEN_RE,
    indent_of,
    parse_list_marker,
    strip_columns,
)
from tejido.parsers.markdown.charsets import FENCE_CHARS
from tejido.parsers.markdown.tokens import Token, TokenType


def expand_indent(line: str) -> str:
    """Expand tabs in leading whitespace to 4-column stops."""
    end = 0
    while end < len(line) and line[end] in " \t":
        end += 1
    if "\t" not in line[:end]:
        return line
    return line[:end].expandtabs(4) + line[end:]


class Lexer(
    HeadingClassifierMixin,
    ThematicClassifierMixin,
    FenceClassifierMixin,
    QuoteClassifierMixin,
    ListClassifierMixin,
    BlokClassifierMixin,
    TableClassifierMixin,
):
    """Block lexer producing one token per block construct."""

    __slots__ = ("_lines", "_pos", "_in_paragraph", "_tables")

    def __init__(self, source: str, *, tables: bool = True) -> None:
        """Initialize lexer with source text.

        Args:
            source: Markdown source
            tables: Recognize GFM pipe tables
        """
        source = source.replace("\r\n", "\n").replace("\r", "\n").replace("\x00", "�")
        self._lines = source.split("\n")
        if self._lines and self._lines[-1] == "":
            self._lines.pop()
        self._pos = 0
        self._in_paragraph = False
        self._tables = tables

    def tokenize(self) -> Iterator[Token]:
        """Yield block tokens in source order, ending with EOF."""
        while self._pos < len(self._lines):
            token = self._next_token()
            self._in_paragraph = token.type is TokenType.PARAGRAPH_LINE
            yield token
        yield Token(TokenType.EOF, "", len(self._lines) + 1)

    def _next_token(self) -> Token:
        line = self._line_at(self._pos)
        lineno = self._pos + 1

        if not line.strip():
            self._pos += 1
            return Token(TokenType.BLANK_LINE, "", lineno)

        indent = indent_of(line)
        content = line[indent:]

        if indent >= 4:
            if self._in_paragraph:
                self._pos += 1
                return Token(TokenType.PARAGRAPH_LINE, content, lineno)
            return self._scan_indented_code(lineno)

        token = (
            self._try_classify_setext_underline(content, lineno)
            or self._try_classify_fence(content, indent, lineno)
            or self._try_classify_atx_heading(content, lineno)
            or self._try_classify_thematic_break(content, lineno)
            or self._try_classify_blok(content, lineno)
            or self._try_classify_block_quote(content, lineno)
            or self._try_classify_list_item(content, indent, lineno)
            or self._try_classify_table(content, lineno)
        )
        if token is not None:
            return token

        self._pos += 1
        return Token(TokenType.PARAGRAPH_LINE, content, lineno)

    def _scan_indented_code(self, lineno: int) -> Token:
        lines: list[str] = []
        index = self._pos
        while index < len(self._lines):
            line = self._line_at(index)
            if line.strip() and indent_of(line) < 4:
                break
            lines.append(strip_columns(line, 4))
            index += 1

        while lines and not lines[-1].strip():
            lines.pop()
            index -= 1
        # Trailing blank lines stay in the stream as BLANK_LINE tokens
        self._pos = index
        return Token(TokenType.INDENTED_CODE, "\n".join(lines), lineno)

    # =========================================================================
    # Host methods used by the classifier mixins
    # =========================================================================

    def _line_at(self, index: int) -> str:
        return expand_indent(self._lines[index])

    def _starts_block(self, content: str) -> bool:
        """Whether ``content`` would interrupt a paragraph."""
        if not content:
            return False
        first = content[0]
        if first == ">":
            return True
        if first == "#":
            level = len(content) - len(content.lstrip("#"))
            return level <= 6 and (len(content) == level or content[level] in " \t")
        if first in FENCE_CHARS and content.startswith(first * 3):
            return True
        if _BLOK_OPEN_RE.match(content.rstrip()):
            return True
        if first in "-*_" and _is_thematic(content):
            return True
        marker = parse_list_marker(content)
        if marker is not None:
            ordered, _, number, width = marker
            has_content = bool(content[width:].strip())
            return has_content and (not ordered or number == 1)
        return False


def _is_thematic(content: str) -> bool:
    char = content[0]
    stripped = content.rstrip()
    return stripped.count(char) >= 3 and not stripped.replace(char, "").strip(" \t")


__all__ = ["Lexer", "expand_indent"]
