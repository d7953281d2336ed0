"""Block classifier mixins for the Markdown lexer.

Each ``_try_classify_*`` method looks at the current line and either
returns a Token (advancing the lexer past every line the construct spans)
or returns None without consuming anything.

Required Host Attributes:
    - _lines: list[str]
    - _pos: int (index of the current line)
    - _in_paragraph: bool (previous token was a paragraph line)
    - _tables: bool

Required Host Methods:
    - _line_at(index) -> str (line with leading tabs expanded)
    - _starts_block(content) -> bool
"""

from __future__ import annotations

import re

from tejido.parsers.markdown.charsets import (
    BULLET_MARKERS,
    DIGITS,
    FENCE_CHARS,
    ORDERED_DELIMITERS,
    THEMATIC_BREAK_CHARS,
)
from tejido.parsers.markdown.tokens import Token, TokenType

_BLOK_OPEN_RE = re.compile(r"^:::\s*\{blok\}\s*(\S*)\s*$")
_TABLE_DELIMITER_CELL_RE = re.compile(r"^\s*:?-+:?\s*$")


def indent_of(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def strip_columns(line: str, columns: int) -> str:
    """Remove up to ``columns`` leading spaces."""
    strip = min(columns, indent_of(line))
    return line[strip:]


class _LexerHost:
    """Host interface shared by the classifier mixins. Implemented by Lexer."""

    _lines: list[str]
    _pos: int
    _in_paragraph: bool
    _tables: bool

    def _line_at(self, index: int) -> str:
        raise NotImplementedError

    def _starts_block(self, content: str) -> bool:
        raise NotImplementedError

    def _ends_lazy_continuation(self, content: str) -> bool:
        """Whether ``content`` closes a container instead of continuing it.

        Any list marker starts a new item here, even one that could not
        interrupt a top-level paragraph.
        """
        return self._starts_block(content) or parse_list_marker(content) is not None


class HeadingClassifierMixin(_LexerHost):
    """ATX headings and setext underlines."""

    def _try_classify_atx_heading(self, content: str, lineno: int) -> Token | None:
        """Classify ``# Heading`` lines.

        One to six ``#`` followed by space, tab or end of line. Seven or more
        is not a heading. A closing ``#`` sequence preceded by a space is
        removed.
        """
        level = 0
        pos = 0
        while pos < len(content) and content[pos] == "#" and level < 6:
            level += 1
            pos += 1

        if level == 0:
            return None
        if pos < len(content) and content[pos] not in " \t":
            return None

        heading = content[pos:].strip()
        if heading.endswith("#"):
            trailing_start = len(heading)
            while trailing_start > 0 and heading[trailing_start - 1] == "#":
                trailing_start -= 1
            if trailing_start == 0:
                heading = ""
            elif heading[trailing_start - 1] in " \t":
                heading = heading[: trailing_start - 1].rstrip()

        self._pos += 1
        return Token(TokenType.ATX_HEADING, heading, lineno, {"level": level})

    def _try_classify_setext_underline(self, content: str, lineno: int) -> Token | None:
        """Classify ``===``/``---`` directly under paragraph text."""
        if not self._in_paragraph:
            return None
        underline = content.rstrip()
        if not underline or underline[0] not in "=-":
            return None
        if underline.strip(underline[0]):
            return None
        self._pos += 1
        level = 1 if underline[0] == "=" else 2
        return Token(TokenType.SETEXT_UNDERLINE, underline, lineno, {"level": level})


class ThematicClassifierMixin(_LexerHost):
    """Thematic breaks."""

    def _try_classify_thematic_break(self, content: str, lineno: int) -> Token | None:
        """Three or more of the same ``-``, ``*`` or ``_``, spaces allowed."""
        if not content or content[0] not in THEMATIC_BREAK_CHARS:
            return None

        char = content[0]
        count = 0
        for c in content.rstrip():
            if c == char:
                count += 1
            elif c not in " \t":
                return None

        if count < 3:
            return None
        self._pos += 1
        return Token(TokenType.THEMATIC_BREAK, content.rstrip(), lineno)


class FenceClassifierMixin(_LexerHost):
    """Fenced code blocks."""

    def _try_classify_fence(self, content: str, indent: int, lineno: int) -> Token | None:
        """Collect a fenced code block up to its closing fence or end of input.

        The closing fence uses the same character, is at least as long as
        the opening one and carries nothing else.
        """
        if not content or content[0] not in FENCE_CHARS:
            return None

        char = content[0]
        length = len(content) - len(content.lstrip(char))
        if length < 3:
            return None
        info = content[length:].strip()
        if char == "`" and "`" in info:
            return None

        lines: list[str] = []
        index = self._pos + 1
        while index < len(self._lines):
            line = self._line_at(index)
            stripped = line.lstrip(" ")
            closing = stripped.rstrip()
            if (
                indent_of(line) < 4
                and len(closing) >= length
                and closing == char * len(closing)
            ):
                index += 1
                break
            lines.append(strip_columns(line, indent))
            index += 1

        self._pos = index
        language = info.split()[0] if info else ""
        return Token(
            TokenType.FENCED_CODE,
            "\n".join(lines),
            lineno,
            {"info": info, "language": language, "markup": char * length},
        )


class QuoteClassifierMixin(_LexerHost):
    """Block quotes with lazy paragraph continuation."""

    def _try_classify_block_quote(self, content: str, lineno: int) -> Token | None:
        if not content.startswith(">"):
            return None

        lines = [_strip_quote_marker(content)]
        index = self._pos + 1
        while index < len(self._lines):
            line = self._line_at(index)
            stripped = line.lstrip(" ")
            if indent_of(line) < 4 and stripped.startswith(">"):
                lines.append(_strip_quote_marker(stripped))
                index += 1
                continue
            if not stripped:
                break
            # Lazy continuation of a paragraph inside the quote
            if lines[-1].strip() and not self._ends_lazy_continuation(stripped):
                lines.append(stripped)
                index += 1
                continue
            break

        self._pos = index
        return Token(TokenType.BLOCK_QUOTE, "\n".join(lines), lineno)


def _strip_quote_marker(content: str) -> str:
    rest = content[1:]
    if rest.startswith(" "):
        rest = rest[1:]
    return rest


def parse_list_marker(content: str) -> tuple[bool, str, int, int] | None:
    """Parse a list marker at the start of ``content``.

    Returns:
        ``(ordered, marker_char, number, marker_width)`` or None. For bullets
        ``marker_char`` is the bullet; for ordered items it is the delimiter.
    """
    if not content:
        return None

    if content[0] in BULLET_MARKERS:
        if len(content) == 1 or content[1] in " \t":
            return False, content[0], 0, 1
        return None

    pos = 0
    while pos < len(content) and content[pos] in DIGITS:
        pos += 1
    if pos == 0 or pos > 9:
        return None
    if pos < len(content) and content[pos] in ORDERED_DELIMITERS:
        if pos + 1 == len(content) or content[pos + 1] in " \t":
            return True, content[pos], int(content[:pos]), pos + 1
    return None


class ListClassifierMixin(_LexerHost):
    """List items.

    Content lines belong to the item while they are indented at least to
    the item's content column. Blank lines are kept when the item continues
    after them. Unindented paragraph text continues the item lazily.
    """

    def _try_classify_list_item(self, content: str, indent: int, lineno: int) -> Token | None:
        marker = parse_list_marker(content)
        if marker is None:
            return None
        ordered, marker_char, number, width = marker

        rest = content[width:]
        spaces = indent_of(rest.expandtabs(4))
        rest = rest.expandtabs(4)
        if not rest.strip():
            first_line = ""
            content_offset = indent + width + 1
        elif spaces > 4:
            first_line = rest[1:]
            content_offset = indent + width + 1
        else:
            first_line = rest[spaces:]
            content_offset = indent + width + spaces

        # Only a non-empty item starting at 1 may interrupt a paragraph
        if self._in_paragraph and (not first_line or (ordered and number != 1)):
            return None

        body = [first_line]
        index = self._pos + 1
        total = len(self._lines)
        while index < total:
            line = self._line_at(index)
            if not line.strip():
                if not any(part.strip() for part in body):
                    break
                lookahead = index
                while lookahead < total and not self._lines[lookahead].strip():
                    lookahead += 1
                if lookahead < total and indent_of(self._line_at(lookahead)) >= content_offset:
                    body.extend([""] * (lookahead - index))
                    index = lookahead
                    continue
                break
            if indent_of(line) >= content_offset:
                body.append(line[content_offset:])
                index += 1
                continue
            stripped = line.lstrip(" ")
            if body[-1].strip() and not self._ends_lazy_continuation(stripped):
                body.append(stripped)
                index += 1
                continue
            break

        self._pos = index
        return Token(
            TokenType.LIST_ITEM,
            "\n".join(body),
            lineno,
            {
                "ordered": ordered,
                "marker": marker_char,
                "number": number,
            },
        )


class BlokClassifierMixin(_LexerHost):
    """Embedded component blocks.

    Syntax::

        :::{blok} optional-id
        {"component": "teaser", "headline": "Hi"}
        :::

    Without a closing ``:::`` line the opening line is ordinary text.
    """

    def _try_classify_blok(self, content: str, lineno: int) -> Token | None:
        match = _BLOK_OPEN_RE.match(content.rstrip())
        if match is None:
            return None

        index = self._pos + 1
        body: list[str] = []
        while index < len(self._lines):
            line = self._lines[index]
            if line.strip() == ":::":
                raw = [self._lines[self._pos], *body, line]
                self._pos = index + 1
                return Token(
                    TokenType.BLOK,
                    "\n".join(body),
                    lineno,
                    {"id": match.group(1) or None, "raw": "\n".join(raw)},
                )
            body.append(line)
            index += 1
        return None


class TableClassifierMixin(_LexerHost):
    """GFM pipe tables: header row, delimiter row, body rows."""

    def _try_classify_table(self, content: str, lineno: int) -> Token | None:
        if not self._tables or self._in_paragraph or "|" not in content:
            return None
        if self._pos + 1 >= len(self._lines):
            return None

        header = split_table_row(content)
        delimiter = split_table_row(self._line_at(self._pos + 1).strip())
        if len(header) != len(delimiter) or not header:
            return None
        if not all(_TABLE_DELIMITER_CELL_RE.match(cell) for cell in delimiter):
            return None

        aligns: list[str | None] = []
        for cell in delimiter:
            cell = cell.strip()
            if cell.startswith(":") and cell.endswith(":"):
                aligns.append("center")
            elif cell.endswith(":"):
                aligns.append("right")
            elif cell.startswith(":"):
                aligns.append("left")
            else:
                aligns.append(None)

        rows: list[tuple[str, ...]] = []
        index = self._pos + 2
        while index < len(self._lines):
            line = self._line_at(index).strip()
            if not line or "|" not in line or self._starts_block(line):
                break
            cells = split_table_row(line)
            cells = (cells + [""] * len(header))[: len(header)]
            rows.append(tuple(cells))
            index += 1

        self._pos = index
        return Token(
            TokenType.TABLE,
            content,
            lineno,
            {"header": tuple(header), "aligns": tuple(aligns), "rows": tuple(rows)},
        )


def split_table_row(line: str) -> list[str]:
    """Split a table row on unescaped pipes, dropping the outer pipes.

    Example:
        >>> split_table_row("| a | b \\\\| c |")
        ['a', 'b | c']
    """
    line = line.strip()
    if line.startswith("|"):
        line = line[1:]
    if line.endswith("|") and not line.endswith("\\|"):
        line = line[:-1]

    cells: list[str] = []
    current: list[str] = []
    pos = 0
    while pos < len(line):
        char = line[pos]
        if char == "\\" and pos + 1 < len(line) and line[pos + 1] == "|":
            current.append("|")
            pos += 2
            continue
        if char == "|":
            cells.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        pos += 1
    cells.append("".join(current).strip())
    return cells
