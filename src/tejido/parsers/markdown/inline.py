"""Inline Markdown parsing.

Three phases per paragraph or heading:

1. Tokenize into typed inline tokens (text, delimiter runs, code spans,
   pre-parsed links/images/emoji, breaks)
2. Match delimiter runs with the delimiter stack algorithm
3. Build the MarkdownToken tree from the tokens and the matches

Thread Safety:
All state is call-local. Safe when each parser instance is used by one
thread.
"""

from __future__ import annotations

import html

from tejido.config import MarkdownConfig
from tejido.parsers.markdown.charsets import (
    ASCII_PUNCTUATION,
    DIGITS,
    HEX_DIGITS,
    INLINE_SPECIAL,
)
from tejido.parsers.markdown.elements import MarkdownToken
from tejido.parsers.markdown.emphasis import EmphasisMixin
from tejido.parsers.markdown.inline_tokens import (
    CodeSpanToken,
    DelimiterToken,
    HardBreakToken,
    InlineToken,
    MatchRegistry,
    NodeToken,
    SoftBreakToken,
    TextToken,
)
from tejido.parsers.markdown.links import LinkParsingMixin


class InlineParsingMixin(EmphasisMixin, LinkParsingMixin):
    """Inline parsing.

    Required Host Attributes:
        - _config: MarkdownConfig
    """

    _config: MarkdownConfig

    def _parse_inline(self, text: str) -> tuple[MarkdownToken, ...]:
        """Parse inline content into a MarkdownToken tree."""
        if not text:
            return ()
        tokens = self._tokenize_inline(text)
        registry = self._process_emphasis(tokens)
        return self._build_inline(tokens, registry, 0, len(tokens))

    # =========================================================================
    # Phase 1: tokenize
    # =========================================================================

    def _tokenize_inline(self, text: str) -> list[InlineToken]:
        tokens: list[InlineToken] = []
        append = tokens.append
        pos = 0
        text_len = len(text)
        strikethrough = self._config.strikethrough
        emoji_enabled = self._config.emoji

        while pos < text_len:
            char = text[pos]

            # Code span first so delimiters inside it stay literal
            if char == "`":
                count = len(text[pos:]) - len(text[pos:].lstrip("`"))
                close = self._find_code_span_close(text, pos + count, count)
                if close != -1:
                    code = text[pos + count : close].replace("\n", " ")
                    if len(code) >= 2 and code[0] == " " and code[-1] == " " and code.strip():
                        code = code[1:-1]
                    append(CodeSpanToken(code))
                    pos = close + count
                else:
                    append(TextToken("`" * count))
                    pos += count
                continue

            if char in "*_":
                start = pos
                while pos < text_len and text[pos] == char:
                    pos += 1
                before = text[start - 1] if start > 0 else " "
                after = text[pos] if pos < text_len else " "
                append(self._delimiter_token(char, pos - start, before, after))
                continue

            if char == "~":
                if strikethrough and text.startswith("~~", pos) and not text.startswith("~~~", pos):
                    before = text[pos - 1] if pos > 0 else " "
                    after = text[pos + 2] if pos + 2 < text_len else " "
                    append(self._delimiter_token("~", 2, before, after))
                    pos += 2
                    continue
                start = pos
                while pos < text_len and text[pos] == "~":
                    pos += 1
                append(TextToken(text[start:pos]))
                continue

            if char == "[":
                parsed = self._try_parse_link(text, pos)
                if parsed is not None:
                    element, pos = parsed
                    append(NodeToken(element))
                    continue
                append(TextToken("["))
                pos += 1
                continue

            if char == "!":
                if pos + 1 < text_len and text[pos + 1] == "[":
                    parsed = self._try_parse_image(text, pos)
                    if parsed is not None:
                        element, pos = parsed
                        append(NodeToken(element))
                        continue
                append(TextToken("!"))
                pos += 1
                continue

            if char == "<":
                parsed = self._try_parse_autolink(text, pos)
                if parsed is not None:
                    element, pos = parsed
                    append(NodeToken(element))
                    continue
                append(TextToken("<"))
                pos += 1
                continue

            if char == ":":
                parsed = self._try_parse_emoji(text, pos) if emoji_enabled else None
                if parsed is not None:
                    element, pos = parsed
                    append(NodeToken(element))
                    continue
                append(TextToken(":"))
                pos += 1
                continue

            if char == "\\":
                if pos + 1 < text_len and text[pos + 1] == "\n":
                    append(HardBreakToken())
                    pos = _skip_spaces(text, pos + 2)
                    continue
                if pos + 1 < text_len and text[pos + 1] in ASCII_PUNCTUATION:
                    append(TextToken(text[pos + 1]))
                    pos += 2
                    continue
                append(TextToken("\\"))
                pos += 1
                continue

            if char == "\n":
                spaces = 0
                check = pos - 1
                while check >= 0 and text[check] == " ":
                    spaces += 1
                    check -= 1
                if spaces and tokens and isinstance(tokens[-1], TextToken):
                    trimmed = tokens[-1].content.rstrip(" ")
                    if trimmed:
                        tokens[-1] = TextToken(trimmed)
                    else:
                        tokens.pop()
                append(HardBreakToken() if spaces >= 2 else SoftBreakToken())
                pos = _skip_spaces(text, pos + 1)
                continue

            if char == "&":
                entity = self._try_parse_entity(text, pos)
                if entity is not None:
                    decoded, pos = entity
                    append(TextToken(decoded))
                    continue
                append(TextToken("&"))
                pos += 1
                continue

            start = pos
            while pos < text_len and text[pos] not in INLINE_SPECIAL:
                pos += 1
            if pos == start:
                # Special character with no handler of its own
                pos += 1
            append(TextToken(text[start:pos]))

        return tokens

    def _find_code_span_close(self, text: str, start: int, count: int) -> int:
        """Find a backtick run of exactly ``count`` at or after ``start``."""
        pos = start
        text_len = len(text)
        while True:
            idx = text.find("`", pos)
            if idx == -1:
                return -1
            end = idx
            while end < text_len and text[end] == "`":
                end += 1
            if end - idx == count:
                return idx
            pos = end

    def _try_parse_entity(self, text: str, pos: int) -> tuple[str, int] | None:
        """Decode ``&name;``, ``&#digits;`` or ``&#xhex;`` at ``pos``."""
        text_len = len(text)
        end = pos + 1

        if end < text_len and text[end] == "#":
            end += 1
            hexadecimal = end < text_len and text[end] in "xX"
            if hexadecimal:
                end += 1
            digits = HEX_DIGITS if hexadecimal else DIGITS
            digits_start = end
            while end < text_len and text[end] in digits:
                end += 1
            length = end - digits_start
            if length < 1 or length > (6 if hexadecimal else 7):
                return None
            if end >= text_len or text[end] != ";":
                return None
            codepoint = int(text[digits_start:end], 16 if hexadecimal else 10)
            if codepoint == 0 or codepoint > 0x10FFFF:
                return "�", end + 1
            return chr(codepoint), end + 1

        if end < text_len and text[end].isalpha():
            max_end = min(pos + 33, text_len)
            while end < max_end and text[end].isalnum():
                end += 1
            if end < text_len and text[end] == ";":
                entity = text[pos : end + 1]
                decoded = html.unescape(entity)
                if decoded != entity:
                    return decoded, end + 1
        return None

    # =========================================================================
    # Phase 3: build
    # =========================================================================

    def _build_inline(
        self,
        tokens: list[InlineToken],
        registry: MatchRegistry,
        start: int,
        end: int,
    ) -> tuple[MarkdownToken, ...]:
        """Build MarkdownTokens for ``tokens[start:end]`` using the matches."""
        result: list[MarkdownToken] = []
        idx = start

        while idx < end:
            token = tokens[idx]
            match token:
                case TextToken(content=content):
                    result.append(MarkdownToken("text", content=content))
                    idx += 1

                case CodeSpanToken(code=code):
                    result.append(MarkdownToken("code_inline", content=code, markup="`"))
                    idx += 1

                case NodeToken(element=element):
                    result.append(element)
                    idx += 1

                case HardBreakToken():
                    result.append(MarkdownToken("hardbreak"))
                    idx += 1

                case SoftBreakToken():
                    kind = "hardbreak" if self._config.breaks else "softbreak"
                    result.append(MarkdownToken(kind, content="\n"))
                    idx += 1

                case DelimiterToken(char=char, run_length=run_length):
                    # A closer at ``end`` is shared with the enclosing pair
                    matches = [m for m in registry.matches_for_opener(idx) if m.closer_idx <= end]
                    if not matches:
                        remaining = registry.remaining_count(idx, run_length)
                        if remaining > 0:
                            result.append(MarkdownToken("text", content=char * remaining))
                        idx += 1
                        continue

                    ordered = sorted(matches, key=lambda m: m.closer_idx)
                    leftover = registry.remaining_count(idx, run_length)
                    if leftover > 0:
                        result.append(MarkdownToken("text", content=char * leftover))

                    # Innermost match first; each wraps everything built so far
                    wrapped: tuple[MarkdownToken, ...] = ()
                    boundary = idx + 1
                    for m in ordered:
                        if boundary < m.closer_idx:
                            wrapped += self._build_inline(tokens, registry, boundary, m.closer_idx)
                        wrapped = (_emphasis(char, m.match_count, wrapped),)
                        boundary = max(boundary, m.closer_idx + 1)
                    result.extend(wrapped)

                    outer = ordered[-1].closer_idx
                    if outer >= end:
                        break
                    if registry.matches_for_opener(outer):
                        # The closer also opens a later pair
                        idx = outer
                        continue
                    closer = tokens[outer]
                    if isinstance(closer, DelimiterToken):
                        leftover = registry.remaining_count(outer, closer.run_length)
                        if leftover > 0:
                            result.append(MarkdownToken("text", content=char * leftover))
                    idx = outer + 1

                case _:
                    idx += 1

        return tuple(result)


def _emphasis(char: str, count: int, children: tuple[MarkdownToken, ...]) -> MarkdownToken:
    if char == "~":
        return MarkdownToken("s", children=children, markup="~~")
    if count == 2:
        return MarkdownToken("strong", children=children, markup=char * 2)
    return MarkdownToken("em", children=children, markup=char)


def _skip_spaces(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] == " ":
        pos += 1
    return pos


__all__ = ["InlineParsingMixin"]
