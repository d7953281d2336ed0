"""Typed inline tokens and delimiter match tracking.

Inline tokens are NamedTuples, immutable so match state lives in an
external MatchRegistry instead of on the tokens.

Thread Safety:
Tokens are immutable. MatchRegistry instances are single-use per
_parse_inline() call.

Usage:
    match token:
        case DelimiterToken(char="*", run_length=n):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, NamedTuple

from tejido.parsers.markdown.elements import MarkdownToken

type DelimiterChar = Literal["*", "_", "~"]


class DelimiterToken(NamedTuple):
    """Run of emphasis or strikethrough delimiter characters."""

    char: DelimiterChar
    run_length: int
    can_open: bool
    can_close: bool


class TextToken(NamedTuple):
    content: str


class CodeSpanToken(NamedTuple):
    code: str


class NodeToken(NamedTuple):
    """Pre-parsed element (link, image, autolink, emoji)."""

    element: MarkdownToken


class HardBreakToken(NamedTuple):
    pass


class SoftBreakToken(NamedTuple):
    pass


type InlineToken = (
    DelimiterToken | TextToken | CodeSpanToken | NodeToken | HardBreakToken | SoftBreakToken
)


@dataclass(slots=True)
class DelimiterMatch:
    """Matched opener/closer pair.

    Attributes:
        opener_idx: Index of the opener token
        closer_idx: Index of the closer token
        match_count: Delimiters used (1 for em, 2 for strong and strike)
    """

    opener_idx: int
    closer_idx: int
    match_count: int


@dataclass(slots=True)
class MatchRegistry:
    """External tracking for delimiter matches."""

    matches: list[DelimiterMatch] = field(default_factory=list)
    consumed: dict[int, int] = field(default_factory=dict)
    deactivated: set[int] = field(default_factory=set)
    _by_opener: dict[int, list[DelimiterMatch]] = field(default_factory=dict)

    def record_match(self, opener_idx: int, closer_idx: int, count: int) -> None:
        match = DelimiterMatch(opener_idx, closer_idx, count)
        self.matches.append(match)
        self._by_opener.setdefault(opener_idx, []).append(match)
        self.consumed[opener_idx] = self.consumed.get(opener_idx, 0) + count
        self.consumed[closer_idx] = self.consumed.get(closer_idx, 0) + count

    def is_active(self, idx: int) -> bool:
        return idx not in self.deactivated

    def deactivate(self, idx: int) -> None:
        self.deactivated.add(idx)

    def remaining_count(self, idx: int, original_count: int) -> int:
        """Delimiters of token ``idx`` not yet used by a match."""
        return original_count - self.consumed.get(idx, 0)

    def matches_for_opener(self, idx: int) -> list[DelimiterMatch]:
        """All matches where ``idx`` is the opener, in the order recorded.

        The first recorded match is the innermost (``***x***`` records the
        strong pair before the emphasis pair).
        """
        return self._by_opener.get(idx, [])


__all__ = [
    "CodeSpanToken",
    "DelimiterChar",
    "DelimiterMatch",
    "DelimiterToken",
    "HardBreakToken",
    "InlineToken",
    "MatchRegistry",
    "NodeToken",
    "SoftBreakToken",
    "TextToken",
]
