"""Unit tests for MatchRegistry and the inline token types.

Delimiter match state lives outside the immutable inline tokens.
"""

from __future__ import annotations

from tejido.parsers.markdown.inline_tokens import (
    DelimiterMatch,
    DelimiterToken,
    MatchRegistry,
    TextToken,
)


class TestDelimiterMatch:
    """Tests for DelimiterMatch dataclass."""

    def test_create_match(self) -> None:
        match = DelimiterMatch(opener_idx=0, closer_idx=5, match_count=2)
        assert (match.opener_idx, match.closer_idx, match.match_count) == (0, 5, 2)

    def test_match_is_slotted(self) -> None:
        assert hasattr(DelimiterMatch(0, 5, 1), "__slots__")


class TestMatchRegistry:
    """Tests for MatchRegistry."""

    def test_empty_registry(self) -> None:
        registry = MatchRegistry()
        assert registry.matches == []
        assert registry.consumed == {}
        assert registry.deactivated == set()

    def test_record_match(self) -> None:
        registry = MatchRegistry()
        registry.record_match(opener_idx=0, closer_idx=5, count=2)

        assert registry.matches == [DelimiterMatch(0, 5, 2)]
        assert registry.consumed == {0: 2, 5: 2}

    def test_remaining_count(self) -> None:
        """Consumed delimiters are subtracted from the original run."""
        registry = MatchRegistry()
        registry.record_match(opener_idx=0, closer_idx=5, count=2)

        assert registry.remaining_count(0, original_count=3) == 1
        assert registry.remaining_count(5, original_count=2) == 0
        assert registry.remaining_count(9, original_count=3) == 3

    def test_deactivate(self) -> None:
        registry = MatchRegistry()
        assert registry.is_active(3)
        registry.deactivate(3)
        assert not registry.is_active(3)
        assert registry.is_active(4)

    def test_matches_for_opener_in_record_order(self) -> None:
        """The first recorded match for an opener is the innermost."""
        registry = MatchRegistry()
        registry.record_match(0, 2, 2)
        registry.record_match(0, 2, 1)
        registry.record_match(4, 6, 1)

        assert [m.match_count for m in registry.matches_for_opener(0)] == [2, 1]
        assert registry.matches_for_opener(4) == [DelimiterMatch(4, 6, 1)]
        assert registry.matches_for_opener(1) == []


class TestInlineTokens:
    """Inline tokens are immutable NamedTuples usable in match statements."""

    def test_pattern_matching(self) -> None:
        token = DelimiterToken("*", 2, True, False)
        match token:
            case DelimiterToken(char="*", run_length=n, can_open=True):
                assert n == 2
            case _:
                raise AssertionError("pattern did not match")

    def test_equality(self) -> None:
        assert TextToken("a") == TextToken("a")
        assert TextToken("a") != TextToken("b")
