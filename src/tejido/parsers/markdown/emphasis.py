"""Emphasis delimiter matching.

Implements the CommonMark delimiter stack algorithm for ``*``, ``_`` and
``~~``. A closer pairs with the nearest active opener of the same
character. A pair uses two delimiters when both runs still have at least
two, otherwise one. Leftover delimiters become literal text.
See: https://spec.commonmark.org/0.31.2/#emphasis-and-strong-emphasis

Thread Safety:
All methods are stateless or use call-local state only.
"""

from tejido.parsers.markdown.charsets import is_unicode_punctuation, is_unicode_whitespace
from tejido.parsers.markdown.inline_tokens import DelimiterToken, InlineToken, MatchRegistry


class EmphasisMixin:
    """Flanking rules and delimiter matching."""

    def _is_left_flanking(self, before: str, after: str) -> bool:
        """Not followed by whitespace, and either not followed by punctuation
        or preceded by whitespace or punctuation."""
        if is_unicode_whitespace(after):
            return False
        if not is_unicode_punctuation(after):
            return True
        return is_unicode_whitespace(before) or is_unicode_punctuation(before)

    def _is_right_flanking(self, before: str, after: str) -> bool:
        """Not preceded by whitespace, and either not preceded by punctuation
        or followed by whitespace or punctuation."""
        if is_unicode_whitespace(before):
            return False
        if not is_unicode_punctuation(before):
            return True
        return is_unicode_whitespace(after) or is_unicode_punctuation(after)

    def _delimiter_token(self, char: str, run_length: int, before: str, after: str) -> DelimiterToken:
        left = self._is_left_flanking(before, after)
        right = self._is_right_flanking(before, after)
        if char == "_":
            can_open = left and (not right or is_unicode_punctuation(before))
            can_close = right and (not left or is_unicode_punctuation(after))
        else:
            can_open = left
            can_close = right
        return DelimiterToken(char, run_length, can_open, can_close)  # type: ignore[arg-type]

    def _process_emphasis(self, tokens: list[InlineToken]) -> MatchRegistry:
        """Match openers and closers.

        Returns:
            MatchRegistry containing all delimiter matches.
        """
        registry = MatchRegistry()
        openers: dict[str, list[int]] = {"*": [], "_": [], "~": []}
        closer_idx = 0
        tokens_len = len(tokens)

        while closer_idx < tokens_len:
            closer = tokens[closer_idx]
            if not isinstance(closer, DelimiterToken):
                closer_idx += 1
                continue

            if not (closer.can_close and registry.is_active(closer_idx)):
                if closer.can_open:
                    openers[closer.char].append(closer_idx)
                closer_idx += 1
                continue

            stack = openers[closer.char]
            found_opener = False
            for i in range(len(stack) - 1, -1, -1):
                opener_idx = stack[i]
                opener = tokens[opener_idx]
                if not isinstance(opener, DelimiterToken) or not registry.is_active(opener_idx):
                    continue

                opener_remaining = registry.remaining_count(opener_idx, opener.run_length)
                closer_remaining = registry.remaining_count(closer_idx, closer.run_length)

                # Rule of three
                either_both_ways = (opener.can_open and opener.can_close) or (
                    closer.can_open and closer.can_close
                )
                if (
                    either_both_ways
                    and (opener_remaining + closer_remaining) % 3 == 0
                    and (opener_remaining % 3 != 0 or closer_remaining % 3 != 0)
                ):
                    continue

                found_opener = True
                use_count = 2 if (opener_remaining >= 2 and closer_remaining >= 2) else 1
                registry.record_match(opener_idx, closer_idx, use_count)

                for mid_idx in range(opener_idx + 1, closer_idx):
                    if isinstance(tokens[mid_idx], DelimiterToken):
                        registry.deactivate(mid_idx)
                for char_stack in openers.values():
                    while char_stack and char_stack[-1] > opener_idx:
                        char_stack.pop()

                if registry.remaining_count(opener_idx, opener.run_length) == 0:
                    registry.deactivate(opener_idx)
                    if stack and stack[-1] == opener_idx:
                        stack.pop()
                if registry.remaining_count(closer_idx, closer.run_length) == 0:
                    registry.deactivate(closer_idx)
                break

            if not found_opener:
                if closer.can_open:
                    stack.append(closer_idx)
                else:
                    registry.deactivate(closer_idx)
                closer_idx += 1
            elif registry.remaining_count(closer_idx, closer.run_length) == 0:
                closer_idx += 1
            # Otherwise the closer still has delimiters; retry from the same index

        return registry
