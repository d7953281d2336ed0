"""Character sets and classification helpers for the Markdown parser.

Reference: CommonMark 0.31.2 specification
"""

import unicodedata

# https://spec.commonmark.org/0.31.2/#ascii-punctuation-character
ASCII_PUNCTUATION: frozenset[str] = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f\v")

# Characters that make the inline tokenizer leave the plain-text fast path
INLINE_SPECIAL: frozenset[str] = frozenset("*_`[!\\\n<~&:")

FENCE_CHARS: frozenset[str] = frozenset("`~")
BULLET_MARKERS: frozenset[str] = frozenset("-*+")
ORDERED_DELIMITERS: frozenset[str] = frozenset(".)")
THEMATIC_BREAK_CHARS: frozenset[str] = frozenset("-*_")

DIGITS: frozenset[str] = frozenset("0123456789")
HEX_DIGITS: frozenset[str] = frozenset("0123456789abcdefABCDEF")


def is_unicode_punctuation(char: str) -> bool:
    """Check if character is Unicode punctuation or symbol (P* or S*)."""
    if not char:
        return False
    if char in ASCII_PUNCTUATION:
        return True
    cat = unicodedata.category(char)
    return cat.startswith("P") or cat.startswith("S")


def is_unicode_whitespace(char: str) -> bool:
    """Check if character is Unicode whitespace.

    The empty string counts as whitespace so line boundaries flank like
    spaces.
    """
    if not char:
        return True
    if char in WHITESPACE:
        return True
    return unicodedata.category(char) == "Zs"
