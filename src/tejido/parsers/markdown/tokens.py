"""Block tokens produced by the Markdown lexer.

Each Token covers one complete block construct. Container constructs (list
items, block quotes) carry their dedented inner source in ``value`` so the
parser can re-enter block parsing on it.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any


class TokenType(Enum):
    """Token types produced by the lexer."""

    # Document structure
    EOF = auto()
    BLANK_LINE = auto()

    # Headings
    ATX_HEADING = auto()  # # Heading
    SETEXT_UNDERLINE = auto()  # === or --- under a paragraph

    # Code
    FENCED_CODE = auto()  # ``` or ~~~
    INDENTED_CODE = auto()  # 4-space indented

    # Containers
    BLOCK_QUOTE = auto()  # >
    LIST_ITEM = auto()  # -, *, +, 1., 1)

    # Other blocks
    THEMATIC_BREAK = auto()  # ---, ***, ___
    BLOK = auto()  # :::{blok} id
    TABLE = auto()  # GFM pipe table

    # Paragraph text
    PARAGRAPH_LINE = auto()


@dataclass(frozen=True, slots=True)
class Token:
    """A block token.

    Attributes:
        type: Token kind
        value: Text payload (heading text, code, container source, ...)
        lineno: 1-indexed line the construct starts on
        meta: Kind-specific details (heading level, list marker, fence info)
    """

    type: TokenType
    value: str
    lineno: int
    meta: Mapping[str, Any] = field(default_factory=dict)

    def __repr__(self) -> str:
        value_preview = self.value[:20] + "..." if len(self.value) > 20 else self.value
        return f"Token({self.type.name}, {value_preview!r}, {self.lineno})"


__all__ = ["Token", "TokenType"]
