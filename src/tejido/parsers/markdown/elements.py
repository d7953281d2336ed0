"""Intermediate Markdown element tree handed to token resolvers.

The block and inline parsers build a tree of MarkdownToken values. Token
resolvers then turn each token (with its already-resolved children) into
canonical nodes, which is where callers can intercept or remap a token
type.

Token types:
    Block: heading, paragraph, blockquote, bullet_list, ordered_list,
    list_item, fence, code_block, hr, blok, table, tr, th, td

    Inline: text, strong, em, s, code_inline, link, image, emoji,
    hardbreak, softbreak
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class MarkdownToken:
    """One Markdown construct.

    Attributes:
        type: Token type name (see module docstring)
        attrs: Construct attributes (``level``, ``href``, ``src``, ``order``...)
        content: Literal text for leaf tokens (text, code, fences)
        children: Nested tokens
        markup: Source markup (``**``, ``#``, ``-``, ...)
        info: Fence info string
        lineno: 1-indexed source line for block tokens (0 for inline)
    """

    type: str
    attrs: Mapping[str, Any] = field(default_factory=dict)
    content: str = ""
    children: tuple[MarkdownToken, ...] = ()
    markup: str = ""
    info: str = ""
    lineno: int = 0

    def attr(self, name: str, default: Any = None) -> Any:
        return self.attrs.get(name, default)

    def plain_text(self) -> str:
        """Concatenated literal text of this token and its descendants."""
        if not self.children:
            return self.content
        return "".join(child.plain_text() for child in self.children)


__all__ = ["MarkdownToken"]
