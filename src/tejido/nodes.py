"""Canonical rich-text document model.

A document is a tree of :class:`Node` values. Every node carries a string
``type`` discriminant; text leaves carry ``text`` and an ordered tuple of
:class:`Mark` values.

Node Vocabulary:
doc
├── paragraph, heading, blockquote, code_block, horizontal_rule
├── bullet_list / ordered_list
│   └── list_item
├── table
│   └── tableRow
│       └── tableCell / tableHeader
├── details
│   ├── detailsSummary (inline content)
│   └── detailsContent (blocks)
├── image, emoji, hard_break, blok
└── text (leaf, carries marks)

Mark Order:
``marks[0]`` is applied closest to the raw text and each later mark wraps
the previous output. Parsers emit marks in that order.

Thread Safety:
All nodes and marks are frozen with read-only attrs and safe to share.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import StrEnum
from types import MappingProxyType
from typing import Any


class NodeType(StrEnum):
    """Closed vocabulary of node types."""

    DOC = "doc"
    PARAGRAPH = "paragraph"
    HEADING = "heading"
    BLOCKQUOTE = "blockquote"
    BULLET_LIST = "bullet_list"
    ORDERED_LIST = "ordered_list"
    LIST_ITEM = "list_item"
    CODE_BLOCK = "code_block"
    HORIZONTAL_RULE = "horizontal_rule"
    HARD_BREAK = "hard_break"
    IMAGE = "image"
    EMOJI = "emoji"
    BLOK = "blok"
    TEXT = "text"
    TABLE = "table"
    TABLE_ROW = "tableRow"
    TABLE_CELL = "tableCell"
    TABLE_HEADER = "tableHeader"
    DETAILS = "details"
    DETAILS_SUMMARY = "detailsSummary"
    DETAILS_CONTENT = "detailsContent"


class MarkType(StrEnum):
    """Closed vocabulary of inline mark types."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKE = "strike"
    CODE = "code"
    LINK = "link"
    ANCHOR = "anchor"
    STYLED = "styled"
    HIGHLIGHT = "highlight"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"
    TEXT_STYLE = "textStyle"


class LinkType(StrEnum):
    """Target kinds for the link mark."""

    URL = "url"
    STORY = "story"
    EMAIL = "email"
    ASSET = "asset"


NODE_TYPES: frozenset[str] = frozenset(NodeType)
MARK_TYPES: frozenset[str] = frozenset(MarkType)


def _freeze(attrs: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if isinstance(attrs, MappingProxyType):
        return attrs
    return MappingProxyType(dict(attrs or {}))


# =============================================================================
# Mark / Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Mark:
    """Inline formatting applied to a text leaf."""

    type: str
    attrs: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", str(self.type))
        object.__setattr__(self, "attrs", _freeze(self.attrs))

    @property
    def is_known(self) -> bool:
        return self.type in MARK_TYPES


@dataclass(frozen=True, slots=True)
class Node:
    """A node of the canonical document tree.

    Attributes:
        type: Discriminant, usually a :class:`NodeType` value. Any other
            string is an unknown type the renderer skips safely.
        attrs: Read-only type-specific attributes
        content: Ordered children
        text: Raw text (text leaves only)
        marks: Ordered marks (text leaves only), innermost first
    """

    type: str
    attrs: Mapping[str, Any] = field(default_factory=dict)
    content: tuple[Node, ...] = ()
    text: str | None = None
    marks: tuple[Mark, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", str(self.type))
        object.__setattr__(self, "attrs", _freeze(self.attrs))
        if not isinstance(self.content, tuple):
            object.__setattr__(self, "content", tuple(self.content))
        if not isinstance(self.marks, tuple):
            object.__setattr__(self, "marks", tuple(self.marks))

    @property
    def children(self) -> tuple[Node, ...]:
        """Alias for ``content``."""
        return self.content

    @property
    def is_text(self) -> bool:
        return self.type == NodeType.TEXT

    @property
    def is_known(self) -> bool:
        return self.type in NODE_TYPES

    def with_marks(self, *marks: Mark) -> Node:
        """Return a copy with ``marks`` appended (outermost last)."""
        return replace(self, marks=self.marks + marks)

    def with_content(self, content: tuple[Node, ...] | list[Node]) -> Node:
        return replace(self, content=tuple(content))


# =============================================================================
# Builders
# =============================================================================


def mark(type: str, **attrs: Any) -> Mark:
    """Build a mark.

    Example:
        >>> mark("link", href="/about").attrs["href"]
        '/about'
    """
    return Mark(type, attrs)


def text(value: str, *marks: Mark) -> Node:
    """Build a text leaf with marks, innermost first."""
    return Node(NodeType.TEXT, text=value, marks=marks)


def paragraph(*inlines: Node, **attrs: Any) -> Node:
    return Node(NodeType.PARAGRAPH, attrs, inlines)


def heading(level: int, *inlines: Node, **attrs: Any) -> Node:
    return Node(NodeType.HEADING, {"level": level, **attrs}, inlines)


def doc(*blocks: Node) -> Node:
    """Build a document root."""
    return Node(NodeType.DOC, content=blocks)


def merge_text_nodes(nodes: Sequence[Node]) -> list[Node]:
    """Merge adjacent text leaves that carry equal marks, dropping empty ones."""
    merged: list[Node] = []
    for node in nodes:
        if node.is_text and not node.text:
            continue
        if merged and node.is_text and merged[-1].is_text and merged[-1].marks == node.marks:
            previous = merged.pop()
            merged.append(replace(previous, text=(previous.text or "") + (node.text or "")))
            continue
        merged.append(node)
    return merged


__all__ = [
    # Vocabularies
    "NodeType",
    "MarkType",
    "LinkType",
    "NODE_TYPES",
    "MARK_TYPES",
    # Model
    "Node",
    "Mark",
    # Builders
    "doc",
    "heading",
    "mark",
    "paragraph",
    "text",
    # Helpers
    "merge_text_nodes",
]
