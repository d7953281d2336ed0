"""HTML string primitives used as the default render and text functions.

Example:
    >>> default_render_fn("a", {"href": "/x"}, ["Home"])
    '<a href="/x">Home</a>'
    >>> default_render_fn("img", {"src": "/i.png"})
    '<img src="/i.png">'
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tejido.utils.text import attrs_to_string, escape_html

VOID_TAGS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)


def join_children(children: Any) -> str:
    """Flatten rendered children into one string, skipping empty slots."""
    if children is None:
        return ""
    if isinstance(children, str):
        return children
    if isinstance(children, list | tuple):
        return "".join(join_children(child) for child in children)
    return str(children)


def default_render_fn(tag: str, attrs: Mapping[str, Any] | None = None, children: Any = None) -> str:
    """Render one element as an HTML string.

    An empty tag returns the joined children. Void tags never get a
    closing tag or content.
    """
    content = join_children(children)
    if not tag:
        return content

    attrs_string = attrs_to_string(attrs or {})
    open_tag = f"{tag} {attrs_string}" if attrs_string else tag
    if tag in VOID_TAGS:
        return f"<{open_tag}>"
    return f"<{open_tag}>{content}</{tag}>"


def default_text_fn(text: str, attrs: Mapping[str, Any] | None = None) -> str:
    """Escape ``text`` for HTML. Attributes (such as keys) are ignored."""
    return escape_html(text)


__all__ = ["VOID_TAGS", "default_render_fn", "default_text_fn", "join_children"]
