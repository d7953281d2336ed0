"""Token resolvers: MarkdownToken tree to canonical nodes.

Each resolver receives a token and its already-resolved children and
returns a Node, a sequence of Nodes, or None. None hoists the children
into the parent, which is how a caller drops a wrapper (e.g. turning
``paragraph`` off) without losing content.

Resolution is bottom-up, so inline marks accumulate from the inside out:
``[**x**](u)`` yields a text leaf with marks ``[bold, link]``.

Usage:
    >>> tokens = Parser("**hi**").parse()
    >>> resolve_tokens(tokens, DEFAULT_TOKEN_RESOLVERS)[0].content[0].marks[0].type
    'bold'

"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence

from tejido.nodes import LinkType, Mark, MarkType, Node, NodeType, merge_text_nodes
from tejido.parsers.markdown.elements import MarkdownToken

type TokenResolver = Callable[[MarkdownToken, tuple[Node, ...]], Node | Sequence[Node] | None]


# =============================================================================
# Resolution
# =============================================================================


def resolve_tokens(
    tokens: Sequence[MarkdownToken],
    resolvers: Mapping[str, TokenResolver],
) -> list[Node]:
    """Resolve tokens into canonical nodes, children first.

    Token types without a resolver hoist their children.
    """
    result: list[Node] = []
    for token in tokens:
        children = tuple(resolve_tokens(token.children, resolvers)) if token.children else ()
        resolver = resolvers.get(token.type)
        if resolver is None:
            result.extend(children)
            continue

        resolved = resolver(token, children)
        if resolved is None:
            result.extend(children)
        elif isinstance(resolved, Node):
            result.append(resolved)
        else:
            result.extend(resolved)
    return merge_text_nodes(result)


def apply_mark(children: Sequence[Node], m: Mark) -> tuple[Node, ...]:
    """Append ``m`` to every text leaf; other inline nodes pass through."""
    return tuple(child.with_marks(m) if child.is_text else child for child in children)


# =============================================================================
# Block resolvers
# =============================================================================


def resolve_heading(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
    return Node(NodeType.HEADING, {"level": token.attr("level", 1)}, children)


def resolve_paragraph(token: MarkdownToken, children: tuple[Node, ...]) -> Node | None:
    if not children:
        return None
    return Node(NodeType.PARAGRAPH, content=children)


def _container(node_type: NodeType) -> TokenResolver:
    def resolve(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
        return Node(node_type, content=children)

    resolve.__name__ = f"resolve_{node_type}"
    return resolve


def resolve_ordered_list(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
    return Node(NodeType.ORDERED_LIST, {"order": token.attr("order", 1)}, children)


def resolve_code(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
    """Fenced and indented code both become ``code_block``."""
    content = (Node(NodeType.TEXT, text=token.content),) if token.content else ()
    return Node(NodeType.CODE_BLOCK, {"language": token.attr("language")}, content)


def resolve_hr(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
    return Node(NodeType.HORIZONTAL_RULE)


def resolve_blok(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
    return Node(NodeType.BLOK, {"id": token.attr("id"), "body": list(token.attr("body", []))})


def resolve_table_cell(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
    """Table cells hold a paragraph, as rich-text editors store them."""
    node_type = NodeType.TABLE_HEADER if token.type == "th" else NodeType.TABLE_CELL
    attrs = {
        "colspan": 1,
        "rowspan": 1,
        "colwidth": None,
        "textAlign": token.attr("textAlign"),
    }
    content = (Node(NodeType.PARAGRAPH, content=children),) if children else ()
    return Node(node_type, attrs, content)


# =============================================================================
# Inline resolvers
# =============================================================================


def resolve_text(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
    return Node(NodeType.TEXT, text=token.content)


def _mark(mark_type: MarkType) -> TokenResolver:
    def resolve(token: MarkdownToken, children: tuple[Node, ...]) -> tuple[Node, ...]:
        return apply_mark(children, Mark(mark_type))

    resolve.__name__ = f"resolve_{mark_type}"
    return resolve


def resolve_code_inline(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
    return Node(NodeType.TEXT, text=token.content, marks=(Mark(MarkType.CODE),))


def resolve_link(token: MarkdownToken, children: tuple[Node, ...]) -> tuple[Node, ...]:
    attrs = {
        "href": token.attr("href", ""),
        "linktype": token.attr("linktype", LinkType.URL),
        "target": None,
    }
    if token.attr("title"):
        attrs["title"] = token.attr("title")
    return apply_mark(children, Mark(MarkType.LINK, attrs))


def resolve_image(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
    return Node(
        NodeType.IMAGE,
        {
            "src": token.attr("src", ""),
            "alt": token.attr("alt", ""),
            "title": token.attr("title", ""),
        },
    )


def resolve_emoji(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
    return Node(
        NodeType.EMOJI,
        {
            "name": token.attr("name"),
            "emoji": token.attr("emoji"),
            "fallbackImage": None,
        },
    )


def resolve_hardbreak(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
    return Node(NodeType.HARD_BREAK)


def resolve_softbreak(token: MarkdownToken, children: tuple[Node, ...]) -> Node:
    return Node(NodeType.TEXT, text=" ")


DEFAULT_TOKEN_RESOLVERS: Mapping[str, TokenResolver] = {
    # Blocks
    "heading": resolve_heading,
    "paragraph": resolve_paragraph,
    "blockquote": _container(NodeType.BLOCKQUOTE),
    "bullet_list": _container(NodeType.BULLET_LIST),
    "ordered_list": resolve_ordered_list,
    "list_item": _container(NodeType.LIST_ITEM),
    "code_block": resolve_code,
    "fence": resolve_code,
    "hr": resolve_hr,
    "blok": resolve_blok,
    "table": _container(NodeType.TABLE),
    "tr": _container(NodeType.TABLE_ROW),
    "th": resolve_table_cell,
    "td": resolve_table_cell,
    # Inline
    "text": resolve_text,
    "strong": _mark(MarkType.BOLD),
    "em": _mark(MarkType.ITALIC),
    "s": _mark(MarkType.STRIKE),
    "code_inline": resolve_code_inline,
    "link": resolve_link,
    "image": resolve_image,
    "emoji": resolve_emoji,
    "hardbreak": resolve_hardbreak,
    "softbreak": resolve_softbreak,
}


__all__ = [
    "DEFAULT_TOKEN_RESOLVERS",
    "TokenResolver",
    "apply_mark",
    "resolve_tokens",
]
