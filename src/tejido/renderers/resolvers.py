"""Built-in resolvers for every node and mark type.

Each resolver builds its output only through ``ctx.render`` and
``ctx.render_text``, so the same defaults drive HTML strings, virtual-node
trees or any other output the caller's render function produces.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from tejido.nodes import LinkType, MarkType, Node, NodeType
from tejido.renderers.context import RenderContext, RenderedMark
from tejido.utils.text import attrs_to_style, clean_attrs, join_styles

logger = logging.getLogger(__name__)

EMOJI_IMG_STYLE = "width: 1.25em; height: 1.25em; vertical-align: text-top"


# =============================================================================
# Attribute helpers
# =============================================================================


def block_attrs(attrs: Mapping[str, Any]) -> dict[str, Any]:
    """Fold ``textAlign`` into ``style``, keeping class, id and other attrs.

    Example:
        >>> block_attrs({"textAlign": "center", "class": "lead"})
        {'class': 'lead', 'style': 'text-align: center;'}
    """
    rest = dict(attrs)
    text_align = rest.pop("textAlign", None)
    style = join_styles(rest.pop("style", None), f"text-align: {text_align}" if text_align else None)
    return clean_attrs({**rest, "style": style})


def table_cell_attrs(attrs: Mapping[str, Any]) -> dict[str, Any]:
    """Turn colwidth, backgroundColor and textAlign into CSS.

    ``colspan`` and ``rowspan`` are only emitted when greater than 1.
    """
    rest = dict(attrs)
    colspan = rest.pop("colspan", None)
    rowspan = rest.pop("rowspan", None)
    colwidth = rest.pop("colwidth", None)
    background = rest.pop("backgroundColor", None)
    text_align = rest.pop("textAlign", None)

    if isinstance(colwidth, list | tuple):
        colwidth = colwidth[0] if colwidth else None
    style = join_styles(
        rest.pop("style", None),
        f"width: {colwidth}px" if colwidth else None,
        f"background-color: {background}" if background else None,
        f"text-align: {text_align}" if text_align else None,
    )
    result = clean_attrs({**rest, "style": style})
    if isinstance(colspan, int) and colspan > 1:
        result["colspan"] = colspan
    if isinstance(rowspan, int) and rowspan > 1:
        result["rowspan"] = rowspan
    return result


def link_href(attrs: Mapping[str, Any]) -> str | None:
    """Resolve the final href for a link mark by its linktype.

    Example:
        >>> link_href({"href": "a@b.c", "linktype": "email"})
        'mailto:a@b.c'
        >>> link_href({"href": "mailto:a@b.c", "linktype": "email"})
        'mailto:a@b.c'
        >>> link_href({"href": "/about", "linktype": "story", "anchor": "team"})
        '/about#team'
    """
    href = attrs.get("href")
    match attrs.get("linktype"):
        case LinkType.EMAIL:
            if not isinstance(href, str) or not href:
                return href
            return f"mailto:{href.removeprefix('mailto:')}"
        case LinkType.STORY:
            anchor = attrs.get("anchor")
            if anchor:
                return f"{href or ''}#{anchor}"
            return href
        case _:
            return href


# =============================================================================
# Node resolvers
# =============================================================================


def _container(tag: str):
    def resolver(node: Node, ctx: RenderContext) -> Any:
        return ctx.render(tag, block_attrs(node.attrs), ctx.render_children(node))

    resolver.__name__ = f"render_{tag}"
    return resolver


def render_doc(node: Node, ctx: RenderContext) -> Any:
    return ctx.fragment(ctx.render_children(node))


def render_text(node: Node, ctx: RenderContext) -> Any:
    output = ctx.render_text(node.text or "")
    return ctx.apply_marks(output, node.marks)


def render_heading(node: Node, ctx: RenderContext) -> Any:
    attrs = dict(node.attrs)
    level = attrs.pop("level", 1)
    if not isinstance(level, int) or isinstance(level, bool):
        level = 1
    level = min(6, max(1, level))
    return ctx.render(f"h{level}", block_attrs(attrs), ctx.render_children(node))


def render_ordered_list(node: Node, ctx: RenderContext) -> Any:
    attrs = dict(node.attrs)
    order = attrs.pop("order", 1)
    if isinstance(order, int) and order != 1:
        attrs["start"] = order
    return ctx.render("ol", block_attrs(attrs), ctx.render_children(node))


def render_code_block(node: Node, ctx: RenderContext) -> Any:
    attrs = dict(node.attrs)
    language = attrs.pop("language", None)
    code_attrs = {"class": f"language-{language}"} if language else {}
    code = ctx.render("code", code_attrs, ctx.render_children(node))
    return ctx.render("pre", block_attrs(attrs), [code])


def render_horizontal_rule(node: Node, ctx: RenderContext) -> Any:
    return ctx.render("hr", block_attrs(node.attrs))


def render_hard_break(node: Node, ctx: RenderContext) -> Any:
    return ctx.render("br")


def render_image(node: Node, ctx: RenderContext) -> Any:
    attrs = dict(node.attrs)
    src = attrs.pop("src", None)
    if isinstance(src, str):
        src = ctx.optimize_image(src)
    return ctx.render("img", clean_attrs({"src": src, **attrs}))


def render_emoji(node: Node, ctx: RenderContext) -> Any:
    attrs = node.attrs
    span_attrs = clean_attrs(
        {
            "data-type": "emoji",
            "data-name": attrs.get("name"),
            "data-emoji": attrs.get("emoji"),
        }
    )
    fallback = attrs.get("fallbackImage")
    if fallback:
        inner = ctx.render(
            "img",
            clean_attrs(
                {
                    "src": fallback,
                    "alt": attrs.get("alt") or attrs.get("name"),
                    "style": EMOJI_IMG_STYLE,
                    "draggable": "false",
                    "loading": "lazy",
                }
            ),
        )
    else:
        inner = ctx.render_text(attrs.get("emoji") or "")
    return ctx.render("span", span_attrs, [inner])


def render_blok(node: Node, ctx: RenderContext) -> Any:
    body = node.attrs.get("body") or []
    if not body:
        return None
    if ctx.options.component_resolver is None:
        logger.warning(
            "No component resolver configured, skipping blok %r",
            node.attrs.get("id"),
        )
        return None
    blok_id = node.attrs.get("id")
    rendered = [ctx.resolve_component(blok, blok_id) for blok in body]
    return ctx.fragment([r for r in rendered if r is not None])


def render_details_content(node: Node, ctx: RenderContext) -> Any:
    attrs = {"data-type": "detailsContent", **block_attrs(node.attrs)}
    return ctx.render("div", attrs, ctx.render_children(node))


def render_table(node: Node, ctx: RenderContext) -> Any:
    """Group leading all-header rows into ``thead``, the rest into ``tbody``."""
    header_rows: list[int] = []
    for index, row in enumerate(node.content):
        if row.content and all(c.type == NodeType.TABLE_HEADER for c in row.content):
            header_rows.append(index)
        else:
            break

    outputs = ctx.render_children(node)
    sections = []
    head = outputs[: len(header_rows)]
    body = outputs[len(header_rows) :]
    if head:
        sections.append(ctx.render("thead", {}, head))
    if body:
        sections.append(ctx.render("tbody", {}, body))
    return ctx.render("table", block_attrs(node.attrs), sections)


def _table_cell(tag: str):
    def resolver(node: Node, ctx: RenderContext) -> Any:
        return ctx.render(tag, table_cell_attrs(node.attrs), ctx.render_children(node))

    resolver.__name__ = f"render_{tag}"
    return resolver


# =============================================================================
# Mark resolvers
# =============================================================================


def _simple_mark(tag: str):
    def resolver(m: RenderedMark, ctx: RenderContext) -> Any:
        return ctx.render(tag, {}, [m.children])

    resolver.__name__ = f"render_{tag}_mark"
    return resolver


def render_link(m: RenderedMark, ctx: RenderContext) -> Any:
    attrs = dict(m.attrs)
    href = link_href(attrs)
    for key in ("href", "linktype", "anchor", "uuid"):
        attrs.pop(key, None)
    custom = attrs.pop("custom", None)
    if isinstance(custom, Mapping):
        attrs.update(custom)
    return ctx.render("a", clean_attrs({"href": href, **attrs}), [m.children])


def render_anchor(m: RenderedMark, ctx: RenderContext) -> Any:
    return ctx.render("span", clean_attrs({"id": m.attrs.get("id")}), [m.children])


def render_styled(m: RenderedMark, ctx: RenderContext) -> Any:
    attrs = dict(m.attrs)
    class_name = attrs.pop("class", None)
    return ctx.render(
        "span",
        clean_attrs({"class": class_name, "style": attrs_to_style(attrs)}),
        [m.children],
    )


def render_text_style(m: RenderedMark, ctx: RenderContext) -> Any:
    attrs = dict(m.attrs)
    class_name = attrs.pop("class", None)
    id_name = attrs.pop("id", None)
    return ctx.render(
        "span",
        clean_attrs({"class": class_name, "id": id_name, "style": attrs_to_style(attrs)}),
        [m.children],
    )


DEFAULT_RESOLVERS: Mapping[str, Any] = {
    # Nodes
    NodeType.DOC: render_doc,
    NodeType.TEXT: render_text,
    NodeType.PARAGRAPH: _container("p"),
    NodeType.HEADING: render_heading,
    NodeType.BLOCKQUOTE: _container("blockquote"),
    NodeType.BULLET_LIST: _container("ul"),
    NodeType.ORDERED_LIST: render_ordered_list,
    NodeType.LIST_ITEM: _container("li"),
    NodeType.CODE_BLOCK: render_code_block,
    NodeType.HORIZONTAL_RULE: render_horizontal_rule,
    NodeType.HARD_BREAK: render_hard_break,
    NodeType.IMAGE: render_image,
    NodeType.EMOJI: render_emoji,
    NodeType.BLOK: render_blok,
    NodeType.TABLE: render_table,
    NodeType.TABLE_ROW: _container("tr"),
    NodeType.TABLE_CELL: _table_cell("td"),
    NodeType.TABLE_HEADER: _table_cell("th"),
    NodeType.DETAILS: _container("details"),
    NodeType.DETAILS_SUMMARY: _container("summary"),
    NodeType.DETAILS_CONTENT: render_details_content,
    # Marks
    MarkType.BOLD: _simple_mark("strong"),
    MarkType.ITALIC: _simple_mark("em"),
    MarkType.UNDERLINE: _simple_mark("u"),
    MarkType.STRIKE: _simple_mark("s"),
    MarkType.CODE: _simple_mark("code"),
    MarkType.HIGHLIGHT: _simple_mark("mark"),
    MarkType.SUPERSCRIPT: _simple_mark("sup"),
    MarkType.SUBSCRIPT: _simple_mark("sub"),
    MarkType.LINK: render_link,
    MarkType.ANCHOR: render_anchor,
    MarkType.STYLED: render_styled,
    MarkType.TEXT_STYLE: render_text_style,
}


__all__ = [
    "DEFAULT_RESOLVERS",
    "block_attrs",
    "link_href",
    "table_cell_attrs",
]
