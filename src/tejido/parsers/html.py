"""HTML to canonical document parser.

BeautifulSoup (``html.parser`` builder) tokenizes the input; this module
walks the resulting tree and maps tags onto nodes and marks.

Mapping Rules:
- Block tags become block nodes; tags with no mapping are unwrapped and
  their children hoisted into the parent
- Loose inline content at a block-only level is wrapped in a paragraph
- Each mark-producing element wraps the marks of its descendants, so
  ``<a><strong>x</strong></a>`` gives ``marks == [bold, link]``
- Whitespace-only text between blocks is dropped; whitespace runs inside
  inline content collapse to one space; ``pre`` content stays verbatim

Attributes the model cannot hold are dropped and reported as logger
warnings plus PARSE diagnostics. Parsing never raises for malformed markup.

Example:
    >>> doc = html_to_document("<p>Hello <strong>world</strong></p>")
    >>> doc.content[0].content[1].marks[0].type
    'bold'

"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping
from dataclasses import replace
from typing import Any

from bs4 import BeautifulSoup, ParserRejectedMarkup
from bs4.element import NavigableString, PageElement, PreformattedString, Tag

from tejido.config import DEFAULT_HTML_PARSE_CONFIG, HtmlParseConfig
from tejido.diagnostics import Diagnostic
from tejido.errors import ParseError
from tejido.nodes import (
    MARK_TYPES,
    NODE_TYPES,
    LinkType,
    Mark,
    MarkType,
    Node,
    NodeType,
    merge_text_nodes,
)
from tejido.utils.logger import get_logger
from tejido.utils.text import collapse_whitespace

logger = get_logger(__name__)

# Tag -> node or mark type; None unwraps the tag
DEFAULT_TAG_MAP: Mapping[str, str | None] = {
    "p": NodeType.PARAGRAPH,
    "h1": NodeType.HEADING,
    "h2": NodeType.HEADING,
    "h3": NodeType.HEADING,
    "h4": NodeType.HEADING,
    "h5": NodeType.HEADING,
    "h6": NodeType.HEADING,
    "blockquote": NodeType.BLOCKQUOTE,
    "ul": NodeType.BULLET_LIST,
    "ol": NodeType.ORDERED_LIST,
    "li": NodeType.LIST_ITEM,
    "pre": NodeType.CODE_BLOCK,
    "hr": NodeType.HORIZONTAL_RULE,
    "br": NodeType.HARD_BREAK,
    "img": NodeType.IMAGE,
    "table": NodeType.TABLE,
    "tr": NodeType.TABLE_ROW,
    "td": NodeType.TABLE_CELL,
    "th": NodeType.TABLE_HEADER,
    "thead": None,
    "tbody": None,
    "tfoot": None,
    "details": NodeType.DETAILS,
    "summary": NodeType.DETAILS_SUMMARY,
    "strong": MarkType.BOLD,
    "b": MarkType.BOLD,
    "em": MarkType.ITALIC,
    "i": MarkType.ITALIC,
    "u": MarkType.UNDERLINE,
    "s": MarkType.STRIKE,
    "del": MarkType.STRIKE,
    "strike": MarkType.STRIKE,
    "code": MarkType.CODE,
    "a": MarkType.LINK,
    "mark": MarkType.HIGHLIGHT,
    "sup": MarkType.SUPERSCRIPT,
    "sub": MarkType.SUBSCRIPT,
}

BLOCK_NODE_TYPES = frozenset(
    {
        NodeType.PARAGRAPH,
        NodeType.HEADING,
        NodeType.BLOCKQUOTE,
        NodeType.BULLET_LIST,
        NodeType.ORDERED_LIST,
        NodeType.LIST_ITEM,
        NodeType.CODE_BLOCK,
        NodeType.HORIZONTAL_RULE,
        NodeType.TABLE,
        NodeType.TABLE_ROW,
        NodeType.TABLE_CELL,
        NodeType.TABLE_HEADER,
        NodeType.BLOK,
        NodeType.DETAILS,
        NodeType.DETAILS_SUMMARY,
        NodeType.DETAILS_CONTENT,
    }
)

# Unmapped tags that still sit at block level when unwrapped
BLOCK_CONTAINERS = frozenset(
    {
        "address",
        "article",
        "aside",
        "body",
        "caption",
        "center",
        "dd",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "header",
        "html",
        "main",
        "nav",
        "section",
        "tbody",
        "tfoot",
        "thead",
    }
)

DROPPED_TAGS = frozenset({"head", "noscript", "script", "style", "template"})

_BLOCK_ATTRIBUTES = frozenset({"class", "id", "style"})
_CELL_ATTRIBUTES = _BLOCK_ATTRIBUTES | {
    "align",
    "colspan",
    "data-background-color",
    "data-colwidth",
    "rowspan",
    "width",
}
_LINK_ATTRIBUTES = frozenset({"href", "target", "data-linktype", "data-uuid", "data-anchor"})

SUPPORTED_ATTRIBUTES: Mapping[str, frozenset[str]] = {
    NodeType.PARAGRAPH: _BLOCK_ATTRIBUTES,
    NodeType.HEADING: _BLOCK_ATTRIBUTES,
    NodeType.BLOCKQUOTE: _BLOCK_ATTRIBUTES,
    NodeType.BULLET_LIST: _BLOCK_ATTRIBUTES,
    NodeType.ORDERED_LIST: _BLOCK_ATTRIBUTES | {"start", "type"},
    NodeType.LIST_ITEM: _BLOCK_ATTRIBUTES,
    NodeType.CODE_BLOCK: _BLOCK_ATTRIBUTES,
    NodeType.HORIZONTAL_RULE: _BLOCK_ATTRIBUTES,
    NodeType.TABLE: _BLOCK_ATTRIBUTES,
    NodeType.TABLE_ROW: _BLOCK_ATTRIBUTES,
    NodeType.TABLE_CELL: _CELL_ATTRIBUTES,
    NodeType.TABLE_HEADER: _CELL_ATTRIBUTES | {"scope"},
    NodeType.IMAGE: frozenset({"src", "alt", "title"}),
    NodeType.BLOK: frozenset({"data-blok", "data-blok-id", "id"}),
    NodeType.EMOJI: frozenset({"data-type", "data-name", "data-emoji"}),
    NodeType.DETAILS: _BLOCK_ATTRIBUTES,
    NodeType.DETAILS_SUMMARY: _BLOCK_ATTRIBUTES,
    NodeType.DETAILS_CONTENT: _BLOCK_ATTRIBUTES | {"data-type"},
    MarkType.LINK: _LINK_ATTRIBUTES,
    MarkType.HIGHLIGHT: frozenset({"data-color"}),
}

_HEADING_TAG_RE = re.compile(r"^h([1-6])$")
_LANGUAGE_CLASS_RE = re.compile(r"^(?:language|lang)-(.+)$")


# =============================================================================
# Attribute helpers
# =============================================================================


def get_attr(element: Tag, name: str) -> str | None:
    """Return an attribute as a string; multi-valued attrs are space-joined."""
    value = element.get(name)
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)


def parse_style(style: str | None) -> dict[str, str]:
    """Parse an inline ``style`` attribute into a property dict.

    Example:
        >>> parse_style("color: red; text-align:center")
        {'color': 'red', 'text-align': 'center'}
    """
    if not style:
        return {}
    result: dict[str, str] = {}
    for declaration in style.split(";"):
        prop, sep, value = declaration.partition(":")
        if not sep:
            continue
        prop = prop.strip().lower()
        value = value.strip()
        if prop and value:
            result[prop] = value
    return result


def _as_int(value: str | None, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


# =============================================================================
# Parser
# =============================================================================


class HtmlParser:
    """Convert HTML into a canonical document.

    Create one per configuration and reuse it. A parse() call records its
    diagnostics on the instance, so concurrent calls need separate parsers.
    """

    __slots__ = ("_config", "_tag_map", "_diagnostics")

    def __init__(self, config: HtmlParseConfig | None = None) -> None:
        self._config = config or DEFAULT_HTML_PARSE_CONFIG
        self._diagnostics: list[Diagnostic] = []
        tag_map = dict(DEFAULT_TAG_MAP)
        for tag, target in self._config.tag_map.items():
            if target is not None and target not in NODE_TYPES and target not in MARK_TYPES:
                logger.warning("Tag map entry %r -> %r names no known type; unwrapping", tag, target)
                target = None
            tag_map[tag.lower()] = target
        self._tag_map = tag_map

    def parse(self, html: str, *, diagnostics: list[Diagnostic] | None = None) -> Node:
        """Parse an HTML string into a ``doc`` node.

        Markup the tokenizer rejects outright is kept as one paragraph of text.

        Args:
            html: HTML source
            diagnostics: Optional list that receives a PARSE diagnostic for
                everything reported while parsing
        """
        self._diagnostics = [] if diagnostics is None else diagnostics
        try:
            soup = BeautifulSoup(html, "html.parser")
        except ParserRejectedMarkup as e:
            self._report(None, f"HTML tokenizer rejected the markup ({e}), keeping it as text")
            inlines = finish_inline([Node(NodeType.TEXT, text=collapse_whitespace(html))])
            blocks = (Node(NodeType.PARAGRAPH, content=tuple(inlines)),) if inlines else ()
            return Node(NodeType.DOC, content=blocks)
        return Node(NodeType.DOC, content=tuple(self._blocks(soup.children)))

    # =========================================================================
    # Reporting
    # =========================================================================

    def _report(self, element: Tag | None, message: str, node_type: str | None = None) -> None:
        error = ParseError(message, tag=element.name if element is not None else None)
        logger.warning("%s", error)
        self._diagnostics.append(error.as_diagnostic(node_type))

    def _report_attributes(self, element: Tag, kind: str) -> None:
        supported = SUPPORTED_ATTRIBUTES.get(kind, frozenset())
        for name in element.attrs:
            if name not in supported:
                self._report(element, f"Unsupported attribute {name!r} dropped", kind)

    # =========================================================================
    # Classification
    # =========================================================================

    def _kind(self, element: Tag) -> str | None:
        name = element.name
        if name == "div" and element.has_attr("data-blok"):
            return NodeType.BLOK
        if name == "span" and get_attr(element, "data-type") == "emoji":
            return NodeType.EMOJI
        if name == "div" and get_attr(element, "data-type") == "detailsContent":
            return NodeType.DETAILS_CONTENT
        return self._tag_map.get(name)

    def _is_block(self, child: PageElement) -> bool:
        if not isinstance(child, Tag):
            return False
        kind = self._kind(child)
        if kind is None:
            return child.name in BLOCK_CONTAINERS
        return kind in BLOCK_NODE_TYPES

    # =========================================================================
    # Block level
    # =========================================================================

    def _blocks(self, children: Iterable[PageElement]) -> list[Node]:
        """Convert a run of siblings at block level.

        Consecutive inline siblings are gathered into one paragraph.
        """
        blocks: list[Node] = []
        pending: list[Node] = []
        for child in children:
            if isinstance(child, Tag) and child.name in DROPPED_TAGS:
                continue
            if self._is_block(child):
                self._flush_paragraph(pending, blocks)
                blocks.extend(self._block(child))
            else:
                pending.extend(self._inline(child, ()))
        self._flush_paragraph(pending, blocks)
        return blocks

    def _flush_paragraph(self, pending: list[Node], blocks: list[Node]) -> None:
        if not pending:
            return
        inlines = finish_inline(pending)
        pending.clear()
        if inlines:
            blocks.append(Node(NodeType.PARAGRAPH, content=tuple(inlines)))

    def _block(self, element: Tag) -> list[Node]:
        kind = self._kind(element)
        if kind is not None:
            self._report_attributes(element, kind)

        match kind:
            case None:
                return self._blocks(element.children)
            case NodeType.PARAGRAPH:
                return [Node(NodeType.PARAGRAPH, self._block_attrs(element), self._textblock(element))]
            case NodeType.HEADING:
                attrs = {"level": self._heading_level(element), **self._block_attrs(element)}
                return [Node(NodeType.HEADING, attrs, self._textblock(element))]
            case NodeType.BLOCKQUOTE:
                return [Node(NodeType.BLOCKQUOTE, self._block_attrs(element), self._blocks(element.children))]
            case NodeType.BULLET_LIST:
                return [Node(NodeType.BULLET_LIST, self._block_attrs(element), self._list_items(element))]
            case NodeType.ORDERED_LIST:
                order = _as_int(get_attr(element, "start"), 1)
                if order < 0:
                    order = 1
                attrs = {"order": order, **self._block_attrs(element)}
                return [Node(NodeType.ORDERED_LIST, attrs, self._list_items(element))]
            case NodeType.LIST_ITEM:
                return [self._list_item(element.children)]
            case NodeType.CODE_BLOCK:
                return [self._code_block(element)]
            case NodeType.HORIZONTAL_RULE:
                return [Node(NodeType.HORIZONTAL_RULE, self._block_attrs(element))]
            case NodeType.TABLE:
                return [Node(NodeType.TABLE, self._block_attrs(element), self._table_rows(element))]
            case NodeType.TABLE_ROW | NodeType.TABLE_CELL | NodeType.TABLE_HEADER:
                # Table parts outside a table keep only their content
                return self._blocks(element.children)
            case NodeType.BLOK:
                return self._blok(element)
            case NodeType.DETAILS:
                return [self._details(element)]
            case NodeType.DETAILS_SUMMARY:
                # A summary outside details keeps its text as a paragraph
                return [Node(NodeType.PARAGRAPH, self._block_attrs(element), self._textblock(element))]
            case _:
                return self._blocks(element.children)

    def _block_attrs(self, element: Tag) -> dict[str, Any]:
        """Keep ``class``, ``id`` and ``text-align`` from a block element."""
        attrs: dict[str, Any] = {}
        class_name = get_attr(element, "class")
        if class_name:
            attrs["class"] = class_name
        element_id = get_attr(element, "id")
        if element_id:
            attrs["id"] = element_id
        style = parse_style(get_attr(element, "style"))
        text_align = style.pop("text-align", None)
        if text_align:
            attrs["textAlign"] = text_align
        for prop in style:
            self._report(element, f"Unsupported style {prop!r} dropped")
        return attrs

    def _heading_level(self, element: Tag) -> int:
        match = _HEADING_TAG_RE.match(element.name)
        return int(match.group(1)) if match else 1

    def _textblock(self, element: Tag) -> list[Node]:
        inlines: list[Node] = []
        for child in element.children:
            inlines.extend(self._inline(child, ()))
        return finish_inline(inlines)

    def _list_items(self, element: Tag) -> list[Node]:
        """Collect ``li`` children; stray content joins the previous item."""
        items: list[Node] = []
        stray: list[PageElement] = []

        def flush_stray() -> None:
            blocks = self._blocks(stray)
            stray.clear()
            if not blocks:
                return
            if items:
                items[-1] = items[-1].with_content(items[-1].content + tuple(blocks))
            else:
                items.append(Node(NodeType.LIST_ITEM, content=tuple(blocks)))

        for child in element.children:
            if isinstance(child, Tag) and self._kind(child) == NodeType.LIST_ITEM:
                flush_stray()
                self._report_attributes(child, NodeType.LIST_ITEM)
                items.append(self._list_item(child.children))
            else:
                stray.append(child)
        flush_stray()
        return items

    def _list_item(self, children: Iterable[PageElement]) -> Node:
        blocks = self._blocks(children)
        if not blocks:
            blocks = [Node(NodeType.PARAGRAPH)]
        return Node(NodeType.LIST_ITEM, content=tuple(blocks))

    def _code_block(self, element: Tag) -> Node:
        language = None
        candidates = [element]
        code = element.find("code")
        if isinstance(code, Tag):
            candidates.insert(0, code)
        for candidate in candidates:
            for class_name in (get_attr(candidate, "class") or "").split():
                match = _LANGUAGE_CLASS_RE.match(class_name)
                if match:
                    language = match.group(1)
                    break
            if language:
                break

        source = element.get_text()
        if source.startswith("\n"):
            source = source[1:]
        content = (Node(NodeType.TEXT, text=source),) if source else ()
        return Node(NodeType.CODE_BLOCK, {"language": language}, content)

    def _table_rows(self, element: Tag) -> list[Node]:
        """Rows of a table, looking through thead/tbody/tfoot wrappers."""
        rows: list[Node] = []
        for child in element.children:
            if not isinstance(child, Tag) or child.name in DROPPED_TAGS:
                continue
            kind = self._kind(child)
            if kind == NodeType.TABLE_ROW:
                self._report_attributes(child, kind)
                rows.append(Node(NodeType.TABLE_ROW, content=tuple(self._table_cells(child))))
            elif kind is None and child.name != "caption":
                rows.extend(self._table_rows(child))
        return rows

    def _table_cells(self, row: Tag) -> list[Node]:
        cells: list[Node] = []
        for child in row.children:
            if not isinstance(child, Tag):
                continue
            kind = self._kind(child)
            if kind not in (NodeType.TABLE_CELL, NodeType.TABLE_HEADER):
                continue
            self._report_attributes(child, kind)
            content = self._blocks(child.children) or [Node(NodeType.PARAGRAPH)]
            cells.append(Node(kind, self._cell_attrs(child), tuple(content)))
        return cells

    def _cell_attrs(self, cell: Tag) -> dict[str, Any]:
        style = parse_style(get_attr(cell, "style"))
        colwidth = None
        raw_width = get_attr(cell, "data-colwidth")
        if raw_width:
            widths = [_as_int(part, 0) for part in raw_width.split(",")]
            colwidth = [w for w in widths if w > 0] or None
        else:
            width = _as_int(get_attr(cell, "width") or style.get("width", "").removesuffix("px"), 0)
            if width > 0:
                colwidth = [width]
        attrs: dict[str, Any] = {
            "colspan": max(1, _as_int(get_attr(cell, "colspan"), 1)),
            "rowspan": max(1, _as_int(get_attr(cell, "rowspan"), 1)),
            "colwidth": colwidth,
        }
        background = get_attr(cell, "data-background-color") or style.get("background-color")
        if background:
            attrs["backgroundColor"] = background
        text_align = style.get("text-align") or get_attr(cell, "align")
        if text_align:
            attrs["textAlign"] = text_align
        return attrs

    def _blok(self, element: Tag) -> list[Node]:
        raw = get_attr(element, "data-blok") or ""
        try:
            data = json.loads(raw) if raw.strip() else []
        except ValueError:
            self._report(element, "Invalid JSON in data-blok, unwrapping element", NodeType.BLOK)
            return self._blocks(element.children)

        if isinstance(data, dict):
            body = [data]
        elif isinstance(data, list) and all(isinstance(item, dict) for item in data):
            body = data
        else:
            self._report(
                element, "data-blok must hold an object or a list of objects, unwrapping element", NodeType.BLOK
            )
            return self._blocks(element.children)

        blok_id = get_attr(element, "data-blok-id") or get_attr(element, "id")
        return [Node(NodeType.BLOK, {"id": blok_id, "body": body})]

    def _details(self, element: Tag) -> Node:
        """Build ``details`` > (``detailsSummary``, ``detailsContent``).

        The first ``summary`` child is the summary. Everything else, looking
        through a ``div[data-type=detailsContent]`` wrapper, is the content.
        """
        summary = None
        rest: list[PageElement] = []
        for child in element.children:
            kind = self._kind(child) if isinstance(child, Tag) else None
            if kind == NodeType.DETAILS_SUMMARY and summary is None:
                self._report_attributes(child, kind)
                summary = Node(NodeType.DETAILS_SUMMARY, self._block_attrs(child), self._textblock(child))
            elif kind == NodeType.DETAILS_CONTENT:
                self._report_attributes(child, kind)
                rest.extend(child.children)
            else:
                rest.append(child)

        blocks = self._blocks(rest) or [Node(NodeType.PARAGRAPH)]
        return Node(
            NodeType.DETAILS,
            self._block_attrs(element),
            (summary or Node(NodeType.DETAILS_SUMMARY), Node(NodeType.DETAILS_CONTENT, content=tuple(blocks))),
        )

    # =========================================================================
    # Inline level
    # =========================================================================

    def _inline(self, child: PageElement, marks: tuple[Mark, ...]) -> list[Node]:
        """Convert inline content; ``marks`` is outermost first."""
        if isinstance(child, PreformattedString):
            # Comments, CDATA, doctype
            return []
        if isinstance(child, NavigableString):
            return [Node(NodeType.TEXT, text=collapse_whitespace(str(child)), marks=marks[::-1])]
        if not isinstance(child, Tag) or child.name in DROPPED_TAGS:
            return []

        kind = self._kind(child)
        match kind:
            case NodeType.HARD_BREAK:
                return [Node(NodeType.HARD_BREAK)]
            case NodeType.IMAGE:
                self._report_attributes(child, kind)
                return [self._image(child)]
            case NodeType.EMOJI:
                self._report_attributes(child, kind)
                return [self._emoji(child)]
            case str() if kind in MARK_TYPES:
                new_marks = (self._mark(child, kind),)
            case None if child.name == "span":
                new_marks = self._span_marks(child)
            case _:
                new_marks = ()

        inner = marks + new_marks
        result: list[Node] = []
        for grandchild in child.children:
            result.extend(self._inline(grandchild, inner))
        return result

    def _image(self, element: Tag) -> Node:
        return Node(
            NodeType.IMAGE,
            {
                "src": get_attr(element, "src") or "",
                "alt": get_attr(element, "alt") or "",
                "title": get_attr(element, "title") or "",
            },
        )

    def _emoji(self, element: Tag) -> Node:
        fallback = None
        img = element.find("img")
        if isinstance(img, Tag):
            fallback = get_attr(img, "src")
        return Node(
            NodeType.EMOJI,
            {
                "name": get_attr(element, "data-name"),
                "emoji": get_attr(element, "data-emoji") or element.get_text().strip() or None,
                "fallbackImage": fallback,
            },
        )

    def _mark(self, element: Tag, kind: str) -> Mark:
        if kind == MarkType.LINK:
            return self._link(element)
        self._report_attributes(element, kind)
        if kind == MarkType.HIGHLIGHT:
            color = get_attr(element, "data-color")
            return Mark(kind, {"color": color} if color else {})
        return Mark(kind)

    def _link(self, element: Tag) -> Mark:
        href = get_attr(element, "href")
        linktype = get_attr(element, "data-linktype")
        if linktype not in {t.value for t in LinkType}:
            linktype = LinkType.URL
            if href and href.startswith("mailto:"):
                linktype = LinkType.EMAIL
                href = href.removeprefix("mailto:")

        attrs: dict[str, Any] = {
            "href": href,
            "linktype": linktype,
            "target": get_attr(element, "target"),
            "uuid": get_attr(element, "data-uuid"),
            "anchor": get_attr(element, "data-anchor"),
        }

        extra = [name for name in element.attrs if name not in _LINK_ATTRIBUTES]
        if extra and self._config.allow_custom_attributes:
            attrs["custom"] = {name: get_attr(element, name) for name in extra}
        else:
            for name in extra:
                self._report(element, f"Unsupported attribute {name!r} dropped", MarkType.LINK)
        return Mark(MarkType.LINK, attrs)

    def _span_marks(self, element: Tag) -> tuple[Mark, ...]:
        """Marks for a plain ``span``: anchor, styled and textStyle."""
        marks: list[Mark] = []
        element_id = get_attr(element, "id")
        if element_id:
            marks.append(Mark(MarkType.ANCHOR, {"id": element_id}))

        class_name = get_attr(element, "class")
        if class_name:
            allowed = [c for c in class_name.split() if c in self._config.allowed_styles]
            if allowed:
                marks.append(Mark(MarkType.STYLED, {"class": " ".join(allowed)}))
            rejected = [c for c in class_name.split() if c not in self._config.allowed_styles]
            if rejected:
                self._report(element, f"Classes {rejected!r} are not allowed styles, dropped", MarkType.STYLED)

        style = parse_style(get_attr(element, "style"))
        color = style.pop("color", None)
        if color:
            marks.append(Mark(MarkType.TEXT_STYLE, {"color": color}))
        for prop in style:
            self._report(element, f"Unsupported style {prop!r} dropped")

        for name in element.attrs:
            if name not in ("id", "class", "style"):
                self._report(element, f"Unsupported attribute {name!r} dropped")
        return tuple(marks)


# =============================================================================
# Whitespace
# =============================================================================


def finish_inline(nodes: Iterable[Node]) -> list[Node]:
    """Trim a textblock's inline run.

    Leading and trailing whitespace is removed, a space following another
    space (or a hard break) is dropped, and adjacent text with equal marks
    merges.
    """
    result: list[Node] = []
    for node in nodes:
        if node.is_text:
            value = node.text or ""
            if value.startswith(" ") and (not result or _ends_with_space(result[-1])):
                value = value[1:]
            if not value:
                continue
            node = replace(node, text=value)
        elif node.type == NodeType.HARD_BREAK:
            _strip_trailing_space(result)
        result.append(node)

    _strip_trailing_space(result)
    return merge_text_nodes(result)


def _ends_with_space(node: Node) -> bool:
    if node.is_text:
        return (node.text or "").endswith(" ")
    return node.type == NodeType.HARD_BREAK


def _strip_trailing_space(nodes: list[Node]) -> None:
    while nodes and nodes[-1].is_text:
        value = (nodes[-1].text or "").rstrip(" ")
        if value:
            nodes[-1] = replace(nodes[-1], text=value)
            return
        nodes.pop()


def html_to_document(
    html: str,
    options: HtmlParseConfig | Mapping[str, Any] | None = None,
    *,
    diagnostics: list[Diagnostic] | None = None,
) -> Node:
    """Parse HTML into a canonical ``doc`` node.

    Args:
        html: HTML source (fragment or full document)
        options: HtmlParseConfig, a dict of its fields, or None for defaults
        diagnostics: Optional list that receives PARSE diagnostics for
            dropped attributes, unwrapped bloks and rejected markup

    Returns:
        Document root node
    """
    if options is None or isinstance(options, HtmlParseConfig):
        config = options
    else:
        config = HtmlParseConfig.from_dict(options)
    return HtmlParser(config).parse(html, diagnostics=diagnostics)


__all__ = [
    "BLOCK_CONTAINERS",
    "DEFAULT_TAG_MAP",
    "HtmlParser",
    "finish_inline",
    "html_to_document",
    "parse_style",
]
