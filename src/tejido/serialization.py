"""JSON round-trip for canonical documents.

Converts between the JSON-shaped storage format and :class:`Node` trees.
Decoding is lenient: malformed children are dropped and attributes are
normalized, with every problem reported as a diagnostic. Pass
``strict=True`` to raise :class:`DocumentError` instead.

Example:
    from tejido.serialization import from_json, to_json

    node = from_json('{"type": "doc", "content": []}')
    assert from_json(to_json(node)) == node

Thread Safety:
    All functions are pure, safe to call from any thread.

"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from tejido.diagnostics import Diagnostic
from tejido.errors import DocumentError
from tejido.nodes import Mark, Node, NodeType
from tejido.validation import check_node, normalize_attrs, validate_document


def to_dict(node: Node) -> dict[str, Any]:
    """Convert a node to its JSON-compatible storage shape.

    Empty ``attrs``, ``content`` and ``marks`` are omitted, except that a
    ``doc`` always carries ``content``.
    """
    result: dict[str, Any] = {"type": node.type}
    if node.attrs:
        result["attrs"] = dict(node.attrs)
    if node.text is not None:
        result["text"] = node.text
    if node.marks:
        result["marks"] = [_mark_to_dict(m) for m in node.marks]
    if node.content or node.type == NodeType.DOC:
        result["content"] = [to_dict(child) for child in node.content]
    return result


def _mark_to_dict(m: Mark) -> dict[str, Any]:
    result: dict[str, Any] = {"type": m.type}
    if m.attrs:
        result["attrs"] = dict(m.attrs)
    return result


def from_dict(
    data: Mapping[str, Any] | Node,
    *,
    strict: bool = False,
    diagnostics: list[Diagnostic] | None = None,
) -> Node:
    """Build a :class:`Node` tree from a mapping.

    Accepts ``children`` as an alias for ``content``. Unknown types are
    kept as-is so renderers can report them.

    Args:
        data: Raw node mapping (a Node passes through unchanged)
        strict: Raise on the first structural problem
        diagnostics: Optional list that receives structural diagnostics

    Raises:
        DocumentError: Only when ``strict`` is set and the input is malformed.

    """
    if isinstance(data, Node):
        return data

    problems = check_node(data)
    if problems:
        if strict:
            first = problems[0]
            raise DocumentError(first.message, first.path)
        if diagnostics is not None:
            diagnostics.extend(problems)

    node = _decode_node(data)
    if node is None:
        if strict:
            raise DocumentError("node is missing a string 'type'")
        return Node(NodeType.DOC)
    return node


def _decode_node(data: Any) -> Node | None:
    if isinstance(data, Node):
        return data
    if not isinstance(data, Mapping) or not isinstance(data.get("type"), str):
        return None

    node_type = data["type"]
    raw_children = data.get("content", data.get("children"))
    content: list[Node] = []
    if isinstance(raw_children, list | tuple):
        for raw in raw_children:
            child = _decode_node(raw)
            if child is not None:
                content.append(child)

    marks: list[Mark] = []
    raw_marks = data.get("marks")
    if isinstance(raw_marks, list | tuple):
        for raw in raw_marks:
            decoded = _decode_mark(raw)
            if decoded is not None:
                marks.append(decoded)

    raw_text = data.get("text")
    text = raw_text if isinstance(raw_text, str) else None
    if node_type == NodeType.TEXT and text is None:
        text = ""

    return Node(
        node_type,
        normalize_attrs(node_type, data.get("attrs")),
        tuple(content),
        text,
        tuple(marks),
    )


def _decode_mark(data: Any) -> Mark | None:
    if isinstance(data, Mark):
        return data
    if not isinstance(data, Mapping) or not isinstance(data.get("type"), str):
        return None
    return Mark(data["type"], normalize_attrs(data["type"], data.get("attrs")))


def to_json(node: Node, *, indent: int | None = None) -> str:
    """Serialize a node tree to a JSON string with sorted keys."""
    return json.dumps(to_dict(node), sort_keys=True, indent=indent, ensure_ascii=False)


def from_json(data: str, *, strict: bool = False) -> Node:
    """Deserialize a document from a JSON string.

    Raises:
        ValueError: If ``data`` is not valid JSON.
        DocumentError: If ``strict`` and the JSON is not a ``doc`` tree.

    """
    raw = json.loads(data)
    if strict:
        problems = validate_document(raw)
        if problems:
            raise DocumentError(problems[0].message, problems[0].path)
    return from_dict(raw, strict=strict)


__all__ = ["from_dict", "from_json", "to_dict", "to_json"]
