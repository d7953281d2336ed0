"""Structural validation and attribute normalization.

Validation walks a raw (JSON-shaped) document or a :class:`Node` tree and
reports problems as diagnostics. It has no side effects and never raises.

Example:
    >>> is_valid_document({"type": "doc", "content": []})
    True
    >>> is_valid_document({"type": "paragraph"})
    False
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tejido.diagnostics import Diagnostic, DiagnosticKind
from tejido.nodes import LinkType, Mark, MarkType, Node, NodeType


def is_valid_document(value: Any) -> bool:
    """Return True when ``value`` is a well-formed document rooted at ``doc``."""
    return not validate_document(value)


def validate_document(value: Any) -> list[Diagnostic]:
    """Collect structural diagnostics for a document.

    Accepts a mapping or a :class:`Node`. The root must be of type ``doc``.
    """
    diagnostics: list[Diagnostic] = []
    if isinstance(value, Node):
        if value.type != NodeType.DOC:
            diagnostics.append(_structural("root node must be of type 'doc'", "", value.type))
        return diagnostics

    if not isinstance(value, Mapping):
        diagnostics.append(_structural(f"expected a mapping, got {type(value).__name__}", ""))
        return diagnostics
    if value.get("type") != NodeType.DOC:
        diagnostics.append(
            _structural("root node must be of type 'doc'", "", _type_name(value.get("type")))
        )
        return diagnostics

    _check_node(value, "", diagnostics)
    return diagnostics


def check_node(value: Any, path: str = "") -> list[Diagnostic]:
    """Validate a single raw node and its subtree."""
    diagnostics: list[Diagnostic] = []
    _check_node(value, path, diagnostics)
    return diagnostics


def _check_node(value: Any, path: str, out: list[Diagnostic]) -> None:
    if isinstance(value, Node):
        return
    if not isinstance(value, Mapping):
        out.append(_structural(f"node must be a mapping, got {type(value).__name__}", path))
        return

    node_type = value.get("type")
    if not isinstance(node_type, str) or not node_type:
        out.append(_structural("node is missing a string 'type'", path))
        return

    attrs = value.get("attrs")
    if attrs is not None and not isinstance(attrs, Mapping):
        out.append(_structural("'attrs' must be a mapping", f"{path}/attrs", node_type))

    if node_type == NodeType.TEXT and not isinstance(value.get("text"), str):
        out.append(_structural("text node requires a string 'text'", f"{path}/text", node_type))

    marks = value.get("marks")
    if marks is not None:
        if not isinstance(marks, list | tuple):
            out.append(_structural("'marks' must be a list", f"{path}/marks", node_type))
        else:
            for i, m in enumerate(marks):
                if isinstance(m, Mark):
                    continue
                if not isinstance(m, Mapping) or not isinstance(m.get("type"), str):
                    out.append(_structural("mark requires a string 'type'", f"{path}/marks/{i}"))
                elif m.get("attrs") is not None and not isinstance(m.get("attrs"), Mapping):
                    out.append(
                        _structural("'attrs' must be a mapping", f"{path}/marks/{i}/attrs", m["type"])
                    )

    key = "content" if "content" in value else "children"
    children = value.get(key)
    if children is None:
        return
    if not isinstance(children, list | tuple):
        out.append(_structural(f"'{key}' must be a list", f"{path}/{key}", node_type))
        return
    for i, child in enumerate(children):
        _check_node(child, f"{path}/{key}/{i}", out)


def _structural(message: str, path: str, node_type: str | None = None) -> Diagnostic:
    return Diagnostic(DiagnosticKind.STRUCTURAL, message, path, node_type)


def _type_name(value: Any) -> str | None:
    return value if isinstance(value, str) else None


# =============================================================================
# Attribute normalization
# =============================================================================


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


def normalize_attrs(node_type: str, attrs: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return attrs with type-specific defaults and clamping applied.

    - heading ``level`` is clamped into 1..6 (non-integers become 1)
    - ordered_list ``order`` becomes an int >= 0 (negative values become 1)
    - code_block ``language`` becomes a string or None
    - link ``linktype`` falls back to ``url``

    Never raises.

    Example:
        >>> normalize_attrs("heading", {"level": 9})
        {'level': 6}
    """
    result = dict(attrs) if isinstance(attrs, Mapping) else {}

    match node_type:
        case NodeType.HEADING:
            result["level"] = min(6, max(1, _as_int(result.get("level"), 1)))
        case NodeType.ORDERED_LIST:
            order = _as_int(result.get("order"), 1)
            result["order"] = order if order >= 0 else 1
        case NodeType.CODE_BLOCK:
            language = result.get("language")
            result["language"] = str(language) if language not in (None, "") else None
        case MarkType.LINK:
            linktype = result.get("linktype")
            result["linktype"] = (
                LinkType(linktype) if linktype in LinkType.__members__.values() else LinkType.URL
            ).value
        case NodeType.BLOK:
            body = result.get("body")
            if isinstance(body, Mapping):
                result["body"] = [dict(body)]
            elif not isinstance(body, list | tuple):
                result["body"] = []
            else:
                result["body"] = [b for b in body if isinstance(b, Mapping)]

    return result


__all__ = [
    "check_node",
    "is_valid_document",
    "normalize_attrs",
    "validate_document",
]
