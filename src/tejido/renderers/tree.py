"""Generic resolver-driven tree renderer.

Walks a canonical document depth-first in document order and asks the
resolver registered for each node type to build its output. The output
type is whatever the injected ``render_fn``/``text_fn`` produce; the
defaults produce HTML strings.

Thread Safety:
All per-render state lives in a RenderContext created for each render()
call. A TreeRenderer can be shared and called concurrently.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from tejido.config import DEFAULT_RENDER_OPTIONS, RenderOptions
from tejido.diagnostics import Diagnostic
from tejido.nodes import Node, NodeType
from tejido.registry import ResolverRegistry, create_registry
from tejido.renderers.context import RenderContext
from tejido.renderers.markup import default_render_fn, default_text_fn
from tejido.renderers.resolvers import DEFAULT_RESOLVERS
from tejido.serialization import from_dict
from tejido.validation import validate_document


@dataclass(frozen=True, slots=True)
class RenderResult[T]:
    """Rendered top-level outputs plus everything reported on the way."""

    output: list[T]
    diagnostics: list[Diagnostic]

    @property
    def ok(self) -> bool:
        return not self.diagnostics


class TreeRenderer[T]:
    """Render canonical documents through a resolver registry.

    Usage:
        >>> renderer = TreeRenderer()
        >>> renderer.render({"type": "doc", "content": [
        ...     {"type": "paragraph", "content": [{"type": "text", "text": "Hi"}]}
        ... ]})
        ['<p>Hi</p>']

    """

    __slots__ = ("_options", "_registry", "_render_fn", "_text_fn")

    def __init__(self, options: RenderOptions | None = None) -> None:
        self._options = options or DEFAULT_RENDER_OPTIONS
        self._registry = create_registry(DEFAULT_RESOLVERS, self._options.resolvers)
        self._render_fn = self._options.render_fn or default_render_fn
        self._text_fn = self._options.text_fn or default_text_fn

    @property
    def options(self) -> RenderOptions:
        return self._options

    @property
    def registry(self) -> ResolverRegistry:
        return self._registry

    def render(self, document: Node | Mapping[str, Any]) -> list[T]:
        """Render the top-level blocks of ``document``.

        Never raises for content problems. An invalid root yields ``[]``.
        """
        return self.render_with_diagnostics(document).output

    def render_with_diagnostics(self, document: Node | Mapping[str, Any]) -> RenderResult[T]:
        ctx = RenderContext(self._registry, self._options, self._render_fn, self._text_fn)

        problems = validate_document(document)
        root_invalid = any(not p.path for p in problems)
        for problem in problems:
            ctx.add(problem)
        if root_invalid:
            return RenderResult([], ctx.diagnostics)

        root = from_dict(document)
        if root.type != NodeType.DOC:
            return RenderResult([], ctx.diagnostics)
        return RenderResult(ctx.render_children(root), ctx.diagnostics)


def render(
    document: Node | Mapping[str, Any],
    options: RenderOptions | None = None,
    **overrides: Any,
) -> list[Any]:
    """Render ``document`` and return one output per top-level block.

    Keyword arguments override fields of ``options``.

    Example:
        >>> render({"type": "doc", "content": []})
        []
    """
    return TreeRenderer(_merge_options(options, overrides)).render(document)


def render_with_diagnostics(
    document: Node | Mapping[str, Any],
    options: RenderOptions | None = None,
    **overrides: Any,
) -> RenderResult[Any]:
    """Like :func:`render`, but also return the collected diagnostics."""
    return TreeRenderer(_merge_options(options, overrides)).render_with_diagnostics(document)


def _merge_options(options: RenderOptions | None, overrides: Mapping[str, Any]) -> RenderOptions:
    base = options or DEFAULT_RENDER_OPTIONS
    if not overrides:
        return base
    unknown = [k for k in overrides if k not in RenderOptions.__dataclass_fields__]
    if unknown:
        raise TypeError(f"Unknown render option(s): {', '.join(sorted(unknown))}")
    return replace(base, **overrides)


__all__ = [
    "RenderResult",
    "TreeRenderer",
    "render",
    "render_with_diagnostics",
]
