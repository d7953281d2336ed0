"""HTML string rendering on top of the tree renderer.

Thread Safety:
HtmlRenderer keeps no per-render state and can be shared across threads.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from tejido.config import RenderOptions
from tejido.nodes import Node
from tejido.renderers.markup import join_children
from tejido.renderers.tree import RenderResult, TreeRenderer


class HtmlRenderer(TreeRenderer[str]):
    """Render a document to a single HTML string.

    Usage:
        >>> HtmlRenderer().render_html({"type": "doc", "content": [
        ...     {"type": "heading", "attrs": {"level": 2},
        ...      "content": [{"type": "text", "text": "Title"}]}
        ... ]})
        '<h2>Title</h2>'

    """

    __slots__ = ()

    def render_html(self, document: Node | Mapping[str, Any]) -> str:
        return join_children(self.render(document))

    def render_html_with_diagnostics(self, document: Node | Mapping[str, Any]) -> RenderResult[str]:
        result = self.render_with_diagnostics(document)
        return RenderResult([join_children(result.output)], result.diagnostics)


def render_html(
    document: Node | Mapping[str, Any],
    options: RenderOptions | None = None,
) -> str:
    """Render ``document`` to an HTML string."""
    return HtmlRenderer(options).render_html(document)


__all__ = ["HtmlRenderer", "render_html"]
