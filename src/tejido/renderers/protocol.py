"""Renderer protocols.

Example:
    from tejido.renderers.protocol import DocumentRenderer

    def render_page(renderer: DocumentRenderer[str], document) -> list[str]:
        return renderer.render(document)

"""

from collections.abc import Mapping
from typing import Any, Protocol

from tejido.nodes import Node


class RenderFn[T](Protocol):
    """Builds one output element. An empty tag means a fragment."""

    def __call__(self, tag: str, attrs: Mapping[str, Any] | None = None, children: Any = None) -> T: ...


class TextFn[T](Protocol):
    def __call__(self, text: str, attrs: Mapping[str, Any] | None = None) -> T: ...


class DocumentRenderer[T](Protocol):
    """Anything that renders a canonical document to a list of outputs.

    The built-in ``TreeRenderer`` conforms to this protocol.

    """

    def render(self, document: Node | Mapping[str, Any]) -> list[T]:
        """Render the top-level blocks of a document."""
        ...
