"""Tejido renderers.

Renderers walk canonical documents and build output through resolvers.

Available Renderers:
- TreeRenderer: generic over the output type of the injected render functions
- HtmlRenderer: TreeRenderer producing a single HTML string

Thread Safety:
Per-render state lives in a RenderContext created for each call.
Safe for concurrent use from multiple threads.

"""

from tejido.renderers.context import RenderContext, RenderedMark
from tejido.renderers.html import HtmlRenderer, render_html
from tejido.renderers.markup import default_render_fn, default_text_fn
from tejido.renderers.protocol import DocumentRenderer, RenderFn, TextFn
from tejido.renderers.resolvers import DEFAULT_RESOLVERS
from tejido.renderers.tree import RenderResult, TreeRenderer, render, render_with_diagnostics

__all__ = [
    "DEFAULT_RESOLVERS",
    "DocumentRenderer",
    "HtmlRenderer",
    "RenderContext",
    "RenderFn",
    "RenderResult",
    "RenderedMark",
    "TextFn",
    "TreeRenderer",
    "default_render_fn",
    "default_text_fn",
    "render",
    "render_html",
    "render_with_diagnostics",
]
