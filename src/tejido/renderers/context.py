"""Per-render state and the primitives resolvers call.

A RenderContext is created fresh for every top-level render call and
discarded afterwards. It owns the key counters, the diagnostics list and
the current path into the document, so a single TreeRenderer can be shared
across threads and reentrant calls.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from tejido.config import RenderOptions
from tejido.diagnostics import Diagnostic, DiagnosticKind
from tejido.errors import ResolverError
from tejido.nodes import Mark, Node
from tejido.registry import Resolver, ResolverRegistry, resolve
from tejido.renderers.protocol import RenderFn, TextFn

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RenderedMark:
    """What a mark resolver receives.

    ``children`` is the already-rendered output the mark wraps.
    """

    mark: Mark
    children: Any

    @property
    def type(self) -> str:
        return self.mark.type

    @property
    def attrs(self) -> Mapping[str, Any]:
        return self.mark.attrs


class RenderContext:
    """Per-render handle given to every resolver.

    Thread Safety:
        Never shared between render calls.
    """

    __slots__ = (
        "registry",
        "options",
        "diagnostics",
        "_render_fn",
        "_text_fn",
        "_counters",
        "_path",
    )

    def __init__(
        self,
        registry: ResolverRegistry,
        options: RenderOptions,
        render_fn: RenderFn[Any],
        text_fn: TextFn[Any],
    ) -> None:
        self.registry = registry
        self.options = options
        self.diagnostics: list[Diagnostic] = []
        self._render_fn = render_fn
        self._text_fn = text_fn
        self._counters: dict[str, int] = {}
        self._path: list[str] = []

    # =========================================================================
    # Output primitives
    # =========================================================================

    def render(self, tag: str, attrs: Mapping[str, Any] | None = None, children: Any = None) -> Any:
        """Build one output element through the configured render function.

        An empty ``tag`` asks for a fragment of ``children``. With
        ``keyed_resolvers`` enabled, each tagged element gets
        ``key="{tag}-{n}"`` numbered per tag within this render.
        """
        attrs = dict(attrs or {})
        if self.options.keyed_resolvers and tag:
            attrs["key"] = f"{tag}-{self._next(tag)}"
        return self._render_fn(tag, attrs, children)

    def render_text(self, text: str, attrs: Mapping[str, Any] | None = None) -> Any:
        """Build a text output through the configured text function."""
        attrs = dict(attrs or {})
        if self.options.keyed_resolvers:
            attrs["key"] = f"txt-{self._next('txt')}"
        return self._text_fn(text, attrs)

    def fragment(self, children: list[Any]) -> Any:
        return self._render_fn("", {}, children)

    def _next(self, name: str) -> int:
        count = self._counters.get(name, 0)
        self._counters[name] = count + 1
        return count

    # =========================================================================
    # Resolver access
    # =========================================================================

    def resolver(self, key: str) -> Resolver:
        """Effective resolver for ``key`` (empty resolver when unknown)."""
        return resolve(self.registry, key)

    def original(self, key: str) -> Resolver:
        """Pre-override default resolver for ``key``."""
        return self.registry.original(key)

    # =========================================================================
    # Tree walk
    # =========================================================================

    def render_node(self, node: Node) -> Any:
        """Render one node, isolating failures to this node's slot."""
        resolver = self.registry.get(node.type)
        if resolver is None:
            self.report(
                DiagnosticKind.UNKNOWN_NODE,
                f"No resolver for node type '{node.type}'",
                node.type,
            )
            return None
        try:
            return resolver(node, self)
        except Exception as e:
            self.report(
                DiagnosticKind.RESOLVER,
                str(ResolverError(node.type, e)),
                node.type,
                e,
            )
            return None

    def render_children(self, node: Node) -> list[Any]:
        """Render ``node.content`` in document order."""
        results = []
        for index, child in enumerate(node.content):
            self._path.append(f"content/{index}")
            try:
                results.append(self.render_node(child))
            finally:
                self._path.pop()
        return results

    def apply_marks(self, output: Any, marks: tuple[Mark, ...]) -> Any:
        """Wrap ``output`` in each mark, ``marks[0]`` innermost.

        Marks without a resolver leave the output unchanged.
        """
        for index, m in enumerate(marks):
            resolver = self.registry.get(m.type)
            if resolver is None:
                self._path.append(f"marks/{index}")
                try:
                    self.report(
                        DiagnosticKind.UNKNOWN_NODE,
                        f"No resolver for mark type '{m.type}'",
                        m.type,
                    )
                finally:
                    self._path.pop()
                continue
            output = resolver(RenderedMark(m, output), self)
        return output

    # =========================================================================
    # Host capabilities
    # =========================================================================

    def resolve_component(self, blok: Mapping[str, Any], blok_id: str | None) -> Any:
        """Render one embedded component through the host's resolver.

        Returns None when no component resolver is configured.
        """
        component_resolver = self.options.component_resolver
        if component_resolver is None:
            return None
        return component_resolver(blok, blok_id)

    def optimize_image(self, src: str) -> str:
        hook = self.options.optimize_image
        if hook is None or not src:
            return src
        return hook(src, self.options.image_filters)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    @property
    def path(self) -> str:
        return "".join(f"/{part}" for part in self._path)

    def report(
        self,
        kind: DiagnosticKind,
        message: str,
        node_type: str | None = None,
        error: BaseException | None = None,
    ) -> Diagnostic:
        """Record, log and forward a diagnostic."""
        diagnostic = Diagnostic(kind, message, self.path, node_type, error)
        self.diagnostics.append(diagnostic)
        logger.warning("%s", diagnostic, exc_info=error)
        if self.options.on_error is not None:
            self.options.on_error(diagnostic)
        return diagnostic

    def add(self, diagnostic: Diagnostic) -> None:
        """Record and forward a diagnostic produced outside the walk."""
        self.diagnostics.append(diagnostic)
        logger.warning("%s", diagnostic)
        if self.options.on_error is not None:
            self.options.on_error(diagnostic)


__all__ = ["RenderContext", "RenderedMark"]
