"""Split rendered HTML around embedded components.

Hosts that render components themselves (or resolve them asynchronously)
need the HTML between components and the component data in document
order. Rendering substitutes an ordered placeholder comment for every blok
body entry; the placeholders are then split out or replaced.

Example:
    for segment in segment_document(document):
        match segment:
            case HtmlSegment(content=html):
                out.write(html)
            case BlokSegment(blok=blok):
                out.write(render_component(blok))

"""

from __future__ import annotations

import asyncio
import re
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from tejido.config import DEFAULT_RENDER_OPTIONS, RenderOptions
from tejido.nodes import Node
from tejido.renderers.html import HtmlRenderer

BLOK_MARKER_PREFIX = "TEJIDO_BLOK_"
BLOK_MARKER_RE = re.compile(r"<!--TEJIDO_BLOK_(\d+)-->")

type AsyncComponentResolver = Callable[[Mapping[str, Any], str | None], Awaitable[str]]


@dataclass(frozen=True, slots=True)
class HtmlSegment:
    content: str
    type: str = field(default="html", init=False)


@dataclass(frozen=True, slots=True)
class BlokSegment:
    blok: Mapping[str, Any]
    blok_id: str | None = None
    type: str = field(default="blok", init=False)


type Segment = HtmlSegment | BlokSegment


class _BlokCollector:
    """Component resolver that records bloks and emits ordered markers."""

    __slots__ = ("entries",)

    def __init__(self) -> None:
        self.entries: list[tuple[Mapping[str, Any], str | None]] = []

    def __call__(self, blok: Mapping[str, Any], blok_id: str | None) -> str:
        self.entries.append((blok, blok_id))
        return f"<!--{BLOK_MARKER_PREFIX}{len(self.entries) - 1}-->"


def _render_with_markers(
    document: Node | Mapping[str, Any],
    options: RenderOptions | None,
) -> tuple[str, _BlokCollector]:
    collector = _BlokCollector()
    base = options or DEFAULT_RENDER_OPTIONS
    renderer = HtmlRenderer(replace(base, component_resolver=collector))
    return renderer.render_html(document), collector


def segment_document(
    document: Node | Mapping[str, Any],
    options: RenderOptions | None = None,
) -> list[Segment]:
    """Render ``document`` to HTML segments and blok segments in order.

    Whitespace-only HTML between components is dropped.
    """
    html, collector = _render_with_markers(document, options)
    segments: list[Segment] = []
    parts = BLOK_MARKER_RE.split(html)
    for index, part in enumerate(parts):
        if index % 2 == 0:
            if part.strip():
                segments.append(HtmlSegment(part))
            continue
        blok, blok_id = collector.entries[int(part)]
        segments.append(BlokSegment(blok, blok_id))
    return segments


async def render_html_async(
    document: Node | Mapping[str, Any],
    resolve_component: AsyncComponentResolver,
    options: RenderOptions | None = None,
) -> str:
    """Render to HTML, resolving components concurrently.

    Every component is awaited with :func:`asyncio.gather` and its result is
    spliced back at the position it occupied in the document.
    """
    html, collector = _render_with_markers(document, options)
    if not collector.entries:
        return html

    results = await asyncio.gather(
        *(resolve_component(blok, blok_id) for blok, blok_id in collector.entries)
    )
    return BLOK_MARKER_RE.sub(lambda m: results[int(m.group(1))] or "", html)


__all__ = [
    "BlokSegment",
    "HtmlSegment",
    "Segment",
    "render_html_async",
    "segment_document",
]
