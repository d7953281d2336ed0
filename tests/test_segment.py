"""Tests for component segmentation and async component resolution."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import Any

from tejido.config import RenderOptions
from tejido.nodes import Node, doc, paragraph, text
from tejido.segment import BlokSegment, HtmlSegment, render_html_async, segment_document


def _blok(*components: str, blok_id: str | None = None) -> Node:
    return Node("blok", {"id": blok_id, "body": [{"component": c} for c in components]})


DOCUMENT = doc(
    paragraph(text("intro")),
    _blok("hero", "cta", blok_id="b1"),
    paragraph(text("outro")),
    _blok("footer"),
)


class TestSegmentDocument:
    """HTML and blok segments in document order."""

    def test_order(self) -> None:
        segments = segment_document(DOCUMENT)
        assert segments == [
            HtmlSegment("<p>intro</p>"),
            BlokSegment({"component": "hero"}, "b1"),
            BlokSegment({"component": "cta"}, "b1"),
            HtmlSegment("<p>outro</p>"),
            BlokSegment({"component": "footer"}, None),
        ]
        assert [s.type for s in segments] == ["html", "blok", "blok", "html", "blok"]

    def test_no_bloks(self) -> None:
        assert segment_document(doc(paragraph(text("a")))) == [HtmlSegment("<p>a</p>")]

    def test_empty_document(self) -> None:
        assert segment_document(doc()) == []

    def test_options_respected(self) -> None:
        def upper(node: Node, ctx: Any) -> Any:
            return ctx.render_text((node.text or "").upper())

        segments = segment_document(doc(paragraph(text("a"))), RenderOptions(resolvers={"text": upper}))
        assert segments == [HtmlSegment("<p>A</p>")]

    def test_marker_lookalike_in_text_is_escaped(self) -> None:
        segments = segment_document(doc(paragraph(text("<!--TEJIDO_BLOK_0-->"))))
        assert segments == [HtmlSegment("<p>&lt;!--TEJIDO_BLOK_0--&gt;</p>")]


class TestRenderHtmlAsync:
    """Components resolved concurrently and spliced in place."""

    def test_splices_results(self) -> None:
        started: list[str] = []

        async def resolve(blok: Mapping[str, Any], blok_id: str | None) -> str:
            started.append(blok["component"])
            await asyncio.sleep(0)
            return f"<x-{blok['component']}></x-{blok['component']}>"

        html = asyncio.run(render_html_async(DOCUMENT, resolve))
        assert html == (
            "<p>intro</p><x-hero></x-hero><x-cta></x-cta><p>outro</p><x-footer></x-footer>"
        )
        assert started == ["hero", "cta", "footer"]

    def test_without_bloks_never_calls_resolver(self) -> None:
        async def resolve(blok: Mapping[str, Any], blok_id: str | None) -> str:
            raise AssertionError("not called")

        assert asyncio.run(render_html_async(doc(paragraph(text("a"))), resolve)) == "<p>a</p>"

    def test_empty_result_removes_marker(self) -> None:
        async def resolve(blok: Mapping[str, Any], blok_id: str | None) -> str:
            return ""

        assert asyncio.run(render_html_async(DOCUMENT, resolve)) == "<p>intro</p><p>outro</p>"
