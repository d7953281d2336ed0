"""Parsers that populate the canonical document model.

Both parsers are independent of each other and of the renderer.
"""

from tejido.parsers.html import HtmlParser, html_to_document
from tejido.parsers.markdown import markdown_to_document

__all__ = ["HtmlParser", "html_to_document", "markdown_to_document"]
