"""Text and attribute helpers shared by renderers and parsers.

Example:
    >>> from tejido.utils.text import attrs_to_string
    >>> attrs_to_string({"href": "/a", "target": None})
    'href="/a"'
"""

from __future__ import annotations

import html as html_module
import re
from collections.abc import Mapping
from typing import Any

_WHITESPACE_RE = re.compile(r"[ \t\n\r\f\v]+")


def escape_html(text: str) -> str:
    """Escape HTML special characters.

    Converts ``& < > " '`` to entities so the result is safe both as
    element content and as an attribute value.

    Examples:
        >>> escape_html("<b>Tom & 'Jerry'</b>")
        '&lt;b&gt;Tom &amp; &#x27;Jerry&#x27;&lt;/b&gt;'
    """
    if not text:
        return ""

    return html_module.escape(text, quote=True)


def clean_attrs(attrs: Mapping[str, Any]) -> dict[str, Any]:
    """Drop attributes whose value is None or an empty string."""
    return {k: v for k, v in attrs.items() if v is not None and v != ""}


def attrs_to_style(attrs: Mapping[str, Any]) -> str:
    """Serialize a mapping as inline CSS declarations.

    Examples:
        >>> attrs_to_style({"color": "red", "font-size": "12px"})
        'color: red; font-size: 12px'
    """
    return "; ".join(f"{key}: {value}" for key, value in clean_attrs(attrs).items())


def attrs_to_string(attrs: Mapping[str, Any]) -> str:
    """Serialize attributes for an HTML start tag.

    None values are dropped, ``True`` renders as a bare attribute and
    mapping values are written as inline style.
    """
    parts: list[str] = []
    for key, value in attrs.items():
        if value is None or value is False:
            continue
        if value is True:
            parts.append(key)
            continue
        if isinstance(value, Mapping):
            value = attrs_to_style(value)
            if not value:
                continue
        parts.append(f'{key}="{escape_html(str(value))}"')
    return " ".join(parts)


def join_styles(*styles: str | None) -> str | None:
    """Join CSS fragments, each terminated by a semicolon.

    Returns None when every fragment is empty.
    """
    parts = []
    for style in styles:
        if not style:
            continue
        style = style.strip()
        parts.append(style if style.endswith(";") else f"{style};")
    return " ".join(parts) or None


def collapse_whitespace(text: str) -> str:
    """Collapse runs of HTML whitespace into a single space."""
    return _WHITESPACE_RE.sub(" ", text)


__all__ = [
    "attrs_to_string",
    "attrs_to_style",
    "clean_attrs",
    "collapse_whitespace",
    "escape_html",
    "join_styles",
]
