"""Utility modules for Tejido.

Provides:
- text: escaping and attribute serialization helpers
- logger: get_logger for logging
"""

from tejido.utils.logger import get_logger
from tejido.utils.text import (
    attrs_to_string,
    attrs_to_style,
    clean_attrs,
    collapse_whitespace,
    escape_html,
    join_styles,
)

__all__ = [
    "attrs_to_string",
    "attrs_to_style",
    "clean_attrs",
    "collapse_whitespace",
    "escape_html",
    "get_logger",
    "join_styles",
]
