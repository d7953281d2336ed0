"""Minimal logging utilities for Tejido.

Example:
    >>> from tejido.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.warning("Unknown node type: %s", "video")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "tejido." prefix.

    Example:
        >>> get_logger("mymodule").name
        'tejido.mymodule'
    """
    if not (name == "tejido" or name.startswith("tejido.")):
        name = f"tejido.{name}"
    return logging.getLogger(name)
