"""Shared fixtures for the tejido test suite."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from tejido.config import reset_markdown_config


@pytest.fixture(autouse=True)
def _fresh_markdown_config() -> Iterator[None]:
    """Every test starts and ends with the default Markdown configuration."""
    reset_markdown_config()
    yield
    reset_markdown_config()
