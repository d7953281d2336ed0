"""Diagnostics collected while validating, rendering or parsing.

Rendering never raises for content problems. Each problem becomes a
:class:`Diagnostic` that is logged, handed to the caller's ``on_error``
callback and returned from :func:`tejido.render_with_diagnostics`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum


class DiagnosticKind(StrEnum):
    STRUCTURAL = "structural"
    RESOLVER = "resolver"
    UNKNOWN_NODE = "unknown_node"
    PARSE = "parse"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A recoverable problem.

    Attributes:
        kind: Problem category
        message: Human readable description
        path: Pointer to the element, e.g. "/content/2/marks/0"
        node_type: Type of the node or mark involved, if any
        error: Original exception for resolver failures
    """

    kind: DiagnosticKind
    message: str
    path: str = ""
    node_type: str | None = None
    error: BaseException | None = None

    def __str__(self) -> str:
        where = f" at {self.path}" if self.path else ""
        return f"[{self.kind}]{where}: {self.message}"


type ErrorCallback = Callable[[Diagnostic], None]


__all__ = ["Diagnostic", "DiagnosticKind", "ErrorCallback"]
