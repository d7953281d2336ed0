"""Exception classes for Tejido.

Public render and parse entry points never raise for content problems;
they degrade and report through diagnostics instead. These exceptions
cover the strict paths and wrap resolver failures inside diagnostics.
"""

from __future__ import annotations

from tejido.diagnostics import Diagnostic, DiagnosticKind


class TejidoError(Exception):
    """Base exception for all Tejido errors.

    Subclass this for specific error categories.
    """

    pass


class DocumentError(TejidoError):
    """Structural problem in a canonical document.

    Raised by the strict decoding path when input is not a well-formed
    document tree.
    """

    def __init__(self, message: str, path: str = "") -> None:
        """Initialize document error.

        Args:
            message: Error description
            path: Pointer to the offending element (e.g. "/content/0/marks/1")
        """
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class ResolverError(TejidoError):
    """A resolver raised while rendering a node or mark."""

    def __init__(self, key: str, cause: BaseException) -> None:
        """Initialize resolver error.

        Args:
            key: Node or mark type whose resolver failed
            cause: Original exception
        """
        self.key = key
        self.cause = cause
        super().__init__(f"Resolver for '{key}' failed: {cause}")


class ParseError(TejidoError):
    """Input a parser could not map and degraded instead.

    Parsers never raise this. They record it inside a PARSE diagnostic and
    keep going with a literal or unwrapped rendition of the input.
    """

    def __init__(self, message: str, lineno: int | None = None, tag: str | None = None) -> None:
        """Initialize parse error.

        Args:
            message: Error description
            lineno: Markdown source line (1-indexed)
            tag: HTML element name
        """
        self.message = message
        self.lineno = lineno
        self.tag = tag

        if lineno is not None:
            location = f"line {lineno}: "
        elif tag is not None:
            location = f"<{tag}>: "
        else:
            location = ""
        super().__init__(f"{location}{message}")

    def as_diagnostic(self, node_type: str | None = None) -> Diagnostic:
        return Diagnostic(DiagnosticKind.PARSE, str(self), node_type=node_type, error=self)


__all__ = [
    "TejidoError",
    "DocumentError",
    "ResolverError",
    "ParseError",
]
