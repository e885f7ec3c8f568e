"""Exception classes for Plantilla.

Structural problems in templates are never raised: they are reported as
Diagnostic values on the ParseResult. These exceptions cover misuse of the
API and callers that opt into failing on errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from plantilla.location import Span


class PlantillaError(Exception):
    """Base exception for all Plantilla errors.

    Subclass this for specific error categories.
    """

    pass


class CompilerError(PlantillaError):
    """A template diagnostic promoted to an exception.

    Raised by ParseResult.raise_for_errors() for the first error-severity
    diagnostic.
    """

    def __init__(
        self,
        message: str,
        code: str = "error",
        span: Span | None = None,
        filename: str | None = None,
    ) -> None:
        """Initialize compiler error with optional location.

        Args:
            message: Error description
            code: Diagnostic code (e.g. "mismatched-tag")
            span: Source range the error refers to
            filename: Path to source file (optional)
        """
        self.message = message
        self.code = code
        self.span = span
        self.filename = filename

        location = ""
        if filename:
            location = f"{filename}:"
        if span is not None:
            location += f"{span.start.line}:{span.start.column}:"
        if location:
            location += " "

        super().__init__(f"{location}{message}")


class RenderError(PlantillaError):
    """Error during HTML rendering.

    Raised when the renderer is misconfigured or encounters a node
    it cannot produce output for.
    """

    pass
