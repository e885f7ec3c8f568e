"""Positioned diagnostics and the parse result container.

The parser never raises for malformed templates. Every recoverable problem
becomes a Diagnostic carrying a code, a message, a Span and a severity.

Severities:
    error: likely-invalid document (mismatched or unclosed tag/expression)
    warning: redundancy or style issue that does not block parsing
    info: informational note

Thread Safety:
Diagnostic and ParseResult are frozen and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from plantilla.errors import CompilerError
from plantilla.location import Span
from plantilla.nodes import Fragment

type Severity = Literal["error", "warning", "info"]

MISMATCHED_TAG = "mismatched-tag"
UNCLOSED_TAG = "unclosed-tag"
UNCLOSED_EXPRESSION = "unclosed-expression"
UNCLOSED_FRONTMATTER = "unclosed-frontmatter"
DUPLICATE_DIRECTIVE = "duplicate-directive"
UNEXPECTED_TOKEN = "unexpected-token"
INTERNAL_ERROR = "internal-error"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A positioned, severity-tagged message produced during parsing.

    Attributes:
        code: Stable machine-readable code (e.g. "unclosed-tag")
        message: Human-readable description
        span: Source range the diagnostic refers to
        severity: "error", "warning" or "info"
        filename: Source file path, when known

    """

    code: str
    message: str
    span: Span
    severity: Severity = "error"
    filename: str | None = None

    @property
    def loc(self) -> Span:
        """Alias for span."""
        return self.span

    def __str__(self) -> str:
        prefix = f"{self.filename}:" if self.filename else ""
        return f"{prefix}{self.span}: {self.severity}[{self.code}]: {self.message}"

    def to_error(self) -> CompilerError:
        """Convert to an exception for callers that fail fast."""
        return CompilerError(self.message, self.code, self.span, self.filename)


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Result of a parse call: the AST plus every diagnostic found.

    Attributes:
        ast: Root Fragment (always present, empty on internal failure)
        diagnostics: Diagnostics in the order they were found

    """

    ast: Fragment
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == "error")

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == "warning")

    @property
    def ok(self) -> bool:
        """True if no error-severity diagnostics were recorded."""
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise CompilerError for the first error diagnostic, if any.

        Raises:
            CompilerError: If any diagnostic has severity "error"
        """
        for diagnostic in self.diagnostics:
            if diagnostic.severity == "error":
                raise diagnostic.to_error()
