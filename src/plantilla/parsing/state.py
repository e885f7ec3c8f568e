"""Immutable parser state.

The parser never mutates a shared cursor. Every parse function receives a
ParserState and returns the next one alongside the node it built, so a
parse is a chain of pure transitions over ``(tokens, index, diagnostics)``.

Thread Safety:
ParserState is frozen; the token tuple and diagnostics tuple are shared
between successive states.

"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from plantilla.diagnostics import Diagnostic, Severity
from plantilla.location import Position, Span
from plantilla.tokens import Token, TokenType


@dataclass(frozen=True, slots=True)
class ParserState:
    """Position in a token stream plus the diagnostics found so far.

    Attributes:
        tokens: Complete token stream, always ending with EOF
        index: Index of the current (next unconsumed) token
        diagnostics: Diagnostics recorded so far, in order

    """

    tokens: tuple[Token, ...]
    index: int = 0
    diagnostics: tuple[Diagnostic, ...] = ()

    @classmethod
    def from_tokens(cls, tokens: Iterable[Token]) -> ParserState:
        """Create the initial state, appending an EOF token if missing."""
        stream = tuple(tokens)
        if not stream or stream[-1].type is not TokenType.EOF:
            end = stream[-1].span.end if stream else Position.origin()
            stream += (Token(TokenType.EOF, "", Span.at(end)),)
        return cls(tokens=stream)

    @property
    def current(self) -> Token:
        return self.tokens[self.index]

    @property
    def previous(self) -> Token | None:
        """The most recently consumed token, or None at the start."""
        return self.tokens[self.index - 1] if self.index > 0 else None

    @property
    def at_end(self) -> bool:
        return self.current.type is TokenType.EOF

    def advance(self) -> tuple[ParserState, Token]:
        """Consume the current token.

        EOF is never consumed: advancing at EOF returns the same state.

        Returns:
            (next state, consumed token)
        """
        token = self.current
        if token.type is TokenType.EOF:
            return self, token
        return replace(self, index=self.index + 1), token

    def skip(self) -> ParserState:
        """Consume the current token, discarding it."""
        return self.advance()[0]

    def consumed_end(self, default: Position) -> Position:
        """End position of the last consumed token, or default."""
        previous = self.previous
        return previous.span.end if previous is not None else default

    def diagnose(
        self,
        code: str,
        message: str,
        span: Span,
        severity: Severity = "error",
    ) -> ParserState:
        """Return a state with one more diagnostic recorded."""
        diagnostic = Diagnostic(code=code, message=message, span=span, severity=severity)
        return replace(self, diagnostics=(*self.diagnostics, diagnostic))
