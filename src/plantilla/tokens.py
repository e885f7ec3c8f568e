"""Token and TokenType definitions for the template lexer.

The lexer produces a flat list of Token objects that the parser consumes.
Each Token has a type, the raw text it was scanned from, and a Span.

Thread Safety:
Token is frozen (immutable) and safe to share across threads.
TokenType is an enum (inherently immutable).

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from plantilla.location import Position, Span

# Appended to expression text when input ended before the closing brace.
# The parser strips it and marks the Expression node incomplete.
INCOMPLETE_MARKER = "\x00incomplete"


class TokenType(Enum):
    """Token types produced by the lexer.

    Organized by the lexer mode that emits them.

    """

    # Document structure
    EOF = auto()
    TEXT = auto()

    # Markup
    TAG_OPEN = auto()  # <name
    TAG_END = auto()  # > finishing a start tag
    TAG_CLOSE = auto()  # </name>
    TAG_SELF_CLOSE = auto()  # />
    COMMENT = auto()  # <!-- ... -->
    DOCTYPE = auto()  # <!DOCTYPE ...>

    # Attributes
    ATTRIBUTE_NAME = auto()
    ATTRIBUTE_VALUE = auto()  # raw value including quotes or braces

    # Expressions
    EXPRESSION_START = auto()  # {
    EXPRESSION_CONTENT = auto()
    EXPRESSION_END = auto()  # }

    # Frontmatter
    FRONTMATTER_START = auto()  # --- at the very start
    FRONTMATTER_CONTENT = auto()
    FRONTMATTER_END = auto()  # --- on its own line


@dataclass(frozen=True, slots=True)
class Token:
    """A token produced by the lexer.

    Attributes:
        type: The token type
        value: The raw string value (tag name for TAG_OPEN and TAG_CLOSE)
        span: Source range the token was scanned from

    """

    type: TokenType
    value: str
    span: Span

    def __repr__(self) -> str:
        """Compact repr for debugging."""
        val = self.value
        if len(val) > 20:
            val = val[:17] + "..."
        return f"Token({self.type.name}, {val!r}, {self.span.start})"

    @property
    def start(self) -> Position:
        """Start position (convenience accessor)."""
        return self.span.start

    @property
    def end(self) -> Position:
        """End position (convenience accessor)."""
        return self.span.end

    @property
    def incomplete(self) -> bool:
        """True if this token carries the unterminated-expression marker."""
        return self.value.endswith(INCOMPLETE_MARKER)
