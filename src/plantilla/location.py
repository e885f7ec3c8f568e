"""Source positions and spans for diagnostics and AST nodes.

Provides Position (a single point in source) and Span (a half-open range).
Every token, AST node and diagnostic owns exactly one Span.

All positions refer to the newline-normalized source string: lines and
columns are 1-indexed, offsets are 0-indexed character indices.

Thread Safety:
Position and Span are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """A single point in the source text.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        offset: Character offset into the normalized source (0-indexed)

    Examples:
            >>> pos = Position(line=2, column=5, offset=12)
            >>> str(pos)
            '2:5'

    """

    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"

    @classmethod
    def origin(cls) -> Position:
        """Position of the first character of any document."""
        return _ORIGIN


_ORIGIN = Position(line=1, column=1, offset=0)


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open range between two positions.

    ``end`` is exclusive of the content: it is where the next token begins.

    Attributes:
        start: First position covered by the span
        end: Position just past the covered content

    Examples:
            >>> span = Span(Position(1, 1, 0), Position(1, 6, 5))
            >>> str(span)
            '1:1'
            >>> span.length
            5

    Thread Safety:
        Frozen dataclass ensures immutability for safe sharing.

    """

    start: Position
    end: Position

    def __str__(self) -> str:
        """Format span for error messages.

        Returns:
            Start position formatted as "line:column"
        """
        return str(self.start)

    @property
    def length(self) -> int:
        """Number of characters covered."""
        return self.end.offset - self.start.offset

    def span_to(self, other: Span) -> Span:
        """Create a new span from this span's start to other's end.

        Args:
            other: Span whose end becomes the new end

        Returns:
            New Span covering both
        """
        return Span(self.start, other.end)

    def contains(self, other: Span) -> bool:
        """Check whether other lies entirely inside this span."""
        return (
            self.start.offset <= other.start.offset
            and other.end.offset <= self.end.offset
        )

    @classmethod
    def at(cls, position: Position) -> Span:
        """Create a zero-width span at position."""
        return cls(position, position)

    @classmethod
    def empty(cls) -> Span:
        """Create the zero-width span at line 1, column 1.

        Use for the root of an empty document and for synthetic nodes.
        """
        return _EMPTY


_EMPTY = Span(_ORIGIN, _ORIGIN)
