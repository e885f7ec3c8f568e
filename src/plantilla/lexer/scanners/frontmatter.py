"""Frontmatter mode scanner mixin.

A frontmatter block exists only when the very first line of the source is
``---``. It closes at the next line consisting solely of ``---``.
"""

from __future__ import annotations

from collections.abc import Iterator

from plantilla.lexer.modes import FRONTMATTER_FENCE, LexerMode
from plantilla.tokens import Token, TokenType


class FrontmatterScannerMixin:
    """Mixin providing frontmatter scanning logic.

    Emits FRONTMATTER_START, FRONTMATTER_CONTENT and FRONTMATTER_END.
    Fence token spans include the newline that ends the fence line.
    An unterminated block yields an empty, zero-width FRONTMATTER_END.

    """

    # These will be set by the Lexer class
    _source: str
    _source_len: int
    _pos: int

    def _emit(self, token_type: TokenType, value: str, end: int) -> Token:
        """Create token and advance. Implemented by Lexer."""
        raise NotImplementedError

    def _push_mode(self, mode: LexerMode) -> None:
        """Enter a mode. Implemented by Lexer."""
        raise NotImplementedError

    def _pop_mode(self) -> None:
        """Return to previous mode. Implemented by Lexer."""
        raise NotImplementedError

    def _line_end(self, pos: int) -> int:
        idx = self._source.find("\n", pos)
        return idx if idx != -1 else self._source_len

    def _is_fence_line(self, pos: int) -> bool:
        line = self._source[pos : self._line_end(pos)]
        return line.rstrip(" \t") == FRONTMATTER_FENCE

    def _at_frontmatter_fence(self) -> bool:
        """Check for an opening fence at the very start of input."""
        return self._pos == 0 and self._is_fence_line(0)

    def _fence_end(self, pos: int) -> int:
        """Position just past the fence line at pos, including its newline."""
        line_end = self._line_end(pos)
        return min(line_end + 1, self._source_len)

    def _scan_frontmatter_open(self) -> Iterator[Token]:
        yield self._emit(
            TokenType.FRONTMATTER_START, FRONTMATTER_FENCE, self._fence_end(0)
        )
        self._push_mode(LexerMode.FRONTMATTER)

    def _scan_frontmatter(self) -> Iterator[Token]:
        """Scan frontmatter code up to the closing fence line.

        Yields:
            FRONTMATTER_CONTENT and FRONTMATTER_END tokens.
        """
        source = self._source
        source_len = self._source_len
        start = self._pos
        line_start = start

        while line_start < source_len:
            if self._is_fence_line(line_start):
                yield self._emit(
                    TokenType.FRONTMATTER_CONTENT, source[start:line_start], line_start
                )
                yield self._emit(
                    TokenType.FRONTMATTER_END,
                    FRONTMATTER_FENCE,
                    self._fence_end(line_start),
                )
                self._pop_mode()
                return
            line_start = self._line_end(line_start) + 1

        yield self._emit(TokenType.FRONTMATTER_CONTENT, source[start:], source_len)
        yield self._emit(TokenType.FRONTMATTER_END, "", source_len)
        self._pop_mode()
