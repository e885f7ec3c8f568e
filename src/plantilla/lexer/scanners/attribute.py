"""Attribute mode scanner mixin."""

from __future__ import annotations

from collections.abc import Iterator

from plantilla.lexer.modes import UNQUOTED_VALUE_STOP
from plantilla.lexer.scanners.expression import expression_cut, find_expression_end
from plantilla.tokens import INCOMPLETE_MARKER, Token, TokenType


class AttributeScannerMixin:
    """Mixin providing attribute value scanning logic.

    Entered after ``name=``. Emits exactly one ATTRIBUTE_VALUE token whose
    text is the raw value: quotes and braces are kept so the parser can
    tell a string from an expression.

    """

    # These will be set by the Lexer class
    _source: str
    _source_len: int
    _pos: int

    def _emit(self, token_type: TokenType, value: str, end: int) -> Token:
        """Create token and advance. Implemented by Lexer."""
        raise NotImplementedError

    def _pop_mode(self) -> None:
        """Return to previous mode. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_attribute_value(self) -> Iterator[Token]:
        """Scan a quoted, braced or bare attribute value.

        An unterminated quote runs to end of input. An unterminated brace
        is cut like an unterminated expression and tagged incomplete.

        Yields:
            One ATTRIBUTE_VALUE token (possibly empty).
        """
        source = self._source
        source_len = self._source_len
        pos = self._pos

        if pos >= source_len:
            value, end = "", pos
        elif source[pos] in "\"'":
            close = source.find(source[pos], pos + 1)
            end = close + 1 if close != -1 else source_len
            value = source[pos:end]
        elif source[pos] == "{":
            close = find_expression_end(source, pos + 1)
            if close != -1:
                end = close + 1
                value = source[pos:end]
            else:
                end = expression_cut(source, pos + 1)
                value = source[pos:end] + INCOMPLETE_MARKER
        else:
            end = pos
            while end < source_len and source[end] not in UNQUOTED_VALUE_STOP:
                end += 1
            value = source[pos:end]

        yield self._emit(TokenType.ATTRIBUTE_VALUE, value, end)
        self._pop_mode()
