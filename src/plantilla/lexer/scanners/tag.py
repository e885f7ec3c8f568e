"""Tag mode scanner mixin.

Scans the inside of a start tag: attribute names, the ``=`` that hands
over to ATTRIBUTE mode, and the ``>`` or ``/>`` that ends the tag.
"""

from __future__ import annotations

from collections.abc import Iterator

from plantilla.elements import is_raw_text_element
from plantilla.lexer.modes import ATTRIBUTE_NAME_STOP, LexerMode
from plantilla.lexer.scanners.expression import find_expression_end
from plantilla.tokens import Token, TokenType


class TagScannerMixin:
    """Mixin providing tag mode scanning logic.

    Attribute names are contiguous runs that stop at whitespace, ``=``,
    ``>`` or ``/>``. A name starting with ``{`` is a spread or shorthand
    attribute and runs to its matching brace.

    """

    # These will be set by the Lexer class
    _source: str
    _source_len: int
    _pos: int
    _open_tag: str

    def _emit(self, token_type: TokenType, value: str, end: int) -> Token:
        """Create token and advance. Implemented by Lexer."""
        raise NotImplementedError

    def _advance_to(self, end: int) -> None:
        """Move the cursor. Implemented by Lexer."""
        raise NotImplementedError

    def _push_mode(self, mode: LexerMode) -> None:
        """Enter a mode. Implemented by Lexer."""
        raise NotImplementedError

    def _pop_mode(self) -> None:
        """Return to previous mode. Implemented by Lexer."""
        raise NotImplementedError

    def _skip_whitespace(self, pos: int) -> int:
        """Skip whitespace. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_tag(self) -> Iterator[Token]:
        """Scan one item inside a start tag.

        Yields:
            TAG_END, TAG_SELF_CLOSE or ATTRIBUTE_NAME (none at end of input
            or for an absorbed stray character).
        """
        source = self._source
        pos = self._skip_whitespace(self._pos)
        self._advance_to(pos)
        if pos >= self._source_len:
            return

        if source.startswith("/>", pos):
            yield self._emit(TokenType.TAG_SELF_CLOSE, "/>", pos + 2)
            self._pop_mode()
            return

        if source[pos] == "<":
            # Start tag never finished; the "<" begins new markup
            self._pop_mode()
            return

        if source[pos] == ">":
            yield self._emit(TokenType.TAG_END, ">", pos + 1)
            self._pop_mode()
            if is_raw_text_element(self._open_tag):
                self._push_mode(LexerMode.RAW_TEXT)
            return

        name_end = self._attribute_name_end(pos)
        name = source[pos:name_end]
        if name_end == pos or name == "/":
            # Stray "=" or "/" inside a tag
            self._advance_to(max(name_end, pos + 1))
            return

        yield self._emit(TokenType.ATTRIBUTE_NAME, name, name_end)

        equals = self._skip_whitespace(name_end)
        if equals < self._source_len and source[equals] == "=":
            self._advance_to(self._skip_whitespace(equals + 1))
            self._push_mode(LexerMode.ATTRIBUTE)

    def _attribute_name_end(self, pos: int) -> int:
        source = self._source
        source_len = self._source_len

        if source[pos] == "{":
            close = find_expression_end(source, pos + 1)
            if close != -1:
                return close + 1

        end = pos
        while end < source_len:
            char = source[end]
            if char in ATTRIBUTE_NAME_STOP:
                break
            if char == "/" and source.startswith("/>", end):
                break
            end += 1
        return end
