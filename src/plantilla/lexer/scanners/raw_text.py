"""Raw text mode scanner mixin for script and style content."""

from __future__ import annotations

from collections.abc import Iterator

from plantilla.lexer.modes import WHITESPACE
from plantilla.tokens import Token, TokenType


class RawTextScannerMixin:
    """Mixin providing raw text scanning logic.

    Entered after the start tag of a script or style element. Everything
    up to the matching closing tag is one opaque TEXT token: no tags and
    no expressions are recognized inside it.

    """

    # These will be set by the Lexer class
    _source: str
    _source_len: int
    _pos: int
    _open_tag: str

    def _emit(self, token_type: TokenType, value: str, end: int) -> Token:
        """Create token and advance. Implemented by Lexer."""
        raise NotImplementedError

    def _pop_mode(self) -> None:
        """Return to previous mode. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_raw_text(self) -> Iterator[Token]:
        """Scan raw content up to ``</tag``.

        Yields:
            A TEXT token, unless the element is empty.
        """
        end = self._raw_text_end()
        if end > self._pos:
            yield self._emit(TokenType.TEXT, self._source[self._pos : end], end)
        self._pop_mode()

    def _raw_text_end(self) -> int:
        source = self._source
        closing = "</" + self._open_tag
        pos = self._pos
        while True:
            found = source.find(closing, pos)
            if found == -1:
                return self._source_len
            following = source[found + len(closing) : found + len(closing) + 1]
            if following == "" or following in WHITESPACE or following in ">/":
                return found
            pos = found + 1
