"""HTML mode scanner mixin.

Scans markup text and recognizes the constructs that begin with ``<`` or
``{``. A ``<`` that starts no construct is absorbed into the text run.
"""

from __future__ import annotations

from collections.abc import Iterator

from plantilla.lexer.modes import TAG_NAME_START, LexerMode
from plantilla.tokens import Token, TokenType


class MarkupScannerMixin:
    """Mixin providing HTML mode scanning logic.

    Emits TEXT, TAG_OPEN, TAG_CLOSE, COMMENT, DOCTYPE and EXPRESSION_START
    tokens. TAG_OPEN switches to TAG mode; EXPRESSION_START switches to
    EXPRESSION mode.

    """

    # These will be set by the Lexer class
    _source: str
    _source_len: int
    _pos: int
    _open_tag: str

    def _emit(self, token_type: TokenType, value: str, end: int) -> Token:
        """Create token and advance. Implemented by Lexer."""
        raise NotImplementedError

    def _push_mode(self, mode: LexerMode) -> None:
        """Enter a mode. Implemented by Lexer."""
        raise NotImplementedError

    def _skip_whitespace(self, pos: int) -> int:
        """Skip whitespace. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_name(self, pos: int) -> int:
        """Scan a tag name. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_html(self) -> Iterator[Token]:
        """Scan one construct in HTML mode.

        Yields:
            A single token (or none when only the mode changes).
        """
        char = self._source[self._pos]

        if char == "{":
            yield self._emit(TokenType.EXPRESSION_START, "{", self._pos + 1)
            self._push_mode(LexerMode.EXPRESSION)
            return

        if char == "<":
            token = self._scan_angle()
            if token is not None:
                yield token
                return

        yield self._scan_text()

    def _scan_angle(self) -> Token | None:
        """Scan a construct starting with ``<`` at the cursor.

        Returns:
            The token for a start tag, closing tag, comment or declaration,
            or None if the ``<`` begins none of them.
        """
        source = self._source
        pos = self._pos

        if source.startswith("<!--", pos):
            end = source.find("-->", pos + 4)
            if end == -1:
                return None
            return self._emit(TokenType.COMMENT, source[pos + 4 : end], end + 3)

        if source.startswith("<!", pos):
            end = source.find(">", pos + 2)
            if end == -1:
                return None
            return self._emit(TokenType.DOCTYPE, source[pos + 2 : end], end + 1)

        if source.startswith("</", pos):
            name_end = self._scan_name(pos + 2)
            if name_end == pos + 2:
                return None
            close = self._skip_whitespace(name_end)
            if close >= self._source_len or source[close] != ">":
                return None
            return self._emit(TokenType.TAG_CLOSE, source[pos + 2 : name_end], close + 1)

        name_end = self._scan_name(pos + 1)
        if name_end == pos + 1:
            return None
        name = source[pos + 1 : name_end]
        token = self._emit(TokenType.TAG_OPEN, name, name_end)
        self._open_tag = name
        self._push_mode(LexerMode.TAG)
        return token

    def _scan_text(self) -> Token:
        """Scan a text run up to the next construct.

        The run always consumes at least one character, so a ``<`` that
        _scan_angle rejected becomes text.

        Returns:
            TEXT token.
        """
        source = self._source
        source_len = self._source_len
        start = self._pos
        pos = start + 1 if source[start] == "<" else start

        brace = source.find("{", pos)
        if brace == -1:
            brace = source_len
        while True:
            angle = source.find("<", pos, brace)
            if angle == -1:
                pos = brace
                break
            if self._starts_markup(angle):
                pos = angle
                break
            pos = angle + 1

        return self._emit(TokenType.TEXT, source[start:pos], pos)

    def _starts_markup(self, pos: int) -> bool:
        """Check whether the ``<`` at pos may begin a tag, comment or declaration."""
        source = self._source
        following = source[pos + 1 : pos + 2]
        if following == "!" or following in TAG_NAME_START:
            return True
        if following == "/":
            return source[pos + 2 : pos + 3] in TAG_NAME_START
        return False
