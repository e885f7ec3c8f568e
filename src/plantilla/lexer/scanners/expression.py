"""Expression mode scanner mixin and brace matching.

Expression code is opaque to the compiler. The scanner only needs to find
the closing brace, which it does by counting brace depth while skipping
string literals so that ``{"}"}`` closes at the right place.
"""

from __future__ import annotations

from collections.abc import Iterator

from plantilla.lexer.modes import LexerMode
from plantilla.tokens import INCOMPLETE_MARKER, Token, TokenType

_QUOTES = frozenset("\"'`")


def find_expression_end(source: str, start: int) -> int:
    """Find the brace closing an expression whose body starts at start.

    String-aware matching runs first. If a stray quote (``{it's}``) leaves
    it without a match, plain depth counting is tried before giving up.

    Args:
        source: Full source text
        start: Position just after the opening ``{``

    Returns:
        Position of the matching ``}``, or -1 if input ends first.

    Examples:
        >>> find_expression_end("{a}", 1)
        2
        >>> find_expression_end("{'}'}", 1)
        4
        >>> find_expression_end("{a", 1)
        -1
    """
    end = _match_brace(source, start, strings=True)
    if end == -1:
        end = _match_brace(source, start, strings=False)
    return end


def expression_cut(source: str, start: int) -> int:
    """Recovery point for an unterminated expression whose body starts at start."""
    cut = source.find("</", start)
    return cut if cut != -1 else len(source)


def _match_brace(source: str, start: int, *, strings: bool) -> int:
    depth = 1
    pos = start
    source_len = len(source)
    while pos < source_len:
        char = source[pos]
        if char == "\\":
            pos += 2
            continue
        if strings and char in _QUOTES:
            close = _skip_string(source, pos)
            if close == -1:
                return -1
            pos = close + 1
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return pos
        pos += 1
    return -1


def _skip_string(source: str, pos: int) -> int:
    """Return the position of the quote closing the literal at pos, or -1."""
    quote = source[pos]
    pos += 1
    source_len = len(source)
    while pos < source_len:
        char = source[pos]
        if char == "\\":
            pos += 2
            continue
        if char == quote:
            return pos
        if char == "\n" and quote != "`":
            return -1
        pos += 1
    return -1


class ExpressionScannerMixin:
    """Mixin providing expression mode scanning logic.

    Entered right after an EXPRESSION_START token. Emits one
    EXPRESSION_CONTENT token and one EXPRESSION_END token, then returns
    to the previous mode.

    """

    # These will be set by the Lexer class
    _source: str
    _pos: int

    def _emit(self, token_type: TokenType, value: str, end: int) -> Token:
        """Create token and advance. Implemented by Lexer."""
        raise NotImplementedError

    def _pop_mode(self) -> None:
        """Return to previous mode. Implemented by Lexer."""
        raise NotImplementedError

    def _scan_expression(self) -> Iterator[Token]:
        """Scan expression code up to its closing brace.

        Without a closing brace the content is cut at the first ``</``
        (so the enclosing element can still close) or at end of input,
        tagged with INCOMPLETE_MARKER, and followed by a zero-width
        EXPRESSION_END.

        Yields:
            EXPRESSION_CONTENT and EXPRESSION_END tokens.
        """
        source = self._source
        start = self._pos
        end = find_expression_end(source, start)

        if end != -1:
            yield self._emit(TokenType.EXPRESSION_CONTENT, source[start:end], end)
            yield self._emit(TokenType.EXPRESSION_END, "}", end + 1)
        else:
            cut = expression_cut(source, start)
            yield self._emit(
                TokenType.EXPRESSION_CONTENT,
                source[start:cut] + INCOMPLETE_MARKER,
                cut,
            )
            yield self._emit(TokenType.EXPRESSION_END, "", cut)

        self._pop_mode()
