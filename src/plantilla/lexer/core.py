"""Mode-switching lexer for page templates.

Scans the source once, left to right, emitting a flat token list that ends
with exactly one EOF token. Each mode has its own scanner mixin; this class
owns position tracking, the mode stack and token construction.

The lexer never raises: characters that fit no construct are absorbed
into the surrounding text run, and every problem is left for the parser
to report as a diagnostic.

Thread Safety:
Lexer instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Iterator

from plantilla.lexer.modes import (
    PENDING_AT_EOF,
    TAG_NAME_CHARS,
    TAG_NAME_START,
    WHITESPACE,
    LexerMode,
)
from plantilla.lexer.scanners import (
    AttributeScannerMixin,
    ExpressionScannerMixin,
    FrontmatterScannerMixin,
    MarkupScannerMixin,
    RawTextScannerMixin,
    TagScannerMixin,
)
from plantilla.location import Position, Span
from plantilla.tokens import Token, TokenType
from plantilla.utils.text import normalize_newlines


class Lexer(
    FrontmatterScannerMixin,
    MarkupScannerMixin,
    TagScannerMixin,
    AttributeScannerMixin,
    ExpressionScannerMixin,
    RawTextScannerMixin,
):
    """Mode-switching lexer with a single forward pass.

    Usage:
            >>> lexer = Lexer("<h1>{title}</h1>")
            >>> for token in lexer.tokenize():
            ...     print(token)
        Token(TAG_OPEN, 'h1', 1:1)
        Token(TAG_END, '>', 1:4)
        Token(EXPRESSION_START, '{', 1:5)
        Token(EXPRESSION_CONTENT, 'title', 1:6)
        Token(EXPRESSION_END, '}', 1:11)
        Token(TAG_CLOSE, 'h1', 1:12)
        Token(EOF, '', 1:17)

    Thread Safety:
        Lexer instances are single-use. Create one per source string.
        All state is instance-local; no shared mutable state.

    """

    __slots__ = (
        "_source",
        "_source_len",
        "_pos",
        "_lineno",
        "_col",
        "_mode",
        "_mode_stack",
        "_open_tag",  # Name of the start tag being scanned
    )

    def __init__(self, source: str) -> None:
        """Initialize lexer with source text.

        Args:
            source: Template source; line endings are normalized to LF
        """
        self._source = normalize_newlines(source)
        self._source_len = len(self._source)
        self._pos = 0
        self._lineno = 1
        self._col = 1
        self._mode = LexerMode.HTML
        self._mode_stack: list[LexerMode] = []
        self._open_tag = ""

    @property
    def source(self) -> str:
        """The normalized source all token spans refer to."""
        return self._source

    def tokenize(self) -> Iterator[Token]:
        """Tokenize source into token stream.

        Yields:
            Token objects one at a time, ending with EOF

        Complexity: O(n) where n = len(source)
        """
        if self._at_frontmatter_fence():
            yield from self._scan_frontmatter_open()

        source_len = self._source_len
        while self._pos < source_len or self._mode in PENDING_AT_EOF:
            yield from self._dispatch_mode()

        yield self._emit(TokenType.EOF, "", self._pos)

    def _dispatch_mode(self) -> Iterator[Token]:
        """Dispatch to the scanner for the current mode."""
        match self._mode:
            case LexerMode.HTML:
                yield from self._scan_html()
            case LexerMode.TAG:
                yield from self._scan_tag()
            case LexerMode.ATTRIBUTE:
                yield from self._scan_attribute_value()
            case LexerMode.EXPRESSION:
                yield from self._scan_expression()
            case LexerMode.FRONTMATTER:
                yield from self._scan_frontmatter()
            case LexerMode.RAW_TEXT:
                yield from self._scan_raw_text()

    # =========================================================================
    # Mode stack
    # =========================================================================

    def _push_mode(self, mode: LexerMode) -> None:
        self._mode_stack.append(self._mode)
        self._mode = mode

    def _pop_mode(self) -> None:
        self._mode = self._mode_stack.pop() if self._mode_stack else LexerMode.HTML

    # =========================================================================
    # Navigation helpers
    # =========================================================================

    def _advance_to(self, end: int) -> None:
        """Move position forward to end, updating line/column tracking.

        Uses str.count on the skipped segment instead of a per-character loop.

        Args:
            end: Position to move to (ignored if not ahead of the cursor).
        """
        if end <= self._pos:
            return
        segment = self._source[self._pos : end]
        newline_count = segment.count("\n")
        if newline_count:
            self._lineno += newline_count
            self._col = len(segment) - segment.rfind("\n")
        else:
            self._col += len(segment)
        self._pos = end

    def _skip_whitespace(self, pos: int) -> int:
        """Return the first non-whitespace position at or after pos."""
        source = self._source
        source_len = self._source_len
        while pos < source_len and source[pos] in WHITESPACE:
            pos += 1
        return pos

    def _scan_name(self, pos: int) -> int:
        """Return the end of a tag name starting at pos (pos if none)."""
        source = self._source
        source_len = self._source_len
        if pos >= source_len or source[pos] not in TAG_NAME_START:
            return pos
        end = pos + 1
        while end < source_len and source[end] in TAG_NAME_CHARS:
            end += 1
        return end

    # =========================================================================
    # Token construction
    # =========================================================================

    def _position(self) -> Position:
        return Position(self._lineno, self._col, self._pos)

    def _emit(self, token_type: TokenType, value: str, end: int) -> Token:
        """Create a token spanning from the cursor to end, then advance.

        Args:
            token_type: The token type.
            value: The token text.
            end: Source position just past the token.

        Returns:
            Token whose span covers the consumed source.
        """
        start = self._position()
        self._advance_to(end)
        return Token(token_type, value, Span(start, self._position()))
