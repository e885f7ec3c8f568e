"""Template parser producing an immutable AST.

Runs the lexer, then threads an immutable ParserState through the parsing
functions in plantilla.parsing. The result is a ParseResult holding the
root Fragment and every diagnostic recorded on the way.

Thread Safety:
- Parser produces immutable AST (frozen dataclasses)
- Configuration is read from ContextVar (thread-local)
- Safe to share AST across threads

"""

from __future__ import annotations

import logging
from dataclasses import replace
from time import perf_counter

from plantilla.config import ParseConfig, get_parse_config
from plantilla.diagnostics import ParseResult
from plantilla.lexer import Lexer
from plantilla.parsing import ParserState, parse_document
from plantilla.profiling import ParseRecord, count_nodes, get_parse_accumulator
from plantilla.utils.logger import get_logger

logger = get_logger(__name__)


class Parser:
    """Parser for page templates.

    Usage:
            >>> result = Parser("<h1>{title}</h1>").parse()
            >>> result.ast.children[0].tag
            'h1'
            >>> result.diagnostics
            ()

    Thread Safety:
        Parser instances are single-use. Create one per parse operation.
        Configuration is read from ContextVar (thread-local) unless passed.
        The resulting AST is immutable and thread-safe.

    """

    __slots__ = ("_source", "_filename", "_config")

    def __init__(
        self,
        source: str,
        filename: str | None = None,
        *,
        config: ParseConfig | None = None,
    ) -> None:
        """Initialize parser with source text.

        Args:
            source: Template source text
            filename: Optional source file path for diagnostics
            config: Parse configuration; defaults to the context's config
        """
        self._source = source
        self._filename = filename
        self._config = config if config is not None else get_parse_config()

    @property
    def logger(self) -> logging.Logger:
        return self._config.logger or logger

    def parse(self) -> ParseResult:
        """Parse the source.

        Malformed markup never raises; it is reported in the diagnostics.

        Returns:
            ParseResult with the root Fragment and diagnostics.
        """
        started = perf_counter()
        tokens = tuple(Lexer(self._source).tokenize())
        state, fragment = parse_document(ParserState.from_tokens(tokens), self._config)

        diagnostics = state.diagnostics
        if self._filename is not None:
            diagnostics = tuple(replace(d, filename=self._filename) for d in diagnostics)

        elapsed_ms = (perf_counter() - started) * 1000
        log = self.logger
        if log.isEnabledFor(logging.DEBUG):
            log.debug(
                "Parsed %s: %d chars, %d tokens, %d diagnostics in %.2fms",
                self._filename or "<string>",
                len(self._source),
                len(tokens),
                len(diagnostics),
                elapsed_ms,
            )

        acc = get_parse_accumulator()
        if acc is not None:
            acc.add(
                ParseRecord(
                    filename=self._filename,
                    source_length=len(self._source),
                    token_count=len(tokens),
                    node_count=count_nodes(fragment),
                    diagnostic_count=len(diagnostics),
                    elapsed_ms=elapsed_ms,
                )
            )

        return ParseResult(ast=fragment, diagnostics=diagnostics)
