"""Leaf node parsing: text, expressions, comments, declarations, frontmatter."""

from __future__ import annotations

from plantilla.config import ParseConfig
from plantilla.diagnostics import UNCLOSED_EXPRESSION, UNCLOSED_FRONTMATTER
from plantilla.location import Span
from plantilla.nodes import Comment, Doctype, Expression, Frontmatter, Text
from plantilla.parsing.state import ParserState
from plantilla.tokens import INCOMPLETE_MARKER, TokenType
from plantilla.utils.text import unescape_html


def parse_text(
    state: ParserState, config: ParseConfig, *, raw: bool = False
) -> tuple[ParserState, Text]:
    """Parse one TEXT token.

    Character references are decoded unless raw is set (script and style
    content) or decoding is disabled in config.
    """
    state, token = state.advance()
    value = token.value
    if config.decode_entities and not raw:
        value = unescape_html(value)
    return state, Text(span=token.span, value=value)


def parse_expression(state: ParserState) -> tuple[ParserState, Expression]:
    """Parse EXPRESSION_START, EXPRESSION_CONTENT*, EXPRESSION_END.

    If the content carries the incomplete marker (or the end token is
    missing), the node is marked incomplete and an unclosed-expression
    diagnostic is recorded.
    """
    state, start = state.advance()
    parts: list[str] = []
    while state.current.type is TokenType.EXPRESSION_CONTENT:
        state, content = state.advance()
        parts.append(content.value)

    code = "".join(parts)
    incomplete = code.endswith(INCOMPLETE_MARKER)
    if incomplete:
        code = code.removesuffix(INCOMPLETE_MARKER)

    if state.current.type is TokenType.EXPRESSION_END:
        state = state.skip()
    else:
        incomplete = True

    span = Span(start.span.start, state.consumed_end(start.span.end))
    if incomplete:
        state = state.diagnose(
            UNCLOSED_EXPRESSION, "Unclosed expression: expected '}'", span
        )
    return state, Expression(span=span, code=code, incomplete=incomplete)


def parse_comment(state: ParserState) -> tuple[ParserState, Comment]:
    state, token = state.advance()
    return state, Comment(span=token.span, value=token.value)


def parse_doctype(state: ParserState) -> tuple[ParserState, Doctype]:
    state, token = state.advance()
    return state, Doctype(span=token.span, value=token.value)


def parse_frontmatter(state: ParserState) -> tuple[ParserState, Frontmatter]:
    """Parse the leading frontmatter block into one Frontmatter node.

    The code is stripped of surrounding whitespace. A missing closing
    fence records an unclosed-frontmatter diagnostic.
    """
    state, start = state.advance()
    parts: list[str] = []
    while state.current.type is TokenType.FRONTMATTER_CONTENT:
        state, content = state.advance()
        parts.append(content.value)

    closed = False
    if state.current.type is TokenType.FRONTMATTER_END:
        state, end = state.advance()
        closed = bool(end.value)

    span = Span(start.span.start, state.consumed_end(start.span.end))
    if not closed:
        state = state.diagnose(
            UNCLOSED_FRONTMATTER,
            "Frontmatter block is missing its closing '---' line",
            start.span,
        )
    return state, Frontmatter(span=span, code="".join(parts).strip())
