"""Top-level document parsing."""

from __future__ import annotations

from plantilla.config import ParseConfig
from plantilla.diagnostics import MISMATCHED_TAG, UNEXPECTED_TOKEN
from plantilla.location import Span
from plantilla.nodes import Child, Fragment
from plantilla.parsing.content import parse_frontmatter
from plantilla.parsing.elements import parse_node
from plantilla.parsing.state import ParserState
from plantilla.tokens import TokenType


def parse_document(
    state: ParserState, config: ParseConfig
) -> tuple[ParserState, Fragment]:
    """Parse a whole token stream into one Fragment.

    Frontmatter is only recognized as the first token. Closing tags with
    no open element and other stray tokens are skipped with a diagnostic.

    Returns:
        (final state, root fragment)
    """
    children: list[Child] = []

    if state.current.type is TokenType.FRONTMATTER_START:
        state, frontmatter = parse_frontmatter(state)
        children.append(frontmatter)

    while not state.at_end:
        token = state.current
        state, node = parse_node(state, config)
        if node is not None:
            children.append(node)
            continue

        if token.type is TokenType.TAG_CLOSE:
            state = state.diagnose(
                MISMATCHED_TAG,
                f"Unexpected closing tag </{token.value}> with no open element",
                token.span,
            )
        else:
            state = state.diagnose(
                UNEXPECTED_TOKEN,
                f"Unexpected {token.type.name.lower()} token",
                token.span,
                severity="warning",
            )
        state = state.skip()

    if children:
        span = Span(children[0].span.start, children[-1].span.end)
    else:
        span = Span.empty()
    return state, Fragment(span=span, children=tuple(children))
