"""Element and Component parsing with tag-level recovery.

Nested elements are tracked on an explicit stack of open elements, so
nesting depth is bounded by memory rather than by the interpreter's
recursion limit.

Recovery rules:
- ``/>`` ends an element with no children
- a void element ends at ``>`` whether or not it was written self-closing
- an opening tag from the implicit-closure table ends the open element
  without being consumed, so the parent starts a sibling
- a closing tag for an enclosing element records one mismatched-tag and
  closes every element opened inside that one
- a closing tag that matches no open element records mismatched-tag and
  is skipped; the open element stays open
- end of input records unclosed-tag for each open element and keeps the
  children parsed so far
- a start tag cut short by new markup records unclosed-tag and has no
  children; a matching closing tag right after it is consumed
"""

from __future__ import annotations

from dataclasses import dataclass, field

from plantilla.config import ParseConfig
from plantilla.diagnostics import MISMATCHED_TAG, UNCLOSED_TAG
from plantilla.elements import (
    is_implicitly_closed_by,
    is_raw_text_element,
    is_void_element,
)
from plantilla.location import Span
from plantilla.nodes import Attribute, Child, Component, Element, is_component_tag
from plantilla.parsing.attributes import parse_attributes
from plantilla.parsing.content import (
    parse_comment,
    parse_doctype,
    parse_expression,
    parse_text,
)
from plantilla.parsing.state import ParserState
from plantilla.tokens import Token, TokenType


def parse_node(
    state: ParserState, config: ParseConfig, parent: str | None = None
) -> tuple[ParserState, Child | None]:
    """Parse the node starting at the current token.

    Args:
        state: Current parser state
        config: Active parse configuration
        parent: Tag name of the enclosing element, if any

    Returns:
        (next state, node), or (unchanged state, None) if the current
        token cannot start a node.
    """
    match state.current.type:
        case TokenType.TAG_OPEN:
            return parse_element(state, config)
        case TokenType.TEXT:
            raw = parent is not None and is_raw_text_element(parent)
            return parse_text(state, config, raw=raw)
        case TokenType.EXPRESSION_START:
            return parse_expression(state)
        case TokenType.COMMENT:
            return parse_comment(state)
        case TokenType.DOCTYPE:
            return parse_doctype(state)
        case _:
            return state, None


@dataclass(slots=True)
class _OpenElement:
    """An element whose start tag is parsed and whose content is still open."""

    open_token: Token
    node_cls: type[Element] | type[Component]
    attributes: tuple[Attribute, ...]
    children: list[Child] = field(default_factory=list)

    @property
    def tag(self) -> str:
        return self.open_token.value

    def close(self, state: ParserState) -> Element | Component:
        span = Span(self.open_token.span.start, state.consumed_end(self.open_token.span.end))
        return self.node_cls(
            span=span,
            tag=self.tag,
            attributes=self.attributes,
            children=tuple(self.children),
        )


def parse_element(
    state: ParserState, config: ParseConfig
) -> tuple[ParserState, Element | Component]:
    """Parse an element or component together with everything nested in it.

    Returns:
        (next state, node)
    """
    state, start = _parse_start_tag(state, config)
    if not isinstance(start, _OpenElement):
        return state, start

    stack = [start]
    reported: Token | None = None

    while True:
        top = stack[-1]
        token = state.current

        match token.type:
            case TokenType.EOF:
                state = state.diagnose(
                    UNCLOSED_TAG, f"Unclosed tag <{top.tag}>", top.open_token.span
                )
            case TokenType.TAG_CLOSE if token.value == top.tag:
                state = state.skip()
            case TokenType.TAG_CLOSE if any(frame.tag == token.value for frame in stack):
                if token is not reported:
                    state = state.diagnose(
                        MISMATCHED_TAG,
                        f"Expected closing tag for <{top.tag}> but found </{token.value}>",
                        token.span,
                    )
                    reported = token
            case TokenType.TAG_CLOSE:
                state = state.diagnose(
                    MISMATCHED_TAG,
                    f"Closing tag </{token.value}> matches no open element",
                    token.span,
                ).skip()
                continue
            case TokenType.TAG_OPEN if is_implicitly_closed_by(top.tag, token.value):
                pass
            case TokenType.TAG_OPEN:
                state, child = _parse_start_tag(state, config)
                if isinstance(child, _OpenElement):
                    stack.append(child)
                else:
                    top.children.append(child)
                continue
            case _:
                state, node = parse_node(state, config, parent=top.tag)
                if node is None:
                    # Token that cannot appear in content (hand-built streams only)
                    state = state.skip()
                else:
                    top.children.append(node)
                continue

        stack.pop()
        closed = top.close(state)
        if not stack:
            return state, closed
        stack[-1].children.append(closed)


def _parse_start_tag(
    state: ParserState, config: ParseConfig
) -> tuple[ParserState, Element | Component | _OpenElement]:
    """Parse ``<tag attrs`` and whatever ends it.

    The node class is fixed here from the tag name: an upper-case first
    character makes a Component, anything else an Element. Returns a
    finished node when the tag can have no content, otherwise an
    _OpenElement waiting for its children.
    """
    state, open_token = state.advance()
    tag = open_token.value
    node_cls = Component if is_component_tag(tag) else Element

    state, attributes = parse_attributes(state, tag, config)

    self_closing = False
    match state.current.type:
        case TokenType.TAG_SELF_CLOSE:
            state = state.skip()
            self_closing = True
        case TokenType.TAG_END:
            state = state.skip()
            if node_cls is Component or not is_void_element(tag):
                return state, _OpenElement(open_token, node_cls, attributes)
        case _:
            state = state.diagnose(
                UNCLOSED_TAG, f"Unclosed tag <{tag}>: expected '>'", open_token.span
            )
            if state.current.type is TokenType.TAG_CLOSE and state.current.value == tag:
                state = state.skip()

    span = Span(open_token.span.start, state.consumed_end(open_token.span.end))
    return state, node_cls(
        span=span,
        tag=tag,
        attributes=attributes,
        self_closing=self_closing,
    )
