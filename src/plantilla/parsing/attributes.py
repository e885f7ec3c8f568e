"""Attribute list parsing.

Two token shapes are accepted for a valued attribute:

- ATTRIBUTE_NAME followed by ATTRIBUTE_VALUE (what the lexer emits)
- a lone ATTRIBUTE_VALUE holding ``name=value`` (hand-built token streams),
  split at the first ``=``

A raw value is decoded by its first character: quotes give a string,
a brace gives an Expression, anything else is a bare string.
"""

from __future__ import annotations

from plantilla.config import ParseConfig
from plantilla.diagnostics import DUPLICATE_DIRECTIVE, UNCLOSED_EXPRESSION
from plantilla.location import Span
from plantilla.nodes import Attribute, Expression
from plantilla.parsing.state import ParserState
from plantilla.tokens import INCOMPLETE_MARKER, TokenType
from plantilla.utils.text import unescape_html


def parse_attributes(
    state: ParserState, tag: str, config: ParseConfig
) -> tuple[ParserState, tuple[Attribute, ...]]:
    """Parse attributes until a token that cannot start one.

    Records a duplicate-directive warning each time a directive-prefixed
    name repeats within the same tag.

    Args:
        state: State positioned just after TAG_OPEN
        tag: Tag name, for diagnostic messages
        config: Active parse configuration

    Returns:
        (next state, attributes in source order)
    """
    attributes: list[Attribute] = []
    seen_directives: set[str] = set()

    while True:
        token = state.current
        match token.type:
            case TokenType.ATTRIBUTE_NAME:
                state, _ = state.advance()
                if state.current.type is TokenType.ATTRIBUTE_VALUE:
                    state, value_token = state.advance()
                    state, attribute = _valued_attribute(
                        state,
                        token.value,
                        value_token.value,
                        token.span.span_to(value_token.span),
                        value_token.span,
                        config,
                    )
                else:
                    attribute = Attribute(span=token.span, name=token.value, value=True)
            case TokenType.ATTRIBUTE_VALUE:
                state, _ = state.advance()
                name, sep, raw = token.value.partition("=")
                if sep:
                    state, attribute = _valued_attribute(
                        state, name, raw, token.span, token.span, config
                    )
                else:
                    attribute = Attribute(span=token.span, name=name, value=True)
            case _:
                break

        if attribute.is_directive(config.directive_prefixes):
            if attribute.name in seen_directives:
                state = state.diagnose(
                    DUPLICATE_DIRECTIVE,
                    f"Duplicate directive '{attribute.name}' on <{tag}>",
                    attribute.span,
                    severity="warning",
                )
            seen_directives.add(attribute.name)
        attributes.append(attribute)

    return state, tuple(attributes)


def _valued_attribute(
    state: ParserState,
    name: str,
    raw: str,
    span: Span,
    value_span: Span,
    config: ParseConfig,
) -> tuple[ParserState, Attribute]:
    value = decode_attribute_value(raw, value_span, decode_entities=config.decode_entities)
    if isinstance(value, Expression) and value.incomplete:
        state = state.diagnose(
            UNCLOSED_EXPRESSION,
            f"Unclosed expression in attribute '{name}': expected '}}'",
            value_span,
        )
    return state, Attribute(span=span, name=name, value=value)


def decode_attribute_value(
    raw: str, span: Span, *, decode_entities: bool = True
) -> str | Expression:
    """Turn a raw attribute value into a string or Expression.

    Examples:
        >>> decode_attribute_value('"a &amp; b"', Span.empty())
        'a & b'
        >>> decode_attribute_value("{count + 1}", Span.empty())
        Expression(span=..., code='count + 1', incomplete=False)
    """
    if raw.startswith("{"):
        incomplete = raw.endswith(INCOMPLETE_MARKER)
        code = raw[1:]
        if incomplete:
            code = code.removesuffix(INCOMPLETE_MARKER)
        else:
            code = code.removesuffix("}")
        return Expression(span=span, code=code, incomplete=incomplete)

    if raw[:1] in ("'", '"'):
        quote = raw[0]
        raw = raw[1:-1] if len(raw) >= 2 and raw.endswith(quote) else raw[1:]

    return unescape_html(raw) if decode_entities else raw
