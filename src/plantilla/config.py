"""Parser configuration held in a ContextVar, and renderer options.

ParseConfig travels through a ContextVar (PEP 567): a Compiler sets it
around its parse calls and the Parser reads it, so two threads or two
asyncio tasks can parse with different settings at the same time.
HtmlOptions is passed to the renderers as an ordinary argument.

Usage:
    from plantilla.config import ParseConfig, parse_config_context

    islands = ParseConfig(directive_prefixes=("client:", "server:"))
    with parse_config_context(islands):
        result = Parser(source).parse()

    # Lower-level form
    set_parse_config(islands)
    try:
        result = Parser(source).parse()
    finally:
        reset_parse_config()

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, fields
from typing import Any

from plantilla.nodes import DEFAULT_DIRECTIVE_PREFIXES

DEFAULT_CHUNK_SIZE = 16 * 1024
DEFAULT_INDENT = "  "


def _filter_fields(cls: type, config_dict: Mapping[str, Any]) -> dict[str, Any]:
    valid_fields = {f.name for f in fields(cls)}
    return {k: v for k, v in config_dict.items() if k in valid_fields}


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Settings shared by every parse in a context.

    The filename is per call and goes to parse() instead.

    Attributes:
        directive_prefixes: Attribute-name prefixes that declare runtime
            directives; a repeated directive yields a duplicate-directive warning
        decode_entities: Decode character references in text and attribute
            values (``&amp;`` becomes ``&``)
        logger: Logger for parse diagnostics; None uses the package logger

    """

    directive_prefixes: tuple[str, ...] = DEFAULT_DIRECTIVE_PREFIXES
    decode_entities: bool = True
    logger: logging.Logger | None = None

    @classmethod
    def from_dict(cls, config_dict: Mapping[str, Any]) -> ParseConfig:
        """Build a config from loaded settings (JSON, TOML, ...).

        Keys that name no field are dropped. ``directive_prefixes`` may be
        any sequence and is stored as a tuple.

        Example:
            >>> config = ParseConfig.from_dict({
            ...     "directive_prefixes": ["client:", "server:"],
            ...     "unknown_key": "ignored",
            ... })
            >>> config.directive_prefixes
            ('client:', 'server:')

        """
        filtered = _filter_fields(cls, config_dict)
        if "directive_prefixes" in filtered:
            filtered["directive_prefixes"] = tuple(filtered["directive_prefixes"])
        return cls(**filtered)


_CAMEL_CASE_KEYS = {
    "prettyPrint": "pretty_print",
    "evaluateExpressions": "evaluate_expressions",
    "keepTemplateSyntax": "keep_template_syntax",
}


@dataclass(frozen=True, slots=True)
class HtmlOptions:
    """Immutable rendering options.

    Attributes:
        pretty_print: One node per line with indentation
        indent: Indent unit repeated once per nesting level
        evaluate_expressions: Replace expressions with evaluator output
            instead of inert placeholder comments
        evaluator: Callable receiving expression code; required when
            evaluate_expressions is set
        keep_template_syntax: Render template source (``{code}``,
            component tags, frontmatter) instead of HTML placeholders

    """

    pretty_print: bool = False
    indent: str = DEFAULT_INDENT
    evaluate_expressions: bool = False
    evaluator: Callable[[str], Any] | None = None
    keep_template_syntax: bool = False

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> HtmlOptions:
        """Create HtmlOptions from a dictionary.

        Accepts snake_case field names and the camelCase spellings used by
        JavaScript tooling (``prettyPrint``, ``evaluateExpressions``).
        Unknown keys are ignored.

        Example:
            >>> HtmlOptions.from_dict({"prettyPrint": True}).pretty_print
            True

        """
        normalized = {_CAMEL_CASE_KEYS.get(k, k): v for k, v in options.items()}
        return cls(**_filter_fields(cls, normalized))


_DEFAULT_CONFIG = ParseConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "plantilla_parse_config", default=_DEFAULT_CONFIG
)


def get_parse_config() -> ParseConfig:
    """The ParseConfig in effect for the current context."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Install config for the current context (thread or task) only."""
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Go back to the default ParseConfig in the current context."""
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[ParseConfig]:
    """Use config inside the block, then restore whatever was active before.

    Example:
        >>> with parse_config_context(ParseConfig(decode_entities=False)):
        ...     get_parse_config().decode_entities
        False

    """
    previous = _parse_config.set(config)
    try:
        yield config
    finally:
        _parse_config.reset(previous)


__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "HtmlOptions",
    "ParseConfig",
    "get_parse_config",
    "parse_config_context",
    "reset_parse_config",
    "set_parse_config",
]
