"""
Plantilla: page-template compiler for Python

Compiles templates that mix markup, ``{expression}`` spans, components and a
leading ``---`` frontmatter block into an immutable typed AST with positional
diagnostics, and renders that AST back to HTML (buffered or streamed).

Quick Start:
    >>> from plantilla import parse, build_html
    >>> result = parse("<h1 class=title>Hello</h1>")
    >>> result.diagnostics
    ()
    >>> build_html(result.ast)
    '<h1 class="title">Hello</h1>'

    >>> # Or use the high-level Compiler class
    >>> from plantilla import Compiler, HtmlOptions
    >>> compile_page = Compiler(options=HtmlOptions(pretty_print=True))
    >>> print(compile_page("<ul><li>One<li>Two</ul>"), end="")
    <ul>
      <li>One</li>
      <li>Two</li>
    </ul>

Parsing is total: malformed markup never raises. Problems are reported as
Diagnostic values (mismatched-tag, unclosed-tag, unclosed-expression,
duplicate-directive, internal-error).
"""

import logging
from collections.abc import Iterable
from dataclasses import replace

from plantilla.boundary import ErrorContext, safe_execute
from plantilla.config import (
    DEFAULT_CHUNK_SIZE,
    HtmlOptions,
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from plantilla.diagnostics import INTERNAL_ERROR, Diagnostic, ParseResult, Severity
from plantilla.errors import CompilerError, PlantillaError, RenderError
from plantilla.lexer import Lexer, tokenize
from plantilla.location import Position, Span
from plantilla.nodes import (
    Attribute,
    Child,
    Comment,
    Component,
    Doctype,
    Element,
    Expression,
    Fragment,
    Frontmatter,
    Node,
    TagNode,
    Text,
)
from plantilla.parser import Parser
from plantilla.profiling import (
    ParseAccumulator,
    ParseRecord,
    get_parse_accumulator,
    profiled_parse,
)
from plantilla.renderers import (
    ASTRenderer,
    ChunkWriter,
    ComponentRenderer,
    HtmlRenderer,
    StreamingHtmlBuilder,
)
from plantilla.serialization import from_dict, from_json, to_dict, to_json
from plantilla.tokens import Token, TokenType
from plantilla.utils.logger import get_logger
from plantilla.visitor import BaseVisitor, transform, walk

__version__ = "0.1.0"

logging.getLogger("plantilla").addHandler(logging.NullHandler())

_logger = get_logger(__name__)


def parse(
    source: str,
    *,
    filename: str | None = None,
    logger: logging.Logger | None = None,
    config: ParseConfig | None = None,
) -> ParseResult:
    """Parse template source into an AST plus diagnostics.

    Total function: any internal fault is logged and converted into an
    empty Fragment with a single internal-error diagnostic.

    Args:
        source: Template source text
        filename: Optional source file path, attached to diagnostics
        logger: Logger for debug output and internal faults (defaults to
            the config's logger, then the package logger)
        config: Parse configuration (defaults to the context's config)

    Returns:
        ParseResult with ``ast`` and ``diagnostics``

    Example:
        >>> result = parse("<Counter client:load client:load />")
        >>> [d.code for d in result.diagnostics]
        ['duplicate-directive']
    """
    config = config if config is not None else get_parse_config()
    if logger is not None:
        config = replace(config, logger=logger)
    log = config.logger or _logger

    context = ErrorContext(
        operation="parse",
        filename=filename,
        source_length=len(source) if isinstance(source, str) else 0,
    )

    def _fallback(exc: Exception) -> ParseResult:
        diagnostic = Diagnostic(
            code=INTERNAL_ERROR,
            message=f"Internal error during parse: {exc}",
            span=Span.empty(),
            severity="error",
            filename=filename,
        )
        return ParseResult(ast=Fragment(span=Span.empty()), diagnostics=(diagnostic,))

    return safe_execute(
        lambda: Parser(source, filename, config=config).parse(),
        context,
        _fallback,
        log=log,
    )


def build_html(
    fragment: Fragment | Child,
    options: HtmlOptions | None = None,
    *,
    component_renderer: ComponentRenderer | None = None,
) -> str:
    """Render an AST to an HTML string.

    Args:
        fragment: Fragment root (or any child node)
        options: Rendering options (pretty_print, indent, evaluate_expressions, ...)
        component_renderer: Adapter that renders Component nodes

    Returns:
        HTML string

    Example:
        >>> build_html(parse("<img src='a.png'>").ast)
        '<img src="a.png">'
    """
    return HtmlRenderer(options, component_renderer=component_renderer).render(fragment)


async def build_html_to_stream(
    fragment: Fragment | Child,
    write: ChunkWriter,
    options: HtmlOptions | None = None,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    component_renderer: ComponentRenderer | None = None,
) -> None:
    """Render an AST in chunks through an async sink.

    The concatenated chunks equal build_html(fragment, options).

    Args:
        fragment: Fragment root (or any child node)
        write: Sink called with each chunk; awaited if it returns an awaitable
        options: Rendering options
        chunk_size: Buffered characters that trigger a flush (default 16 KiB)
        component_renderer: Adapter that renders Component nodes
    """
    builder = StreamingHtmlBuilder(
        options, chunk_size=chunk_size, component_renderer=component_renderer
    )
    await builder.write_to(fragment, write)


class Compiler:
    """High-level template compiler combining parser and renderer.

    Usage:
        >>> compile_page = Compiler()
        >>> compile_page("<p>{greeting}</p>")
        '<p><!-- Expression: greeting --></p>'

        >>> # Access the AST and diagnostics
        >>> result = compile_page.parse("<div><p>Text</div>")
        >>> result.diagnostics[0].code
        'mismatched-tag'

    Thread Safety:
        Uses ContextVar for thread-local configuration. Safe to use multiple
        Compiler instances concurrently from different threads.

    """

    __slots__ = ("_config", "_options", "_component_renderer")

    def __init__(
        self,
        *,
        config: ParseConfig | None = None,
        options: HtmlOptions | None = None,
        component_renderer: ComponentRenderer | None = None,
    ) -> None:
        """Initialize compiler.

        Args:
            config: Parse configuration used for every parse
            options: Rendering options used for every render
            component_renderer: Adapter that renders Component nodes
        """
        self._config = config if config is not None else ParseConfig()
        self._options = options if options is not None else HtmlOptions()
        self._component_renderer = component_renderer

    @property
    def config(self) -> ParseConfig:
        return self._config

    @property
    def options(self) -> HtmlOptions:
        return self._options

    def __call__(self, source: str, *, filename: str | None = None) -> str:
        """Parse and render in one call."""
        return self.render(self.parse(source, filename=filename).ast)

    def parse(self, source: str, *, filename: str | None = None) -> ParseResult:
        """Parse template source with this compiler's configuration."""
        with parse_config_context(self._config):
            return parse(source, filename=filename)

    def parse_many(
        self, sources: Iterable[str], *, filename: str | None = None
    ) -> list[ParseResult]:
        """Parse several sources, setting the configuration once."""
        with parse_config_context(self._config):
            return [parse(source, filename=filename) for source in sources]

    def render(self, fragment: Fragment | Child) -> str:
        """Render an AST with this compiler's options."""
        return build_html(
            fragment, self._options, component_renderer=self._component_renderer
        )

    async def render_to_stream(
        self,
        fragment: Fragment | Child,
        write: ChunkWriter,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        """Stream an AST with this compiler's options."""
        await build_html_to_stream(
            fragment,
            write,
            self._options,
            chunk_size=chunk_size,
            component_renderer=self._component_renderer,
        )


__all__ = [  # noqa: RUF022
    # Main API
    "parse",
    "tokenize",
    "build_html",
    "build_html_to_stream",
    "Compiler",
    # Configuration
    "DEFAULT_CHUNK_SIZE",
    "HtmlOptions",
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Results and errors
    "ParseResult",
    "Diagnostic",
    "Severity",
    "PlantillaError",
    "CompilerError",
    "RenderError",
    "ErrorContext",
    "safe_execute",
    # Core classes
    "Lexer",
    "Parser",
    "HtmlRenderer",
    "StreamingHtmlBuilder",
    "ASTRenderer",
    "ComponentRenderer",
    "ChunkWriter",
    # Location and tokens
    "Position",
    "Span",
    "Token",
    "TokenType",
    # AST nodes
    "Node",
    "Child",
    "Fragment",
    "Frontmatter",
    "TagNode",
    "Element",
    "Component",
    "Attribute",
    "Text",
    "Expression",
    "Comment",
    "Doctype",
    # Tooling
    "BaseVisitor",
    "walk",
    "transform",
    "to_dict",
    "from_dict",
    "to_json",
    "from_json",
    "ParseAccumulator",
    "ParseRecord",
    "get_parse_accumulator",
    "profiled_parse",
]
