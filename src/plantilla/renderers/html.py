"""HTML renderer using StringBuilder pattern.

Walks the AST as a generator of markup fragments. Buffered rendering joins
the fragments with a StringBuilder; the streaming builder consumes the same
generator, so both modes produce identical bytes for identical options.

Rendering rules:
- text and attribute values are escaped (``& < > " '``)
- void elements render as ``<tag attrs>`` whatever their self_closing flag
- other self-closing elements render as ``<tag attrs />``
- expressions and components render as inert placeholder comments unless
  an evaluator or component renderer is supplied
- frontmatter renders to nothing
- attribute names containing whitespace, quotes, ``<``, ``>`` or ``=`` are
  dropped
- with keep_template_syntax, leading text whose first line is ``---`` starts
  with ``&#45;`` so the output does not open a frontmatter block

Thread Safety:
HtmlRenderer holds only immutable options. Every call builds its own
generator, so one instance can render concurrently from several threads.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from typing import Any, NamedTuple

from plantilla.config import HtmlOptions
from plantilla.elements import is_raw_text_element, is_void_element
from plantilla.errors import RenderError
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
    TagNode,
    Text,
)
from plantilla.renderers.protocol import ComponentRenderer
from plantilla.stringbuilder import StringBuilder
from plantilla.utils.logger import get_logger
from plantilla.utils.text import comment_safe, escape_braces, escape_html

logger = get_logger(__name__)

# Characters that would end an attribute name early or break out of the tag
_UNSAFE_NAME = re.compile(r"[\s\"'<>=]")


class _Pending(NamedTuple):
    """A node waiting to be rendered."""

    node: Child
    depth: int
    pretty: bool
    raw: bool


# Closing tags are queued as plain strings between pending nodes
type _Work = _Pending | str


class HtmlRenderer:
    """Render a template AST to HTML.

    Usage:
        >>> from plantilla import parse
        >>> fragment = parse("<p class=note>Tom &amp; Jerry</p>").ast
        >>> HtmlRenderer().render(fragment)
        '<p class="note">Tom &amp; Jerry</p>'

    Thread Safety:
        Multiple threads can safely share a single HtmlRenderer instance.
    """

    __slots__ = ("_options", "_component_renderer")

    def __init__(
        self,
        options: HtmlOptions | None = None,
        *,
        component_renderer: ComponentRenderer | None = None,
    ) -> None:
        """Initialize renderer.

        Args:
            options: Rendering options (defaults to HtmlOptions())
            component_renderer: Adapter that renders Component nodes

        Raises:
            RenderError: If evaluate_expressions is set without an evaluator
        """
        self._options = options if options is not None else HtmlOptions()
        self._component_renderer = component_renderer
        if self._options.evaluate_expressions and self._options.evaluator is None:
            raise RenderError("evaluate_expressions requires an evaluator callable")

    @property
    def options(self) -> HtmlOptions:
        return self._options

    def render(self, node: Fragment | Child) -> str:
        """Render node to a single string.

        Args:
            node: Fragment root or any child node

        Returns:
            Rendered markup
        """
        return StringBuilder().extend(self.iter_html(node)).build()

    def iter_html(self, node: Fragment | Child) -> Iterator[str]:
        """Yield rendered markup in document order.

        Concatenating the yielded strings gives exactly render(node).
        Nesting is handled with an explicit work stack, so arbitrarily deep
        trees render without recursion.
        """
        roots = node.children if isinstance(node, Fragment) else (node,)
        pretty = self._options.pretty_print
        pending: list[_Work] = [_Pending(child, 0, pretty, False) for child in reversed(roots)]
        # Leading text must not read back as a frontmatter fence
        guard_fence = self._options.keep_template_syntax

        while pending:
            item = pending.pop()
            if isinstance(item, str):
                guard_fence = guard_fence and not item
                yield item
                continue
            for chunk in self._render_node(item, pending):
                if guard_fence and chunk:
                    guard_fence = False
                    if isinstance(item.node, Text):
                        chunk = _escape_leading_fence(chunk)
                yield chunk

    # =========================================================================
    # Node dispatch
    # =========================================================================

    def _render_node(self, item: _Pending, pending: list[_Work]) -> Iterator[str]:
        """Yield the markup for item; content of open tags goes onto pending."""
        node, depth, pretty, raw = item
        keep_syntax = self._options.keep_template_syntax
        match node:
            case Element():
                yield from self._render_tag(node, depth, pretty, pending)
            case Component():
                yield from self._render_component(node, depth, pretty, pending)
            case Text(value=value):
                if raw:
                    text = value
                else:
                    text = escape_html(value)
                    if keep_syntax:
                        text = escape_braces(text)
                if pretty:
                    yield self._line(depth, text.strip())
                else:
                    yield text
            case Expression():
                yield self._maybe_line(depth, pretty, self._expression_html(node))
            case Comment(value=value):
                yield self._maybe_line(depth, pretty, f"<!--{value}-->")
            case Doctype(value=value):
                yield self._maybe_line(depth, pretty, f"<!{value}>")
            case Frontmatter(code=code):
                if keep_syntax:
                    yield f"---\n{code}\n---\n" if code else "---\n---\n"
            case _:
                logger.debug("Skipping unrecognized node %s", type(node).__name__)

    def _line(self, depth: int, content: str) -> str:
        """One pretty-printed line, or nothing for empty content."""
        if not content:
            return ""
        return f"{self._options.indent * depth}{content}\n"

    def _maybe_line(self, depth: int, pretty: bool, content: str) -> str:
        return self._line(depth, content.strip()) if pretty else content

    # =========================================================================
    # Elements and components
    # =========================================================================

    def _render_tag(
        self, node: TagNode, depth: int, pretty: bool, pending: list[_Work]
    ) -> Iterator[str]:
        tag = node.tag
        attrs = self._render_attributes(node.attributes)
        prefix = self._options.indent * depth if pretty else ""
        newline = "\n" if pretty else ""

        if isinstance(node, Element) and is_void_element(tag):
            yield f"{prefix}<{tag}{attrs}>{newline}"
            return
        if node.self_closing:
            yield f"{prefix}<{tag}{attrs} />{newline}"
            return
        if not node.children:
            yield f"{prefix}<{tag}{attrs}></{tag}>{newline}"
            return

        raw = isinstance(node, Element) and is_raw_text_element(tag)
        children = reversed(node.children)

        if pretty and all(isinstance(c, (Text, Expression)) for c in node.children):
            # Text-only content stays on the tag's line
            yield f"{prefix}<{tag}{attrs}>"
            pending.append(f"</{tag}>\n")
            pending.extend(_Pending(child, 0, False, raw) for child in children)
            return

        yield f"{prefix}<{tag}{attrs}>{newline}"
        pending.append(f"{prefix}</{tag}>{newline}")
        child_depth = depth + 1 if pretty else 0
        pending.extend(_Pending(child, child_depth, pretty, raw) for child in children)

    def _render_component(
        self, node: Component, depth: int, pretty: bool, pending: list[_Work]
    ) -> Iterator[str]:
        if self._options.keep_template_syntax:
            yield from self._render_tag(node, depth, pretty, pending)
            return
        if self._component_renderer is not None:
            markup = self._component_renderer.render_component(node, self.props(node))
            yield self._maybe_line(depth, pretty, markup)
            return
        yield self._maybe_line(
            depth, pretty, f"<!-- Component: {comment_safe(node.tag)} -->"
        )

    def props(self, node: TagNode) -> dict[str, Any]:
        """Map attribute names to values for a component renderer.

        Expression values are evaluated when evaluation is enabled.
        """
        props: dict[str, Any] = {}
        for attr in node.attributes:
            value = attr.value
            if isinstance(value, Expression) and self._options.evaluate_expressions:
                value = self._evaluate(value)
            props[attr.name] = value
        return props

    # =========================================================================
    # Attributes and expressions
    # =========================================================================

    def _render_attributes(self, attributes: tuple[Attribute, ...]) -> str:
        sb = StringBuilder()
        for attr in attributes:
            rendered = self._render_attribute(attr)
            if rendered:
                sb.append(" ").append(rendered)
        return sb.build()

    def _render_attribute(self, attr: Attribute) -> str:
        name = attr.name
        value: Any = attr.value
        if not self._is_renderable_name(name):
            logger.debug("Dropping attribute with unsafe name %r", name)
            return ""

        if isinstance(value, Expression):
            if self._options.keep_template_syntax:
                return f"{name}={{{value.code}}}"
            if not self._options.evaluate_expressions:
                return f'{name}="{escape_html("{" + value.code + "}")}"'
            value = self._evaluate(value)

        if value is True:
            return name
        if value is False or value is None:
            return ""
        return f'{name}="{escape_html(str(value))}"'

    def _is_renderable_name(self, name: str) -> bool:
        if self._options.keep_template_syntax and name.startswith("{") and name.endswith("}"):
            return True
        return bool(name) and _UNSAFE_NAME.search(name) is None

    def _expression_html(self, node: Expression) -> str:
        if self._options.keep_template_syntax:
            return f"{{{node.code}}}"
        if self._options.evaluate_expressions:
            value = self._evaluate(node)
            return "" if value is None else escape_html(str(value))
        return f"<!-- Expression: {comment_safe(node.code)} -->"

    def _evaluate(self, node: Expression) -> Any:
        evaluator = self._options.evaluator
        assert evaluator is not None  # checked in __init__
        return evaluator(node.code)


def render_props(props: Mapping[str, Any]) -> str:
    """Render a props mapping as an HTML attribute string.

    Convenience for component renderers; follows the same boolean and
    escaping rules as element attributes.

    Example:
        >>> render_props({"id": "a&b", "hidden": True, "open": False})
        ' id="a&amp;b" hidden'
    """
    sb = StringBuilder()
    for name, value in props.items():
        if not name or _UNSAFE_NAME.search(name):
            continue
        if value is True:
            sb.append(f" {name}")
        elif value is not False and value is not None:
            sb.append(f' {name}="{escape_html(str(value))}"')
    return sb.build()


def _escape_leading_fence(text: str) -> str:
    """Write a leading ``---`` line with ``&#45;`` so it does not read as frontmatter."""
    first_line = text.split("\n", 1)[0]
    if first_line.rstrip(" \t") == "---":
        return "&#45;" + text[1:]
    return text
