"""AST Visitor and Transformer for template ASTs.

Provides a base visitor class with match-based dispatch, a pre-order
``walk`` iterator, and an immutable ``transform`` function for rewriting
frozen ASTs.

Example: collect hydrated components:

    class IslandCollector(BaseVisitor[None]):
        def __init__(self) -> None:
            self.islands: list[Component] = []

        def visit_component(self, node: Component) -> None:
            if node.directives():
                self.islands.append(node)

    collector = IslandCollector()
    collector.visit(fragment)

Example: drop comments:

    new_fragment = transform(
        fragment, lambda node: None if isinstance(node, Comment) else node
    )

Thread Safety:
    Visitors are NOT shared across threads by default (they may accumulate
    mutable state). Create a new visitor per thread. ``walk`` and
    ``transform`` are pure and safe to call from any thread.

"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterator

from plantilla.nodes import (
    Attribute,
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


class BaseVisitor[T]:
    """Read-only traversal with one hook per node kind.

    Override the ``visit_*`` hooks you need; the rest forward to
    ``visit_default``. ``visit()`` calls the hook for a node and then visits
    its attributes and children, so overriding a hook never stops descent.
    ``T`` is the hook return type (``None`` for collectors).

    """

    def visit(self, node: Node) -> T:
        """Run the hook for node, then visit everything below it."""
        result = self._dispatch(node)
        for child in iter_children(node):
            self.visit(child)
        return result

    def visit_default(self, node: Node) -> T:
        """Fallback hook; returns None unless overridden."""
        return None  # type: ignore[return-value]

    def visit_fragment(self, node: Fragment) -> T:
        return self.visit_default(node)

    def visit_frontmatter(self, node: Frontmatter) -> T:
        return self.visit_default(node)

    def visit_element(self, node: Element) -> T:
        return self.visit_default(node)

    def visit_component(self, node: Component) -> T:
        return self.visit_default(node)

    def visit_attribute(self, node: Attribute) -> T:
        return self.visit_default(node)

    def visit_text(self, node: Text) -> T:
        return self.visit_default(node)

    def visit_expression(self, node: Expression) -> T:
        return self.visit_default(node)

    def visit_comment(self, node: Comment) -> T:
        return self.visit_default(node)

    def visit_doctype(self, node: Doctype) -> T:
        return self.visit_default(node)

    def _dispatch(self, node: Node) -> T:
        """Route node to the hook for its kind."""
        match node:
            case Fragment():
                return self.visit_fragment(node)
            case Frontmatter():
                return self.visit_frontmatter(node)
            case Element():
                return self.visit_element(node)
            case Component():
                return self.visit_component(node)
            case Attribute():
                return self.visit_attribute(node)
            case Text():
                return self.visit_text(node)
            case Expression():
                return self.visit_expression(node)
            case Comment():
                return self.visit_comment(node)
            case Doctype():
                return self.visit_doctype(node)
            case _:
                return self.visit_default(node)


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct children of node.

    For elements and components, attributes come first, then content
    children. An attribute's only child is its Expression value, if any.
    """
    match node:
        case Fragment(children=children):
            yield from children
        case TagNode(attributes=attributes, children=children):
            yield from attributes
            yield from children
        case Attribute(value=Expression() as value):
            yield value
        case _:
            pass  # Leaf nodes: no children


def walk(node: Node) -> Iterator[Node]:
    """Yield node and all of its descendants in pre-order.

    Example:
        >>> from plantilla import parse
        >>> [type(n).__name__ for n in walk(parse("<b>{x}</b>").ast)]
        ['Fragment', 'Element', 'Expression']
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(tuple(iter_children(current))))


type Rewrite = Callable[[Node], Node | None]


def transform(fragment: Fragment, fn: Rewrite) -> Fragment:
    """Rebuild the tree bottom-up through fn.

    Each node reaches ``fn`` after its attributes and children have been
    rewritten; ``fn`` returns the node to keep (itself or a replacement) or
    None to drop it. Expressions held in attribute values are not passed to
    ``fn``. Subtrees that come back unchanged are reused as they are, and
    the input tree is never modified.

    Raises:
        TypeError: If fn drops the root or replaces it with a non-Fragment.

    Example:
        >>> from plantilla import Comment, parse
        >>> tree = parse("<p>a<!-- note --></p>").ast
        >>> stripped = transform(tree, lambda n: None if isinstance(n, Comment) else n)
        >>> len(stripped.children[0].children)
        1
    """
    result = _rewrite(fragment, fn)
    if not isinstance(result, Fragment):
        raise TypeError("transform fn must keep the root Fragment")
    return result


def _rewrite(node: Node, fn: Rewrite) -> Node | None:
    match node:
        case Fragment(children=children):
            kept = _rewrite_all(children, fn)
            if kept is not children:
                node = dataclasses.replace(node, children=kept)
        case TagNode(attributes=attributes, children=children):
            kept_attributes = _rewrite_all(attributes, fn)
            kept = _rewrite_all(children, fn)
            if kept_attributes is not attributes or kept is not children:
                node = dataclasses.replace(node, attributes=kept_attributes, children=kept)
    return fn(node)


def _rewrite_all[N: Node](items: tuple[N, ...], fn: Rewrite) -> tuple[N, ...]:
    """Rewritten items, or items itself when nothing changed."""
    rewritten = tuple(r for item in items if (r := _rewrite(item, fn)) is not None)
    if len(rewritten) == len(items) and all(a is b for a, b in zip(rewritten, items, strict=True)):
        return items
    return rewritten  # type: ignore[return-value]
