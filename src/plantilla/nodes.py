"""Typed AST nodes for page templates.

All AST nodes are frozen dataclasses with slots for:
- Immutability: transformations build new nodes, unchanged subtrees are shared
- Pattern matching: the parser and serializer dispatch with match statements
- Memory efficiency: __slots__ reduces the footprint of large trees

Node Hierarchy:
Node (base)
├── Fragment (document root)
├── Frontmatter
├── TagNode
│   ├── Element (lower-case-initial tag)
│   └── Component (upper-case-initial tag)
├── Text
├── Expression
├── Comment
├── Doctype
└── Attribute

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from plantilla.location import Span

DEFAULT_DIRECTIVE_PREFIXES: tuple[str, ...] = ("client:",)


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes.

    Every node owns exactly one Span, which contains the spans of its children.

    """

    span: Span


@dataclass(frozen=True, slots=True)
class Expression(Node):
    """Embedded code span, kept as opaque text.

    Template: {title}

    ``incomplete`` marks an expression whose closing brace never appeared
    before end of input.

    """

    code: str
    incomplete: bool = False


@dataclass(frozen=True, slots=True)
class Attribute(Node):
    """A single attribute on an element or component.

    ``value`` is True for presence-only attributes (``<input disabled>``),
    a decoded string for quoted or bare values, or an Expression for
    braced values (``title={heading}``).

    """

    name: str
    value: str | bool | Expression = True

    def is_directive(
        self, prefixes: Iterable[str] = DEFAULT_DIRECTIVE_PREFIXES
    ) -> bool:
        """Check whether the name carries a reserved directive prefix."""
        return self.name.startswith(tuple(prefixes))


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Literal text between tags, with character references decoded."""

    value: str


@dataclass(frozen=True, slots=True)
class Comment(Node):
    """Markup comment.

    Template: <!-- note -->

    """

    value: str


@dataclass(frozen=True, slots=True)
class Doctype(Node):
    """Markup declaration such as ``<!DOCTYPE html>``.

    ``value`` is everything between ``<!`` and ``>``.

    """

    value: str


@dataclass(frozen=True, slots=True)
class Frontmatter(Node):
    """The leading ``---`` delimited code block.

    At most one per document, and always the first child of the Fragment.

    """

    code: str


@dataclass(frozen=True, slots=True)
class TagNode(Node):
    """Shared shape of Element and Component."""

    tag: str
    attributes: tuple[Attribute, ...] = ()
    children: tuple[Child, ...] = ()
    self_closing: bool = False

    def get_attribute(self, name: str) -> Attribute | None:
        """Return the first attribute called name, or None."""
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None

    def directives(
        self, prefixes: Iterable[str] = DEFAULT_DIRECTIVE_PREFIXES
    ) -> tuple[Attribute, ...]:
        """Return the attributes that declare runtime directives."""
        prefixes = tuple(prefixes)
        return tuple(a for a in self.attributes if a.is_directive(prefixes))


@dataclass(frozen=True, slots=True)
class Element(TagNode):
    """Markup element with a lower-case-initial tag name.

    Template: <div class="card">...</div>

    """


@dataclass(frozen=True, slots=True)
class Component(TagNode):
    """Component reference with an upper-case-initial tag name.

    Template: <Counter client:load />

    The classification is made once at parse time from the tag name.

    """


type Child = Frontmatter | Element | Component | Text | Expression | Comment | Doctype


@dataclass(frozen=True, slots=True)
class Fragment(Node):
    """Document root.

    Exactly one per parse, even for empty input.

    """

    children: tuple[Child, ...] = ()

    @property
    def frontmatter(self) -> Frontmatter | None:
        """The leading Frontmatter node, if present."""
        if self.children and isinstance(self.children[0], Frontmatter):
            return self.children[0]
        return None

    def __iter__(self) -> Iterator[Child]:
        return iter(self.children)


type AnyNode = Fragment | Child | Attribute


def is_component_tag(tag: str) -> bool:
    """Return True if tag names a Component (upper-case first character)."""
    return bool(tag) and tag[0].isupper()
