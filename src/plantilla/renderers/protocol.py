"""Renderer protocols: the narrow interfaces downstream adapters implement.

``ASTRenderer`` is any object that turns a parsed Fragment into a string.
``ComponentRenderer`` is the hook a UI-framework adapter implements to
render a Component node from its props; the HtmlRenderer inserts the
returned markup in place of the inert placeholder comment.

Example:
    from plantilla.renderers.protocol import ComponentRenderer

    class Badges:
        def render_component(self, node, props):
            return f"<span class=\"badge\">{props.get('label', '')}</span>"

    HtmlRenderer(component_renderer=Badges()).render(fragment)

"""

from collections.abc import Mapping
from typing import Any, Protocol

from plantilla.nodes import Component, Fragment


class ASTRenderer(Protocol):
    """Protocol for AST renderers.

    The built-in ``HtmlRenderer`` conforms to this protocol.

    """

    def render(self, node: Fragment) -> str:
        """Render a Fragment AST to a string."""
        ...


class ComponentRenderer(Protocol):
    """Protocol for rendering Component nodes.

    ``props`` maps attribute names to their values: strings, booleans,
    Expression nodes, or evaluated results when expression evaluation
    is enabled. The returned markup is inserted verbatim.

    """

    def render_component(self, node: Component, props: Mapping[str, Any]) -> str:
        ...
