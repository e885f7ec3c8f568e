"""Parsing functions over immutable ParserState.

Every function takes a ParserState and returns ``(next_state, node)``:
- state.py: ParserState (tokens, index, diagnostics)
- attributes.py: attribute lists, value decoding, duplicate directives
- content.py: text, expressions, comments, declarations, frontmatter
- elements.py: elements and components on a stack of open elements, recovery rules
- document.py: the root Fragment
"""

from plantilla.parsing.attributes import decode_attribute_value, parse_attributes
from plantilla.parsing.document import parse_document
from plantilla.parsing.elements import parse_element, parse_node
from plantilla.parsing.state import ParserState

__all__ = [
    "ParserState",
    "decode_attribute_value",
    "parse_attributes",
    "parse_document",
    "parse_element",
    "parse_node",
]
