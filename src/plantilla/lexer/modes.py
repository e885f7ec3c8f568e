"""Lexer operating modes and character classes.

This module defines the finite state machine modes for the lexer
and the character sets used to scan tag and attribute names.
"""

from __future__ import annotations

import string
from enum import Enum, auto


class LexerMode(Enum):
    """Lexer operating modes.

    The lexer switches between modes on literal delimiters:
    - HTML: Markup text between tags (default)
    - TAG: Inside ``<name ...`` up to ``>`` or ``/>``
    - ATTRIBUTE: Scanning one attribute value after ``=``
    - EXPRESSION: Inside ``{...}`` in markup
    - FRONTMATTER: Inside the leading ``---`` block
    - RAW_TEXT: Inside a script or style element

    """

    HTML = auto()
    TAG = auto()
    ATTRIBUTE = auto()
    EXPRESSION = auto()
    FRONTMATTER = auto()
    RAW_TEXT = auto()


# Modes that must emit their closing tokens even at end of input
PENDING_AT_EOF = frozenset(
    {LexerMode.ATTRIBUTE, LexerMode.EXPRESSION, LexerMode.FRONTMATTER}
)

TAG_NAME_START = frozenset(string.ascii_letters)
TAG_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "-_.:")

WHITESPACE = frozenset(" \t\n\r\f")

# Characters that end an attribute name or an unquoted attribute value
ATTRIBUTE_NAME_STOP = frozenset(" \t\n\r\f=>")
UNQUOTED_VALUE_STOP = frozenset(" \t\n\r\f>")

FRONTMATTER_FENCE = "---"
