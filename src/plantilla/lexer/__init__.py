"""Mode-switching lexer for page templates.

This package provides a single-pass lexer that turns template source into
a flat token list terminated by exactly one EOF token.

Architecture:
lexer/
├── __init__.py          # Re-exports Lexer, LexerMode, tokenize
├── core.py              # Lexer class (mixin composition + navigation)
├── modes.py             # LexerMode enum, character classes
└── scanners/            # Mode-specific scanners
    ├── markup.py        # HTML mode (text, tags, comments)
    ├── tag.py           # Tag mode (attribute names, > and />)
    ├── attribute.py     # Attribute mode (one value)
    ├── expression.py    # Expression mode (brace matching)
    ├── frontmatter.py   # Leading --- block
    └── raw_text.py      # script/style content

Usage:
    >>> from plantilla.lexer import tokenize
    >>> [t.type.name for t in tokenize("<br/>")]
    ['TAG_OPEN', 'TAG_SELF_CLOSE', 'EOF']

"""

from plantilla.lexer.core import Lexer
from plantilla.lexer.modes import LexerMode
from plantilla.tokens import Token


def tokenize(source: str) -> list[Token]:
    """Tokenize source into a list ending with one EOF token.

    Never raises: malformed input is absorbed into text tokens.
    """
    return list(Lexer(source).tokenize())


__all__ = ["Lexer", "LexerMode", "tokenize"]
