"""Text processing utilities for Plantilla.

Provides escaping for rendered markup and the newline normalization the
lexer applies before scanning.

Example:
    >>> from plantilla.utils.text import escape_html
    >>> escape_html('Click & "Save"')
    'Click &amp; &quot;Save&quot;'
"""

from __future__ import annotations

import html as html_module
import re

_ESCAPE_RE = re.compile(r"[&<>\"']")
_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)
_BRACE_TABLE = str.maketrans({"{": "&#123;", "}": "&#125;"})


def escape_html(text: str) -> str:
    """Escape the five HTML-significant characters.

    Converts special characters to HTML entities:
    - & becomes &amp;
    - < becomes &lt;
    - > becomes &gt;
    - " becomes &quot;
    - ' becomes &#39;

    Returns the input object unchanged when nothing needs escaping.

    Args:
        text: Text or attribute value to escape

    Returns:
        HTML-escaped text safe for element content and quoted attributes

    Examples:
        >>> escape_html("<script>alert('xss')</script>")
        '&lt;script&gt;alert(&#39;xss&#39;)&lt;/script&gt;'
        >>> escape_html("plain")
        'plain'
    """
    if not text or _ESCAPE_RE.search(text) is None:
        return text
    return text.translate(_ESCAPE_TABLE)


def escape_braces(text: str) -> str:
    """Replace literal braces with character references.

    Used when rendering template syntax, where a bare ``{`` would
    start an expression on the next parse.
    """
    if "{" not in text and "}" not in text:
        return text
    return text.translate(_BRACE_TABLE)


def unescape_html(text: str) -> str:
    """Decode character references (``&amp;``, ``&#39;``, ``&lt;`` ...)."""
    if "&" not in text:
        return text
    return html_module.unescape(text)


def normalize_newlines(source: str) -> str:
    """Convert CRLF and lone CR line endings to LF.

    Examples:
        >>> normalize_newlines("a\\r\\nb\\rc")
        'a\\nb\\nc'
    """
    if "\r" not in source:
        return source
    return source.replace("\r\n", "\n").replace("\r", "\n")


def comment_safe(text: str) -> str:
    """Make text safe to embed inside an HTML comment.

    Escapes markup characters and breaks up ``--`` so the comment
    cannot be terminated early.
    """
    text = escape_html(text)
    while "--" in text:
        text = text.replace("--", "-&#45;")
    return text
