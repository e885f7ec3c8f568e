"""Markup element tables shared by the lexer, parser and serializer.

Both the parser and the serializer consult VOID_ELEMENTS through
is_void_element(); a single table keeps parse and render rules identical.
"""

from __future__ import annotations

# Elements that never take a closing tag or children
VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

# Elements whose content is opaque text (no tags, no expressions)
RAW_TEXT_ELEMENTS = frozenset({"script", "style"})

_HEADINGS = ("h1", "h2", "h3", "h4", "h5", "h6")

# tag -> start tags that implicitly close it
IMPLICIT_CLOSERS: dict[str, frozenset[str]] = {
    "li": frozenset({"li"}),
    "dt": frozenset({"dt", "dd"}),
    "dd": frozenset({"dt", "dd"}),
    "p": frozenset({"p", "div", *_HEADINGS, "ul", "ol", "pre", "blockquote"}),
    "option": frozenset({"option", "optgroup"}),
    "optgroup": frozenset({"optgroup"}),
    "thead": frozenset({"tbody", "tfoot"}),
    "tbody": frozenset({"tbody", "tfoot"}),
    "tfoot": frozenset({"tbody"}),
    "tr": frozenset({"tr"}),
    "td": frozenset({"td", "th"}),
    "th": frozenset({"td", "th"}),
}


def is_void_element(tag: str) -> bool:
    """Check whether tag is a void element (case-insensitive)."""
    return tag.lower() in VOID_ELEMENTS


def is_raw_text_element(tag: str) -> bool:
    """Check whether tag holds opaque raw text (case-sensitive)."""
    return tag in RAW_TEXT_ELEMENTS


def is_implicitly_closed_by(tag: str, opening: str) -> bool:
    """Check whether an opening ``<opening>`` tag ends an open ``<tag>``.

    Example:
        >>> is_implicitly_closed_by("li", "li")
        True
        >>> is_implicitly_closed_by("p", "span")
        False
    """
    closers = IMPLICIT_CLOSERS.get(tag)
    return closers is not None and opening in closers
