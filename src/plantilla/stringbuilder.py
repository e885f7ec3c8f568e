"""Append-only text buffer used by the renderers.

Rendering produces many small fragments. Collecting them in a list and
joining once keeps output assembly linear in the document size. The
buffer also knows how many characters it holds, which is what the
streaming builder compares against its chunk size.

"""

from __future__ import annotations

from collections.abc import Iterable


class StringBuilder:
    """Fragment buffer with a running character count.

    Usage:
            >>> sb = StringBuilder()
            >>> _ = sb.append("<p>").append("hi").append("</p>")
            >>> len(sb)
            9
            >>> sb.take()
            '<p>hi</p>'
            >>> len(sb)
            0

    Instances belong to one render call and are never shared.

    """

    __slots__ = ("_fragments", "_length")

    def __init__(self) -> None:
        self._fragments: list[str] = []
        self._length = 0

    def append(self, text: str) -> StringBuilder:
        """Add one fragment; empty strings are ignored."""
        if text:
            self._fragments.append(text)
            self._length += len(text)
        return self

    def extend(self, fragments: Iterable[str]) -> StringBuilder:
        """Add every fragment from an iterable (generators included)."""
        for text in fragments:
            self.append(text)
        return self

    def build(self) -> str:
        """Current contents as one string; the buffer is left as is."""
        return "".join(self._fragments)

    def take(self) -> str:
        """Current contents as one string, leaving the buffer empty."""
        text = self.build()
        self._fragments.clear()
        self._length = 0
        return text

    def __len__(self) -> int:
        """Number of buffered characters."""
        return self._length
