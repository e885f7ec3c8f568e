"""Chunked streaming output for large documents.

The streaming builder consumes the same fragment generator as
HtmlRenderer.render(), buffering into a StringBuilder and flushing to the
caller's sink each time the buffer reaches the chunk size. Peak memory is
bounded by the chunk size (plus the largest single fragment) rather than
by the size of the document.

Writes are awaited one at a time, in document order. Exceptions raised by
the sink propagate to the caller unchanged.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable

from plantilla.config import DEFAULT_CHUNK_SIZE, HtmlOptions
from plantilla.nodes import Child, Fragment
from plantilla.renderers.html import HtmlRenderer
from plantilla.renderers.protocol import ComponentRenderer
from plantilla.stringbuilder import StringBuilder
from plantilla.utils.logger import get_logger

logger = get_logger(__name__)

type ChunkWriter = Callable[[str], Awaitable[object] | None]


class StreamingHtmlBuilder:
    """Render an AST to an async sink in bounded chunks.

    Usage:
        chunks: list[str] = []

        async def write(chunk: str) -> None:
            chunks.append(chunk)

        await StreamingHtmlBuilder(chunk_size=4096).write_to(fragment, write)

    Thread Safety:
        Holds only immutable configuration; each write_to() call has its
        own buffer.
    """

    __slots__ = ("_renderer", "_chunk_size")

    def __init__(
        self,
        options: HtmlOptions | None = None,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        component_renderer: ComponentRenderer | None = None,
    ) -> None:
        """Initialize streaming builder.

        Args:
            options: Rendering options shared with buffered rendering
            chunk_size: Buffered character count that triggers a flush
            component_renderer: Adapter that renders Component nodes

        Raises:
            ValueError: If chunk_size is not positive
        """
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._renderer = HtmlRenderer(options, component_renderer=component_renderer)
        self._chunk_size = chunk_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    async def write_to(self, node: Fragment | Child, write: ChunkWriter) -> int:
        """Render node, sending chunks to write.

        ``write`` may be a coroutine function or a plain callable.

        Returns:
            Number of chunks written.
        """
        buffer = StringBuilder()
        chunks = 0

        for piece in self._renderer.iter_html(node):
            buffer.append(piece)
            if len(buffer) >= self._chunk_size:
                await _deliver(write, buffer.take())
                chunks += 1

        if buffer:
            await _deliver(write, buffer.take())
            chunks += 1

        logger.debug("Streamed %d chunk(s) at chunk_size=%d", chunks, self._chunk_size)
        return chunks


async def _deliver(write: ChunkWriter, chunk: str) -> None:
    result = write(chunk)
    if inspect.isawaitable(result):
        await result
