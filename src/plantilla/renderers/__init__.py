"""Renderers for template ASTs.

- html: HtmlRenderer (buffered output)
- stream: StreamingHtmlBuilder (chunked async output)
- protocol: ASTRenderer and ComponentRenderer interfaces
"""

from plantilla.renderers.html import HtmlRenderer, render_props
from plantilla.renderers.protocol import ASTRenderer, ComponentRenderer
from plantilla.renderers.stream import ChunkWriter, StreamingHtmlBuilder

__all__ = [
    "ASTRenderer",
    "ChunkWriter",
    "ComponentRenderer",
    "HtmlRenderer",
    "StreamingHtmlBuilder",
    "render_props",
]
