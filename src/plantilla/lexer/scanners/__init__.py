"""Mode-specific scanners for the template lexer.

Each scanner is a mixin that provides scanning logic for one lexer mode
(HTML, TAG, ATTRIBUTE, EXPRESSION, FRONTMATTER, RAW_TEXT).
"""

from __future__ import annotations

from plantilla.lexer.scanners.attribute import AttributeScannerMixin
from plantilla.lexer.scanners.expression import (
    ExpressionScannerMixin,
    find_expression_end,
)
from plantilla.lexer.scanners.frontmatter import FrontmatterScannerMixin
from plantilla.lexer.scanners.markup import MarkupScannerMixin
from plantilla.lexer.scanners.raw_text import RawTextScannerMixin
from plantilla.lexer.scanners.tag import TagScannerMixin

__all__ = [
    "AttributeScannerMixin",
    "ExpressionScannerMixin",
    "FrontmatterScannerMixin",
    "MarkupScannerMixin",
    "RawTextScannerMixin",
    "TagScannerMixin",
    "find_expression_end",
]
