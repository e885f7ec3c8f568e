"""Utility modules for Plantilla.

Provides:
- text: escape_html, unescape_html, normalize_newlines
- logger: get_logger for logging
"""

from plantilla.utils.logger import get_logger
from plantilla.utils.text import escape_html, normalize_newlines, unescape_html

__all__ = [
    "escape_html",
    "get_logger",
    "normalize_newlines",
    "unescape_html",
]
