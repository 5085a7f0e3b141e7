"""Utility modules for chatmark.

Provides:
- text: escape_html for free text
- logger: get_logger for logging
"""

from chatmark.utils.logger import get_logger
from chatmark.utils.text import escape_html

__all__ = [
    "escape_html",
    "get_logger",
]
