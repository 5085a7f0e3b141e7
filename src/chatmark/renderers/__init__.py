"""Renderers for chatmark token sequences."""

from chatmark.renderers.html import HtmlRenderer
from chatmark.renderers.protocol import TokenRenderer

__all__ = [
    "HtmlRenderer",
    "TokenRenderer",
]
