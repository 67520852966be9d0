"""Configuration options for blogmd parsers and renderers."""

from blogmd.options.base import BaseParserOptions, BaseRendererOptions, CloneFrozenMixin
from blogmd.options.markdown import MarkdownParserOptions, MarkdownRendererOptions

__all__ = [
    "BaseParserOptions",
    "BaseRendererOptions",
    "CloneFrozenMixin",
    "MarkdownParserOptions",
    "MarkdownRendererOptions",
]
