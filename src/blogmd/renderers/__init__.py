#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/renderers/__init__.py
"""Renderers that convert document trees to text formats."""

from blogmd.renderers.base import BaseRenderer
from blogmd.renderers.markdown import MarkdownRenderer, serialize

__all__ = [
    "BaseRenderer",
    "MarkdownRenderer",
    "serialize",
]
