#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/parsers/__init__.py
"""Parsers that reconstruct document trees from interchange text.

The DOM mapper in ``blogmd.parsers.dom`` imports BeautifulSoup at module
level, so it is only loaded through the bridge when a parse needs it.
"""

from blogmd.parsers.base import BaseParser
from blogmd.parsers.bridge import MarkupBridge, MistuneSoupBridge, load_default_bridge
from blogmd.parsers.markdown import MarkdownParser, parse, parse_sync

__all__ = [
    "BaseParser",
    "MarkdownParser",
    "MarkupBridge",
    "MistuneSoupBridge",
    "load_default_bridge",
    "parse",
    "parse_sync",
]
