#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/parsers/bridge.py
"""Markup bridges: render markdown to HTML and map the HTML to a tree.

The importer treats this step as a single swappable capability. Anything
implementing ``MarkupBridge`` can be passed through
``MarkdownParserOptions.bridge``; the default bridge renders with mistune and
maps the result through BeautifulSoup and ``SchemaDOMParser``. Neither step
touches the filesystem or needs a browser DOM.

"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from blogmd.constants import DEPS_MARKDOWN_BRIDGE
from blogmd.utils.decorators import requires_dependencies

if TYPE_CHECKING:
    from blogmd.ast.nodes import Node
    from blogmd.schema import Schema

logger = logging.getLogger(__name__)


@runtime_checkable
class MarkupBridge(Protocol):
    """Render markdown to markup, then map markup to a typed document tree."""

    def render(self, markdown: str) -> str:
        """Render markdown (with math already turned into marker elements) to HTML."""
        ...

    def to_tree(self, markup: str, schema: Schema) -> Node:
        """Map rendered markup to a ``doc`` tree using ``schema``."""
        ...


class MistuneSoupBridge:
    """Default bridge built on mistune and BeautifulSoup.

    Parameters
    ----------
    parse_tables : bool, default = True
        Enable the GFM table plugin
    parse_strikethrough : bool, default = True
        Enable the ``~~strike~~`` plugin

    Notes
    -----
    mistune runs with ``escape=False`` so the math marker elements (and any
    raw HTML an author wrote) reach the DOM mapper intact.

    """

    def __init__(self, parse_tables: bool = True, parse_strikethrough: bool = True):
        import mistune

        plugins = []
        if parse_strikethrough:
            plugins.append("strikethrough")
        if parse_tables:
            plugins.append("table")
        self._markdown = mistune.create_markdown(escape=False, plugins=plugins)

    def render(self, markdown: str) -> str:
        html = self._markdown(markdown)
        return html if isinstance(html, str) else ""

    def to_tree(self, markup: str, schema: Schema) -> Node:
        from bs4 import BeautifulSoup

        from blogmd.parsers.dom import SchemaDOMParser

        soup = BeautifulSoup(markup, "html.parser")
        return SchemaDOMParser(schema).parse(soup)


@lru_cache(maxsize=4)
@requires_dependencies("markdown bridge", DEPS_MARKDOWN_BRIDGE)
def load_default_bridge(parse_tables: bool = True, parse_strikethrough: bool = True) -> MistuneSoupBridge:
    """Load the mistune + BeautifulSoup bridge, importing its libraries on first use.

    Raises
    ------
    DependencyError
        If mistune or beautifulsoup4 is missing or too old

    """
    logger.debug("Loading default markup bridge (tables=%s, strikethrough=%s)", parse_tables, parse_strikethrough)
    return MistuneSoupBridge(parse_tables=parse_tables, parse_strikethrough=parse_strikethrough)
