#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/parsers/markdown.py
"""Markdown to document tree reconstruction.

This module rebuilds an editor document tree from interchange markdown, as
produced by ``blogmd.renderers.markdown`` or written by hand. The pipeline is

    text -> front matter split (optional) -> math preprocessing
         -> bridge.render -> bridge.to_tree(schema) -> doc

Parsing is asynchronous only so the default bridge (mistune and
BeautifulSoup) can be imported on demand without blocking the event loop;
the conversion itself performs no I/O.

"""

from __future__ import annotations

import asyncio
import logging

from blogmd.ast.nodes import Node
from blogmd.constants import DOC
from blogmd.exceptions import BlogMdError, ParsingError
from blogmd.options.markdown import MarkdownParserOptions
from blogmd.parsers.base import BaseParser, ParserInput
from blogmd.parsers.bridge import MarkupBridge, load_default_bridge
from blogmd.preprocessing.math import preprocess_math
from blogmd.schema import DEFAULT_SCHEMA
from blogmd.utils.decorators import debug_timer
from blogmd.utils.frontmatter import split_frontmatter

logger = logging.getLogger(__name__)


class MarkdownParser(BaseParser):
    """Reconstruct document trees from markdown with ``$``/``$$`` math.

    Parameters
    ----------
    options : MarkdownParserOptions or None, default = None
        Parser configuration, including an optional custom bridge and schema

    Examples
    --------
        >>> import asyncio
        >>> tree = asyncio.run(MarkdownParser().parse("Area: $\\\\pi r^2$"))
        >>> [child["type"] for child in tree.to_dict()["content"][0]["content"]]
        ['text', 'inlineMath']

    """

    def __init__(self, options: MarkdownParserOptions | None = None):
        """Initialize the parser with options."""
        BaseParser._validate_options_type(options, MarkdownParserOptions, "markdown")
        options = options or MarkdownParserOptions()
        BaseParser.__init__(self, options)
        self.options: MarkdownParserOptions = options
        self.schema = options.schema or DEFAULT_SCHEMA

    async def parse(self, input_data: ParserInput) -> Node:
        """Parse markdown into a ``doc`` tree.

        Raises
        ------
        ParsingError
            If the bridge fails to render or map the markup, or returns a
            root other than ``doc``
        DependencyError
            If the default bridge's libraries are unavailable

        """
        text = self._load_text_content(input_data)

        frontmatter: dict = {}
        if self.options.parse_frontmatter:
            text, frontmatter = split_frontmatter(text)

        bridge = await self._load_bridge()

        with debug_timer(logger, "Markdown import"):
            prepared = preprocess_math(text) if self.options.preprocess_math else text
            try:
                markup = bridge.render(prepared)
                tree = bridge.to_tree(markup, self.schema)
            except BlogMdError:
                raise
            except Exception as e:
                raise ParsingError(
                    f"Failed to convert markdown to a document tree: {e}",
                    parsing_stage="markup",
                    original_error=e,
                ) from e

        if not isinstance(tree, Node) or tree.type != DOC:
            found = tree.type if isinstance(tree, Node) else type(tree).__name__
            raise ParsingError(f"Markup bridge returned '{found}' instead of a 'doc' root", parsing_stage="markup")

        if frontmatter:
            tree.attrs["frontmatter"] = frontmatter
        return tree

    async def _load_bridge(self) -> MarkupBridge:
        if self.options.bridge is not None:
            return self.options.bridge
        # Importing mistune and bs4 the first time is the only blocking work
        return await asyncio.to_thread(
            load_default_bridge,
            self.options.parse_tables,
            self.options.parse_strikethrough,
        )


async def parse(text: ParserInput, options: MarkdownParserOptions | None = None) -> Node:
    """Reconstruct a ``doc`` tree from markdown.

    Parameters
    ----------
    text : str, bytes, Path, or file-like
        Interchange markdown
    options : MarkdownParserOptions or None, default None
        Parser configuration

    Returns
    -------
    Node
        ``doc`` root; never empty (an empty input yields one empty paragraph)

    Examples
    --------
        >>> import asyncio
        >>> from blogmd.ast import find_nodes
        >>> tree = asyncio.run(parse("I have $5 and $10."))
        >>> find_nodes(tree, "inlineMath")
        []

    """
    return await MarkdownParser(options).parse(text)


def parse_sync(text: ParserInput, options: MarkdownParserOptions | None = None) -> Node:
    """Blocking wrapper around ``parse`` for code without an event loop.

    Raises
    ------
    RuntimeError
        If called from a running event loop; ``await parse(...)`` there instead

    """
    return asyncio.run(parse(text, options))
