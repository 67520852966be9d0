#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/ast/builder.py
"""Builder helpers for constructing document trees.

This module provides small factory functions for each node type and a
fluent ``DocumentBuilder`` so that callers and tests can assemble trees
without spelling out attrs dictionaries by hand.

Examples
--------
    >>> from blogmd.ast.builder import doc, heading, paragraph, text, bold
    >>> tree = doc(heading(1, text("Title")), paragraph(text("hi "), text("there", bold())))

"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Union

from blogmd.ast.nodes import Mark, Node, sort_marks
from blogmd.constants import (
    BLOCK_MATH,
    BLOCKQUOTE,
    BULLET_LIST,
    CODE_BLOCK,
    DOC,
    HARD_BREAK,
    HEADING,
    HORIZONTAL_RULE,
    IMAGE,
    INLINE_MATH,
    LIST_ITEM,
    MARK_BOLD,
    MARK_CODE,
    MARK_ITALIC,
    MARK_LINK,
    MARK_STRIKE,
    MARK_UNDERLINE,
    ORDERED_LIST,
    PARAGRAPH,
    TABLE,
    TABLE_CELL,
    TABLE_HEADER,
    TABLE_ROW,
    TEXT,
)

InlineArg = Union[Node, str]


def _inline(children: Iterable[InlineArg]) -> list[Node]:
    return [text(child) if isinstance(child, str) else child for child in children]


def doc(*content: Node) -> Node:
    """Create a ``doc`` root."""
    return Node(DOC, content=list(content))


def paragraph(*content: InlineArg) -> Node:
    """Create a paragraph; plain strings become text nodes."""
    return Node(PARAGRAPH, content=_inline(content))


def heading(level: int, *content: InlineArg) -> Node:
    """Create a heading of the given level."""
    return Node(HEADING, attrs={"level": level}, content=_inline(content))


def text(value: str, *marks: Mark) -> Node:
    """Create a text leaf with optional marks."""
    return Node(TEXT, text=value, marks=sort_marks(list(marks)))


def bullet_list(*items: Node) -> Node:
    """Create a bullet list from list items."""
    return Node(BULLET_LIST, content=list(items))


def ordered_list(*items: Node, start: int = 1) -> Node:
    """Create an ordered list numbered from ``start``."""
    return Node(ORDERED_LIST, attrs={"start": start}, content=list(items))


def list_item(*content: Union[Node, str]) -> Node:
    """Create a list item; a plain string becomes a paragraph."""
    return Node(LIST_ITEM, content=[paragraph(child) if isinstance(child, str) else child for child in content])


def blockquote(*content: Node) -> Node:
    """Create a blockquote containing block nodes."""
    return Node(BLOCKQUOTE, content=list(content))


def code_block(code: str, language: Optional[str] = None) -> Node:
    """Create a fenced code block."""
    return Node(CODE_BLOCK, attrs={"language": language}, content=[text(code)] if code else [])


def table(*rows: Node) -> Node:
    """Create a table; the first row is the header row."""
    return Node(TABLE, content=list(rows))


def table_row(*cells: Node) -> Node:
    """Create a table row."""
    return Node(TABLE_ROW, content=list(cells))


def table_header(*content: Union[Node, str]) -> Node:
    """Create a header cell; a plain string becomes a paragraph."""
    return Node(TABLE_HEADER, content=[paragraph(child) if isinstance(child, str) else child for child in content])


def table_cell(*content: Union[Node, str]) -> Node:
    """Create a body cell; a plain string becomes a paragraph."""
    return Node(TABLE_CELL, content=[paragraph(child) if isinstance(child, str) else child for child in content])


def image(src: str, alt: str = "", title: Optional[str] = None) -> Node:
    """Create an image node."""
    attrs: dict[str, Any] = {"src": src, "alt": alt}
    if title:
        attrs["title"] = title
    return Node(IMAGE, attrs=attrs)


def horizontal_rule() -> Node:
    """Create a horizontal rule."""
    return Node(HORIZONTAL_RULE)


def hard_break() -> Node:
    """Create a hard line break."""
    return Node(HARD_BREAK)


def inline_math(latex: str) -> Node:
    """Create an inline math leaf."""
    return Node(INLINE_MATH, attrs={"latex": latex})


def block_math(latex: str) -> Node:
    """Create a block math leaf."""
    return Node(BLOCK_MATH, attrs={"latex": latex})


def bold() -> Mark:
    return Mark(MARK_BOLD)


def italic() -> Mark:
    return Mark(MARK_ITALIC)


def underline() -> Mark:
    return Mark(MARK_UNDERLINE)


def strike() -> Mark:
    return Mark(MARK_STRIKE)


def code() -> Mark:
    return Mark(MARK_CODE)


def link(href: str, title: Optional[str] = None) -> Mark:
    """Create a link mark."""
    attrs: dict[str, Any] = {"href": href}
    if title:
        attrs["title"] = title
    return Mark(MARK_LINK, attrs=attrs)


class DocumentBuilder:
    """Fluent builder for ``doc`` trees.

    Examples
    --------
        >>> tree = (
        ...     DocumentBuilder()
        ...     .add_heading(1, "Title")
        ...     .add_paragraph("Body text")
        ...     .add_block_math("E = mc^2")
        ...     .get_document()
        ... )

    """

    def __init__(self) -> None:
        """Initialize an empty builder."""
        self._children: list[Node] = []

    def add_node(self, node: Node) -> DocumentBuilder:
        """Append any block node."""
        self._children.append(node)
        return self

    def add_heading(self, level: int, *content: InlineArg) -> DocumentBuilder:
        return self.add_node(heading(level, *content))

    def add_paragraph(self, *content: InlineArg) -> DocumentBuilder:
        return self.add_node(paragraph(*content))

    def add_code_block(self, code_text: str, language: Optional[str] = None) -> DocumentBuilder:
        return self.add_node(code_block(code_text, language))

    def add_block_math(self, latex: str) -> DocumentBuilder:
        return self.add_node(block_math(latex))

    def add_horizontal_rule(self) -> DocumentBuilder:
        return self.add_node(horizontal_rule())

    def add_image(self, src: str, alt: str = "", title: Optional[str] = None) -> DocumentBuilder:
        return self.add_node(image(src, alt, title))

    def add_list(self, items: Iterable[Union[Node, str]], ordered: bool = False, start: int = 1) -> DocumentBuilder:
        """Append a list; plain strings become single-paragraph items."""
        nodes = [item if isinstance(item, Node) else list_item(item) for item in items]
        return self.add_node(ordered_list(*nodes, start=start) if ordered else bullet_list(*nodes))

    def add_table(self, header: list[str], rows: list[list[str]]) -> DocumentBuilder:
        """Append a table from plain cell strings."""
        header_row = table_row(*(table_header(value) for value in header))
        body_rows = [table_row(*(table_cell(value) for value in row)) for row in rows]
        return self.add_node(table(header_row, *body_rows))

    def get_document(self) -> Node:
        """Return the assembled ``doc`` node."""
        return doc(*self._children)
