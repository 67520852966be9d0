#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/schema.py
"""Typed document schema used to map HTML-like markup to document trees.

A ``Schema`` is a registry of node and mark specifications. Each spec states
where the type may appear (its group), what it may contain, and the parse
rules that recognize it in markup. The default schema declares the editor's
post vocabulary, including the math nodes that pick up the marker elements
written by ``blogmd.preprocessing.math``.

Parse rules match elements by tag name and, optionally, by exact attribute
values. When several rules match, the highest priority wins.

Examples
--------
    >>> from bs4 import BeautifulSoup
    >>> span = BeautifulSoup('<span data-type="inline-math" data-latex="x"></span>', "html.parser").span
    >>> spec, attrs = DEFAULT_SCHEMA.match_node(span)
    >>> spec.name, attrs
    ('inlineMath', {'latex': 'x'})

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Literal, Mapping, Optional

from blogmd.constants import (
    BLOCK_MATH,
    BLOCK_MATH_MARKER_TYPE,
    BLOCKQUOTE,
    BULLET_LIST,
    CODE_BLOCK,
    DEFAULT_ORDERED_LIST_START,
    DOC,
    HARD_BREAK,
    HEADING,
    HORIZONTAL_RULE,
    IMAGE,
    INLINE_MATH,
    INLINE_MATH_MARKER_TYPE,
    LIST_ITEM,
    MARK_BOLD,
    MARK_CODE,
    MARK_ITALIC,
    MARK_LINK,
    MARK_STRIKE,
    MARK_UNDERLINE,
    MATH_LATEX_ATTRIBUTE,
    MATH_TYPE_ATTRIBUTE,
    ORDERED_LIST,
    PARAGRAPH,
    TABLE,
    TABLE_CELL,
    TABLE_HEADER,
    TABLE_ROW,
    TEXT,
)

NodeGroup = Literal["doc", "block", "inline", "list_item", "table_row", "table_cell"]
ContentKind = Literal["block", "inline", "text", "list_item", "table_row", "table_cell"]

# Elements are duck-typed: anything with ``name`` and ``get(attr)`` works,
# which covers BeautifulSoup tags.
AttrGetter = Callable[[Any], dict[str, Any]]


@dataclass(frozen=True)
class ParseRule:
    """Recognize an element of markup.

    Parameters
    ----------
    tag : str
        Element name to match, lower case
    attrs : Mapping[str, str], default = empty
        Attribute values that must all be present and equal
    get_attrs : callable or None, default = None
        Computes node/mark attributes from the matched element
    priority : int, default = 50
        Higher priorities are tried first

    """

    tag: str
    attrs: Mapping[str, str] = field(default_factory=dict)
    get_attrs: Optional[AttrGetter] = None
    priority: int = 50

    def matches(self, element: Any) -> bool:
        """Return True if ``element`` satisfies this rule."""
        if getattr(element, "name", None) != self.tag:
            return False
        return all(element.get(name) == value for name, value in self.attrs.items())

    def attributes_for(self, element: Any) -> dict[str, Any]:
        return self.get_attrs(element) if self.get_attrs is not None else {}


@dataclass(frozen=True)
class NodeSpec:
    """Specification of a node type.

    Parameters
    ----------
    name : str
        Node type name as stored in the tree
    group : str
        Where the node may appear: ``block``, ``inline``, ``list_item``,
        ``table_row``, ``table_cell`` or ``doc``
    content : str or None
        Kind of children the node holds; ``None`` for leaves
    parse_rules : tuple of ParseRule
        Rules recognizing the node in markup
    leading_paragraph : bool, default = False
        The first child must be a paragraph (list items)
    preserve_whitespace : bool, default = False
        Text is taken verbatim (code blocks)

    """

    name: str
    group: NodeGroup
    content: Optional[ContentKind] = None
    parse_rules: tuple[ParseRule, ...] = ()
    leading_paragraph: bool = False
    preserve_whitespace: bool = False

    @property
    def is_leaf(self) -> bool:
        return self.content is None


@dataclass(frozen=True)
class MarkSpec:
    """Specification of a mark type and the rules that recognize it."""

    name: str
    parse_rules: tuple[ParseRule, ...] = ()


class Schema:
    """Registry of node and mark specifications.

    Parameters
    ----------
    nodes : iterable of NodeSpec
        Node types; must include ``doc``, ``paragraph`` and ``text``
    marks : iterable of MarkSpec
        Mark types

    Raises
    ------
    ValueError
        If a required node type is missing or a name is declared twice

    """

    REQUIRED_NODES = (DOC, PARAGRAPH, TEXT)

    def __init__(self, nodes: Iterable[NodeSpec], marks: Iterable[MarkSpec] = ()):
        self.nodes: dict[str, NodeSpec] = {}
        self.marks: dict[str, MarkSpec] = {}
        for spec in nodes:
            if spec.name in self.nodes:
                raise ValueError(f"Node type '{spec.name}' declared twice")
            self.nodes[spec.name] = spec
        for mark in marks:
            if mark.name in self.marks:
                raise ValueError(f"Mark type '{mark.name}' declared twice")
            self.marks[mark.name] = mark

        missing = [name for name in self.REQUIRED_NODES if name not in self.nodes]
        if missing:
            raise ValueError(f"Schema is missing required node types: {', '.join(missing)}")

        self._node_rules = sorted(
            ((rule, spec) for spec in self.nodes.values() for rule in spec.parse_rules),
            key=lambda pair: -pair[0].priority,
        )
        self._mark_rules = sorted(
            ((rule, spec) for spec in self.marks.values() for rule in spec.parse_rules),
            key=lambda pair: -pair[0].priority,
        )

    def node(self, name: str) -> Optional[NodeSpec]:
        return self.nodes.get(name)

    def mark(self, name: str) -> Optional[MarkSpec]:
        return self.marks.get(name)

    def is_inline(self, node_type: str) -> bool:
        """Return True for node types that live inside textblocks."""
        spec = self.nodes.get(node_type)
        return spec is not None and spec.group == "inline"

    def match_node(self, element: Any) -> Optional[tuple[NodeSpec, dict[str, Any]]]:
        """Return the node spec and attributes for ``element``, if any rule matches."""
        for rule, spec in self._node_rules:
            if rule.matches(element):
                return spec, rule.attributes_for(element)
        return None

    def match_mark(self, element: Any) -> Optional[tuple[MarkSpec, dict[str, Any]]]:
        """Return the mark spec and attributes for ``element``, if any rule matches."""
        for rule, spec in self._mark_rules:
            if rule.matches(element):
                return spec, rule.attributes_for(element)
        return None

    def __repr__(self) -> str:
        return f"Schema(nodes={list(self.nodes)}, marks={list(self.marks)})"


# ---------------------------------------------------------------------------
# Attribute getters
# ---------------------------------------------------------------------------


def _latex_attrs(element: Any) -> dict[str, Any]:
    return {"latex": element.get(MATH_LATEX_ATTRIBUTE) or ""}


def _ordered_list_attrs(element: Any) -> dict[str, Any]:
    try:
        start = int(element.get("start", DEFAULT_ORDERED_LIST_START))
    except (TypeError, ValueError):
        start = DEFAULT_ORDERED_LIST_START
    return {"start": start}


def _code_block_attrs(element: Any) -> dict[str, Any]:
    code = element.find("code") if hasattr(element, "find") else None
    classes = (code.get("class") if code is not None else None) or element.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    for css_class in classes:
        if css_class.startswith("language-"):
            return {"language": css_class[len("language-") :] or None}
    return {"language": None}


def _image_attrs(element: Any) -> dict[str, Any]:
    return {"src": element.get("src") or "", "alt": element.get("alt") or "", "title": element.get("title") or None}


def _link_attrs(element: Any) -> dict[str, Any]:
    attrs: dict[str, Any] = {"href": element.get("href") or ""}
    if element.get("title"):
        attrs["title"] = element.get("title")
    return attrs


def _heading_rule(level: int) -> ParseRule:
    return ParseRule(f"h{level}", get_attrs=lambda element: {"level": level})


def default_schema() -> Schema:
    """Build the schema for blog post content.

    Covers the editor's starter vocabulary (paragraphs, headings, lists,
    blockquotes, code, rules, hard breaks), images, tables, and the
    ``inlineMath``/``blockMath`` nodes recognized from math marker elements.

    """
    nodes = [
        NodeSpec(DOC, "doc", "block"),
        NodeSpec(PARAGRAPH, "block", "inline", (ParseRule("p"),)),
        NodeSpec(HEADING, "block", "inline", tuple(_heading_rule(level) for level in range(1, 7))),
        NodeSpec(BLOCKQUOTE, "block", "block", (ParseRule("blockquote"),)),
        NodeSpec(
            CODE_BLOCK,
            "block",
            "text",
            (ParseRule("pre", get_attrs=_code_block_attrs),),
            preserve_whitespace=True,
        ),
        NodeSpec(BULLET_LIST, "block", "list_item", (ParseRule("ul"),)),
        NodeSpec(ORDERED_LIST, "block", "list_item", (ParseRule("ol", get_attrs=_ordered_list_attrs),)),
        NodeSpec(LIST_ITEM, "list_item", "block", (ParseRule("li"),), leading_paragraph=True),
        NodeSpec(HORIZONTAL_RULE, "block", None, (ParseRule("hr"),)),
        NodeSpec(IMAGE, "block", None, (ParseRule("img", get_attrs=_image_attrs),)),
        NodeSpec(TABLE, "block", "table_row", (ParseRule("table"),)),
        NodeSpec(TABLE_ROW, "table_row", "table_cell", (ParseRule("tr"),)),
        NodeSpec(TABLE_HEADER, "table_cell", "block", (ParseRule("th"),)),
        NodeSpec(TABLE_CELL, "table_cell", "block", (ParseRule("td"),)),
        NodeSpec(
            BLOCK_MATH,
            "block",
            None,
            (ParseRule("div", {MATH_TYPE_ATTRIBUTE: BLOCK_MATH_MARKER_TYPE}, _latex_attrs, priority=100),),
        ),
        NodeSpec(TEXT, "inline"),
        NodeSpec(HARD_BREAK, "inline", None, (ParseRule("br"),)),
        NodeSpec(
            INLINE_MATH,
            "inline",
            None,
            (ParseRule("span", {MATH_TYPE_ATTRIBUTE: INLINE_MATH_MARKER_TYPE}, _latex_attrs, priority=100),),
        ),
    ]
    marks = [
        MarkSpec(MARK_LINK, (ParseRule("a", get_attrs=_link_attrs),)),
        MarkSpec(MARK_BOLD, (ParseRule("strong"), ParseRule("b"))),
        MarkSpec(MARK_ITALIC, (ParseRule("em"), ParseRule("i"))),
        MarkSpec(MARK_STRIKE, (ParseRule("s"), ParseRule("del"), ParseRule("strike"))),
        MarkSpec(MARK_UNDERLINE, (ParseRule("u"),)),
        MarkSpec(MARK_CODE, (ParseRule("code"),)),
    ]
    return Schema(nodes, marks)


DEFAULT_SCHEMA = default_schema()
