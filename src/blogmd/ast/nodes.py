#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/ast/nodes.py
"""Document tree node classes.

This module defines the tagged node structure used for rich post content.
The shape mirrors the editor's JSON document: every node has a ``type``
name, a type-specific ``attrs`` mapping, an optional ordered ``content``
list, and text leaves carry ``text`` plus an ordered set of ``marks``.

Node Vocabulary
---------------
Block-level nodes:
    - doc, paragraph, heading, blockquote, codeBlock, horizontalRule
    - bulletList, orderedList, listItem
    - table, tableRow, tableHeader, tableCell
    - image, blockMath

Inline nodes:
    - text, inlineMath, hardBreak

Marks (text only):
    - bold, italic, underline, strike, code, link(href)

The type field is an open string so that trees produced by a newer editor
schema still load; consumers skip types they do not recognize.

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from blogmd.constants import (
    CANONICAL_MARK_ORDER,
    CONTENTLESS_NODE_TYPES,
    NODE_VOCABULARY,
    TEXT,
)


@dataclass
class Mark:
    """Annotation applied to a text leaf.

    Parameters
    ----------
    type : str
        Mark type name (``bold``, ``italic``, ``underline``, ``strike``,
        ``code`` or ``link``)
    attrs : dict, default = empty dict
        Mark attributes; ``link`` carries ``href`` and optionally ``title``

    """

    type: str
    attrs: dict[str, Any] = field(default_factory=dict)

    @property
    def rank(self) -> int:
        """Position of this mark in the canonical nesting order (outermost first)."""
        try:
            return CANONICAL_MARK_ORDER.index(self.type)
        except ValueError:
            return len(CANONICAL_MARK_ORDER)

    def to_dict(self) -> dict[str, Any]:
        """Return the editor-JSON form of this mark."""
        result: dict[str, Any] = {"type": self.type}
        if self.attrs:
            result["attrs"] = dict(self.attrs)
        return result


def sort_marks(marks: list[Mark]) -> list[Mark]:
    """Return marks in canonical order with duplicate types removed.

    Marks behave as an ordered set: a second mark of the same type replaces
    nothing and is dropped, keeping the first occurrence.

    """
    seen: set[str] = set()
    unique: list[Mark] = []
    for mark in marks:
        if mark.type in seen:
            continue
        seen.add(mark.type)
        unique.append(mark)
    return sorted(unique, key=lambda m: m.rank)


@dataclass
class Node:
    """Tagged node in the document tree.

    Parameters
    ----------
    type : str
        Node type name, e.g. ``"paragraph"`` or ``"inlineMath"``
    attrs : dict, default = empty dict
        Type-specific attributes (``level``, ``language``, ``src``, ``alt``,
        ``start``, ``latex``)
    content : list of Node or None, default = None
        Ordered children; ``None`` for leaves
    marks : list of Mark, default = empty list
        Marks applied to a ``text`` node
    text : str or None, default = None
        Text of a ``text`` node

    Raises
    ------
    ValueError
        If a node of the known vocabulary breaks a structural invariant: text
        on a non-text node, content on a text/math/hardBreak node, or marks
        on a non-text node. Unknown types are not checked.

    """

    type: str
    attrs: dict[str, Any] = field(default_factory=dict)
    content: Optional[list[Node]] = None
    marks: list[Mark] = field(default_factory=list)
    text: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate structural invariants."""
        if self.type == TEXT:
            if self.text is None:
                raise ValueError("text nodes require a text value")
            if self.content is not None:
                raise ValueError("text nodes cannot have content")
        elif self.type in NODE_VOCABULARY:
            if self.text is not None:
                raise ValueError(f"only text nodes carry text, got text on '{self.type}'")
            if self.marks:
                raise ValueError(f"marks apply only to text nodes, got marks on '{self.type}'")
        if self.content is not None and self.type in CONTENTLESS_NODE_TYPES:
            raise ValueError(f"'{self.type}' nodes cannot have content")

    @property
    def is_text(self) -> bool:
        """Return True for text leaves."""
        return self.type == TEXT

    @property
    def children(self) -> list[Node]:
        """Return child nodes, or an empty list for leaves."""
        return self.content if self.content is not None else []

    def attr(self, name: str, default: Any = None) -> Any:
        """Return an attribute value, falling back to ``default`` when absent or None."""
        value = self.attrs.get(name)
        return default if value is None else value

    def has_mark(self, mark_type: str) -> bool:
        """Return True if this node carries a mark of the given type."""
        return any(mark.type == mark_type for mark in self.marks)

    def to_dict(self) -> dict[str, Any]:
        """Return the editor-JSON form of this node.

        See Also
        --------
        blogmd.ast.serialization.node_to_dict

        """
        from blogmd.ast.serialization import node_to_dict

        return node_to_dict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Node:
        """Build a node tree from its editor-JSON form.

        See Also
        --------
        blogmd.ast.serialization.dict_to_node

        """
        from blogmd.ast.serialization import dict_to_node

        return dict_to_node(data)
