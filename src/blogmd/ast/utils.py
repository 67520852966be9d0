#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/ast/utils.py
"""Utility functions for working with document trees.

Functions
---------
iter_nodes : Depth-first, document-order iteration over a tree
find_nodes : All nodes of a given type
extract_text : Plain text of a node or list of nodes
merge_adjacent_text : Join neighbouring text leaves with equal marks

Examples
--------
    >>> from blogmd.ast.builder import paragraph, text, inline_math
    >>> extract_text(paragraph(text("area "), inline_math("\\pi r^2")))
    'area \\pi r^2'

"""

from __future__ import annotations

from typing import Iterator, Union

from blogmd.ast.nodes import Node, sort_marks
from blogmd.constants import MATH_NODE_TYPES, TEXT


def iter_nodes(node: Node) -> Iterator[Node]:
    """Yield ``node`` and all its descendants in reading order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def find_nodes(node: Node, node_type: str) -> list[Node]:
    """Return every node of ``node_type`` in the tree rooted at ``node``."""
    return [candidate for candidate in iter_nodes(node) if candidate.type == node_type]


def extract_text(node_or_nodes: Union[Node, list[Node]], joiner: str = "", include_math: bool = True) -> str:
    r"""Extract plain text from a node or list of nodes.

    Parameters
    ----------
    node_or_nodes : Node or list of Node
        A single node or list of nodes to extract text from
    joiner : str, default = ""
        String used to join text parts; inline siblings already carry
        their own spacing so the default joins them as written
    include_math : bool, default = True
        Whether math nodes contribute their raw LaTeX

    Returns
    -------
    str
        Concatenated text

    """
    nodes = node_or_nodes if isinstance(node_or_nodes, list) else [node_or_nodes]
    parts: list[str] = []
    for root in nodes:
        for current in iter_nodes(root):
            if current.text is not None:
                parts.append(current.text)
            elif include_math and current.type in MATH_NODE_TYPES:
                parts.append(str(current.attrs.get("latex") or ""))
    return joiner.join(parts)


def merge_adjacent_text(nodes: list[Node]) -> list[Node]:
    """Join neighbouring text leaves that carry the same marks.

    The editor never stores two adjacent text leaves with identical marks;
    this brings hand-built or freshly mapped inline runs to that form.
    """
    merged: list[Node] = []
    for node in nodes:
        previous = merged[-1] if merged else None
        if previous is not None and node.is_text and previous.is_text and _same_marks(previous, node):
            merged[-1] = Node(TEXT, text=(previous.text or "") + (node.text or ""), marks=list(previous.marks))
        else:
            merged.append(node)
    return merged


def _same_marks(left: Node, right: Node) -> bool:
    return [mark.to_dict() for mark in sort_marks(left.marks)] == [mark.to_dict() for mark in sort_marks(right.marks)]
