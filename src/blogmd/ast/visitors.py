#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/ast/visitors.py
"""Visitor pattern implementation for document tree traversal.

Nodes are tagged by a type string rather than by class, so dispatch goes by
name: a node of type ``bulletList`` is handed to ``visit_bullet_list``.
Types without a matching method fall through to ``generic_visit``, which
keeps visitors working when the editor schema grows new node types.

Examples
--------
Count headings in a tree:

    >>> class HeadingCounter(NodeVisitor):
    ...     def __init__(self):
    ...         self.count = 0
    ...
    ...     def visit_heading(self, node):
    ...         self.count += 1
    ...
    ...     def generic_visit(self, node):
    ...         for child in node.children:
    ...             self.visit(child)

"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

from blogmd.ast.nodes import Node

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


@lru_cache(maxsize=128)
def visit_method_name(node_type: str) -> str:
    """Return the visitor method name for a node type (``tableRow`` -> ``visit_table_row``)."""
    return "visit_" + _CAMEL_BOUNDARY.sub("_", node_type).lower()


class NodeVisitor:
    """Base class for document tree visitors.

    Subclasses implement ``visit_<type>`` methods for the node types they
    handle and may override ``generic_visit`` for everything else.

    """

    def visit(self, node: Node) -> Any:
        """Dispatch ``node`` to its ``visit_*`` method."""
        method = getattr(self, visit_method_name(node.type), None)
        if method is None:
            return self.generic_visit(node)
        return method(node)

    def generic_visit(self, node: Node) -> Any:
        """Visit all children of a node with no dedicated handler."""
        for child in node.children:
            self.visit(child)
        return None
