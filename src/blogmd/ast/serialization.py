#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/ast/serialization.py
"""JSON serialization and deserialization for document trees.

The editor stores post bodies as JSON documents of the form
``{"type": ..., "attrs": {...}, "content": [...], "marks": [...], "text": ...}``.
This module converts between that form and ``Node`` objects.

Examples
--------
    >>> from blogmd.ast.serialization import json_to_ast, ast_to_json
    >>> tree = json_to_ast('{"type": "doc", "content": [{"type": "horizontalRule"}]}')
    >>> ast_to_json(tree)
    '{"type": "doc", "content": [{"type": "horizontalRule"}]}'

"""

from __future__ import annotations

import json
from typing import Any, Mapping

from blogmd.ast.nodes import Mark, Node
from blogmd.constants import CONTENTLESS_NODE_TYPES


def node_to_dict(node: Node) -> dict[str, Any]:
    """Convert a node tree to editor-JSON dictionaries.

    Empty ``attrs`` and ``marks`` are omitted; ``content`` is emitted whenever
    the node has a children list, even an empty one.

    """
    result: dict[str, Any] = {"type": node.type}
    if node.attrs:
        result["attrs"] = dict(node.attrs)
    if node.content is not None:
        result["content"] = [node_to_dict(child) for child in node.content]
    if node.marks:
        result["marks"] = [mark.to_dict() for mark in node.marks]
    if node.text is not None:
        result["text"] = node.text
    return result


def dict_to_mark(data: Mapping[str, Any]) -> Mark:
    """Build a mark from its dictionary form."""
    if "type" not in data:
        raise ValueError(f"Mark is missing 'type': {data!r}")
    return Mark(type=str(data["type"]), attrs=dict(data.get("attrs") or {}))


def dict_to_node(data: Mapping[str, Any]) -> Node:
    """Build a node tree from editor-JSON dictionaries.

    Parameters
    ----------
    data : Mapping
        Dictionary with at least a ``type`` key

    Returns
    -------
    Node
        The reconstructed node

    Raises
    ------
    ValueError
        If ``type`` is missing or the node breaks a structural invariant

    Notes
    -----
    The editor writes ``"content": []`` on some atom nodes; an empty list on
    a math or hard break node is read as no content.

    """
    if not isinstance(data, Mapping) or "type" not in data:
        raise ValueError(f"Node is missing 'type': {data!r}")

    node_type = str(data["type"])
    content = data.get("content")
    if not content and node_type in CONTENTLESS_NODE_TYPES:
        content = None
    return Node(
        type=node_type,
        attrs=dict(data.get("attrs") or {}),
        content=[dict_to_node(child) for child in content] if content is not None else None,
        marks=[dict_to_mark(mark) for mark in data.get("marks") or []],
        text=data.get("text"),
    )


def ast_to_json(node: Node, indent: int | None = None) -> str:
    """Serialize a node tree to a JSON string."""
    return json.dumps(node_to_dict(node), indent=indent, ensure_ascii=False, default=str)


def json_to_ast(json_str: str) -> Node:
    """Deserialize a JSON string to a node tree.

    Raises
    ------
    ValueError
        If the string is not valid JSON or does not describe a node tree

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON document: {e}") from e
    return dict_to_node(data)
