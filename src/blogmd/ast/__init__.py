#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/ast/__init__.py
"""Document tree for rich post content.

This package defines the typed node/mark structure shared by both
conversion directions, along with builders, JSON (de)serialization and
traversal helpers.

Examples
--------
    >>> from blogmd.ast import doc, heading, text
    >>> tree = doc(heading(1, text("Title")))
    >>> tree.to_dict()
    {'type': 'doc', 'content': [{'type': 'heading', 'attrs': {'level': 1}, 'content': [{'type': 'text', 'text': 'Title'}]}]}

"""

from blogmd.ast.builder import (
    DocumentBuilder,
    block_math,
    blockquote,
    bold,
    bullet_list,
    code,
    code_block,
    doc,
    hard_break,
    heading,
    horizontal_rule,
    image,
    inline_math,
    italic,
    link,
    list_item,
    ordered_list,
    paragraph,
    strike,
    table,
    table_cell,
    table_header,
    table_row,
    text,
    underline,
)
from blogmd.ast.nodes import Mark, Node, sort_marks
from blogmd.ast.serialization import ast_to_json, dict_to_node, json_to_ast, node_to_dict
from blogmd.ast.utils import extract_text, find_nodes, iter_nodes, merge_adjacent_text
from blogmd.ast.visitors import NodeVisitor

__all__ = [
    "DocumentBuilder",
    "Mark",
    "Node",
    "NodeVisitor",
    "ast_to_json",
    "block_math",
    "blockquote",
    "bold",
    "bullet_list",
    "code",
    "code_block",
    "dict_to_node",
    "doc",
    "extract_text",
    "find_nodes",
    "hard_break",
    "heading",
    "horizontal_rule",
    "image",
    "inline_math",
    "italic",
    "iter_nodes",
    "json_to_ast",
    "link",
    "list_item",
    "merge_adjacent_text",
    "node_to_dict",
    "ordered_list",
    "paragraph",
    "sort_marks",
    "strike",
    "table",
    "table_cell",
    "table_header",
    "table_row",
    "text",
    "underline",
]
