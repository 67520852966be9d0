#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for blogmd.

This module centralizes the node/mark vocabulary, marker element names,
dependency declarations and formatting defaults used across the library.

Constants are organized by category:
1. Type Definitions - Literal types and type aliases
2. Document Vocabulary - Node and mark type names
3. Math Markers - Inert elements emitted by the preprocessor
4. Markdown Formatting - Serializer defaults
5. Dependencies - Third-party packages needed by the default bridge
"""

from __future__ import annotations

from typing import Literal

# =============================================================================
# Type Definitions
# =============================================================================

EmphasisSymbol = Literal["_", "*"]
BulletMarker = Literal["-", "*", "+"]
CodeFenceChar = Literal["`", "~"]
DollarSpanKind = Literal["math", "text"]

NodeType = Literal[
    "doc",
    "paragraph",
    "heading",
    "text",
    "bulletList",
    "orderedList",
    "listItem",
    "blockquote",
    "codeBlock",
    "table",
    "tableRow",
    "tableHeader",
    "tableCell",
    "image",
    "horizontalRule",
    "inlineMath",
    "blockMath",
    "hardBreak",
]

MarkType = Literal["bold", "italic", "underline", "strike", "code", "link"]

# =============================================================================
# Document Vocabulary
# =============================================================================

DOC = "doc"
PARAGRAPH = "paragraph"
HEADING = "heading"
TEXT = "text"
BULLET_LIST = "bulletList"
ORDERED_LIST = "orderedList"
LIST_ITEM = "listItem"
BLOCKQUOTE = "blockquote"
CODE_BLOCK = "codeBlock"
TABLE = "table"
TABLE_ROW = "tableRow"
TABLE_HEADER = "tableHeader"
TABLE_CELL = "tableCell"
IMAGE = "image"
HORIZONTAL_RULE = "horizontalRule"
INLINE_MATH = "inlineMath"
BLOCK_MATH = "blockMath"
HARD_BREAK = "hardBreak"

NODE_VOCABULARY = frozenset(
    {
        DOC,
        PARAGRAPH,
        HEADING,
        TEXT,
        BULLET_LIST,
        ORDERED_LIST,
        LIST_ITEM,
        BLOCKQUOTE,
        CODE_BLOCK,
        TABLE,
        TABLE_ROW,
        TABLE_HEADER,
        TABLE_CELL,
        IMAGE,
        HORIZONTAL_RULE,
        INLINE_MATH,
        BLOCK_MATH,
        HARD_BREAK,
    }
)
MATH_NODE_TYPES = frozenset({INLINE_MATH, BLOCK_MATH})
CONTENTLESS_NODE_TYPES = frozenset({INLINE_MATH, BLOCK_MATH, HARD_BREAK})
LIST_NODE_TYPES = frozenset({BULLET_LIST, ORDERED_LIST})
TABLE_CELL_TYPES = frozenset({TABLE_HEADER, TABLE_CELL})

MARK_BOLD = "bold"
MARK_ITALIC = "italic"
MARK_UNDERLINE = "underline"
MARK_STRIKE = "strike"
MARK_CODE = "code"
MARK_LINK = "link"

# Outermost first; code must stay innermost since code spans cannot hold markup
CANONICAL_MARK_ORDER: tuple[str, ...] = (
    MARK_LINK,
    MARK_BOLD,
    MARK_ITALIC,
    MARK_STRIKE,
    MARK_UNDERLINE,
    MARK_CODE,
)

# =============================================================================
# Math Markers
# =============================================================================

INLINE_MATH_MARKER_TYPE = "inline-math"
BLOCK_MATH_MARKER_TYPE = "block-math"
MATH_LATEX_ATTRIBUTE = "data-latex"
MATH_TYPE_ATTRIBUTE = "data-type"

# Words that mark a dollar span as a price range or rate ("$5 to $10", "$3 each")
CURRENCY_RANGE_WORDS: tuple[str, ...] = ("and", "or", "to", "per", "each")

SENTINEL_DELIMITER = "\x00"
SENTINEL_NONCE_BYTES = 8

# =============================================================================
# Markdown Formatting
# =============================================================================

DEFAULT_BULLET_MARKER: BulletMarker = "-"
DEFAULT_EMPHASIS_SYMBOL: EmphasisSymbol = "_"
DEFAULT_CODE_FENCE_CHAR: CodeFenceChar = "`"
DEFAULT_CODE_FENCE_MIN = 3
DEFAULT_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6
DEFAULT_ORDERED_LIST_START = 1
HORIZONTAL_RULE_MARKDOWN = "---"
TABLE_SEPARATOR_CELL = "---"

DEFAULT_EXPORT_IMAGES_PREFIX = "/images/"
DEFAULT_EXPORT_IMAGES_TARGET = "./images/"

# =============================================================================
# Dependencies
# =============================================================================

DEPS_MARKDOWN_BRIDGE = [
    ("mistune", "mistune", ">=3.0.0"),
    ("beautifulsoup4", "bs4", ">=4.12.0"),
]
