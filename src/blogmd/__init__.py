"""blogmd - bidirectional converter between editor documents and markdown with math.

A blog platform stores post bodies as a rich-document tree (the editor's JSON
document) and exchanges them as markdown with embedded LaTeX. blogmd turns
trees into canonical markdown and reconstructs trees from markdown, telling
``$x^2$`` math apart from ``$5 and $10`` prices and leaving code untouched.

Key Features
------------
- Canonical markdown serialization with an image URL rewrite hook
- Math-aware preprocessing with a currency/math classifier
- Async reconstruction through an injectable render + schema-parse bridge
- Editor-JSON interchange for document trees

Requirements
------------
- Python 3.10+
- mistune and beautifulsoup4 for the default markdown bridge

Examples
--------
Serialize a tree:

    >>> from blogmd import serialize
    >>> from blogmd.ast import doc, heading
    >>> serialize(doc(heading(1, "Title")))
    '# Title'

Reconstruct a tree:

    >>> import asyncio
    >>> from blogmd import parse
    >>> tree = asyncio.run(parse("Euler: $e^{i\\\\pi} + 1 = 0$"))

Export a stored post with relative image paths:

    >>> from blogmd import export_markdown
    >>> markdown = export_markdown(post_json)

See Also
--------
blogmd.ast : document tree definitions and utilities
blogmd.preprocessing : math marker rewriting

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "blogmd requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from blogmd.api import export_markdown, from_markdown, to_markdown
from blogmd.ast import Mark, Node, ast_to_json, json_to_ast
from blogmd.exceptions import (
    BlogMdError,
    DependencyError,
    InvalidOptionsError,
    ParsingError,
    RenderingError,
    ValidationError,
)
from blogmd.options import MarkdownParserOptions, MarkdownRendererOptions
from blogmd.parsers import MarkdownParser, MarkupBridge, MistuneSoupBridge, parse, parse_sync
from blogmd.preprocessing import classify_dollar_span, preprocess_math
from blogmd.renderers import MarkdownRenderer, serialize
from blogmd.schema import DEFAULT_SCHEMA, Schema
from blogmd.utils.images import make_export_image_rewriter

preprocess = preprocess_math

__all__ = [
    "__version__",
    "serialize",
    "parse",
    "parse_sync",
    "preprocess",
    "preprocess_math",
    "to_markdown",
    "from_markdown",
    "export_markdown",
    "classify_dollar_span",
    "make_export_image_rewriter",
    "Node",
    "Mark",
    "ast_to_json",
    "json_to_ast",
    "MarkdownRenderer",
    "MarkdownParser",
    "MarkupBridge",
    "MistuneSoupBridge",
    "Schema",
    "DEFAULT_SCHEMA",
    "MarkdownRendererOptions",
    "MarkdownParserOptions",
    "BlogMdError",
    "ValidationError",
    "InvalidOptionsError",
    "ParsingError",
    "RenderingError",
    "DependencyError",
]
