#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/utils/escape.py
"""Text escaping utilities for markdown output and marker attributes.

This module provides the escape functions used by the serializer so that
plain text survives a markdown round trip, and by the math preprocessor so
that LaTeX can be embedded in an HTML attribute value.

"""

from __future__ import annotations

import re

# Inline punctuation that would otherwise open emphasis, code, links, strike, raw HTML or math
_MARKDOWN_SPECIAL = re.compile(r"([\\`*_~\[\]<$])")

# An ampersand is only special when it would start a character reference
_ENTITY_LIKE = re.compile(r"&(?=#?[A-Za-z0-9]+;)")

_LINE_START_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^(#{1,6})(?=\s|$)"), r"\\\1"),
    (re.compile(r"^>"), r"\\>"),
    (re.compile(r"^([-+*])(?=\s|$)"), r"\\\1"),
    (re.compile(r"^(\d+)([.)])(?=\s|$)"), r"\1\\\2"),
    (re.compile(r"^([-=])(?=\1*\s*$)"), r"\\\1"),
)

_HTML_ATTRIBUTE_ESCAPES = {
    "&": "&amp;",
    '"': "&quot;",
    "<": "&lt;",
    ">": "&gt;",
    "\n": "&#10;",
    "\r": "&#13;",
    "|": "&#124;",
    "$": "&#36;",
    "`": "&#96;",
    "~": "&#126;",
}


def escape_markdown_text(text: str) -> str:
    r"""Backslash-escape inline markdown punctuation in plain text.

    Parameters
    ----------
    text : str
        Text to escape

    Returns
    -------
    str
        Escaped text

    Examples
    --------
        >>> escape_markdown_text("2 * 3 = [six]")
        '2 \\* 3 = \\[six\\]'

    """
    if not text:
        return text
    return _ENTITY_LIKE.sub(r"\\&", _MARKDOWN_SPECIAL.sub(r"\\\1", text))


def escape_line_starts(markdown: str) -> str:
    r"""Escape characters that would open a block construct at the start of a line.

    Applied to rendered paragraph text so that a paragraph beginning with
    ``# ``, ``> ``, ``- ``, ``1. `` or a run of ``-``/``=`` stays a paragraph.

    Examples
    --------
        >>> escape_line_starts("1. not a list")
        '1\\. not a list'

    """
    lines = markdown.split("\n")
    for i, line in enumerate(lines):
        for pattern, replacement in _LINE_START_RULES:
            if pattern.search(line):
                lines[i] = pattern.sub(replacement, line, count=1)
                break
    return "\n".join(lines)


def escape_table_cell(text: str) -> str:
    r"""Escape pipe characters so cell text cannot split a table column.

    Examples
    --------
        >>> escape_table_cell("a | b")
        'a \\| b'

    """
    return text.replace("|", r"\|")


def escape_html_attribute(value: str) -> str:
    """Escape a value for a double-quoted HTML attribute.

    Newlines are written as numeric character references so the element
    stays on a single line of markdown. Pipes, dollars, tildes and backticks
    are written as references too, so a marker inside a table row cannot split a
    cell and math or code scanning never sees delimiters inside the value.

    Examples
    --------
        >>> escape_html_attribute('a < b & "c"')
        'a &lt; b &amp; &quot;c&quot;'

    """
    return "".join(_HTML_ATTRIBUTE_ESCAPES.get(char, char) for char in value)


def longest_run(text: str, char: str) -> int:
    """Return the length of the longest run of ``char`` in ``text``."""
    longest = current = 0
    for c in text:
        if c == char:
            current += 1
            longest = max(longest, current)
        else:
            current = 0
    return longest
