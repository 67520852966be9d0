#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/preprocessing/math.py
"""Math-aware preprocessing of markdown before generic rendering.

Generic markdown renderers know nothing about ``$``/``$$`` math and would
mangle LaTeX (``_`` and ``*`` read as emphasis, ``\\`` as escapes). This module
rewrites math spans into inert marker elements that a renderer passes through
untouched and that the document schema maps back to math nodes:

* ``$$...$$`` -> ``<div data-type="block-math" data-latex="..."></div>``
* ``$...$`` -> ``<span data-type="inline-math" data-latex="..."></span>``

Code spans, tilde fences and backslash escapes are protected first, so
``$`` inside code and an escaped ``\\$`` are never delimiters. Dollar amounts
are left as text by the classifier in ``blogmd.preprocessing.classifier``.

"""

from __future__ import annotations

import logging
import re

from blogmd.constants import (
    BLOCK_MATH_MARKER_TYPE,
    INLINE_MATH_MARKER_TYPE,
    MATH_LATEX_ATTRIBUTE,
    MATH_TYPE_ATTRIBUTE,
)
from blogmd.preprocessing.classifier import is_plain_text_dollar_span
from blogmd.preprocessing.literals import MARKDOWN_LITERAL_PATTERN, LiteralTable
from blogmd.utils.escape import escape_html_attribute

logger = logging.getLogger(__name__)

BLOCK_MATH_PATTERN = re.compile(r"\$\$([\s\S]*?)\$\$")
INLINE_MATH_PATTERN = re.compile(r"\$([^$\n]+?)\$")


def block_math_marker(latex: str) -> str:
    """Return the block-level marker element carrying ``latex``."""
    return (
        f'<div {MATH_TYPE_ATTRIBUTE}="{BLOCK_MATH_MARKER_TYPE}" '
        f'{MATH_LATEX_ATTRIBUTE}="{escape_html_attribute(latex)}"></div>'
    )


def inline_math_marker(latex: str) -> str:
    """Return the inline marker element carrying ``latex``."""
    return (
        f'<span {MATH_TYPE_ATTRIBUTE}="{INLINE_MATH_MARKER_TYPE}" '
        f'{MATH_LATEX_ATTRIBUTE}="{escape_html_attribute(latex)}"></span>'
    )


class MathPreprocessor:
    """Rewrite math spans in markdown into marker elements.

    Instances hold no state between calls; every ``process`` call builds its
    own literal table.

    Examples
    --------
        >>> MathPreprocessor().process("Area: $\\\\pi r^2$")
        'Area: <span data-type="inline-math" data-latex="\\\\pi r^2"></span>'
        >>> MathPreprocessor().process("I have $5 and $10.")
        'I have $5 and $10.'

    """

    def process(self, markdown: str) -> str:
        """Return ``markdown`` with math rewritten and code left verbatim.

        Parameters
        ----------
        markdown : str
            Raw interchange text

        Returns
        -------
        str
            Text that is safe to hand to a generic markdown renderer. Never
            raises; unmatched delimiters are left as literal text.

        """
        if "$" not in markdown:
            return markdown

        literals = LiteralTable(markdown)
        result = literals.protect(markdown, MARKDOWN_LITERAL_PATTERN)

        counts = {"block": 0, "inline": 0, "text": 0}

        def replace_block(match: re.Match[str]) -> str:
            counts["block"] += 1
            # Stored as a literal so the inline pass cannot pair a "$" inside the LaTeX
            return literals.store(block_math_marker(literals.restore(match.group(1)).strip()))

        def replace_inline(match: re.Match[str]) -> str:
            interior = literals.restore(match.group(1))
            if is_plain_text_dollar_span(interior):
                counts["text"] += 1
                return match.group(0)
            counts["inline"] += 1
            return inline_math_marker(interior.strip())

        result = BLOCK_MATH_PATTERN.sub(replace_block, result)
        result = INLINE_MATH_PATTERN.sub(replace_inline, result)
        result = literals.restore(result)

        logger.debug(
            "Math preprocessing: %d protected literal(s), %d block, %d inline, %d dollar span(s) kept as text",
            len(literals),
            counts["block"],
            counts["inline"],
            counts["text"],
        )
        return result


def preprocess_math(markdown: str) -> str:
    """Rewrite ``$``/``$$`` math in ``markdown`` into marker elements.

    See Also
    --------
    MathPreprocessor.process

    """
    return MathPreprocessor().process(markdown)
