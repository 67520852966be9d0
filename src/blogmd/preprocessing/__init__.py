#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/preprocessing/__init__.py
"""Text preprocessing applied before markdown is rendered.

The only preprocessing step today is math: ``$``/``$$`` spans become marker
elements while code regions are protected from the rewrite.
"""

from blogmd.preprocessing.classifier import classify_dollar_span, is_plain_text_dollar_span
from blogmd.preprocessing.literals import LiteralTable
from blogmd.preprocessing.math import MathPreprocessor, block_math_marker, inline_math_marker, preprocess_math

__all__ = [
    "LiteralTable",
    "MathPreprocessor",
    "block_math_marker",
    "classify_dollar_span",
    "inline_math_marker",
    "is_plain_text_dollar_span",
    "preprocess_math",
]
