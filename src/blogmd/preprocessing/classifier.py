#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/preprocessing/classifier.py
"""Heuristic that tells inline math apart from dollar amounts.

A ``$...$`` pair in prose is ambiguous: ``$x^2$`` is math but in
``I have $5 and $10`` the pair ``$5 and $`` is two prices. The rules below
describe the current behaviour, and plain text wins whenever they disagree.
Extend the test suite before changing a rule.

Rules, applied to the trimmed interior ``s``:

* pure number (``5``, ``10.99``, ``1,234,567.89``) -> text
* starts with a number and any of

  - a range/rate word (and, or, to, per, each)
  - words after the number (``5 dollars``)
  - a character that never appears in LaTeX-ish input (``!``, ``%``, ``$``...)

  -> text
* anything else -> math

"""

from __future__ import annotations

import re

from blogmd.constants import CURRENCY_RANGE_WORDS, DollarSpanKind

PURE_NUMBER_PATTERN = re.compile(r"^(?:\d{1,3}(?:,\d{3})+|\d+)(?:\.\d+)?\s*$")
LEADING_NUMBER_PATTERN = re.compile(r"^\d+(?:[.,]\d+)?")
RANGE_WORD_PATTERN = re.compile(r"\b(?:" + "|".join(CURRENCY_RANGE_WORDS) + r")\b", re.IGNORECASE)
WORDS_AFTER_NUMBER_PATTERN = re.compile(r"^\d+(?:[.,]\d+)?\s+[a-zA-Z]+")
NON_MATH_CHAR_PATTERN = re.compile(r"[^\d\s.,+\-*/=^_(){}\\a-zA-Z]")


def is_pure_number(s: str) -> bool:
    return PURE_NUMBER_PATTERN.match(s) is not None


def starts_with_number(s: str) -> bool:
    return LEADING_NUMBER_PATTERN.match(s) is not None


def has_range_or_currency_word(s: str) -> bool:
    return RANGE_WORD_PATTERN.search(s) is not None


def has_words_after_number(s: str) -> bool:
    return WORDS_AFTER_NUMBER_PATTERN.match(s) is not None


def has_non_math_char(s: str) -> bool:
    return NON_MATH_CHAR_PATTERN.search(s) is not None


def is_plain_text_dollar_span(interior: str) -> bool:
    """Return True if the interior of a ``$...$`` pair should stay plain text.

    Parameters
    ----------
    interior : str
        Text between the dollar signs (trimmed here)

    Returns
    -------
    bool
        True for prices, amounts and ranges; True for an empty interior

    Examples
    --------
        >>> is_plain_text_dollar_span("5 and ")
        True
        >>> is_plain_text_dollar_span("x^2 + y^2 = z^2")
        False

    """
    s = interior.strip()
    if not s:
        return True
    if is_pure_number(s):
        return True
    return starts_with_number(s) and (has_range_or_currency_word(s) or has_words_after_number(s) or has_non_math_char(s))


def classify_dollar_span(interior: str) -> DollarSpanKind:
    """Classify the interior of a ``$...$`` pair as ``"math"`` or ``"text"``."""
    return "text" if is_plain_text_dollar_span(interior) else "math"
