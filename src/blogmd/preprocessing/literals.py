#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/preprocessing/literals.py
"""Protection of literal regions during text rewriting.

A rewrite that must not touch certain spans (code and backslash escapes, in the math case) first
moves each span into an ordered side table and leaves an opaque sentinel in
its place, runs the rewrite, and finally substitutes every sentinel back.

Sentinels have the form ``\\x00<nonce>:<index>\\x00`` where ``nonce`` is a
random token verified to be absent from the input. Since the nonce never
occurs in the source text, no input byte sequence can be mistaken for a
sentinel, and restored literals cannot form new ones.

"""

from __future__ import annotations

import re
import secrets

from blogmd.constants import SENTINEL_DELIMITER, SENTINEL_NONCE_BYTES

# Everything a markdown reader takes literally, found in one left-to-right
# scan: backslash escapes of the characters that delimit math or code, code
# spans, stray backtick runs (consumed whole so no span opens mid-run) and
# tilde fences. An escaped backtick never opens a span and a backslash inside
# a span is just text.
MARKDOWN_LITERAL_PATTERN = re.compile(r"\\[\\`$~]|(`+)(?!`)[\s\S]*?(?<!`)\1(?!`)|`+|~~~[\s\S]*?~~~")


class LiteralTable:
    """Ordered side table of protected literal regions.

    Parameters
    ----------
    source : str
        The text that will be protected; used to pick a collision-free nonce

    Examples
    --------
        >>> table = LiteralTable("Use `$x$` here")
        >>> masked = table.protect("Use `$x$` here", MARKDOWN_LITERAL_PATTERN)
        >>> "$" in masked
        False
        >>> table.restore(masked)
        'Use `$x$` here'

    """

    def __init__(self, source: str):
        """Pick a nonce that does not occur anywhere in ``source``."""
        nonce = secrets.token_hex(SENTINEL_NONCE_BYTES)
        while nonce in source:
            nonce = secrets.token_hex(SENTINEL_NONCE_BYTES)
        self._prefix = f"{SENTINEL_DELIMITER}{nonce}:"
        self._sentinel_pattern = re.compile(re.escape(self._prefix) + r"(\d+)" + re.escape(SENTINEL_DELIMITER))
        self._literals: list[str] = []

    def __len__(self) -> int:
        return len(self._literals)

    def store(self, literal: str) -> str:
        """Add ``literal`` to the table and return its sentinel."""
        self._literals.append(literal)
        return f"{self._prefix}{len(self._literals) - 1}{SENTINEL_DELIMITER}"

    def protect(self, text: str, pattern: re.Pattern[str]) -> str:
        """Replace every match of ``pattern`` in ``text`` with a sentinel."""
        return pattern.sub(lambda match: self.store(match.group(0)), text)

    def restore(self, text: str) -> str:
        """Substitute every sentinel in ``text`` with its original literal, verbatim.

        A stored literal may itself hold sentinels (a marker built from masked
        text); those are restored too.
        """
        if not self._literals:
            return text
        return self._sentinel_pattern.sub(lambda match: self.restore(self._literals[int(match.group(1))]), text)
