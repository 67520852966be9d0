#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/blogmd/utils/encoding.py
"""Decoding of imported markdown files.

Posts pasted into the editor arrive as text, but files handed to the
importer (CLI, uploads) arrive as bytes in whatever encoding the author's
tool used. These helpers turn them into text.

"""

from __future__ import annotations

import logging
from typing import IO

import chardet

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")


def detect_encoding(data: bytes, sample_size: int = 8192, confidence_threshold: float = 0.7) -> str | None:
    """Detect the character encoding of ``data`` using chardet.

    Parameters
    ----------
    data : bytes
        Binary data to analyze
    sample_size : int, default 8192
        Number of leading bytes to sample
    confidence_threshold : float, default 0.7
        Minimum confidence required to trust the guess

    Returns
    -------
    str or None
        Encoding name, or None when detection is inconclusive

    """
    result = chardet.detect(data[:sample_size])
    encoding = result.get("encoding") if result else None
    if not encoding:
        logger.debug("chardet: no encoding detected")
        return None

    confidence = result.get("confidence") or 0.0
    logger.debug("chardet detected encoding %s (confidence %.2f)", encoding, confidence)
    return encoding if confidence >= confidence_threshold else None


def read_text_with_encoding_detection(data: bytes, fallback_encodings: tuple[str, ...] = DEFAULT_FALLBACK_ENCODINGS) -> str:
    """Decode ``data`` as text.

    UTF-8 (with or without BOM) is tried first since nearly every markdown
    file is UTF-8; chardet's guess comes next, then ``fallback_encodings``
    in order.

    Examples
    --------
        >>> read_text_with_encoding_detection("café".encode("utf-8"))
        'café'

    """
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    detected = detect_encoding(data)
    if detected:
        try:
            return data.decode(detected)
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug("Failed to decode with detected encoding %s: %s", detected, e)

    for encoding in fallback_encodings:
        try:
            return data.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            continue

    logger.warning("All encoding attempts failed, using utf-8 with error replacement")
    return data.decode("utf-8", errors="replace")


def normalize_stream_to_text(stream: IO[bytes] | IO[str]) -> str:
    """Read a binary or text stream to a string."""
    content = stream.read()
    if isinstance(content, bytes):
        return read_text_with_encoding_detection(content)
    return content
