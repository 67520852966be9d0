#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_encoding.py
"""Tests for decoding imported files."""

import io

import pytest

from blogmd.utils import encoding
from blogmd.utils.encoding import detect_encoding, normalize_stream_to_text, read_text_with_encoding_detection


@pytest.mark.unit
class TestReadTextWithEncodingDetection:
    """Decoding order and fallbacks."""

    def test_utf8(self):
        assert read_text_with_encoding_detection("héllo $x$".encode("utf-8")) == "héllo $x$"

    def test_utf8_bom_removed(self):
        assert read_text_with_encoding_detection(b"\xef\xbb\xbf# Title") == "# Title"

    def test_non_utf8_still_decodes(self):
        text = read_text_with_encoding_detection("café au lait, très bien".encode("cp1252"))
        assert text.startswith("caf")
        assert text.endswith("bien")

    def test_fallback_when_detection_inconclusive(self, monkeypatch):
        monkeypatch.setattr(encoding.chardet, "detect", lambda data: {"encoding": None, "confidence": 0.0})
        assert read_text_with_encoding_detection(b"caf\xe9") == "café"

    def test_bad_detected_encoding_falls_through(self, monkeypatch):
        monkeypatch.setattr(encoding.chardet, "detect", lambda data: {"encoding": "no-such-codec", "confidence": 1.0})
        assert read_text_with_encoding_detection(b"caf\xe9") == "café"

    def test_replacement_when_everything_fails(self, monkeypatch):
        monkeypatch.setattr(encoding.chardet, "detect", lambda data: {"encoding": None, "confidence": 0.0})
        assert read_text_with_encoding_detection(b"ok\xff", fallback_encodings=("ascii",)) == "ok�"


@pytest.mark.unit
class TestDetectEncoding:
    """Confidence threshold handling."""

    def test_low_confidence_rejected(self, monkeypatch):
        monkeypatch.setattr(encoding.chardet, "detect", lambda data: {"encoding": "ascii", "confidence": 0.2})
        assert detect_encoding(b"abc") is None

    def test_confident_guess_returned(self, monkeypatch):
        monkeypatch.setattr(encoding.chardet, "detect", lambda data: {"encoding": "ascii", "confidence": 0.99})
        assert detect_encoding(b"abc") == "ascii"


@pytest.mark.unit
class TestNormalizeStream:
    """Text and binary streams."""

    def test_text_stream(self):
        assert normalize_stream_to_text(io.StringIO("# Hi")) == "# Hi"

    def test_binary_stream(self):
        assert normalize_stream_to_text(io.BytesIO("# Hï".encode("utf-8"))) == "# Hï"
