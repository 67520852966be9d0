#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_literals.py
"""Tests for literal-region protection."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from blogmd.constants import SENTINEL_DELIMITER
from blogmd.preprocessing.literals import MARKDOWN_LITERAL_PATTERN, LiteralTable


def literal_regions(source):
    return [m.group(0) for m in MARKDOWN_LITERAL_PATTERN.finditer(source)]


@pytest.mark.unit
class TestPatterns:
    """Literal region scanning."""

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("Use `$x$` here", ["`$x$`"]),
            ("Use ``$x$`` here", ["``$x$``"]),
            ("Use ```$x$``` here", ["```$x$```"]),
            ("Use `` `$x$` `` here", ["`` `$x$` ``"]),
            ("`a` and `b`", ["`a`", "`b`"]),
        ],
    )
    def test_backtick_spans_pair_equal_runs(self, source, expected):
        assert literal_regions(source) == expected

    def test_unbalanced_backtick_runs_are_consumed_whole(self):
        assert literal_regions("``a` b") == ["``", "`"]

    def test_tilde_fence_is_lazy_and_multiline(self):
        source = "~~~md\n$x$\n~~~\ntext $y$\n~~~\nz\n~~~"
        assert literal_regions(source) == ["~~~md\n$x$\n~~~", "~~~\nz\n~~~"]

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("\\$5 and \\$10", ["\\$", "\\$"]),
            ("\\`$x$`", ["\\`", "`"]),
            ("\\``$x$`", ["\\`", "`$x$`"]),
            ("\\\\`$x$`", ["\\\\", "`$x$`"]),
            ("`a\\`", ["`a\\`"]),
            ("\\~~~ $x$ ~~~", ["\\~"]),
        ],
    )
    def test_backslash_escapes(self, source, expected):
        assert literal_regions(source) == expected

    def test_other_escapes_are_ignored(self):
        assert literal_regions("\\*a\\* \\_b") == []


@pytest.mark.unit
class TestLiteralTable:
    """Sentinel storage and restoration."""

    def test_protect_and_restore(self):
        source = "Use `$x$` and ``$y$``"
        table = LiteralTable(source)
        masked = table.protect(source, MARKDOWN_LITERAL_PATTERN)
        assert "$" not in masked
        assert len(table) == 2
        assert table.restore(masked) == source

    def test_sentinel_shape(self):
        table = LiteralTable("")
        sentinel = table.store("abc")
        assert sentinel.startswith(SENTINEL_DELIMITER)
        assert sentinel.endswith(SENTINEL_DELIMITER)
        assert sentinel.endswith(f":0{SENTINEL_DELIMITER}")

    def test_restore_without_literals_is_identity(self):
        table = LiteralTable("x")
        assert table.restore("x\x00abc:0\x00") == "x\x00abc:0\x00"

    def test_forged_sentinels_in_input_survive(self):
        source = "\x00deadbeef:0\x00 `code`"
        table = LiteralTable(source)
        masked = table.protect(source, MARKDOWN_LITERAL_PATTERN)
        assert table.restore(masked) == source

    def test_nested_literals_are_restored(self):
        table = LiteralTable("")
        outer = table.store(f"<{table.store('`x`')}>")
        assert len(table) == 2
        assert table.restore(f"a {outer} b") == "a <`x`> b"

    @given(st.text(alphabet=st.sampled_from("ab`$~\\\n\x00:0 "), max_size=60))
    def test_protect_restore_is_identity(self, source):
        table = LiteralTable(source)
        masked = table.protect(source, MARKDOWN_LITERAL_PATTERN)
        assert table.restore(masked) == source
