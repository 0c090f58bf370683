"""Tests for reply utility functions: parse_index and truncate."""

from __future__ import annotations

import pytest

from discord_jukebox.utils.reply import parse_index, truncate

# =============================================================================
# parse_index
# =============================================================================


class TestParseIndex:
    def test_plain_number(self):
        assert parse_index("3") == 3

    def test_surrounding_whitespace(self):
        assert parse_index("  12 ") == 12

    def test_leading_plus(self):
        assert parse_index("+2") == 2

    @pytest.mark.parametrize("value", [None, "", "   ", "0", "-1", "abc", "1.5", "2a", "+", "١"])
    def test_rejected(self, value):
        assert parse_index(value) is None


# =============================================================================
# truncate
# =============================================================================


class TestTruncate:
    def test_short_text_unchanged(self):
        assert truncate("hello") == "hello"

    def test_exact_length_unchanged(self):
        assert truncate("x" * 90) == "x" * 90

    def test_long_text_gets_ellipsis(self):
        result = truncate("x" * 100)
        assert len(result) == 90
        assert result.endswith("…")

    def test_custom_length(self):
        assert truncate("abcdef", max_length=4) == "abc…"
