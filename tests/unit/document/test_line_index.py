"""Tests for draftpress/document/line_index.py"""

from __future__ import annotations

import pytest

from draftpress.document.line_index import LineIndex


class TestLineIndex:
    @pytest.mark.parametrize(
        ("offset", "line"),
        [(0, 1), (6, 1), (7, 1), (8, 2), (9, 3), (12, 3)],
    )
    def test_offsets_map_to_lines(self, offset: int, line: int):
        index = LineIndex("# Title\n\nBody")
        assert index.line_for(offset) == line

    def test_line_count(self):
        assert LineIndex("a\nb\nc").line_count == 3
        assert LineIndex("").line_count == 1
        assert LineIndex("trailing\n").line_count == 2

    def test_negative_offset_clamps_to_first_line(self):
        assert LineIndex("a\nb").line_for(-5) == 1

    def test_offset_past_end_clamps_to_last_line(self):
        assert LineIndex("a\nb").line_for(1_000) == 2

    def test_empty_source(self):
        assert LineIndex("").line_for(0) == 1
