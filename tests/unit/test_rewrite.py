"""Tests for the batch rewriter."""

import pytest

from gradlefix.models import Edit
from gradlefix.rewrite import apply_all, drop_overlapping, shifted_spans


class TestApplyAll:
    """Test applying many edits in one pass."""

    def test_growing_and_shrinking_replacements(self):
        """Earlier length changes should shift later replacements."""
        buffer = "use aaa and bbb"
        edits = [Edit(4, 7, "X"), Edit(12, 15, "YYYY")]
        assert apply_all(buffer, edits) == "use X and YYYY"
        assert list(shifted_spans(edits)) == [(4, 5), (10, 14)]

    def test_no_edits(self):
        assert apply_all("unchanged", []) == "unchanged"

    def test_insertion_and_deletion(self):
        assert apply_all("abcdef", [Edit(0, 0, ">"), Edit(2, 4, ""), Edit(6, 6, "<")]) == ">abef<"

    def test_adjacent_edits(self):
        assert apply_all("abcd", [Edit(0, 2, "x"), Edit(2, 4, "y")]) == "xy"

    def test_overlapping_rejected(self):
        with pytest.raises(ValueError):
            apply_all("abcdef", [Edit(0, 3, "x"), Edit(2, 4, "y")])

    def test_unsorted_rejected(self):
        with pytest.raises(ValueError):
            apply_all("abcdef", [Edit(4, 5, "x"), Edit(0, 1, "y")])

    def test_reversed_rejected(self):
        with pytest.raises(ValueError):
            apply_all("abcdef", [Edit(3, 1, "x")])

    def test_out_of_bounds_rejected(self):
        with pytest.raises(ValueError):
            apply_all("abc", [Edit(2, 10, "x")])

    def test_spans_match_result(self):
        """Every shifted span should hold its replacement in the output."""
        buffer = "implementation(a) api(bb) compileOnly(ccc)"
        edits = [Edit(15, 16, "first"), Edit(22, 24, ""), Edit(38, 41, "3")]
        result = apply_all(buffer, edits)
        for edit, (start, end) in zip(edits, shifted_spans(edits)):
            assert result[start:end] == edit.replacement


class TestDropOverlapping:
    def test_keeps_first_of_overlap(self):
        edits = [Edit(5, 8, "b"), Edit(0, 6, "a"), Edit(8, 9, "c")]
        assert drop_overlapping(edits) == [Edit(0, 6, "a"), Edit(8, 9, "c")]
