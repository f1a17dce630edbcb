"""Tests for the character grid and point primitives."""
import numpy as np
import pytest

from asciimorph.core.errors import GridShapeError
from asciimorph.core.grid import (
    GLYPHS,
    RELEASED,
    Grid,
    Point,
    random_glyph,
    random_glyphs,
)


class TestGrid:
    def test_blank_is_all_spaces(self):
        g = Grid.blank(2, 3)
        assert g.shape == (2, 3)
        assert g.lines() == ["   ", "   "]

    def test_from_lines_round_trips_text(self):
        g = Grid.from_lines(["ab", "cd"])
        assert g.text() == "ab\ncd"
        assert g[1, 0] == "c"

    def test_from_lines_rejects_ragged_rows(self):
        with pytest.raises(GridShapeError):
            Grid.from_lines(["abc", "de"])

    def test_flat_buffer_indexing(self):
        """Cell (r, c) lives at r*cols + c in the flat buffer."""
        g = Grid.blank(3, 4)
        g[2, 1] = "x"
        assert g.cells[2 * 4 + 1] == "x"

    def test_buffer_size_checked_at_construction(self):
        with pytest.raises(ValueError):
            Grid(2, 2, np.array(["a", "b", "c"]))

    def test_out_of_bounds_access_raises(self):
        g = Grid.blank(2, 2)
        with pytest.raises(IndexError):
            g[2, 0]
        with pytest.raises(IndexError):
            g[0, -1] = "x"

    def test_equality_and_copy(self):
        g = Grid.from_lines(["ab"])
        h = g.copy()
        assert g == h
        h[0, 0] = "z"
        assert g != h
        assert g[0, 0] == "a"

    def test_non_blank_points_row_major(self):
        g = Grid.from_lines([" a", "b "])
        assert g.non_blank_points() == [Point(0, 1), Point(1, 0)]

    def test_check_same_shape(self):
        with pytest.raises(GridShapeError):
            Grid.blank(2, 2).check_same_shape(Grid.blank(2, 3))

    def test_released_placeholder_is_empty(self):
        assert RELEASED.shape == (0, 0)
        assert RELEASED.cells.size == 0


class TestRandomGlyphs:
    def test_glyphs_are_printable_ascii(self):
        rng = np.random.default_rng(0)
        drawn = random_glyphs(rng, 500)
        assert all(33 <= ord(ch) <= 126 for ch in drawn)
        assert 33 <= ord(random_glyph(rng)) <= 126

    def test_glyph_alphabet_size(self):
        assert len(GLYPHS) == 94
        assert " " not in GLYPHS
