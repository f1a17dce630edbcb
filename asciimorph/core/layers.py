from __future__ import annotations

import math
from typing import List, Sequence, Tuple

import numpy as np

from .errors import GridShapeError
from .grid import Grid, Point, random_glyphs


class Layer:
    """Character grid with a continuous scroll offset, addressed toroidally."""

    def __init__(self, rows: int, cols: int, rng: np.random.Generator | None = None):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"layer needs positive dimensions, got {rows}x{cols}")
        self.rng = rng if rng is not None else np.random.default_rng()
        self.grid = Grid(rows, cols, random_glyphs(self.rng, rows * cols))
        self.offset_x = 0.0
        self.offset_y = 0.0

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols

    def get_char(self, row: int, col: int) -> str:
        r = (row + math.floor(self.offset_y)) % self.rows
        c = (col + math.floor(self.offset_x)) % self.cols
        return str(self.grid.cells[r * self.cols + c])

    def chars_at(self, rows_idx: np.ndarray, cols_idx: np.ndarray) -> np.ndarray:
        """Vectorized :meth:`get_char` over index arrays."""
        r = np.mod(np.asarray(rows_idx) + math.floor(self.offset_y) % self.rows, self.rows)
        c = np.mod(np.asarray(cols_idx) + math.floor(self.offset_x) % self.cols, self.cols)
        return self.grid.cells[r * self.cols + c]

    def scroll(self, dx: float, dy: float) -> None:
        if not (math.isfinite(dx) and math.isfinite(dy)):
            raise ValueError(f"scroll amounts must be finite, got ({dx}, {dy})")
        self.offset_x += dx
        self.offset_y += dy

    def tile_with_words(self, words: Sequence[str], rng: np.random.Generator | None = None) -> None:
        """Fill every row with random words, each followed by 2-5 dots."""
        words = [w for w in words if w]
        if not words:
            return
        rng = rng if rng is not None else self.rng
        arr = self.grid.as_array()
        for row in arr:
            col = 0
            while col < self.cols:
                word = words[int(rng.integers(0, len(words)))]
                for ch in word[: self.cols - col]:
                    row[col] = ch
                    col += 1
                pad = 2 + int(rng.integers(0, 4))
                for _ in range(min(pad, self.cols - col)):
                    row[col] = "."
                    col += 1


class Mask:
    """Boolean visibility grid."""

    def __init__(self, rows: int, cols: int):
        self.rows = int(rows)
        self.cols = int(cols)
        self.visible = np.zeros((self.rows, self.cols), dtype=bool)

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    @classmethod
    def from_glyph(
        cls,
        rows: int,
        cols: int,
        matrix: np.ndarray,
        start_row: int,
        start_col: int,
        size: int,
    ) -> "Mask":
        """Scale a glyph matrix into a ``size`` x ``size`` box at the given corner.

        Glyph pixel ``(i, j)`` covers rows ``floor(i*size/h)`` up to (not
        including) ``floor((i+1)*size/h)``, and at least one row; columns
        likewise. Cells falling outside the mask are dropped.
        """
        mask = cls(rows, cols)
        matrix = np.asarray(matrix, dtype=bool)
        if matrix.size == 0 or size <= 0:
            return mask
        h, w = matrix.shape
        for i, j in zip(*np.nonzero(matrix)):
            r0 = start_row + (i * size) // h
            r1 = max(r0 + 1, start_row + ((i + 1) * size) // h)
            c0 = start_col + (j * size) // w
            c1 = max(c0 + 1, start_col + ((j + 1) * size) // w)
            mask.visible[max(0, r0) : max(0, r1), max(0, c0) : max(0, c1)] = True
        return mask

    def set_square(self, start_row: int, start_col: int, size: int) -> None:
        r0, c0 = max(0, start_row), max(0, start_col)
        r1, c1 = max(0, start_row + size), max(0, start_col + size)
        self.visible[r0:r1, c0:c1] = True

    def is_visible(self, row: int, col: int) -> bool:
        return bool(self.visible[row, col])

    def visible_points(self) -> List[Point]:
        rr, cc = np.nonzero(self.visible)
        return [Point(int(r), int(c)) for r, c in zip(rr, cc)]

    def count(self) -> int:
        return int(self.visible.sum())


class Canvas:
    """Ordered (layer, mask) pairs composited in paint order."""

    def __init__(self, rows: int, cols: int):
        self.rows = int(rows)
        self.cols = int(cols)
        self.layers: List[Tuple[Layer, Mask]] = []

    @property
    def shape(self) -> Tuple[int, int]:
        return self.rows, self.cols

    def add_layer(self, layer: Layer, mask: Mask) -> None:
        if mask.shape != self.shape:
            raise GridShapeError(self.shape, mask.shape, what="mask")
        self.layers.append((layer, mask))

    def get_frame(self) -> Grid:
        frame = Grid.blank(self.rows, self.cols)
        arr = frame.as_array()
        for layer, mask in self.layers:
            rr, cc = np.nonzero(mask.visible)
            if rr.size:
                arr[rr, cc] = layer.chars_at(rr, cc)
        return frame
