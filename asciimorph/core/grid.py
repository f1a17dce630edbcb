from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from .errors import GridShapeError

BLANK = " "

# printable ASCII without the space: codes 33..126
GLYPHS = np.array([chr(c) for c in range(33, 127)], dtype="<U1")


@dataclass(frozen=True)
class Point:
    row: int
    col: int


def random_glyphs(rng: np.random.Generator, n: int) -> np.ndarray:
    return GLYPHS[rng.integers(0, len(GLYPHS), size=n)]


def random_glyph(rng: np.random.Generator) -> str:
    return str(GLYPHS[rng.integers(0, len(GLYPHS))])


class Grid:
    """Fixed-size character grid backed by a flat buffer.

    Cell ``(row, col)`` lives at ``cells[row * cols + col]``. The buffer length
    is checked once here, so rows can never drift to different lengths.
    """

    __slots__ = ("rows", "cols", "cells")

    def __init__(self, rows: int, cols: int, cells: np.ndarray | None = None):
        if rows < 0 or cols < 0:
            raise ValueError(f"grid dimensions must be non-negative, got {rows}x{cols}")
        self.rows = int(rows)
        self.cols = int(cols)
        if cells is None:
            cells = np.full(self.rows * self.cols, BLANK, dtype="<U1")
        else:
            cells = np.asarray(cells, dtype="<U1").reshape(-1)
            if cells.size != self.rows * self.cols:
                raise ValueError(
                    f"buffer of {cells.size} cells does not fit a {self.rows}x{self.cols} grid"
                )
        self.cells = cells

    @classmethod
    def blank(cls, rows: int, cols: int) -> "Grid":
        return cls(rows, cols)

    @classmethod
    def from_lines(cls, lines: Sequence[str] | Sequence[Sequence[str]]) -> "Grid":
        rows = len(lines)
        cols = len(lines[0]) if rows else 0
        for i, line in enumerate(lines):
            if len(line) != cols:
                raise GridShapeError((rows, cols), (rows, len(line)), what=f"row {i}")
        cells = [ch for line in lines for ch in line]
        return cls(rows, cols, np.array(cells, dtype="<U1") if cells else None)

    @property
    def shape(self) -> tuple[int, int]:
        return self.rows, self.cols

    def as_array(self) -> np.ndarray:
        """2D view over the flat buffer (writes go through)."""
        return self.cells.reshape(self.rows, self.cols)

    def index(self, row: int, col: int) -> int:
        if not (0 <= row < self.rows and 0 <= col < self.cols):
            raise IndexError(f"cell ({row}, {col}) outside {self.rows}x{self.cols} grid")
        return row * self.cols + col

    def __getitem__(self, pos: tuple[int, int]) -> str:
        return str(self.cells[self.index(*pos)])

    def __setitem__(self, pos: tuple[int, int], ch: str) -> None:
        self.cells[self.index(*pos)] = ch

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self.cells, other.cells))

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"Grid({self.rows}x{self.cols})"

    def copy(self) -> "Grid":
        return Grid(self.rows, self.cols, self.cells.copy())

    def lines(self) -> list[str]:
        arr = self.as_array()
        return ["".join(row) for row in arr]

    def text(self) -> str:
        return "\n".join(self.lines())

    def non_blank_points(self) -> list[Point]:
        """Positions of every non-blank cell in row-major order."""
        rr, cc = np.nonzero(self.as_array() != BLANK)
        return [Point(int(r), int(c)) for r, c in zip(rr, cc)]

    def check_same_shape(self, other: "Grid") -> None:
        if self.shape != other.shape:
            raise GridShapeError(self.shape, other.shape)


# placeholder left behind by the scheduler for frames it has already shown
RELEASED = Grid(0, 0)


def points_to_array(points: Iterable[Point]) -> np.ndarray:
    arr = np.array([(p.row, p.col) for p in points], dtype=np.int64)
    return arr.reshape(-1, 2)
