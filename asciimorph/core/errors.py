from __future__ import annotations


class GridShapeError(ValueError):
    """Two grids (or a mask and its canvas) that must share a shape do not."""

    def __init__(self, expected: tuple[int, int], actual: tuple[int, int], what: str = "grid"):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{what} shape {actual[0]}x{actual[1]} does not match {expected[0]}x{expected[1]}"
        )


class EmptyPointCloudError(RuntimeError):
    """A nearest/farthest query was made on a point cloud with no points left."""
