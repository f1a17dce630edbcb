"""Transitions between two character grids.

Every strategy takes a source grid ``a``, a target grid ``b`` of the same
shape and a step count, and returns ``steps + 1`` grids. Randomness comes from
an injectable ``numpy.random.Generator`` so transitions can be reproduced.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence

import numpy as np

from .grid import Grid, Point, points_to_array, random_glyphs
from .pointcloud import match_points

Interpolator = Callable[..., List[Grid]]


def _check_inputs(a: Grid, b: Grid, steps: int) -> None:
    a.check_same_shape(b)
    if int(steps) != steps or steps < 1:
        raise ValueError(f"steps must be a positive integer, got {steps!r}")


def _rng(rng: np.random.Generator | None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def balance_counts(
    sources: Sequence[Point],
    targets: Sequence[Point],
    rng: np.random.Generator | None = None,
) -> tuple[list[Point], list[Point]]:
    """Pad the shorter point list by resampling its original entries.

    Samples are always drawn from the list as it was before padding. If
    either list is empty there is nothing to move and both come back empty.
    """
    sources = list(sources)
    targets = list(targets)
    if not sources or not targets:
        return [], []
    rng = _rng(rng)
    n = max(len(sources), len(targets))
    for pts in (sources, targets):
        original = len(pts)
        if original < n:
            picks = rng.integers(0, original, size=n - original)
            pts.extend(pts[int(i)] for i in picks)
    return sources, targets


def _positions(src: np.ndarray, tgt: np.ndarray, step: int, steps: int, cols: int) -> np.ndarray:
    pos = np.floor(src + (tgt - src) * step / steps).astype(np.int64)
    return pos[:, 0] * cols + pos[:, 1]


def interpolate_random_flip(
    a: Grid, b: Grid, steps: int, rng: np.random.Generator | None = None
) -> list[Grid]:
    """Each cell switches from ``a`` to ``b`` at its own random step."""
    _check_inputs(a, b, steps)
    rng = _rng(rng)
    flip_times = rng.integers(0, steps, size=a.cells.size)
    frames = []
    for step in range(steps + 1):
        cells = np.where(step < flip_times, a.cells, b.cells)
        frames.append(Grid(a.rows, a.cols, cells))
    return frames


def interpolate_random_map(
    a: Grid, b: Grid, steps: int, rng: np.random.Generator | None = None
) -> list[Grid]:
    """Move non-blank cells of ``a`` onto those of ``b`` in index order.

    Moving points carry the target character; every frame starts blank so
    no trails are left behind.
    """
    _check_inputs(a, b, steps)
    sources, targets = balance_counts(a.non_blank_points(), b.non_blank_points(), rng)
    src = points_to_array(sources).astype(np.float64)
    tgt = points_to_array(targets)
    chars = b.cells[tgt[:, 0] * b.cols + tgt[:, 1]]

    frames = []
    for step in range(steps + 1):
        frame = Grid.blank(a.rows, a.cols)
        frame.cells[_positions(src, tgt, step, steps, a.cols)] = chars
        frames.append(frame)
    return frames


def interpolate_approximate_ot(
    a: Grid, b: Grid, steps: int, rng: np.random.Generator | None = None
) -> list[Grid]:
    """Dissolve ``a`` and reform it as ``b`` along greedily matched paths.

    Points travel between pairs picked by :func:`match_points`; every moving
    point shows a fresh random glyph on every step.
    """
    _check_inputs(a, b, steps)
    rng = _rng(rng)
    sources, targets = balance_counts(a.non_blank_points(), b.non_blank_points(), rng)
    sources, targets = match_points(sources, targets)
    src = points_to_array(sources).astype(np.float64)
    tgt = points_to_array(targets)

    frames = []
    for step in range(steps + 1):
        frame = Grid.blank(a.rows, a.cols)
        frame.cells[_positions(src, tgt, step, steps, a.cols)] = random_glyphs(rng, len(src))
        frames.append(frame)
    return frames


INTERPOLATORS: Dict[str, Interpolator] = {
    "random_flip": interpolate_random_flip,
    "random_map": interpolate_random_map,
    "approximate_ot": interpolate_approximate_ot,
}


def get_interpolator(name: str) -> Interpolator:
    try:
        return INTERPOLATORS[name]
    except KeyError:
        raise KeyError(f"unknown interpolation {name!r}; choose from {sorted(INTERPOLATORS)}") from None
