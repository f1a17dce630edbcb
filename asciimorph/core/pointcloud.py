from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import EmptyPointCloudError
from .grid import Point, points_to_array


class PointCloud:
    """Mutable set of 2D points with an incrementally maintained centroid.

    The running sum is only ever changed by :meth:`remove`, which rebalances
    the centroid from it. The centroid is the origin once the cloud is empty.
    """

    def __init__(self, points: Sequence[Point]):
        self._pts = points_to_array(points).copy()
        self._count = len(self._pts)
        self._sum = self._pts.sum(axis=0) if self._count else np.zeros(2, dtype=np.int64)
        self.centroid = (0.0, 0.0)
        self._rebalance()

    def __len__(self) -> int:
        return self._count

    @property
    def count(self) -> int:
        return self._count

    @property
    def sum(self) -> tuple[int, int]:
        return int(self._sum[0]), int(self._sum[1])

    @property
    def points(self) -> list[Point]:
        return [Point(int(r), int(c)) for r, c in self._pts[: self._count]]

    def _rebalance(self) -> None:
        if self._count == 0:
            self.centroid = (0.0, 0.0)
            return
        self.centroid = (self._sum[0] / self._count, self._sum[1] / self._count)

    def _live(self) -> np.ndarray:
        if self._count == 0:
            raise EmptyPointCloudError("query on an empty point cloud")
        return self._pts[: self._count]

    def remove(self, point: Point) -> None:
        """Remove the first point equal to ``point`` and rebalance the centroid."""
        live = self._pts[: self._count]
        hits = np.flatnonzero((live[:, 0] == point.row) & (live[:, 1] == point.col))
        if hits.size == 0:
            raise ValueError(f"{point} is not in the point cloud")
        i = int(hits[0])
        self._pts[i : self._count - 1] = self._pts[i + 1 : self._count]
        self._count -= 1
        self._sum[0] -= point.row
        self._sum[1] -= point.col
        self._rebalance()

    def nearest(self, target: Point) -> Point:
        live = self._live()
        dist = np.hypot(live[:, 0] - target.row, live[:, 1] - target.col)
        r, c = live[int(np.argmin(dist))]
        return Point(int(r), int(c))

    def farthest_from_centroid(self) -> Point:
        live = self._live()
        cr, cc = self.centroid
        dist = np.hypot(live[:, 0] - cr, live[:, 1] - cc)
        r, c = live[int(np.argmax(dist))]
        return Point(int(r), int(c))


def match_points(
    sources: Sequence[Point], targets: Sequence[Point]
) -> tuple[list[Point], list[Point]]:
    """Greedy farthest-first pairing approximating a minimum-cost transport.

    Repeatedly takes the target farthest from the remaining targets' centroid
    and pairs it with the nearest remaining source. O(N^2) overall.
    """
    if len(sources) != len(targets):
        raise ValueError(
            f"cannot match {len(sources)} sources with {len(targets)} targets"
        )
    source_cloud = PointCloud(sources)
    target_cloud = PointCloud(targets)

    matched_sources: list[Point] = []
    matched_targets: list[Point] = []
    while len(target_cloud):
        target = target_cloud.farthest_from_centroid()
        source = source_cloud.nearest(target)
        matched_sources.append(source)
        matched_targets.append(target)
        source_cloud.remove(source)
        target_cloud.remove(target)

    return matched_sources, matched_targets
