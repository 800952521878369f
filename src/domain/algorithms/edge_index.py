from __future__ import annotations

from typing import Iterable

from shapely import STRtree
from shapely.geometry import LineString, Point

from src.domain.models import EdgeMatch, Pt2D, RoadEdge


class EdgeIndex:
    """Read-only nearest-edge index over road edges (shapely STRtree).

    Built once, then only queried. Equidistant edges resolve to the
    lexicographically smallest edge id so results do not depend on input order.
    """

    __slots__ = ("_ids", "_lines", "_tree")

    def __init__(self, edges: Iterable[RoadEdge]) -> None:
        # Edges need at least two points to have a closest point and an offset.
        usable = sorted(
            (e for e in edges if len(e.geometry) >= 2), key=lambda e: e.id
        )
        self._ids: tuple[str, ...] = tuple(e.id for e in usable)
        self._lines: tuple[LineString, ...] = tuple(
            LineString([(p.x, p.y) for p in e.geometry]) for e in usable
        )
        self._tree = STRtree(self._lines) if self._lines else None

    def __len__(self) -> int:
        return len(self._ids)

    def nearest(self, point: Pt2D) -> EdgeMatch | None:
        """Closest edge to `point`, with the arc-length offset of the closest point."""

        if self._tree is None:
            return None

        target = Point(point.x, point.y)
        indices = self._tree.query_nearest(target, all_matches=True)
        if len(indices) == 0:
            return None

        # Ids are sorted, so the smallest index is the smallest id.
        best = int(min(indices))
        line = self._lines[best]
        return EdgeMatch(
            edge_id=self._ids[best],
            offset=float(line.project(target)),
            distance=float(line.distance(target)),
        )
