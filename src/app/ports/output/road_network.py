from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Iterable

from src.domain.models import EdgeMatch, GeoBounds, LaneType, Pt2D, RoadEdge

LanePredicate = Callable[[LaneType], bool]


class IRoadNetwork(ABC):
    """Read-only view of the road network graph the importer matches against."""

    @abstractmethod
    def edges(self) -> Iterable[RoadEdge]:
        """Enumerate every edge with its lane type and planar geometry."""

    @abstractmethod
    def nearest_edge(
        self, point: Pt2D, predicate: LanePredicate
    ) -> EdgeMatch | None:
        """Closest edge to `point` among edges whose lane type satisfies `predicate`."""

    @abstractmethod
    def gps_bounds(self) -> GeoBounds:
        """Geographic envelope of the map, used for coordinate projection."""
