from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from src.app.ports.output import IRoadNetwork, LanePredicate
from src.domain.algorithms.edge_index import EdgeIndex
from src.domain.models import EdgeMatch, GeoBounds, LaneType, Pt2D, RoadEdge

logger = logging.getLogger(__name__)


def _as_points(raw: Any) -> tuple[Pt2D, ...]:
    # Accepts a shapely LineString, a list of Pt2D, or a list of (x, y) pairs.
    if hasattr(raw, "coords"):
        raw = list(raw.coords)
    points: list[Pt2D] = []
    for p in raw:
        if isinstance(p, Pt2D):
            points.append(p)
        else:
            points.append(Pt2D(x=float(p[0]), y=float(p[1])))
    return tuple(points)


@dataclass(slots=True)
class NetworkxRoadNetwork(IRoadNetwork):
    """Road network backed by a networkx (Multi)(Di)Graph in map coordinates.

    Edge attributes:
      - id: edge identifier (default: "{u}-{v}-{key}")
      - lane_type: a LaneType value (default: driving)
      - geometry: planar polyline; falls back to the end nodes' x/y

    Graph attribute:
      - gps_bounds: GeoBounds or (min_lon, min_lat, max_lon, max_lat)

    The graph is never mutated.
    """

    graph: Any

    _edges: tuple[RoadEdge, ...] | None = None
    _indexes: dict[LanePredicate, EdgeIndex] = field(default_factory=dict)

    def _iter_raw_edges(self) -> Iterator[tuple[Any, Any, Any, dict[str, Any]]]:
        if self.graph.is_multigraph():
            yield from self.graph.edges(keys=True, data=True)
        else:
            for u, v, data in self.graph.edges(data=True):
                yield u, v, 0, data

    def _node_point(self, node: Any) -> Pt2D:
        data = self.graph.nodes[node]
        return Pt2D(x=float(data["x"]), y=float(data["y"]))

    def edges(self) -> Iterable[RoadEdge]:
        if self._edges is None:
            out: list[RoadEdge] = []
            for u, v, k, data in self._iter_raw_edges():
                raw_geometry = data.get("geometry")
                if raw_geometry is None:
                    geometry = (self._node_point(u), self._node_point(v))
                else:
                    geometry = _as_points(raw_geometry)
                out.append(
                    RoadEdge(
                        id=str(data.get("id") or f"{u}-{v}-{k}"),
                        lane_type=LaneType(data.get("lane_type", LaneType.DRIVING)),
                        geometry=geometry,
                    )
                )
            self._edges = tuple(out)
        return self._edges

    def nearest_edge(self, point: Pt2D, predicate: LanePredicate) -> EdgeMatch | None:
        index = self._indexes.get(predicate)
        if index is None:
            index = EdgeIndex(e for e in self.edges() if predicate(e.lane_type))
            self._indexes[predicate] = index
            logger.info("Indexed %d road edges for nearest-lane queries", len(index))
        return index.nearest(point)

    def gps_bounds(self) -> GeoBounds:
        raw = self.graph.graph.get("gps_bounds")
        if raw is None:
            raise RuntimeError("Road graph has no 'gps_bounds' attribute")
        if isinstance(raw, GeoBounds):
            return raw
        min_lon, min_lat, max_lon, max_lat = (float(v) for v in raw)
        return GeoBounds(
            min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat
        )
