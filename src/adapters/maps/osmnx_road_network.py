from __future__ import annotations

import os
import pickle
from dataclasses import dataclass
from typing import Any, Mapping

import networkx as nx
import osmnx as ox

from src.domain.algorithms.projection import GeoProjector
from src.domain.models import GeoBounds, GeoPoint, LaneType

from .networkx_road_network import NetworkxRoadNetwork

_BUS_HIGHWAYS = {"busway", "bus_guideway"}
_FOOT_HIGHWAYS = {
    "footway",
    "path",
    "pedestrian",
    "steps",
    "corridor",
    "sidewalk",
    "bridleway",
}
_BIKE_HIGHWAYS = {"cycleway"}
_BUS_LANE_VALUES = {"lane", "opposite_lane", "both"}


def _tag(data: Mapping[str, Any], key: str) -> str:
    # OSMnx merges tags of simplified ways into lists.
    value = data.get(key)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return str(value).strip().lower() if value is not None else ""


def classify_lane_type(data: Mapping[str, Any]) -> LaneType:
    """Derive the lane type of an OSM way from its tags."""

    highway = _tag(data, "highway")
    if highway in _BUS_HIGHWAYS:
        return LaneType.BUS
    if _tag(data, "busway") in _BUS_LANE_VALUES:
        return LaneType.BUS
    if highway in _FOOT_HIGHWAYS:
        return LaneType.SIDEWALK
    if highway in _BIKE_HIGHWAYS:
        return LaneType.BIKING
    if not highway and _tag(data, "railway") in {"tram", "light_rail"}:
        return LaneType.LIGHT_RAIL
    if _tag(data, "access") == "no" and "designated" in {
        _tag(data, "bus"),
        _tag(data, "psv"),
    }:
        return LaneType.BUS
    return LaneType.DRIVING


def _edge_lon_lat(graph: Any, u: Any, v: Any, data: Mapping[str, Any]):
    geometry = data.get("geometry")
    if geometry is not None:
        return [(float(x), float(y)) for x, y in geometry.coords]
    return [
        (float(graph.nodes[n]["x"]), float(graph.nodes[n]["y"])) for n in (u, v)
    ]


def road_network_from_osm_graph(graph: Any) -> NetworkxRoadNetwork:
    """Convert an OSMnx street graph into a NetworkxRoadNetwork.

    Coordinates are projected into map space with the graph's own envelope.
    The input graph is left untouched.
    """

    crs = graph.graph.get("crs")
    if crs is not None and ox.projection.is_projected(crs):
        graph = ox.projection.project_graph(graph, to_latlong=True)

    edges = [
        (u, v, k, data, _edge_lon_lat(graph, u, v, data))
        for u, v, k, data in graph.edges(keys=True, data=True)
    ]
    points = [
        GeoPoint(lat=float(d["y"]), lon=float(d["x"]))
        for _, d in graph.nodes(data=True)
        if "x" in d and "y" in d
    ]
    points.extend(
        GeoPoint(lat=lat, lon=lon) for *_, coords in edges for lon, lat in coords
    )
    bounds = GeoBounds.from_points(points)
    projector = GeoProjector(bounds)

    out = nx.MultiDiGraph(gps_bounds=bounds)
    for u, v, k, data, coords in edges:
        out.add_edge(
            u,
            v,
            key=k,
            id=f"{u}-{v}-{k}",
            lane_type=classify_lane_type(data).value,
            geometry=[projector.project_lon_lat(lon, lat) for lon, lat in coords],
        )
    return NetworkxRoadNetwork(graph=out)


@dataclass(slots=True)
class OSMnxRoadNetworkAdapter:
    """Loads the road network the importer matches stops against.

    Env vars:
      - ROAD_GRAPH_PATH: path to .graphml or .pkl/.pickle
      - OSM_PLACE: place string for OSMnx, used when no graph file is configured
    """

    graph_path: str | None = None
    place: str | None = None
    network_type: str = "all"

    def _configure_osmnx(self) -> None:
        ox.settings.use_cache = True
        ox.settings.log_console = False
        ox.settings.cache_folder = os.getenv("OSMNX_CACHE_FOLDER") or "data/osm_cache"

    def load_graph(self) -> Any:
        path = (self.graph_path or os.getenv("ROAD_GRAPH_PATH") or "").strip()
        if path:
            if path.lower().endswith(".graphml"):
                # OSMnx loader keeps numeric node/edge attributes typed.
                return ox.load_graphml(path)
            if path.lower().endswith((".pkl", ".pickle")):
                with open(path, "rb") as fp:
                    return pickle.load(fp)
            raise RuntimeError(f"Unsupported ROAD_GRAPH_PATH format: {path}")

        place = (self.place or os.getenv("OSM_PLACE") or "").strip()
        if not place:
            raise RuntimeError("Set ROAD_GRAPH_PATH or OSM_PLACE to load a road graph")

        self._configure_osmnx()
        return ox.graph_from_place(place, network_type=self.network_type, simplify=True)

    def load(self) -> NetworkxRoadNetwork:
        return road_network_from_osm_graph(self.load_graph())
