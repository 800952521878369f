from .geo import GeoBounds, GeoPoint, Pt2D
from .issues import ImportIssue, ImportIssueKind, ImportResult
from .road_network import EdgeMatch, LaneType, RoadEdge, is_transit_eligible
from .transit_route import (
    FinalizedStop,
    FinalizedStopTime,
    FinalizedTransitRoute,
    FinalizedTrip,
    LanePosition,
    RawStop,
    RawStopTime,
    RawTransitRoute,
    RawTrip,
    ShapePoint,
)

__all__ = [
    "EdgeMatch",
    "FinalizedStop",
    "FinalizedStopTime",
    "FinalizedTransitRoute",
    "FinalizedTrip",
    "GeoBounds",
    "GeoPoint",
    "ImportIssue",
    "ImportIssueKind",
    "ImportResult",
    "LanePosition",
    "LaneType",
    "Pt2D",
    "RawStop",
    "RawStopTime",
    "RawTransitRoute",
    "RawTrip",
    "RoadEdge",
    "ShapePoint",
    "is_transit_eligible",
]
