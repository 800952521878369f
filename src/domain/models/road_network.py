from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .geo import Pt2D


class LaneType(str, Enum):
    DRIVING = "driving"
    BUS = "bus"
    BIKING = "biking"
    SIDEWALK = "sidewalk"
    PARKING = "parking"
    LIGHT_RAIL = "light_rail"


TRANSIT_LANE_TYPES = frozenset({LaneType.DRIVING, LaneType.BUS})


def is_transit_eligible(lane_type: LaneType) -> bool:
    """Buses may only stop on driving lanes and dedicated bus lanes."""

    return lane_type in TRANSIT_LANE_TYPES


@dataclass(frozen=True, slots=True)
class RoadEdge:
    id: str
    lane_type: LaneType
    geometry: tuple[Pt2D, ...]


@dataclass(frozen=True, slots=True)
class EdgeMatch:
    edge_id: str
    offset: float
    distance: float
