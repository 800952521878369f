from __future__ import annotations

from dataclasses import dataclass

from .geo import Pt2D


@dataclass(frozen=True, slots=True)
class RawStop:
    id: str
    code: str
    name: str
    description: str
    position: Pt2D


@dataclass(frozen=True, slots=True)
class RawStopTime:
    arrival_time: str
    departure_time: str
    stop: RawStop  # own snapshot, never shared with another stop time
    stop_sequence: int
    pickup_type: int = 0
    drop_off_type: int = 0


@dataclass(frozen=True, slots=True)
class ShapePoint:
    position: Pt2D
    sequence: int


@dataclass(frozen=True, slots=True)
class RawTrip:
    service_id: str
    id: str
    headsign: str
    direction_id: int | None
    shape: tuple[ShapePoint, ...] = ()
    stop_times: tuple[RawStopTime, ...] = ()


@dataclass(frozen=True, slots=True)
class RawTransitRoute:
    """A consolidated route, not yet bound to the road network.

    `stops` holds every stop id once, sorted by id.
    """

    id: str
    long_name: str
    short_name: str
    description: str
    stops: tuple[RawStop, ...] = ()
    trips: tuple[RawTrip, ...] = ()


@dataclass(frozen=True, slots=True)
class LanePosition:
    edge_id: str
    offset: float  # arc length from the edge's first point


@dataclass(frozen=True, slots=True)
class FinalizedStop:
    id: str
    code: str
    name: str
    description: str
    network_position: LanePosition


@dataclass(frozen=True, slots=True)
class FinalizedStopTime:
    arrival_time: str
    departure_time: str
    stop: FinalizedStop
    stop_sequence: int
    pickup_type: int = 0
    drop_off_type: int = 0


@dataclass(frozen=True, slots=True)
class FinalizedTrip:
    service_id: str
    id: str
    headsign: str
    direction_id: int | None
    shape: tuple[ShapePoint, ...] = ()
    stop_times: tuple[FinalizedStopTime, ...] = ()


@dataclass(frozen=True, slots=True)
class FinalizedTransitRoute:
    id: str
    long_name: str
    short_name: str
    description: str
    stops: tuple[FinalizedStop, ...] = ()
    trips: tuple[FinalizedTrip, ...] = ()
