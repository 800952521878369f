from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouteRecord:
    route_id: str
    short_name: str = ""
    long_name: str = ""
    description: str = ""
    route_type: int = 3  # GTFS: 3 = bus


@dataclass(frozen=True, slots=True)
class StopRecord:
    stop_id: str
    lat: float
    lon: float
    code: str = ""
    name: str = ""
    description: str = ""


@dataclass(frozen=True, slots=True)
class TripRecord:
    route_id: str
    service_id: str
    trip_id: str
    headsign: str = ""
    direction_id: int | None = None
    block_id: str = ""
    shape_id: str = ""


@dataclass(frozen=True, slots=True)
class StopTimeRecord:
    """One row of stop_times.txt.

    Times are kept as the feed's text (HH:MM:SS, hours may exceed 24).
    """

    trip_id: str
    stop_id: str
    stop_sequence: int
    arrival_time: str = ""
    departure_time: str = ""
    pickup_type: int = 0
    drop_off_type: int = 0


@dataclass(frozen=True, slots=True)
class ShapeRecord:
    shape_id: str
    lat: float
    lon: float
    sequence: int


@dataclass(frozen=True, slots=True)
class GtfsFeedRecords:
    """The five parsed tables of one feed source, in file order."""

    source: str
    routes: tuple[RouteRecord, ...]
    stops: tuple[StopRecord, ...]
    trips: tuple[TripRecord, ...]
    stop_times: tuple[StopTimeRecord, ...]
    shapes: tuple[ShapeRecord, ...]
