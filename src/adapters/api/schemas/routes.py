from __future__ import annotations

from pydantic import BaseModel

from src.domain.models import (
    FinalizedStop,
    FinalizedStopTime,
    FinalizedTransitRoute,
    FinalizedTrip,
    LanePosition,
    Pt2D,
    ShapePoint,
)


class PointSchema(BaseModel):
    x: float
    y: float


class LanePositionSchema(BaseModel):
    edge_id: str
    offset: float


class StopSchema(BaseModel):
    id: str
    code: str = ""
    name: str = ""
    description: str = ""
    network_position: LanePositionSchema


class StopTimeSchema(BaseModel):
    arrival_time: str = ""
    departure_time: str = ""
    stop: StopSchema
    stop_sequence: int
    pickup_type: int = 0
    drop_off_type: int = 0


class ShapePointSchema(BaseModel):
    position: PointSchema
    sequence: int


class TripSchema(BaseModel):
    service_id: str
    id: str
    headsign: str = ""
    direction_id: int | None = None
    shape: list[ShapePointSchema] = []
    stop_times: list[StopTimeSchema] = []


class TransitRouteSchema(BaseModel):
    id: str
    long_name: str = ""
    short_name: str = ""
    description: str = ""
    stops: list[StopSchema] = []
    trips: list[TripSchema] = []


class TransitRouteSummarySchema(BaseModel):
    id: str
    short_name: str = ""
    long_name: str = ""
    stop_count: int
    trip_count: int


def _stop_to_schema(stop: FinalizedStop) -> StopSchema:
    return StopSchema(
        id=stop.id,
        code=stop.code,
        name=stop.name,
        description=stop.description,
        network_position=LanePositionSchema(
            edge_id=stop.network_position.edge_id,
            offset=stop.network_position.offset,
        ),
    )


def _trip_to_schema(trip: FinalizedTrip) -> TripSchema:
    return TripSchema(
        service_id=trip.service_id,
        id=trip.id,
        headsign=trip.headsign,
        direction_id=trip.direction_id,
        shape=[
            ShapePointSchema(
                position=PointSchema(x=p.position.x, y=p.position.y),
                sequence=p.sequence,
            )
            for p in trip.shape
        ],
        stop_times=[
            StopTimeSchema(
                arrival_time=st.arrival_time,
                departure_time=st.departure_time,
                stop=_stop_to_schema(st.stop),
                stop_sequence=st.stop_sequence,
                pickup_type=st.pickup_type,
                drop_off_type=st.drop_off_type,
            )
            for st in trip.stop_times
        ],
    )


def route_to_schema(route: FinalizedTransitRoute) -> TransitRouteSchema:
    return TransitRouteSchema(
        id=route.id,
        long_name=route.long_name,
        short_name=route.short_name,
        description=route.description,
        stops=[_stop_to_schema(s) for s in route.stops],
        trips=[_trip_to_schema(t) for t in route.trips],
    )


def route_to_summary(route: FinalizedTransitRoute) -> TransitRouteSummarySchema:
    return TransitRouteSummarySchema(
        id=route.id,
        short_name=route.short_name,
        long_name=route.long_name,
        stop_count=len(route.stops),
        trip_count=len(route.trips),
    )


def _schema_to_stop(schema: StopSchema) -> FinalizedStop:
    return FinalizedStop(
        id=schema.id,
        code=schema.code,
        name=schema.name,
        description=schema.description,
        network_position=LanePosition(
            edge_id=schema.network_position.edge_id,
            offset=schema.network_position.offset,
        ),
    )


def schema_to_route(schema: TransitRouteSchema) -> FinalizedTransitRoute:
    """Inverse of route_to_schema; every field survives the round trip."""

    return FinalizedTransitRoute(
        id=schema.id,
        long_name=schema.long_name,
        short_name=schema.short_name,
        description=schema.description,
        stops=tuple(_schema_to_stop(s) for s in schema.stops),
        trips=tuple(
            FinalizedTrip(
                service_id=t.service_id,
                id=t.id,
                headsign=t.headsign,
                direction_id=t.direction_id,
                shape=tuple(
                    ShapePoint(
                        position=Pt2D(x=p.position.x, y=p.position.y),
                        sequence=p.sequence,
                    )
                    for p in t.shape
                ),
                stop_times=tuple(
                    FinalizedStopTime(
                        arrival_time=st.arrival_time,
                        departure_time=st.departure_time,
                        stop=_schema_to_stop(st.stop),
                        stop_sequence=st.stop_sequence,
                        pickup_type=st.pickup_type,
                        drop_off_type=st.drop_off_type,
                    )
                    for st in t.stop_times
                ),
            )
            for t in schema.trips
        ),
    )
