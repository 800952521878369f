from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field, replace

from src.domain.algorithms.projection import GeoProjector
from src.domain.algorithms.selection import pick_most_frequent
from src.domain.exceptions import NoViableTrip, PointOutOfBounds
from src.domain.models import (
    GeoPoint,
    ImportIssue,
    ImportIssueKind,
    RawStop,
    RawStopTime,
    RawTransitRoute,
    RawTrip,
    ShapePoint,
)
from src.domain.models.gtfs import (
    GtfsFeedRecords,
    RouteRecord,
    ShapeRecord,
    StopRecord,
    StopTimeRecord,
    TripRecord,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConsolidationResult:
    routes: tuple[RawTransitRoute, ...]
    issues: tuple[ImportIssue, ...]


@dataclass(slots=True)
class _FeedIndex:
    """Lookup tables over one feed, built once per consolidation."""

    stops_by_id: dict[str, StopRecord]
    trips_by_route: dict[str, list[TripRecord]]
    stop_times_by_trip: dict[str, list[StopTimeRecord]]
    shape_records_by_id: dict[str, list[ShapeRecord]]

    @staticmethod
    def build(feed: GtfsFeedRecords) -> "_FeedIndex":
        stops_by_id: dict[str, StopRecord] = {}
        for stop in feed.stops:
            stops_by_id.setdefault(stop.stop_id, stop)

        trips_by_route: dict[str, list[TripRecord]] = {}
        for trip in feed.trips:
            trips_by_route.setdefault(trip.route_id, []).append(trip)

        stop_times_by_trip: dict[str, list[StopTimeRecord]] = {}
        for st in feed.stop_times:
            stop_times_by_trip.setdefault(st.trip_id, []).append(st)
        for entries in stop_times_by_trip.values():
            entries.sort(key=lambda st: st.stop_sequence)

        shape_records_by_id: dict[str, list[ShapeRecord]] = {}
        for pt in feed.shapes:
            shape_records_by_id.setdefault(pt.shape_id, []).append(pt)
        for pts in shape_records_by_id.values():
            pts.sort(key=lambda pt: pt.sequence)

        return _FeedIndex(
            stops_by_id=stops_by_id,
            trips_by_route=trips_by_route,
            stop_times_by_trip=stop_times_by_trip,
            shape_records_by_id=shape_records_by_id,
        )

    def stop_times(self, trip_id: str) -> list[StopTimeRecord]:
        return self.stop_times_by_trip.get(trip_id, [])

    def resolvable_stop_count(self, trip_id: str) -> int:
        stops = self.stops_by_id
        return sum(1 for st in self.stop_times(trip_id) if st.stop_id in stops)


@dataclass(slots=True)
class _ProjectedFeed:
    """Projects each stop and shape of a feed at most once.

    Points outside the map are dropped. The drop is reported once for every
    route it affects, even when the projection comes from the cache.
    """

    index: _FeedIndex
    projector: GeoProjector
    source: str
    issues: list[ImportIssue] = field(default_factory=list)
    _stops: dict[str, RawStop | None] = field(default_factory=dict)
    _stop_errors: dict[str, str] = field(default_factory=dict)
    _shapes: dict[str, tuple[tuple[ShapePoint, ...], int]] = field(
        default_factory=dict
    )
    _reported: set[tuple[str, str]] = field(default_factory=set)

    def _report(
        self, *, route_id: str, message: str, stop_id: str | None = None, key: str
    ) -> None:
        if (key, route_id) in self._reported:
            return
        self._reported.add((key, route_id))
        logger.warning(
            "Route %s: %s",
            route_id,
            message,
            extra={"route_id": route_id, "stop_id": stop_id, "source": self.source},
        )
        self.issues.append(
            ImportIssue(
                kind=ImportIssueKind.POINT_OUT_OF_BOUNDS,
                route_id=route_id,
                stop_id=stop_id,
                message=message,
                source=self.source,
            )
        )

    def stop(self, stop_id: str, *, route_id: str) -> RawStop | None:
        if stop_id not in self._stops:
            rec = self.index.stops_by_id[stop_id]
            try:
                position = self.projector.project(GeoPoint(lat=rec.lat, lon=rec.lon))
            except PointOutOfBounds as exc:
                self._stops[stop_id] = None
                self._stop_errors[stop_id] = str(exc)
            else:
                self._stops[stop_id] = RawStop(
                    id=rec.stop_id,
                    code=rec.code,
                    name=rec.name,
                    description=rec.description,
                    position=position,
                )

        raw = self._stops[stop_id]
        if raw is None:
            self._report(
                route_id=route_id,
                stop_id=stop_id,
                key=f"stop:{stop_id}",
                message=f"dropping stop {stop_id}: {self._stop_errors[stop_id]}",
            )
        return raw

    def shape(self, shape_id: str, *, route_id: str) -> tuple[ShapePoint, ...]:
        if not shape_id:
            return ()
        if shape_id not in self._shapes:
            points: list[ShapePoint] = []
            dropped = 0
            for rec in self.index.shape_records_by_id.get(shape_id, []):
                try:
                    position = self.projector.project(
                        GeoPoint(lat=rec.lat, lon=rec.lon)
                    )
                except PointOutOfBounds:
                    dropped += 1
                    continue
                points.append(ShapePoint(position=position, sequence=rec.sequence))
            self._shapes[shape_id] = (tuple(points), dropped)

        shape, dropped = self._shapes[shape_id]
        if dropped:
            self._report(
                route_id=route_id,
                key=f"shape:{shape_id}",
                message=(
                    f"{dropped} point(s) of shape {shape_id} outside the map bounds"
                ),
            )
        return shape


@dataclass(slots=True)
class RouteConsolidator:
    """Turns the tables of one feed into network-independent transit routes.

    Per route: the service with the most trips is kept, the trip with the most
    resolvable stop times supplies the canonical stop list (deduplicated and
    sorted by stop id), and every trip of that service is assembled with its
    shape and stop times.
    """

    projector: GeoProjector

    def consolidate(self, feed: GtfsFeedRecords) -> ConsolidationResult:
        projected = _ProjectedFeed(
            index=_FeedIndex.build(feed), projector=self.projector, source=feed.source
        )

        routes: list[RawTransitRoute] = []
        for route_rec in feed.routes:
            try:
                routes.append(self.build_route(route_rec, projected))
            except NoViableTrip as exc:
                logger.warning(
                    "Skipping route: %s", exc, extra={"route_id": exc.route_id}
                )
                projected.issues.append(
                    ImportIssue(
                        kind=ImportIssueKind.NO_VIABLE_TRIP,
                        route_id=exc.route_id,
                        message=str(exc),
                        source=feed.source,
                    )
                )

        logger.info(
            "Consolidated %d of %d routes from %s",
            len(routes),
            len(feed.routes),
            feed.source,
        )
        return ConsolidationResult(routes=tuple(routes), issues=tuple(projected.issues))

    def build_route(
        self, route_rec: RouteRecord, projected: _ProjectedFeed
    ) -> RawTransitRoute:
        index = projected.index
        route_id = route_rec.route_id

        trips = index.trips_by_route.get(route_id, [])
        service_id = pick_most_frequent(Counter(t.service_id for t in trips))
        if service_id is None:
            raise NoViableTrip(route_id, "no trips")
        service_trips = [t for t in trips if t.service_id == service_id]

        stop_counts = {
            t.trip_id: index.resolvable_stop_count(t.trip_id) for t in service_trips
        }
        trip_id = pick_most_frequent(stop_counts)
        if trip_id is None or stop_counts[trip_id] == 0:
            raise NoViableTrip(
                route_id, f"no trip of service {service_id} stops at a known stop"
            )

        stop_ids = sorted(
            {
                st.stop_id
                for st in index.stop_times(trip_id)
                if st.stop_id in index.stops_by_id
            }
        )
        stops = tuple(
            stop
            for stop in (projected.stop(sid, route_id=route_id) for sid in stop_ids)
            if stop is not None
        )

        logger.debug(
            "Route %s: service %s, canonical trip %s with %d stops",
            route_id,
            service_id,
            trip_id,
            len(stops),
        )

        return RawTransitRoute(
            id=route_id,
            long_name=route_rec.long_name,
            short_name=route_rec.short_name,
            description=route_rec.description,
            stops=stops,
            trips=tuple(
                self._build_trip(t, projected, route_id=route_id) for t in service_trips
            ),
        )

    def _build_trip(
        self, trip: TripRecord, projected: _ProjectedFeed, *, route_id: str
    ) -> RawTrip:
        stop_times: list[RawStopTime] = []
        for st in projected.index.stop_times(trip.trip_id):
            if st.stop_id not in projected.index.stops_by_id:
                logger.debug(
                    "Trip %s references unknown stop %s", trip.trip_id, st.stop_id
                )
                continue
            stop = projected.stop(st.stop_id, route_id=route_id)
            if stop is None:
                continue
            stop_times.append(
                RawStopTime(
                    arrival_time=st.arrival_time,
                    departure_time=st.departure_time,
                    # Own copy per stop time; never share one stop object.
                    stop=replace(stop),
                    stop_sequence=st.stop_sequence,
                    pickup_type=st.pickup_type,
                    drop_off_type=st.drop_off_type,
                )
            )

        return RawTrip(
            service_id=trip.service_id,
            id=trip.trip_id,
            headsign=trip.headsign,
            direction_id=trip.direction_id,
            shape=projected.shape(trip.shape_id, route_id=route_id),
            stop_times=tuple(stop_times),
        )
