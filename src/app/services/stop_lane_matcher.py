from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Sequence

from src.app.ports.output import IRoadNetwork
from src.domain.exceptions import RouteUnroutable, UnmatchedStop
from src.domain.models import (
    EdgeMatch,
    FinalizedStop,
    FinalizedStopTime,
    FinalizedTransitRoute,
    FinalizedTrip,
    ImportIssue,
    ImportIssueKind,
    LanePosition,
    Pt2D,
    RawStop,
    RawTransitRoute,
    RawTrip,
    is_transit_eligible,
)

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE_M = 25.0


@dataclass(frozen=True, slots=True)
class MatchResult:
    routes: tuple[FinalizedTransitRoute, ...]
    issues: tuple[ImportIssue, ...]
    sources: tuple[str | None, ...] = ()  # aligned with routes


@dataclass(slots=True)
class StopLaneMatcher:
    """Binds raw stops to positions on transit-eligible lanes.

    Nearest-lane queries go to the road network restricted to
    transit-eligible lanes and are memoised for the run. A stop with no
    eligible lane within `tolerance_m` is dropped from its route and every
    trip; a route left without stops is dropped.
    """

    road_network: IRoadNetwork
    tolerance_m: float = DEFAULT_TOLERANCE_M

    _matches: dict[tuple[str, Pt2D], EdgeMatch | None] = field(default_factory=dict)

    def nearest(self, stop: RawStop) -> EdgeMatch | None:
        # Same id and position always give the same answer; ids alone may
        # collide between feeds.
        key = (stop.id, stop.position)
        if key not in self._matches:
            self._matches[key] = self.road_network.nearest_edge(
                stop.position, is_transit_eligible
            )
        return self._matches[key]

    def match_stop(self, stop: RawStop, *, route_id: str) -> FinalizedStop:
        match = self.nearest(stop)
        if match is None or match.distance > self.tolerance_m:
            raise UnmatchedStop(
                route_id, stop.id, None if match is None else match.distance
            )
        return FinalizedStop(
            id=stop.id,
            code=stop.code,
            name=stop.name,
            description=stop.description,
            network_position=LanePosition(edge_id=match.edge_id, offset=match.offset),
        )

    def match_route(
        self,
        route: RawTransitRoute,
        *,
        issues: list[ImportIssue],
        source: str | None = None,
    ) -> FinalizedTransitRoute:
        """Finalize one route, appending an issue for every unmatched stop.

        Raises RouteUnroutable when none of the route's stops match.
        """

        resolved: dict[str, FinalizedStop | None] = {}

        def resolve(stop: RawStop) -> FinalizedStop | None:
            if stop.id not in resolved:
                try:
                    resolved[stop.id] = self.match_stop(stop, route_id=route.id)
                except UnmatchedStop as exc:
                    logger.warning(
                        "%s", exc, extra={"route_id": route.id, "stop_id": stop.id}
                    )
                    issues.append(
                        ImportIssue(
                            kind=ImportIssueKind.UNMATCHED_STOP,
                            route_id=route.id,
                            stop_id=stop.id,
                            message=str(exc),
                            source=source,
                        )
                    )
                    resolved[stop.id] = None
            return resolved[stop.id]

        stops = tuple(
            s for s in (resolve(stop) for stop in route.stops) if s is not None
        )
        if not stops:
            raise RouteUnroutable(route.id)

        return FinalizedTransitRoute(
            id=route.id,
            long_name=route.long_name,
            short_name=route.short_name,
            description=route.description,
            stops=stops,
            trips=tuple(self._finalize_trip(trip, resolve) for trip in route.trips),
        )

    def match_routes(
        self,
        routes: Sequence[RawTransitRoute],
        *,
        sources: Sequence[str | None] | None = None,
    ) -> MatchResult:
        """Finalize every route; `sources[i]` tags the issues of `routes[i]`."""

        if sources is not None and len(sources) != len(routes):
            raise ValueError("sources must align with routes")

        finalized: list[FinalizedTransitRoute] = []
        finalized_sources: list[str | None] = []
        issues: list[ImportIssue] = []
        for i, route in enumerate(routes):
            source = sources[i] if sources is not None else None
            try:
                finalized.append(
                    self.match_route(route, issues=issues, source=source)
                )
                finalized_sources.append(source)
            except RouteUnroutable as exc:
                logger.warning("Skipping route: %s", exc, extra={"route_id": route.id})
                issues.append(
                    ImportIssue(
                        kind=ImportIssueKind.ROUTE_UNROUTABLE,
                        route_id=route.id,
                        message=str(exc),
                        source=source,
                    )
                )

        logger.info("Matched %d of %d routes to lanes", len(finalized), len(routes))
        return MatchResult(
            routes=tuple(finalized),
            issues=tuple(issues),
            sources=tuple(finalized_sources),
        )

    def _finalize_trip(
        self, trip: RawTrip, resolve: Callable[[RawStop], FinalizedStop | None]
    ) -> FinalizedTrip:
        stop_times: list[FinalizedStopTime] = []
        for st in trip.stop_times:
            stop = resolve(st.stop)
            if stop is None:
                continue
            stop_times.append(
                FinalizedStopTime(
                    arrival_time=st.arrival_time,
                    departure_time=st.departure_time,
                    stop=replace(stop),
                    stop_sequence=st.stop_sequence,
                    pickup_type=st.pickup_type,
                    drop_off_type=st.drop_off_type,
                )
            )
        return FinalizedTrip(
            service_id=trip.service_id,
            id=trip.id,
            headsign=trip.headsign,
            direction_id=trip.direction_id,
            shape=trip.shape,
            stop_times=tuple(stop_times),
        )
