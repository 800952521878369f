from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from src.app.ports.output import IGtfsRepository, IRoadNetwork
from src.domain.algorithms.projection import GeoProjector
from src.domain.models import (
    FinalizedTransitRoute,
    ImportIssue,
    ImportIssueKind,
    ImportResult,
    RawTransitRoute,
)

from .route_consolidator import RouteConsolidator
from .stop_lane_matcher import DEFAULT_TOLERANCE_M, StopLaneMatcher

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TransitImportService:
    """Application service (use case) for importing GTFS feeds onto a map.

    Each source is read and consolidated in order; I/O and row errors
    propagate and abort the run. Lane matching then runs once over the routes
    of every source. Per-route problems only drop the route and are reported
    in the result, as is a route id already imported from an earlier source.
    """

    gtfs_repository: IGtfsRepository
    road_network: IRoadNetwork
    tolerance_m: float = DEFAULT_TOLERANCE_M

    def import_feeds(self, sources: Iterable[str | Path]) -> ImportResult:
        projector = GeoProjector(self.road_network.gps_bounds())
        consolidator = RouteConsolidator(projector=projector)

        raw_routes: list[RawTransitRoute] = []
        route_sources: list[str | None] = []
        issues: list[ImportIssue] = []

        for source in sources:
            feed = self.gtfs_repository.load_feed(source)
            consolidated = consolidator.consolidate(feed)
            raw_routes.extend(consolidated.routes)
            route_sources.extend(feed.source for _ in consolidated.routes)
            issues.extend(consolidated.issues)

        matcher = StopLaneMatcher(
            road_network=self.road_network, tolerance_m=self.tolerance_m
        )
        matched = matcher.match_routes(raw_routes, sources=route_sources)
        issues.extend(matched.issues)
        issues.extend(self._duplicate_route_issues(matched.routes, matched.sources))

        logger.info(
            "Imported %d transit routes (%d issues)",
            len(matched.routes),
            len(issues),
        )
        return ImportResult(
            routes=matched.routes, issues=tuple(issues), sources=matched.sources
        )

    @staticmethod
    def _duplicate_route_issues(
        routes: Sequence[FinalizedTransitRoute], sources: Sequence[str | None]
    ) -> list[ImportIssue]:
        first_source: dict[str, str | None] = {}
        issues: list[ImportIssue] = []
        for route, source in zip(routes, sources):
            if route.id not in first_source:
                first_source[route.id] = source
                continue
            message = (
                f"route id {route.id} of {source} already imported from "
                f"{first_source[route.id]}"
            )
            logger.warning(
                "%s", message, extra={"route_id": route.id, "source": source}
            )
            issues.append(
                ImportIssue(
                    kind=ImportIssueKind.DUPLICATE_ROUTE_ID,
                    route_id=route.id,
                    message=message,
                    source=source,
                )
            )
        return issues
