from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Sequence

from src.adapters.maps.osmnx_road_network import OSMnxRoadNetworkAdapter
from src.adapters.persistence import (
    LocalGtfsRepository,
    LocalJsonRouteStore,
    S3RouteStore,
)
from src.app.ports.output import IRouteStore
from src.app.services.transit_import_service import TransitImportService
from src.config import ImportConfig
from src.domain.exceptions import TransitImportError
from src.domain.models import FinalizedTransitRoute

logger = logging.getLogger("src.importer")


def storage_names(
    routes: Sequence[FinalizedTransitRoute], sources: Sequence[str | None]
) -> list[str]:
    """Names to save routes under, unique within one run.

    A route id imported from more than one feed is saved as
    "<feed directory name>/<route id>" for every feed that has it.
    """

    counts: dict[str, int] = {}
    for route in routes:
        counts[route.id] = counts.get(route.id, 0) + 1

    names: list[str] = []
    used: set[str] = set()
    for route, source in zip(routes, sources):
        name = route.id
        if counts[route.id] > 1:
            feed = Path(source).name if source else "feed"
            name = f"{feed}/{route.id}"
        candidate, n = name, 1
        while candidate in used:
            n += 1
            candidate = f"{name}~{n}"
        used.add(candidate)
        names.append(candidate)
    return names


def main() -> int:
    config = ImportConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    road_network = OSMnxRoadNetworkAdapter().load()
    service = TransitImportService(
        gtfs_repository=LocalGtfsRepository(),
        road_network=road_network,
        tolerance_m=config.tolerance_m,
    )

    try:
        result = service.import_feeds(config.gtfs_paths)
    except TransitImportError:
        logger.exception("Transit import failed")
        return 1

    store: IRouteStore = (
        S3RouteStore(bucket=config.route_store_bucket)
        if config.route_store_bucket
        else LocalJsonRouteStore()
    )
    names = storage_names(result.routes, result.sources)
    for name, route in zip(names, result.routes):
        store.save_object(config.map_name, name, route)

    for issue in result.issues:
        logger.info(
            "%s route=%s stop=%s source=%s: %s",
            issue.kind.value,
            issue.route_id,
            issue.stop_id,
            issue.source,
            issue.message,
        )
    logger.info(
        "Saved %d transit routes to map %s (%d issues)",
        len(result.routes),
        config.map_name,
        len(result.issues),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
