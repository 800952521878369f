from .local_gtfs_repository import LocalGtfsRepository
from .local_route_store import LocalJsonRouteStore
from .s3_route_store import S3RouteStore

__all__ = [
    "LocalGtfsRepository",
    "LocalJsonRouteStore",
    "S3RouteStore",
]
