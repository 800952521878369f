from .gtfs_repository import IGtfsRepository
from .road_network import IRoadNetwork, LanePredicate
from .route_store import IRouteStore, check_map_name

__all__ = [
    "IGtfsRepository",
    "IRoadNetwork",
    "IRouteStore",
    "LanePredicate",
    "check_map_name",
]
