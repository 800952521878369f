from .transit_import import (
    ConfigError,
    IoFailure,
    MalformedCoordinate,
    MalformedRow,
    NoViableTrip,
    PointOutOfBounds,
    RouteUnroutable,
    TransitImportError,
    UnmatchedStop,
)

__all__ = [
    "ConfigError",
    "IoFailure",
    "MalformedCoordinate",
    "MalformedRow",
    "NoViableTrip",
    "PointOutOfBounds",
    "RouteUnroutable",
    "TransitImportError",
    "UnmatchedStop",
]
