class TransitImportError(Exception):
    """Base exception for transit import failures."""


class ConfigError(TransitImportError):
    """Raised for invalid runtime configuration."""


class IoFailure(TransitImportError):
    """Raised when a feed resource cannot be read. Fatal to the run."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read {path}: {reason}")
        self.path = path
        self.reason = reason


class MalformedRow(TransitImportError):
    """Raised when a required field of a feed row cannot be decoded."""

    def __init__(
        self,
        message: str,
        *,
        file: str | None = None,
        line: int | None = None,
        column: str | None = None,
    ) -> None:
        where = ""
        if file is not None:
            where = f"{file}"
            if line is not None:
                where += f":{line}"
            if column:
                where += f" [{column}]"
            where += ": "
        super().__init__(f"{where}{message}")
        self.file = file
        self.line = line
        self.column = column


class MalformedCoordinate(MalformedRow):
    """Raised when a latitude/longitude text is not a usable number."""

    def __init__(self, raw: str, **kwargs) -> None:
        super().__init__(f"bad point {raw!r}", **kwargs)
        self.raw = raw


class PointOutOfBounds(TransitImportError):
    """Raised when a coordinate falls outside the map's geographic envelope."""

    def __init__(self, lat: float, lon: float) -> None:
        super().__init__(f"Point ({lat}, {lon}) is outside the map bounds")
        self.lat = lat
        self.lon = lon


class NoViableTrip(TransitImportError):
    """Raised when a route has no trip with resolvable stops."""

    def __init__(self, route_id: str, reason: str) -> None:
        super().__init__(f"Route {route_id}: {reason}")
        self.route_id = route_id


class UnmatchedStop(TransitImportError):
    """Raised when no eligible lane lies within tolerance of a stop."""

    def __init__(self, route_id: str, stop_id: str, distance: float | None) -> None:
        if distance is None:
            detail = "no eligible lane in the road network"
        else:
            detail = f"nearest eligible lane is {distance:.1f}m away"
        super().__init__(f"Route {route_id}: stop {stop_id} unmatched, {detail}")
        self.route_id = route_id
        self.stop_id = stop_id
        self.distance = distance


class RouteUnroutable(TransitImportError):
    """Raised when a route keeps no stop after lane matching."""

    def __init__(self, route_id: str) -> None:
        super().__init__(f"Route {route_id} has no stop matched to a lane")
        self.route_id = route_id
