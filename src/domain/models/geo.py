from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True, slots=True)
class GeoPoint:
    lat: float
    lon: float

    def __post_init__(self) -> None:
        if not (-90.0 <= self.lat <= 90.0):
            raise ValueError(f"Invalid latitude: {self.lat}")
        if not (-180.0 <= self.lon <= 180.0):
            raise ValueError(f"Invalid longitude: {self.lon}")


@dataclass(frozen=True, slots=True)
class GeoBounds:
    """Geographic envelope of a map (inclusive on every side)."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    def __post_init__(self) -> None:
        if self.min_lon > self.max_lon or self.min_lat > self.max_lat:
            raise ValueError(f"Empty bounds: {self}")

    def contains(self, point: GeoPoint) -> bool:
        return (
            self.min_lon <= point.lon <= self.max_lon
            and self.min_lat <= point.lat <= self.max_lat
        )

    @staticmethod
    def from_points(points: Iterable[GeoPoint]) -> "GeoBounds":
        pts = list(points)
        if not pts:
            raise ValueError("Cannot compute bounds of zero points")
        return GeoBounds(
            min_lon=min(p.lon for p in pts),
            min_lat=min(p.lat for p in pts),
            max_lon=max(p.lon for p in pts),
            max_lat=max(p.lat for p in pts),
        )


@dataclass(frozen=True, slots=True)
class Pt2D:
    """A point in the map's local planar space (meters, y grows southward)."""

    x: float
    y: float
