from __future__ import annotations

from dataclasses import dataclass, field

from pyproj import CRS, Transformer

from src.domain.exceptions import PointOutOfBounds
from src.domain.models import GeoBounds, GeoPoint, Pt2D


@dataclass(slots=True)
class GeoProjector:
    """Projects WGS84 coordinates into the map's local planar space.

    The map space is an azimuthal equidistant projection in meters anchored at
    the north-west corner of the bounds, so that corner is (0, 0), x grows east
    and y grows south.
    """

    bounds: GeoBounds
    _transformer: Transformer = field(init=False, repr=False)

    def __post_init__(self) -> None:
        local = CRS.from_proj4(
            f"+proj=aeqd +lat_0={self.bounds.max_lat} +lon_0={self.bounds.min_lon} "
            "+x_0=0 +y_0=0 +datum=WGS84 +units=m +no_defs"
        )
        # always_xy: inputs are (lon, lat) regardless of the EPSG axis order.
        self._transformer = Transformer.from_crs("EPSG:4326", local, always_xy=True)

    def project(self, point: GeoPoint) -> Pt2D:
        if not self.bounds.contains(point):
            raise PointOutOfBounds(point.lat, point.lon)
        x, y = self._transformer.transform(point.lon, point.lat)
        return Pt2D(x=float(x), y=float(-y))

    def project_lon_lat(self, lon: float, lat: float) -> Pt2D:
        return self.project(GeoPoint(lat=lat, lon=lon))
