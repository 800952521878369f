from __future__ import annotations

import csv
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, TypeVar

from src.app.ports.output import IGtfsRepository
from src.domain.exceptions import IoFailure, MalformedCoordinate, MalformedRow
from src.domain.models.gtfs import (
    GtfsFeedRecords,
    RouteRecord,
    ShapeRecord,
    StopRecord,
    StopTimeRecord,
    TripRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

_COORD_RANGE = {"lat": 90.0, "lon": 180.0}


def parse_coord(raw: str | None, *, kind: str = "lat") -> float:
    """Parse a textual decimal degree.

    Tolerates surrounding whitespace, a leading '+', and a decimal comma.
    Raises MalformedCoordinate naming the raw text otherwise.
    """

    text = (raw or "").strip()
    if "," in text and "." not in text:
        text = text.replace(",", ".")
    try:
        value = float(text)
    except ValueError:
        raise MalformedCoordinate(raw or "") from None
    if not math.isfinite(value) or abs(value) > _COORD_RANGE[kind]:
        raise MalformedCoordinate(raw or "")
    return value


def parse_int(raw: str | None) -> int:
    """Parse an integer field, accepting forms like ' 3', '+3' and '3.0'."""

    text = (raw or "").strip()
    try:
        return int(text)
    except ValueError:
        pass
    value = float(text)  # ValueError propagates for non-numeric text
    if not value.is_integer():
        raise ValueError(f"not an integer: {raw!r}")
    return int(value)


@dataclass(frozen=True, slots=True)
class _Row:
    """One CSV row plus its location, for error messages."""

    values: Mapping[str, str | None]
    file: str
    line: int

    def _fail(self, column: str, message: str) -> MalformedRow:
        return MalformedRow(message, file=self.file, line=self.line, column=column)

    def text(self, column: str) -> str:
        return (self.values.get(column) or "").strip()

    def required(self, column: str) -> str:
        value = self.text(column)
        if not value:
            raise self._fail(column, "missing required value")
        return value

    def optional_integer(self, column: str) -> int | None:
        raw = self.text(column)
        if not raw:
            return None
        try:
            return parse_int(raw)
        except ValueError:
            raise self._fail(column, f"invalid integer {raw!r}") from None

    def integer(self, column: str, default: int) -> int:
        value = self.optional_integer(column)
        return default if value is None else value

    def required_integer(self, column: str) -> int:
        value = self.optional_integer(column)
        if value is None:
            raise self._fail(column, "missing required value")
        return value

    def coord(self, column: str, kind: str) -> float:
        try:
            return parse_coord(self.values.get(column), kind=kind)
        except MalformedCoordinate as exc:
            raise MalformedCoordinate(
                exc.raw, file=self.file, line=self.line, column=column
            ) from None


def _route(row: _Row) -> RouteRecord:
    return RouteRecord(
        route_id=row.required("route_id"),
        short_name=row.text("route_short_name"),
        long_name=row.text("route_long_name"),
        description=row.text("route_desc"),
        route_type=row.integer("route_type", default=3),
    )


def _stop(row: _Row) -> StopRecord:
    return StopRecord(
        stop_id=row.required("stop_id"),
        code=row.text("stop_code"),
        name=row.text("stop_name"),
        description=row.text("stop_desc"),
        lat=row.coord("stop_lat", "lat"),
        lon=row.coord("stop_lon", "lon"),
    )


def _trip(row: _Row) -> TripRecord:
    return TripRecord(
        route_id=row.required("route_id"),
        service_id=row.required("service_id"),
        trip_id=row.required("trip_id"),
        headsign=row.text("trip_headsign"),
        direction_id=row.optional_integer("direction_id"),
        block_id=row.text("block_id"),
        shape_id=row.text("shape_id"),
    )


def _stop_time(row: _Row) -> StopTimeRecord:
    return StopTimeRecord(
        trip_id=row.required("trip_id"),
        stop_id=row.required("stop_id"),
        stop_sequence=row.required_integer("stop_sequence"),
        arrival_time=row.text("arrival_time"),
        departure_time=row.text("departure_time"),
        pickup_type=row.integer("pickup_type", default=0),
        drop_off_type=row.integer("drop_off_type", default=0),
    )


def _shape(row: _Row) -> ShapeRecord:
    return ShapeRecord(
        shape_id=row.required("shape_id"),
        lat=row.coord("shape_pt_lat", "lat"),
        lon=row.coord("shape_pt_lon", "lon"),
        sequence=row.required_integer("shape_pt_sequence"),
    )


def _read_table(base: Path, name: str, decode: Callable[[_Row], T]) -> tuple[T, ...]:
    path = base / f"{name}.txt"
    records: list[T] = []
    try:
        # utf-8-sig: many agencies export with a BOM in front of the header.
        with path.open("r", encoding="utf-8-sig", newline="") as fp:
            reader = csv.DictReader(fp)
            # Header is line 1.
            for line, values in enumerate(reader, start=2):
                records.append(decode(_Row(values=values, file=path.name, line=line)))
    except FileNotFoundError:
        raise IoFailure(str(path), "file not found") from None
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise IoFailure(str(path), str(exc)) from exc

    logger.debug("Parsed %s", path, extra={"rows": len(records)})
    return tuple(records)


@dataclass(slots=True)
class LocalGtfsRepository(IGtfsRepository):
    """Loads a GTFS feed from a directory of .txt files.

    Every one of routes.txt, stops.txt, trips.txt, stop_times.txt and
    shapes.txt must be present.
    """

    def load_feed(self, source: str | Path) -> GtfsFeedRecords:
        base = Path(source)
        if not base.is_dir():
            raise IoFailure(str(base), "not a directory")

        feed = GtfsFeedRecords(
            source=str(source),
            routes=_read_table(base, "routes", _route),
            stops=_read_table(base, "stops", _stop),
            trips=_read_table(base, "trips", _trip),
            stop_times=_read_table(base, "stop_times", _stop_time),
            shapes=_read_table(base, "shapes", _shape),
        )
        logger.info(
            "Loaded GTFS feed %s: %d routes, %d stops, %d trips, %d stop times, "
            "%d shape points",
            base,
            len(feed.routes),
            len(feed.stops),
            len(feed.trips),
            len(feed.stop_times),
            len(feed.shapes),
        )
        return feed
