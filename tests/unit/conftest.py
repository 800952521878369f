from __future__ import annotations

import csv
from pathlib import Path
from typing import Callable, Mapping, Sequence

import pytest

GTFS_COLUMNS: dict[str, list[str]] = {
    "routes": [
        "route_id",
        "route_short_name",
        "route_long_name",
        "route_desc",
        "route_type",
    ],
    "stops": ["stop_id", "stop_code", "stop_name", "stop_desc", "stop_lat", "stop_lon"],
    "trips": [
        "route_id",
        "service_id",
        "trip_id",
        "trip_headsign",
        "direction_id",
        "block_id",
        "shape_id",
    ],
    "stop_times": [
        "trip_id",
        "arrival_time",
        "departure_time",
        "stop_id",
        "stop_sequence",
        "pickup_type",
        "drop_off_type",
    ],
    "shapes": ["shape_id", "shape_pt_lat", "shape_pt_lon", "shape_pt_sequence"],
}

Rows = Sequence[Mapping[str, object]]
FeedWriter = Callable[..., Path]


@pytest.fixture
def write_feed(tmp_path: Path) -> FeedWriter:
    """Write a GTFS directory; tables not given are written header-only.

    Pass `omit=("shapes",)` to leave a table out entirely.
    """

    def _write(name: str = "feed", omit: Sequence[str] = (), **tables: Rows) -> Path:
        base = tmp_path / name
        base.mkdir(parents=True, exist_ok=True)
        for table, columns in GTFS_COLUMNS.items():
            if table in omit:
                continue
            with (base / f"{table}.txt").open("w", encoding="utf-8", newline="") as fp:
                writer = csv.DictWriter(fp, fieldnames=columns)
                writer.writeheader()
                for row in tables.get(table, ()):
                    writer.writerow({c: row.get(c, "") for c in columns})
        return base

    return _write
