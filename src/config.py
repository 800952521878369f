from __future__ import annotations

import os
from dataclasses import dataclass

from src.app.ports.output import check_map_name
from src.app.services.stop_lane_matcher import DEFAULT_TOLERANCE_M
from src.domain.exceptions import ConfigError


def env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"Invalid {name}: must be positive, got {raw!r}")
    return value


@dataclass(frozen=True, slots=True)
class ImportConfig:
    """Runtime configuration of the batch importer.

    Env vars:
      - GTFS_PATHS: feed directories separated by os.pathsep (default: data/gtfs)
      - MAP_NAME: namespace the routes are saved under (default: default)
      - MATCH_TOLERANCE_M: max stop-to-lane distance in meters (default: 25)
      - ROUTE_STORE_BUCKET: save to S3 instead of the local store when set
      - LOG_LEVEL: logging level name (default: INFO)
    """

    gtfs_paths: tuple[str, ...]
    map_name: str
    tolerance_m: float
    route_store_bucket: str | None
    log_level: str

    @staticmethod
    def from_env() -> "ImportConfig":
        raw_paths = os.getenv("GTFS_PATHS") or "data/gtfs"
        paths = tuple(p.strip() for p in raw_paths.split(os.pathsep) if p.strip())
        if not paths:
            raise ConfigError("GTFS_PATHS names no feed directory")

        map_name = (os.getenv("MAP_NAME") or "default").strip()
        try:
            check_map_name(map_name)
        except ValueError:
            raise ConfigError(f"Invalid MAP_NAME: {map_name!r}") from None

        bucket = (os.getenv("ROUTE_STORE_BUCKET") or "").strip() or None

        return ImportConfig(
            gtfs_paths=paths,
            map_name=map_name,
            tolerance_m=_env_float("MATCH_TOLERANCE_M", DEFAULT_TOLERANCE_M),
            route_store_bucket=bucket,
            log_level=(os.getenv("LOG_LEVEL") or "INFO").strip().upper(),
        )
