from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import quote, unquote

from src.adapters.api.schemas.routes import (
    TransitRouteSchema,
    route_to_schema,
    schema_to_route,
)
from src.app.ports.output import IRouteStore, check_map_name
from src.domain.models import FinalizedTransitRoute

logger = logging.getLogger(__name__)


def object_filename(name: str) -> str:
    # Route ids may contain path separators.
    return quote(name, safe="") + ".json"


@dataclass(slots=True)
class LocalJsonRouteStore(IRouteStore):
    """Stores finalized routes as JSON files under <root>/<map_name>/<name>.json.

    Env vars:
      - ROUTE_STORE_DIR: root directory (default: data/transit_routes)
    """

    root: str | Path | None = None

    def _root(self) -> Path:
        value = self.root or os.getenv("ROUTE_STORE_DIR") or "data/transit_routes"
        return Path(value)

    def _map_dir(self, map_name: str) -> Path:
        return self._root() / check_map_name(map_name)

    def _path(self, map_name: str, name: str) -> Path:
        return self._map_dir(map_name) / object_filename(name)

    def save_object(
        self, map_name: str, name: str, route: FinalizedTransitRoute
    ) -> None:
        path = self._path(map_name, name)
        path.parent.mkdir(parents=True, exist_ok=True)

        # Write then rename so readers never see a partial file.
        tmp = path.with_suffix(path.suffix + ".tmp")
        payload = route_to_schema(route).model_dump_json(indent=2)
        tmp.write_text(payload, encoding="utf-8")
        os.replace(tmp, path)
        logger.debug("Saved %s", path)

    def load_object(self, map_name: str, name: str) -> FinalizedTransitRoute | None:
        path = self._path(map_name, name)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        return schema_to_route(TransitRouteSchema.model_validate_json(raw))

    def list_objects(self, map_name: str) -> list[str]:
        directory = self._map_dir(map_name)
        if not directory.is_dir():
            return []
        return sorted(
            unquote(p.name[: -len(".json")])
            for p in directory.iterdir()
            if p.is_file() and p.name.endswith(".json")
        )
