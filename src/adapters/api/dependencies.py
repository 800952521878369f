from __future__ import annotations

import os

from src.adapters.persistence.local_route_store import LocalJsonRouteStore
from src.adapters.persistence.s3_route_store import S3RouteStore
from src.app.ports.output import IRouteStore


def get_route_store() -> IRouteStore:
    if os.getenv("ROUTE_STORE_BUCKET"):
        return S3RouteStore()
    return LocalJsonRouteStore()
