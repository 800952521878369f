from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import unquote

from botocore.exceptions import ClientError

from src.adapters.api.schemas.routes import (
    TransitRouteSchema,
    route_to_schema,
    schema_to_route,
)
from src.adapters.aws import s3_client
from src.app.ports.output import IRouteStore, check_map_name
from src.domain.models import FinalizedTransitRoute

from .local_route_store import object_filename


@dataclass(slots=True)
class S3RouteStore(IRouteStore):
    """Stores finalized routes as JSON objects in S3.

    Env vars:
      - ROUTE_STORE_BUCKET (required)
      - ROUTE_STORE_PREFIX (default: transit-routes)
      - ENDPOINT_URL (preferred for LocalStack)
    """

    bucket: str | None = None
    prefix: str | None = None

    def _bucket(self) -> str:
        value = self.bucket or os.getenv("ROUTE_STORE_BUCKET")
        if not value:
            raise RuntimeError("Missing ROUTE_STORE_BUCKET")
        return value

    def _prefix(self, map_name: str) -> str:
        base = (
            self.prefix or os.getenv("ROUTE_STORE_PREFIX") or "transit-routes"
        ).strip("/")
        return f"{base}/{check_map_name(map_name)}/"

    def save_object(
        self, map_name: str, name: str, route: FinalizedTransitRoute
    ) -> None:
        s3_client().put_object(
            Bucket=self._bucket(),
            Key=self._prefix(map_name) + object_filename(name),
            Body=route_to_schema(route).model_dump_json().encode("utf-8"),
            ContentType="application/json",
        )

    def load_object(self, map_name: str, name: str) -> FinalizedTransitRoute | None:
        try:
            obj = s3_client().get_object(
                Bucket=self._bucket(),
                Key=self._prefix(map_name) + object_filename(name),
            )
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in {"NoSuchKey", "404"}:
                return None
            raise
        body = obj["Body"].read()
        return schema_to_route(TransitRouteSchema.model_validate_json(body))

    def list_objects(self, map_name: str) -> list[str]:
        prefix = self._prefix(map_name)
        paginator = s3_client().get_paginator("list_objects_v2")
        names: list[str] = []
        for page in paginator.paginate(Bucket=self._bucket(), Prefix=prefix):
            for item in page.get("Contents", []):
                filename = item["Key"][len(prefix) :]
                if "/" in filename or not filename.endswith(".json"):
                    continue
                names.append(unquote(filename[: -len(".json")]))
        return sorted(names)
