from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from src.adapters.api.dependencies import get_route_store
from src.adapters.api.schemas.routes import (
    TransitRouteSchema,
    TransitRouteSummarySchema,
    route_to_schema,
    route_to_summary,
)
from src.app.ports.output import IRouteStore, check_map_name

router = APIRouter(tags=["transit-routes"])


def _map_name(map_name: str) -> str:
    try:
        return check_map_name(map_name)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid map name") from None


@router.get(
    "/maps/{map_name}/routes", response_model=list[TransitRouteSummarySchema]
)
def list_routes(
    map_name: str,
    store: IRouteStore = Depends(get_route_store),
) -> list[TransitRouteSummarySchema]:
    map_name = _map_name(map_name)
    return [route_to_summary(route) for _, route in store.load_all_objects(map_name)]


# Names of routes imported from several feeds contain "/".
@router.get(
    "/maps/{map_name}/routes/{route_name:path}", response_model=TransitRouteSchema
)
def get_route(
    map_name: str,
    route_name: str,
    store: IRouteStore = Depends(get_route_store),
) -> TransitRouteSchema:
    route = store.load_object(_map_name(map_name), route_name)
    if route is None:
        raise HTTPException(status_code=404, detail="Route not found")
    return route_to_schema(route)
