from __future__ import annotations

import httpx
import pytest
from fastapi import HTTPException

from src.adapters.api.controllers.routes import list_routes
from src.adapters.api.dependencies import get_route_store
from src.adapters.persistence.local_route_store import LocalJsonRouteStore
from src.domain.models import (
    FinalizedStop,
    FinalizedStopTime,
    FinalizedTransitRoute,
    FinalizedTrip,
    LanePosition,
)
from src.main import app


def _route(route_id: str, short_name: str) -> FinalizedTransitRoute:
    stop = FinalizedStop(
        id="S1",
        code="",
        name="Harbour",
        description="",
        network_position=LanePosition(edge_id="1-2-0", offset=3.5),
    )
    trip = FinalizedTrip(
        service_id="WK",
        id=f"{route_id}-T1",
        headsign="Airport",
        direction_id=0,
        stop_times=(
            FinalizedStopTime(
                arrival_time="08:00:00",
                departure_time="08:00:30",
                stop=stop,
                stop_sequence=1,
            ),
        ),
    )
    return FinalizedTransitRoute(
        id=route_id,
        long_name=f"Line {short_name}",
        short_name=short_name,
        description="",
        stops=(stop,),
        trips=(trip,),
    )


@pytest.fixture
def store(tmp_path):
    store = LocalJsonRouteStore(root=tmp_path)
    store.save_object("city", "R2", _route("R2", "2"))
    store.save_object("city", "R1", _route("R1", "1"))

    app.dependency_overrides[get_route_store] = lambda: store
    yield store
    app.dependency_overrides.clear()


async def _get(path: str) -> httpx.Response:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path)


@pytest.mark.unit
@pytest.mark.anyio
async def test_list_routes_returns_summaries_in_name_order(store) -> None:
    resp = await _get("/maps/city/routes")

    assert resp.status_code == 200
    payload = resp.json()
    assert [r["id"] for r in payload] == ["R1", "R2"]
    assert payload[0]["short_name"] == "1"
    assert payload[0]["stop_count"] == 1
    assert payload[0]["trip_count"] == 1


@pytest.mark.unit
@pytest.mark.anyio
async def test_list_routes_of_unknown_map_is_empty(store) -> None:
    resp = await _get("/maps/elsewhere/routes")

    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_route_returns_lane_positions(store) -> None:
    resp = await _get("/maps/city/routes/R1")

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["id"] == "R1"
    assert payload["stops"][0]["network_position"] == {
        "edge_id": "1-2-0",
        "offset": 3.5,
    }
    stop_time = payload["trips"][0]["stop_times"][0]
    assert stop_time["stop"]["id"] == "S1"
    assert stop_time["arrival_time"] == "08:00:00"


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_unknown_route_is_404(store) -> None:
    resp = await _get("/maps/city/routes/NOPE")

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Route not found"


@pytest.mark.unit
@pytest.mark.anyio
async def test_health() -> None:
    resp = await _get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.unit
@pytest.mark.anyio
async def test_unreadable_stored_route_is_a_json_500(store, tmp_path) -> None:
    (tmp_path / "city" / "BAD.json").write_text("{}", encoding="utf-8")

    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        resp = await client.get("/maps/city/routes/BAD")

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Stored route is unreadable"}


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_route_saved_under_a_feed_qualified_name(store) -> None:
    store.save_object("city", "agency-b/1", _route("1", "1"))

    resp = await _get("/maps/city/routes/agency-b/1")

    assert resp.status_code == 200
    assert resp.json()["id"] == "1"


@pytest.mark.unit
@pytest.mark.parametrize("map_name", ["..", "a\\b"])
def test_map_names_outside_the_store_are_rejected(store, map_name: str) -> None:
    with pytest.raises(HTTPException) as exc_info:
        list_routes(map_name, store)

    assert exc_info.value.status_code == 400
