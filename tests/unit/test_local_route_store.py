from __future__ import annotations

import pytest

from src.adapters.persistence.local_route_store import LocalJsonRouteStore
from src.domain.models import (
    FinalizedStop,
    FinalizedStopTime,
    FinalizedTransitRoute,
    FinalizedTrip,
    LanePosition,
    Pt2D,
    ShapePoint,
)


def _route(route_id: str) -> FinalizedTransitRoute:
    stop = FinalizedStop(
        id="S1",
        code="101",
        name="Harbour",
        description="",
        network_position=LanePosition(edge_id="1-2-0", offset=12.5),
    )
    return FinalizedTransitRoute(
        id=route_id,
        long_name="Harbour - Airport",
        short_name="1",
        description="",
        stops=(stop,),
        trips=(
            FinalizedTrip(
                service_id="WK",
                id="T1",
                headsign="Airport",
                direction_id=None,
                shape=(ShapePoint(position=Pt2D(x=1.0, y=2.0), sequence=0),),
                stop_times=(
                    FinalizedStopTime(
                        arrival_time="25:10:00",
                        departure_time="25:11:00",
                        stop=stop,
                        stop_sequence=1,
                        drop_off_type=1,
                    ),
                ),
            ),
        ),
    )


def test_save_then_load_returns_an_equal_route(tmp_path) -> None:
    store = LocalJsonRouteStore(root=tmp_path)
    route = _route("R1")

    store.save_object("city", "R1", route)

    assert store.load_object("city", "R1") == route
    assert (tmp_path / "city" / "R1.json").is_file()


def test_listing_is_sorted_and_namespaced_by_map(tmp_path) -> None:
    store = LocalJsonRouteStore(root=tmp_path)
    for name in ("b", "a", "c"):
        store.save_object("city", name, _route(name))
    store.save_object("other", "z", _route("z"))

    assert store.list_objects("city") == ["a", "b", "c"]
    assert [name for name, _ in store.load_all_objects("other")] == ["z"]


def test_missing_map_and_object_are_empty(tmp_path) -> None:
    store = LocalJsonRouteStore(root=tmp_path)

    assert store.list_objects("nowhere") == []
    assert store.load_object("nowhere", "R1") is None


def test_names_with_path_separators_stay_inside_the_map(tmp_path) -> None:
    store = LocalJsonRouteStore(root=tmp_path)

    store.save_object("city", "L1/night", _route("L1/night"))

    assert store.list_objects("city") == ["L1/night"]
    assert store.load_object("city", "L1/night").id == "L1/night"
    assert [p.name for p in (tmp_path / "city").iterdir()] == ["L1%2Fnight.json"]


def test_saving_again_overwrites(tmp_path) -> None:
    store = LocalJsonRouteStore(root=tmp_path)
    store.save_object("city", "R1", _route("R1"))

    store.save_object("city", "R1", _route("R1-renamed"))

    assert store.load_object("city", "R1").id == "R1-renamed"
    assert store.list_objects("city") == ["R1"]


def test_root_defaults_to_env(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("ROUTE_STORE_DIR", str(tmp_path / "env-root"))

    LocalJsonRouteStore().save_object("city", "R1", _route("R1"))

    assert (tmp_path / "env-root" / "city" / "R1.json").is_file()


@pytest.mark.parametrize("map_name", ["..", ".", "", "a/b", "a\\b"])
def test_map_names_must_be_a_single_path_segment(tmp_path, map_name: str) -> None:
    store = LocalJsonRouteStore(root=tmp_path / "store")
    (tmp_path / "outside.json").write_text("{}", encoding="utf-8")

    with pytest.raises(ValueError):
        store.list_objects(map_name)
    with pytest.raises(ValueError):
        store.save_object(map_name, "R1", _route("R1"))
