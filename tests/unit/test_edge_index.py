from __future__ import annotations

import pytest

from src.domain.algorithms.edge_index import EdgeIndex
from src.domain.models import LaneType, Pt2D, RoadEdge


def _edge(edge_id: str, *points: tuple[float, float]) -> RoadEdge:
    return RoadEdge(
        id=edge_id,
        lane_type=LaneType.DRIVING,
        geometry=tuple(Pt2D(x=x, y=y) for x, y in points),
    )


def test_empty_index_has_no_nearest_edge() -> None:
    assert EdgeIndex([]).nearest(Pt2D(x=0.0, y=0.0)) is None


def test_offset_is_measured_along_the_polyline() -> None:
    index = EdgeIndex([_edge("bend", (0.0, 0.0), (10.0, 0.0), (10.0, 10.0))])

    match = index.nearest(Pt2D(x=12.0, y=5.0))

    assert match is not None
    assert match.edge_id == "bend"
    assert match.offset == pytest.approx(15.0)
    assert match.distance == pytest.approx(2.0)


def test_point_on_an_edge_has_zero_distance() -> None:
    index = EdgeIndex(
        [
            _edge("e1", (0.0, 0.0), (100.0, 0.0)),
            _edge("e2", (0.0, 50.0), (100.0, 50.0)),
        ]
    )

    match = index.nearest(Pt2D(x=30.0, y=50.0))

    assert match is not None
    assert match.edge_id == "e2"
    assert match.distance == pytest.approx(0.0, abs=1e-9)
    assert match.offset == pytest.approx(30.0)


def test_equidistant_edges_resolve_to_the_smallest_id() -> None:
    edges = [
        _edge("b", (0.0, 10.0), (100.0, 10.0)),
        _edge("a", (0.0, -10.0), (100.0, -10.0)),
        _edge("c", (0.0, 200.0), (100.0, 200.0)),
    ]

    for ordering in (edges, list(reversed(edges))):
        match = EdgeIndex(ordering).nearest(Pt2D(x=50.0, y=0.0))
        assert match is not None
        assert match.edge_id == "a"
        assert match.distance == pytest.approx(10.0)


def test_degenerate_edges_are_not_indexed() -> None:
    index = EdgeIndex([_edge("dot", (5.0, 5.0)), _edge("line", (0.0, 0.0), (1.0, 0.0))])

    assert len(index) == 1
    match = index.nearest(Pt2D(x=5.0, y=5.0))
    assert match is not None and match.edge_id == "line"
