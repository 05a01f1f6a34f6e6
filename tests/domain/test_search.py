# tests/domain/test_search.py
import itertools

import pytest

from campus_nav.domain.entities.geography import (
    LatLng,
    RoadSegment,
    Route,
    haversine_m,
    node_key,
    route_length_m,
)
from campus_nav.domain.mechanics.mechanics_routers import NetworkRoutePlanner
from campus_nav.domain.network.graph import build_graph
from campus_nav.domain.network.search import dijkstra, find_path, reconstruct_path


@pytest.fixture
def loop_graph():
    # A-B-C is short; A-D-E-C is the long way round
    return build_graph(
        [
            RoadSegment.from_pairs("short", [(0.0, 0.0), (0.0, 0.001), (0.001, 0.001)]),
            RoadSegment.from_pairs(
                "long", [(0.0, 0.0), (0.002, 0.0), (0.002, 0.002), (0.001, 0.001)]
            ),
        ]
    )


@pytest.fixture
def grid_graph():
    step = 0.0005
    segs = []
    for i in range(4):
        segs.append(RoadSegment.from_pairs(f"row{i}", [(i * step, j * step) for j in range(4)]))
        segs.append(RoadSegment.from_pairs(f"col{i}", [(j * step, i * step) for j in range(4)]))
    return build_graph(segs)


def test_reconstruct_path_walks_predecessors():
    assert reconstruct_path({"b": "a", "c": "b"}, "c") == ["a", "b", "c"]
    assert reconstruct_path({}, "a") == ["a"]


def test_picks_shorter_branch(loop_graph):
    path = find_path(loop_graph, node_key(0.0, 0.0), node_key(0.001, 0.001))
    assert path == [LatLng(0.0, 0.0), LatLng(0.0, 0.001), LatLng(0.001, 0.001)]


def test_start_equals_end_is_single_point(loop_graph):
    k = node_key(0.0, 0.0)
    assert dijkstra(loop_graph, k, k) == [k]


def test_unknown_node_gives_empty_route(loop_graph):
    assert find_path(loop_graph, node_key(0.0, 0.0), "9.0,9.0") == []


def test_symmetric_edge_costs(grid_graph):
    for u, v, _ in grid_graph.iter_edges():
        there = route_length_m(find_path(grid_graph, u, v))
        back = route_length_m(find_path(grid_graph, v, u))
        assert there == pytest.approx(back)


def test_route_length_at_least_great_circle(grid_graph):
    keys = list(grid_graph.nodes())
    for u, v in itertools.combinations(keys, 2):
        path = find_path(grid_graph, u, v)
        assert route_length_m(path) >= haversine_m(path[0], path[-1]) - 1e-9


def test_disconnected_components_give_empty_route():
    g = build_graph(
        [
            RoadSegment.from_pairs("one", [(0.0, 0.0), (0.0, 0.001)]),
            RoadSegment.from_pairs("two", [(0.01, 0.01), (0.01, 0.011)]),
        ]
    )
    assert find_path(g, node_key(0.0, 0.0), node_key(0.01, 0.011)) == []


# ------------------ planner (snap + search) ------------------


def test_planner_single_segment_scenario():
    g = build_graph([RoadSegment.from_pairs("a", [(0.0, 0.0), (0.0, 0.001)])])
    route = NetworkRoutePlanner(g).route(LatLng(0.0, 0.0), LatLng(0.0, 0.001))
    assert route.points == [LatLng(0.0, 0.0), LatLng(0.0, 0.001)]
    assert route.total_length_m == pytest.approx(111.19, abs=0.01)


def test_planner_disjoint_segments_scenario():
    g = build_graph(
        [
            RoadSegment.from_pairs("one", [(0.0, 0.0), (0.0, 0.001)]),
            RoadSegment.from_pairs("two", [(0.01, 0.01), (0.01, 0.011)]),
        ]
    )
    route = NetworkRoutePlanner(g).route(LatLng(0.0, 0.0001), LatLng(0.01, 0.0109))
    assert route == Route()
    assert route.empty


def test_planner_is_idempotent(grid_graph):
    planner = NetworkRoutePlanner(grid_graph)
    a, b = LatLng(0.00011, 0.00002), LatLng(0.00149, 0.00141)
    assert planner.route(a, b) == planner.route(a, b)


def test_planner_on_empty_graph_returns_empty_route():
    planner = NetworkRoutePlanner(build_graph([]))
    assert planner.route(LatLng(0.0, 0.0), LatLng(1.0, 1.0)).empty
    assert planner.distance_m(LatLng(0.0, 0.0), LatLng(1.0, 1.0)) == 0.0
