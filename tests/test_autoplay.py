from __future__ import annotations

import itertools
import math
import random

import networkx as nx
import pytest
from helpers import complete_graph, labels, vid

from graphtutor import autoplay, exceptions
from graphtutor.graph import Graph
from graphtutor.practical_tsp import PracticalTSP
from graphtutor.prim_table import PrimTable
from graphtutor.types import PostmanStep, TSPStep


def _random_graph(seed: int, n: int) -> Graph:
    rng = random.Random(seed)
    names = labels(n)
    edges = [(a, b, rng.randint(1, 20)) for a, b in itertools.combinations(names, 2)]
    return Graph.from_edge_list(edges, labels=names)


def _euclidean_graph(seed: int, n: int) -> Graph:
    """Complete graph on random points in the plane, weighted by distance."""
    rng = random.Random(seed)
    names = labels(n)
    points = {name: (rng.uniform(0, 10), rng.uniform(0, 10)) for name in names}
    edges = [(a, b, math.dist(points[a], points[b])) for a, b in itertools.combinations(names, 2)]
    return Graph.from_edge_list(edges, labels=names)


def _networkx_mst_weight(graph: Graph) -> float:
    tree = nx.minimum_spanning_tree(graph.to_networkx(), weight="weight")
    return sum(data["weight"] for _u, _v, data in tree.edges(data=True))


# =============================================================================
# Spanning trees
# =============================================================================


def test_kruskal_on_example(example_graph: Graph) -> None:
    session = autoplay.solve_kruskal(example_graph)
    assert session.is_complete()
    assert session.current_weight() == 14


@pytest.mark.parametrize("seed", range(5))
def test_kruskal_and_prim_agree_with_networkx(seed: int) -> None:
    graph = _random_graph(seed, 7)
    expected = _networkx_mst_weight(graph)
    assert autoplay.solve_kruskal(graph).current_weight() == pytest.approx(expected)
    for vertex in graph.vertices:
        assert autoplay.solve_prim(graph, vertex).current_weight() == pytest.approx(expected)


def test_prim_defaults_to_first_label(example_graph: Graph) -> None:
    session = autoplay.solve_prim(example_graph)
    assert vid(example_graph, "A") in session.visited
    assert session.is_complete()


def test_kruskal_spanning_forest() -> None:
    graph = Graph.from_edge_list([("A", "B", 1), ("B", "C", 2), ("A", "C", 3), ("D", "E", 4)])
    session = autoplay.solve_kruskal(graph)
    assert not session.is_complete()
    assert session.current_weight() == 7


@pytest.mark.parametrize("seed", range(5))
def test_prim_table_agrees_with_kruskal(seed: int) -> None:
    graph = _random_graph(seed, 7)
    expected = autoplay.solve_kruskal(graph).current_weight()
    for row in range(7):
        table = autoplay.solve_prim_table(PrimTable.from_graph(graph), row)
        assert table.is_complete()
        assert table.current_weight() == pytest.approx(expected)


def test_prim_table_stops_on_disconnected_graph() -> None:
    graph = Graph.from_edge_list([("A", "B", 1), ("B", "C", 2), ("A", "C", 3), ("D", "E", 4)])
    table = autoplay.solve_prim_table(PrimTable.from_graph(graph))
    assert not table.is_complete()
    assert table.tree == [("A", "B", 1), ("B", "C", 2)]


def test_empty_graph_has_no_first_vertex() -> None:
    with pytest.raises(exceptions.GraphError):
        autoplay.solve_prim(Graph())


# =============================================================================
# Chinese postman
# =============================================================================


def test_postman_on_example(example_graph: Graph) -> None:
    session = autoplay.solve_postman(example_graph)
    assert session.is_complete()
    assert session.current_weight() == 57
    assert session.start_vertex == vid(example_graph, "A")


@pytest.mark.parametrize("seed", range(3))
def test_postman_reaches_solver_minimum(seed: int) -> None:
    graph = _random_graph(seed, 6)
    session = autoplay.solve_postman(graph, vid(graph, "C"))
    assert session.is_complete()
    assert session.current_weight() == pytest.approx(session.minimum_weight())


def test_postman_disconnected() -> None:
    graph = Graph.from_edge_list([("A", "B", 1), ("C", "D", 1)])
    session = autoplay.solve_postman(graph)
    assert session.step == PostmanStep.NO_SOLUTION
    assert session.walk == []


# =============================================================================
# Travelling salesman
# =============================================================================


def test_tsp_on_triangle(triangle: Graph) -> None:
    session = autoplay.solve_tsp(triangle)
    assert session.bounds() == {
        "upper_bound": 6,
        "lower_bound": 6,
        "start_vertex": "A",
        "deleted_vertex": "A",
    }


def test_tsp_not_applicable(example_graph: Graph) -> None:
    session = autoplay.solve_tsp(example_graph)
    assert session.step == TSPStep.NOT_APPLICABLE
    assert session.bounds() is None


@pytest.mark.parametrize("seed", range(5))
def test_tsp_lower_bound_below_upper_bound(seed: int) -> None:
    graph = _euclidean_graph(seed, 6)
    for start, delete in (("A", "A"), ("B", "E"), ("F", "C")):
        session = autoplay.solve_tsp(graph, vid(graph, start), vid(graph, delete))
        bounds = session.bounds()
        assert bounds is not None
        assert bounds["lower_bound"] <= bounds["upper_bound"] + 1e-9


def test_tsp_uniform_weights() -> None:
    session = autoplay.solve_tsp(complete_graph(5))
    assert session.upper_bound == 5
    assert session.lower_bound == 5


def test_practical_tsp_on_example(example_graph: Graph) -> None:
    practical = autoplay.solve_practical_tsp(PracticalTSP(example_graph))
    assert practical.is_complete()
    working = practical.working_graph
    assert working.edge_between("A", "B").weight == 8
    assert working.edge_between("B", "D").weight == 7

    session = practical.tsp_session()
    assert session is not None
    assert session.step == TSPStep.CHOOSING_START_VERTEX


def test_practical_tsp_then_bounds(example_graph: Graph) -> None:
    practical = autoplay.solve_practical_tsp(PracticalTSP(example_graph))
    session = autoplay.solve_tsp(practical.working_graph, complete_and_euclidean=True)
    bounds = session.bounds()
    assert bounds is not None
    assert bounds["lower_bound"] <= bounds["upper_bound"]
