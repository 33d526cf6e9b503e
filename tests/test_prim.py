from __future__ import annotations

from helpers import eid, vid

from graphtutor.graph import Graph, Vertex
from graphtutor.prim import PrimValidator
from graphtutor.types import ErrorKind, PrimStep


def _started(graph: Graph, label: str = "A") -> PrimValidator:
    session = PrimValidator(graph)
    assert session.validate(vid(graph, label)).accepted
    return session


# =============================================================================
# Seed vertex
# =============================================================================


def test_starts_by_choosing_a_vertex(example_graph: Graph) -> None:
    session = PrimValidator(example_graph)
    assert session.step == PrimStep.CHOOSE_VERTEX
    assert [v.label for v in session.legal_vertices()] == ["A", "B", "C", "D", "E"]
    assert session.legal_edges() == []


def test_edge_before_vertex_is_wrong_step(example_graph: Graph) -> None:
    session = PrimValidator(example_graph)
    assert session.validate(eid(example_graph, "D", "E")).error == ErrorKind.WRONG_STEP


def test_second_vertex_is_wrong_step(example_graph: Graph) -> None:
    session = _started(example_graph)
    assert session.step == PrimStep.SELECTING_EDGES
    assert session.legal_vertices() == []
    assert session.validate(vid(example_graph, "B")).error == ErrorKind.WRONG_STEP


# =============================================================================
# Edge selection
# =============================================================================


def test_full_run_from_a(example_graph: Graph) -> None:
    session = _started(example_graph)
    for a, b in (("A", "E"), ("D", "E"), ("C", "E"), ("B", "E")):
        assert session.validate(eid(example_graph, a, b)).accepted

    assert session.is_complete()
    assert session.current_weight() == 14
    assert len(session.visited) == 5


def test_legal_edges_leave_the_tree(example_graph: Graph) -> None:
    session = _started(example_graph)
    assert [example_graph.describe_edge(e) for e in session.legal_edges()] == ["A-E"]
    assert len(session.candidate_edges()) == 3


def test_heavier_edge_rejected(example_graph: Graph) -> None:
    session = _started(example_graph)
    assert session.validate(eid(example_graph, "A", "B")).error == ErrorKind.NOT_LOWEST_WEIGHT


def test_edge_away_from_tree_rejected(example_graph: Graph) -> None:
    """D-E is the lightest edge overall but does not touch A."""
    session = _started(example_graph)
    assert session.validate(eid(example_graph, "D", "E")).error == ErrorKind.NOT_CONNECTED_EDGE


def test_edge_inside_tree_is_cycle(example_graph: Graph) -> None:
    session = _started(example_graph)
    session.validate(eid(example_graph, "A", "E"))
    session.validate(eid(example_graph, "D", "E"))
    assert session.validate(eid(example_graph, "A", "D")).error == ErrorKind.CYCLE


def test_already_selected(example_graph: Graph) -> None:
    session = _started(example_graph)
    ae = eid(example_graph, "A", "E")
    session.validate(ae)
    assert session.validate(ae).error == ErrorKind.ALREADY_SELECTED


def test_already_complete(triangle: Graph) -> None:
    session = _started(triangle)
    session.validate(eid(triangle, "A", "B"))
    session.validate(eid(triangle, "B", "C"))
    assert session.is_complete()
    assert session.validate(eid(triangle, "A", "C")).error == ErrorKind.ALREADY_COMPLETE
    assert session.validate(vid(triangle, "A")).error == ErrorKind.ALREADY_COMPLETE


def test_result_does_not_depend_on_seed(example_graph: Graph) -> None:
    session = _started(example_graph, "C")
    for a, b in (("C", "E"), ("D", "E"), ("A", "E"), ("B", "E")):
        assert session.validate(eid(example_graph, a, b)).accepted
    assert session.current_weight() == 14


# =============================================================================
# Degenerate graphs
# =============================================================================


def test_single_vertex_completes_on_seed() -> None:
    graph = Graph([Vertex.create("A")])
    session = _started(graph)
    assert session.is_complete()


def test_reset(example_graph: Graph) -> None:
    session = _started(example_graph)
    session.validate(eid(example_graph, "A", "E"))
    session.reset()
    assert session.step == PrimStep.CHOOSE_VERTEX
    assert session.visited == frozenset()
    assert not session.subgraph.edges
