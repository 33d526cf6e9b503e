from __future__ import annotations

import pytest
from helpers import eid, vid

from graphtutor import exceptions
from graphtutor.graph import Edge, Graph, Vertex, walk_weight

# --- Construction ---


def test_from_edge_list_creates_vertices_once(example_graph: Graph) -> None:
    """Vertices named by several edges are created a single time."""
    assert sorted(v.label for v in example_graph.vertices.values()) == ["A", "B", "C", "D", "E"]
    assert len(example_graph.edges) == 8


def test_from_edge_list_keeps_isolated_labels() -> None:
    graph = Graph.from_edge_list([("A", "B", 1)], labels=["A", "B", "Z"])
    assert graph.degree(vid(graph, "Z")) == 0


def test_construction_rejects_dangling_edge() -> None:
    a = Vertex.create("A")
    stray = Vertex.create("B")
    with pytest.raises(exceptions.InvalidEdgeError):
        Graph([a], [Edge.create(a.id, stray.id, 1)])


def test_vertices_are_read_only(example_graph: Graph) -> None:
    vertices = example_graph.vertices
    with pytest.raises(TypeError):
        vertices[vid(example_graph, "A")] = Vertex.create("X")  # pyright: ignore[reportIndexIssue]


# --- Edge identity ---


def test_parallel_edges_are_distinct() -> None:
    a, b = Vertex.create("A"), Vertex.create("B")
    first = Edge.create(a.id, b.id, 1)
    second = Edge.create(a.id, b.id, 1)
    graph = Graph([a, b], [first, second])
    assert first != second
    assert len(graph.edges_between(a.id, b.id)) == 2


def test_edge_equality_uses_id_only() -> None:
    a, b = Vertex.create("A"), Vertex.create("B")
    edge = Edge.create(a.id, b.id, 1)
    assert edge.with_weight(5) == edge
    assert hash(edge.with_weight(5)) == hash(edge)


def test_traverse_returns_other_endpoint() -> None:
    a, b, c = Vertex.create("A"), Vertex.create("B"), Vertex.create("C")
    edge = Edge.create(a.id, b.id)
    assert edge.traverse(a.id) == b.id
    assert edge.traverse(b.id) == a.id
    assert edge.traverse(c.id) is None


# --- Degree and incidence ---


def test_degree(example_graph: Graph) -> None:
    degrees = {v.label: example_graph.degree(v.id) for v in example_graph.vertices.values()}
    assert degrees == {"A": 3, "B": 3, "C": 3, "D": 3, "E": 4}


def test_self_loop_counts_twice() -> None:
    a = Vertex.create("A")
    graph = Graph([a], [Edge.create(a.id, a.id, 1)])
    assert graph.degree(a.id) == 2
    assert len(graph.connected_edges(a.id)) == 1


def test_neighbors_and_adjacency(example_graph: Graph) -> None:
    a = vid(example_graph, "A")
    assert {example_graph.label(n) for n in example_graph.neighbors(a)} == {"B", "D", "E"}
    assert example_graph.are_adjacent(a, vid(example_graph, "E"))
    assert not example_graph.are_adjacent(a, vid(example_graph, "C"))


def test_unknown_vertex_raises(example_graph: Graph) -> None:
    stranger = Vertex.create("X")
    with pytest.raises(exceptions.UnknownVertexError):
        example_graph.degree(stranger.id)
    with pytest.raises(exceptions.UnknownVertexError):
        example_graph.connected_edges(stranger.id)


def test_total_weight(example_graph: Graph) -> None:
    assert example_graph.total_weight() == 44


def test_walk_weight_counts_repeats(example_graph: Graph) -> None:
    ae = example_graph.edge(eid(example_graph, "A", "E"))
    assert walk_weight([ae, ae]) == 6


# --- Lookup by label ---


def test_vertex_by_label_suggests_close_match(example_graph: Graph) -> None:
    with pytest.raises(exceptions.UnknownLabelError) as exc_info:
        example_graph.vertex_by_label("AA")
    assert "Did you mean: 'A'" in exc_info.value.format_user_message()


def test_edge_between_missing_and_ambiguous() -> None:
    graph = Graph.from_edge_list([("A", "B", 1), ("A", "B", 2), ("B", "C", 1)])
    with pytest.raises(exceptions.AmbiguousEdgeError):
        graph.edge_between("A", "B")
    with pytest.raises(exceptions.UnknownEdgeError):
        graph.edge_between("A", "C")


def test_sorted_edges_by_weight_then_label(example_graph: Graph) -> None:
    order = [example_graph.describe_edge(e) for e in example_graph.sorted_edges()]
    assert order == ["D-E", "A-E", "C-E", "B-E", "A-D", "C-D", "B-C", "A-B"]


# --- Derivation ---


def test_derivations_leave_original_untouched(example_graph: Graph) -> None:
    e = vid(example_graph, "E")
    smaller = example_graph.without_vertex(e)
    assert len(smaller.vertices) == 4
    assert len(smaller.edges) == 4
    assert len(example_graph.vertices) == 5
    assert len(example_graph.edges) == 8


def test_derivations_share_objects(example_graph: Graph) -> None:
    ab = eid(example_graph, "A", "B")
    derived = example_graph.without_edge(eid(example_graph, "D", "E"))
    assert derived.edge(ab) is example_graph.edge(ab)


def test_with_edge_requires_known_endpoints(example_graph: Graph) -> None:
    stranger = Vertex.create("X")
    with pytest.raises(exceptions.UnknownVertexError):
        example_graph.with_edge(Edge.create(stranger.id, vid(example_graph, "A")))


def test_edge_subgraph_keeps_all_vertices(example_graph: Graph) -> None:
    sub = example_graph.edge_subgraph([eid(example_graph, "A", "B")])
    assert len(sub.vertices) == 5
    assert len(sub.edges) == 1


def test_to_networkx_keyed_by_edge_id(example_graph: Graph) -> None:
    g = example_graph.to_networkx()
    ab = example_graph.edge(eid(example_graph, "A", "B"))
    assert g.number_of_edges() == 8
    assert g.edges[ab.start_vertex_id, ab.end_vertex_id, ab.id]["weight"] == 9
