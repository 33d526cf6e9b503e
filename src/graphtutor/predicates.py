"""Structural predicates over graph snapshots."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import networkx as nx

from graphtutor import config
from graphtutor.paths import PathOracle
from graphtutor.types import GraphSummary

if TYPE_CHECKING:
    from graphtutor.graph import Edge, Graph, Vertex
    from graphtutor.types import VertexID

__all__ = [
    "are_connected",
    "is_connected",
    "has_cycle",
    "would_form_cycle",
    "is_cycle",
    "is_hamiltonian_cycle",
    "has_hamiltonian_cycle",
    "is_complete",
    "odd_vertices",
    "is_eulerian",
    "is_euclidean",
    "summarize",
]


def are_connected(graph: Graph, a: VertexID, b: VertexID) -> bool:
    """True iff a path of edges joins a and b. A vertex is connected to itself."""
    graph.vertex(a)
    graph.vertex(b)
    return nx.has_path(graph.to_networkx(), a, b)


def is_connected(graph: Graph) -> bool:
    """True iff every pair of vertices is connected.

    Graphs with zero or one vertex are connected by convention.
    """
    if len(graph.vertices) <= 1:
        return True
    return nx.is_connected(graph.to_networkx())


def _component_count(graph: Graph) -> int:
    if not graph.vertices:
        return 0
    return nx.number_connected_components(graph.to_networkx())


def has_cycle(graph: Graph) -> bool:
    """True iff some edge's endpoints stay connected once the edge is removed.

    A forest has exactly |V| - components edges; any extra edge (including a
    self-loop or a parallel edge) closes a cycle.
    """
    if not graph.edges:
        return False
    return len(graph.edges) > len(graph.vertices) - _component_count(graph)


def would_form_cycle(graph: Graph, edge: Edge) -> bool:
    """Equivalent to ``has_cycle(graph.with_edge(edge))`` for an acyclic ``graph``.

    Does not build the hypothetical graph: the new edge closes a cycle iff it
    is a loop or its endpoints are already connected.
    """
    if graph.has_edge(edge.id):
        return has_cycle(graph)
    if edge.is_loop:
        return True
    if has_cycle(graph):
        return True
    return are_connected(graph, edge.start_vertex_id, edge.end_vertex_id)


def is_cycle(graph: Graph) -> bool:
    """True iff the graph is one closed loop: all degrees 2 and connected."""
    if not graph.vertices:
        return False
    if any(graph.degree(vid) != 2 for vid in graph.vertices):
        return False
    return is_connected(graph)


def is_hamiltonian_cycle(graph: Graph) -> bool:
    """A cycle through every vertex of the graph exactly once."""
    return is_cycle(graph) and len(graph.vertices) == len(graph.edges)


def has_hamiltonian_cycle(graph: Graph) -> bool:
    """True iff some subset of the edges forms a Hamiltonian cycle.

    One vertex needs a self-loop and two vertices need two parallel edges.
    Larger graphs are searched over vertex subsets (Held-Karp style), which
    is exponential in the vertex count.
    """
    ids = list(graph.vertices)
    n = len(ids)
    if n == 0:
        return False
    if n == 1:
        return any(edge.is_loop for edge in graph.edges.values())
    if n == 2:
        return len(graph.edges_between(ids[0], ids[1])) >= 2

    index = {vertex_id: i for i, vertex_id in enumerate(ids)}
    neighbors = [{index[other] for other in graph.neighbors(vertex_id)} for vertex_id in ids]
    # reachable[mask]: bitset of end vertices of simple paths from vertex 0 covering mask.
    reachable = [0] * (1 << n)
    reachable[1] = 1
    for mask in range(1, 1 << n, 2):
        ends = reachable[mask]
        if not ends:
            continue
        for u in range(n):
            if not ends >> u & 1:
                continue
            for v in neighbors[u]:
                if not mask >> v & 1:
                    reachable[mask | 1 << v] |= 1 << v
    full = (1 << n) - 1
    return any(reachable[full] >> u & 1 and 0 in neighbors[u] for u in range(1, n))


def is_complete(graph: Graph) -> bool:
    """True iff every distinct pair of vertices is joined by at least one edge."""
    ids = list(graph.vertices)
    for i, a in enumerate(ids):
        neighbors = graph.neighbors(a)
        for b in ids[i + 1 :]:
            if b not in neighbors:
                return False
    return True


def odd_vertices(graph: Graph) -> list[Vertex]:
    """Vertices of odd degree, in graph order. Always an even number of them."""
    return [v for vid, v in graph.vertices.items() if graph.degree(vid) % 2 == 1]


def is_eulerian(graph: Graph) -> bool:
    """True iff the graph has a closed walk using every edge exactly once."""
    return is_connected(graph) and not odd_vertices(graph)


def is_euclidean(graph: Graph) -> bool:
    """True iff every direct edge is a shortest route between its endpoints.

    Self-loops are ignored. Weights are compared with solver.weight_tolerance.
    """
    tolerance = config.get_solver_config().weight_tolerance
    oracle = PathOracle(graph)
    for edge in graph.edges.values():
        if edge.is_loop:
            continue
        distance = oracle.shortest_distance(edge.start_vertex_id, edge.end_vertex_id)
        if distance is None:
            continue
        if not math.isclose(edge.weight, distance, rel_tol=0.0, abs_tol=tolerance):
            return False
    return True


def summarize(graph: Graph) -> GraphSummary:
    """Every structural property of the graph in one report."""
    return GraphSummary(
        vertices=len(graph.vertices),
        edges=len(graph.edges),
        total_weight=graph.total_weight(),
        connected=is_connected(graph),
        has_cycle=has_cycle(graph),
        is_cycle=is_cycle(graph),
        complete=is_complete(graph),
        eulerian=is_eulerian(graph),
        euclidean=is_euclidean(graph),
        odd_vertices=[vertex.label for vertex in odd_vertices(graph)],
    )
