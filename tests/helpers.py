"""Test helpers for building graphs and addressing them by label."""

from __future__ import annotations

import itertools
from typing import TYPE_CHECKING

from graphtutor.graph import Graph

if TYPE_CHECKING:
    from collections.abc import Callable

    from graphtutor.types import EdgeID, VertexID


def vid(graph: Graph, label: str) -> VertexID:
    """Vertex id by label."""
    return graph.vertex_by_label(label).id


def eid(graph: Graph, a: str, b: str) -> EdgeID:
    """Id of the single edge between two labelled vertices."""
    return graph.edge_between(a, b).id


def labels(n: int) -> list[str]:
    """First n vertex labels: A, B, C, ..."""
    return [chr(ord("A") + i) for i in range(n)]


def complete_graph(n: int, weight: Callable[[int, int], float] = lambda i, j: 1.0) -> Graph:
    """Complete graph on n labelled vertices; weight(i, j) for i < j."""
    names = labels(n)
    edges = [(names[i], names[j], weight(i, j)) for i, j in itertools.combinations(range(n), 2)]
    return Graph.from_edge_list(edges, labels=names)


def permutation_connected(graph: Graph) -> bool:
    """Reference connectivity check: every ordered vertex pair is joined.

    Grows each vertex's reachable set by repeated relaxation over all edges,
    independent of networkx.
    """
    ids = list(graph.vertices)
    if len(ids) <= 1:
        return True
    for a, b in itertools.permutations(ids, 2):
        reached = {a}
        changed = True
        while changed:
            changed = False
            for edge in graph.edges.values():
                u, v = edge.endpoints
                if (u in reached) != (v in reached):
                    reached.update((u, v))
                    changed = True
        if b not in reached:
            return False
    return True
