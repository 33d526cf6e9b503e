"""Immutable weighted multigraph snapshots built on NetworkX."""

from __future__ import annotations

import dataclasses
import functools
import types
from typing import TYPE_CHECKING, override

import networkx as nx

from graphtutor import exceptions
from graphtutor.types import EdgeID, VertexID, new_edge_id, new_vertex_id

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

__all__ = [
    "Vertex",
    "Edge",
    "Graph",
    "walk_weight",
]


@dataclasses.dataclass(frozen=True)
class Vertex:
    """A vertex. Only ``id`` matters to the algorithms; ``label`` is for display."""

    id: VertexID
    label: str = ""

    @classmethod
    def create(cls, label: str = "") -> Vertex:
        return cls(new_vertex_id(), label)


@dataclasses.dataclass(frozen=True, eq=False)
class Edge:
    """An undirected weighted edge.

    Edges compare and hash by ``id`` alone, so parallel edges and self-loops
    between the same vertices stay distinct.
    """

    id: EdgeID
    start_vertex_id: VertexID
    end_vertex_id: VertexID
    weight: float = 0.0

    @classmethod
    def create(cls, start: VertexID, end: VertexID, weight: float = 0.0) -> Edge:
        return cls(new_edge_id(), start, end, weight)

    @override
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return self.id == other.id

    @override
    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def endpoints(self) -> tuple[VertexID, VertexID]:
        return (self.start_vertex_id, self.end_vertex_id)

    @property
    def is_loop(self) -> bool:
        return self.start_vertex_id == self.end_vertex_id

    def touches(self, vertex_id: VertexID) -> bool:
        return vertex_id in (self.start_vertex_id, self.end_vertex_id)

    def traverse(self, from_vertex_id: VertexID) -> VertexID | None:
        """Return the endpoint reached by walking this edge from ``from_vertex_id``.

        Returns None when the edge does not touch ``from_vertex_id``.
        """
        if from_vertex_id == self.start_vertex_id:
            return self.end_vertex_id
        if from_vertex_id == self.end_vertex_id:
            return self.start_vertex_id
        return None

    def with_weight(self, weight: float) -> Edge:
        """Same edge (same id) carrying a different weight."""
        return dataclasses.replace(self, weight=weight)


def walk_weight(edges: Iterable[Edge]) -> float:
    """Total weight of a sequence of edges, counting repeats."""
    return sum((edge.weight for edge in edges), 0.0)


class Graph:
    """Immutable snapshot of a weighted multigraph.

    Derivation methods (``with_edge``, ``without_vertex``, ...) return new
    snapshots that share the underlying Vertex and Edge objects; the
    original is never modified.
    """

    _vertices: dict[VertexID, Vertex]
    _edges: dict[EdgeID, Edge]

    def __init__(self, vertices: Iterable[Vertex] = (), edges: Iterable[Edge] = ()) -> None:
        self._vertices = {vertex.id: vertex for vertex in vertices}
        self._edges = {}
        for edge in edges:
            for endpoint in edge.endpoints:
                if endpoint not in self._vertices:
                    raise exceptions.InvalidEdgeError(
                        f"Edge {edge.id} references vertex {endpoint} which is not in the graph"
                    )
            self._edges[edge.id] = edge

    @classmethod
    def _from_maps(cls, vertices: dict[VertexID, Vertex], edges: dict[EdgeID, Edge]) -> Graph:
        """Build without re-validating endpoints (callers guarantee consistency)."""
        graph = cls.__new__(cls)
        graph._vertices = vertices
        graph._edges = edges
        return graph

    @classmethod
    def from_edge_list(
        cls,
        edges: Iterable[tuple[str, str, float]],
        labels: Iterable[str] = (),
    ) -> Graph:
        """Build a graph from labelled edges, creating vertices as needed.

        Example:
            >>> g = Graph.from_edge_list([("A", "B", 9), ("B", "C", 8)])
            >>> g.degree(g.vertex_by_label("B").id)
            2
        """
        by_label = dict[str, Vertex]()
        for label in labels:
            by_label.setdefault(label, Vertex.create(label))
        edge_objs = list[Edge]()
        for start, end, weight in edges:
            u = by_label.setdefault(start, Vertex.create(start))
            v = by_label.setdefault(end, Vertex.create(end))
            edge_objs.append(Edge.create(u.id, v.id, float(weight)))
        return cls(by_label.values(), edge_objs)

    @override
    def __repr__(self) -> str:
        return f"Graph(vertices={len(self._vertices)}, edges={len(self._edges)})"

    # --- Accessors ---

    @property
    def vertices(self) -> Mapping[VertexID, Vertex]:
        return types.MappingProxyType(self._vertices)

    @property
    def edges(self) -> Mapping[EdgeID, Edge]:
        return types.MappingProxyType(self._edges)

    def has_vertex(self, vertex_id: VertexID) -> bool:
        return vertex_id in self._vertices

    def has_edge(self, edge_id: EdgeID) -> bool:
        return edge_id in self._edges

    def vertex(self, vertex_id: VertexID) -> Vertex:
        try:
            return self._vertices[vertex_id]
        except KeyError:
            raise exceptions.UnknownVertexError(f"Vertex {vertex_id} is not in the graph") from None

    def edge(self, edge_id: EdgeID) -> Edge:
        try:
            return self._edges[edge_id]
        except KeyError:
            raise exceptions.UnknownEdgeError(f"Edge {edge_id} is not in the graph") from None

    def label(self, vertex_id: VertexID) -> str:
        return self.vertex(vertex_id).label

    def vertex_by_label(self, label: str) -> Vertex:
        for vertex in self._vertices.values():
            if vertex.label == label:
                return vertex
        raise exceptions.UnknownLabelError(label, sorted(v.label for v in self._vertices.values()))

    def edge_between(self, label_a: str, label_b: str) -> Edge:
        """Return the single edge joining two labelled vertices."""
        a = self.vertex_by_label(label_a).id
        b = self.vertex_by_label(label_b).id
        found = self.edges_between(a, b)
        if not found:
            raise exceptions.UnknownEdgeError(f"No edge between '{label_a}' and '{label_b}'")
        if len(found) > 1:
            raise exceptions.AmbiguousEdgeError(
                f"{len(found)} parallel edges join '{label_a}' and '{label_b}'"
            )
        return found[0]

    def describe_edge(self, edge: Edge) -> str:
        return f"{self.label(edge.start_vertex_id)}-{self.label(edge.end_vertex_id)}"

    def sorted_edges(self) -> list[Edge]:
        """Edges ordered by weight, then by endpoint labels (deterministic)."""
        return sorted(self._edges.values(), key=self.edge_sort_key)

    def edge_sort_key(self, edge: Edge) -> tuple[float, str, str, str]:
        labels = sorted((self.label(edge.start_vertex_id), self.label(edge.end_vertex_id)))
        return (edge.weight, labels[0], labels[1], str(edge.id))

    # --- Incidence ---

    @functools.cached_property
    def _incidence(self) -> dict[VertexID, list[Edge]]:
        incidence: dict[VertexID, list[Edge]] = {vid: [] for vid in self._vertices}
        for edge in self._edges.values():
            incidence[edge.start_vertex_id].append(edge)
            if not edge.is_loop:
                incidence[edge.end_vertex_id].append(edge)
        return incidence

    def _incident(self, vertex_id: VertexID) -> list[Edge]:
        try:
            return self._incidence[vertex_id]
        except KeyError:
            raise exceptions.UnknownVertexError(f"Vertex {vertex_id} is not in the graph") from None

    def degree(self, vertex_id: VertexID) -> int:
        """Number of edge endpoints at the vertex (a self-loop counts twice)."""
        return sum(2 if edge.is_loop else 1 for edge in self._incident(vertex_id))

    def connected_edges(self, vertex_id: VertexID) -> list[Edge]:
        """All edges with an endpoint at the vertex."""
        return list(self._incident(vertex_id))

    def neighbors(self, vertex_id: VertexID) -> set[VertexID]:
        result = set[VertexID]()
        for edge in self._incident(vertex_id):
            other = edge.traverse(vertex_id)
            if other is not None:
                result.add(other)
        return result

    def edges_between(self, a: VertexID, b: VertexID) -> list[Edge]:
        """All direct edges joining a and b (self-loops when a == b)."""
        self.vertex(b)
        return [edge for edge in self._incident(a) if edge.traverse(a) == b]

    def are_adjacent(self, a: VertexID, b: VertexID) -> bool:
        return bool(self.edges_between(a, b))

    def total_weight(self) -> float:
        return walk_weight(self._edges.values())

    # --- Derivation ---

    def with_edge(self, edge: Edge) -> Graph:
        return self.with_edges([edge])

    def with_edges(self, edges: Iterable[Edge]) -> Graph:
        new_edges = dict(self._edges)
        for edge in edges:
            for endpoint in edge.endpoints:
                self.vertex(endpoint)
            new_edges[edge.id] = edge
        return Graph._from_maps(self._vertices, new_edges)

    def without_edge(self, edge_id: EdgeID) -> Graph:
        self.edge(edge_id)
        new_edges = {eid: e for eid, e in self._edges.items() if eid != edge_id}
        return Graph._from_maps(self._vertices, new_edges)

    def without_vertex(self, vertex_id: VertexID) -> Graph:
        """Remove a vertex together with every edge touching it."""
        self.vertex(vertex_id)
        new_vertices = {vid: v for vid, v in self._vertices.items() if vid != vertex_id}
        new_edges = {eid: e for eid, e in self._edges.items() if not e.touches(vertex_id)}
        return Graph._from_maps(new_vertices, new_edges)

    def edge_subgraph(self, edge_ids: Iterable[EdgeID]) -> Graph:
        """Same vertices, only the given edges."""
        return Graph._from_maps(self._vertices, {eid: self.edge(eid) for eid in edge_ids})

    # --- NetworkX view ---

    @functools.cached_property
    def _nx(self) -> nx.MultiGraph[VertexID]:
        g: nx.MultiGraph[VertexID] = nx.MultiGraph()
        g.add_nodes_from(self._vertices)
        for edge in self._edges.values():
            g.add_edge(edge.start_vertex_id, edge.end_vertex_id, key=edge.id, weight=edge.weight)
        return g

    def to_networkx(self) -> nx.MultiGraph[VertexID]:
        """Read-only MultiGraph view keyed by edge id (do not mutate)."""
        return self._nx
