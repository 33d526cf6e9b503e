"""Prim's algorithm, validated one selection at a time."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, override

from graphtutor import config
from graphtutor.session import AlgorithmSession
from graphtutor.types import ErrorKind, PrimStep, Verdict

if TYPE_CHECKING:
    from graphtutor.graph import Edge, Graph, Vertex
    from graphtutor.types import EdgeID, VertexID

__all__ = ["PrimValidator"]

logger = logging.getLogger(__name__)


class PrimValidator(AlgorithmSession):
    """Checks that a user grows a spanning tree from one vertex in Prim order.

    The user first picks a seed vertex. After that, each accepted edge has
    exactly one visited endpoint and is one of the lightest such edges.
    """

    _step: PrimStep
    _visited: set[VertexID]
    _subgraph: Graph
    _pool: dict[EdgeID, Edge]

    def __init__(self, graph: Graph) -> None:
        super().__init__(graph)
        self._target_edges = max(len(graph.vertices) - 1, 0)
        self._reset_state()

    @override
    def _reset_state(self) -> None:
        self._step = PrimStep.CHOOSE_VERTEX
        self._visited = set()
        self._subgraph = self._graph.edge_subgraph(())
        self._pool = {}

    @property
    def step(self) -> PrimStep:
        return self._step

    @property
    def subgraph(self) -> Graph:
        return self._subgraph

    @property
    def visited(self) -> frozenset[VertexID]:
        return frozenset(self._visited)

    def candidate_edges(self) -> list[Edge]:
        """Edges leaving the tree, lightest first."""
        return sorted(self._pool.values(), key=self._graph.edge_sort_key)

    @override
    def legal_edges(self) -> list[Edge]:
        if self._step != PrimStep.SELECTING_EDGES:
            return []
        candidates = self.candidate_edges()
        if not candidates:
            return []
        tolerance = config.get_solver_config().weight_tolerance
        lightest = candidates[0].weight
        return [edge for edge in candidates if edge.weight <= lightest + tolerance]

    @override
    def legal_vertices(self) -> list[Vertex]:
        if self._step != PrimStep.CHOOSE_VERTEX:
            return []
        return sorted(self._graph.vertices.values(), key=lambda v: v.label)

    @override
    def is_complete(self) -> bool:
        return self._step == PrimStep.COMPLETE

    @override
    def current_weight(self) -> float:
        return self._subgraph.total_weight()

    @override
    def _validate_vertex(self, vertex: Vertex) -> Verdict:
        if self._step == PrimStep.COMPLETE:
            return Verdict.reject(ErrorKind.ALREADY_COMPLETE)
        if self._step != PrimStep.CHOOSE_VERTEX:
            return Verdict.reject(ErrorKind.WRONG_STEP)

        self._visit(vertex.id)
        self._step = PrimStep.SELECTING_EDGES
        self._check_complete()
        return Verdict.accept()

    @override
    def _validate_edge(self, edge: Edge) -> Verdict:
        if self._step == PrimStep.COMPLETE:
            return Verdict.reject(ErrorKind.ALREADY_COMPLETE)
        if self._step == PrimStep.CHOOSE_VERTEX:
            return Verdict.reject(ErrorKind.WRONG_STEP)
        if self._subgraph.has_edge(edge.id):
            return Verdict.reject(ErrorKind.ALREADY_SELECTED)

        start_in = edge.start_vertex_id in self._visited
        end_in = edge.end_vertex_id in self._visited
        if not start_in and not end_in:
            return Verdict.reject(ErrorKind.NOT_CONNECTED_EDGE)
        if start_in and end_in:
            return Verdict.reject(ErrorKind.CYCLE)

        tolerance = config.get_solver_config().weight_tolerance
        lightest = min(candidate.weight for candidate in self._pool.values())
        if edge.weight > lightest + tolerance:
            return Verdict.reject(ErrorKind.NOT_LOWEST_WEIGHT)

        new_vertex = edge.end_vertex_id if start_in else edge.start_vertex_id
        self._subgraph = self._subgraph.with_edge(edge)
        self._visit(new_vertex)
        self._check_complete()
        return Verdict.accept()

    def _visit(self, vertex_id: VertexID) -> None:
        """Mark a vertex visited and refresh the pool of edges leaving the tree."""
        self._visited.add(vertex_id)
        self._pool = {
            eid: edge
            for eid, edge in self._pool.items()
            if not (edge.start_vertex_id in self._visited and edge.end_vertex_id in self._visited)
        }
        for edge in self._graph.connected_edges(vertex_id):
            other = edge.traverse(vertex_id)
            if other is not None and other not in self._visited:
                self._pool[edge.id] = edge

    def _check_complete(self) -> None:
        if len(self._subgraph.edges) == self._target_edges:
            self._step = PrimStep.COMPLETE
            self._pool = {}
            logger.debug(f"Spanning tree complete with weight {self.current_weight()}")
