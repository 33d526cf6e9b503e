"""Kruskal's algorithm, validated one edge at a time."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, override

from graphtutor import config, predicates
from graphtutor.session import AlgorithmSession
from graphtutor.types import ErrorKind, SpanningTreeStatus, Verdict

if TYPE_CHECKING:
    from graphtutor.graph import Edge, Graph
    from graphtutor.types import EdgeID

__all__ = ["KruskalValidator"]

logger = logging.getLogger(__name__)


class KruskalValidator(AlgorithmSession):
    """Checks that a user adds spanning tree edges in Kruskal order.

    The candidate pool holds every edge that is not yet in the tree and
    would not close a cycle with it. An edge is accepted when it is in the
    pool and no pool edge is lighter; ties between equally light edges are
    all acceptable.

    Example:
        >>> g = Graph.from_edge_list([("A", "B", 1), ("B", "C", 2), ("A", "C", 3)])
        >>> session = KruskalValidator(g)
        >>> session.validate(g.edge_between("A", "C").id).error
        <ErrorKind.NOT_LOWEST_WEIGHT: 'not_lowest_weight'>
    """

    _subgraph: Graph
    _pool: dict[EdgeID, Edge]
    _status: SpanningTreeStatus

    def __init__(self, graph: Graph) -> None:
        super().__init__(graph)
        self._target_edges = max(len(graph.vertices) - 1, 0)
        self._reset_state()

    @override
    def _reset_state(self) -> None:
        self._subgraph = self._graph.edge_subgraph(())
        self._pool = {edge.id: edge for edge in self._graph.edges.values() if not edge.is_loop}
        self._status = (
            SpanningTreeStatus.COMPLETED
            if self._target_edges == 0
            else SpanningTreeStatus.IN_PROGRESS
        )

    @property
    def status(self) -> SpanningTreeStatus:
        return self._status

    @property
    def subgraph(self) -> Graph:
        """The tree built so far: every vertex, only the accepted edges."""
        return self._subgraph

    def candidate_edges(self) -> list[Edge]:
        """Edges that can still join the tree without a cycle, lightest first."""
        if self.is_complete():
            return []
        return sorted(self._pool.values(), key=self._graph.edge_sort_key)

    @override
    def legal_edges(self) -> list[Edge]:
        candidates = self.candidate_edges()
        if not candidates:
            return []
        tolerance = config.get_solver_config().weight_tolerance
        lightest = candidates[0].weight
        return [edge for edge in candidates if edge.weight <= lightest + tolerance]

    @override
    def is_complete(self) -> bool:
        return self._status == SpanningTreeStatus.COMPLETED

    @override
    def current_weight(self) -> float:
        return self._subgraph.total_weight()

    @override
    def _validate_edge(self, edge: Edge) -> Verdict:
        if self.is_complete():
            return Verdict.reject(ErrorKind.ALREADY_COMPLETE)
        if self._subgraph.has_edge(edge.id):
            return Verdict.reject(ErrorKind.ALREADY_SELECTED)
        if predicates.would_form_cycle(self._subgraph, edge):
            return Verdict.reject(ErrorKind.CYCLE)

        tolerance = config.get_solver_config().weight_tolerance
        lightest = min(candidate.weight for candidate in self._pool.values())
        if edge.weight > lightest + tolerance:
            return Verdict.reject(ErrorKind.NOT_LOWEST_WEIGHT)

        self._accept(edge)
        return Verdict.accept()

    def _accept(self, edge: Edge) -> None:
        self._subgraph = self._subgraph.with_edge(edge)
        del self._pool[edge.id]
        self._pool = {
            eid: candidate
            for eid, candidate in self._pool.items()
            if not predicates.would_form_cycle(self._subgraph, candidate)
        }
        if len(self._subgraph.edges) == self._target_edges:
            self._status = SpanningTreeStatus.COMPLETED
            logger.debug(f"Spanning tree complete with weight {self.current_weight()}")
