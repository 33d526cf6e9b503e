"""Turning an arbitrary graph into a complete Euclidean one before the TSP."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from graphtutor import config, exceptions, predicates
from graphtutor.graph import Edge
from graphtutor.paths import PathOracle
from graphtutor.tsp import TSPBounds
from graphtutor.types import EdgeID, ErrorKind, PracticalTSPStep, Verdict

if TYPE_CHECKING:
    from graphtutor.graph import Graph
    from graphtutor.types import VertexID

__all__ = ["PracticalTSP"]

logger = logging.getLogger(__name__)


class PracticalTSP:
    """The practical travelling salesman problem.

    Distances between towns are the shortest routes of the original graph.
    The user adds a direct edge for every missing pair and sets each direct
    edge's weight to that shortest distance. Once the working graph is
    complete and Euclidean, and every added edge has been given its weight,
    the classical problem takes over via ``tsp_session()``.
    """

    def __init__(self, graph: Graph) -> None:
        self._original = graph
        self._oracle = PathOracle(graph)
        self.reset()

    def reset(self) -> None:
        self._working = self._original
        self._added = list[EdgeID]()
        self._unweighted = set[EdgeID]()
        self._error: ErrorKind | None = None
        self._step = PracticalTSPStep.MAKING_COMPLETE_AND_EUCLIDEAN
        self._check_complete()

    @property
    def step(self) -> PracticalTSPStep:
        return self._step

    @property
    def original_graph(self) -> Graph:
        return self._original

    @property
    def working_graph(self) -> Graph:
        return self._working

    @property
    def added_edges(self) -> list[Edge]:
        """Edges the user has added, in order, with their current weights."""
        return [self._working.edge(edge_id) for edge_id in self._added]

    @property
    def unweighted_edges(self) -> list[Edge]:
        """Added edges still waiting for an accepted weight."""
        return [
            self._working.edge(edge_id) for edge_id in self._added if edge_id in self._unweighted
        ]

    def error_state(self) -> ErrorKind | None:
        return self._error

    def is_complete(self) -> bool:
        return self._step == PracticalTSPStep.SOLVING_CLASSICAL_TSP

    def shortest_distance(self, a: VertexID, b: VertexID) -> float | None:
        """Distance between two vertices in the original graph."""
        return self._oracle.shortest_distance(a, b)

    def missing_pairs(self) -> list[tuple[VertexID, VertexID]]:
        """Vertex pairs of the working graph with no direct edge, by label."""
        ordered = sorted(self._working.vertices.values(), key=lambda v: v.label)
        return [
            (a.id, b.id)
            for i, a in enumerate(ordered)
            for b in ordered[i + 1 :]
            if not self._working.are_adjacent(a.id, b.id)
        ]

    def add_edge(self, a: VertexID, b: VertexID) -> tuple[Verdict, Edge | None]:
        """Add a weightless direct edge between a and b to the working graph.

        Returns the verdict and, when accepted, the new edge (weight 0 until
        set with ``set_edge_weight``).

        Raises:
            InvalidEdgeError: a and b are the same vertex.
        """
        if a == b:
            raise exceptions.InvalidEdgeError("A direct edge needs two distinct vertices")
        if self.is_complete():
            return self._reject(ErrorKind.ALREADY_COMPLETE), None

        distance = self.shortest_distance(a, b)
        direct = self._working.edges_between(a, b)
        shortest_direct = min((e.weight for e in direct), default=None)
        if (
            shortest_direct is not None
            and distance is not None
            and self._matches(shortest_direct, distance)
        ):
            return self._reject(ErrorKind.DIRECT_EDGE_ALREADY_SHORTEST), None

        edge = Edge.create(a, b)
        self._working = self._working.with_edge(edge)
        self._added.append(edge.id)
        self._unweighted.add(edge.id)
        self._error = None
        logger.debug(f"Added edge {self._working.describe_edge(edge)}")
        return Verdict.accept(), edge

    def set_edge_weight(self, edge_id: EdgeID, weight: float) -> Verdict:
        """Assign a weight to a direct edge of the working graph.

        The weight must equal the shortest distance between the endpoints in
        the original graph.
        """
        edge = self._working.edge(edge_id)
        if self.is_complete():
            return self._reject(ErrorKind.ALREADY_COMPLETE)

        distance = self.shortest_distance(edge.start_vertex_id, edge.end_vertex_id)
        if distance is None:
            return self._reject(ErrorKind.NOT_CONNECTED)
        if not self._matches(weight, distance):
            if weight < distance:
                return self._reject(ErrorKind.CANNOT_ADD_SMALLER_WEIGHT)
            return self._reject(ErrorKind.NOT_SMALLEST_WEIGHT)

        self._working = self._working.with_edge(edge.with_weight(weight))
        self._unweighted.discard(edge_id)
        self._error = None
        self._check_complete()
        return Verdict.accept()

    def tsp_session(self) -> TSPBounds | None:
        """Classical TSP session over the working graph, once it qualifies."""
        if not self.is_complete():
            return None
        return TSPBounds(self._working, complete_and_euclidean=True)

    def _matches(self, weight: float, distance: float) -> bool:
        tolerance = config.get_solver_config().weight_tolerance
        return math.isclose(weight, distance, rel_tol=0.0, abs_tol=tolerance)

    def _reject(self, error: ErrorKind) -> Verdict:
        self._error = error
        return Verdict.reject(error)

    def _check_complete(self) -> None:
        # A placeholder weight of 0 can look Euclidean, so it never counts.
        if self._unweighted:
            return
        if predicates.is_complete(self._working) and predicates.is_euclidean(self._working):
            self._step = PracticalTSPStep.SOLVING_CLASSICAL_TSP
            logger.info("Graph is complete and Euclidean; solving the classical TSP")
