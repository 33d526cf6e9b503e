from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING

from graphtutor import exceptions, metrics
from graphtutor.types import EdgeID, ErrorKind, Verdict, VertexID

if TYPE_CHECKING:
    from graphtutor.graph import Edge, Graph, Vertex

__all__ = [
    "AlgorithmSession",
    "Candidate",
]

logger = logging.getLogger(__name__)

type Candidate = EdgeID | VertexID


class AlgorithmSession(abc.ABC):
    """Interactive validation of one user working through one algorithm.

    Subclasses decide whether a single vertex or edge selection is a legal
    next move. This base class owns the pending error and the
    clear-on-reselect rule shared by every algorithm:

    - A rejected move records its error and the candidate that caused it.
    - Selecting that same candidate again dismisses the error and returns a
      CLEARED verdict without touching the algorithm state.
    - Selecting any other candidate dismisses the error and validates the
      new candidate normally.

    Rejections never change algorithm state. Ids that belong to neither the
    vertices nor the edges of the session graph raise UnknownCandidateError.
    """

    def __init__(self, graph: Graph) -> None:
        self._graph = graph
        self._error: ErrorKind | None = None
        self._error_candidate: Candidate | None = None

    @property
    def graph(self) -> Graph:
        """The graph candidates are resolved against."""
        return self._graph

    def validate(self, candidate: Candidate) -> Verdict:
        """Check one user selection and apply it when it is a legal move."""
        if self._error is not None:
            previous = self._error_candidate
            self.clear_error()
            if candidate == previous:
                logger.debug(f"{self._name}: cleared pending error")
                return Verdict.cleared()

        if self._graph.has_edge(EdgeID(candidate)):
            edge = self._graph.edge(EdgeID(candidate))
            verdict = self._validate_edge(edge)
            described = self._graph.describe_edge(edge)
        elif self._graph.has_vertex(VertexID(candidate)):
            vertex = self._graph.vertex(VertexID(candidate))
            verdict = self._validate_vertex(vertex)
            described = vertex.label or str(vertex.id)
        else:
            raise exceptions.UnknownCandidateError(
                f"{candidate} is neither a vertex nor an edge of the graph"
            )

        if verdict.rejected:
            self._error = verdict.error
            self._error_candidate = candidate
        metrics.count(f"session.{verdict.status}")
        message = f"{self._name}: {described} -> {verdict.status} {verdict.error or ''}"
        logger.debug(message.rstrip())
        return verdict

    def error_state(self) -> ErrorKind | None:
        """The pending rejection, or None when the last move was not rejected."""
        return self._error

    def reset(self) -> None:
        """Return the session to its initial state, discarding all progress."""
        self.clear_error()
        self._reset_state()
        logger.debug(f"{self._name}: reset")

    @property
    def _name(self) -> str:
        return type(self).__name__

    def clear_error(self) -> None:
        """Dismiss the pending error without selecting anything."""
        self._error = None
        self._error_candidate = None

    def _validate_vertex(self, vertex: Vertex) -> Verdict:
        """Vertex selections are not a step of every algorithm."""
        return Verdict.reject(ErrorKind.WRONG_STEP)

    @abc.abstractmethod
    def _validate_edge(self, edge: Edge) -> Verdict:
        """Judge an edge selection; apply it to the session state when accepted."""
        ...

    @abc.abstractmethod
    def _reset_state(self) -> None: ...

    @abc.abstractmethod
    def is_complete(self) -> bool: ...

    @abc.abstractmethod
    def current_weight(self) -> float:
        """Total weight of the structure the user has built so far."""
        ...

    @abc.abstractmethod
    def legal_edges(self) -> list[Edge]:
        """Edges that would be accepted next, in deterministic order."""
        ...

    def legal_vertices(self) -> list[Vertex]:
        """Vertices that would be accepted next, ordered by label."""
        return []
