from __future__ import annotations

import dataclasses
import enum
import uuid
from typing import NewType, TypedDict

__all__ = [
    "VertexID",
    "EdgeID",
    "new_vertex_id",
    "new_edge_id",
    "ErrorKind",
    "VerdictStatus",
    "Verdict",
    "SpanningTreeStatus",
    "PrimStep",
    "PrimTableStep",
    "PostmanStep",
    "TSPStep",
    "PracticalTSPStep",
    "TSPBoundsResult",
    "GraphSummary",
    "OutputFormat",
]

VertexID = NewType("VertexID", uuid.UUID)
EdgeID = NewType("EdgeID", uuid.UUID)


def new_vertex_id() -> VertexID:
    return VertexID(uuid.uuid4())


def new_edge_id() -> EdgeID:
    return EdgeID(uuid.uuid4())


class ErrorKind(enum.StrEnum):
    """Why a user's move was rejected.

    Every kind is a recoverable user-input rejection; the session state is
    left exactly as it was before the rejected move.
    """

    # Spanning trees
    CYCLE = "cycle"
    NOT_LOWEST_WEIGHT = "not_lowest_weight"
    NOT_CONNECTED_EDGE = "not_connected_edge"
    # Chinese postman
    NON_T_JOIN_DUPLICATE = "non_t_join_duplicate"
    T_JOIN_EDGE_REPEAT = "t_join_edge_repeat"
    NOT_ADJACENT_EDGE = "not_adjacent_edge"
    # Preconditions (reported once, halt the session)
    NOT_CONNECTED = "not_connected"
    NOT_COMPLETE_EUCLIDEAN = "not_complete_euclidean"
    # Travelling salesman
    ALREADY_VISITED = "already_visited"
    DELETED_EDGE = "deleted_edge"
    NOT_DELETED_EDGE = "not_deleted_edge"
    # Practical travelling salesman
    NOT_SMALLEST_WEIGHT = "not_smallest_weight"
    CANNOT_ADD_SMALLER_WEIGHT = "cannot_add_smaller_weight"
    DIRECT_EDGE_ALREADY_SHORTEST = "direct_edge_already_shortest"
    # Prim on a distance table
    EMPTY_CELL = "empty_cell"
    # Any session
    ALREADY_SELECTED = "already_selected"
    WRONG_STEP = "wrong_step"
    ALREADY_COMPLETE = "already_complete"

    @property
    def message(self) -> str:
        """Human readable explanation shown to the user."""
        return _ERROR_MESSAGES[self]


_ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.CYCLE: "This edge forms a cycle.",
    ErrorKind.NOT_LOWEST_WEIGHT: "This edge doesn't have the lowest possible weight.",
    ErrorKind.NOT_CONNECTED_EDGE: "This edge isn't connected to the tree.",
    ErrorKind.NON_T_JOIN_DUPLICATE: (
        "You should only repeat edges if they are part of the shortest path "
        "between two odd vertices."
    ),
    ErrorKind.T_JOIN_EDGE_REPEAT: "You've already crossed this edge twice.",
    ErrorKind.NOT_ADJACENT_EDGE: "That edge doesn't connect to your current vertex.",
    ErrorKind.NOT_CONNECTED: (
        "This graph is not connected, so the Chinese Postman problem has no solution."
    ),
    ErrorKind.NOT_COMPLETE_EUCLIDEAN: (
        "In order to apply the classical travelling salesman problem, the graph must be "
        "both complete and have the Euclidean property."
    ),
    ErrorKind.ALREADY_VISITED: "That edge leads to a vertex you have already visited.",
    ErrorKind.DELETED_EDGE: "That edge was deleted along with its vertex.",
    ErrorKind.NOT_DELETED_EDGE: "Only edges that were deleted can be added back.",
    ErrorKind.NOT_SMALLEST_WEIGHT: (
        "The edge weight should be the smallest possible weight between the two vertices."
    ),
    ErrorKind.CANNOT_ADD_SMALLER_WEIGHT: (
        "You cannot assign a weight for this edge that is smaller than any available path."
    ),
    ErrorKind.DIRECT_EDGE_ALREADY_SHORTEST: (
        "There is already an edge of smallest weight between these vertices."
    ),
    ErrorKind.EMPTY_CELL: "There is no edge between these two vertices.",
    ErrorKind.ALREADY_SELECTED: "That edge has already been selected.",
    ErrorKind.WRONG_STEP: "That selection isn't part of the current step.",
    ErrorKind.ALREADY_COMPLETE: "The algorithm is already complete.",
}


class VerdictStatus(enum.StrEnum):
    """Outcome of validating one candidate."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    CLEARED = "cleared"  # Re-selection of the candidate behind the pending error


@dataclasses.dataclass(frozen=True)
class Verdict:
    """Result of a single ``validate`` call.

    Attributes:
        status: Accepted, rejected, or cleared (the pending error was dismissed).
        error: The rejection reason; only set when ``status`` is REJECTED.
    """

    status: VerdictStatus
    error: ErrorKind | None = None

    @classmethod
    def accept(cls) -> Verdict:
        return cls(VerdictStatus.ACCEPTED)

    @classmethod
    def reject(cls, error: ErrorKind) -> Verdict:
        return cls(VerdictStatus.REJECTED, error)

    @classmethod
    def cleared(cls) -> Verdict:
        return cls(VerdictStatus.CLEARED)

    @property
    def accepted(self) -> bool:
        return self.status == VerdictStatus.ACCEPTED

    @property
    def rejected(self) -> bool:
        return self.status == VerdictStatus.REJECTED


class SpanningTreeStatus(enum.StrEnum):
    """Kruskal progress. COMPLETED is terminal."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class PrimStep(enum.StrEnum):
    """Prim progress: seed vertex first, then edges."""

    CHOOSE_VERTEX = "choose_vertex"
    SELECTING_EDGES = "selecting_edges"
    COMPLETE = "complete"


class PrimTableStep(enum.StrEnum):
    """Prim on a distance table: cross off a first row, then pick weights."""

    DELETE_ROW = "delete_row"
    SELECT_WEIGHTS = "select_weights"
    FINISHED = "finished"


class PostmanStep(enum.StrEnum):
    """Chinese postman walk construction progress."""

    NO_SOLUTION = "no_solution"  # Disconnected graph, terminal
    CHOOSE_VERTEX = "choose_vertex"
    SELECT_EDGES = "select_edges"
    FINISHED = "finished"


class TSPStep(enum.StrEnum):
    """Classical travelling salesman bound construction progress."""

    NOT_APPLICABLE = "not_applicable"  # Gate failed, terminal
    CHOOSING_START_VERTEX = "choosing_start_vertex"
    FINDING_UPPER_BOUND = "finding_upper_bound"
    DELETING_VERTEX = "deleting_vertex"
    FINDING_MINIMUM_SPANNING_TREE = "finding_minimum_spanning_tree"
    ADD_BACK_EDGES = "add_back_edges"
    FINISHED = "finished"


class PracticalTSPStep(enum.StrEnum):
    """Progress of turning a graph into a complete Euclidean one."""

    MAKING_COMPLETE_AND_EUCLIDEAN = "making_complete_and_euclidean"
    SOLVING_CLASSICAL_TSP = "solving_classical_tsp"


class TSPBoundsResult(TypedDict):
    """Upper and lower bounds of a finished TSP session."""

    upper_bound: float
    lower_bound: float
    start_vertex: str
    deleted_vertex: str


class GraphSummary(TypedDict):
    """Structural properties of a graph, as reported by ``inspect``."""

    vertices: int
    edges: int
    total_weight: float
    connected: bool
    has_cycle: bool
    is_cycle: bool
    complete: bool
    eulerian: bool
    euclidean: bool
    odd_vertices: list[str]


class OutputFormat(enum.StrEnum):
    """Output format for display commands."""

    JSON = "json"
    MD = "md"
