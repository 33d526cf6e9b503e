from __future__ import annotations

from difflib import get_close_matches
from typing import override

# Fuzzy matching constants
_FUZZY_CUTOFF = 0.6
_FUZZY_MIN_LENGTH = 1


def _fuzzy_suggest(query: str, candidates: list[str]) -> str | None:
    """Return best fuzzy match if found, else None."""
    if not candidates or len(query) < _FUZZY_MIN_LENGTH:
        return None
    matches = get_close_matches(query, candidates, n=1, cutoff=_FUZZY_CUTOFF)
    return matches[0] if matches else None


class GraphTutorError(Exception):
    """Base exception for graphtutor errors.

    User mistakes while working through an algorithm are never raised; they
    come back as rejected verdicts. Exceptions signal a broken contract
    between the caller and the engine, or a limit of the engine itself.
    """

    def format_user_message(self) -> str:
        """Format a user-friendly error message."""
        return str(self)

    def get_suggestion(self) -> str | None:
        """Return actionable suggestion for resolving the error."""
        return None


class GraphError(GraphTutorError):
    """Base class for graph snapshot contract violations."""

    pass


class UnknownVertexError(GraphError):
    """Raised when a vertex id is not part of the graph snapshot."""

    @override
    def get_suggestion(self) -> str:
        return "Only pass vertex ids taken from the graph the session was built with"


class UnknownEdgeError(GraphError):
    """Raised when an edge id is not part of the graph snapshot."""

    @override
    def get_suggestion(self) -> str:
        return "Only pass edge ids taken from the graph the session was built with"


class UnknownCandidateError(GraphError):
    """Raised when a candidate id is neither a vertex nor an edge of the graph."""

    pass


class InvalidEdgeError(GraphError):
    """Raised when an edge references a vertex missing from its graph."""

    pass


class UnknownLabelError(GraphError):
    """Raised when a vertex label does not exist in the graph."""

    _label: str
    _available: list[str]

    def __init__(self, label: str, available_labels: list[str] | None = None) -> None:
        self._label = label
        self._available = available_labels or []
        super().__init__(f"No vertex labelled '{label}'")

    @override
    def format_user_message(self) -> str:
        msg = str(self)
        if match := _fuzzy_suggest(self._label, self._available):
            msg += f"\n  Did you mean: '{match}'?"
        return msg

    @override
    def get_suggestion(self) -> str | None:
        if not self._available:
            return None
        return f"Available vertices: {', '.join(self._available)}"


class AmbiguousEdgeError(GraphError):
    """Raised when a vertex pair names more than one edge."""

    @override
    def get_suggestion(self) -> str:
        return "Select parallel edges by id rather than by their endpoints"


class InvalidMatrixError(GraphTutorError):
    """Raised when a distance table is malformed or a cell is out of range."""

    @override
    def get_suggestion(self) -> str:
        return "Use a square, symmetric table of non-negative weights with unique row labels"


class SolverLimitError(GraphTutorError):
    """Raised when a computation exceeds a configured size limit."""

    @override
    def get_suggestion(self) -> str:
        return "Use a smaller graph or raise the limit in the solver configuration"


class TrailLimitError(SolverLimitError):
    """Raised when shortest trail enumeration exceeds solver.max_trails."""

    pass


class MatchingLimitError(SolverLimitError):
    """Raised when a T-join would need too many perfect matchings."""

    pass


class ConfigError(GraphTutorError):
    """Raised when configuration is invalid."""

    pass


class GraphDocumentError(GraphTutorError):
    """Raised when a graph document cannot be read or is malformed."""

    @override
    def get_suggestion(self) -> str:
        return "Expected 'vertices: [labels]' and 'edges: [{from, to, weight}]'"
