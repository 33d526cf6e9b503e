"""Classical travelling salesman bounds, validated one selection at a time.

The upper bound is the nearest-neighbour tour from a chosen start vertex.
The lower bound deletes one vertex, takes a minimum spanning tree of what
remains (validated with Kruskal) and adds back the two lightest edges of
the deleted vertex.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, override

from graphtutor import config, predicates
from graphtutor.graph import Edge, walk_weight
from graphtutor.kruskal import KruskalValidator
from graphtutor.session import AlgorithmSession
from graphtutor.types import ErrorKind, TSPBoundsResult, TSPStep, Verdict

if TYPE_CHECKING:
    from graphtutor.graph import Graph, Vertex
    from graphtutor.types import VertexID

__all__ = ["TSPBounds", "ADD_BACK_COUNT"]

logger = logging.getLogger(__name__)

ADD_BACK_COUNT = 2


class TSPBounds(AlgorithmSession):
    """Upper and lower bounds for the travelling salesman problem.

    Only meaningful on complete graphs with the Euclidean property. The
    caller normally knows whether that holds and passes
    ``complete_and_euclidean``; when it is None the session checks the graph
    itself. If the gate fails every selection is rejected with
    NOT_COMPLETE_EUCLIDEAN.

    Steps run in order: choose the start vertex, build the nearest-neighbour
    tour, delete a vertex, build the spanning tree of the rest, add back the
    deleted vertex's lightest edges.
    """

    _step: TSPStep
    _start: VertexID | None
    _current: VertexID | None
    _visited: list[VertexID]
    _tour: list[Edge]
    _deleted: VertexID | None
    _kruskal: KruskalValidator | None
    _deleted_edges: list[Edge]
    _added_back: list[Edge]

    def __init__(self, graph: Graph, complete_and_euclidean: bool | None = None) -> None:
        super().__init__(graph)
        if complete_and_euclidean is None:
            complete_and_euclidean = predicates.is_complete(graph) and predicates.is_euclidean(
                graph
            )
        self._applicable = complete_and_euclidean
        if not self._applicable:
            logger.info("Graph is not complete and Euclidean; TSP bounds do not apply")
        self._reset_state()

    @override
    def _reset_state(self) -> None:
        self._step = TSPStep.CHOOSING_START_VERTEX if self._applicable else TSPStep.NOT_APPLICABLE
        self._start = None
        self._current = None
        self._visited = []
        self._tour = []
        self._deleted = None
        self._kruskal = None
        self._deleted_edges = []
        self._added_back = []

    # --- Queries ---

    @property
    def step(self) -> TSPStep:
        return self._step

    @property
    def start_vertex(self) -> VertexID | None:
        return self._start

    @property
    def current_vertex(self) -> VertexID | None:
        return self._current

    @property
    def tour(self) -> list[Edge]:
        return list(self._tour)

    @property
    def deleted_vertex(self) -> VertexID | None:
        return self._deleted

    @property
    def spanning_tree(self) -> Graph | None:
        """The tree on the graph without the deleted vertex, once one is deleted."""
        return self._kruskal.subgraph if self._kruskal is not None else None

    @property
    def added_back(self) -> list[Edge]:
        return list(self._added_back)

    @property
    def upper_bound(self) -> float | None:
        """Weight of the nearest-neighbour tour, once it is closed."""
        if self._step in (
            TSPStep.NOT_APPLICABLE,
            TSPStep.CHOOSING_START_VERTEX,
            TSPStep.FINDING_UPPER_BOUND,
        ):
            return None
        return walk_weight(self._tour)

    @property
    def lower_bound(self) -> float | None:
        """Spanning tree weight plus the added-back edges, once finished."""
        if self._step != TSPStep.FINISHED:
            return None
        return self._lower_bound_so_far()

    def bounds(self) -> TSPBoundsResult | None:
        if self._step != TSPStep.FINISHED:
            return None
        assert self._start is not None and self._deleted is not None
        upper = self.upper_bound
        lower = self.lower_bound
        assert upper is not None and lower is not None
        return TSPBoundsResult(
            upper_bound=upper,
            lower_bound=lower,
            start_vertex=self._graph.label(self._start),
            deleted_vertex=self._graph.label(self._deleted),
        )

    @override
    def is_complete(self) -> bool:
        return self._step == TSPStep.FINISHED

    @override
    def current_weight(self) -> float:
        """Tour weight until a vertex is deleted, then the lower bound so far."""
        if self._deleted is None:
            return walk_weight(self._tour)
        return self._lower_bound_so_far()

    def _lower_bound_so_far(self) -> float:
        tree = self._kruskal.current_weight() if self._kruskal is not None else 0.0
        return tree + walk_weight(self._added_back)

    # --- Legal moves ---

    @override
    def legal_vertices(self) -> list[Vertex]:
        if self._step not in (TSPStep.CHOOSING_START_VERTEX, TSPStep.DELETING_VERTEX):
            return []
        return sorted(self._graph.vertices.values(), key=lambda v: v.label)

    @override
    def legal_edges(self) -> list[Edge]:
        match self._step:
            case TSPStep.FINDING_UPPER_BOUND:
                return self._lightest(self._tour_candidates())
            case TSPStep.FINDING_MINIMUM_SPANNING_TREE:
                assert self._kruskal is not None
                return self._kruskal.legal_edges()
            case TSPStep.ADD_BACK_EDGES:
                return self._lightest(self._remaining_deleted())
            case _:
                return []

    def _lightest(self, edges: list[Edge]) -> list[Edge]:
        if not edges:
            return []
        tolerance = config.get_solver_config().weight_tolerance
        lightest = min(edge.weight for edge in edges)
        return sorted(
            (edge for edge in edges if edge.weight <= lightest + tolerance),
            key=self._graph.edge_sort_key,
        )

    def _closing_tour(self) -> bool:
        return len(self._visited) == len(self._graph.vertices)

    def _tour_candidates(self) -> list[Edge]:
        """Non-loop edges from the current vertex to a legal next vertex."""
        assert self._current is not None
        candidates = list[Edge]()
        for edge in self._graph.connected_edges(self._current):
            if edge.is_loop:
                continue
            nxt = edge.traverse(self._current)
            if self._closing_tour():
                if nxt == self._start:
                    candidates.append(edge)
            elif nxt not in self._visited:
                candidates.append(edge)
        return candidates

    def _remaining_deleted(self) -> list[Edge]:
        return [edge for edge in self._deleted_edges if edge not in self._added_back]

    # --- Validation ---

    @override
    def _validate_vertex(self, vertex: Vertex) -> Verdict:
        match self._step:
            case TSPStep.NOT_APPLICABLE:
                return Verdict.reject(ErrorKind.NOT_COMPLETE_EUCLIDEAN)
            case TSPStep.FINISHED:
                return Verdict.reject(ErrorKind.ALREADY_COMPLETE)
            case TSPStep.CHOOSING_START_VERTEX:
                self._choose_start(vertex.id)
                return Verdict.accept()
            case TSPStep.DELETING_VERTEX:
                self._delete(vertex.id)
                return Verdict.accept()
            case _:
                return Verdict.reject(ErrorKind.WRONG_STEP)

    @override
    def _validate_edge(self, edge: Edge) -> Verdict:
        match self._step:
            case TSPStep.NOT_APPLICABLE:
                return Verdict.reject(ErrorKind.NOT_COMPLETE_EUCLIDEAN)
            case TSPStep.FINISHED:
                return Verdict.reject(ErrorKind.ALREADY_COMPLETE)
            case TSPStep.FINDING_UPPER_BOUND:
                return self._validate_tour_edge(edge)
            case TSPStep.FINDING_MINIMUM_SPANNING_TREE:
                return self._validate_tree_edge(edge)
            case TSPStep.ADD_BACK_EDGES:
                return self._validate_add_back(edge)
            case _:
                return Verdict.reject(ErrorKind.WRONG_STEP)

    def _choose_start(self, vertex_id: VertexID) -> None:
        self._start = vertex_id
        self._current = vertex_id
        self._visited = [vertex_id]
        self._step = TSPStep.FINDING_UPPER_BOUND
        if len(self._graph.vertices) == 1:
            self._step = TSPStep.DELETING_VERTEX

    def _validate_tour_edge(self, edge: Edge) -> Verdict:
        assert self._current is not None
        nxt = edge.traverse(self._current)
        if nxt is None:
            return Verdict.reject(ErrorKind.NOT_ADJACENT_EDGE)
        closing = self._closing_tour()
        if edge.is_loop or (nxt != self._start if closing else nxt in self._visited):
            return Verdict.reject(ErrorKind.ALREADY_VISITED)
        if edge not in self._lightest(self._tour_candidates()):
            return Verdict.reject(ErrorKind.NOT_LOWEST_WEIGHT)

        self._tour.append(edge)
        self._current = nxt
        if closing:
            self._step = TSPStep.DELETING_VERTEX
            logger.debug(f"Upper bound {self.upper_bound}")
        else:
            self._visited.append(nxt)
        return Verdict.accept()

    def _delete(self, vertex_id: VertexID) -> None:
        self._deleted = vertex_id
        self._kruskal = KruskalValidator(self._graph.without_vertex(vertex_id))
        self._deleted_edges = [
            edge for edge in self._graph.connected_edges(vertex_id) if not edge.is_loop
        ]
        self._step = TSPStep.FINDING_MINIMUM_SPANNING_TREE
        self._advance_past_tree()

    def _validate_tree_edge(self, edge: Edge) -> Verdict:
        assert self._kruskal is not None
        if not self._kruskal.graph.has_edge(edge.id):
            return Verdict.reject(ErrorKind.DELETED_EDGE)
        verdict = self._kruskal.validate(edge.id)
        # Pending errors are tracked by this session only.
        self._kruskal.clear_error()
        if verdict.accepted:
            self._advance_past_tree()
        return verdict

    def _advance_past_tree(self) -> None:
        assert self._kruskal is not None
        if not self._kruskal.is_complete():
            return
        self._step = TSPStep.ADD_BACK_EDGES
        self._finish_if_added_back()

    def _validate_add_back(self, edge: Edge) -> Verdict:
        if edge in self._added_back:
            return Verdict.reject(ErrorKind.ALREADY_SELECTED)
        if edge not in self._deleted_edges:
            return Verdict.reject(ErrorKind.NOT_DELETED_EDGE)
        if edge not in self._lightest(self._remaining_deleted()):
            return Verdict.reject(ErrorKind.NOT_LOWEST_WEIGHT)
        self._added_back.append(edge)
        self._finish_if_added_back()
        return Verdict.accept()

    def _finish_if_added_back(self) -> None:
        if len(self._added_back) >= min(ADD_BACK_COUNT, len(self._deleted_edges)):
            self._step = TSPStep.FINISHED
            logger.info(f"TSP bounds: upper {self.upper_bound}, lower {self.lower_bound}")
