"""Chinese Postman: reference T-joins and interactive walk validation.

The solver pairs up odd-degree vertices so that duplicating the shortest
trail of every pair makes the graph Eulerian at minimum extra cost. The
session then checks a user's closed walk edge by edge against every
minimum-weight pairing.
"""

from __future__ import annotations

import collections
import dataclasses
import itertools
import logging
import math
from typing import TYPE_CHECKING, override

import networkx as nx

from graphtutor import config, exceptions, metrics, predicates
from graphtutor.graph import Edge, Graph, walk_weight
from graphtutor.paths import PathOracle
from graphtutor.session import AlgorithmSession
from graphtutor.types import EdgeID, ErrorKind, PostmanStep, Verdict

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from graphtutor.graph import Vertex
    from graphtutor.types import VertexID

__all__ = [
    "double_factorial",
    "build_t_join_graph",
    "enumerate_perfect_matchings",
    "Matching",
    "ChinesePostmanSolver",
    "ChinesePostman",
]

logger = logging.getLogger(__name__)


def double_factorial(n: int) -> int:
    """Product of the positive integers up to n that share its parity.

    ``double_factorial(-1) == double_factorial(0) == 1``. A complete graph on
    k vertices (k even) has ``double_factorial(k - 1)`` perfect matchings.

    Raises:
        ValueError: If n < -1.
    """
    if n < -1:
        raise ValueError(f"double factorial is undefined for {n}")
    return math.prod(range(n, 0, -2))


@dataclasses.dataclass(frozen=True)
class Matching:
    """A perfect matching of the T-join graph.

    Two matchings are equal when they hold the same edges (edges compare by id).
    """

    edges: frozenset[Edge]

    @property
    def weight(self) -> float:
        return walk_weight(self.edges)

    @property
    def pairs(self) -> list[tuple[VertexID, VertexID]]:
        return [edge.endpoints for edge in self.edges]

    def __len__(self) -> int:
        return len(self.edges)


def build_t_join_graph(graph: Graph, oracle: PathOracle | None = None) -> Graph:
    """Complete graph on the odd vertices of ``graph``.

    Each unordered pair of odd vertices gets exactly one edge weighted with
    their shortest distance in ``graph`` (0 when unreachable). The vertices
    are the same Vertex objects as in ``graph``.
    """
    oracle = oracle or PathOracle(graph)
    odd = predicates.odd_vertices(graph)
    edges = list[Edge]()
    for a, b in itertools.combinations(odd, 2):
        distance = oracle.shortest_distance(a.id, b.id)
        edges.append(Edge.create(a.id, b.id, distance if distance is not None else 0.0))
    return Graph(odd, edges)


def _backtrack(t_graph: Graph, uncovered: tuple[VertexID, ...]) -> Iterator[tuple[Edge, ...]]:
    if not uncovered:
        yield ()
        return
    first, rest = uncovered[0], uncovered[1:]
    for i, partner in enumerate(rest):
        others = rest[:i] + rest[i + 1 :]
        for edge in t_graph.edges_between(first, partner):
            for tail in _backtrack(t_graph, others):
                yield (edge, *tail)


def enumerate_perfect_matchings(t_graph: Graph) -> list[Matching]:
    """All perfect matchings of a T-join graph.

    The first uncovered vertex is always the one matched next, so every
    matching is generated once. Enumeration stops after
    ``double_factorial(k - 1)`` distinct matchings for k vertices.

    Raises:
        MatchingLimitError: k exceeds solver.max_odd_vertices.
        GraphError: k is odd, so no perfect matching exists.
    """
    k = len(t_graph.vertices)
    limit = config.get_solver_config().max_odd_vertices
    if k > limit:
        raise exceptions.MatchingLimitError(
            f"{k} odd vertices need {double_factorial(k - 1)} matchings "
            f"(limit is {limit} odd vertices)"
        )
    if k % 2 == 1:
        raise exceptions.GraphError(f"A graph with {k} vertices has no perfect matching")

    expected = double_factorial(k - 1)
    seen = set[frozenset[Edge]]()
    matchings = list[Matching]()
    with metrics.timed("postman.enumerate_matchings"):
        for chosen in _backtrack(t_graph, tuple(t_graph.vertices)):
            edges = frozenset(chosen)
            if edges in seen:
                continue
            seen.add(edges)
            matchings.append(Matching(edges))
            if len(matchings) == expected:
                break
    metrics.count("postman.matchings", len(matchings))
    logger.debug(f"{len(matchings)} perfect matching(s) on {k} odd vertices")
    return matchings


class ChinesePostmanSolver:
    """Reference solution of the Chinese Postman problem for one graph.

    All work happens on construction. A disconnected graph has no solution:
    no T-join is computed, ``candidate_t_joins()`` is empty and the weight
    queries return None.

    Example:
        >>> solver = ChinesePostmanSolver(graph)
        >>> solver.minimum_weight()
        57.0
    """

    def __init__(self, graph: Graph) -> None:
        self._graph = graph
        self._feasible = predicates.is_connected(graph)
        self._odd = predicates.odd_vertices(graph)
        self._oracle = PathOracle(graph)
        self._t_graph: Graph | None = None
        self._matchings = list[Matching]()
        self._candidates = list[Matching]()
        self._duplicable = frozenset[EdgeID]()

        if not self._feasible:
            logger.info("Graph is not connected; the Chinese Postman problem has no solution")
            return

        self._t_graph = build_t_join_graph(graph, self._oracle)
        self._matchings = enumerate_perfect_matchings(self._t_graph)
        tolerance = config.get_solver_config().weight_tolerance
        best = min(matching.weight for matching in self._matchings)
        self._candidates = [
            matching
            for matching in self._matchings
            if math.isclose(matching.weight, best, rel_tol=0.0, abs_tol=tolerance)
        ]
        self._duplicable = frozenset(
            edge.id
            for matching in self._candidates
            for trails in self.pair_trails(matching)
            for trail in trails
            for edge in trail
        )
        logger.debug(
            f"{len(self._odd)} odd vertices, {len(self._candidates)} minimum T-join(s) "
            f"of weight {best}"
        )

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def feasible(self) -> bool:
        return self._feasible

    @property
    def t_join_graph(self) -> Graph | None:
        return self._t_graph

    def odd_vertices(self) -> list[Vertex]:
        return list(self._odd)

    def perfect_matchings(self) -> list[Matching]:
        return list(self._matchings)

    def minimum_weight_matchings(self) -> list[Matching]:
        """Every perfect matching of minimum total weight (ties retained)."""
        return list(self._candidates)

    def candidate_t_joins(self) -> list[Matching]:
        return self.minimum_weight_matchings()

    def t_join_weight(self) -> float | None:
        """Weight of the cheapest T-join, i.e. the cost of repeated edges."""
        if not self._candidates:
            return None
        return self._candidates[0].weight

    def minimum_weight(self) -> float | None:
        """Weight of an optimal postman route: every edge plus the cheapest T-join."""
        t_join = self.t_join_weight()
        if t_join is None:
            return None
        return self._graph.total_weight() + t_join

    def pair_trails(self, matching: Matching) -> list[list[list[Edge]]]:
        """For each pair of the matching, every shortest trail joining it."""
        return [self._oracle.shortest_trails(a, b) for a, b in matching.pairs]

    def can_duplicate(self, edge_id: EdgeID) -> bool:
        """True iff the edge lies on a shortest trail of some candidate T-join pair."""
        return edge_id in self._duplicable

    def walk_matches(self, counts: Mapping[EdgeID, int]) -> bool:
        """True iff traversal counts describe an optimal postman route.

        The counts match when, for some candidate T-join and some choice of
        one shortest trail per pair, edges on the chosen trails were
        traversed twice and every other edge exactly once.
        """
        if not self._feasible:
            return False
        doubled = set[EdgeID]()
        for edge_id in self._graph.edges:
            count = counts.get(edge_id, 0)
            if count == 2:
                doubled.add(edge_id)
            elif count != 1:
                return False

        for matching in self._candidates:
            options = [
                [trail for trail in trails if all(edge.id in doubled for edge in trail)]
                for trails in self.pair_trails(matching)
            ]
            for choice in itertools.product(*options):
                repeated = collections.Counter(edge.id for trail in choice for edge in trail)
                if set(repeated) == doubled and all(n == 1 for n in repeated.values()):
                    return True
        return False

    def euler_walk(self, start: VertexID, matching: Matching | None = None) -> list[Edge]:
        """A closed optimal route from ``start``, as a sequence of graph edges.

        Duplicates the first shortest trail of every pair of ``matching``
        (default: the first candidate T-join) and returns an Eulerian circuit
        of the result.
        """
        self._graph.vertex(start)
        if not self._feasible:
            raise exceptions.GraphError("A disconnected graph has no postman route")
        if not self._graph.edges:
            return []
        matching = matching or self._candidates[0]

        multigraph: nx.MultiGraph[VertexID] = nx.MultiGraph()
        multigraph.add_nodes_from(self._graph.vertices)
        for edge in self._graph.edges.values():
            multigraph.add_edge(edge.start_vertex_id, edge.end_vertex_id, key=(edge.id, 0))
        for trails in self.pair_trails(matching):
            for edge in trails[0]:
                multigraph.add_edge(edge.start_vertex_id, edge.end_vertex_id, key=(edge.id, 1))

        isolated = [vid for vid in self._graph.vertices if multigraph.degree(vid) == 0]
        multigraph.remove_nodes_from(isolated)
        return [
            self._graph.edge(key[0])
            for _u, _v, key in nx.eulerian_circuit(multigraph, source=start, keys=True)
        ]


class ChinesePostman(AlgorithmSession):
    """Checks a user's closed walk against the optimal postman routes.

    The user picks a start vertex, then edges one at a time; each edge must
    touch the current vertex. An edge may be walked a second time only when
    it lies on a shortest trail between a pair of some minimum T-join, and
    never a third time. The walk is finished once its traversal counts match
    any minimum T-join.
    """

    _step: PostmanStep
    _start: VertexID | None
    _current: VertexID | None
    _walk: list[Edge]
    _counts: collections.Counter[EdgeID]

    def __init__(self, graph: Graph) -> None:
        super().__init__(graph)
        self._solver = ChinesePostmanSolver(graph)
        self._reset_state()

    @override
    def _reset_state(self) -> None:
        self._step = PostmanStep.CHOOSE_VERTEX if self._solver.feasible else PostmanStep.NO_SOLUTION
        self._start = None
        self._current = None
        self._walk = []
        self._counts = collections.Counter()

    @property
    def solver(self) -> ChinesePostmanSolver:
        return self._solver

    @property
    def step(self) -> PostmanStep:
        return self._step

    @property
    def start_vertex(self) -> VertexID | None:
        return self._start

    @property
    def current_vertex(self) -> VertexID | None:
        return self._current

    @property
    def walk(self) -> list[Edge]:
        return list(self._walk)

    def traversal_count(self, edge_id: EdgeID) -> int:
        self._graph.edge(edge_id)
        return self._counts[edge_id]

    def odd_vertices(self) -> list[Vertex]:
        return self._solver.odd_vertices()

    def candidate_t_joins(self) -> list[Matching]:
        return self._solver.candidate_t_joins()

    def t_join_weight(self) -> float | None:
        return self._solver.t_join_weight()

    def minimum_weight(self) -> float | None:
        return self._solver.minimum_weight()

    @override
    def is_complete(self) -> bool:
        return self._step == PostmanStep.FINISHED

    @override
    def current_weight(self) -> float:
        return walk_weight(self._walk)

    @override
    def legal_vertices(self) -> list[Vertex]:
        if self._step != PostmanStep.CHOOSE_VERTEX:
            return []
        return sorted(self._graph.vertices.values(), key=lambda v: v.label)

    @override
    def legal_edges(self) -> list[Edge]:
        if self._step != PostmanStep.SELECT_EDGES or self._current is None:
            return []
        return sorted(
            (
                edge
                for edge in self._graph.connected_edges(self._current)
                if self._repeat_error(edge) is None
            ),
            key=self._graph.edge_sort_key,
        )

    @override
    def _validate_vertex(self, vertex: Vertex) -> Verdict:
        match self._step:
            case PostmanStep.NO_SOLUTION:
                return Verdict.reject(ErrorKind.NOT_CONNECTED)
            case PostmanStep.FINISHED:
                return Verdict.reject(ErrorKind.ALREADY_COMPLETE)
            case PostmanStep.SELECT_EDGES:
                return Verdict.reject(ErrorKind.WRONG_STEP)
            case PostmanStep.CHOOSE_VERTEX:
                self._start = vertex.id
                self._current = vertex.id
                self._step = PostmanStep.SELECT_EDGES
                self._check_finished()
                return Verdict.accept()

    @override
    def _validate_edge(self, edge: Edge) -> Verdict:
        match self._step:
            case PostmanStep.NO_SOLUTION:
                return Verdict.reject(ErrorKind.NOT_CONNECTED)
            case PostmanStep.FINISHED:
                return Verdict.reject(ErrorKind.ALREADY_COMPLETE)
            case PostmanStep.CHOOSE_VERTEX:
                return Verdict.reject(ErrorKind.WRONG_STEP)
            case PostmanStep.SELECT_EDGES:
                pass

        assert self._current is not None
        next_vertex = edge.traverse(self._current)
        if next_vertex is None:
            return Verdict.reject(ErrorKind.NOT_ADJACENT_EDGE)
        if (error := self._repeat_error(edge)) is not None:
            return Verdict.reject(error)

        self._walk.append(edge)
        self._counts[edge.id] += 1
        self._current = next_vertex
        self._check_finished()
        return Verdict.accept()

    def _repeat_error(self, edge: Edge) -> ErrorKind | None:
        count = self._counts[edge.id]
        if count == 0:
            return None
        if count == 1:
            return None if self._solver.can_duplicate(edge.id) else ErrorKind.NON_T_JOIN_DUPLICATE
        return ErrorKind.T_JOIN_EDGE_REPEAT

    def _check_finished(self) -> None:
        if self._solver.walk_matches(self._counts):
            self._step = PostmanStep.FINISHED
            logger.info(f"Postman route finished with weight {self.current_weight()}")
