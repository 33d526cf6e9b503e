"""Reference solutions: drive a session with legal moves only."""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING

from graphtutor import exceptions
from graphtutor.kruskal import KruskalValidator
from graphtutor.postman import ChinesePostman
from graphtutor.practical_tsp import PracticalTSP
from graphtutor.prim import PrimValidator
from graphtutor.prim_table import PrimTable
from graphtutor.tsp import TSPBounds

if TYPE_CHECKING:
    from graphtutor.graph import Graph
    from graphtutor.session import AlgorithmSession, Candidate
    from graphtutor.types import Verdict, VertexID

__all__ = [
    "play",
    "solve_kruskal",
    "solve_prim",
    "solve_prim_table",
    "solve_postman",
    "solve_tsp",
    "solve_practical_tsp",
]

logger = logging.getLogger(__name__)


def _require(verdict: Verdict, name: str) -> None:
    if not verdict.accepted:
        raise exceptions.GraphTutorError(f"{name} rejected a legal move: {verdict.error}")


def _feed(session: AlgorithmSession, candidate: Candidate) -> None:
    _require(session.validate(candidate), type(session).__name__)


def play(session: AlgorithmSession) -> AlgorithmSession:
    """Feed the first legal edge until the session completes or runs out of moves.

    A session may stop short of completion when no legal edge is left, e.g. a
    spanning tree of a disconnected graph.
    """
    while not session.is_complete():
        moves = session.legal_edges()
        if not moves:
            logger.debug(f"{type(session).__name__}: no legal edge left")
            break
        _feed(session, moves[0].id)
    return session


def _first_vertex(graph: Graph, start: VertexID | None) -> VertexID:
    if start is not None:
        return start
    if not graph.vertices:
        raise exceptions.GraphError("The graph has no vertices")
    return min(graph.vertices.values(), key=lambda v: v.label).id


def solve_kruskal(graph: Graph) -> KruskalValidator:
    session = KruskalValidator(graph)
    play(session)
    return session


def solve_prim(graph: Graph, start: VertexID | None = None) -> PrimValidator:
    """Prim's tree grown from ``start`` (default: the first vertex by label)."""
    session = PrimValidator(graph)
    _feed(session, _first_vertex(graph, start))
    play(session)
    return session


def solve_prim_table(table: PrimTable, start_row: int = 0) -> PrimTable:
    """Cross off ``start_row`` and keep picking the first lightest open weight.

    Stops early when no open weight is left, i.e. the table describes a
    disconnected graph.
    """
    _require(table.delete_row(start_row), "PrimTable")
    while not table.is_complete():
        cells = table.legal_cells()
        if not cells:
            logger.debug("PrimTable: no open weight left")
            break
        _require(table.choose_weight(*cells[0]), "PrimTable")
    return table


def solve_postman(graph: Graph, start: VertexID | None = None) -> ChinesePostman:
    """An optimal postman route from ``start``, walked through the session.

    Disconnected graphs come back in step NO_SOLUTION, untouched.
    """
    session = ChinesePostman(graph)
    if not session.solver.feasible:
        return session
    origin = _first_vertex(graph, start)
    _feed(session, origin)
    for edge in session.solver.euler_walk(origin):
        _feed(session, edge.id)
    return session


def solve_tsp(
    graph: Graph,
    start: VertexID | None = None,
    delete: VertexID | None = None,
    complete_and_euclidean: bool | None = None,
) -> TSPBounds:
    """Both TSP bounds for the given start and deleted vertices.

    Both default to the first vertex by label. Graphs failing the complete
    and Euclidean gate come back in step NOT_APPLICABLE, untouched.
    """
    session = TSPBounds(graph, complete_and_euclidean)
    if session.legal_vertices():
        _feed(session, _first_vertex(graph, start))
        play(session)
        _feed(session, _first_vertex(graph, delete))
        play(session)
    return session


def solve_practical_tsp(practical: PracticalTSP) -> PracticalTSP:
    """Give every vertex pair a direct edge weighted with its shortest distance.

    Missing edges are added; existing direct edges heavier than the shortest
    route are corrected.
    """
    graph = practical.working_graph
    ordered = sorted(graph.vertices.values(), key=lambda v: v.label)
    for a, b in itertools.combinations(ordered, 2):
        if practical.is_complete():
            break
        distance = practical.shortest_distance(a.id, b.id)
        if distance is None:
            continue
        direct = practical.working_graph.edges_between(a.id, b.id)
        if not direct:
            verdict, edge = practical.add_edge(a.id, b.id)
            if not verdict.accepted or edge is None:
                raise exceptions.GraphTutorError(f"Adding {a.label}-{b.label} rejected")
            direct = [edge]
        pending = {edge.id for edge in practical.unweighted_edges}
        for edge in direct:
            if edge.id in pending or edge.weight != distance:
                verdict = practical.set_edge_weight(edge.id, distance)
                if not verdict.accepted:
                    raise exceptions.GraphTutorError(
                        f"Weight {distance} for {a.label}-{b.label} rejected: {verdict.error}"
                    )
    return practical
