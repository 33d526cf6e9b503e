"""Shortest distances and all shortest trails between two vertices."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

import networkx as nx

from graphtutor import config, exceptions, metrics

if TYPE_CHECKING:
    from graphtutor.graph import Edge, Graph
    from graphtutor.types import EdgeID, VertexID

__all__ = [
    "PathOracle",
    "shortest_distance",
    "shortest_trails",
]

logger = logging.getLogger(__name__)


class PathOracle:
    """Answers shortest-path questions about one graph snapshot.

    Single-source distances and trail enumerations are cached, so an oracle
    should be reused for repeated questions about the same graph.
    """

    def __init__(self, graph: Graph) -> None:
        self._graph = graph
        self._distances: dict[VertexID, dict[VertexID, float]] = {}
        self._trails: dict[tuple[VertexID, VertexID], list[list[Edge]]] = {}

    @property
    def graph(self) -> Graph:
        return self._graph

    def distances_from(self, source: VertexID) -> dict[VertexID, float]:
        """Dijkstra distances from ``source`` to every reachable vertex."""
        self._graph.vertex(source)
        if source not in self._distances:
            with metrics.timed("paths.dijkstra"):
                self._distances[source] = nx.single_source_dijkstra_path_length(
                    self._graph.to_networkx(), source, weight="weight"
                )
        return self._distances[source]

    def shortest_distance(self, a: VertexID, b: VertexID) -> float | None:
        """Minimum total weight of a walk from a to b, or None if unreachable."""
        self._graph.vertex(b)
        return self.distances_from(a).get(b)

    def shortest_trails(self, a: VertexID, b: VertexID) -> list[list[Edge]]:
        """Every minimum-weight simple edge path from a to b.

        Parallel edges of equal weight give distinct trails. Returns [] when
        b is unreachable and [[]] when a == b.

        Raises:
            TrailLimitError: More than solver.max_trails shortest trails exist.
        """
        key = (a, b)
        if key not in self._trails:
            self._trails[key] = self._enumerate_trails(a, b)
        return [list(trail) for trail in self._trails[key]]

    def shortest_trail_edges(self, a: VertexID, b: VertexID) -> frozenset[EdgeID]:
        """Ids of edges lying on at least one shortest trail from a to b."""
        return frozenset(edge.id for trail in self.shortest_trails(a, b) for edge in trail)

    def on_shortest_trail(self, a: VertexID, b: VertexID, edge_id: EdgeID) -> bool:
        return edge_id in self.shortest_trail_edges(a, b)

    def _enumerate_trails(self, a: VertexID, b: VertexID) -> list[list[Edge]]:
        best = self.shortest_distance(a, b)
        if best is None:
            return []
        if a == b:
            return [[]]

        solver = config.get_solver_config()
        tolerance = solver.weight_tolerance
        # Undirected: distance to b equals distance from b.
        remaining = self.distances_from(b)
        graph = self._graph

        trails: list[list[Edge]] = []
        path: list[Edge] = []
        visited = {a}

        def extend(current: VertexID, weight: float) -> None:
            if current == b:
                if math.isclose(weight, best, rel_tol=0.0, abs_tol=tolerance):
                    trails.append(list(path))
                    if len(trails) > solver.max_trails:
                        raise exceptions.TrailLimitError(
                            f"More than {solver.max_trails} shortest trails between "
                            f"'{graph.label(a)}' and '{graph.label(b)}'"
                        )
                return
            for edge in graph.connected_edges(current):
                nxt = edge.traverse(current)
                if nxt is None or nxt in visited:
                    continue
                to_go = remaining.get(nxt)
                if to_go is None:
                    continue
                new_weight = weight + edge.weight
                if new_weight + to_go > best + tolerance:
                    continue
                visited.add(nxt)
                path.append(edge)
                extend(nxt, new_weight)
                path.pop()
                visited.discard(nxt)

        with metrics.timed("paths.shortest_trails"):
            extend(a, 0.0)
        metrics.count("paths.trails", len(trails))

        logger.debug(
            f"{len(trails)} shortest trail(s) of weight {best} between "
            f"'{graph.label(a)}' and '{graph.label(b)}'"
        )
        return trails


def shortest_distance(graph: Graph, a: VertexID, b: VertexID) -> float | None:
    """One-off convenience wrapper around PathOracle.shortest_distance."""
    return PathOracle(graph).shortest_distance(a, b)


def shortest_trails(graph: Graph, a: VertexID, b: VertexID) -> list[list[Edge]]:
    """One-off convenience wrapper around PathOracle.shortest_trails."""
    return PathOracle(graph).shortest_trails(a, b)
