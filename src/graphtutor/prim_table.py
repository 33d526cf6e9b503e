"""Prim's algorithm worked on a distance table instead of a drawing."""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from graphtutor import config, exceptions
from graphtutor.types import ErrorKind, PrimTableStep, Verdict

if TYPE_CHECKING:
    from collections.abc import Sequence

    from graphtutor.graph import Graph

__all__ = ["PrimTable"]

logger = logging.getLogger(__name__)

type Cell = tuple[int, int]


def _validate_matrix(
    labels: tuple[str, ...], weights: Sequence[Sequence[float | None]]
) -> tuple[tuple[float | None, ...], ...]:
    n = len(labels)
    if n == 0:
        raise exceptions.InvalidMatrixError("A distance table needs at least one vertex")
    if len(set(labels)) != n:
        raise exceptions.InvalidMatrixError(f"Duplicate row labels in {list(labels)}")
    if len(weights) != n or any(len(row) != n for row in weights):
        raise exceptions.InvalidMatrixError(f"Expected a {n}x{n} table for {n} labels")

    table = tuple(tuple(row) for row in weights)
    for i, row in enumerate(table):
        for j, weight in enumerate(row):
            if i == j or weight is None:
                continue
            if not math.isfinite(weight) or weight < 0:
                raise exceptions.InvalidMatrixError(
                    f"Weight {weight} between '{labels[i]}' and '{labels[j]}' is not a distance"
                )
            if table[j][i] != weight:
                raise exceptions.InvalidMatrixError(
                    f"Table is not symmetric: '{labels[i]}'-'{labels[j]}' is {weight} "
                    f"but '{labels[j]}'-'{labels[i]}' is {table[j][i]}"
                )
    return table


class PrimTable:
    """Prim's algorithm on a symmetric distance table.

    The user crosses off one row, which opens that vertex's column. Every
    following move picks a weight from an open column in a row that is not
    crossed off yet, and it must be the lightest such weight. The pick joins
    the row's vertex to the tree, crosses off its row and opens its column.
    The table is finished after n - 1 picks.

    Diagonal cells are ignored and None marks a missing edge.
    """

    def __init__(self, labels: Sequence[str], weights: Sequence[Sequence[float | None]]) -> None:
        self._labels = tuple(labels)
        self._weights = _validate_matrix(self._labels, weights)
        self.reset()

    @classmethod
    def from_graph(cls, graph: Graph) -> PrimTable:
        """Table of the lightest direct edge between each pair, rows ordered by label."""
        ordered = sorted(graph.vertices.values(), key=lambda v: v.label)
        weights = [
            [
                None
                if a.id == b.id
                else min((e.weight for e in graph.edges_between(a.id, b.id)), default=None)
                for b in ordered
            ]
            for a in ordered
        ]
        return cls([v.label for v in ordered], weights)

    def reset(self) -> None:
        self._crossed = list[int]()
        self._picks = list[Cell]()
        self._error: ErrorKind | None = None
        self._step = PrimTableStep.DELETE_ROW

    # --- Queries ---

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    @property
    def step(self) -> PrimTableStep:
        return self._step

    @property
    def size(self) -> int:
        return len(self._labels)

    def weight(self, row: int, column: int) -> float | None:
        self._check_cell(row, column)
        return self._weights[row][column]

    @property
    def crossed_off_rows(self) -> list[int]:
        """Crossed-off rows in order. Their columns are the open ones."""
        return list(self._crossed)

    @property
    def picks(self) -> list[Cell]:
        """Accepted cells as (row, column), in order."""
        return list(self._picks)

    @property
    def tree(self) -> list[tuple[str, str, float]]:
        """Accepted picks as (tree vertex, new vertex, weight)."""
        return [
            (self._labels[column], self._labels[row], self._cell_weight(row, column))
            for row, column in self._picks
        ]

    def available_cells(self) -> list[Cell]:
        """Weights the user may pick from, lightest first."""
        if self._step != PrimTableStep.SELECT_WEIGHTS:
            return []
        cells = [
            (row, column)
            for column in self._crossed
            for row in range(self.size)
            if row not in self._crossed and self._weights[row][column] is not None
        ]
        return sorted(cells, key=lambda cell: (self._cell_weight(*cell), cell))

    def legal_cells(self) -> list[Cell]:
        """The lightest available cells (ties are all legal)."""
        cells = self.available_cells()
        if not cells:
            return []
        lightest = self._cell_weight(*cells[0])
        return [cell for cell in cells if self._is_lightest(self._cell_weight(*cell), lightest)]

    def current_weight(self) -> float:
        return math.fsum(self._cell_weight(row, column) for row, column in self._picks)

    def is_complete(self) -> bool:
        return self._step == PrimTableStep.FINISHED

    def error_state(self) -> ErrorKind | None:
        return self._error

    # --- Moves ---

    def delete_row(self, row: int) -> Verdict:
        """Cross off the first row, choosing the vertex the tree grows from."""
        self._check_cell(row, row)
        if self._step == PrimTableStep.FINISHED:
            return self._reject(ErrorKind.ALREADY_COMPLETE)
        if self._step != PrimTableStep.DELETE_ROW:
            return self._reject(ErrorKind.WRONG_STEP)

        self._crossed.append(row)
        self._step = PrimTableStep.FINISHED if self.size == 1 else PrimTableStep.SELECT_WEIGHTS
        self._error = None
        logger.debug(f"PrimTable: crossed off row {self._labels[row]}")
        return Verdict.accept()

    def choose_weight(self, row: int, column: int) -> Verdict:
        """Pick the weight in (row, column), joining the row's vertex to the tree."""
        self._check_cell(row, column)
        if self._step == PrimTableStep.FINISHED:
            return self._reject(ErrorKind.ALREADY_COMPLETE)
        if self._step != PrimTableStep.SELECT_WEIGHTS:
            return self._reject(ErrorKind.WRONG_STEP)
        if column not in self._crossed:
            return self._reject(ErrorKind.NOT_CONNECTED_EDGE)
        if row in self._crossed:
            return self._reject(ErrorKind.CYCLE)
        weight = self._weights[row][column]
        if weight is None:
            return self._reject(ErrorKind.EMPTY_CELL)
        legal = self.legal_cells()
        if not self._is_lightest(weight, self._cell_weight(*legal[0])):
            return self._reject(ErrorKind.NOT_LOWEST_WEIGHT)

        self._picks.append((row, column))
        self._crossed.append(row)
        self._error = None
        logger.debug(f"PrimTable: picked {self._labels[column]}-{self._labels[row]} ({weight})")
        if len(self._picks) == self.size - 1:
            self._step = PrimTableStep.FINISHED
            logger.info(f"PrimTable: finished with weight {self.current_weight()}")
        return Verdict.accept()

    # --- Internals ---

    def _check_cell(self, row: int, column: int) -> None:
        if not (0 <= row < self.size and 0 <= column < self.size):
            raise exceptions.InvalidMatrixError(
                f"Cell ({row}, {column}) is outside the {self.size}x{self.size} table"
            )

    def _cell_weight(self, row: int, column: int) -> float:
        weight = self._weights[row][column]
        if weight is None:
            raise exceptions.InvalidMatrixError(f"Cell ({row}, {column}) is empty")
        return weight

    def _is_lightest(self, weight: float, lightest: float) -> bool:
        tolerance = config.get_solver_config().weight_tolerance
        return weight <= lightest + tolerance

    def _reject(self, error: ErrorKind) -> Verdict:
        self._error = error
        logger.debug(f"PrimTable: rejected {error}")
        return Verdict.reject(error)
