"""Implements the constraint propagation phase of the WFC algorithm."""

from __future__ import annotations

from collections import deque
import logging
from typing import TYPE_CHECKING

from enums import CellState, RestrictResult

if TYPE_CHECKING:
    import random

    from model.cell import Cell
    from model.grid import Grid

logger = logging.getLogger(__name__)


class Propagator:
    """Filters cell candidates against their neighbors until a fixed point or a contradiction is reached.

    Propagation is driven by an explicit FIFO work queue of positions instead of recursion. A position is queued at most
    once at a time, and only re-queued after one of its neighbors actually changed, so the cascade terminates because
    candidate sets only ever shrink. Every mutation is recorded in the grid's undo journal first, so that the solver can
    roll the whole cascade back when it ends in a contradiction.

    Attributes:
        contradiction_position: The position of the cell that ran out of candidates during the last run, or None.
    """

    contradiction_position: tuple[int, int] | None

    # The grid whose cells are filtered.
    _grid: Grid
    # Random source for collapsing cells that were narrowed down to a single candidate.
    _rng: random.Random

    # Positions waiting to be re-checked, in the order they were queued.
    _queue: deque[tuple[int, int]]
    # The set of positions currently in the queue, used for de-duplication.
    _queued: set[tuple[int, int]]

    def __init__(self, grid: Grid, rng: random.Random) -> None:
        self.contradiction_position = None

        self._grid = grid
        self._rng = rng

        self._queue = deque()
        self._queued = set()

    def run(self, origin: tuple[int, int]) -> bool:
        """Propagates the change of the cell at 'origin' through the grid.

        Args:
            origin: The position of a cell that was just collapsed or narrowed.

        Returns:
            True if propagation reached a fixed point, False if some cell ran out of candidates. In the latter case the
            grid is left in its contradictory state for the caller to roll back.
        """
        self.contradiction_position = None
        self._queue.clear()
        self._queued.clear()

        self._enqueue(origin)
        self._enqueue_neighbors(origin)

        while self._queue:
            position = self._queue.popleft()
            self._queued.discard(position)

            cell = self._grid.cell_at(*position)
            if cell.state != CellState.UNRESOLVED:
                continue

            self._grid.record(cell)
            result = cell.restrict(self._get_supported_candidates(cell))

            match result:
                case RestrictResult.EMPTIED:
                    self.contradiction_position = position
                    logger.debug("Contradiction at %s.", position)
                    self._queue.clear()
                    self._queued.clear()
                    return False
                case RestrictResult.SINGLETON:
                    self._collapse(cell)
                case RestrictResult.NARROWED:
                    self._enqueue_neighbors(position)
                case RestrictResult.UNCHANGED:
                    # A single remaining candidate that survived filtering resolves the cell.
                    if cell.entropy() == 1:
                        self._collapse(cell)

        return True

    def _get_supported_candidates(self, cell: Cell) -> set[int]:
        """Returns the candidates of a cell that are compatible with every existing neighbor.

        A candidate is supported from a direction if at least one of the neighbor's effective values is compatible with
        it in that direction. Each direction is checked independently with its own rules and its own neighbor, and a
        candidate survives only if it is supported from all directions that have a neighbor.
        """
        supported = set(cell.candidates)
        x, y = cell.position
        for direction, neighbor in self._grid.neighbors(x, y):
            neighbor_values = neighbor.effective_values()
            supported = {
                candidate
                for candidate in supported
                if not neighbor_values.isdisjoint(
                    self._grid.rule_table.get_compatible_neighbors(candidate, direction)
                )
            }
            if not supported:
                break
        return supported

    def _collapse(self, cell: Cell) -> None:
        """Resolves a cell with a single candidate left and queues its neighbors."""
        self._grid.record(cell)
        cell.collapse(self._rng)
        self._enqueue_neighbors(cell.position)

    def _enqueue(self, position: tuple[int, int]) -> None:
        if position not in self._queued:
            self._queued.add(position)
            self._queue.append(position)

    def _enqueue_neighbors(self, position: tuple[int, int]) -> None:
        x, y = position
        for _, neighbor in self._grid.neighbors(x, y):
            if neighbor.state == CellState.UNRESOLVED:
                self._enqueue(neighbor.position)
