"""Implements the WFC solver loop, advancing one collapse per step and backtracking on contradictions."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from enums import RestrictResult, SolverStatus
from model.propagator import Propagator

if TYPE_CHECKING:
    import random

    from model.grid import Grid

logger = logging.getLogger(__name__)


class Solver:
    """Drives a grid from its initial state to a full tiling, one step per external tick.

    Each step selects an unresolved cell with the lowest entropy, collapses it to a random candidate and propagates the
    change. Right before each collapse a checkpoint is pushed onto the grid's undo journal. When propagation ends in a
    contradiction, the solver pops the most recent checkpoint (which restores every cell changed since), removes the
    value that led to the contradiction from the candidates of the collapsed cell and propagates that narrowing. This
    is repeated, popping further checkpoints as long as contradictions keep occurring. Once a contradiction occurs with
    no checkpoint left, the grid is unsolvable. Exceeding the backtrack limit ends the run with SolverStatus.GAVE_UP
    instead, since a solution may still exist.

    Because every backtrack permanently removes a value from one cell within the context of the checkpoint below it,
    the search is finite and always ends in SolverStatus.RESOLVED or SolverStatus.UNSOLVABLE when no limit is set.

    Attributes:
        status: The current terminal status signal for the host.
        steps_taken: The number of cells collapsed by selection so far (including those undone later).
        backtracks: The number of checkpoints popped so far.
        backtrack_limit_reached: True if the run ended with SolverStatus.GAVE_UP because of 'max_backtracks'.
    """

    status: SolverStatus
    steps_taken: int
    backtracks: int
    backtrack_limit_reached: bool

    # The grid being solved. Exclusively mutated by the solver while a step is in progress.
    _grid: Grid
    # Random source for cell selection tie-breaks and collapses.
    _rng: random.Random
    # Maximum number of checkpoints to pop before giving up (None for an exhaustive search).
    _max_backtracks: int | None
    # Filters cell candidates after every change.
    _propagator: Propagator

    def __init__(self, grid: Grid, rng: random.Random, max_backtracks: int | None = None) -> None:
        """Initializes the solver for a freshly created grid.

        Args:
            grid: The grid to solve.
            rng: The random source for all choices. Pass a seeded 'random.Random' for reproducible runs.
            max_backtracks: Maximum number of checkpoints to pop before giving up with SolverStatus.GAVE_UP. Defaults to
                None, which searches exhaustively.
        """
        self.status = SolverStatus.IN_PROGRESS
        self.steps_taken = 0
        self.backtracks = 0
        self.backtrack_limit_reached = False

        self._grid = grid
        self._rng = rng
        self._max_backtracks = max_backtracks
        self._propagator = Propagator(grid, rng)

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def is_finished(self) -> bool:
        return self.status != SolverStatus.IN_PROGRESS

    def step(self) -> SolverStatus:
        """Performs one collapse-plus-propagation step, including any backtracking it triggers.

        Returns:
            The status after the step. Once a terminal status has been reached, further calls do nothing.
        """
        if self.status != SolverStatus.IN_PROGRESS:
            return self.status

        cell = self._grid.select_minimum_entropy_cell(self._rng)

        if cell is None:
            # No unresolved cell is left. This is only a success if none of them ended in a contradiction.
            if self._grid.has_contradiction():
                self._backtrack()
            else:
                self._finish(SolverStatus.RESOLVED)
            return self.status

        self._grid.push_checkpoint(cell.position)
        self._grid.record(cell)
        chosen_value = cell.collapse(self._rng)
        self.steps_taken += 1
        logger.debug("Step %d: collapsed %s to %#08x.", self.steps_taken, cell.position, chosen_value)

        if not self._propagator.run(cell.position):
            self._backtrack()

        if self.status == SolverStatus.IN_PROGRESS and self._grid.unresolved_count() == 0:
            if self._grid.has_contradiction():
                self._backtrack()
            else:
                self._finish(SolverStatus.RESOLVED)

        return self.status

    def solve(self, max_steps: int | None = None) -> SolverStatus:
        """Calls 'step()' until a terminal status is reached.

        Args:
            max_steps: Optional upper bound on the number of steps taken by this call.

        Returns:
            The status after the last step.
        """
        logger.info("Solving %dx%d grid.", self._grid.width, self._grid.height)
        taken = 0
        while self.status == SolverStatus.IN_PROGRESS and (max_steps is None or taken < max_steps):
            self.step()
            taken += 1
        return self.status

    def _backtrack(self) -> None:
        """Undoes collapses until the grid is consistent again, or marks the grid as unsolvable."""
        while True:
            if self._grid.checkpoint_depth == 0:
                self._finish(SolverStatus.UNSOLVABLE)
                return
            if self._max_backtracks is not None and self.backtracks >= self._max_backtracks:
                self.backtrack_limit_reached = True
                self._finish(SolverStatus.GAVE_UP)
                return

            position, failed_value = self._grid.pop_checkpoint()
            self.backtracks += 1
            logger.debug(
                "Backtrack %d: excluding %#08x at %s (depth %d).",
                self.backtracks,
                failed_value,
                position,
                self._grid.checkpoint_depth,
            )

            # The exclusion is recorded in the checkpoint below, so it is undone together with that checkpoint.
            cell = self._grid.cell_at(*position)
            self._grid.record(cell)
            result = cell.restrict(cell.candidates - {failed_value})

            if result == RestrictResult.EMPTIED:
                continue
            if self._propagator.run(position):
                return

    def _finish(self, status: SolverStatus) -> None:
        self.status = status
        if status == SolverStatus.RESOLVED:
            logger.info("Grid resolved after %d steps and %d backtracks.", self.steps_taken, self.backtracks)
        elif status == SolverStatus.GAVE_UP:
            logger.warning("Gave up on grid after reaching the limit of %d backtracks.", self.backtracks)
        else:
            logger.warning("Grid is unsolvable (%d steps, %d backtracks).", self.steps_taken, self.backtracks)
