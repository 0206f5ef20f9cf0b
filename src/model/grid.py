"""Contains the grid of WFC cells and its undo journal."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
import logging
from numbers import Integral
from typing import TYPE_CHECKING

import numpy as np

import constants
from enums import CellState, Direction
from model.cell import Cell
from model.errors import ConfigurationError, ContractViolationError, OutOfBoundsError

if TYPE_CHECKING:
    import random

    from numpy.typing import NDArray

    from model.cell import CellSnapshot
    from model.rule_table import RuleTable

logger = logging.getLogger(__name__)


class Grid:
    """A fixed-size 2D arrangement of cells sharing one rule table.

    The grid owns all of its cells, stored in a flat list indexed by 'y * width + x', and offers bounds-checked access,
    neighbor addressing, minimum-entropy cell selection and color rendering. It also keeps the undo journal used for
    backtracking: a stack of checkpoints, each pushed right before a cell is collapsed by the solver and holding the
    prior state of every cell mutated since then.

    Attributes:
        width: The number of cells per row.
        height: The number of rows.
        palette: The distinct tile values every cell starts with, in the order they were supplied.
        rule_table: The adjacency rules shared by all cells.
    """

    width: int
    height: int
    palette: tuple[int, ...]
    rule_table: RuleTable

    # All cells of the grid, indexed by 'y * width + x'.
    _cells: list[Cell]
    # Stack of journal checkpoints, the most recent one last.
    _checkpoints: list[_Checkpoint]

    def __init__(self, width: int, height: int, full_palette: Iterable[int], rule_table: RuleTable) -> None:
        """Validates the configuration and creates every cell in the unresolved state.

        Args:
            width: The number of cells per row. Must be positive.
            height: The number of rows. Must be positive.
            full_palette: The tile values every cell starts with. Duplicates are dropped. Values must be non-negative
                integers, because -1 marks unresolved cells in exported tile grids.
            rule_table: The adjacency rules. Must contain an entry for every palette value.

        Raises:
            ConfigurationError: If any of the arguments is invalid.
        """
        if not _is_integer(width) or not _is_integer(height) or width <= 0 or height <= 0:
            raise ConfigurationError(f"Grid dimensions must be positive integers, got {width!r} x {height!r}.")
        width = int(width)
        height = int(height)

        full_palette = list(full_palette)
        for tile_value in full_palette:
            if not _is_integer(tile_value) or tile_value < 0:
                raise ConfigurationError(f"Tile values must be non-negative integers, got {tile_value!r}.")
        # numpy integers from sample arrays are stored as plain ints.
        palette = tuple(dict.fromkeys(int(tile_value) for tile_value in full_palette))
        if not palette:
            raise ConfigurationError("The palette must contain at least one tile value.")
        rule_table.validate_palette(palette)

        self.width = width
        self.height = height
        self.palette = palette
        self.rule_table = rule_table

        self._cells = [Cell((index % width, index // width), palette) for index in range(width * height)]
        self._checkpoints = []

        logger.debug("Created %dx%d grid with palette %s.", width, height, [f"{v:#08x}" for v in palette])

    def __iter__(self) -> Iterator[Cell]:
        """Iterates over all cells, row by row."""
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def in_bounds(self, x: int, y: int) -> bool:
        """Checks if (x, y) addresses a cell of the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> Cell:
        """Returns the (mutable) cell at the given position.

        Raises:
            OutOfBoundsError: If the position lies outside of the grid.
        """
        if not self.in_bounds(x, y):
            raise OutOfBoundsError(f"Position ({x}, {y}) is outside of the {self.width}x{self.height} grid.")
        return self._cells[y * self.width + x]

    def neighbors(self, x: int, y: int) -> Iterator[tuple[Direction, Cell]]:
        """Yields (direction, cell) for every existing neighbor of a position.

        Directions pointing off the edge of the grid are skipped, since a missing neighbor does not constrain.
        """
        for direction in Direction:
            dx, dy = direction.to_vector()
            if self.in_bounds(x + dx, y + dy):
                yield direction, self._cells[(y + dy) * self.width + x + dx]

    def select_minimum_entropy_cell(self, rng: random.Random) -> Cell | None:
        """Returns an unresolved cell with the lowest entropy, breaking ties uniformly at random.

        Resolved and contradiction cells are both excluded from the search. A return value of None therefore only
        means that no unresolved cell is left; use 'is_fully_resolved()' or 'has_contradiction()' to find out why.

        Args:
            rng: The random source used for tie-breaking.

        Returns:
            The selected cell, or None if no unresolved cell remains.
        """
        min_entropy = 0
        min_entropy_cells: list[Cell] = []
        for cell in self._cells:
            if cell.state != CellState.UNRESOLVED:
                continue
            entropy = cell.entropy()
            if not min_entropy_cells or entropy < min_entropy:
                min_entropy = entropy
                min_entropy_cells = [cell]
            elif entropy == min_entropy:
                min_entropy_cells.append(cell)

        if not min_entropy_cells:
            return None
        return rng.choice(min_entropy_cells)

    def has_contradiction(self) -> bool:
        """Checks if any cell is in the contradiction state."""
        return any(cell.state == CellState.CONTRADICTION for cell in self._cells)

    def is_fully_resolved(self) -> bool:
        """Checks if every cell holds exactly one tile value."""
        return all(cell.state == CellState.RESOLVED for cell in self._cells)

    def unresolved_count(self) -> int:
        """Returns the number of cells still in the unresolved state."""
        return sum(1 for cell in self._cells if cell.state == CellState.UNRESOLVED)

    def render_colors(self) -> NDArray[np.uint8]:
        """Returns the display color of every cell.

        Returns:
            An array of shape (height, width, 3) holding the (r, g, b) color of each cell, see 'Cell.color_rgb()'.
        """
        colors = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        for cell in self._cells:
            x, y = cell.position
            colors[y, x] = cell.color_rgb()
        return colors

    def get_tile_grid(self) -> NDArray[np.int_]:
        """Returns the resolved tile value of every cell.

        Returns:
            An array of shape (height, width), with constants.UNRESOLVED_TILE_VALUE for cells that are not resolved.
        """
        tile_grid = np.full((self.height, self.width), constants.UNRESOLVED_TILE_VALUE, dtype=np.int_)
        for cell in self._cells:
            if cell.state == CellState.RESOLVED:
                x, y = cell.position
                tile_grid[y, x] = cell.resolved_value
        return tile_grid

    # === UNDO JOURNAL ===

    @property
    def checkpoint_depth(self) -> int:
        """The number of checkpoints that can still be popped."""
        return len(self._checkpoints)

    def push_checkpoint(self, position: tuple[int, int]) -> None:
        """Opens a new checkpoint for a cell that is about to be collapsed.

        The cell itself and every cell changed afterwards must be passed to 'record()' before being mutated.
        """
        self._checkpoints.append(_Checkpoint(position))

    def record(self, cell: Cell) -> None:
        """Saves the state of a cell before it gets mutated.

        Only the first call per cell and checkpoint stores anything, so that popping the checkpoint restores the state
        the cell had when the checkpoint was pushed. Changes made while no checkpoint is open are permanent.
        """
        if not self._checkpoints:
            return
        saved_states = self._checkpoints[-1].saved_states
        x, y = cell.position
        index = y * self.width + x
        if index not in saved_states:
            saved_states[index] = cell.save_state()

    def pop_checkpoint(self) -> tuple[tuple[int, int], int]:
        """Undoes every change recorded since the most recent checkpoint was pushed.

        Returns:
            The position of the cell collapsed right after the checkpoint was pushed and the tile value it had been
            collapsed to.

        Raises:
            ContractViolationError: If there is no checkpoint, or the checkpoint's cell was never collapsed.
        """
        if not self._checkpoints:
            raise ContractViolationError("Cannot pop a checkpoint from an empty journal.")

        checkpoint = self._checkpoints.pop()
        collapsed_cell = self.cell_at(*checkpoint.position)
        if collapsed_cell.state != CellState.RESOLVED or collapsed_cell.resolved_value is None:
            raise ContractViolationError(f"Checkpoint cell {collapsed_cell!r} was never collapsed.")
        chosen_value = collapsed_cell.resolved_value

        for index, saved_state in checkpoint.saved_states.items():
            self._cells[index].load_state(saved_state)

        return checkpoint.position, chosen_value


class _Checkpoint:
    """Journal frame holding the prior states of all cells changed since a collapse."""

    # The position of the cell collapsed right after this checkpoint was pushed.
    position: tuple[int, int]
    # The state each changed cell had when the checkpoint was pushed, keyed by flat cell index.
    saved_states: dict[int, CellSnapshot]

    def __init__(self, position: tuple[int, int]) -> None:
        self.position = position
        self.saved_states = {}


def _is_integer(value: object) -> bool:
    """Checks if a value is an integer (including numpy integer types), excluding booleans."""
    return isinstance(value, Integral) and not isinstance(value, bool)
