"""Contains the class representing the WFC state of a single grid cell."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import constants
from enums import CellState, RestrictResult
from model.errors import ContractViolationError

if TYPE_CHECKING:
    import random

# (state, candidates, resolved value) as captured by Cell.save_state().
CellSnapshot = tuple[CellState, frozenset[int], int | None]


def tile_value_to_rgb(tile_value: int) -> tuple[int, int, int]:
    """Unpacks a packed 0xRRGGBB tile value into its (r, g, b) channels."""
    return (tile_value >> 16) & 0xFF, (tile_value >> 8) & 0xFF, tile_value & 0xFF


class Cell:
    """Represents the knowledge state of a single grid position.

    A cell is in exactly one of three states, stored as an explicit tag:

    - Unresolved: 'candidates' is a non-empty set of tile values, there is no resolved value.
    - Resolved: 'resolved_value' holds the single tile value of the cell, 'candidates' is empty.
    - Contradiction: filtering removed the last candidate before the cell was resolved. Both this state and Resolved
      report an entropy of 0, so callers must check 'state' to tell them apart.

    The candidate set is stored as an immutable frozenset which is replaced (never mutated) on every change, so saved
    states can share it without copying.

    Attributes:
        position: The fixed (x, y) grid coordinates of the cell.
        state: The current state tag of the cell.
        candidates: The tile values still considered possible (empty unless unresolved).
        resolved_value: The final tile value if the cell is resolved, otherwise None.
    """

    position: tuple[int, int]
    state: CellState
    candidates: frozenset[int]
    resolved_value: int | None

    def __init__(self, position: tuple[int, int], full_palette: Iterable[int]) -> None:
        """Creates an unresolved cell whose candidates are the distinct values of the palette."""
        self.position = position
        self.state = CellState.UNRESOLVED
        self.candidates = frozenset(full_palette)
        self.resolved_value = None

    def __repr__(self) -> str:
        if self.state == CellState.RESOLVED:
            detail = f"value={self.resolved_value:#08x}"
        else:
            detail = f"candidates={sorted(self.candidates)}"
        return f"Cell({self.position}, {self.state.name}, {detail})"

    @property
    def is_unresolved(self) -> bool:
        return self.state == CellState.UNRESOLVED

    @property
    def is_resolved(self) -> bool:
        return self.state == CellState.RESOLVED

    @property
    def is_contradiction(self) -> bool:
        return self.state == CellState.CONTRADICTION

    def entropy(self) -> int:
        """Returns the number of candidates if unresolved, otherwise 0."""
        if self.state == CellState.UNRESOLVED:
            return len(self.candidates)
        return 0

    def effective_values(self) -> frozenset[int]:
        """Returns the values this cell may still take, as seen by its neighbors.

        This is the candidate set of an unresolved cell, or the singleton set of a resolved cell's value, so that
        resolved neighbors keep constraining open cells during propagation. A contradiction cell has no values.
        """
        if self.state == CellState.RESOLVED:
            return frozenset((self.resolved_value,))
        return self.candidates

    def collapse(self, rng: random.Random) -> int:
        """Resolves the cell to one of its candidates, chosen uniformly at random.

        Candidates are sorted before choosing, which makes the outcome depend on the random generator's state only
        (and not on set iteration order).

        Args:
            rng: The random source used for the choice.

        Returns:
            The chosen tile value.

        Raises:
            ContractViolationError: If the cell is not unresolved.
        """
        if self.state != CellState.UNRESOLVED or not self.candidates:
            raise ContractViolationError(f"Cannot collapse {self!r}.")

        chosen_value = rng.choice(sorted(self.candidates))
        self.state = CellState.RESOLVED
        self.resolved_value = chosen_value
        self.candidates = frozenset()
        return chosen_value

    def restrict(self, allowed_values: Iterable[int]) -> RestrictResult:
        """Intersects the candidates with the allowed values.

        The candidate set only ever shrinks. When no candidate is left, the cell transitions to the contradiction
        state. When exactly one candidate is left, the cell stays unresolved and the caller is responsible for
        collapsing it.

        Args:
            allowed_values: The tile values that remain admissible for this cell.

        Returns:
            How the candidate set changed.

        Raises:
            ContractViolationError: If the cell is not unresolved.
        """
        if self.state != CellState.UNRESOLVED:
            raise ContractViolationError(f"Cannot restrict {self!r}.")

        remaining = self.candidates.intersection(allowed_values)
        if len(remaining) == len(self.candidates):
            return RestrictResult.UNCHANGED

        self.candidates = remaining
        if not remaining:
            self.state = CellState.CONTRADICTION
            return RestrictResult.EMPTIED
        if len(remaining) == 1:
            return RestrictResult.SINGLETON
        return RestrictResult.NARROWED

    def save_state(self) -> CellSnapshot:
        """Captures the state of the cell so that it can be restored by 'load_state()'."""
        return self.state, self.candidates, self.resolved_value

    def load_state(self, snapshot: CellSnapshot) -> None:
        """Restores a state previously captured by 'save_state()'."""
        self.state, self.candidates, self.resolved_value = snapshot

    def color_rgb(self) -> tuple[int, int, int]:
        """Returns the display color of the cell.

        Resolved cells show the color of their tile value, unresolved cells the per-channel mean over all candidates,
        and contradiction cells the reserved contradiction color. This is a display aid only.
        """
        match self.state:
            case CellState.RESOLVED:
                assert self.resolved_value is not None
                return tile_value_to_rgb(self.resolved_value)
            case CellState.CONTRADICTION:
                return constants.CONTRADICTION_COLOR_RGB
            case CellState.UNRESOLVED:
                channel_sums = [0, 0, 0]
                for candidate in self.candidates:
                    for channel, value in enumerate(tile_value_to_rgb(candidate)):
                        channel_sums[channel] += value
                count = len(self.candidates)
                return channel_sums[0] // count, channel_sums[1] // count, channel_sums[2] // count
