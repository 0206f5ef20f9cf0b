"""Contains all global enumeration classes used throughout the project."""

from __future__ import annotations

from enum import Enum


class CellState(Enum):
    """Defines the knowledge state of a single grid cell."""

    UNRESOLVED = "Unresolved"
    """The cell still holds a non-empty set of candidate tile values."""
    RESOLVED = "Resolved"
    """Exactly one tile value has been fixed for the cell."""
    CONTRADICTION = "Contradiction"
    """Filtering emptied the candidate set before the cell was resolved. Only left by backtracking."""


class RestrictResult(Enum):
    """Defines the outcomes of intersecting a cell's candidates with a new set of allowed tile values."""

    UNCHANGED = 0
    """No candidate was removed. Propagation does not continue past this cell."""
    NARROWED = 1
    """At least one candidate was removed and more than one remains."""
    SINGLETON = 2
    """Exactly one candidate remains. The caller is expected to collapse the cell."""
    EMPTIED = 3
    """No candidate remains. The cell is now in the contradiction state."""


class SolverStatus(Enum):
    """Defines the terminal status signal reported to the host after each step."""

    IN_PROGRESS = "In Progress"
    """At least one cell is still unresolved and the search has not been exhausted."""
    RESOLVED = "Fully Resolved"
    """Every cell holds exactly one tile value."""
    UNSOLVABLE = "Unsolvable"
    """A contradiction occurred and every backtracking option has been exhausted."""
    GAVE_UP = "Gave Up"
    """The backtrack limit was reached before the search could finish. The grid may still be solvable."""


class ExampleRuleSet(Enum):
    """Defines predefined rule tables for the three-color default palette."""

    UNCONSTRAINED = "Unconstrained"
    """Every tile permits every tile in every direction."""
    NO_RED_NEXT_TO_BLUE = "No Red Next To Blue"
    """Red and blue tiles are mutually exclusive as neighbors in every direction."""
    HORIZONTAL_BANDS = "Horizontal Bands"
    """Horizontal neighbors must match, producing full-width bands of a single color."""


class Direction(Enum):
    """Defines the cardinal directions used for tile adjacency."""

    LEFT = 0
    """Left direction."""
    RIGHT = 1
    """Right direction."""
    UP = 2
    """Upward direction."""
    DOWN = 3
    """Downward direction."""

    def reverse(self) -> Direction:
        """Returns the opposite direction of the current direction."""
        match self:
            case Direction.LEFT:
                return Direction.RIGHT
            case Direction.RIGHT:
                return Direction.LEFT
            case Direction.UP:
                return Direction.DOWN
            case Direction.DOWN:
                return Direction.UP

    def to_vector(self) -> tuple[int, int]:
        """Returns the (dx, dy) offset for the direction, with y growing downwards."""
        match self:
            case Direction.LEFT:
                return (-1, 0)
            case Direction.RIGHT:
                return (1, 0)
            case Direction.UP:
                return (0, -1)
            case Direction.DOWN:
                return (0, 1)
