"""Manages tile adjacency rules for the WFC algorithm."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from enums import Direction, ExampleRuleSet
from model.errors import ConfigurationError, UnknownTileError

if TYPE_CHECKING:
    from numpy.typing import NDArray


@dataclass(frozen=True)
class TileRule:
    """Immutable adjacency rule for a single tile value.

    Each field holds the tile values permitted in the neighboring cell in that direction.
    """

    left: frozenset[int]
    right: frozenset[int]
    up: frozenset[int]
    down: frozenset[int]

    @classmethod
    def from_directions(cls, permitted: Mapping[Direction, Iterable[int]]) -> TileRule:
        """Creates a rule from a direction mapping. Directions missing from the mapping permit nothing."""
        return cls(
            left=frozenset(permitted.get(Direction.LEFT, ())),
            right=frozenset(permitted.get(Direction.RIGHT, ())),
            up=frozenset(permitted.get(Direction.UP, ())),
            down=frozenset(permitted.get(Direction.DOWN, ())),
        )

    @classmethod
    def uniform(cls, permitted: Iterable[int]) -> TileRule:
        """Creates a rule that permits the same tile values in all four directions."""
        permitted = frozenset(permitted)
        return cls(left=permitted, right=permitted, up=permitted, down=permitted)

    def permitted(self, direction: Direction) -> frozenset[int]:
        """Returns the tile values permitted next to this tile in the given direction."""
        match direction:
            case Direction.LEFT:
                return self.left
            case Direction.RIGHT:
                return self.right
            case Direction.UP:
                return self.up
            case Direction.DOWN:
                return self.down


class RuleTable:
    """Immutable mapping from tile value to its adjacency rule.

    Besides storing the rules as given, the table precalculates for every tile value and direction the set of
    neighbor values that are compatible with it. Two tiles are compatible in a direction only if both of their rules
    agree: the neighbor must be permitted by the tile's rule in that direction, and the tile must be permitted by the
    neighbor's rule in the opposite direction. Permitted values that have no entry in the table can never be placed
    and are therefore left out of the compatible sets.
    """

    # The rule of each tile value, as supplied at construction.
    _rules: dict[int, TileRule]
    # For each (tile value, direction), the neighbor values that may legally be placed there.
    _compatible_neighbors: dict[tuple[int, Direction], frozenset[int]]

    def __init__(self, rules: Mapping[int, TileRule]) -> None:
        """Stores the rules and precalculates the compatible neighbor sets.

        Args:
            rules: Maps every tile value to its adjacency rule.

        Raises:
            ConfigurationError: If the mapping is empty.
        """
        if not rules:
            raise ConfigurationError("A rule table needs at least one tile rule.")

        self._rules = dict(rules)
        self._compatible_neighbors = {}
        for tile_value, rule in self._rules.items():
            for direction in Direction:
                self._compatible_neighbors[tile_value, direction] = frozenset(
                    neighbor_value
                    for neighbor_value in rule.permitted(direction)
                    if neighbor_value in self._rules
                    and tile_value in self._rules[neighbor_value].permitted(direction.reverse())
                )

    @classmethod
    def unconstrained(cls, palette: Iterable[int]) -> RuleTable:
        """Creates a rule table in which every tile permits every tile in every direction."""
        palette = frozenset(palette)
        return cls({tile_value: TileRule.uniform(palette) for tile_value in palette})

    @classmethod
    def from_sample_array(cls, sample_array: NDArray[np.int_]) -> RuleTable:
        """Extracts allowed tile adjacencies directly from a 2D sample array of tile values.

        A tile permits exactly those tiles that occur directly next to it at least once, in the respective direction,
        somewhere in the sample array.

        Args:
            sample_array: A 2D array of tile values, indexed [row, col].

        Returns:
            The rule table describing the adjacencies found in the sample.

        Raises:
            ConfigurationError: If the sample is not a non-empty 2D array.
        """
        if sample_array.ndim != 2 or sample_array.size == 0:
            raise ConfigurationError(f"Sample array must be a non-empty 2D array, got shape {sample_array.shape}.")

        permitted: dict[int, dict[Direction, set[int]]] = {}
        rows, cols = sample_array.shape
        for row in range(rows):
            for col in range(cols):
                tile_value = int(sample_array[row, col])
                tile_permitted = permitted.setdefault(tile_value, {direction: set() for direction in Direction})
                for direction in Direction:
                    dx, dy = direction.to_vector()
                    neighbor_row = row + dy
                    neighbor_col = col + dx
                    if 0 <= neighbor_row < rows and 0 <= neighbor_col < cols:
                        tile_permitted[direction].add(int(sample_array[neighbor_row, neighbor_col]))

        return cls(
            {tile_value: TileRule.from_directions(directions) for tile_value, directions in permitted.items()}
        )

    @property
    def tile_values(self) -> frozenset[int]:
        """All tile values that have a rule in this table."""
        return frozenset(self._rules)

    def __contains__(self, tile_value: object) -> bool:
        return tile_value in self._rules

    def __len__(self) -> int:
        return len(self._rules)

    def get_rule(self, tile_value: int) -> TileRule:
        """Returns the adjacency rule of a tile value.

        Raises:
            UnknownTileError: If the table has no entry for the tile value.
        """
        try:
            return self._rules[tile_value]
        except KeyError:
            raise UnknownTileError(f"No adjacency rule for tile value {tile_value!r}.") from None

    def get_compatible_neighbors(self, tile_value: int, direction: Direction) -> frozenset[int]:
        """Returns all tile values that can legally be placed next to a tile in the given direction.

        Raises:
            UnknownTileError: If the table has no entry for the tile value.
        """
        try:
            return self._compatible_neighbors[tile_value, direction]
        except KeyError:
            raise UnknownTileError(f"No adjacency rule for tile value {tile_value!r}.") from None

    def is_compatible(self, tile_value: int, neighbor_value: int, direction: Direction) -> bool:
        """Checks if 'neighbor_value' may be placed next to 'tile_value' in the given direction."""
        return neighbor_value in self.get_compatible_neighbors(tile_value, direction)

    def validate_palette(self, palette: Iterable[int]) -> None:
        """Checks that the table is total over a palette.

        Raises:
            ConfigurationError: If any palette value has no rule.
        """
        missing = sorted(set(palette) - self._rules.keys())
        if missing:
            raise ConfigurationError(f"Rule table has no entries for palette values {missing}.")


def build_example_rule_table(example: ExampleRuleSet, palette: Iterable[int]) -> RuleTable:
    """Builds one of the predefined rule tables for a palette.

    For ExampleRuleSet.NO_RED_NEXT_TO_BLUE, the first and the last palette value are the mutually exclusive pair
    (red and blue in the default palette).

    Args:
        example: The predefined rule set to build.
        palette: The ordered palette of tile values the table has to cover.

    Returns:
        A rule table that is total over the palette.

    Raises:
        ConfigurationError: If the palette is too small for the requested rule set.
    """
    palette = list(dict.fromkeys(palette))
    if not palette:
        raise ConfigurationError("The palette must contain at least one tile value.")

    match example:
        case ExampleRuleSet.UNCONSTRAINED:
            return RuleTable.unconstrained(palette)

        case ExampleRuleSet.NO_RED_NEXT_TO_BLUE:
            if len(palette) < 2:
                raise ConfigurationError(f"{example.value} needs at least two palette values.")
            first, last = palette[0], palette[-1]
            rules = {}
            for tile_value in palette:
                excluded = {last} if tile_value == first else {first} if tile_value == last else set()
                rules[tile_value] = TileRule.uniform(value for value in palette if value not in excluded)
            return RuleTable(rules)

        case ExampleRuleSet.HORIZONTAL_BANDS:
            return RuleTable(
                {
                    tile_value: TileRule(
                        left=frozenset({tile_value}),
                        right=frozenset({tile_value}),
                        up=frozenset(palette),
                        down=frozenset(palette),
                    )
                    for tile_value in palette
                }
            )
