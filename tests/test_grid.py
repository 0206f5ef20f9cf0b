"""Unit tests for the Grid: construction, addressing, selection, rendering and the undo journal."""

from collections import Counter

import numpy as np
import pytest

import constants
from enums import CellState, Direction
from model.errors import ConfigurationError, ContractViolationError, OutOfBoundsError
from model.grid import Grid
from model.rule_table import RuleTable

from conftest import BLUE, GREEN, RED


@pytest.fixture
def grid(palette, unconstrained_rules):
    """A fresh 3x3 grid without constraints."""
    return Grid(3, 3, palette, unconstrained_rules)


def resolve(cell, value, rng):
    """Resolves a cell to a specific value."""
    cell.restrict({value})
    cell.collapse(rng)


class TestGridConstruction:
    """Tests for creating grids and rejecting invalid configurations."""

    def test_every_cell_starts_unresolved(self, grid, palette):
        assert len(grid) == 9
        for cell in grid:
            assert cell.state == CellState.UNRESOLVED
            assert cell.candidates == frozenset(palette)

    def test_cells_know_their_position(self, palette, unconstrained_rules):
        grid = Grid(4, 2, palette, unconstrained_rules)
        for y in range(2):
            for x in range(4):
                assert grid.cell_at(x, y).position == (x, y)

    def test_duplicate_palette_values_are_dropped(self, unconstrained_rules):
        grid = Grid(1, 1, [RED, GREEN, RED], unconstrained_rules)
        assert grid.palette == (RED, GREEN)

    def test_palette_from_sample_array(self):
        sample = np.array([[1, 2], [1, 2]])
        grid = Grid(np.int64(4), np.int64(3), np.unique(sample), RuleTable.from_sample_array(sample))

        assert grid.palette == (1, 2)
        assert all(type(tile_value) is int for tile_value in grid.palette)
        assert (grid.width, grid.height) == (4, 3)
        assert type(grid.width) is int and type(grid.height) is int
        assert grid.cell_at(3, 2).candidates == {1, 2}

    def test_palette_from_generator(self, unconstrained_rules):
        grid = Grid(1, 1, (value for value in [RED, GREEN]), unconstrained_rules)
        assert grid.palette == (RED, GREEN)

    @pytest.mark.parametrize("tile_value", [True, 1.0, "1"])
    def test_non_integer_tile_values_are_rejected(self, tile_value):
        rules = RuleTable.unconstrained([1, tile_value])
        with pytest.raises(ConfigurationError):
            Grid(1, 1, [1, tile_value], rules)

    @pytest.mark.parametrize("width,height", [(0, 3), (3, 0), (-1, 2), (2, -5), (2.0, 2), (True, 2)])
    def test_invalid_dimensions_are_rejected(self, palette, unconstrained_rules, width, height):
        with pytest.raises(ConfigurationError):
            Grid(width, height, palette, unconstrained_rules)

    def test_empty_palette_is_rejected(self, unconstrained_rules):
        with pytest.raises(ConfigurationError):
            Grid(2, 2, [], unconstrained_rules)

    def test_negative_tile_value_is_rejected(self):
        rules = RuleTable.unconstrained([RED, -1])
        with pytest.raises(ConfigurationError):
            Grid(2, 2, [RED, -1], rules)

    def test_rule_table_must_cover_palette(self):
        rules = RuleTable.unconstrained([RED, GREEN])
        with pytest.raises(ConfigurationError):
            Grid(2, 2, [RED, GREEN, BLUE], rules)


class TestAddressing:
    """Tests for bounds-checked access and neighbor addressing."""

    @pytest.mark.parametrize("x,y", [(-1, 0), (0, -1), (3, 0), (0, 3)])
    def test_out_of_bounds_access_raises(self, grid, x, y):
        with pytest.raises(OutOfBoundsError):
            grid.cell_at(x, y)

    def test_out_of_bounds_error_is_an_index_error(self, grid):
        with pytest.raises(IndexError):
            grid.cell_at(5, 5)

    def test_corner_has_two_neighbors(self, grid):
        neighbors = dict(grid.neighbors(0, 0))
        assert set(neighbors) == {Direction.RIGHT, Direction.DOWN}
        assert neighbors[Direction.RIGHT].position == (1, 0)
        assert neighbors[Direction.DOWN].position == (0, 1)

    def test_center_has_four_neighbors(self, grid):
        neighbors = dict(grid.neighbors(1, 1))
        assert neighbors[Direction.LEFT].position == (0, 1)
        assert neighbors[Direction.RIGHT].position == (2, 1)
        assert neighbors[Direction.UP].position == (1, 0)
        assert neighbors[Direction.DOWN].position == (1, 2)


class TestSelectMinimumEntropyCell:
    """Tests for choosing the next cell to collapse."""

    def test_selects_lowest_entropy(self, grid, rng):
        grid.cell_at(2, 1).restrict({RED, GREEN})
        assert grid.select_minimum_entropy_cell(rng) is grid.cell_at(2, 1)

    def test_never_exceeds_other_unresolved_entropy(self, grid, rng):
        grid.cell_at(0, 0).restrict({RED, GREEN})
        grid.cell_at(1, 2).restrict({GREEN, BLUE})
        resolve(grid.cell_at(2, 2), RED, rng)
        for _ in range(50):
            selected = grid.select_minimum_entropy_cell(rng)
            assert selected.state == CellState.UNRESOLVED
            assert selected.entropy() == min(cell.entropy() for cell in grid if cell.is_unresolved)
            assert selected.position in {(0, 0), (1, 2)}

    def test_resolved_and_contradiction_cells_are_excluded(self, palette, unconstrained_rules, rng):
        grid = Grid(3, 1, palette, unconstrained_rules)
        resolve(grid.cell_at(0, 0), RED, rng)
        grid.cell_at(1, 0).restrict(set())
        assert grid.select_minimum_entropy_cell(rng) is grid.cell_at(2, 0)

    def test_ties_are_broken_uniformly(self, palette, unconstrained_rules, rng):
        grid = Grid(3, 1, palette, unconstrained_rules)
        counts = Counter(grid.select_minimum_entropy_cell(rng).position for _ in range(3000))
        assert set(counts) == {(0, 0), (1, 0), (2, 0)}
        for position in counts:
            assert 800 < counts[position] < 1200

    def test_none_when_fully_resolved(self, palette, unconstrained_rules, rng):
        grid = Grid(2, 1, palette, unconstrained_rules)
        for cell in grid:
            cell.collapse(rng)
        assert grid.select_minimum_entropy_cell(rng) is None
        assert grid.is_fully_resolved()
        assert not grid.has_contradiction()

    def test_none_with_contradiction_is_not_success(self, palette, unconstrained_rules, rng):
        grid = Grid(2, 1, palette, unconstrained_rules)
        grid.cell_at(0, 0).collapse(rng)
        grid.cell_at(1, 0).restrict(set())
        assert grid.select_minimum_entropy_cell(rng) is None
        assert grid.has_contradiction()
        assert not grid.is_fully_resolved()
        assert grid.unresolved_count() == 0


class TestRendering:
    """Tests for the color and tile arrays handed to the host."""

    def test_render_colors(self, grid, rng):
        resolve(grid.cell_at(1, 0), GREEN, rng)
        grid.cell_at(2, 2).restrict(set())
        grid.cell_at(0, 1).restrict({RED, BLUE})

        colors = grid.render_colors()

        assert colors.shape == (3, 3, 3)
        assert colors.dtype == np.uint8
        assert tuple(colors[0, 1]) == (0, 255, 0)
        assert tuple(colors[2, 2]) == constants.CONTRADICTION_COLOR_RGB
        assert tuple(colors[1, 0]) == (127, 0, 127)
        assert tuple(colors[0, 0]) == (85, 85, 85)

    def test_get_tile_grid(self, palette, unconstrained_rules, rng):
        grid = Grid(3, 2, palette, unconstrained_rules)
        resolve(grid.cell_at(2, 1), BLUE, rng)

        tile_grid = grid.get_tile_grid()

        assert tile_grid.shape == (2, 3)
        assert tile_grid[1, 2] == BLUE
        assert (tile_grid == constants.UNRESOLVED_TILE_VALUE).sum() == 5


class TestUndoJournal:
    """Tests for checkpoints used by backtracking."""

    def test_pop_restores_recorded_cells(self, grid, rng):
        grid.push_checkpoint((0, 0))
        collapsed = grid.cell_at(0, 0)
        neighbor = grid.cell_at(1, 0)
        grid.record(collapsed)
        value = collapsed.collapse(rng)
        grid.record(neighbor)
        neighbor.restrict({GREEN, BLUE})

        position, failed_value = grid.pop_checkpoint()

        assert position == (0, 0)
        assert failed_value == value
        assert collapsed.state == CellState.UNRESOLVED
        assert collapsed.entropy() == 3
        assert neighbor.entropy() == 3
        assert grid.checkpoint_depth == 0

    def test_first_recorded_state_wins(self, grid, rng):
        cell = grid.cell_at(1, 1)
        grid.push_checkpoint((0, 0))
        grid.record(grid.cell_at(0, 0))
        grid.cell_at(0, 0).collapse(rng)
        grid.record(cell)
        cell.restrict({RED, GREEN})
        grid.record(cell)
        cell.restrict({RED})

        grid.pop_checkpoint()

        assert cell.candidates == {RED, GREEN, BLUE}

    def test_nested_checkpoints(self, grid, rng):
        grid.push_checkpoint((0, 0))
        grid.record(grid.cell_at(0, 0))
        grid.cell_at(0, 0).collapse(rng)
        grid.push_checkpoint((2, 2))
        grid.record(grid.cell_at(2, 2))
        grid.cell_at(2, 2).collapse(rng)

        assert grid.pop_checkpoint()[0] == (2, 2)
        assert grid.cell_at(2, 2).is_unresolved
        assert grid.cell_at(0, 0).is_resolved
        assert grid.checkpoint_depth == 1

    def test_changes_without_checkpoint_are_permanent(self, grid):
        cell = grid.cell_at(0, 0)
        grid.record(cell)
        cell.restrict({RED})
        assert grid.checkpoint_depth == 0
        assert cell.candidates == {RED}

    def test_pop_empty_journal_raises(self, grid):
        with pytest.raises(ContractViolationError):
            grid.pop_checkpoint()
