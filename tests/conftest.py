"""Shared pytest fixtures for the tile grid model tests."""

import random

import pytest

from enums import ExampleRuleSet
from model.rule_table import RuleTable, TileRule, build_example_rule_table

RED = 0xFF0000
GREEN = 0x00FF00
BLUE = 0x0000FF


class FirstChoiceRandom(random.Random):
    """Scripted random source that always picks the first element of a sequence."""

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def rng():
    """Seeded random source for reproducible runs."""
    return random.Random(1234)


@pytest.fixture
def first_choice_rng():
    """Scripted random source that always picks the first option."""
    return FirstChoiceRandom()


@pytest.fixture
def palette():
    """The three-color default palette."""
    return (RED, GREEN, BLUE)


@pytest.fixture
def unconstrained_rules(palette):
    """Every tile permits every tile in every direction."""
    return RuleTable.unconstrained(palette)


@pytest.fixture
def exclusive_rules(palette):
    """Red and blue may never be neighbors."""
    return build_example_rule_table(ExampleRuleSet.NO_RED_NEXT_TO_BLUE, palette)


@pytest.fixture
def matching_rules(palette):
    """Horizontal neighbors must hold the same tile."""
    return build_example_rule_table(ExampleRuleSet.HORIZONTAL_BANDS, palette)


@pytest.fixture
def blue_then_red_rules():
    """Two-tile rules whose only horizontal pair is blue on the left of red.

    Solvable on a 2x1 grid (blue, red), unsolvable on any row of three or more cells.
    """
    both = frozenset({RED, BLUE})
    return RuleTable(
        {
            RED: TileRule(left=frozenset({BLUE}), right=frozenset({RED}), up=both, down=both),
            BLUE: TileRule(left=frozenset({BLUE}), right=frozenset({RED}), up=both, down=both),
        }
    )
