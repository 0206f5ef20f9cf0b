"""Serves as the entry point and initializer for the tile grid viewer."""

import logging
import random
import sys

from PyQt6 import QtWidgets as qtw

import constants
from logging_config import setup_logging
from model.grid import Grid
from model.grid_image_renderer import GridImageRenderer
from model.rule_table import build_example_rule_table
from model.solver import Solver
from view.grid_widget import GridWidget
from view.main_window import MainWindow

logger = logging.getLogger(__name__)


class MainApp(qtw.QApplication):
    """The application initializer and integrator for the tile grid viewer.

    Inherits from PyQt's QApplication. It builds the grid from the configured defaults, the solver that collapses it
    and the window that ticks the solver and shows its progress.
    """

    # The top-level window of the application.
    _main_window: MainWindow

    def __init__(self, argv: list[str]) -> None:
        """Initializes the PyQt application and all application components.

        Args:
            argv: Command line arguments passed to the application (sys.argv).
        """
        super().__init__(argv)

        setup_logging()

        random_seed = random.randint(0, constants.RANDOM_SEED_MAX)
        logger.info("Using random seed %d.", random_seed)

        rule_table = build_example_rule_table(constants.EXAMPLE_RULE_SET_DEFAULT, constants.PALETTE_DEFAULT)
        grid = Grid(
            constants.GRID_WIDTH_DEFAULT, constants.GRID_HEIGHT_DEFAULT, constants.PALETTE_DEFAULT, rule_table
        )
        solver = Solver(grid, random.Random(random_seed), max_backtracks=constants.WFC_MAX_BACKTRACKS_DEFAULT)

        renderer = GridImageRenderer.fitting(
            (grid.width, grid.height), (constants.WINDOW_WIDTH, constants.WINDOW_HEIGHT)
        )
        grid_widget = GridWidget()

        self._main_window = MainWindow(solver, renderer, grid_widget)
        self._main_window.show()


def main() -> int:
    """Runs the viewer until its window is closed."""
    app = MainApp(sys.argv)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
