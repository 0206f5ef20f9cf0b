"""Contains the main window widget class for the tile grid viewer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np
from PyQt6 import QtCore as qtc
from PyQt6 import QtGui as qtg
from PyQt6 import QtWidgets as qtw

import constants

if TYPE_CHECKING:
    from model.grid_image_renderer import GridImageRenderer
    from model.solver import Solver
    from view.grid_widget import GridWidget

logger = logging.getLogger(__name__)


class MainWindow(qtw.QMainWindow):
    """The main window of the viewer.

    Drives the solver with a QTimer, advancing it by exactly one step per tick and redrawing the grid colors after each
    step. The timer stops as soon as the solver reports a terminal status. Keys: Space pauses and resumes, S saves the
    grid (CSV) and its image (PNG), Escape closes the window.
    """

    # The solver whose grid is shown.
    _solver: Solver
    # Converts the grid colors to an image.
    _renderer: GridImageRenderer
    # The widget displaying the grid image.
    _grid_widget: GridWidget
    # Timer issuing one solver step per tick.
    _tick_timer: qtc.QTimer

    def __init__(self, solver: Solver, renderer: GridImageRenderer, grid_widget: GridWidget) -> None:
        """Initializes the main window and starts ticking the solver.

        Args:
            solver: The solver whose grid is shown.
            renderer: Converts the grid colors to an image.
            grid_widget: The widget displaying the grid image.
        """
        super().__init__()

        self._solver = solver
        self._renderer = renderer
        self._grid_widget = grid_widget

        self.resize(constants.WINDOW_WIDTH, constants.WINDOW_HEIGHT)
        self.setWindowTitle("Tile Grid Collapse")
        self.setCentralWidget(self._grid_widget)

        self._tick_timer = qtc.QTimer(self)
        self._tick_timer.setInterval(constants.TICK_INTERVAL_MS)
        self._tick_timer.timeout.connect(self.on_tick)

        self._tick_timer.start()
        self._redraw()

    def on_tick(self) -> None:
        """Advances the solver by one step and redraws the grid."""
        status = self._solver.step()
        self._redraw()
        if self._solver.is_finished:
            self._tick_timer.stop()
            logger.info("Stopped ticking: %s.", status.value)

    def keyPressEvent(self, event: qtg.QKeyEvent | None) -> None:
        """Handles the viewer's keyboard shortcuts."""
        if event is None:
            return
        match event.key():
            case qtc.Qt.Key.Key_Escape:
                self.close()
            case qtc.Qt.Key.Key_Space:
                if self._tick_timer.isActive():
                    self._tick_timer.stop()
                elif not self._solver.is_finished:
                    self._tick_timer.start()
                self._update_status_bar()
            case qtc.Qt.Key.Key_S:
                self.save_grid()
            case _:
                super().keyPressEvent(event)

    def save_grid(self) -> None:
        """Opens file dialogs and saves the tile grid as a .csv file and its image as a .png file."""
        file_path, _ = qtw.QFileDialog.getSaveFileName(self, "Save Tile Grid to...", "grid", "CSV Files (*.csv)")
        if file_path:
            np.savetxt(file_path, self._solver.grid.get_tile_grid(), fmt="%i", delimiter=",")

        file_path, _ = qtw.QFileDialog.getSaveFileName(self, "Save Grid Image to...", "grid", "PNG Files (*.png)")
        if file_path:
            grid_img = self._renderer.get_grid_img(self._solver.grid.render_colors())
            self._renderer.save_grid_img(grid_img, file_path)

    def _redraw(self) -> None:
        """Renders the current grid colors and updates the status bar."""
        self._grid_widget.draw_grid_img(self._renderer.get_grid_img(self._solver.grid.render_colors()))
        self._update_status_bar()

    def _update_status_bar(self) -> None:
        paused = " (paused)" if not self._tick_timer.isActive() and not self._solver.is_finished else ""
        self.statusBar().showMessage(
            f"{self._solver.status.value}{paused} | steps: {self._solver.steps_taken}"
            f" | backtracks: {self._solver.backtracks}"
            f" | unresolved: {self._solver.grid.unresolved_count()}"
        )
