"""Contains the widget that displays the rendered grid image."""

from __future__ import annotations

from typing import TYPE_CHECKING

from PIL.ImageQt import ImageQt
from PyQt6 import QtCore as qtc
from PyQt6 import QtGui as qtg
from PyQt6 import QtWidgets as qtw

if TYPE_CHECKING:
    from PIL import Image


class GridWidget(qtw.QWidget):
    """Displays the most recent grid image, scaled down to fit the widget if necessary."""

    # Label to display the grid image.
    _grid_img_label: qtw.QLabel

    def __init__(self) -> None:
        super().__init__()

        self._grid_img_label = qtw.QLabel()
        self._grid_img_label.setAlignment(qtc.Qt.AlignmentFlag.AlignCenter)

        layout = qtw.QVBoxLayout()
        self.setLayout(layout)
        layout.addWidget(self._grid_img_label)

    def draw_grid_img(self, grid_img: Image.Image) -> None:
        """Converts the PIL Image to a QPixmap and displays it in the label."""
        grid_img_pixmap = qtg.QPixmap.fromImage(ImageQt(grid_img).copy())
        if (
            grid_img_pixmap.width() > self._grid_img_label.width()
            or grid_img_pixmap.height() > self._grid_img_label.height()
        ):
            # One pixel less than the label height, otherwise the label grows by one pixel per draw.
            grid_img_pixmap = grid_img_pixmap.scaled(
                self._grid_img_label.width(),
                self._grid_img_label.height() - 1,
                qtc.Qt.AspectRatioMode.KeepAspectRatio,
            )
        self._grid_img_label.setPixmap(grid_img_pixmap)
