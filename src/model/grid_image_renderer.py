"""Manages the visual representation of the grid's cell colors."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
from PIL import Image

from model.errors import ConfigurationError

if TYPE_CHECKING:
    from numpy.typing import NDArray


class GridImageRenderer:
    """Converts per-cell color arrays (see 'Grid.render_colors()') into upscaled PIL images.

    Every cell is drawn as a solid square of 'cell_size' x 'cell_size' pixels.

    Attributes:
        cell_size: The side length of a single cell in pixels.
    """

    cell_size: int

    def __init__(self, cell_size: int) -> None:
        """Initializes the renderer.

        Args:
            cell_size: The side length of a single cell in pixels. Must be positive.

        Raises:
            ConfigurationError: If the cell size is not positive.
        """
        self.set_cell_size(cell_size)

    @classmethod
    def fitting(cls, grid_size: tuple[int, int], img_size: tuple[int, int]) -> GridImageRenderer:
        """Creates a renderer whose cells are as large as possible while the whole grid fits into an image size.

        Args:
            grid_size: The (width, height) of the grid in cells.
            img_size: The (width, height) of the available area in pixels.
        """
        return cls(max(1, min(img_size[0] // grid_size[0], img_size[1] // grid_size[1])))

    def set_cell_size(self, cell_size: int) -> None:
        """Sets the side length of a single cell in pixels."""
        if cell_size <= 0:
            raise ConfigurationError(f"Cell size must be positive, got {cell_size}.")
        self.cell_size = cell_size

    def get_grid_img(self, colors: NDArray[np.uint8]) -> Image.Image:
        """Renders a color array into a PIL image.

        Args:
            colors: An array of shape (height, width, 3) holding the (r, g, b) color of each cell.

        Returns:
            An RGB image of (width * cell_size) x (height * cell_size) pixels.
        """
        # colors.shape is (rows, cols) while PIL sizes are (width, height), so the indices have to be swapped.
        img_size = (colors.shape[1] * self.cell_size, colors.shape[0] * self.cell_size)
        grid_img = Image.fromarray(np.ascontiguousarray(colors, dtype=np.uint8))
        return grid_img.resize(img_size, Image.Resampling.NEAREST)

    def save_grid_img(self, grid_img: Image.Image, file_path: str) -> None:
        """Saves a rendered grid image to the given file path."""
        grid_img.save(file_path)
