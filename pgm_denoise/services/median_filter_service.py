"""
3x3 median filter for grayscale images.

Borders are clamped: a pixel only looks at the neighbors that exist, so a
corner sees 4 values, an edge 6 and an interior pixel 9. The output value is
sorted[count // 2], i.e. the upper of the two middle values for even counts.
"""
import logging
import numpy as np

from ..models.errors import ShapeMismatchError
from ..models.image import Image

logger = logging.getLogger(__name__)


def neighborhood(grid: np.ndarray, x: int, y: int) -> np.ndarray:
    """
    Values of the 3x3 window centered on (x, y), clipped to the grid.

    Args:
        grid (np.ndarray): (height, width) pixel array.
        x (int): Column.
        y (int): Row.

    Returns:
        np.ndarray: Flat array of 4 to 9 values, center included.
    """
    height, width = grid.shape
    top, bottom = max(y - 1, 0), min(y + 2, height)
    left, right = max(x - 1, 0), min(x + 2, width)
    return grid[top:bottom, left:right].reshape(-1)


def median_filter(width: int, height: int, pixels: np.ndarray) -> np.ndarray:
    """Return a new flat pixel array; *pixels* is left untouched."""
    pixels = np.asarray(pixels, dtype=np.uint8).reshape(-1)
    if pixels.size != width * height:
        raise ShapeMismatchError(width, height, int(pixels.size))

    grid = pixels.reshape(height, width)
    output = np.empty_like(grid)
    for y in range(height):
        for x in range(width):
            values = np.sort(neighborhood(grid, x, y))
            output[y, x] = values[values.size // 2]
    return output.reshape(-1)


class MedianFilterService:
    """Business-level wrapper: Image in, new Image out."""

    def apply(self, img: Image) -> Image:
        grid = img.grid()  # ShapeMismatchError names img.path
        filtered = median_filter(img.width, img.height, grid)
        logger.debug(f"Median filtered {img.width}x{img.height} image {img.path}")
        return Image(width=img.width, height=img.height, pixels=filtered, path=img.path)
