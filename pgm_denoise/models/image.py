from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np

from .errors import ShapeMismatchError


@dataclass
class Image:
    """
    Simple data object: grayscale pixels (+ optional path for bookkeeping).
    Pixels are a flat, row-major uint8 array, index = y * width + x.
    """
    width: int
    height: int
    pixels: np.ndarray # Shape (N,), dtype uint8. N == width * height once validated.
    path: Path | None = None # Source (after load) or destination (before save).

    @property
    def pixel_count(self) -> int:
        return int(self.pixels.size)

    def has_valid_shape(self) -> bool:
        return self.pixel_count == self.width * self.height

    def grid(self) -> np.ndarray:
        """
        Return a (height, width) view of the pixels.
        Raises ShapeMismatchError when the pixel count does not match the dimensions.
        """
        if not self.has_valid_shape():
            raise ShapeMismatchError(self.width, self.height, self.pixel_count, self.path)
        return self.pixels.reshape(self.height, self.width)
