"""
Canvas - the owned RGBA pixel buffer every operation reads and writes.
"""

from typing import Sequence, Tuple

import numpy as np


RGBA = Tuple[int, int, int, int]
Size = Tuple[int, int]


class Canvas:
    """
    Rectangular grid of RGBA pixels.

    Pixels are stored as a C-contiguous ``(height, width, 4)`` uint8 array in
    RGBA channel order. A canvas is never empty: width and height are >= 1.
    Operations produce new canvases instead of sharing buffers.
    """

    __slots__ = ("_pixels",)

    def __init__(self, pixels: np.ndarray):
        """
        Wrap an RGBA pixel array.

        Args:
            pixels: Array of shape (height, width, 4) and dtype uint8

        Raises:
            ValueError: If the array has the wrong shape, dtype or zero area
        """
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"Canvas needs an (h, w, 4) array, got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"Canvas needs uint8 pixels, got {pixels.dtype}")
        if pixels.shape[0] < 1 or pixels.shape[1] < 1:
            raise ValueError(
                f"Canvas must be at least 1x1, got {pixels.shape[1]}x{pixels.shape[0]}"
            )

        self._pixels = np.ascontiguousarray(pixels)

    @classmethod
    def blank(cls, width: int, height: int, color: Sequence[int] = (0, 0, 0, 0)) -> "Canvas":
        """Create a canvas filled with one colour (fully transparent by default)."""
        if width < 1 or height < 1:
            raise ValueError(f"Canvas must be at least 1x1, got {width}x{height}")
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:] = _as_rgba(color)
        return cls(pixels)

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return int(self._pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self._pixels.shape[0])

    @property
    def size(self) -> Size:
        """Dimensions as (width, height)."""
        return self.width, self.height

    @property
    def is_opaque(self) -> bool:
        """True if every pixel has alpha 255."""
        return bool(np.all(self._pixels[:, :, 3] == 255))

    def get_pixel(self, x: int, y: int) -> RGBA:
        r, g, b, a = self._pixels[y, x]
        return int(r), int(g), int(b), int(a)

    def set_pixel(self, x: int, y: int, color: Sequence[int]) -> None:
        self._pixels[y, x] = _as_rgba(color)

    def copy(self) -> "Canvas":
        return Canvas(self._pixels.copy())

    def __eq__(self, other) -> bool:
        if not isinstance(other, Canvas):
            return NotImplemented
        return self.size == other.size and np.array_equal(self._pixels, other._pixels)

    def __repr__(self) -> str:
        return f"Canvas({self.width}x{self.height})"


def _as_rgba(color: Sequence[int]) -> RGBA:
    if len(color) == 3:
        return int(color[0]), int(color[1]), int(color[2]), 255
    if len(color) == 4:
        return int(color[0]), int(color[1]), int(color[2]), int(color[3])
    raise ValueError(f"Colour needs 3 or 4 channels, got {len(color)}")
