"""
Fixed-size 8-bit grayscale pixel buffer.

The grid is the only mutable image type of the sandbox. Reads outside the
grid are resolved by edge replication (``get_clamped``), writes outside the
grid are rejected with a boolean result (``try_set``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np


PIXEL_MIN = 0
PIXEL_MAX = 255


def _check_pixel_value(value: int) -> int:
    value = int(value)
    if not PIXEL_MIN <= value <= PIXEL_MAX:
        raise ValueError(f"Pixel value must be within [{PIXEL_MIN}, {PIXEL_MAX}], got {value}")
    return value


@dataclass(frozen=True)
class Region:
    """Inclusive rectangle of cell indices, ``(x0, y0)`` to ``(x1, y1)``."""

    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0 + 1

    @property
    def height(self) -> int:
        return self.y1 - self.y0 + 1

    def cells(self) -> Iterator[Tuple[int, int]]:
        for y in range(self.y0, self.y1 + 1):
            for x in range(self.x0, self.x1 + 1):
                yield x, y


class PixelGrid:
    """
    Row-major grid of ``width * height`` intensity values in ``[0, 255]``.

    Parameters
    ----------
    width, height:
        Grid dimensions in cells. Both must be positive and never change.
    fill:
        Initial value of every cell.
    """

    def __init__(self, width: int, height: int, fill: int = 0) -> None:
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self._width = int(width)
        self._height = int(height)
        self._pixels = np.full((self._height, self._width), _check_pixel_value(fill), dtype=np.uint8)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "PixelGrid":
        """Build a grid from equally sized rows of pixel values."""
        data = np.asarray(rows)
        if data.ndim != 2 or data.size == 0:
            raise ValueError("Rows must form a non-empty rectangular 2D sequence")
        if not np.array_equal(data, np.round(data)):
            raise ValueError("Pixel values must be integers")
        if data.min() < PIXEL_MIN or data.max() > PIXEL_MAX:
            raise ValueError(f"Pixel values must be within [{PIXEL_MIN}, {PIXEL_MAX}]")
        grid = cls(data.shape[1], data.shape[0])
        grid._pixels[:, :] = data.astype(np.uint8)
        return grid

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def shape(self) -> Tuple[int, int]:
        """``(width, height)`` of the grid."""
        return self._width, self._height

    def to_array(self) -> np.ndarray:
        """Return a copy of the buffer with shape ``(height, width)``."""
        return self._pixels.copy()

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def get(self, x: int, y: int) -> int:
        """Return the value at an already validated coordinate."""
        return int(self._pixels[y, x])

    def get_optional(self, x: int, y: int) -> Optional[int]:
        if not self.contains(x, y):
            return None
        return int(self._pixels[y, x])

    def get_clamped(self, x: int, y: int) -> int:
        """
        Return the value at ``(x, y)`` with both coordinates clamped to the grid.

        In other words the image is extended at its edges.
        """
        x = min(max(int(x), 0), self._width - 1)
        y = min(max(int(y), 0), self._height - 1)
        return int(self._pixels[y, x])

    def clamp_region(self, x0: int, y0: int, x1: int, y1: int) -> Region:
        """Clamp the corners of an inclusive rectangle to the grid."""
        return Region(
            x0=min(max(int(x0), 0), self._width - 1),
            y0=min(max(int(y0), 0), self._height - 1),
            x1=min(max(int(x1), 0), self._width - 1),
            y1=min(max(int(y1), 0), self._height - 1),
        )

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def try_set(self, x: int, y: int, value: int) -> bool:
        """
        Set the value at ``(x, y)`` if it is a valid index.

        Returns whether the value was written. Out-of-range coordinates leave
        the grid untouched; out-of-range values raise ``ValueError``.
        """
        value = _check_pixel_value(value)
        if not self.contains(x, y):
            return False
        self._pixels[y, x] = value
        return True

    def reset_to_color(self, value: int) -> None:
        """Set every cell to ``value``."""
        self._pixels.fill(_check_pixel_value(value))

    def copy_from(self, other: "PixelGrid") -> None:
        """Copy every cell of ``other``, which must have the same dimensions."""
        if other.shape != self.shape:
            raise ValueError(
                f"Cannot copy a {other.width}x{other.height} grid into a "
                f"{self._width}x{self._height} grid"
            )
        np.copyto(self._pixels, other._pixels)

    # ------------------------------------------------------------------
    def format_rows(self, separator: str = " ") -> str:
        """Render the grid as right-aligned text rows (used by the CLI)."""
        return "\n".join(
            separator.join(f"{int(value):3d}" for value in row) for row in self._pixels
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PixelGrid):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._pixels, other._pixels))

    def __repr__(self) -> str:
        return f"PixelGrid(width={self._width}, height={self._height})"
