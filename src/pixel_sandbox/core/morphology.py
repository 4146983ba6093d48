"""Binary morphology with a 3x3 structuring element."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterator, Sequence, Tuple

import numpy as np

from .grid import PixelGrid


BINARY_THRESHOLD = 127
MASK_SHAPE = (3, 3)


class MorphologyMode(str, enum.Enum):
    EROSION = "erosion"
    DILATION = "dilation"


def cross_mask() -> np.ndarray:
    return np.array(
        [
            [False, True, False],
            [True, True, True],
            [False, True, False],
        ],
        dtype=bool,
    )


def _coerce_mask(mask: Sequence[Sequence[bool]] | np.ndarray) -> np.ndarray:
    array = np.array(mask, dtype=bool)
    if array.shape != MASK_SHAPE:
        raise ValueError(f"Structuring element mask must be 3x3, got shape {array.shape}")
    return array


@dataclass(eq=False)
class StructuringElement:
    """
    Neighbourhood mask and mode for one morphological operation.

    ``mask[dy + 1][dx + 1]`` tells whether the neighbour at offset
    ``(dx, dy)`` takes part. The centre may be left out.
    """

    mask: np.ndarray = field(default_factory=cross_mask)
    mode: MorphologyMode = MorphologyMode.DILATION

    def __post_init__(self) -> None:
        self.mask = _coerce_mask(self.mask)
        self.mode = MorphologyMode(self.mode)

    @property
    def dilation(self) -> bool:
        return self.mode is MorphologyMode.DILATION

    def offsets(self) -> Iterator[Tuple[int, int]]:
        """Yield the included ``(dx, dy)`` offsets in row-major order."""
        for dy in range(-1, 2):
            for dx in range(-1, 2):
                if self.mask[dy + 1, dx + 1]:
                    yield dx, dy

    def is_set(self, dx: int, dy: int) -> bool:
        self._check_offset(dx, dy)
        return bool(self.mask[dy + 1, dx + 1])

    def set_cell(self, dx: int, dy: int, value: bool) -> None:
        self._check_offset(dx, dy)
        self.mask[dy + 1, dx + 1] = bool(value)

    def toggle(self, dx: int, dy: int) -> bool:
        """Flip one mask cell and return its new state."""
        self._check_offset(dx, dy)
        self.mask[dy + 1, dx + 1] = not self.mask[dy + 1, dx + 1]
        return bool(self.mask[dy + 1, dx + 1])

    def set_mode(self, mode: MorphologyMode | str) -> None:
        self.mode = MorphologyMode(mode)

    def sample(self, grid: PixelGrid, x: int, y: int) -> int:
        """
        Compute the binary output at ``(x, y)``.

        Neighbours are binarized with ``value > 127``. Erosion keeps the
        pixel on only if every included neighbour is on, dilation turns it
        on if any included neighbour is on. Returns 255 or 0.
        """
        # erosion starts true and can only be switched off, dilation the reverse
        result = not self.dilation
        for dx, dy in self.offsets():
            on = grid.get_clamped(x + dx, y + dy) > BINARY_THRESHOLD
            if self.dilation:
                result = result or on
            else:
                result = result and on
        return 255 if result else 0

    def copy(self) -> "StructuringElement":
        return StructuringElement(mask=self.mask.copy(), mode=self.mode)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StructuringElement):
            return NotImplemented
        return self.mode is other.mode and bool(np.array_equal(self.mask, other.mask))

    @staticmethod
    def _check_offset(dx: int, dy: int) -> None:
        if not (-1 <= dx <= 1 and -1 <= dy <= 1):
            raise ValueError(f"Mask offset ({dx}, {dy}) outside the 3x3 neighbourhood")
