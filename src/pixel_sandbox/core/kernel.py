"""Linear convolution kernels and the kernel preset registry.

A kernel is a rectangular weighted window around the sampled cell. The
window may be asymmetric (``left``/``up`` are non-positive, ``right``/``down``
non-negative) and the weight matrix always matches the window size.

The module also keeps a registry of named presets. Built-in presets are
registered at import time; additional ones can be added with
`register_kernel_preset`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence

import numpy as np

from .grid import PIXEL_MAX, PIXEL_MIN, PixelGrid

logger = logging.getLogger(__name__)

ZERO_CENTER_BIAS = 127.0


@dataclass(frozen=True, eq=False)
class ConvolutionKernel:
    """
    Weighted window with an optional mid-gray bias.

    Attributes:
        left: Horizontal offset of the first column (``<= 0``)
        right: Horizontal offset of the last column (``>= 0``)
        up: Vertical offset of the first row (``<= 0``)
        down: Vertical offset of the last row (``>= 0``)
        weights: Matrix of shape ``(down - up + 1, right - left + 1)``;
            ``weights[row][col]`` pairs with offset ``(left + col, up + row)``
        zero_centered: Start the accumulator at 127 so signed filters map
            onto mid-gray instead of saturating at 0
    """

    left: int
    right: int
    up: int
    down: int
    weights: np.ndarray = field(repr=False)
    zero_centered: bool = False

    def __post_init__(self) -> None:
        if self.left > 0 or self.right < 0 or self.up > 0 or self.down < 0:
            raise ValueError(
                "Kernel offsets must satisfy left <= 0 <= right and up <= 0 <= down, got "
                f"left={self.left} right={self.right} up={self.up} down={self.down}"
            )
        weights = np.array(self.weights, dtype=np.float64)
        expected = (self.down - self.up + 1, self.right - self.left + 1)
        if weights.shape != expected:
            raise ValueError(f"Kernel weights must have shape {expected}, got {weights.shape}")
        if not np.all(np.isfinite(weights)):
            raise ValueError("Kernel weights must be finite")
        weights.setflags(write=False)
        object.__setattr__(self, "weights", weights)
        object.__setattr__(self, "zero_centered", bool(self.zero_centered))

    @classmethod
    def from_weights(cls, weights: Sequence[Sequence[float]], zero_centered: bool = False) -> "ConvolutionKernel":
        """Build a kernel centred on an odd-sized weight matrix."""
        matrix = np.array(weights, dtype=np.float64)
        if matrix.ndim != 2 or matrix.shape[0] % 2 == 0 or matrix.shape[1] % 2 == 0:
            raise ValueError(f"Centred kernels need an odd-sized 2D weight matrix, got shape {matrix.shape}")
        half_h, half_w = matrix.shape[0] // 2, matrix.shape[1] // 2
        return cls(
            left=-half_w,
            right=half_w,
            up=-half_h,
            down=half_h,
            weights=matrix,
            zero_centered=zero_centered,
        )

    @property
    def size(self) -> tuple[int, int]:
        """``(columns, rows)`` of the window."""
        return self.right - self.left + 1, self.down - self.up + 1

    def sample(self, grid: PixelGrid, x: int, y: int) -> int:
        """
        Compute one output value of the convolution at ``(x, y)``.

        The window may extend past the grid; those cells are read with
        edge replication. The sum is clamped to ``[0, 255]`` and rounded
        half-up.
        """
        total = ZERO_CENTER_BIAS if self.zero_centered else 0.0
        rows, cols = self.weights.shape
        for row in range(rows):
            for col in range(cols):
                total += float(self.weights[row, col]) * grid.get_clamped(
                    x + self.left + col, y + self.up + row
                )
        clamped = min(max(total, float(PIXEL_MIN)), float(PIXEL_MAX))
        return int(math.floor(clamped + 0.5))

    # ------------------------------------------------------------------
    # Editing (always returns a new, consistent kernel)
    # ------------------------------------------------------------------
    def with_weight(self, row: int, col: int, value: float) -> "ConvolutionKernel":
        rows, cols = self.weights.shape
        if not (0 <= row < rows and 0 <= col < cols):
            raise ValueError(f"Weight index ({row}, {col}) outside a {rows}x{cols} kernel")
        weights = self.weights.copy()
        weights[row, col] = float(value)
        return ConvolutionKernel(self.left, self.right, self.up, self.down, weights, self.zero_centered)

    def with_zero_centered(self, zero_centered: bool) -> "ConvolutionKernel":
        return ConvolutionKernel(self.left, self.right, self.up, self.down, self.weights, zero_centered)

    def reshape(self, left: int, right: int, up: int, down: int) -> "ConvolutionKernel":
        """
        Return a kernel with a new window, resizing the weights in one step.

        Weights at offsets present in both windows are kept, new offsets
        start at zero.
        """
        if left > 0 or right < 0 or up > 0 or down < 0:
            raise ValueError(
                "Kernel offsets must satisfy left <= 0 <= right and up <= 0 <= down, got "
                f"left={left} right={right} up={up} down={down}"
            )
        weights = np.zeros((down - up + 1, right - left + 1), dtype=np.float64)
        for dy in range(max(up, self.up), min(down, self.down) + 1):
            for dx in range(max(left, self.left), min(right, self.right) + 1):
                weights[dy - up, dx - left] = self.weights[dy - self.up, dx - self.left]
        return ConvolutionKernel(left, right, up, down, weights, self.zero_centered)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ConvolutionKernel):
            return NotImplemented
        return (
            (self.left, self.right, self.up, self.down, self.zero_centered)
            == (other.left, other.right, other.up, other.down, other.zero_centered)
            and bool(np.array_equal(self.weights, other.weights))
        )


# ---------------------------------------------------------------------------
# Kernel Preset Registry
# ---------------------------------------------------------------------------

KernelFactory = Callable[[], ConvolutionKernel]


def binomial_kernel() -> ConvolutionKernel:
    return ConvolutionKernel.from_weights(
        np.array([[1.0, 2.0, 1.0], [2.0, 4.0, 2.0], [1.0, 2.0, 1.0]]) / 16.0
    )


def vertical_sobel_kernel() -> ConvolutionKernel:
    return ConvolutionKernel.from_weights(
        [[-1.0, 0.0, 1.0], [-2.0, 0.0, 2.0], [-1.0, 0.0, 1.0]], zero_centered=True
    )


def horizontal_sobel_kernel() -> ConvolutionKernel:
    return ConvolutionKernel.from_weights(
        [[1.0, 2.0, 1.0], [0.0, 0.0, 0.0], [-1.0, -2.0, -1.0]], zero_centered=True
    )


def identity_kernel() -> ConvolutionKernel:
    return ConvolutionKernel.from_weights([[1.0]])


def box_kernel() -> ConvolutionKernel:
    return ConvolutionKernel.from_weights(np.full((3, 3), 1.0 / 9.0))


_builtin_presets: Dict[str, KernelFactory] = {
    "binomial": binomial_kernel,
    "vertical-sobel": vertical_sobel_kernel,
    "horizontal-sobel": horizontal_sobel_kernel,
    "identity": identity_kernel,
    "box": box_kernel,
}

_preset_registry: Dict[str, KernelFactory] = dict(_builtin_presets)

DEFAULT_KERNEL_PRESET = "binomial"


def register_kernel_preset(name: str, factory: KernelFactory, *, override: bool = False) -> None:
    """
    Register a named kernel preset.

    Parameters
    ----------
    name : str
        Preset name as used in session files and on the command line.
    factory : KernelFactory
        Zero-argument callable returning a fresh kernel.
    override : bool
        Allow replacing an existing preset. Default False.

    Raises
    ------
    ValueError
        If the name is taken and ``override`` is False.
    """
    if name in _preset_registry and not override:
        raise ValueError(f"Kernel preset '{name}' already registered. Use override=True to replace it.")
    _preset_registry[name] = factory
    logger.debug("Registered kernel preset: %s", name)


def unregister_kernel_preset(name: str) -> bool:
    """Remove a preset; returns False if it was not registered."""
    if name in _preset_registry:
        del _preset_registry[name]
        logger.debug("Unregistered kernel preset: %s", name)
        return True
    return False


def list_kernel_presets() -> List[str]:
    return sorted(_preset_registry)


def get_kernel_preset(name: str) -> ConvolutionKernel:
    try:
        factory = _preset_registry[name]
    except KeyError:
        raise ValueError(
            f"Unknown kernel preset '{name}'. Available: {', '.join(list_kernel_presets())}"
        ) from None
    return factory()


def reset_kernel_presets() -> None:
    """Drop custom presets and restore the built-in ones."""
    _preset_registry.clear()
    _preset_registry.update(_builtin_presets)
