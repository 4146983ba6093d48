"""
Tool dispatch for the sandbox.

Every tool is reduced to one per-pixel formula, `pixel_value`. The
interactive path evaluates it at the hovered cell and the whole-image path
evaluates it at every cell of the source grid, so the two cannot disagree.

Tool parameters live in `ToolParameters` rather than on the tool itself so
that they survive tool changes (the pen keeps its intensity after switching
to another tool).
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .grid import PIXEL_MAX, PIXEL_MIN, PixelGrid, Region
from .kernel import DEFAULT_KERNEL_PRESET, ConvolutionKernel, get_kernel_preset
from .morphology import StructuringElement

logger = logging.getLogger(__name__)

Coordinate = Tuple[int, int]

DEFAULT_PEN_INTENSITY = 50


class Tool(str, enum.Enum):
    PAINT = "paint"
    COPY = "copy"
    CONVOLVE = "convolve"
    MORPHOLOGY = "morphology"

    @property
    def writes_source(self) -> bool:
        """Paint writes into the grid it reads from; all other tools cross-write."""
        return self is Tool.PAINT


class Target(str, enum.Enum):
    SOURCE = "source"
    DESTINATION = "destination"


@dataclass
class ToolParameters:
    """Configuration of all tools, kept independently of the active tool.

    Attributes:
        pen_intensity: Value written by the paint tool
        kernel: Kernel used by the convolution tool
        structuring_element: Mask and mode used by the morphology tool
    """
    pen_intensity: int = DEFAULT_PEN_INTENSITY
    kernel: ConvolutionKernel = field(default_factory=lambda: get_kernel_preset(DEFAULT_KERNEL_PRESET))
    structuring_element: StructuringElement = field(default_factory=StructuringElement)

    def __post_init__(self) -> None:
        self.set_pen_intensity(self.pen_intensity)

    def set_pen_intensity(self, value: float) -> int:
        """Clamp ``value`` into the pixel range and round half-up; returns the stored intensity."""
        value = float(value)
        if not math.isfinite(value):
            raise ValueError(f"Pen intensity must be finite, got {value}")
        self.pen_intensity = int(math.floor(max(PIXEL_MIN, min(PIXEL_MAX, value)) + 0.5))
        return self.pen_intensity

    def set_kernel(self, kernel: ConvolutionKernel) -> None:
        self.kernel = kernel


@dataclass(frozen=True)
class Highlight:
    """Cells affected by a tool around the hovered coordinate, per grid."""

    source: Tuple[Region, ...] = ()
    destination: Tuple[Region, ...] = ()


@dataclass(frozen=True)
class Preview:
    """Result of one interactive tick.

    Attributes:
        tool: Tool that produced the value
        coordinate: Hovered ``(x, y)`` cell
        value: Output value at the hovered cell (shown even when not committed)
        target: Grid the value is (or would be) written to
        committed: Whether the value was written during this tick
        highlight: Footprint of the tool for outline drawing
    """
    tool: Tool
    coordinate: Coordinate
    value: int
    target: Target
    committed: bool
    highlight: Highlight


def pixel_value(tool: Tool, source: PixelGrid, x: int, y: int, parameters: ToolParameters) -> int:
    """Output value of ``tool`` at ``(x, y)``; pure in the source grid and parameters."""
    if tool is Tool.PAINT:
        return parameters.pen_intensity
    if tool is Tool.COPY:
        return source.get_clamped(x, y)
    if tool is Tool.CONVOLVE:
        return parameters.kernel.sample(source, x, y)
    if tool is Tool.MORPHOLOGY:
        return parameters.structuring_element.sample(source, x, y)
    raise ValueError(f"Unknown tool: {tool!r}")


class ToolEngine:
    """
    Run tools against a source and a destination grid.

    Parameters
    ----------
    parameters:
        Shared tool configuration. The engine reads it on every call, so
        edits take effect on the next sample.
    """

    def __init__(self, parameters: Optional[ToolParameters] = None) -> None:
        self.parameters = parameters if parameters is not None else ToolParameters()

    def target_grid(self, tool: Tool, source: PixelGrid, destination: PixelGrid) -> PixelGrid:
        return source if tool.writes_source else destination

    def preview_value(self, tool: Tool, source: PixelGrid, x: int, y: int) -> int:
        return pixel_value(tool, source, x, y, self.parameters)

    def interact(
        self,
        tool: Tool,
        source: PixelGrid,
        destination: PixelGrid,
        hovered: Optional[Coordinate],
        pressed: bool,
    ) -> Optional[Preview]:
        """
        Evaluate ``tool`` at the hovered cell and commit it while pressed.

        Returns ``None`` when nothing is hovered. Otherwise the returned
        preview carries the computed value, whether it was written, and the
        highlight bounds for the collaborator to draw.
        """
        if hovered is None:
            return None
        x, y = int(hovered[0]), int(hovered[1])
        value = self.preview_value(tool, source, x, y)
        committed = False
        if pressed:
            committed = self.target_grid(tool, source, destination).try_set(x, y, value)
        return Preview(
            tool=tool,
            coordinate=(x, y),
            value=value,
            target=Target.SOURCE if tool.writes_source else Target.DESTINATION,
            committed=committed,
            highlight=self.highlight(tool, source, destination, x, y),
        )

    def apply_to_whole_image(self, tool: Tool, source: PixelGrid, destination: PixelGrid) -> None:
        """
        Apply ``tool`` at every coordinate of the source grid.

        Paint is the exception: it resets the whole source grid to the pen
        intensity instead of writing cell by cell.
        """
        logger.debug("Applying %s to whole %dx%d image", tool.value, source.width, source.height)
        if tool is Tool.PAINT:
            source.reset_to_color(self.parameters.pen_intensity)
            return
        for y in range(source.height):
            for x in range(source.width):
                destination.try_set(x, y, pixel_value(tool, source, x, y, self.parameters))

    def highlight(self, tool: Tool, source: PixelGrid, destination: PixelGrid, x: int, y: int) -> Highlight:
        """Footprint of ``tool`` around ``(x, y)``, clamped to each grid."""
        if tool is Tool.PAINT:
            return Highlight(source=(source.clamp_region(x, y, x, y),))

        dst_cell = (destination.clamp_region(x, y, x, y),)
        if tool is Tool.COPY:
            return Highlight(source=(source.clamp_region(x, y, x, y),), destination=dst_cell)
        if tool is Tool.CONVOLVE:
            kernel = self.parameters.kernel
            window = source.clamp_region(x + kernel.left, y + kernel.up, x + kernel.right, y + kernel.down)
            return Highlight(source=(window,), destination=dst_cell)
        if tool is Tool.MORPHOLOGY:
            regions: List[Region] = [
                source.clamp_region(x + dx, y + dy, x + dx, y + dy)
                for dx, dy in self.parameters.structuring_element.offsets()
            ]
            return Highlight(source=tuple(regions), destination=dst_cell)
        raise ValueError(f"Unknown tool: {tool!r}")
