"""Sandbox session state: the two grids, the active tool and its parameters."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .config import DEFAULT_FILL, DEFAULT_HEIGHT, DEFAULT_WIDTH, SandboxConfig
from .core.grid import PixelGrid
from .core.kernel import ConvolutionKernel, get_kernel_preset
from .core.morphology import MorphologyMode
from .core.tools import Coordinate, Preview, Tool, ToolEngine, ToolParameters

logger = logging.getLogger(__name__)


@dataclass
class SandboxSession:
    """Represents one interactive sandbox.

    Each grid is owned by the session alone; tools receive them as explicit
    arguments through the engine.

    Attributes:
        source: Grid painted by the user and read by the other tools
        destination: Grid written by copy, convolution and morphology
        tool: Currently active tool
        parameters: Configuration of every tool
        reset_color: Value both grids are filled with by `reset`
    """
    source: PixelGrid
    destination: PixelGrid
    tool: Tool = Tool.PAINT
    parameters: ToolParameters = field(default_factory=ToolParameters)
    reset_color: int = DEFAULT_FILL

    def __post_init__(self) -> None:
        if self.source.shape != self.destination.shape:
            raise ValueError(
                f"Source ({self.source.width}x{self.source.height}) and destination "
                f"({self.destination.width}x{self.destination.height}) grids must have the same size"
            )

    @classmethod
    def create(
        cls,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        fill: int = DEFAULT_FILL,
        parameters: Optional[ToolParameters] = None,
    ) -> "SandboxSession":
        return cls(
            source=PixelGrid(width, height, fill),
            destination=PixelGrid(width, height, fill),
            parameters=parameters if parameters is not None else ToolParameters(),
            reset_color=fill,
        )

    @classmethod
    def from_config(cls, config: Optional[SandboxConfig] = None) -> "SandboxSession":
        """Build a session from a validated configuration (defaults when omitted)."""
        if config is None:
            config = SandboxConfig()
        grid = config.grid
        session = cls(
            source=PixelGrid(grid.width, grid.height, grid.fill),
            destination=PixelGrid(grid.width, grid.height, grid.fill),
            tool=config.tools.active,
            parameters=config.tools.to_parameters(),
            reset_color=grid.effective_reset_color,
        )
        for seed in config.seed_pixels:
            session.source.try_set(seed.x, seed.y, seed.value)
        logger.debug(
            "Created %dx%d session with %d seed pixel(s), active tool %s",
            grid.width,
            grid.height,
            len(config.seed_pixels),
            session.tool.value,
        )
        return session

    # ------------------------------------------------------------------
    # Tool selection and execution
    # ------------------------------------------------------------------
    @property
    def engine(self) -> ToolEngine:
        """Engine bound to the current `parameters` object."""
        return ToolEngine(self.parameters)

    def select_tool(self, tool: Tool | str) -> None:
        self.tool = Tool(tool)

    def tick(self, hovered: Optional[Coordinate], pressed: bool) -> Optional[Preview]:
        """Run the active tool for one interaction step of the collaborator."""
        return self.engine.interact(self.tool, self.source, self.destination, hovered, pressed)

    def apply_to_whole_image(self) -> None:
        self.engine.apply_to_whole_image(self.tool, self.source, self.destination)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self.source.reset_to_color(self.reset_color)
        self.destination.reset_to_color(self.reset_color)

    def copy_destination_to_source(self) -> None:
        self.source.copy_from(self.destination)

    # ------------------------------------------------------------------
    # Parameter edits; each one also activates the tool it belongs to
    # ------------------------------------------------------------------
    def set_pen_intensity(self, value: float) -> int:
        self.tool = Tool.PAINT
        return self.parameters.set_pen_intensity(value)

    def set_kernel(self, kernel: ConvolutionKernel) -> None:
        self.tool = Tool.CONVOLVE
        self.parameters.set_kernel(kernel)

    def use_kernel_preset(self, name: str) -> ConvolutionKernel:
        kernel = get_kernel_preset(name)
        self.set_kernel(kernel)
        return kernel

    def set_kernel_weight(self, row: int, col: int, value: float) -> None:
        self.set_kernel(self.parameters.kernel.with_weight(row, col, value))

    def set_zero_centered(self, zero_centered: bool) -> None:
        self.set_kernel(self.parameters.kernel.with_zero_centered(zero_centered))

    def toggle_mask_cell(self, dx: int, dy: int) -> bool:
        self.tool = Tool.MORPHOLOGY
        return self.parameters.structuring_element.toggle(dx, dy)

    def set_morphology_mode(self, mode: MorphologyMode | str) -> None:
        self.tool = Tool.MORPHOLOGY
        self.parameters.structuring_element.set_mode(mode)
