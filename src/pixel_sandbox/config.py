"""
Configuration models and loader for sandbox sessions.

A session file is a YAML document describing the grid size, the initial
tool configuration and optional seed pixels. Pixel images themselves are
never stored.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, conint, field_validator, model_validator

from .core.kernel import ConvolutionKernel, get_kernel_preset
from .core.morphology import MorphologyMode, StructuringElement, cross_mask
from .core.tools import DEFAULT_PEN_INTENSITY, Tool, ToolParameters


PixelValue = conint(ge=0, le=255)
PositiveInt = conint(gt=0)

DEFAULT_WIDTH = 20
DEFAULT_HEIGHT = 12
DEFAULT_FILL = 180


class GridConfig(BaseModel):
    """Dimensions and colors of the source and destination grids."""

    width: PositiveInt = Field(default=DEFAULT_WIDTH, description="Grid width in cells")
    height: PositiveInt = Field(default=DEFAULT_HEIGHT, description="Grid height in cells")
    fill: PixelValue = Field(default=DEFAULT_FILL, description="Initial value of every cell")
    reset_color: Optional[PixelValue] = Field(
        default=None, description="Value used by the reset action (defaults to fill)"
    )

    @property
    def effective_reset_color(self) -> int:
        return self.fill if self.reset_color is None else self.reset_color


class KernelConfig(BaseModel):
    """
    Convolution kernel, either a named preset or an explicit window.

    Explicit kernels list ``weights`` row by row; offsets default to a
    window centred on the sampled cell.
    """

    preset: Optional[str] = Field(default=None, description="Name of a registered kernel preset")
    left: Optional[int] = None
    right: Optional[int] = None
    up: Optional[int] = None
    down: Optional[int] = None
    weights: Optional[List[List[float]]] = None
    zero_centered: Optional[bool] = Field(
        default=None, description="Override the preset's zero-centering (explicit kernels default to False)"
    )

    @model_validator(mode="after")
    def _require_one_source(self) -> "KernelConfig":
        if (self.preset is None) == (self.weights is None):
            raise ValueError("Exactly one of preset or weights must be provided")
        # building the kernel checks the preset name and the window shape
        self.to_kernel()
        return self

    def to_kernel(self) -> ConvolutionKernel:
        if self.preset is not None:
            kernel = get_kernel_preset(self.preset)
            if self.zero_centered is not None:
                kernel = kernel.with_zero_centered(self.zero_centered)
            return kernel

        zero_centered = bool(self.zero_centered)
        offsets = (self.left, self.right, self.up, self.down)
        if all(value is None for value in offsets):
            return ConvolutionKernel.from_weights(self.weights, zero_centered=zero_centered)
        if any(value is None for value in offsets):
            raise ValueError("Explicit kernel offsets need all of left, right, up and down")
        return ConvolutionKernel(
            left=self.left,
            right=self.right,
            up=self.up,
            down=self.down,
            weights=self.weights,
            zero_centered=zero_centered,
        )


class MorphologyConfig(BaseModel):
    """3x3 structuring element and mode."""

    mask: List[List[bool]] = Field(default_factory=lambda: cross_mask().tolist())
    mode: MorphologyMode = MorphologyMode.DILATION

    @field_validator("mask")
    @classmethod
    def _validate_mask(cls, value: List[List[bool]]) -> List[List[bool]]:
        if len(value) != 3 or any(len(row) != 3 for row in value):
            raise ValueError("Morphology mask must be 3x3")
        return value

    def to_structuring_element(self) -> StructuringElement:
        return StructuringElement(mask=self.mask, mode=self.mode)


class ToolsConfig(BaseModel):
    """Initial tool selection and parameters."""

    active: Tool = Tool.PAINT
    pen_intensity: PixelValue = DEFAULT_PEN_INTENSITY
    kernel: KernelConfig = Field(default_factory=lambda: KernelConfig(preset="binomial"))
    morphology: MorphologyConfig = Field(default_factory=MorphologyConfig)

    def to_parameters(self) -> ToolParameters:
        return ToolParameters(
            pen_intensity=self.pen_intensity,
            kernel=self.kernel.to_kernel(),
            structuring_element=self.morphology.to_structuring_element(),
        )


class SeedPixel(BaseModel):
    """A source pixel set after the grid is filled."""

    x: conint(ge=0)
    y: conint(ge=0)
    value: PixelValue


class SandboxConfig(BaseModel):
    """Top-level configuration object for a sandbox session."""

    grid: GridConfig = Field(default_factory=GridConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    seed_pixels: List[SeedPixel] = Field(
        default_factory=lambda: [SeedPixel(x=5, y=2, value=0)],
        description="Source pixels set on startup",
    )
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Optional metadata for bookkeeping")

    @model_validator(mode="after")
    def _seeds_inside_grid(self) -> "SandboxConfig":
        for seed in self.seed_pixels:
            if seed.x >= self.grid.width or seed.y >= self.grid.height:
                raise ValueError(
                    f"Seed pixel ({seed.x}, {seed.y}) lies outside the "
                    f"{self.grid.width}x{self.grid.height} grid"
                )
        return self


def load_sandbox_config(path: Union[str, Path]) -> SandboxConfig:
    """
    Load and validate a session YAML file.

    Parameters
    ----------
    path:
        Path to the YAML file.

    Returns
    -------
    SandboxConfig
        Parsed and validated configuration object.
    """

    config_path = Path(path).resolve()
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        raw_data = yaml.safe_load(handle) or {}

    if not isinstance(raw_data, dict):
        raise ValueError("Configuration file must define a mapping at the top level")
    return SandboxConfig.model_validate(raw_data)
