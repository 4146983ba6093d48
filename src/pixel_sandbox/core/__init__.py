"""Numeric grid engine: pixel buffer, operators and tool dispatch."""

from .grid import PixelGrid, Region
from .kernel import (
    ConvolutionKernel,
    get_kernel_preset,
    list_kernel_presets,
    register_kernel_preset,
    unregister_kernel_preset,
)
from .morphology import MorphologyMode, StructuringElement
from .tools import Highlight, Preview, Target, Tool, ToolEngine, ToolParameters, pixel_value

__all__ = [
    "PixelGrid",
    "Region",
    "ConvolutionKernel",
    "get_kernel_preset",
    "list_kernel_presets",
    "register_kernel_preset",
    "unregister_kernel_preset",
    "MorphologyMode",
    "StructuringElement",
    "Highlight",
    "Preview",
    "Target",
    "Tool",
    "ToolEngine",
    "ToolParameters",
    "pixel_value",
]
