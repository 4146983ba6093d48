"""
Interactive raster-image transformation sandbox.

The package exposes the grid engine (pixel buffer, convolution kernels,
structuring elements, tool dispatch), a session object that owns the
source and destination grids, and the session file loader.
"""

from .config import SandboxConfig, load_sandbox_config
from .core.grid import PixelGrid, Region
from .core.kernel import (
    ConvolutionKernel,
    get_kernel_preset,
    list_kernel_presets,
    register_kernel_preset,
    unregister_kernel_preset,
)
from .core.morphology import MorphologyMode, StructuringElement
from .core.tools import Highlight, Preview, Target, Tool, ToolEngine, ToolParameters, pixel_value
from .session import SandboxSession
from .settings import get_settings, reset_settings_cache

__all__ = [
    "SandboxConfig",
    "load_sandbox_config",
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
    "SandboxSession",
    "get_settings",
    "reset_settings_cache",
]
