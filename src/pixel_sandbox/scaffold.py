"""Session file scaffolding."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml

from .config import DEFAULT_FILL, DEFAULT_HEIGHT, DEFAULT_WIDTH
from .core.kernel import DEFAULT_KERNEL_PRESET, get_kernel_preset
from .core.morphology import MorphologyMode, cross_mask
from .core.tools import DEFAULT_PEN_INTENSITY, Tool


def build_stub(
    session_name: str = "new_session",
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    fill: int = DEFAULT_FILL,
    kernel_preset: str = DEFAULT_KERNEL_PRESET,
    tool: Tool = Tool.PAINT,
) -> dict:
    if width <= 0 or height <= 0:
        raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
    if not 0 <= fill <= 255:
        raise ValueError(f"Fill value must be within [0, 255], got {fill}")
    get_kernel_preset(kernel_preset)
    seed_x, seed_y = min(5, width - 1), min(2, height - 1)
    return {
        "grid": {
            "width": int(width),
            "height": int(height),
            "fill": int(fill),
            "reset_color": int(fill),
        },
        "tools": {
            "active": Tool(tool).value,
            "pen_intensity": DEFAULT_PEN_INTENSITY,
            "kernel": {"preset": kernel_preset},
            "morphology": {
                "mask": cross_mask().tolist(),
                "mode": MorphologyMode.DILATION.value,
            },
        },
        "seed_pixels": [{"x": seed_x, "y": seed_y, "value": 0}],
        "metadata": {"session": session_name},
    }


def write_stub(
    target_path: Path,
    session_name: str = "new_session",
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    fill: int = DEFAULT_FILL,
    kernel_preset: str = DEFAULT_KERNEL_PRESET,
    tool: Optional[Tool] = None,
) -> Path:
    target_path = Path(target_path).resolve()
    target_path.parent.mkdir(parents=True, exist_ok=True)
    stub = build_stub(
        session_name=session_name,
        width=width,
        height=height,
        fill=fill,
        kernel_preset=kernel_preset,
        tool=tool or Tool.PAINT,
    )
    target_path.write_text(yaml.safe_dump(stub, sort_keys=False), encoding="utf-8")
    return target_path
