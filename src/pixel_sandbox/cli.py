"""
Command-line interface for the pixel sandbox.

Usage:
    pixel-sandbox presets
    pixel-sandbox validate path/to/session.yaml
    pixel-sandbox apply [path/to/session.yaml] --tool convolve [--preset vertical-sobel]
    pixel-sandbox scaffold path/to/session.yaml [--width 20] [--height 12]
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

import yaml
from pydantic import ValidationError

from .config import DEFAULT_FILL, DEFAULT_HEIGHT, DEFAULT_WIDTH, SandboxConfig, load_sandbox_config
from .core.kernel import get_kernel_preset, list_kernel_presets
from .core.morphology import MorphologyMode
from .core.tools import Tool
from .scaffold import write_stub
from .session import SandboxSession
from .settings import default_config_path, get_settings

Logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.getLevelName(get_settings().log_level)
    logging.basicConfig(level=level, format="%(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixel-sandbox",
        description="Apply paint, copy, convolution and morphology tools to 8-bit grayscale grids.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("presets", help="List the available convolution kernel presets.")

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a session file and print a summary.",
    )
    validate_parser.add_argument("config", type=Path, help="Path to the session YAML file.")

    apply_parser = subparsers.add_parser(
        "apply",
        help="Apply a tool to the whole image and print both grids.",
    )
    apply_parser.add_argument(
        "config",
        type=Path,
        nargs="?",
        help="Optional session YAML file (defaults to PIXEL_SANDBOX_CONFIG_PATH or built-in defaults).",
    )
    apply_parser.add_argument(
        "--tool",
        choices=[tool.value for tool in Tool],
        default=None,
        help="Tool to apply (defaults to the session's active tool).",
    )
    apply_parser.add_argument("--preset", type=str, help="Kernel preset for the convolve tool.")
    apply_parser.add_argument(
        "--mode",
        choices=[mode.value for mode in MorphologyMode],
        help="Morphology mode for the morphology tool.",
    )
    apply_parser.add_argument("--pen", type=float, help="Pen intensity for the paint tool (0-255).")

    scaffold_parser = subparsers.add_parser(
        "scaffold",
        help="Create a stub session YAML file.",
    )
    scaffold_parser.add_argument("path", type=Path, help="Path where the YAML stub will be written.")
    scaffold_parser.add_argument("--session", type=str, default="new_session", help="Session name metadata.")
    scaffold_parser.add_argument("--width", type=int, default=DEFAULT_WIDTH, help=f"Grid width (default {DEFAULT_WIDTH}).")
    scaffold_parser.add_argument("--height", type=int, default=DEFAULT_HEIGHT, help=f"Grid height (default {DEFAULT_HEIGHT}).")
    scaffold_parser.add_argument("--fill", type=int, default=DEFAULT_FILL, help=f"Initial cell value (default {DEFAULT_FILL}).")
    scaffold_parser.add_argument("--preset", type=str, default="binomial", help="Kernel preset (default binomial).")

    return parser


def summarize_configuration(config_path: Optional[Path], config: SandboxConfig) -> str:
    kernel = config.tools.kernel.to_kernel()
    element = config.tools.morphology.to_structuring_element()
    kernel_desc = config.tools.kernel.preset or "custom"
    lines = [
        f"Configuration: {config_path if config_path is not None else '<defaults>'}",
        f"  Grid: {config.grid.width}x{config.grid.height} | fill {config.grid.fill} | "
        f"reset {config.grid.effective_reset_color}",
        f"  Active tool: {config.tools.active.value}",
        f"  Pen intensity: {config.tools.pen_intensity}",
        f"  Kernel: {kernel_desc} window x[{kernel.left}, {kernel.right}] y[{kernel.up}, {kernel.down}]"
        f" zero-centered={kernel.zero_centered}",
        f"  Morphology: {element.mode.value} with {len(list(element.offsets()))} neighbour(s)",
        f"  Seed pixels: {len(config.seed_pixels)}",
    ]
    return "\n".join(lines)


def _load_config(config_path: Optional[Path]) -> SandboxConfig:
    if config_path is None:
        return SandboxConfig()
    return load_sandbox_config(config_path)


def presets_command(args: argparse.Namespace) -> int:
    for name in list_kernel_presets():
        kernel = get_kernel_preset(name)
        columns, rows = kernel.size
        suffix = " (zero-centered)" if kernel.zero_centered else ""
        print(f"{name}: {columns}x{rows}{suffix}")
    return 0


def validate_command(args: argparse.Namespace) -> int:
    config_path: Path = args.config
    if not config_path.exists():
        Logger.error("Configuration file not found: %s", config_path)
        return 2

    try:
        config = load_sandbox_config(config_path)
        print(summarize_configuration(config_path, config))
        SandboxSession.from_config(config)
    except (ValidationError, ValueError, yaml.YAMLError) as exc:
        Logger.error("Validation failed: %s", exc)
        return 1

    Logger.info("Validation succeeded.")
    return 0


def apply_command(args: argparse.Namespace) -> int:
    config_path: Optional[Path] = args.config or default_config_path()
    if config_path is not None and not config_path.exists():
        Logger.error("Configuration file not found: %s", config_path)
        return 2

    try:
        session = SandboxSession.from_config(_load_config(config_path))
        if args.tool:
            session.select_tool(args.tool)
        if args.preset:
            session.parameters.set_kernel(get_kernel_preset(args.preset))
        if args.mode:
            session.parameters.structuring_element.set_mode(args.mode)
        if args.pen is not None:
            session.parameters.set_pen_intensity(args.pen)
        session.apply_to_whole_image()
    except (ValidationError, ValueError, yaml.YAMLError) as exc:
        Logger.error("Apply failed: %s", exc)
        if Logger.isEnabledFor(logging.DEBUG):
            Logger.exception("Stack trace")
        return 1

    Logger.info("Applied %s to the whole image.", session.tool.value)
    print("Source:")
    print(session.source.format_rows())
    print()
    print("Destination:")
    print(session.destination.format_rows())
    return 0


def scaffold_command(args: argparse.Namespace) -> int:
    try:
        target = write_stub(
            target_path=args.path,
            session_name=args.session,
            width=args.width,
            height=args.height,
            fill=args.fill,
            kernel_preset=args.preset,
        )
    except (OSError, ValueError) as exc:
        Logger.error("Scaffold failed: %s", exc)
        return 1

    Logger.info("Session stub written to %s", target)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "presets":
        return presets_command(args)
    if args.command == "validate":
        return validate_command(args)
    if args.command == "apply":
        return apply_command(args)
    if args.command == "scaffold":
        return scaffold_command(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
