"""Command-line entry point for the Python CHIP-8 interpreter."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.loader import ROM_EXTENSIONS, has_rom_extension
from pychip8.ui.app import AppConfig, Chip8App
from pychip8.video import PALETTES, resolve_palette


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 interpreter (Python)",
    )
    parser.add_argument(
        "--rom",
        type=Path,
        required=True,
        help=f"Path to the CHIP-8 ROM image ({', '.join(ROM_EXTENSIONS)})",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Integer window scale factor (default: 10)",
    )
    parser.add_argument(
        "--speed",
        type=int,
        default=10,
        help="Instructions executed per frame (default: 10)",
    )
    parser.add_argument(
        "--fullscreen",
        action="store_true",
        help="Launch the emulator in fullscreen mode",
    )
    parser.add_argument(
        "--palette",
        default="mono",
        help=f"Display colours: {', '.join(PALETTES)} or OFF,ON hex pair such as 000000,33ff66 (default: mono)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.speed <= 0:
        parser.error("--speed must be positive")
    try:
        palette = resolve_palette(args.palette)
    except ValueError as exc:
        parser.error(str(exc))
    if not has_rom_extension(args.rom):
        print(f"run.py: warning: {args.rom.name} has no CHIP-8 ROM extension", file=sys.stderr)

    config = AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        speed=args.speed,
        fullscreen=args.fullscreen,
        palette=palette,
    )
    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
