"""Command-line entry point for the CHIP-8 emulator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from pychip8.ui.app import AppConfig, Chip8App
from pychip8.video import PALETTES


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="run.py",
        description="CHIP-8 emulator",
    )
    parser.add_argument(
        "rom",
        type=Path,
        help="Path to the CHIP-8 ROM image",
    )
    parser.add_argument(
        "--scale",
        type=int,
        default=10,
        help="Integer pixel scale factor (default: 10)",
    )
    parser.add_argument(
        "--speed",
        type=int,
        default=700,
        help="Instructions executed per second (default: 700)",
    )
    parser.add_argument(
        "--palette",
        choices=sorted(PALETTES),
        default="mono",
        help="Display colours (default: mono)",
    )
    parser.add_argument(
        "--paused",
        action="store_true",
        help="Start paused; press N to single-step",
    )
    parser.add_argument(
        "--no-debug-panel",
        action="store_true",
        help="Hide the register panel next to the display",
    )
    parser.add_argument(
        "--raw-shift-flag",
        action="store_true",
        help="Store the raw 0x80 bit in VF on 8XYE instead of 0/1",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the CXNN random source",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    if not args.rom.exists():
        parser.error(f"ROM file not found: {args.rom}")
    if args.scale <= 0:
        parser.error("--scale must be positive")
    if args.speed < 0:
        parser.error("--speed must be non-negative")

    config = AppConfig(
        rom_path=args.rom,
        scale=args.scale,
        instructions_per_second=args.speed,
        debug_panel=not args.no_debug_panel,
        start_paused=args.paused,
        palette=PALETTES[args.palette],
        raw_shift_left_flag=args.raw_shift_flag,
        seed=args.seed,
    )
    app = Chip8App(config)
    try:
        app.run()
    except RuntimeError as exc:
        parser.exit(1, f"run.py: {exc}\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
