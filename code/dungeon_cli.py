#!/usr/bin/env python3
"""Command-line entry point: generate one map and print it."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from dungeon_config import AnchorMode, CorridorStyle, DungeonConfig
from dungeon_constants import BLANK_FLOOR_CHAR, FLOOR_CHAR
from dungeon_errors import ConfigurationError
from dungeon_generator import DungeonGenerator
from grid_renderer import print_tiles
from log_utils import setup_logging


def parse_seed(value: str) -> int | str:
    """Numeric seeds stay integers so ``--seed 42`` matches ``random_seed=42``."""
    try:
        return int(value)
    except ValueError:
        return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a grid-of-rooms dungeon map and print it as ASCII."
    )
    parser.add_argument("--width", type=int, default=60, help="Map width in tiles (default: 60)")
    parser.add_argument("--height", type=int, default=30, help="Map height in tiles (default: 30)")
    parser.add_argument("--cells-per-row", type=int, default=3, help="Cells across (default: 3)")
    parser.add_argument("--cells-per-col", type=int, default=3, help="Cells down (default: 3)")
    parser.add_argument(
        "--seed",
        type=parse_seed,
        default=None,
        help="Seed for reproducible output; a random one is drawn and printed if omitted",
    )
    parser.add_argument("--jitter", action="store_true", help="Offset rooms randomly inside their cells")
    parser.add_argument(
        "--anchors",
        choices=[mode.value for mode in AnchorMode],
        default=AnchorMode.CENTER.value,
        help="Corridor endpoints: room centers or exits facing the neighbor (default: center)",
    )
    parser.add_argument(
        "--corridors",
        choices=[style.value for style in CorridorStyle],
        default=CorridorStyle.ELBOW.value,
        help="Corridor carving style (default: elbow)",
    )
    parser.add_argument("--blank-floor", action="store_true", help="Draw floor as spaces instead of dots")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, use_color=sys.stderr.isatty())

    try:
        config = DungeonConfig(
            map_width=args.width,
            map_height=args.height,
            cells_per_row=args.cells_per_row,
            cells_per_col=args.cells_per_col,
            random_seed=args.seed,
            room_jitter=args.jitter,
            anchor_mode=AnchorMode(args.anchors),
            corridor_style=CorridorStyle(args.corridors),
        )
    except ConfigurationError as exc:
        parser.error(str(exc))

    seed = config.resolve_seed()
    print(f"Using random seed {seed}")

    result = DungeonGenerator(config).generate()
    print_tiles(result.tiles, floor_char=BLANK_FLOOR_CHAR if args.blank_floor else FLOOR_CHAR)
    return 0


if __name__ == "__main__":
    sys.exit(main())
