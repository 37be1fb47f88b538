"""Shared constants for the cell-grid dungeon generator."""

from __future__ import annotations

from dungeon_geometry import Direction

# Grid-adjacent neighbor offsets considered by the connectivity walk.
NEIGHBOR_OFFSETS = tuple(direction.vector for direction in Direction)

# Room sizing: padding = ceil(min(cell_w, cell_h) * PADDING_FRACTION) + PADDING_EXTRA
ROOM_PADDING_FRACTION = 0.1
ROOM_PADDING_EXTRA = 2
ROOM_MIN_DIVISOR = 3  # Smallest room side is cell side // 3.

# Tunnel digging.
MAX_DIG_STEPS = 100  # Hard ceiling; configs may lower it but never raise it.
DEFAULT_DIG_RUN = 3
DIG_KEEP_HEADING_PROBABILITY = 0.7

# Seeds drawn when none is supplied stay small enough to retype.
MAX_RANDOM_SEED = 1_000_000

FLOOR_CHAR = "."
BLANK_FLOOR_CHAR = " "
WALL_CHAR = "#"
UNKNOWN_CHAR = "?"
