"""Configuration container for the cell-grid dungeon generator."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from enum import Enum
from typing import Tuple, Union

from dungeon_constants import (
    DEFAULT_DIG_RUN,
    MAX_DIG_STEPS,
    MAX_RANDOM_SEED,
    ROOM_PADDING_EXTRA,
    ROOM_PADDING_FRACTION,
)
from dungeon_errors import ConfigurationError

Seed = Union[int, str]


class CorridorStyle(Enum):
    """How corridors between two connected rooms are carved."""

    ELBOW = "elbow"  # Dominant axis first, then one turn.
    DIG = "dig"  # Random runs biased toward the target, capped at MAX_DIG_STEPS.


class AnchorMode(Enum):
    """Which room point a corridor starts and ends at."""

    CENTER = "center"
    EXITS = "exits"  # Midpoint of the room side facing the neighboring cell.


def room_padding(cell_width: int, cell_height: int) -> int:
    """Minimum wall margin reserved inside a cell around its room."""
    return math.ceil(min(cell_width, cell_height) * ROOM_PADDING_FRACTION) + ROOM_PADDING_EXTRA


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class DungeonConfig:
    """Aggregates all tunable parameters for dungeon generation."""

    map_width: int
    map_height: int
    cells_per_row: int
    cells_per_col: int

    random_seed: Seed | None = None
    # Offset rooms randomly within their cell instead of centering them.
    room_jitter: bool = False
    anchor_mode: AnchorMode = AnchorMode.CENTER
    corridor_style: CorridorStyle = CorridorStyle.ELBOW
    max_dig_steps: int = MAX_DIG_STEPS
    max_dig_run: int = DEFAULT_DIG_RUN
    collect_metrics: bool = False

    def __post_init__(self) -> None:
        for name in ("map_width", "map_height", "cells_per_row", "cells_per_col"):
            value = getattr(self, name)
            if not _is_int(value):
                raise ConfigurationError(f"DungeonConfig {name} must be an integer, got {value!r}")
            if value <= 0:
                raise ConfigurationError(f"DungeonConfig {name} must be positive, got {value}")

        if self.map_width < self.cells_per_row * 2:
            raise ConfigurationError(
                f"DungeonConfig map_width {self.map_width} is too small for {self.cells_per_row} cells per row"
            )
        if self.map_height < self.cells_per_col * 2:
            raise ConfigurationError(
                f"DungeonConfig map_height {self.map_height} is too small for {self.cells_per_col} cells per column"
            )

        cell_width, cell_height = self.cell_size
        padding = room_padding(cell_width, cell_height)
        if cell_width - padding < 1 or cell_height - padding < 1:
            raise ConfigurationError(
                f"Cells of {cell_width}x{cell_height} tiles leave no space for a room after "
                f"{padding} tiles of padding; use a larger map or fewer cells"
            )

        if self.random_seed is not None and (
            isinstance(self.random_seed, bool) or not isinstance(self.random_seed, (int, str))
        ):
            raise ConfigurationError(
                f"DungeonConfig random_seed must be an int, a string or None, got {self.random_seed!r}"
            )

        try:
            self.anchor_mode = AnchorMode(self.anchor_mode)
            self.corridor_style = CorridorStyle(self.corridor_style)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        if not _is_int(self.max_dig_steps) or not (1 <= self.max_dig_steps <= MAX_DIG_STEPS):
            raise ConfigurationError(
                f"DungeonConfig max_dig_steps must lie within [1, {MAX_DIG_STEPS}], got {self.max_dig_steps!r}"
            )
        if not _is_int(self.max_dig_run) or self.max_dig_run < 1:
            raise ConfigurationError(
                f"DungeonConfig max_dig_run must be a positive integer, got {self.max_dig_run!r}"
            )

    @property
    def cell_size(self) -> Tuple[int, int]:
        return self.map_width // self.cells_per_row, self.map_height // self.cells_per_col

    @property
    def cell_count(self) -> int:
        return self.cells_per_row * self.cells_per_col

    def resolve_seed(self) -> Seed:
        """Return the seed for this run, drawing and storing one if none was given."""
        if self.random_seed is None:
            self.random_seed = random.SystemRandom().randint(0, MAX_RANDOM_SEED)
        return self.random_seed

    def make_rng(self) -> random.Random:
        return random.Random(self.resolve_seed())
