import random
import sys
from pathlib import Path
from typing import Callable

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
CODE_DIR = ROOT_DIR / "code"
if str(CODE_DIR) not in sys.path:
    sys.path.insert(0, str(CODE_DIR))

from cell_connectivity import connect_cells
from dungeon_config import DungeonConfig
from grid_partitioner import CellGrid, partition


@pytest.fixture
def make_config() -> Callable[..., DungeonConfig]:
    def _make_config(
        *,
        map_width: int = 60,
        map_height: int = 30,
        cells_per_row: int = 3,
        cells_per_col: int = 3,
        **kwargs,
    ) -> DungeonConfig:
        return DungeonConfig(
            map_width=map_width,
            map_height=map_height,
            cells_per_row=cells_per_row,
            cells_per_col=cells_per_col,
            **kwargs,
        )

    return _make_config


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def make_grid(make_config) -> Callable[..., CellGrid]:
    def _make_grid(*, connect: bool = True, seed: int = 7, **kwargs) -> CellGrid:
        grid = partition(make_config(**kwargs))
        if connect:
            connect_cells(grid, random.Random(seed))
        return grid

    return _make_grid
