"""DungeonGenerator runs the partition, connect, place, and carve pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from time import perf_counter
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Tuple, TypeVar

from cell_connectivity import connect_cells, verify_spanning_tree
from corridor_router import route_corridors
from dungeon_config import AnchorMode, DungeonConfig, Seed
from dungeon_errors import InvariantViolation
from dungeon_geometry import CellCoord
from dungeon_metrics import GenerationMetrics
from dungeon_models import Cell, Corridor, Edge, Room
from grid_partitioner import CellGrid, partition
from grid_renderer import render_tiles
from room_placer import assign_exits, place_rooms
from tile_buffer import Tile, TileBuffer

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class GenerationResult:
    """Everything one generation run produced, handed off read-only."""

    config: DungeonConfig
    seed: Seed
    cell_width: int
    cell_height: int
    cells: Tuple[Cell, ...]
    edges: Tuple[Edge, ...]
    rooms: Mapping[CellCoord, Room]
    corridors: Tuple[Corridor, ...]
    tiles: TileBuffer

    def render(self, floor_char: str = ".") -> str:
        return render_tiles(self.tiles, floor_char=floor_char)

    def to_dict(self) -> Dict[str, Any]:
        """Plain-data view for inspection and debugging."""
        return {
            "seed": self.seed,
            "map": {"width": self.tiles.width, "height": self.tiles.height},
            "cell_size": {"width": self.cell_width, "height": self.cell_height},
            "cells": [
                {"coord": list(cell.coord), "connections": [list(c) for c in cell.connections]}
                for cell in self.cells
            ],
            "edges": [[list(a), list(b)] for a, b in self.edges],
            "rooms": [
                {
                    "cell": list(room.cell),
                    "bounds": list(room.bounds),
                    "anchor": list(room.anchor),
                    "exits": [[direction.name, list(pos)] for direction, pos in room.exits],
                }
                for room in self.rooms.values()
            ],
            "corridors": [
                {
                    "cells": [list(c) for c in corridor.cells],
                    "start": list(corridor.start),
                    "end": list(corridor.end),
                    "segments": [[list(a), list(b)] for a, b in corridor.segments],
                }
                for corridor in self.corridors
            ],
            "tiles": self.tiles.to_list(),
        }


class DungeonGenerator:
    """Manages the overall process of generating one dungeon map."""

    def __init__(self, config: DungeonConfig, metrics: GenerationMetrics | None = None) -> None:
        self.config = config
        if metrics is None and config.collect_metrics:
            metrics = GenerationMetrics()
        self.metrics = metrics

    def _run_stage(self, name: str, func: Callable[..., T], *args, **kwargs) -> T:
        if self.metrics is None:
            return func(*args, **kwargs)
        start = perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            self.metrics.record_stage(name, perf_counter() - start)

    def generate(self) -> GenerationResult:
        """Generates the map. Each call builds its own RNG and tile buffer."""
        config = self.config
        seed = config.resolve_seed()
        rng = config.make_rng()
        logger.info(
            "Generating %dx%d map with %dx%d cells, seed %r",
            config.map_width,
            config.map_height,
            config.cells_per_row,
            config.cells_per_col,
            seed,
        )

        grid: CellGrid = self._run_stage("partition", partition, config)
        edges = self._run_stage("connect", connect_cells, grid, rng)
        self._run_stage("verify_tree", verify_spanning_tree, grid)

        rooms = self._run_stage("place_rooms", place_rooms, grid, rng, jitter=config.room_jitter)
        if config.anchor_mode is AnchorMode.EXITS:
            self._run_stage("assign_exits", assign_exits, grid, rooms)

        tiles = TileBuffer(config.map_width, config.map_height, Tile.WALL)
        self._run_stage("carve_rooms", self._carve_rooms, tiles, rooms)
        corridors = self._run_stage(
            "route_corridors",
            route_corridors,
            grid,
            rooms,
            tiles,
            rng,
            style=config.corridor_style,
            anchor_mode=config.anchor_mode,
            max_dig_steps=config.max_dig_steps,
            max_dig_run=config.max_dig_run,
        )
        if len(corridors) != len(edges):
            raise InvariantViolation(f"{len(edges)} edges produced {len(corridors)} corridors")
        tiles.freeze()
        for cell in grid:
            cell.seal()
        for room in rooms.values():
            room.seal()

        return GenerationResult(
            config=config,
            seed=seed,
            cell_width=grid.cell_width,
            cell_height=grid.cell_height,
            cells=tuple(grid),
            edges=edges,
            rooms=MappingProxyType(rooms),
            corridors=corridors,
            tiles=tiles,
        )

    @staticmethod
    def _carve_rooms(tiles: TileBuffer, rooms: Dict[CellCoord, Room]) -> None:
        for room in rooms.values():
            tiles.carve_rect(room.rect, Tile.FLOOR)


def generate_dungeon(**config_kwargs) -> GenerationResult:
    """Build a ``DungeonConfig`` from keyword arguments and generate one map."""
    return DungeonGenerator(DungeonConfig(**config_kwargs)).generate()
