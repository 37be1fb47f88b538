"""Place one rectangular room inside each cell of the grid."""

from __future__ import annotations

import logging
import random
from typing import Dict, Tuple

from dungeon_config import room_padding
from dungeon_constants import ROOM_MIN_DIVISOR
from dungeon_errors import InvariantViolation
from dungeon_geometry import CellCoord, Direction, Rect
from dungeon_models import Room
from grid_partitioner import CellGrid

logger = logging.getLogger(__name__)


def room_size_limits(cell_width: int, cell_height: int) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """Return ``((min_w, max_w), (min_h, max_h))`` for rooms in cells of this size."""
    padding = room_padding(cell_width, cell_height)
    return (
        (cell_width // ROOM_MIN_DIVISOR, cell_width - padding),
        (cell_height // ROOM_MIN_DIVISOR, cell_height - padding),
    )


def _draw_length(rng: random.Random, minimum: int, maximum: int) -> int:
    if maximum <= minimum:
        return maximum
    return rng.randint(minimum, maximum)


def _offset(rng: random.Random, free: int, jitter: bool) -> int:
    # Padding leaves free >= 3, so a jittered room keeps a wall tile on both sides.
    if jitter and free > 2:
        return rng.randint(1, free - 1)
    return free // 2


def place_room(grid: CellGrid, coord: CellCoord, rng: random.Random, *, jitter: bool = False) -> Room:
    """Draw a room size for one cell and position it inside the cell."""
    cell_rect = grid.cell_rect(coord)
    (min_w, max_w), (min_h, max_h) = room_size_limits(grid.cell_width, grid.cell_height)
    width = _draw_length(rng, min_w, max_w)
    height = _draw_length(rng, min_h, max_h)
    x = cell_rect.x + _offset(rng, cell_rect.width - width, jitter)
    y = cell_rect.y + _offset(rng, cell_rect.height - height, jitter)
    room = Room(cell=grid.cell(coord).coord, rect=Rect(x, y, width, height))
    if not cell_rect.contains_rect(room.rect):
        raise InvariantViolation(f"Room {room.rect} escapes its cell {cell_rect}")
    return room


def place_rooms(grid: CellGrid, rng: random.Random, *, jitter: bool = False) -> Dict[CellCoord, Room]:
    """Place a room in every cell, visiting cells row by row."""
    rooms = {coord: place_room(grid, coord, rng, jitter=jitter) for coord in grid.coords()}
    logger.debug("Placed %d rooms (jitter=%s)", len(rooms), jitter)
    return rooms


def assign_exits(grid: CellGrid, rooms: Dict[CellCoord, Room]) -> None:
    """Give both rooms of every edge an exit on the side facing the other cell."""
    for source, target in grid.unique_edges():
        direction = Direction.between(source, target)
        for coord, facing in ((source, direction), (target, direction.opposite())):
            room = rooms[coord]
            if any(existing is facing for existing, _ in room.exits):
                continue
            room.exits.append((facing, room.edge_midpoint(facing)))
