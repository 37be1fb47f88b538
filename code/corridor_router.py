"""Corridor carving between the rooms of connected cells."""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Tuple

from dungeon_config import AnchorMode, CorridorStyle
from dungeon_constants import DEFAULT_DIG_RUN, DIG_KEEP_HEADING_PROBABILITY, MAX_DIG_STEPS
from dungeon_geometry import CellCoord, Direction, TilePos
from dungeon_models import Corridor, Room, Segment
from grid_partitioner import CellGrid
from tile_buffer import Tile, TileBuffer

logger = logging.getLogger(__name__)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def elbow_segments(start: TilePos, end: TilePos) -> Tuple[Segment, ...]:
    """Axis-aligned path from ``start`` to ``end`` with at most one turn.

    The dominant axis is walked first: x when ``|dx| > |dy|``, otherwise y.
    """
    if start == end:
        return ((start, end),)
    dx = end.x - start.x
    dy = end.y - start.y
    if abs(dx) > abs(dy):
        corner = TilePos(end.x, start.y)
    else:
        corner = TilePos(start.x, end.y)
    return tuple(
        (a, b) for a, b in ((start, corner), (corner, end)) if a != b
    )


def dig_segments(
    start: TilePos,
    end: TilePos,
    rng: random.Random,
    *,
    max_steps: int = MAX_DIG_STEPS,
    max_run: int = DEFAULT_DIG_RUN,
) -> Tuple[Segment, ...]:
    """Tunnel from ``start`` to ``end`` in short random runs.

    Each step moves 1..``max_run`` tiles along the current heading, stopping at
    the target's row or column; the heading flips to the other axis once that
    axis is aligned, or at random while both axes still need distance. Runs
    never leave the rectangle spanned by the endpoints. After ``max_steps``
    steps the digger gives up and joins the target with an elbow.
    """
    max_steps = min(max_steps, MAX_DIG_STEPS)
    if start == end:
        return ((start, end),)

    segments: List[Segment] = []
    current = start
    axis = 0 if abs(end.x - start.x) >= abs(end.y - start.y) else 1
    steps = 0
    while current != end:
        if steps >= max_steps:
            logger.warning(
                "Tunnel from %s to %s still at %s after %d steps; snapping to target",
                start.to_tuple(),
                end.to_tuple(),
                current.to_tuple(),
                steps,
            )
            segments.extend(elbow_segments(current, end))
            break
        steps += 1

        remaining = (end.x - current.x, end.y - current.y)
        if remaining[axis] == 0:
            axis = 1 - axis
        elif remaining[1 - axis] != 0 and rng.random() >= DIG_KEEP_HEADING_PROBABILITY:
            axis = 1 - axis

        run = min(rng.randint(1, max_run), abs(remaining[axis]))
        delta = _sign(remaining[axis]) * run
        if axis == 0:
            target = TilePos(current.x + delta, current.y)
        else:
            target = TilePos(current.x, current.y + delta)
        segments.append((current, target))
        current = target
    return tuple(segments)


def corridor_endpoints(
    rooms: Dict[CellCoord, Room],
    source: CellCoord,
    target: CellCoord,
    anchor_mode: AnchorMode,
) -> Tuple[TilePos, TilePos]:
    room_a = rooms[source]
    room_b = rooms[target]
    if anchor_mode is AnchorMode.EXITS:
        direction = Direction.between(source, target)
        return room_a.exit_towards(direction), room_b.exit_towards(direction.opposite())
    return room_a.anchor, room_b.anchor


def carve_segments(tiles: TileBuffer, segments: Tuple[Segment, ...]) -> int:
    carved = 0
    for a, b in segments:
        carved += tiles.fill_rect(a.x, a.y, b.x, b.y, Tile.FLOOR)
    return carved


def route_corridors(
    grid: CellGrid,
    rooms: Dict[CellCoord, Room],
    tiles: TileBuffer,
    rng: random.Random,
    *,
    style: CorridorStyle = CorridorStyle.ELBOW,
    anchor_mode: AnchorMode = AnchorMode.CENTER,
    max_dig_steps: int = MAX_DIG_STEPS,
    max_dig_run: int = DEFAULT_DIG_RUN,
) -> Tuple[Corridor, ...]:
    """Carve one corridor per undirected cell edge and return them in edge order."""
    corridors: List[Corridor] = []
    carved = 0
    for source, target in grid.unique_edges():
        start, end = corridor_endpoints(rooms, source, target, anchor_mode)
        if style is CorridorStyle.DIG:
            segments = dig_segments(start, end, rng, max_steps=max_dig_steps, max_run=max_dig_run)
        else:
            segments = elbow_segments(start, end)
        carved += carve_segments(tiles, segments)
        corridors.append(
            Corridor(cells=(source, target), start=start, end=end, style=style, segments=segments)
        )
    logger.debug("Routed %d %s corridors (%d tile writes)", len(corridors), style.value, carved)
    return tuple(corridors)
