"""Render a tile buffer to an ASCII grid."""

from __future__ import annotations

from typing import Iterable, Sequence

from dungeon_constants import FLOOR_CHAR, UNKNOWN_CHAR, WALL_CHAR
from tile_buffer import Tile


def tile_char(value: int, floor_char: str = FLOOR_CHAR) -> str:
    if value == Tile.FLOOR:
        return floor_char
    if value == Tile.WALL:
        return WALL_CHAR
    return UNKNOWN_CHAR


def render_tiles(rows: Iterable[Sequence[int]], floor_char: str = FLOOR_CHAR) -> str:
    """One line per row, one character per column.

    Accepts a ``TileBuffer`` or any iterable of rows of tile values. Values
    other than floor and wall render as ``?``.
    """
    return "\n".join(
        "".join(tile_char(value, floor_char) for value in row) for row in rows
    )


def print_tiles(rows: Iterable[Sequence[int]], floor_char: str = FLOOR_CHAR) -> None:
    """Prints the ASCII grid to the console."""
    print(render_tiles(rows, floor_char=floor_char))
