"""Dense 2D tile storage mutated by room and corridor carving."""

from __future__ import annotations

from enum import IntEnum
from typing import List, Tuple

from dungeon_errors import InvariantViolation
from dungeon_geometry import Rect


class Tile(IntEnum):
    """Tile states stored in the buffer."""

    FLOOR = 0
    WALL = 1


class TileBuffer:
    """A ``width x height`` grid of tile values, indexed ``[y][x]``.

    All carving goes through :meth:`fill_rect`. Writes outside the buffer are
    programming errors and raise instead of being clipped.
    """

    def __init__(self, width: int, height: int, fill: int = Tile.WALL) -> None:
        if width <= 0 or height <= 0:
            raise InvariantViolation(f"Tile buffer needs positive dimensions, got {width}x{height}")
        self.width = width
        self.height = height
        self._grid: List[List[int]] = [[int(fill) for _ in range(width)] for _ in range(height)]
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Reject every later write; called once generation hands the map off."""
        self._frozen = True

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def _check_point(self, x: int, y: int) -> None:
        if isinstance(x, bool) or isinstance(y, bool) or not isinstance(x, int) or not isinstance(y, int):
            raise InvariantViolation(f"Tile coordinates must be integers, got {(x, y)!r}")
        if not self.in_bounds(x, y):
            raise InvariantViolation(
                f"Tile {(x, y)} is outside the {self.width}x{self.height} buffer"
            )

    def fill_rect(self, x1: int, y1: int, x2: int, y2: int, value: int) -> int:
        """Overwrite every tile in the inclusive rectangle spanned by two corners.

        Corners may be given in any order. Returns the number of tiles written.
        """
        if self._frozen:
            raise InvariantViolation("Tile buffer is frozen")
        self._check_point(x1, y1)
        self._check_point(x2, y2)
        left, right = min(x1, x2), max(x1, x2)
        top, bottom = min(y1, y2), max(y1, y2)
        value = int(value)
        for y in range(top, bottom + 1):
            row = self._grid[y]
            for x in range(left, right + 1):
                row[x] = value
        return (right - left + 1) * (bottom - top + 1)

    def carve_rect(self, rect: Rect, value: int = Tile.FLOOR) -> int:
        x1, y1, x2, y2 = rect.corners()
        return self.fill_rect(x1, y1, x2, y2, value)

    def get(self, x: int, y: int) -> int:
        self._check_point(x, y)
        return self._grid[y][x]

    def count(self, value: int) -> int:
        value = int(value)
        return sum(row.count(value) for row in self._grid)

    def rows(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(tuple(row) for row in self._grid)

    def to_list(self) -> List[List[int]]:
        """Return a copy of the grid as nested lists."""
        return [list(row) for row in self._grid]

    def __iter__(self):
        return iter(self.rows())

    def __len__(self) -> int:
        return self.height

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TileBuffer):
            return NotImplemented
        return self._grid == other._grid

    def __repr__(self) -> str:
        return f"TileBuffer({self.width}x{self.height}, floor={self.count(Tile.FLOOR)})"
