"""Geometry helpers for cell coordinates, tile positions, and rectangles."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Tuple

CellCoord = Tuple[int, int]


class Direction(Enum):
    """Cardinal directions with unit vectors on the tile grid."""

    NORTH = (0, -1)
    EAST = (1, 0)
    SOUTH = (0, 1)
    WEST = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def vector(self) -> Tuple[int, int]:
        return self.value

    def opposite(self) -> Direction:
        return Direction.from_tuple((-self.dx, -self.dy))

    @classmethod
    def from_tuple(cls, value: Tuple[int, int]) -> Direction:
        try:
            return cls(tuple(value))
        except ValueError as exc:
            raise ValueError(f"Unsupported direction {value}") from exc

    @classmethod
    def between(cls, source: CellCoord, target: CellCoord) -> Direction:
        """Return the direction leading from ``source`` to the adjacent ``target``."""
        return cls.from_tuple((target[0] - source[0], target[1] - source[1]))


@dataclass(frozen=True, order=True)
class TilePos:
    """Integer tile coordinate."""

    x: int
    y: int

    def __iter__(self):
        yield self.x
        yield self.y

    def __getitem__(self, index: int) -> int:
        if index == 0:
            return self.x
        if index == 1:
            return self.y
        raise IndexError("TilePos only supports two coordinates")

    def to_tuple(self) -> Tuple[int, int]:
        return self.x, self.y

    @classmethod
    def from_tuple(cls, value: Tuple[int, int]) -> TilePos:
        return cls(*value)


@dataclass(frozen=True)
class Rect:
    """Immutable axis-aligned rectangle using integer tile coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def max_x(self) -> int:
        """Right edge (exclusive)."""
        return self.x + self.width

    @property
    def max_y(self) -> int:
        """Bottom edge (exclusive)."""
        return self.y + self.height

    @property
    def x2(self) -> int:
        """Right edge (inclusive)."""
        return self.max_x - 1

    @property
    def y2(self) -> int:
        """Bottom edge (inclusive)."""
        return self.max_y - 1

    @property
    def center(self) -> TilePos:
        """Geometric center, rounded down."""
        return TilePos(self.x + self.width // 2, self.y + self.height // 2)

    def contains(self, point: TilePos) -> bool:
        """Return True if the provided tile lies inside this rect."""
        return self.x <= point.x < self.max_x and self.y <= point.y < self.max_y

    def contains_rect(self, other: Rect) -> bool:
        """Return True if ``other`` lies entirely inside this rect."""
        return (
            self.x <= other.x
            and self.y <= other.y
            and other.max_x <= self.max_x
            and other.max_y <= self.max_y
        )

    def corners(self) -> Tuple[int, int, int, int]:
        """Return inclusive ``(x1, y1, x2, y2)`` corners."""
        return self.x, self.y, self.x2, self.y2

    def tiles(self) -> Iterator[TilePos]:
        for ty in range(self.y, self.max_y):
            for tx in range(self.x, self.max_x):
                yield TilePos(tx, ty)

    def to_tuple(self) -> Tuple[int, int, int, int]:
        """Return the rect as an ``(x, y, width, height)`` tuple."""
        return self.x, self.y, self.width, self.height

    @classmethod
    def from_corners(cls, x1: int, y1: int, x2: int, y2: int) -> Rect:
        """Build a rect from two inclusive corners in any order."""
        left, right = sorted((x1, x2))
        top, bottom = sorted((y1, y2))
        return cls(left, top, right - left + 1, bottom - top + 1)
