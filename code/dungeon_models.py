"""Core dataclasses used by the dungeon generator."""

from __future__ import annotations

from dataclasses import FrozenInstanceError, dataclass, field
from typing import Iterator, Sequence, Tuple

from dungeon_config import CorridorStyle
from dungeon_geometry import CellCoord, Direction, Rect, TilePos

Edge = Tuple[CellCoord, CellCoord]
Segment = Tuple[TilePos, TilePos]


def edge_key(a: CellCoord, b: CellCoord) -> Edge:
    """Order-independent key for the undirected edge between two cells."""
    return (a, b) if a <= b else (b, a)


class _Sealable:
    """Mutable while the pipeline builds it, read-only once sealed."""

    _sealed = False

    def __setattr__(self, name, value):
        if self._sealed:
            raise FrozenInstanceError(f"cannot assign to field {name!r} of a sealed {type(self).__name__}")
        super().__setattr__(name, value)

    @property
    def sealed(self) -> bool:
        return self._sealed


@dataclass
class Cell(_Sealable):
    """One partition of the grid; owns exactly one room."""

    cx: int
    cy: int
    rect: Rect
    # Cells this cell linked to while growing the spanning tree. Stored one-way;
    # use CellGrid.are_connected for symmetric queries.
    connections: Sequence[CellCoord] = field(default_factory=list)

    @property
    def coord(self) -> CellCoord:
        return self.cx, self.cy

    def seal(self) -> None:
        self.connections = tuple(self.connections)
        object.__setattr__(self, "_sealed", True)


@dataclass
class Room(_Sealable):
    """Rectangular room placed inside a cell, in absolute tile coordinates."""

    cell: CellCoord
    rect: Rect
    exits: Sequence[Tuple[Direction, TilePos]] = field(default_factory=list)

    @property
    def width(self) -> int:
        return self.rect.width

    @property
    def height(self) -> int:
        return self.rect.height

    @property
    def anchor(self) -> TilePos:
        """Corridor endpoint when no exit is requested: the rounded-down center."""
        return self.rect.center

    @property
    def bounds(self) -> Tuple[int, int, int, int]:
        """Inclusive ``(x1, y1, x2, y2)`` corners."""
        return self.rect.corners()

    def seal(self) -> None:
        self.exits = tuple(self.exits)
        object.__setattr__(self, "_sealed", True)

    def exit_towards(self, direction: Direction) -> TilePos:
        for exit_direction, pos in self.exits:
            if exit_direction is direction:
                return pos
        raise KeyError(f"Room in cell {self.cell} has no {direction.name} exit")

    def edge_midpoint(self, direction: Direction) -> TilePos:
        """Tile on the room border at the middle of the side facing ``direction``."""
        center = self.rect.center
        if direction is Direction.NORTH:
            return TilePos(center.x, self.rect.y)
        if direction is Direction.SOUTH:
            return TilePos(center.x, self.rect.y2)
        if direction is Direction.WEST:
            return TilePos(self.rect.x, center.y)
        return TilePos(self.rect.x2, center.y)


@dataclass(frozen=True)
class Corridor:
    """Carved hall between the rooms of two connected cells."""

    cells: Edge
    start: TilePos
    end: TilePos
    style: CorridorStyle
    segments: Tuple[Segment, ...]

    def tiles(self) -> Iterator[TilePos]:
        """Yield every tile covered by the corridor's segments, in path order."""
        seen = set()
        for a, b in self.segments:
            for tile in Rect.from_corners(a.x, a.y, b.x, b.y).tiles():
                if tile not in seen:
                    seen.add(tile)
                    yield tile

    @property
    def turns(self) -> int:
        return max(0, len(self.segments) - 1)
