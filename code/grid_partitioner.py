"""Divide the tile canvas into a fixed grid of equal cells."""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Tuple

from dungeon_config import DungeonConfig
from dungeon_errors import InvariantViolation
from dungeon_geometry import CellCoord, Rect
from dungeon_models import Cell, Edge, edge_key

logger = logging.getLogger(__name__)


class CellGrid:
    """The ``cells_per_row x cells_per_col`` cells of one generation run.

    Cells are created once here and never added or removed afterwards. Only
    their ``connections`` lists change, while the spanning tree is grown.
    """

    def __init__(self, cells_per_row: int, cells_per_col: int, cell_width: int, cell_height: int) -> None:
        self.cells_per_row = cells_per_row
        self.cells_per_col = cells_per_col
        self.cell_width = cell_width
        self.cell_height = cell_height
        self._cells: Dict[CellCoord, Cell] = {}
        for cy in range(cells_per_col):
            for cx in range(cells_per_row):
                rect = Rect(cx * cell_width, cy * cell_height, cell_width, cell_height)
                self._cells[(cx, cy)] = Cell(cx, cy, rect)

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells.values())

    def coords(self) -> List[CellCoord]:
        """All cell coordinates, row by row."""
        return list(self._cells)

    def in_bounds(self, coord: CellCoord) -> bool:
        cx, cy = coord
        return 0 <= cx < self.cells_per_row and 0 <= cy < self.cells_per_col

    def cell(self, coord: CellCoord) -> Cell:
        try:
            return self._cells[tuple(coord)]
        except KeyError:
            raise InvariantViolation(f"No cell at {coord} in a {self.cells_per_row}x{self.cells_per_col} grid") from None

    def cell_rect(self, coord: CellCoord) -> Rect:
        return self.cell(coord).rect

    def edges(self) -> List[Edge]:
        """Recorded ``(from, to)`` links in row-major order of their source cell."""
        return [(cell.coord, target) for cell in self for target in cell.connections]

    def neighbors_of(self, coord: CellCoord) -> List[CellCoord]:
        """Cells linked to ``coord`` in either storage direction."""
        coord = self.cell(coord).coord
        linked = list(self._cells[coord].connections)
        for cell in self:
            if coord in cell.connections and cell.coord not in linked:
                linked.append(cell.coord)
        return linked

    def are_connected(self, a: CellCoord, b: CellCoord) -> bool:
        """True if an edge joins ``a`` and ``b``, whichever cell recorded it."""
        cell_a = self.cell(a)
        cell_b = self.cell(b)
        return cell_b.coord in cell_a.connections or cell_a.coord in cell_b.connections

    def is_connected(self, coord: CellCoord) -> bool:
        """True once the cell takes part in at least one edge.

        Derived from the edge lists each time. A lone cell in a 1x1 grid has
        no edges and reports False even though it is trivially reachable.
        """
        return bool(self.neighbors_of(coord))

    def unique_edges(self) -> List[Edge]:
        """Recorded edges with duplicates in either direction removed, in recording order."""
        seen = set()
        result: List[Edge] = []
        for edge in self.edges():
            key = edge_key(*edge)
            if key in seen:
                continue
            seen.add(key)
            result.append(edge)
        return result

    @property
    def cell_size(self) -> Tuple[int, int]:
        return self.cell_width, self.cell_height


def partition(config: DungeonConfig) -> CellGrid:
    """Split the map into equal cells using floor division.

    Tiles past ``cell_width * cells_per_row`` (or the vertical equivalent) are
    left unused.
    """
    cell_width, cell_height = config.cell_size
    grid = CellGrid(config.cells_per_row, config.cells_per_col, cell_width, cell_height)
    unused_x = config.map_width - cell_width * config.cells_per_row
    unused_y = config.map_height - cell_height * config.cells_per_col
    logger.debug(
        "Partitioned %dx%d map into %d cells of %dx%d (unused tiles: %d cols, %d rows)",
        config.map_width,
        config.map_height,
        len(grid),
        cell_width,
        cell_height,
        unused_x,
        unused_y,
    )
    return grid
