"""Randomized spanning-tree walk over the cell grid.

This is Prim's algorithm on a grid graph whose edges all weigh the same, so
"pick any frontier edge at random" is a valid tie-break:

1. Connect one random start cell.
2. Pick a random cell from the pickable set (connected cells that may still
   have unconnected neighbors), shuffle its four neighbor offsets, and link it
   to the first in-bounds neighbor that is not yet connected.
3. If it has no such neighbor it can never grow the tree again, so it leaves
   the pickable set. Every pick either connects a cell or shrinks the pickable
   set, which bounds the loop.

Edges are recorded one-way in ``Cell.connections`` of the cell that was picked.
"""

from __future__ import annotations

import logging
import random
from typing import List, Optional, Set, Tuple

import networkx as nx

from component_manager import ComponentManager
from dungeon_constants import NEIGHBOR_OFFSETS
from dungeon_errors import InvariantViolation
from dungeon_geometry import CellCoord
from dungeon_models import Edge
from grid_partitioner import CellGrid

logger = logging.getLogger(__name__)


def max_connection_picks(cell_count: int) -> int:
    """Upper bound on random picks before the deterministic fallback takes over."""
    return 4 * cell_count + 4


class CellConnector:
    """Grows a spanning tree over one ``CellGrid`` using a caller-supplied RNG."""

    def __init__(self, grid: CellGrid, rng: random.Random) -> None:
        self.grid = grid
        self.rng = rng
        self.connected: Set[CellCoord] = set()
        # Connected cells in connection order; list order keeps rng.choice reproducible.
        self.connected_order: List[CellCoord] = []
        self.pickable: List[CellCoord] = []
        self.edges: List[Edge] = []
        self.picks = 0
        self.used_fallback = False
        self._components = ComponentManager(grid.coords())

    # ------------------------------------------------------------------
    # Public entry point
    # ------------------------------------------------------------------
    def connect(self) -> Tuple[Edge, ...]:
        total = len(self.grid)
        start = self.rng.choice(self.grid.coords())
        self._mark_connected(start)
        logger.debug("Spanning walk starts at cell %s", start)

        pick_limit = max_connection_picks(total)
        while len(self.connected) < total:
            if self.picks >= pick_limit:
                logger.warning(
                    "Connection walk hit %d picks with %d of %d cells connected; finishing deterministically",
                    self.picks,
                    len(self.connected),
                    total,
                )
                self.used_fallback = True
                self._connect_remaining_in_order()
                break
            self.picks += 1
            self._step()

        if len(self.edges) != total - 1:
            raise InvariantViolation(
                f"Spanning walk produced {len(self.edges)} edges for {total} cells"
            )
        if not self._components.has_single_component():
            raise InvariantViolation("Spanning walk left the cells split into several components")
        logger.debug("Connected %d cells with %d edges in %d picks", total, len(self.edges), self.picks)
        return tuple(self.edges)

    # ------------------------------------------------------------------
    # Walk internals
    # ------------------------------------------------------------------
    def _step(self) -> None:
        source = self.rng.choice(self.pickable)
        target = self.random_unconnected_neighbor(source)
        if target is not None:
            self._link(source, target)
            return

        if len(self.pickable) > 1:
            self.pickable.remove(source)
        else:
            # Retiring the last candidate would leave nothing to pick from while
            # cells remain, so widen the pool back to every connected cell.
            self.pickable = [coord for coord in self.connected_order if coord != source] or [source]

    def random_unconnected_neighbor(self, source: CellCoord) -> Optional[CellCoord]:
        """First in-bounds, unconnected neighbor of ``source`` in a fresh random order."""
        offsets = list(NEIGHBOR_OFFSETS)
        self.rng.shuffle(offsets)
        return self._first_open_neighbor(source, offsets)

    def _first_open_neighbor(self, source: CellCoord, offsets) -> Optional[CellCoord]:
        sx, sy = source
        for dx, dy in offsets:
            candidate = (sx + dx, sy + dy)
            if self.grid.in_bounds(candidate) and candidate not in self.connected:
                return candidate
        return None

    def _connect_remaining_in_order(self) -> None:
        """Finish the tree without randomness by scanning connected cells in order."""
        while len(self.connected) < len(self.grid):
            for source in list(self.connected_order):
                target = self._first_open_neighbor(source, NEIGHBOR_OFFSETS)
                if target is not None:
                    self._link(source, target)
                    break
            else:
                raise InvariantViolation("Cell grid has unreachable cells")

    def _link(self, source: CellCoord, target: CellCoord) -> None:
        if source not in self.connected:
            raise InvariantViolation(f"Cell {source} was picked before it was connected")
        cell = self.grid.cell(source)
        self.grid.cell(target)
        if not self._components.join(source, target):
            raise InvariantViolation(f"Edge {source} -> {target} would close a cycle")
        cell.connections.append(target)
        self.edges.append((source, target))
        self._mark_connected(target)

    def _mark_connected(self, coord: CellCoord) -> None:
        self.connected.add(coord)
        self.connected_order.append(coord)
        self.pickable.append(coord)


def connect_cells(grid: CellGrid, rng: random.Random) -> Tuple[Edge, ...]:
    """Link every cell of ``grid`` into one spanning tree and return its edges."""
    return CellConnector(grid, rng).connect()


def build_cell_graph(grid: CellGrid) -> nx.Graph:
    """Undirected graph of cells and their recorded connections."""
    graph = nx.Graph()
    graph.add_nodes_from(grid.coords())
    for source, target in grid.edges():
        graph.add_edge(source, target)
    return graph


def verify_spanning_tree(grid: CellGrid) -> nx.Graph:
    """Raise ``InvariantViolation`` unless the recorded edges form a spanning tree."""
    graph = build_cell_graph(grid)
    if graph.number_of_nodes() != len(grid):
        raise InvariantViolation("Connection graph references cells outside the grid")
    if not nx.is_tree(graph):
        raise InvariantViolation(
            f"Cell connections are not a spanning tree: {graph.number_of_edges()} edges, "
            f"{nx.number_connected_components(graph)} components"
        )
    return graph
