"""Helpers for collecting instrumentation data during dungeon generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict

import networkx as nx

from tile_buffer import Tile

if TYPE_CHECKING:
    from dungeon_generator import GenerationResult


@dataclass
class StageMetrics:
    """Aggregated metrics for a single pipeline stage across invocations."""

    name: str
    invocations: int = 0
    total_time: float = 0.0

    def record(self, duration: float) -> None:
        self.invocations += 1
        self.total_time += duration

    def to_dict(self) -> Dict[str, float | int]:
        average_time = self.total_time / self.invocations if self.invocations else 0.0
        return {
            "invocations": self.invocations,
            "total_time": self.total_time,
            "average_time": average_time,
        }


@dataclass
class GenerationMetrics:
    """Container for stage metrics recorded during generation runs."""

    stages: Dict[str, StageMetrics] = field(default_factory=dict)

    def record_stage(self, name: str, duration: float) -> None:
        metrics = self.stages.get(name)
        if metrics is None:
            metrics = StageMetrics(name=name)
            self.stages[name] = metrics
        metrics.record(duration)

    @property
    def total_time(self) -> float:
        return sum(metrics.total_time for metrics in self.stages.values())

    def snapshot(self) -> Dict[str, Dict[str, float | int]]:
        return {name: metrics.to_dict() for name, metrics in self.stages.items()}


def build_room_graph(result: GenerationResult) -> nx.Graph:
    """Graph of rooms (keyed by cell) joined by their corridors."""
    graph = nx.Graph()
    graph.add_nodes_from(result.rooms)
    for corridor in result.corridors:
        graph.add_edge(*corridor.cells)
    return graph


def summarize_layout(result: GenerationResult) -> Dict[str, float | int]:
    """Shape statistics for one generated map."""
    tiles = result.tiles
    total_tiles = tiles.width * tiles.height
    floor_tiles = tiles.count(Tile.FLOOR)
    room_tiles = sum(room.width * room.height for room in result.rooms.values())

    graph = build_room_graph(result)
    diameter = 0
    if graph.number_of_nodes() >= 2 and nx.is_connected(graph):
        diameter = int(nx.diameter(graph))
    leaves = sum(1 for _, degree in graph.degree() if degree <= 1)

    return {
        "rooms": len(result.rooms),
        "corridors": len(result.corridors),
        "floor_tiles": floor_tiles,
        "floor_fraction": floor_tiles / total_tiles if total_tiles else 0.0,
        "room_tiles": room_tiles,
        "corridor_only_tiles": max(0, floor_tiles - room_tiles),
        "graph_diameter": diameter,
        "leaf_rooms": leaves,
        "max_degree": max((degree for _, degree in graph.degree()), default=0),
    }
