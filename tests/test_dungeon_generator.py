from dataclasses import FrozenInstanceError

import networkx as nx
import pytest

from dungeon_config import AnchorMode, CorridorStyle
from dungeon_errors import InvariantViolation
from dungeon_generator import DungeonGenerator, GenerationResult, generate_dungeon
from dungeon_geometry import Rect, TilePos
from tile_buffer import Tile


def _generate(make_config, **kwargs) -> GenerationResult:
    return DungeonGenerator(make_config(**kwargs)).generate()


def test_single_cell_scenario(make_config):
    result = _generate(make_config, map_width=12, map_height=12, cells_per_row=1, cells_per_col=1, random_seed=1)

    assert len(result.cells) == 1
    assert result.edges == ()
    assert result.corridors == ()
    assert len(result.rooms) == 1

    room = result.rooms[(0, 0)]
    for y, row in enumerate(result.tiles.rows()):
        for x, value in enumerate(row):
            expected = Tile.FLOOR if room.rect.contains(TilePos(x, y)) else Tile.WALL
            assert value == expected


def test_three_by_three_scenario(make_config):
    result = _generate(make_config, cells_per_row=3, cells_per_col=3, random_seed=42)

    assert len(result.edges) == 8
    assert len(result.corridors) == 8
    assert len(result.rooms) == 9


@pytest.mark.parametrize("seed", [0, 5, 99])
def test_two_by_one_grid_has_one_edge(make_config, seed):
    result = _generate(make_config, map_width=24, map_height=12, cells_per_row=2, cells_per_col=1, random_seed=seed)

    assert len(result.edges) == 1
    assert {result.edges[0][0], result.edges[0][1]} == {(0, 0), (1, 0)}


@pytest.mark.parametrize("style", list(CorridorStyle))
@pytest.mark.parametrize("anchor_mode", list(AnchorMode))
@pytest.mark.parametrize("jitter", [False, True])
def test_same_seed_is_bit_for_bit_reproducible(make_config, style, anchor_mode, jitter):
    kwargs = dict(
        map_width=80,
        map_height=40,
        cells_per_row=4,
        cells_per_col=3,
        random_seed="replay",
        corridor_style=style,
        anchor_mode=anchor_mode,
        room_jitter=jitter,
    )

    first = _generate(make_config, **kwargs)
    second = _generate(make_config, **kwargs)

    assert [cell.connections for cell in first.cells] == [cell.connections for cell in second.cells]
    assert {c: r.bounds for c, r in first.rooms.items()} == {c: r.bounds for c, r in second.rooms.items()}
    assert first.tiles.rows() == second.tiles.rows()
    assert first.render() == second.render()


def test_different_seeds_usually_differ(make_config):
    renders = {
        _generate(make_config, map_width=80, map_height=40, cells_per_row=4, cells_per_col=3, random_seed=seed).render()
        for seed in range(5)
    }

    assert len(renders) > 1


@pytest.mark.parametrize("seed", range(8))
def test_generated_map_properties(make_config, seed):
    result = _generate(
        make_config,
        map_width=100,
        map_height=50,
        cells_per_row=5,
        cells_per_col=4,
        random_seed=seed,
        room_jitter=bool(seed % 2),
        corridor_style=CorridorStyle.DIG if seed % 3 == 0 else CorridorStyle.ELBOW,
    )

    cell_rects = {cell.coord: cell.rect for cell in result.cells}
    for coord, room in result.rooms.items():
        assert cell_rects[coord].contains_rect(room.rect)

    for corridor in result.corridors:
        for tile in corridor.tiles():
            assert 0 <= tile.x < 100 and 0 <= tile.y < 50

    graph = nx.Graph()
    graph.add_nodes_from(cell_rects)
    graph.add_edges_from(result.edges)
    assert nx.is_tree(graph)


def test_tiles_are_frozen_after_generation(make_config):
    result = _generate(make_config, random_seed=3)

    with pytest.raises(InvariantViolation):
        result.tiles.fill_rect(0, 0, 0, 0, Tile.FLOOR)


def test_rooms_and_corridors_form_one_floor_region(make_config):
    result = _generate(make_config, map_width=90, map_height=45, cells_per_row=5, cells_per_col=3, random_seed=12)

    floor = {
        (x, y)
        for y, row in enumerate(result.tiles.rows())
        for x, value in enumerate(row)
        if value == Tile.FLOOR
    }
    graph = nx.grid_2d_graph(result.tiles.width, result.tiles.height).subgraph(floor)

    assert nx.number_connected_components(graph) == 1


def test_missing_seed_is_reported_in_result(make_config):
    config = make_config()

    result = DungeonGenerator(config).generate()

    assert result.seed == config.random_seed
    replay = _generate(make_config, random_seed=result.seed)
    assert replay.tiles.rows() == result.tiles.rows()


def test_metrics_record_each_stage(make_config):
    generator = DungeonGenerator(make_config(random_seed=4, collect_metrics=True))

    generator.generate()

    stages = generator.metrics.snapshot()
    assert {"partition", "connect", "verify_tree", "place_rooms", "carve_rooms", "route_corridors"} <= set(stages)
    assert all(stage["invocations"] == 1 for stage in stages.values())


def test_metrics_disabled_by_default(make_config):
    assert DungeonGenerator(make_config()).metrics is None


def test_to_dict_exposes_plain_data(make_config):
    result = generate_dungeon(map_width=48, map_height=24, cells_per_row=2, cells_per_col=2, random_seed=8)

    data = result.to_dict()

    assert data["seed"] == 8
    assert data["map"] == {"width": 48, "height": 24}
    assert len(data["rooms"]) == 4
    assert len(data["edges"]) == 3
    assert len(data["tiles"]) == 24 and len(data["tiles"][0]) == 48


def test_result_graph_matches_edges(make_config):
    result = _generate(make_config, random_seed=77)

    graph = nx.Graph()
    graph.add_edges_from(result.edges)

    assert graph.number_of_edges() == len(result.edges)
    assert Rect(0, 0, result.cell_width, result.cell_height) == result.cells[0].rect


def test_result_cells_and_rooms_are_read_only(make_config):
    result = _generate(make_config, random_seed=6, anchor_mode=AnchorMode.EXITS)
    cell = result.cells[0]
    room = result.rooms[(0, 0)]

    assert cell.sealed and room.sealed
    with pytest.raises(AttributeError):
        cell.connections.append((9, 9))
    with pytest.raises(AttributeError):
        room.exits.append(room.exits[0])
    with pytest.raises(FrozenInstanceError):
        cell.connections = []
    with pytest.raises(FrozenInstanceError):
        room.rect = Rect(0, 0, 1, 1)
    with pytest.raises(TypeError):
        result.rooms[(0, 0)] = room
    with pytest.raises(AttributeError):
        result.rooms.clear()
    assert len(result.rooms) == 9
