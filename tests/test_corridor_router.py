import logging
import random

import pytest

from corridor_router import dig_segments, elbow_segments, route_corridors
from dungeon_config import AnchorMode, CorridorStyle
from dungeon_geometry import Rect, TilePos
from dungeon_models import edge_key
from room_placer import assign_exits, place_rooms
from tile_buffer import Tile, TileBuffer


def _path_tiles(segments):
    tiles = set()
    for a, b in segments:
        tiles.update(Rect.from_corners(a.x, a.y, b.x, b.y).tiles())
    return tiles


def _assert_contiguous(segments, start, end):
    assert segments[0][0] == start
    assert segments[-1][1] == end
    for (_, previous_end), (next_start, _) in zip(segments, segments[1:]):
        assert previous_end == next_start
    for a, b in segments:
        assert a.x == b.x or a.y == b.y


def test_elbow_walks_dominant_x_axis_first():
    segments = elbow_segments(TilePos(2, 3), TilePos(12, 6))

    assert segments == (
        (TilePos(2, 3), TilePos(12, 3)),
        (TilePos(12, 3), TilePos(12, 6)),
    )


def test_elbow_walks_y_first_when_not_x_dominant():
    segments = elbow_segments(TilePos(5, 1), TilePos(7, 9))

    assert segments == (
        (TilePos(5, 1), TilePos(5, 9)),
        (TilePos(5, 9), TilePos(7, 9)),
    )


def test_elbow_on_shared_row_is_a_single_straight_segment():
    segments = elbow_segments(TilePos(1, 4), TilePos(9, 4))

    assert segments == ((TilePos(1, 4), TilePos(9, 4)),)


def test_elbow_between_identical_points():
    point = TilePos(3, 3)

    assert elbow_segments(point, point) == ((point, point),)


@pytest.mark.parametrize("seed", range(10))
def test_dig_reaches_target_inside_spanned_box(seed):
    start, end = TilePos(3, 20), TilePos(40, 4)

    segments = dig_segments(start, end, random.Random(seed))

    _assert_contiguous(segments, start, end)
    box = Rect.from_corners(start.x, start.y, end.x, end.y)
    assert all(box.contains(tile) for tile in _path_tiles(segments))


def test_dig_respects_run_length():
    segments = dig_segments(TilePos(0, 0), TilePos(30, 30), random.Random(2), max_run=2)

    for a, b in segments:
        assert abs(a.x - b.x) + abs(a.y - b.y) <= 2


def test_dig_snaps_to_target_after_step_cap(caplog):
    start, end = TilePos(0, 0), TilePos(50, 50)

    with caplog.at_level(logging.WARNING, logger="corridor_router"):
        segments = dig_segments(start, end, random.Random(0), max_steps=3, max_run=1)

    assert len(segments) <= 3 + 2
    _assert_contiguous(segments, start, end)
    assert "snapping to target" in caplog.text


def test_dig_step_cap_never_exceeds_hard_limit():
    # 300 tiles of distance at one tile per step needs the snap well before 300 steps.
    segments = dig_segments(TilePos(0, 0), TilePos(150, 150), random.Random(1), max_steps=1000, max_run=1)

    assert len(segments) <= 100 + 2
    _assert_contiguous(segments, TilePos(0, 0), TilePos(150, 150))


@pytest.mark.parametrize("style", list(CorridorStyle))
@pytest.mark.parametrize("anchor_mode", list(AnchorMode))
def test_route_corridors_carves_one_corridor_per_edge(make_grid, style, anchor_mode):
    grid = make_grid(map_width=90, map_height=45, cells_per_row=5, cells_per_col=3, seed=6)
    rng = random.Random(6)
    rooms = place_rooms(grid, rng)
    if anchor_mode is AnchorMode.EXITS:
        assign_exits(grid, rooms)
    tiles = TileBuffer(90, 45)

    corridors = route_corridors(grid, rooms, tiles, rng, style=style, anchor_mode=anchor_mode)

    assert len(corridors) == len(grid.edges()) == 14
    assert len({edge_key(*corridor.cells) for corridor in corridors}) == 14
    for corridor in corridors:
        _assert_contiguous(corridor.segments, corridor.start, corridor.end)
        for tile in corridor.tiles():
            assert 0 <= tile.x < 90 and 0 <= tile.y < 45
            assert tiles.get(tile.x, tile.y) == Tile.FLOOR


def test_route_corridors_uses_room_anchors_by_default(make_grid):
    grid = make_grid(map_width=24, map_height=12, cells_per_row=2, cells_per_col=1, seed=2)
    rng = random.Random(2)
    rooms = place_rooms(grid, rng)
    tiles = TileBuffer(24, 12)

    (corridor,) = route_corridors(grid, rooms, tiles, rng)

    source, target = corridor.cells
    assert corridor.start == rooms[source].anchor
    assert corridor.end == rooms[target].anchor
    assert corridor.style is CorridorStyle.ELBOW
    assert corridor.turns <= 1


def test_route_corridors_skips_reverse_duplicate_edges(make_grid):
    grid = make_grid(map_width=24, map_height=12, cells_per_row=2, cells_per_col=1, seed=2)
    (source, target), = grid.edges()
    grid.cell(target).connections.append(source)
    rng = random.Random(2)
    rooms = place_rooms(grid, rng)

    corridors = route_corridors(grid, rooms, TileBuffer(24, 12), rng)

    assert len(corridors) == 1
