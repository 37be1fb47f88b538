import pytest

from benchmark_generation import percentile, run_benchmark
from dungeon_generator import DungeonGenerator
from dungeon_metrics import GenerationMetrics, StageMetrics, build_room_graph, summarize_layout


def test_stage_metrics_accumulate_runs():
    metrics = GenerationMetrics()

    metrics.record_stage("connect", 0.5)
    metrics.record_stage("connect", 1.5)
    metrics.record_stage("partition", 0.25)

    snapshot = metrics.snapshot()
    assert snapshot["connect"] == {"invocations": 2, "total_time": 2.0, "average_time": 1.0}
    assert metrics.total_time == pytest.approx(2.25)


def test_empty_stage_reports_zero_average():
    assert StageMetrics(name="idle").to_dict()["average_time"] == 0.0


def test_summarize_layout_counts_rooms_and_corridors(make_config):
    result = DungeonGenerator(make_config(random_seed=10)).generate()

    summary = summarize_layout(result)

    assert summary["rooms"] == 9
    assert summary["corridors"] == 8
    assert 0.0 < summary["floor_fraction"] < 1.0
    assert summary["floor_tiles"] >= summary["room_tiles"]
    assert 2 <= summary["graph_diameter"] <= 8
    assert summary["leaf_rooms"] >= 2
    assert summary["max_degree"] <= 4


def test_room_graph_is_keyed_by_cell(make_config):
    result = DungeonGenerator(make_config(random_seed=10)).generate()

    graph = build_room_graph(result)

    assert set(graph.nodes) == set(result.rooms)
    assert graph.number_of_edges() == 8


def test_single_room_summary(make_config):
    result = DungeonGenerator(
        make_config(map_width=12, map_height=12, cells_per_row=1, cells_per_col=1, random_seed=1)
    ).generate()

    summary = summarize_layout(result)

    assert summary["graph_diameter"] == 0
    assert summary["corridor_only_tiles"] == 0


def test_percentile_interpolates():
    assert percentile([1.0, 2.0, 3.0, 4.0], 50.0) == pytest.approx(2.5)
    assert percentile([3.0, 1.0], 0.0) == 1.0
    assert percentile([3.0, 1.0], 100.0) == 3.0


def test_run_benchmark_is_reproducible():
    kwargs = dict(map_width=48, map_height=24, cells_per_row=2, cells_per_col=2)
    metrics = GenerationMetrics()

    first = run_benchmark(3, 5, kwargs, metrics)
    second = run_benchmark(3, 5, kwargs)

    assert [run.seed for run in first] == [run.seed for run in second]
    assert [run.floor_fraction for run in first] == [run.floor_fraction for run in second]
    assert metrics.stages["connect"].invocations == 3
