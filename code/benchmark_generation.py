#!/usr/bin/env python3

# Repeated generation runs with timing and layout-shape statistics.
# Useful for spotting slow stages and for eyeballing how seeds vary the maps.

from __future__ import annotations

import argparse
import datetime
import json
import math
import random
import statistics
import time
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional

from dungeon_config import AnchorMode, CorridorStyle, DungeonConfig
from dungeon_constants import MAX_RANDOM_SEED
from dungeon_generator import DungeonGenerator
from dungeon_metrics import GenerationMetrics, summarize_layout
from log_utils import setup_logging

DEFAULT_CONFIG_KWARGS = dict(
    map_width=90,
    map_height=45,
    cells_per_row=5,
    cells_per_col=3,
)

PERCENTILES = [1.0, 5.0, 25.0, 50.0, 75.0, 95.0, 99.0]


@dataclass
class GenerationRunResult:
    seed: int
    duration: float
    rooms: int
    corridors: int
    floor_fraction: float
    corridor_only_tiles: int
    graph_diameter: int
    leaf_rooms: int


def percentile(values: List[float], pct: float) -> float:
    """Linearly interpolated percentile, clamped to the sample range."""
    if not values:
        return float("nan")
    ordered = sorted(values)
    pct = min(max(pct, 0.0), 100.0)
    position = (len(ordered) - 1) * pct / 100.0
    below = int(math.floor(position))
    above = min(below + 1, len(ordered) - 1)
    weight = position - below
    return ordered[below] * (1.0 - weight) + ordered[above] * weight


def compute_basic_stats(values: List[float]) -> Dict[str, float]:
    spread = statistics.stdev(values) if len(values) > 1 else float("nan")
    return dict(
        mean=statistics.mean(values),
        median=statistics.median(values),
        min=min(values),
        max=max(values),
        stdev=spread,
    )


def format_seconds(value: float) -> str:
    return f"{value:.3f}s" if value >= 1.0 else f"{value * 1000:.1f}ms"


def json_safe_number(value: float | int | None) -> float | int | None:
    # json has no NaN or infinity
    if value is None or not math.isfinite(value):
        return None
    return value


def run_single_generation(
    seed: int,
    config_kwargs: Dict[str, Any],
    metrics: GenerationMetrics,
) -> GenerationRunResult:
    """Run one generation with the provided seed and collect shape statistics."""
    config = DungeonConfig(random_seed=seed, **config_kwargs)
    generator = DungeonGenerator(config, metrics=metrics)

    start = time.perf_counter()
    result = generator.generate()
    duration = time.perf_counter() - start

    summary = summarize_layout(result)
    return GenerationRunResult(
        seed=seed,
        duration=duration,
        rooms=int(summary["rooms"]),
        corridors=int(summary["corridors"]),
        floor_fraction=float(summary["floor_fraction"]),
        corridor_only_tiles=int(summary["corridor_only_tiles"]),
        graph_diameter=int(summary["graph_diameter"]),
        leaf_rooms=int(summary["leaf_rooms"]),
    )


def run_benchmark(
    num_runs: int,
    seed: int | None,
    config_kwargs: Dict[str, Any],
    metrics: GenerationMetrics | None = None,
) -> List[GenerationRunResult]:
    """Run the generator multiple times and collect run-level metrics."""
    rng = random.Random(seed)
    metrics = metrics if metrics is not None else GenerationMetrics()
    return [
        run_single_generation(rng.randint(0, MAX_RANDOM_SEED), config_kwargs, metrics)
        for _ in range(num_runs)
    ]


def summarize_values(values: List[float]) -> Dict[str, Any]:
    if not values:
        return {"count": 0}
    stats = compute_basic_stats(values)
    summary: Dict[str, Any] = {"count": len(values)}
    summary.update({key: json_safe_number(value) for key, value in stats.items()})
    summary["percentiles"] = {
        f"p{int(pct)}": json_safe_number(percentile(values, pct)) for pct in PERCENTILES
    }
    return summary


def report_metric(name: str, values: List[float], formatter=lambda value: f"{value:.3f}") -> None:
    print(name + ":")
    if not values:
        print("  (no data)")
        return
    stats = compute_basic_stats(values)
    print(
        "  Count {count}, mean {mean}, median {median}, min {min}, max {max}".format(
            count=len(values),
            mean=formatter(stats["mean"]),
            median=formatter(stats["median"]),
            min=formatter(stats["min"]),
            max=formatter(stats["max"]),
        )
    )
    parts = [f"p{int(pct)}={formatter(percentile(values, pct))}" for pct in PERCENTILES]
    print("  Percentiles: " + ", ".join(parts))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the dungeon generator multiple times and report timing and shape statistics."
    )
    parser.add_argument("-n", "--runs", type=int, default=200, help="Number of maps to generate (default: 200)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the per-run seed sequence")
    parser.add_argument("--width", type=int, default=DEFAULT_CONFIG_KWARGS["map_width"])
    parser.add_argument("--height", type=int, default=DEFAULT_CONFIG_KWARGS["map_height"])
    parser.add_argument("--cells-per-row", type=int, default=DEFAULT_CONFIG_KWARGS["cells_per_row"])
    parser.add_argument("--cells-per-col", type=int, default=DEFAULT_CONFIG_KWARGS["cells_per_col"])
    parser.add_argument("--jitter", action="store_true")
    parser.add_argument("--anchors", choices=[mode.value for mode in AnchorMode], default=AnchorMode.CENTER.value)
    parser.add_argument(
        "--corridors", choices=[style.value for style in CorridorStyle], default=CorridorStyle.ELBOW.value
    )
    parser.add_argument("--output", default=None, help="Write aggregated results as JSON to this path")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    config_kwargs = dict(
        map_width=args.width,
        map_height=args.height,
        cells_per_row=args.cells_per_row,
        cells_per_col=args.cells_per_col,
        room_jitter=args.jitter,
        anchor_mode=AnchorMode(args.anchors),
        corridor_style=CorridorStyle(args.corridors),
    )
    metrics = GenerationMetrics()
    results = run_benchmark(args.runs, args.seed, config_kwargs, metrics)

    durations = [result.duration for result in results]
    floor_fractions = [result.floor_fraction for result in results]
    diameters = [float(result.graph_diameter) for result in results]
    leaves = [float(result.leaf_rooms) for result in results]

    report_metric("Generation time", durations, format_seconds)
    print()
    report_metric("Floor fraction", floor_fractions, lambda value: f"{value:.1%}")
    print()
    report_metric("Room graph diameter", diameters, lambda value: f"{value:.1f}")
    print()
    report_metric("Leaf rooms", leaves, lambda value: f"{value:.1f}")

    print()
    print("Stage performance summary:")
    for name, stage in sorted(metrics.stages.items(), key=lambda item: item[1].total_time, reverse=True):
        print(
            f"  {name}: invocations={stage.invocations}, total_time={format_seconds(stage.total_time)},"
            f" avg_time={format_seconds(stage.to_dict()['average_time'])}"
        )

    if args.output:
        timestamp = datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0)
        benchmark_data = {
            "benchmark_run_info": {
                "timestamp": timestamp.isoformat(),
                "num_iterations": args.runs,
                "seed": args.seed,
                "config": {key: getattr(value, "value", value) for key, value in config_kwargs.items()},
            },
            "aggregated_results": {
                "duration_seconds": summarize_values(durations),
                "floor_fraction": summarize_values(floor_fractions),
                "graph_diameter": summarize_values(diameters),
                "leaf_rooms": summarize_values(leaves),
            },
            "stage_summary": metrics.snapshot(),
            "results": [asdict(result) for result in results],
        }
        with open(args.output, "w", encoding="utf-8") as handle:
            json.dump(benchmark_data, handle, indent=2, sort_keys=True)
            handle.write("\n")
        print(f"\nSaved benchmark results to {args.output}")


if __name__ == "__main__":
    main()
