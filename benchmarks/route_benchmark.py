"""Benchmark region scoring and route synthesis with large point counts."""

from __future__ import annotations

import argparse
import logging
import statistics
import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from shapely.geometry import box

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Late imports rely on the adjusted sys.path above.
from auto_route.config import (  # noqa: E402
    MAP_MATCHING_MAX_COORDINATES,
    ROUTE_BUFFER_METERS,
    ROUTE_SMOOTHING_TOLERANCE,
)
from auto_route.geometry.extraction import extract_points  # noqa: E402
from auto_route.models import (  # noqa: E402
    PathFeature,
    PositionSample,
    RegionGeometry,
    SynthesisOptions,
)
from auto_route.scoring import score_regions  # noqa: E402
from auto_route.synthesis import build_match_request, synthesize  # noqa: E402


@dataclass(slots=True)
class StageDurations:
    """Timing measurements (in seconds) for the route pipeline."""

    extract: float
    score: float
    synthesize: float
    match_request: float

    @property
    def total(self) -> float:
        """Return the aggregate duration for this benchmark iteration."""

        return self.extract + self.score + self.synthesize + self.match_request


@dataclass(slots=True)
class BenchmarkSummary:
    """Aggregated statistics for multiple benchmark iterations."""

    point_count: int
    region_count: int
    iterations: int
    mean_extract_ms: float
    mean_score_ms: float
    mean_synthesize_ms: float
    mean_match_request_ms: float
    mean_total_ms: float
    worst_total_ms: float


def _build_track(point_count: int) -> List[PathFeature]:
    """Generate a zig-zag path that wanders across the region grid."""

    base_lon = -0.12
    base_lat = 51.5
    step_deg = 1.2e-5
    positions = tuple(
        PositionSample(
            lon=base_lon + idx * step_deg,
            lat=base_lat + (idx % 50) * step_deg,
        )
        for idx in range(point_count)
    )
    return [PathFeature(positions)]


def _build_regions(region_count: int, span_deg: float) -> List[RegionGeometry]:
    """Split the track's longitude span into adjacent rectangular regions."""

    width = span_deg / region_count
    return [
        RegionGeometry(
            geometry=box(
                -0.12 + idx * width,
                51.49,
                -0.12 + (idx + 1) * width,
                51.51,
            ),
            name=f"Region {idx + 1}",
        )
        for idx in range(region_count)
    ]


def _run_iteration(
    track: List[PathFeature], regions: List[RegionGeometry]
) -> StageDurations:
    """Execute one benchmark iteration and capture per-stage timings."""

    start = time.perf_counter()
    points = extract_points(track)
    extract = time.perf_counter() - start

    start = time.perf_counter()
    score = score_regions(points, regions, ROUTE_BUFFER_METERS)
    score_dur = time.perf_counter() - start
    if not score.candidates:
        raise RuntimeError("Synthetic track missed every region")

    start = time.perf_counter()
    result = synthesize(
        score.candidates[0].buffered,
        points,
        SynthesisOptions(smoothing_tolerance=ROUTE_SMOOTHING_TOLERANCE),
    )
    _ = result
    synth = time.perf_counter() - start

    start = time.perf_counter()
    request = build_match_request(points, MAP_MATCHING_MAX_COORDINATES)
    _ = request
    match_request = time.perf_counter() - start

    return StageDurations(
        extract=extract,
        score=score_dur,
        synthesize=synth,
        match_request=match_request,
    )


def run_benchmark(
    point_count: int,
    region_count: int,
    iterations: int,
) -> BenchmarkSummary:
    """Benchmark the route pipeline and return aggregated timings."""

    if point_count < 1000:
        raise ValueError("point_count must be at least 1,000")
    if region_count <= 0:
        raise ValueError("region_count must be positive")
    if iterations <= 0:
        raise ValueError("iterations must be positive")

    track = _build_track(point_count)
    regions = _build_regions(region_count, span_deg=point_count * 1.2e-5)

    durations: List[StageDurations] = []
    for _ in range(iterations):
        durations.append(_run_iteration(track, regions))

    worst_total = max(item.total for item in durations)
    return BenchmarkSummary(
        point_count=point_count,
        region_count=region_count,
        iterations=iterations,
        mean_extract_ms=statistics.fmean(d.extract for d in durations) * 1000.0,
        mean_score_ms=statistics.fmean(d.score for d in durations) * 1000.0,
        mean_synthesize_ms=statistics.fmean(d.synthesize for d in durations)
        * 1000.0,
        mean_match_request_ms=statistics.fmean(d.match_request for d in durations)
        * 1000.0,
        mean_total_ms=statistics.fmean(d.total for d in durations) * 1000.0,
        worst_total_ms=worst_total * 1000.0,
    )


def _format_summary(summary: BenchmarkSummary) -> Dict[str, float]:
    """Return a JSON-friendly representation of the benchmark summary."""

    return {
        "point_count": summary.point_count,
        "region_count": summary.region_count,
        "iterations": summary.iterations,
        "mean_extract_ms": summary.mean_extract_ms,
        "mean_score_ms": summary.mean_score_ms,
        "mean_synthesize_ms": summary.mean_synthesize_ms,
        "mean_match_request_ms": summary.mean_match_request_ms,
        "mean_total_ms": summary.mean_total_ms,
        "worst_total_ms": summary.worst_total_ms,
    }


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments for the benchmark utility."""

    parser = argparse.ArgumentParser(
        description="Benchmark region scoring and route synthesis",
    )
    parser.add_argument(
        "--points",
        type=int,
        default=20000,
        help="Number of points in the synthetic track",
    )
    parser.add_argument(
        "--regions",
        type=int,
        default=25,
        help="Number of candidate regions",
    )
    parser.add_argument(
        "--iterations",
        type=int,
        default=5,
        help="Number of repetitions for averaging",
    )
    return parser.parse_args()


def main() -> None:
    """Entry point when running the module as a script."""

    logging.basicConfig(
        level=logging.INFO,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )
    args = _parse_args()
    summary = run_benchmark(args.points, args.regions, args.iterations)
    formatted = _format_summary(summary)
    for key, value in formatted.items():
        if key in {"point_count", "region_count", "iterations"}:
            print(f"{key}: {value}")
        else:
            print(f"{key}: {value:.3f}")


if __name__ == "__main__":
    main()
