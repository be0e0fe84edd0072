"""Tests for direct and network-snapped route synthesis."""

from __future__ import annotations

import logging

import pytest
import requests
from shapely.geometry import box

from auto_route.errors import (
    InsufficientPointsError,
    NetworkMatchFailure,
    RouteGenerationError,
)
from auto_route.geometry.preprocessing import downsample_every_nth, sample_step
from auto_route.geometry.projection import buffer_region
from auto_route.models import GenerationStats, RegionGeometry, SynthesisOptions
from auto_route.synthesis import build_match_request, snap_to_network, synthesize

from conftest import RecordingClient, line_inside_square, make_points


def _region(name: str = "Ward 7", bounds=(0.0, 0.0, 0.01, 0.01), buffer_m: float = 0):
    return buffer_region(RegionGeometry(geometry=box(*bounds), name=name), buffer_m)


def test_direct_route_without_smoothing_keeps_every_point() -> None:
    coords = line_inside_square(25)
    coords[3] = (coords[3][0], 0.0052)  # jitter must survive with tolerance 0
    points = make_points(coords)

    result = synthesize(_region(), points, SynthesisOptions(smoothing_tolerance=0))

    assert result.route.coordinates == coords
    assert result.route.point_count == 25
    assert result.stats.filtered_point_count == 25
    assert not result.fallback_used
    assert result.warnings == []


def test_direct_route_drops_elevation() -> None:
    points = make_points([(0.001, 0.001, 12.0), (0.002, 0.002, 14.0)])

    result = synthesize(_region(), points)

    assert result.route.coordinates == [(0.001, 0.001), (0.002, 0.002)]


def test_smoothing_collapses_near_colinear_points() -> None:
    region = _region(bounds=(-1.0, -1.0, 3.0, 2.0))
    points = make_points([(0, 0), (1, 0), (2, 0), (1, 1)])

    result = synthesize(region, points, SynthesisOptions(smoothing_tolerance=10))

    coords = result.route.coordinates
    assert len(coords) < 4
    assert coords[0] == (0.0, 0.0)
    assert coords[-1] == (1.0, 1.0)
    assert result.stats.filtered_point_count == 4


def test_filtering_uses_the_given_region_and_reports_stats() -> None:
    inside = line_inside_square(6)
    outside = [(0.05, 0.05), (0.06, 0.05), (-0.02, 0.0), (0.005, 0.03)]
    points = make_points(inside[:3] + outside + inside[3:])

    result = synthesize(_region(), points)

    assert result.route.coordinates == inside
    assert result.stats.original_point_count == 10
    assert result.stats.filtered_point_count == 6
    assert result.stats.efficiency_percent == 60


@pytest.mark.parametrize(
    ("original", "filtered", "expected"),
    [(8, 1, 13), (8, 3, 38), (8, 5, 63), (3, 1, 33), (0, 0, 0), (4, 4, 100)],
)
def test_efficiency_percent_rounds_halves_up(original, filtered, expected) -> None:
    stats = GenerationStats(original_point_count=original, filtered_point_count=filtered)

    assert stats.efficiency_percent == expected


def test_route_metadata_mentions_region_and_count() -> None:
    points = make_points(line_inside_square(4))

    route = synthesize(_region("Harbour"), points).route

    assert route.name == "Auto Route - Harbour"
    assert route.description == "Generated from 4 points inside Harbour."
    assert route.region_name == "Harbour"
    assert route.as_linestring().geom_type == "LineString"


@pytest.mark.parametrize("inside_count", [0, 1])
@pytest.mark.parametrize("snap", [False, True])
def test_fewer_than_two_points_is_rejected(inside_count: int, snap: bool) -> None:
    client = RecordingClient(matchings=[[(0.0, 0.0), (1.0, 1.0)]])
    points = make_points([(0.5, 0.5), (0.6, 0.6)] + line_inside_square(inside_count))

    with pytest.raises(InsufficientPointsError):
        synthesize(
            _region(),
            points,
            SynthesisOptions(snap_to_network=snap, smoothing_tolerance=0.0001),
            client=client,
        )
    assert client.requests == []


def test_snap_downsamples_to_request_bound() -> None:
    coords = line_inside_square(200)
    client = RecordingClient(matchings=[[(0.0, 0.005), (0.0099, 0.005)]])

    synthesize(
        _region(),
        make_points(coords),
        SynthesisOptions(snap_to_network=True),
        client=client,
        max_coordinates=90,
    )

    assert len(client.requests) == 1
    sent = client.requests[0]
    assert sample_step(200, 90) == 3
    assert len(sent) == 67
    assert sent == coords[::3]


def test_snap_request_is_two_dimensional() -> None:
    points = make_points([(0.001, 0.001, 50.0), (0.002, 0.002, 55.0)])

    assert build_match_request(points) == [(0.001, 0.001), (0.002, 0.002)]


@pytest.mark.parametrize("count", [1, 2, 89, 90, 91, 179, 180, 181, 1000, 12345])
def test_downsampling_never_exceeds_bound(count: int) -> None:
    items = list(range(count))

    sampled = downsample_every_nth(items, 90)

    assert len(sampled) <= 90
    assert sampled[0] == 0
    assert sampled == sorted(sampled)


def test_snap_merges_matchings_in_order_without_dedup() -> None:
    first = [(0.001, 0.005), (0.002, 0.005), (0.003, 0.005)]
    second = [(0.003, 0.005), (0.004, 0.005)]
    client = RecordingClient(matchings=[first, second])

    result = synthesize(
        _region("Docks"),
        make_points(line_inside_square(10)),
        SynthesisOptions(snap_to_network=True, profile="walking"),
        client=client,
    )

    assert result.route.coordinates == first + second
    assert result.route.snapped
    assert result.route.name == "Auto Route (Snapped) - Docks"
    assert result.route.description.endswith("Snapped to road network.")
    assert client.profiles == ["walking"]
    assert not result.fallback_used


def test_snap_failure_falls_back_to_full_unsimplified_line(
    failing_client: RecordingClient, caplog: pytest.LogCaptureFixture
) -> None:
    coords = line_inside_square(200)

    with caplog.at_level(logging.WARNING, logger="auto_route.synthesis"):
        result = synthesize(
            _region(),
            make_points(coords),
            SynthesisOptions(snap_to_network=True, smoothing_tolerance=1.0),
            client=failing_client,
        )

    assert result.fallback_used
    assert not result.route.snapped
    assert result.route.coordinates == coords
    assert len(result.route.coordinates) != len(failing_client.requests[0])
    assert result.stats.filtered_point_count == 200
    assert len(result.warnings) == 1
    assert "service unavailable" in result.warnings[0]
    assert "road matching failed" in caplog.text.lower()


def test_transport_errors_from_client_are_recovered() -> None:
    client = RecordingClient(error=requests.Timeout("read timed out"))
    coords = line_inside_square(5)

    outcome = snap_to_network(make_points(coords), client)

    assert outcome.fallback_used
    assert outcome.coordinates == coords
    assert outcome.warning is not None and "timed out" in outcome.warning


@pytest.mark.parametrize("matchings", [[], [[]], [[(0.001, 0.005)]]])
def test_empty_matchings_from_client_fall_back(matchings) -> None:
    client = RecordingClient(matchings=matchings)
    coords = line_inside_square(5)

    result = synthesize(
        _region(),
        make_points(coords),
        SynthesisOptions(snap_to_network=True),
        client=client,
    )

    assert result.fallback_used
    assert not result.route.snapped
    assert result.route.coordinates == coords
    assert result.route.name == "Auto Route - Ward 7"
    assert len(result.warnings) == 1


def test_unexpected_client_errors_propagate() -> None:
    client = RecordingClient(error=RuntimeError("bug"))

    with pytest.raises(RuntimeError):
        snap_to_network(make_points(line_inside_square(5)), client)


def test_network_failure_is_a_route_generation_error() -> None:
    assert issubclass(NetworkMatchFailure, RouteGenerationError)
