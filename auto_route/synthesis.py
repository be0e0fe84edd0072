"""Build a single route line from the track points inside a chosen region.

Two strategies are available:

* direct: connect the filtered points in order, optionally simplified with
  Douglas-Peucker in coordinate units;
* network snap: send a downsampled trace to the map-matching service and
  concatenate the matched runs. Any service failure degrades to the direct
  line over the full filtered set (never simplified) and records a warning.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import requests
from shapely.errors import GEOSException

from .config import MAP_MATCHING_MAX_COORDINATES
from .errors import InsufficientPointsError, MalformedGeometryError, NetworkMatchFailure
from .geometry.containment import filter_contained
from .geometry.preprocessing import (
    downsample_every_nth,
    simplify_coordinates,
    to_lonlat_pairs,
)
from .map_matching import MapMatchingClient
from .models import (
    BufferedRegion,
    GenerationStats,
    LonLat,
    PositionSample,
    RouteGeometry,
    SnapOutcome,
    SynthesisOptions,
    SynthesisResult,
)

LOGGER = logging.getLogger(__name__)


def build_direct_line(
    points: Sequence[PositionSample], smoothing_tolerance: float = 0.0
) -> List[LonLat]:
    """Connect ``points`` in order, simplifying when a tolerance is given."""

    coordinates = to_lonlat_pairs(points)
    if smoothing_tolerance > 0:
        coordinates = simplify_coordinates(coordinates, smoothing_tolerance)
    return coordinates


def build_match_request(
    points: Sequence[PositionSample], max_coordinates: int = MAP_MATCHING_MAX_COORDINATES
) -> List[LonLat]:
    """Return the 2D coordinates sent to the matching service.

    Keeps every Nth point (N = ceil(count / max_coordinates)) so the request
    never exceeds ``max_coordinates``.
    """

    return to_lonlat_pairs(downsample_every_nth(points, max_coordinates))


def snap_to_network(
    points: Sequence[PositionSample],
    client: MapMatchingClient,
    *,
    profile: Optional[str] = None,
    max_coordinates: int = MAP_MATCHING_MAX_COORDINATES,
) -> SnapOutcome:
    """Match ``points`` against the road network, falling back locally.

    Matched runs are concatenated in response order without de-duplicating
    the joins. On failure the outcome carries the unsimplified direct line
    over every point in ``points`` and ``fallback_used`` is set.
    """

    request = build_match_request(points, max_coordinates)
    LOGGER.debug(
        "Requesting network match for %d of %d points", len(request), len(points)
    )
    try:
        matchings = client.match(request, profile)
        merged: List[LonLat] = [coord for run in matchings for coord in run]
        if len(merged) < 2:
            raise NetworkMatchFailure("Map matching returned no usable geometry")
    except (NetworkMatchFailure, requests.RequestException) as exc:
        warning = f"Road matching failed, using the raw line instead: {exc}"
        LOGGER.warning(warning)
        return SnapOutcome(
            coordinates=build_direct_line(points),
            fallback_used=True,
            warning=warning,
        )
    return SnapOutcome(coordinates=merged, fallback_used=False)


def synthesize(
    region: BufferedRegion,
    all_points: Sequence[PositionSample],
    options: SynthesisOptions | None = None,
    *,
    client: MapMatchingClient | None = None,
    max_coordinates: int = MAP_MATCHING_MAX_COORDINATES,
) -> SynthesisResult:
    """Filter ``all_points`` to ``region`` and synthesise one route from them.

    Containment is re-evaluated here against ``region`` rather than trusting
    an earlier score, since the caller may pass a differently buffered region.

    Raises:
        InsufficientPointsError: fewer than two points fall inside ``region``.
        MalformedGeometryError: the filtered points cannot form a line.
    """

    options = options or SynthesisOptions()
    region_name = region.name
    filtered = filter_contained(all_points, region.geometry)
    if len(filtered) < 2:
        raise InsufficientPointsError(
            f"Only {len(filtered)} point(s) inside {region_name}; "
            "at least 2 are needed to generate a route"
        )

    warnings: List[str] = []
    fallback_used = False
    snapped = False
    try:
        if options.snap_to_network:
            if client is None:
                client = MapMatchingClient()
            outcome = snap_to_network(
                filtered,
                client,
                profile=options.profile,
                max_coordinates=max_coordinates,
            )
            coordinates = outcome.coordinates
            fallback_used = outcome.fallback_used
            snapped = not outcome.fallback_used
            if outcome.warning:
                warnings.append(outcome.warning)
        else:
            coordinates = build_direct_line(filtered, options.smoothing_tolerance)
    except (ValueError, GEOSException) as exc:
        raise MalformedGeometryError(
            f"Error creating route geometry for {region_name}: {exc}"
        ) from exc

    route = RouteGeometry(
        coordinates=coordinates,
        name=_route_name(region_name, snapped),
        description=_route_description(region_name, len(filtered), snapped),
        point_count=len(filtered),
        region_name=region_name,
        snapped=snapped,
    )
    stats = GenerationStats(
        original_point_count=len(all_points),
        filtered_point_count=len(filtered),
    )
    LOGGER.info(
        "Generated route for %s: %d/%d points used, %d vertices%s",
        region_name,
        stats.filtered_point_count,
        stats.original_point_count,
        len(coordinates),
        " (snapped)" if snapped else "",
    )
    return SynthesisResult(
        route=route, stats=stats, warnings=warnings, fallback_used=fallback_used
    )


def _route_name(region_name: str, snapped: bool) -> str:
    if snapped:
        return f"Auto Route (Snapped) - {region_name}"
    return f"Auto Route - {region_name}"


def _route_description(region_name: str, point_count: int, snapped: bool) -> str:
    description = f"Generated from {point_count} points inside {region_name}."
    if snapped:
        description += " Snapped to road network."
    return description


__all__ = [
    "build_direct_line",
    "build_match_request",
    "snap_to_network",
    "synthesize",
]
