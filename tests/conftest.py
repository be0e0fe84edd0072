"""Global pytest fixtures & helpers.

Adds project root to path and provides reusable track/region factories so
scoring, synthesis and service tests share the same fixed coordinates.
"""
from __future__ import annotations

import os
import sys
from typing import Iterable, List, Optional, Sequence, Tuple

import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from shapely.geometry import box

from auto_route.errors import NetworkMatchFailure
from auto_route.models import (
    PathFeature,
    PointFeature,
    PositionSample,
    RegionGeometry,
)


# --- Factory helpers -------------------------------------------------
def make_points(coords: Iterable[Sequence[float]]) -> List[PositionSample]:
    return [PositionSample(*pair) for pair in coords]


def make_square(
    name: str, minx: float = 0.0, miny: float = 0.0, size: float = 0.01
) -> RegionGeometry:
    return RegionGeometry(geometry=box(minx, miny, minx + size, miny + size), name=name)


def point_track(coords: Iterable[Sequence[float]]) -> List[PointFeature]:
    return [PointFeature(pt) for pt in make_points(coords)]


def path_track(coords: Iterable[Sequence[float]]) -> List[PathFeature]:
    return [PathFeature(tuple(make_points(coords)))]


def ring_outside_square() -> List[Tuple[float, float]]:
    """Ten points looping ~22m outside the edges of ``make_square('x')``."""

    off = 0.0002
    return [
        (0.003, -off),
        (0.007, -off),
        (0.01 + off, 0.002),
        (0.01 + off, 0.005),
        (0.01 + off, 0.008),
        (0.007, 0.01 + off),
        (0.003, 0.01 + off),
        (-off, 0.008),
        (-off, 0.005),
        (-off, 0.002),
    ]


def line_inside_square(count: int, lat: float = 0.005) -> List[Tuple[float, float]]:
    """``count`` points walking east across the unit test square."""

    step = 0.0099 / max(count, 1)
    return [(idx * step, lat) for idx in range(count)]


class RecordingClient:
    """Stand-in for ``MapMatchingClient`` that records requests."""

    def __init__(
        self,
        matchings: Optional[List[List[Tuple[float, float]]]] = None,
        error: Optional[Exception] = None,
    ):
        self.matchings = matchings or []
        self.error = error
        self.requests: List[List[Tuple[float, float]]] = []
        self.profiles: List[Optional[str]] = []

    def match(self, coordinates, profile=None):
        self.requests.append(list(coordinates))
        self.profiles.append(profile)
        if self.error is not None:
            raise self.error
        return self.matchings


# --- Fixtures --------------------------------------------------------
@pytest.fixture
def square_region() -> RegionGeometry:
    return make_square("Ward 7")


@pytest.fixture
def failing_client() -> RecordingClient:
    return RecordingClient(error=NetworkMatchFailure("service unavailable"))
