"""Line preprocessing: simplification and request-size downsampling."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, TypeVar

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import LineString

from ..models import LonLat, PositionSample

CoordArray = NDArray[np.float64]

T = TypeVar("T")


def to_lonlat_pairs(points: Iterable[PositionSample]) -> List[LonLat]:
    """Reduce samples to 2D ``(lon, lat)`` pairs, dropping elevation."""

    return [(float(pt.lon), float(pt.lat)) for pt in points]


def simplify_coordinates(
    coordinates: Sequence[Sequence[float]], tolerance: float
) -> List[LonLat]:
    """Simplify a polyline while preserving endpoints and overall shape.

    ``tolerance`` is expressed in the coordinates' own units (degrees for
    lon/lat input). Lines with fewer than three vertices or a non-positive
    tolerance are returned unchanged.
    """

    array = _as_coord_array(coordinates)
    if len(array) < 3 or tolerance <= 0:
        return [(float(x), float(y)) for x, y in array]
    simplified = LineString(array).simplify(tolerance, preserve_topology=False)
    if simplified.is_empty or len(simplified.coords) < 2:
        # Closed loops can collapse entirely; keep the raw line instead.
        return [(float(x), float(y)) for x, y in array]
    return [(float(x), float(y)) for x, y in simplified.coords]


def sample_step(count: int, max_points: int) -> int:
    """Return the stride that keeps ``count`` items within ``max_points``."""

    if max_points <= 0:
        raise ValueError("max_points must be greater than zero")
    if count <= max_points:
        return 1
    return math.ceil(count / max_points)


def downsample_every_nth(items: Sequence[T], max_points: int) -> List[T]:
    """Keep every Nth item, with N = ceil(len / max_points), preserving order."""

    step = sample_step(len(items), max_points)
    return list(items[::step])


def _as_coord_array(points: Iterable[Sequence[float]]) -> CoordArray:
    """Convert an arbitrary iterable of coordinates into an ``(n, 2)`` array."""

    array = np.asarray(list(points), dtype=float)
    if array.size == 0:
        return np.empty((0, 2), dtype=float)
    if array.ndim != 2 or array.shape[1] < 2:
        raise ValueError("Expected a sequence of 2D coordinates")
    return array[:, :2]


__all__ = [
    "to_lonlat_pairs",
    "simplify_coordinates",
    "sample_step",
    "downsample_every_nth",
]
