"""Point-in-region tests over whole sample sequences."""

from __future__ import annotations

from typing import List, Sequence

import numpy as np
import shapely
from numpy.typing import NDArray
from shapely.geometry.base import BaseGeometry

from ..models import PositionSample

CoordArray = NDArray[np.float64]


def as_lonlat_array(points: Sequence[PositionSample]) -> CoordArray:
    """Return an ``(n, 2)`` float array of lon/lat pairs."""

    if not points:
        return np.empty((0, 2), dtype=float)
    return np.asarray([(pt.lon, pt.lat) for pt in points], dtype=float)


def contained_mask(
    points: Sequence[PositionSample], geometry: BaseGeometry
) -> NDArray[np.bool_]:
    """Return a boolean mask of samples lying inside or on ``geometry``.

    Boundary points count as contained. For multi-part geometries a sample
    is contained when any part holds it; holes exclude.
    """

    coords = as_lonlat_array(points)
    if coords.shape[0] == 0:
        return np.zeros(0, dtype=bool)
    # For point-vs-area tests intersects is equivalent to covers.
    return np.asarray(
        shapely.intersects_xy(geometry, coords[:, 0], coords[:, 1]), dtype=bool
    )


def count_contained(points: Sequence[PositionSample], geometry: BaseGeometry) -> int:
    return int(np.count_nonzero(contained_mask(points, geometry)))


def filter_contained(
    points: Sequence[PositionSample], geometry: BaseGeometry
) -> List[PositionSample]:
    """Return the samples inside ``geometry``, preserving order."""

    mask = contained_mask(points, geometry)
    return [pt for pt, inside in zip(points, mask) if inside]


__all__ = [
    "as_lonlat_array",
    "contained_mask",
    "count_contained",
    "filter_contained",
]
