"""Flatten heterogeneous track features into an ordered point sequence."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List

from ..errors import EmptyTrackError, MalformedGeometryError
from ..models import PathFeature, PointFeature, PositionSample, TrackFeature

LOGGER = logging.getLogger(__name__)


def _point_positions(feature: PointFeature) -> Iterable[PositionSample]:
    return (feature.position,)


def _path_positions(feature: PathFeature) -> Iterable[PositionSample]:
    # Paths are exploded into their vertices, in traversal order.
    return feature.positions


_HANDLERS: Dict[str, Callable[..., Iterable[PositionSample]]] = {
    PointFeature.kind: _point_positions,
    PathFeature.kind: _path_positions,
}


def extract_points(track: Iterable[TrackFeature]) -> List[PositionSample]:
    """Return every position in ``track`` in source order.

    Point features contribute one sample, path features contribute each
    vertex. Raises ``EmptyTrackError`` when nothing could be extracted.
    """

    points: List[PositionSample] = []
    feature_count = 0
    for feature in track:
        feature_count += 1
        kind = getattr(feature, "kind", None)
        handler = _HANDLERS.get(kind) if isinstance(kind, str) else None
        if handler is None:
            raise MalformedGeometryError(
                f"Unsupported track feature at position {feature_count - 1}: {kind!r}"
            )
        points.extend(handler(feature))
    if not points:
        raise EmptyTrackError("No positional samples found in track")
    LOGGER.debug(
        "Extracted %d samples from %d track features", len(points), feature_count
    )
    return points


__all__ = ["extract_points"]
