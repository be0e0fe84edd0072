"""Adapters between GeoJSON-shaped mappings and the package's models.

Hosts hand over whatever their own parsers produced (a FeatureCollection,
a single Feature, or a bare geometry mapping). No file I/O happens here.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from shapely.errors import ShapelyError
from shapely.geometry import shape

from .errors import MalformedGeometryError
from .models import (
    PathFeature,
    PointFeature,
    PositionSample,
    RegionGeometry,
    SynthesisResult,
    TrackFeature,
)

LOGGER = logging.getLogger(__name__)

_Feature = Tuple[Optional[Mapping[str, Any]], Dict[str, Any]]


def track_from_geojson(data: Mapping[str, Any]) -> List[TrackFeature]:
    """Convert GeoJSON track data into point and path features.

    ``MultiPoint`` and ``MultiLineString`` parts become individual features.
    Features without geometry are skipped; any other geometry type raises
    ``MalformedGeometryError``.
    """

    features: List[TrackFeature] = []
    for geometry, properties in _iter_features(data):
        if geometry is None:
            continue
        if not isinstance(geometry, Mapping):
            raise MalformedGeometryError(f"Invalid geometry: {geometry!r}")
        geom_type = geometry.get("type")
        coords = geometry.get("coordinates")
        if geom_type == "Point":
            features.append(PointFeature(_parse_position(coords), properties))
        elif geom_type == "MultiPoint":
            for position in _parse_positions(coords, geom_type):
                features.append(PointFeature(position, properties))
        elif geom_type == "LineString":
            features.append(
                PathFeature(tuple(_parse_positions(coords, geom_type)), properties)
            )
        elif geom_type == "MultiLineString":
            for part in _as_list(coords, geom_type):
                features.append(
                    PathFeature(tuple(_parse_positions(part, geom_type)), properties)
                )
        else:
            raise MalformedGeometryError(
                f"Unsupported track geometry type: {geom_type!r}"
            )
    return features


def regions_from_geojson(data: Mapping[str, Any]) -> List[RegionGeometry]:
    """Convert GeoJSON boundary data into regions.

    Non-polygonal geometries are kept; region scoring ignores them.
    """

    regions: List[RegionGeometry] = []
    for geometry, properties in _iter_features(data):
        if geometry is None:
            continue
        if not isinstance(geometry, Mapping):
            raise MalformedGeometryError(f"Invalid geometry: {geometry!r}")
        try:
            geom = shape(geometry)
        except (ShapelyError, AttributeError, KeyError, TypeError, ValueError) as exc:
            raise MalformedGeometryError(
                f"Invalid region geometry ({geometry.get('type')!r}): {exc}"
            ) from exc
        if geom.geom_type in ("Polygon", "MultiPolygon") and not geom.is_valid:
            # Self-intersecting rings from hand-drawn boundaries.
            LOGGER.debug("Repairing invalid region geometry %s", properties.get("name"))
            geom = geom.buffer(0)
        regions.append(RegionGeometry(geometry=geom, properties=properties))
    return regions


def route_to_geojson(result: SynthesisResult) -> Dict[str, Any]:
    """Return a FeatureCollection holding the generated route line."""

    route = result.route
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[lon, lat] for lon, lat in route.coordinates],
                },
                "properties": {
                    "name": route.name,
                    "description": route.description,
                    "pointCount": route.point_count,
                    "originalPointCount": result.stats.original_point_count,
                    "filteredPointCount": result.stats.filtered_point_count,
                    "snapped": route.snapped,
                },
            }
        ],
    }


def _iter_features(data: Mapping[str, Any]) -> Iterator[_Feature]:
    if not isinstance(data, Mapping):
        raise MalformedGeometryError("Expected a GeoJSON mapping")
    kind = data.get("type")
    if kind == "FeatureCollection":
        features = data.get("features")
        if not isinstance(features, list):
            raise MalformedGeometryError("FeatureCollection has no feature list")
        for feature in features:
            yield _unpack_feature(feature)
    elif kind == "Feature":
        yield _unpack_feature(data)
    elif kind == "GeometryCollection":
        for geometry in data.get("geometries") or []:
            yield geometry, {}
    else:
        yield data, {}


def _unpack_feature(feature: Any) -> _Feature:
    if not isinstance(feature, Mapping) or feature.get("type") != "Feature":
        raise MalformedGeometryError("Expected a GeoJSON Feature")
    properties = dict(feature.get("properties") or {})
    return feature.get("geometry"), properties


def _as_list(value: Any, geom_type: str) -> Sequence[Any]:
    if not isinstance(value, (list, tuple)):
        raise MalformedGeometryError(f"{geom_type} coordinates must be a list")
    return value


def _parse_positions(coords: Any, geom_type: str) -> List[PositionSample]:
    return [_parse_position(item) for item in _as_list(coords, geom_type)]


def _parse_position(coords: Any) -> PositionSample:
    if not isinstance(coords, (list, tuple)) or len(coords) < 2:
        raise MalformedGeometryError(f"Invalid position: {coords!r}")
    try:
        values = [float(value) for value in coords[:3]]
    except (TypeError, ValueError) as exc:
        raise MalformedGeometryError(f"Invalid position: {coords!r}") from exc
    if not all(math.isfinite(value) for value in values[:2]):
        raise MalformedGeometryError(f"Non-finite position: {coords!r}")
    elevation = values[2] if len(values) > 2 else None
    return PositionSample(lon=values[0], lat=values[1], elevation=elevation)


__all__ = ["track_from_geojson", "regions_from_geojson", "route_to_geojson"]
