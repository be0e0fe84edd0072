"""Metric buffering of lon/lat regions through a local UTM projection."""

from __future__ import annotations

import logging
from typing import Tuple

from pyproj import CRS, Transformer
from pyproj.exceptions import CRSError
from shapely.geometry.base import BaseGeometry
from shapely.ops import transform as shapely_transform

from ..errors import MalformedGeometryError
from ..models import BufferedRegion, RegionGeometry

LOGGER = logging.getLogger(__name__)

WGS84 = CRS.from_epsg(4326)


def buffer_region(region: RegionGeometry, buffer_m: float) -> BufferedRegion:
    """Expand ``region`` outward by ``buffer_m`` metres.

    The buffer is computed in a UTM zone centred on the region and projected
    back to lon/lat, so the result can be tested directly against raw GPS
    samples. A zero buffer returns the source geometry unchanged.
    """

    if buffer_m < 0:
        raise ValueError("buffer_m must be zero or positive")
    if not region.is_polygonal:
        raise MalformedGeometryError(
            f"Region {region.display_name!r} is a {region.geometry.geom_type}, "
            "expected Polygon or MultiPolygon"
        )
    if region.geometry.is_empty:
        raise MalformedGeometryError(f"Region {region.display_name!r} is empty")
    if buffer_m == 0:
        return BufferedRegion(source=region, buffer_m=0.0, geometry=region.geometry)

    forward, inverse = _build_local_transformers(region.geometry)
    metric = shapely_transform(forward.transform, region.geometry)
    expanded = metric.buffer(buffer_m)
    geometry = shapely_transform(inverse.transform, expanded)
    if geometry.is_empty:
        raise MalformedGeometryError(
            f"Buffering region {region.display_name!r} produced an empty geometry"
        )
    LOGGER.debug(
        "Buffered region %s by %.1fm (area %.3g -> %.3g deg^2)",
        region.display_name,
        buffer_m,
        region.geometry.area,
        geometry.area,
    )
    return BufferedRegion(source=region, buffer_m=float(buffer_m), geometry=geometry)


def _build_local_transformers(
    geometry: BaseGeometry,
) -> Tuple[Transformer, Transformer]:
    """Build lon/lat <-> UTM transformers centred on ``geometry``."""

    centre = geometry.centroid
    mean_lon, mean_lat = float(centre.x), float(centre.y)
    zone = int((mean_lon + 180.0) // 6.0) + 1
    zone = max(1, min(zone, 60))
    if mean_lat >= 0:
        epsg = 32600 + zone
    else:
        epsg = 32700 + zone
    try:
        target_crs = CRS.from_epsg(epsg)
    except CRSError:
        target_crs = CRS.from_epsg(3857)
    forward = Transformer.from_crs(WGS84, target_crs, always_xy=True)
    inverse = Transformer.from_crs(target_crs, WGS84, always_xy=True)
    return forward, inverse


__all__ = ["buffer_region"]
