"""Geometry helpers for point extraction, buffering, containment and lines."""

from .extraction import extract_points
from .projection import buffer_region
from .containment import (
    as_lonlat_array,
    contained_mask,
    count_contained,
    filter_contained,
)
from .preprocessing import (
    downsample_every_nth,
    sample_step,
    simplify_coordinates,
    to_lonlat_pairs,
)

__all__ = [
    "extract_points",
    "buffer_region",
    "as_lonlat_array",
    "contained_mask",
    "count_contained",
    "filter_contained",
    "downsample_every_nth",
    "sample_step",
    "simplify_coordinates",
    "to_lonlat_pairs",
]
