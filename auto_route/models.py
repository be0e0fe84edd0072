"""Dataclasses describing track inputs, candidate regions and generated routes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Sequence, Tuple, Union

from shapely.geometry import LineString
from shapely.geometry.base import BaseGeometry

from .config import UNNAMED_REGION_LABEL


LonLat = Tuple[float, float]

POLYGONAL_TYPES = frozenset({"Polygon", "MultiPolygon"})


@dataclass(frozen=True, slots=True)
class PositionSample:
    """Single GPS fix. Elevation is carried through but ignored downstream."""

    lon: float
    lat: float
    elevation: Optional[float] = None

    @property
    def lonlat(self) -> LonLat:
        return self.lon, self.lat


@dataclass(frozen=True, slots=True)
class PointFeature:
    """Track feature holding a single position."""

    kind: ClassVar[str] = "Point"

    position: PositionSample
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class PathFeature:
    """Track feature holding an ordered run of positions."""

    kind: ClassVar[str] = "LineString"

    positions: Tuple[PositionSample, ...]
    properties: Dict[str, Any] = field(default_factory=dict)


TrackFeature = Union[PointFeature, PathFeature]
TrackGeometry = Sequence[TrackFeature]


@dataclass(slots=True)
class RegionGeometry:
    """Candidate boundary the track may have occurred within."""

    geometry: BaseGeometry
    name: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_polygonal(self) -> bool:
        return self.geometry.geom_type in POLYGONAL_TYPES

    @property
    def display_name(self) -> str:
        for candidate in (
            self.name,
            self.properties.get("name"),
            self.properties.get("Name"),
        ):
            if candidate:
                return str(candidate)
        return UNNAMED_REGION_LABEL


@dataclass(frozen=True, slots=True)
class BufferedRegion:
    """A region expanded outward by ``buffer_m`` metres.

    Always derived from exactly one source region and one tolerance; callers
    rebuild it whenever either changes.
    """

    source: RegionGeometry
    buffer_m: float
    geometry: BaseGeometry

    @property
    def name(self) -> str:
        return self.source.display_name


@dataclass(slots=True)
class RegionCandidate:
    """Scoring outcome for one region that contains at least one point."""

    region: RegionGeometry
    buffered: BufferedRegion
    name: str
    count: int
    percentage: float
    index: int


@dataclass(slots=True)
class RouteGeometry:
    """Synthesised route path plus provenance metadata."""

    coordinates: List[LonLat]
    name: str
    description: str
    point_count: int
    region_name: str
    snapped: bool = False

    def as_linestring(self) -> LineString:
        return LineString(self.coordinates)


@dataclass(frozen=True, slots=True)
class GenerationStats:
    """Point counts before and after filtering to the selected region."""

    original_point_count: int
    filtered_point_count: int

    @property
    def efficiency_percent(self) -> int:
        """Share of the track that fell inside the region, as a whole percent."""

        if self.original_point_count <= 0:
            return 0
        # Halves round up.
        share = self.filtered_point_count / self.original_point_count * 100
        return int(math.floor(share + 0.5))


@dataclass(frozen=True, slots=True)
class SynthesisOptions:
    """Tunables for route synthesis."""

    smoothing_tolerance: float = 0.0
    snap_to_network: bool = False
    profile: Optional[str] = None


@dataclass(slots=True)
class SnapOutcome:
    """Result of a network-snap attempt.

    ``fallback_used`` is True when the service failed and ``coordinates`` hold
    the direct line over the full filtered point set instead.
    """

    coordinates: List[LonLat]
    fallback_used: bool
    warning: Optional[str] = None


@dataclass(slots=True)
class SynthesisResult:
    route: RouteGeometry
    stats: GenerationStats
    warnings: List[str] = field(default_factory=list)
    fallback_used: bool = False
