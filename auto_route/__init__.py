"""Auto route generation from raw GPS tracks and candidate boundary regions."""

from .errors import (
    EmptyTrackError,
    InsufficientPointsError,
    MalformedGeometryError,
    NetworkMatchFailure,
    NoMatchError,
    RouteGenerationError,
)
from .geometry import buffer_region, extract_points
from .map_matching import MapMatchingClient
from .models import (
    BufferedRegion,
    GenerationStats,
    PathFeature,
    PointFeature,
    PositionSample,
    RegionCandidate,
    RegionGeometry,
    RouteGeometry,
    SynthesisOptions,
    SynthesisResult,
)
from .scoring import AMBIGUOUS, AUTO_SELECT, NO_MATCH, ScoreResult, score_regions
from .services import RouteService, RouteServiceConfig
from .synthesis import synthesize

__all__ = [
    "EmptyTrackError",
    "InsufficientPointsError",
    "MalformedGeometryError",
    "NetworkMatchFailure",
    "NoMatchError",
    "RouteGenerationError",
    "buffer_region",
    "extract_points",
    "MapMatchingClient",
    "BufferedRegion",
    "GenerationStats",
    "PathFeature",
    "PointFeature",
    "PositionSample",
    "RegionCandidate",
    "RegionGeometry",
    "RouteGeometry",
    "SynthesisOptions",
    "SynthesisResult",
    "AMBIGUOUS",
    "AUTO_SELECT",
    "NO_MATCH",
    "ScoreResult",
    "score_regions",
    "RouteService",
    "RouteServiceConfig",
    "synthesize",
]
