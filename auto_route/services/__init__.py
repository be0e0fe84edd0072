"""Service layer package.

Exports high-level services consumed by host applications.
"""

from .route_service import (
    BatchOutcome,
    RouteRun,
    RouteService,
    RouteServiceConfig,
    TrackAnalysis,
)

__all__ = [
    "BatchOutcome",
    "RouteRun",
    "RouteService",
    "RouteServiceConfig",
    "TrackAnalysis",
]
