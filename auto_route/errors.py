"""Central error types used across the application."""

from __future__ import annotations


class RouteGenerationError(RuntimeError):
    """Base error for track analysis and route synthesis failures."""


class EmptyTrackError(RouteGenerationError):
    """Raised when no positional samples could be extracted from a track."""


class NoMatchError(RouteGenerationError):
    """Raised when no candidate region contains any track point, even buffered."""


class InsufficientPointsError(RouteGenerationError):
    """Raised when fewer than two points remain inside the selected region."""


class MalformedGeometryError(RouteGenerationError):
    """Raised when an unsupported or broken geometry shape is encountered."""


class NetworkMatchFailure(RouteGenerationError):
    """Raised by the map-matching client; recovered locally by synthesis."""


__all__ = [
    "RouteGenerationError",
    "EmptyTrackError",
    "NoMatchError",
    "InsufficientPointsError",
    "MalformedGeometryError",
    "NetworkMatchFailure",
]
