"""Helpers for turning map-matching HTTP responses into coordinate lists."""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Type

import requests
from polyline import decode as polyline_decode

from ..errors import NetworkMatchFailure
from ..models import LonLat

RequestsJSONDecodeError: Type[Exception]
if hasattr(requests.exceptions, "JSONDecodeError"):
    RequestsJSONDecodeError = requests.exceptions.JSONDecodeError
else:  # pragma: no cover - fallback for old requests versions
    RequestsJSONDecodeError = ValueError

LOGGER = logging.getLogger(__name__)

GEOMETRY_FORMATS = {"geojson": None, "polyline": 5, "polyline6": 6}

__all__ = [
    "GEOMETRY_FORMATS",
    "extract_error",
    "parse_match_response",
]


def parse_match_response(
    response: requests.Response, geometry_format: str = "geojson"
) -> List[List[LonLat]]:
    """Validate ``response`` and return its matchings as coordinate runs.

    Raises ``NetworkMatchFailure`` for non-2xx statuses, non-JSON bodies,
    a ``code`` other than ``Ok``, or missing/unreadable geometries.
    """

    status = response.status_code
    if not 200 <= status < 300:
        detail = extract_error(response)
        message = f"Map matching failed with HTTP {status}"
        raise NetworkMatchFailure(f"{message} | {detail}" if detail else message)

    payload = _safe_json(response)
    if not isinstance(payload, dict):
        raise NetworkMatchFailure("Map matching returned a non-object payload")
    code = payload.get("code")
    if code != "Ok":
        detail = payload.get("message")
        message = f"Map matching returned code {code!r}"
        raise NetworkMatchFailure(f"{message} | {detail}" if detail else message)
    matchings = payload.get("matchings")
    if not isinstance(matchings, list) or not matchings:
        raise NetworkMatchFailure("Map matching returned no matchings")
    return [
        _decode_geometry(matching, geometry_format, idx)
        for idx, matching in enumerate(matchings)
    ]


def extract_error(resp: Optional[requests.Response]) -> Optional[str]:
    """Return compact string with service error info (code + message) if present."""

    if resp is None:
        return None
    data = _safe_json(resp)
    if data is None:
        return _extract_error_text(resp)
    if not isinstance(data, dict):
        return None
    parts = _collect_error_parts(data)
    return " | ".join(parts) if parts else None


def _decode_geometry(
    matching: Any, geometry_format: str, index: int
) -> List[LonLat]:
    if not isinstance(matching, dict):
        raise NetworkMatchFailure(f"Matching {index} is not an object")
    geometry = matching.get("geometry")
    precision = GEOMETRY_FORMATS.get(geometry_format)
    if precision is None:
        coords = _geojson_coordinates(geometry, index)
    else:
        coords = _polyline_coordinates(geometry, precision, index)
    if len(coords) < 2:
        raise NetworkMatchFailure(f"Matching {index} has fewer than two coordinates")
    return coords


def _geojson_coordinates(geometry: Any, index: int) -> List[LonLat]:
    if not isinstance(geometry, dict) or geometry.get("type") != "LineString":
        raise NetworkMatchFailure(f"Matching {index} has no LineString geometry")
    raw = geometry.get("coordinates")
    if not isinstance(raw, list):
        raise NetworkMatchFailure(f"Matching {index} coordinates are missing")
    coords: List[LonLat] = []
    for pair in raw:
        try:
            lon, lat = float(pair[0]), float(pair[1])
        except (TypeError, ValueError, IndexError) as exc:
            raise NetworkMatchFailure(
                f"Matching {index} contains an invalid coordinate: {pair!r}"
            ) from exc
        if not (math.isfinite(lon) and math.isfinite(lat)):
            raise NetworkMatchFailure(
                f"Matching {index} contains a non-finite coordinate: {pair!r}"
            )
        coords.append((lon, lat))
    return coords


def _polyline_coordinates(geometry: Any, precision: int, index: int) -> List[LonLat]:
    if not isinstance(geometry, str) or not geometry:
        raise NetworkMatchFailure(f"Matching {index} has no encoded polyline")
    try:
        decoded = polyline_decode(geometry, precision)
    except (ValueError, TypeError, IndexError) as exc:
        raise NetworkMatchFailure(
            f"Unable to decode polyline for matching {index}"
        ) from exc
    # Encoded polylines are lat/lon ordered.
    return [(float(lon), float(lat)) for lat, lon in decoded]


def _safe_json(resp: requests.Response) -> Optional[Any]:
    """Safely parse JSON; return None if parsing fails."""

    try:
        return resp.json()
    except (
        ValueError,
        RequestsJSONDecodeError,
    ) as exc:
        LOGGER.debug(
            "Failed to decode JSON from %s: %s", getattr(resp, "url", "?"), exc
        )
        return None


def _extract_error_text(resp: requests.Response) -> Optional[str]:
    """Best-effort plain-text extraction when JSON parsing fails."""

    text = getattr(resp, "text", "")
    if not isinstance(text, str):
        return None
    trimmed = text.strip()
    if not trimmed:
        return None
    return (trimmed[:297] + "...") if len(trimmed) > 300 else trimmed


def _collect_error_parts(data: Dict[str, Any]) -> List[str]:
    """Build error snippets from an OSRM-style error body."""

    parts: List[str] = []
    code = data.get("code")
    if code and code != "Ok":
        parts.append(str(code))
    message = data.get("message")
    if message:
        parts.append(str(message))
    return parts
