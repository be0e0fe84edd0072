"""OSRM-compatible map-matching client.

One request per call, bounded by ``REQUEST_TIMEOUT`` and never retried.
Every failure mode surfaces as ``NetworkMatchFailure`` so callers have a
single exception to recover from.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import requests
from requests import Session

from ..config import (
    MAP_MATCHING_BASE_URL,
    MAP_MATCHING_GEOMETRY_FORMAT,
    MAP_MATCHING_PROFILE,
    REQUEST_TIMEOUT,
)
from ..errors import NetworkMatchFailure
from ..models import LonLat
from .response_handling import GEOMETRY_FORMATS, parse_match_response
from .session import get_default_session

LOGGER = logging.getLogger(__name__)


class MapMatchingClient:
    """Snap ordered lon/lat traces to a road network via ``/match``."""

    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        *,
        timeout: float | None = None,
        session: Session | None = None,
        geometry_format: str | None = None,
    ) -> None:
        self.base_url = (base_url or MAP_MATCHING_BASE_URL).rstrip("/")
        self.profile = profile or MAP_MATCHING_PROFILE
        self.timeout = REQUEST_TIMEOUT if timeout is None else timeout
        self.session = session or get_default_session()
        self.geometry_format = geometry_format or MAP_MATCHING_GEOMETRY_FORMAT
        if self.geometry_format not in GEOMETRY_FORMATS:
            raise ValueError(
                f"Unsupported geometry format {self.geometry_format!r}; "
                f"expected one of {sorted(GEOMETRY_FORMATS)}"
            )
        if self.timeout <= 0:
            raise ValueError("timeout must be greater than zero")

    def build_url(self, coordinates: Sequence[LonLat], profile: str | None = None) -> str:
        encoded = ";".join(f"{lon:.6f},{lat:.6f}" for lon, lat in coordinates)
        return f"{self.base_url}/match/v1/{profile or self.profile}/{encoded}"

    def match(
        self, coordinates: Sequence[LonLat], profile: str | None = None
    ) -> List[List[LonLat]]:
        """Return the matched coordinate runs for ``coordinates``.

        Raises:
            NetworkMatchFailure: On transport errors, timeouts, non-success
                responses, or payloads without usable geometry.
        """

        if len(coordinates) < 2:
            raise NetworkMatchFailure("Map matching needs at least two coordinates")
        url = self.build_url(coordinates, profile)
        params = {"overview": "full", "geometries": self.geometry_format}
        LOGGER.debug(
            "GET %s (%d coordinates, profile=%s)",
            self.base_url,
            len(coordinates),
            profile or self.profile,
        )
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as exc:
            raise NetworkMatchFailure(
                f"Map matching timed out after {self.timeout:.1f}s"
            ) from exc
        except requests.RequestException as exc:
            raise NetworkMatchFailure(f"Map matching request failed: {exc}") from exc
        matchings = parse_match_response(response, self.geometry_format)
        LOGGER.debug(
            "Map matching returned %d matchings (%d coordinates)",
            len(matchings),
            sum(len(run) for run in matchings),
        )
        return matchings


__all__ = ["MapMatchingClient"]
