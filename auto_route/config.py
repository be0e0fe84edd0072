"""Central configuration for the auto route generator.

All values are constants imported by the rest of the package. Adjust as needed
for your environment. Overrides are read from environment variables
(optionally via a local `.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Region scoring
# ---------------------------------------------------------------------------
# Outward buffer (metres) applied to every candidate region before counting
# contained track points. Zero disables buffering.
ROUTE_BUFFER_METERS = _env_float("ROUTE_BUFFER_METERS", 20.0)

# Label used when a region carries no usable name.
UNNAMED_REGION_LABEL = os.getenv("UNNAMED_REGION_LABEL", "Unnamed Region")


# ---------------------------------------------------------------------------
# Route synthesis
# ---------------------------------------------------------------------------
# Douglas-Peucker tolerance in coordinate units (degrees). Zero keeps every
# filtered point.
ROUTE_SMOOTHING_TOLERANCE = _env_float("ROUTE_SMOOTHING_TOLERANCE", 0.0001)

# Align generated routes to the road network via the map-matching service.
ROUTE_SNAP_TO_NETWORK = _env_bool("ROUTE_SNAP_TO_NETWORK", False)


# ---------------------------------------------------------------------------
# Map-matching service
# ---------------------------------------------------------------------------
# OSRM-compatible server exposing /match/v1/{profile}/{coordinates}.
MAP_MATCHING_BASE_URL = os.getenv(
    "MAP_MATCHING_BASE_URL", "https://router.project-osrm.org"
)

# Travel profile hint sent with every request (driving, walking, cycling).
MAP_MATCHING_PROFILE = os.getenv("MAP_MATCHING_PROFILE", "driving")

# Upper bound on coordinates per request. The public OSRM server rejects
# traces much longer than ~100 points.
MAP_MATCHING_MAX_COORDINATES = _env_int("MAP_MATCHING_MAX_COORDINATES", 90)

# Geometry encoding requested from the server: geojson, polyline or polyline6.
MAP_MATCHING_GEOMETRY_FORMAT = os.getenv("MAP_MATCHING_GEOMETRY_FORMAT", "geojson")


# ---------------------------------------------------------------------------
# Performance tuning
# ---------------------------------------------------------------------------
# Threads used when generating routes for several regions at once.
MAX_WORKERS = _env_int("ROUTE_MAX_WORKERS", 4)

# HTTP session pool sizes for concurrent requests.
HTTP_POOL_CONNECTIONS = 10
HTTP_POOL_MAXSIZE = 10

# Request timeout in seconds. Expiry triggers the local fallback.
REQUEST_TIMEOUT = _env_float("MAP_MATCHING_TIMEOUT", 15.0)
