"""Client for the external road-network matching service."""

from .client import MapMatchingClient
from .response_handling import extract_error, parse_match_response
from .session import create_default_session, get_default_session

__all__ = [
    "MapMatchingClient",
    "extract_error",
    "parse_match_response",
    "create_default_session",
    "get_default_session",
]
