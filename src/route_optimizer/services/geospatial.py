"""Geospatial helper functions."""

from __future__ import annotations

import math

from ..config import settings
from ..exceptions import InvalidInputError


def haversine_miles(
    lat1: float,
    lon1: float,
    lat2: float,
    lon2: float,
    radius: float | None = None,
) -> float:
    """Compute distance in miles between two coordinates using the Haversine formula."""

    radius = settings.earth_radius_miles if radius is None else radius
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    # rounding can push a just outside [0, 1] for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return radius * c


def is_valid_coordinate(lat: float | None, lng: float | None) -> bool:
    """Return True if both values are finite and inside WGS84 bounds."""

    if lat is None or lng is None:
        return False
    try:
        lat_f, lng_f = float(lat), float(lng)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat_f) and math.isfinite(lng_f)):
        return False
    return -90.0 <= lat_f <= 90.0 and -180.0 <= lng_f <= 180.0


def validate_coordinate(lat: float | None, lng: float | None, *, field: str = "coordinate") -> None:
    """Validate that coordinates are present, finite and within range.

    Raises:
        InvalidInputError: If either value is missing or out of range.
    """
    if lat is None or lng is None:
        raise InvalidInputError(field, "latitude and longitude are required")
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidInputError(field, f"non-finite coordinate ({lat}, {lng})")
    if not (-90.0 <= lat <= 90.0):
        raise InvalidInputError(field, f"latitude {lat} out of range [-90, 90]")
    if not (-180.0 <= lng <= 180.0):
        raise InvalidInputError(field, f"longitude {lng} out of range [-180, 180]")
