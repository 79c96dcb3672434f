"""Usability checks for coordinate pairs.

Every function here is total: malformed input yields ``False`` (or ``None``),
never an exception.
"""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional


def coerce_coordinate(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` if it cannot be one.

    Numeric strings are accepted because some order payloads carry scalar
    coordinates as text. Booleans are rejected even though they are ints.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def is_valid_pair(latitude: Any, longitude: Any) -> bool:
    """Return True if the pair is in range and is not the (0, 0) sentinel."""

    lat = coerce_coordinate(latitude)
    lon = coerce_coordinate(longitude)
    if lat is None or lon is None:
        return False
    if not -90.0 <= lat <= 90.0 or not -180.0 <= lon <= 180.0:
        return False
    return not (lat == 0.0 and lon == 0.0)


def is_valid(point: Any) -> bool:
    """Return True if ``point`` is a usable location.

    ``point`` may be a ``GeoPoint`` (or anything exposing ``latitude`` and
    ``longitude`` attributes) or a mapping with those keys.
    """
    if point is None:
        return False
    if isinstance(point, Mapping):
        return is_valid_pair(point.get("latitude"), point.get("longitude"))
    latitude = getattr(point, "latitude", None)
    longitude = getattr(point, "longitude", None)
    return is_valid_pair(latitude, longitude)


def is_valid_geojson(coordinates: Any) -> bool:
    """Return True for a usable GeoJSON ``[longitude, latitude]`` array."""

    if not isinstance(coordinates, (list, tuple)) or len(coordinates) != 2:
        return False
    longitude, latitude = coordinates
    return is_valid_pair(latitude, longitude)
