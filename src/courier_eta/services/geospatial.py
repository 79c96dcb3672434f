"""Geospatial helper functions: great-circle distance, bearing and travel time."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..config import settings
from ..exceptions import InvalidCoordinateError
from ..models.domain import GeoPoint
from .validation import is_valid

KM_TO_MILES = 0.621371
CARDINAL_POINTS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")
UNAVAILABLE_LABEL = "location unavailable"


@dataclass(frozen=True, slots=True)
class DistanceResult:
    origin: GeoPoint
    destination: GeoPoint
    km: float
    bearing_degrees: float
    cardinal: str
    walking_minutes: float
    driving_minutes: float

    @property
    def miles(self) -> float:
        return self.km * KM_TO_MILES


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float, *, radius_km: Optional[float] = None) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    radius = radius_km if radius_km is not None else settings.earth_radius_km
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return radius * c


def bearing_degrees(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the initial bearing from (lat1, lon1) to (lat2, lon2)."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_lambda = math.radians(lon2 - lon1)
    y = math.sin(delta_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda)
    bearing = math.degrees(math.atan2(y, x))
    return (bearing + 360) % 360


def cardinal_direction(bearing: float) -> str:
    """Nearest of the 8 compass points; halfway bearings round up (22.5 -> NE)."""

    index = int(math.floor(bearing / 45 + 0.5)) % len(CARDINAL_POINTS)
    return CARDINAL_POINTS[index]


def walking_minutes(km: float, *, speed_kmh: Optional[float] = None) -> float:
    speed = speed_kmh if speed_kmh is not None else settings.walking_speed_kmh
    return (km / speed) * 60


def driving_minutes(km: float, *, speed_kmh: Optional[float] = None) -> float:
    speed = speed_kmh if speed_kmh is not None else settings.driving_speed_kmh
    return (km / speed) * 60


def _require_point(value: Any, role: str) -> GeoPoint:
    if not is_valid(value):
        raise InvalidCoordinateError(f"{role} is not a usable coordinate: {value!r}")
    if isinstance(value, GeoPoint):
        return value
    if isinstance(value, Mapping):
        return GeoPoint(longitude=value["longitude"], latitude=value["latitude"])
    return GeoPoint(longitude=value.longitude, latitude=value.latitude)


def haversine(a: GeoPoint, b: GeoPoint) -> DistanceResult:
    """Distance, bearing and naive travel times from ``a`` to ``b``.

    Raises ``InvalidCoordinateError`` rather than returning a placeholder
    distance when either point is unusable.
    """
    origin = _require_point(a, "origin")
    destination = _require_point(b, "destination")

    km = haversine_km(origin.latitude, origin.longitude, destination.latitude, destination.longitude)
    bearing = bearing_degrees(origin.latitude, origin.longitude, destination.latitude, destination.longitude)
    return DistanceResult(
        origin=origin,
        destination=destination,
        km=km,
        bearing_degrees=bearing,
        cardinal=cardinal_direction(bearing),
        walking_minutes=walking_minutes(km),
        driving_minutes=driving_minutes(km),
    )


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    return haversine(a, b).km


def format_distance(km: Optional[float]) -> str:
    if km is None:
        return UNAVAILABLE_LABEL
    if km < 1:
        return f"{round(km * 1000)} m"
    return f"{km:.1f} km"
