"""Closed set of coordinate source shapes found in raw order payloads.

Each variant carries the untouched raw values plus the ``LocationSource`` it
would be tagged with. Candidate lists are returned in precedence order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Union

from ...models.domain import LocationSource
from ...schemas.orders import GeoJSONLocation, LocatedEntity, RawOrderPayload


@dataclass(frozen=True, slots=True)
class ScalarPairCandidate:
    source: LocationSource
    path: str
    latitude: Any
    longitude: Any

    @property
    def present(self) -> bool:
        return self.latitude is not None or self.longitude is not None


@dataclass(frozen=True, slots=True)
class GeoJSONCandidate:
    """A GeoJSON position; ``coordinates`` is ``[longitude, latitude]``."""

    source: LocationSource
    path: str
    coordinates: Optional[List[Any]]

    @property
    def present(self) -> bool:
        return self.coordinates is not None


RawLocationCandidate = Union[ScalarPairCandidate, GeoJSONCandidate]


def _coordinates(location: Optional[GeoJSONLocation]) -> Optional[List[Any]]:
    return location.coordinates if location is not None else None


def _entity_coordinates(entity: Optional[LocatedEntity]) -> Optional[List[Any]]:
    return _coordinates(entity.location) if entity is not None else None


def pickup_candidates(payload: RawOrderPayload) -> list[RawLocationCandidate]:
    return [
        ScalarPairCandidate(
            source=LocationSource.DIRECT_SCALAR,
            path="pickupLatitude/pickupLongitude",
            latitude=payload.pickup_latitude,
            longitude=payload.pickup_longitude,
        ),
        GeoJSONCandidate(
            source=LocationSource.GEOJSON,
            path="pickupLocation.coordinates",
            coordinates=_coordinates(payload.pickup_location),
        ),
        GeoJSONCandidate(
            source=LocationSource.RESTAURANT_LOCATION,
            path="restaurant.location.coordinates",
            coordinates=_entity_coordinates(payload.restaurant),
        ),
        GeoJSONCandidate(
            source=LocationSource.AUTHOR_LOCATION,
            path="items[0].post.author.location.coordinates",
            coordinates=_entity_coordinates(payload.first_item_author),
        ),
    ]


def delivery_candidates(payload: RawOrderPayload) -> list[RawLocationCandidate]:
    return [
        ScalarPairCandidate(
            source=LocationSource.DIRECT_SCALAR,
            path="deliveryLatitude/deliveryLongitude",
            latitude=payload.delivery_latitude,
            longitude=payload.delivery_longitude,
        ),
        GeoJSONCandidate(
            source=LocationSource.GEOJSON,
            path="deliveryLocation.coordinates",
            coordinates=_coordinates(payload.delivery_location),
        ),
        GeoJSONCandidate(
            source=LocationSource.USER_LOCATION,
            path="userLocation.coordinates",
            coordinates=_coordinates(payload.user_location),
        ),
        GeoJSONCandidate(
            source=LocationSource.USER_LOCATION,
            path="user.location.coordinates",
            coordinates=_entity_coordinates(payload.user),
        ),
    ]
