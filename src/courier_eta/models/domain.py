"""Domain models for order locations, courier readings and delivery estimates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Sequence

from ..exceptions import InvalidCoordinateError
from ..services.validation import is_valid_pair


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LocationSource(str, Enum):
    """Where a canonical endpoint coordinate was taken from."""

    DIRECT_SCALAR = "direct_scalar"
    GEOJSON = "geojson"
    RESTAURANT_LOCATION = "restaurant_location"
    AUTHOR_LOCATION = "author_location"
    USER_LOCATION = "user_location"
    NONE = "none"


class OrderPhase(str, Enum):
    """Order statuses the engine understands."""

    PENDING = "pending"
    PROCESSING = "processing"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY_FOR_PICKUP = "ready_for_pickup"
    PICKED_UP = "picked_up"
    ON_THE_WAY = "on_the_way"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderPhase.DELIVERED, OrderPhase.CANCELLED)


class TripLeg(str, Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"


class TrackingState(str, Enum):
    UNRESOLVED = "unresolved"
    PARTIALLY_RESOLVED = "partially_resolved"
    RESOLVED = "resolved"
    TRACKING = "tracking"
    CLOSED = "closed"


@dataclass(frozen=True, slots=True)
class GeoPoint:
    """A validated location in conventional (not GeoJSON) field naming.

    Construction fails with ``InvalidCoordinateError`` for out-of-range values,
    NaN, or the (0, 0) sentinel, so a ``GeoPoint`` instance is always usable.
    """

    longitude: float
    latitude: float

    def __post_init__(self) -> None:
        if not is_valid_pair(self.latitude, self.longitude):
            raise InvalidCoordinateError(
                f"Unusable coordinate (latitude={self.latitude!r}, longitude={self.longitude!r})"
            )
        object.__setattr__(self, "longitude", float(self.longitude))
        object.__setattr__(self, "latitude", float(self.latitude))

    @classmethod
    def from_geojson(cls, coordinates: Sequence[float]) -> GeoPoint:
        """Build a point from a GeoJSON ``[longitude, latitude]`` pair."""

        if len(coordinates) != 2:
            raise InvalidCoordinateError(f"GeoJSON position must have 2 values, got {list(coordinates)!r}")
        longitude, latitude = coordinates
        return cls(longitude=longitude, latitude=latitude)

    def to_geojson(self) -> list[float]:
        return [self.longitude, self.latitude]

    def as_lat_lon(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class ResolvedEndpoint:
    """One endpoint of an order; ``point`` is ``None`` when nothing validated."""

    point: Optional[GeoPoint] = None
    source: LocationSource = LocationSource.NONE

    def __post_init__(self) -> None:
        if (self.point is None) != (self.source is LocationSource.NONE):
            raise ValueError(f"Endpoint source {self.source.value!r} does not match point {self.point!r}")

    @property
    def resolved(self) -> bool:
        return self.point is not None


UNRESOLVED = ResolvedEndpoint()


@dataclass(frozen=True, slots=True)
class OrderLocationSet:
    order_id: str
    pickup: ResolvedEndpoint = UNRESOLVED
    delivery: ResolvedEndpoint = UNRESOLVED
    reconciled_at: datetime = field(default_factory=utc_now)

    @property
    def resolution(self) -> TrackingState:
        resolved = int(self.pickup.resolved) + int(self.delivery.resolved)
        if resolved == 2:
            return TrackingState.RESOLVED
        if resolved == 1:
            return TrackingState.PARTIALLY_RESOLVED
        return TrackingState.UNRESOLVED

    def endpoint(self, leg: TripLeg) -> ResolvedEndpoint:
        return self.pickup if leg is TripLeg.PICKUP else self.delivery


@dataclass(frozen=True, slots=True)
class CourierPosition:
    point: GeoPoint
    accuracy_meters: float = 0.0
    observed_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        # naive readings are taken as UTC
        if self.observed_at.tzinfo is None:
            object.__setattr__(self, "observed_at", self.observed_at.replace(tzinfo=timezone.utc))

    def age_seconds(self, now: Optional[datetime] = None) -> float:
        now = now or utc_now()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return (now - self.observed_at).total_seconds()


@dataclass(frozen=True, slots=True)
class DeliveryEstimate:
    """Distances (km) and ETAs (minutes) for one order at one courier position.

    Fields that do not apply to the current leg are ``None``; ``None`` is shown
    as "location unavailable", never as 0 km.
    """

    order_id: str
    leg: TripLeg
    computed_from_courier_point: GeoPoint
    distance_to_pickup_km: Optional[float] = None
    distance_to_delivery_km: Optional[float] = None
    pickup_to_delivery_km: Optional[float] = None
    eta_minutes_to_pickup: Optional[float] = None
    eta_minutes_to_delivery: Optional[float] = None
    bearing_degrees: Optional[float] = None
    cardinal: Optional[str] = None
    is_stale: bool = False
    computed_at: datetime = field(default_factory=utc_now)
