"""Courier position input and read-only projections for the UI layer."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..models.domain import (
    CourierPosition,
    DeliveryEstimate,
    GeoPoint,
    OrderLocationSet,
    ResolvedEndpoint,
    utc_now,
)
from ..services.geospatial import format_distance

# Epoch values above this are milliseconds (browser geolocation timestamps).
_EPOCH_MILLIS_CUTOFF = 100_000_000_000


class CourierPositionPayload(BaseModel):
    """A reading from the location-tracking collaborator (conventional ordering)."""

    model_config = ConfigDict(extra="ignore")

    latitude: float
    longitude: float
    accuracy: float = Field(default=0.0, ge=0.0, description="Reported accuracy radius in meters.")
    timestamp: Optional[datetime] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def _parse_epoch(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("timestamp must be a datetime, ISO string or epoch number")
        if isinstance(value, (int, float)):
            seconds = value / 1000 if value > _EPOCH_MILLIS_CUTOFF else value
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        return value

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def to_domain(self) -> CourierPosition:
        """Raises ``InvalidCoordinateError`` for an unusable reading."""

        return CourierPosition(
            point=GeoPoint(longitude=self.longitude, latitude=self.latitude),
            accuracy_meters=self.accuracy,
            observed_at=self.timestamp or utc_now(),
        )


class EndpointModel(BaseModel):
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    source: str
    available: bool

    @classmethod
    def from_domain(cls, endpoint: ResolvedEndpoint) -> EndpointModel:
        point = endpoint.point
        return cls(
            latitude=point.latitude if point else None,
            longitude=point.longitude if point else None,
            source=endpoint.source.value,
            available=endpoint.resolved,
        )


class OrderLocationModel(BaseModel):
    order_id: str
    pickup: EndpointModel
    delivery: EndpointModel
    resolution: str
    reconciled_at: datetime

    @classmethod
    def from_domain(cls, location_set: OrderLocationSet) -> OrderLocationModel:
        return cls(
            order_id=location_set.order_id,
            pickup=EndpointModel.from_domain(location_set.pickup),
            delivery=EndpointModel.from_domain(location_set.delivery),
            resolution=location_set.resolution.value,
            reconciled_at=location_set.reconciled_at,
        )


class DeliveryEstimateModel(BaseModel):
    order_id: str
    available: bool
    leg: Optional[str] = None
    distance_to_pickup_km: Optional[float] = None
    distance_to_delivery_km: Optional[float] = None
    pickup_to_delivery_km: Optional[float] = None
    eta_minutes_to_pickup: Optional[float] = None
    eta_minutes_to_delivery: Optional[float] = None
    bearing_degrees: Optional[float] = None
    cardinal: Optional[str] = None
    display_distance: str
    is_stale: bool = False
    computed_at: Optional[datetime] = None
    courier_latitude: Optional[float] = None
    courier_longitude: Optional[float] = None

    @classmethod
    def unavailable(cls, order_id: str) -> DeliveryEstimateModel:
        return cls(order_id=order_id, available=False, display_distance=format_distance(None))

    @classmethod
    def from_domain(cls, order_id: str, estimate: Optional[DeliveryEstimate]) -> DeliveryEstimateModel:
        if estimate is None:
            return cls.unavailable(order_id)
        leg_km = (
            estimate.distance_to_pickup_km
            if estimate.distance_to_pickup_km is not None
            else estimate.distance_to_delivery_km
        )
        return cls(
            order_id=estimate.order_id,
            available=True,
            leg=estimate.leg.value,
            distance_to_pickup_km=estimate.distance_to_pickup_km,
            distance_to_delivery_km=estimate.distance_to_delivery_km,
            pickup_to_delivery_km=estimate.pickup_to_delivery_km,
            eta_minutes_to_pickup=estimate.eta_minutes_to_pickup,
            eta_minutes_to_delivery=estimate.eta_minutes_to_delivery,
            bearing_degrees=estimate.bearing_degrees,
            cardinal=estimate.cardinal,
            display_distance=format_distance(leg_km),
            is_stale=estimate.is_stale,
            computed_at=estimate.computed_at,
            courier_latitude=estimate.computed_from_courier_point.latitude,
            courier_longitude=estimate.computed_from_courier_point.longitude,
        )
