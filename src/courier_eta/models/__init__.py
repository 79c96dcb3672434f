"""Domain model exports."""

from .domain import (
    CourierPosition,
    DeliveryEstimate,
    GeoPoint,
    LocationSource,
    OrderLocationSet,
    OrderPhase,
    ResolvedEndpoint,
    TrackingState,
    TripLeg,
)

__all__ = [
    "CourierPosition",
    "DeliveryEstimate",
    "GeoPoint",
    "LocationSource",
    "OrderLocationSet",
    "OrderPhase",
    "ResolvedEndpoint",
    "TrackingState",
    "TripLeg",
]
