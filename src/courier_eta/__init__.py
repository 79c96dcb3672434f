"""Order geolocation reconciliation and delivery ETA engine."""

from .exceptions import InvalidCoordinateError, TrackingStateError
from .models.domain import (
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
from .services.geospatial import DistanceResult, haversine
from .services.nearby import NearbyOrder, rank_nearby_orders
from .services.normalization import normalize, normalize_many
from .services.reconciliation import reconcile
from .services.tracking import EstimateTracker, RefetchGate
from .services.validation import is_valid

__all__ = [
    "CourierPosition",
    "DeliveryEstimate",
    "DistanceResult",
    "EstimateTracker",
    "GeoPoint",
    "InvalidCoordinateError",
    "LocationSource",
    "NearbyOrder",
    "OrderLocationSet",
    "OrderPhase",
    "RefetchGate",
    "ResolvedEndpoint",
    "TrackingState",
    "TrackingStateError",
    "TripLeg",
    "haversine",
    "is_valid",
    "normalize",
    "normalize_many",
    "rank_nearby_orders",
    "reconcile",
]
