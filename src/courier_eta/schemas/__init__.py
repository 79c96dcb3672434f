"""Boundary schemas for raw payloads and UI projections."""

from .orders import RawOrderPayload, decode_order
from .tracking import CourierPositionPayload, DeliveryEstimateModel, OrderLocationModel

__all__ = [
    "RawOrderPayload",
    "decode_order",
    "CourierPositionPayload",
    "DeliveryEstimateModel",
    "OrderLocationModel",
]
