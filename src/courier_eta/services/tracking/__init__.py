"""Delivery estimate tracking exports."""

from .movement import RefetchGate, has_moved_significantly
from .service import EstimateTracker, leg_for_phase, parse_phase
from .store import SlotView, TrackingSlot, TrackingStore

__all__ = [
    "EstimateTracker",
    "RefetchGate",
    "SlotView",
    "TrackingSlot",
    "TrackingStore",
    "has_moved_significantly",
    "leg_for_phase",
    "parse_phase",
]
