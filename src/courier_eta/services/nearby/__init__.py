"""Nearby order ranking exports."""

from .service import NearbyOrder, rank_nearby_orders

__all__ = ["NearbyOrder", "rank_nearby_orders"]
