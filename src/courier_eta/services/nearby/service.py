"""Rank orders by courier-to-pickup distance."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from ...config import settings
from ...models.domain import GeoPoint, OrderLocationSet
from ..geospatial import haversine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class NearbyOrder:
    order_id: str
    location_set: OrderLocationSet
    distance_km: Optional[float]
    within_range: bool
    bearing_degrees: Optional[float] = None
    cardinal: Optional[str] = None

    @property
    def location_unavailable(self) -> bool:
        return self.distance_km is None


def rank_nearby_orders(
    courier_point: GeoPoint,
    location_sets: Iterable[OrderLocationSet],
    *,
    max_distance_km: Optional[float] = None,
    include_out_of_range: bool = False,
) -> List[NearbyOrder]:
    """Sort orders closest pickup first.

    Orders whose pickup is unresolved are kept at the end with
    ``distance_km=None`` so the UI can show "location unavailable".
    """
    radius = max_distance_km if max_distance_km is not None else settings.nearby_max_distance_km
    ranked: List[NearbyOrder] = []
    unavailable: List[NearbyOrder] = []

    for location_set in location_sets:
        if not location_set.pickup.resolved:
            unavailable.append(
                NearbyOrder(
                    order_id=location_set.order_id,
                    location_set=location_set,
                    distance_km=None,
                    within_range=False,
                )
            )
            continue

        result = haversine(courier_point, location_set.pickup.point)
        within_range = result.km <= radius
        if not within_range and not include_out_of_range:
            continue
        ranked.append(
            NearbyOrder(
                order_id=location_set.order_id,
                location_set=location_set,
                distance_km=result.km,
                within_range=within_range,
                bearing_degrees=result.bearing_degrees,
                cardinal=result.cardinal,
            )
        )

    ranked.sort(key=lambda order: order.distance_km)
    if unavailable:
        logger.info(f"{len(unavailable)} nearby orders have no usable pickup location")
    return ranked + unavailable
