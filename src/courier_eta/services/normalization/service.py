"""Resolve canonical pickup/delivery points from raw order payloads."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Sequence

from ...models.domain import UNRESOLVED, GeoPoint, OrderLocationSet, ResolvedEndpoint
from ...schemas.orders import decode_order
from ..validation import coerce_coordinate, is_valid_geojson, is_valid_pair
from .candidates import GeoJSONCandidate, RawLocationCandidate, ScalarPairCandidate, delivery_candidates, pickup_candidates

logger = logging.getLogger(__name__)


def resolve_candidate(candidate: RawLocationCandidate) -> Optional[GeoPoint]:
    """Return the candidate's point if it validates, else ``None``."""

    match candidate:
        case ScalarPairCandidate(latitude=latitude, longitude=longitude):
            if not is_valid_pair(latitude, longitude):
                return None
        case GeoJSONCandidate(coordinates=coordinates):
            if not is_valid_geojson(coordinates):
                return None
            # GeoJSON order is [lon, lat]
            longitude, latitude = coordinates
        case _:
            raise TypeError(f"Unknown location candidate: {candidate!r}")
    return GeoPoint(longitude=coerce_coordinate(longitude), latitude=coerce_coordinate(latitude))


def resolve_endpoint(candidates: Sequence[RawLocationCandidate]) -> ResolvedEndpoint:
    for candidate in candidates:
        point = resolve_candidate(candidate)
        if point is not None:
            return ResolvedEndpoint(point=point, source=candidate.source)
    return UNRESOLVED


def normalize(raw_order: Any, *, order_id: Optional[str] = None) -> OrderLocationSet:
    """Build the canonical location set for one order.

    ``raw_order`` is a mapping from the order service or a decoded
    ``RawOrderPayload``. Endpoints with no valid source are left unresolved.
    """
    payload = decode_order(raw_order)
    resolved_id = order_id or payload.order_id
    if not resolved_id:
        raise ValueError("Order payload has no '_id' or 'id'; pass order_id explicitly.")

    pickup = resolve_endpoint(pickup_candidates(payload))
    delivery = resolve_endpoint(delivery_candidates(payload))
    _log_resolution(resolved_id, "pickup", pickup)
    _log_resolution(resolved_id, "delivery", delivery)
    return OrderLocationSet(order_id=resolved_id, pickup=pickup, delivery=delivery)


def normalize_many(raw_orders: Iterable[Any]) -> list[OrderLocationSet]:
    """Normalize a fetched order list, skipping payloads without an id."""

    location_sets: list[OrderLocationSet] = []
    for raw_order in raw_orders:
        payload = decode_order(raw_order)
        if not payload.order_id:
            logger.warning("Skipping order payload without an id")
            continue
        location_sets.append(normalize(payload))
    return location_sets


def _log_resolution(order_id: str, endpoint_name: str, endpoint: ResolvedEndpoint) -> None:
    if endpoint.resolved:
        logger.debug(f"Order {order_id} {endpoint_name} resolved from {endpoint.source.value}")
    else:
        logger.warning(f"Order {order_id} {endpoint_name} location unavailable: no valid coordinate source")

