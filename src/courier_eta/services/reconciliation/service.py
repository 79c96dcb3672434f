"""Merge the views of an order that exist at the moment a courier accepts it."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from ...models.domain import OrderLocationSet
from ...schemas.orders import RawOrderPayload, decode_order
from ..normalization import normalize

logger = logging.getLogger(__name__)


def unwrap_accept_response(raw: Any) -> Any:
    """Accept responses may wrap the order as ``{"order": {...}}``; return the order itself."""

    if isinstance(raw, Mapping) and "_id" not in raw and "id" not in raw and isinstance(raw.get("order"), Mapping):
        return raw["order"]
    return raw


def _as_location_set(view: Any, order_id: str) -> OrderLocationSet:
    """Normalize a candidate view; a raw view without an id is taken to describe ``order_id``."""

    if isinstance(view, OrderLocationSet):
        return view
    payload = decode_order(unwrap_accept_response(view))
    return normalize(payload, order_id=payload.order_id or order_id)


def reconcile(
    accepted_order_raw: Any,
    candidate_views: Iterable[Any] = (),
    *,
    order_id: Optional[str] = None,
) -> OrderLocationSet:
    """Build the authoritative location set for an accepted order.

    The accept payload is normalized first. Each endpoint it leaves unresolved
    is filled from the first candidate view (in the order given) that has it
    resolved. Endpoints the accept payload resolved are never replaced.
    Candidate views may be ``OrderLocationSet`` instances or raw payloads.
    """
    payload = unwrap_accept_response(accepted_order_raw)
    if isinstance(payload, (RawOrderPayload, Mapping)):
        base = normalize(payload, order_id=order_id)
    else:
        raise TypeError(f"Unsupported accept payload: {type(accepted_order_raw).__name__}")

    pickup, delivery = base.pickup, base.delivery
    for candidate in candidate_views:
        if pickup.resolved and delivery.resolved:
            break
        view = _as_location_set(candidate, base.order_id)
        if view.order_id != base.order_id:
            logger.warning(f"Ignoring candidate view for order {view.order_id} while reconciling {base.order_id}")
            continue
        if not pickup.resolved and view.pickup.resolved:
            pickup = view.pickup
            logger.info(f"Order {base.order_id} pickup filled from candidate view ({pickup.source.value})")
        if not delivery.resolved and view.delivery.resolved:
            delivery = view.delivery
            logger.info(f"Order {base.order_id} delivery filled from candidate view ({delivery.source.value})")

    if not (pickup.resolved and delivery.resolved):
        logger.warning(
            f"Order {base.order_id} accepted with unresolved endpoints "
            f"(pickup={pickup.resolved}, delivery={delivery.resolved})"
        )
    return OrderLocationSet(order_id=base.order_id, pickup=pickup, delivery=delivery)
