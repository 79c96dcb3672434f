"""Live delivery estimates driven by courier position updates."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from ...config import settings
from ...exceptions import TrackingStateError
from ...models.domain import (
    CourierPosition,
    DeliveryEstimate,
    OrderLocationSet,
    OrderPhase,
    TrackingState,
    TripLeg,
    utc_now,
)
from ...schemas.orders import decode_order
from ..geospatial import distance_km, driving_minutes, haversine
from ..normalization import normalize
from ..reconciliation import reconcile, unwrap_accept_response
from .movement import has_moved_significantly
from .store import SlotView, TrackingSlot, TrackingStore

logger = logging.getLogger(__name__)


def parse_phase(value: OrderPhase | str) -> OrderPhase:
    if isinstance(value, OrderPhase):
        return value
    try:
        return OrderPhase(value.strip().lower())
    except ValueError as exc:
        raise ValueError(f"Unknown order phase '{value}'") from exc


def leg_for_phase(phase: OrderPhase) -> Optional[TripLeg]:
    """Which leg the courier is on, or ``None`` when no estimate applies."""

    if phase.value in settings.phase_pickup:
        return TripLeg.PICKUP
    if phase.value in settings.phase_delivery:
        return TripLeg.DELIVERY
    return None


class EstimateTracker:
    """Owns per-order tracking state and recomputes estimates on significant movement.

    ``update`` returns the current ``DeliveryEstimate`` or ``None`` when no
    estimate can be produced (the endpoint the current leg needs is unresolved,
    or the order is closed). ``None`` is a normal state to display as
    "location unavailable".
    """

    def __init__(
        self,
        store: Optional[TrackingStore] = None,
        *,
        movement_threshold_km: Optional[float] = None,
        stale_after_seconds: Optional[float] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store or TrackingStore()
        self.movement_threshold_km = (
            movement_threshold_km if movement_threshold_km is not None else settings.movement_threshold_km
        )
        self.stale_after_seconds = (
            stale_after_seconds if stale_after_seconds is not None else settings.stale_position_seconds
        )
        self._clock = clock
        self._courier_position: Optional[CourierPosition] = None
        self._courier_lock = threading.Lock()

    # --- Writes ---

    def observe(self, raw_order: Any, *, order_id: Optional[str] = None) -> OrderLocationSet:
        """Normalize a fresher payload for an order and make it the stored view."""

        payload = decode_order(raw_order)
        location_set = normalize(payload, order_id=order_id)
        with self.store.slot(location_set.order_id) as slot:
            if slot.closed:
                logger.debug(f"Ignoring payload for closed order {slot.order_id}")
                return location_set
            self._store_location_set(slot, location_set)
            if payload.status:
                self._apply_status(slot, payload.status)
        return location_set

    def accept(self, order_id: str, accepted_order_raw: Any, candidate_views: Iterable[Any] = ()) -> OrderLocationSet:
        """Reconcile the accept payload with known views and seed the order's slot.

        The slot's currently stored location set is consulted after the
        supplied candidate views. A closed order is reopened.
        """
        self.store.revive(order_id)
        with self.store.slot(order_id) as slot:
            views = list(candidate_views)
            if slot.location_set is not None:
                views.append(slot.location_set)
            location_set = reconcile(accepted_order_raw, views, order_id=order_id)
            if slot.closed:
                slot.closed = False
                self.store.revive(order_id, slot)
            self._store_location_set(slot, location_set)
            status = decode_order(unwrap_accept_response(accepted_order_raw)).status
            if status:
                self._apply_status(slot, status)
        return location_set

    def set_phase(self, order_id: str, phase: OrderPhase | str) -> TrackingState:
        """Record a phase change; raises ``ValueError`` for an unknown phase."""

        phase = parse_phase(phase)
        with self.store.slot(order_id) as slot:
            self._apply_phase(slot, phase)
            return slot.state

    def close(self, order_id: str) -> None:
        """Take an order out of active tracking (delivered, cancelled or reassigned)."""

        with self.store.slot(order_id) as slot:
            self._close(slot)

    def update(
        self,
        order_id: str,
        location_set: OrderLocationSet,
        courier_position: CourierPosition,
    ) -> Optional[DeliveryEstimate]:
        if location_set.order_id != order_id:
            raise TrackingStateError(
                f"Location set for order {location_set.order_id} passed to update for order {order_id}"
            )
        with self.store.slot(order_id) as slot:
            if slot.closed:
                return None
            self._store_location_set(slot, location_set)
            return self._refresh(slot, courier_position)

    def update_courier(self, courier_position: CourierPosition) -> Dict[str, Optional[DeliveryEstimate]]:
        """Apply the latest courier reading to every active order.

        A reading older than the one already held is ignored and an empty
        result is returned. Orders are skipped once a newer reading has
        replaced this one, so an estimate never moves back to an older point.
        """
        with self._courier_lock:
            held = self._courier_position
            if held is not None and courier_position.observed_at < held.observed_at:
                logger.debug("Ignoring out-of-order courier reading")
                return {}
            self._courier_position = courier_position

        results: Dict[str, Optional[DeliveryEstimate]] = {}
        for order_id in self.store.order_ids():
            with self.store.slot(order_id) as slot:
                if slot.closed or slot.location_set is None:
                    continue
                if self._courier_position is not courier_position:
                    logger.debug(f"Newer courier reading arrived; leaving order {order_id} to it")
                    continue
                results[order_id] = self._refresh(slot, courier_position)
        return results

    # --- Reads ---

    @property
    def courier_position(self) -> Optional[CourierPosition]:
        return self._courier_position

    def estimate(self, order_id: str) -> Optional[DeliveryEstimate]:
        view = self.store.view(order_id)
        return view.estimate if view else None

    def state(self, order_id: str) -> TrackingState:
        view = self.store.view(order_id)
        if view is not None:
            return view.state
        return TrackingState.CLOSED if self.store.is_retired(order_id) else TrackingState.UNRESOLVED

    def snapshot(self) -> Mapping[str, SlotView]:
        return self.store.snapshot()

    # --- Internals (caller holds the slot lock) ---

    def _store_location_set(self, slot: TrackingSlot, location_set: OrderLocationSet) -> None:
        current = slot.location_set
        if current is not None and (current.pickup, current.delivery) == (location_set.pickup, location_set.delivery):
            return
        slot.location_set = location_set
        slot.pickup_to_delivery_km = None
        if location_set.pickup.resolved and location_set.delivery.resolved:
            slot.pickup_to_delivery_km = distance_km(location_set.pickup.point, location_set.delivery.point)
        slot.revision += 1

    def _apply_status(self, slot: TrackingSlot, status: str) -> None:
        """Apply a payload status; an unknown status keeps the current phase."""

        try:
            phase = parse_phase(status)
        except ValueError:
            logger.warning(f"Order {slot.order_id} has unknown status '{status}', keeping phase {slot.phase.value}")
            return
        self._apply_phase(slot, phase)

    def _apply_phase(self, slot: TrackingSlot, phase: OrderPhase | str) -> None:
        phase = parse_phase(phase)
        if phase.is_terminal:
            slot.phase = phase
            self._close(slot)
            return
        if phase is not slot.phase:
            slot.phase = phase
            slot.revision += 1

    def _close(self, slot: TrackingSlot) -> None:
        slot.estimate = None
        if slot.closed:
            return
        slot.closed = True
        self.store.retire(slot.order_id)
        logger.info(f"Order {slot.order_id} left active tracking ({slot.phase.value})")

    def _refresh(self, slot: TrackingSlot, courier_position: CourierPosition) -> Optional[DeliveryEstimate]:
        existing = slot.estimate
        if (
            existing is not None
            and slot.estimate_revision == slot.revision
            and not has_moved_significantly(
                existing.computed_from_courier_point, courier_position.point, self.movement_threshold_km
            )
        ):
            return existing

        slot.estimate = self._compute(slot, courier_position)
        slot.estimate_revision = slot.revision
        return slot.estimate

    def _compute(self, slot: TrackingSlot, courier_position: CourierPosition) -> Optional[DeliveryEstimate]:
        leg = leg_for_phase(slot.phase)
        location_set = slot.location_set
        if leg is None or location_set is None:
            return None
        target = location_set.endpoint(leg)
        if not target.resolved:
            logger.info(f"Order {slot.order_id}: {leg.value} location unavailable, no estimate")
            return None

        now = self._clock()
        age = courier_position.age_seconds(now)
        is_stale = age > self.stale_after_seconds
        if is_stale:
            logger.warning(f"Order {slot.order_id}: courier position is {age:.0f}s old, estimate may be stale")

        leg_result = haversine(courier_position.point, target.point)
        pickup_to_delivery = slot.pickup_to_delivery_km
        if leg is TripLeg.PICKUP:
            to_pickup = leg_result.km
            eta_pickup = leg_result.driving_minutes
            to_delivery = to_pickup + pickup_to_delivery if pickup_to_delivery is not None else None
            eta_delivery = driving_minutes(to_delivery) if to_delivery is not None else None
        else:
            to_pickup = None
            eta_pickup = None
            to_delivery = leg_result.km
            eta_delivery = leg_result.driving_minutes

        return DeliveryEstimate(
            order_id=slot.order_id,
            leg=leg,
            computed_from_courier_point=courier_position.point,
            distance_to_pickup_km=to_pickup,
            distance_to_delivery_km=to_delivery,
            pickup_to_delivery_km=pickup_to_delivery,
            eta_minutes_to_pickup=eta_pickup,
            eta_minutes_to_delivery=eta_delivery,
            bearing_degrees=leg_result.bearing_degrees,
            cardinal=leg_result.cardinal,
            is_stale=is_stale,
            computed_at=now,
        )
