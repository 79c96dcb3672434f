"""Keyed in-memory store of per-order tracking slots.

Each slot is guarded by its own lock so writes to one order are serialized
while different orders proceed independently. The table lock is only held to
look up, create or retire a slot.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from ...config import settings
from ...models.domain import DeliveryEstimate, OrderLocationSet, OrderPhase, TrackingState


@dataclass
class TrackingSlot:
    order_id: str
    location_set: Optional[OrderLocationSet] = None
    phase: OrderPhase = OrderPhase.CONFIRMED
    estimate: Optional[DeliveryEstimate] = None
    pickup_to_delivery_km: Optional[float] = None
    closed: bool = False
    # bumped whenever the location set or phase changes
    revision: int = 0
    estimate_revision: int = -1
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    @property
    def state(self) -> TrackingState:
        if self.closed:
            return TrackingState.CLOSED
        if self.estimate is not None:
            return TrackingState.TRACKING
        if self.location_set is None:
            return TrackingState.UNRESOLVED
        return self.location_set.resolution

    def view(self) -> SlotView:
        return SlotView(
            order_id=self.order_id,
            state=self.state,
            phase=self.phase,
            location_set=self.location_set,
            estimate=self.estimate,
        )


@dataclass(frozen=True, slots=True)
class SlotView:
    """Read-only projection of a slot for the UI layer."""

    order_id: str
    state: TrackingState
    phase: OrderPhase
    location_set: Optional[OrderLocationSet]
    estimate: Optional[DeliveryEstimate]


class TrackingStore:
    """Live slots plus a bounded memory of retired (closed) order ids.

    Retired orders have no slot. Asking for one yields a detached, closed slot
    so late writes are no-ops and do not grow the table.
    """

    def __init__(self, retired_limit: Optional[int] = None) -> None:
        self._slots: Dict[str, TrackingSlot] = {}
        self._retired: OrderedDict[str, None] = OrderedDict()
        self.retired_limit = retired_limit if retired_limit is not None else settings.retired_order_memory
        self._lock = threading.Lock()

    def _get_or_create(self, order_id: str) -> TrackingSlot:
        with self._lock:
            slot = self._slots.get(order_id)
            if slot is None:
                if order_id in self._retired:
                    return TrackingSlot(order_id=order_id, closed=True)
                slot = TrackingSlot(order_id=order_id)
                self._slots[order_id] = slot
            return slot

    @contextmanager
    def slot(self, order_id: str) -> Iterator[TrackingSlot]:
        """Hold the order's lock for the duration of the block."""

        slot = self._get_or_create(order_id)
        with slot.lock:
            yield slot

    def view(self, order_id: str) -> Optional[SlotView]:
        with self._lock:
            slot = self._slots.get(order_id)
        if slot is None:
            return None
        with slot.lock:
            return slot.view()

    def order_ids(self) -> List[str]:
        with self._lock:
            return list(self._slots)

    def retire(self, order_id: str) -> None:
        """Drop the order's slot and remember the id as closed."""

        with self._lock:
            self._slots.pop(order_id, None)
            self._retired[order_id] = None
            self._retired.move_to_end(order_id)
            while len(self._retired) > self.retired_limit:
                self._retired.popitem(last=False)

    def revive(self, order_id: str, slot: Optional[TrackingSlot] = None) -> None:
        """Forget that ``order_id`` was closed; ``slot`` becomes its live slot if given."""

        with self._lock:
            self._retired.pop(order_id, None)
            if slot is not None:
                self._slots[order_id] = slot

    def is_retired(self, order_id: str) -> bool:
        with self._lock:
            return order_id in self._retired

    def snapshot(self) -> Mapping[str, SlotView]:
        views: Dict[str, SlotView] = {}
        for order_id in self.order_ids():
            view = self.view(order_id)
            if view is not None:
                views[order_id] = view
        return MappingProxyType(views)

    def __len__(self) -> int:
        with self._lock:
            return len(self._slots)

    def __contains__(self, order_id: object) -> bool:
        with self._lock:
            return order_id in self._slots
