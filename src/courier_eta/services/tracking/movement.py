"""Significant-movement checks shared by estimate recompute and nearby re-fetch."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from ...config import settings
from ...models.domain import GeoPoint
from ..geospatial import distance_km

logger = logging.getLogger(__name__)


def has_moved_significantly(
    previous: Optional[GeoPoint],
    current: GeoPoint,
    threshold_km: Optional[float] = None,
) -> bool:
    """True when there is no previous point or the courier moved at least ``threshold_km``."""

    if previous is None:
        return True
    threshold = threshold_km if threshold_km is not None else settings.movement_threshold_km
    return distance_km(previous, current) >= threshold


class RefetchGate:
    """Remembers where nearby orders were last fetched and says when to fetch again."""

    def __init__(self, threshold_km: Optional[float] = None) -> None:
        self.threshold_km = threshold_km if threshold_km is not None else settings.refetch_threshold_km
        self._last_fetch_point: Optional[GeoPoint] = None
        self._lock = threading.Lock()

    @property
    def last_fetch_point(self) -> Optional[GeoPoint]:
        return self._last_fetch_point

    def should_refetch(self, point: GeoPoint) -> bool:
        return has_moved_significantly(self._last_fetch_point, point, self.threshold_km)

    def record_fetch(self, point: GeoPoint) -> None:
        with self._lock:
            self._last_fetch_point = point

    def check_and_record(self, point: GeoPoint) -> bool:
        """Atomically decide and, when a fetch is due, remember ``point`` as the fetch position."""

        with self._lock:
            if not has_moved_significantly(self._last_fetch_point, point, self.threshold_km):
                return False
            logger.debug(f"Courier moved past {self.threshold_km} km; nearby orders are due for re-fetch")
            self._last_fetch_point = point
            return True

    def reset(self) -> None:
        with self._lock:
            self._last_fetch_point = None
