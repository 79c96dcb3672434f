"""Per-source coordinate inspection for troubleshooting order payloads."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ..models.domain import LocationSource
from ..schemas.orders import decode_order
from .normalization.candidates import (
    GeoJSONCandidate,
    RawLocationCandidate,
    ScalarPairCandidate,
    delivery_candidates,
    pickup_candidates,
)
from .validation import coerce_coordinate

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CandidateCheck:
    endpoint: str
    path: str
    source: LocationSource
    present: bool
    valid: bool
    issue: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CoordinateReport:
    order_id: Optional[str]
    checks: Tuple[CandidateCheck, ...]

    def endpoint_valid(self, endpoint: str) -> bool:
        return any(check.valid for check in self.checks if check.endpoint == endpoint)

    @property
    def valid(self) -> bool:
        return self.endpoint_valid("pickup") and self.endpoint_valid("delivery")

    @property
    def issues(self) -> list[str]:
        issues = [f"{check.path} {check.issue}" for check in self.checks if check.issue]
        for endpoint in ("pickup", "delivery"):
            if not self.endpoint_valid(endpoint):
                issues.append(f"{endpoint} has no valid coordinate source")
        return issues


def describe_problem(latitude: Any, longitude: Any) -> Optional[str]:
    """Return why a pair is unusable, or ``None`` if it is fine."""

    lat = coerce_coordinate(latitude)
    lon = coerce_coordinate(longitude)
    if lat is None or lon is None:
        return f"is not numeric (latitude={latitude!r}, longitude={longitude!r})"
    if lat == 0.0 and lon == 0.0:
        return "is the (0, 0) sentinel"
    if not -90.0 <= lat <= 90.0:
        return f"has latitude {lat} out of range"
    if not -180.0 <= lon <= 180.0:
        return f"has longitude {lon} out of range"
    return None


def _check(endpoint: str, candidate: RawLocationCandidate) -> CandidateCheck:
    issue: Optional[str] = None
    if candidate.present:
        match candidate:
            case ScalarPairCandidate(latitude=latitude, longitude=longitude):
                issue = describe_problem(latitude, longitude)
            case GeoJSONCandidate(coordinates=coordinates):
                if len(coordinates) != 2:
                    issue = f"must hold [longitude, latitude], got {coordinates!r}"
                else:
                    issue = describe_problem(coordinates[1], coordinates[0])
    return CandidateCheck(
        endpoint=endpoint,
        path=candidate.path,
        source=candidate.source,
        present=candidate.present,
        valid=candidate.present and issue is None,
        issue=issue,
    )


def inspect_order_coordinates(raw_order: Any) -> CoordinateReport:
    payload = decode_order(raw_order)
    checks = [_check("pickup", candidate) for candidate in pickup_candidates(payload)]
    checks += [_check("delivery", candidate) for candidate in delivery_candidates(payload)]
    report = CoordinateReport(order_id=payload.order_id, checks=tuple(checks))
    if report.issues:
        logger.warning(f"Order {payload.order_id} coordinate issues: {report.issues}")
    return report
