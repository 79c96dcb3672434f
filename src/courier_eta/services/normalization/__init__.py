"""Coordinate normalization exports."""

from .candidates import GeoJSONCandidate, RawLocationCandidate, ScalarPairCandidate
from .service import normalize, normalize_many, resolve_endpoint

__all__ = [
    "normalize",
    "normalize_many",
    "resolve_endpoint",
    "RawLocationCandidate",
    "ScalarPairCandidate",
    "GeoJSONCandidate",
]
