"""Engine configuration and settings management."""

from typing import Annotated, Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="COURIER_ETA_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    earth_radius_km: float = Field(default=6371.0, gt=0.0)
    walking_speed_kmh: float = Field(default=5.0, gt=0.0, description="Assumed walking speed.")
    driving_speed_kmh: float = Field(
        default=30.0,
        gt=0.0,
        description="Assumed city driving speed; basis for every courier ETA.",
    )
    movement_threshold_km: float = Field(
        default=0.1,
        ge=0.0,
        description="Courier movement required before an estimate is recomputed (~100 m).",
    )
    refetch_threshold_km: float = Field(
        default=0.1,
        ge=0.0,
        description="Courier movement required before nearby orders are fetched again.",
    )
    stale_position_seconds: int = Field(
        default=120,
        ge=0,
        description="Courier readings older than this flag the estimate as stale.",
    )
    nearby_max_distance_km: float = Field(
        default=2.0,
        gt=0.0,
        description="Radius used when ranking nearby orders for a courier.",
    )
    phase_pickup: Annotated[tuple[str, ...], NoDecode] = Field(
        default=("pending", "processing", "confirmed", "preparing", "ready_for_pickup"),
        description="Order statuses where the courier is heading to the pickup point.",
    )
    phase_delivery: Annotated[tuple[str, ...], NoDecode] = Field(
        default=("picked_up", "on_the_way", "out_for_delivery"),
        description="Order statuses where the courier is carrying the order.",
    )
    retired_order_memory: int = Field(
        default=1000,
        ge=0,
        description="Closed order ids remembered so late payloads cannot reopen them.",
    )

    @field_validator("phase_pickup", "phase_delivery", mode="before")
    @classmethod
    def _parse_phases(cls, value: Any) -> tuple[str, ...]:
        """Accept a sequence, a JSON array string or a comma-separated string of statuses."""
        if isinstance(value, str):
            text = value.strip()
            value = json.loads(text) if text.startswith("[") else text.split(",")
        if not isinstance(value, (list, tuple)):
            raise ValueError(f"Expected a list of order statuses, got {value!r}")
        return tuple(str(item).strip().lower() for item in value if str(item).strip())


settings = Settings()
