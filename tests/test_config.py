import pytest
from pydantic import ValidationError

from courier_eta.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.movement_threshold_km == 0.1
    assert settings.driving_speed_kmh == 30.0
    assert settings.nearby_max_distance_km == 2.0
    assert "preparing" in settings.phase_pickup
    assert "ready_for_pickup" in settings.phase_pickup
    assert settings.retired_order_memory == 1000
    assert "on_the_way" in settings.phase_delivery


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("COURIER_ETA_MOVEMENT_THRESHOLD_KM", "0.25")
    monkeypatch.setenv("COURIER_ETA_PHASE_PICKUP", "pending, confirmed")
    monkeypatch.setenv("COURIER_ETA_PHASE_DELIVERY", '["picked_up"]')

    settings = Settings(_env_file=None)

    assert settings.movement_threshold_km == 0.25
    assert settings.phase_pickup == ("pending", "confirmed")
    assert settings.phase_delivery == ("picked_up",)


def test_single_phase_value(monkeypatch):
    monkeypatch.setenv("COURIER_ETA_PHASE_DELIVERY", "on_the_way")

    assert Settings(_env_file=None).phase_delivery == ("on_the_way",)


def test_invalid_values_are_rejected(monkeypatch):
    monkeypatch.setenv("COURIER_ETA_DRIVING_SPEED_KMH", "0")

    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_phase_lists_are_normalised(monkeypatch):
    monkeypatch.setenv("COURIER_ETA_PHASE_PICKUP", " Pending,READY_FOR_PICKUP,, ")

    settings = Settings(_env_file=None)

    assert settings.phase_pickup == ("pending", "ready_for_pickup")


def test_malformed_phase_json_is_rejected(monkeypatch):
    monkeypatch.setenv("COURIER_ETA_PHASE_DELIVERY", '["picked_up"')

    with pytest.raises(ValidationError):
        Settings(_env_file=None)
