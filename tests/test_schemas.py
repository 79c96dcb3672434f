from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from courier_eta.exceptions import InvalidCoordinateError
from courier_eta.models.domain import (
    DeliveryEstimate,
    GeoPoint,
    LocationSource,
    OrderLocationSet,
    ResolvedEndpoint,
    TripLeg,
)
from courier_eta.schemas import CourierPositionPayload, DeliveryEstimateModel, OrderLocationModel
from courier_eta.schemas.orders import decode_order

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def test_epoch_millis_and_seconds_decode_to_same_instant():
    millis = CourierPositionPayload(latitude=12.9, longitude=77.5, timestamp=NOW.timestamp() * 1000)
    seconds = CourierPositionPayload(latitude=12.9, longitude=77.5, timestamp=NOW.timestamp())

    assert millis.timestamp == NOW
    assert seconds.timestamp == NOW


def test_naive_timestamp_is_treated_as_utc():
    payload = CourierPositionPayload(latitude=12.9, longitude=77.5, timestamp="2026-10-19T12:00:00")

    assert payload.timestamp == NOW


def test_position_payload_to_domain():
    position = CourierPositionPayload(latitude="12.9", longitude=77.5, accuracy=12, timestamp=NOW).to_domain()

    assert position.point == GeoPoint(longitude=77.5, latitude=12.9)
    assert position.accuracy_meters == 12.0
    assert position.observed_at == NOW


def test_unusable_position_is_rejected():
    with pytest.raises(InvalidCoordinateError):
        CourierPositionPayload(latitude=float("nan"), longitude=77.5).to_domain()
    with pytest.raises(InvalidCoordinateError):
        CourierPositionPayload(latitude=0, longitude=0).to_domain()
    with pytest.raises(ValidationError):
        CourierPositionPayload(longitude=77.5)
    with pytest.raises(ValidationError):
        CourierPositionPayload(latitude=12.9, longitude=77.5, accuracy=-1)


def test_order_decoding_is_lenient():
    payload = decode_order(
        {"id": 17, "status": " Picked_Up ", "restaurant": "Dosa Hut", "items": [None, {"post": {"author": {}}}]}
    )

    assert payload.order_id == "17"
    assert payload.status == "picked_up"
    assert payload.restaurant is None
    assert payload.first_item_author is None
    assert decode_order(payload) is payload


def test_unavailable_estimate_projection():
    model = DeliveryEstimateModel.from_domain("O1", None)

    assert model.available is False
    assert model.display_distance == "location unavailable"
    assert model.distance_to_pickup_km is None


def test_estimate_projection_uses_current_leg_distance():
    estimate = DeliveryEstimate(
        order_id="O1",
        leg=TripLeg.DELIVERY,
        computed_from_courier_point=GeoPoint(longitude=77.5, latitude=12.9),
        distance_to_delivery_km=2.44,
        eta_minutes_to_delivery=4.88,
        computed_at=NOW,
    )

    model = DeliveryEstimateModel.from_domain("O1", estimate)

    assert model.available is True
    assert model.leg == "delivery"
    assert model.display_distance == "2.4 km"
    assert model.courier_latitude == 12.9


def test_order_location_projection():
    location_set = OrderLocationSet(
        order_id="O1",
        pickup=ResolvedEndpoint(point=GeoPoint(longitude=77.5, latitude=12.9), source=LocationSource.GEOJSON),
        reconciled_at=NOW,
    )

    model = OrderLocationModel.from_domain(location_set)

    assert model.resolution == "partially_resolved"
    assert model.pickup.available is True
    assert model.pickup.source == "geojson"
    assert model.delivery.available is False
    assert model.delivery.latitude is None
