import pytest

from courier_eta.models.domain import GeoPoint, LocationSource, OrderLocationSet, ResolvedEndpoint, TrackingState
from courier_eta.services.normalization import normalize
from courier_eta.services.reconciliation import reconcile, unwrap_accept_response


def _geo(lon: float, lat: float) -> dict:
    return {"type": "Point", "coordinates": [lon, lat]}


def _endpoint(lat: float, lon: float, source: LocationSource = LocationSource.GEOJSON) -> ResolvedEndpoint:
    return ResolvedEndpoint(point=GeoPoint(longitude=lon, latitude=lat), source=source)


def test_accept_payload_missing_coordinates_is_filled_from_list_view():
    list_view = normalize(
        {"_id": "O7", "pickupLocation": _geo(77.5, 12.9), "deliveryLocation": _geo(77.6, 12.95)}
    )
    accept_response = {"order": {"_id": "O7", "status": "confirmed"}}

    location_set = reconcile(accept_response, [list_view])

    assert location_set.order_id == "O7"
    assert location_set.pickup == list_view.pickup
    assert location_set.delivery == list_view.delivery
    assert location_set.resolution is TrackingState.RESOLVED


def test_resolved_endpoints_are_never_overwritten():
    accepted = {"_id": "O7", "pickupLatitude": 12.9, "pickupLongitude": 77.5}
    view = OrderLocationSet(
        order_id="O7",
        pickup=_endpoint(13.4, 80.1),
        delivery=_endpoint(12.95, 77.6),
    )

    location_set = reconcile(accepted, [view])

    assert location_set.pickup.point == GeoPoint(longitude=77.5, latitude=12.9)
    assert location_set.pickup.source is LocationSource.DIRECT_SCALAR
    assert location_set.delivery == view.delivery


def test_first_candidate_with_endpoint_wins():
    first = OrderLocationSet(order_id="O7", delivery=_endpoint(12.95, 77.6))
    second = OrderLocationSet(order_id="O7", pickup=_endpoint(12.9, 77.5), delivery=_endpoint(13.0, 77.7))

    location_set = reconcile({"_id": "O7"}, [first, second])

    assert location_set.delivery == first.delivery
    assert location_set.pickup == second.pickup


def test_views_of_other_orders_are_ignored():
    stranger = OrderLocationSet(order_id="O8", pickup=_endpoint(12.9, 77.5))

    location_set = reconcile({"_id": "O7"}, [stranger])

    assert location_set.pickup.point is None
    assert location_set.resolution is TrackingState.UNRESOLVED


def test_raw_candidate_views_are_normalized():
    raw_view = {"id": "O7", "restaurant": {"location": _geo(77.51, 12.91)}, "user": {"location": _geo(77.6, 12.95)}}

    location_set = reconcile({"_id": "O7", "pickupLocation": _geo(0, 0)}, [raw_view])

    assert location_set.pickup.source is LocationSource.RESTAURANT_LOCATION
    assert location_set.delivery.source is LocationSource.USER_LOCATION


def test_explicit_order_id_overrides_payload():
    location_set = reconcile({"status": "confirmed"}, order_id="O9")

    assert location_set.order_id == "O9"


def test_unsupported_payload_type_raises():
    with pytest.raises(TypeError):
        reconcile(["O7"])


def test_unwrap_accept_response():
    order = {"_id": "O7"}

    assert unwrap_accept_response({"order": order, "message": "accepted"}) is order
    assert unwrap_accept_response(order) is order
    # an order that happens to carry an "order" field is left alone
    assert unwrap_accept_response({"_id": "O7", "order": {"_id": "x"}})["_id"] == "O7"


def test_raw_view_without_id_describes_the_accepted_order():
    list_view = {"deliveryLocation": _geo(77.6, 12.95), "restaurant": {"location": _geo(77.5, 12.9)}}

    location_set = reconcile({"_id": "O1"}, [list_view])

    assert location_set.order_id == "O1"
    assert location_set.delivery.point == GeoPoint(longitude=77.6, latitude=12.95)
    assert location_set.pickup.source is LocationSource.RESTAURANT_LOCATION
