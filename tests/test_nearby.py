import pytest

from courier_eta.models.domain import GeoPoint, LocationSource, OrderLocationSet, ResolvedEndpoint
from courier_eta.services.geospatial import haversine_km
from courier_eta.services.nearby import rank_nearby_orders

COURIER = GeoPoint(longitude=77.5, latitude=12.9)


def _order(order_id: str, pickup=None) -> OrderLocationSet:
    if pickup is None:
        return OrderLocationSet(order_id=order_id)
    lat, lon = pickup
    endpoint = ResolvedEndpoint(point=GeoPoint(longitude=lon, latitude=lat), source=LocationSource.RESTAURANT_LOCATION)
    return OrderLocationSet(order_id=order_id, pickup=endpoint)


def test_orders_are_sorted_by_pickup_distance():
    orders = [_order("far", (12.91, 77.5)), _order("near", (12.901, 77.5)), _order("mid", (12.905, 77.5))]

    ranked = rank_nearby_orders(COURIER, orders)

    assert [order.order_id for order in ranked] == ["near", "mid", "far"]
    assert ranked[0].distance_km == pytest.approx(haversine_km(12.9, 77.5, 12.901, 77.5))
    assert all(order.within_range for order in ranked)
    assert ranked[0].cardinal == "N"


def test_out_of_range_orders_are_dropped_unless_requested():
    orders = [_order("near", (12.901, 77.5)), _order("remote", (13.2, 77.5))]

    assert [order.order_id for order in rank_nearby_orders(COURIER, orders)] == ["near"]

    ranked = rank_nearby_orders(COURIER, orders, include_out_of_range=True)
    assert [order.order_id for order in ranked] == ["near", "remote"]
    assert ranked[1].within_range is False


def test_custom_radius():
    orders = [_order("near", (12.901, 77.5)), _order("mid", (12.905, 77.5))]

    ranked = rank_nearby_orders(COURIER, orders, max_distance_km=0.3)

    assert [order.order_id for order in ranked] == ["near"]


def test_unresolved_pickups_are_listed_last_without_distance():
    orders = [_order("ghost"), _order("near", (12.901, 77.5))]

    ranked = rank_nearby_orders(COURIER, orders)

    assert [order.order_id for order in ranked] == ["near", "ghost"]
    assert ranked[1].distance_km is None
    assert ranked[1].location_unavailable
    assert ranked[1].within_range is False
