from concurrent.futures import ThreadPoolExecutor

from courier_eta.models.domain import GeoPoint
from courier_eta.services.tracking import RefetchGate, has_moved_significantly


def _point(lat: float, lon: float) -> GeoPoint:
    return GeoPoint(longitude=lon, latitude=lat)


def test_first_reading_always_counts_as_movement():
    assert has_moved_significantly(None, _point(12.9, 77.5)) is True


def test_movement_threshold_is_inclusive_of_larger_moves():
    start = _point(12.9, 77.5)

    assert has_moved_significantly(start, _point(12.9004, 77.5), threshold_km=0.1) is False
    assert has_moved_significantly(start, _point(12.902, 77.5), threshold_km=0.1) is True
    assert has_moved_significantly(start, start, threshold_km=0.0) is True


def test_refetch_gate_tracks_last_fetch_point():
    gate = RefetchGate(threshold_km=0.1)
    start = _point(12.9, 77.5)

    assert gate.should_refetch(start)
    gate.record_fetch(start)
    assert gate.last_fetch_point == start
    assert not gate.should_refetch(_point(12.9005, 77.5))
    assert gate.should_refetch(_point(12.905, 77.5))

    gate.reset()
    assert gate.last_fetch_point is None


def test_refetch_gate_small_steps_accumulate_from_fetch_point():
    gate = RefetchGate(threshold_km=0.1)
    assert gate.check_and_record(_point(12.9, 77.5))

    # each step is ~44 m; the gate measures from where it last fetched
    assert not gate.check_and_record(_point(12.9004, 77.5))
    assert not gate.check_and_record(_point(12.9008, 77.5))
    assert gate.check_and_record(_point(12.9012, 77.5))
    assert gate.last_fetch_point == _point(12.9012, 77.5)


def test_check_and_record_fires_once_for_concurrent_callers():
    gate = RefetchGate(threshold_km=0.1)
    point = _point(12.9, 77.5)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: gate.check_and_record(point), range(16)))

    assert results.count(True) == 1
