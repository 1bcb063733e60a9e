"""
Route Path Tests

Tests for RoutePath construction and time lookup:
- Construction from timed and untimed sources
- point_at clamping before the first and after the last sample
- Zero-length segments
"""

import pytest

from riskroute.exceptions import EmptyRouteError
from riskroute.models import GPSCoordinate, RoutePoint, TripLocation, TripRoute
from riskroute.route import RoutePath


@pytest.fixture
def three_point_path():
    return RoutePath([
        RoutePoint(lat=0, lon=0, timestamp_ms=0),
        RoutePoint(lat=0, lon=1, timestamp_ms=1000),
        RoutePoint(lat=0, lon=2, timestamp_ms=2000),
    ])


# ============================================
# Construction
# ============================================

class TestRoutePathConstruction:
    """Test building route paths"""

    def test_empty_route_rejected(self):
        with pytest.raises(EmptyRouteError):
            RoutePath([])

    def test_decreasing_timestamps_rejected(self):
        with pytest.raises(ValueError):
            RoutePath([
                RoutePoint(lat=0, lon=0, timestamp_ms=1000),
                RoutePoint(lat=0, lon=1, timestamp_ms=500),
            ])

    def test_from_coordinates_synthesizes_timestamps_and_speed(self):
        path = RoutePath.from_coordinates([(0, 0), (0, 1), (0, 2)])
        assert [p.timestamp_ms for p in path] == [0, 1000, 2000]
        assert [p.speed for p in path] == [30, 35, 40]

    def test_from_coordinates_custom_interval(self):
        path = RoutePath.from_coordinates(
            [GPSCoordinate(lat=0, lon=0), {"lat": 0, "lng": 1}],
            interval_ms=250
        )
        assert path.last.timestamp_ms == 250
        assert path.last.lon == 1

    def test_load_keeps_route_point_timestamps(self):
        points = [
            RoutePoint(lat=0, lon=0, timestamp_ms=0),
            RoutePoint(lat=0, lon=1, timestamp_ms=4000),
        ]
        path = RoutePath.load(points)
        assert path.duration_ms == 4000

    def test_load_untimed_source(self):
        path = RoutePath.load([(1, 1), (2, 2)], interval_ms=10)
        assert [p.timestamp_ms for p in path] == [0, 10]

    def test_from_trip_route_uses_polyline(self):
        route = TripRoute(
            start=TripLocation(address="A", lat=0, lon=0),
            end=TripLocation(address="B", lat=0, lon=2),
            path=[GPSCoordinate(lat=0, lon=0), GPSCoordinate(lat=0, lon=1), GPSCoordinate(lat=0, lon=2)],
        )
        assert len(RoutePath.from_trip_route(route)) == 3

    def test_from_trip_route_without_polyline(self):
        route = TripRoute(
            start=TripLocation(address="A", lat=0, lon=0),
            end=TripLocation(address="B", lat=0, lon=2),
        )
        path = RoutePath.from_trip_route(route)
        assert len(path) == 2
        assert path.last.coordinate == GPSCoordinate(lat=0, lon=2)

    def test_accessors(self, three_point_path):
        assert len(three_point_path) == 3
        assert three_point_path.first.lon == 0
        assert three_point_path.last.lon == 2
        assert three_point_path[1].timestamp_ms == 1000
        assert three_point_path.duration_ms == 2000
        assert three_point_path.is_animatable

    def test_single_point_not_animatable(self):
        path = RoutePath([RoutePoint(lat=0, lon=0, timestamp_ms=0)])
        assert not path.is_animatable
        assert path.duration_ms == 0

    def test_bounds(self, three_point_path):
        bounds = three_point_path.bounds()
        assert (bounds.west, bounds.east) == (0, 2)
        assert bounds.north == bounds.south == 0


# ============================================
# Time Lookup
# ============================================

class TestPointAt:
    """Test bracketing pair lookup"""

    def test_inside_segment(self, three_point_path):
        segment = three_point_path.point_at(1500)
        assert segment.index == 1
        assert segment.progress == pytest.approx(0.5)

    def test_exactly_on_sample(self, three_point_path):
        segment = three_point_path.point_at(1000)
        assert segment.index == 1
        assert segment.progress == 0.0

    def test_clamped_before_start(self, three_point_path):
        segment = three_point_path.point_at(-500)
        assert segment.index == 0
        assert segment.progress == 0.0

    def test_clamped_after_end(self, three_point_path):
        segment = three_point_path.point_at(99999)
        assert segment.index == 1
        assert segment.progress == 1.0
        assert segment.end == three_point_path.last

    def test_at_last_timestamp(self, three_point_path):
        segment = three_point_path.point_at(2000)
        assert segment.progress == 1.0

    def test_single_point(self):
        path = RoutePath([RoutePoint(lat=3, lon=4, timestamp_ms=0)])
        segment = path.point_at(1000)
        assert segment.index == 0
        assert segment.start == segment.end

    def test_zero_length_segment(self):
        path = RoutePath([
            RoutePoint(lat=0, lon=0, timestamp_ms=0),
            RoutePoint(lat=0, lon=1, timestamp_ms=0),
            RoutePoint(lat=0, lon=2, timestamp_ms=1000),
        ])
        segment = path.point_at(0)
        assert segment.progress == 0.0

    def test_position_at(self, three_point_path):
        assert three_point_path.position_at(500) == pytest.approx((0.0, 0.5))
        assert three_point_path.position_at(5000) == pytest.approx((0.0, 2.0))
