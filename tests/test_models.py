"""
Model Tests

This module tests the pydantic data models:
- Coordinates and map bounds
- Route samples
- Geofences and geofence events
- Trip and weather payloads
"""

import pytest
from pydantic import ValidationError

from riskroute.models import (
    GPSCoordinate,
    MapBounds,
    RoutePoint,
    RiskLevel,
    RISK_ZONE_PROPERTIES,
    GeofenceAction,
    CircleShape,
    PolygonShape,
    Geofence,
    GeofenceEvent,
    TripLocation,
    TripRoute,
    RouteRequest,
    WeatherData,
)


# ============================================
# Coordinate Models
# ============================================

class TestGPSCoordinate:
    """Test GPSCoordinate validation"""

    def test_valid_coordinate(self):
        coord = GPSCoordinate(lat=-25.7461, lon=28.1881)
        assert coord.as_tuple() == (-25.7461, 28.1881)

    def test_latitude_out_of_range(self):
        with pytest.raises(ValidationError):
            GPSCoordinate(lat=91.0, lon=0.0)

    def test_longitude_out_of_range(self):
        with pytest.raises(ValidationError):
            GPSCoordinate(lat=0.0, lon=-180.5)

    def test_coordinate_is_frozen(self):
        coord = GPSCoordinate(lat=0.0, lon=0.0)
        with pytest.raises(ValidationError):
            coord.lat = 1.0


class TestMapBounds:
    """Test MapBounds helpers"""

    def test_ranges_and_center(self):
        bounds = MapBounds(north=2.0, south=0.0, east=4.0, west=0.0)
        assert bounds.lat_range == 2.0
        assert bounds.lon_range == 4.0
        assert bounds.center == (1.0, 2.0)

    def test_contains(self):
        bounds = MapBounds(north=1.0, south=-1.0, east=1.0, west=-1.0)
        assert bounds.contains(0.0, 0.0)
        assert bounds.contains(1.0, 1.0)
        assert not bounds.contains(1.5, 0.0)

    def test_padded(self):
        bounds = MapBounds(north=1.0, south=0.0, east=1.0, west=0.0).padded(0.1)
        assert bounds.north == pytest.approx(1.1)
        assert bounds.south == pytest.approx(-0.1)
        assert bounds.east == pytest.approx(1.1)
        assert bounds.west == pytest.approx(-0.1)

    def test_from_points(self):
        bounds = MapBounds.from_points([(0.0, 5.0), (-2.0, 7.0), (1.0, 6.0)])
        assert bounds.north == 1.0
        assert bounds.south == -2.0
        assert bounds.east == 7.0
        assert bounds.west == 5.0

    def test_from_points_empty(self):
        with pytest.raises(ValueError):
            MapBounds.from_points([])

    @pytest.mark.parametrize("field, value", [
        ("north", 91.0), ("south", -90.5), ("east", 180.5), ("west", -200.0)
    ])
    def test_out_of_range_rejected(self, field, value):
        values = {"north": 1.0, "south": 0.0, "east": 1.0, "west": 0.0}
        values[field] = value
        with pytest.raises(ValidationError):
            MapBounds(**values)

    def test_padded_clamps_to_valid_ranges(self):
        bounds = MapBounds(north=90.0, south=80.0, east=180.0, west=170.0).padded(0.5)
        assert bounds.north == 90.0
        assert bounds.south == pytest.approx(75.0)
        assert bounds.east == 180.0
        assert bounds.west == pytest.approx(165.0)


# ============================================
# Route Models
# ============================================

class TestRoutePoint:
    """Test RoutePoint"""

    def test_coordinate(self):
        point = RoutePoint(lat=1.0, lon=2.0, timestamp_ms=500)
        assert point.coordinate == GPSCoordinate(lat=1.0, lon=2.0)
        assert point.speed is None

    def test_negative_timestamp_rejected(self):
        with pytest.raises(ValidationError):
            RoutePoint(lat=0.0, lon=0.0, timestamp_ms=-1)


# ============================================
# Geofence Models
# ============================================

class TestGeofence:
    """Test Geofence shapes and serialization"""

    def test_risk_table_covers_all_levels(self):
        for level in RiskLevel:
            props = RISK_ZONE_PROPERTIES[level]
            assert props["radius"] > 0
            assert props["color"].startswith("#")

    def test_circle_to_dict(self):
        geofence = Geofence(
            id="zone-1",
            name="Danger Area 1",
            shape=CircleShape(center=GPSCoordinate(lat=0.0, lon=1.0), radius_meters=250),
            risk_level=RiskLevel.HIGH,
        )
        data = geofence.to_dict()
        assert data["type"] == "circle"
        assert data["riskLevel"] == "high"
        assert data["isActive"] is True
        assert data["center"] == {"lat": 0.0, "lon": 1.0}
        assert data["radius"] == 250

    def test_polygon_center_is_vertex_centroid(self):
        geofence = Geofence(
            id="poly",
            name="Square",
            shape=PolygonShape(vertices=[
                GPSCoordinate(lat=0.0, lon=0.0),
                GPSCoordinate(lat=0.0, lon=2.0),
                GPSCoordinate(lat=2.0, lon=2.0),
                GPSCoordinate(lat=2.0, lon=0.0),
            ]),
        )
        assert geofence.center == GPSCoordinate(lat=1.0, lon=1.0)
        assert len(geofence.to_dict()["vertices"]) == 4

    def test_polygon_needs_three_vertices(self):
        with pytest.raises(ValidationError):
            PolygonShape(vertices=[GPSCoordinate(lat=0, lon=0), GPSCoordinate(lat=1, lon=1)])

    def test_shape_discriminator_from_dict(self):
        geofence = Geofence.model_validate({
            "id": "g",
            "name": "G",
            "shape": {"kind": "circle", "center": {"lat": 0, "lon": 0}, "radius_meters": 10},
        })
        assert isinstance(geofence.shape, CircleShape)

    def test_circle_radius_must_be_positive(self):
        with pytest.raises(ValidationError):
            CircleShape(center=GPSCoordinate(lat=0, lon=0), radius_meters=0)


class TestGeofenceEvent:
    """Test GeofenceEvent serialization"""

    def test_to_dict(self):
        event = GeofenceEvent(
            geofence_id="zone-1",
            action=GeofenceAction.ENTER,
            timestamp_ms=1234.0,
            elapsed_ms=600.0,
            position=GPSCoordinate(lat=0.0, lon=0.6),
            geofence_name="Zone 1",
            risk_level=RiskLevel.MEDIUM,
        )
        data = event.to_dict()
        assert data["geofenceId"] == "zone-1"
        assert data["action"] == "enter"
        assert data["riskLevel"] == "medium"
        assert data["timestamp"] == 1234.0
        assert data["elapsedMs"] == 600.0


# ============================================
# Trip & Weather Models
# ============================================

class TestTripModels:
    """Test trip models"""

    def test_duration_minutes(self):
        route = TripRoute(
            start=TripLocation(address="A", lat=0, lon=0),
            end=TripLocation(address="B", lat=0, lon=1),
            duration_seconds=1290,
        )
        assert route.duration_minutes == 22
        assert route.path == []

    def test_route_request_requires_addresses(self):
        with pytest.raises(ValidationError):
            RouteRequest(start_address="", end_address="Centurion")


class TestWeatherData:
    """Test WeatherData parsing"""

    PAYLOAD = {
        "coord": {"lat": -25.75, "lon": 28.19},
        "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
        "main": {"temp": 17.6, "feels_like": 17.2, "pressure": 1016, "humidity": 82},
        "wind": {"speed": 3.1, "deg": 200},
        "name": "Pretoria",
        "cod": 200,
    }

    def test_parse_ignores_extra_fields(self):
        weather = WeatherData.model_validate(self.PAYLOAD)
        assert weather.name == "Pretoria"
        assert weather.condition.main == "Rain"

    def test_summary(self):
        weather = WeatherData.model_validate(self.PAYLOAD)
        assert weather.summary() == "Rain: light rain - 18°C"

    def test_summary_without_condition(self):
        payload = dict(self.PAYLOAD, weather=[])
        weather = WeatherData.model_validate(payload)
        assert weather.condition is None
        assert weather.summary().startswith("Unknown")
