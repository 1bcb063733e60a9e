"""
Rendering Tests

The headless map surface and the geofence/route layer helpers.
"""

import pytest

from riskroute.models import GPSCoordinate, Geofence, MapBounds, PolygonShape, RiskLevel
from riskroute.rendering import (
    VEHICLE_MARKER_ID,
    InMemoryMapSurface,
    draw_geofence,
    draw_route_line,
    geofence_shape_id,
    place_vehicle,
    remove_geofence,
    zone_info,
)


@pytest.fixture
def triangle():
    return Geofence(
        id="triangle",
        name="Triangle",
        shape=PolygonShape(vertices=[
            GPSCoordinate(lat=0, lon=0),
            GPSCoordinate(lat=0, lon=1),
            GPSCoordinate(lat=1, lon=0),
        ]),
        risk_level=RiskLevel.CRITICAL,
    )


class TestInMemoryMapSurface:
    """Test the recording surface"""

    def test_markers(self, surface):
        surface.place_marker("m", GPSCoordinate(lat=1, lon=2), icon={"label": "A"}, title="Start")
        assert surface.markers["m"].title == "Start"

        surface.remove_marker("m")
        assert "m" not in surface.markers

    def test_remove_missing_is_noop(self, surface):
        surface.remove_marker("missing")
        surface.remove_shape("missing")

    def test_fit_bounds_pads_view(self, surface):
        surface.fit_bounds(MapBounds(north=1, south=0, east=1, west=0), padding=0.1)

        view = surface.current_view()
        assert view.north == pytest.approx(1.1)
        assert view.west == pytest.approx(-0.1)

    def test_click_without_listener(self, surface):
        assert surface.click("nothing") == []

    def test_clear(self, surface):
        surface.place_marker("m", GPSCoordinate(lat=0, lon=0))
        surface.draw_polyline("line", [GPSCoordinate(lat=0, lon=0)], "#000")

        surface.clear()

        assert surface.markers == {}
        assert surface.shapes == {}


class TestLayers:
    """Test draw helpers"""

    def test_draw_circle_geofence(self, surface, make_zone):
        zone = make_zone("circle", 0, 1, 500, risk_level=RiskLevel.MEDIUM)

        shape_id = draw_geofence(surface, zone)

        shape = surface.shapes[shape_id]
        assert shape.kind == "circle"
        assert shape.radius_meters == 500
        assert shape.fill_color == "#FF9800"
        assert shape.opacity == 0.35

    def test_draw_polygon_geofence(self, surface, triangle):
        shape_id = draw_geofence(surface, triangle)

        shape = surface.shapes[shape_id]
        assert shape.kind == "polygon"
        assert len(shape.points) == 3
        assert shape.stroke_color == "#4A148C"

    def test_click_shows_zone_info(self, surface, triangle):
        shape_id = draw_geofence(surface, triangle)

        info = surface.click(shape_id)[0]

        assert info["id"] == "triangle"
        assert info["label"] == "CRITICAL Risk"
        assert "radius" not in info

    def test_custom_click_callback(self, surface, make_zone):
        clicked = []
        shape_id = draw_geofence(surface, make_zone("c", 0, 0, 10), on_click=clicked.append)

        surface.click(shape_id)

        assert [g.id for g in clicked] == ["c"]

    def test_remove_geofence(self, surface, triangle):
        draw_geofence(surface, triangle)
        remove_geofence(surface, "triangle")

        assert geofence_shape_id("triangle") not in surface.shapes
        assert surface.click(geofence_shape_id("triangle")) == []

    def test_zone_info_circle_radius(self, make_zone):
        info = zone_info(make_zone("c", 1, 2, 150, risk_level=RiskLevel.LOW))
        assert info["radius"] == 150
        assert info["position"] == {"lat": 1, "lon": 2}

    def test_route_line_and_vehicle(self, surface):
        draw_route_line(surface, [GPSCoordinate(lat=0, lon=0), GPSCoordinate(lat=0, lon=1)])
        place_vehicle(surface, GPSCoordinate(lat=0, lon=0.5), heading=90.0)

        assert surface.shapes["route-line"].stroke_color == "#FF0000"
        vehicle = surface.markers[VEHICLE_MARKER_ID]
        assert vehicle.rotation == 90.0
        assert vehicle.icon["rotation"] == 90.0
