"""
Geofence and Route Layers

Draw helpers shared by the simulation and the hotspot generator.
"""

from typing import Any, Callable, Dict, Optional, Sequence

from riskroute.models import (
    CircleShape,
    Geofence,
    GPSCoordinate,
    RISK_ZONE_PROPERTIES,
)
from .surface import MapSurface

ROUTE_LINE_ID = "route-line"
ROUTE_LINE_COLOR = "#FF0000"
VEHICLE_MARKER_ID = "vehicle"

VEHICLE_ICON = {
    "path": "FORWARD_CLOSED_ARROW",
    "scale": 6,
    "fillColor": "#4285F4",
    "fillOpacity": 1,
    "strokeColor": "#FFFFFF",
    "strokeWeight": 2,
}


def geofence_shape_id(geofence_id: str) -> str:
    return f"geofence:{geofence_id}"


def zone_info(geofence: Geofence) -> Dict[str, Any]:
    """Payload for the zone info popup shown on click"""
    info = {
        'id': geofence.id,
        'name': geofence.name,
        'riskLevel': geofence.risk_level.value,
        'label': f"{geofence.risk_level.value.upper()} Risk",
        'description': geofence.description,
        'color': geofence.color,
        'position': {'lat': geofence.center.lat, 'lon': geofence.center.lon},
    }
    if isinstance(geofence.shape, CircleShape):
        info['radius'] = geofence.shape.radius_meters
    return info


def draw_geofence(
    surface: MapSurface,
    geofence: Geofence,
    on_click: Optional[Callable[[Geofence], Any]] = None
) -> str:
    """
    Draw a geofence using its own colors, or the risk table defaults

    Returns:
        Shape id on the surface
    """
    defaults = RISK_ZONE_PROPERTIES[geofence.risk_level]
    fill = geofence.color or defaults["color"]
    stroke = geofence.stroke_color or defaults["strokeColor"]
    opacity = geofence.opacity if geofence.opacity is not None else 0.35
    shape_id = geofence_shape_id(geofence.id)

    if isinstance(geofence.shape, CircleShape):
        surface.draw_circle(shape_id, geofence.shape.center, geofence.shape.radius_meters, fill, stroke, opacity)
    else:
        surface.draw_polygon(shape_id, geofence.shape.vertices, fill, stroke, opacity)

    callback = on_click or zone_info
    surface.add_click_listener(shape_id, lambda _element_id: callback(geofence))
    return shape_id


def remove_geofence(surface: MapSurface, geofence_id: str):
    surface.remove_shape(geofence_shape_id(geofence_id))


def draw_route_line(surface: MapSurface, path: Sequence[GPSCoordinate], shape_id: str = ROUTE_LINE_ID):
    surface.draw_polyline(shape_id, path, ROUTE_LINE_COLOR, weight=3)


def place_vehicle(surface: MapSurface, position: GPSCoordinate, heading: float = 0.0):
    icon = dict(VEHICLE_ICON, rotation=heading)
    surface.place_marker(VEHICLE_MARKER_ID, position, icon=icon, rotation=heading, title="Vehicle")
