"""Render surface abstraction and layer helpers"""

from .surface import (
    MapSurface,
    InMemoryMapSurface,
    MarkerState,
    ShapeState,
)
from .layers import (
    ROUTE_LINE_ID,
    VEHICLE_MARKER_ID,
    VEHICLE_ICON,
    geofence_shape_id,
    zone_info,
    draw_geofence,
    remove_geofence,
    draw_route_line,
    place_vehicle,
)

__all__ = [
    'MapSurface',
    'InMemoryMapSurface',
    'MarkerState',
    'ShapeState',
    'ROUTE_LINE_ID',
    'VEHICLE_MARKER_ID',
    'VEHICLE_ICON',
    'geofence_shape_id',
    'zone_info',
    'draw_geofence',
    'remove_geofence',
    'draw_route_line',
    'place_vehicle',
]
