"""
Geometry Package

Spherical distance/bearing helpers and geofence containment tests.
"""

from .spherical import (
    EARTH_RADIUS_METERS,
    haversine_distance,
    initial_bearing,
    interpolate,
)

from .containment import (
    is_point_inside_circle,
    is_point_inside_ring,
    is_point_inside_polygon,
    is_point_inside_geofence,
)


__all__ = [
    "EARTH_RADIUS_METERS",
    "haversine_distance",
    "initial_bearing",
    "interpolate",
    "is_point_inside_circle",
    "is_point_inside_ring",
    "is_point_inside_polygon",
    "is_point_inside_geofence",
]
