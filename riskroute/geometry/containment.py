"""
Geofence Containment

Boundary rule shared by both shapes: a point exactly on the boundary is
outside. Circles compare great-circle distance with `<`; polygons reject
points lying on an edge before ray casting.
"""

from typing import Sequence

from riskroute.models.coordinates import GPSCoordinate
from riskroute.models.geofence import CircleShape, PolygonShape, Geofence
from .spherical import haversine_distance

# Tolerance (degrees^2) for the on-edge collinearity test
_EDGE_EPSILON = 1e-12


def is_point_inside_circle(lat: float, lon: float, circle: CircleShape) -> bool:
    """Point is inside iff its distance to the center is strictly below the radius"""
    distance = haversine_distance(lat, lon, circle.center.lat, circle.center.lon)
    return distance < circle.radius_meters


def _is_on_segment(lat: float, lon: float, a: GPSCoordinate, b: GPSCoordinate) -> bool:
    cross = (b.lon - a.lon) * (lat - a.lat) - (b.lat - a.lat) * (lon - a.lon)
    if abs(cross) > _EDGE_EPSILON:
        return False
    return (
        min(a.lon, b.lon) <= lon <= max(a.lon, b.lon) and
        min(a.lat, b.lat) <= lat <= max(a.lat, b.lat)
    )


def is_point_inside_ring(lat: float, lon: float, vertices: Sequence[GPSCoordinate]) -> bool:
    """
    Even-odd ray casting over an implicitly closed ring

    Casts a ray towards +lon; lon is x and lat is y.
    """
    n = len(vertices)
    if n < 3:
        return False

    inside = False
    j = n - 1
    for i in range(n):
        vi, vj = vertices[i], vertices[j]
        if _is_on_segment(lat, lon, vj, vi):
            return False
        if (vi.lat > lat) != (vj.lat > lat):
            crossing_lon = (vj.lon - vi.lon) * (lat - vi.lat) / (vj.lat - vi.lat) + vi.lon
            if lon < crossing_lon:
                inside = not inside
        j = i

    return inside


def is_point_inside_polygon(lat: float, lon: float, polygon: PolygonShape) -> bool:
    return is_point_inside_ring(lat, lon, polygon.vertices)


def is_point_inside_geofence(lat: float, lon: float, geofence: Geofence) -> bool:
    """Dispatch on the geofence shape"""
    shape = geofence.shape
    if isinstance(shape, CircleShape):
        return is_point_inside_circle(lat, lon, shape)
    if isinstance(shape, PolygonShape):
        return is_point_inside_polygon(lat, lon, shape)
    raise TypeError(f"Unsupported geofence shape: {type(shape).__name__}")
