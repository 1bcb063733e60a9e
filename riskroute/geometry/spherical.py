"""
Spherical Earth Helpers

Great-circle distance and bearing on lat/lon degrees. Distances are never
computed as planar Euclidean distance on raw degrees.
"""

import math

# Mean earth radius (IUGG), matches the maps SDK spherical library
EARTH_RADIUS_METERS = 6371008.8


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points

    Args:
        lat1, lon1: First point in degrees
        lat2, lon2: Second point in degrees

    Returns:
        Distance in meters
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = math.sin(delta_phi / 2) ** 2 + \
        math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


def initial_bearing(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Initial bearing from the first point towards the second

    Returns degrees clockwise from north in [-180, 180), the same range the
    map marker rotation expects. Identical points give 0.
    """
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    delta_lambda = math.radians(lon2 - lon1)

    y = math.sin(delta_lambda) * math.cos(phi2)
    x = math.cos(phi1) * math.sin(phi2) - \
        math.sin(phi1) * math.cos(phi2) * math.cos(delta_lambda)

    if x == 0 and y == 0:
        return 0.0

    heading = math.degrees(math.atan2(y, x))
    return ((heading + 180.0) % 360.0) - 180.0


def interpolate(lat1: float, lon1: float, lat2: float, lon2: float, progress: float) -> tuple[float, float]:
    """
    Linear interpolation in degree space

    Not geodesic-correct over long segments; route samples are closely
    spaced so the error stays well under a meter.
    """
    return (
        lat1 + (lat2 - lat1) * progress,
        lon1 + (lon2 - lon1) * progress
    )
