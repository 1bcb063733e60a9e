"""
Pydantic Models Package

All data models for the RiskRoute backend.
Import from here for convenience.
"""

# Coordinate models
from .coordinates import (
    GPSCoordinate,
    MapBounds,
    PRETORIA_CENTER,
)

# Route models
from .route import (
    RoutePoint,
    RouteSegment,
)

# Geofence models
from .geofence import (
    RiskLevel,
    RISK_ZONE_PROPERTIES,
    GeofenceAction,
    CircleShape,
    PolygonShape,
    GeofenceShape,
    Geofence,
    GeofenceEvent,
)

# Trip models
from .trip import (
    TripLocation,
    TripRoute,
    RouteRequest,
)

# Weather models
from .weather import (
    WeatherCondition,
    WeatherMain,
    WeatherWind,
    WeatherCoord,
    WeatherData,
)


__all__ = [
    # Coordinates
    "GPSCoordinate",
    "MapBounds",
    "PRETORIA_CENTER",

    # Route
    "RoutePoint",
    "RouteSegment",

    # Geofence
    "RiskLevel",
    "RISK_ZONE_PROPERTIES",
    "GeofenceAction",
    "CircleShape",
    "PolygonShape",
    "GeofenceShape",
    "Geofence",
    "GeofenceEvent",

    # Trip
    "TripLocation",
    "TripRoute",
    "RouteRequest",

    # Weather
    "WeatherCondition",
    "WeatherMain",
    "WeatherWind",
    "WeatherCoord",
    "WeatherData",
]
