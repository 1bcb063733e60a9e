"""Trip planning session"""

from .trip_planner import (
    TripPlanner,
    START_MARKER_ID,
    END_MARKER_ID,
    TRIP_ROUTE_LINE_ID,
    WEATHER_MARKER_OFFSET,
)

__all__ = [
    'TripPlanner',
    'START_MARKER_ID',
    'END_MARKER_ID',
    'TRIP_ROUTE_LINE_ID',
    'WEATHER_MARKER_OFFSET',
]
