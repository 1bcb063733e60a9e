"""Route paths and track sources"""

from .route_path import (
    RoutePath,
    DEFAULT_SAMPLE_INTERVAL_MS,
)
from .track_loader import (
    GeoJSONLoader,
    DEFAULT_TRACK_POINTS,
    default_route_path,
    load_track,
)

__all__ = [
    'RoutePath',
    'DEFAULT_SAMPLE_INTERVAL_MS',
    'GeoJSONLoader',
    'DEFAULT_TRACK_POINTS',
    'default_route_path',
    'load_track',
]
