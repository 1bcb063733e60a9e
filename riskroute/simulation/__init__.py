"""Route simulation engine"""

from .scheduler import (
    FrameScheduler,
    AsyncioFrameScheduler,
    ManualFrameScheduler,
    ManualClock,
    wall_clock_ms,
)
from .geofence_detector import GeofenceDetector
from .notifications import (
    Notification,
    NotificationCenter,
)
from .route_simulation import (
    RouteSimulation,
    SimulationState,
    SimulationStatus,
)

__all__ = [
    'FrameScheduler',
    'AsyncioFrameScheduler',
    'ManualFrameScheduler',
    'ManualClock',
    'wall_clock_ms',
    'GeofenceDetector',
    'Notification',
    'NotificationCenter',
    'RouteSimulation',
    'SimulationState',
    'SimulationStatus',
]
