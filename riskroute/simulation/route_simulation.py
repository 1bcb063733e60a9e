"""
Route Simulation

Animates a single vehicle along a RoutePath, one tick per animation frame,
and runs geofence detection on the interpolated position.

Commands (bound by the API / UI layer):
    start, stop, reset, set_speed_multiplier
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from riskroute.exceptions import InvalidSpeedMultiplierError
from riskroute.geometry import initial_bearing, interpolate
from riskroute.models import Geofence, GeofenceAction, GeofenceEvent, GPSCoordinate
from riskroute.rendering import (
    MapSurface,
    VEHICLE_MARKER_ID,
    ROUTE_LINE_ID,
    draw_geofence,
    draw_route_line,
    place_vehicle,
    remove_geofence,
)
from riskroute.route import RoutePath
from .geofence_detector import GeofenceDetector
from .notifications import Notification, NotificationCenter
from .scheduler import AsyncioFrameScheduler, FrameScheduler, wall_clock_ms

GeofenceEventCallback = Callable[[GeofenceEvent], Any]
StatusCallback = Callable[[Dict[str, Any]], Any]


class SimulationStatus(Enum):
    """Simulation states"""
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass
class SimulationState:
    """Mutable state owned by one RouteSimulation"""
    is_running: bool = False
    start_time_ms: float = 0.0
    speed_multiplier: float = 1.0
    current_segment_index: int = 0
    active_geofence_ids: Set[str] = field(default_factory=set)
    history: List[GeofenceEvent] = field(default_factory=list)

    # Simulated time accrued before start_time_ms (speed changes rebase here)
    elapsed_offset_ms: float = 0.0
    elapsed_ms: float = 0.0
    completed: bool = False

    @property
    def status(self) -> SimulationStatus:
        return SimulationStatus.RUNNING if self.is_running else SimulationStatus.STOPPED


class RouteSimulation:
    """
    Single-vehicle route simulation

    All state mutation happens inside tick callbacks, each of which runs to
    completion and then requests the next frame from the scheduler.

    Usage:
        simulation = RouteSimulation(path, surface=surface)
        simulation.add_geofences(zones)
        simulation.initialize()
        simulation.on_geofence_event(lambda e: print(e.action))
        simulation.start()
    """

    def __init__(
        self,
        route_path: RoutePath,
        surface: Optional[MapSurface] = None,
        scheduler: Optional[FrameScheduler] = None,
        clock: Callable[[], float] = wall_clock_ms,
        notification_center: Optional[NotificationCenter] = None,
        geofences: Optional[Iterable[Geofence]] = None
    ):
        self.route_path = route_path
        self.surface = surface
        self.scheduler = scheduler or AsyncioFrameScheduler()
        self.clock = clock
        self.notifications = notification_center or NotificationCenter(clock=clock)

        self.state = SimulationState()
        self.detector = GeofenceDetector(
            clock=clock,
            active_geofence_ids=self.state.active_geofence_ids,
            history=self.state.history
        )

        self._frame_handle: Any = None
        self._position: GPSCoordinate = route_path.first.coordinate
        self._heading = 0.0
        self._initialized = False
        self.last_notification: Optional[Notification] = None

        # Listeners
        self._event_listeners: List[GeofenceEventCallback] = []
        self._complete_listeners: List[StatusCallback] = []
        self._state_listeners: List[StatusCallback] = []

        # Statistics
        self.ticks = 0
        self.listener_errors = 0
        self.tick_errors = 0

        if geofences:
            self.add_geofences(geofences)

    # ============================================
    # Rendering lifecycle
    # ============================================

    def initialize(self):
        """Draw the route line, vehicle marker and geofences on the surface"""
        if self.surface is None:
            return

        draw_route_line(self.surface, self.route_path.coordinates())
        place_vehicle(self.surface, self._position, self._heading)
        for geofence in self.detector.geofences.values():
            if geofence.is_active:
                draw_geofence(self.surface, geofence)

        self._initialized = True
        print(f"[RouteSimulation] Initialized with {len(self.route_path)} points, "
              f"{len(self.detector.geofences)} geofences")

    def teardown(self):
        """Stop and remove everything this simulation drew"""
        self.stop()

        if self.surface is not None:
            self.surface.remove_shape(ROUTE_LINE_ID)
            self.surface.remove_marker(VEHICLE_MARKER_ID)
            for geofence_id in self.detector.geofences:
                remove_geofence(self.surface, geofence_id)

        self._event_listeners.clear()
        self._complete_listeners.clear()
        self._state_listeners.clear()
        self._initialized = False
        print("[RouteSimulation] Torn down")

    # ============================================
    # Commands
    # ============================================

    def start(self) -> bool:
        """
        Start animating from the beginning of the route

        No-op when already running. A route with fewer than two points
        completes immediately without entering RUNNING.

        Returns:
            True if the simulation is now running
        """
        if self.state.is_running:
            return True

        if not self.route_path.is_animatable:
            print("[RouteSimulation] Route has a single point, nothing to animate")
            self._complete()
            return False

        now = self.clock()
        self.state.start_time_ms = now
        self.state.elapsed_offset_ms = 0.0
        self.state.elapsed_ms = 0.0
        self.state.current_segment_index = 0
        self.state.completed = False
        self.state.is_running = True

        self._frame_handle = self.scheduler.request_frame(self._tick)

        print(f"[RouteSimulation] ▶️ Started at {self.state.speed_multiplier}x")
        self._notify_state()
        return True

    def stop(self):
        """Stop the simulation; idempotent"""
        if not self.state.is_running:
            return

        self.state.is_running = False
        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None

        print(f"[RouteSimulation] ⏹️ Stopped at {self.state.elapsed_ms:.0f}ms")
        self._notify_state()

    def reset(self):
        """Stop, clear detection state and park the vehicle at the first point"""
        self.stop()

        self.state.current_segment_index = 0
        self.state.elapsed_offset_ms = 0.0
        self.state.elapsed_ms = 0.0
        self.state.completed = False
        self.detector.reset()
        self.notifications.clear()

        self._position = self.route_path.first.coordinate
        self._heading = 0.0
        if self.surface is not None and self._initialized:
            place_vehicle(self.surface, self._position, self._heading)

        print("[RouteSimulation] 🔄 Reset")
        self._notify_state()

    def set_speed_multiplier(self, multiplier: float):
        """
        Change the simulated-time rate

        Time already simulated is kept; only later wall-clock time is
        scaled by the new multiplier.

        Raises:
            InvalidSpeedMultiplierError: If multiplier is not a finite number > 0
        """
        if (not isinstance(multiplier, (int, float)) or isinstance(multiplier, bool)
                or not math.isfinite(multiplier) or multiplier <= 0):
            raise InvalidSpeedMultiplierError(multiplier)

        if self.state.is_running:
            now = self.clock()
            self.state.elapsed_offset_ms = self._elapsed_at(now)
            self.state.start_time_ms = now

        self.state.speed_multiplier = float(multiplier)
        print(f"[RouteSimulation] Speed set to {multiplier}x")
        self._notify_state()

    # ============================================
    # Tick
    # ============================================

    def _elapsed_at(self, now_ms: float) -> float:
        return self.state.elapsed_offset_ms + (now_ms - self.state.start_time_ms) * self.state.speed_multiplier

    def _tick(self):
        self._frame_handle = None

        # Stale frame after stop()
        if not self.state.is_running:
            return

        self.ticks += 1
        try:
            finished = self._advance()
        except Exception as e:
            self.tick_errors += 1
            print(f"[RouteSimulation] Tick error: {e}")
            finished = self.state.elapsed_ms >= self.route_path.last.timestamp_ms

        # A listener may have stopped the run
        if not self.state.is_running:
            return

        if finished:
            self._complete()
            return

        self._frame_handle = self.scheduler.request_frame(self._tick)

    def _advance(self) -> bool:
        """Move the vehicle and run detection; True once the route end is reached"""
        elapsed = self._elapsed_at(self.clock())
        self.state.elapsed_ms = elapsed

        segment = self.route_path.point_at(elapsed)
        self.state.current_segment_index = segment.index

        start, end = segment.start, segment.end
        lat, lon = interpolate(start.lat, start.lon, end.lat, end.lon, segment.progress)
        self._position = GPSCoordinate(lat=lat, lon=lon)
        if (start.lat, start.lon) != (end.lat, end.lon):
            self._heading = initial_bearing(start.lat, start.lon, end.lat, end.lon)

        if self.surface is not None:
            place_vehicle(self.surface, self._position, self._heading)

        for event in self.detector.evaluate(lat, lon, elapsed):
            self._dispatch(event)

        return elapsed >= self.route_path.last.timestamp_ms

    def _complete(self):
        self.stop()
        self.state.completed = True
        print(f"[RouteSimulation] 🏁 Route complete "
              f"({len(self.state.history)} geofence events)")

        status = self.get_status()
        for callback in list(self._complete_listeners):
            self._safe_call(callback, status)

    # ============================================
    # Events
    # ============================================

    def on_geofence_event(self, callback: GeofenceEventCallback) -> GeofenceEventCallback:
        """Register an enter/exit listener; listener errors never stop the loop"""
        self._event_listeners.append(callback)
        return callback

    def on_complete(self, callback: StatusCallback) -> StatusCallback:
        self._complete_listeners.append(callback)
        return callback

    def on_state_change(self, callback: StatusCallback) -> StatusCallback:
        self._state_listeners.append(callback)
        return callback

    def _dispatch(self, event: GeofenceEvent):
        if event.action == GeofenceAction.ENTER:
            print(f"[RouteSimulation] 🚨 Entered {event.geofence_name or event.geofence_id} "
                  f"({event.risk_level.value.upper()})")
        else:
            print(f"[RouteSimulation] ✅ Exited {event.geofence_name or event.geofence_id}")

        self.last_notification = self.notifications.notify(event)
        for callback in list(self._event_listeners):
            self._safe_call(callback, event)

    def _notify_state(self):
        if not self._state_listeners:
            return
        status = self.get_status()
        for callback in list(self._state_listeners):
            self._safe_call(callback, status)

    def _safe_call(self, callback: Callable, payload: Any):
        try:
            callback(payload)
        except Exception as e:
            self.listener_errors += 1
            print(f"[RouteSimulation] Listener error: {e}")

    # ============================================
    # Geofence management
    # ============================================

    def add_geofence(self, geofence: Geofence):
        self.detector.add(geofence)
        if self.surface is not None and self._initialized and geofence.is_active:
            draw_geofence(self.surface, geofence)

    def add_geofences(self, geofences: Iterable[Geofence]):
        for geofence in geofences:
            self.add_geofence(geofence)

    def get_geofence(self, geofence_id: str) -> Optional[Geofence]:
        return self.detector.get(geofence_id)

    def list_geofences(self) -> List[Geofence]:
        return list(self.detector.geofences.values())

    def remove_geofence(self, geofence_id: str) -> bool:
        """Unregister a geofence; an open membership is closed with an exit event"""
        if self.detector.get(geofence_id) is None:
            return False

        event = self.detector.remove(geofence_id)
        if self.surface is not None:
            remove_geofence(self.surface, geofence_id)
        if event is not None:
            self._dispatch(event)
        return True

    def clear_geofences(self) -> int:
        """Remove every geofence; returns how many were removed"""
        geofence_ids = list(self.detector.geofences)
        for geofence_id in geofence_ids:
            self.remove_geofence(geofence_id)
        return len(geofence_ids)

    def set_geofence_active(self, geofence_id: str, active: bool) -> Geofence:
        """
        Toggle a geofence

        Raises:
            KeyError: Unknown geofence id
        """
        event = self.detector.set_active(geofence_id, active)
        geofence = self.detector.geofences[geofence_id]

        if self.surface is not None and self._initialized:
            if active:
                draw_geofence(self.surface, geofence)
            else:
                remove_geofence(self.surface, geofence_id)

        if event is not None:
            self._dispatch(event)
        return geofence

    # ============================================
    # Queries
    # ============================================

    @property
    def status(self) -> SimulationStatus:
        return self.state.status

    @property
    def is_running(self) -> bool:
        return self.state.is_running

    @property
    def current_position(self) -> GPSCoordinate:
        return self._position

    @property
    def heading(self) -> float:
        return self._heading

    @property
    def history(self) -> List[GeofenceEvent]:
        return self.state.history

    @property
    def active_geofence_ids(self) -> Set[str]:
        return self.state.active_geofence_ids

    def get_geofence_history(self) -> List[GeofenceEvent]:
        return list(self.state.history)

    def recent_events(self, limit: int = 3) -> List[GeofenceEvent]:
        """Most recent events first"""
        if limit <= 0:
            return []
        return list(reversed(self.state.history[-limit:]))

    def get_status(self) -> Dict[str, Any]:
        """Get simulation status"""
        duration = self.route_path.duration_ms
        progress = min(self.state.elapsed_ms / duration, 1.0) if duration > 0 else 1.0

        return {
            "status": self.state.status.value,
            "running": self.state.is_running,
            "completed": self.state.completed,
            "startTime": self.state.start_time_ms,
            "elapsedMs": self.state.elapsed_ms,
            "durationMs": duration,
            "progress": progress,
            "speedMultiplier": self.state.speed_multiplier,
            "currentSegmentIndex": self.state.current_segment_index,
            "totalPoints": len(self.route_path),
            "position": {"lat": self._position.lat, "lon": self._position.lon},
            "heading": self._heading,
            "activeGeofenceIds": sorted(self.state.active_geofence_ids),
            "geofenceCount": len(self.detector.geofences),
            "eventCount": len(self.state.history),
            "ticks": self.ticks,
            "tickErrors": self.tick_errors,
        }
