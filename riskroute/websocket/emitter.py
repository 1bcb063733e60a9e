"""
WebSocket Event Emitter

Sends geofence transitions and simulation state to connected clients.

The simulation calls its listeners synchronously from inside a tick;
`bind_simulation` bridges those calls onto the running event loop so a
tick never awaits a socket write.
"""

import asyncio
import time
from typing import Dict, Any, List, Optional, Set

from riskroute.models import Geofence, GeofenceEvent
from riskroute.simulation import Notification, RouteSimulation
from .events import (
    ServerEvent,
    GeofenceEventData,
    HotspotsGeneratedData,
    NotificationData,
    PositionData,
    SimulationStateData,
)


class WebSocketEmitter:
    """
    Centralized WebSocket event emitter

    Usage:
        emitter = WebSocketEmitter(sio)
        emitter.bind_simulation(simulation)
    """

    def __init__(self, sio):
        """
        Args:
            sio: Socket.IO AsyncServer instance
        """
        self.sio = sio

        # Forwarded emits still in flight
        self._tasks: Set[asyncio.Task] = set()

        # Statistics
        self._emit_count = 0
        self._error_count = 0
        self._dropped_count = 0
        self._last_emit_time = 0

    # ============================================
    # Connection Events
    # ============================================

    async def emit_connection_success(self, sid: str):
        """Emit connection success to specific client"""
        await self._emit(
            ServerEvent.CONNECTION_SUCCESS.value,
            {
                "message": "Connected to RiskRoute",
                "timestamp": time.time(),
                "serverVersion": "1.0.0"
            },
            room=sid
        )

    # ============================================
    # Geofence Events
    # ============================================

    async def emit_geofence_event(self, event: GeofenceEvent, room: str = None):
        """Emit geofence:enter or geofence:exit"""
        data = GeofenceEventData(
            geofenceId=event.geofence_id,
            geofenceName=event.geofence_name,
            action=event.action.value,
            riskLevel=event.risk_level.value,
            position=PositionData(lat=event.position.lat, lon=event.position.lon),
            elapsedMs=event.elapsed_ms,
            timestamp=event.timestamp_ms
        )
        name = ServerEvent.GEOFENCE_ENTER if event.action.value == "enter" else ServerEvent.GEOFENCE_EXIT
        await self._emit(name.value, data.model_dump(), room)

    async def emit_notification(self, notification: Notification):
        data = NotificationData(
            id=notification.id,
            geofenceId=notification.geofence_id,
            title=notification.title,
            subtitle=notification.subtitle,
            icon=notification.icon,
            color=notification.color,
            expiresAt=notification.expires_at_ms
        )
        await self._emit(ServerEvent.NOTIFICATION.value, data.model_dump())

    async def emit_hotspots_generated(self, zones: List[Geofence]):
        data = HotspotsGeneratedData(
            count=len(zones),
            zones=[z.to_dict() for z in zones],
            timestamp=time.time()
        )
        await self._emit(ServerEvent.HOTSPOTS_GENERATED.value, data.model_dump())

    # ============================================
    # Simulation Events
    # ============================================

    async def emit_simulation_state(self, status: Dict[str, Any], room: str = None):
        """Emit simulation:state from a RouteSimulation.get_status() dict"""
        position = status.get("position")
        data = SimulationStateData(
            status=status.get("status", "stopped"),
            running=status.get("running", False),
            completed=status.get("completed", False),
            elapsedMs=status.get("elapsedMs", 0),
            progress=status.get("progress", 0),
            speedMultiplier=status.get("speedMultiplier", 1.0),
            currentSegmentIndex=status.get("currentSegmentIndex", 0),
            position=PositionData(**position) if position else None,
            heading=status.get("heading", 0),
            activeGeofenceIds=status.get("activeGeofenceIds", []),
            eventCount=status.get("eventCount", 0)
        )
        await self._emit(ServerEvent.SIMULATION_STATE.value, data.model_dump(), room)

    async def emit_simulation_complete(self, status: Dict[str, Any]):
        await self._emit(ServerEvent.SIMULATION_COMPLETE.value, {
            "elapsedMs": status.get("elapsedMs", 0),
            "eventCount": status.get("eventCount", 0),
            "timestamp": time.time()
        })

    # ============================================
    # Simulation bridge
    # ============================================

    def bind_simulation(self, simulation: RouteSimulation):
        """Forward a simulation's events to all clients"""
        def on_event(event: GeofenceEvent):
            self._schedule(self.emit_geofence_event(event))
            # None when the notification was debounced
            if simulation.last_notification is not None:
                self._schedule(self.emit_notification(simulation.last_notification))

        simulation.on_geofence_event(on_event)
        simulation.on_state_change(lambda status: self._schedule(self.emit_simulation_state(status)))
        simulation.on_complete(lambda status: self._schedule(self.emit_simulation_complete(status)))

    def _schedule(self, coro):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Called outside the event loop (e.g. a sync test); nothing to send on
            coro.close()
            self._dropped_count += 1
            return None
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _emit(self, event: str, data: Any, room: str = None):
        """
        Internal emit with error handling and statistics

        Args:
            event: Event name
            data: Event data
            room: Optional room to emit to
        """
        try:
            if room:
                await self.sio.emit(event, data, room=room)
            else:
                await self.sio.emit(event, data)

            self._emit_count += 1
            self._last_emit_time = time.time()

        except Exception as e:
            self._error_count += 1
            print(f"[WS ERROR] Failed to emit {event}: {e}")

    def get_stats(self) -> Dict[str, Any]:
        """Get emitter statistics"""
        return {
            "totalEmits": self._emit_count,
            "errorCount": self._error_count,
            "droppedCount": self._dropped_count,
            "pendingEmits": len(self._tasks),
            "lastEmitTime": self._last_emit_time,
        }


# Global emitter instance (initialized in main.py)
emitter: Optional[WebSocketEmitter] = None


def get_emitter() -> Optional[WebSocketEmitter]:
    """Get the global WebSocket emitter instance"""
    return emitter


def set_emitter(e: Optional[WebSocketEmitter]):
    """Set the global WebSocket emitter instance"""
    global emitter
    emitter = e
