"""
WebSocket Client Event Handlers

Client→server simulation commands. All handlers are registered with the
Socket.IO server in main.py.
"""

import time
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from riskroute.exceptions import InvalidSpeedMultiplierError
from riskroute.simulation import RouteSimulation
from .events import (
    ClientEvent,
    ServerEvent,
    SimulationControlRequest,
    SpeedChangeRequest,
)
from .emitter import WebSocketEmitter

SimulationProvider = Callable[[], Optional[RouteSimulation]]


class WebSocketHandlers:
    """
    Centralized WebSocket event handlers

    Commands are applied to whatever simulation `simulation_provider`
    returns at the time of the call.
    """

    def __init__(self, sio, emitter: WebSocketEmitter, simulation_provider: SimulationProvider):
        """
        Args:
            sio: Socket.IO AsyncServer instance
            emitter: WebSocket emitter instance
            simulation_provider: Returns the current simulation (or None)
        """
        self.sio = sio
        self.emitter = emitter
        self.simulation_provider = simulation_provider

        # Track connected clients
        self._clients: Dict[str, Dict[str, Any]] = {}

        self._register_handlers()

    def _register_handlers(self):
        """Register all Socket.IO event handlers"""
        self.sio.on(ClientEvent.CONNECT.value, self.handle_connect)
        self.sio.on(ClientEvent.DISCONNECT.value, self.handle_disconnect)
        self.sio.on(ClientEvent.SIMULATION_CONTROL.value, self.handle_simulation_control)
        self.sio.on(ClientEvent.SIMULATION_SPEED.value, self.handle_speed_change)

    # ============================================
    # Connection Handlers
    # ============================================

    async def handle_connect(self, sid: str, environ: Dict, auth: Any = None):
        client_info = {
            "sid": sid,
            "connected_at": time.time(),
            "remote_addr": environ.get("REMOTE_ADDR", "unknown"),
        }
        self._clients[sid] = client_info

        print(f"[WS] Client connected: {sid} from {client_info['remote_addr']}")
        await self.emitter.emit_connection_success(sid)

        simulation = self.simulation_provider()
        if simulation is not None:
            await self.emitter.emit_simulation_state(simulation.get_status(), room=sid)

    async def handle_disconnect(self, sid: str, *args):
        if sid in self._clients:
            client = self._clients.pop(sid)
            duration = time.time() - client["connected_at"]
            print(f"[WS] Client disconnected: {sid} (duration: {duration:.1f}s)")

    # ============================================
    # Simulation Handlers
    # ============================================

    async def handle_simulation_control(self, sid: str, data: Dict):
        """
        Handle simulation control commands

        Args:
            sid: Session ID
            data: {action: 'START' | 'STOP' | 'RESET'}
        """
        response = {"timestamp": time.time()}

        try:
            request = SimulationControlRequest(action=str(data.get("action", "")).upper())
        except ValidationError:
            response.update(status="error", message=f"Unknown action: {data.get('action')}")
            await self._respond(sid, response)
            return

        response["action"] = request.action
        simulation = self.simulation_provider()
        if simulation is None:
            response.update(status="error", message="No simulation loaded")
            await self._respond(sid, response)
            return

        print(f"[WS] Simulation control: {request.action} from {sid}")

        if request.action == "START":
            simulation.start()
            response["message"] = "Simulation started"
        elif request.action == "STOP":
            simulation.stop()
            response["message"] = "Simulation stopped"
        else:
            simulation.reset()
            response["message"] = "Simulation reset"

        response["status"] = "success"
        await self._respond(sid, response)

    async def handle_speed_change(self, sid: str, data: Dict):
        """
        Handle speed multiplier changes

        Args:
            sid: Session ID
            data: {multiplier: float > 0}
        """
        simulation = self.simulation_provider()
        response = {"timestamp": time.time(), "action": "SPEED"}

        try:
            request = SpeedChangeRequest(**data)
            if simulation is None:
                raise RuntimeError("No simulation loaded")
            simulation.set_speed_multiplier(request.multiplier)
            response.update(status="success", message=f"Speed set to {request.multiplier}x")
        except (ValidationError, InvalidSpeedMultiplierError, RuntimeError) as e:
            response.update(status="error", message=str(e))

        await self._respond(sid, response)

    async def _respond(self, sid: str, response: Dict[str, Any]):
        await self.sio.emit(ServerEvent.SIMULATION_CONTROL_RESPONSE.value, response, room=sid)

    def get_connected_clients(self) -> Dict[str, Dict[str, Any]]:
        return dict(self._clients)

    def get_client_count(self) -> int:
        return len(self._clients)


# Global handlers instance (initialized in main.py)
handlers: Optional[WebSocketHandlers] = None


def get_handlers() -> Optional[WebSocketHandlers]:
    """Get the global WebSocket handlers instance"""
    return handlers


def set_handlers(h: Optional[WebSocketHandlers]):
    """Set the global WebSocket handlers instance"""
    global handlers
    handlers = h
