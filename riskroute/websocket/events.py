"""
WebSocket Event Type Definitions

Event names and payload models for the realtime channel.

Events are categorized as:
- Server → Client: Geofence transitions and simulation state
- Client → Server: Simulation commands
"""

from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal


# ============================================
# Event Name Constants
# ============================================

class ServerEvent(str, Enum):
    """Events emitted from server to client"""

    # Connection
    CONNECTION_SUCCESS = "connection:success"

    # Geofence transitions
    GEOFENCE_ENTER = "geofence:enter"
    GEOFENCE_EXIT = "geofence:exit"

    # Notifications
    NOTIFICATION = "notification"

    # Simulation
    SIMULATION_STATE = "simulation:state"
    SIMULATION_COMPLETE = "simulation:complete"
    SIMULATION_CONTROL_RESPONSE = "simulation:control:response"

    # Hotspots
    HOTSPOTS_GENERATED = "hotspots:generated"


class ClientEvent(str, Enum):
    """Events received from client"""

    # Connection
    CONNECT = "connect"
    DISCONNECT = "disconnect"

    # Simulation control
    SIMULATION_CONTROL = "simulation:control"
    SIMULATION_SPEED = "simulation:speed"


# ============================================
# Server → Client Event Data Models
# ============================================

class PositionData(BaseModel):
    lat: float
    lon: float


class GeofenceEventData(BaseModel):
    """Data for geofence:enter / geofence:exit"""
    geofenceId: str
    geofenceName: str
    action: Literal["enter", "exit"]
    riskLevel: Literal["low", "medium", "high", "critical"]
    position: PositionData
    elapsedMs: float
    timestamp: float


class NotificationData(BaseModel):
    """Data for notification event"""
    id: str
    geofenceId: str
    title: str
    subtitle: str
    icon: str
    color: str
    expiresAt: float


class SimulationStateData(BaseModel):
    """Data for simulation:state event"""
    status: Literal["stopped", "running"]
    running: bool
    completed: bool = False
    elapsedMs: float = 0
    progress: float = 0
    speedMultiplier: float = 1.0
    currentSegmentIndex: int = 0
    position: Optional[PositionData] = None
    heading: float = 0
    activeGeofenceIds: List[str] = Field(default_factory=list)
    eventCount: int = 0


class HotspotsGeneratedData(BaseModel):
    """Data for hotspots:generated event"""
    count: int
    zones: List[Dict[str, Any]]
    timestamp: float


# ============================================
# Client → Server Event Data Models
# ============================================

class SimulationControlRequest(BaseModel):
    """Request for simulation:control event"""
    action: Literal["START", "STOP", "RESET"]
    timestamp: Optional[float] = None


class SpeedChangeRequest(BaseModel):
    """Request for simulation:speed event"""
    multiplier: float = Field(..., gt=0)
