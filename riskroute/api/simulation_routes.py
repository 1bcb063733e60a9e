"""
Simulation Routes - Route simulation control endpoints

Endpoints:
- POST /api/simulation/start - Start simulation
- POST /api/simulation/stop - Stop simulation
- POST /api/simulation/reset - Reset to initial state
- POST /api/simulation/speed - Set speed multiplier
- GET /api/simulation/status - Get simulation status
- GET /api/simulation/history - Geofence enter/exit history
- GET /api/simulation/geofences - Registered geofences
- PATCH /api/simulation/geofences/{geofence_id} - Toggle a geofence
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from typing import Any, Dict, List
import time

from riskroute.config import get_config
from riskroute.exceptions import InvalidSpeedMultiplierError
from riskroute.simulation import RouteSimulation
from .dependencies import get_simulation

router = APIRouter(prefix="/api/simulation", tags=["simulation"])


# ============================================
# Request/Response Models
# ============================================

class SimulationResponse(BaseModel):
    """Standard simulation response"""
    status: str
    timestamp: float


class SpeedRequest(BaseModel):
    """Request body for setting simulation speed"""
    multiplier: float = Field(
        default=1.0,
        ge=0.1,
        le=5.0,
        description="Speed multiplier between 0.1x and 5.0x"
    )


class GeofenceToggleRequest(BaseModel):
    """Request body for enabling/disabling a geofence"""
    isActive: bool


class HistoryResponse(BaseModel):
    events: List[Dict[str, Any]]
    count: int
    total: int


# ============================================
# Endpoints
# ============================================

@router.post("/start", response_model=SimulationResponse)
async def start_simulation(sim: RouteSimulation = Depends(get_simulation)):
    """
    Start the route simulation

    A route with a single point completes immediately.
    """
    running = sim.start()

    return SimulationResponse(
        status="started" if running else "completed",
        timestamp=time.time()
    )


@router.post("/stop", response_model=SimulationResponse)
async def stop_simulation(sim: RouteSimulation = Depends(get_simulation)):
    """Stop the route simulation (idempotent)"""
    sim.stop()

    return SimulationResponse(
        status="stopped",
        timestamp=time.time()
    )


@router.post("/reset", response_model=SimulationResponse)
async def reset_simulation(sim: RouteSimulation = Depends(get_simulation)):
    """
    Reset the simulation

    Clears geofence history and parks the vehicle at the first route point.
    """
    sim.reset()

    return SimulationResponse(
        status="reset",
        timestamp=time.time()
    )


@router.post("/speed")
async def set_simulation_speed(request: SpeedRequest, sim: RouteSimulation = Depends(get_simulation)):
    """Set the simulated-time multiplier"""
    try:
        sim.set_speed_multiplier(request.multiplier)
    except InvalidSpeedMultiplierError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "status": "success",
        "speedMultiplier": sim.state.speed_multiplier,
        "timestamp": time.time()
    }


@router.get("/status")
async def get_simulation_status(sim: RouteSimulation = Depends(get_simulation)):
    """Simulation state, visible notifications and the recent event log"""
    recent = get_config().get_notification_config().get("recentEvents", 3)

    status = sim.get_status()
    status["notifications"] = [n.to_dict() for n in sim.notifications.visible()]
    status["recentEvents"] = [e.to_dict() for e in sim.recent_events(recent)]
    return status


@router.get("/history", response_model=HistoryResponse)
async def get_geofence_history(
    limit: int = Query(default=100, ge=1, le=1000),
    sim: RouteSimulation = Depends(get_simulation)
):
    """Most recent geofence events, oldest first"""
    history = sim.get_geofence_history()
    events = history[-limit:]

    return HistoryResponse(
        events=[e.to_dict() for e in events],
        count=len(events),
        total=len(history)
    )


@router.get("/geofences")
async def list_geofences(sim: RouteSimulation = Depends(get_simulation)):
    """Registered geofences with current membership"""
    geofences = []
    for geofence in sim.list_geofences():
        data = geofence.to_dict()
        data["inside"] = geofence.id in sim.active_geofence_ids
        geofences.append(data)

    return {"geofences": geofences, "count": len(geofences)}


@router.patch("/geofences/{geofence_id}")
async def toggle_geofence(
    geofence_id: str,
    request: GeofenceToggleRequest,
    sim: RouteSimulation = Depends(get_simulation)
):
    """Enable or disable a geofence"""
    if sim.get_geofence(geofence_id) is None:
        raise HTTPException(status_code=404, detail=f"Geofence {geofence_id} not found")

    geofence = sim.set_geofence_active(geofence_id, request.isActive)
    return geofence.to_dict()
