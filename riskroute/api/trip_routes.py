"""
Trip Routes - Plan a route and load it into the simulation

Endpoints:
- POST /api/trip/route - Geocode two addresses, route, build simulation
- GET /api/trip - Current trip and simulation summary
- DELETE /api/trip - Clear the route, markers and simulation
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import Field
import time

from riskroute.exceptions import GeocodingError, RouteNotFoundError
from riskroute.models import RouteRequest
from riskroute.trip import TripPlanner
from .dependencies import get_planner

router = APIRouter(prefix="/api/trip", tags=["trip"])


class TripRequest(RouteRequest):
    """Route request plus simulation options"""
    with_milestones: bool = True
    hotspot_count: int = Field(default=0, ge=0, le=20)


@router.post("/route")
async def plan_trip(request: TripRequest, planner: TripPlanner = Depends(get_planner)):
    """
    Plan a trip and replace the current simulation with it

    Geocoding failures are not recovered: the caller gets a one-line error.
    """
    if planner.route_provider is None or not planner.route_provider.is_configured:
        raise HTTPException(status_code=503, detail="Route provider not configured")

    try:
        route = await planner.plan_trip(request.start_address, request.end_address)
    except GeocodingError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except RouteNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    simulation = planner.build_simulation(
        with_milestones=request.with_milestones,
        hotspot_count=request.hotspot_count
    )

    return {
        "route": route.model_dump(),
        "durationMinutes": route.duration_minutes,
        "simulation": simulation.get_status(),
        "geofences": [g.to_dict() for g in simulation.list_geofences()],
        "timestamp": time.time()
    }


@router.get("")
async def get_trip(planner: TripPlanner = Depends(get_planner)):
    return planner.get_status()


@router.delete("")
async def clear_trip(planner: TripPlanner = Depends(get_planner)):
    planner.clear_map_route()
    return {"status": "cleared", "timestamp": time.time()}
