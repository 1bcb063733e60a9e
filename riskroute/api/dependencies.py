"""
Route Dependencies

The trip planner session lives on `app.state.planner` (set in the lifespan
handler); routes reach it through these dependencies.
"""

from fastapi import Depends, HTTPException, Request

from riskroute.simulation import RouteSimulation
from riskroute.trip import TripPlanner


def get_planner(request: Request) -> TripPlanner:
    planner = getattr(request.app.state, "planner", None)
    if planner is None:
        raise HTTPException(status_code=503, detail="Trip planner not initialized")
    return planner


def get_simulation(planner: TripPlanner = Depends(get_planner)) -> RouteSimulation:
    if planner.simulation is None:
        raise HTTPException(status_code=404, detail="No simulation loaded")
    return planner.simulation
