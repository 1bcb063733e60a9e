"""
Hotspot Routes - Procedural risk zone endpoints

Endpoints:
- GET /api/hotspots - List generated zones
- GET /api/hotspots/{zone_id} - Zone info popup payload
- POST /api/hotspots/route - Generate zones along the simulated route
- POST /api/hotspots/view - Generate zones within map bounds
- DELETE /api/hotspots - Remove all generated zones
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional
import time

from riskroute.config import get_config
from riskroute.hotspots import HotspotGenerator
from riskroute.models import Geofence, MapBounds
from riskroute.trip import TripPlanner
from riskroute.websocket import get_emitter
from .dependencies import get_planner

router = APIRouter(prefix="/api/hotspots", tags=["hotspots"])


# ============================================
# Request Models
# ============================================

class RouteHotspotRequest(BaseModel):
    """Request body for generating zones along the route"""
    count: Optional[int] = Field(default=None, ge=1, le=20)


class ViewHotspotRequest(BaseModel):
    """Request body for generating zones in a viewport"""
    count: Optional[int] = Field(default=None, ge=1, le=20)
    bounds: Optional[MapBounds] = None


# ============================================
# Helpers
# ============================================

def _get_generator(planner: TripPlanner) -> HotspotGenerator:
    if planner.hotspots is None or planner.route_path is None:
        raise HTTPException(status_code=404, detail="No simulation loaded")
    return planner.hotspots


async def _announce(zones: List[Geofence]):
    emitter = get_emitter()
    if emitter is not None:
        await emitter.emit_hotspots_generated(zones)


def _count(requested: Optional[int]) -> int:
    if requested is not None:
        return requested
    return get_config().get_hotspot_config().get("count", 5)


def _zones_response(zones: List[Geofence]) -> dict:
    return {
        "zones": [z.to_dict() for z in zones],
        "count": len(zones),
        "timestamp": time.time()
    }


# ============================================
# Endpoints
# ============================================

@router.get("")
async def list_hotspots(planner: TripPlanner = Depends(get_planner)):
    generator = _get_generator(planner)
    response = _zones_response(generator.get_zones())
    response["stats"] = generator.get_stats()
    return response


@router.get("/{zone_id}")
async def get_hotspot_info(zone_id: str, planner: TripPlanner = Depends(get_planner)):
    info = _get_generator(planner).zone_info(zone_id)
    if info is None:
        raise HTTPException(status_code=404, detail=f"Zone {zone_id} not found")
    return info


@router.post("/route")
async def generate_route_hotspots(request: RouteHotspotRequest, planner: TripPlanner = Depends(get_planner)):
    """
    Scatter zones near random route points

    The first and last 10% of the route stay clear.
    """
    generator = _get_generator(planner)
    if not planner.route_path.is_animatable:
        raise HTTPException(status_code=400, detail="Route needs at least two points")

    zones = generator.generate_along_route(planner.route_path, count=_count(request.count))
    await _announce(zones)
    return _zones_response(zones)


@router.post("/view")
async def generate_view_hotspots(request: ViewHotspotRequest, planner: TripPlanner = Depends(get_planner)):
    """Scatter zones uniformly within the given (or current) map bounds"""
    generator = _get_generator(planner)
    zones = generator.generate_in_view(count=_count(request.count), bounds=request.bounds)
    if not zones:
        raise HTTPException(status_code=400, detail="No map bounds available")

    await _announce(zones)
    return _zones_response(zones)


@router.delete("")
async def clear_hotspots(planner: TripPlanner = Depends(get_planner)):
    generator = _get_generator(planner)
    removed = len(generator.get_zones())
    generator.clear_all_zones()
    return {"status": "cleared", "removed": removed, "timestamp": time.time()}
