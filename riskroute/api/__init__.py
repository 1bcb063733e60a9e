"""
API Routes Package

This module exports all FastAPI routers for the RiskRoute backend.
"""

from .simulation_routes import router as simulation_router
from .hotspot_routes import router as hotspot_router
from .weather_routes import router as weather_router
from .trip_routes import router as trip_router

__all__ = [
    "simulation_router",
    "hotspot_router",
    "weather_router",
    "trip_router",
]
