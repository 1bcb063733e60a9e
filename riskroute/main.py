"""
RiskRoute Travel-Risk Backend
Main FastAPI Application Entry Point

Initializes FastAPI, Socket.IO, the external services and the trip planner
session that owns the route simulation.
"""

import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import socketio
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Create Socket.IO server
sio = socketio.AsyncServer(
    async_mode='asgi',
    cors_allowed_origins='*',
    logger=False,
    engineio_logger=False,
    ping_interval=25,
    ping_timeout=60
)


def _resolve_track_source(source: str) -> str:
    if source.startswith(("http://", "https://")):
        return source
    path = Path(source)
    return str(path if path.is_absolute() else PROJECT_ROOT / path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events - startup and shutdown"""

    # Startup
    print("=" * 60)
    print("[STARTUP] RiskRoute Travel-Risk Backend")
    print("=" * 60)

    # Initialize configuration
    from riskroute.config import get_config
    cfg = get_config()
    sim_config = cfg.get_simulation_config()
    services_config = cfg.get_services_config()
    print("[OK] Configuration loaded")

    # External services
    from riskroute.services import GoogleRouteProvider, init_weather_service
    timeout = services_config.get("timeoutSeconds", 10)

    weather_service = await init_weather_service(
        cache_ttl=services_config.get("weatherCacheTtl", 300),
        timeout=timeout,
        base_url=services_config.get("weatherUrl", "https://api.openweathermap.org/data/2.5/weather")
    )
    route_provider = GoogleRouteProvider(
        timeout=timeout,
        geocode_url=services_config.get("geocodeUrl", "https://maps.googleapis.com/maps/api/geocode/json"),
        directions_url=services_config.get("directionsUrl", "https://maps.googleapis.com/maps/api/directions/json")
    )
    if not route_provider.is_configured:
        print("[INFO] GOOGLE_MAPS_API_KEY not set. Trip planning disabled.")
    if not weather_service.is_configured:
        print("[INFO] OPENWEATHERMAP_API_KEY not set. Weather markers disabled.")
    print("[OK] External services initialized")

    # Default track (falls back to the built-in path on failure)
    from riskroute.route import load_track
    track_source = _resolve_track_source(cfg.get("simulation.track.url", ""))
    route_path = await load_track(
        track_source,
        timeout=cfg.get("simulation.track.timeoutSeconds", 10),
        interval_ms=sim_config["sampleIntervalMs"]
    )

    # Trip planner session
    from riskroute.rendering import InMemoryMapSurface
    from riskroute.simulation import AsyncioFrameScheduler
    from riskroute.trip import TripPlanner

    planner = TripPlanner(
        surface=InMemoryMapSurface(),
        route_provider=route_provider,
        weather_service=weather_service,
        scheduler=AsyncioFrameScheduler(frame_rate=sim_config["frameRate"]),
        notification_settings=cfg.get_notification_config(),
        hotspot_settings={
            **cfg.get_hotspot_config(),
            "milestoneRadiusMeters": sim_config["milestoneRadiusMeters"]
        }
    )

    # Initialize WebSocket emitter and handlers
    from riskroute.websocket import WebSocketEmitter, WebSocketHandlers, set_emitter, set_handlers

    ws_emitter = WebSocketEmitter(sio)
    ws_handlers = WebSocketHandlers(sio, ws_emitter, lambda: planner.simulation)
    set_emitter(ws_emitter)
    set_handlers(ws_handlers)
    planner.on_simulation_built = ws_emitter.bind_simulation
    print("[OK] WebSocket emitter and handlers initialized")

    simulation = planner.build_simulation(route_path, with_milestones=True)
    simulation.set_speed_multiplier(sim_config["speed"]["default"])
    app.state.planner = planner
    print(f"[OK] Simulation ready ({len(route_path)} points, "
          f"{len(simulation.list_geofences())} geofences)")

    print("=" * 60)
    print("[SERVER] Ready at http://localhost:8000")
    print("[DOCS] API docs at http://localhost:8000/docs")
    print("[SIM] Use POST /api/simulation/start to begin")
    print("=" * 60)

    yield

    # Shutdown
    print("[SHUTDOWN] Shutting down...")

    planner.teardown()
    app.state.planner = None

    from riskroute.services import close_weather_service
    await close_weather_service()
    await route_provider.close()

    set_emitter(None)
    set_handlers(None)

    print("[SHUTDOWN] Complete")


# Create FastAPI application
app = FastAPI(
    title="RiskRoute API",
    description="Travel-risk route simulation and geofence monitoring",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:4200",  # Angular dev server
        "http://127.0.0.1:4200",
        "*"  # Allow all for development
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================
# Include API Routers
# ============================================

from riskroute.api import (
    simulation_router,
    hotspot_router,
    weather_router,
    trip_router,
)

# Simulation routes: /api/simulation/start, /api/simulation/speed, etc.
app.include_router(simulation_router)

# Hotspot routes: /api/hotspots/route, /api/hotspots/view
app.include_router(hotspot_router)

# Weather proxy: /api/weather/current
app.include_router(weather_router)

# Trip routes: /api/trip/route
app.include_router(trip_router)


# ============================================
# Root Endpoints
# ============================================

@app.get("/", tags=["root"])
async def root():
    """Root endpoint - API information"""
    return {
        "name": "RiskRoute Travel-Risk Backend",
        "version": "1.0.0",
        "status": "operational",
        "documentation": "/docs",
        "websocket": "ws://localhost:8000",
        "endpoints": {
            "simulation": "/api/simulation/*",
            "hotspots": "/api/hotspots/*",
            "weather": "/api/weather/current",
            "trip": "/api/trip/*"
        }
    }


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint"""
    from riskroute.websocket import get_handlers

    handlers = get_handlers()
    ws_clients = handlers.get_client_count() if handlers else 0
    planner = getattr(app.state, "planner", None)
    simulation = planner.simulation if planner else None

    return {
        "status": "healthy",
        "timestamp": time.time(),
        "simulation": simulation.status.value if simulation else None,
        "websocket": {
            "connected_clients": ws_clients,
            "status": "ready"
        }
    }


@app.get("/ws/stats", tags=["websocket"])
async def websocket_stats():
    """Get WebSocket statistics"""
    from riskroute.websocket import get_emitter, get_handlers

    emitter = get_emitter()
    handlers = get_handlers()

    return {
        "emitter": emitter.get_stats() if emitter else None,
        "clients": {
            "count": handlers.get_client_count() if handlers else 0,
            "connected": list(handlers.get_connected_clients().keys()) if handlers else []
        },
        "timestamp": time.time()
    }


# ============================================
# Create Socket.IO ASGI app
# ============================================

sio_app = socketio.ASGIApp(sio, app)


# ============================================
# WebSocket Event Reference (handled by WebSocketHandlers)
# ============================================
#
# Server → Client Events:
#   - connection:success          : Connection established
#   - geofence:enter              : Vehicle entered a geofence
#   - geofence:exit               : Vehicle left a geofence
#   - notification                : Popup for an enter/exit event
#   - simulation:state            : Simulation started/stopped/reset/speed
#   - simulation:complete         : Vehicle reached the end of the route
#   - simulation:control:response : Reply to a client command
#   - hotspots:generated          : New random zones
#
# Client → Server Events:
#   - simulation:control          : START / STOP / RESET
#   - simulation:speed            : {multiplier}


# ============================================
# Entry Point
# ============================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "riskroute.main:sio_app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
