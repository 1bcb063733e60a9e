"""
Trip Planner

Owns one map session: the planned route, its markers, weather decorations
and the simulation built on top of it. Everything is created explicitly
and released by `teardown()`.
"""

import random
from typing import Any, Callable, Dict, List, Optional

from riskroute.hotspots import (
    EDGE_MARGIN_FRACTION,
    MILESTONE_RADIUS_METERS,
    OFFSET_DEGREES,
    HotspotGenerator,
    milestone_geofences,
)
from riskroute.models import GPSCoordinate, MapBounds, TripRoute, WeatherData
from riskroute.rendering import InMemoryMapSurface, MapSurface, draw_route_line
from riskroute.route import RoutePath
from riskroute.services import GoogleRouteProvider, WeatherService, get_custom_weather_icon
from riskroute.simulation import FrameScheduler, NotificationCenter, RouteSimulation, wall_clock_ms

START_MARKER_ID = "trip-start"
END_MARKER_ID = "trip-end"
TRIP_ROUTE_LINE_ID = "trip-route"

START_MARKER_ICON = {"label": "A", "background": "#4CAF50"}
END_MARKER_ICON = {"label": "B", "background": "#F44336"}

# Keeps weather markers from covering the A/B markers
WEATHER_MARKER_OFFSET = 0.001


class TripPlanner:
    """
    Plan a trip and simulate driving it

    Usage:
        planner = TripPlanner(surface, provider, weather)
        route = await planner.plan_trip("Pretoria", "Centurion")
        simulation = planner.build_simulation(hotspot_count=5)
        simulation.start()
        ...
        planner.teardown()
    """

    def __init__(
        self,
        surface: Optional[MapSurface] = None,
        route_provider: Optional[GoogleRouteProvider] = None,
        weather_service: Optional[WeatherService] = None,
        scheduler: Optional[FrameScheduler] = None,
        clock: Callable[[], float] = wall_clock_ms,
        rng: Optional[random.Random] = None,
        notification_settings: Optional[Dict[str, Any]] = None,
        hotspot_settings: Optional[Dict[str, Any]] = None
    ):
        self.surface = surface or InMemoryMapSurface()
        self.route_provider = route_provider
        self.weather_service = weather_service
        self.scheduler = scheduler
        self.clock = clock
        self.rng = rng
        self.notification_settings = notification_settings or {}
        self.hotspot_settings = hotspot_settings or {}

        self.current_route: Optional[TripRoute] = None
        self.route_path: Optional[RoutePath] = None
        self.simulation: Optional[RouteSimulation] = None
        self.hotspots: Optional[HotspotGenerator] = None

        self.markers: List[str] = []
        self.weather: Dict[str, WeatherData] = {}

        # Called with each new simulation (e.g. to bind the websocket emitter)
        self.on_simulation_built: Optional[Callable[[RouteSimulation], Any]] = None

    # ============================================
    # Route planning
    # ============================================

    async def calculate_route(self, start_address: str, end_address: str) -> TripRoute:
        """
        Geocode and route between two addresses

        Raises:
            GeocodingError: Either address could not be resolved
            RouteNotFoundError: No route between them
        """
        if self.route_provider is None:
            raise RuntimeError("TripPlanner has no route provider")

        route = await self.route_provider.calculate_route(start_address, end_address)
        self.current_route = route
        return route

    async def update_map_with_route(self, route: TripRoute):
        """Replace whatever is on the map with this route, its markers and weather"""
        self.clear_map_route()
        self.current_route = route

        self.surface.place_marker(
            START_MARKER_ID, route.start.coordinate,
            icon=START_MARKER_ICON, title=f"Start: {route.start.address}"
        )
        self.surface.place_marker(
            END_MARKER_ID, route.end.coordinate,
            icon=END_MARKER_ICON, title=f"End: {route.end.address}"
        )
        self.markers.extend([START_MARKER_ID, END_MARKER_ID])

        if route.path:
            draw_route_line(self.surface, route.path, shape_id=TRIP_ROUTE_LINE_ID)

        if self.weather_service is not None:
            await self._add_weather_markers(route)

        bounds = MapBounds.from_points([
            (route.start.lat, route.start.lon),
            (route.end.lat, route.end.lon),
        ])
        self.surface.fit_bounds(bounds, padding=0.1)

        print(f"[TripPlanner] Map updated with route ({len(route.path)} points)")

    async def plan_trip(self, start_address: str, end_address: str) -> TripRoute:
        route = await self.calculate_route(start_address, end_address)
        await self.update_map_with_route(route)
        return route

    async def _add_weather_markers(self, route: TripRoute):
        for label, location, offset in (
            ("start", route.start, WEATHER_MARKER_OFFSET),
            ("end", route.end, -WEATHER_MARKER_OFFSET),
        ):
            weather = await self.weather_service.get_weather(location.lat, location.lon)
            if weather is None:
                continue

            self.weather[label] = weather
            marker_id = f"weather-{label}"
            condition = weather.condition
            self.surface.place_marker(
                marker_id,
                GPSCoordinate(lat=location.lat + offset, lon=location.lon + offset),
                icon={"name": get_custom_weather_icon(condition.id) if condition else "unknown"},
                title=weather.summary()
            )
            self.markers.append(marker_id)

    def clear_map_route(self):
        """Remove the route line, A/B and weather markers, and any simulation"""
        self._teardown_simulation()

        for marker_id in self.markers:
            self.surface.remove_marker(marker_id)
        self.markers = []
        self.weather = {}
        self.surface.remove_shape(TRIP_ROUTE_LINE_ID)

        self.current_route = None
        self.route_path = None

    # ============================================
    # Simulation
    # ============================================

    def build_simulation(
        self,
        route_path: Optional[RoutePath] = None,
        with_milestones: bool = False,
        hotspot_count: int = 0
    ) -> RouteSimulation:
        """
        Replace the current simulation with one over `route_path`

        Defaults to the planned route. Optionally seeds milestone fences and
        random hotspots along it.
        """
        if route_path is None:
            if self.current_route is None:
                raise RuntimeError("No route planned")
            route_path = RoutePath.from_trip_route(self.current_route)

        self._teardown_simulation()

        notifications = NotificationCenter(
            auto_dismiss_ms=self.notification_settings.get("autoDismissMs", 5000),
            debounce_ms=self.notification_settings.get("debounceMs", 1000),
            max_visible=self.notification_settings.get("maxVisible", 5),
            clock=self.clock
        )
        self.route_path = route_path
        self.simulation = RouteSimulation(
            route_path,
            surface=self.surface,
            scheduler=self.scheduler,
            clock=self.clock,
            notification_center=notifications
        )
        if with_milestones:
            radius = self.hotspot_settings.get("milestoneRadiusMeters", MILESTONE_RADIUS_METERS)
            self.simulation.add_geofences(milestone_geofences(route_path, radius_meters=radius))

        self.simulation.initialize()

        self.hotspots = HotspotGenerator(
            surface=self.surface,
            rng=self.rng,
            simulation=self.simulation,
            edge_margin=self.hotspot_settings.get("edgeMarginFraction", EDGE_MARGIN_FRACTION),
            offset_degrees=self.hotspot_settings.get("offsetDegrees", OFFSET_DEGREES)
        )
        if hotspot_count > 0:
            self.hotspots.generate_along_route(route_path, count=hotspot_count)

        if self.on_simulation_built is not None:
            self.on_simulation_built(self.simulation)

        return self.simulation

    def _teardown_simulation(self):
        if self.hotspots is not None:
            self.hotspots.clear_all_zones()
            self.hotspots = None
        if self.simulation is not None:
            self.simulation.teardown()
            self.simulation = None

    def teardown(self):
        """Release everything this planner drew or started"""
        self.clear_map_route()
        print("[TripPlanner] Torn down")

    def get_status(self) -> Dict[str, Any]:
        route = self.current_route
        return {
            "hasRoute": route is not None,
            "route": {
                "start": route.start.address,
                "end": route.end.address,
                "distanceMeters": route.distance_meters,
                "durationMinutes": route.duration_minutes,
                "points": len(route.path),
            } if route else None,
            "markers": list(self.markers),
            "simulation": self.simulation.get_status() if self.simulation else None,
        }
