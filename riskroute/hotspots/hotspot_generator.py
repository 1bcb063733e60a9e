"""
Hotspot Generator

Procedural risk zones, either scattered along a route or uniformly within
the visible map area. The generator only builds and draws zones; detection
is left to whichever RouteSimulation they are registered with.
"""

import math
import random
import uuid
from typing import Any, Dict, List, Optional, Sequence, Union

from riskroute.geometry import is_point_inside_geofence
from riskroute.models import (
    CircleShape,
    Geofence,
    GPSCoordinate,
    MapBounds,
    RiskLevel,
    RISK_ZONE_PROPERTIES,
)
from riskroute.rendering import MapSurface, draw_geofence, remove_geofence, zone_info
from riskroute.route import RoutePath

# Base points avoid the first and last 10% of the route
EDGE_MARGIN_FRACTION = 0.1

# Max random offset from the base point, in degrees (~500m)
OFFSET_DEGREES = 0.005

# Cumulative risk distribution: low 40%, medium 30%, high 20%, critical 10%
RISK_WEIGHTS = [
    (0.4, RiskLevel.LOW),
    (0.7, RiskLevel.MEDIUM),
    (0.9, RiskLevel.HIGH),
    (1.0, RiskLevel.CRITICAL),
]

ZONE_NAME_PREFIXES = {
    RiskLevel.LOW: ['Safe Zone', 'Low Risk Area', 'Normal Zone'],
    RiskLevel.MEDIUM: ['Caution Zone', 'Medium Risk Area', 'Watch Zone'],
    RiskLevel.HIGH: ['High Risk Zone', 'Danger Area', 'Alert Zone'],
    RiskLevel.CRITICAL: ['Critical Zone', 'Extreme Risk', 'Emergency Area'],
}

ZONE_DESCRIPTIONS = {
    RiskLevel.LOW: 'Normal traffic conditions. Proceed with caution.',
    RiskLevel.MEDIUM: 'Moderate risk area. Increased attention required.',
    RiskLevel.HIGH: 'High risk zone. Exercise extreme caution.',
    RiskLevel.CRITICAL: 'Critical risk area. Immediate action may be required.',
}

# Fixed checkpoints: (fraction of route, name, risk level, description)
MILESTONES = [
    (0.0, 'Start Point', RiskLevel.LOW, 'Route starting point'),
    (0.25, 'Quarter Point', RiskLevel.MEDIUM, '25% of route completed'),
    (0.5, 'Mid Point', RiskLevel.HIGH, 'High risk area - construction zone'),
    (0.75, 'Three Quarter Point', RiskLevel.MEDIUM, '75% of route completed'),
    (1.0, 'End Point', RiskLevel.LOW, 'Route destination'),
]
MILESTONE_RADIUS_METERS = 100

PathLike = Union[RoutePath, Sequence[GPSCoordinate]]


def zone_properties(risk_level: RiskLevel) -> Dict[str, Any]:
    """Radius/color/opacity for a risk level (low when unknown)"""
    return dict(RISK_ZONE_PROPERTIES.get(risk_level, RISK_ZONE_PROPERTIES[RiskLevel.LOW]))


def _path_coordinates(path: PathLike) -> List[GPSCoordinate]:
    if isinstance(path, RoutePath):
        return path.coordinates()
    return list(path)


def milestone_geofences(path: PathLike, radius_meters: float = MILESTONE_RADIUS_METERS) -> List[Geofence]:
    """
    Checkpoint fences at the start, 25%, 50%, 75% and end of a route

    Args:
        path: Route or coordinate list (non-empty)
        radius_meters: Fence radius

    Returns:
        Five circular geofences with ids geofence-0 .. geofence-4
    """
    coords = _path_coordinates(path)
    if not coords:
        return []

    n = len(coords)
    geofences = []
    for index, (fraction, name, risk_level, description) in enumerate(MILESTONES):
        point = coords[-1] if fraction >= 1.0 else coords[math.floor(n * fraction)]
        props = RISK_ZONE_PROPERTIES[risk_level]
        geofences.append(Geofence(
            id=f"geofence-{index}",
            name=name,
            shape=CircleShape(center=point, radius_meters=radius_meters),
            risk_level=risk_level,
            description=description,
            color=props["color"],
            stroke_color=props["strokeColor"],
            opacity=0.35
        ))
    return geofences


class HotspotGenerator:
    """
    Random risk-zone factory

    Usage:
        generator = HotspotGenerator(simulation=simulation)
        zones = generator.generate_along_route(path, count=5)
    """

    def __init__(
        self,
        surface: Optional[MapSurface] = None,
        rng: Optional[random.Random] = None,
        simulation: Optional[Any] = None,
        edge_margin: float = EDGE_MARGIN_FRACTION,
        offset_degrees: float = OFFSET_DEGREES
    ):
        """
        Args:
            surface: Map to draw zones on when no simulation is attached
            rng: Random source (seed one for reproducible zones)
            simulation: RouteSimulation to register generated zones with
        """
        self.surface = surface
        self.rng = rng or random.Random()
        self.simulation = simulation
        self.edge_margin = edge_margin
        self.offset_degrees = offset_degrees

        self.zones: List[Geofence] = []

        # Statistics
        self.total_generated = 0

    # ============================================
    # Generation
    # ============================================

    def generate_along_route(self, path: PathLike, count: int = 5) -> List[Geofence]:
        """
        Replace current zones with `count` zones near random route points

        Returns:
            Generated zones (empty if the route has fewer than two points)
        """
        self.clear_all_zones()

        coords = _path_coordinates(path)
        if len(coords) < 2:
            print("[HotspotGenerator] ⚠️ No valid route provided for hotspot generation")
            return []

        n = len(coords)
        start_index = math.floor(n * self.edge_margin)
        end_index = math.floor(n * (1 - self.edge_margin))

        zones = []
        for i in range(count):
            random_index = math.floor(self.rng.random() * (end_index - start_index)) + start_index
            base = coords[random_index]

            offset_lat = (self.rng.random() - 0.5) * self.offset_degrees
            offset_lon = (self.rng.random() - 0.5) * self.offset_degrees
            position = GPSCoordinate(
                lat=max(-90.0, min(90.0, base.lat + offset_lat)),
                lon=max(-180.0, min(180.0, base.lon + offset_lon))
            )

            zones.append(self._create_zone(f"hotspot-{i}", i, position))

        self._register(zones)
        print(f"[HotspotGenerator] Generated {len(zones)} hotspots along the route")
        return zones

    def generate_in_view(self, count: int = 5, bounds: Optional[MapBounds] = None) -> List[Geofence]:
        """
        Replace current zones with `count` zones uniform within a viewport

        Uses the surface's current view when `bounds` is omitted.

        Returns:
            Generated zones (empty if no view is available)
        """
        if bounds is None and self.surface is not None:
            bounds = self.surface.current_view()
        if bounds is None:
            print("[HotspotGenerator] ⚠️ No map bounds available")
            return []

        self.clear_all_zones()

        zones = []
        for i in range(count):
            position = GPSCoordinate(
                lat=bounds.south + self.rng.random() * (bounds.north - bounds.south),
                lon=bounds.west + self.rng.random() * (bounds.east - bounds.west)
            )
            zones.append(self._create_zone(f"view-hotspot-{i}", i, position))

        self._register(zones)
        print(f"[HotspotGenerator] Generated {len(zones)} random hotspots in view")
        return zones

    def random_risk_level(self) -> RiskLevel:
        """Draw a risk level from the weighted distribution"""
        value = self.rng.random()
        for threshold, risk_level in RISK_WEIGHTS:
            if value < threshold:
                return risk_level
        return RiskLevel.CRITICAL

    def zone_name(self, risk_level: RiskLevel, index: int) -> str:
        prefixes = ZONE_NAME_PREFIXES.get(risk_level, ZONE_NAME_PREFIXES[RiskLevel.LOW])
        return f"{self.rng.choice(prefixes)} {index + 1}"

    def zone_description(self, risk_level: RiskLevel) -> str:
        return ZONE_DESCRIPTIONS.get(risk_level, ZONE_DESCRIPTIONS[RiskLevel.LOW])

    def _create_zone(self, id_prefix: str, index: int, position: GPSCoordinate) -> Geofence:
        risk_level = self.random_risk_level()
        props = zone_properties(risk_level)

        return Geofence(
            id=f"{id_prefix}-{uuid.uuid4().hex[:8]}",
            name=self.zone_name(risk_level, index),
            shape=CircleShape(center=position, radius_meters=props["radius"]),
            risk_level=risk_level,
            description=self.zone_description(risk_level),
            color=props["color"],
            stroke_color=props["strokeColor"],
            opacity=props["opacity"]
        )

    def _register(self, zones: List[Geofence]):
        for zone in zones:
            if self.simulation is not None:
                self.simulation.add_geofence(zone)
            elif self.surface is not None:
                draw_geofence(self.surface, zone)
            self.zones.append(zone)
        self.total_generated += len(zones)

    # ============================================
    # Queries
    # ============================================

    def get_zones(self) -> List[Geofence]:
        return list(self.zones)

    def get_zone(self, zone_id: str) -> Optional[Geofence]:
        for zone in self.zones:
            if zone.id == zone_id:
                return zone
        return None

    def zones_at_position(self, lat: float, lon: float) -> List[Geofence]:
        """Active zones containing a position"""
        return [z for z in self.zones if z.is_active and is_point_inside_geofence(lat, lon, z)]

    def zone_info(self, zone_id: str) -> Optional[Dict[str, Any]]:
        zone = self.get_zone(zone_id)
        return zone_info(zone) if zone else None

    def clear_all_zones(self):
        """Remove every generated zone from the map and the simulation"""
        for zone in self.zones:
            if self.simulation is not None:
                self.simulation.remove_geofence(zone.id)
            elif self.surface is not None:
                remove_geofence(self.surface, zone.id)

        removed = len(self.zones)
        self.zones = []
        if removed:
            print(f"[HotspotGenerator] Cleared {removed} hotspots")

    def get_stats(self) -> Dict[str, Any]:
        counts = {level.value: 0 for level in RiskLevel}
        for zone in self.zones:
            counts[zone.risk_level.value] += 1
        return {
            'zones': len(self.zones),
            'totalGenerated': self.total_generated,
            'byRiskLevel': counts,
        }
