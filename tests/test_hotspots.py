"""
Hotspot Generator Tests

This module tests procedural zone generation:
- Zones along a route (edge margin, offset, risk distribution)
- Zones within a viewport
- Milestone checkpoint fences
- Registration with a simulation vs. drawing on a bare surface
"""

import random
import pytest
from unittest.mock import MagicMock

from riskroute.hotspots import (
    HotspotGenerator,
    MILESTONES,
    milestone_geofences,
    zone_properties,
)
from riskroute.models import CircleShape, GPSCoordinate, MapBounds, RiskLevel, RISK_ZONE_PROPERTIES
from riskroute.rendering import InMemoryMapSurface
from riskroute.route import RoutePath
from riskroute.simulation import ManualClock, ManualFrameScheduler, RouteSimulation


@pytest.fixture
def long_path():
    """20 points heading east along the equator"""
    return RoutePath.from_coordinates([(0, i * 0.01) for i in range(20)])


@pytest.fixture
def generator(surface):
    return HotspotGenerator(surface=surface, rng=random.Random(1234))


# ============================================
# Along the route
# ============================================

class TestGenerateAlongRoute:
    """Test route hotspot generation"""

    def test_generates_requested_count(self, generator, long_path):
        zones = generator.generate_along_route(long_path, count=5)

        assert len(zones) == 5
        assert generator.get_zones() == zones
        for i, zone in enumerate(zones):
            assert zone.id.startswith(f"hotspot-{i}-")
            assert zone.name.endswith(f" {i + 1}")

    def test_zones_stay_near_interior_route_points(self, generator, long_path):
        coords = long_path.coordinates()
        # First/last 10% of 20 points are excluded: indices 2..17
        interior = coords[2:18]

        for zone in generator.generate_along_route(long_path, count=20):
            center = zone.shape.center
            assert any(
                abs(center.lat - c.lat) <= 0.0025 and abs(center.lon - c.lon) <= 0.0025
                for c in interior
            )

    def test_zone_properties_follow_risk_level(self, generator, long_path):
        for zone in generator.generate_along_route(long_path, count=10):
            props = RISK_ZONE_PROPERTIES[zone.risk_level]
            assert isinstance(zone.shape, CircleShape)
            assert zone.shape.radius_meters == props["radius"]
            assert zone.color == props["color"]
            assert zone.opacity == props["opacity"]

    def test_same_seed_same_layout(self, long_path):
        first = HotspotGenerator(rng=random.Random(7)).generate_along_route(long_path, count=5)
        second = HotspotGenerator(rng=random.Random(7)).generate_along_route(long_path, count=5)

        assert [z.shape.center for z in first] == [z.shape.center for z in second]
        assert [z.risk_level for z in first] == [z.risk_level for z in second]

    def test_regenerating_replaces_zones(self, generator, long_path, surface):
        old = generator.generate_along_route(long_path, count=3)
        new = generator.generate_along_route(long_path, count=2)

        assert generator.get_zones() == new
        for zone in old:
            assert f"geofence:{zone.id}" not in surface.shapes
        for zone in new:
            assert f"geofence:{zone.id}" in surface.shapes
        assert generator.total_generated == 5

    def test_short_route_generates_nothing(self, generator):
        path = RoutePath.from_coordinates([(0, 0)])
        assert generator.generate_along_route(path, count=5) == []

    def test_accepts_coordinate_list(self, generator):
        coords = [GPSCoordinate(lat=0, lon=i * 0.01) for i in range(10)]
        assert len(generator.generate_along_route(coords, count=3)) == 3


# ============================================
# Within the view
# ============================================

class TestGenerateInView:
    """Test viewport hotspot generation"""

    BOUNDS = MapBounds(north=-25.74, south=-25.86, east=28.20, west=28.18)

    def test_zones_inside_bounds(self, generator):
        zones = generator.generate_in_view(count=10, bounds=self.BOUNDS)

        assert len(zones) == 10
        for i, zone in enumerate(zones):
            assert zone.id.startswith(f"view-hotspot-{i}-")
            assert self.BOUNDS.contains(zone.center.lat, zone.center.lon)

    def test_uses_surface_view(self):
        surface = InMemoryMapSurface(view=self.BOUNDS)
        generator = HotspotGenerator(surface=surface, rng=random.Random(1))

        zones = generator.generate_in_view(count=3)

        assert len(zones) == 3
        assert all(self.BOUNDS.contains(z.center.lat, z.center.lon) for z in zones)

    def test_no_view_available(self, generator):
        assert generator.generate_in_view(count=3) == []

    def test_no_view_keeps_existing_zones(self, generator, long_path):
        zones = generator.generate_along_route(long_path, count=2)
        generator.generate_in_view(count=3)
        assert generator.get_zones() == zones


# ============================================
# Risk levels & naming
# ============================================

class TestRiskDistribution:
    """Test weighted risk level draw"""

    @pytest.mark.parametrize("value,expected", [
        (0.0, RiskLevel.LOW),
        (0.39, RiskLevel.LOW),
        (0.4, RiskLevel.MEDIUM),
        (0.69, RiskLevel.MEDIUM),
        (0.7, RiskLevel.HIGH),
        (0.89, RiskLevel.HIGH),
        (0.9, RiskLevel.CRITICAL),
        (0.999, RiskLevel.CRITICAL),
    ])
    def test_thresholds(self, value, expected):
        rng = MagicMock(spec=random.Random)
        rng.random.return_value = value
        assert HotspotGenerator(rng=rng).random_risk_level() == expected

    def test_distribution_roughly_matches_weights(self):
        generator = HotspotGenerator(rng=random.Random(99))
        draws = [generator.random_risk_level() for _ in range(10000)]

        assert draws.count(RiskLevel.LOW) / 10000 == pytest.approx(0.4, abs=0.03)
        assert draws.count(RiskLevel.CRITICAL) / 10000 == pytest.approx(0.1, abs=0.03)

    def test_zone_properties_fallback(self):
        assert zone_properties("unknown")["radius"] == RISK_ZONE_PROPERTIES[RiskLevel.LOW]["radius"]

    def test_descriptions(self, generator):
        assert "extreme caution" in generator.zone_description(RiskLevel.HIGH)


# ============================================
# Milestones
# ============================================

class TestMilestoneGeofences:
    """Test checkpoint fences"""

    def test_five_checkpoints(self):
        path = RoutePath.from_coordinates([(0, i) for i in range(10)])
        fences = milestone_geofences(path)

        assert [f.id for f in fences] == [f"geofence-{i}" for i in range(5)]
        assert [f.center.lon for f in fences] == [0, 2, 5, 7, 9]
        assert [f.risk_level for f in fences] == [m[2] for m in MILESTONES]
        assert all(f.shape.radius_meters == 100 for f in fences)
        assert all(f.opacity == 0.35 for f in fences)

    def test_empty_path(self):
        assert milestone_geofences([]) == []


# ============================================
# Registration
# ============================================

class TestSimulationRegistration:
    """Generated zones register with an attached simulation"""

    def test_zones_registered_and_cleared(self, long_path, surface):
        clock = ManualClock()
        simulation = RouteSimulation(
            long_path, surface=surface,
            scheduler=ManualFrameScheduler(clock=clock, frame_ms=100), clock=clock
        )
        simulation.initialize()
        generator = HotspotGenerator(surface=surface, rng=random.Random(5), simulation=simulation)

        zones = generator.generate_along_route(long_path, count=4)

        assert {z.id for z in simulation.list_geofences()} == {z.id for z in zones}
        assert all(f"geofence:{z.id}" in surface.shapes for z in zones)

        generator.clear_all_zones()

        assert simulation.list_geofences() == []
        assert generator.get_zones() == []

    def test_queries(self, generator, long_path):
        zones = generator.generate_along_route(long_path, count=3)
        zone = zones[0]

        assert generator.get_zone(zone.id) is zone
        assert generator.get_zone("missing") is None
        assert zone in generator.zones_at_position(zone.center.lat, zone.center.lon)
        assert generator.zone_info(zone.id)["label"] == f"{zone.risk_level.value.upper()} Risk"
        assert generator.zone_info("missing") is None

        stats = generator.get_stats()
        assert stats["zones"] == 3
        assert sum(stats["byRiskLevel"].values()) == 3
