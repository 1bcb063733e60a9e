"""Shared fixtures: a hand-driven clock/scheduler and small equatorial routes"""

import pytest

from riskroute.models import CircleShape, Geofence, GPSCoordinate, RiskLevel, RoutePoint
from riskroute.rendering import InMemoryMapSurface
from riskroute.route import RoutePath
from riskroute.simulation import ManualClock, ManualFrameScheduler, RouteSimulation

FRAME_MS = 100


def circle_zone(zone_id: str, lat: float, lon: float, radius: float,
                risk_level: RiskLevel = RiskLevel.HIGH) -> Geofence:
    return Geofence(
        id=zone_id,
        name=zone_id.title(),
        shape=CircleShape(center=GPSCoordinate(lat=lat, lon=lon), radius_meters=radius),
        risk_level=risk_level,
    )


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return ManualFrameScheduler(clock=clock, frame_ms=FRAME_MS)


@pytest.fixture
def surface():
    return InMemoryMapSurface()


@pytest.fixture
def three_point_path():
    """(0,0) -> (0,1) -> (0,2), one second per segment"""
    return RoutePath([
        RoutePoint(lat=0, lon=0, timestamp_ms=0),
        RoutePoint(lat=0, lon=1, timestamp_ms=1000),
        RoutePoint(lat=0, lon=2, timestamp_ms=2000),
    ])


@pytest.fixture
def middle_zone():
    """50 km circle around the middle sample"""
    return circle_zone("middle", 0, 1, 50000)


@pytest.fixture
def simulation(three_point_path, middle_zone, surface, scheduler, clock):
    sim = RouteSimulation(
        three_point_path,
        surface=surface,
        scheduler=scheduler,
        clock=clock,
        geofences=[middle_zone]
    )
    sim.initialize()
    return sim


@pytest.fixture
def make_zone():
    return circle_zone
