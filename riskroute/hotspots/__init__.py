"""Procedural risk-zone generation"""

from .hotspot_generator import (
    HotspotGenerator,
    EDGE_MARGIN_FRACTION,
    OFFSET_DEGREES,
    RISK_WEIGHTS,
    ZONE_NAME_PREFIXES,
    ZONE_DESCRIPTIONS,
    MILESTONES,
    MILESTONE_RADIUS_METERS,
    milestone_geofences,
    zone_properties,
)

__all__ = [
    'HotspotGenerator',
    'EDGE_MARGIN_FRACTION',
    'OFFSET_DEGREES',
    'RISK_WEIGHTS',
    'ZONE_NAME_PREFIXES',
    'ZONE_DESCRIPTIONS',
    'MILESTONES',
    'MILESTONE_RADIUS_METERS',
    'milestone_geofences',
    'zone_properties',
]
