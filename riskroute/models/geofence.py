"""
Geofence Models

Risk zones (circle or polygon) and the enter/exit events recorded
while the simulated vehicle moves through them.
"""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field

from .coordinates import GPSCoordinate


class RiskLevel(str, Enum):
    """Risk classification of a zone"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Zone radius/color/opacity per risk level
RISK_ZONE_PROPERTIES = {
    RiskLevel.LOW: {
        "radius": 150,
        "color": "#4CAF50",
        "strokeColor": "#2E7D32",
        "opacity": 0.3,
    },
    RiskLevel.MEDIUM: {
        "radius": 200,
        "color": "#FF9800",
        "strokeColor": "#E65100",
        "opacity": 0.4,
    },
    RiskLevel.HIGH: {
        "radius": 250,
        "color": "#F44336",
        "strokeColor": "#B71C1C",
        "opacity": 0.5,
    },
    RiskLevel.CRITICAL: {
        "radius": 300,
        "color": "#9C27B0",
        "strokeColor": "#4A148C",
        "opacity": 0.6,
    },
}


class GeofenceAction(str, Enum):
    """Containment transition"""
    ENTER = "enter"
    EXIT = "exit"


class CircleShape(BaseModel):
    """Circle zone, radius in meters"""
    kind: Literal['circle'] = 'circle'
    center: GPSCoordinate
    radius_meters: float = Field(..., gt=0)

    class Config:
        frozen = True


class PolygonShape(BaseModel):
    """Polygon zone, ring is implicitly closed"""
    kind: Literal['polygon'] = 'polygon'
    vertices: list[GPSCoordinate] = Field(..., min_length=3)

    class Config:
        frozen = True


GeofenceShape = Union[CircleShape, PolygonShape]


class Geofence(BaseModel):
    """
    Geographic risk zone

    Only `is_active` changes after creation.
    """
    id: str
    name: str
    shape: GeofenceShape = Field(..., discriminator='kind')
    risk_level: RiskLevel = RiskLevel.LOW
    description: str = ""
    is_active: bool = True

    # Display properties (hotspot lookup table)
    color: Optional[str] = None
    stroke_color: Optional[str] = None
    opacity: Optional[float] = None

    class Config:
        json_schema_extra = {
            "example": {
                "id": "hotspot-0-1a2b3c4d",
                "name": "Danger Area 1",
                "shape": {
                    "kind": "circle",
                    "center": {"lat": -25.8550, "lon": 28.1930},
                    "radius_meters": 250
                },
                "risk_level": "high",
                "description": "High risk zone. Exercise extreme caution.",
                "is_active": True,
                "color": "#F44336",
                "stroke_color": "#B71C1C",
                "opacity": 0.5
            }
        }

    @property
    def center(self) -> GPSCoordinate:
        """Circle center, or the vertex centroid for polygons"""
        if isinstance(self.shape, CircleShape):
            return self.shape.center
        vertices = self.shape.vertices
        return GPSCoordinate(
            lat=sum(v.lat for v in vertices) / len(vertices),
            lon=sum(v.lon for v in vertices) / len(vertices)
        )

    def to_dict(self) -> dict:
        """Convert geofence to dictionary for API response"""
        data = {
            'id': self.id,
            'name': self.name,
            'type': self.shape.kind,
            'riskLevel': self.risk_level.value,
            'description': self.description,
            'isActive': self.is_active,
            'color': self.color,
            'strokeColor': self.stroke_color,
            'opacity': self.opacity,
        }
        if isinstance(self.shape, CircleShape):
            data['center'] = {'lat': self.shape.center.lat, 'lon': self.shape.center.lon}
            data['radius'] = self.shape.radius_meters
        else:
            data['vertices'] = [{'lat': v.lat, 'lon': v.lon} for v in self.shape.vertices]
        return data


class GeofenceEvent(BaseModel):
    """
    Recorded containment transition

    Append-only; cleared only by a simulation reset.
    """
    geofence_id: str
    action: GeofenceAction
    timestamp_ms: float                   # Wall clock ms when detected
    elapsed_ms: float = 0.0               # Simulated route time
    position: GPSCoordinate
    geofence_name: str = ""
    risk_level: RiskLevel = RiskLevel.LOW

    class Config:
        frozen = True

    def to_dict(self) -> dict:
        return {
            'geofenceId': self.geofence_id,
            'geofenceName': self.geofence_name,
            'action': self.action.value,
            'riskLevel': self.risk_level.value,
            'timestamp': self.timestamp_ms,
            'elapsedMs': self.elapsed_ms,
            'position': {'lat': self.position.lat, 'lon': self.position.lon},
        }
