"""
Trip Models

Result of a geocoded start/end address pair plus directions lookup.
"""

from pydantic import BaseModel, Field

from .coordinates import GPSCoordinate


class TripLocation(BaseModel):
    """Resolved address"""
    address: str
    lat: float
    lon: float

    @property
    def coordinate(self) -> GPSCoordinate:
        return GPSCoordinate(lat=self.lat, lon=self.lon)


class TripRoute(BaseModel):
    """
    Route between two addresses

    `path` is the decoded overview polyline.
    """
    start: TripLocation
    end: TripLocation
    distance_meters: float = 0.0
    duration_seconds: float = 0.0
    path: list[GPSCoordinate] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "start": {"address": "Pretoria, South Africa", "lat": -25.7461, "lon": 28.1881},
                "end": {"address": "Centurion, South Africa", "lat": -25.8603, "lon": 28.1894},
                "distance_meters": 17250,
                "duration_seconds": 1260,
                "path": [{"lat": -25.7461, "lon": 28.1881}, {"lat": -25.8603, "lon": 28.1894}]
            }
        }

    @property
    def duration_minutes(self) -> int:
        return round(self.duration_seconds / 60)


class RouteRequest(BaseModel):
    """Request to plan a trip between two free-text addresses"""
    start_address: str = Field(..., min_length=1)
    end_address: str = Field(..., min_length=1)
