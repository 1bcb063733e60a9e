"""
Route Sample Models

A route is an ordered list of time-stamped GPS samples.
"""

from pydantic import BaseModel, Field
from typing import Optional

from .coordinates import GPSCoordinate


class RoutePoint(BaseModel):
    """
    One time-stamped sample of the simulated trajectory

    Immutable once loaded. `speed` is cosmetic only.
    """
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)
    timestamp_ms: int = Field(..., ge=0)          # Elapsed ms since route start
    speed: Optional[float] = None                 # km/h, display only

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "lat": -25.854361,
                "lon": 28.192019,
                "timestamp_ms": 0,
                "speed": 30
            }
        }

    @property
    def coordinate(self) -> GPSCoordinate:
        return GPSCoordinate(lat=self.lat, lon=self.lon)


class RouteSegment(BaseModel):
    """Bracketing pair of samples for a given elapsed time"""
    index: int                            # Index of the first sample
    start: RoutePoint
    end: RoutePoint
    progress: float = Field(..., ge=0.0, le=1.0)

    class Config:
        frozen = True
