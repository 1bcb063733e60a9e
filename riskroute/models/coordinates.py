"""
Coordinate System Models

Models for GPS coordinates and geographic bounding boxes.
Used for route samples, geofence centers and the map's current view.
"""

from pydantic import BaseModel, Field


class GPSCoordinate(BaseModel):
    """GPS coordinate (latitude, longitude)"""
    lat: float = Field(..., ge=-90.0, le=90.0)      # Latitude (-90 to 90)
    lon: float = Field(..., ge=-180.0, le=180.0)    # Longitude (-180 to 180)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {"lat": -25.854361, "lon": 28.192019}
        }

    def as_tuple(self) -> tuple[float, float]:
        """Return (lat, lon)"""
        return (self.lat, self.lon)


class MapBounds(BaseModel):
    """
    Geographic bounding box

    Defines the area covered by a map view in GPS coordinates.
    """
    north: float = Field(..., ge=-90.0, le=90.0)      # Maximum latitude
    south: float = Field(..., ge=-90.0, le=90.0)      # Minimum latitude
    east: float = Field(..., ge=-180.0, le=180.0)     # Maximum longitude
    west: float = Field(..., ge=-180.0, le=180.0)     # Minimum longitude

    class Config:
        json_schema_extra = {
            "example": {
                "north": -25.7400,
                "south": -25.8600,
                "east": 28.2000,
                "west": 28.1800
            }
        }

    @property
    def lat_range(self) -> float:
        """Get latitude range"""
        return self.north - self.south

    @property
    def lon_range(self) -> float:
        """Get longitude range"""
        return self.east - self.west

    @property
    def center(self) -> tuple[float, float]:
        """Get center point (lat, lon)"""
        return (
            (self.north + self.south) / 2,
            (self.east + self.west) / 2
        )

    def contains(self, lat: float, lon: float) -> bool:
        """Check if a point is within bounds"""
        return (
            self.south <= lat <= self.north and
            self.west <= lon <= self.east
        )

    def padded(self, fraction: float) -> "MapBounds":
        """Grow the box by a fraction of its span on every side, clamped to valid ranges"""
        lat_pad = self.lat_range * fraction
        lon_pad = self.lon_range * fraction
        return MapBounds(
            north=min(90.0, self.north + lat_pad),
            south=max(-90.0, self.south - lat_pad),
            east=min(180.0, self.east + lon_pad),
            west=max(-180.0, self.west - lon_pad)
        )

    @classmethod
    def from_points(cls, points: list[tuple[float, float]]) -> "MapBounds":
        """Smallest box containing every (lat, lon) point"""
        if not points:
            raise ValueError("Cannot build bounds from zero points")
        lats = [p[0] for p in points]
        lons = [p[1] for p in points]
        return cls(north=max(lats), south=min(lats), east=max(lons), west=min(lons))


# Default map view used by the dashboard (Pretoria)
PRETORIA_CENTER = GPSCoordinate(lat=-25.7461, lon=28.1881)
