"""
Track Loader

Loads a simulation track from a GeoJSON FeatureCollection (URL or file)
and falls back to a built-in default path when the source is unusable.

Features:
- GeoJSON parsing for Point, LineString, Polygon and MultiPolygon features
- aiohttp fetch with timeout for remote tracks
- Fallback to the default Pretoria walk on any fetch/parse failure
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiohttp

from riskroute.exceptions import TrackSourceError
from riskroute.models import GPSCoordinate, RoutePoint
from .route_path import RoutePath


# Built-in fallback route (around Pretoria), one sample per second
DEFAULT_TRACK_POINTS: List[RoutePoint] = [
    RoutePoint(lat=-25.854361, lon=28.192019, timestamp_ms=0, speed=30),
    RoutePoint(lat=-25.854500, lon=28.192200, timestamp_ms=1000, speed=35),
    RoutePoint(lat=-25.854800, lon=28.192500, timestamp_ms=2000, speed=40),
    RoutePoint(lat=-25.855100, lon=28.192800, timestamp_ms=3000, speed=45),
    RoutePoint(lat=-25.855400, lon=28.193100, timestamp_ms=4000, speed=50),
    RoutePoint(lat=-25.855700, lon=28.193400, timestamp_ms=5000, speed=55),
    RoutePoint(lat=-25.856000, lon=28.193700, timestamp_ms=6000, speed=60),
    RoutePoint(lat=-25.856300, lon=28.194000, timestamp_ms=7000, speed=65),
    RoutePoint(lat=-25.856600, lon=28.194300, timestamp_ms=8000, speed=70),
    RoutePoint(lat=-25.856900, lon=28.194600, timestamp_ms=9000, speed=75),
]

GEOMETRY_TYPES = ('Point', 'LineString', 'Polygon', 'MultiPolygon')


def default_route_path() -> RoutePath:
    """Fresh RoutePath over the built-in fallback track"""
    return RoutePath(DEFAULT_TRACK_POINTS)


class GeoJSONLoader:
    """
    Parse GeoJSON FeatureCollections into coordinates

    GeoJSON stores positions as [lon, lat]; everything returned here is
    GPSCoordinate(lat, lon).

    Usage:
        loader = GeoJSONLoader()
        await loader.load_from_url("https://example.org/track.geojson")
        coords = loader.get_first_line_string_coordinates()
    """

    def __init__(self, timeout: float = 10.0):
        self.timeout = timeout
        self.geojson: Optional[Dict[str, Any]] = None
        self.source: str = "<unset>"

    async def load_from_url(self, url: str) -> Dict[str, Any]:
        """
        Fetch and parse a GeoJSON document

        Raises:
            TrackSourceError: On HTTP error, timeout or invalid JSON
        """
        self.source = url
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url) as response:
                    if response.status != 200:
                        raise TrackSourceError(url, f"HTTP {response.status}")
                    text = await response.text()
        except asyncio.TimeoutError:
            raise TrackSourceError(url, "request timed out")
        except aiohttp.ClientError as e:
            raise TrackSourceError(url, f"network error: {e}")

        return self.load_from_text(text, source=url)

    def load_from_file(self, path: str) -> Dict[str, Any]:
        """Read and parse a GeoJSON file from disk"""
        self.source = str(path)
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise TrackSourceError(str(path), str(e))
        return self.load_from_text(text, source=str(path))

    def load_from_text(self, text: str, source: str = "<text>") -> Dict[str, Any]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise TrackSourceError(source, f"invalid JSON: {e}")
        return self.load_from_dict(data, source=source)

    def load_from_dict(self, data: Dict[str, Any], source: str = "<dict>") -> Dict[str, Any]:
        if not isinstance(data, dict) or not isinstance(data.get('features'), list):
            raise TrackSourceError(source, "GeoJSON not loaded or malformed")
        self.source = source
        self.geojson = data
        return data

    # ============================================
    # Feature access
    # ============================================

    def get_features_by_type(self, geometry_type: str) -> List[Dict[str, Any]]:
        if geometry_type not in GEOMETRY_TYPES:
            raise ValueError(f"Unsupported geometry type: {geometry_type}")
        if self.geojson is None:
            raise TrackSourceError(self.source, "GeoJSON not loaded or malformed")

        return [
            f for f in self.geojson['features']
            if isinstance(f, dict)
            and f.get('type') == 'Feature'
            and (f.get('geometry') or {}).get('type') == geometry_type
        ]

    @staticmethod
    def _coord(position: List[float]) -> GPSCoordinate:
        return GPSCoordinate(lon=position[0], lat=position[1])

    def get_points(self) -> List[GPSCoordinate]:
        return [self._coord(f['geometry']['coordinates']) for f in self.get_features_by_type('Point')]

    def get_line_strings(self) -> List[List[GPSCoordinate]]:
        return [
            [self._coord(c) for c in f['geometry']['coordinates']]
            for f in self.get_features_by_type('LineString')
        ]

    def get_first_line_string_coordinates(self) -> List[GPSCoordinate]:
        lines = self.get_line_strings()
        return lines[0] if lines else []

    def get_polygons(self) -> List[List[List[GPSCoordinate]]]:
        return [
            [[self._coord(c) for c in ring] for ring in f['geometry']['coordinates']]
            for f in self.get_features_by_type('Polygon')
        ]

    def get_multi_polygons(self) -> List[List[List[List[GPSCoordinate]]]]:
        return [
            [
                [[self._coord(c) for c in ring] for ring in polygon]
                for polygon in f['geometry']['coordinates']
            ]
            for f in self.get_features_by_type('MultiPolygon')
        ]

    def get_all_coordinates(self) -> List[List[GPSCoordinate]]:
        """Every coordinate group: points, lines, polygon rings"""
        groups: List[List[GPSCoordinate]] = [[p] for p in self.get_points()]
        groups.extend(self.get_line_strings())
        for polygon in self.get_polygons():
            groups.extend(polygon)
        for multi in self.get_multi_polygons():
            for polygon in multi:
                groups.extend(polygon)
        return groups

    def get_bounding_box(self) -> Optional[Dict[str, GPSCoordinate]]:
        coords = [c for group in self.get_all_coordinates() for c in group]
        if not coords:
            return None
        return {
            'min': GPSCoordinate(lat=min(c.lat for c in coords), lon=min(c.lon for c in coords)),
            'max': GPSCoordinate(lat=max(c.lat for c in coords), lon=max(c.lon for c in coords)),
        }

    def get_feature_count(self) -> Dict[str, int]:
        return {
            'points': len(self.get_features_by_type('Point')),
            'lines': len(self.get_features_by_type('LineString')),
            'polygons': len(self.get_features_by_type('Polygon')),
            'multiPolygons': len(self.get_features_by_type('MultiPolygon')),
        }


async def load_track(source: str, timeout: float = 10.0, interval_ms: int = 1000) -> RoutePath:
    """
    Load a route from a GeoJSON track, falling back to the default path

    Args:
        source: http(s) URL or file path of a GeoJSON FeatureCollection
        timeout: Fetch timeout in seconds
        interval_ms: Synthesized spacing between samples

    Returns:
        RoutePath over the first LineString, or the built-in default path
    """
    loader = GeoJSONLoader(timeout=timeout)
    try:
        if source.startswith(("http://", "https://")):
            await loader.load_from_url(source)
        else:
            loader.load_from_file(source)

        coords = loader.get_first_line_string_coordinates()
        if not coords:
            raise TrackSourceError(source, "no LineString feature found")

        path = RoutePath.from_coordinates(coords, interval_ms=interval_ms)
        print(f"[TrackLoader] Loaded route from GeoJSON: {len(path)} points")
        return path

    except (TrackSourceError, ValueError, KeyError, IndexError, TypeError) as e:
        print(f"[TrackLoader] Failed to load GeoJSON route, using fallback: {e}")
        return default_route_path()
