"""
Route Provider

Geocoding and driving directions via the Google Maps web services.
Results are awaited once, before a simulation is built; nothing here runs
inside the tick loop.
"""

import aiohttp
import asyncio
import os
from typing import Any, Dict, List, Optional

from riskroute.exceptions import GeocodingError, RouteNotFoundError
from riskroute.models import GPSCoordinate, TripLocation, TripRoute

GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"
DIRECTIONS_URL = "https://maps.googleapis.com/maps/api/directions/json"


def decode_polyline(encoded: str, precision: int = 5) -> List[GPSCoordinate]:
    """
    Decode a Google encoded polyline

    Args:
        encoded: Encoded polyline string
        precision: Decimal places encoded (5 for Google, 6 for OSRM/Valhalla)

    Returns:
        Ordered coordinates
    """
    coordinates: List[GPSCoordinate] = []
    factor = 10 ** precision
    index = lat = lon = 0
    length = len(encoded)

    while index < length:
        deltas = []
        for _ in range(2):
            shift = result = 0
            while True:
                byte = ord(encoded[index]) - 63
                index += 1
                result |= (byte & 0x1F) << shift
                shift += 5
                if byte < 0x20:
                    break
            deltas.append(~(result >> 1) if result & 1 else result >> 1)

        lat += deltas[0]
        lon += deltas[1]
        coordinates.append(GPSCoordinate(lat=lat / factor, lon=lon / factor))

    return coordinates


class GoogleRouteProvider:
    """
    Geocode two addresses and fetch the driving route between them

    Usage:
        provider = GoogleRouteProvider()
        route = await provider.calculate_route("Pretoria", "Centurion")
        route.path    # decoded overview polyline
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: float = 10,
        geocode_url: str = GEOCODE_URL,
        directions_url: str = DIRECTIONS_URL
    ):
        self.api_key = api_key or os.getenv("GOOGLE_MAPS_API_KEY", "")
        self.timeout = timeout
        self.geocode_url = geocode_url
        self.directions_url = directions_url
        self._session: Optional[aiohttp.ClientSession] = None

    async def initialize(self):
        """Initialize the HTTP session"""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout, connect=5)
            self._session = aiohttp.ClientSession(timeout=timeout)

    async def close(self):
        """Close the HTTP session"""
        if self._session and not self._session.closed:
            await self._session.close()

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def _get_json(self, url: str, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        await self.initialize()
        params = dict(params, key=self.api_key)

        try:
            async with self._session.get(url, params=params) as response:
                if response.status != 200:
                    print(f"[RouteProvider] HTTP {response.status} from {url}")
                    return None
                return await response.json()
        except asyncio.TimeoutError:
            print(f"[RouteProvider] Request timeout for {url}")
            return None
        except aiohttp.ClientError as e:
            print(f"[RouteProvider] Network error for {url}: {e}")
            return None

    async def geocode(self, address: str) -> TripLocation:
        """
        Resolve a free-text address

        Raises:
            GeocodingError: No usable result (no fallback location)
        """
        data = await self._get_json(self.geocode_url, {'address': address})
        if data is None:
            raise GeocodingError(address, status="REQUEST_FAILED")

        status = data.get('status', 'UNKNOWN_ERROR')
        results = data.get('results') or []
        if status != 'OK' or not results:
            print(f"[RouteProvider] Geocoding failed for address: {address} Status: {status}")
            raise GeocodingError(address, status=status)

        result = results[0]
        location = result['geometry']['location']
        return TripLocation(
            address=result.get('formatted_address', address),
            lat=location['lat'],
            lon=location['lng']
        )

    async def get_directions(self, start: TripLocation, end: TripLocation) -> TripRoute:
        """
        Driving directions between two resolved locations

        Raises:
            RouteNotFoundError: No route returned
        """
        params = {
            'origin': f"{start.lat},{start.lon}",
            'destination': f"{end.lat},{end.lon}",
            'mode': 'driving',
            'units': 'metric',
        }
        data = await self._get_json(self.directions_url, params)
        routes = (data or {}).get('routes') or []
        if not data or data.get('status') != 'OK' or not routes:
            raise RouteNotFoundError(start.address, end.address)

        route = routes[0]
        leg = route['legs'][0]
        encoded = (route.get('overview_polyline') or {}).get('points', '')

        return TripRoute(
            start=TripLocation(
                address=leg.get('start_address', start.address),
                lat=leg['start_location']['lat'],
                lon=leg['start_location']['lng']
            ),
            end=TripLocation(
                address=leg.get('end_address', end.address),
                lat=leg['end_location']['lat'],
                lon=leg['end_location']['lng']
            ),
            distance_meters=(leg.get('distance') or {}).get('value', 0),
            duration_seconds=(leg.get('duration') or {}).get('value', 0),
            path=decode_polyline(encoded) if encoded else []
        )

    async def calculate_route(self, start_address: str, end_address: str) -> TripRoute:
        """
        Geocode both addresses, then fetch directions

        Raises:
            GeocodingError: Either address could not be resolved
            RouteNotFoundError: No route between them
        """
        print(f"[RouteProvider] Calculating route from {start_address} to {end_address}")

        start = await self.geocode(start_address)
        end = await self.geocode(end_address)
        route = await self.get_directions(start, end)

        print(f"[RouteProvider] Route calculated: {route.distance_meters / 1000:.1f} km, "
              f"{route.duration_minutes} min, {len(route.path)} points")
        return route
