"""
Weather Service

Fetches current conditions from the OpenWeatherMap API for decorating
trip endpoints on the map. Never consulted by the simulation itself.

Features:
- OpenWeatherMap "current weather" (metric units)
- Response caching with TTL
- Returns None on any API failure
"""

import aiohttp
import asyncio
import os
import time
from typing import Optional, Dict, Any

from pydantic import BaseModel, Field, ValidationError

from riskroute.models import WeatherData

OPENWEATHERMAP_URL = "https://api.openweathermap.org/data/2.5/weather"
ICON_URL_TEMPLATE = "https://openweathermap.org/img/wn/{code}@2x.png"

# OpenWeatherMap condition code -> custom icon name
WEATHER_ICON_MAP: Dict[int, str] = {
    # Clear sky
    800: 'sunny',
    # Clouds
    801: 'partly-cloudy',
    802: 'cloudy',
    803: 'cloudy',
    804: 'overcast',
    # Thunderstorm
    200: 'thunderstorm', 201: 'thunderstorm', 202: 'thunderstorm',
    210: 'thunderstorm', 211: 'thunderstorm', 212: 'thunderstorm',
    221: 'thunderstorm', 230: 'thunderstorm', 231: 'thunderstorm',
    232: 'thunderstorm',
    # Drizzle
    300: 'light-rain', 301: 'light-rain', 302: 'rain', 310: 'light-rain',
    311: 'rain', 312: 'heavy-rain', 313: 'rain', 314: 'heavy-rain',
    321: 'rain',
    # Rain
    500: 'light-rain', 501: 'rain', 502: 'heavy-rain', 503: 'heavy-rain',
    504: 'heavy-rain', 511: 'sleet', 520: 'light-rain', 521: 'rain',
    522: 'heavy-rain', 531: 'heavy-rain',
    # Snow
    600: 'light-snow', 601: 'snow', 602: 'heavy-snow', 611: 'sleet',
    612: 'sleet', 613: 'sleet', 615: 'light-snow', 616: 'snow',
    620: 'light-snow', 621: 'snow', 622: 'heavy-snow',
    # Atmosphere
    701: 'fog', 711: 'fog', 721: 'fog', 731: 'dust', 741: 'fog',
    751: 'dust', 761: 'dust', 762: 'dust', 771: 'windy', 781: 'tornado',
}


def get_custom_weather_icon(weather_id: int) -> str:
    """Custom icon name for an OpenWeatherMap condition code"""
    return WEATHER_ICON_MAP.get(weather_id, 'unknown')


def get_weather_icon_url(icon_code: str) -> str:
    return ICON_URL_TEMPLATE.format(code=icon_code)


class WeatherCacheEntry(BaseModel):
    """Cache entry for API responses"""
    data: WeatherData
    expires_at: float
    cached_at: float = Field(default_factory=time.time)


class WeatherService:
    """
    Current weather lookups

    Usage:
        service = WeatherService()
        await service.initialize()
        weather = await service.get_weather(-25.7479, 28.2293)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        cache_ttl: int = 300,
        timeout: float = 10,
        base_url: str = OPENWEATHERMAP_URL
    ):
        """
        Args:
            api_key: OpenWeatherMap key (defaults to OPENWEATHERMAP_API_KEY env var)
            cache_ttl: Cache time-to-live in seconds
            timeout: Total request timeout in seconds
        """
        self.api_key = api_key or os.getenv("OPENWEATHERMAP_API_KEY", "")
        self.base_url = base_url
        self.cache_ttl = cache_ttl
        self.timeout = timeout

        self._cache: Dict[str, WeatherCacheEntry] = {}
        self._session: Optional[aiohttp.ClientSession] = None

        # Statistics
        self.request_count = 0
        self.error_count = 0
        self.cache_hits = 0
        self.cache_misses = 0

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

    def _get_cache_key(self, lat: float, lon: float) -> str:
        # ~11m grid
        return f"weather_{round(lat, 4)}_{round(lon, 4)}"

    def _get_cached(self, cache_key: str) -> Optional[WeatherData]:
        entry = self._cache.get(cache_key)
        if entry is not None:
            if time.time() < entry.expires_at:
                self.cache_hits += 1
                return entry.data
            del self._cache[cache_key]

        self.cache_misses += 1
        return None

    def _set_cache(self, cache_key: str, data: WeatherData):
        self._cache[cache_key] = WeatherCacheEntry(
            data=data,
            expires_at=time.time() + self.cache_ttl
        )

    async def get_weather(self, lat: float, lon: float) -> Optional[WeatherData]:
        """
        Current conditions at a coordinate

        Returns:
            WeatherData, or None if the API is unconfigured or fails
        """
        cache_key = self._get_cache_key(lat, lon)
        cached = self._get_cached(cache_key)
        if cached:
            return cached

        if not self.is_configured:
            print("[Weather] API key not configured, skipping weather lookup")
            return None

        await self.initialize()

        params = {
            'lat': lat,
            'lon': lon,
            'appid': self.api_key,
            'units': 'metric',
        }
        self.request_count += 1

        try:
            async with self._session.get(self.base_url, params=params) as response:
                if response.status == 200:
                    payload = await response.json()
                    data = WeatherData.model_validate(payload)
                    self._set_cache(cache_key, data)
                    return data

                if response.status == 401:
                    print("[Weather] API key invalid or expired")
                elif response.status == 429:
                    print("[Weather] Rate limit exceeded")
                else:
                    print(f"[Weather] API error {response.status} for ({lat}, {lon})")
                self.error_count += 1
                return None

        except asyncio.TimeoutError:
            print(f"[Weather] Request timeout for ({lat}, {lon})")
            self.error_count += 1
            return None

        except aiohttp.ClientError as e:
            print(f"[Weather] Network error for ({lat}, {lon}): {e}")
            self.error_count += 1
            return None

        except ValidationError as e:
            print(f"[Weather] Unexpected payload for ({lat}, {lon}): {e}")
            self.error_count += 1
            return None

    def clear_cache(self):
        self._cache.clear()

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        total = self.cache_hits + self.cache_misses
        return {
            "entries": len(self._cache),
            "hits": self.cache_hits,
            "misses": self.cache_misses,
            "hit_rate": (self.cache_hits / total * 100) if total > 0 else 0,
            "ttl_seconds": self.cache_ttl,
            "requests": self.request_count,
            "errors": self.error_count,
        }


# Global service instance
_weather_service: Optional[WeatherService] = None


def get_weather_service() -> WeatherService:
    """Get the global WeatherService instance"""
    global _weather_service
    if _weather_service is None:
        _weather_service = WeatherService()
    return _weather_service


def set_weather_service(service: Optional[WeatherService]):
    """Replace the global instance (used by tests)"""
    global _weather_service
    _weather_service = service


async def init_weather_service(**kwargs) -> WeatherService:
    """Initialize the global WeatherService"""
    global _weather_service
    if _weather_service is None:
        _weather_service = WeatherService(**kwargs)
    await _weather_service.initialize()
    return _weather_service


async def close_weather_service():
    """Close the global WeatherService"""
    global _weather_service
    if _weather_service:
        await _weather_service.close()
        _weather_service = None
