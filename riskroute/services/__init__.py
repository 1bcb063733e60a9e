"""
Services Package

External lookups awaited outside the simulation loop.

Services:
- GoogleRouteProvider: Geocoding + driving directions
- WeatherService: Current conditions from OpenWeatherMap
"""

from .route_provider import (
    GoogleRouteProvider,
    decode_polyline,
)

from .weather_service import (
    WeatherService,
    WEATHER_ICON_MAP,
    get_custom_weather_icon,
    get_weather_icon_url,
    get_weather_service,
    set_weather_service,
    init_weather_service,
    close_weather_service,
)

__all__ = [
    # Route Provider
    "GoogleRouteProvider",
    "decode_polyline",

    # Weather Service
    "WeatherService",
    "WEATHER_ICON_MAP",
    "get_custom_weather_icon",
    "get_weather_icon_url",
    "get_weather_service",
    "set_weather_service",
    "init_weather_service",
    "close_weather_service",
]
