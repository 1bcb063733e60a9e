"""
Weather Routes - OpenWeatherMap proxy

Endpoints:
- GET /api/weather/current?lat=..&lon=.. - Current conditions
"""

from fastapi import APIRouter, HTTPException, Query
from typing import Optional

from riskroute.services import get_custom_weather_icon, get_weather_icon_url, get_weather_service

router = APIRouter(prefix="/api/weather", tags=["weather"])


@router.get("/current")
async def get_current_weather(
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lon: Optional[float] = Query(default=None, ge=-180, le=180)
):
    """
    Current weather at a coordinate

    Returns 400 when lat/lon are missing and 502 when the weather API
    cannot be reached or rejects the request.
    """
    if lat is None or lon is None:
        raise HTTPException(status_code=400, detail="Latitude and longitude are required")

    print(f"[Weather] Fetching weather data for: {lat}, {lon}")
    weather = await get_weather_service().get_weather(lat, lon)
    if weather is None:
        raise HTTPException(status_code=502, detail="Weather service unavailable")

    data = weather.model_dump()
    condition = weather.condition
    data["summary"] = weather.summary()
    data["customIcon"] = get_custom_weather_icon(condition.id) if condition else "unknown"
    data["iconUrl"] = get_weather_icon_url(condition.icon) if condition and condition.icon else None
    return data
