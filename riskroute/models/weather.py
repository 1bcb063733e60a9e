"""
Weather Models

Subset of the OpenWeatherMap "current weather" payload used to
decorate trip start/end points on the map.
"""

from pydantic import BaseModel, Field
from typing import Optional


class WeatherCondition(BaseModel):
    """Condition entry (`weather[]` in the API payload)"""
    id: int
    main: str
    description: str
    icon: str = ""


class WeatherMain(BaseModel):
    """Temperature block, metric units"""
    temp: float
    feels_like: float
    temp_min: Optional[float] = None
    temp_max: Optional[float] = None
    pressure: float
    humidity: float


class WeatherWind(BaseModel):
    speed: float = 0.0
    deg: Optional[float] = None


class WeatherCoord(BaseModel):
    lat: float
    lon: float


class WeatherData(BaseModel):
    """Current conditions at a coordinate"""
    coord: WeatherCoord
    weather: list[WeatherCondition] = Field(default_factory=list)
    main: WeatherMain
    wind: WeatherWind = Field(default_factory=WeatherWind)
    visibility: Optional[int] = None
    name: str = ""

    class Config:
        extra = "ignore"

    @property
    def condition(self) -> Optional[WeatherCondition]:
        """First condition entry, if any"""
        return self.weather[0] if self.weather else None

    def summary(self) -> str:
        """One-line marker title, e.g. 'Rain: light rain - 18°C'"""
        cond = self.condition
        label = f"{cond.main}: {cond.description}" if cond else "Unknown"
        return f"{label} - {round(self.main.temp)}°C"
