"""ABOUTME: Data models for the OpenWeather MCP server.

Output shapes (WeatherData, ForecastDay) are the adapter's stable schema.
Upstream shapes only cover the subset of OpenWeatherMap fields the server reads;
everything else in the provider payload is ignored.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Forecast limits
MIN_FORECAST_DAYS = 1
MAX_FORECAST_DAYS = 5
DEFAULT_FORECAST_DAYS = 3

# City validation
MIN_CITY_LENGTH = 1
MAX_CITY_LENGTH = 256


# ============================================================================
# OUTPUT MODELS
# ============================================================================

class WeatherData(BaseModel):
    """Current conditions for one city, captured at read time."""

    model_config = ConfigDict(frozen=True)

    temperature: float = Field(..., description="Temperature in °C")
    conditions: str = Field(..., description="Short description of the conditions")
    humidity: float = Field(..., description="Relative humidity in percent")
    wind_speed: float = Field(..., description="Wind speed in m/s")
    timestamp: str = Field(..., description="ISO8601 timestamp of when data was fetched")


class ForecastDay(BaseModel):
    """One representative forecast sample for a calendar day."""

    model_config = ConfigDict(frozen=True)

    date: str = Field(..., description="Calendar date (YYYY-MM-DD)")
    temperature: float = Field(..., description="Temperature in °C")
    conditions: str = Field(..., description="Short description of the conditions")


# ============================================================================
# INPUT MODELS
# ============================================================================

class ForecastArgs(BaseModel):
    """Arguments accepted by the get_forecast tool."""

    city: str = Field(..., description="City name, passed to the upstream verbatim")
    days: Optional[Union[int, float]] = Field(default=None, description="Number of days (1-5)")

    @property
    def effective_days(self) -> int:
        return resolve_days(self.days)


@dataclass(frozen=True)
class InvalidArguments:
    """Rejected tool arguments, with the first problem found."""

    reason: str


def resolve_days(days: Optional[Union[int, float]]) -> int:
    """Turn the requested day count into the count actually fetched.

    Missing means DEFAULT_FORECAST_DAYS. Anything else is truncated to an
    integer and clamped into [MIN_FORECAST_DAYS, MAX_FORECAST_DAYS].
    """
    if days is None:
        return DEFAULT_FORECAST_DAYS
    return max(MIN_FORECAST_DAYS, min(int(days), MAX_FORECAST_DAYS))


# ============================================================================
# UPSTREAM MODELS
# ============================================================================

class Condition(BaseModel):
    description: str


class Wind(BaseModel):
    speed: float


class MainReadings(BaseModel):
    temp: float


class CurrentReadings(MainReadings):
    humidity: float


class CurrentWeatherResponse(BaseModel):
    """Payload of the OpenWeatherMap /weather endpoint."""

    main: CurrentReadings
    weather: List[Condition]
    wind: Wind


class ForecastSample(BaseModel):
    """One 3-hour interval sample from the /forecast listing."""

    main: MainReadings
    weather: List[Condition]
    dt_txt: Optional[str] = None


class ForecastResponse(BaseModel):
    """Payload of the OpenWeatherMap /forecast endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    samples: List[ForecastSample] = Field(default_factory=list, alias="list")


# ============================================================================
# UPSTREAM RESULT
# ============================================================================

@dataclass(frozen=True)
class UpstreamSuccess:
    payload: Dict[str, Any]


@dataclass(frozen=True)
class UpstreamFailure:
    """A transport or provider error, already reduced to a message."""

    message: str
    error_code: str
    status_code: Optional[int] = None


UpstreamResult = Union[UpstreamSuccess, UpstreamFailure]
