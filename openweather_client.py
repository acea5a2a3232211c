"""
OpenWeatherMap API client.

Wraps the /weather and /forecast endpoints behind a single shared
httpx.AsyncClient. Credential and unit system are fixed query parameters set
once at construction. Every call returns an UpstreamResult instead of raising,
so callers never handle httpx exceptions themselves.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from common.http_utils import (
    DEFAULT_HTTP_TIMEOUT,
    MAX_HTTP_TIMEOUT,
    MIN_HTTP_TIMEOUT,
    describe_http_exception,
    safe_http_get,
)
from common.error_handling import ERROR_FETCH_FAILED
from weather_models import UpstreamFailure, UpstreamResult, UpstreamSuccess

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openweathermap.org/data/2.5"
CURRENT_ENDPOINT = "weather"
FORECAST_ENDPOINT = "forecast"
UNITS = "metric"

# The forecast endpoint returns samples 3 hours apart
SAMPLES_PER_DAY = 8


class WeatherSettings(BaseSettings):
    """Weather server configuration from environment."""

    openweather_api_key: str
    openweather_base_url: str = DEFAULT_BASE_URL
    weather_default_city: str = "San Francisco"
    weather_http_timeout: float = Field(
        default=DEFAULT_HTTP_TIMEOUT, ge=MIN_HTTP_TIMEOUT, le=MAX_HTTP_TIMEOUT
    )
    weather_log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @field_validator("openweather_api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("OPENWEATHER_API_KEY cannot be empty")
        return v


class OpenWeatherClient:
    """Client for the OpenWeatherMap v2.5 API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize OpenWeatherMap client.

        Args:
            api_key: OpenWeatherMap API key, sent as the appid parameter
            base_url: API root (e.g., https://api.openweathermap.org/data/2.5)
            timeout: HTTP request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            params={"appid": api_key, "units": UNITS},
            timeout=timeout,
            transport=transport,
        )

        logger.info(f"Initialized OpenWeatherMap client for {self.base_url}")

    @classmethod
    def from_settings(
        cls,
        settings: WeatherSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "OpenWeatherClient":
        return cls(
            api_key=settings.openweather_api_key,
            base_url=settings.openweather_base_url,
            timeout=settings.weather_http_timeout,
            transport=transport,
        )

    async def fetch_current(self, city: str) -> UpstreamResult:
        """Fetch current conditions for a city."""
        return await self._get(CURRENT_ENDPOINT, {"q": city})

    async def fetch_forecast(self, city: str, days: int) -> UpstreamResult:
        """Fetch enough 3-hour samples to cover `days` calendar days."""
        return await self._get(FORECAST_ENDPOINT, {"q": city, "cnt": days * SAMPLES_PER_DAY})

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, endpoint: str, params: Dict[str, Any]) -> UpstreamResult:
        logger.debug(f"GET {endpoint} params={params}")

        try:
            response = await safe_http_get(self._client, endpoint, params=params)
        except httpx.HTTPError as e:
            error_code, message, status_code = describe_http_exception(e)
            logger.warning(f"OpenWeatherMap {endpoint} failed [{error_code}]: {message}")
            return UpstreamFailure(message=message, error_code=error_code, status_code=status_code)

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"OpenWeatherMap {endpoint} returned invalid JSON: {e}")
            return UpstreamFailure(
                message=f"invalid JSON in response: {e}",
                error_code=ERROR_FETCH_FAILED,
                status_code=response.status_code,
            )

        if not isinstance(payload, dict):
            return UpstreamFailure(
                message=f"unexpected response body of type {type(payload).__name__}",
                error_code=ERROR_FETCH_FAILED,
                status_code=response.status_code,
            )

        return UpstreamSuccess(payload=payload)
