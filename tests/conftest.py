"""ABOUTME: Pytest configuration and shared fixtures for weather MCP server tests.

Provides canned OpenWeatherMap payloads and a stubbed upstream client so no
test touches the network.
"""

from datetime import datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from common.mcp_base import MCPServerBase
from openweather_client import OpenWeatherClient
from weather import WeatherHandlers

DEFAULT_CITY = "San Francisco"


def make_forecast_sample(index: int, start: datetime = datetime(2024, 6, 1, 0, 0)) -> dict:
    """One 3-hour forecast sample in OpenWeatherMap format."""
    at = start + timedelta(hours=3 * index)
    return {
        "dt": int(at.timestamp()),
        "main": {"temp": 10.0 + index, "humidity": 60},
        "weather": [{"id": 800, "main": "Clear", "description": f"sample {index}"}],
        "wind": {"speed": 3.5},
        "dt_txt": at.strftime("%Y-%m-%d %H:%M:%S"),
    }


def make_forecast_payload(count: int) -> dict:
    return {
        "cod": "200",
        "cnt": count,
        "list": [make_forecast_sample(i) for i in range(count)],
        "city": {"name": "Paris", "country": "FR"},
    }


@pytest.fixture
def mock_current_payload():
    """Fixture providing a sample /weather response.

    Returns:
        Dictionary in OpenWeatherMap current-weather format
    """
    return {
        "coord": {"lon": -122.42, "lat": 37.77},
        "weather": [{"id": 801, "main": "Clouds", "description": "few clouds"}],
        "main": {"temp": 18.3, "feels_like": 17.9, "humidity": 72, "pressure": 1014},
        "wind": {"speed": 5.1, "deg": 270},
        "dt": 1717243200,
        "name": DEFAULT_CITY,
        "cod": 200,
    }


@pytest.fixture
def mock_forecast_payload():
    """Fixture providing a /forecast response with three days of samples."""
    return make_forecast_payload(24)


@pytest.fixture
def mock_weather_client():
    """Fixture providing a stubbed OpenWeatherClient.

    Returns:
        AsyncMock with fetch_current / fetch_forecast awaitables
    """
    return AsyncMock(spec=OpenWeatherClient)


@pytest.fixture
def weather_server():
    return MCPServerBase("openweather-mcp-test", version="0.0.0")


@pytest.fixture
def handlers(mock_weather_client, weather_server):
    return WeatherHandlers(mock_weather_client, DEFAULT_CITY, weather_server)


@pytest.fixture(name="make_forecast_payload")
def make_forecast_payload_fixture():
    """Fixture providing the forecast payload builder."""
    return make_forecast_payload
