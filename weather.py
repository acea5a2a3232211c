"""ABOUTME: Weather MCP Server - OpenWeatherMap current conditions and forecasts over stdio.

Exposes one resource (current conditions for the configured default city) and
one tool (get_forecast). Upstream payloads are reshaped into the stable
WeatherData / ForecastDay schema before they reach the host.
"""

import asyncio
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union
from urllib.parse import quote, unquote

from mcp.types import CallToolResult, ReadResourceResult, Resource, TextResourceContents, Tool
from pydantic import ValidationError

from common.error_handling import (
    create_error_result,
    internal_error,
    invalid_params_error,
    method_not_found_error,
    resource_not_found_error,
)
from common.mcp_base import MCPServerBase
from common.validation import validate_number, validate_object, validate_string_length
from openweather_client import SAMPLES_PER_DAY, OpenWeatherClient, WeatherSettings
from weather_models import (
    MAX_CITY_LENGTH,
    MAX_FORECAST_DAYS,
    MIN_CITY_LENGTH,
    MIN_FORECAST_DAYS,
    Condition,
    CurrentWeatherResponse,
    ForecastArgs,
    ForecastDay,
    ForecastResponse,
    InvalidArguments,
    UpstreamFailure,
    WeatherData,
)

logger = logging.getLogger(__name__)

# ============================================================================
# CONSTANTS
# ============================================================================

SERVER_NAME = "openweather-mcp"
SERVER_VERSION = "0.1.0"

FORECAST_TOOL = "get_forecast"
JSON_MIME_TYPE = "application/json"
UPSTREAM_ERROR_PREFIX = "Weather API error"


class UpstreamContractError(ValueError):
    """The upstream payload lacks data the adapter cannot do without."""


# ============================================================================
# REQUEST VALIDATION
# ============================================================================


def validate_forecast_args(raw: Any) -> Union[ForecastArgs, InvalidArguments]:
    """Check get_forecast arguments field by field.

    Range of `days` is not checked here; it is clamped later by
    ForecastArgs.effective_days.

    Args:
        raw: Decoded JSON arguments from the tool call

    Returns:
        ForecastArgs when the shape is acceptable, InvalidArguments otherwise
    """
    is_valid, error_msg = validate_object(raw)
    if not is_valid:
        return InvalidArguments(error_msg)

    if "city" not in raw:
        return InvalidArguments("city is required")

    city = raw["city"]
    is_valid, error_msg = validate_string_length(city, MIN_CITY_LENGTH, MAX_CITY_LENGTH, "city")
    if not is_valid:
        return InvalidArguments(error_msg)

    days = None
    if "days" in raw:
        days = raw["days"]
        is_valid, error_msg = validate_number(days, "days")
        if not is_valid:
            return InvalidArguments(error_msg)

    return ForecastArgs(city=city, days=days)


# ============================================================================
# RESPONSE SHAPING
# ============================================================================


def _utc_now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def _first_condition(weather: List[Condition]) -> str:
    if not weather:
        raise UpstreamContractError("upstream response has an empty weather list")
    return weather[0].description


def normalize_current(resp: CurrentWeatherResponse, now: Optional[datetime] = None) -> WeatherData:
    """Map an upstream current-conditions payload to WeatherData.

    The upstream payload carries no usable observation time, so the timestamp
    is the capture time.

    Raises:
        UpstreamContractError: If the payload has no weather conditions
    """
    captured_at = _utc_now(now)
    return WeatherData(
        temperature=resp.main.temp,
        conditions=_first_condition(resp.weather),
        humidity=resp.main.humidity,
        wind_speed=resp.wind.speed,
        timestamp=captured_at.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
    )


def aggregate_forecast(
    resp: ForecastResponse,
    days: int,
    now: Optional[datetime] = None
) -> List[ForecastDay]:
    """Reduce 3-hour forecast samples to one entry per day.

    Each day is represented by its first sample (indices 0, 8, 16, ...); there
    is no averaging. Never returns more than `days` entries, and never more
    than the samples support.

    Args:
        resp: Parsed upstream forecast listing
        days: Number of days wanted (already clamped)
        now: Capture time, used only when a sample has no dt_txt

    Returns:
        ForecastDay entries in upstream order

    Raises:
        UpstreamContractError: If a selected sample has no weather conditions
    """
    fallback_date = _utc_now(now).date().isoformat()

    forecasts = []
    for sample in resp.samples[::SAMPLES_PER_DAY][:days]:
        date = sample.dt_txt.split(" ")[0] if sample.dt_txt else fallback_date
        forecasts.append(ForecastDay(
            date=date,
            temperature=sample.main.temp,
            conditions=_first_condition(sample.weather),
        ))
    return forecasts


# ============================================================================
# RESOURCE AND TOOL DEFINITIONS
# ============================================================================


def current_weather_uri(city: str) -> str:
    """Resource URI for a city's current conditions (city is percent-encoded)."""
    return f"weather://{quote(city, safe='')}/current"


FORECAST_INPUT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "city": {
            "type": "string",
            "description": "City name"
        },
        "days": {
            "type": "integer",
            "description": f"Number of days ({MIN_FORECAST_DAYS}-{MAX_FORECAST_DAYS})",
            "minimum": MIN_FORECAST_DAYS,
            "maximum": MAX_FORECAST_DAYS
        }
    },
    "required": ["city"]
}


# ============================================================================
# REQUEST HANDLERS
# ============================================================================


class WeatherHandlers:
    """Dispatch for the resource and tool requests the server accepts.

    Stateless apart from the shared client and the default city, both fixed
    at startup.
    """

    def __init__(self, client: OpenWeatherClient, default_city: str, server: MCPServerBase):
        self.client = client
        self.default_city = default_city
        self.server = server
        self.resource_uri = current_weather_uri(default_city)

    async def list_resources(self) -> List[Resource]:
        return [
            Resource(
                uri=self.resource_uri,
                name=f"Current weather in {self.default_city}",
                mimeType=JSON_MIME_TYPE,
                description="Real-time weather data including temperature, conditions, humidity, and wind speed",
            )
        ]

    async def read_resource(self, uri: str) -> ReadResourceResult:
        """Read current conditions for the default city.

        Raises:
            McpError: RESOURCE_NOT_FOUND for any other URI, INTERNAL_ERROR when
                the upstream call fails
        """
        if unquote(uri) != unquote(self.resource_uri):
            logger.warning(f"Unknown resource requested: {uri}")
            raise resource_not_found_error(uri)

        result = await self.client.fetch_current(self.default_city)
        if isinstance(result, UpstreamFailure):
            logger.error(f"Current weather fetch failed for {self.default_city}: {result.message}")
            raise internal_error(f"{UPSTREAM_ERROR_PREFIX}: {result.message}")

        weather_data = normalize_current(CurrentWeatherResponse.model_validate(result.payload))
        logger.info(f"Read current weather for {self.default_city}: {weather_data.temperature}°C, {weather_data.conditions}")

        return ReadResourceResult(
            contents=[
                TextResourceContents(
                    uri=self.resource_uri,
                    mimeType=JSON_MIME_TYPE,
                    text=weather_data.model_dump_json(indent=2),
                )
            ]
        )

    async def list_tools(self) -> List[Tool]:
        return [
            Tool(
                name=FORECAST_TOOL,
                description="Get weather forecast for a city",
                inputSchema=FORECAST_INPUT_SCHEMA,
            )
        ]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> CallToolResult:
        """Run the get_forecast tool.

        Upstream failures come back as an isError result rather than a fault,
        so the host can show them as a failed tool run.

        Raises:
            McpError: METHOD_NOT_FOUND for unknown tools, INVALID_PARAMS for
                malformed arguments
        """
        if name != FORECAST_TOOL:
            logger.warning(f"Unknown tool requested: {name}")
            raise method_not_found_error(f"Unknown tool: {name}")

        args = validate_forecast_args(arguments)
        if isinstance(args, InvalidArguments):
            logger.warning(f"Invalid forecast arguments: {args.reason}")
            raise invalid_params_error(f"Invalid forecast arguments: {args.reason}")

        days = args.effective_days
        self.server.log_tool_start(FORECAST_TOOL, city=args.city, days=days)

        result = await self.client.fetch_forecast(args.city, days)
        if isinstance(result, UpstreamFailure):
            self.server.log_tool_error(FORECAST_TOOL, result.error_code, result.message, city=args.city)
            return create_error_result(
                error_message=f"{UPSTREAM_ERROR_PREFIX}: {result.message}",
                error_code=result.error_code,
                error_type="upstream_error",
                additional_metadata={"city": args.city, "status_code": result.status_code},
            )

        forecasts = aggregate_forecast(ForecastResponse.model_validate(result.payload), days)
        self.server.log_tool_complete(FORECAST_TOOL, city=args.city, entries=len(forecasts))

        return self.server.create_success_result(
            json.dumps([forecast.model_dump() for forecast in forecasts], indent=2),
            metadata={"city": args.city, "days": days, "entries": len(forecasts)},
        )


# ============================================================================
# SERVER ENTRY POINT
# ============================================================================


def build_server(settings: WeatherSettings, client: Optional[OpenWeatherClient] = None) -> MCPServerBase:
    """Wire settings, upstream client and handlers into a ready-to-run server."""
    server = MCPServerBase(
        SERVER_NAME,
        version=SERVER_VERSION,
        log_level=getattr(logging, settings.weather_log_level.upper(), logging.INFO),
    )
    client = client or OpenWeatherClient.from_settings(settings)
    handlers = WeatherHandlers(client, settings.weather_default_city, server)
    server.register_handlers(handlers)
    return server


def main() -> None:
    try:
        settings = WeatherSettings()
    except ValidationError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error(f"Invalid weather server configuration (is OPENWEATHER_API_KEY set?): {e}")
        sys.exit(1)

    client = OpenWeatherClient.from_settings(settings)
    server = build_server(settings, client)
    logger.info(f"Starting {SERVER_NAME} (default city: {settings.weather_default_city})")
    asyncio.run(server.run_stdio(on_shutdown=client.aclose))


if __name__ == "__main__":
    main()
