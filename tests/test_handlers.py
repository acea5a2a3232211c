"""ABOUTME: Tests for the weather request handlers and their MCP wiring.

The upstream client is an AsyncMock, so every test can check whether a
network call would have been made.
"""

import json
from urllib.parse import unquote

import mcp.types as types
import pytest
from mcp.shared.exceptions import McpError

from common.error_handling import RESOURCE_NOT_FOUND
from openweather_client import WeatherSettings
from weather import FORECAST_TOOL, build_server
from weather_models import UpstreamFailure, UpstreamSuccess


class TestResources:
    """Tests for resource listing and reading."""

    @pytest.mark.asyncio
    async def test_list_resources_has_single_default_city_entry(self, handlers):
        resources = await handlers.list_resources()

        assert len(resources) == 1
        assert resources[0].name == "Current weather in San Francisco"
        assert resources[0].mimeType == "application/json"
        assert unquote(str(resources[0].uri)) == "weather://San Francisco/current"

    @pytest.mark.asyncio
    async def test_read_default_city(self, handlers, mock_weather_client, mock_current_payload):
        mock_weather_client.fetch_current.return_value = UpstreamSuccess(mock_current_payload)

        result = await handlers.read_resource("weather://San%20Francisco/current")

        mock_weather_client.fetch_current.assert_awaited_once_with("San Francisco")
        assert len(result.contents) == 1
        content = result.contents[0]
        assert content.mimeType == "application/json"
        data = json.loads(content.text)
        assert data["temperature"] == 18.3
        assert data["conditions"] == "few clouds"
        assert data["humidity"] == 72
        assert data["wind_speed"] == 5.1
        assert data["timestamp"].endswith("Z")

    @pytest.mark.asyncio
    async def test_read_accepts_unencoded_uri(self, handlers, mock_weather_client, mock_current_payload):
        mock_weather_client.fetch_current.return_value = UpstreamSuccess(mock_current_payload)

        await handlers.read_resource("weather://San Francisco/current")
        mock_weather_client.fetch_current.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_uri_is_not_found_without_network_call(self, handlers, mock_weather_client):
        with pytest.raises(McpError) as exc_info:
            await handlers.read_resource("weather://Nowhere/current")

        assert exc_info.value.error.code == RESOURCE_NOT_FOUND
        assert "weather://Nowhere/current" in exc_info.value.error.message
        mock_weather_client.fetch_current.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upstream_failure_is_internal_error(self, handlers, mock_weather_client):
        mock_weather_client.fetch_current.return_value = UpstreamFailure(
            message="Invalid API key.", error_code="unauthorized", status_code=401
        )

        with pytest.raises(McpError) as exc_info:
            await handlers.read_resource("weather://San%20Francisco/current")

        assert exc_info.value.error.code == types.INTERNAL_ERROR
        assert exc_info.value.error.message == "Weather API error: Invalid API key."


class TestTools:
    """Tests for tool listing and invocation."""

    @pytest.mark.asyncio
    async def test_list_tools_describes_get_forecast(self, handlers):
        tools = await handlers.list_tools()

        assert [tool.name for tool in tools] == ["get_forecast"]
        schema = tools[0].inputSchema
        assert schema["required"] == ["city"]
        assert schema["properties"]["city"]["type"] == "string"
        assert schema["properties"]["days"] == {
            "type": "integer",
            "description": "Number of days (1-5)",
            "minimum": 1,
            "maximum": 5,
        }

    @pytest.mark.asyncio
    async def test_forecast_for_two_days(self, handlers, mock_weather_client, mock_forecast_payload):
        mock_weather_client.fetch_forecast.return_value = UpstreamSuccess(mock_forecast_payload)

        result = await handlers.call_tool(FORECAST_TOOL, {"city": "Paris", "days": 2})

        mock_weather_client.fetch_forecast.assert_awaited_once_with("Paris", 2)
        assert not result.isError
        forecasts = json.loads(result.content[0].text)
        assert forecasts == [
            {"date": "2024-06-01", "temperature": 10.0, "conditions": "sample 0"},
            {"date": "2024-06-02", "temperature": 18.0, "conditions": "sample 8"},
        ]

    @pytest.mark.asyncio
    async def test_days_defaults_to_three(self, handlers, mock_weather_client, mock_forecast_payload):
        mock_weather_client.fetch_forecast.return_value = UpstreamSuccess(mock_forecast_payload)

        result = await handlers.call_tool(FORECAST_TOOL, {"city": "Paris"})

        mock_weather_client.fetch_forecast.assert_awaited_once_with("Paris", 3)
        assert len(json.loads(result.content[0].text)) == 3

    @pytest.mark.asyncio
    async def test_days_capped_at_five(self, handlers, mock_weather_client, make_forecast_payload):
        mock_weather_client.fetch_forecast.return_value = UpstreamSuccess(make_forecast_payload(40))

        result = await handlers.call_tool(FORECAST_TOOL, {"city": "Paris", "days": 9})

        mock_weather_client.fetch_forecast.assert_awaited_once_with("Paris", 5)
        assert len(json.loads(result.content[0].text)) == 5

    @pytest.mark.asyncio
    async def test_short_upstream_listing_is_not_padded(self, handlers, mock_weather_client, make_forecast_payload):
        mock_weather_client.fetch_forecast.return_value = UpstreamSuccess(make_forecast_payload(10))

        result = await handlers.call_tool(FORECAST_TOOL, {"city": "Paris", "days": 4})

        assert len(json.loads(result.content[0].text)) == 2

    @pytest.mark.asyncio
    async def test_unknown_tool_is_method_not_found(self, handlers, mock_weather_client):
        with pytest.raises(McpError) as exc_info:
            await handlers.call_tool("get_tides", {"city": "Paris"})

        assert exc_info.value.error.code == types.METHOD_NOT_FOUND
        assert exc_info.value.error.message == "Unknown tool: get_tides"
        mock_weather_client.fetch_forecast.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("arguments", [
        None,
        {},
        {"city": 7},
        {"city": "Paris", "days": "two"},
        {"city": "Paris", "days": None},
    ])
    async def test_invalid_arguments_are_invalid_params(self, handlers, mock_weather_client, arguments):
        with pytest.raises(McpError) as exc_info:
            await handlers.call_tool(FORECAST_TOOL, arguments)

        assert exc_info.value.error.code == types.INVALID_PARAMS
        mock_weather_client.fetch_forecast.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upstream_failure_is_error_result(self, handlers, mock_weather_client):
        mock_weather_client.fetch_forecast.return_value = UpstreamFailure(
            message="city not found", error_code="not_found", status_code=404
        )

        result = await handlers.call_tool(FORECAST_TOOL, {"city": "Atlantis"})

        assert result.isError is True
        assert result.content[0].text == "Weather API error: city not found"

    @pytest.mark.asyncio
    async def test_transport_failure_uses_generic_message(self, handlers, mock_weather_client):
        mock_weather_client.fetch_forecast.return_value = UpstreamFailure(
            message="request to upstream API failed", error_code="network_error"
        )

        result = await handlers.call_tool(FORECAST_TOOL, {"city": "Paris"})

        assert result.isError is True
        assert "request to upstream API failed" in result.content[0].text


class TestServerWiring:
    """Tests for routing MCP requests through the low-level server."""

    @pytest.fixture
    def server(self, monkeypatch, mock_weather_client):
        monkeypatch.setenv("OPENWEATHER_API_KEY", "test-key")
        return build_server(WeatherSettings(_env_file=None), mock_weather_client).get_server()

    def test_capabilities_advertise_resources_and_tools(self, server):
        options = server.create_initialization_options()

        assert options.server_name == "openweather-mcp"
        assert options.capabilities.resources is not None
        assert options.capabilities.tools is not None

    @pytest.mark.asyncio
    async def test_call_tool_request_routes_to_handlers(self, server, mock_weather_client, mock_forecast_payload):
        mock_weather_client.fetch_forecast.return_value = UpstreamSuccess(mock_forecast_payload)
        request = types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="get_forecast", arguments={"city": "Paris", "days": 2}),
        )

        response = await server.request_handlers[types.CallToolRequest](request)

        assert isinstance(response.root, types.CallToolResult)
        assert len(json.loads(response.root.content[0].text)) == 2

    @pytest.mark.asyncio
    async def test_read_resource_request_propagates_fault(self, server, mock_weather_client):
        request = types.ReadResourceRequest(
            method="resources/read",
            params=types.ReadResourceRequestParams(uri="weather://Nowhere/current"),
        )

        with pytest.raises(McpError) as exc_info:
            await server.request_handlers[types.ReadResourceRequest](request)

        assert exc_info.value.error.code == RESOURCE_NOT_FOUND
        mock_weather_client.fetch_current.assert_not_awaited()
