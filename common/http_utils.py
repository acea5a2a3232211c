"""ABOUTME: HTTP client utilities for MCP tools - async HTTP operations with standard error handling."""

from typing import Any, Dict, Optional, Tuple

import httpx

from .error_handling import (
    ERROR_FETCH_FAILED,
    ERROR_NETWORK_ERROR,
    ERROR_NOT_FOUND,
    ERROR_RATE_LIMITED,
    ERROR_TIMEOUT,
    ERROR_UNAUTHORIZED,
    HTTPStatusCodes,
)

# Constants
DEFAULT_HTTP_TIMEOUT = 10.0
MIN_HTTP_TIMEOUT = 1.0
MAX_HTTP_TIMEOUT = 300.0

GENERIC_REQUEST_FAILURE = "request to upstream API failed"


async def safe_http_get(
    client: httpx.AsyncClient,
    url: str,
    params: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None
) -> httpx.Response:
    """Perform async HTTP GET on a shared client, raising for non-2xx status."""
    response = await client.get(url, params=params, headers=headers)
    response.raise_for_status()
    return response


def interpret_http_error(status_code: int) -> str:
    """Map HTTP status code to MCP error code."""
    if HTTPStatusCodes.is_rate_limit(status_code):
        return ERROR_RATE_LIMITED
    elif HTTPStatusCodes.is_auth_error(status_code):
        return ERROR_UNAUTHORIZED
    elif HTTPStatusCodes.is_not_found(status_code):
        return ERROR_NOT_FOUND
    elif HTTPStatusCodes.is_server_error(status_code):
        return ERROR_FETCH_FAILED
    else:
        return ERROR_NETWORK_ERROR


def extract_error_message(response: httpx.Response) -> Optional[str]:
    """Pull the provider's error message out of a JSON error body.

    Most JSON APIs (OpenWeatherMap included) answer errors with
    {"cod": ..., "message": "..."}. Returns None when the body is not JSON or
    carries no usable message.
    """
    try:
        body = response.json()
    except ValueError:
        return None

    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


def describe_http_exception(exc: httpx.HTTPError) -> Tuple[str, str, Optional[int]]:
    """Classify an httpx exception.

    Returns:
        Tuple of (error_code, message, status_code). The message is the
        provider's own when the response carried one, otherwise the exception
        text, otherwise a generic failure message.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        message = extract_error_message(exc.response) or str(exc) or GENERIC_REQUEST_FAILURE
        return interpret_http_error(status_code), message, status_code

    message = str(exc) or GENERIC_REQUEST_FAILURE
    if isinstance(exc, httpx.TimeoutException):
        return ERROR_TIMEOUT, message, None
    return ERROR_NETWORK_ERROR, message, None


__all__ = [
    "DEFAULT_HTTP_TIMEOUT",
    "MIN_HTTP_TIMEOUT",
    "MAX_HTTP_TIMEOUT",
    "GENERIC_REQUEST_FAILURE",
    "safe_http_get",
    "interpret_http_error",
    "extract_error_message",
    "describe_http_exception",
    "HTTPStatusCodes",
]
