"""ABOUTME: Common MCP server utilities and shared infrastructure."""

from .mcp_base import MCPServerBase, setup_logging
from .error_handling import (
    # Error code constants
    ERROR_TIMEOUT,
    ERROR_FETCH_FAILED,
    ERROR_NETWORK_ERROR,
    ERROR_NOT_FOUND,
    ERROR_RATE_LIMITED,
    ERROR_UNAUTHORIZED,
    RESOURCE_NOT_FOUND,
    # HTTP status code helpers
    HTTPStatusCodes,
    # Error creation functions
    create_error_result,
    invalid_params_error,
    method_not_found_error,
    resource_not_found_error,
    internal_error,
)

__all__ = [
    "MCPServerBase",
    "setup_logging",
    # Error code constants
    "ERROR_TIMEOUT",
    "ERROR_FETCH_FAILED",
    "ERROR_NETWORK_ERROR",
    "ERROR_NOT_FOUND",
    "ERROR_RATE_LIMITED",
    "ERROR_UNAUTHORIZED",
    "RESOURCE_NOT_FOUND",
    # HTTP status code helpers
    "HTTPStatusCodes",
    # Error creation functions
    "create_error_result",
    "invalid_params_error",
    "method_not_found_error",
    "resource_not_found_error",
    "internal_error",
]
