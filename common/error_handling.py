"""ABOUTME: Shared error handling utilities for the weather MCP server.

Two kinds of failure leave the server:

- Protocol faults: McpError instances that the MCP session turns into JSON-RPC
  error responses (bad arguments, unknown tool, unknown resource).
- Tool-level errors: a successful response whose CallToolResult is flagged
  with isError=True, so the host can show that the tool ran but failed.
"""

from typing import Any, Dict, Optional

from mcp.shared.exceptions import McpError
from mcp.types import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    CallToolResult,
    ErrorData,
    TextContent,
)


# =============================================================================
# Error Code Constants
# =============================================================================

# Network and fetch errors
ERROR_TIMEOUT: str = "timeout"
ERROR_FETCH_FAILED: str = "fetch_failed"
ERROR_NETWORK_ERROR: str = "network_error"

# Resource errors
ERROR_NOT_FOUND: str = "not_found"
ERROR_RATE_LIMITED: str = "rate_limited"
ERROR_UNAUTHORIZED: str = "unauthorized"

# JSON-RPC code MCP uses for an unknown resource URI
RESOURCE_NOT_FOUND: int = -32002


# =============================================================================
# HTTP Status Code Helpers
# =============================================================================

class HTTPStatusCodes:
    """Helper methods for HTTP status code checks.

    Provides semantic methods to check HTTP status codes instead of
    hardcoding numeric values throughout the codebase.
    """

    @staticmethod
    def is_rate_limit(status_code: int) -> bool:
        """Check if status code is 429 (Too Many Requests)."""
        return status_code == 429

    @staticmethod
    def is_auth_error(status_code: int) -> bool:
        """Check if status code is 401 (Unauthorized) or 403 (Forbidden).

        OpenWeatherMap answers 401 for a missing or revoked API key.
        """
        return status_code in (401, 403)

    @staticmethod
    def is_not_found(status_code: int) -> bool:
        """Check if status code is 404 (Not Found).

        Example:
            if HTTPStatusCodes.is_not_found(response.status_code):
                logger.warning("City not known upstream")
        """
        return status_code == 404

    @staticmethod
    def is_server_error(status_code: int) -> bool:
        """Check if status code is in range 500-599."""
        return 500 <= status_code < 600


# =============================================================================
# Protocol Faults
# =============================================================================

def protocol_error(code: int, message: str) -> McpError:
    """Build an McpError carrying a JSON-RPC error code and message."""
    return McpError(ErrorData(code=code, message=message))


def invalid_params_error(message: str) -> McpError:
    return protocol_error(INVALID_PARAMS, message)


def method_not_found_error(message: str) -> McpError:
    return protocol_error(METHOD_NOT_FOUND, message)


def resource_not_found_error(uri: str) -> McpError:
    return protocol_error(RESOURCE_NOT_FOUND, f"Unknown resource: {uri}")


def internal_error(message: str) -> McpError:
    return protocol_error(INTERNAL_ERROR, message)


# =============================================================================
# Tool-Level Errors
# =============================================================================

def create_error_result(
    error_message: str,
    error_code: str,
    error_type: str = "error",
    additional_metadata: Optional[Dict[str, Any]] = None
) -> CallToolResult:
    """Create standardized error CallToolResult.

    Args:
        error_message: Human-readable error message for users and LLMs
        error_code: Machine-readable error code (use ERROR_* constants)
        error_type: Error category/type (e.g., "upstream_error")
        additional_metadata: Additional context for debugging (optional)

    Returns:
        CallToolResult with isError=True and the message as its only text block

    Example:
        result = create_error_result(
            error_message="Weather API error: city not found",
            error_code=ERROR_NOT_FOUND,
            error_type="upstream_error",
            additional_metadata={"city": "Atlantis"}
        )
    """
    metadata = {
        "error_type": error_type,
        "error_code": error_code,
    }

    if additional_metadata:
        metadata.update(additional_metadata)

    return CallToolResult(
        content=[TextContent(type="text", text=error_message)],
        isError=True,
        metadata=metadata
    )
