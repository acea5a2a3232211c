"""ABOUTME: Base class for MCP servers with common initialization, logging, and stdio serving.

Uses the low-level server from the official MCP SDK (modelcontextprotocol/python-sdk)
so handlers can raise McpError and have it reach the host as a JSON-RPC error
instead of being folded into a tool result.
"""

import asyncio
import logging
import signal
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server


def setup_logging(logger_name: str, level: int = logging.INFO) -> logging.Logger:
    """Configure logging for an MCP server.

    basicConfig writes to stderr, which keeps stdout free for the stdio transport.

    Args:
        logger_name: Name of the logger (typically __name__)
        level: Logging level (default: logging.INFO)

    Returns:
        Configured logger instance
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return logging.getLogger(logger_name)


class RequestHandlers(Protocol):
    """The four MCP operations a server exposes to the host."""

    async def list_resources(self) -> List[types.Resource]: ...

    async def read_resource(self, uri: str) -> types.ReadResourceResult: ...

    async def list_tools(self) -> List[types.Tool]: ...

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult: ...


class MCPServerBase:
    """Base class for MCP servers with common patterns.

    Provides:
    - Standard MCP server initialization
    - Consistent logging setup
    - Handler registration for resources and tools
    - stdio serving with signal-driven shutdown
    """

    def __init__(self, server_name: str, version: Optional[str] = None, log_level: int = logging.INFO):
        """Initialize MCP server base.

        Args:
            server_name: Name reported to the host during initialization
            version: Server version reported to the host
            log_level: Logging level for the process
        """
        self.server_name = server_name
        self.server = Server(server_name, version=version)
        self.logger = setup_logging(server_name, log_level)

    def get_logger(self) -> logging.Logger:
        return self.logger

    def get_server(self) -> Server:
        """Get the low-level MCP server instance."""
        return self.server

    def register_handlers(self, handlers: RequestHandlers) -> None:
        """Route MCP requests to a handler object.

        Handlers are installed straight into the server's request table.
        McpError raised by a handler becomes a JSON-RPC error response; any
        other exception is reported by the session as a generic error.

        Args:
            handlers: Object implementing list/read resources and list/call tools
        """

        async def list_resources(req: types.ListResourcesRequest) -> types.ServerResult:
            resources = await handlers.list_resources()
            return types.ServerResult(types.ListResourcesResult(resources=resources))

        async def read_resource(req: types.ReadResourceRequest) -> types.ServerResult:
            return types.ServerResult(await handlers.read_resource(str(req.params.uri)))

        async def list_tools(req: types.ListToolsRequest) -> types.ServerResult:
            tools = await handlers.list_tools()
            return types.ServerResult(types.ListToolsResult(tools=tools))

        async def call_tool(req: types.CallToolRequest) -> types.ServerResult:
            return types.ServerResult(await handlers.call_tool(req.params.name, req.params.arguments))

        self.server.request_handlers[types.ListResourcesRequest] = list_resources
        self.server.request_handlers[types.ReadResourceRequest] = read_resource
        self.server.request_handlers[types.ListToolsRequest] = list_tools
        self.server.request_handlers[types.CallToolRequest] = call_tool

    async def run_stdio(self, on_shutdown: Optional[Callable[[], Awaitable[None]]] = None) -> None:
        """Serve MCP over stdin/stdout until the host disconnects or a signal arrives.

        SIGINT and SIGTERM cancel the serving task. In-flight requests are not drained.

        Args:
            on_shutdown: Coroutine function awaited once serving stops
        """
        loop = asyncio.get_running_loop()
        serving_task = asyncio.current_task()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, serving_task.cancel)
            except NotImplementedError:
                # Windows event loops have no signal handlers; Ctrl+C raises KeyboardInterrupt instead
                pass

        try:
            async with stdio_server() as (read_stream, write_stream):
                self.logger.info(f"{self.server_name} MCP server running on stdio")
                await self.server.run(
                    read_stream,
                    write_stream,
                    self.server.create_initialization_options(),
                )
        except asyncio.CancelledError:
            self.logger.info(f"{self.server_name} received shutdown signal, closing connection")
        finally:
            if on_shutdown is not None:
                await on_shutdown()

    def create_success_result(
        self,
        content: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> types.CallToolResult:
        """Create standardized success result.

        Args:
            content: The response text to return
            metadata: Optional metadata dictionary

        Returns:
            CallToolResult with standardized success format

        Examples:
            >>> result = server.create_success_result("[]")
            >>> result = server.create_success_result("[...]", {"entries": 3})
        """
        text_content = types.TextContent(type="text", text=content)
        if metadata:
            return types.CallToolResult(content=[text_content], metadata=metadata)
        return types.CallToolResult(content=[text_content])

    def log_tool_start(self, tool_name: str, **params) -> None:
        """Log tool invocation with parameters.

        Examples:
            >>> server.log_tool_start("get_forecast", city="Paris", days=2)
        """
        if params:
            param_str = ", ".join(f"{k}={v}" for k, v in params.items())
            self.logger.info(f"{tool_name} started: {param_str}")
        else:
            self.logger.info(f"{tool_name} started")

    def log_tool_complete(self, tool_name: str, **metrics) -> None:
        """Log tool completion with execution metrics."""
        if metrics:
            metric_str = ", ".join(f"{k}={v}" for k, v in metrics.items())
            self.logger.info(f"{tool_name} completed: {metric_str}")
        else:
            self.logger.info(f"{tool_name} completed")

    def log_tool_error(
        self,
        tool_name: str,
        error_code: str,
        error_message: str,
        **context
    ) -> None:
        """Log tool error with context.

        Args:
            tool_name: Name of the tool that failed
            error_code: Machine-readable error code
            error_message: Human-readable error message
            **context: Additional error context
        """
        context_str = ", ".join(f"{k}={v}" for k, v in context.items()) if context else ""
        if context_str:
            self.logger.error(f"{tool_name} error [{error_code}]: {error_message} ({context_str})")
        else:
            self.logger.error(f"{tool_name} error [{error_code}]: {error_message}")
