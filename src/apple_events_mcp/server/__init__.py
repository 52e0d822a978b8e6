"""MCP server — dispatcher and transports."""

from apple_events_mcp.server.dispatcher import INSTRUCTIONS, SERVER_INFO, MCPDispatcher
from apple_events_mcp.server.transport import HTTPTransport, StdioTransport, create_http_app

__all__ = [
    "INSTRUCTIONS",
    "SERVER_INFO",
    "HTTPTransport",
    "MCPDispatcher",
    "StdioTransport",
    "create_http_app",
]
