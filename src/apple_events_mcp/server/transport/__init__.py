"""Transports that feed raw messages into :class:`MCPDispatcher`."""

from apple_events_mcp.server.transport.http import HTTPTransport, create_http_app
from apple_events_mcp.server.transport.stdio import StdioTransport

__all__ = ["HTTPTransport", "StdioTransport", "create_http_app"]
