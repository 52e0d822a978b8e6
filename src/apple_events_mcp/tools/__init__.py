"""Tool layer — static catalog, argument coercion and tool handlers."""

from apple_events_mcp.tools import registry
from apple_events_mcp.tools.arguments import CLEAR, ToolArguments, parse_date_literal
from apple_events_mcp.tools.handlers import HANDLERS, ToolHandler

__all__ = [
    "CLEAR",
    "HANDLERS",
    "ToolArguments",
    "ToolHandler",
    "parse_date_literal",
    "registry",
]
