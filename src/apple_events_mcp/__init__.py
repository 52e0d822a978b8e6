"""apple-events-mcp — MCP server for reminders and calendar events."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "1.0.0"

if TYPE_CHECKING:
    from apple_events_mcp.backend.memory import InMemoryEventStore as InMemoryEventStore
    from apple_events_mcp.server.dispatcher import MCPDispatcher as MCPDispatcher

_LAZY_EXPORTS = {
    "MCPDispatcher": "apple_events_mcp.server.dispatcher",
    "InMemoryEventStore": "apple_events_mcp.backend.memory",
}


def __getattr__(name: str) -> object:
    module_path = _LAZY_EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'apple_events_mcp' has no attribute {name!r}")
