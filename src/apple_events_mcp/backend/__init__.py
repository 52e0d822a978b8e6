"""Event-store backends — the facade the MCP tools call into."""

from apple_events_mcp.backend.base import EventsBackend
from apple_events_mcp.backend.errors import (
    AccessDeniedError,
    BackendError,
    NoDestinationError,
    NotFoundError,
    PersistenceError,
)
from apple_events_mcp.backend.memory import InMemoryEventStore
from apple_events_mcp.backend.models import (
    CollectionRecord,
    DueDate,
    EventRecord,
    ReminderRecord,
)

__all__ = [
    "AccessDeniedError",
    "BackendError",
    "CollectionRecord",
    "DueDate",
    "EventRecord",
    "EventsBackend",
    "InMemoryEventStore",
    "NoDestinationError",
    "NotFoundError",
    "PersistenceError",
    "ReminderRecord",
]
