"""Shared fixtures: an in-memory store pinned to a fixed "now"."""

from __future__ import annotations

from datetime import datetime

import pytest

from apple_events_mcp.backend.memory import InMemoryEventStore
from apple_events_mcp.server.dispatcher import MCPDispatcher

# Local noon, so "today" never straddles midnight.
NOW = datetime(2025, 11, 15, 12, 0).astimezone()


def fixed_clock() -> datetime:
    return NOW


@pytest.fixture
async def store() -> InMemoryEventStore:
    backend = InMemoryEventStore(
        reminder_lists=("Reminders", "Work"),
        calendars=("Calendar", "Home"),
        clock=fixed_clock,
    )
    await backend.request_access()
    return backend


@pytest.fixture
def dispatcher(store: InMemoryEventStore) -> MCPDispatcher:
    return MCPDispatcher(store)


@pytest.fixture
def now() -> datetime:
    return NOW
