"""EventsBackend protocol — the event store the MCP tools operate on.

The store holds two kinds of entity: reminders (grouped in reminder lists)
and events (grouped in calendars).  Implementations raise
:class:`~apple_events_mcp.backend.errors.BackendError` subclasses with a
human-readable message on failure.

Date arguments arrive already parsed: a :class:`datetime.date` means a
date-only value in the local time zone, a :class:`datetime.datetime` is
timezone-aware.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import date, datetime

    from apple_events_mcp.backend.models import CollectionRecord, EventRecord, ReminderRecord


@runtime_checkable
class EventsBackend(Protocol):
    """Async interface over reminders and calendar events."""

    async def request_access(self) -> None:
        """Acquire access to reminders and calendars; raise if refused."""
        ...

    # -- reminder lists -------------------------------------------------

    async def list_reminder_lists(self) -> list[CollectionRecord]: ...

    async def create_reminder_list(self, name: str) -> str:
        """Create a reminder list and return its identifier."""
        ...

    # -- reminders ------------------------------------------------------

    async def list_today_reminders(self) -> list[ReminderRecord]:
        """Incomplete reminders due today or earlier."""
        ...

    async def list_reminders(
        self, list_name: str | None, completed: bool
    ) -> list[ReminderRecord]:
        """Reminders in *list_name* (all lists when ``None``) matching *completed*."""
        ...

    async def create_reminder(
        self,
        title: str,
        list_name: str,
        notes: str | None = None,
        due: date | datetime | None = None,
    ) -> str: ...

    async def complete_reminder(self, reminder_id: str) -> None: ...

    async def delete_reminder(self, reminder_id: str) -> None: ...

    async def update_reminder(
        self,
        reminder_id: str,
        *,
        title: str | None = None,
        notes: str | None = None,
        due: date | datetime | None = None,
        clear_due: bool = False,
        priority: int | None = None,
    ) -> None:
        """Update the given fields; ``None`` leaves a field unchanged."""
        ...

    # -- calendars and events -------------------------------------------

    async def list_calendars(self) -> list[CollectionRecord]: ...

    async def list_today_events(self) -> list[EventRecord]: ...

    async def list_events(
        self, calendar_name: str | None, start: datetime, end: datetime
    ) -> list[EventRecord]:
        """Events overlapping ``[start, end)``."""
        ...

    async def create_event(
        self,
        title: str,
        start: datetime,
        end: datetime,
        *,
        calendar_name: str | None = None,
        is_all_day: bool = False,
        location: str | None = None,
        notes: str | None = None,
        url: str | None = None,
    ) -> str: ...

    async def update_event(
        self,
        event_id: str,
        *,
        title: str | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        location: str | None = None,
        notes: str | None = None,
        url: str | None = None,
    ) -> None:
        """Update the given fields; an empty *url* clears it."""
        ...

    async def delete_event(self, event_id: str) -> None: ...
