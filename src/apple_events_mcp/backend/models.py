"""Records returned by event-store backends.

Field aliases follow the camelCase keys MCP clients of this server already
consume (``dueDate``, ``listName``, ``isAllDay`` ...).  Use :meth:`to_dict`
to get the wire form with unset optional keys dropped.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from typing import Any

from pydantic import BaseModel, Field


def format_instant(value: datetime) -> str:
    """ISO-8601 in UTC with a ``Z`` designator, second precision."""
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


class DueDate(BaseModel):
    """A reminder due date as calendar components.

    ``time_of_day`` is ``None`` for a date-only due date ("due today"), which is
    different from a due date at midnight.  ``time_of_day`` is local wall-clock time.
    """

    day: date
    time_of_day: time | None = None

    @property
    def has_time(self) -> bool:
        return self.time_of_day is not None

    def to_local_datetime(self) -> datetime:
        return datetime.combine(self.day, self.time_of_day or time()).astimezone()

    def format(self) -> str:
        if self.time_of_day is None:
            return self.day.isoformat()
        return format_instant(self.to_local_datetime())


class _Record(BaseModel):
    model_config = {"populate_by_name": True}

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class CollectionRecord(_Record):
    """A reminder list or an event calendar."""

    id: str
    name: str


class ReminderRecord(_Record):
    id: str
    name: str
    completed: bool
    body: str | None = None
    due_date: str | None = Field(default=None, alias="dueDate")
    past_due: bool | None = Field(default=None, alias="pastDue")
    list_name: str | None = Field(default=None, alias="listName")
    priority: int = 0


class EventRecord(_Record):
    id: str
    title: str
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")
    is_all_day: bool = Field(alias="isAllDay")
    location: str | None = None
    notes: str | None = None
    calendar_name: str | None = Field(default=None, alias="calendarName")
    url: str | None = None
    status: str | None = None
