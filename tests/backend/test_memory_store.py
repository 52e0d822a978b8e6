"""Tests for InMemoryEventStore."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import TYPE_CHECKING

import pytest

from apple_events_mcp.backend.errors import (
    AccessDeniedError,
    NoDestinationError,
    NotFoundError,
    PersistenceError,
)
from apple_events_mcp.backend.memory import InMemoryEventStore, StoreState, to_due_date
from apple_events_mcp.backend.models import format_instant

if TYPE_CHECKING:
    from pathlib import Path


def _local(day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    return datetime(2025, 11, day, hour, minute, second).astimezone()


class TestAccess:
    async def test_operations_require_access(self) -> None:
        store = InMemoryEventStore()
        with pytest.raises(AccessDeniedError):
            await store.list_reminder_lists()

    async def test_denied(self) -> None:
        store = InMemoryEventStore(allow_access=False)
        with pytest.raises(AccessDeniedError, match="Access to Reminders denied"):
            await store.request_access()
        with pytest.raises(AccessDeniedError):
            await store.list_calendars()

    async def test_granted(self) -> None:
        store = InMemoryEventStore()
        await store.request_access()
        assert [c.name for c in await store.list_calendars()] == ["Calendar"]


class TestToDueDate:
    def test_date_has_no_time(self) -> None:
        due = to_due_date(date(2025, 11, 15))
        assert due.day == date(2025, 11, 15)
        assert due.time_of_day is None

    def test_datetime_truncated_to_minute(self) -> None:
        due = to_due_date(_local(15, 9, 30, 45))
        assert due.day == date(2025, 11, 15)
        assert due.time_of_day == time(9, 30)


class TestReminderLists:
    async def test_list(self, store: InMemoryEventStore) -> None:
        lists = await store.list_reminder_lists()
        assert [item.name for item in lists] == ["Reminders", "Work"]

    async def test_create(self, store: InMemoryEventStore) -> None:
        list_id = await store.create_reminder_list("Groceries")
        lists = await store.list_reminder_lists()

        assert list_id == lists[-1].id
        assert lists[-1].name == "Groceries"


class TestReminders:
    async def test_create_in_named_list(self, store: InMemoryEventStore) -> None:
        reminder_id = await store.create_reminder("Ship it", "Work", notes="by friday")
        [record] = await store.list_reminders("Work", completed=False)

        assert record.id == reminder_id
        assert record.name == "Ship it"
        assert record.body == "by friday"
        assert record.list_name == "Work"
        assert record.priority == 0

    async def test_create_unknown_list(self, store: InMemoryEventStore) -> None:
        with pytest.raises(NotFoundError, match="List 'Nope' not found"):
            await store.create_reminder("x", "Nope")

    async def test_date_only_due_keeps_no_time(self, store: InMemoryEventStore) -> None:
        await store.create_reminder("Pay rent", "Reminders", due=date(2025, 11, 20))
        [stored] = store.state.reminders
        [record] = await store.list_reminders(None, completed=False)

        assert stored.due is not None
        assert stored.due.time_of_day is None
        assert record.due_date == "2025-11-20"

    async def test_datetime_due_uses_local_components(self, store: InMemoryEventStore) -> None:
        await store.create_reminder("Call", "Reminders", due=_local(20, 14, 5, 59))
        [stored] = store.state.reminders

        assert stored.due is not None
        assert stored.due.day == date(2025, 11, 20)
        assert stored.due.time_of_day == time(14, 5)
        [record] = await store.list_reminders(None, completed=False)
        assert record.due_date == format_instant(_local(20, 14, 5))

    async def test_list_filters_completion(self, store: InMemoryEventStore) -> None:
        done = await store.create_reminder("done", "Reminders")
        await store.create_reminder("open", "Reminders")
        await store.complete_reminder(done)

        open_names = [r.name for r in await store.list_reminders(None, completed=False)]
        done_names = [r.name for r in await store.list_reminders(None, completed=True)]

        assert open_names == ["open"]
        assert done_names == ["done"]

    async def test_list_unknown_list_is_empty(self, store: InMemoryEventStore) -> None:
        await store.create_reminder("x", "Reminders")
        assert await store.list_reminders("Nope", completed=False) == []

    async def test_complete_twice(self, store: InMemoryEventStore) -> None:
        reminder_id = await store.create_reminder("x", "Reminders")
        await store.complete_reminder(reminder_id)
        await store.complete_reminder(reminder_id)

        [record] = await store.list_reminders(None, completed=True)
        assert record.completed is True

    async def test_delete(self, store: InMemoryEventStore) -> None:
        reminder_id = await store.create_reminder("x", "Reminders")
        await store.delete_reminder(reminder_id)

        with pytest.raises(NotFoundError, match="Reminder not found"):
            await store.delete_reminder(reminder_id)

    async def test_update_fields(self, store: InMemoryEventStore) -> None:
        reminder_id = await store.create_reminder("old", "Reminders", notes="keep")
        await store.update_reminder(reminder_id, title="new", priority=1)

        [record] = await store.list_reminders(None, completed=False)
        assert record.name == "new"
        assert record.body == "keep"
        assert record.priority == 1

    async def test_update_clears_due(self, store: InMemoryEventStore) -> None:
        reminder_id = await store.create_reminder("x", "Reminders", due=date(2025, 11, 20))
        await store.update_reminder(reminder_id, clear_due=True)

        [record] = await store.list_reminders(None, completed=False)
        assert record.due_date is None

    async def test_update_missing(self, store: InMemoryEventStore) -> None:
        with pytest.raises(NotFoundError, match="Reminder not found"):
            await store.update_reminder("NOPE", title="x")


class TestTodayReminders:
    async def test_due_today_and_overdue(self, store: InMemoryEventStore) -> None:
        await store.create_reminder("today-date", "Reminders", due=date(2025, 11, 15))
        await store.create_reminder("today-late", "Reminders", due=_local(15, 23, 59))
        await store.create_reminder("overdue", "Work", due=date(2025, 11, 14))
        await store.create_reminder("tomorrow", "Reminders", due=date(2025, 11, 16))
        await store.create_reminder("undated", "Reminders")
        done = await store.create_reminder("done", "Reminders", due=date(2025, 11, 15))
        await store.complete_reminder(done)

        records = {r.name: r for r in await store.list_today_reminders()}

        assert set(records) == {"today-date", "today-late", "overdue"}
        assert records["overdue"].past_due is True
        assert records["today-date"].past_due is None
        assert "pastDue" not in records["today-late"].to_dict()


class TestCalendars:
    async def test_list(self, store: InMemoryEventStore) -> None:
        assert [c.name for c in await store.list_calendars()] == ["Calendar", "Home"]

    async def test_create_uses_first_calendar_by_default(self, store: InMemoryEventStore) -> None:
        await store.create_event("Lunch", _local(15, 12), _local(15, 13))
        [event] = await store.list_events(None, _local(15), _local(16))

        assert event.calendar_name == "Calendar"
        assert event.status == "confirmed"
        assert event.start_date == format_instant(_local(15, 12))

    async def test_create_in_named_calendar(self, store: InMemoryEventStore) -> None:
        await store.create_event(
            "Dentist",
            _local(17, 9),
            _local(17, 10),
            calendar_name="Home",
            location="Main St",
            url="https://example.com/call",
        )
        [event] = await store.list_events("Home", _local(17), _local(18))

        assert event.location == "Main St"
        assert event.url == "https://example.com/call"

    async def test_create_unknown_calendar(self, store: InMemoryEventStore) -> None:
        with pytest.raises(NotFoundError, match="Calendar 'Work' not found"):
            await store.create_event("x", _local(15, 9), _local(15, 10), calendar_name="Work")

    async def test_create_without_any_calendar(self) -> None:
        store = InMemoryEventStore(calendars=())
        await store.request_access()

        with pytest.raises(NoDestinationError, match="No default calendar available"):
            await store.create_event("x", _local(15, 9), _local(15, 10))

    async def test_list_events_overlap_and_order(self, store: InMemoryEventStore) -> None:
        await store.create_event("late", _local(15, 18), _local(15, 19))
        await store.create_event("early", _local(15, 8), _local(15, 9))
        await store.create_event("spanning", _local(14, 22), _local(15, 1))
        await store.create_event("outside", _local(16, 8), _local(16, 9))

        events = await store.list_events(None, _local(15), _local(16))
        assert [e.title for e in events] == ["spanning", "early", "late"]

    async def test_list_events_unknown_calendar_is_empty(self, store: InMemoryEventStore) -> None:
        await store.create_event("x", _local(15, 9), _local(15, 10))
        assert await store.list_events("Nope", _local(15), _local(16)) == []

    async def test_today_events(self, store: InMemoryEventStore) -> None:
        await store.create_event("today", _local(15, 9), _local(15, 10), calendar_name="Home")
        await store.create_event("yesterday", _local(14, 9), _local(14, 10))

        assert [e.title for e in await store.list_today_events()] == ["today"]

    async def test_update_event(self, store: InMemoryEventStore) -> None:
        event_id = await store.create_event(
            "x", _local(15, 9), _local(15, 10), url="https://example.com"
        )
        await store.update_event(event_id, title="y", end=_local(15, 11), url="")

        [event] = await store.list_events(None, _local(15), _local(16))
        assert event.title == "y"
        assert event.end_date == format_instant(_local(15, 11))
        assert event.url is None

    async def test_delete_event(self, store: InMemoryEventStore) -> None:
        event_id = await store.create_event("x", _local(15, 9), _local(15, 10))
        await store.delete_event(event_id)

        with pytest.raises(NotFoundError, match="Event not found"):
            await store.delete_event(event_id)
        with pytest.raises(NotFoundError, match="Event not found"):
            await store.update_event(event_id, title="z")


class TestPersistence:
    async def test_state_survives_restart(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        store = InMemoryEventStore(path=path)
        await store.request_access()
        reminder_id = await store.create_reminder("persist me", "Reminders", due=date(2025, 11, 15))
        await store.create_event("meeting", _local(15, 9), _local(15, 10))

        reopened = InMemoryEventStore(path=path)
        await reopened.request_access()
        [reminder] = await reopened.list_reminders(None, completed=False)
        events = await reopened.list_events(None, _local(15), _local(16))

        assert reminder.id == reminder_id
        assert reminder.due_date == "2025-11-15"
        assert [e.title for e in events] == ["meeting"]

    def test_snapshot_round_trip(self) -> None:
        state = StoreState()
        assert StoreState.restore(state.snapshot()) == state

    async def test_no_path_writes_nothing(self, tmp_path: Path, store: InMemoryEventStore) -> None:
        await store.create_reminder_list("x")
        assert list(tmp_path.iterdir()) == []

    async def test_save_leaves_no_temp_files(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        store = InMemoryEventStore(path=path)
        await store.request_access()
        await store.create_reminder("one", "Reminders")
        await store.create_reminder("two", "Reminders")
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    async def test_failed_save_rolls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        store = InMemoryEventStore(path=path)
        await store.request_access()
        path.mkdir()

        with pytest.raises(PersistenceError, match="Failed to save event store"):
            await store.create_reminder("lost", "Reminders")

        assert await store.list_reminders(None, completed=False) == []
        assert [p.name for p in tmp_path.iterdir()] == ["store.json"]

    async def test_failed_update_keeps_previous_values(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        store = InMemoryEventStore(path=path)
        await store.request_access()
        reminder_id = await store.create_reminder("original", "Reminders")
        path.unlink()
        path.mkdir()

        with pytest.raises(PersistenceError):
            await store.update_reminder(reminder_id, title="renamed", priority=1)
        with pytest.raises(PersistenceError):
            await store.delete_reminder(reminder_id)

        [reminder] = await store.list_reminders(None, completed=False)
        assert (reminder.name, reminder.priority) == ("original", 0)

    async def test_unencodable_text_is_not_stored(self, tmp_path: Path) -> None:
        path = tmp_path / "store.json"
        store = InMemoryEventStore(path=path)
        await store.request_access()

        with pytest.raises(PersistenceError):
            await store.create_reminder("bad \ud800", "Reminders")
        assert await store.list_reminders(None, completed=False) == []

        await store.create_reminder("good", "Reminders")
        reopened = InMemoryEventStore(path=path)
        await reopened.request_access()
        assert [r.name for r in await reopened.list_reminders(None, completed=False)] == ["good"]

    @pytest.mark.parametrize("content", [b"", b"{not json", b'{"reminders": [{"id": 1}]}'])
    def test_corrupt_file_raises_persistence_error(self, tmp_path: Path, content: bytes) -> None:
        path = tmp_path / "store.json"
        path.write_bytes(content)
        with pytest.raises(PersistenceError, match="Failed to load event store"):
            InMemoryEventStore(path=path)


def test_ids_are_unique_uppercase() -> None:
    store = InMemoryEventStore()
    ids = {c.id for c in store.state.reminder_lists + store.state.calendars}
    assert len(ids) == 2
    assert all(i == i.upper() for i in ids)
