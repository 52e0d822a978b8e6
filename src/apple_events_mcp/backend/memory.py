"""In-memory event store.

:class:`InMemoryEventStore` implements :class:`EventsBackend` with plain
Python state.  Give it a ``path`` and the whole store is serialised to JSON
after every mutation and restored on construction, which is enough for a
single-process server.

Mutations are transactional: each one edits a copy of the state, the copy is
written to disk (atomically, off the event loop), and only then does it
replace the live state.  A failed save therefore leaves both memory and disk
as they were.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import tempfile
import uuid
from collections.abc import AsyncIterator, Callable, Iterable
from datetime import date, datetime, time, timedelta
from pathlib import Path

from pydantic import BaseModel, Field

from apple_events_mcp.backend.errors import (
    AccessDeniedError,
    NoDestinationError,
    NotFoundError,
    PersistenceError,
)
from apple_events_mcp.backend.models import (
    CollectionRecord,
    DueDate,
    EventRecord,
    ReminderRecord,
    format_instant,
)

logger = logging.getLogger(__name__)

DEFAULT_REMINDER_LIST = "Reminders"
DEFAULT_CALENDAR = "Calendar"


def _new_id() -> str:
    return str(uuid.uuid4()).upper()


def _local_now() -> datetime:
    return datetime.now().astimezone()


def to_due_date(value: date | datetime) -> DueDate:
    """Convert a parsed due date into calendar components.

    Date-times are moved into the local zone and truncated to the minute;
    plain dates keep no time of day at all.
    """
    if isinstance(value, datetime):
        local = value.astimezone()
        return DueDate(day=local.date(), time_of_day=time(local.hour, local.minute))
    return DueDate(day=value)


# ---------------------------------------------------------------------------
# Stored state
# ---------------------------------------------------------------------------


class StoredCollection(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str


class StoredReminder(BaseModel):
    id: str = Field(default_factory=_new_id)
    list_id: str
    title: str
    notes: str | None = None
    due: DueDate | None = None
    completed: bool = False
    priority: int = 0


class StoredEvent(BaseModel):
    id: str = Field(default_factory=_new_id)
    calendar_id: str
    title: str
    start: datetime
    end: datetime
    is_all_day: bool = False
    location: str | None = None
    notes: str | None = None
    url: str | None = None
    status: str = "confirmed"


class StoreState(BaseModel):
    """Everything the store holds; also the on-disk snapshot format."""

    reminder_lists: list[StoredCollection] = []
    reminders: list[StoredReminder] = []
    calendars: list[StoredCollection] = []
    events: list[StoredEvent] = []

    def snapshot(self) -> bytes:
        return self.model_dump_json(indent=2).encode()

    @classmethod
    def restore(cls, data: bytes) -> StoreState:
        return cls.model_validate_json(data)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


def _write_atomic(path: Path, data: bytes) -> None:
    """Write *data* to a sibling temp file, then rename it over *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


class InMemoryEventStore:
    """Dict-and-list backed :class:`EventsBackend` implementation."""

    def __init__(
        self,
        *,
        path: Path | None = None,
        allow_access: bool = True,
        reminder_lists: Iterable[str] = (DEFAULT_REMINDER_LIST,),
        calendars: Iterable[str] = (DEFAULT_CALENDAR,),
        clock: Callable[[], datetime] = _local_now,
    ) -> None:
        self._path = path
        self._allow_access = allow_access
        self._granted = False
        self._clock = clock
        self._write_lock = asyncio.Lock()

        if path is not None and path.exists():
            self._state = self._load(path)
        else:
            self._state = StoreState(
                reminder_lists=[StoredCollection(name=n) for n in reminder_lists],
                calendars=[StoredCollection(name=n) for n in calendars],
            )

    @property
    def state(self) -> StoreState:
        return self._state

    async def request_access(self) -> None:
        if not self._allow_access:
            raise AccessDeniedError("Access to Reminders denied")
        self._granted = True

    # -- reminder lists -------------------------------------------------

    async def list_reminder_lists(self) -> list[CollectionRecord]:
        self._require_access()
        return [CollectionRecord(id=c.id, name=c.name) for c in self._state.reminder_lists]

    async def create_reminder_list(self, name: str) -> str:
        self._require_access()
        collection = StoredCollection(name=name)
        async with self._transaction() as state:
            state.reminder_lists.append(collection)
        logger.info("Created reminder list '%s' with ID: %s", name, collection.id)
        return collection.id

    # -- reminders ------------------------------------------------------

    async def list_today_reminders(self) -> list[ReminderRecord]:
        self._require_access()
        start_of_today, start_of_tomorrow = self._today_bounds()

        records: list[ReminderRecord] = []
        for reminder in self._state.reminders:
            if reminder.completed or reminder.due is None:
                continue
            due_at = reminder.due.to_local_datetime()
            if due_at >= start_of_tomorrow:
                continue
            record = self._reminder_record(reminder)
            if due_at < start_of_today:
                record.past_due = True
            records.append(record)

        logger.debug("Found %d reminders due today or past due", len(records))
        return records

    async def list_reminders(
        self, list_name: str | None, completed: bool
    ) -> list[ReminderRecord]:
        self._require_access()
        if list_name is None:
            list_ids = {c.id for c in self._state.reminder_lists}
        else:
            list_ids = {c.id for c in self._state.reminder_lists if c.name == list_name}
            if not list_ids:
                logger.info("List '%s' not found", list_name)
                return []

        return [
            self._reminder_record(r)
            for r in self._state.reminders
            if r.list_id in list_ids and r.completed == completed
        ]

    async def create_reminder(
        self,
        title: str,
        list_name: str,
        notes: str | None = None,
        due: date | datetime | None = None,
    ) -> str:
        self._require_access()
        async with self._transaction() as state:
            collection = _find_by_name(state.reminder_lists, list_name)
            if collection is None:
                raise NotFoundError(f"List '{list_name}' not found")

            reminder = StoredReminder(
                list_id=collection.id,
                title=title,
                notes=notes,
                due=to_due_date(due) if due is not None else None,
            )
            state.reminders.append(reminder)
        return reminder.id

    async def complete_reminder(self, reminder_id: str) -> None:
        self._require_access()
        async with self._transaction() as state:
            _get_reminder(state, reminder_id).completed = True

    async def delete_reminder(self, reminder_id: str) -> None:
        self._require_access()
        async with self._transaction() as state:
            state.reminders.remove(_get_reminder(state, reminder_id))

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
        self._require_access()
        async with self._transaction() as state:
            reminder = _get_reminder(state, reminder_id)
            if title is not None:
                reminder.title = title
            if notes is not None:
                reminder.notes = notes
            if clear_due:
                reminder.due = None
            elif due is not None:
                reminder.due = to_due_date(due)
            if priority is not None:
                reminder.priority = priority

    # -- calendars and events -------------------------------------------

    async def list_calendars(self) -> list[CollectionRecord]:
        self._require_access()
        return [CollectionRecord(id=c.id, name=c.name) for c in self._state.calendars]

    async def list_today_events(self) -> list[EventRecord]:
        start_of_today, start_of_tomorrow = self._today_bounds()
        return await self.list_events(None, start_of_today, start_of_tomorrow)

    async def list_events(
        self, calendar_name: str | None, start: datetime, end: datetime
    ) -> list[EventRecord]:
        self._require_access()
        if calendar_name is None:
            calendar_ids = {c.id for c in self._state.calendars}
        else:
            calendar_ids = {c.id for c in self._state.calendars if c.name == calendar_name}
            if not calendar_ids:
                logger.info("Calendar '%s' not found", calendar_name)
                return []

        matching = [
            e
            for e in self._state.events
            if e.calendar_id in calendar_ids and e.start < end and e.end > start
        ]
        matching.sort(key=lambda e: e.start)
        return [self._event_record(e) for e in matching]

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
    ) -> str:
        self._require_access()
        async with self._transaction() as state:
            if calendar_name is not None:
                calendar = _find_by_name(state.calendars, calendar_name)
                if calendar is None:
                    raise NotFoundError(f"Calendar '{calendar_name}' not found")
            elif state.calendars:
                calendar = state.calendars[0]
            else:
                raise NoDestinationError("No default calendar available")

            event = StoredEvent(
                calendar_id=calendar.id,
                title=title,
                start=start,
                end=end,
                is_all_day=is_all_day,
                location=location,
                notes=notes,
                url=url or None,
            )
            state.events.append(event)
        logger.info("Created event '%s' with ID: %s", title, event.id)
        return event.id

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
        self._require_access()
        async with self._transaction() as state:
            event = _get_event(state, event_id)
            if title is not None:
                event.title = title
            if start is not None:
                event.start = start
            if end is not None:
                event.end = end
            if location is not None:
                event.location = location
            if notes is not None:
                event.notes = notes
            if url is not None:
                event.url = url or None

    async def delete_event(self, event_id: str) -> None:
        self._require_access()
        async with self._transaction() as state:
            state.events.remove(_get_event(state, event_id))

    # -- persistence ----------------------------------------------------

    @staticmethod
    def _load(path: Path) -> StoreState:
        try:
            state = StoreState.restore(path.read_bytes())
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Failed to load event store from {path}: {exc}") from exc
        logger.info("Loaded event store from %s", path)
        return state

    @contextlib.asynccontextmanager
    async def _transaction(self) -> AsyncIterator[StoreState]:
        """Yield a draft of the state; commit it only if the body and the save succeed."""
        async with self._write_lock:
            draft = self._state.model_copy(deep=True)
            yield draft
            await self._save(draft)
            self._state = draft

    async def _save(self, state: StoreState) -> None:
        if self._path is None:
            return
        try:
            data = state.snapshot()
        except ValueError as exc:
            raise PersistenceError(f"Failed to save event store: {exc}") from exc
        try:
            await asyncio.to_thread(_write_atomic, self._path, data)
        except OSError as exc:
            logger.error("Failed to write event store to %s: %s", self._path, exc)
            raise PersistenceError(f"Failed to save event store: {exc}") from exc

    # -- helpers --------------------------------------------------------

    def _require_access(self) -> None:
        if not self._granted:
            raise AccessDeniedError("Access to Reminders and Calendar has not been granted")

    def _today_bounds(self) -> tuple[datetime, datetime]:
        now = self._clock()
        start_of_today = datetime.combine(now.date(), time()).astimezone()
        start_of_tomorrow = datetime.combine(
            now.date() + timedelta(days=1), time()
        ).astimezone()
        return start_of_today, start_of_tomorrow

    def _collection_name(self, collections: list[StoredCollection], cid: str) -> str | None:
        return next((c.name for c in collections if c.id == cid), None)

    def _reminder_record(self, reminder: StoredReminder) -> ReminderRecord:
        return ReminderRecord(
            id=reminder.id,
            name=reminder.title,
            completed=reminder.completed,
            body=reminder.notes or None,
            due_date=reminder.due.format() if reminder.due is not None else None,
            list_name=self._collection_name(self._state.reminder_lists, reminder.list_id),
            priority=reminder.priority,
        )

    def _event_record(self, event: StoredEvent) -> EventRecord:
        return EventRecord(
            id=event.id,
            title=event.title,
            start_date=format_instant(event.start),
            end_date=format_instant(event.end),
            is_all_day=event.is_all_day,
            location=event.location or None,
            notes=event.notes or None,
            calendar_name=self._collection_name(self._state.calendars, event.calendar_id),
            url=event.url,
            status=event.status,
        )


def _find_by_name(collections: list[StoredCollection], name: str) -> StoredCollection | None:
    return next((c for c in collections if c.name == name), None)


def _get_reminder(state: StoreState, reminder_id: str) -> StoredReminder:
    for reminder in state.reminders:
        if reminder.id == reminder_id:
            return reminder
    raise NotFoundError("Reminder not found")


def _get_event(state: StoreState, event_id: str) -> StoredEvent:
    for event in state.events:
        if event.id == event_id:
            return event
    raise NotFoundError("Event not found")
