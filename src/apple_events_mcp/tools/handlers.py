"""Tool implementations.

Each handler validates its arguments first, so contract violations surface as
:class:`~apple_events_mcp.protocol.errors.InvalidParamsError` before the
backend is touched, then calls the backend and shapes the result mapping.
Backend failures propagate; the dispatcher turns them into tool output.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from apple_events_mcp.backend.memory import DEFAULT_REMINDER_LIST
from apple_events_mcp.tools.arguments import CLEAR, ToolArguments, to_local_datetime

if TYPE_CHECKING:
    from apple_events_mcp.backend.base import EventsBackend

ToolHandler = Callable[["EventsBackend", ToolArguments], Awaitable[dict[str, Any]]]


# ---------------------------------------------------------------------------
# Reminders
# ---------------------------------------------------------------------------


async def list_reminder_lists(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    lists = await backend.list_reminder_lists()
    return {"lists": [item.to_dict() for item in lists], "count": len(lists)}


async def create_reminder_list(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    name = args.require_str("name")
    list_id = await backend.create_reminder_list(name)
    return {"success": True, "list_id": list_id, "name": name}


async def list_today_reminders(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    reminders = await backend.list_today_reminders()
    return {"reminders": [r.to_dict() for r in reminders], "count": len(reminders)}


async def list_reminders(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    list_name = args.optional_str("list_name")
    completed = args.optional_bool("completed", default=False)
    reminders = await backend.list_reminders(list_name, completed)
    return {"reminders": [r.to_dict() for r in reminders], "count": len(reminders)}


async def create_reminder(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    title = args.require_str("title")
    list_name = args.optional_str("list_name", default=DEFAULT_REMINDER_LIST)
    notes = args.optional_str("notes")
    due = args.optional_date("due_date")
    reminder_id = await backend.create_reminder(title, list_name, notes, due)
    return {"success": True, "reminder_id": reminder_id, "title": title}


async def complete_reminder(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    reminder_id = args.require_str("reminder_id")
    await backend.complete_reminder(reminder_id)
    return {"success": True, "reminder_id": reminder_id}


async def delete_reminder(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    reminder_id = args.require_str("reminder_id")
    await backend.delete_reminder(reminder_id)
    return {"success": True, "reminder_id": reminder_id}


async def update_reminder(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    reminder_id = args.require_str("reminder_id")
    title = args.optional_str("title")
    notes = args.optional_str("notes")
    due = args.optional_date_or_clear("due_date")
    # Not range-checked here; 0-9 is the store's contract.
    priority = args.optional_int("priority")

    await backend.update_reminder(
        reminder_id,
        title=title,
        notes=notes,
        due=None if due is CLEAR else due,
        clear_due=due is CLEAR,
        priority=priority,
    )
    return {"success": True, "reminder_id": reminder_id}


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


async def list_calendars(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    calendars = await backend.list_calendars()
    return {"calendars": [c.to_dict() for c in calendars], "count": len(calendars)}


async def list_today_events(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    events = await backend.list_today_events()
    return {"events": [e.to_dict() for e in events], "count": len(events)}


async def list_events(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    start = to_local_datetime(args.require_date("start_date"))
    end = to_local_datetime(args.require_date("end_date"))
    calendar_name = args.optional_str("calendar_name")
    events = await backend.list_events(calendar_name, start, end)
    return {"events": [e.to_dict() for e in events], "count": len(events)}


async def create_event(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    title = args.require_str("title")
    start = to_local_datetime(args.require_date("start_date"))
    end = to_local_datetime(args.require_date("end_date"))

    event_id = await backend.create_event(
        title,
        start,
        end,
        calendar_name=args.optional_str("calendar_name"),
        is_all_day=args.optional_bool("is_all_day", default=False),
        location=args.optional_str("location"),
        notes=args.optional_str("notes"),
        url=args.optional_str("url"),
    )
    return {"success": True, "event_id": event_id, "title": title}


async def update_event(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    event_id = args.require_str("event_id")
    start = args.optional_date("start_date")
    end = args.optional_date("end_date")

    # start <= end is not re-validated when only one side changes.
    await backend.update_event(
        event_id,
        title=args.optional_str("title"),
        start=to_local_datetime(start) if start is not None else None,
        end=to_local_datetime(end) if end is not None else None,
        location=args.optional_str("location"),
        notes=args.optional_str("notes"),
        url=args.optional_str("url"),
    )
    return {"success": True, "event_id": event_id}


async def delete_event(backend: EventsBackend, args: ToolArguments) -> dict[str, Any]:
    event_id = args.require_str("event_id")
    await backend.delete_event(event_id)
    return {"success": True, "event_id": event_id}


HANDLERS: dict[str, ToolHandler] = {
    "list_reminder_lists": list_reminder_lists,
    "create_reminder_list": create_reminder_list,
    "list_today_reminders": list_today_reminders,
    "list_reminders": list_reminders,
    "create_reminder": create_reminder,
    "complete_reminder": complete_reminder,
    "delete_reminder": delete_reminder,
    "update_reminder": update_reminder,
    "list_calendars": list_calendars,
    "list_today_events": list_today_events,
    "list_events": list_events,
    "create_event": create_event,
    "update_event": update_event,
    "delete_event": delete_event,
}
