"""Static tool catalog.

The catalog is built once at import time and never changes.  Its order is
part of the contract: ``tools/list`` always returns tools in this order.
"""

from __future__ import annotations

from apple_events_mcp.protocol.models import InputSchema, ToolDescriptor, ToolProperty

_DATE_HELP = "ISO 8601 format (e.g., '{example}T10:00:00Z') or date-only format (e.g., '{example}')"


def _tool(
    name: str,
    description: str,
    properties: dict[str, tuple[str, str]] | None = None,
    required: tuple[str, ...] = (),
) -> ToolDescriptor:
    return ToolDescriptor(
        name=name,
        description=description,
        input_schema=InputSchema(
            properties={
                key: ToolProperty(type=type_, description=desc)
                for key, (type_, desc) in (properties or {}).items()
            },
            required=list(required),
        ),
    )


TOOL_CATALOG: tuple[ToolDescriptor, ...] = (
    # -- reminders ------------------------------------------------------
    _tool("list_reminder_lists", "Get all reminder lists from Apple Reminders"),
    _tool(
        "create_reminder_list",
        "Create a new reminder list in Apple Reminders",
        {"name": ("string", "Name of the new reminder list")},
        required=("name",),
    ),
    _tool(
        "list_today_reminders",
        "Get all incomplete reminders that are due today or past due. "
        "This is useful for seeing what needs to be done today.",
    ),
    _tool(
        "list_reminders",
        "Get reminders from a specific list or all lists. "
        "By default, only returns incomplete reminders.",
        {
            "list_name": (
                "string",
                "Name of the reminder list (optional, if not provided returns all reminders)",
            ),
            "completed": (
                "boolean",
                "Filter by completion status (optional, defaults to false to show only "
                "incomplete reminders)",
            ),
        },
    ),
    _tool(
        "create_reminder",
        "Create a new reminder in Apple Reminders",
        {
            "title": ("string", "Title of the reminder"),
            "list_name": (
                "string",
                "Name of the list to add the reminder to (defaults to 'Reminders')",
            ),
            "notes": ("string", "Additional notes for the reminder (optional)"),
            "due_date": (
                "string",
                "Due date in " + _DATE_HELP.format(example="2025-11-15") + " (optional)",
            ),
        },
        required=("title",),
    ),
    _tool(
        "complete_reminder",
        "Mark a reminder as completed",
        {"reminder_id": ("string", "ID of the reminder to complete")},
        required=("reminder_id",),
    ),
    _tool(
        "delete_reminder",
        "Delete a reminder",
        {"reminder_id": ("string", "ID of the reminder to delete")},
        required=("reminder_id",),
    ),
    _tool(
        "update_reminder",
        "Update an existing reminder's properties (title, notes, due date, or priority)",
        {
            "reminder_id": ("string", "ID of the reminder to update"),
            "title": ("string", "New title for the reminder (optional)"),
            "notes": ("string", "New notes for the reminder (optional)"),
            "due_date": (
                "string",
                "New due date in " + _DATE_HELP.format(example="2025-11-15")
                + ", or empty string to clear (optional)",
            ),
            "priority": (
                "string",
                "New priority level 0-9, where 0=none, 1-4=high, 5=medium, 6-9=low (optional)",
            ),
        },
        required=("reminder_id",),
    ),
    # -- calendar -------------------------------------------------------
    _tool("list_calendars", "Get all event calendars from Apple Calendar"),
    _tool(
        "list_today_events",
        "Get all calendar events for today. Useful for seeing your schedule.",
    ),
    _tool(
        "list_events",
        "Get calendar events in a date range, optionally filtered by calendar name.",
        {
            "calendar_name": (
                "string",
                "Name of the calendar to filter by (optional, if not provided returns "
                "events from all calendars)",
            ),
            "start_date": (
                "string",
                "Start of date range in " + _DATE_HELP.format(example="2025-11-15"),
            ),
            "end_date": (
                "string",
                "End of date range in " + _DATE_HELP.format(example="2025-11-16"),
            ),
        },
        required=("start_date", "end_date"),
    ),
    _tool(
        "create_event",
        "Create a new event in Apple Calendar",
        {
            "title": ("string", "Title of the event"),
            "calendar_name": (
                "string",
                "Name of the calendar to add the event to (optional, uses default calendar)",
            ),
            "start_date": (
                "string",
                "Start date/time in ISO 8601 format (e.g., '2025-11-15T10:00:00Z') "
                "or date-only for all-day events (e.g., '2025-11-15')",
            ),
            "end_date": (
                "string",
                "End date/time in ISO 8601 format (e.g., '2025-11-15T11:00:00Z') "
                "or date-only for all-day events (e.g., '2025-11-16')",
            ),
            "is_all_day": (
                "boolean",
                "Whether this is an all-day event (optional, defaults to false)",
            ),
            "location": ("string", "Location of the event (optional)"),
            "notes": ("string", "Additional notes for the event (optional)"),
            "url": (
                "string",
                "URL associated with the event, e.g., a video call link (optional)",
            ),
        },
        required=("title", "start_date", "end_date"),
    ),
    _tool(
        "update_event",
        "Update an existing calendar event's properties",
        {
            "event_id": ("string", "ID of the event to update"),
            "title": ("string", "New title for the event (optional)"),
            "start_date": ("string", "New start date/time in ISO 8601 format (optional)"),
            "end_date": ("string", "New end date/time in ISO 8601 format (optional)"),
            "location": ("string", "New location (optional)"),
            "notes": ("string", "New notes (optional)"),
            "url": ("string", "New URL, or empty string to clear (optional)"),
        },
        required=("event_id",),
    ),
    _tool(
        "delete_event",
        "Delete a calendar event",
        {"event_id": ("string", "ID of the event to delete")},
        required=("event_id",),
    ),
)

_BY_NAME: dict[str, ToolDescriptor] = {tool.name: tool for tool in TOOL_CATALOG}

if len(_BY_NAME) != len(TOOL_CATALOG):
    msg = "duplicate tool name in TOOL_CATALOG"
    raise RuntimeError(msg)


def describe() -> tuple[ToolDescriptor, ...]:
    """Return every tool descriptor, always in catalog order."""
    return TOOL_CATALOG


def names() -> tuple[str, ...]:
    return tuple(_BY_NAME)


def get(name: str) -> ToolDescriptor | None:
    return _BY_NAME.get(name)
