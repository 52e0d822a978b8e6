"""Typed access to the untyped ``arguments`` mapping of a ``tools/call``.

All coercion rules live here so tool handlers only declare what they expect.
An argument that is absent or JSON ``null`` takes its default; one that is
present with the wrong type raises
:class:`~apple_events_mcp.protocol.errors.InvalidParamsError` naming the field.
"""

from __future__ import annotations

import enum
import re
from collections.abc import Mapping
from datetime import date, datetime, time
from typing import Any

from apple_events_mcp.protocol.errors import InvalidParamsError

_DATE_ONLY = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_DATE_TIME = re.compile(
    r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}(\.[0-9]{1,6})?(Z|[+-][0-9]{2}:[0-9]{2})"
)
_INTEGER = re.compile(r"-?[0-9]+")


class Clear(enum.Enum):
    """Marker for an empty-string argument meaning "remove this value"."""

    CLEAR = "clear"


CLEAR = Clear.CLEAR


def parse_date_literal(text: str) -> date | datetime:
    """Parse one of the two accepted date literals.

    ``YYYY-MM-DD`` yields a :class:`date` (a local calendar day with no time
    of day).  A date-time must be the extended ``YYYY-MM-DDTHH:MM:SS`` form,
    optionally with fractional seconds, followed by ``Z`` or an offset such as
    ``+02:00``; it yields an aware :class:`datetime`.

    Raises:
        ValueError: *text* is neither form.
    """
    if _DATE_ONLY.fullmatch(text):
        return date.fromisoformat(text)
    if not _DATE_TIME.fullmatch(text):
        raise ValueError(f"not an ISO 8601 date or date-time: {text!r}")
    return datetime.fromisoformat(text)


def to_local_datetime(value: date | datetime) -> datetime:
    """A date becomes local midnight; a date-time is moved to the local zone."""
    if isinstance(value, datetime):
        return value.astimezone()
    return datetime.combine(value, time()).astimezone()


class ToolArguments:
    """Accessor-with-default helpers over a ``tools/call`` arguments mapping."""

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: Mapping[str, Any] = values or {}

    def __repr__(self) -> str:
        return f"ToolArguments({dict(self._values)!r})"

    # -- strings --------------------------------------------------------

    def require_str(self, name: str) -> str:
        value = self._values.get(name)
        if value is None:
            raise InvalidParamsError(f"Missing {name}")
        return self._check_str(name, value)

    def optional_str(self, name: str, default: str | None = None) -> str | None:
        value = self._values.get(name)
        if value is None:
            return default
        return self._check_str(name, value)

    # -- booleans -------------------------------------------------------

    def optional_bool(self, name: str, default: bool = False) -> bool:
        value = self._values.get(name)
        if value is None:
            return default
        if not isinstance(value, bool):
            raise InvalidParamsError(f"Invalid {name}: expected boolean")
        return value

    # -- numbers --------------------------------------------------------

    def optional_int(self, name: str) -> int | None:
        """Accept a JSON integer, an integral float, or a numeric string."""
        value = self._values.get(name)
        if value is None:
            return None
        if isinstance(value, bool):
            raise InvalidParamsError(f"Invalid {name}: expected integer")
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str) and _INTEGER.fullmatch(value):
            return int(value)
        raise InvalidParamsError(f"Invalid {name}: expected integer or numeric string")

    # -- dates ----------------------------------------------------------

    def require_date(self, name: str) -> date | datetime:
        value = self._values.get(name)
        if value is None:
            raise InvalidParamsError(f"Missing {name}")
        return self._parse_date(name, self._check_str(name, value))

    def optional_date(self, name: str) -> date | datetime | None:
        value = self._values.get(name)
        if value is None:
            return None
        return self._parse_date(name, self._check_str(name, value))

    def optional_date_or_clear(self, name: str) -> date | datetime | Clear | None:
        """Like :meth:`optional_date`, but ``""`` returns :data:`CLEAR`."""
        value = self._values.get(name)
        if value == "":
            return CLEAR
        return self.optional_date(name)

    # -- internals ------------------------------------------------------

    @staticmethod
    def _check_str(name: str, value: Any) -> str:
        if not isinstance(value, str):
            raise InvalidParamsError(f"Invalid {name}: expected string")
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise InvalidParamsError(f"Invalid {name}: not valid UTF-8") from exc
        return value

    @staticmethod
    def _parse_date(name: str, text: str) -> date | datetime:
        try:
            return parse_date_literal(text)
        except ValueError as exc:
            raise InvalidParamsError(f"Invalid {name} format") from exc
