"""Error types raised by event-store backends.

Every message is meant to be shown to the end user as-is: the dispatcher
folds these into the tool result instead of the JSON-RPC error payload.
"""


class BackendError(Exception):
    """Base error for all event-store failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AccessDeniedError(BackendError):
    """The store refused access to reminders or calendars."""


class NotFoundError(BackendError):
    """A reminder, list, calendar or event does not exist."""


class NoDestinationError(BackendError):
    """There is nowhere to create the requested item."""


class PersistenceError(BackendError):
    """The store could not be loaded from or saved to disk."""
