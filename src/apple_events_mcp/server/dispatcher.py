"""MCPDispatcher — turns raw JSON-RPC bytes into response bytes.

Transport-agnostic: both the stdio and HTTP transports hand each inbound
message to :meth:`MCPDispatcher.handle` and write back whatever it returns.

Error policy:

* Undecodable envelopes are answered with the sentinel id ``-1``.
* Notifications (no ``id``) are never answered and never executed.
* Protocol problems (unknown method, missing tool name, unknown tool, bad
  arguments) become JSON-RPC ``error`` payloads echoing the request id.
* Failures raised by the backend while a tool runs are *not* protocol
  errors: they come back as a normal tool result holding
  ``{"success": false, "error": "<message>"}``.
* Nothing raised while handling a request escapes :meth:`handle`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from apple_events_mcp.backend.errors import BackendError
from apple_events_mcp.protocol.codec import decode_request, encode_response, peek_envelope
from apple_events_mcp.protocol.errors import (
    INTERNAL_ERROR,
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    RpcError,
    ToolNotFoundError,
)
from apple_events_mcp.protocol.models import (
    SENTINEL_ID,
    InitializeParams,
    InitializeResult,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ServerInfo,
    TextContent,
    ToolCallParams,
    ToolCallResult,
    ToolListResult,
)
from apple_events_mcp.tools import registry
from apple_events_mcp.tools.arguments import ToolArguments
from apple_events_mcp.tools.handlers import HANDLERS
from apple_events_mcp.utils.telemetry import (
    ATTR_ERROR_CODE,
    ATTR_METHOD,
    ATTR_REQUEST_ID,
    ATTR_TOOL_NAME,
    ATTR_TOOL_SUCCESS,
    get_tracer,
)

if TYPE_CHECKING:
    from apple_events_mcp.backend.base import EventsBackend
    from apple_events_mcp.tools.handlers import ToolHandler

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_INFO = ServerInfo(name="apple-events", version="1.0.0")

INSTRUCTIONS = """\
This server provides full access to Apple Reminders and Apple Calendar.

REMINDERS (task management):
- Use list_reminder_lists before creating reminders to see available lists.
- Use list_today_reminders for a daily overview: it returns incomplete reminders due today or overdue.
- list_reminders returns incomplete reminders by default. Pass completed: true to see completed ones.
- create_reminder defaults to the "Reminders" list if no list_name is given.
- Priority levels: 0 = none, 1-4 = high, 5 = medium, 6-9 = low.
- Tags are not available.

CALENDAR EVENTS:
- Use list_calendars before creating events to see available calendars.
- Use list_today_events to see today's full schedule across all calendars.
- list_events requires a start_date and end_date to define the query range.
- create_event requires title, start_date, and end_date. All other fields (calendar_name, location, notes, url, is_all_day) are optional.
- create_event uses the default calendar if no calendar_name is given.
- Use the url field for video call links (Zoom, Google Meet, etc.).
- For all-day events, use date-only format and set is_all_day: true.
- update_event and delete_event operate on a single occurrence of recurring events.

DATE FORMATS (both reminders and calendar):
- Full datetime: "2025-11-15T10:00:00Z" (UTC, specific time)
- Date-only: "2025-11-15" (interpreted in the user's local timezone)

BEST PRACTICES:
- Morning planning: call list_today_reminders and list_today_events together for a full daily overview.
- When the user asks to schedule something, use create_event. When they ask to add a task or todo, use create_reminder.
- When looking up what's coming, use list_events with a date range (e.g., next 7 days).
- Always confirm destructive actions (delete_reminder, delete_event) with the user before executing.
"""


class MCPDispatcher:
    """Routes decoded requests to the MCP methods and the tool handlers.

    Holds no per-request state, so one instance can serve concurrent
    requests from any number of connections.

    Usage::

        dispatcher = MCPDispatcher(InMemoryEventStore())
        response = await dispatcher.handle(b'{"jsonrpc":"2.0","id":1,"method":"tools/list"}')
    """

    def __init__(
        self,
        backend: EventsBackend,
        *,
        server_info: ServerInfo = SERVER_INFO,
        instructions: str = INSTRUCTIONS,
        handlers: Mapping[str, ToolHandler] | None = None,
    ) -> None:
        self._backend = backend
        self._server_info = server_info
        self._instructions = instructions
        self._handlers: dict[str, ToolHandler] = dict(handlers if handlers is not None else HANDLERS)

        missing = set(registry.names()) ^ set(self._handlers)
        if missing:
            msg = f"tool catalog and handlers disagree on: {', '.join(sorted(missing))}"
            raise ValueError(msg)

        self._methods: dict[str, Callable[[JsonRpcRequest], Awaitable[dict[str, Any]]]] = {
            "initialize": self._initialize,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    @property
    def backend(self) -> EventsBackend:
        return self._backend

    async def handle(self, raw: bytes | str) -> bytes | None:
        """Process one raw message; ``None`` means "send nothing back"."""
        response = await self.handle_message(raw)
        if response is None:
            return None
        return encode_response(response)

    async def handle_message(self, raw: bytes | str) -> JsonRpcResponse | None:
        """Like :meth:`handle` but returns the response model unencoded."""
        try:
            envelope, request_id = peek_envelope(raw)
        except RpcError as exc:
            logger.warning("Rejected undecodable message: %s", exc.message)
            return JsonRpcResponse.failure(SENTINEL_ID, exc.to_error())

        if request_id is None:
            logger.debug("Received notification %r, no response needed", envelope.get("method"))
            return None

        with _tracer.start_as_current_span("mcp.request") as span:
            span.set_attribute(ATTR_REQUEST_ID, str(request_id))
            try:
                request = decode_request(envelope)
                span.set_attribute(ATTR_METHOD, request.method)
                result = await self._route(request)
            except RpcError as exc:
                span.set_attribute(ATTR_ERROR_CODE, exc.code)
                logger.info("Request %r failed with %d: %s", request_id, exc.code, exc.message)
                return JsonRpcResponse.failure(request_id, exc.to_error())
            except Exception as exc:
                span.set_attribute(ATTR_ERROR_CODE, INTERNAL_ERROR)
                logger.exception("Error processing request %r", request_id)
                return JsonRpcResponse.failure(
                    request_id, JsonRpcError(code=INTERNAL_ERROR, message=str(exc) or repr(exc))
                )
        return JsonRpcResponse.success(request_id, result)

    # ------------------------------------------------------------------
    # Methods
    # ------------------------------------------------------------------

    async def _route(self, request: JsonRpcRequest) -> dict[str, Any]:
        method = self._methods.get(request.method)
        if method is None:
            raise MethodNotFoundError(request.method)
        return await method(request)

    async def _initialize(self, request: JsonRpcRequest) -> dict[str, Any]:
        try:
            params = InitializeParams.model_validate(request.params or {})
        except ValidationError:
            params = InitializeParams()
        if params.client_info is not None:
            logger.info(
                "Initialize from %s %s (protocol %s)",
                params.client_info.name,
                params.client_info.version,
                params.protocol_version,
            )

        result = InitializeResult(
            protocol_version=PROTOCOL_VERSION,
            server_info=self._server_info,
            instructions=self._instructions,
        )
        return result.model_dump(by_alias=True)

    async def _list_tools(self, request: JsonRpcRequest) -> dict[str, Any]:
        return ToolListResult(tools=list(registry.describe())).model_dump(by_alias=True)

    async def _call_tool(self, request: JsonRpcRequest) -> dict[str, Any]:
        try:
            params = ToolCallParams.model_validate(request.params or {})
        except ValidationError as exc:
            raise InvalidParamsError("Invalid tools/call params") from exc
        if not params.name:
            raise InvalidRequestError("Missing tool name")

        handler = self._handlers.get(params.name)
        if handler is None:
            raise ToolNotFoundError(params.name)

        text = await self._run_tool(params.name, handler, ToolArguments(params.arguments))
        return ToolCallResult(content=[TextContent(text=text)]).model_dump()

    async def _run_tool(self, name: str, handler: ToolHandler, args: ToolArguments) -> str:
        """Run a handler and JSON-encode its result for the text content item."""
        with _tracer.start_as_current_span("mcp.tool") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            try:
                result = await handler(self._backend, args)
            except RpcError:
                raise
            except Exception as exc:
                logger.warning("Tool %s failed: %s", name, exc)
                result = {"success": False, "error": _describe(exc)}
            span.set_attribute(ATTR_TOOL_SUCCESS, result.get("success") is not False)
        return json.dumps(result, indent=2, ensure_ascii=False)


def _describe(exc: Exception) -> str:
    if isinstance(exc, BackendError):
        return exc.message
    return str(exc) or exc.__class__.__name__
