"""Wire codec for JSON-RPC envelopes.

Decoding is done in two passes.  :func:`peek_envelope` is lenient: it only
needs valid JSON and a usable ``id`` so that even a request which later fails
validation can be answered with its own id.  :func:`decode_request` is the
strict pass that validates the full envelope.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import TypeAdapter, ValidationError

from apple_events_mcp.protocol.errors import InvalidRequestError, ParseError
from apple_events_mcp.protocol.models import JsonRpcRequest, JsonRpcResponse, RequestId

logger = logging.getLogger(__name__)

# Returned verbatim when a response cannot be serialised.
ENCODING_FAILURE_BODY = (
    b'{"jsonrpc":"2.0","id":-1,"error":{"code":-32603,"message":"Internal encoding error"}}'
)

PARSE_ERROR_BODY = (
    b'{"jsonrpc":"2.0","id":-1,"error":{"code":-32700,"message":"Empty request body"}}'
)

_id_adapter: TypeAdapter[RequestId | None] = TypeAdapter(RequestId | None)


def peek_envelope(raw: bytes | str) -> tuple[dict[str, Any], RequestId | None]:
    """Parse *raw* and recover only the request id.

    Returns the parsed envelope and its id (``None`` when absent or ``null``).

    Raises:
        ParseError: *raw* is not valid JSON.
        InvalidRequestError: the JSON is not an object or the id is neither
            a string nor an integer.
    """
    try:
        data: Any = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise ParseError(f"Parse error: {exc}") from exc

    if not isinstance(data, dict):
        raise InvalidRequestError("Request must be a JSON object")

    try:
        request_id = _id_adapter.validate_python(data.get("id"))
    except ValidationError as exc:
        raise InvalidRequestError("ID must be string or int") from exc
    return data, request_id


def decode_request(envelope: dict[str, Any]) -> JsonRpcRequest:
    """Validate a parsed envelope into a :class:`JsonRpcRequest`."""
    try:
        return JsonRpcRequest.model_validate(envelope)
    except ValidationError as exc:
        fields = ", ".join(
            ".".join(str(part) for part in err["loc"]) or "request" for err in exc.errors()
        )
        raise InvalidRequestError(f"Invalid request: {fields}") from exc


def encode_response(response: JsonRpcResponse) -> bytes:
    """Serialise *response*; falls back to :data:`ENCODING_FAILURE_BODY`."""
    try:
        return json.dumps(
            response.to_wire(), ensure_ascii=False, allow_nan=False, separators=(",", ":")
        ).encode()
    except (TypeError, ValueError) as exc:
        logger.error("Error encoding response: %s", exc)
        return ENCODING_FAILURE_BODY
