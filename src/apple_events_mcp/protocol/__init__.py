"""Protocol layer — JSON-RPC envelopes, MCP payloads, codec and errors."""

from apple_events_mcp.protocol.codec import (
    ENCODING_FAILURE_BODY,
    PARSE_ERROR_BODY,
    decode_request,
    encode_response,
    peek_envelope,
)
from apple_events_mcp.protocol.errors import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    TOOL_NOT_FOUND,
    InvalidParamsError,
    InvalidRequestError,
    MethodNotFoundError,
    ParseError,
    RpcError,
    ToolNotFoundError,
)
from apple_events_mcp.protocol.models import (
    SENTINEL_ID,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    RequestId,
    ToolDescriptor,
)

__all__ = [
    "ENCODING_FAILURE_BODY",
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "PARSE_ERROR_BODY",
    "SENTINEL_ID",
    "TOOL_NOT_FOUND",
    "InvalidParamsError",
    "InvalidRequestError",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MethodNotFoundError",
    "ParseError",
    "RequestId",
    "RpcError",
    "ToolDescriptor",
    "ToolNotFoundError",
    "decode_request",
    "encode_response",
    "peek_envelope",
]
