"""JSON-RPC error codes and the exception types that map onto them."""

from __future__ import annotations

from apple_events_mcp.protocol.models import JsonRpcError

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
# Server-defined range is -32000..-32099.
TOOL_NOT_FOUND = -32001


class RpcError(Exception):
    """Base error for failures reported as a JSON-RPC ``error`` payload."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def to_error(self) -> JsonRpcError:
        return JsonRpcError(code=self.code, message=self.message)


class ParseError(RpcError):
    """The request body is not valid JSON."""

    code = PARSE_ERROR


class InvalidRequestError(RpcError):
    """The envelope parsed but does not describe a valid request."""

    code = INVALID_REQUEST


class MethodNotFoundError(RpcError):
    """The method is not part of the supported MCP surface."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Unknown method: {method}")


class InvalidParamsError(RpcError):
    """A tool argument is missing or has the wrong type or format."""

    code = INVALID_PARAMS


class ToolNotFoundError(RpcError):
    """``tools/call`` named a tool that is not in the catalog."""

    code = TOOL_NOT_FOUND

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")
