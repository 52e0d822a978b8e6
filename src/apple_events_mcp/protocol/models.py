"""MCP models — JSON-RPC 2.0 messages and the MCP payload shapes.

Covers the envelope used for every request and response plus the payloads of
the three supported methods: ``initialize``, ``tools/list`` and ``tools/call``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, StrictInt, StrictStr, model_validator

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------

# Strict so that 5 and "5" stay distinct and booleans/floats are rejected.
RequestId = StrictInt | StrictStr

SENTINEL_ID = -1


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message. ``id is None`` marks a notification."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId | None = None
    method: str
    params: dict[str, Any] | None = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message carrying exactly one of result/error."""

    jsonrpc: str = "2.0"
    id: RequestId = SENTINEL_ID
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _exactly_one_payload(self) -> JsonRpcResponse:
        if (self.result is None) == (self.error is None):
            msg = "response must carry exactly one of 'result' or 'error'"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: RequestId, result: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: RequestId, error: JsonRpcError) -> JsonRpcResponse:
        return cls(id=request_id, error=error)

    def to_wire(self) -> dict[str, Any]:
        """Plain-dict form with only the populated payload member."""
        data: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            data["error"] = self.error.model_dump(exclude_none=True)
        else:
            data["result"] = self.result
        return data


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ClientInfo(BaseModel):
    name: str = ""
    version: str = ""


class InitializeParams(BaseModel):
    """``initialize`` params. Advisory only; nothing here is negotiated."""

    model_config = {"populate_by_name": True}

    protocol_version: str | None = Field(default=None, alias="protocolVersion")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    client_info: ClientInfo | None = Field(default=None, alias="clientInfo")


class ToolCallParams(BaseModel):
    """``tools/call`` params. ``name`` is checked by the dispatcher, not here."""

    name: str | None = None
    arguments: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _null_arguments(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("arguments") is None:
            data = {**data, "arguments": {}}
        return data


class ToolProperty(BaseModel):
    type: str
    description: str


class InputSchema(BaseModel):
    type: Literal["object"] = "object"
    properties: dict[str, ToolProperty] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)


class ToolDescriptor(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = {"populate_by_name": True, "frozen": True}

    name: str
    description: str
    input_schema: InputSchema = Field(default_factory=InputSchema, alias="inputSchema")


class ToolListResult(BaseModel):
    tools: list[ToolDescriptor]


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ToolCallResult(BaseModel):
    """``tools/call`` result: one text item holding a JSON-encoded string."""

    content: list[TextContent]


class ToolsCapability(BaseModel):
    model_config = {"populate_by_name": True}

    list_changed: bool = Field(default=False, alias="listChanged")


class ServerCapabilities(BaseModel):
    tools: ToolsCapability = Field(default_factory=ToolsCapability)


class ServerInfo(BaseModel):
    name: str
    version: str


class InitializeResult(BaseModel):
    model_config = {"populate_by_name": True}

    protocol_version: str = Field(alias="protocolVersion")
    capabilities: ServerCapabilities = Field(default_factory=ServerCapabilities)
    server_info: ServerInfo = Field(alias="serverInfo")
    instructions: str = ""
