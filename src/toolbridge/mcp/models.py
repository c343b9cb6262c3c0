"""MCP models — JSON-RPC 2.0 messages and tool payloads.

Each message kind is decoded through one pydantic model so that a malformed
envelope fails at a single, well-defined point.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Reserved error codes
# ---------------------------------------------------------------------------

PARSE_ERROR = -32700
INVALID_PARAMS = -32602
METHOD_NOT_FOUND = -32601
NOT_INITIALIZED = -32002

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message. Always carries an ``id``."""

    jsonrpc: str = "2.0"
    id: int
    method: str
    params: dict[str, Any] = {}


class JsonRpcNotification(BaseModel):
    """A JSON-RPC 2.0 notification: no ``id``, no response expected."""

    jsonrpc: str = "2.0"
    method: str
    params: dict[str, Any] | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message (``result`` xor ``error``)."""

    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ClientInfo(BaseModel):
    name: str
    version: str


class InitializeParams(BaseModel):
    """Parameters of the ``initialize`` request."""

    model_config = ConfigDict(populate_by_name=True)

    protocol_version: str = Field(alias="protocolVersion")
    capabilities: dict[str, Any] = Field(default_factory=dict)
    client_info: ClientInfo = Field(alias="clientInfo")


class ToolDescriptor(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str | None = None
    input_schema: dict[str, Any] | None = Field(default=None, alias="inputSchema")


class ToolsListResult(BaseModel):
    tools: list[ToolDescriptor]


class ContentBlock(BaseModel):
    """One entry of a ``tools/call`` result's ``content`` array."""

    model_config = ConfigDict(extra="allow")

    type: str = "text"
    text: str | None = None


class ToolCallResult(BaseModel):
    """The ``result`` object of a ``tools/call`` response."""

    model_config = ConfigDict(populate_by_name=True)

    content: list[ContentBlock]
    is_error: bool = Field(default=False, alias="isError")


class McpJsonMessage(BaseModel):
    """One pretty-printed line of a recorded exchange."""

    direction: Literal["request", "response", "error"]
    content: str


class McpToolsResponse(BaseModel):
    """Tools advertised by a server together with the exchange that produced them."""

    tools: list[ToolDescriptor]
    messages: list[McpJsonMessage] = []
