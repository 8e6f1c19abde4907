"""MCP models — JSON-RPC 2.0 messages and tool definitions.

Implements the message format used by the Model Context Protocol for the
three methods the server understands: ``initialize``, ``tools/list`` and
``tools/call``.  Incoming requests are a discriminated union on ``method``;
outgoing responses are serialised with :meth:`JsonRpcResponse.to_wire`.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr

JSONRPC_VERSION = "2.0"

RequestId = StrictInt | StrictFloat | StrictStr

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """An outgoing JSON-RPC 2.0 request, as sent by :class:`MCPClient`."""

    jsonrpc: str = JSONRPC_VERSION
    method: str
    id: int | str = 1
    params: dict[str, Any] = {}


class JsonRpcNotification(BaseModel):
    """An outgoing JSON-RPC 2.0 notification (no ``id``, no response)."""

    jsonrpc: str = JSONRPC_VERSION
    method: str
    params: dict[str, Any] = {}


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message.

    ``id`` is loosely typed because error responses echo whatever the client
    sent (or ``null`` when the payload could not be parsed at all).
    """

    jsonrpc: str = JSONRPC_VERSION
    id: int | str | float | None = 0
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    def to_wire(self) -> dict[str, Any]:
        """Return the response as a plain dict carrying exactly one of ``result``/``error``."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result if self.result is not None else {}
        return payload


# ---------------------------------------------------------------------------
# Incoming requests (server side)
# ---------------------------------------------------------------------------


class ClientInfo(BaseModel):
    name: str
    version: str


class InitializeParams(BaseModel):
    model_config = {"populate_by_name": True}

    protocol_version: str = Field(alias="protocolVersion")
    capabilities: dict[str, Any]
    client_info: ClientInfo = Field(alias="clientInfo")


class CallToolParams(BaseModel):
    name: str
    arguments: dict[str, Any] | None = None


class _RequestEnvelope(BaseModel):
    jsonrpc: Literal["2.0"]
    id: RequestId


class InitializeRequest(_RequestEnvelope):
    method: Literal["initialize"]
    params: InitializeParams


class ListToolsRequest(_RequestEnvelope):
    method: Literal["tools/list"]
    params: dict[str, Any] | None = None


class CallToolRequest(_RequestEnvelope):
    method: Literal["tools/call"]
    params: CallToolParams


MCPRequest = Annotated[
    InitializeRequest | ListToolsRequest | CallToolRequest,
    Field(discriminator="method"),
]

# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class TextContent(BaseModel):
    """A text content block inside a ``tools/call`` result."""

    type: Literal["text"] = "text"
    text: str


class CallToolResult(BaseModel):
    """Result of ``tools/call``.

    ``is_error`` is only set for tool-level failures; a successful call
    serialises without the ``isError`` key.
    """

    model_config = {"populate_by_name": True}

    content: list[TextContent] = []
    is_error: bool | None = Field(default=None, alias="isError")

    @classmethod
    def from_text(cls, text: str, *, is_error: bool = False) -> CallToolResult:
        return cls(content=[TextContent(text=text)], is_error=True if is_error else None)

    @property
    def text(self) -> str:
        """Concatenated text of all content blocks."""
        return "\n".join(block.text for block in self.content)


class ServerInfo(BaseModel):
    name: str
    version: str


class InitializeResult(BaseModel):
    model_config = {"populate_by_name": True}

    protocol_version: str = Field(alias="protocolVersion")
    capabilities: dict[str, Any] = Field(default_factory=lambda: {"tools": {}})
    server_info: ServerInfo = Field(alias="serverInfo")


class MCPToolDef(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = {"populate_by_name": True}

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")


class ListToolsResult(BaseModel):
    tools: list[MCPToolDef] = []
