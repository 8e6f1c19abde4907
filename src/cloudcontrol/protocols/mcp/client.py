"""MCPClient — connects to an MCP server and calls its tools.

Performs the ``initialize`` handshake, then offers tool discovery
(``tools/list``) and execution (``tools/call``) over an :class:`MCPTransport`.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from cloudcontrol import __version__
from cloudcontrol.config import DEFAULT_PROTOCOL_VERSION
from cloudcontrol.protocols.errors import (
    METHOD_NOT_FOUND,
    ConnectionError,
    ProtocolError,
    ToolNotFoundError,
)
from cloudcontrol.protocols.mcp.models import (
    CallToolResult,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    ListToolsResult,
    MCPToolDef,
    ServerInfo,
)
from cloudcontrol.protocols.mcp.transport import MCPTransport

logger = logging.getLogger(__name__)


class MCPClient:
    """Async context manager around an MCP server connection.

    Usage::

        async with MCPClient(HttpTransport("http://localhost:3000/mcp")) as client:
            tools = await client.list_tools()
            result = await client.call_tool("aws_s3_list_buckets", {})
    """

    def __init__(self, transport: MCPTransport, *, client_name: str = "cloudcontrol") -> None:
        self._transport = transport
        self._client_name = client_name
        self._next_id = 1
        self._connected = False
        self.server_info: ServerInfo | None = None

    async def __aenter__(self) -> MCPClient:
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def connect(self) -> None:
        """Open the transport and perform the initialize handshake."""
        try:
            await self._transport.connect()
        except Exception as exc:
            raise ConnectionError(str(exc)) from exc
        self._connected = True
        await self._handshake()

    async def close(self) -> None:
        if self._connected:
            await self._transport.close()
            self._connected = False

    async def list_tools(self) -> list[MCPToolDef]:
        """Send ``tools/list`` and return the advertised tool definitions."""
        response = await self._send_request("tools/list")
        self._raise_for_error(response)
        return ListToolsResult.model_validate(response.result or {}).tools

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> CallToolResult:
        """Send ``tools/call``.

        Tool-level failures come back as a result with ``is_error`` set;
        protocol failures raise.

        Raises:
            ToolNotFoundError: The server does not know *name*.
            ProtocolError: Any other JSON-RPC error.
        """
        response = await self._send_request(
            "tools/call",
            params={"name": name, "arguments": arguments or {}},
        )
        if response.error is not None and response.error.code == METHOD_NOT_FOUND:
            raise ToolNotFoundError(name)
        self._raise_for_error(response)
        return CallToolResult.model_validate(response.result or {})

    async def _handshake(self) -> None:
        response = await self._send_request(
            "initialize",
            params={
                "protocolVersion": DEFAULT_PROTOCOL_VERSION,
                "capabilities": {},
                "clientInfo": {"name": self._client_name, "version": __version__},
            },
        )
        self._raise_for_error(response)
        result = response.result or {}
        if "serverInfo" in result:
            self.server_info = ServerInfo.model_validate(result["serverInfo"])
        await self._send_notification("notifications/initialized")

    async def _send_request(
        self,
        method: str,
        params: dict[str, Any] | None = None,
    ) -> JsonRpcResponse:
        if not self._connected:
            msg = "Client not connected"
            raise RuntimeError(msg)

        request = JsonRpcRequest(method=method, id=self._next_id, params=params or {})
        self._next_id += 1

        try:
            raw = await self._transport.exchange(request.model_dump())
        except httpx.HTTPError as exc:
            raise ConnectionError(str(exc)) from exc
        if raw is None:
            msg = f"No response to {method} request"
            raise ProtocolError(msg)
        return JsonRpcResponse.model_validate(raw)

    async def _send_notification(self, method: str) -> None:
        notification = JsonRpcNotification(method=method)
        try:
            raw = await self._transport.exchange(notification.model_dump())
        except httpx.HTTPError as exc:
            raise ConnectionError(str(exc)) from exc
        if raw is not None:
            logger.debug("Server replied to notification %s: %s", method, raw)

    @staticmethod
    def _raise_for_error(response: JsonRpcResponse) -> None:
        if response.error is not None:
            msg = f"JSON-RPC error {response.error.code}: {response.error.message}"
            raise ProtocolError(msg)
