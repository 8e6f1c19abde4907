"""MCP client transports — HTTP and stdio communication layers.

Each transport satisfies the :class:`MCPTransport` protocol.  ``exchange``
sends one JSON-RPC message and returns the reply, or ``None`` when the
message was a notification (no ``id``) and the server sent nothing back.
"""

from __future__ import annotations

import asyncio
import json
import shlex
from typing import Any, Protocol, runtime_checkable

import httpx


@runtime_checkable
class MCPTransport(Protocol):
    """Abstract transport for MCP JSON-RPC communication."""

    async def connect(self) -> None: ...
    async def exchange(self, data: dict[str, Any]) -> dict[str, Any] | None: ...
    async def close(self) -> None: ...


class HttpTransport:
    """POSTs each message to an MCP endpoint such as ``http://host:3000/mcp``.

    A ``204 No Content`` reply maps to ``None``.  *transport* accepts any
    ``httpx`` transport, e.g. ``httpx.ASGITransport(app)`` to talk to an
    in-process app.
    """

    def __init__(
        self,
        url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def exchange(self, data: dict[str, Any]) -> dict[str, Any] | None:
        if self._client is None:
            msg = "Transport not connected"
            raise RuntimeError(msg)
        response = await self._client.post(self._url, json=data)
        response.raise_for_status()
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()  # type: ignore[no-any-return]

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


class StdioTransport:
    """Talks to an MCP server subprocess over stdin/stdout.

    Sends and receives newline-delimited JSON.
    """

    def __init__(self, command: str, env: dict[str, str] | None = None) -> None:
        self._command = command
        self._env = env
        self._process: asyncio.subprocess.Process | None = None

    async def connect(self) -> None:
        """Launch the subprocess."""
        self._process = await asyncio.create_subprocess_exec(
            *shlex.split(self._command),
            stdin=asyncio.subprocess.PIPE,
            stdout=asyncio.subprocess.PIPE,
            env=self._env,
        )

    async def exchange(self, data: dict[str, Any]) -> dict[str, Any] | None:
        process = self._process
        if process is None or process.stdin is None or process.stdout is None:
            msg = "Transport not connected"
            raise RuntimeError(msg)
        process.stdin.write((json.dumps(data) + "\n").encode())
        await process.stdin.drain()
        if "id" not in data:
            return None
        line = await process.stdout.readline()
        if not line:
            msg = "Transport closed"
            raise RuntimeError(msg)
        return json.loads(line)  # type: ignore[no-any-return]

    async def close(self) -> None:
        """Close stdin and wait for the subprocess to exit."""
        if self._process is not None:
            if self._process.stdin:
                self._process.stdin.close()
            try:
                await asyncio.wait_for(self._process.wait(), timeout=5.0)
            except TimeoutError:
                self._process.terminate()
                await self._process.wait()
            self._process = None
