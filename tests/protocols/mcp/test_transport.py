"""Tests for MCP client transports (HTTP and stdio) with mocks."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from cloudcontrol.protocols.mcp.transport import HttpTransport, MCPTransport, StdioTransport


class TestMCPTransportProtocol:
    def test_stdio_satisfies_protocol(self) -> None:
        assert isinstance(StdioTransport(command="echo test"), MCPTransport)

    def test_http_satisfies_protocol(self) -> None:
        assert isinstance(HttpTransport(url="http://localhost:3000/mcp"), MCPTransport)


class TestHttpTransport:
    async def test_exchange_posts_json(self) -> None:
        seen: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(json.loads(request.content))
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": {}})

        transport = HttpTransport("http://mcp.test/mcp", transport=httpx.MockTransport(handler))
        await transport.connect()
        try:
            reply = await transport.exchange({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
        finally:
            await transport.close()

        assert reply == {"jsonrpc": "2.0", "id": 1, "result": {}}
        assert seen == [{"jsonrpc": "2.0", "id": 1, "method": "tools/list"}]

    async def test_no_content_returns_none(self) -> None:
        transport = HttpTransport(
            "http://mcp.test/mcp",
            transport=httpx.MockTransport(lambda _request: httpx.Response(204)),
        )
        await transport.connect()
        try:
            assert await transport.exchange({"jsonrpc": "2.0", "method": "x"}) is None
        finally:
            await transport.close()

    async def test_http_error_status_raises(self) -> None:
        transport = HttpTransport(
            "http://mcp.test/mcp",
            transport=httpx.MockTransport(lambda _request: httpx.Response(500)),
        )
        await transport.connect()
        try:
            with pytest.raises(httpx.HTTPStatusError):
                await transport.exchange({"jsonrpc": "2.0", "id": 1, "method": "x"})
        finally:
            await transport.close()

    async def test_exchange_without_connect_raises(self) -> None:
        with pytest.raises(RuntimeError, match="not connected"):
            await HttpTransport("http://mcp.test/mcp").exchange({})


class TestStdioTransport:
    async def test_connect_launches_subprocess(self) -> None:
        mock_proc = AsyncMock()

        with patch("asyncio.create_subprocess_exec", return_value=mock_proc) as mock_exec:
            transport = StdioTransport(command="cloudcontrol serve --transport stdio")
            await transport.connect()

        mock_exec.assert_awaited_once()
        assert mock_exec.call_args.args == ("cloudcontrol", "serve", "--transport", "stdio")

    async def test_connect_with_env(self) -> None:
        env = {"AWS_PROFILE": "dev"}

        with patch("asyncio.create_subprocess_exec", return_value=AsyncMock()) as mock_exec:
            await StdioTransport(command="tool serve", env=env).connect()

        assert mock_exec.call_args.kwargs["env"] == env

    async def test_exchange_writes_line_and_reads_reply(self) -> None:
        expected = {"jsonrpc": "2.0", "id": 1, "result": {"ok": True}}
        mock_proc = MagicMock()
        mock_proc.stdin.write = MagicMock()
        mock_proc.stdin.drain = AsyncMock()
        mock_proc.stdout.readline = AsyncMock(return_value=(json.dumps(expected) + "\n").encode())

        transport = StdioTransport(command="echo test")
        transport._process = mock_proc

        data = {"jsonrpc": "2.0", "id": 1, "method": "tools/list"}
        result = await transport.exchange(data)

        written = mock_proc.stdin.write.call_args[0][0]
        assert json.loads(written.decode()) == data
        assert written.endswith(b"\n")
        assert result == expected

    async def test_notification_does_not_wait_for_reply(self) -> None:
        mock_proc = MagicMock()
        mock_proc.stdin.drain = AsyncMock()
        mock_proc.stdout.readline = AsyncMock()

        transport = StdioTransport(command="echo test")
        transport._process = mock_proc

        assert await transport.exchange({"jsonrpc": "2.0", "method": "notifications/initialized"}) is None
        mock_proc.stdout.readline.assert_not_awaited()

    async def test_closed_stdout_raises(self) -> None:
        mock_proc = MagicMock()
        mock_proc.stdin.drain = AsyncMock()
        mock_proc.stdout.readline = AsyncMock(return_value=b"")

        transport = StdioTransport(command="echo test")
        transport._process = mock_proc

        with pytest.raises(RuntimeError, match="closed"):
            await transport.exchange({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})

    async def test_exchange_without_connect_raises(self) -> None:
        with pytest.raises(RuntimeError, match="not connected"):
            await StdioTransport(command="echo test").exchange({"id": 1})

    async def test_close_terminates_hung_process(self) -> None:
        mock_proc = MagicMock()
        mock_proc.wait = AsyncMock(side_effect=[TimeoutError(), 0])

        transport = StdioTransport(command="echo test")
        transport._process = mock_proc

        await transport.close()

        mock_proc.stdin.close.assert_called_once()
        mock_proc.terminate.assert_called_once()
        assert transport._process is None
