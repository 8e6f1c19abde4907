"""Tests for the raw-payload handler and the stdio server loop."""

from __future__ import annotations

import io
import json

from cloudcontrol.protocols.mcp.server import MCPServer
from cloudcontrol.protocols.mcp.serving import handle_raw, serve_stdio
from cloudcontrol.tools.base import tool
from cloudcontrol.tools.registry import ToolRegistry


@tool("hello", "Say hello")
async def hello() -> str:
    return "hello"


def _server() -> MCPServer:
    return MCPServer(ToolRegistry([hello]))


class TestHandleRaw:
    async def test_parse_error(self) -> None:
        response = await handle_raw(_server(), b"{not json")
        assert response == {
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": -32700, "message": "Parse error"},
        }

    async def test_deeply_nested_payload_is_parse_error(self) -> None:
        response = await handle_raw(_server(), "[" * 100_000 + "]" * 100_000)
        assert response == {
            "jsonrpc": "2.0",
            "id": None,
            "error": {"code": -32700, "message": "Parse error"},
        }

    async def test_bytes_and_str_accepted(self) -> None:
        message = {"jsonrpc": "2.0", "id": 1, "method": "tools/list"}
        from_bytes = await handle_raw(_server(), json.dumps(message).encode())
        from_str = await handle_raw(_server(), json.dumps(message))
        assert from_bytes == from_str
        assert from_bytes is not None
        assert from_bytes["result"]["tools"][0]["name"] == "hello"

    async def test_notification_returns_none(self) -> None:
        raw = json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"})
        assert await handle_raw(_server(), raw) is None

    async def test_json_array_is_invalid_request(self) -> None:
        response = await handle_raw(_server(), "[]")
        assert response is not None
        assert response["error"]["code"] == -32600


class TestServeStdio:
    async def test_one_line_per_request(self) -> None:
        lines = [
            json.dumps({"jsonrpc": "2.0", "id": 1, "method": "tools/list"}),
            json.dumps({"jsonrpc": "2.0", "method": "notifications/initialized"}),
            "",
            json.dumps({"jsonrpc": "2.0", "id": 2, "method": "tools/call", "params": {"name": "hello"}}),
            "garbage",
        ]
        stdin = io.StringIO("\n".join(lines) + "\n")
        stdout = io.StringIO()

        await serve_stdio(_server(), stdin, stdout)

        responses = [json.loads(line) for line in stdout.getvalue().splitlines()]
        assert [r["id"] for r in responses] == [1, 2, None]
        assert responses[1]["result"]["content"][0]["text"] == "hello"
        assert responses[2]["error"]["code"] == -32700

    async def test_survives_deeply_nested_line(self) -> None:
        lines = [
            "[" * 100_000 + "]" * 100_000,
            json.dumps({"jsonrpc": "2.0", "id": 7, "method": "tools/list"}),
        ]
        stdout = io.StringIO()

        await serve_stdio(_server(), io.StringIO("\n".join(lines) + "\n"), stdout)

        responses = [json.loads(line) for line in stdout.getvalue().splitlines()]
        assert [r["id"] for r in responses] == [None, 7]
        assert responses[0]["error"]["code"] == -32700

    async def test_stops_at_eof(self) -> None:
        stdout = io.StringIO()
        await serve_stdio(_server(), io.StringIO(""), stdout)
        assert stdout.getvalue() == ""
