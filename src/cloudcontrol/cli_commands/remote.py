"""``cloudcontrol remote`` — talk to a running MCP server."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import TYPE_CHECKING

import click

from cloudcontrol.cli_commands._output import console, print_tools_table

if TYPE_CHECKING:
    from cloudcontrol.protocols.mcp.models import CallToolResult, MCPToolDef


@click.group()
def remote() -> None:
    """List and call tools on a remote MCP server."""


@remote.command("list")
@click.argument("url")
def list_cmd(url: str) -> None:
    """List the tools advertised by the MCP server at URL."""
    from cloudcontrol.protocols.mcp.client import MCPClient
    from cloudcontrol.protocols.mcp.transport import HttpTransport

    async def _list() -> list[MCPToolDef]:
        async with MCPClient(HttpTransport(url)) as client:
            return await client.list_tools()

    try:
        tool_defs = asyncio.run(_list())
    except Exception as exc:
        console.print(f"[red]Remote error:[/red] {exc}")
        sys.exit(1)

    if not tool_defs:
        console.print("[yellow]No tools advertised.[/yellow]")
        return

    print_tools_table(tool_defs, title=f"Tools at {url}")


@remote.command("call")
@click.argument("url")
@click.argument("name")
@click.option("--args", "raw_args", default="{}", show_default=True, help="Tool arguments as a JSON object.")
def call_cmd(url: str, name: str, raw_args: str) -> None:
    """Call tool NAME on the MCP server at URL."""
    from cloudcontrol.protocols.mcp.client import MCPClient
    from cloudcontrol.protocols.mcp.transport import HttpTransport

    try:
        arguments = json.loads(raw_args)
    except ValueError as exc:
        console.print(f"[red]Invalid --args JSON:[/red] {exc}")
        sys.exit(1)

    async def _call() -> CallToolResult:
        async with MCPClient(HttpTransport(url)) as client:
            return await client.call_tool(name, arguments)

    try:
        result = asyncio.run(_call())
    except Exception as exc:
        console.print(f"[red]Remote error:[/red] {exc}")
        sys.exit(1)

    click.echo(result.text)
    if result.is_error:
        sys.exit(1)
