"""``cloudcontrol tools`` — inspect and call the local tool catalog."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import TYPE_CHECKING

import click

from cloudcontrol.cli_commands._output import console, print_tools_table

if TYPE_CHECKING:
    from cloudcontrol.protocols.mcp.server import MCPServer


@click.group()
def tools() -> None:
    """List and call the locally configured tools."""


def _load_server(config_path: str | None) -> MCPServer:
    from cloudcontrol.bootstrap import build_server
    from cloudcontrol.config import ConfigError, load_config

    try:
        return build_server(load_config(config_path))
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)


_config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    envvar="CLOUDCONTROL_CONFIG",
    default=None,
    help="YAML config file.",
)


@tools.command("list")
@_config_option
@click.option("--json", "as_json", is_flag=True, help="Print the tools/list result as JSON.")
def list_cmd(config_path: str | None, as_json: bool) -> None:
    """List the tools this server would advertise."""
    server = _load_server(config_path)
    result = server.list_tools()

    if as_json:
        click.echo(result.model_dump_json(by_alias=True, indent=2))
        return

    if not result.tools:
        console.print("[yellow]No tools enabled.[/yellow]")
        return

    print_tools_table(result.tools)


@tools.command("call")
@click.argument("name")
@click.option("--args", "raw_args", default="{}", show_default=True, help="Tool arguments as a JSON object.")
@_config_option
def call_cmd(name: str, raw_args: str, config_path: str | None) -> None:
    """Call tool NAME in-process and print its text result."""
    from cloudcontrol.protocols.mcp.models import CallToolParams
    from cloudcontrol.protocols.mcp.server import ProtocolFailure

    try:
        arguments = json.loads(raw_args)
    except ValueError as exc:
        console.print(f"[red]Invalid --args JSON:[/red] {exc}")
        sys.exit(1)
    if not isinstance(arguments, dict):
        console.print("[red]--args must be a JSON object[/red]")
        sys.exit(1)

    server = _load_server(config_path)
    outcome = asyncio.run(server.call_tool(CallToolParams(name=name, arguments=arguments)))

    if isinstance(outcome, ProtocolFailure):
        console.print(f"[red]Error {outcome.code}:[/red] {outcome.message}")
        sys.exit(1)

    click.echo(outcome.text)
    if outcome.is_error:
        sys.exit(1)
