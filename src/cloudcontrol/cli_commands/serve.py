"""``cloudcontrol serve`` — run the MCP server over HTTP or stdio."""

from __future__ import annotations

import asyncio
import sys

import click

from cloudcontrol.cli_commands._output import configure_logging, err_console


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["http", "stdio"]),
    default="http",
    show_default=True,
    help="How MCP clients reach the server.",
)
@click.option("--host", default=None, help="HTTP bind address (overrides the config file).")
@click.option("--port", type=int, default=None, help="HTTP port (overrides the config file).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    envvar="CLOUDCONTROL_CONFIG",
    default=None,
    help="YAML config file.",
)
@click.pass_context
def serve(
    ctx: click.Context,
    transport: str,
    host: str | None,
    port: int | None,
    config_path: str | None,
) -> None:
    """Serve the AWS tools to MCP clients."""
    from cloudcontrol.bootstrap import build_server
    from cloudcontrol.config import ConfigError, load_config

    try:
        config = load_config(config_path)
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)

    configure_logging((ctx.obj or {}).get("log_level") or config.logging.level)
    server = build_server(config)

    if transport == "stdio":
        from cloudcontrol.protocols.mcp.serving import serve_stdio

        asyncio.run(serve_stdio(server))
        return

    import uvicorn

    from cloudcontrol.api import create_app

    bind_host = host or config.http.host
    bind_port = port or config.http.port
    err_console.print(f"MCP endpoint: http://{bind_host}:{bind_port}/mcp")
    uvicorn.run(create_app(server), host=bind_host, port=bind_port, log_level="warning")
