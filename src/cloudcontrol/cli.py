"""cloudcontrol CLI entrypoint."""

from __future__ import annotations

import click

from cloudcontrol import __version__
from cloudcontrol.cli_commands._output import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="cloudcontrol")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (overrides the config file).",
)
@click.pass_context
def main(ctx: click.Context, log_level: str | None) -> None:
    """cloudcontrol — MCP server for AWS."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level.upper() if log_level else None
    configure_logging(ctx.obj["log_level"] or "WARNING")


# Register subcommands
from cloudcontrol.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
