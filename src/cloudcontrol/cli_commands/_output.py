"""Shared CLI output formatters and logging setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

if TYPE_CHECKING:
    from collections.abc import Iterable

    from cloudcontrol.protocols.mcp.models import MCPToolDef

console = Console()
# Logs and diagnostics; stdout may be carrying protocol messages.
err_console = Console(stderr=True)

_LOGGER_NAME = "cloudcontrol"


def configure_logging(level: str) -> None:
    """Route ``cloudcontrol.*`` loggers to stderr through a single RichHandler."""
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=err_console, show_path=False, rich_tracebacks=True))
    logger.setLevel(level.upper())


def print_tools_table(tools: Iterable[MCPToolDef], *, title: str = "Tools") -> None:
    """Pretty-print tool definitions as a table."""
    table = Table(title=title)
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Description")

    for tool in tools:
        table.add_row(tool.name, _truncate(tool.description))

    console.print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
