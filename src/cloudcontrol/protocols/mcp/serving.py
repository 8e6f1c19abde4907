"""Server-side adapters between raw bytes and :class:`MCPServer`.

:func:`handle_raw` is shared by every transport: it decodes one JSON payload
and hands it to the server.  :func:`serve_stdio` speaks newline-delimited
JSON over a pair of text streams, the way MCP hosts launch local servers.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import TYPE_CHECKING, Any, TextIO

from cloudcontrol.protocols.errors import PARSE_ERROR
from cloudcontrol.protocols.mcp.formatter import error_response

if TYPE_CHECKING:
    from cloudcontrol.protocols.mcp.server import MCPServer

logger = logging.getLogger(__name__)


async def handle_raw(server: MCPServer, raw: str | bytes) -> dict[str, Any] | None:
    """Decode *raw* as JSON and process it.

    Undecodable payloads get a ``-32700`` parse error with a ``null`` id,
    since no id can be recovered from them.
    """
    try:
        message = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        logger.info("Discarding unparseable payload: %s", exc)
        return error_response(None, PARSE_ERROR, "Parse error").to_wire()
    return await server.process(message)


async def serve_stdio(
    server: MCPServer,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """Serve requests read line by line from *stdin* until EOF.

    One response line is written per request; notifications produce no
    output.  Logging must not go to *stdout* while this runs.
    """
    reader = stdin or sys.stdin
    writer = stdout or sys.stdout

    while True:
        line = await asyncio.to_thread(reader.readline)
        if not line:
            logger.debug("stdin closed; stopping stdio server")
            return
        if not line.strip():
            continue

        response = await handle_raw(server, line)
        if response is None:
            continue
        writer.write(json.dumps(response) + "\n")
        writer.flush()
