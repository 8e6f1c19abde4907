"""FastAPI application exposing the MCP endpoint over HTTP."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from cloudcontrol import __version__
from cloudcontrol.protocols.mcp.serving import handle_raw

if TYPE_CHECKING:
    from cloudcontrol.protocols.mcp.server import MCPServer


def create_app(server: MCPServer) -> FastAPI:
    """Build the HTTP app around *server*.

    ``POST /mcp`` takes one JSON-RPC message per request.  Every JSON-RPC
    outcome, errors included, is returned with HTTP 200; notifications get
    ``204 No Content``.
    """
    app = FastAPI(title="AWS CloudControl MCP Server", version=__version__)

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/mcp")
    async def mcp_endpoint(request: Request) -> Response:
        body = await request.body()
        result = await handle_raw(server, body)
        if result is None:
            return Response(status_code=status.HTTP_204_NO_CONTENT)
        return JSONResponse(result)

    return app
