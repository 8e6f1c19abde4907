"""MCP protocol — Model Context Protocol server and client."""

from cloudcontrol.protocols.mcp.client import MCPClient
from cloudcontrol.protocols.mcp.models import (
    CallToolResult,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    MCPToolDef,
)
from cloudcontrol.protocols.mcp.server import MCPServer, ProtocolFailure
from cloudcontrol.protocols.mcp.serving import handle_raw, serve_stdio
from cloudcontrol.protocols.mcp.transport import HttpTransport, MCPTransport, StdioTransport

__all__ = [
    "CallToolResult",
    "HttpTransport",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MCPClient",
    "MCPServer",
    "MCPToolDef",
    "MCPTransport",
    "ProtocolFailure",
    "StdioTransport",
    "handle_raw",
    "serve_stdio",
]
