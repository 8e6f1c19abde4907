"""Protocol layer — MCP JSON-RPC server, client and errors."""

from cloudcontrol.protocols.errors import (
    ConnectionError,
    InvalidRequestError,
    ProtocolError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolTimeoutError,
)

__all__ = [
    "ConnectionError",
    "InvalidRequestError",
    "ProtocolError",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolTimeoutError",
]
