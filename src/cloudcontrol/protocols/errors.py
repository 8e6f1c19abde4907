"""Shared error types for the protocol layer."""

from __future__ import annotations

from typing import Any

# JSON-RPC 2.0 error codes used by the server and the client.
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""


class ConnectionError(ProtocolError):
    """Failed to connect to an MCP server."""


class InvalidRequestError(ProtocolError):
    """A JSON-RPC message was rejected before reaching a tool.

    Carries everything needed to build the ``error`` member of the response.
    """

    def __init__(
        self,
        message: str,
        *,
        code: int = INVALID_PARAMS,
        request_id: Any = 0,
        data: Any = None,
    ) -> None:
        self.code = code
        self.request_id = request_id
        self.data = data
        super().__init__(message)


class ToolNotFoundError(ProtocolError):
    """Requested tool does not exist in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")


class ToolExecutionError(ProtocolError):
    """A tool invocation failed while talking to its backing service."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"{operation} failed" + (f": {detail}" if detail else ""))


class ToolTimeoutError(ToolExecutionError):
    """A polling tool gave up waiting for its backing operation."""

    def __init__(self, operation: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(operation, f"did not complete within {timeout:g} seconds")
