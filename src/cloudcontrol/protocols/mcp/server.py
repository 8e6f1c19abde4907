"""MCPServer — the protocol state machine behind every transport.

Each message goes through the same stages::

    classify ──► notification ──────────────────────────────► None
        │
        ├──► rejected envelope ─────────────────────────────► error
        │
        └──► initialize │ tools/list │ tools/call
                                          │
                            lookup ──► validate ──► run ──► format
                              │           │          │
                           -32601      isError    isError

Protocol failures surface in the JSON-RPC ``error`` member.  Tool failures
(bad arguments, exceptions raised by ``run``) are folded into a successful
response whose result carries ``isError: true``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from cloudcontrol.config import ServerSettings
from cloudcontrol.protocols.errors import METHOD_NOT_FOUND, InvalidRequestError, ToolNotFoundError
from cloudcontrol.protocols.mcp.formatter import (
    error_response,
    format_error,
    format_issues,
    format_value,
    result_response,
)
from cloudcontrol.protocols.mcp.models import (
    CallToolParams,
    CallToolResult,
    InitializeRequest,
    InitializeResult,
    ListToolsRequest,
    ListToolsResult,
    MCPRequest,
    MCPToolDef,
    ServerInfo,
)
from cloudcontrol.protocols.mcp.schema import Notification, classify
from cloudcontrol.tools.registry import ToolRegistry
from cloudcontrol.tools.validation import validate_arguments
from cloudcontrol.utils.telemetry import (
    ATTR_RPC_ERROR_CODE,
    ATTR_RPC_ID,
    ATTR_RPC_METHOD,
    ATTR_TOOL_IS_ERROR,
    ATTR_TOOL_NAME,
    get_tracer,
)

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)


@dataclass(frozen=True)
class ProtocolFailure:
    """A request that cannot be served; becomes the JSON-RPC ``error`` member."""

    code: int
    message: str
    data: Any = None


DispatchOutcome = ProtocolFailure | InitializeResult | ListToolsResult | CallToolResult


class MCPServer:
    """Dispatch MCP JSON-RPC messages against a :class:`ToolRegistry`.

    The server keeps no per-request state, so one instance can serve any
    number of concurrent requests.

    Usage::

        server = MCPServer(ToolRegistry(tools))
        response = await server.process(
            {"jsonrpc": "2.0", "id": 1, "method": "tools/list"}
        )
    """

    def __init__(self, registry: ToolRegistry, settings: ServerSettings | None = None) -> None:
        self._registry = registry
        self._settings = settings or ServerSettings()

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    @property
    def settings(self) -> ServerSettings:
        return self._settings

    async def process(self, message: Any) -> dict[str, Any] | None:
        """Handle one parsed JSON-RPC message.

        Returns the response as a plain dict, or ``None`` for notifications.
        Never raises for bad input or failing tools.
        """
        with _tracer.start_as_current_span("mcp.request") as span:
            try:
                request = classify(message)
            except InvalidRequestError as exc:
                logger.info("Rejected JSON-RPC message (id=%r): %s", exc.request_id, exc)
                span.set_attribute(ATTR_RPC_ERROR_CODE, exc.code)
                return error_response(exc.request_id, exc.code, str(exc), exc.data).to_wire()

            if isinstance(request, Notification):
                logger.debug("Notification %r acknowledged without response", request.method)
                return None

            span.set_attribute(ATTR_RPC_METHOD, request.method)
            span.set_attribute(ATTR_RPC_ID, str(request.id))
            logger.debug("Dispatching %s (id=%r)", request.method, request.id)

            outcome = await self.dispatch(request)

            if isinstance(outcome, ProtocolFailure):
                span.set_attribute(ATTR_RPC_ERROR_CODE, outcome.code)
                return error_response(request.id, outcome.code, outcome.message, outcome.data).to_wire()
            return result_response(request.id, outcome).to_wire()

    async def dispatch(self, request: MCPRequest) -> DispatchOutcome:
        """Route a validated request to its method handler."""
        if isinstance(request, InitializeRequest):
            return self.initialize()
        if isinstance(request, ListToolsRequest):
            return self.list_tools()
        return await self.call_tool(request.params)

    def initialize(self) -> InitializeResult:
        """Server metadata; independent of what the client announced."""
        return InitializeResult(
            protocol_version=self._settings.protocol_version,
            capabilities={"tools": {}},
            server_info=ServerInfo(name=self._settings.name, version=self._settings.version),
        )

    def list_tools(self) -> ListToolsResult:
        return ListToolsResult(
            tools=[
                MCPToolDef(
                    name=item.name,
                    description=item.description,
                    input_schema=item.input_schema,
                )
                for item in self._registry
            ]
        )

    async def call_tool(self, params: CallToolParams) -> DispatchOutcome:
        """Look up, validate, run and format a single tool call."""
        tool = self._registry.find(params.name)
        if tool is None:
            logger.info("tools/call for unknown tool %r", params.name)
            return ProtocolFailure(METHOD_NOT_FOUND, str(ToolNotFoundError(params.name)))

        with _tracer.start_as_current_span("mcp.tools.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, tool.name)

            validation = validate_arguments(tool.args, params.arguments)
            if not validation.ok:
                logger.info("Invalid arguments for %s: %d issue(s)", tool.name, len(validation.issues))
                span.set_attribute(ATTR_TOOL_IS_ERROR, True)
                return format_issues(validation.issues)

            try:
                if tool.args is None:
                    value = await tool.run()
                else:
                    value = await tool.run(validation.value)
                result = format_value(value)
            except Exception as exc:
                logger.warning("Tool %s failed: %s", tool.name, exc)
                logger.debug("Traceback for %s", tool.name, exc_info=True)
                span.record_exception(exc)
                result = format_error(exc)

            span.set_attribute(ATTR_TOOL_IS_ERROR, bool(result.is_error))
            return result
