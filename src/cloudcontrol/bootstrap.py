"""Wire configuration, AWS tools, policy and tracing into an :class:`MCPServer`."""

from __future__ import annotations

import logging

from cloudcontrol.aws import AWSClientFactory, create_aws_tools
from cloudcontrol.config import CloudControlConfig
from cloudcontrol.protocols.mcp.server import MCPServer
from cloudcontrol.tools.registry import build_registry
from cloudcontrol.utils.telemetry import configure_from_settings

logger = logging.getLogger(__name__)


def build_server(
    config: CloudControlConfig | None = None,
    *,
    factory: AWSClientFactory | None = None,
) -> MCPServer:
    """Build a ready-to-serve :class:`MCPServer` from *config*."""
    config = config or CloudControlConfig()

    if configure_from_settings(config.telemetry, service_name=config.server.name):
        logger.info("Tracing enabled for %s", config.server.name)

    factory = factory or AWSClientFactory(config.aws)
    tools = create_aws_tools(config.aws, factory)
    registry = build_registry(tools, config.tool_policy)
    logger.info(
        "Registered %d of %d tools (region %s)",
        len(registry),
        len(tools),
        factory.region(),
    )
    return MCPServer(registry, config.server)
