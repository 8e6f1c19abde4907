"""AWS tool catalog.

Each service module exposes a ``create_<service>_tools(factory)`` builder.
:func:`create_aws_tools` assembles the enabled ones over a shared
:class:`AWSClientFactory`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from cloudcontrol.aws.awslambda import create_lambda_tools
from cloudcontrol.aws.client import AWSClientFactory, aws_call, resolve_region
from cloudcontrol.aws.cloudwatch import create_cloudwatch_tools
from cloudcontrol.aws.cost import create_cost_tools
from cloudcontrol.aws.ec2 import create_ec2_tools
from cloudcontrol.aws.general import create_general_tools
from cloudcontrol.aws.s3 import create_s3_tools
from cloudcontrol.aws.sqs import create_sqs_tools
from cloudcontrol.config import AWSSettings
from cloudcontrol.tools.base import Tool

logger = logging.getLogger(__name__)

_SERVICE_BUILDERS: dict[str, Callable[[AWSClientFactory], list[Tool]]] = {
    "s3": create_s3_tools,
    "ec2": create_ec2_tools,
    "lambda": create_lambda_tools,
    "cloudwatch": create_cloudwatch_tools,
    "sqs": create_sqs_tools,
    "cost": create_cost_tools,
    "general": create_general_tools,
}


def create_aws_tools(
    settings: AWSSettings | None = None,
    factory: AWSClientFactory | None = None,
) -> list[Tool]:
    """Build the tools of every service enabled in *settings*, in catalog order."""
    settings = settings or AWSSettings()
    factory = factory or AWSClientFactory(settings)

    unknown = set(settings.services) - set(_SERVICE_BUILDERS)
    if unknown:
        logger.warning("Ignoring unknown AWS services in config: %s", ", ".join(sorted(unknown)))

    tools: list[Tool] = []
    for service, build in _SERVICE_BUILDERS.items():
        if not settings.service_enabled(service):
            logger.debug("AWS service %s disabled", service)
            continue
        tools.extend(build(factory))
    return tools


__all__ = [
    "AWSClientFactory",
    "aws_call",
    "create_aws_tools",
    "resolve_region",
]
