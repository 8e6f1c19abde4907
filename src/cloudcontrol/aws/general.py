"""Service-agnostic tools.

``aws_general_execute_command`` lets a caller reach any boto3 operation by
name, limited to read-only verbs so the tool cannot mutate an account.
"""

from __future__ import annotations

import logging
from typing import Any

from botocore import xform_name
from botocore.exceptions import BotoCoreError
from pydantic import Field

from cloudcontrol.aws.client import AWSArgs, AWSClientFactory, aws_call
from cloudcontrol.protocols.errors import ToolExecutionError
from cloudcontrol.tools.base import Tool, tool

logger = logging.getLogger(__name__)

READ_ONLY_PREFIXES = ("describe_", "list_", "get_", "head_", "lookup_")


class ExecuteCommandArgs(AWSArgs):
    service: str = Field(description="AWS service name (e.g. 'ec2', 'lambda', 's3', 'dynamodb')")
    operation: str = Field(description="Operation name (e.g. 'describeInstances' or 'describe_instances')")
    parameters: dict[str, Any] | None = Field(default=None, description="Parameters for the operation")


def create_general_tools(factory: AWSClientFactory) -> list[Tool]:
    @tool("aws_general_list_services", "List the AWS service names available to execute-command")
    async def list_services() -> dict[str, Any]:
        services = sorted(factory.session.get_available_services())
        return {"services": services, "count": len(services)}

    @tool(
        "aws_general_execute_command",
        "Execute a read-only AWS SDK operation (describe/list/get/head/lookup) on any service",
        args=ExecuteCommandArgs,
    )
    async def execute_command(args: ExecuteCommandArgs) -> dict[str, Any]:
        service = args.service.strip().lower()
        method = xform_name(args.operation.strip())
        operation = f"{service} {method}"

        if not method.startswith(READ_ONLY_PREFIXES):
            raise ToolExecutionError(
                operation,
                f"only read-only operations are allowed ({', '.join(p.rstrip('_') for p in READ_ONLY_PREFIXES)})",
            )

        try:
            client = factory.client(service, args.region)
        except BotoCoreError as exc:
            raise ToolExecutionError(operation, str(exc)) from exc

        fn = getattr(client, method, None)
        if fn is None or method not in client.meta.method_to_api_mapping:
            raise ToolExecutionError(operation, f"unknown operation for service {service!r}")

        logger.info("Executing %s.%s", service, method)
        response = await aws_call(operation, fn, **(args.parameters or {}))
        response.pop("ResponseMetadata", None)
        return {
            "service": service,
            "operation": method,
            "region": factory.region(args.region),
            "result": response,
        }

    return [list_services, execute_command]
