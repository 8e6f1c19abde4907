"""SQS tools."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from cloudcontrol.aws.client import AWSArgs, AWSClientFactory, aws_call
from cloudcontrol.tools.base import Tool, tool


class ListQueuesArgs(AWSArgs):
    queue_name_prefix: str | None = Field(default=None, description="Queue name prefix to filter by")
    max_results: int | None = Field(default=None, ge=1, le=1000, description="Maximum queues to return")
    next_token: str | None = Field(default=None, description="Pagination token")


class QueueAttributesArgs(AWSArgs):
    queue_url: str = Field(description="The URL of the queue")
    attribute_names: list[str] = Field(
        default_factory=lambda: ["All"],
        description="Attributes to return (default: All)",
    )


def create_sqs_tools(factory: AWSClientFactory) -> list[Tool]:
    @tool("aws_sqs_list_queues", "List SQS queues", args=ListQueuesArgs)
    async def list_queues(args: ListQueuesArgs) -> dict[str, Any]:
        client = factory.client("sqs", args.region)
        response = await aws_call(
            "SQS list queues",
            client.list_queues,
            QueueNamePrefix=args.queue_name_prefix,
            MaxResults=args.max_results,
            NextToken=args.next_token,
        )
        urls = response.get("QueueUrls", [])
        return {"queueUrls": urls, "count": len(urls), "nextToken": response.get("NextToken")}

    @tool("aws_sqs_get_queue_attributes", "Get the attributes of an SQS queue", args=QueueAttributesArgs)
    async def get_queue_attributes(args: QueueAttributesArgs) -> dict[str, Any]:
        client = factory.client("sqs", args.region)
        response = await aws_call(
            "SQS get queue attributes",
            client.get_queue_attributes,
            QueueUrl=args.queue_url,
            AttributeNames=args.attribute_names,
        )
        return {"queueUrl": args.queue_url, "attributes": response.get("Attributes", {})}

    return [list_queues, get_queue_attributes]
