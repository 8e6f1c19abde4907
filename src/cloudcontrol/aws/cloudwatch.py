"""CloudWatch metrics/alarms and CloudWatch Logs tools.

``aws_cloudwatchlogs_query`` is the one long-running tool in the catalog:
it starts a Logs Insights query and polls until the query reaches a
terminal state, giving up after ``maxWaitSeconds``.
"""

from __future__ import annotations

import asyncio
import time
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from cloudcontrol.aws.client import AWSArgs, AWSClientFactory, aws_call
from cloudcontrol.protocols.errors import ToolExecutionError, ToolTimeoutError
from cloudcontrol.tools.base import Tool, tool

TERMINAL_QUERY_STATES = frozenset({"Complete", "Failed", "Cancelled", "Timeout"})


class Dimension(BaseModel):
    name: str
    value: str | None = None


class ListMetricsArgs(AWSArgs):
    namespace: str | None = Field(
        default=None, description="Namespace to filter by (e.g. AWS/EC2, AWS/Lambda)"
    )
    metric_name: str | None = Field(default=None, description="Metric name to filter by")
    dimensions: list[Dimension] | None = Field(default=None, description="Dimensions to filter by")
    next_token: str | None = Field(default=None, description="Pagination token")


class DescribeAlarmsArgs(AWSArgs):
    alarm_names: list[str] | None = Field(default=None, description="Alarm names to describe")
    alarm_name_prefix: str | None = Field(default=None, description="Alarm name prefix")
    state_value: Literal["OK", "ALARM", "INSUFFICIENT_DATA"] | None = Field(
        default=None, description="Only return alarms in this state"
    )
    max_records: int | None = Field(default=None, ge=1, le=100, description="Maximum alarms to return")
    next_token: str | None = Field(default=None, description="Pagination token")


class DescribeLogGroupsArgs(AWSArgs):
    log_group_name_prefix: str | None = Field(default=None, description="Log group name prefix")
    limit: int | None = Field(default=None, ge=1, le=50, description="Maximum log groups to return")
    next_token: str | None = Field(default=None, description="Pagination token")


class LogsQueryArgs(AWSArgs):
    log_group_names: list[str] | None = Field(default=None, description="Log group names to query")
    log_group_name: str | None = Field(
        default=None, description="Single log group name (alternative to logGroupNames)"
    )
    query_string: str = Field(description="The Logs Insights query string")
    start_time: datetime = Field(description="Start of the time range (ISO 8601)")
    end_time: datetime = Field(description="End of the time range (ISO 8601)")
    limit: int | None = Field(default=None, ge=1, le=10000, description="Maximum log events to return")
    poll_interval_ms: int = Field(default=1000, ge=100, le=5000, description="Polling interval in milliseconds")
    max_wait_seconds: int = Field(
        default=60, ge=1, le=300, description="Maximum time to wait for the query to complete"
    )

    @model_validator(mode="after")
    def _require_log_group(self) -> LogsQueryArgs:
        if not self.log_group_names and not self.log_group_name:
            msg = "Either logGroupNames or logGroupName must be provided"
            raise ValueError(msg)
        return self

    @property
    def groups(self) -> list[str]:
        return self.log_group_names or [self.log_group_name or ""]


def _dimensions(raw: list[dict[str, Any]] | None) -> list[dict[str, Any]]:
    return [{"name": d.get("Name"), "value": d.get("Value")} for d in raw or []]


def _records(results: list[list[dict[str, Any]]]) -> list[dict[str, Any]]:
    return [{field.get("field", ""): field.get("value") for field in row} for row in results]


def create_cloudwatch_tools(factory: AWSClientFactory) -> list[Tool]:
    @tool("aws_cloudwatch_list_metrics", "List CloudWatch metrics with optional filtering", args=ListMetricsArgs)
    async def list_metrics(args: ListMetricsArgs) -> dict[str, Any]:
        client = factory.client("cloudwatch", args.region)
        dimensions = (
            [{"Name": d.name, **({"Value": d.value} if d.value is not None else {})} for d in args.dimensions]
            if args.dimensions
            else None
        )
        response = await aws_call(
            "CloudWatch list metrics",
            client.list_metrics,
            Namespace=args.namespace,
            MetricName=args.metric_name,
            Dimensions=dimensions,
            NextToken=args.next_token,
        )
        metrics = [
            {
                "metricName": metric.get("MetricName"),
                "namespace": metric.get("Namespace"),
                "dimensions": _dimensions(metric.get("Dimensions")),
            }
            for metric in response.get("Metrics", [])
        ]
        return {"metrics": metrics, "count": len(metrics), "nextToken": response.get("NextToken")}

    @tool("aws_cloudwatch_describe_alarms", "Describe CloudWatch metric alarms", args=DescribeAlarmsArgs)
    async def describe_alarms(args: DescribeAlarmsArgs) -> dict[str, Any]:
        client = factory.client("cloudwatch", args.region)
        response = await aws_call(
            "CloudWatch describe alarms",
            client.describe_alarms,
            AlarmNames=args.alarm_names,
            AlarmNamePrefix=args.alarm_name_prefix,
            StateValue=args.state_value,
            MaxRecords=args.max_records,
            NextToken=args.next_token,
        )
        alarms = [
            {
                "alarmName": alarm.get("AlarmName"),
                "stateValue": alarm.get("StateValue"),
                "stateReason": alarm.get("StateReason"),
                "stateUpdatedTimestamp": alarm.get("StateUpdatedTimestamp"),
                "metricName": alarm.get("MetricName"),
                "namespace": alarm.get("Namespace"),
                "threshold": alarm.get("Threshold"),
                "comparisonOperator": alarm.get("ComparisonOperator"),
                "dimensions": _dimensions(alarm.get("Dimensions")),
            }
            for alarm in response.get("MetricAlarms", [])
        ]
        return {"alarms": alarms, "count": len(alarms), "nextToken": response.get("NextToken")}

    @tool(
        "aws_cloudwatchlogs_describe_log_groups",
        "List CloudWatch Logs log groups",
        args=DescribeLogGroupsArgs,
    )
    async def describe_log_groups(args: DescribeLogGroupsArgs) -> dict[str, Any]:
        client = factory.client("logs", args.region)
        response = await aws_call(
            "CloudWatch Logs describe log groups",
            client.describe_log_groups,
            logGroupNamePrefix=args.log_group_name_prefix,
            limit=args.limit,
            nextToken=args.next_token,
        )
        groups = [
            {
                "logGroupName": group.get("logGroupName"),
                "retentionInDays": group.get("retentionInDays"),
                "storedBytes": group.get("storedBytes"),
                "creationTime": group.get("creationTime"),
            }
            for group in response.get("logGroups", [])
        ]
        return {"logGroups": groups, "count": len(groups), "nextToken": response.get("nextToken")}

    @tool(
        "aws_cloudwatchlogs_query",
        "Execute a CloudWatch Logs Insights query and wait for its results",
        args=LogsQueryArgs,
    )
    async def logs_query(args: LogsQueryArgs) -> dict[str, Any]:
        operation = "CloudWatch Logs query"
        client = factory.client("logs", args.region)

        started = await aws_call(
            operation,
            client.start_query,
            logGroupNames=args.groups,
            queryString=args.query_string,
            startTime=int(args.start_time.timestamp()),
            endTime=int(args.end_time.timestamp()),
            limit=args.limit,
        )
        query_id = started.get("queryId")
        if not query_id:
            raise ToolExecutionError(operation, "no queryId returned")

        deadline = time.monotonic() + args.max_wait_seconds
        while True:
            response = await aws_call(operation, client.get_query_results, queryId=query_id)
            status = response.get("status")
            if status in TERMINAL_QUERY_STATES:
                records = _records(response.get("results", []))
                return {
                    "queryId": query_id,
                    "status": status,
                    "statistics": response.get("statistics"),
                    "records": records,
                    "count": len(records),
                }
            if time.monotonic() >= deadline:
                raise ToolTimeoutError(operation, args.max_wait_seconds)
            await asyncio.sleep(args.poll_interval_ms / 1000)

    return [list_metrics, describe_alarms, describe_log_groups, logs_query]
