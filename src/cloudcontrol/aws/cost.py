"""Cost Explorer tools.

Cost Explorer is a global service served only from ``us-east-1``, so the
client region is pinned regardless of configuration.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from cloudcontrol.aws.client import AWSClientFactory, aws_call
from cloudcontrol.tools.base import Tool, tool

COST_EXPLORER_REGION = "us-east-1"


class GroupBy(BaseModel):
    type: Literal["DIMENSION", "TAG", "COST_CATEGORY"] = Field(description="Grouping type")
    key: str = Field(description="Dimension, tag key or cost category name, e.g. SERVICE")

    def to_boto(self) -> dict[str, str]:
        return {"Type": self.type, "Key": self.key}


class CostAndUsageArgs(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    start_date: date = Field(description="Start date (YYYY-MM-DD), inclusive")
    end_date: date = Field(description="End date (YYYY-MM-DD), exclusive")
    granularity: Literal["DAILY", "MONTHLY", "HOURLY"] = Field(
        default="MONTHLY", description="Time granularity"
    )
    metrics: list[str] = Field(
        default_factory=lambda: ["UnblendedCost"],
        min_length=1,
        description="Cost metrics, e.g. UnblendedCost, BlendedCost, UsageQuantity",
    )
    group_by: list[GroupBy] | None = Field(
        default=None, max_length=2, description="Up to two groupings, e.g. [{type: 'DIMENSION', key: 'SERVICE'}]"
    )

    @model_validator(mode="after")
    def _check_range(self) -> CostAndUsageArgs:
        if self.end_date <= self.start_date:
            msg = "endDate must be after startDate"
            raise ValueError(msg)
        return self


def _period(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "start": raw.get("TimePeriod", {}).get("Start"),
        "end": raw.get("TimePeriod", {}).get("End"),
        "estimated": raw.get("Estimated", False),
        "total": raw.get("Total", {}),
        "groups": [
            {"keys": group.get("Keys", []), "metrics": group.get("Metrics", {})}
            for group in raw.get("Groups", [])
        ],
    }


def create_cost_tools(factory: AWSClientFactory) -> list[Tool]:
    @tool(
        "aws_cost_get_cost_and_usage",
        "Get AWS cost and usage for a time period, optionally grouped",
        args=CostAndUsageArgs,
    )
    async def get_cost_and_usage(args: CostAndUsageArgs) -> dict[str, Any]:
        client = factory.client("ce", COST_EXPLORER_REGION)
        response = await aws_call(
            "Cost Explorer get cost and usage",
            client.get_cost_and_usage,
            TimePeriod={"Start": args.start_date.isoformat(), "End": args.end_date.isoformat()},
            Granularity=args.granularity,
            Metrics=args.metrics,
            GroupBy=[g.to_boto() for g in args.group_by] if args.group_by else None,
        )
        periods = [_period(result) for result in response.get("ResultsByTime", [])]
        return {
            "granularity": args.granularity,
            "metrics": args.metrics,
            "resultsByTime": periods,
            "count": len(periods),
        }

    return [get_cost_and_usage]
