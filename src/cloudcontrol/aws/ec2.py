"""EC2 tools."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from cloudcontrol.aws.client import AWSArgs, AWSClientFactory, Filter, aws_call
from cloudcontrol.tools.base import Tool, tool


class DescribeInstancesArgs(AWSArgs):
    instance_ids: list[str] | None = Field(default=None, description="Instance IDs to describe")
    filters: list[Filter] | None = Field(
        default=None,
        description="Filters, e.g. [{name: 'instance-state-name', values: ['running']}]",
    )
    max_results: int | None = Field(default=None, ge=5, le=1000, description="Page size")
    next_token: str | None = Field(default=None, description="Pagination token")


class DescribeSecurityGroupsArgs(AWSArgs):
    group_ids: list[str] | None = Field(default=None, description="Security group IDs")
    filters: list[Filter] | None = Field(default=None, description="Filters to apply")


class DescribeRegionsArgs(AWSArgs):
    all_regions: bool = Field(default=False, description="Include regions not enabled for the account")


def _filters(filters: list[Filter] | None) -> list[dict[str, Any]] | None:
    return [f.to_boto() for f in filters] if filters else None


def _tags(raw: list[dict[str, Any]] | None) -> dict[str, str]:
    return {tag["Key"]: tag.get("Value", "") for tag in raw or []}


def _instance(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "instanceId": raw.get("InstanceId"),
        "instanceType": raw.get("InstanceType"),
        "state": raw.get("State", {}).get("Name"),
        "launchTime": raw.get("LaunchTime"),
        "availabilityZone": raw.get("Placement", {}).get("AvailabilityZone"),
        "privateIpAddress": raw.get("PrivateIpAddress"),
        "publicIpAddress": raw.get("PublicIpAddress"),
        "vpcId": raw.get("VpcId"),
        "subnetId": raw.get("SubnetId"),
        "imageId": raw.get("ImageId"),
        "securityGroups": [g.get("GroupId") for g in raw.get("SecurityGroups", [])],
        "tags": _tags(raw.get("Tags")),
    }


def create_ec2_tools(factory: AWSClientFactory) -> list[Tool]:
    @tool(
        "aws_ec2_describe_instances",
        "Describe EC2 instances, optionally by ID or filter",
        args=DescribeInstancesArgs,
    )
    async def describe_instances(args: DescribeInstancesArgs) -> dict[str, Any]:
        client = factory.client("ec2", args.region)
        response = await aws_call(
            "EC2 describe instances",
            client.describe_instances,
            InstanceIds=args.instance_ids,
            Filters=_filters(args.filters),
            MaxResults=args.max_results,
            NextToken=args.next_token,
        )
        instances = [
            _instance(instance)
            for reservation in response.get("Reservations", [])
            for instance in reservation.get("Instances", [])
        ]
        return {"instances": instances, "count": len(instances), "nextToken": response.get("NextToken")}

    @tool(
        "aws_ec2_describe_security_groups",
        "Describe EC2 security groups and their rules",
        args=DescribeSecurityGroupsArgs,
    )
    async def describe_security_groups(args: DescribeSecurityGroupsArgs) -> dict[str, Any]:
        client = factory.client("ec2", args.region)
        response = await aws_call(
            "EC2 describe security groups",
            client.describe_security_groups,
            GroupIds=args.group_ids,
            Filters=_filters(args.filters),
        )
        groups = [
            {
                "groupId": group.get("GroupId"),
                "groupName": group.get("GroupName"),
                "description": group.get("Description"),
                "vpcId": group.get("VpcId"),
                "inboundRules": group.get("IpPermissions", []),
                "outboundRules": group.get("IpPermissionsEgress", []),
                "tags": _tags(group.get("Tags")),
            }
            for group in response.get("SecurityGroups", [])
        ]
        return {"securityGroups": groups, "count": len(groups)}

    @tool("aws_ec2_describe_regions", "List the EC2 regions available to the account", args=DescribeRegionsArgs)
    async def describe_regions(args: DescribeRegionsArgs) -> dict[str, Any]:
        client = factory.client("ec2", args.region)
        response = await aws_call(
            "EC2 describe regions", client.describe_regions, AllRegions=args.all_regions
        )
        regions = [
            {
                "regionName": region.get("RegionName"),
                "endpoint": region.get("Endpoint"),
                "optInStatus": region.get("OptInStatus"),
            }
            for region in response.get("Regions", [])
        ]
        return {"regions": regions, "count": len(regions)}

    return [describe_instances, describe_security_groups, describe_regions]
