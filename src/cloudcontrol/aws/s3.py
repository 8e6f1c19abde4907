"""S3 tools."""

from __future__ import annotations

import asyncio
from typing import Any

from pydantic import Field

from cloudcontrol.aws.client import AWSArgs, AWSClientFactory, aws_call
from cloudcontrol.protocols.errors import ToolExecutionError
from cloudcontrol.tools.base import Tool, tool

MAX_OBJECT_CONTENT_BYTES = 1024 * 1024


class ListObjectsArgs(AWSArgs):
    bucket: str = Field(description="S3 bucket name")
    prefix: str | None = Field(default=None, description="Object key prefix to filter by")
    max_keys: int | None = Field(
        default=None, ge=1, le=1000, description="Maximum number of objects to return"
    )
    continuation_token: str | None = Field(default=None, description="Token for pagination")


class ObjectArgs(AWSArgs):
    bucket: str = Field(description="S3 bucket name")
    key: str = Field(description="Object key")


class ObjectContentArgs(ObjectArgs):
    max_size_bytes: int = Field(
        default=MAX_OBJECT_CONTENT_BYTES,
        ge=1,
        le=MAX_OBJECT_CONTENT_BYTES,
        description="Maximum object size to read in bytes (default: 1MB)",
    )


def create_s3_tools(factory: AWSClientFactory) -> list[Tool]:
    @tool("aws_s3_list_buckets", "List all S3 buckets in the account", args=AWSArgs)
    async def list_buckets(args: AWSArgs) -> dict[str, Any]:
        client = factory.client("s3", args.region)
        response = await aws_call("S3 list buckets", client.list_buckets)
        buckets = [
            {"name": bucket.get("Name"), "creationDate": bucket.get("CreationDate")}
            for bucket in response.get("Buckets", [])
        ]
        owner = response.get("Owner")
        return {
            "buckets": buckets,
            "count": len(buckets),
            "owner": {"id": owner.get("ID"), "displayName": owner.get("DisplayName")} if owner else None,
        }

    @tool("aws_s3_list_objects", "List objects in an S3 bucket", args=ListObjectsArgs)
    async def list_objects(args: ListObjectsArgs) -> dict[str, Any]:
        client = factory.client("s3", args.region)
        response = await aws_call(
            "S3 list objects",
            client.list_objects_v2,
            Bucket=args.bucket,
            Prefix=args.prefix,
            MaxKeys=args.max_keys,
            ContinuationToken=args.continuation_token,
        )
        objects = [
            {
                "key": obj.get("Key"),
                "lastModified": obj.get("LastModified"),
                "size": obj.get("Size"),
                "storageClass": obj.get("StorageClass"),
                "etag": obj.get("ETag"),
            }
            for obj in response.get("Contents", [])
        ]
        return {
            "objects": objects,
            "count": len(objects),
            "isTruncated": response.get("IsTruncated", False),
            "nextContinuationToken": response.get("NextContinuationToken"),
            "commonPrefixes": [p.get("Prefix") for p in response.get("CommonPrefixes", [])],
        }

    @tool("aws_s3_get_object_metadata", "Get metadata for an S3 object", args=ObjectArgs)
    async def get_object_metadata(args: ObjectArgs) -> dict[str, Any]:
        client = factory.client("s3", args.region)
        response = await aws_call(
            "S3 get object metadata", client.head_object, Bucket=args.bucket, Key=args.key
        )
        return {
            "contentLength": response.get("ContentLength"),
            "contentType": response.get("ContentType"),
            "lastModified": response.get("LastModified"),
            "etag": response.get("ETag"),
            "storageClass": response.get("StorageClass"),
            "metadata": response.get("Metadata", {}),
            "cacheControl": response.get("CacheControl"),
            "contentEncoding": response.get("ContentEncoding"),
            "serverSideEncryption": response.get("ServerSideEncryption"),
            "versionId": response.get("VersionId"),
        }

    @tool(
        "aws_s3_get_object_content",
        "Get content of an S3 object (use with caution for large files)",
        args=ObjectContentArgs,
    )
    async def get_object_content(args: ObjectContentArgs) -> dict[str, Any]:
        operation = "S3 get object content"
        client = factory.client("s3", args.region)

        head = await aws_call(operation, client.head_object, Bucket=args.bucket, Key=args.key)
        size = head.get("ContentLength") or 0
        if size > args.max_size_bytes:
            raise ToolExecutionError(
                operation,
                f"Object size ({size} bytes) exceeds maximum allowed size ({args.max_size_bytes} bytes)",
            )

        response = await aws_call(operation, client.get_object, Bucket=args.bucket, Key=args.key)
        body = response.get("Body")
        if body is None:
            raise ToolExecutionError(operation, "No content received from S3")
        data: bytes = await asyncio.to_thread(body.read)

        return {
            "content": data.decode("utf-8", errors="replace"),
            "contentType": response.get("ContentType"),
            "contentLength": response.get("ContentLength"),
            "lastModified": response.get("LastModified"),
            "etag": response.get("ETag"),
        }

    return [list_buckets, list_objects, get_object_metadata, get_object_content]
