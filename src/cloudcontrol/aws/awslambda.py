"""Lambda tools."""

from __future__ import annotations

import asyncio
import base64
import json
from typing import Any, Literal

from pydantic import Field

from cloudcontrol.aws.client import AWSArgs, AWSClientFactory, aws_call
from cloudcontrol.tools.base import Tool, tool


class ListFunctionsArgs(AWSArgs):
    marker: str | None = Field(default=None, description="Pagination marker")
    max_items: int | None = Field(default=None, ge=1, le=50, description="Maximum functions to return")


class GetFunctionArgs(AWSArgs):
    function_name: str = Field(description="Function name, ARN, or partial ARN")
    qualifier: str | None = Field(default=None, description="Function version or alias")


class InvokeFunctionArgs(GetFunctionArgs):
    payload: str | None = Field(default=None, description="JSON payload to send to the function")
    invocation_type: Literal["RequestResponse", "Event", "DryRun"] = Field(
        default="RequestResponse", description="Invocation type"
    )
    log_type: Literal["None", "Tail"] | None = Field(
        default=None, description="Log type for synchronous invocations"
    )


def _function(config: dict[str, Any]) -> dict[str, Any]:
    return {
        "functionName": config.get("FunctionName"),
        "functionArn": config.get("FunctionArn"),
        "runtime": config.get("Runtime"),
        "handler": config.get("Handler"),
        "codeSize": config.get("CodeSize"),
        "description": config.get("Description"),
        "timeout": config.get("Timeout"),
        "memorySize": config.get("MemorySize"),
        "lastModified": config.get("LastModified"),
        "version": config.get("Version"),
        "state": config.get("State"),
        "packageType": config.get("PackageType"),
        "architectures": config.get("Architectures", []),
    }


def _decode_payload(raw: bytes) -> Any:
    text = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


def create_lambda_tools(factory: AWSClientFactory) -> list[Tool]:
    @tool("aws_lambda_list_functions", "List Lambda functions", args=ListFunctionsArgs)
    async def list_functions(args: ListFunctionsArgs) -> dict[str, Any]:
        client = factory.client("lambda", args.region)
        response = await aws_call(
            "Lambda list functions",
            client.list_functions,
            Marker=args.marker,
            MaxItems=args.max_items,
        )
        functions = [_function(fn) for fn in response.get("Functions", [])]
        return {"functions": functions, "count": len(functions), "nextMarker": response.get("NextMarker")}

    @tool("aws_lambda_get_function", "Get detailed information about a Lambda function", args=GetFunctionArgs)
    async def get_function(args: GetFunctionArgs) -> dict[str, Any]:
        client = factory.client("lambda", args.region)
        response = await aws_call(
            "Lambda get function",
            client.get_function,
            FunctionName=args.function_name,
            Qualifier=args.qualifier,
        )
        config = response.get("Configuration")
        code = response.get("Code")
        return {
            "configuration": _function(config) if config else None,
            "code": {"repositoryType": code.get("RepositoryType"), "imageUri": code.get("ImageUri")}
            if code
            else None,
            "tags": response.get("Tags", {}),
        }

    @tool("aws_lambda_invoke_function", "Invoke a Lambda function", args=InvokeFunctionArgs)
    async def invoke_function(args: InvokeFunctionArgs) -> dict[str, Any]:
        client = factory.client("lambda", args.region)
        response = await aws_call(
            "Lambda invoke function",
            client.invoke,
            FunctionName=args.function_name,
            Qualifier=args.qualifier,
            InvocationType=args.invocation_type,
            LogType=args.log_type,
            Payload=args.payload.encode() if args.payload is not None else None,
        )

        payload = None
        stream = response.get("Payload")
        if stream is not None:
            raw = await asyncio.to_thread(stream.read)
            payload = _decode_payload(raw) if raw else None

        log_result = response.get("LogResult")
        return {
            "statusCode": response.get("StatusCode"),
            "functionError": response.get("FunctionError"),
            "executedVersion": response.get("ExecutedVersion"),
            "logResult": base64.b64decode(log_result).decode("utf-8", errors="replace") if log_result else None,
            "payload": payload,
        }

    return [list_functions, get_function, invoke_function]
