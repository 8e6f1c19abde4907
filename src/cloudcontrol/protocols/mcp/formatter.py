"""Response formatting — tool values, tool errors and JSON-RPC envelopes."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, TypeAdapter

from cloudcontrol.protocols.mcp.models import CallToolResult, JsonRpcError, JsonRpcResponse
from cloudcontrol.tools.validation import ArgumentIssue

_ANY: TypeAdapter[Any] = TypeAdapter(Any)


def to_text(value: Any) -> str:
    """Render a tool's return value as the text of a content block.

    Strings pass through untouched; everything else is serialised to
    indented JSON.  Values plain ``json`` cannot handle (datetimes from
    boto3, bytes, pydantic models, dataclasses) are converted by pydantic.

    Raises:
        pydantic_core.PydanticSerializationError: if *value* has no JSON form.
    """
    if isinstance(value, str):
        return value
    return _ANY.dump_json(value, indent=2).decode()


def format_value(value: Any) -> CallToolResult:
    return CallToolResult.from_text(to_text(value))


def format_error(exc: BaseException) -> CallToolResult:
    """Wrap a raised exception as a tool-level error carrying its message."""
    return CallToolResult.from_text(str(exc), is_error=True)


def format_issues(issues: Iterable[ArgumentIssue]) -> CallToolResult:
    """Wrap argument validation issues as a tool-level error (a JSON array)."""
    payload = [issue.model_dump() for issue in issues]
    return CallToolResult.from_text(json.dumps(payload), is_error=True)


def result_response(request_id: Any, result: BaseModel) -> JsonRpcResponse:
    return JsonRpcResponse(
        id=request_id,
        result=result.model_dump(by_alias=True, exclude_none=True),
    )


def error_response(request_id: Any, code: int, message: str, data: Any = None) -> JsonRpcResponse:
    return JsonRpcResponse(
        id=request_id,
        error=JsonRpcError(code=code, message=message, data=data),
    )
