"""Tool contract — the shape every tool exposed over MCP conforms to."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from cloudcontrol.tools.validation import ArgsSchema, as_args_schema

RunFn = Callable[..., Awaitable[Any]]

EMPTY_INPUT_SCHEMA: dict[str, Any] = {"type": "object", "properties": {}}


@dataclass(frozen=True)
class Tool:
    """A named, described, asynchronous operation.

    ``run`` receives the validated arguments when ``args`` is set and is
    called with no arguments otherwise.  It may return any JSON-serialisable
    value and may raise.
    """

    name: str
    description: str
    run: RunFn
    args: ArgsSchema | None = None

    @property
    def input_schema(self) -> dict[str, Any]:
        if self.args is None:
            return dict(EMPTY_INPUT_SCHEMA)
        return self.args.json_schema()


def tool(
    name: str,
    description: str,
    *,
    args: type[BaseModel] | ArgsSchema | None = None,
) -> Callable[[RunFn], Tool]:
    """Decorator turning an async function into a :class:`Tool`.

    Usage::

        class ListObjectsArgs(BaseModel):
            bucket: str

        @tool("aws_s3_list_objects", "List objects in an S3 bucket", args=ListObjectsArgs)
        async def list_objects(args: ListObjectsArgs) -> dict[str, Any]:
            ...
    """
    schema = as_args_schema(args)

    def decorator(fn: RunFn) -> Tool:
        return Tool(name=name, description=description, run=fn, args=schema)

    return decorator
