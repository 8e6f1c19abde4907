"""Tests for the tool decorator and Tool contract."""

from __future__ import annotations

import dataclasses

import pytest
from pydantic import BaseModel

from cloudcontrol.tools.base import EMPTY_INPUT_SCHEMA, Tool, tool
from cloudcontrol.tools.validation import PydanticArgs


class GreetArgs(BaseModel):
    who: str


class TestToolDecorator:
    async def test_builds_tool(self) -> None:
        @tool("greet", "Greet someone", args=GreetArgs)
        async def greet(args: GreetArgs) -> str:
            return f"hi {args.who}"

        assert isinstance(greet, Tool)
        assert greet.name == "greet"
        assert greet.description == "Greet someone"
        assert isinstance(greet.args, PydanticArgs)
        assert await greet.run(GreetArgs(who="bob")) == "hi bob"

    def test_schema_less_tool(self) -> None:
        @tool("noop", "Do nothing")
        async def noop() -> None:
            return None

        assert noop.args is None
        assert noop.input_schema == EMPTY_INPUT_SCHEMA

    def test_empty_schema_is_a_copy(self) -> None:
        @tool("noop", "Do nothing")
        async def noop() -> None:
            return None

        noop.input_schema["extra"] = True
        assert "extra" not in EMPTY_INPUT_SCHEMA

    def test_input_schema_from_model(self) -> None:
        @tool("greet", "Greet someone", args=GreetArgs)
        async def greet(args: GreetArgs) -> str:
            return args.who

        assert greet.input_schema["properties"]["who"]["type"] == "string"

    def test_tool_is_frozen(self) -> None:
        @tool("noop", "Do nothing")
        async def noop() -> None:
            return None

        with pytest.raises(dataclasses.FrozenInstanceError):
            noop.name = "other"  # type: ignore[misc]
