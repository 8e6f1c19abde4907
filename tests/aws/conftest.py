"""Shared fixtures for AWS tool tests: a factory over a mocked boto3 session."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any
from unittest.mock import MagicMock

import pytest

from cloudcontrol.aws.client import AWSClientFactory
from cloudcontrol.config import AWSSettings
from cloudcontrol.tools.base import Tool


@pytest.fixture
def session() -> MagicMock:
    return MagicMock()


@pytest.fixture
def client(session: MagicMock) -> MagicMock:
    """The boto3 client returned for every service."""
    return session.client.return_value


@pytest.fixture
def factory(session: MagicMock) -> AWSClientFactory:
    return AWSClientFactory(AWSSettings(region="eu-west-1"), session=session)


async def _run_tool(tools: list[Tool], name: str, raw: dict[str, Any] | None = None) -> Any:
    tool = next(t for t in tools if t.name == name)
    if tool.args is None:
        return await tool.run()
    outcome = tool.args.validate(raw or {})
    assert outcome.ok, outcome.issues
    return await tool.run(outcome.value)


@pytest.fixture
def run_tool() -> Callable[..., Awaitable[Any]]:
    """Validate raw arguments against a tool's schema, then run it."""
    return _run_tool
