"""boto3 plumbing shared by every AWS tool module."""

from __future__ import annotations

import asyncio
import os
from collections.abc import Callable
from typing import Any, TypeVar

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cloudcontrol.config import AWSSettings
from cloudcontrol.protocols.errors import ToolExecutionError

T = TypeVar("T")

DEFAULT_AWS_REGION = "eu-central-1"


def resolve_region(region: str | None = None, settings: AWSSettings | None = None) -> str:
    """Pick the region for a call.

    Precedence: explicit *region*, the configured region, ``AWS_REGION``,
    ``AWS_DEFAULT_REGION``, then :data:`DEFAULT_AWS_REGION`.
    """
    return (
        region
        or (settings.region if settings else None)
        or os.environ.get("AWS_REGION")
        or os.environ.get("AWS_DEFAULT_REGION")
        or DEFAULT_AWS_REGION
    )


class AWSClientFactory:
    """Creates and caches boto3 clients per ``(service, region)``.

    Credentials come from the standard boto3 chain (environment, shared
    config/credentials files, instance metadata), optionally narrowed to a
    named profile.
    """

    def __init__(
        self,
        settings: AWSSettings | None = None,
        *,
        session: boto3.session.Session | None = None,
    ) -> None:
        self._settings = settings or AWSSettings()
        self._session = session
        self._clients: dict[tuple[str, str], Any] = {}

    @property
    def settings(self) -> AWSSettings:
        return self._settings

    @property
    def session(self) -> boto3.session.Session:
        if self._session is None:
            self._session = boto3.session.Session(profile_name=self._settings.profile)
        return self._session

    def region(self, override: str | None = None) -> str:
        return resolve_region(override, self._settings)

    def client(self, service: str, region: str | None = None) -> Any:
        key = (service, self.region(region))
        if key not in self._clients:
            self._clients[key] = self.session.client(service, region_name=key[1])
        return self._clients[key]


async def aws_call(operation: str, fn: Callable[..., T], /, **kwargs: Any) -> T:
    """Run a blocking boto3 call in a worker thread.

    ``None``-valued keyword arguments are dropped, since botocore rejects
    them.  SDK failures are re-raised as :class:`ToolExecutionError` named
    after *operation* (e.g. ``"S3 list objects"``).
    """
    params = {key: value for key, value in kwargs.items() if value is not None}
    try:
        return await asyncio.to_thread(fn, **params)
    except (ClientError, BotoCoreError) as exc:
        raise ToolExecutionError(operation, str(exc)) from exc


class AWSArgs(BaseModel):
    """Base for AWS tool arguments: camelCase on the wire, optional region."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    region: str | None = Field(
        default=None,
        description="AWS region (defaults to the configured region)",
    )


class Filter(BaseModel):
    """An EC2-style ``Name``/``Values`` filter."""

    name: str = Field(description="Filter name, e.g. 'instance-state-name'")
    values: list[str] = Field(description="Values to match")

    def to_boto(self) -> dict[str, Any]:
        return {"Name": self.name, "Values": self.values}
