"""Tests for the shared boto3 plumbing."""

from __future__ import annotations

from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError, NoCredentialsError

from cloudcontrol.aws.client import (
    DEFAULT_AWS_REGION,
    AWSArgs,
    AWSClientFactory,
    Filter,
    aws_call,
    resolve_region,
)
from cloudcontrol.config import AWSSettings
from cloudcontrol.protocols.errors import ToolExecutionError


class TestResolveRegion:
    @pytest.fixture(autouse=True)
    def _clear_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("AWS_REGION", raising=False)
        monkeypatch.delenv("AWS_DEFAULT_REGION", raising=False)

    def test_explicit_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AWS_REGION", "us-west-2")
        assert resolve_region("ap-south-1", AWSSettings(region="eu-west-1")) == "ap-south-1"

    def test_settings_before_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AWS_REGION", "us-west-2")
        assert resolve_region(None, AWSSettings(region="eu-west-1")) == "eu-west-1"

    def test_aws_region_before_default_region(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AWS_REGION", "us-west-2")
        monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-2")
        assert resolve_region() == "us-west-2"

    def test_aws_default_region(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-2")
        assert resolve_region() == "us-east-2"

    def test_fallback(self) -> None:
        assert resolve_region() == DEFAULT_AWS_REGION == "eu-central-1"


class TestAWSClientFactory:
    def test_clients_cached_per_service_and_region(self) -> None:
        session = MagicMock()
        session.client.side_effect = lambda service, region_name: MagicMock(name=f"{service}@{region_name}")
        factory = AWSClientFactory(AWSSettings(region="eu-west-1"), session=session)

        s3 = factory.client("s3")
        assert factory.client("s3") is s3
        assert factory.client("s3", "us-east-1") is not s3
        assert factory.client("ec2") is not s3

        session.client.assert_any_call("s3", region_name="eu-west-1")
        session.client.assert_any_call("s3", region_name="us-east-1")
        assert session.client.call_count == 3

    def test_session_created_lazily_with_profile(self, monkeypatch: pytest.MonkeyPatch) -> None:
        created = MagicMock()
        monkeypatch.setattr(boto3.session, "Session", created)

        factory = AWSClientFactory(AWSSettings(profile="dev"))
        created.assert_not_called()

        assert factory.session is created.return_value
        created.assert_called_once_with(profile_name="dev")

    def test_region_override(self) -> None:
        factory = AWSClientFactory(AWSSettings(region="eu-west-1"), session=MagicMock())
        assert factory.region() == "eu-west-1"
        assert factory.region("us-east-1") == "us-east-1"


class TestAwsCall:
    async def test_drops_none_kwargs(self) -> None:
        fn = MagicMock(return_value={"ok": True})
        result = await aws_call("Op", fn, Bucket="b", Prefix=None)
        assert result == {"ok": True}
        fn.assert_called_once_with(Bucket="b")

    async def test_client_error_mapped(self) -> None:
        fn = MagicMock(
            side_effect=ClientError({"Error": {"Code": "AccessDenied", "Message": "nope"}}, "ListBuckets")
        )
        with pytest.raises(ToolExecutionError, match="S3 list buckets failed: .*AccessDenied") as exc_info:
            await aws_call("S3 list buckets", fn)
        assert isinstance(exc_info.value.__cause__, ClientError)

    async def test_botocore_error_mapped(self) -> None:
        fn = MagicMock(side_effect=NoCredentialsError())
        with pytest.raises(ToolExecutionError, match="Unable to locate credentials"):
            await aws_call("EC2 describe regions", fn)

    async def test_other_errors_propagate(self) -> None:
        fn = MagicMock(side_effect=ValueError("bad"))
        with pytest.raises(ValueError, match="bad"):
            await aws_call("Op", fn)


class TestArgs:
    def test_camel_case_aliases(self) -> None:
        class Example(AWSArgs):
            max_keys: int | None = None

        args = Example.model_validate({"maxKeys": 5, "region": "us-east-1"})
        assert args.max_keys == 5
        assert args.region == "us-east-1"
        assert "maxKeys" in Example.model_json_schema()["properties"]

    def test_snake_case_accepted(self) -> None:
        class Example(AWSArgs):
            max_keys: int | None = None

        assert Example.model_validate({"max_keys": 5}).max_keys == 5

    def test_filter_to_boto(self) -> None:
        f = Filter(name="instance-state-name", values=["running"])
        assert f.to_boto() == {"Name": "instance-state-name", "Values": ["running"]}
