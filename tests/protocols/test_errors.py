"""Tests for the protocol error hierarchy."""

from cloudcontrol.protocols.errors import (
    INVALID_PARAMS,
    ConnectionError,
    InvalidRequestError,
    ProtocolError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolTimeoutError,
)


class TestErrorHierarchy:
    def test_all_are_protocol_errors(self) -> None:
        for cls in (ConnectionError, InvalidRequestError, ToolNotFoundError, ToolExecutionError):
            assert issubclass(cls, ProtocolError)

    def test_timeout_is_execution_error(self) -> None:
        assert issubclass(ToolTimeoutError, ToolExecutionError)


class TestInvalidRequestError:
    def test_defaults(self) -> None:
        err = InvalidRequestError("Internal Server Error")
        assert err.code == INVALID_PARAMS
        assert err.request_id == 0
        assert err.data is None
        assert str(err) == "Internal Server Error"


class TestToolNotFoundError:
    def test_message(self) -> None:
        err = ToolNotFoundError("aws_x")
        assert err.name == "aws_x"
        assert str(err) == "Tool not found: aws_x"


class TestToolExecutionError:
    def test_with_detail(self) -> None:
        err = ToolExecutionError("S3 list buckets", "AccessDenied")
        assert err.operation == "S3 list buckets"
        assert err.detail == "AccessDenied"
        assert str(err) == "S3 list buckets failed: AccessDenied"

    def test_without_detail(self) -> None:
        assert str(ToolExecutionError("S3 list buckets")) == "S3 list buckets failed"


class TestToolTimeoutError:
    def test_attributes(self) -> None:
        err = ToolTimeoutError("CloudWatch Logs query", 60)
        assert err.timeout == 60
        assert str(err) == "CloudWatch Logs query failed: did not complete within 60 seconds"

    def test_fractional_timeout(self) -> None:
        assert "1.5 seconds" in str(ToolTimeoutError("q", 1.5))
