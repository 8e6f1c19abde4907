"""Tests for OpenTelemetry tracing helpers."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from opentelemetry import trace

from cloudcontrol.config import TelemetrySettings
from cloudcontrol.utils.telemetry import (
    ATTR_RPC_METHOD,
    ATTR_TOOL_IS_ERROR,
    ATTR_TOOL_NAME,
    configure_from_settings,
    configure_telemetry,
    get_tracer,
)


class TestGetTracer:
    def test_returns_tracer(self) -> None:
        assert isinstance(get_tracer("test.module"), trace.Tracer)

    def test_default_name(self) -> None:
        assert isinstance(get_tracer(), trace.Tracer)

    def test_noop_span(self) -> None:
        """Without SDK configured, spans should be no-ops."""
        tracer = get_tracer("test.noop")
        with tracer.start_as_current_span("test") as span:
            span.set_attribute(ATTR_TOOL_NAME, "aws_s3_list_buckets")


class TestConfigureTelemetry:
    def test_raises_without_sdk(self) -> None:
        with patch.dict("sys.modules", {"opentelemetry.sdk.resources": None}):
            with pytest.raises(ImportError, match="opentelemetry-sdk"):
                configure_telemetry()

    def test_installs_provider(self) -> None:
        try:
            from opentelemetry.sdk.trace import TracerProvider
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        with patch("cloudcontrol.utils.telemetry.trace.set_tracer_provider") as set_provider:
            configure_telemetry(service_name="test-svc", export_to_console=True)

        provider = set_provider.call_args.args[0]
        assert isinstance(provider, TracerProvider)
        assert provider.resource.attributes["service.name"] == "test-svc"

    def test_otlp_raises_without_exporter(self) -> None:
        try:
            import opentelemetry.sdk.trace  # noqa: F401
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        with (
            patch.dict("sys.modules", {"opentelemetry.exporter.otlp.proto.grpc.trace_exporter": None}),
            patch("cloudcontrol.utils.telemetry.trace.set_tracer_provider"),
            pytest.raises(ImportError, match="opentelemetry-exporter-otlp"),
        ):
            configure_telemetry(otlp_endpoint="http://localhost:4317")


class TestConfigureFromSettings:
    def test_disabled_is_noop(self) -> None:
        with patch("cloudcontrol.utils.telemetry.configure_telemetry") as configure:
            assert configure_from_settings(TelemetrySettings(), service_name="svc") is False
        configure.assert_not_called()

    def test_enabled(self) -> None:
        settings = TelemetrySettings(enabled=True, otlp_endpoint="http://collector:4317")
        with patch("cloudcontrol.utils.telemetry.configure_telemetry") as configure:
            assert configure_from_settings(settings, service_name="svc") is True
        configure.assert_called_once_with(
            service_name="svc",
            export_to_console=False,
            otlp_endpoint="http://collector:4317",
        )


class TestAttributeConstants:
    def test_constants_are_namespaced(self) -> None:
        for attr in (ATTR_RPC_METHOD, ATTR_TOOL_NAME, ATTR_TOOL_IS_ERROR):
            assert attr.startswith("cloudcontrol.")
