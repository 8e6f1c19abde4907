"""OpenTelemetry tracing helpers for cloudcontrol.

The dispatcher opens spans through :func:`get_tracer`.  Until
:func:`configure_telemetry` installs an SDK tracer provider the API hands
back no-op tracers, so instrumented code costs next to nothing when tracing
is off.

Usage::

    from cloudcontrol.utils.telemetry import ATTR_TOOL_NAME, get_tracer

    _tracer = get_tracer(__name__)

    with _tracer.start_as_current_span("mcp.tools.call") as span:
        span.set_attribute(ATTR_TOOL_NAME, "aws_s3_list_buckets")

Exporting spans requires the ``otel`` extra: ``pip install cloudcontrol[otel]``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from opentelemetry import trace

if TYPE_CHECKING:
    from cloudcontrol.config import TelemetrySettings

# ---------------------------------------------------------------------------
# Span attribute keys
# ---------------------------------------------------------------------------

ATTR_RPC_METHOD = "cloudcontrol.rpc.method"
ATTR_RPC_ID = "cloudcontrol.rpc.id"
ATTR_RPC_ERROR_CODE = "cloudcontrol.rpc.error_code"
ATTR_TOOL_NAME = "cloudcontrol.tool.name"
ATTR_TOOL_IS_ERROR = "cloudcontrol.tool.is_error"

_INSTRUMENTATION_NAME = "cloudcontrol"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a tracer for *name* (no-op until telemetry is configured)."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "cloudcontrol",
    export_to_console: bool = False,
    otlp_endpoint: str | None = None,
) -> None:
    """Install a global SDK tracer provider.

    Parameters
    ----------
    service_name:
        The ``service.name`` resource attribute.
    export_to_console:
        Write finished spans as JSON to stdout.  Leave off when serving over
        stdio, where stdout carries protocol messages.
    otlp_endpoint:
        If set, export spans via OTLP/gRPC to this endpoint.

    Raises
    ------
    ImportError
        If ``opentelemetry-sdk`` is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            BatchSpanProcessor,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install cloudcontrol[otel]"
        )
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))

    if export_to_console:
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # pyright: ignore[reportMissingImports]

        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    if otlp_endpoint:
        _add_otlp_exporter(provider, BatchSpanProcessor, otlp_endpoint)

    trace.set_tracer_provider(provider)


def configure_from_settings(settings: TelemetrySettings, *, service_name: str) -> bool:
    """Apply :class:`~cloudcontrol.config.TelemetrySettings`; return whether tracing is on."""
    if not settings.enabled:
        return False
    configure_telemetry(
        service_name=service_name,
        export_to_console=settings.export_to_console,
        otlp_endpoint=settings.otlp_endpoint,
    )
    return True


def _add_otlp_exporter(provider: Any, processor_cls: Any, endpoint: str) -> None:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # pyright: ignore[reportMissingImports]
            OTLPSpanExporter,
        )
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install cloudcontrol[otel]"
        )
        raise ImportError(msg) from exc

    provider.add_span_processor(processor_cls(OTLPSpanExporter(endpoint=endpoint)))
