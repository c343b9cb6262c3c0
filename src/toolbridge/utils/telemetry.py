"""Tracing for MCP traffic.

The transport opens three spans: ``mcp.handshake`` per spawned server,
``mcp.tools.list`` and ``mcp.tools.call`` per request. Without an SDK
installed they are no-ops; ``toolbridge --telemetry`` (or a direct
:func:`configure_telemetry` call) turns them into exported spans.
"""

from __future__ import annotations

from typing import Any

from opentelemetry import trace

ATTR_SERVER_NAME = "toolbridge.server.name"
ATTR_TOOL_NAME = "toolbridge.tool.name"
ATTR_REQUEST_ID = "toolbridge.request.id"

_INSTRUMENTATION_NAME = "toolbridge"
_INSTALL_HINT = "Install it with: pip install toolbridge[otel]"


def get_tracer(name: str | None = None) -> trace.Tracer:
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


def configure_telemetry(
    *,
    service_name: str = "toolbridge",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Install an SDK tracer provider for the transport spans.

    Console export writes each span as it ends. *otlp_endpoint* adds a
    batching OTLP/gRPC exporter. Raises :class:`ImportError` naming the
    missing package when the ``otel`` extra is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports]
        from opentelemetry.sdk.trace.export import (  # pyright: ignore[reportMissingImports]
            BatchSpanProcessor,
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )
    except ImportError as exc:
        msg = f"opentelemetry-sdk is required to export MCP spans. {_INSTALL_HINT}"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    if export_to_console:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    if otlp_endpoint:
        provider.add_span_processor(BatchSpanProcessor(_otlp_exporter(otlp_endpoint)))
    trace.set_tracer_provider(provider)


def _otlp_exporter(endpoint: str) -> Any:
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import (  # pyright: ignore[reportMissingImports]
            OTLPSpanExporter,
        )
    except ImportError as exc:
        msg = f"opentelemetry-exporter-otlp is required for OTLP export to {endpoint}. {_INSTALL_HINT}"
        raise ImportError(msg) from exc
    return OTLPSpanExporter(endpoint=endpoint)
