"""OpenTelemetry tracing helpers for datetime-mcp.

Provides a thin wrapper around the OpenTelemetry API so the rest of the
codebase can call ``get_tracer()`` without caring whether the SDK is
installed.  When the SDK is *not* configured the API returns no-op
implementations.

Usage::

    from datetime_mcp.utils.telemetry import get_tracer, record_error_code, request_span, tool_span

    _tracer = get_tracer(__name__)

    with request_span(_tracer, "tools/call", 7) as span:
        with tool_span(_tracer, "add_days"):
            ...
        record_error_code(span, -32603)

To activate real tracing, call :func:`configure_telemetry` once at startup
(requires the ``otel`` extra: ``pip install datetime-mcp[otel]``).  Spans are
never exported to stdout, which carries the JSON-RPC stream.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace

# ---------------------------------------------------------------------------
# Semantic attribute keys
# ---------------------------------------------------------------------------

ATTR_RPC_METHOD = "datetime_mcp.rpc.method"
ATTR_RPC_ID = "datetime_mcp.rpc.id"
ATTR_RPC_ERROR_CODE = "datetime_mcp.rpc.error_code"
ATTR_TOOL_NAME = "datetime_mcp.tool.name"

_INSTRUMENTATION_NAME = "datetime_mcp"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return a :class:`~opentelemetry.trace.Tracer` for *name*.

    If the OpenTelemetry SDK has not been configured the returned tracer
    is a no-op.
    """
    return trace.get_tracer(name or _INSTRUMENTATION_NAME)


# ---------------------------------------------------------------------------
# Span helpers
# ---------------------------------------------------------------------------

SPAN_REQUEST = "mcp.request"
SPAN_TOOL_CALL = "mcp.tools.call"


@contextmanager
def request_span(tracer: trace.Tracer, method: str, request_id: int | None) -> Iterator[trace.Span]:
    """Open the span covering one JSON-RPC request.

    The id attribute is only set for requests that carry one.
    """
    with tracer.start_as_current_span(SPAN_REQUEST) as span:
        span.set_attribute(ATTR_RPC_METHOD, method)
        if request_id is not None:
            span.set_attribute(ATTR_RPC_ID, request_id)
        yield span


@contextmanager
def tool_span(tracer: trace.Tracer, tool_name: str) -> Iterator[trace.Span]:
    """Open the child span covering one tool execution."""
    with tracer.start_as_current_span(SPAN_TOOL_CALL) as span:
        span.set_attribute(ATTR_TOOL_NAME, tool_name)
        yield span


def record_error_code(span: trace.Span, code: int) -> None:
    """Tag *span* with the JSON-RPC error code of a failed request."""
    span.set_attribute(ATTR_RPC_ERROR_CODE, code)


def configure_telemetry(
    *,
    service_name: str = "datetime-mcp",
    export_to_console: bool = True,
    otlp_endpoint: str | None = None,
) -> None:
    """Configure OpenTelemetry tracing (requires ``datetime-mcp[otel]``).

    Parameters
    ----------
    service_name:
        The ``service.name`` resource attribute.
    export_to_console:
        If ``True``, export spans as JSON to **stderr**.
    otlp_endpoint:
        If set, export spans via OTLP/gRPC to this endpoint.

    Raises
    ------
    ImportError
        If the ``opentelemetry-sdk`` package is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = (
            "opentelemetry-sdk is required for configure_telemetry(). "
            "Install it with: pip install datetime-mcp[otel]"
        )
        raise ImportError(msg) from exc

    resource = Resource.create({"service.name": service_name})  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType]
    provider = TracerProvider(resource=resource)  # pyright: ignore[reportUnknownVariableType]

    if export_to_console:
        _add_console_exporter(provider, SimpleSpanProcessor)

    if otlp_endpoint:
        _add_otlp_exporter(provider, BatchSpanProcessor, otlp_endpoint)

    trace.set_tracer_provider(provider)  # pyright: ignore[reportUnknownArgumentType]


def _add_console_exporter(provider: Any, processor_cls: Any) -> None:
    """Attach the console exporter (JSON to stderr)."""
    from opentelemetry.sdk.trace.export import ConsoleSpanExporter  # pyright: ignore[reportMissingImports,reportUnknownVariableType]

    provider.add_span_processor(processor_cls(ConsoleSpanExporter(out=sys.stderr)))


def _add_otlp_exporter(provider: Any, processor_cls: Any, endpoint: str) -> None:
    """Attach the OTLP gRPC exporter."""
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = (
            "opentelemetry-exporter-otlp is required for OTLP export. "
            "Install it with: pip install datetime-mcp[otel]"
        )
        raise ImportError(msg) from exc

    provider.add_span_processor(processor_cls(OTLPSpanExporter(endpoint=endpoint)))
