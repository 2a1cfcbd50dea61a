"""Tests for OpenTelemetry tracing helpers."""

from __future__ import annotations

from unittest.mock import MagicMock, call, patch

import pytest
from opentelemetry import trace

from datetime_mcp.protocols.mcp.engine import ProtocolEngine
from datetime_mcp.protocols.mcp.models import JsonRpcRequest
from datetime_mcp.utils.telemetry import (
    _INSTRUMENTATION_NAME,
    ATTR_RPC_ERROR_CODE,
    ATTR_RPC_ID,
    ATTR_RPC_METHOD,
    ATTR_TOOL_NAME,
    SPAN_REQUEST,
    SPAN_TOOL_CALL,
    configure_telemetry,
    get_tracer,
    record_error_code,
    request_span,
    tool_span,
)


def _mock_tracer() -> tuple[MagicMock, MagicMock]:
    tracer = MagicMock()
    span = tracer.start_as_current_span.return_value.__enter__.return_value
    return tracer, span


class TestGetTracer:
    def test_returns_tracer(self) -> None:
        tracer = get_tracer("test.module")
        assert isinstance(tracer, trace.Tracer)

    def test_default_name(self) -> None:
        assert _INSTRUMENTATION_NAME == "datetime_mcp"
        assert isinstance(get_tracer(), trace.Tracer)

    def test_noop_span(self) -> None:
        """Without SDK configured, spans should be no-ops."""
        tracer = get_tracer("test.noop")
        with tracer.start_as_current_span("test") as span:
            span.set_attribute(ATTR_TOOL_NAME, "add_days")


class TestConfigureTelemetry:
    def test_raises_without_sdk(self) -> None:
        with patch.dict("sys.modules", {"opentelemetry.sdk.resources": None}):
            with pytest.raises(ImportError, match="opentelemetry-sdk"):
                configure_telemetry()

    def test_configures_provider_with_console_exporter(self) -> None:
        try:
            from opentelemetry.sdk.trace import TracerProvider
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        with patch.object(trace, "set_tracer_provider") as mock_set:
            configure_telemetry(service_name="test-svc", export_to_console=True)

        provider = mock_set.call_args.args[0]
        assert isinstance(provider, TracerProvider)

    def test_otlp_raises_without_exporter(self) -> None:
        try:
            import opentelemetry.sdk.trace  # noqa: F401
        except ImportError:
            pytest.skip("opentelemetry-sdk not installed")

        with patch.dict(
            "sys.modules",
            {"opentelemetry.exporter.otlp.proto.grpc.trace_exporter": None},
        ):
            with pytest.raises(ImportError, match="opentelemetry-exporter-otlp"):
                configure_telemetry(
                    export_to_console=False,
                    otlp_endpoint="http://localhost:4317",
                )


class TestAttributeConstants:
    def test_constants_are_namespaced(self) -> None:
        assert ATTR_TOOL_NAME.startswith("datetime_mcp.")
        assert len({ATTR_RPC_METHOD, ATTR_RPC_ID, ATTR_RPC_ERROR_CODE, ATTR_TOOL_NAME}) == 4


class TestSpanHelpers:
    def test_request_span_tags_method_and_id(self) -> None:
        tracer, span = _mock_tracer()
        with request_span(tracer, "tools/list", 7) as active:
            assert active is span
        tracer.start_as_current_span.assert_called_once_with(SPAN_REQUEST)
        assert span.set_attribute.call_args_list == [
            call(ATTR_RPC_METHOD, "tools/list"),
            call(ATTR_RPC_ID, 7),
        ]

    def test_request_span_without_id(self) -> None:
        tracer, span = _mock_tracer()
        with request_span(tracer, "notifications/initialized", None):
            pass
        span.set_attribute.assert_called_once_with(ATTR_RPC_METHOD, "notifications/initialized")

    def test_tool_span_tags_tool_name(self) -> None:
        tracer, span = _mock_tracer()
        with tool_span(tracer, "add_days"):
            pass
        tracer.start_as_current_span.assert_called_once_with(SPAN_TOOL_CALL)
        span.set_attribute.assert_called_once_with(ATTR_TOOL_NAME, "add_days")

    def test_tool_span_propagates_errors(self) -> None:
        tracer, _ = _mock_tracer()
        with pytest.raises(OverflowError):
            with tool_span(tracer, "add_days"):
                raise OverflowError("date value out of range")

    def test_record_error_code(self) -> None:
        span = MagicMock()
        record_error_code(span, -32601)
        span.set_attribute.assert_called_once_with(ATTR_RPC_ERROR_CODE, -32601)

    def test_helpers_work_on_noop_tracer(self) -> None:
        tracer = get_tracer("test.helpers")
        with request_span(tracer, "tools/call", 1) as span:
            with tool_span(tracer, "is_weekend"):
                pass
            record_error_code(span, -32603)


class TestEngineSpans:
    def test_failed_request_records_error_code(self) -> None:
        tracer, span = _mock_tracer()
        with patch("datetime_mcp.protocols.mcp.engine._tracer", tracer):
            ProtocolEngine().handle(JsonRpcRequest(method="prompts/list", id=3))
        span.set_attribute.assert_any_call(ATTR_RPC_METHOD, "prompts/list")
        span.set_attribute.assert_any_call(ATTR_RPC_ERROR_CODE, -32601)

    def test_tool_call_opens_child_span(self) -> None:
        tracer, span = _mock_tracer()
        request = JsonRpcRequest(method="tools/call", id=4, params={"name": "is_weekend", "arguments": {}})
        with patch("datetime_mcp.protocols.mcp.engine._tracer", tracer):
            response = ProtocolEngine().handle(request)
        assert response.error is None
        assert [c.args[0] for c in tracer.start_as_current_span.call_args_list] == [SPAN_REQUEST, SPAN_TOOL_CALL]
        span.set_attribute.assert_any_call(ATTR_TOOL_NAME, "is_weekend")
        assert call(ATTR_RPC_ERROR_CODE, -32603) not in span.set_attribute.call_args_list
