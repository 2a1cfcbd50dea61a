"""Tests for the stdio transport loop using in-memory streams."""

from __future__ import annotations

import io
import json
from typing import Any

from datetime_mcp.protocols.mcp.engine import ProtocolEngine
from datetime_mcp.protocols.mcp.transport import StdioTransport

_LIST_TWICE = '{"id":1,"method":"tools/list"}\n{"id":2,"method":"tools/list"}\n'


class RecordingWriter(io.StringIO):
    """Text sink that remembers what was in the buffer at each flush."""

    def __init__(self) -> None:
        super().__init__()
        self.flushed: list[str] = []

    def flush(self) -> None:
        super().flush()
        self.flushed.append(self.getvalue())


class ClosedPipeWriter(io.StringIO):
    def __init__(self) -> None:
        super().__init__()
        self.attempts = 0

    def write(self, s: str) -> int:
        self.attempts += 1
        raise BrokenPipeError("gone")


def _decode(writer: io.StringIO) -> list[dict[str, Any]]:
    return [json.loads(out) for out in writer.getvalue().splitlines()]


def _serve(*lines: str) -> tuple[int, list[dict[str, Any]]]:
    reader = io.StringIO("".join(line + "\n" for line in lines))
    writer = io.StringIO()
    handled = StdioTransport(ProtocolEngine(), reader, writer).serve()
    return handled, _decode(writer)


class TestServeLoop:
    def test_one_response_per_request(self) -> None:
        handled, responses = _serve(
            '{"jsonrpc":"2.0","id":1,"method":"initialize","params":{}}',
            '{"jsonrpc":"2.0","id":2,"method":"tools/list"}',
        )
        assert handled == 2
        assert [r["id"] for r in responses] == [1, 2]
        assert all("result" in r for r in responses)

    def test_blank_lines_are_ignored(self) -> None:
        handled, responses = _serve("", "   ", '{"jsonrpc":"2.0","id":1,"method":"tools/list"}', "\t")
        assert handled == 1
        assert len(responses) == 1

    def test_parse_error_then_recovery(self) -> None:
        handled, responses = _serve(
            "{this is not json",
            '{"jsonrpc":"2.0","id":3,"method":"tools/call","params":{"name":"is_weekend","arguments":{"date":"2025-11-29"}}}',
        )
        assert handled == 2
        assert responses[0] == {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}
        payload = json.loads(responses[1]["result"]["content"][0]["text"])
        assert payload["isWeekend"] is True

    def test_non_object_and_missing_method_are_parse_errors(self) -> None:
        _, responses = _serve("[]", "42", '{"jsonrpc":"2.0","id":1}')
        assert [r["error"]["code"] for r in responses] == [-32700, -32700, -32700]
        assert all(r["id"] is None for r in responses)

    def test_unknown_method_and_tool(self) -> None:
        _, responses = _serve(
            '{"jsonrpc":"2.0","id":1,"method":"prompts/list"}',
            '{"jsonrpc":"2.0","id":2,"method":"tools/call","params":{"name":"nope"}}',
        )
        assert responses[0]["error"]["code"] == -32601
        assert responses[1]["error"]["code"] == -32603
        assert "result" not in responses[1]

    def test_message_without_id_still_gets_null_id_response(self) -> None:
        _, responses = _serve('{"jsonrpc":"2.0","method":"notifications/initialized"}')
        assert responses[0]["id"] is None
        assert responses[0]["error"]["code"] == -32601

    def test_eof_on_empty_input(self) -> None:
        handled, responses = _serve()
        assert handled == 0
        assert responses == []

    def test_each_response_is_flushed(self) -> None:
        writer = RecordingWriter()
        StdioTransport(ProtocolEngine(), io.StringIO(_LIST_TWICE), writer).serve()
        assert len(writer.flushed) == 2
        first, second = writer.flushed
        assert first.endswith("\n")
        assert first.count("\n") == 1
        assert second.startswith(first)
        assert second.count("\n") == 2

    def test_broken_pipe_stops_the_loop(self) -> None:
        writer = ClosedPipeWriter()
        handled = StdioTransport(ProtocolEngine(), io.StringIO(_LIST_TWICE), writer).serve()
        assert handled == 0
        assert writer.attempts == 1


class TestUndecodableInput:
    def test_invalid_utf8_line_is_a_parse_error(self) -> None:
        reader = io.BytesIO(b'\xff\xfe{"id":1}\n{"jsonrpc":"2.0","id":2,"method":"tools/list"}\n')
        writer = io.StringIO()
        handled = StdioTransport(ProtocolEngine(), reader, writer).serve()
        responses = _decode(writer)
        assert handled == 2
        assert responses[0] == {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}
        assert responses[1]["id"] == 2
        assert "tools" in responses[1]["result"]

    def test_text_wrapper_is_read_through_its_buffer(self) -> None:
        raw = b'\xff\n{"jsonrpc":"2.0","id":7,"method":"initialize","params":{}}\n'
        reader = io.TextIOWrapper(io.BytesIO(raw), encoding="utf-8")
        writer = io.StringIO()
        handled = StdioTransport(ProtocolEngine(), reader, writer).serve()
        responses = _decode(writer)
        assert handled == 2
        assert responses[0]["error"]["code"] == -32700
        assert responses[0]["id"] is None
        assert responses[1]["id"] == 7
        assert responses[1]["result"]["serverInfo"]["name"] == "datetime-mcp-server"

    def test_non_ascii_text_is_decoded(self) -> None:
        reader = io.BytesIO('{"id":1,"method":"tools/call","params":{"name":"nøpe"}}\n'.encode())
        writer = io.StringIO()
        StdioTransport(ProtocolEngine(), reader, writer).serve()
        (response,) = _decode(writer)
        assert response["id"] == 1
        assert response["error"]["message"] == "Unknown tool: nøpe"


class TestHandleLine:
    def test_blank(self) -> None:
        assert StdioTransport(ProtocolEngine()).handle_line("\n") is None
        assert StdioTransport(ProtocolEngine()).handle_line(b"  \n") is None

    def test_returns_single_line(self) -> None:
        out = StdioTransport(ProtocolEngine()).handle_line('{"id":1,"method":"tools/list"}')
        assert out is not None
        assert "\n" not in out
        assert json.loads(out)["id"] == 1

    def test_undecodable_bytes(self) -> None:
        out = StdioTransport(ProtocolEngine()).handle_line(b"\x80\x81\n")
        assert out is not None
        assert json.loads(out) == {"jsonrpc": "2.0", "id": None, "error": {"code": -32700, "message": "Parse error"}}
