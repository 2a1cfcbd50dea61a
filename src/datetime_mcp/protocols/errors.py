"""Shared error types and JSON-RPC error codes for the protocol layer."""

from __future__ import annotations

# Standard JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ProtocolError(Exception):
    """Base error for all protocol-layer failures."""

    code: int = INTERNAL_ERROR


class MethodNotFoundError(ProtocolError):
    """The request named a method this server does not route."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}")


class ToolCallError(ProtocolError):
    """A ``tools/call`` request could not be carried out.

    Reported as ``INTERNAL_ERROR`` whether the client or the tool is at fault.
    """


class ToolNotFoundError(ToolCallError):
    """Requested tool does not exist in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class InvalidArgumentError(ToolCallError):
    """A tool argument (or the call envelope itself) has the wrong shape or type."""

    def __init__(self, argument: str, detail: str) -> None:
        self.argument = argument
        self.detail = detail
        super().__init__(f"Invalid argument '{argument}': {detail}")
