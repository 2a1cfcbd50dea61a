"""MCP models — JSON-RPC 2.0 messages and tool definitions.

Implements the message format used by the Model Context Protocol for the
``initialize`` handshake, tool discovery (``tools/list``) and execution
(``tools/call``).  Wire names are lowerCamelCase; Python attributes are
snake_case with aliases.
"""

from __future__ import annotations

import json
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, model_validator

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message.

    A missing ``id`` marks a notification.  ``params`` may be any JSON value;
    each method decides what it accepts.
    """

    jsonrpc: str = "2.0"
    method: StrictStr
    id: StrictInt | None = None
    params: Any = None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message carrying exactly one of result or error."""

    jsonrpc: str = "2.0"
    id: int | None = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> JsonRpcResponse:
        if (self.result is None) == (self.error is None):
            msg = "a response must carry exactly one of 'result' or 'error'"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: int | None, result: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls,
        request_id: int | None,
        code: int,
        message: str,
        data: Any = None,
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Dump for the wire: null members are dropped, but ``id`` is always kept."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        return {"jsonrpc": data.pop("jsonrpc"), "id": self.id, **data}

    def to_json(self) -> str:
        return json.dumps(self.to_wire(), separators=(",", ":"))


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class MCPToolDef(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str
    description: str = ""
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")


class ServerInfo(BaseModel):
    name: str
    version: str


class InitializeResult(BaseModel):
    """Result of the ``initialize`` handshake."""

    model_config = ConfigDict(populate_by_name=True)

    protocol_version: str = Field(alias="protocolVersion")
    server_info: ServerInfo = Field(alias="serverInfo")
    capabilities: dict[str, Any] = Field(default_factory=lambda: {"tools": {}})


class ListToolsResult(BaseModel):
    """Result of ``tools/list``."""

    tools: list[MCPToolDef]


class ToolCallParams(BaseModel):
    """The ``params`` of a ``tools/call`` request."""

    name: StrictStr
    arguments: dict[str, Any] | None = None


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class CallToolResult(BaseModel):
    """Result of ``tools/call``: tool output wrapped as MCP text content."""

    content: list[TextContent]

    @classmethod
    def from_value(cls, value: Any) -> CallToolResult:
        """Wrap a raw tool result.

        Strings pass through verbatim, mappings become compact JSON text and
        anything else is rendered with ``str()``.
        """
        if isinstance(value, str):
            text = value
        elif isinstance(value, dict):
            text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
        elif value is None:
            text = ""
        else:
            text = str(value)
        return cls(content=[TextContent(text=text)])
