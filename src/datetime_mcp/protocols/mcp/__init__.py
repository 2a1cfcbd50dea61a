"""MCP protocol — JSON-RPC models, the protocol engine and the stdio transport."""

from datetime_mcp.protocols.mcp.models import (
    CallToolResult,
    InitializeResult,
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    ListToolsResult,
    MCPToolDef,
    TextContent,
    ToolCallParams,
)

__all__ = [
    "CallToolResult",
    "InitializeResult",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "ListToolsResult",
    "MCPToolDef",
    "TextContent",
    "ToolCallParams",
]
