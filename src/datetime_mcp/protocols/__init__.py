"""Protocol layer — JSON-RPC error taxonomy and the MCP server implementation."""
