"""datetime-mcp — date/time tools served over MCP stdio JSON-RPC."""

from __future__ import annotations

__version__ = "1.0.0"
