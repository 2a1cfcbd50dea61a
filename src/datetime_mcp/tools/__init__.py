"""Date/time tools — calendar utilities, the tool catalog, and the dispatcher."""

from datetime_mcp.tools.dispatcher import ToolArguments, ToolDispatcher, ToolName
from datetime_mcp.tools.registry import TOOL_DEFINITIONS, ToolRegistry

__all__ = [
    "TOOL_DEFINITIONS",
    "ToolArguments",
    "ToolDispatcher",
    "ToolName",
    "ToolRegistry",
]
