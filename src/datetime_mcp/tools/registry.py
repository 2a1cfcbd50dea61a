"""Tool catalog answered by ``tools/list``.

The definitions are built once at import time and never mutated.  Every
parameter is optional except ``add_days.days``, which the schema marks as
required even though the dispatcher still defaults it to ``0``.
"""

from __future__ import annotations

from typing import Any

from datetime_mcp.protocols.mcp.models import MCPToolDef
from datetime_mcp.tools.dispatcher import ToolName

_DATE_PROPERTY: dict[str, Any] = {
    "type": "string",
    "description": "Date in YYYY-MM-DD format (default: today)",
}


def _schema(properties: dict[str, Any], required: list[str] | None = None) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


TOOL_DEFINITIONS: tuple[MCPToolDef, ...] = (
    MCPToolDef(
        name=ToolName.GET_CURRENT_DATETIME.value,
        description="Get current date and time in specified timezone (default: local)",
        input_schema=_schema(
            {
                "timezone": {
                    "type": "string",
                    "description": "Timezone name (e.g., 'Europe/Oslo', 'UTC')",
                }
            }
        ),
    ),
    MCPToolDef(
        name=ToolName.GET_ISO8601_TIMESTAMP.value,
        description="Get current timestamp in ISO 8601 format (UTC)",
        input_schema=_schema({}),
    ),
    MCPToolDef(
        name=ToolName.ADD_DAYS.value,
        description="Add or subtract days from a date",
        input_schema=_schema(
            {
                "date": dict(_DATE_PROPERTY),
                "days": {
                    "type": "integer",
                    "description": "Number of days to add (negative to subtract)",
                },
            },
            required=["days"],
        ),
    ),
    MCPToolDef(
        name=ToolName.IS_WEEKEND.value,
        description="Check if a date is a weekend (Saturday or Sunday)",
        input_schema=_schema({"date": dict(_DATE_PROPERTY)}),
    ),
    MCPToolDef(
        name=ToolName.GET_WEEK_NUMBER.value,
        description="Get ISO 8601 week number for a date",
        input_schema=_schema({"date": dict(_DATE_PROPERTY)}),
    ),
)


class ToolRegistry:
    """Read-only view over :data:`TOOL_DEFINITIONS`; lookups hand out copies."""

    def __init__(self, definitions: tuple[MCPToolDef, ...] = TOOL_DEFINITIONS) -> None:
        self._definitions = definitions
        self._by_name = {d.name: d for d in definitions}

    def __len__(self) -> int:
        return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def list_tools(self) -> list[MCPToolDef]:
        """Return every definition, in catalog order.

        Each entry is a deep copy, so callers may edit the returned schemas
        without changing what later listings report.
        """
        return [d.model_copy(deep=True) for d in self._definitions]

    def get(self, name: str) -> MCPToolDef | None:
        definition = self._by_name.get(name)
        return definition.model_copy(deep=True) if definition is not None else None

    def names(self) -> list[str]:
        return [d.name for d in self._definitions]
