"""Shared CLI output formatters."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from datetime_mcp.protocols.mcp.models import MCPToolDef  # noqa: TC001

console = Console()
# ``serve`` owns stdout for JSON-RPC, so its diagnostics go here.
err_console = Console(stderr=True)


def print_tools_table(tools: list[MCPToolDef]) -> None:
    """Pretty-print the tool catalog as a table."""
    table = Table(title="Available Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Parameters")

    for tool in tools:
        properties: dict[str, Any] = tool.input_schema.get("properties", {})
        required = set(tool.input_schema.get("required", []))
        params = ", ".join(
            f"{name}{'' if name in required else '?'}: {spec.get('type', '?')}"
            for name, spec in properties.items()
        )
        table.add_row(tool.name, _truncate(tool.description), params or "-")

    console.print(table)


def print_tools_json(tools: list[MCPToolDef]) -> None:
    """Print the catalog exactly as ``tools/list`` returns it."""
    console.print_json(json.dumps({"tools": [t.model_dump(by_alias=True) for t in tools]}))


def print_tool_text(text: str) -> None:
    """Print a tool's text result, pretty-printing it when it is JSON."""
    try:
        json.loads(text)
    except ValueError:
        console.print(text, markup=False, highlight=False)
        return
    console.print_json(text)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
