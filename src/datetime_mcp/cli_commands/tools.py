"""``datetime-mcp tools`` — inspect and try out the tool catalog locally."""

from __future__ import annotations

import json
import sys
from typing import Any

import click

from datetime_mcp.cli_commands._output import console, print_tool_text, print_tools_json, print_tools_table


def _parse_assignments(assignments: tuple[str, ...]) -> dict[str, Any]:
    """Turn ``key=value`` pairs into an arguments dict; values are JSON when they parse."""
    arguments: dict[str, Any] = {}
    for item in assignments:
        key, sep, raw = item.partition("=")
        if not sep or not key:
            msg = f"expected key=value, got {item!r}"
            raise click.BadParameter(msg, param_hint="--arg")
        try:
            arguments[key] = json.loads(raw)
        except ValueError:
            arguments[key] = raw
    return arguments


@click.group()
def tools() -> None:
    """List and call the date/time tools."""


@tools.command("list")
@click.option("--json", "as_json", is_flag=True, help="Print the raw tools/list payload.")
def list_cmd(as_json: bool) -> None:
    """Show the tool catalog."""
    from datetime_mcp.tools.registry import ToolRegistry

    catalog = ToolRegistry().list_tools()
    if as_json:
        print_tools_json(catalog)
    else:
        print_tools_table(catalog)


@tools.command("call")
@click.argument("name")
@click.option("--arg", "-a", "assignments", multiple=True, help="Tool argument as key=value (repeatable).")
def call_cmd(name: str, assignments: tuple[str, ...]) -> None:
    """Call tool NAME once and print its text result."""
    from datetime_mcp.config import ConfigError, load_settings
    from datetime_mcp.protocols.errors import ProtocolError
    from datetime_mcp.protocols.mcp.models import CallToolResult
    from datetime_mcp.tools.dispatcher import ToolDispatcher

    arguments = _parse_assignments(assignments)

    try:
        settings = load_settings()
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    dispatcher = ToolDispatcher(default_timezone=settings.default_timezone)
    try:
        value = dispatcher.dispatch(name, arguments)
    except (ProtocolError, OverflowError) as exc:
        console.print(f"[red]Tool error:[/red] {exc}")
        sys.exit(1)

    print_tool_text(CallToolResult.from_value(value).content[0].text)
