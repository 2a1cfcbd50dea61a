"""datetime-mcp CLI entrypoint."""

from __future__ import annotations

import click

from datetime_mcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="datetime-mcp")
def main() -> None:
    """datetime-mcp — date/time tools for MCP hosts."""


# Register subcommands
from datetime_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
