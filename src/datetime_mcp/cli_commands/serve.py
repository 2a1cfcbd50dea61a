"""``datetime-mcp serve`` — run the MCP server over stdin/stdout."""

from __future__ import annotations

import sys

import click

from datetime_mcp.cli_commands._output import err_console


@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="YAML settings file.",
)
@click.option("--log-level", default=None, help="Log to stderr at this level (default: off).")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write logs to this file instead of stderr.",
)
@click.option("--telemetry", is_flag=True, help="Enable OpenTelemetry tracing.")
def serve(
    config_path: str | None,
    log_level: str | None,
    log_file: str | None,
    telemetry: bool,
) -> None:
    """Serve the date/time tools as newline-delimited JSON-RPC on stdio.

    Stdout carries responses only; all diagnostics go to stderr.
    """
    from datetime_mcp.config import ConfigError, load_settings
    from datetime_mcp.protocols.mcp.engine import ProtocolEngine
    from datetime_mcp.protocols.mcp.transport import StdioTransport
    from datetime_mcp.utils.logging import configure_logging

    try:
        settings = load_settings(config_path)
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        sys.exit(1)

    overrides: dict[str, object] = {}
    if log_level is not None:
        overrides["log_level"] = log_level
    if log_file is not None:
        overrides["log_file"] = log_file
    if telemetry:
        overrides["telemetry"] = settings.telemetry.model_copy(update={"enabled": True})
    if overrides:
        settings = settings.model_copy(update=overrides)

    try:
        configure_logging(settings.log_level, settings.log_file)
    except (ValueError, OSError) as exc:
        err_console.print(f"[red]Logging error:[/red] {exc}")
        sys.exit(1)

    if settings.telemetry.enabled:
        from datetime_mcp.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(
                service_name=settings.server_name,
                export_to_console=settings.telemetry.otlp_endpoint is None,
                otlp_endpoint=settings.telemetry.otlp_endpoint,
            )
        except ImportError as exc:
            err_console.print(f"[red]Telemetry error:[/red] {exc}")
            sys.exit(1)

    transport = StdioTransport(ProtocolEngine(settings))
    try:
        transport.serve()
    except KeyboardInterrupt:
        pass
