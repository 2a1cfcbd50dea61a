"""Server settings — optional YAML file plus ``DATETIME_MCP_*`` environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError

from datetime_mcp import __version__

ENV_PREFIX = "DATETIME_MCP_"

# Environment variable suffix -> settings field
_ENV_FIELDS = {
    "LOG_LEVEL": "log_level",
    "LOG_FILE": "log_file",
    "DEFAULT_TIMEZONE": "default_timezone",
}


class ConfigError(Exception):
    """Raised when a settings file cannot be read, parsed or validated."""


class TelemetrySettings(BaseModel):
    """Optional telemetry configuration."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class ServerSettings(BaseModel):
    """Everything the server needs to know at startup.

    ``log_level`` defaults to ``None``, which keeps the server silent.
    """

    server_name: str = "datetime-mcp-server"
    server_version: str = __version__
    protocol_version: str = "2024-11-05"
    default_timezone: str | None = None
    log_level: str | None = None
    log_file: str | None = None
    telemetry: TelemetrySettings = TelemetrySettings()


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read {path}: {exc}") from exc

    try:
        data: Any = yaml.safe_load(os.path.expandvars(raw))
    except yaml.YAMLError as exc:
        raise ConfigError(f"YAML parse error: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Settings YAML must be a mapping")
    return data


def load_settings(path: Path | str | None = None, env: dict[str, str] | None = None) -> ServerSettings:
    """Build :class:`ServerSettings` from *path* (optional) and the environment.

    Environment variables win over the file.  *env* defaults to ``os.environ``.

    Raises:
        ConfigError: On unreadable files, YAML errors or validation failures.
    """
    data = _read_yaml(Path(path)) if path is not None else {}

    environ = os.environ if env is None else env
    for suffix, field in _ENV_FIELDS.items():
        value = environ.get(ENV_PREFIX + suffix)
        if value:
            data[field] = value

    try:
        return ServerSettings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
