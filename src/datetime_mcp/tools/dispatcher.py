"""ToolDispatcher — routes a tool name plus raw arguments to a calendar function."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from datetime_mcp.protocols.errors import InvalidArgumentError, ToolNotFoundError
from datetime_mcp.tools import calendar

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

logger = logging.getLogger(__name__)


class ToolName(str, Enum):
    """The closed set of callable tools."""

    GET_CURRENT_DATETIME = "get_current_datetime"
    GET_ISO8601_TIMESTAMP = "get_iso8601_timestamp"
    ADD_DAYS = "add_days"
    IS_WEEKEND = "is_weekend"
    GET_WEEK_NUMBER = "get_week_number"


def _json_type(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


class ToolArguments:
    """Read-only typed view over the ``arguments`` bag of a ``tools/call``.

    A key that is missing or explicitly ``null`` is treated as absent.  A value
    of the wrong JSON type raises :class:`InvalidArgumentError`.
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, Any] = dict(values or {})

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __repr__(self) -> str:
        return f"ToolArguments({self._values!r})"

    def get_str(self, key: str) -> str | None:
        value = self._values.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise InvalidArgumentError(key, f"expected string, got {_json_type(value)}")
        return value

    def get_int(self, key: str, default: int = 0) -> int:
        value = self._values.get(key)
        if value is None:
            return default
        # bool is an int subclass but not a JSON integer
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidArgumentError(key, f"expected integer, got {_json_type(value)}")
        return value


class ToolDispatcher:
    """Maps each :class:`ToolName` to a handler through a fixed lookup table.

    Usage::

        dispatcher = ToolDispatcher(default_timezone="Europe/Oslo")
        result = dispatcher.dispatch("add_days", {"date": "2025-11-29", "days": 2})
    """

    def __init__(self, *, default_timezone: str | None = None) -> None:
        self._default_timezone = default_timezone
        self._handlers: dict[ToolName, Callable[[ToolArguments], Any]] = {
            ToolName.GET_CURRENT_DATETIME: self._get_current_datetime,
            ToolName.GET_ISO8601_TIMESTAMP: self._get_iso8601_timestamp,
            ToolName.ADD_DAYS: self._add_days,
            ToolName.IS_WEEKEND: self._is_weekend,
            ToolName.GET_WEEK_NUMBER: self._get_week_number,
        }

    @property
    def default_timezone(self) -> str | None:
        return self._default_timezone

    def dispatch(self, name: str, arguments: Mapping[str, Any] | ToolArguments | None = None) -> Any:
        """Run the tool called *name* and return its raw (unwrapped) result.

        Raises:
            ToolNotFoundError: If *name* is not one of :class:`ToolName`.
            InvalidArgumentError: If an argument has the wrong JSON type.
        """
        try:
            tool = ToolName(name)
        except ValueError:
            raise ToolNotFoundError(name) from None

        args = arguments if isinstance(arguments, ToolArguments) else ToolArguments(arguments)
        logger.info("Calling tool: %s", tool.value)
        return self._handlers[tool](args)

    # -- handlers -----------------------------------------------------------

    def _get_current_datetime(self, args: ToolArguments) -> dict[str, Any]:
        return calendar.current_datetime(
            args.get_str("timezone"),
            default_timezone=self._default_timezone,
        )

    def _get_iso8601_timestamp(self, args: ToolArguments) -> str:
        return calendar.iso8601_timestamp()

    def _add_days(self, args: ToolArguments) -> dict[str, Any]:
        return calendar.add_days(args.get_str("date"), args.get_int("days", 0))

    def _is_weekend(self, args: ToolArguments) -> dict[str, Any]:
        return calendar.is_weekend(args.get_str("date"))

    def _get_week_number(self, args: ToolArguments) -> dict[str, Any]:
        return calendar.week_number(args.get_str("date"))
