"""Calendar utilities — the pure date/time helpers behind each MCP tool.

Nothing in this module raises for bad *input*: a malformed date falls back to
today and an unknown time zone falls back to the default zone.  The clock can
be injected (``now`` / ``today``) so every result is reproducible in tests.

All returned mappings use lowerCamelCase keys because they are serialized
verbatim into tool results.
"""

from __future__ import annotations

import os
from datetime import date, datetime, timedelta, timezone, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Fixed English names; ``strftime("%A")`` would follow the process locale.
WEEKDAY_NAMES = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

_LOCALTIME = Path("/etc/localtime")
_ZONEINFO_MARKER = "zoneinfo/"


# ---------------------------------------------------------------------------
# Time zones
# ---------------------------------------------------------------------------


def _load_zone(name: str) -> ZoneInfo | None:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return None


def _localtime_link_target() -> str | None:
    """Derive an IANA key from the ``/etc/localtime`` symlink, if there is one."""
    try:
        target = str(_LOCALTIME.readlink())
    except OSError:
        return None
    index = target.find(_ZONEINFO_MARKER)
    if index == -1:
        return None
    return target[index + len(_ZONEINFO_MARKER) :]


def local_timezone() -> tuple[tzinfo, str]:
    """Return the system time zone and a best-effort identifier for it.

    Prefers an IANA key (from ``$TZ`` or the ``/etc/localtime`` link) and falls
    back to the fixed offset reported by the C library.
    """
    name = os.environ.get("TZ", "").lstrip(":") or _localtime_link_target()
    if name:
        zone = _load_zone(name)
        if zone is not None:
            return zone, zone.key

    local = datetime.now().astimezone().tzinfo or timezone.utc
    return local, local.tzname(None) or "UTC"


def resolve_timezone(name: str | None, default: str | None = None) -> tuple[tzinfo, str]:
    """Resolve *name* to a tzinfo, falling back to *default* and then the system zone.

    Unknown identifiers are ignored silently.
    """
    for candidate in (name, default):
        if candidate and candidate.strip():
            zone = _load_zone(candidate.strip())
            if zone is not None:
                return zone, zone.key
    return local_timezone()


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def weekday_name(day: date) -> str:
    return WEEKDAY_NAMES[day.weekday()]


def parse_date(text: str | None, today: date) -> date:
    """Parse ``YYYY-MM-DD`` (or an ISO date-time) and return *today* on failure."""
    if text is None or not text.strip():
        return today
    candidate = text.strip()
    try:
        return date.fromisoformat(candidate)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(candidate).date()
    except ValueError:
        return today


def current_datetime(
    timezone_name: str | None = None,
    *,
    default_timezone: str | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Describe the current moment in the requested time zone."""
    zone, identifier = resolve_timezone(timezone_name, default_timezone)
    moment = (now or datetime.now(timezone.utc)).astimezone(zone)
    return {
        "datetime": moment.isoformat(),
        "date": moment.strftime("%Y-%m-%d"),
        "time": moment.strftime("%H:%M:%S"),
        "timezone": identifier,
        "dayOfWeek": weekday_name(moment),
        "weekNumber": moment.isocalendar().week,
        "year": moment.year,
        "month": moment.month,
        "day": moment.day,
    }


def iso8601_timestamp(now: datetime | None = None) -> str:
    """Return the current UTC instant as ISO-8601 with a trailing ``Z``."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="microseconds").replace("+00:00", "Z")


def add_days(date_text: str | None = None, days: int = 0, *, today: date | None = None) -> dict[str, Any]:
    """Shift a date by *days* (negative values subtract).

    Raises:
        OverflowError: If the result falls outside the supported date range.
    """
    base = parse_date(date_text, today or date.today())
    result = base + timedelta(days=days)
    return {
        "original": base.isoformat(),
        "result": result.isoformat(),
        "daysAdded": days,
        "dayOfWeek": weekday_name(result),
    }


def is_weekend(date_text: str | None = None, *, today: date | None = None) -> dict[str, Any]:
    day = parse_date(date_text, today or date.today())
    return {
        "date": day.isoformat(),
        "dayOfWeek": weekday_name(day),
        "isWeekend": day.weekday() >= 5,
    }


def week_number(date_text: str | None = None, *, today: date | None = None) -> dict[str, Any]:
    """ISO 8601 week number of a date.

    ``year`` is the calendar year of the date, not the ISO week-numbering year,
    so 2024-12-30 reports week 1 of year 2024.
    """
    day = parse_date(date_text, today or date.today())
    return {
        "date": day.isoformat(),
        "weekNumber": day.isocalendar().week,
        "year": day.year,
    }
