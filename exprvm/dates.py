"""Date and time parsing and calendar boundaries."""

from __future__ import annotations

import re
from calendar import monthrange
from datetime import datetime, time, timedelta, timezone
from enum import Enum

from .errors import OpcodeError, ParseDateTimeError

__all__ = ["DateUnit", "parse_date_time", "parse_time", "start_of", "end_of"]

_DATE_TIME = "%Y-%m-%d %H:%M:%S"
_DATE = "%Y-%m-%d"
_TIME_FORMATS = ("%H:%M:%S", "%H:%M", "%H")

_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(?:([Zz])|([+-])(\d{2}):(\d{2}))"
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _strptime(text: str, fmt: str) -> datetime | None:
    try:
        return datetime.strptime(text, fmt)
    except ValueError:
        return None


def _parse_rfc3339(text: str) -> datetime | None:
    """Read an RFC 3339 timestamp and return it as naive UTC."""
    match = _RFC3339.fullmatch(text)
    if match is None:
        return None
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction = match.group(7) or ""
    microsecond = int(fraction[:6].ljust(6, "0")) if fraction else 0
    try:
        local = datetime(year, month, day, hour, minute, second, microsecond)
    except ValueError:
        return None
    if match.group(8):
        return local
    off_hours, off_minutes = int(match.group(10)), int(match.group(11))
    if off_hours > 23 or off_minutes > 59:
        return None
    offset = timedelta(hours=off_hours, minutes=off_minutes)
    if match.group(9) == "-":
        offset = -offset
    try:
        return local - offset
    except OverflowError:
        return None


def parse_date_time(text: str) -> datetime:
    """Parse a date, a date and time, an RFC 3339 timestamp or "now"."""
    if text == "now":
        return _utc_now()
    parsed = _strptime(text, _DATE_TIME) or _strptime(text, _DATE) or _parse_rfc3339(text)
    if parsed is None:
        raise ParseDateTimeError(text)
    return parsed


def parse_time(text: str) -> time:
    """Parse a time of day from a timestamp or a clock reading, or "now"."""
    if text == "now":
        return _utc_now().time()
    parsed = _strptime(text, _DATE_TIME)
    for fmt in _TIME_FORMATS:
        if parsed is not None:
            break
        parsed = _strptime(text, fmt)
    if parsed is None:
        parsed = _parse_rfc3339(text)
    if parsed is None:
        raise ParseDateTimeError(text)
    return parsed.time()


class DateUnit(Enum):
    """Calendar unit used by start and end boundaries."""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @classmethod
    def from_name(cls, name: str) -> "DateUnit":
        """Look a unit up by its short, singular or plural name."""
        try:
            return _UNIT_ALIASES[name]
        except (KeyError, TypeError):
            raise OpcodeError("DateUnit", "Unknown date unit") from None


_UNIT_ALIASES = {
    alias: unit
    for unit, aliases in (
        (DateUnit.SECOND, ("s", "second", "seconds")),
        (DateUnit.MINUTE, ("m", "minute", "minutes")),
        (DateUnit.HOUR, ("h", "hour", "hours")),
        (DateUnit.DAY, ("d", "day", "days")),
        (DateUnit.WEEK, ("w", "week", "weeks")),
        (DateUnit.MONTH, ("M", "month", "months")),
        (DateUnit.YEAR, ("y", "year", "years")),
    )
    for alias in aliases
}


def _failed() -> OpcodeError:
    return OpcodeError("DateFunction", "Failed to run DateFunction")


def start_of(moment: datetime, unit: DateUnit) -> datetime:
    """Move a moment back to the start of its unit."""
    if unit is DateUnit.SECOND:
        return moment
    if unit is DateUnit.MINUTE:
        return moment.replace(second=0)
    if unit is DateUnit.HOUR:
        return moment.replace(second=0, minute=0)
    day_start = moment.replace(second=0, minute=0, hour=0)
    if unit is DateUnit.DAY:
        return day_start
    if unit is DateUnit.WEEK:
        try:
            return day_start - timedelta(days=moment.weekday())
        except OverflowError:
            raise _failed() from None
    if unit is DateUnit.MONTH:
        return day_start.replace(day=1)
    return day_start.replace(day=1, month=1)


def end_of(moment: datetime, unit: DateUnit) -> datetime:
    """Move a moment forward to the last second of its unit."""
    if unit is DateUnit.SECOND:
        return moment
    if unit is DateUnit.MINUTE:
        return moment.replace(second=59)
    if unit is DateUnit.HOUR:
        return moment.replace(second=59, minute=59)
    day_end = moment.replace(second=59, minute=59, hour=23)
    if unit is DateUnit.DAY:
        return day_end
    if unit is DateUnit.WEEK:
        try:
            return day_end + timedelta(days=6 - moment.weekday())
        except OverflowError:
            raise _failed() from None
    month_days = monthrange(moment.year, moment.month)[1]
    if unit is DateUnit.MONTH:
        return day_end.replace(day=month_days)
    # The day is the length of the moment's own month, carried into December.
    return day_end.replace(day=month_days).replace(month=12)