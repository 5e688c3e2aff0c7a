"""Date parts, calendar boundaries, timestamps and durations."""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any

from .dates import DateUnit, end_of, parse_date_time, parse_time, start_of
from .errors import OpcodeError, ParseDateTimeError
from .variable import to_datetime

__all__ = [
    "date_part",
    "date_boundary",
    "parse_date_time_value",
    "parse_time_value",
    "parse_duration",
    "duration_seconds",
]

_EPOCH = datetime(1970, 1, 1)
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_U32_MAX = 2**32 - 1
_U64_MAX = 2**64 - 1

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_NANOS_PER_SECOND = 1_000_000_000
_UNIT_NANOS = {
    **dict.fromkeys(("nsec", "ns"), 1),
    **dict.fromkeys(("usec", "us", "\u00b5s", "\u03bcs"), 1_000),
    **dict.fromkeys(("msec", "ms"), 1_000_000),
    **dict.fromkeys(("seconds", "second", "sec", "s"), _NANOS_PER_SECOND),
    **dict.fromkeys(("minutes", "minute", "min", "m"), 60 * _NANOS_PER_SECOND),
    **dict.fromkeys(("hours", "hour", "hr", "h"), 3_600 * _NANOS_PER_SECOND),
    **dict.fromkeys(("days", "day", "d"), 86_400 * _NANOS_PER_SECOND),
    **dict.fromkeys(("weeks", "week", "w"), 604_800 * _NANOS_PER_SECOND),
    **dict.fromkeys(("months", "month", "M"), 2_630_016 * _NANOS_PER_SECOND),
    **dict.fromkeys(("years", "year", "y"), 31_557_600 * _NANOS_PER_SECOND),
}
_DURATION = re.compile(r"\s*(?:[0-9]+\s*[^\s0-9]+\s*)+")
_COMPONENT = re.compile(r"([0-9]+)\s*([^\s0-9]+)")


def _timestamp(moment: datetime) -> int:
    return (moment - _EPOCH) // timedelta(seconds=1)


def _date_string(moment: datetime) -> str:
    text = moment.strftime("%Y-%m-%d %H:%M:%S")
    micros = moment.microsecond
    if micros == 0:
        return text
    if micros % 1_000 == 0:
        return f"{text}.{micros // 1_000:03d}"
    return f"{text}.{micros:06d}"


def _truncate(value: Decimal) -> int | None:
    if not value.is_finite():
        return None
    return int(value)


def date_part(operation: str, value: Any) -> Any:
    """Read one calendar part of a date string or timestamp."""
    moment = to_datetime(value)
    if operation == "year":
        return Decimal(moment.year)
    if operation == "dayOfWeek":
        return Decimal(moment.isoweekday())
    if operation == "dayOfMonth":
        return Decimal(moment.day)
    if operation == "dayOfYear":
        return Decimal(moment.timetuple().tm_yday)
    if operation == "weekOfYear":
        return Decimal(moment.isocalendar()[1])
    if operation == "monthOfYear":
        return Decimal(moment.month)
    if operation == "monthString":
        return _MONTHS[moment.month - 1]
    if operation == "weekdayString":
        return _WEEKDAYS[moment.weekday()]
    if operation == "dateString":
        return _date_string(moment)
    raise OpcodeError("DateManipulation", "Unsupported operation")


def date_boundary(name: str, value: Any, unit: Any) -> Decimal:
    """Timestamp of the start or end of the unit that holds a moment."""
    moment = to_datetime(value)
    if not isinstance(unit, str):
        raise OpcodeError("DateFunction", "Unknown date function")
    if name == "startOf":
        boundary = start_of(moment, DateUnit.from_name(unit))
    elif name == "endOf":
        boundary = end_of(moment, DateUnit.from_name(unit))
    else:
        raise OpcodeError("DateManipulation", "Unsupported operation")
    return Decimal(_timestamp(boundary))


def parse_date_time_value(a: Any) -> Decimal:
    """Unix timestamp of a date string; numbers are taken as timestamps."""
    if isinstance(a, str):
        return Decimal(_timestamp(parse_date_time(a)))
    if isinstance(a, Decimal):
        seconds = _truncate(a)
        if seconds is None or not _I64_MIN <= seconds <= _I64_MAX:
            raise OpcodeError("ParseDateTime", "Number overflow")
        return Decimal(seconds)
    raise OpcodeError("ParseDateTime", "Unsupported type")


def parse_time_value(a: Any) -> Decimal:
    """Seconds since midnight of a time string; numbers pass through."""
    if isinstance(a, str):
        clock = parse_time(a)
        return Decimal(clock.hour * 3_600 + clock.minute * 60 + clock.second)
    if isinstance(a, Decimal):
        seconds = _truncate(a)
        if seconds is None or not 0 <= seconds <= _U32_MAX:
            raise OpcodeError("ParseTime", "Number overflow")
        return Decimal(seconds)
    raise OpcodeError("ParseTime", "Unsupported type")


def parse_duration(text: str) -> int:
    """Whole seconds in a human duration such as ``"1h 30m"`` or ``"2days"``."""
    if _DURATION.fullmatch(text) is None:
        raise ParseDateTimeError(text)
    total = 0
    for amount, unit in _COMPONENT.findall(text):
        factor = _UNIT_NANOS.get(unit)
        if factor is None:
            raise ParseDateTimeError(text)
        total += int(amount) * factor
    seconds = total // _NANOS_PER_SECOND
    if seconds > _U64_MAX:
        raise ParseDateTimeError(text)
    return seconds


def duration_seconds(a: Any) -> Decimal:
    """Seconds of a duration string; numbers are taken as seconds."""
    if isinstance(a, str):
        return Decimal(parse_duration(a))
    if isinstance(a, Decimal):
        seconds = _truncate(a)
        if seconds is None or not 0 <= seconds <= _U64_MAX:
            raise OpcodeError("ParseDuration", "Number overflow")
        return Decimal(seconds)
    raise OpcodeError("ParseDuration", "Unsupported type")