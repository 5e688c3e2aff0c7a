"""Values handled by the virtual machine and their JSON conversions.

A value is ``None``, a ``bool``, a ``Decimal``, a ``str``, a ``list`` of
values or a ``dict`` from strings to values.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from .dates import parse_date_time
from .errors import NumberConversionError, OpcodeError, ParseDateTimeError

__all__ = ["Interval", "from_json", "to_json", "type_name", "to_datetime"]

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
_U64_MAX = 2**64 - 1
_EPOCH = datetime(1970, 1, 1)


def from_json(value: Any) -> Any:
    """Turn a decoded JSON value into a machine value."""
    if value is None or isinstance(value, (bool, str, Decimal)):
        return value
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            raise NumberConversionError()
        return Decimal(repr(value))
    if isinstance(value, (list, tuple)):
        return [from_json(item) for item in value]
    if isinstance(value, Mapping):
        return {str(key): from_json(item) for key, item in value.items()}
    raise TypeError(f"cannot convert {type(value).__name__} to a machine value")


def _number_to_json(number: Decimal) -> int | float:
    if not number.is_finite():
        raise NumberConversionError()
    normal = number.normalize()
    if normal == normal.to_integral_value():
        integer = int(normal)
        if _I64_MIN <= integer <= _U64_MAX:
            return integer
    return float(normal)


def to_json(value: Any) -> Any:
    """Turn a machine value into plain JSON-compatible Python data."""
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, Decimal):
        return _number_to_json(value)
    if isinstance(value, list):
        return [to_json(item) for item in value]
    if isinstance(value, dict):
        return {key: to_json(item) for key, item in value.items()}
    raise TypeError(f"{type(value).__name__} is not a machine value")


def type_name(value: Any) -> str:
    """Name the kind of a machine value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, Decimal):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    raise TypeError(f"{type(value).__name__} is not a machine value")


def to_datetime(value: Any) -> datetime:
    """Read a moment from a date string or a Unix timestamp in seconds."""
    if isinstance(value, str):
        return parse_date_time(value)
    if isinstance(value, Decimal):
        try:
            seconds = int(value)
        except (ValueError, OverflowError, InvalidOperation):
            seconds = None
        if seconds is None or not _I64_MIN <= seconds <= _I64_MAX:
            raise OpcodeError("DateManipulation", "Failed to extract date")
        try:
            return _EPOCH + timedelta(seconds=seconds)
        except OverflowError:
            raise ParseDateTimeError(str(value)) from None
    raise OpcodeError("DateManipulation", "Unsupported type")


@dataclass
class Interval:
    """A numeric range with its two bracket symbols."""

    left_bracket: str
    right_bracket: str
    left: Any
    right: Any

    def to_object(self) -> dict[str, Any]:
        """Encode the interval as a tagged object value."""
        return {
            "_symbol": "Interval",
            "left_bracket": self.left_bracket,
            "right_bracket": self.right_bracket,
            "left": self.left,
            "right": self.right,
        }

    @classmethod
    def from_object(cls, obj: Any) -> "Interval | None":
        """Decode a tagged object value, or return None if it is not one."""
        if not isinstance(obj, dict) or obj.get("_symbol") != "Interval":
            return None
        left_bracket = obj.get("left_bracket")
        right_bracket = obj.get("right_bracket")
        if not isinstance(left_bracket, str) or not isinstance(right_bracket, str):
            return None
        if "left" not in obj or "right" not in obj:
            return None
        return cls(left_bracket, right_bracket, obj["left"], obj["right"])