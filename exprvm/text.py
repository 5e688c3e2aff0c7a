"""String operations, regular expressions and type checks on machine values."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Any

from .errors import OpcodeError
from .opcodes import TypeCheckKind, TypeConversionKind
from .variable import type_name

__all__ = [
    "uppercase",
    "lowercase",
    "starts_with",
    "ends_with",
    "matches",
    "extract",
    "type_check",
    "convert",
]

_NUMBER_TEXT = re.compile(r"([+-]?)([0-9][0-9_]*)?(?:\.([0-9_]*))?")
_MAX_SCALE = 28
_MANTISSA_LIMIT = 2**96


def _parse_exact(text: str) -> Decimal | None:
    """Read a decimal number exactly, or return None if it cannot be held."""
    match = _NUMBER_TEXT.fullmatch(text)
    if match is None:
        return None
    sign, whole, fraction = match.groups()
    whole = (whole or "").replace("_", "")
    fraction = (fraction or "").replace("_", "")
    if not whole and not fraction:
        return None
    if len(fraction) > _MAX_SCALE:
        return None
    if int(whole + fraction or "0") >= _MANTISSA_LIMIT:
        return None
    literal = f"{sign}{whole or '0'}"
    if match.group(3) is not None:
        literal += f".{fraction}" if fraction else ""
    return Decimal(literal)


def _strings(opcode: str, a: Any, b: Any) -> tuple[str, str]:
    if not (isinstance(a, str) and isinstance(b, str)):
        raise OpcodeError(opcode, "Unsupported type")
    return a, b


def uppercase(a: Any) -> str:
    """Upper-case a string."""
    if not isinstance(a, str):
        raise OpcodeError("Uppercase", "Unsupported type")
    return a.upper()


def lowercase(a: Any) -> str:
    """Lower-case a string."""
    if not isinstance(a, str):
        raise OpcodeError("Lowercase", "Unsupported type")
    return a.lower()


def starts_with(a: Any, b: Any) -> bool:
    """Whether string a begins with string b."""
    text, prefix = _strings("StartsWith", a, b)
    return text.startswith(prefix)


def ends_with(a: Any, b: Any) -> bool:
    """Whether string a ends with string b."""
    text, suffix = _strings("EndsWith", a, b)
    return text.endswith(suffix)


def _compile(pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error:
        raise OpcodeError("Matches", "Invalid regular expression") from None


def matches(a: Any, b: Any) -> bool:
    """Whether pattern b matches anywhere in string a."""
    text, pattern = _strings("Matches", a, b)
    return _compile(pattern).search(text) is not None


def extract(a: Any, b: Any) -> list[str]:
    """The first match of pattern b in string a and its captured groups.

    Groups that took no part in the match are left out; no match gives an
    empty list.
    """
    text, pattern = _strings("Matches", a, b)
    found = _compile(pattern).search(text)
    if found is None:
        return []
    groups = (found.group(0), *found.groups())
    return [group for group in groups if group is not None]


def type_check(kind: TypeCheckKind, value: Any) -> bool:
    """Whether a value passes the given type check."""
    if kind is TypeCheckKind.NUMERIC:
        if isinstance(value, str):
            return _parse_exact(value) is not None
        return isinstance(value, Decimal)
    raise ValueError(f"unknown type check: {kind!r}")


def _to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    if value is None:
        return "null"
    raise OpcodeError(
        "TypeConversion", f"Type {type_name(value)} cannot be converted to string"
    )


def _to_number(value: Any) -> Decimal:
    if isinstance(value, str):
        parsed = _parse_exact(value)
        if parsed is None:
            raise OpcodeError("TypeConversion", "Failed to parse string to number")
        return parsed
    if isinstance(value, bool):
        return Decimal(1) if value else Decimal(0)
    if isinstance(value, Decimal):
        return value
    raise OpcodeError(
        "TypeConversion", f"Type {type_name(value)} cannot be converted to number"
    )


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, Decimal):
        return not value.is_zero()
    if isinstance(value, str):
        if value == "true":
            return True
        if value == "false":
            return False
        return value == ""
    if value is None:
        return False
    type_name(value)
    return True


def convert(kind: TypeConversionKind, value: Any) -> Any:
    """Convert a value to a string, a number or a boolean."""
    if kind is TypeConversionKind.STRING:
        return _to_string(value)
    if kind is TypeConversionKind.NUMBER:
        return _to_number(value)
    if kind is TypeConversionKind.BOOL:
        return _to_bool(value)
    raise ValueError(f"unknown type conversion: {kind!r}")