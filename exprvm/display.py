"""Coloured one-line rendering of result values for a terminal."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping

from .variable import to_json

__all__ = ["pretty_print"]

_RESET = "\x1b[0m"
_BOLD = "1"
_GREEN = "32"
_YELLOW = "33"


def _paint(text: str, style: str) -> str:
    return f"\x1b[{style}m{text}{_RESET}"


def _number_text(value: int | float | Decimal) -> str:
    if isinstance(value, Decimal):
        value = to_json(value)
    if isinstance(value, float):
        return repr(value)
    return str(value)


def pretty_print(value: Any) -> str:
    """Render a JSON-like value on one line with terminal colours."""
    if value is None:
        return _paint("null", _BOLD)
    if isinstance(value, bool):
        return _paint("true" if value else "false", _YELLOW)
    if isinstance(value, (int, float, Decimal)):
        return _paint(_number_text(value), _YELLOW)
    if isinstance(value, str):
        return _paint(f"'{value}'", _GREEN)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(pretty_print(item) for item in value) + "]"
    if isinstance(value, Mapping):
        elements = ", ".join(f"{key}: {pretty_print(item)}" for key, item in value.items())
        return "{ " + elements + " }"
    raise TypeError(f"cannot display {type(value).__name__}")