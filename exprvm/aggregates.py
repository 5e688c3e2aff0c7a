"""Aggregate operations over arrays of numbers."""

from __future__ import annotations

from collections import Counter
from decimal import ROUND_HALF_EVEN, Context, Decimal
from typing import Any

from .errors import OpcodeError

__all__ = ["average", "median", "mode", "minimum", "maximum", "total"]

_CONTEXT = Context(prec=28, rounding=ROUND_HALF_EVEN)


def _array(opcode: str, value: Any) -> list[Any]:
    if not isinstance(value, list):
        raise OpcodeError(opcode, "Unsupported type")
    return value


def _numbers(opcode: str, value: Any, message: str) -> list[Decimal]:
    items = _array(opcode, value)
    if not all(isinstance(item, Decimal) for item in items):
        raise OpcodeError(opcode, message)
    return items


def _sum(numbers: list[Decimal]) -> Decimal:
    result = Decimal(0)
    for number in numbers:
        result = _CONTEXT.add(result, number)
    return result


def average(a: Any) -> Decimal:
    """Arithmetic mean of an array of numbers."""
    numbers = _numbers("Average", a, "Invalid array value")
    if not numbers:
        raise OpcodeError("Average", "Array is empty")
    return _CONTEXT.divide(_sum(numbers), Decimal(len(numbers)))


def median(a: Any) -> Decimal:
    """Middle value of an array of numbers, or the mean of the two middle ones."""
    numbers = _numbers("Median", a, "Unsupported type")
    if not numbers:
        raise OpcodeError("Median", "Array is empty")
    ordered = sorted(numbers)
    center = len(ordered) // 2
    if len(ordered) % 2 == 1:
        return ordered[center]
    return _CONTEXT.divide(_CONTEXT.add(ordered[center - 1], ordered[center]), Decimal(2))


def mode(a: Any) -> Decimal:
    """Most frequent number of an array; ties go to the one seen first."""
    numbers = _numbers("Mode", a, "Unsupported type")
    if not numbers:
        raise OpcodeError("Mode", "Array is empty")
    (value, _count), = Counter(numbers).most_common(1)
    return value


def _extreme(opcode: str, a: Any, pick: Any) -> Decimal:
    items = _array(opcode, a)
    if not items:
        raise OpcodeError(opcode, "Empty array")
    if not all(isinstance(item, Decimal) for item in items):
        raise OpcodeError(opcode, "Unsupported array value")
    return pick(items)


def minimum(a: Any) -> Decimal:
    """Smallest number of a non-empty array."""
    return _extreme("Min", a, min)


def maximum(a: Any) -> Decimal:
    """Largest number of a non-empty array."""
    return _extreme("Max", a, max)


def total(a: Any) -> Decimal:
    """Sum of an array of numbers; zero for an empty array."""
    return _sum(_numbers("Sum", a, "Unsupported array value"))