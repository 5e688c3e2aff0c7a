"""Arithmetic, comparison, logic and interval operations on machine values."""

from __future__ import annotations

import random
from decimal import ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_EVEN, Context, Decimal
from typing import Any, Callable

from .errors import OpcodeError
from .variable import Interval

__all__ = [
    "negate",
    "logical_not",
    "equal",
    "less",
    "more",
    "less_or_equal",
    "more_or_equal",
    "add",
    "subtract",
    "multiply",
    "divide",
    "modulo",
    "exponent",
    "absolute",
    "round_number",
    "ceil_number",
    "floor_number",
    "random_up_to",
    "make_interval",
    "contained_in",
]

_CONTEXT = Context(prec=28, rounding=ROUND_HALF_EVEN)
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def _is_number(value: Any) -> bool:
    return isinstance(value, Decimal)


def _unsupported(opcode: str) -> OpcodeError:
    return OpcodeError(opcode, "Unsupported type")


def _number(opcode: str, value: Any) -> Decimal:
    if not _is_number(value):
        raise _unsupported(opcode)
    return value


def _binary(
    opcode: str, a: Any, b: Any, operation: Callable[[Decimal, Decimal], Decimal]
) -> Decimal:
    if not (_is_number(a) and _is_number(b)):
        raise _unsupported(opcode)
    try:
        return operation(a, b)
    except ArithmeticError:
        raise OpcodeError(opcode, "Arithmetic overflow") from None


def _compare(opcode: str, a: Any, b: Any, operation: Callable[[Decimal, Decimal], bool]) -> bool:
    if not (_is_number(a) and _is_number(b)):
        raise _unsupported(opcode)
    return operation(a, b)


def negate(a: Any) -> Decimal:
    """Flip the sign of a number."""
    return -_number("Negate", a)


def logical_not(a: Any) -> bool:
    """Invert a boolean."""
    if not isinstance(a, bool):
        raise _unsupported("Not")
    return not a


def _same_scalar(a: Any, b: Any) -> bool:
    if _is_number(a) and _is_number(b):
        return a == b
    if isinstance(a, bool) and isinstance(b, bool):
        return a == b
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    return a is None and b is None


def equal(a: Any, b: Any) -> bool:
    """Compare two scalars of the same kind; anything else is unequal."""
    return _same_scalar(a, b)


def less(a: Any, b: Any) -> bool:
    """Whether number a is below number b."""
    return _compare("Less", a, b, lambda x, y: x < y)


def more(a: Any, b: Any) -> bool:
    """Whether number a is above number b."""
    return _compare("More", a, b, lambda x, y: x > y)


def less_or_equal(a: Any, b: Any) -> bool:
    """Whether number a is at most number b."""
    return _compare("LessOrEqual", a, b, lambda x, y: x <= y)


def more_or_equal(a: Any, b: Any) -> bool:
    """Whether number a is at least number b."""
    return _compare("MoreOrEqual", a, b, lambda x, y: x >= y)


def add(a: Any, b: Any) -> Any:
    """Add two numbers or join two strings."""
    if isinstance(a, str) and isinstance(b, str):
        return a + b
    return _binary("Add", a, b, _CONTEXT.add)


def subtract(a: Any, b: Any) -> Decimal:
    """Subtract number b from number a."""
    return _binary("Subtract", a, b, _CONTEXT.subtract)


def multiply(a: Any, b: Any) -> Decimal:
    """Multiply two numbers."""
    return _binary("Multiply", a, b, _CONTEXT.multiply)


def divide(a: Any, b: Any) -> Decimal:
    """Divide number a by number b."""
    if _is_number(a) and _is_number(b) and b.is_zero():
        raise OpcodeError("Divide", "Division by zero")
    return _binary("Divide", a, b, _CONTEXT.divide)


def modulo(a: Any, b: Any) -> Decimal:
    """Remainder of a divided by b, carrying the sign of a."""
    if _is_number(a) and _is_number(b) and b.is_zero():
        raise OpcodeError("Modulo", "Division by zero")
    return _binary("Modulo", a, b, _CONTEXT.remainder)


def _power(a: Decimal, b: Decimal) -> Decimal:
    if b.is_zero():
        return Decimal(1)
    return _CONTEXT.power(a, b)


def exponent(a: Any, b: Any) -> Decimal:
    """Raise number a to the power of number b."""
    return _binary("Exponent", a, b, _power)


def absolute(a: Any) -> Decimal:
    """Absolute value of a number."""
    return abs(_number("Abs", a))


def round_number(a: Any) -> Decimal:
    """Round a number to an integer, halves going to the even neighbour."""
    return _number("Round", a).to_integral_value(rounding=ROUND_HALF_EVEN)


def ceil_number(a: Any) -> Decimal:
    """Smallest integer not below a number."""
    return _number("Ceil", a).to_integral_value(rounding=ROUND_CEILING)


def floor_number(a: Any) -> Decimal:
    """Largest integer not above a number."""
    return _number("Floor", a).to_integral_value(rounding=ROUND_FLOOR)


def random_up_to(a: Any) -> Decimal:
    """A random integer from zero up to the rounded number, inclusive."""
    if not _is_number(a):
        raise _unsupported("Random")
    try:
        upper = int(a.to_integral_value(rounding=ROUND_HALF_EVEN))
    except (ValueError, OverflowError, ArithmeticError):
        upper = None
    if upper is None or not _I64_MIN <= upper <= _I64_MAX:
        raise OpcodeError("Random", "Failed to determine upper range")
    if upper < 0:
        raise OpcodeError("Random", "Empty range")
    return Decimal(random.randint(0, upper))


def make_interval(left: Any, right: Any, left_bracket: str, right_bracket: str) -> dict[str, Any]:
    """Build the tagged object that stands for a numeric interval."""
    if not (_is_number(left) and _is_number(right)):
        raise _unsupported("Interval")
    return Interval(left_bracket, right_bracket, left, right).to_object()


def _in_interval(value: Decimal, obj: Any) -> bool:
    interval = Interval.from_object(obj)
    if interval is None:
        raise OpcodeError("In", "Failed to deconstruct interval")
    left, right = interval.left, interval.right
    if not (_is_number(left) and _is_number(right)):
        raise _unsupported("In")

    is_open = interval.left_bracket in ("]", ")")
    if interval.left_bracket == "[":
        first = left <= value
    elif interval.left_bracket == "(":
        first = left < value
    elif interval.left_bracket == "]":
        first = left >= value
    elif interval.left_bracket == ")":
        first = left > value
    else:
        raise OpcodeError("In", "Unsupported bracket")

    if interval.right_bracket == "]":
        second = right >= value
    elif interval.right_bracket == ")":
        second = right > value
    elif interval.right_bracket == "[":
        second = right <= value
    elif interval.right_bracket == "(":
        second = right < value
    else:
        raise OpcodeError("In", "Unsupported bracket")

    if is_open:
        return first or second
    return first and second


def contained_in(a: Any, b: Any) -> bool:
    """Whether a scalar is among an array's items or a number lies in an interval."""
    if _is_number(a) and isinstance(b, dict):
        return _in_interval(a, b)
    if isinstance(b, list) and (
        a is None or isinstance(a, (bool, str)) or _is_number(a)
    ):
        return any(_same_scalar(a, item) for item in b)
    raise _unsupported("In")