"""Instructions understood by the virtual machine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

__all__ = ["Op", "Instruction", "TypeCheckKind", "TypeConversionKind"]


class Op(Enum):
    """Every operation the machine can execute."""

    PUSH = "Push"
    POP = "Pop"
    ROT = "Rot"
    FETCH = "Fetch"
    FETCH_ENV = "FetchEnv"
    NEGATE = "Negate"
    NOT = "Not"
    EQUAL = "Equal"
    JUMP = "Jump"
    JUMP_IF_TRUE = "JumpIfTrue"
    JUMP_IF_FALSE = "JumpIfFalse"
    JUMP_BACKWARD = "JumpBackward"
    IN = "In"
    LESS = "Less"
    MORE = "More"
    LESS_OR_EQUAL = "LessOrEqual"
    MORE_OR_EQUAL = "MoreOrEqual"
    ABS = "Abs"
    ROUND = "Round"
    CEIL = "Ceil"
    FLOOR = "Floor"
    RANDOM = "Random"
    AVERAGE = "Average"
    MEDIAN = "Median"
    MODE = "Mode"
    MIN = "Min"
    MAX = "Max"
    SUM = "Sum"
    ADD = "Add"
    SUBTRACT = "Subtract"
    MULTIPLY = "Multiply"
    DIVIDE = "Divide"
    MODULO = "Modulo"
    EXPONENT = "Exponent"
    INTERVAL = "Interval"
    UPPERCASE = "Uppercase"
    LOWERCASE = "Lowercase"
    CONTAINS = "Contains"
    STARTS_WITH = "StartsWith"
    ENDS_WITH = "EndsWith"
    MATCHES = "Matches"
    EXTRACT = "Extract"
    DATE_MANIPULATION = "DateManipulation"
    DATE_FUNCTION = "DateFunction"
    SLICE = "Slice"
    ARRAY = "Array"
    LEN = "Len"
    FLATTEN = "Flatten"
    PARSE_DATE_TIME = "ParseDateTime"
    PARSE_TIME = "ParseTime"
    PARSE_DURATION = "ParseDuration"
    TYPE_CHECK = "TypeCheck"
    TYPE_CONVERSION = "TypeConversion"
    JUMP_IF_END = "JumpIfEnd"
    INCREMENT_IT = "IncrementIt"
    INCREMENT_COUNT = "IncrementCount"
    GET_COUNT = "GetCount"
    GET_LEN = "GetLen"
    POINTER = "Pointer"
    BEGIN = "Begin"
    END = "End"


class TypeCheckKind(Enum):
    """Checks applied by the type-check instruction."""

    NUMERIC = "numeric"


class TypeConversionKind(Enum):
    """Targets of the type-conversion instruction."""

    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"


def _is_offset(argument: Any) -> bool:
    return isinstance(argument, int) and not isinstance(argument, bool) and argument >= 0


def _is_brackets(argument: Any) -> bool:
    return (
        isinstance(argument, tuple)
        and len(argument) == 2
        and all(isinstance(part, str) for part in argument)
    )


def _any(argument: Any) -> bool:
    return True


_ARGUMENT_CHECKS: dict[Op, Callable[[Any], bool]] = {
    Op.PUSH: _any,
    Op.FETCH_ENV: lambda argument: isinstance(argument, str),
    Op.JUMP: _is_offset,
    Op.JUMP_IF_TRUE: _is_offset,
    Op.JUMP_IF_FALSE: _is_offset,
    Op.JUMP_BACKWARD: _is_offset,
    Op.JUMP_IF_END: _is_offset,
    Op.INTERVAL: _is_brackets,
    Op.DATE_MANIPULATION: lambda argument: isinstance(argument, str),
    Op.DATE_FUNCTION: lambda argument: isinstance(argument, str),
    Op.TYPE_CHECK: lambda argument: isinstance(argument, TypeCheckKind),
    Op.TYPE_CONVERSION: lambda argument: isinstance(argument, TypeConversionKind),
}


@dataclass(frozen=True)
class Instruction:
    """One operation together with its operand, if it takes one.

    Jumps carry a non-negative offset, ``FETCH_ENV`` and the date operations a
    name, ``INTERVAL`` a ``(left_bracket, right_bracket)`` pair, the type
    operations their kind and ``PUSH`` the value to push.
    """

    op: Op
    argument: Any = None

    def __post_init__(self) -> None:
        check = _ARGUMENT_CHECKS.get(self.op)
        if check is None:
            if self.argument is not None:
                raise ValueError(f"{self.op.value} takes no argument")
        elif not check(self.argument):
            raise ValueError(f"invalid argument for {self.op.value}: {self.argument!r}")

    def __str__(self) -> str:
        if self.op not in _ARGUMENT_CHECKS:
            return self.op.value
        return f"{self.op.value}({self.argument!r})"