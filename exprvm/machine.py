"""Stack machine that executes bytecode instructions."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Any, Callable, Iterable

from . import aggregates, arithmetic, sequences, temporal, text
from .errors import OpcodeError, OpcodeOutOfBounds, StackOutOfBounds
from .opcodes import Instruction, Op

__all__ = ["Scope", "VM"]


@dataclass
class Scope:
    """Iteration state of one closure running over an array."""

    array: list[Any]
    index: int = 0
    count: int = 0

    @property
    def length(self) -> int:
        """Number of items the closure iterates over."""
        return len(self.array)


_UNARY: dict[Op, Callable[[Any], Any]] = {
    Op.NEGATE: arithmetic.negate,
    Op.NOT: arithmetic.logical_not,
    Op.ABS: arithmetic.absolute,
    Op.ROUND: arithmetic.round_number,
    Op.CEIL: arithmetic.ceil_number,
    Op.FLOOR: arithmetic.floor_number,
    Op.RANDOM: arithmetic.random_up_to,
    Op.AVERAGE: aggregates.average,
    Op.MEDIAN: aggregates.median,
    Op.MODE: aggregates.mode,
    Op.MIN: aggregates.minimum,
    Op.MAX: aggregates.maximum,
    Op.SUM: aggregates.total,
    Op.UPPERCASE: text.uppercase,
    Op.LOWERCASE: text.lowercase,
    Op.FLATTEN: sequences.flatten,
    Op.PARSE_DATE_TIME: temporal.parse_date_time_value,
    Op.PARSE_TIME: temporal.parse_time_value,
    Op.PARSE_DURATION: temporal.duration_seconds,
}

_BINARY: dict[Op, Callable[[Any, Any], Any]] = {
    Op.FETCH: sequences.fetch,
    Op.EQUAL: arithmetic.equal,
    Op.IN: arithmetic.contained_in,
    Op.LESS: arithmetic.less,
    Op.MORE: arithmetic.more,
    Op.LESS_OR_EQUAL: arithmetic.less_or_equal,
    Op.MORE_OR_EQUAL: arithmetic.more_or_equal,
    Op.ADD: arithmetic.add,
    Op.SUBTRACT: arithmetic.subtract,
    Op.MULTIPLY: arithmetic.multiply,
    Op.DIVIDE: arithmetic.divide,
    Op.MODULO: arithmetic.modulo,
    Op.EXPONENT: arithmetic.exponent,
    Op.CONTAINS: sequences.contains,
    Op.STARTS_WITH: text.starts_with,
    Op.ENDS_WITH: text.ends_with,
    Op.MATCHES: text.matches,
    Op.EXTRACT: text.extract,
}


class VM:
    """Executes a list of instructions against an environment value."""

    def __init__(self) -> None:
        self.stack: list[Any] = []
        self.scopes: list[Scope] = []
        self._bytecode: tuple[Instruction, ...] = ()
        self._env: Any = None
        self._ip = 0
        self._handlers: dict[Op, Callable[[Any], None]] = {
            Op.PUSH: self._push,
            Op.POP: lambda _: self._pop(),
            Op.ROT: self._rot,
            Op.FETCH_ENV: self._fetch_env,
            Op.JUMP: self._jump,
            Op.JUMP_IF_TRUE: self._jump_if_true,
            Op.JUMP_IF_FALSE: self._jump_if_false,
            Op.JUMP_BACKWARD: self._jump_backward,
            Op.INTERVAL: self._interval,
            Op.DATE_MANIPULATION: self._date_manipulation,
            Op.DATE_FUNCTION: self._date_function,
            Op.SLICE: self._slice,
            Op.ARRAY: self._array,
            Op.LEN: self._len,
            Op.TYPE_CHECK: lambda kind: self._push(text.type_check(kind, self._pop())),
            Op.TYPE_CONVERSION: lambda kind: self._push(text.convert(kind, self._pop())),
            Op.JUMP_IF_END: self._jump_if_end,
            Op.INCREMENT_IT: self._increment_it,
            Op.INCREMENT_COUNT: self._increment_count,
            Op.GET_COUNT: lambda _: self._push(
                Decimal(self._scope("GetCount", "Empty scope").count)
            ),
            Op.GET_LEN: lambda _: self._push(
                Decimal(self._scope("GetLen", "Empty scope").length)
            ),
            Op.POINTER: self._pointer,
            Op.BEGIN: self._begin,
            Op.END: self._end,
        }

    def run(self, bytecode: Iterable[Instruction], env: Any = None) -> Any:
        """Execute the bytecode and return the value left on top of the stack."""
        self.stack.clear()
        self.scopes.clear()
        self._bytecode = tuple(bytecode)
        self._env = env
        self._ip = 0

        while self._ip < len(self._bytecode):
            instruction = self._bytecode[self._ip]
            self._ip += 1
            op = instruction.op
            unary = _UNARY.get(op)
            if unary is not None:
                self._push(unary(self._pop()))
                continue
            binary = _BINARY.get(op)
            if binary is not None:
                b = self._pop()
                a = self._pop()
                self._push(binary(a, b))
                continue
            self._handlers[op](instruction.argument)

        return self._pop()

    def _push(self, value: Any) -> None:
        self.stack.append(value)

    def _pop(self) -> Any:
        if not self.stack:
            raise StackOutOfBounds(repr(self.stack))
        return self.stack.pop()

    def _peek(self, opcode: str, message: str) -> Any:
        if not self.stack:
            raise OpcodeError(opcode, message)
        return self.stack[-1]

    def _scope(self, opcode: str, message: str) -> Scope:
        if not self.scopes:
            raise OpcodeError(opcode, message)
        return self.scopes[-1]

    def _listing(self) -> str:
        return ", ".join(str(instruction) for instruction in self._bytecode)

    def _rot(self, _: Any) -> None:
        if len(self.stack) < 2:
            raise StackOutOfBounds(repr(self.stack))
        self.stack[-1], self.stack[-2] = self.stack[-2], self.stack[-1]

    def _fetch_env(self, name: str) -> None:
        if isinstance(self._env, dict):
            self._push(self._env.get(name))
        elif self._env is None:
            self._push(None)
        else:
            raise OpcodeError("FetchEnv", "Unsupported type")

    def _jump(self, offset: int) -> None:
        self._ip += offset

    def _conditional_jump(self, opcode: str, empty_message: str, offset: int, when: bool) -> None:
        top = self._peek(opcode, empty_message)
        if not isinstance(top, bool):
            raise OpcodeError(opcode, "Unsupported type")
        if top is when:
            self._ip += offset

    def _jump_if_true(self, offset: int) -> None:
        self._conditional_jump("JumpIfTrue", "Undefined object key", offset, True)

    def _jump_if_false(self, offset: int) -> None:
        self._conditional_jump("JumpIfFalse", "Empty array", offset, False)

    def _jump_backward(self, offset: int) -> None:
        if offset > self._ip:
            raise OpcodeOutOfBounds(self._ip - offset, self._listing())
        self._ip -= offset

    def _interval(self, brackets: tuple[str, str]) -> None:
        right = self._pop()
        left = self._pop()
        left_bracket, right_bracket = brackets
        self._push(arithmetic.make_interval(left, right, left_bracket, right_bracket))

    def _date_manipulation(self, operation: str) -> None:
        self._push(temporal.date_part(operation, self._pop()))

    def _date_function(self, name: str) -> None:
        unit = self._pop()
        timestamp = self._pop()
        self._push(temporal.date_boundary(name, timestamp, unit))

    def _slice(self, _: Any) -> None:
        start = self._pop()
        end = self._pop()
        current = self._pop()
        self._push(sequences.slice_of(current, start, end))

    def _array(self, _: Any) -> None:
        size = self._pop()
        if not isinstance(size, Decimal):
            raise OpcodeError("Array", "Unsupported type")
        try:
            count: int | None = int(size.to_integral_value(rounding=ROUND_HALF_EVEN))
        except (ValueError, OverflowError, ArithmeticError):
            count = None
        if count is None or count < 0:
            raise OpcodeError("Array", "Failed to extract argument")
        items = [self._pop() for _ in range(count)]
        items.reverse()
        self._push(items)

    def _len(self, _: Any) -> None:
        current = self._peek("Len", "Empty stack")
        self._push(sequences.length(current))

    def _jump_if_end(self, offset: int) -> None:
        scope = self._scope("JumpIfEnd", "Empty stack")
        if scope.index >= scope.length:
            self._ip += offset

    def _increment_it(self, _: Any) -> None:
        self._scope("IncrementIt", "Empty scope").index += 1

    def _increment_count(self, _: Any) -> None:
        self._scope("IncrementCount", "Empty scope").count += 1

    def _pointer(self, _: Any) -> None:
        scope = self._scope("Pointer", "Empty scope")
        if scope.index >= scope.length:
            raise OpcodeError("Pointer", "Scope array out of bounds")
        self._push(scope.array[scope.index])

    def _begin(self, _: Any) -> None:
        value = self._pop()
        if not isinstance(value, list):
            raise OpcodeError("Begin", "Unsupported type")
        self.scopes.append(Scope(value))

    def _end(self, _: Any) -> None:
        if self.scopes:
            self.scopes.pop()