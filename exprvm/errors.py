"""Errors raised while evaluating bytecode on the virtual machine."""

from __future__ import annotations

__all__ = [
    "VMError",
    "OpcodeError",
    "OpcodeOutOfBounds",
    "StackOutOfBounds",
    "ParseDateTimeError",
    "NumberConversionError",
]


class VMError(Exception):
    """Base class of every error the virtual machine raises."""

    description = "Virtual machine error"

    def __str__(self) -> str:
        return self.description

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self.args == other.args  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.args))

    def __repr__(self) -> str:
        return f"{type(self).__name__}{self.args!r}"


class OpcodeError(VMError):
    """An opcode could not be applied to its operands."""

    description = "Unsupported opcode type"

    def __init__(self, opcode: str, message: str) -> None:
        super().__init__(opcode, message)
        self.opcode = opcode
        self.message = message

    def __repr__(self) -> str:
        return f"OpcodeError(opcode={self.opcode!r}, message={self.message!r})"


class OpcodeOutOfBounds(VMError):
    """The instruction pointer left the bytecode."""

    description = "Opcode out of bounds"

    def __init__(self, index: int, bytecode: str) -> None:
        super().__init__(index, bytecode)
        self.index = index
        self.bytecode = bytecode

    def __repr__(self) -> str:
        return f"OpcodeOutOfBounds(index={self.index!r}, bytecode={self.bytecode!r})"


class StackOutOfBounds(VMError):
    """A value was popped from an empty stack."""

    description = "Stack out of bounds"

    def __init__(self, stack: str) -> None:
        super().__init__(stack)
        self.stack = stack

    def __repr__(self) -> str:
        return f"StackOutOfBounds(stack={self.stack!r})"


class ParseDateTimeError(VMError):
    """A date or time could not be read from its text."""

    description = "Failed to parse date time"

    def __init__(self, timestamp: str) -> None:
        super().__init__(timestamp)
        self.timestamp = timestamp

    def __repr__(self) -> str:
        return f"ParseDateTimeError(timestamp={self.timestamp!r})"


class NumberConversionError(VMError):
    """A number has no JSON representation."""

    description = "Number conversion error"

    def __init__(self) -> None:
        super().__init__()