import pickle

import pytest

from exprvm.errors import (
    NumberConversionError,
    OpcodeError,
    OpcodeOutOfBounds,
    ParseDateTimeError,
    StackOutOfBounds,
    VMError,
)


@pytest.mark.parametrize(
    "error, text",
    [
        (OpcodeError("Fetch", "Failed to convert to usize"), "Unsupported opcode type"),
        (OpcodeOutOfBounds(3, "[]"), "Opcode out of bounds"),
        (StackOutOfBounds("[]"), "Stack out of bounds"),
        (ParseDateTimeError("yesterday"), "Failed to parse date time"),
        (NumberConversionError(), "Number conversion error"),
    ],
)
def test_display_messages(error, text):
    assert str(error) == text
    assert isinstance(error, VMError)


def test_opcode_error_fields():
    error = OpcodeError("Fetch", "Failed to convert to usize")
    assert error.opcode == "Fetch"
    assert error.message == "Failed to convert to usize"


def test_out_of_bounds_fields():
    error = OpcodeOutOfBounds(7, "[Push]")
    assert error.index == 7
    assert error.bytecode == "[Push]"


def test_equality_by_fields():
    assert OpcodeError("Add", "Unsupported type") == OpcodeError("Add", "Unsupported type")
    assert not (OpcodeError("Add", "Unsupported type") == OpcodeError("Sum", "Unsupported type"))
    assert not (StackOutOfBounds("[]") == ParseDateTimeError("[]"))


def test_hash_matches_equality():
    first = ParseDateTimeError("now-ish")
    second = ParseDateTimeError("now-ish")
    assert hash(first) == hash(second)
    assert len({first, second}) == 1


def test_caught_as_base_class():
    error = StackOutOfBounds("[1, 2]")
    with pytest.raises(VMError) as info:
        raise error
    assert info.value == StackOutOfBounds("[1, 2]")
    assert info.value.stack == "[1, 2]"
    assert str(info.value) == "Stack out of bounds"


def test_repr_shows_fields():
    assert "Median" in repr(OpcodeError("Median", "Array is empty"))
    assert "Array is empty" in repr(OpcodeError("Median", "Array is empty"))


@pytest.mark.parametrize(
    "error",
    [
        OpcodeError("Slice", "Index out of range"),
        OpcodeOutOfBounds(1, "[]"),
        StackOutOfBounds("[]"),
        ParseDateTimeError("bad"),
        NumberConversionError(),
    ],
)
def test_pickle_round_trip(error):
    assert pickle.loads(pickle.dumps(error)) == error