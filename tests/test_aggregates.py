from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from exprvm.aggregates import average, maximum, median, minimum, mode, total
from exprvm.errors import OpcodeError


def nums(*values):
    return [Decimal(str(v)) for v in values]


decimals = st.integers(min_value=-10**6, max_value=10**6).map(Decimal)


def test_source_cases():
    assert total(nums(1, 2, 3)) == Decimal(6)
    assert average(nums(1, 2, 3)) == Decimal(2)
    assert minimum(nums(1, 2, 3)) == Decimal(1)
    assert maximum(nums(1, 2, 3)) == Decimal(3)
    assert median(nums(1, 2, 3)) == Decimal(2)
    assert median(nums(1, 2, 3, 4)) == Decimal("2.5")
    assert mode(nums(1, 1, 2, 2, 2, 5, 6, 9)) == Decimal(2)
    assert total(nums(100, 200)) == Decimal(300)


def test_total_of_empty_is_zero():
    assert total([]) == 0


@pytest.mark.parametrize(
    "func, opcode",
    [(average, "Average"), (median, "Median"), (mode, "Mode"),
     (minimum, "Min"), (maximum, "Max"), (total, "Sum")],
)
def test_non_array_rejected(func, opcode):
    with pytest.raises(OpcodeError) as info:
        func(Decimal(1))
    assert info.value == OpcodeError(opcode, "Unsupported type")


def test_empty_arrays():
    assert pytest.raises(OpcodeError, median, []).value.message == "Array is empty"
    assert pytest.raises(OpcodeError, mode, []).value.message == "Array is empty"
    assert pytest.raises(OpcodeError, minimum, []).value == OpcodeError("Min", "Empty array")
    assert pytest.raises(OpcodeError, maximum, []).value == OpcodeError("Max", "Empty array")
    assert pytest.raises(OpcodeError, average, []).value.opcode == "Average"


def test_non_number_items():
    assert pytest.raises(OpcodeError, average, [Decimal(1), "x"]).value == OpcodeError(
        "Average", "Invalid array value"
    )
    assert pytest.raises(OpcodeError, total, [None]).value == OpcodeError(
        "Sum", "Unsupported array value"
    )
    assert pytest.raises(OpcodeError, minimum, ["a"]).value == OpcodeError(
        "Min", "Unsupported array value"
    )
    assert pytest.raises(OpcodeError, maximum, [Decimal(1), True]).value == OpcodeError(
        "Max", "Unsupported array value"
    )
    assert pytest.raises(OpcodeError, median, [Decimal(1), "a"]).value == OpcodeError(
        "Median", "Unsupported type"
    )


@given(st.lists(decimals, min_size=1))
def test_extremes_bound_every_item(values):
    low, high = minimum(values), maximum(values)
    assert low in values and high in values
    assert all(low <= v <= high for v in values)


@given(st.lists(decimals, min_size=1))
def test_median_and_average_between_extremes(values):
    low, high = minimum(values), maximum(values)
    assert low <= median(values) <= high
    assert low <= average(values) <= high


@given(st.lists(decimals, min_size=1))
def test_mode_is_most_frequent(values):
    result = mode(values)
    assert result in values
    assert all(values.count(result) >= values.count(v) for v in values)


@given(decimals, st.integers(min_value=1, max_value=20))
def test_constant_array(value, count):
    values = [value] * count
    assert average(values) == value
    assert median(values) == value
    assert total(values) == value * count