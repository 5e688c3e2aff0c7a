from datetime import datetime
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from exprvm.dates import parse_date_time
from exprvm.errors import NumberConversionError, OpcodeError, ParseDateTimeError
from exprvm.variable import Interval, from_json, to_datetime, to_json, type_name

json_values = st.recursive(
    st.none()
    | st.booleans()
    | st.integers(min_value=-(2**63), max_value=2**63 - 1)
    | st.floats(allow_nan=False, allow_infinity=False)
    | st.text(),
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(), children, max_size=4),
    max_leaves=20,
)


@given(json_values)
def test_json_round_trip(value):
    assert to_json(from_json(value)) == value


def test_nested_environment_converts_numbers():
    env = {"customer": {"groups": ["admin", "user"], "purchaseAmounts": [100, 200, 400, 800]}}
    converted = from_json(env)
    assert converted["customer"]["groups"] == ["admin", "user"]
    assert converted["customer"]["purchaseAmounts"][3] == Decimal(800)
    assert to_json(converted) == env


def test_from_json_keeps_bool_distinct_from_number():
    assert from_json(True) is True
    assert type_name(from_json(1)) == "number"


def test_largest_i64_stays_integer():
    result = to_json(Decimal("9223372036854775807"))
    assert result == 9223372036854775807
    assert isinstance(result, int)


def test_fraction_becomes_float():
    assert to_json(Decimal("103000.48")) == 103_000.48
    assert to_json(Decimal("2.50")) == 2.5


def test_trailing_zeros_give_integer():
    result = to_json(Decimal("10.0"))
    assert result == 10
    assert isinstance(result, int)


@pytest.mark.parametrize("number", [Decimal("NaN"), Decimal("Infinity")])
def test_non_finite_number_fails(number):
    with pytest.raises(NumberConversionError):
        to_json(number)


def test_non_finite_float_input_fails():
    with pytest.raises(NumberConversionError):
        from_json(float("nan"))


@pytest.mark.parametrize(
    "value, name",
    [
        (None, "null"),
        (False, "bool"),
        (Decimal(1), "number"),
        ("x", "string"),
        ([], "array"),
        ({}, "object"),
    ],
)
def test_type_name(value, name):
    assert type_name(value) == name


def test_to_datetime_from_string():
    assert to_datetime("2022-01-01") == parse_date_time("2022-01-01")


def test_to_datetime_from_zero_is_epoch():
    assert to_datetime(Decimal(0)) == datetime(1970, 1, 1)


@given(st.integers(min_value=-(10**10), max_value=10**10))
def test_to_datetime_timestamp_round_trip(seconds):
    moment = to_datetime(Decimal(seconds))
    assert int((moment - to_datetime(Decimal(0))).total_seconds()) == seconds


def test_to_datetime_truncates_fraction():
    assert to_datetime(Decimal("59.9")) == to_datetime(Decimal(59))


def test_to_datetime_rejects_unsupported_type():
    with pytest.raises(OpcodeError) as info:
        to_datetime(True)
    assert info.value.opcode == "DateManipulation"
    assert info.value.message == "Unsupported type"


def test_to_datetime_rejects_number_beyond_i64():
    with pytest.raises(OpcodeError) as info:
        to_datetime(Decimal(10**30))
    assert info.value.message == "Failed to extract date"


def test_to_datetime_out_of_calendar_range():
    with pytest.raises(ParseDateTimeError) as info:
        to_datetime(Decimal(10**15))
    assert info.value.timestamp == str(Decimal(10**15))


def test_interval_object_round_trip():
    interval = Interval("[", ")", Decimal(1), Decimal(5))
    obj = interval.to_object()
    assert obj["_symbol"] == "Interval"
    assert Interval.from_object(obj) == interval


@pytest.mark.parametrize(
    "obj",
    [
        None,
        [],
        {"_symbol": "Range", "left_bracket": "[", "right_bracket": "]", "left": 1, "right": 2},
        {"_symbol": "Interval", "left_bracket": "[", "right_bracket": "]", "left": 1},
        {"_symbol": "Interval", "left_bracket": 1, "right_bracket": "]", "left": 1, "right": 2},
    ],
)
def test_interval_from_object_rejects(obj):
    assert Interval.from_object(obj) is None