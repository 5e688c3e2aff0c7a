from datetime import datetime
from decimal import Decimal

import pytest
from hypothesis import given, strategies as st

from exprvm.errors import OpcodeError, ParseDateTimeError
from exprvm.temporal import (
    date_boundary,
    date_part,
    duration_seconds,
    parse_date_time_value,
    parse_duration,
    parse_time_value,
)


@pytest.mark.parametrize(
    "operation, value, expected",
    [
        ("dayOfWeek", "2022-11-08", Decimal(2)),
        ("dayOfMonth", "2022-11-09", Decimal(9)),
        ("dayOfYear", "2022-11-10", Decimal(314)),
        ("weekOfYear", "2022-11-12", Decimal(45)),
        ("monthString", "2022-11-14", "Nov"),
        ("monthOfYear", "2022-11-14", Decimal(11)),
        ("weekdayString", "2022-11-14", "Mon"),
        ("year", "2022-01-01", Decimal(2022)),
    ],
)
def test_date_parts_from_source(operation, value, expected):
    assert date_part(operation, value) == expected


def test_date_part_accepts_timestamps():
    stamp = parse_date_time_value("2022-11-14")
    assert date_part("monthString", stamp) == "Nov"
    assert date_part("year", stamp) == Decimal(2022)


def test_date_string():
    assert date_part("dateString", "2022-11-14") == "2022-11-14 00:00:00"


def test_date_part_unknown_operation():
    with pytest.raises(OpcodeError) as info:
        date_part("century", "2022-11-14")
    assert info.value.message == "Unsupported operation"


def test_date_part_rejects_booleans():
    with pytest.raises(OpcodeError) as info:
        date_part("year", True)
    assert info.value.message == "Unsupported type"


def test_date_comparisons_from_source():
    assert parse_date_time_value("2022-04-04T21:48:30Z") > parse_date_time_value("2022-03-04 21:48:20")
    assert parse_date_time_value("2022-04-04T21:48:30Z") > parse_date_time_value("2022-04-04T21:48:40+01:00")
    assert parse_date_time_value("2022-04-04 23:59:59") < parse_date_time_value("2022-04-05")
    assert not parse_date_time_value("2022-04-05 00:00:01") < parse_date_time_value("2022-04-05")


def test_epoch_is_zero():
    assert parse_date_time_value("1970-01-01") == Decimal(0)


def test_date_time_numbers_truncate():
    assert parse_date_time_value(Decimal("12.9")) == Decimal(12)


def test_date_time_invalid_text():
    with pytest.raises(ParseDateTimeError):
        parse_date_time_value("not a date")


def test_time_comparisons_from_source():
    assert parse_time_value("2022-04-04T21:48:30Z") > parse_time_value("2022-05-04 21:48:20")
    assert parse_time_value("21:48:30") > parse_time_value("2022-05-04T21:48:30+01:00")
    assert parse_time_value("21:48:19") < parse_time_value("21:48:20")
    assert parse_time_value("21:49") > parse_time_value("21:48:20")


def test_time_rejects_negative_numbers():
    with pytest.raises(OpcodeError) as info:
        parse_time_value(Decimal(-5))
    assert info.value.opcode == "ParseTime"


def test_duration_equalities_from_source():
    assert duration_seconds("60m") == duration_seconds("1h")
    assert duration_seconds("24h") >= duration_seconds("1d")


def test_duration_combined_components():
    assert parse_duration("1h 30m") == parse_duration("90min")


@pytest.mark.parametrize("text", ["", "10", "5 parsecs", "h"])
def test_duration_invalid(text):
    with pytest.raises(ParseDateTimeError):
        parse_duration(text)


def test_duration_numbers_pass_through():
    assert duration_seconds(Decimal(42)) == Decimal(42)
    with pytest.raises(OpcodeError):
        duration_seconds(None)


@given(st.integers(min_value=0, max_value=10**6))
def test_seconds_unit_round_trip(seconds):
    assert parse_duration(f"{seconds}s") == seconds


def test_day_boundaries():
    moment = "2022-11-14 13:45:10"
    assert date_boundary("startOf", moment, "day") == parse_date_time_value("2022-11-14")
    assert date_boundary("endOf", moment, "d") == parse_date_time_value("2022-11-14 23:59:59")


def test_week_and_year_boundaries():
    moment = "2022-11-16 08:00:00"
    assert date_boundary("startOf", moment, "week") == parse_date_time_value("2022-11-14")
    assert date_boundary("startOf", moment, "y") == parse_date_time_value("2022-01-01")


@given(st.datetimes(min_value=datetime(1971, 1, 1), max_value=datetime(2200, 1, 1)))
def test_boundaries_enclose_moment(moment):
    text = moment.strftime("%Y-%m-%d %H:%M:%S")
    stamp = parse_date_time_value(text)
    for unit in ("minute", "hour", "day", "week", "month"):
        assert date_boundary("startOf", text, unit) <= stamp <= date_boundary("endOf", text, unit)


def test_boundary_unknown_unit():
    with pytest.raises(OpcodeError) as info:
        date_boundary("startOf", "2022-11-14", "fortnight")
    assert info.value.message == "Unknown date unit"


def test_boundary_unit_must_be_string():
    with pytest.raises(OpcodeError) as info:
        date_boundary("startOf", "2022-11-14", Decimal(1))
    assert info.value.message == "Unknown date function"


def test_boundary_unknown_name():
    with pytest.raises(OpcodeError) as info:
        date_boundary("middleOf", "2022-11-14", "day")
    assert info.value.message == "Unsupported operation"