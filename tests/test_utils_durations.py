"""
Tests for envbind/utils/durations.py
"""

from datetime import timedelta

import pandas as pd
import pytest

from envbind.binding.errors import ConversionError
from envbind.utils.durations import (
    nanos_to_timedelta,
    parse_duration_nanos,
    parse_pandas_timedelta,
    parse_timedelta,
)


SECOND = 1_000_000_000


@pytest.mark.parametrize("text, expected", [
    ("0", 0),
    ("-0", 0),
    ("+0", 0),
    ("5s", 5 * SECOND),
    ("300ms", 300_000_000),
    ("2us", 2_000),
    ("1µs", 1_000),
    ("1μs", 1_000),
    ("10ns", 10),
    ("1h30m", 5400 * SECOND),
    ("1h0m0s", 3600 * SECOND),
    ("1.5h", 5400 * SECOND),
    ("1m30.5s", 90 * SECOND + 500_000_000),
    (".5s", 500_000_000),
    ("5.s", 5 * SECOND),
    ("-1.5s", -1_500_000_000),
    ("+2m", 120 * SECOND),
])
def test_parse_duration_nanos_valid(text, expected):
    assert parse_duration_nanos(text) == expected


def test_parse_duration_requires_unit():
    """A bare number other than 0 is not a duration."""
    with pytest.raises(ConversionError, match="missing unit"):
        parse_duration_nanos("5")


@pytest.mark.parametrize("text", ["", "+", "-", "s", ".s", "1.5.5s"])
def test_parse_duration_rejects_malformed(text):
    with pytest.raises(ConversionError):
        parse_duration_nanos(text)


@pytest.mark.parametrize("text", ["5x", "1d", "3sec"])
def test_parse_duration_rejects_unknown_units(text):
    with pytest.raises(ConversionError, match="unknown unit"):
        parse_duration_nanos(text)


def test_parse_duration_rejects_overflow():
    # about 2562047h fits in a signed 64-bit nanosecond count
    assert parse_duration_nanos("2562047h") == 2562047 * 3600 * SECOND

    with pytest.raises(ConversionError, match="out of range"):
        parse_duration_nanos("3000000h")
    with pytest.raises(ConversionError, match="out of range"):
        parse_duration_nanos("-3000000h")


def test_parse_duration_int64_bounds():
    """Negative literals reach one nanosecond further than positive ones."""
    assert parse_duration_nanos("2562047h47m16.854775807s") == 2**63 - 1
    assert parse_duration_nanos("-2562047h47m16.854775808s") == -(2**63)

    with pytest.raises(ConversionError, match="out of range"):
        parse_duration_nanos("2562047h47m16.854775808s")
    with pytest.raises(ConversionError, match="out of range"):
        parse_duration_nanos("-2562047h47m16.854775809s")


def test_nanos_to_timedelta_truncates_toward_zero():
    assert nanos_to_timedelta(1_500) == timedelta(microseconds=1)
    assert nanos_to_timedelta(-1_500) == timedelta(microseconds=-1)
    assert nanos_to_timedelta(999) == timedelta(0)


def test_parse_timedelta():
    assert parse_timedelta("5s") == timedelta(seconds=5)
    assert parse_timedelta("1h30m") == timedelta(hours=1, minutes=30)
    assert parse_timedelta("-250ms") == timedelta(milliseconds=-250)


def test_parse_pandas_timedelta_keeps_nanoseconds():
    value = parse_pandas_timedelta("1500ns")

    assert isinstance(value, pd.Timedelta)
    assert value.value == 1500
    assert parse_pandas_timedelta("2h") == pd.Timedelta(hours=2)


def test_parse_pandas_timedelta_rejects_nat_value():
    """-2**63 ns is a valid duration but pandas uses it for NaT."""
    assert parse_timedelta("-2562047h47m16.854775808s") == timedelta(microseconds=-(2**63 // 1000))

    with pytest.raises(ConversionError, match="pandas"):
        parse_pandas_timedelta("-2562047h47m16.854775808s")
