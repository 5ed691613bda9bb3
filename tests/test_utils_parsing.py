"""
Tests for envbind/utils/parsing.py

Covers the boolean vocabulary, integer base detection and width checks, and
float precision checks.
"""

import math

import numpy as np
import pytest

from envbind.binding.errors import ConversionError, OutOfRangeError
from envbind.utils.parsing import parse_bool, parse_float, parse_int, parse_uint


# ============================================================================
# Booleans
# ============================================================================

@pytest.mark.parametrize("text", ["1", "t", "T", "true", "TRUE", "True", "tRuE"])
def test_parse_bool_true_literals(text):
    assert parse_bool(text) is True


@pytest.mark.parametrize("text", ["0", "f", "F", "false", "FALSE", "False"])
def test_parse_bool_false_literals(text):
    assert parse_bool(text) is False


@pytest.mark.parametrize("text", ["", "yes", "no", "on", " true", "2", "truee"])
def test_parse_bool_rejects_other_literals(text):
    with pytest.raises(ConversionError, match="invalid boolean literal"):
        parse_bool(text)


# ============================================================================
# Signed integers
# ============================================================================

@pytest.mark.parametrize("text, expected", [
    ("42", 42),
    ("-42", -42),
    ("+7", 7),
    ("0", 0),
    ("00", 0),
    ("0x1F", 31),
    ("0X1f", 31),
    ("-0x10", -16),
    ("0o17", 15),
    ("017", 15),
    ("0b101", 5),
    ("1_000", 1000),
])
def test_parse_int_detects_base(text, expected):
    assert parse_int(text) == expected


@pytest.mark.parametrize("text", ["", "abc", "1.5", " 1", "1 ", "09", "1__0", "_1", "0x", "--1", "１"])
def test_parse_int_rejects_malformed(text):
    with pytest.raises(ConversionError) as exc_info:
        parse_int(text)

    # malformed is not the same failure as out of range
    assert not isinstance(exc_info.value, OutOfRangeError)


def test_parse_int_errors_are_value_errors():
    """Callers catching ValueError keep working."""
    with pytest.raises(ValueError):
        parse_int("nope")


def test_parse_int_int8_bounds():
    assert parse_int("127", np.int8) == 127
    assert parse_int("-128", np.int8) == -128

    with pytest.raises(OutOfRangeError, match="int8"):
        parse_int("128", np.int8)
    with pytest.raises(OutOfRangeError):
        parse_int("-129", np.int8)


def test_parse_int_int32_bounds_apply_to_hex():
    assert parse_int("0x7fffffff", np.int32) == 2**31 - 1

    with pytest.raises(OutOfRangeError):
        parse_int("0x80000000", np.int32)


def test_parse_int_defaults_to_int64():
    assert parse_int("9223372036854775807") == 2**63 - 1

    with pytest.raises(OutOfRangeError):
        parse_int("9223372036854775808")


# ============================================================================
# Unsigned integers
# ============================================================================

def test_parse_uint_accepts_full_unsigned_range():
    assert parse_uint("255", np.uint8) == 255
    assert parse_uint("0xff", np.uint8) == 255
    assert parse_uint("18446744073709551615") == 2**64 - 1


def test_parse_uint_rejects_overflow():
    with pytest.raises(OutOfRangeError, match="uint8"):
        parse_uint("256", np.uint8)


@pytest.mark.parametrize("text", ["-1", "+1", "-0"])
def test_parse_uint_rejects_any_sign(text):
    with pytest.raises(ConversionError) as exc_info:
        parse_uint(text)

    assert not isinstance(exc_info.value, OutOfRangeError)


# ============================================================================
# Floats
# ============================================================================

@pytest.mark.parametrize("text, expected", [
    ("3.14", 3.14),
    ("-2e-3", -0.002),
    ("10", 10.0),
    (".5", 0.5),
    ("1e308", 1e308),
])
def test_parse_float_decimal_literals(text, expected):
    assert parse_float(text) == pytest.approx(expected)


def test_parse_float_special_values():
    assert parse_float("inf") == math.inf
    assert parse_float("-Infinity") == -math.inf
    assert math.isnan(parse_float("NaN"))


def test_parse_float_float64_overflow():
    with pytest.raises(OutOfRangeError, match="float64"):
        parse_float("1e309")


def test_parse_float_float32_precision():
    assert parse_float("3.4e38", np.float32) == pytest.approx(3.4e38)

    with pytest.raises(OutOfRangeError, match="float32"):
        parse_float("1e39", np.float32)

    # the same literal is fine at double precision
    assert parse_float("1e39") == pytest.approx(1e39)


@pytest.mark.parametrize("text", ["", "abc", " 1.0", "1.0 ", "1,5", "0x1p3"])
def test_parse_float_rejects_malformed(text):
    with pytest.raises(ConversionError) as exc_info:
        parse_float(text)

    assert not isinstance(exc_info.value, OutOfRangeError)
