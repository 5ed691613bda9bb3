"""
Literal parsers for booleans, integers and floats.

**Conceptual**: Environment values are always text. These helpers turn that
text into numbers with strict, predictable rules:

  - Booleans accept a small canonical vocabulary, case-insensitively.
  - Integers detect their base from the prefix (`0x` hex, `0o` or a leading
    `0` octal, `0b` binary, otherwise decimal), allow `_` between digits,
    and are range-checked against a numpy integer dtype.
  - Floats are decimal literals, range-checked against a numpy float dtype.

Surrounding whitespace is never stripped: `" 42"` is malformed, not 42.

**Widths**: Widths are expressed as numpy dtypes (np.int8 ... np.uint64,
np.float32, np.float64) and their limits come from np.iinfo / np.finfo, so the
same dtype that annotates a field also defines the range it accepts.
"""

import math
import re

import numpy as np

from envbind.binding.errors import ConversionError, OutOfRangeError


_TRUE_LITERALS = frozenset({"1", "t", "true"})
_FALSE_LITERALS = frozenset({"0", "f", "false"})

_INT_LITERAL = re.compile(
    r"[+-]?(?:0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+|[0-9][0-9_]*)"
)
# "0755" style octal, which Python's int(..., 0) rejects
_LEGACY_OCTAL = re.compile(r"0[0-7_]+")

_FLOAT_SPECIALS = frozenset({
    "inf", "+inf", "-inf",
    "infinity", "+infinity", "-infinity",
    "nan", "+nan", "-nan",
})


def parse_bool(text: str) -> bool:
    """
    Parse a boolean literal.

    Accepted (any letter case): "1", "t", "true" and "0", "f", "false".

    Raises:
        ConversionError: For any other literal, including the empty string.
    """
    lowered = text.lower()
    if lowered in _TRUE_LITERALS:
        return True
    if lowered in _FALSE_LITERALS:
        return False
    raise ConversionError(f"invalid boolean literal: {text!r}")


def _parse_integer_literal(text: str, signed: bool) -> int:
    if not text.isascii() or _INT_LITERAL.fullmatch(text) is None:
        raise ConversionError(f"invalid integer literal: {text!r}")

    negative = False
    body = text
    if text[0] in "+-":
        if not signed:
            raise ConversionError(f"invalid unsigned integer literal: {text!r}")
        negative = text[0] == "-"
        body = text[1:]

    try:
        if _LEGACY_OCTAL.fullmatch(body):
            number = int(body, 8)
        else:
            number = int(body, 0)
    except ValueError as exc:
        # misplaced underscores ("1__0", "1_") end up here
        raise ConversionError(f"invalid integer literal: {text!r}") from exc

    return -number if negative else number


def _check_integer_range(number: int, text: str, dtype) -> int:
    info = np.iinfo(dtype)
    if not int(info.min) <= number <= int(info.max):
        raise OutOfRangeError(
            f"value out of range: {text!r} does not fit {info.dtype} "
            f"[{info.min}, {info.max}]"
        )
    return number


def parse_int(text: str, dtype=np.int64) -> int:
    """
    Parse a signed integer literal with base detection.

    Args:
        text: Literal such as "42", "-0x2a", "0o52", "052", "0b101010", "1_000".
        dtype: numpy signed integer dtype bounding the result (default int64).

    Returns:
        The value as a Python int (callers convert to numpy scalars if needed).

    Raises:
        ConversionError: Malformed literal.
        OutOfRangeError: Literal outside [iinfo(dtype).min, iinfo(dtype).max].

    Examples:
        >>> parse_int("0x10")
        16
        >>> parse_int("010")
        8
        >>> parse_int("200", np.int8)
        Traceback (most recent call last):
        ...
        envbind.binding.errors.OutOfRangeError: value out of range: ...
    """
    number = _parse_integer_literal(text, signed=True)
    return _check_integer_range(number, text, dtype)


def parse_uint(text: str, dtype=np.uint64) -> int:
    """
    Parse an unsigned integer literal with base detection.

    Same grammar as parse_int() but no sign is accepted, not even "+".

    Raises:
        ConversionError: Malformed literal (including any sign).
        OutOfRangeError: Literal above iinfo(dtype).max.
    """
    number = _parse_integer_literal(text, signed=False)
    return _check_integer_range(number, text, dtype)


def parse_float(text: str, dtype=np.float64) -> float:
    """
    Parse a decimal floating point literal.

    "inf", "infinity" and "nan" (any case, optional sign) are accepted as
    their special values. Any other literal whose magnitude exceeds the
    largest finite value of dtype is rejected, e.g. "1e39" for float32.

    Args:
        text: Literal such as "3.14", "-2e-3", "1_000.5".
        dtype: numpy float dtype defining the precision (default float64).

    Raises:
        ConversionError: Malformed literal.
        OutOfRangeError: Finite literal too large for dtype.
    """
    if not text or text != text.strip() or not text.isascii():
        raise ConversionError(f"invalid float literal: {text!r}")

    try:
        number = float(text)
    except ValueError as exc:
        raise ConversionError(f"invalid float literal: {text!r}") from exc

    if text.lower() in _FLOAT_SPECIALS:
        return number

    limit = float(np.finfo(dtype).max)
    if math.isinf(number) or abs(number) > limit:
        raise OutOfRangeError(
            f"value out of range: {text!r} does not fit {np.dtype(dtype)}"
        )
    return number
