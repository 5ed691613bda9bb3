"""
Duration literal parsing.

**Conceptual**: A duration literal is an optionally signed sequence of
decimal numbers, each with an optional fraction and a mandatory unit suffix:

    "300ms", "-1.5h", "2h45m", "1m30.5s", "250us"

Valid units are "ns", "us" (or "µs"/"μs"), "ms", "s", "m", "h". The bare
literal "0" is the only value allowed without a unit; "5" is an error.

Durations are computed as an exact integer count of nanoseconds and bounded
to a signed 64-bit range, then converted to the caller's type:
datetime.timedelta (microsecond resolution, truncated toward zero) or
pandas.Timedelta (nanosecond resolution, exact).
"""

import re
from datetime import timedelta

import pandas as pd

from envbind.binding.errors import ConversionError


_NANOS_PER_UNIT = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT = re.compile(r"([0-9]*)(?:\.([0-9]*))?([^0-9.]*)")

_MAX_NANOS = 2**63 - 1


def parse_duration_nanos(text: str) -> int:
    """
    Parse a duration literal into a signed number of nanoseconds.

    Args:
        text: Duration literal (see module docstring for the grammar).

    Returns:
        Integer nanoseconds, within the int64 range [-2**63, 2**63 - 1].

    Raises:
        ConversionError: Empty literal, a component without digits, a missing
                         or unknown unit, or a value outside the int64 range.

    Examples:
        >>> parse_duration_nanos("1h30m")
        5400000000000
        >>> parse_duration_nanos("-1.5s")
        -1500000000
    """
    rest = text
    negative = False
    if rest[:1] in ("+", "-"):
        negative = rest[0] == "-"
        rest = rest[1:]

    if rest == "0":
        return 0
    if not rest:
        raise ConversionError(f"invalid duration {text!r}")

    limit = _MAX_NANOS + 1 if negative else _MAX_NANOS
    total = 0
    pos = 0
    while pos < len(rest):
        match = _COMPONENT.match(rest, pos)
        whole, fraction, unit = match.group(1), match.group(2), match.group(3)
        if not whole and not fraction:
            raise ConversionError(f"invalid duration {text!r}")
        if not unit:
            raise ConversionError(f"missing unit in duration {text!r}")
        scale = _NANOS_PER_UNIT.get(unit)
        if scale is None:
            raise ConversionError(f"unknown unit {unit!r} in duration {text!r}")

        nanos = int(whole or "0") * scale
        if fraction:
            nanos += int(fraction) * scale // 10 ** len(fraction)

        total += nanos
        if total > limit:
            raise ConversionError(f"invalid duration {text!r}: out of range")
        pos = match.end()

    return -total if negative else total


def nanos_to_timedelta(nanos: int) -> timedelta:
    """Convert nanoseconds to a timedelta, truncating toward zero."""
    micros = abs(nanos) // 1_000
    return timedelta(microseconds=-micros if nanos < 0 else micros)


def parse_timedelta(text: str) -> timedelta:
    """Parse a duration literal into a datetime.timedelta."""
    return nanos_to_timedelta(parse_duration_nanos(text))


def parse_pandas_timedelta(text: str) -> pd.Timedelta:
    """
    Parse a duration literal into a pandas.Timedelta (nanosecond exact).

    pandas reserves -2**63 ns for NaT, so that one value is rejected.
    """
    nanos = parse_duration_nanos(text)
    if nanos < -_MAX_NANOS:
        raise ConversionError(f"invalid duration {text!r}: out of range for pandas.Timedelta")
    return pd.Timedelta(nanos, unit="ns")
