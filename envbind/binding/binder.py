"""
Type-directed conversion of environment text into field values.

**Conceptual**: The binder receives a field's TypeSpec, the resolved text
(from the lookup source or the field's default literal) and, when binding in
place, the field's current value. It returns the converted value; the walker
assigns it.

**Dispatch order** (first match wins):
  1. The current value implements unmarshal_text → it decodes itself.
  2. The current value implements set_value → it sets itself.
  3. Otherwise the handler registered for spec.kind in _KIND_HANDLERS.
     TEXT_UNMARSHALER and SETTER kinds construct a fresh instance of the
     declared type and apply the capability to it.

Sequences and maps split their text and bind every piece through
parse_value() again, so element, key and value types get the same dispatch
(including custom capabilities) as top-level fields.

Failures raise EnvConfigError subclasses (or whatever a custom capability
raises); the walker wraps them with the failing lookup key.
"""

from typing import Any, Callable, Dict

import numpy as np
import pandas as pd

from envbind.binding.capabilities import is_setter, is_text_unmarshaler
from envbind.binding.errors import (
    ConversionError,
    InvalidMapItemError,
    UnsupportedTypeError,
)
from envbind.binding.fields import DEFAULT_SEPARATOR, TypeKind, TypeSpec, type_name
from envbind.utils.durations import parse_pandas_timedelta, parse_timedelta
from envbind.utils.parsing import parse_bool, parse_float, parse_int, parse_uint


# values of these types are returned as parsed, everything else is built
# from the parsed value (numpy scalars, IntEnum, str subclasses, bytearray)
_PLAIN_TYPES = (str, bool, int, float, bytes)


def _finish(spec: TypeSpec, value: Any, text: str) -> Any:
    if spec.py_type in _PLAIN_TYPES:
        return value
    try:
        return spec.py_type(value)
    except (TypeError, ValueError) as exc:
        raise ConversionError(
            f"invalid {type_name(spec.py_type)} value: {text!r}"
        ) from exc


def _unmarshal_into(target: Any, text: str) -> Any:
    target.unmarshal_text(text.encode("utf-8"))
    return target


def _set_into(target: Any, text: str) -> Any:
    target.set_value(text)
    return target


def _parse_text_unmarshaler(spec: TypeSpec, text: str, separator: str) -> Any:
    return _unmarshal_into(spec.py_type(), text)


def _parse_setter(spec: TypeSpec, text: str, separator: str) -> Any:
    return _set_into(spec.py_type(), text)


def _parse_string(spec: TypeSpec, text: str, separator: str) -> Any:
    return _finish(spec, text, text)


def _parse_bool(spec: TypeSpec, text: str, separator: str) -> Any:
    return parse_bool(text)


def _parse_signed(spec: TypeSpec, text: str, separator: str) -> Any:
    return _finish(spec, parse_int(text, spec.dtype), text)


def _parse_unsigned(spec: TypeSpec, text: str, separator: str) -> Any:
    return _finish(spec, parse_uint(text, spec.dtype), text)


def _parse_float(spec: TypeSpec, text: str, separator: str) -> Any:
    return _finish(spec, parse_float(text, spec.dtype), text)


def _parse_duration(spec: TypeSpec, text: str, separator: str) -> Any:
    if spec.py_type is pd.Timedelta:
        return parse_pandas_timedelta(text)
    return parse_timedelta(text)


def _parse_bytes(spec: TypeSpec, text: str, separator: str) -> Any:
    # raw bytes of the literal, never split on the separator
    raw = text.encode("utf-8")
    if spec.container is not None:
        return spec.container(np.uint8(b) for b in raw)
    return _finish(spec, raw, text)


def _parse_sequence(spec: TypeSpec, text: str, separator: str) -> Any:
    """
    Bind a separated list of values, preserving order.

    Blank (empty or whitespace-only) text gives an empty sequence. Pieces
    are not trimmed: "a, b" yields "a" and " b".
    """
    items = []
    if text.strip():
        for piece in text.split(separator):
            items.append(parse_value(spec.elem, piece, separator))
    return spec.container(items)


def _parse_map(spec: TypeSpec, text: str, separator: str) -> Any:
    """
    Bind a separated list of key:value pairs.

    Each pair is split on its first ":" only, so values may contain colons
    ("url:http://host" → {"url": "http://host"}). Later duplicates overwrite
    earlier ones.

    Raises:
        InvalidMapItemError: A pair without ":".
    """
    result = {}
    if not text.strip():
        return result
    for pair in text.split(separator):
        key_text, colon, value_text = pair.partition(":")
        if not colon:
            raise InvalidMapItemError(f"invalid map item: {pair!r}")
        key = parse_value(spec.key, key_text, separator)
        result[key] = parse_value(spec.value, value_text, separator)
    return result


def _parse_unsupported(spec: TypeSpec, text: str, separator: str) -> Any:
    raise UnsupportedTypeError(f"unsupported type {type_name(spec.py_type)}")


_KIND_HANDLERS: Dict[TypeKind, Callable[[TypeSpec, str, str], Any]] = {
    TypeKind.TEXT_UNMARSHALER: _parse_text_unmarshaler,
    TypeKind.SETTER: _parse_setter,
    TypeKind.STRING: _parse_string,
    TypeKind.BOOL: _parse_bool,
    TypeKind.INT: _parse_signed,
    TypeKind.UINT: _parse_unsigned,
    TypeKind.FLOAT: _parse_float,
    TypeKind.DURATION: _parse_duration,
    TypeKind.BYTES: _parse_bytes,
    TypeKind.SEQUENCE: _parse_sequence,
    TypeKind.MAP: _parse_map,
    # records are walked, never bound from a single value
    TypeKind.RECORD: _parse_unsupported,
    TypeKind.UNSUPPORTED: _parse_unsupported,
}


def parse_value(
    spec: TypeSpec,
    text: str,
    separator: str = DEFAULT_SEPARATOR,
    current: Any = None,
) -> Any:
    """
    Convert text into a value of the type described by spec.

    Args:
        spec: Resolved type tag of the field or element.
        text: Raw text from the lookup source or the default literal.
        separator: Separator for sequence and map values.
        current: The field's present value when binding in place. If it
                 implements a custom capability it is decoded in place and
                 returned.

    Returns:
        The converted value.

    Raises:
        ConversionError: Malformed literal (OutOfRangeError and
                         InvalidMapItemError are subclasses).
        UnsupportedTypeError: No handler for the type.
        Exception: Whatever a custom unmarshal_text / set_value raises.

    Examples:
        >>> parse_value(resolve_type_spec(list[int]), "1,2,3")
        [1, 2, 3]
        >>> parse_value(resolve_type_spec(dict[str, int]), "a:1;b:2", ";")
        {'a': 1, 'b': 2}
    """
    if current is not None:
        if is_text_unmarshaler(current):
            return _unmarshal_into(current, text)
        if is_setter(current):
            return _set_into(current, text)
    return _KIND_HANDLERS[spec.kind](spec, text, separator)
