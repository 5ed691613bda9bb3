"""
Field descriptors: declarative metadata and resolved type tags.

**Conceptual**: Before a record's fields are bound, each dataclass field is
described once:

  - its EnvTag, the declarative metadata attached with env_field()
    (key override, default literal, separator, nested-record prefix);
  - its TypeSpec, a type tag resolved from the annotation that tells the
    binder which handler converts the text (and, for containers, how the
    elements, keys and values are converted).

Descriptors are rebuilt on every traversal and never cached, so a record
class can be redefined or monkeypatched between calls in tests.

**Declaring metadata**:
    @dataclass
    class Database:
        host: str = env_field("DB_HOST", env_default="localhost", default="")
        port: int = env_field(env_default="5432", default=0)
        replicas: list[str] = env_field(env_separator=";", default_factory=list)
        admin: User = env_field(env_prefix="ADMIN", default_factory=User)
"""

import collections.abc
import dataclasses
import types
import typing
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Any, List, Optional

import numpy as np
import pandas as pd

from envbind.binding.capabilities import is_setter, is_text_unmarshaler
from envbind.binding.errors import InvalidTargetError


ENV_METADATA_KEY = "envbind"
DEFAULT_SEPARATOR = ","


@dataclass(frozen=True)
class EnvTag:
    """
    Declarative binding metadata for one dataclass field.

    Attributes:
        env: Lookup key override (upper-cased when used). Defaults to the
             field name.
        env_default: Literal used verbatim when the key is absent. An empty
                     string counts as no default.
        env_separator: Separator for sequence and map values (default ",").
        env_prefix: Key prefix for the fields of a nested record (used as
                    given, not upper-cased).
    """
    env: Optional[str] = None
    env_default: Optional[str] = None
    env_separator: Optional[str] = None
    env_prefix: Optional[str] = None


_EMPTY_TAG = EnvTag()


def env_field(
    env: Optional[str] = None,
    *,
    env_default: Optional[str] = None,
    env_separator: Optional[str] = None,
    env_prefix: Optional[str] = None,
    **kwargs: Any,
) -> Any:
    """
    Declare a dataclass field with binding metadata.

    Wraps dataclasses.field(); every other keyword (default, default_factory,
    repr, compare, metadata, ...) is passed through unchanged. The EnvTag is
    stored in the field's metadata under ENV_METADATA_KEY.

    env_default and default are unrelated: env_default is the text bound
    when the key is absent, default is the Python value the constructor uses.
    Records passed to read_env() need a default for every field (so that
    `Config()` works); records only built by load_env() do not.

    Args:
        env: Lookup key override.
        env_default: Default literal for an absent key.
        env_separator: Separator for sequence/map values.
        env_prefix: Prefix for the fields of a nested record.
        **kwargs: Forwarded to dataclasses.field().

    Returns:
        A dataclasses.Field to assign in the class body.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[ENV_METADATA_KEY] = EnvTag(
        env=env,
        env_default=env_default,
        env_separator=env_separator,
        env_prefix=env_prefix,
    )
    return dataclasses.field(metadata=metadata, **kwargs)


class TypeKind(Enum):
    """Closed set of conversion kinds; the binder has one handler per kind."""
    STRING = "string"
    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    DURATION = "duration"
    BYTES = "bytes"
    SEQUENCE = "sequence"
    MAP = "map"
    RECORD = "record"
    TEXT_UNMARSHALER = "text_unmarshaler"
    SETTER = "setter"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class TypeSpec:
    """
    Resolved type tag for a field or container element.

    Attributes:
        py_type: The annotated type (Optional[...] already unwrapped).
        kind: Conversion kind selecting the binder handler.
        dtype: numpy dtype bounding INT/UINT/FLOAT values.
        container: list or tuple, for SEQUENCE (and BYTES given as a
                   sequence of np.uint8).
        elem: Element spec, for SEQUENCE.
        key: Key spec, for MAP.
        value: Value spec, for MAP.
    """
    py_type: Any
    kind: TypeKind
    dtype: Any = None
    container: Optional[type] = None
    elem: Optional["TypeSpec"] = None
    key: Optional["TypeSpec"] = None
    value: Optional["TypeSpec"] = None


@dataclass(frozen=True)
class FieldSpec:
    """
    Descriptor of one bindable dataclass field.

    `default` is the class-level default shared by every instance that did
    not receive its own value (dataclasses.MISSING when there is none).
    """
    name: str
    type_spec: TypeSpec
    tag: EnvTag
    default: Any = dataclasses.MISSING

    @property
    def is_record(self) -> bool:
        """True when the field holds a nested dataclass (walked, not bound)."""
        py_type = self.type_spec.py_type
        return isinstance(py_type, type) and dataclasses.is_dataclass(py_type)


# exact matches, checked before the subclass fallbacks below
_SCALAR_KINDS = {
    str: (TypeKind.STRING, None),
    bool: (TypeKind.BOOL, None),
    int: (TypeKind.INT, np.int64),
    np.int8: (TypeKind.INT, np.int8),
    np.int16: (TypeKind.INT, np.int16),
    np.int32: (TypeKind.INT, np.int32),
    np.int64: (TypeKind.INT, np.int64),
    np.uint8: (TypeKind.UINT, np.uint8),
    np.uint16: (TypeKind.UINT, np.uint16),
    np.uint32: (TypeKind.UINT, np.uint32),
    np.uint64: (TypeKind.UINT, np.uint64),
    float: (TypeKind.FLOAT, np.float64),
    np.float32: (TypeKind.FLOAT, np.float32),
    np.float64: (TypeKind.FLOAT, np.float64),
    timedelta: (TypeKind.DURATION, None),
    pd.Timedelta: (TypeKind.DURATION, None),
    bytes: (TypeKind.BYTES, None),
    bytearray: (TypeKind.BYTES, None),
}

_SUBCLASS_KINDS = (
    (int, TypeKind.INT, np.int64),
    (float, TypeKind.FLOAT, np.float64),
    (str, TypeKind.STRING, None),
    (bytes, TypeKind.BYTES, None),
)


def _unwrap_optional(tp: Any) -> Any:
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(tp) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def _sequence_spec(tp: Any, container: type, elem_type: Any) -> TypeSpec:
    elem = resolve_type_spec(elem_type)
    if elem.py_type is np.uint8:
        # a sequence of single bytes binds the raw text, unsplit
        return TypeSpec(tp, TypeKind.BYTES, dtype=np.uint8, container=container, elem=elem)
    return TypeSpec(tp, TypeKind.SEQUENCE, container=container, elem=elem)


def resolve_type_spec(tp: Any) -> TypeSpec:
    """
    Resolve an annotation into a TypeSpec.

    Resolution order:
      1. Optional[T] / T | None unwraps to T.
      2. list[T], tuple[T, ...] → SEQUENCE, except that list[np.uint8] and
         tuple[np.uint8, ...] are byte sequences → BYTES; dict[K, V] → MAP
         (children resolved recursively).
      3. Classes implementing unmarshal_text → TEXT_UNMARSHALER, then
         set_value → SETTER.
      4. Dataclasses → RECORD.
      5. Exact scalar types (str, bool, int, numpy widths, float,
         timedelta, pandas.Timedelta, bytes, bytearray).
      6. Subclasses of int, float, str, bytes (e.g. IntEnum).
      7. Everything else → UNSUPPORTED (reported when the field is bound).
    """
    tp = _unwrap_optional(tp)
    origin = typing.get_origin(tp)
    args = typing.get_args(tp)

    if origin in (list, collections.abc.Sequence) and len(args) == 1:
        return _sequence_spec(tp, list, args[0])
    if origin is tuple and len(args) == 2 and args[1] is Ellipsis:
        return _sequence_spec(tp, tuple, args[0])
    if origin in (dict, collections.abc.Mapping) and len(args) == 2:
        return TypeSpec(
            tp,
            TypeKind.MAP,
            key=resolve_type_spec(args[0]),
            value=resolve_type_spec(args[1]),
        )

    if origin is not None or not isinstance(tp, type):
        return TypeSpec(tp, TypeKind.UNSUPPORTED)

    if is_text_unmarshaler(tp):
        return TypeSpec(tp, TypeKind.TEXT_UNMARSHALER)
    if is_setter(tp):
        return TypeSpec(tp, TypeKind.SETTER)
    if dataclasses.is_dataclass(tp):
        return TypeSpec(tp, TypeKind.RECORD)

    if tp in _SCALAR_KINDS:
        kind, dtype = _SCALAR_KINDS[tp]
        return TypeSpec(tp, kind, dtype=dtype)

    for base, kind, dtype in _SUBCLASS_KINDS:
        if issubclass(tp, base):
            return TypeSpec(tp, kind, dtype=dtype)

    return TypeSpec(tp, TypeKind.UNSUPPORTED)


def describe_fields(record_type: type) -> List[FieldSpec]:
    """
    Describe the bindable fields of a dataclass, in declaration order.

    Fields declared with init=False are skipped: they are not part of the
    record's constructor and are left to the class to compute.

    Args:
        record_type: A dataclass type.

    Returns:
        List of FieldSpec, one per init field.

    Raises:
        InvalidTargetError: An annotation names a type that cannot be
                            resolved from the module (e.g. a class defined
                            inside a function, referenced as a string).
    """
    try:
        hints = typing.get_type_hints(record_type)
    except NameError as exc:
        raise InvalidTargetError(
            f"cannot resolve type annotations of {record_type.__qualname__}: {exc}"
        ) from exc

    specs = []
    for field in dataclasses.fields(record_type):
        if not field.init:
            continue
        tag = field.metadata.get(ENV_METADATA_KEY, _EMPTY_TAG)
        specs.append(FieldSpec(
            name=field.name,
            type_spec=resolve_type_spec(hints.get(field.name, field.type)),
            tag=tag,
            default=field.default,
        ))
    return specs


def type_name(tp: Any) -> str:
    """Qualified name of a type for error messages (e.g. "builtins.complex")."""
    if isinstance(tp, type):
        return f"{tp.__module__}.{tp.__qualname__}"
    return repr(tp)
