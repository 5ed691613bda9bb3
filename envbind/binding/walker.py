"""
Schema walker: recursive binding of dataclass records from a lookup source.

**Conceptual**: A configuration record is a dataclass whose fields are either
leaves (bound from one environment variable each) or nested dataclasses
(walked recursively). Walking a nested record does not consume a key; it
extends the key prefix with the field's env_prefix:

    @dataclass
    class User:
        name: str = ""
        age: int = 0

    @dataclass
    class Config:
        host: str = env_field("HOST", env_default="localhost", default="")
        user: User = env_field(default_factory=User)                     # NAME, AGE
        admin: User = env_field(env_prefix="ADMIN", default_factory=User)  # ADMIN_NAME, ADMIN_AGE

Key derivation for a leaf:
    key = join(ancestor prefixes..., upper(env override or field name))

with "_" between non-empty segments. Prefixes are used exactly as declared.

Value resolution for a leaf: the source value if the key is present (even if
empty), otherwise the non-empty env_default literal, otherwise "". The empty
string converts only for text-like types, so a required number without a
default fails loudly instead of silently keeping the dataclass default.

**Error policy**: The first failing leaf aborts the walk with a
FieldBindingError naming its key. Fields bound before the failure keep their
new values; there is no rollback and no error aggregation.

**Entry points**:
  - read_env(cfg): bind an existing (mutable) dataclass instance in place.
  - load_env(Config): build a new instance, which also works for frozen
    dataclasses and for dataclasses without field defaults.
"""

import copy
import dataclasses
import logging
from typing import Any, Dict, Optional, Type, TypeVar

from envbind.binding.binder import parse_value
from envbind.binding.errors import FieldBindingError, InvalidTargetError
from envbind.binding.fields import DEFAULT_SEPARATOR, FieldSpec, describe_fields
from envbind.utils.environment import LookupSource, get_process_environment


logger = logging.getLogger(__name__)

T = TypeVar("T")


def join_prefix(parent: str, current: str) -> str:
    """
    Join two key segments with "_", skipping empty segments.

    Examples:
        >>> join_prefix("", "HOST")
        'HOST'
        >>> join_prefix("ADMIN", "")
        'ADMIN'
        >>> join_prefix("ADMIN", "NAME")
        'ADMIN_NAME'
    """
    if not parent:
        return current
    if not current:
        return parent
    return f"{parent}_{current}"


def lookup_env_name(spec: FieldSpec) -> str:
    """Upper-cased lookup name of a leaf field (env override or field name)."""
    return (spec.tag.env or spec.name).upper()


def lookup_env_prefix(spec: FieldSpec) -> str:
    """Prefix contributed by a nested-record field (empty when undeclared)."""
    return spec.tag.env_prefix or ""


def lookup_env_separator(spec: FieldSpec) -> str:
    """Separator for sequence/map values (default ",")."""
    return spec.tag.env_separator or DEFAULT_SEPARATOR


def _is_frozen(record_type: type) -> bool:
    return record_type.__dataclass_params__.frozen


def _bind_leaf(spec: FieldSpec, key: str, source: LookupSource, current: Any) -> Any:
    text = source.lookup(key)
    origin = "environment"
    if text is None:
        if spec.tag.env_default:
            text = spec.tag.env_default
            origin = "env-default"
        else:
            text = ""
            origin = "empty value"

    try:
        value = parse_value(spec.type_spec, text, lookup_env_separator(spec), current)
    except Exception as exc:
        raise FieldBindingError(key, exc) from exc

    logger.debug("Bound %s (%s) from %s", key, spec.type_spec.kind.value, origin)
    return value


def _read_record(
    record_type: type,
    prefix: str,
    source: LookupSource,
    instance: Optional[Any],
) -> Any:
    """
    Bind every field of record_type under prefix.

    With an instance, fields are assigned in place in declaration order and
    the instance is returned. Without one, converted values are collected and
    a new record_type instance is constructed from them.

    A field still holding its class-level default (one object shared by all
    instances) is bound into a copy, so other instances are unaffected.
    """
    values: Dict[str, Any] = {}

    for spec in describe_fields(record_type):
        current = getattr(instance, spec.name, None) if instance is not None else None
        if current is not None and current is spec.default:
            # the class-level default is shared by every instance; bind a copy
            current = copy.copy(current)

        if spec.is_record:
            # nested records are walked even if they implement a custom
            # capability; capabilities only apply to leaf types
            nested_type = spec.type_spec.py_type
            child_prefix = join_prefix(prefix, lookup_env_prefix(spec))
            if isinstance(current, nested_type) and not _is_frozen(type(current)):
                value = _read_record(nested_type, child_prefix, source, current)
            else:
                value = _read_record(nested_type, child_prefix, source, None)
        else:
            key = join_prefix(prefix, lookup_env_name(spec))
            value = _bind_leaf(spec, key, source, current)

        if instance is not None:
            setattr(instance, spec.name, value)
        else:
            values[spec.name] = value

    if instance is not None:
        return instance
    return record_type(**values)


def read_env(cfg: T, source: Optional[LookupSource] = None) -> T:
    """
    Bind environment values into an existing dataclass instance, in place.

    **Conceptual**: This is the main entry point. Every leaf field reachable
    through nested dataclasses is resolved and converted; nested records are
    filled in place when they already hold a mutable instance and built fresh
    when they hold None or a frozen instance.

    Args:
        cfg: A dataclass instance (not the class). Must not be frozen; use
             load_env() for frozen dataclasses.
        source: Where to look keys up. Defaults to the process environment.

    Returns:
        cfg itself, for chaining.

    Raises:
        InvalidTargetError: cfg is not a mutable dataclass instance. Nothing
                            is read or mutated.
        FieldBindingError: A field could not be converted. Fields bound
                           before it keep their new values.

    Usage example:
        >>> cfg = read_env(Config(), MappingSource({"HOST": "127.0.0.1"}))
        >>> cfg.host
        '127.0.0.1'
    """
    if isinstance(cfg, type) or not dataclasses.is_dataclass(cfg):
        raise InvalidTargetError(
            f"wrong type {type(cfg).__name__}: expected a dataclass instance"
        )
    if _is_frozen(type(cfg)):
        raise InvalidTargetError(
            f"cannot bind into frozen dataclass {type(cfg).__name__}; use load_env()"
        )

    if source is None:
        source = get_process_environment()

    logger.debug("Binding %s from %r", type(cfg).__name__, source)
    return _read_record(type(cfg), "", source, cfg)


def load_env(record_type: Type[T], source: Optional[LookupSource] = None) -> T:
    """
    Build a new dataclass instance from environment values.

    Walks the same keys as read_env() but passes every converted value to
    the constructor, so frozen dataclasses and fields without defaults work.
    __post_init__ validation runs as usual and its exceptions propagate.

    Args:
        record_type: A dataclass type (not an instance).
        source: Where to look keys up. Defaults to the process environment.

    Returns:
        A new record_type instance.

    Raises:
        InvalidTargetError: record_type is not a dataclass type.
        FieldBindingError: A field could not be converted.
    """
    if not (isinstance(record_type, type) and dataclasses.is_dataclass(record_type)):
        raise InvalidTargetError(
            f"wrong type {record_type!r}: expected a dataclass type"
        )

    if source is None:
        source = get_process_environment()

    logger.debug("Loading %s from %r", record_type.__name__, source)
    return _read_record(record_type, "", source, None)
