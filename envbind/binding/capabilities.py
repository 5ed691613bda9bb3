"""
Custom decoding capabilities a field type may implement.

**Conceptual**: Most field types are converted by the built-in handlers
(booleans, integers, durations, ...). A type can take over its own conversion
by implementing one of two methods:

  1. `unmarshal_text(self, data: bytes) -> None`  (TextUnmarshaler)
  2. `set_value(self, value: str) -> None`        (Setter)

They are checked in that order, before any built-in kind handling. Both
methods mutate the receiver and signal failure by raising.

These are structural protocols: a class does not inherit from them, it only
has to define the method.

**Example**:
    class LogLevel:
        def __init__(self):
            self.level = logging.INFO

        def set_value(self, value: str) -> None:
            self.level = logging.getLevelName(value.upper())
            if not isinstance(self.level, int):
                raise ValueError(f"unknown log level {value!r}")

Dataclass-typed fields are walked as nested records even when they implement
a capability; only leaf types reach these checks.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TextUnmarshaler(Protocol):
    """Type that decodes itself from raw text bytes."""

    def unmarshal_text(self, data: bytes) -> None:
        ...


@runtime_checkable
class Setter(Protocol):
    """Type that sets itself from a text value."""

    def set_value(self, value: str) -> None:
        ...


def is_text_unmarshaler(obj: Any) -> bool:
    """Return True if obj (an instance or a class) implements unmarshal_text."""
    if isinstance(obj, type):
        return issubclass(obj, TextUnmarshaler)
    return isinstance(obj, TextUnmarshaler)


def is_setter(obj: Any) -> bool:
    """Return True if obj (an instance or a class) implements set_value."""
    if isinstance(obj, type):
        return issubclass(obj, Setter)
    return isinstance(obj, Setter)
