"""
Exception hierarchy for environment binding.

**Conceptual**: Binding fails in three ways: the caller passed something that
is not a record, a single field could not be converted, or the `.env` loader
could not populate the environment. Every exception raised by envbind derives
from EnvConfigError so callers can catch the whole family at once, while the
subclasses keep the failure kinds apart for tests and diagnostics.

Conversion errors also derive from the matching builtin (ValueError,
TypeError), so code that already catches those keeps working.
"""


class EnvConfigError(Exception):
    """
    Base exception for all envbind errors.

    **Usage**: Catch this at application startup to report a configuration
    problem and exit, or let it propagate with its message.
    """
    pass


class InvalidTargetError(EnvConfigError, TypeError):
    """
    Raised when the binding target is not a (mutable) dataclass instance.

    No traversal is attempted; nothing has been mutated.
    """
    pass


class ConversionError(EnvConfigError, ValueError):
    """Raised when a text value is not a valid literal for the field's type."""
    pass


class OutOfRangeError(ConversionError):
    """Raised when a numeric literal does not fit the declared width."""
    pass


class InvalidMapItemError(ConversionError):
    """Raised when a map item has no `:` between its key and value."""
    pass


class UnsupportedTypeError(EnvConfigError, TypeError):
    """Raised when a field's type has no conversion handler."""
    pass


class FieldBindingError(EnvConfigError):
    """
    Raised when binding a single field fails.

    **Conceptual**: Wraps the underlying conversion failure with the lookup
    key that produced it, so the caller sees exactly which environment
    variable to fix. The original exception is kept as `cause` (and chained
    as `__cause__` by the walker).

    Attributes:
        key: Fully prefixed lookup key of the failing field (e.g. "ADMIN_AGE").
        cause: The exception raised while converting the field's value.
    """

    def __init__(self, key: str, cause: BaseException):
        self.key = key
        self.cause = cause
        super().__init__(
            f"cannot convert value or missing env-default for field: {key}: {cause}"
        )
