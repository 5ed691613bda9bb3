"""
Lookup-source abstractions for deterministic binding and testing.

This module provides a simple, testable way to read environment variables via
a source object rather than touching os.environ directly. The walker asks a
LookupSource for each key; production code passes the process environment,
tests pass a fixed mapping.

The key insight: depending on a LookupSource abstraction instead of the
process environment makes binding reproducible. A test can describe the exact
environment it needs without mutating global state that other tests share.
"""

import os
from typing import Mapping, Optional, Protocol


class LookupSource(Protocol):
    """
    Abstract key/value source protocol.

    **Conceptual**: A LookupSource is any object that can answer "what is the
    text value of this key, if any?". Keys are compared exactly as stored
    (case-sensitive); envbind always derives upper-case keys.

    **Usage**: The walker accepts a LookupSource (defaulting to the process
    environment) and calls source.lookup(key) once per leaf field.

    **Example**:
        # In production:
        read_env(cfg)                                   # ProcessEnvironment

        # In tests:
        read_env(cfg, MappingSource({"PORT": "5433"}))
    """

    def lookup(self, key: str) -> Optional[str]:
        """
        Return the value stored under key, or None when the key is absent.

        An empty string is a present value and is returned as such.
        """
        ...


class ProcessEnvironment:
    """
    Source that reads the live process environment (os.environ).

    **Conceptual**: The default source. Values are read at lookup time, so
    variables set by read_dotenv() or by the caller just before binding are
    visible.
    """

    def lookup(self, key: str) -> Optional[str]:
        return os.environ.get(key)

    def __repr__(self) -> str:
        return "ProcessEnvironment()"


class MappingSource:
    """
    Source backed by a fixed mapping (for tests or embedding).

    **Usage**:
        source = MappingSource({"HOST": "127.0.0.1", "PORT": "5433"})
        source.lookup("HOST")   # "127.0.0.1"
        source.lookup("USER")   # None
    """

    def __init__(self, values: Mapping[str, str]):
        """
        Initialize a MappingSource.

        Args:
            values: Mapping of key to text value. The mapping is copied, so
                    later mutations of the argument are not observed.
        """
        self._values = dict(values)

    def lookup(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def __repr__(self) -> str:
        return f"MappingSource({len(self._values)} keys)"


def get_process_environment() -> LookupSource:
    """
    Factory function returning the default, process-backed source.

    Returns:
        ProcessEnvironment instance.
    """
    return ProcessEnvironment()


def get_mapping_source(values: Mapping[str, str]) -> LookupSource:
    """
    Factory function returning a source over a fixed mapping.

    Args:
        values: Mapping of key to text value.

    Returns:
        MappingSource instance.
    """
    return MappingSource(values)
