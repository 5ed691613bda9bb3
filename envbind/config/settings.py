"""
Settings base class for dataclasses that construct themselves from the environment.

**Conceptual**: Application settings are usually a frozen dataclass with a
`from_env()` factory that reads a handful of variables, converts them and
validates the result in `__post_init__`. EnvSettings provides that factory
once, driven by the field annotations and env_field() metadata, instead of
hand-written os.getenv() and int() calls per class.

**Usage pattern**:
  ```python
  from dataclasses import dataclass
  from envbind.binding.fields import env_field
  from envbind.config.settings import EnvSettings

  @dataclass(frozen=True)
  class ApiSettings(EnvSettings):
      api_key: str = env_field("API_KEY")
      base_url: str = env_field("API_BASE_URL", env_default="https://api.example.com")
      timeout_seconds: int = env_field("API_TIMEOUT_SECONDS", env_default="30")

      def __post_init__(self):
          if not self.api_key:
              raise ValueError("API_KEY is required but not set.")

  settings = ApiSettings.from_env()
  ```

Tests inject a MappingSource instead of mutating os.environ:
  ```python
  settings = ApiSettings.from_env(MappingSource({"API_KEY": "test_key"}))
  ```
"""

from typing import Optional, Type, TypeVar

from envbind.binding.walker import load_env
from envbind.utils.environment import LookupSource


S = TypeVar("S", bound="EnvSettings")


class EnvSettings:
    """
    Mixin giving a dataclass a `from_env()` classmethod.

    The subclass must be a dataclass; EnvSettings itself has no fields.
    """

    @classmethod
    def from_env(cls: Type[S], source: Optional[LookupSource] = None) -> S:
        """
        Load settings from environment variables.

        Args:
            source: Lookup source (default: the process environment).

        Returns:
            A new, fully bound instance of the settings class.

        Raises:
            FieldBindingError: A variable could not be converted.
            ValueError: Raised by the class's own __post_init__ validation.
        """
        return load_env(cls, source)
