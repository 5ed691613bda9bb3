"""
`.env` file loader.

**Conceptual**: A `.env` file holds one `KEY=VALUE` assignment per line.
read_dotenv() parses it with python-dotenv's stream parser and writes every
assignment into the process environment (or a mapping the caller passes),
where read_env() will find it. The binder itself never touches files.

**Format** (as parsed by python-dotenv):
  - blank lines and lines starting with `#` are ignored;
  - whitespace around keys and values is trimmed;
  - one layer of matching single or double quotes is removed from values
    (double-quoted values also get escape sequences such as `\\n` decoded);
  - an optional leading `export ` is accepted.

Unlike python-dotenv's own load_dotenv(), which logs and skips lines it
cannot parse, read_dotenv() treats any malformed line, including a key with
no `=`, as an error. Lines before the malformed one have already been
applied when the error is raised.

**Usage example**:
    >>> read_dotenv(".env")
    {'HOST': '127.0.0.1', 'PORT': '5433'}
    >>> cfg = read_env(Config())
"""

import logging
import os
from pathlib import Path
from typing import Dict, MutableMapping, Optional, Union

from dotenv.parser import Binding, parse_stream

from envbind.binding.errors import EnvConfigError


logger = logging.getLogger(__name__)


class DotEnvError(EnvConfigError):
    """
    Raised when a `.env` file cannot be read, parsed or applied.

    **Recovery**: The message names the file, or the line number and its
    content; fix the file and retry.
    """
    pass


def _line_number(binding: Binding) -> int:
    # python-dotenv folds preceding blank lines into the binding's text
    text = binding.original.string
    leading = text[: len(text) - len(text.lstrip())]
    return binding.original.line + leading.count("\n")


def read_dotenv(
    path: Union[str, Path],
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Load `KEY=VALUE` assignments from a file into the environment.

    Args:
        path: Path to the `.env` file.
        environ: Mapping to write into. Defaults to os.environ. Existing
                 keys are overwritten.

    Returns:
        Dict of the assignments applied, in file order.

    Raises:
        DotEnvError: The file cannot be opened or decoded, a line is
                     malformed (no `=`, invalid key), or a value cannot be
                     stored in the environment (e.g. it contains a NUL).
    """
    target = os.environ if environ is None else environ
    path = Path(path)

    try:
        with path.open("r", encoding="utf-8") as f:
            bindings = list(parse_stream(f))
    except (OSError, UnicodeDecodeError) as exc:
        raise DotEnvError(f"cannot open file {path}: {exc}") from exc

    applied: Dict[str, str] = {}
    for binding in bindings:
        content = binding.original.string.strip()
        if binding.error:
            raise DotEnvError(
                f"{path}: invalid format at line {_line_number(binding)}: {content}"
            )
        if binding.key is None:
            # blank line or comment
            continue
        if binding.value is None:
            raise DotEnvError(
                f"{path}: invalid format at line {_line_number(binding)}: "
                f"{content} (expected KEY=VALUE)"
            )

        try:
            target[binding.key] = binding.value
        except (ValueError, TypeError, OSError) as exc:
            raise DotEnvError(f"cannot set variable {binding.key}: {exc}") from exc
        applied[binding.key] = binding.value

    logger.info("Loaded %d variables from %s", len(applied), path)
    return applied
