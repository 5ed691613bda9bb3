#!/usr/bin/env python3
"""
Load a `.env` file and print the record bound from it.

**Purpose**: A minimal end-to-end run of envbind: read_dotenv() populates the
process environment, read_env() binds a small dataclass from it, and the
result is printed.

**Usage**:
    From project root:
    ```bash
    python actions/show_dotenv_config.py
    python actions/show_dotenv_config.py --env-file path/to/other.env
    ```

Example output:
    $ python actions/show_dotenv_config.py
    Loading actions/sample.env...
    ✓ Loaded 2 variables
    Person(name='Mario', surname='Rossi')

**Exit codes**:
  - 0: Success
  - 1: The file could not be loaded or a field could not be bound
"""

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path

# Add project root to Python path so we can import envbind
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from envbind.binding.errors import EnvConfigError
from envbind.binding.fields import env_field
from envbind.binding.walker import read_env
from envbind.dotenv.loader import read_dotenv


DEFAULT_ENV_FILE = Path(__file__).parent / "sample.env"


@dataclass
class Person:
    name: str = env_field("NAME", default="")
    surname: str = env_field("SURNAME", default="")


def parse_args(argv=None):
    """
    Parse command line arguments.

    Returns:
        Namespace with attribute env_file (str).
    """
    parser = argparse.ArgumentParser(
        description="Load a .env file and print the Person record bound from it",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=str(DEFAULT_ENV_FILE),
        help=f"Path to the .env file (default: {DEFAULT_ENV_FILE.name} next to this script)",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """
    Main entry point for the script.

    Loads the file, binds a Person and prints it. Errors from either step
    are reported on stderr with exit code 1.
    """
    args = parse_args(argv)

    print(f"Loading {args.env_file}...")
    try:
        applied = read_dotenv(args.env_file)
        print(f"✓ Loaded {len(applied)} variables")
        person = read_env(Person())
    except EnvConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(person)
    return 0


if __name__ == "__main__":
    sys.exit(main())
