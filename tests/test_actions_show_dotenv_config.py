"""
Tests for actions/show_dotenv_config.py

**Purpose**: Run the script's main() against the bundled sample file and
against temporary files, checking its output and exit codes.
"""

import pytest

from actions.show_dotenv_config import DEFAULT_ENV_FILE, main, parse_args


@pytest.fixture(autouse=True)
def restore_person_env(monkeypatch):
    """main() writes NAME and SURNAME into os.environ; restore them afterwards."""
    monkeypatch.setenv("NAME", "")
    monkeypatch.setenv("SURNAME", "")


def test_parse_args_defaults_to_sample_file():
    assert parse_args([]).env_file == str(DEFAULT_ENV_FILE)


def test_main_with_sample_file(capsys):
    assert main([]) == 0

    out = capsys.readouterr().out
    assert "✓ Loaded 2 variables" in out
    assert "Person(name='Mario', surname='Rossi')" in out


def test_main_with_custom_file(tmp_path, capsys):
    path = tmp_path / "people.env"
    path.write_text("NAME=Ada\nSURNAME=Lovelace\n", encoding="utf-8")

    assert main(["--env-file", str(path)]) == 0

    assert "Person(name='Ada', surname='Lovelace')" in capsys.readouterr().out


def test_main_missing_file(tmp_path, capsys):
    assert main(["--env-file", str(tmp_path / "missing.env")]) == 1

    assert "cannot open file" in capsys.readouterr().err


def test_main_malformed_file(tmp_path, capsys):
    path = tmp_path / "bad.env"
    path.write_text("NAME=Ada\nSURNAME\n", encoding="utf-8")

    assert main(["--env-file", str(path)]) == 1

    assert "line 2" in capsys.readouterr().err
