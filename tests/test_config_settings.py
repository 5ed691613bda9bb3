"""
Tests for envbind/config/settings.py
"""

from dataclasses import dataclass
from datetime import timedelta

import pytest

from envbind.binding.errors import FieldBindingError
from envbind.binding.fields import env_field
from envbind.config.settings import EnvSettings
from envbind.utils.environment import MappingSource


@dataclass(frozen=True)
class ApiSettings(EnvSettings):
    api_key: str = env_field("API_KEY")
    base_url: str = env_field("API_BASE_URL", env_default="https://api.example.com")
    timeout: timedelta = env_field("API_TIMEOUT", env_default="30s")

    def __post_init__(self):
        if not self.api_key:
            raise ValueError("API_KEY is required but not set.")


def test_from_env_builds_frozen_settings():
    settings = ApiSettings.from_env(MappingSource({"API_KEY": "test_key"}))

    assert isinstance(settings, ApiSettings)
    assert settings.api_key == "test_key"
    assert settings.base_url == "https://api.example.com"
    assert settings.timeout == timedelta(seconds=30)


def test_from_env_overrides_defaults():
    settings = ApiSettings.from_env(MappingSource({
        "API_KEY": "k",
        "API_BASE_URL": "http://localhost:8000",
        "API_TIMEOUT": "1m30s",
    }))

    assert settings.base_url == "http://localhost:8000"
    assert settings.timeout == timedelta(seconds=90)


def test_from_env_runs_validation():
    with pytest.raises(ValueError, match="API_KEY is required"):
        ApiSettings.from_env(MappingSource({}))


def test_from_env_reports_conversion_errors():
    with pytest.raises(FieldBindingError) as exc_info:
        ApiSettings.from_env(MappingSource({"API_KEY": "k", "API_TIMEOUT": "30"}))

    assert exc_info.value.key == "API_TIMEOUT"


def test_from_env_uses_process_environment(monkeypatch):
    monkeypatch.setenv("API_KEY", "from-process")
    monkeypatch.delenv("API_BASE_URL", raising=False)
    monkeypatch.delenv("API_TIMEOUT", raising=False)

    settings = ApiSettings.from_env()

    assert settings.api_key == "from-process"
    assert settings.base_url == "https://api.example.com"
