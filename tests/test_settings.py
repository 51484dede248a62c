from __future__ import annotations

import pytest
from pydantic import ValidationError

from krea_mcp.settings import Settings, get_settings


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("KREA_API_KEY", "from-env")
    monkeypatch.setenv("KREA_API_BASE_URL", "https://proxy.test/v1")
    monkeypatch.setenv("KREA_HTTP_TIMEOUT", "12.5")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings()

    assert settings.krea_api_key == "from-env"
    assert settings.krea_api_base_url == "https://proxy.test/v1"
    assert settings.krea_http_timeout == 12.5
    assert settings.log_level == "debug"
    assert settings.has_api_key


def test_settings_defaults(monkeypatch):
    for var in ["KREA_API_KEY", "KREA_API_BASE_URL", "KREA_HTTP_TIMEOUT", "LOG_LEVEL"]:
        monkeypatch.delenv(var, raising=False)

    settings = Settings()

    assert settings.krea_api_key is None
    assert not settings.has_api_key
    assert settings.krea_api_base_url == "https://api.krea.ai/v1"
    assert settings.krea_http_timeout == 60.0
    assert settings.log_level == "INFO"


def test_empty_api_key_counts_as_missing():
    assert not Settings(krea_api_key="").has_api_key


def test_timeout_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(krea_http_timeout=0)


def test_get_settings_is_cached(no_api_key):
    assert get_settings() is get_settings()
