"""
Tests for UpaymentsSettings environment loading.
"""

import pytest
from pydantic import ValidationError

from upayments.config.settings import UpaymentsSettings, get_settings, reset_settings


def test_defaults():
    settings = UpaymentsSettings()

    assert settings.UPAYMENTS_API_KEY == ""
    assert settings.UPAYMENTS_API_URL == "https://sandboxapi.upayments.com"
    assert settings.UPAYMENTS_PROFILE == "v1"
    assert settings.UPAYMENTS_LOGGING_CHANNEL == "upayments"
    assert settings.UPAYMENTS_LOGGING_ENABLED is True
    assert settings.UPAYMENTS_TIMEOUT == 30.0
    assert settings.UPAYMENTS_MAX_RETRIES == 3


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("UPAYMENTS_API_KEY", "secret")
    monkeypatch.setenv("UPAYMENTS_API_URL", "https://api.upayments.test/")
    monkeypatch.setenv("UPAYMENTS_LOGGING_ENABLED", "false")
    monkeypatch.setenv("UPAYMENTS_MAX_RETRIES", "1")

    settings = UpaymentsSettings()

    assert settings.UPAYMENTS_API_KEY == "secret"
    assert settings.UPAYMENTS_API_URL == "https://api.upayments.test"
    assert settings.UPAYMENTS_LOGGING_ENABLED is False
    assert settings.UPAYMENTS_MAX_RETRIES == 1


def test_dotenv_file_is_read(tmp_path):
    (tmp_path / ".env").write_text("UPAYMENTS_PROFILE=legacy\n")
    assert UpaymentsSettings().UPAYMENTS_PROFILE == "legacy"


@pytest.mark.parametrize(
    "name, value",
    [
        ("UPAYMENTS_TIMEOUT", "0"),
        ("UPAYMENTS_MAX_RETRIES", "-1"),
        ("UPAYMENTS_MAX_RETRIES", "11"),
        ("UPAYMENTS_RETRY_WAIT", "-0.5"),
    ],
)
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        UpaymentsSettings()


def test_get_settings_is_cached(monkeypatch):
    first = get_settings()
    monkeypatch.setenv("UPAYMENTS_API_KEY", "changed")
    assert get_settings() is first

    reset_settings()
    assert get_settings().UPAYMENTS_API_KEY == "changed"
