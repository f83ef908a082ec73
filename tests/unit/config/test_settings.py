"""Unit tests for environment-based settings."""

import pytest
from pydantic import ValidationError

from pipecheck.config import Settings, get_settings


@pytest.mark.unit
def test_defaults():
    settings = Settings()

    assert settings.LOG_LEVEL == "INFO"
    assert settings.default_lang is None
    assert settings.abort_early is False
    assert settings.abort_pipe_early is False
    assert settings.messages_file is None
    assert settings.log_to_file is False


@pytest.mark.unit
def test_prefixed_environment_variables(monkeypatch):
    monkeypatch.setenv("PIPECHECK_DEFAULT_LANG", "de")
    monkeypatch.setenv("PIPECHECK_ABORT_PIPE_EARLY", "1")
    monkeypatch.setenv("PIPECHECK_MESSAGES_FILE", "config/messages.yaml")

    settings = Settings()

    assert settings.default_lang == "de"
    assert settings.abort_pipe_early is True
    assert settings.messages_file == "config/messages.yaml"


@pytest.mark.unit
def test_log_level_is_normalized(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    assert Settings().LOG_LEVEL == "DEBUG"


@pytest.mark.unit
def test_invalid_log_level_rejected(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "LOUD")
    with pytest.raises(ValidationError, match="LOG_LEVEL must be one of"):
        Settings()


@pytest.mark.unit
def test_get_settings_is_cached():
    assert get_settings() is get_settings()
