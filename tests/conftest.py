"""Pytest configuration shared by the pipecheck test suite.

Every test starts from a clean process-wide state: cached settings, message
registries, global run configuration and custom segmenters are reset before
and after each test.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pipecheck.config import get_settings
from pipecheck.pipelines import clear_messages, delete_global_config
from pipecheck.utils import segmenter
from pipecheck.utils.logging import configure_logging

FIXTURES_DIR = Path(__file__).parent / "fixtures"

_SETTINGS_ENV_VARS = (
    "LOG_LEVEL",
    "PIPECHECK_DEFAULT_LANG",
    "PIPECHECK_ABORT_EARLY",
    "PIPECHECK_ABORT_PIPE_EARLY",
    "PIPECHECK_MESSAGES_FILE",
    "PIPECHECK_LOG_TO_FILE",
)


def _reset_state() -> None:
    get_settings.cache_clear()
    clear_messages()
    delete_global_config()
    segmenter._segmenters.clear()


@pytest.fixture(scope="session", autouse=True)
def pipecheck_logging():
    """Render pipecheck events as JSON so tests can inspect them via caplog."""
    configure_logging("DEBUG", log_to_file=False)


@pytest.fixture(autouse=True)
def clean_pipecheck_state(monkeypatch):
    """Ensure settings, messages and global config never bleed between tests."""
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    _reset_state()
    yield
    _reset_state()


@pytest.fixture
def fixtures_dir() -> Path:
    return FIXTURES_DIR
