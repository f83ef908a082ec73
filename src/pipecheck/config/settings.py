"""
Configuration management for pipecheck.

This module provides environment-based configuration using Pydantic BaseSettings,
so process-wide defaults (log level, default message language, default abort
policy, message catalog location) can be set per deployment without code
changes.

Environment variables are loaded with the PIPECHECK_ prefix. For example,
PIPECHECK_DEFAULT_LANG=de makes German the default message language.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine project root for resolving .env by default
PROJECT_ROOT = Path(__file__).resolve().parents[3]
DEFAULT_ENV_FILE = PROJECT_ROOT / ".env"
ENV_FILE_OVERRIDE = os.getenv("PIPECHECK_ENV_FILE")
if ENV_FILE_OVERRIDE:
    env_file_candidate = Path(ENV_FILE_OVERRIDE).expanduser()
    if not env_file_candidate.is_absolute():
        env_file_candidate = PROJECT_ROOT / env_file_candidate
    SETTINGS_ENV_FILE = env_file_candidate
else:
    SETTINGS_ENV_FILE = DEFAULT_ENV_FILE

VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Fields:
    - LOG_LEVEL: Logging level, read without prefix so it can be shared
      with the host application
    - log_to_file / log_file_dir: Optional rotating file logging
    - default_lang: Message language used when a run does not specify one
    - abort_early / abort_pipe_early: Default abort policy for runs
    - messages_file: YAML message catalog loaded by load_message_catalog()
    """

    LOG_LEVEL: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level (uppercase)",
    )

    log_to_file: bool = Field(default=False, description="Enable file logging")
    log_file_dir: str = Field(default="logs", description="Directory for log files")

    default_lang: Optional[str] = Field(
        default=None,
        description="Default message language (None = language independent)",
    )
    abort_early: bool = Field(
        default=False, description="Stop the whole run at the first issue"
    )
    abort_pipe_early: bool = Field(
        default=False, description="Stop the current pipe at the first issue"
    )

    messages_file: Optional[str] = Field(
        default=None,
        description="Path to a YAML message catalog",
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and validate the log level name."""
        level = v.strip().upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"LOG_LEVEL must be one of {sorted(VALID_LOG_LEVELS)}, got '{v}'"
            )
        return level

    model_config = SettingsConfigDict(
        env_prefix="PIPECHECK_",
        env_file=str(SETTINGS_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are loaded once and reused across
    the application lifecycle.

    Returns:
        Settings instance with loaded configuration
    """
    return Settings()
