"""Configuration management for pipecheck.

Usage:
    >>> from pipecheck.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.LOG_LEVEL)
"""

from pipecheck.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
