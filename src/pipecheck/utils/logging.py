"""Structured logging for pipecheck.

Library modules only ask for a logger with ``get_logger(__name__)``; importing
pipecheck never installs handlers or touches the host's logging setup. A
``logging.NullHandler`` on the ``pipecheck`` logger keeps stdlib from
printing "no handler" warnings.

Applications (and the test suite) opt in to pipecheck's own output with
``configure_logging()``, which sets up JSON rendering through structlog:

- ISO-8601 timestamps, log level and logger name on every event
- stdout handler plus an optional daily rotating file
- level and file settings taken from pipecheck.config.settings
  (LOG_LEVEL, PIPECHECK_LOG_TO_FILE, PIPECHECK_LOG_FILE_DIR)

Events carry unit types, counts and durations; the values being validated
are never passed to the logger.

Usage:
    >>> from pipecheck.utils.logging import configure_logging, get_logger
    >>> configure_logging("DEBUG")
    >>> get_logger(__name__).debug("pipeline.completed", schema="string", issues=0)
"""

import logging
from datetime import datetime
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, List, Optional

import structlog
from structlog.types import Processor

from pipecheck.config import get_settings

LOGGER_NAME = "pipecheck"

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())

_installed_handlers: List[logging.Handler] = []


def _log_file_path(log_dir: str) -> Path:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    # pipecheck-YYYYMMDD.log
    return directory / f"pipecheck-{datetime.now().strftime('%Y%m%d')}.log"


def _build_handlers(level: int, log_to_file: bool, log_dir: str) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_to_file:
        handlers.append(
            TimedRotatingFileHandler(
                filename=str(_log_file_path(log_dir)),
                when="midnight",
                interval=1,
                backupCount=30,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setLevel(level)
    return handlers


def configure_logging(
    level: Optional[str] = None, log_to_file: Optional[bool] = None
) -> None:
    """Send pipecheck events to stdout (and optionally a file) as JSON.

    Handlers are attached to the ``pipecheck`` logger only. Calling this
    again replaces the handlers installed by the previous call.

    Args:
        level: Log level name; defaults to settings.LOG_LEVEL
        log_to_file: Enable the rotating file; defaults to settings.log_to_file
    """
    settings = get_settings()
    level_name = (level or settings.LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    if log_to_file is None:
        log_to_file = settings.log_to_file

    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in _installed_handlers:
        package_logger.removeHandler(handler)
        handler.close()
    _installed_handlers[:] = _build_handlers(
        numeric_level, log_to_file, settings.log_file_dir
    )
    for handler in _installed_handlers:
        package_logger.addHandler(handler)
    package_logger.setLevel(numeric_level)

    processors: List[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a structlog logger named ``name`` (typically ``__name__``)."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> Any:
    """Create a pipecheck logger with bound context fields.

    Example:
        >>> logger = bind_context(schema="string", lang="de")
        >>> logger.debug("pipeline.completed", issues=2)
    """
    return structlog.get_logger(LOGGER_NAME).bind(**kwargs)
