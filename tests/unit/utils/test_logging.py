"""Unit tests for structured logging configuration."""

import json
import logging

import pytest

from pipecheck.pipelines import execute, fallback, pipe
from pipecheck.steps import min_length, string
from pipecheck.utils import logging as pipecheck_logging
from pipecheck.utils.logging import bind_context, configure_logging, get_logger


def json_events(caplog):
    return [
        json.loads(record.message)
        for record in caplog.records
        if record.message.startswith("{")
    ]


@pytest.mark.unit
def test_get_logger_returns_bound_logger() -> None:
    logger = get_logger("test_module")

    assert hasattr(logger, "bind")
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")


@pytest.mark.unit
def test_json_output_structure(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    get_logger("pipecheck.test").info("test_event", schema="string")

    log_data = json_events(caplog)[-1]
    assert log_data["event"] == "test_event"
    assert log_data["logger"] == "pipecheck.test"
    assert log_data["level"] == "info"
    assert log_data["schema"] == "string"
    assert "timestamp" in log_data


@pytest.mark.unit
def test_import_does_not_touch_root_logging() -> None:
    package_logger = logging.getLogger("pipecheck")

    assert any(isinstance(h, logging.NullHandler) for h in package_logger.handlers)
    assert not any(
        handler in logging.root.handlers
        for handler in pipecheck_logging._installed_handlers
    )


@pytest.mark.unit
def test_configure_logging_replaces_its_handlers() -> None:
    configure_logging("DEBUG")
    configure_logging("DEBUG")

    package_logger = logging.getLogger("pipecheck")
    installed = [
        h for h in package_logger.handlers if not isinstance(h, logging.NullHandler)
    ]
    assert installed == pipecheck_logging._installed_handlers
    assert len(installed) == 1
    assert package_logger.level == logging.DEBUG


@pytest.mark.unit
def test_context_binding_persists(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO)

    logger = bind_context(pipe="user_registration")
    logger.info("first_event")
    logger.info("second_event")

    events = json_events(caplog)
    assert [event["event"] for event in events[-2:]] == ["first_event", "second_event"]
    assert all(event["pipe"] == "user_registration" for event in events[-2:])


@pytest.mark.unit
def test_run_completion_is_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG)

    execute(pipe(string(), min_length(3)), "ab")

    completed = [e for e in json_events(caplog) if e["event"] == "pipeline.completed"]
    assert completed
    assert completed[-1]["issues"] == 1
    assert completed[-1]["success"] is False
    assert "duration_ms" in completed[-1]


@pytest.mark.unit
def test_fallback_substitution_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG)

    execute(fallback(pipe(string(), min_length(3)), "n/a"), "ab")

    applied = [
        e for e in json_events(caplog) if e["event"] == "pipeline.fallback.applied"
    ]
    assert applied[-1]["discarded_issues"] == 1
