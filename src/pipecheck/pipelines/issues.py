"""
Issue construction.

``add_issue`` is the only way issues enter a dataset. It combines the static
metadata of the failing unit (kind, type, expects, requirement) with the live
value at the moment of failure, resolves the message and appends the issue.
"""

from dataclasses import replace
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Optional, Sequence

from pipecheck.utils.logging import get_logger

from .messages import (
    Message,
    get_global_message,
    get_schema_message,
    get_specific_message,
)
from .run_config import RunConfig
from .types import MISSING, Dataset, Issue, IssueKind, PathItem, UnitKind

if TYPE_CHECKING:
    from .units import BaseUnit

logger = get_logger(__name__)

_UNSET: Any = object()


def stringify(value: Any) -> str:
    """
    Describe a value for the ``received`` field of an issue.

    Examples:
        >>> stringify("foo")
        '"foo"'
        >>> stringify(None)
        'null'
        >>> stringify(42)
        '42'
        >>> stringify({"a": 1})
        'dict'
    """
    if value is MISSING:
        return "missing"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    return type(value).__name__


def default_message(label: str, expected: Optional[str], received: str) -> str:
    if expected:
        return f"Invalid {label}: Expected {expected} but received {received}"
    return f"Invalid {label}: Received {received}"


def _resolve_message(message: Optional[Message], issue: Issue) -> Optional[str]:
    if message is None:
        return None
    if not callable(message):
        return str(message)
    try:
        return str(message(issue))
    except Exception as exc:
        logger.warning(
            "issue.message_failed",
            unit_type=issue.type,
            lang=issue.lang,
            error=str(exc),
            exception_type=type(exc).__name__,
        )
        return None


def add_issue(
    unit: "BaseUnit",
    label: str,
    dataset: Dataset,
    config: RunConfig,
    *,
    input: Any = _UNSET,
    expected: Any = _UNSET,
    received: Optional[str] = None,
    message: Optional[Message] = None,
    path: Optional[Sequence[PathItem]] = None,
    issues: Optional[Sequence[Issue]] = None,
) -> Issue:
    """
    Build an issue for ``unit`` and append it to ``dataset``.

    Args:
        unit: The failing unit
        label: Noun used in the default message ("length", "type", ...)
        dataset: Dataset of the running pipe
        config: Run configuration; lang and abort flags are copied onto the issue
        input: Value that failed (defaults to dataset.value)
        expected: Expected description (defaults to unit.expects)
        received: Received description (defaults to stringify(input))
        message: Explicit message, takes precedence over every registry
        path: Path segments relative to the unit
        issues: Sub-issues

    Returns:
        The appended issue
    """
    failed_input = dataset.value if input is _UNSET else input
    expected_text = unit.expects if expected is _UNSET else expected
    received_text = received if received is not None else stringify(failed_input)
    is_schema = unit.kind is UnitKind.SCHEMA

    issue = Issue(
        kind=IssueKind(unit.kind.value),
        type=unit.type,
        input=failed_input,
        expected=expected_text,
        received=received_text,
        message=default_message(label, expected_text, received_text),
        requirement=unit.requirement,
        path=tuple(path) if path else None,
        issues=tuple(issues) if issues else None,
        lang=config.lang,
        abort_early=config.abort_early,
        abort_pipe_early=config.abort_pipe_early,
    )

    candidates = (
        message,
        unit.message,
        get_specific_message(unit.type, issue.lang),
        get_schema_message(issue.lang) if is_schema else None,
        config.message,
        get_global_message(issue.lang),
    )
    for candidate in candidates:
        if candidate is None:
            continue
        resolved = _resolve_message(candidate, issue)
        if resolved is not None:
            issue = replace(issue, message=resolved)
        break

    if is_schema:
        dataset.typed = False
    dataset.add_issue(issue)
    return issue
