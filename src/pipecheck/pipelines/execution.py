"""
Top-level invocation entry points.

``execute`` creates a fresh dataset for the input, runs the schema with the
merged run configuration and converts the terminal dataset into a Result.
Datasets are never shared between calls, so a schema can be executed by many
callers concurrently.
"""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Any, Tuple

from pipecheck.utils.logging import get_logger

from .exceptions import PipelineAssemblyError, ValidationFailedError
from .run_config import ConfigInput, RunConfig, get_global_config
from .types import Dataset, Issue, Result
from .units import BaseSchema

logger = get_logger(__name__)


def _prepare(schema: BaseSchema, input: Any, config: ConfigInput, typed: bool):
    if not isinstance(schema, BaseSchema):
        raise PipelineAssemblyError(
            f"execute() expects a schema, got {type(schema).__name__}"
        )
    return Dataset(value=input, typed=typed), get_global_config(config)


def _finish(
    schema: BaseSchema, dataset: Dataset, run_config: RunConfig, started: float
) -> Result:
    result = Result.from_dataset(dataset)
    if result.issues and run_config.path:
        issues: Tuple[Issue, ...] = tuple(
            issue.with_path_prefix(*run_config.path) for issue in result.issues
        )
        result = replace(result, issues=issues)

    logger.debug(
        "pipeline.completed",
        schema=schema.type,
        success=result.success,
        typed=result.typed,
        issues=len(result.issues),
        duration_ms=round((time.perf_counter() - started) * 1000, 3),
    )
    return result


def execute(
    schema: BaseSchema,
    input: Any,
    config: ConfigInput = None,
    *,
    typed: bool = False,
) -> Result:
    """
    Run ``schema`` over ``input`` and return the Result.

    Args:
        schema: Schema or pipe to execute
        input: Raw input value
        config: RunConfig or mapping of run options
        typed: Assert the input is already known to conform

    Raises:
        PipelineAssemblyError: If schema is async (use execute_async)
        PipelineStepError: If a unit raises unexpectedly
    """
    if getattr(schema, "is_async", False):
        raise PipelineAssemblyError(
            "Async schema cannot be executed synchronously; use execute_async()",
            step_name=schema.type,
        )
    started = time.perf_counter()
    dataset, run_config = _prepare(schema, input, config, typed)
    dataset = schema.run(dataset, run_config)
    return _finish(schema, dataset, run_config, started)


async def execute_async(
    schema: BaseSchema,
    input: Any,
    config: ConfigInput = None,
    *,
    typed: bool = False,
) -> Result:
    """Async counterpart of ``execute``; accepts sync and async schemas."""
    started = time.perf_counter()
    dataset, run_config = _prepare(schema, input, config, typed)
    if schema.is_async:
        dataset = await schema.run(dataset, run_config)
    else:
        dataset = schema.run(dataset, run_config)
    return _finish(schema, dataset, run_config, started)


def parse(schema: BaseSchema, input: Any, config: ConfigInput = None) -> Any:
    """
    Return the validated output or raise ValidationFailedError.

    Raises:
        ValidationFailedError: If the run produced issues
    """
    result = execute(schema, input, config)
    if not result.success:
        raise ValidationFailedError(result.issues)
    return result.output


async def parse_async(
    schema: BaseSchema, input: Any, config: ConfigInput = None
) -> Any:
    result = await execute_async(schema, input, config)
    if not result.success:
        raise ValidationFailedError(result.issues)
    return result.output


def is_valid(schema: BaseSchema, input: Any) -> bool:
    """Return True when ``input`` satisfies ``schema`` (stops at the first issue)."""
    return execute(schema, input, RunConfig(abort_early=True)).success


async def is_valid_async(schema: BaseSchema, input: Any) -> bool:
    result = await execute_async(schema, input, RunConfig(abort_early=True))
    return result.success
