"""
Core pipeline execution engine.

A pipe is an ordered, immutable chain of units headed by a schema. The engine
threads one dataset through the chain in declaration order and applies the
abort policy:

1. Once the dataset carries issues, a following schema or transformation is
   never run: the dataset is marked untyped and the pipe stops, because
   downstream units are not type-safe on non-conforming data.
2. Once the dataset carries issues and abort_early or abort_pipe_early is
   set, remaining validations are skipped.
3. Otherwise every unit runs, so independent failures are all collected.

abort_early additionally stops enclosing object and array schemas at their
first failing entry; abort_pipe_early only affects the pipe it occurs in.

The async engine follows the same rules and awaits every unit to completion
before starting the next one, so issue order always matches execution order.
"""

from __future__ import annotations

import inspect
from typing import Any, Sequence, Tuple

from pipecheck.utils.logging import get_logger

from .exceptions import (
    PipelineAssemblyError,
    PipelineError,
    PipelineStepError,
    TransformationError,
)
from .run_config import RunConfig
from .types import Dataset, UnitKind
from .units import BaseSchema, BaseUnit

logger = get_logger(__name__)

_RUN = "run"
_SKIP = "skip"
_STOP = "stop"

_TYPE_CHANGING = (UnitKind.SCHEMA, UnitKind.TRANSFORMATION)


def _next_action(unit: BaseUnit, dataset: Dataset, config: RunConfig) -> str:
    if unit.kind is UnitKind.METADATA:
        return _SKIP
    if dataset.issues:
        if unit.kind in _TYPE_CHANGING:
            return _STOP
        if config.abort_early or config.abort_pipe_early:
            return _SKIP
    return _RUN


def _step_error(unit: BaseUnit, index: int, exc: Exception) -> PipelineStepError:
    logger.error(
        "pipeline.step.failed",
        step=unit.type,
        step_index=index,
        kind=unit.kind.value,
        error=str(exc),
        exception_type=f"{exc.__class__.__module__}.{exc.__class__.__name__}",
    )
    if unit.kind is UnitKind.TRANSFORMATION:
        return TransformationError(
            f"Transformation must be total but raised: {exc}",
            step_name=unit.type,
            step_index=index,
        )
    return PipelineStepError(
        f"Unit execution failed: {exc}",
        step_name=unit.type,
        step_index=index,
    )


def _log_abort(unit: BaseUnit, index: int, dataset: Dataset, config: RunConfig) -> None:
    logger.debug(
        "pipeline.pipe.aborted",
        step=unit.type,
        step_index=index,
        issues=len(dataset.issues or ()),
        abort_early=bool(config.abort_early),
        abort_pipe_early=bool(config.abort_pipe_early),
    )


def run_pipe(
    units: Sequence[BaseUnit], dataset: Dataset, config: RunConfig
) -> Dataset:
    """
    Run ``units`` over ``dataset`` sequentially and return the dataset.

    Raises:
        PipelineStepError: When a unit raises unexpectedly
        TransformationError: When a transformation raises
    """
    aborted = False
    for index, unit in enumerate(units):
        action = _next_action(unit, dataset, config)
        if action == _STOP:
            dataset.typed = False
            break
        if action == _SKIP:
            if unit.kind is not UnitKind.METADATA and not aborted:
                _log_abort(unit, index, dataset, config)
                aborted = True
            continue

        try:
            dataset = unit.run(dataset, config)
        except PipelineError:
            raise
        except Exception as exc:
            raise _step_error(unit, index, exc) from exc

    return dataset


async def run_pipe_async(
    units: Sequence[BaseUnit], dataset: Dataset, config: RunConfig
) -> Dataset:
    """Async counterpart of ``run_pipe``; units run strictly one at a time."""
    aborted = False
    for index, unit in enumerate(units):
        action = _next_action(unit, dataset, config)
        if action == _STOP:
            dataset.typed = False
            break
        if action == _SKIP:
            if unit.kind is not UnitKind.METADATA and not aborted:
                _log_abort(unit, index, dataset, config)
                aborted = True
            continue

        try:
            result: Any = unit.run(dataset, config)
            if inspect.isawaitable(result):
                result = await result
            dataset = result
        except PipelineError:
            raise
        except Exception as exc:
            raise _step_error(unit, index, exc) from exc

    return dataset


def _validate_pipe(
    units: Tuple[Any, ...], allow_async: bool
) -> Tuple[BaseUnit, ...]:
    if not units:
        raise PipelineAssemblyError("Pipe must have at least one unit")

    root = units[0]
    if not isinstance(root, BaseSchema):
        raise PipelineAssemblyError(
            "Pipe must start with a schema unit",
            step_name=getattr(root, "type", type(root).__name__),
        )

    for index, unit in enumerate(units):
        if not isinstance(unit, BaseUnit):
            raise PipelineAssemblyError(
                f"Pipe item {index} of type {type(unit).__name__} does not "
                "implement the unit contract"
            )
        if unit.is_async and not allow_async:
            raise PipelineAssemblyError(
                f"Async unit at position {index} cannot run in a sync pipe; "
                "use pipe_async()",
                step_name=unit.type,
            )
    return tuple(units)


class Pipe(BaseSchema):
    """
    Schema executing an ordered chain of units.

    The pipe takes its type, expects and message from its root schema, so a
    pipe can be nested anywhere a schema is accepted.
    """

    is_async = False

    def __init__(self, *units: BaseUnit):
        self.pipe: Tuple[BaseUnit, ...] = _validate_pipe(units, self.is_async)
        root = self.pipe[0]
        self.type = root.type
        self.expects = root.expects
        self.message = root.message
        self.requirement = root.requirement

    @property
    def root(self) -> BaseUnit:
        return self.pipe[0]

    def run(self, dataset: Dataset, config: RunConfig) -> Dataset:
        return run_pipe(self.pipe, dataset, config)


class PipeAsync(Pipe):
    """Pipe accepting sync and async units."""

    is_async = True

    async def run(self, dataset: Dataset, config: RunConfig) -> Dataset:  # type: ignore[override]
        return await run_pipe_async(self.pipe, dataset, config)


def pipe(schema: BaseSchema, *units: BaseUnit) -> Pipe:
    """
    Build a sync pipe.

    Example:
        >>> schema = pipe(string(), trim(), min_length(1))

    Raises:
        PipelineAssemblyError: If the first item is not a schema or any unit is async
    """
    return Pipe(schema, *units)


def pipe_async(schema: BaseSchema, *units: BaseUnit) -> PipeAsync:
    """Build a pipe that may contain async units."""
    return PipeAsync(schema, *units)


__all__ = [
    "Pipe",
    "PipeAsync",
    "pipe",
    "pipe_async",
    "run_pipe",
    "run_pipe_async",
]
