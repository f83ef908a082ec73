"""
Fallback wrapper.

A fallback decorates a schema so that a failing run is replaced by a
substitute value. Substitution is all-or-nothing: the failing dataset's value
and issues are discarded and a fresh typed dataset without issues is
returned. Issues are never partially merged.

The fallback is either a literal value or a producer called as
``producer(dataset, config)`` with the failing dataset. ``fallback_async``
also accepts coroutine producers and async schemas.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Optional

from pipecheck.utils.logging import get_logger

from .exceptions import PipelineAssemblyError
from .run_config import RunConfig, get_global_config
from .types import Dataset
from .units import BaseSchema

logger = get_logger(__name__)


class SchemaWithFallback(BaseSchema):
    """
    Schema wrapper substituting a fallback value on failure.

    Args:
        wrapped: Schema (or pipe) to run first
        fallback: Literal value or producer ``(dataset, config) -> value``
        treat_untyped_as_failure: Also substitute when the wrapped schema
            returns an untyped dataset without issues
    """

    is_async = False

    def __init__(
        self,
        wrapped: BaseSchema,
        fallback: Any,
        treat_untyped_as_failure: bool = False,
    ):
        if not isinstance(wrapped, BaseSchema):
            raise PipelineAssemblyError(
                "fallback() expects a schema",
                step_name=getattr(wrapped, "type", type(wrapped).__name__),
            )
        if not self.is_async:
            if wrapped.is_async:
                raise PipelineAssemblyError(
                    "Async schema cannot be wrapped by fallback(); use fallback_async()",
                    step_name=wrapped.type,
                )
            if inspect.iscoroutinefunction(fallback):
                raise PipelineAssemblyError(
                    "Async fallback producer requires fallback_async()",
                    step_name=wrapped.type,
                )

        self.wrapped = wrapped
        self.fallback = fallback
        self.treat_untyped_as_failure = treat_untyped_as_failure
        self.type = wrapped.type
        self.expects = wrapped.expects
        self.message = wrapped.message
        self.requirement = wrapped.requirement

    def _is_failure(self, dataset: Dataset) -> bool:
        if dataset.issues:
            return True
        return self.treat_untyped_as_failure and not dataset.typed

    def _log_applied(self, dataset: Dataset) -> None:
        logger.debug(
            "pipeline.fallback.applied",
            schema=self.type,
            discarded_issues=len(dataset.issues or ()),
            typed=dataset.typed,
        )

    def run(self, dataset: Dataset, config: RunConfig) -> Dataset:
        output = self.wrapped.run(dataset, config)
        if not self._is_failure(output):
            return output
        self._log_applied(output)
        return Dataset(value=get_fallback(self, output, config), typed=True)


class SchemaWithFallbackAsync(SchemaWithFallback):
    """Fallback wrapper accepting async schemas and async producers."""

    is_async = True

    async def run(self, dataset: Dataset, config: RunConfig) -> Dataset:  # type: ignore[override]
        output: Any = self.wrapped.run(dataset, config)
        if inspect.isawaitable(output):
            output = await output
        if not self._is_failure(output):
            return output
        self._log_applied(output)
        value = await get_fallback_async(self, output, config)
        return Dataset(value=value, typed=True)


def fallback(
    schema: BaseSchema,
    value: Any,
    *,
    treat_untyped_as_failure: bool = False,
) -> SchemaWithFallback:
    """
    Wrap ``schema`` so a failing run yields ``value`` instead of issues.

    Example:
        >>> schema = fallback(pipe(string(), min_length(3)), "n/a")
        >>> execute(schema, "x").output
        'n/a'
    """
    return SchemaWithFallback(schema, value, treat_untyped_as_failure)


def fallback_async(
    schema: BaseSchema,
    value: Any,
    *,
    treat_untyped_as_failure: bool = False,
) -> SchemaWithFallbackAsync:
    """Async variant of ``fallback``; the producer may be a coroutine function."""
    return SchemaWithFallbackAsync(schema, value, treat_untyped_as_failure)


def get_fallback(
    schema: SchemaWithFallback,
    dataset: Optional[Dataset] = None,
    config: Optional[RunConfig] = None,
) -> Any:
    """Resolve the fallback value of ``schema``, calling the producer if any."""
    producer: Callable[..., Any] | Any = schema.fallback
    if callable(producer):
        return producer(dataset, config or get_global_config())
    return producer


async def get_fallback_async(
    schema: SchemaWithFallback,
    dataset: Optional[Dataset] = None,
    config: Optional[RunConfig] = None,
) -> Any:
    """Resolve the fallback value, awaiting async producers."""
    value = get_fallback(schema, dataset, config)
    if inspect.isawaitable(value):
        value = await value
    return value
