"""
pipecheck - Composable validation and transformation pipelines.

Schemas are assembled from small reusable units (type checks, format
validators and value transformers) and executed over an input value,
producing either the validated output or an ordered list of structured
issues describing what failed and where.

Example Usage:
    >>> from pipecheck import execute, pipe
    >>> from pipecheck.steps import decimal, min_length, string, trim
    >>>
    >>> schema = pipe(string(), trim(), min_length(1), decimal())
    >>> result = execute(schema, " 12.5 ")
    >>> result.success, result.output
    (True, '12.5')
"""

from .pipelines import (
    MISSING,
    Dataset,
    FlatErrors,
    Issue,
    IssueKind,
    PathItem,
    PipelineAssemblyError,
    PipelineError,
    PipelineStepError,
    Result,
    RunConfig,
    TransformationError,
    UnitKind,
    ValidationFailedError,
    build_pipe,
    execute,
    execute_async,
    fallback,
    fallback_async,
    flatten,
    get_dot_path,
    is_valid,
    parse,
    parse_async,
    pipe,
    pipe_async,
)

__all__ = [
    "MISSING",
    "Dataset",
    "FlatErrors",
    "Issue",
    "IssueKind",
    "PathItem",
    "PipelineAssemblyError",
    "PipelineError",
    "PipelineStepError",
    "Result",
    "RunConfig",
    "TransformationError",
    "UnitKind",
    "ValidationFailedError",
    "build_pipe",
    "execute",
    "execute_async",
    "fallback",
    "fallback_async",
    "flatten",
    "get_dot_path",
    "is_valid",
    "parse",
    "parse_async",
    "pipe",
    "pipe_async",
]

__version__ = "0.1.0"
