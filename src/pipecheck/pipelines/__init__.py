"""
Validation pipeline framework for pipecheck.

This package holds the execution engine: the dataset and issue model, the
unit contract, sync and async pipes, the fallback wrapper, run configuration,
message registries and the declarative pipe builder. The unit catalog lives
in ``pipecheck.steps``.

Example Usage:
    >>> from pipecheck.pipelines import build_pipe, execute
    >>>
    >>> config = {
    ...     "name": "zip_code",
    ...     "steps": [
    ...         {"import_path": "string"},
    ...         {"import_path": "trim"},
    ...         {"import_path": "regex", "args": ["^[0-9]{5}$"]},
    ...     ],
    ... }
    >>> schema = build_pipe(config)
    >>> execute(schema, " 12345 ").output
    '12345'

Available Components:
    - pipe / pipe_async: Compose a schema with validations and transformations
    - execute / execute_async: Run a schema and return a Result
    - parse / parse_async: Run a schema and raise ValidationFailedError on issues
    - fallback / fallback_async: Substitute a value for failing runs
    - build_pipe: Assemble a pipe from YAML/JSON configuration
    - BaseSchema, BaseValidation, BaseTransformation: Bases for custom units
"""

from .builder import build_pipe, build_pipe_from_file, load_pipe_config
from .core import Pipe, PipeAsync, pipe, pipe_async, run_pipe, run_pipe_async
from .exceptions import (
    PipelineAssemblyError,
    PipelineError,
    PipelineStepError,
    TransformationError,
    ValidationFailedError,
)
from .execution import (
    execute,
    execute_async,
    is_valid,
    is_valid_async,
    parse,
    parse_async,
)
from .fallback import (
    SchemaWithFallback,
    SchemaWithFallbackAsync,
    fallback,
    fallback_async,
    get_fallback,
    get_fallback_async,
)
from .issues import add_issue, stringify
from .messages import (
    clear_messages,
    delete_global_message,
    delete_schema_message,
    delete_specific_message,
    get_global_message,
    get_schema_message,
    get_specific_message,
    load_message_catalog,
    message_template,
    set_global_message,
    set_schema_message,
    set_specific_message,
)
from .pipeline_config import PipeConfig, StepConfig
from .run_config import (
    RunConfig,
    delete_global_config,
    get_global_config,
    set_global_config,
)
from .types import (
    MISSING,
    Dataset,
    FlatErrors,
    Issue,
    IssueKind,
    PathItem,
    Result,
    UnitKind,
)
from .units import (
    BaseMetadata,
    BaseSchema,
    BaseTransformation,
    BaseTransformationAsync,
    BaseUnit,
    BaseValidation,
    BaseValidationAsync,
)
from .validation import IssueSummary, flatten, get_dot_path, summarize_issues

__all__ = [
    # Builder
    "build_pipe",
    "build_pipe_from_file",
    "load_pipe_config",
    "PipeConfig",
    "StepConfig",
    # Engine
    "Pipe",
    "PipeAsync",
    "pipe",
    "pipe_async",
    "run_pipe",
    "run_pipe_async",
    # Execution
    "execute",
    "execute_async",
    "is_valid",
    "is_valid_async",
    "parse",
    "parse_async",
    # Fallback
    "SchemaWithFallback",
    "SchemaWithFallbackAsync",
    "fallback",
    "fallback_async",
    "get_fallback",
    "get_fallback_async",
    # Issues and messages
    "add_issue",
    "stringify",
    "clear_messages",
    "delete_global_message",
    "delete_schema_message",
    "delete_specific_message",
    "get_global_message",
    "get_schema_message",
    "get_specific_message",
    "load_message_catalog",
    "message_template",
    "set_global_message",
    "set_schema_message",
    "set_specific_message",
    # Configuration
    "RunConfig",
    "delete_global_config",
    "get_global_config",
    "set_global_config",
    # Types
    "MISSING",
    "Dataset",
    "FlatErrors",
    "Issue",
    "IssueKind",
    "PathItem",
    "Result",
    "UnitKind",
    # Units
    "BaseMetadata",
    "BaseSchema",
    "BaseTransformation",
    "BaseTransformationAsync",
    "BaseUnit",
    "BaseValidation",
    "BaseValidationAsync",
    # Exceptions
    "PipelineAssemblyError",
    "PipelineError",
    "PipelineStepError",
    "TransformationError",
    "ValidationFailedError",
    # Issue utilities
    "IssueSummary",
    "flatten",
    "get_dot_path",
    "summarize_issues",
]
