"""
Exception hierarchy for the pipeline framework.

Expected, user-facing validation failures are never raised: they become
issues on the dataset. Exceptions are reserved for programming errors
(invalid pipe assembly, a unit raising unexpectedly, a transformation that is
not total) and for the explicit ``parse`` API, which converts a failed result
into ValidationFailedError.
"""

from typing import TYPE_CHECKING, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from .types import Issue


class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""

    pass


class PipelineStepError(PipelineError):
    """
    Raised when a unit raises unexpectedly while a pipe is running.

    Args:
        message: Error description
        step_name: Type of the unit that failed
        step_index: Position of the unit in its pipe (optional)
    """

    def __init__(
        self,
        message: str,
        step_name: Optional[str] = None,
        step_index: Optional[int] = None,
    ):
        self.step_name = step_name
        self.step_index = step_index

        # Build contextual error message
        context_parts = []
        if step_name:
            context_parts.append(f"step='{step_name}'")
        if step_index is not None:
            context_parts.append(f"step_index={step_index}")

        if context_parts:
            full_message = f"{message} ({', '.join(context_parts)})"
        else:
            full_message = message

        super().__init__(full_message)


class TransformationError(PipelineStepError):
    """Raised when a transformation fails; transformations must be total."""

    pass


class PipelineAssemblyError(PipelineError):
    """
    Raised when a pipe cannot be assembled or executed as configured.

    Covers pipes that do not start with a schema, async units inside a sync
    pipe, synchronous execution of an async schema, and invalid declarative
    pipe configuration.

    Args:
        message: Error description
        config_path: Path or name of the configuration that failed (optional)
        step_name: Name of the step that caused assembly failure (optional)
    """

    def __init__(
        self,
        message: str,
        config_path: Optional[str] = None,
        step_name: Optional[str] = None,
    ):
        self.config_path = config_path
        self.step_name = step_name

        # Build contextual error message
        context_parts = []
        if config_path:
            context_parts.append(f"config='{config_path}'")
        if step_name:
            context_parts.append(f"step='{step_name}'")

        if context_parts:
            full_message = f"{message} ({', '.join(context_parts)})"
        else:
            full_message = message

        super().__init__(full_message)


class ValidationFailedError(PipelineError):
    """
    Raised by ``parse`` when the input does not satisfy the schema.

    Args:
        issues: Ordered issues of the failed run
    """

    def __init__(self, issues: Sequence["Issue"]):
        self.issues: Tuple["Issue", ...] = tuple(issues)
        if self.issues:
            first = self.issues[0]
            message = first.message
            if first.dot_path:
                message = f"{message} (path='{first.dot_path}')"
            if len(self.issues) > 1:
                message = f"{message} [+{len(self.issues) - 1} more issue(s)]"
        else:
            message = "Validation failed"
        super().__init__(message)
