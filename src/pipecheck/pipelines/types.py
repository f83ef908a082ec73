"""
Core data types for the pipeline execution framework.

The dataset is the value-in-flight container threaded through every unit of a
pipe. Units mutate its value and typed flag in place and append issues; the
terminal dataset of a run is converted into a Result for the caller.

Issues are immutable records. Nested schemas never edit an issue raised by a
child: they build a copy with their own path segment prepended.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class _Missing:
    """Sentinel type for an absent value (e.g. a key missing from a dict)."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class IssueKind(str, Enum):
    """Category of the unit that raised an issue."""

    SCHEMA = "schema"
    VALIDATION = "validation"
    TRANSFORMATION = "transformation"


class UnitKind(str, Enum):
    """Tag that the pipeline engine dispatches on."""

    SCHEMA = "schema"
    VALIDATION = "validation"
    TRANSFORMATION = "transformation"
    METADATA = "metadata"


# =============================================================================
# Issue model
# =============================================================================


@dataclass(frozen=True)
class PathItem:
    """
    One segment of an issue path.

    Attributes:
        type: Structure the segment belongs to ("object" or "array")
        origin: Whether the segment points at the value or at the key itself
        input: The container (dict or list) that holds the sub-value
        key: Dict key or list index
        value: The sub-value at ``key``
    """

    type: str
    origin: str
    input: Any
    key: Any
    value: Any

    @classmethod
    def from_key(cls, key: Any) -> "PathItem":
        """Build a detached path segment from a bare key or index."""
        return cls(
            type="array" if isinstance(key, int) else "object",
            origin="value",
            input=None,
            key=key,
            value=None,
        )


@dataclass(frozen=True)
class Issue:
    """
    Structured description of one validation failure.

    Attributes:
        kind: Category of the unit that raised it
        type: Identifier of the unit (e.g. "min_length")
        input: Value being checked when the failure occurred
        expected: Description of the expected value, None when no single form exists
        received: Description of what was actually seen
        message: Resolved human-readable message
        requirement: Check detail (limit, pattern, predicate) kept for diagnostics
        path: Root-to-leaf path segments, None for root level failures
        issues: Sub-issues for units aggregating nested failures
        lang: Message language in effect when the issue was raised
        abort_early: abort_early flag of the run when the issue was raised
        abort_pipe_early: abort_pipe_early flag of the run when the issue was raised
    """

    kind: IssueKind
    type: str
    input: Any
    expected: Optional[str]
    received: str
    message: str
    requirement: Any = None
    path: Optional[Tuple[PathItem, ...]] = None
    issues: Optional[Tuple["Issue", ...]] = None
    lang: Optional[str] = None
    abort_early: Optional[bool] = None
    abort_pipe_early: Optional[bool] = None

    def with_path_prefix(self, *items: PathItem) -> "Issue":
        """Return a copy with ``items`` prepended to the path."""
        if not items:
            return self
        return replace(self, path=tuple(items) + (self.path or ()))

    @property
    def dot_path(self) -> Optional[str]:
        """Dot notation of the path ("user.emails.0"), None when not expressible."""
        if not self.path:
            return None
        keys: List[str] = []
        for item in self.path:
            if isinstance(item.key, bool) or not isinstance(item.key, (str, int)):
                return None
            keys.append(str(item.key))
        return ".".join(keys)

    def to_log_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging (input is omitted)."""
        log_dict: Dict[str, Any] = {
            "kind": self.kind.value,
            "type": self.type,
            "expected": self.expected,
            "received": self.received,
        }
        if self.path:
            log_dict["path"] = self.dot_path
        return log_dict


# =============================================================================
# Dataset
# =============================================================================


@dataclass
class Dataset:
    """
    Working state of one validation run.

    Attributes:
        value: The value in flight, mutated in place by units
        typed: Whether value conforms to the declared output type
        issues: Append-only list of issues, None until the first failure
    """

    value: Any
    typed: bool = False
    issues: Optional[List[Issue]] = None

    @property
    def failed(self) -> bool:
        return bool(self.issues)

    def add_issue(self, issue: Issue) -> None:
        if self.issues is None:
            self.issues = [issue]
        else:
            self.issues.append(issue)

    def extend_issues(self, issues: List[Issue]) -> None:
        for issue in issues:
            self.add_issue(issue)


# =============================================================================
# Result
# =============================================================================


@dataclass(frozen=True)
class Result:
    """
    Outcome of executing a schema over an input.

    Attributes:
        success: True when the run produced no issues
        output: Final value (the unconforming value when success is False)
        issues: Ordered issues, empty on success
        typed: Whether output conforms to the schema's output type
    """

    success: bool
    output: Any
    issues: Tuple[Issue, ...] = ()
    typed: bool = True

    @classmethod
    def from_dataset(cls, dataset: Dataset) -> "Result":
        issues = tuple(dataset.issues or ())
        return cls(
            success=not issues,
            output=dataset.value,
            issues=issues,
            typed=dataset.typed,
        )

    def flatten(self) -> "FlatErrors":
        """Group issue messages by dot path."""
        from .validation.helpers import flatten

        return flatten(self.issues)


@dataclass
class FlatErrors:
    """
    Issue messages grouped for form-style error display.

    Attributes:
        root: Messages of issues without a path
        nested: Messages keyed by dot path
        other: Messages of issues whose path has no dot notation
    """

    root: List[str] = field(default_factory=list)
    nested: Dict[str, List[str]] = field(default_factory=dict)
    other: List[str] = field(default_factory=list)
