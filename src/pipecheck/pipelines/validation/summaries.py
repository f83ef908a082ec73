"""
Issue summary dataclass.

Provides an aggregate view of the issues of one or more runs, suitable for
structured logging and reporting.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable

from ..types import Issue


@dataclass
class IssueSummary:
    """
    Aggregate counts of validation issues.

    Attributes:
        issue_count: Total number of issues
        by_kind: Number of issues per kind ("schema", "validation", ...)
        by_type: Number of issues per unit type ("min_length", ...)
        by_path: Number of issues per dot path; root issues use ""
    """

    issue_count: int = 0
    by_kind: Dict[str, int] = field(default_factory=dict)
    by_type: Dict[str, int] = field(default_factory=dict)
    by_path: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert summary to JSON-friendly dictionary."""
        return asdict(self)

    @property
    def has_issues(self) -> bool:
        return self.issue_count > 0

    def add_issue(self, issue: Issue) -> None:
        """Count one more issue."""
        self.issue_count += 1
        kind = issue.kind.value
        self.by_kind[kind] = self.by_kind.get(kind, 0) + 1
        self.by_type[issue.type] = self.by_type.get(issue.type, 0) + 1
        path = issue.dot_path or ""
        self.by_path[path] = self.by_path.get(path, 0) + 1


def summarize_issues(issues: Iterable[Issue]) -> IssueSummary:
    """Build an IssueSummary from ``issues``."""
    issues = list(issues)
    return IssueSummary(
        issue_count=len(issues),
        by_kind=dict(Counter(issue.kind.value for issue in issues)),
        by_type=dict(Counter(issue.type for issue in issues)),
        by_path=dict(Counter(issue.dot_path or "" for issue in issues)),
    )


__all__ = [
    "IssueSummary",
    "summarize_issues",
]
