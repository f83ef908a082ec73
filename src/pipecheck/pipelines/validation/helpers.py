"""
Helpers for presenting issues.

These helpers turn the ordered issue tuple of a Result into shapes that are
convenient for error reporting, such as form field errors keyed by dot path.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ..types import FlatErrors, Issue


def get_dot_path(issue: Issue) -> Optional[str]:
    """
    Return the dot path of ``issue``.

    Returns None for root level issues and for paths containing a key that is
    neither a string nor an integer.

    Example:
        >>> get_dot_path(issue)  # path user -> emails -> 0
        'user.emails.0'
    """
    return issue.dot_path


def flatten(issues: Iterable[Issue]) -> FlatErrors:
    """
    Group issue messages by where they occurred.

    Args:
        issues: Issues in execution order

    Returns:
        FlatErrors with messages of root issues, messages keyed by dot path,
        and messages of issues whose path has no dot notation. Order within
        each group follows the input order.
    """
    flat = FlatErrors()
    for issue in issues:
        if not issue.path:
            flat.root.append(issue.message)
            continue
        dot_path = get_dot_path(issue)
        if dot_path is None:
            flat.other.append(issue.message)
        else:
            flat.nested.setdefault(dot_path, []).append(issue.message)
    return flat


__all__ = ["flatten", "get_dot_path"]
