"""
Issue presentation utilities.

Usage Example:
    from pipecheck.pipelines.validation import flatten, summarize_issues

    result = execute(schema, payload)
    errors = flatten(result.issues)
    logger.info("validation.summary", **summarize_issues(result.issues).to_dict())
"""

from .helpers import flatten, get_dot_path
from .summaries import IssueSummary, summarize_issues

__all__ = [
    "flatten",
    "get_dot_path",
    "IssueSummary",
    "summarize_issues",
]
