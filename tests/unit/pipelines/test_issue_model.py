"""Unit tests for the issue model, datasets and issue utilities."""

import pytest

from pipecheck.pipelines import (
    MISSING,
    Dataset,
    Issue,
    IssueKind,
    PathItem,
    PipelineAssemblyError,
    PipelineStepError,
    Result,
    ValidationFailedError,
    execute,
    flatten,
    get_dot_path,
    pipe,
    summarize_issues,
)
from pipecheck.steps import array, min_length, number, object_, string


def make_issue(message: str = "bad", path=None) -> Issue:
    return Issue(
        kind=IssueKind.VALIDATION,
        type="min_length",
        input="a",
        expected=">=2",
        received="1",
        message=message,
        path=path,
    )


class TestIssue:
    """Tests for Issue helpers."""

    @pytest.mark.unit
    def test_with_path_prefix_prepends(self):
        leaf = make_issue(path=(PathItem.from_key("name"),))
        prefixed = leaf.with_path_prefix(PathItem.from_key("users"), PathItem.from_key(0))

        assert [item.key for item in prefixed.path] == ["users", 0, "name"]
        assert leaf.path == (PathItem.from_key("name"),)

    @pytest.mark.unit
    def test_with_empty_prefix_returns_same_issue(self):
        issue = make_issue()
        assert issue.with_path_prefix() is issue

    @pytest.mark.unit
    def test_dot_path(self):
        issue = make_issue(path=(PathItem.from_key("tags"), PathItem.from_key(2)))
        assert issue.dot_path == "tags.2"
        assert get_dot_path(issue) == "tags.2"

    @pytest.mark.unit
    def test_dot_path_none_for_root_and_unusual_keys(self):
        assert make_issue().dot_path is None
        assert make_issue(path=(PathItem.from_key((1, 2)),)).dot_path is None
        assert make_issue(path=(PathItem.from_key(True),)).dot_path is None

    @pytest.mark.unit
    def test_to_log_dict_omits_input(self):
        issue = make_issue(path=(PathItem.from_key("secret"),))
        assert issue.to_log_dict() == {
            "kind": "validation",
            "type": "min_length",
            "expected": ">=2",
            "received": "1",
            "path": "secret",
        }


class TestDatasetAndResult:
    """Tests for Dataset and Result."""

    @pytest.mark.unit
    def test_dataset_issues_start_absent(self):
        dataset = Dataset(value=1)
        assert dataset.issues is None
        assert not dataset.failed

        dataset.add_issue(make_issue("one"))
        dataset.extend_issues([make_issue("two")])

        assert dataset.failed
        assert [issue.message for issue in dataset.issues] == ["one", "two"]

    @pytest.mark.unit
    def test_result_from_dataset(self):
        result = Result.from_dataset(Dataset(value="x", typed=True))
        assert result == Result(success=True, output="x", issues=(), typed=True)

    @pytest.mark.unit
    def test_missing_sentinel(self):
        assert not MISSING
        assert repr(MISSING) == "MISSING"
        assert type(MISSING)() is MISSING


class TestNestedPaths:
    """Tests for root-to-leaf paths of nested failures."""

    @pytest.mark.unit
    def test_two_level_failure_has_two_segments(self):
        schema = object_({"user": object_({"age": number()})})
        data = {"user": {"age": "ten"}}

        issue = execute(schema, data).issues[0]

        assert len(issue.path) == 2
        outer, inner = issue.path
        assert (outer.type, outer.key, outer.input) == ("object", "user", data)
        assert outer.value == {"age": "ten"}
        assert (inner.type, inner.key, inner.value) == ("object", "age", "ten")
        assert inner.input is data["user"]


class TestFlatten:
    """Tests for flatten."""

    @pytest.mark.unit
    def test_groups_messages(self):
        issues = [
            make_issue("root"),
            make_issue("first", path=(PathItem.from_key("name"),)),
            make_issue("second", path=(PathItem.from_key("name"),)),
            make_issue("odd", path=(PathItem.from_key(None),)),
        ]

        flat = flatten(issues)

        assert flat.root == ["root"]
        assert flat.nested == {"name": ["first", "second"]}
        assert flat.other == ["odd"]

    @pytest.mark.unit
    def test_flatten_real_result(self):
        schema = object_(
            {"name": pipe(string(), min_length(2)), "tags": array(string())}
        )
        result = execute(schema, {"name": "a", "tags": ["x", 1]})

        flat = flatten(result.issues)

        assert list(flat.nested) == ["name", "tags.1"]


class TestSummaries:
    """Tests for issue summaries."""

    @pytest.mark.unit
    def test_summarize_issues(self):
        schema = object_(
            {"name": pipe(string(), min_length(2)), "age": number()}
        )
        result = execute(schema, {"name": "a", "age": "x"})

        summary = summarize_issues(result.issues)

        assert summary.has_issues
        assert summary.to_dict() == {
            "issue_count": 2,
            "by_kind": {"validation": 1, "schema": 1},
            "by_type": {"min_length": 1, "number": 1},
            "by_path": {"name": 1, "age": 1},
        }

    @pytest.mark.unit
    def test_summary_add_issue(self):
        summary = summarize_issues([])
        assert not summary.has_issues

        summary.add_issue(make_issue())
        assert summary.issue_count == 1
        assert summary.by_path == {"": 1}


class TestExceptions:
    """Tests for exception messages."""

    @pytest.mark.unit
    def test_step_error_context(self):
        error = PipelineStepError("boom", step_name="trim", step_index=2)
        assert str(error) == "boom (step='trim', step_index=2)"

    @pytest.mark.unit
    def test_assembly_error_context(self):
        error = PipelineAssemblyError("bad", config_path="pipes/user.yaml")
        assert str(error) == "bad (config='pipes/user.yaml')"

    @pytest.mark.unit
    def test_validation_failed_without_issues(self):
        assert str(ValidationFailedError([])) == "Validation failed"
