"""Unit tests for the top-level invocation entry points."""

import pytest

from pipecheck.pipelines import (
    PathItem,
    PipelineAssemblyError,
    ValidationFailedError,
    execute,
    is_valid,
    is_valid_async,
    parse,
    parse_async,
    pipe,
    pipe_async,
)
from pipecheck.steps import (
    array,
    check_async,
    min_length,
    number,
    object_,
    regex,
    string,
    trim,
)


@pytest.mark.unit
def test_execute_requires_a_schema():
    with pytest.raises(PipelineAssemblyError, match="expects a schema"):
        execute(min_length(1), "abc")


@pytest.mark.unit
def test_config_path_prefixes_every_issue():
    schema = object_({"name": pipe(string(), min_length(2))})
    result = execute(schema, {"name": "a"}, {"path": ["users", 3]})

    issue = result.issues[0]
    assert [item.key for item in issue.path] == ["users", 3, "name"]
    assert issue.dot_path == "users.3.name"


@pytest.mark.unit
def test_config_path_on_root_issue():
    result = execute(string(), 1, {"path": [PathItem.from_key("field")]})
    assert result.issues[0].dot_path == "field"


@pytest.mark.unit
def test_parse_returns_output():
    assert parse(pipe(string(), trim()), "  x ") == "x"


@pytest.mark.unit
def test_parse_raises_with_all_issues():
    schema = object_({"a": number(), "b": pipe(string(), regex(r"^\d+$"))})

    with pytest.raises(ValidationFailedError) as exc_info:
        parse(schema, {"a": "1", "b": "x"})

    error = exc_info.value
    assert len(error.issues) == 2
    assert str(error) == (
        'Invalid type: Expected number but received "1" (path=\'a\') '
        "[+1 more issue(s)]"
    )


@pytest.mark.unit
def test_is_valid():
    schema = pipe(string(), min_length(2))

    assert is_valid(schema, "ab")
    assert not is_valid(schema, "a")
    assert not is_valid(schema, None)


@pytest.mark.unit
def test_result_flatten():
    schema = object_({"tags": array(pipe(string(), min_length(2)))})
    result = execute(schema, {"tags": ["ok", "x"]})

    flat = result.flatten()
    assert flat.nested == {"tags.1": ["Invalid length: Expected >=2 but received 1"]}
    assert flat.root == []


@pytest.mark.unit
@pytest.mark.asyncio
async def test_parse_async():
    async def is_even(value):
        return value % 2 == 0

    schema = pipe_async(number(), check_async(is_even, "odd"))

    assert await parse_async(schema, 4) == 4
    with pytest.raises(ValidationFailedError, match="odd"):
        await parse_async(schema, 3)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_is_valid_async():
    async def is_even(value):
        return value % 2 == 0

    schema = pipe_async(number(), check_async(is_even))

    assert await is_valid_async(schema, 2)
    assert not await is_valid_async(schema, 1)
