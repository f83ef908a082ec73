"""End-to-end tests combining declarative pipes, message catalogs and reporting."""

import asyncio

import pytest

from pipecheck import (
    RunConfig,
    ValidationFailedError,
    execute,
    execute_async,
    fallback,
    parse,
    pipe,
    pipe_async,
)
from pipecheck.pipelines import (
    build_pipe_from_file,
    load_message_catalog,
    set_global_config,
    summarize_issues,
)
from pipecheck.steps import (
    array,
    check_async,
    jwt,
    min_words,
    object_,
    object_async,
    optional,
    string,
    to_snake_case,
    trim,
)


@pytest.mark.integration
def test_declarative_pipe_with_catalog_messages(fixtures_dir):
    load_message_catalog(fixtures_dir / "messages.yaml")
    schema = build_pipe_from_file(fixtures_dir / "user_pipe.yaml")

    result = execute(
        schema,
        {"username": "al", "email": "al@example.org"},
        RunConfig(lang="de", path=["form"]),
    )

    assert not result.success
    assert [issue.dot_path for issue in result.issues] == ["form.username"]
    assert result.issues[0].message == "Mindestens 3 Zeichen erwartet"

    flat = result.flatten()
    assert flat.nested == {"form.username": ["Mindestens 3 Zeichen erwartet"]}

    summary = summarize_issues(result.issues)
    assert summary.by_type == {"min_length": 1}


@pytest.mark.integration
def test_global_abort_policy_with_nested_structures():
    set_global_config({"abortEarly": True})
    schema = object_(
        {
            "title": pipe(string(), trim(), min_words("en", 2)),
            "tags": array(pipe(string(), trim())),
            "token": optional(pipe(string(), jwt())),
        }
    )

    result = execute(schema, {"title": "one", "tags": ["a", 1], "token": "x.y"})

    assert len(result.issues) == 1
    assert result.issues[0].dot_path == "title"
    assert result.issues[0].abort_early is True


@pytest.mark.integration
def test_fallback_shields_optional_section():
    schema = object_(
        {
            "name": string(),
            "settings": fallback(
                pipe(object_({"theme": string()}), to_snake_case()),
                lambda dataset, config: {"theme": "light"},
            ),
        }
    )

    output = parse(schema, {"name": "Ada", "settings": {"theme": 1}})

    assert output == {"name": "Ada", "settings": {"theme": "light"}}

    with pytest.raises(ValidationFailedError):
        parse(schema, {"settings": {}})


@pytest.mark.integration
@pytest.mark.asyncio
async def test_async_registration_lookup():
    registered = {"ada", "grace"}

    async def is_available(username):
        await asyncio.sleep(0)
        return username not in registered

    schema = object_async(
        {
            "username": pipe_async(
                string(), trim(), check_async(is_available, "Username already taken")
            ),
            "email": string(),
        }
    )

    runs = await asyncio.gather(
        execute_async(schema, {"username": " ada ", "email": "a@x"}),
        execute_async(schema, {"username": "linus", "email": "l@x"}),
    )

    assert [run.success for run in runs] == [False, True]
    assert runs[0].issues[0].message == "Username already taken"
    assert runs[1].output == {"username": "linus", "email": "l@x"}
