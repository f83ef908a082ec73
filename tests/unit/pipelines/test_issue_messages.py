"""Unit tests for issue construction and message resolution."""

import json
import logging
from decimal import Decimal

import pytest

from pipecheck.pipelines import (
    MISSING,
    PipelineAssemblyError,
    Issue,
    IssueKind,
    delete_specific_message,
    execute,
    get_specific_message,
    load_message_catalog,
    message_template,
    pipe,
    set_global_message,
    set_schema_message,
    set_specific_message,
    stringify,
)
from pipecheck.config import get_settings
from pipecheck.steps import check, min_length, number, string


class TestStringify:
    """Tests for the received-value descriptions."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("foo", '"foo"'),
            ("", '""'),
            (None, "null"),
            (True, "true"),
            (False, "false"),
            (42, "42"),
            (1.5, "1.5"),
            (Decimal("2.50"), "2.50"),
            ({"a": 1}, "dict"),
            ([1, 2], "list"),
            (MISSING, "missing"),
        ],
    )
    def test_stringify(self, value, expected):
        assert stringify(value) == expected


class TestAddIssue:
    """Tests for the fields captured on an issue."""

    @pytest.mark.unit
    def test_issue_captures_unit_and_config(self):
        result = execute(pipe(string(), min_length(3)), "ab", {"lang": "en"})
        issue = result.issues[0]

        assert isinstance(issue, Issue)
        assert issue.kind is IssueKind.VALIDATION
        assert issue.type == "min_length"
        assert issue.input == "ab"
        assert issue.expected == ">=3"
        assert issue.received == "2"
        assert issue.requirement == 3
        assert issue.lang == "en"
        assert issue.abort_early is None
        assert issue.abort_pipe_early is None

    @pytest.mark.unit
    def test_schema_issue_untypes_dataset(self):
        result = execute(number(), "12")

        assert not result.typed
        assert result.issues[0].kind is IssueKind.SCHEMA
        assert result.issues[0].message == (
            'Invalid type: Expected number but received "12"'
        )

    @pytest.mark.unit
    def test_issues_are_immutable(self):
        issue = execute(string(), 1).issues[0]

        with pytest.raises(AttributeError):
            issue.message = "changed"  # type: ignore[misc]


class TestMessagePrecedence:
    """Tests for the order in which message sources are consulted."""

    @pytest.fixture(autouse=True)
    def register_all(self):
        set_global_message("global")
        set_schema_message("schema")
        set_specific_message("min_length", "specific")

    @pytest.mark.unit
    def test_unit_message_wins(self):
        schema = pipe(string(), min_length(3, "unit"))
        result = execute(schema, "a", {"message": "config"})
        assert result.issues[0].message == "unit"

    @pytest.mark.unit
    def test_specific_message_beats_config_and_global(self):
        result = execute(pipe(string(), min_length(3)), "a", {"message": "config"})
        assert result.issues[0].message == "specific"

    @pytest.mark.unit
    def test_schema_message_applies_to_schema_issues_only(self):
        schema_result = execute(string(), 1, {"message": "config"})
        assert schema_result.issues[0].message == "schema"

        delete_specific_message("min_length")
        validation_result = execute(pipe(string(), min_length(3)), "a")
        assert validation_result.issues[0].message == "global"

    @pytest.mark.unit
    def test_config_message_beats_global(self):
        delete_specific_message("min_length")
        result = execute(pipe(string(), min_length(3)), "a", {"message": "config"})
        assert result.issues[0].message == "config"

    @pytest.mark.unit
    def test_language_specific_entry_preferred(self):
        set_specific_message("min_length", "zu kurz", "de")

        de_result = execute(pipe(string(), min_length(3)), "a", {"lang": "de"})
        fr_result = execute(pipe(string(), min_length(3)), "a", {"lang": "fr"})

        assert de_result.issues[0].message == "zu kurz"
        assert fr_result.issues[0].message == "specific"
        assert get_specific_message("min_length", "de") == "zu kurz"


class TestCallableMessages:
    """Tests for messages computed from the issue."""

    @pytest.mark.unit
    def test_callable_receives_issue(self):
        schema = pipe(
            string(),
            min_length(3, lambda issue: f"need {issue.expected}, got {issue.received}"),
        )
        result = execute(schema, "a")
        assert result.issues[0].message == "need >=3, got 1"

    @pytest.mark.unit
    def test_failing_callable_keeps_default_message(
        self, caplog: pytest.LogCaptureFixture
    ):
        caplog.set_level(logging.WARNING)

        def broken(issue):
            raise KeyError("missing translation")

        result = execute(pipe(string(), check(lambda value: False, broken)), "x")

        assert result.issues[0].message == 'Invalid input: Received "x"'
        events = [
            json.loads(record.message)
            for record in caplog.records
            if record.message.startswith("{")
        ]
        assert any(event["event"] == "issue.message_failed" for event in events)

    @pytest.mark.unit
    def test_message_template_keeps_unknown_placeholders(self):
        render = message_template("{type}: {unknown} ({received})")
        issue = execute(pipe(string(), min_length(2)), "a").issues[0]
        assert render(issue) == "min_length: {unknown} (1)"


class TestMessageCatalog:
    """Tests for YAML message catalogs."""

    @pytest.mark.unit
    def test_load_catalog(self, fixtures_dir):
        count = load_message_catalog(fixtures_dir / "messages.yaml")
        assert count == 4

        schema = pipe(string(), min_length(3))
        assert execute(schema, "a", {"lang": "de"}).issues[0].message == (
            "Mindestens 3 Zeichen erwartet"
        )
        assert execute(string(), 1, {"lang": "de"}).issues[0].message == (
            "Falscher Typ: string erwartet, 1 erhalten"
        )
        assert execute(schema, "a", {"lang": "fr"}).issues[0].message == (
            "Invalid value (1)"
        )

    @pytest.mark.unit
    def test_catalog_path_from_settings(self, fixtures_dir, monkeypatch):
        monkeypatch.setenv("PIPECHECK_MESSAGES_FILE", str(fixtures_dir / "messages.yaml"))
        get_settings.cache_clear()

        assert load_message_catalog() == 4

    @pytest.mark.unit
    def test_no_catalog_configured(self):
        with pytest.raises(PipelineAssemblyError, match="No message catalog"):
            load_message_catalog()

    @pytest.mark.unit
    def test_missing_catalog_file(self, tmp_path):
        with pytest.raises(PipelineAssemblyError, match="not found"):
            load_message_catalog(tmp_path / "absent.yaml")

    @pytest.mark.unit
    def test_invalid_yaml(self, tmp_path):
        catalog = tmp_path / "broken.yaml"
        catalog.write_text("de: [unclosed", encoding="utf-8")

        with pytest.raises(PipelineAssemblyError, match="Invalid YAML"):
            load_message_catalog(catalog)

    @pytest.mark.unit
    def test_language_entry_must_be_mapping(self, tmp_path):
        catalog = tmp_path / "flat.yaml"
        catalog.write_text("de: hello\n", encoding="utf-8")

        with pytest.raises(PipelineAssemblyError, match="must be a mapping"):
            load_message_catalog(catalog)
