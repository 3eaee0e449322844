"""Tests for the scenario definition validation pipeline."""

from pathlib import Path

from benchmarker.loader.validator import (
    validate_definition,
    validate_scenario_file,
    validate_scenario_string,
)
from tests.fakes import SCENARIO_YAML


class TestValidateScenarioString:
    """Tests for validate_scenario_string function."""

    def test_valid_scenario(self):
        """Valid YAML returns a ScenarioDefinition and no errors."""
        definition, errors = validate_scenario_string(SCENARIO_YAML)
        assert errors == []
        assert definition is not None
        assert definition.name == "Todo app"
        assert definition.llm_temperature == 0.5
        assert [r.dimension for r in definition.reviewers] == ["clarity", "safety"]
        assert definition.reviewers[1].weight == 2.0

    def test_missing_prompt(self):
        definition, errors = validate_scenario_string("name: Blog\n")
        assert definition is None
        [error] = errors
        assert error.field == "prompt"
        assert error.type == "missing"

    def test_unknown_field_gets_suggestion_and_line(self):
        """A typo is reported at its line with a 'Did you mean' hint."""
        source = "name: Blog\nprompt: x\ndescripton: typo\n"
        _, errors = validate_scenario_string(source)
        [error] = errors
        assert error.type == "extra_forbidden"
        assert error.line == 3
        assert error.suggestion == "Did you mean 'description'?"

    def test_reviewer_error_points_at_nested_line(self):
        source = (
            "name: Blog\n"
            "prompt: x\n"
            "reviewers:\n"
            "  - dimension: clarity\n"
            "    prompt: a\n"
            "    wieght: 2\n"
        )
        _, errors = validate_scenario_string(source)
        [error] = errors
        assert error.field == "reviewers.0.wieght"
        assert error.line == 6
        assert error.suggestion == "Did you mean 'weight'?"

    def test_collects_all_errors(self):
        source = "llm_temperature: 5\nreviewers:\n  - prompt: a\n"
        _, errors = validate_scenario_string(source)
        fields = {e.field for e in errors}
        assert {"name", "prompt", "llm_temperature", "reviewers.0.dimension"} <= fields

    def test_yaml_syntax_error(self):
        _, errors = validate_scenario_string("name: [oops\n")
        [error] = errors
        assert error.type == "yaml_syntax_error"

    def test_empty_input(self):
        _, errors = validate_scenario_string("")
        assert errors[0].type == "empty_input"


class TestValidateScenarioFile:
    def test_valid_file(self, tmp_path: Path):
        path = tmp_path / "todo.yaml"
        path.write_text(SCENARIO_YAML)
        definition, errors = validate_scenario_file(path)
        assert errors == []
        assert definition.prompt.startswith("Build a todo app")

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        _, errors = validate_scenario_file(path)
        assert errors[0].type == "empty_file"


def test_validate_definition_without_positions():
    _, errors = validate_definition({"name": "x"}, {})
    assert errors[0].line is None
