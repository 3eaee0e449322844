"""Tests for scenario, run, result and secret models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from benchmarker.errors import ConfigurationError
from benchmarker.models import (
    Result,
    Run,
    RunState,
    Scenario,
    ScenarioDefinition,
)
from benchmarker.models.secret import UserSecret, extract_test_token


class TestRowModels:
    """Row models tolerate columns added by the backend."""

    def test_scenario_ignores_unknown_columns(self):
        scenario = Scenario.model_validate(
            {"id": "s1", "name": "n", "prompt": "p", "owner_id": "x"}
        )
        assert scenario.reviewers == []
        assert scenario.llm_temperature is None

    def test_run_state_defaults_and_parses(self):
        run = Run(id="r", scenario_id="s", system_version="v", project_id="p")
        assert run.state == RunState.created
        assert Run.model_validate(
            {"id": "r", "scenario_id": "s", "system_version": "v",
             "project_id": "p", "state": "running"}
        ).state == RunState.running

    def test_run_keeps_states_it_does_not_know(self):
        run = Run.model_validate(
            {"id": "r", "scenario_id": "s", "system_version": "v",
             "project_id": "p", "state": "started"}
        )
        assert run.state == "started"

    @pytest.mark.parametrize(
        "payload, expected",
        [
            ({"score": 7}, 7.0),
            ({"score": 8.5}, 8.5),
            ({}, None),
            ({"score": "9"}, None),
            ({"score": True}, None),
            ({"impersonation": {}}, None),
        ],
    )
    def test_result_score(self, payload, expected):
        result = Result(id="x", run_id="r", reviewer_id="rv", result=payload)
        assert result.score == expected


class TestScenarioDefinition:
    def test_rows_split_scenario_and_reviewers(self):
        definition = ScenarioDefinition.model_validate({
            "name": "Blog",
            "prompt": "Build a blog",
            "reviewers": [{"dimension": "clarity", "prompt": "Rate it"}],
        })
        row = definition.scenario_row()
        assert "reviewers" not in row
        assert row["llm_temperature"] == 0.7
        [reviewer] = definition.reviewer_rows("s9")
        assert reviewer["scenario_id"] == "s9"
        assert reviewer["dimension"] == "clarity"
        assert reviewer["weight"] == 1.0

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            ScenarioDefinition.model_validate({"name": "a", "prompt": "b", "promt": "c"})

    def test_rejects_out_of_range_temperature(self):
        with pytest.raises(ValidationError):
            ScenarioDefinition.model_validate({"name": "a", "prompt": "b", "llm_temperature": 3})


class TestExtractTestToken:
    def _secret(self, payload: str) -> UserSecret:
        return UserSecret(id="1", user_id="u1", secret=payload)

    def test_returns_token_from_first_row(self):
        secrets = [
            self._secret('{"GPT_ENGINEER_TEST_TOKEN": "first"}'),
            self._secret('{"GPT_ENGINEER_TEST_TOKEN": "second"}'),
        ]
        assert extract_test_token(secrets) == "first"

    def test_no_rows(self):
        with pytest.raises(ConfigurationError, match="No user secrets found"):
            extract_test_token([])

    def test_invalid_json(self):
        with pytest.raises(ConfigurationError, match="not valid JSON"):
            extract_test_token([self._secret("{oops")])

    @pytest.mark.parametrize("payload", ['{"OTHER": "x"}', '{"GPT_ENGINEER_TEST_TOKEN": ""}', "[1]"])
    def test_missing_token(self, payload):
        with pytest.raises(ConfigurationError, match="test token not found"):
            extract_test_token([self._secret(payload)])
