"""Tests for the benchmarker CLI commands."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from unittest.mock import patch

import httpx
import pytest
import structlog
from typer.testing import CliRunner

from benchmarker import __version__
from benchmarker.cli.main import app
from benchmarker.gateway.json_store import JsonGateway
from benchmarker.storage.repository import BenchmarkRepository
from tests.fakes import SCENARIO_YAML, FakeImpersonator, make_target_client, seed_rows

runner = CliRunner()
ENV = {"COLUMNS": "200"}


@pytest.fixture(autouse=True)
def default_structlog():
    yield
    structlog.reset_defaults()


def _project(tmp_path: Path, config: str = "user_id: u1\nsystem_version: http://sv:8000\n") -> Path:
    (tmp_path / "benchmarker.yaml").write_text(config)

    async def seed() -> None:
        gateway = JsonGateway(tmp_path / ".benchmarker")
        for table, rows in seed_rows().items():
            for row in rows:
                await gateway.insert(table, row)

    asyncio.run(seed())
    return tmp_path


def _repository(tmp_path: Path) -> BenchmarkRepository:
    return BenchmarkRepository(JsonGateway(tmp_path / ".benchmarker"))


def _invoke(tmp_path: Path, args: list[str], **kwargs):
    with patch("benchmarker.cli.workspace.find_project_root", return_value=tmp_path):
        return runner.invoke(app, args, env=ENV, **kwargs)


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"benchmarker {__version__}" in result.output


def test_invalid_log_format(tmp_path: Path):
    result = _invoke(tmp_path, ["--log-format", "xml", "runs"])
    assert result.exit_code == 1
    assert "Invalid log format" in result.output


class TestRunCommand:
    """benchmarker run drives the orchestrator with patched network clients."""

    def _invoke_run(self, tmp_path: Path, args: list[str], status_code: int = 200):
        requests: list[httpx.Request] = []
        impersonator = FakeImpersonator(["p1"])
        with patch("benchmarker.cli.run_cmd.get_impersonator", return_value=impersonator), \
                patch(
                    "benchmarker.cli.run_cmd.TargetSystemClient",
                    side_effect=lambda timeout: make_target_client(requests, status_code),
                ):
            result = _invoke(tmp_path, ["run", *args])
        return result, impersonator, requests

    def test_run_selected_scenarios(self, tmp_path: Path):
        project = _project(tmp_path)
        result, impersonator, requests = self._invoke_run(project, ["s1", "s2"])

        assert result.exit_code == 0, result.output
        assert "Benchmark started for scenario: Landing page" in result.output
        assert "Benchmark started for scenario: Todo app" in result.output
        assert "All benchmarks started successfully!" in result.output
        assert impersonator.closed
        assert [c[1] for c in impersonator.calls] == ["http://sv:8000", "http://sv:8000"]
        assert len(requests) == 2

        runs = asyncio.run(_repository(project).list_runs())
        assert [r.state for r in runs] == ["running", "running"]

    def test_run_all_with_system_version_override(self, tmp_path: Path):
        project = _project(tmp_path)
        result, impersonator, _ = self._invoke_run(
            project, ["--all", "--system-version", "http://other:9000"],
        )
        assert result.exit_code == 0, result.output
        assert [c[0] for c in impersonator.calls] == ["Build a landing page", "Build a todo app"]
        assert all(c[1] == "http://other:9000" for c in impersonator.calls)
        assert "Warning: System version http://other:9000 is not listed" in result.output

    def test_run_with_listed_version_does_not_warn(self, tmp_path: Path):
        project = _project(
            tmp_path,
            config=(
                "user_id: u1\nsystem_version: http://sv:8000\n"
                "system_versions:\n  - http://sv:9000\n"
            ),
        )
        result, impersonator, _ = self._invoke_run(project, ["s1", "-s", "http://sv:9000"])
        assert result.exit_code == 0, result.output
        assert impersonator.calls[0][1] == "http://sv:9000"
        assert "not listed" not in result.output

    def test_run_with_default_version_does_not_warn(self, tmp_path: Path):
        project = _project(tmp_path)
        result, _, _ = self._invoke_run(project, ["s1"])
        assert result.exit_code == 0, result.output
        assert "not listed" not in result.output

    def test_run_json_output(self, tmp_path: Path):
        project = _project(tmp_path)
        result, _, _ = self._invoke_run(project, ["s2", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["succeeded"] is True
        assert data["error"] is None
        [run] = data["runs"]
        assert run["scenario_id"] == "s2"
        assert run["state"] == "running"
        assert run["results_recorded"] == 2

    def test_run_without_selection(self, tmp_path: Path):
        project = _project(tmp_path)
        result, impersonator, _ = self._invoke_run(project, [])
        assert result.exit_code == 1
        assert "Please select at least one scenario to run." in result.output
        assert impersonator.calls == []

    def test_run_without_user(self, tmp_path: Path):
        project = _project(tmp_path, config="system_version: http://sv\n")
        result, _, _ = self._invoke_run(project, ["s1"])
        assert result.exit_code == 1
        assert "No user specified" in result.output

    def test_run_user_without_token(self, tmp_path: Path):
        project = _project(tmp_path)
        result, impersonator, requests = self._invoke_run(project, ["s1", "--user", "u2"])
        assert result.exit_code == 1
        assert "No user secrets found" in result.output
        assert impersonator.calls == []
        assert requests == []

    def test_run_upstream_failure_is_generic(self, tmp_path: Path):
        project = _project(tmp_path)
        result, _, _ = self._invoke_run(project, ["s1", "s2"], status_code=500)
        assert result.exit_code == 1
        assert "An error occurred while starting the benchmark. Please try again." in result.output
        assert asyncio.run(_repository(project).list_runs()) == []

    def test_run_with_bad_config(self, tmp_path: Path):
        (tmp_path / "benchmarker.yaml").write_text("gateway:\n  kind: sqlite\n")
        result, _, _ = self._invoke_run(tmp_path, ["s1"])
        assert result.exit_code == 1
        assert "Unknown gateway 'sqlite'" in result.output


def _seed_run(project: Path) -> str:
    async def seed() -> str:
        repository = _repository(project)
        run = await repository.create_run("s2", "http://sv:8000", "p1", "https://app/p1", "u1")
        await repository.add_result(run.id, "r2", {"score": 8})
        await repository.add_result(run.id, "r2", {"score": 6})
        await repository.add_result(run.id, "r3", {"score": 10})
        await repository.add_result(run.id, "r3", {})
        return run.id

    return asyncio.run(seed())


class TestResultCommand:
    def test_result_shows_scores(self, tmp_path: Path):
        project = _project(tmp_path)
        run_id = _seed_run(project)

        result = _invoke(project, ["result", run_id])

        assert result.exit_code == 0, result.output
        assert "Average Scores by Dimension" in result.output
        assert "clarity" in result.output
        assert "7.0" in result.output
        assert "10.0" in result.output
        assert "pending" in result.output

    def test_result_json(self, tmp_path: Path):
        project = _project(tmp_path)
        run_id = _seed_run(project)

        result = _invoke(project, ["result", run_id, "--json"])

        data = json.loads(result.stdout)
        assert data["run"]["id"] == run_id
        assert data["scores"] == [
            {"dimension": "clarity", "average_score": 7.0, "count": 2},
            {"dimension": "safety", "average_score": 10.0, "count": 1},
        ]
        assert data["inconsistent_result_ids"] == []
        assert {r["dimension"] for r in data["results"]} == {"clarity", "safety"}

    def test_result_not_found(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["result", "nope"])
        assert result.exit_code == 1
        assert "Run 'nope' not found." in result.output


class TestRunsCommand:
    def test_lists_runs(self, tmp_path: Path):
        project = _project(tmp_path)
        run_id = _seed_run(project)
        result = _invoke(project, ["runs"])
        assert result.exit_code == 0
        assert run_id in result.output
        assert "Todo app" in result.output

    def test_filter_by_scenario(self, tmp_path: Path):
        project = _project(tmp_path)
        _seed_run(project)
        result = _invoke(project, ["runs", "--scenario", "s1"])
        assert result.exit_code == 0
        assert "No runs found" in result.output


    def test_runs_in_backend_specific_states(self, tmp_path: Path):
        project = _project(tmp_path)
        run_id = _seed_run(project)
        asyncio.run(
            JsonGateway(project / ".benchmarker").update("runs", run_id, {"state": "started"})
        )

        listing = _invoke(project, ["runs"])
        report = _invoke(project, ["result", run_id, "--json"])

        assert listing.exit_code == 0, listing.output
        assert "started" in listing.output
        assert report.exit_code == 0, report.output
        assert json.loads(report.stdout)["run"]["state"] == "started"


class TestScenariosCommand:
    def test_list(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["scenarios", "list"])
        assert result.exit_code == 0
        assert "Landing page" in result.output
        assert "clarity, safety" in result.output

    def test_list_json(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["scenarios", "list", "--json"])
        data = json.loads(result.stdout)
        assert [s["id"] for s in data] == ["s1", "s2"]

    def test_import_valid_file(self, tmp_path: Path):
        project = _project(tmp_path)
        path = project / "todo.yaml"
        path.write_text(SCENARIO_YAML)

        result = _invoke(project, ["scenarios", "import", str(path)])

        assert result.exit_code == 0, result.output
        assert "Imported Todo app" in result.output
        scenarios = asyncio.run(_repository(project).load_scenarios())
        assert len(scenarios) == 3
        assert [r.dimension for r in scenarios[-1].reviewers] == ["clarity", "safety"]

    def test_import_stops_on_invalid_file(self, tmp_path: Path):
        project = _project(tmp_path)
        good = project / "good.yaml"
        good.write_text(SCENARIO_YAML)
        bad = project / "bad.yaml"
        bad.write_text("name: Broken\n")

        result = _invoke(project, ["scenarios", "import", str(good), str(bad)])

        assert result.exit_code == 1
        assert "No scenarios imported." in result.output
        assert len(asyncio.run(_repository(project).list_scenarios())) == 2

    def test_delete(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["scenarios", "delete", "s2"])
        assert result.exit_code == 0
        assert "Deleted scenario Todo app" in result.output
        repository = _repository(project)
        assert [s.id for s in asyncio.run(repository.list_scenarios())] == ["s1"]
        assert [r.id for r in asyncio.run(repository.list_reviewers())] == ["r1"]

    def test_delete_missing(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["scenarios", "delete", "nope"])
        assert result.exit_code == 1
        assert "Scenario 'nope' not found" in result.output


    def test_update(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(
            project, ["scenarios", "update", "s1", "--name", "Landing v2", "--temperature", "0.9"],
        )
        assert result.exit_code == 0, result.output
        assert "Updated scenario Landing v2" in result.output
        scenario = asyncio.run(_repository(project).get_scenario("s1"))
        assert scenario.name == "Landing v2"
        assert scenario.llm_temperature == 0.9
        assert scenario.prompt == "Build a landing page"

    def test_update_without_fields(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["scenarios", "update", "s1"])
        assert result.exit_code == 1
        assert "Nothing to update" in result.output

    def test_update_rejects_out_of_range_temperature(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["scenarios", "update", "s1", "--temperature", "3"])
        assert result.exit_code != 0
        assert asyncio.run(_repository(project).get_scenario("s1")).llm_temperature == 0.2


class TestReviewersCommand:
    def test_list_for_scenario(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["reviewers", "list", "--scenario", "s2", "--json"])
        assert result.exit_code == 0
        assert [r["id"] for r in json.loads(result.stdout)] == ["r2", "r3"]

    def test_list_table(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["reviewers", "list"])
        assert result.exit_code == 0
        assert "safety" in result.output

    def test_add(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(
            project,
            ["reviewers", "add", "s1", "-d", "safety", "--prompt", "Check inputs", "--weight", "2"],
        )
        assert result.exit_code == 0, result.output
        assert "Added safety reviewer" in result.output
        reviewers = asyncio.run(_repository(project).list_reviewers(scenario_id="s1"))
        assert [(r.dimension, r.weight) for r in reviewers] == [("clarity", 1.0), ("safety", 2.0)]

    def test_add_rejects_negative_weight(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(
            project,
            ["reviewers", "add", "s1", "-d", "safety", "--prompt", "p", "--weight", "-1"],
        )
        assert result.exit_code == 1
        assert "weight" in result.output
        assert len(asyncio.run(_repository(project).list_reviewers())) == 3

    def test_add_to_missing_scenario(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["reviewers", "add", "nope", "-d", "x", "--prompt", "p"])
        assert result.exit_code == 1
        assert "Scenario 'nope' not found" in result.output

    def test_update(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["reviewers", "update", "r3", "--weight", "0.5"])
        assert result.exit_code == 0, result.output
        assert "Updated reviewer r3 (safety): weight" in result.output
        reviewer = asyncio.run(_repository(project).get_reviewer("r3"))
        assert reviewer.weight == 0.5

    def test_delete(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["reviewers", "delete", "r2"])
        assert result.exit_code == 0
        assert "Deleted clarity reviewer r2" in result.output
        reviewers = asyncio.run(_repository(project).list_reviewers(scenario_id="s2"))
        assert [r.id for r in reviewers] == ["r3"]

    def test_delete_missing(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["reviewers", "delete", "nope"])
        assert result.exit_code == 1
        assert "Reviewer 'nope' not found" in result.output


class TestDimensionsCommand:
    def test_add_update_delete(self, tmp_path: Path):
        project = _project(tmp_path)

        added = _invoke(project, ["dimensions", "add", "clarity", "--description", "Readable"])
        assert added.exit_code == 0, added.output
        assert "Added dimension clarity" in added.output
        [dimension] = json.loads(_invoke(project, ["dimensions", "list", "--json"]).stdout)
        assert dimension["description"] == "Readable"

        updated = _invoke(
            project, ["dimensions", "update", dimension["id"], "--name", "readability"],
        )
        assert updated.exit_code == 0, updated.output
        assert "Updated dimension readability" in updated.output

        deleted = _invoke(project, ["dimensions", "delete", dimension["id"]])
        assert deleted.exit_code == 0
        assert "Deleted dimension readability" in deleted.output
        assert asyncio.run(_repository(project).list_review_dimensions()) == []

    def test_empty_list(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["dimensions", "list"])
        assert result.exit_code == 0
        assert "No review dimensions found" in result.output

    def test_update_missing(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["dimensions", "update", "nope", "--name", "x"])
        assert result.exit_code == 1
        assert "Review dimension 'nope' not found" in result.output


class TestVersionsCommand:
    def test_lists_default_then_extras(self, tmp_path: Path):
        project = _project(
            tmp_path,
            config=(
                "system_version: http://sv:8000\n"
                "system_versions:\n  - http://sv:9000\n  - http://sv:8000\n"
            ),
        )
        result = _invoke(project, ["versions", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "default": "http://sv:8000",
            "versions": ["http://sv:8000", "http://sv:9000"],
        }

    def test_table_marks_default(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["versions"])
        assert result.exit_code == 0
        assert "http://sv:8000" in result.output
        assert "default" in result.output

    def test_bad_config(self, tmp_path: Path):
        (tmp_path / "benchmarker.yaml").write_text("system_versions: nope\n")
        result = _invoke(tmp_path, ["versions"])
        assert result.exit_code == 1
        assert "Invalid benchmarker.yaml" in result.output


class TestValidateCommand:
    def test_valid_file(self, tmp_path: Path):
        path = tmp_path / "todo.yaml"
        path.write_text(SCENARIO_YAML)
        result = runner.invoke(app, ["validate", str(path)])
        assert result.exit_code == 0
        assert "valid" in result.output
        assert "1/1 scenarios valid" in result.output

    def test_invalid_file(self, tmp_path: Path):
        path = tmp_path / "bad.yaml"
        path.write_text("name: Blog\nprompt: x\ndescripton: typo\n")
        result = runner.invoke(app, ["validate", "--ci", str(path)])
        assert result.exit_code == 1
        assert "descripton: Extra inputs are not permitted" in result.output
        assert "0/1 scenarios valid" in result.output

    def test_missing_file(self):
        result = runner.invoke(app, ["validate", "/nonexistent/file.yaml"])
        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_scans_scenarios_directory(self, tmp_path: Path, monkeypatch):
        scenarios_dir = tmp_path / "scenarios"
        scenarios_dir.mkdir()
        (scenarios_dir / "a.yaml").write_text(SCENARIO_YAML)
        (scenarios_dir / "b.yml").write_text(SCENARIO_YAML)
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["validate"])
        assert result.exit_code == 0
        assert "2/2 scenarios valid" in result.output


class TestSecretsCommand:
    def test_set_token(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["secrets", "set", "--user", "u7", "--token", "t-7"])
        assert result.exit_code == 0
        assert "Test token saved for user u7" in result.output
        assert asyncio.run(_repository(project).load_test_token("u7")) == "t-7"

    def test_prompts_for_token(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["secrets", "set", "--user", "u1"], input="rotated\n")
        assert result.exit_code == 0
        assert asyncio.run(_repository(project).load_test_token("u1")) == "rotated"

    def test_set_token_keeps_unreadable_secret(self, tmp_path: Path):
        project = _project(tmp_path)
        asyncio.run(
            JsonGateway(project / ".benchmarker").insert(
                "user_secrets", {"id": "sec5", "user_id": "u5", "secret": "not json"},
            )
        )
        result = _invoke(project, ["secrets", "set", "--user", "u5", "--token", "t-5"])
        assert result.exit_code == 1
        assert "refusing to overwrite" in result.output
        secret = asyncio.run(_repository(project).get_user_secret("sec5"))
        assert secret.secret == "not json"

    def test_list_shows_keys_not_values(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["secrets", "list", "--user", "u1"])
        assert result.exit_code == 0
        assert "sec1" in result.output
        assert "GPT_ENGINEER_TEST_TOKEN" in result.output
        assert "tok-123" not in result.output

    def test_delete(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["secrets", "delete", "sec1"])
        assert result.exit_code == 0
        assert "Deleted secret sec1 of user u1" in result.output
        assert asyncio.run(_repository(project).list_user_secrets("u1")) == []

    def test_delete_missing(self, tmp_path: Path):
        project = _project(tmp_path)
        result = _invoke(project, ["secrets", "delete", "nope"])
        assert result.exit_code == 1
        assert "Secret 'nope' not found" in result.output
