"""Typed accessors over a DataGateway.

BenchmarkRepository turns raw backend rows into models for scenarios,
reviewers, runs, results, review dimensions and user secrets. It adds
no caching and no transactions: each method is one or a few gateway
calls.
"""

from __future__ import annotations

import json
from typing import Any

from benchmarker.errors import ConfigurationError, NotFoundError, ValidationError
from benchmarker.gateway.base import (
    PROCEDURE_START_PAUSED_RUN,
    TABLE_RESULTS,
    TABLE_REVIEW_DIMENSIONS,
    TABLE_REVIEWERS,
    TABLE_RUNS,
    TABLE_SCENARIOS,
    TABLE_USER_SECRETS,
    DataGateway,
)
from benchmarker.models.run import Result, Run, RunState
from benchmarker.models.scenario import (
    ReviewDimension,
    Reviewer,
    ReviewerDefinition,
    Scenario,
    ScenarioDefinition,
)
from benchmarker.models.secret import TEST_TOKEN_KEY, UserSecret, extract_test_token


def _require_patch(patch: dict[str, Any]) -> None:
    if not patch:
        raise ValidationError("Nothing to update. Pass at least one field to change.")


class BenchmarkRepository:
    """Model-level access to the benchmark tables."""

    def __init__(self, gateway: DataGateway) -> None:
        self.gateway = gateway

    # -- Scenarios --

    async def list_scenarios(self) -> list[Scenario]:
        """Return scenario rows without reviewers attached."""
        rows = await self.gateway.query(TABLE_SCENARIOS)
        return [Scenario.model_validate(row) for row in rows]

    async def load_scenarios(self) -> list[Scenario]:
        """Return all scenarios with their reviewers attached in row order."""
        scenarios = await self.list_scenarios()
        reviewers = await self.list_reviewers()
        by_scenario: dict[str, list[Reviewer]] = {}
        for reviewer in reviewers:
            by_scenario.setdefault(reviewer.scenario_id, []).append(reviewer)
        return [
            scenario.model_copy(update={"reviewers": by_scenario.get(scenario.id, [])})
            for scenario in scenarios
        ]

    async def get_scenario(self, scenario_id: str) -> Scenario:
        rows = await self.gateway.query(TABLE_SCENARIOS, {"id": scenario_id})
        if not rows:
            raise NotFoundError(f"Scenario '{scenario_id}' not found")
        reviewers = await self.list_reviewers(scenario_id=scenario_id)
        return Scenario.model_validate({**rows[0], "reviewers": reviewers})

    async def add_scenario(self, definition: ScenarioDefinition) -> Scenario:
        """Insert a scenario and its reviewers from a YAML definition."""
        row = await self.gateway.insert(TABLE_SCENARIOS, definition.scenario_row())
        reviewers = [
            Reviewer.model_validate(await self.gateway.insert(TABLE_REVIEWERS, reviewer_row))
            for reviewer_row in definition.reviewer_rows(row["id"])
        ]
        return Scenario.model_validate({**row, "reviewers": reviewers})

    async def update_scenario(self, scenario_id: str, patch: dict[str, Any]) -> Scenario:
        """Apply patch to a scenario row and return the updated scenario.

        Raises:
            ValidationError: If patch is empty.
            NotFoundError: If the scenario does not exist.
        """
        _require_patch(patch)
        await self.get_scenario(scenario_id)
        await self.gateway.update(TABLE_SCENARIOS, scenario_id, patch)
        return await self.get_scenario(scenario_id)

    async def delete_scenario(self, scenario_id: str) -> Scenario:
        """Delete a scenario and the reviewers attached to it.

        Returns the scenario as it was before deletion.
        """
        scenario = await self.get_scenario(scenario_id)
        for reviewer in scenario.reviewers:
            await self.gateway.delete(TABLE_REVIEWERS, reviewer.id)
        await self.gateway.delete(TABLE_SCENARIOS, scenario_id)
        return scenario

    # -- Reviewers --

    async def list_reviewers(self, scenario_id: str | None = None) -> list[Reviewer]:
        filters = {"scenario_id": scenario_id} if scenario_id is not None else None
        rows = await self.gateway.query(TABLE_REVIEWERS, filters)
        return [Reviewer.model_validate(row) for row in rows]

    async def get_reviewer(self, reviewer_id: str) -> Reviewer | None:
        rows = await self.gateway.query(TABLE_REVIEWERS, {"id": reviewer_id})
        return Reviewer.model_validate(rows[0]) if rows else None

    async def add_reviewer(self, scenario_id: str, definition: ReviewerDefinition) -> Reviewer:
        """Attach a new reviewer to an existing scenario."""
        rows = await self.gateway.query(TABLE_SCENARIOS, {"id": scenario_id})
        if not rows:
            raise NotFoundError(f"Scenario '{scenario_id}' not found")
        row = await self.gateway.insert(
            TABLE_REVIEWERS, {"scenario_id": scenario_id, **definition.model_dump()},
        )
        return Reviewer.model_validate(row)

    async def update_reviewer(self, reviewer_id: str, patch: dict[str, Any]) -> Reviewer:
        _require_patch(patch)
        await self._require_reviewer(reviewer_id)
        await self.gateway.update(TABLE_REVIEWERS, reviewer_id, patch)
        return await self._require_reviewer(reviewer_id)

    async def delete_reviewer(self, reviewer_id: str) -> Reviewer:
        """Delete a reviewer and return the row that was removed."""
        reviewer = await self._require_reviewer(reviewer_id)
        await self.gateway.delete(TABLE_REVIEWERS, reviewer_id)
        return reviewer

    async def _require_reviewer(self, reviewer_id: str) -> Reviewer:
        reviewer = await self.get_reviewer(reviewer_id)
        if reviewer is None:
            raise NotFoundError(f"Reviewer '{reviewer_id}' not found")
        return reviewer

    # -- Review dimensions --

    async def list_review_dimensions(self) -> list[ReviewDimension]:
        rows = await self.gateway.query(TABLE_REVIEW_DIMENSIONS)
        return [ReviewDimension.model_validate(row) for row in rows]

    async def add_review_dimension(
        self,
        name: str,
        description: str | None = None,
    ) -> ReviewDimension:
        row = await self.gateway.insert(
            TABLE_REVIEW_DIMENSIONS, {"name": name, "description": description},
        )
        return ReviewDimension.model_validate(row)

    async def get_review_dimension(self, dimension_id: str) -> ReviewDimension:
        rows = await self.gateway.query(TABLE_REVIEW_DIMENSIONS, {"id": dimension_id})
        if not rows:
            raise NotFoundError(f"Review dimension '{dimension_id}' not found")
        return ReviewDimension.model_validate(rows[0])

    async def update_review_dimension(
        self,
        dimension_id: str,
        patch: dict[str, Any],
    ) -> ReviewDimension:
        _require_patch(patch)
        await self.get_review_dimension(dimension_id)
        await self.gateway.update(TABLE_REVIEW_DIMENSIONS, dimension_id, patch)
        return await self.get_review_dimension(dimension_id)

    async def delete_review_dimension(self, dimension_id: str) -> ReviewDimension:
        dimension = await self.get_review_dimension(dimension_id)
        await self.gateway.delete(TABLE_REVIEW_DIMENSIONS, dimension_id)
        return dimension

    # -- Runs and results --

    async def list_runs(self, scenario_id: str | None = None) -> list[Run]:
        filters = {"scenario_id": scenario_id} if scenario_id is not None else None
        rows = await self.gateway.query(TABLE_RUNS, filters)
        return [Run.model_validate(row) for row in rows]

    async def get_run(self, run_id: str) -> Run:
        rows = await self.gateway.query(TABLE_RUNS, {"id": run_id})
        if not rows:
            raise NotFoundError(f"Run '{run_id}' not found")
        return Run.model_validate(rows[0])

    async def create_run(
        self,
        scenario_id: str,
        system_version: str,
        project_id: str,
        link: str | None,
        user_id: str,
        state: RunState = RunState.paused,
    ) -> Run:
        row = await self.gateway.insert(
            TABLE_RUNS,
            {
                "scenario_id": scenario_id,
                "system_version": system_version,
                "project_id": project_id,
                "user_id": user_id,
                "link": link,
                "state": state.value,
            },
        )
        return Run.model_validate(row)

    async def start_paused_run(self, run_id: str) -> Any:
        """Ask the backend to start a paused run and return its raw answer.

        The paused -> running transition belongs to the backend; a falsy
        answer means it declined.
        """
        return await self.gateway.call_procedure(
            PROCEDURE_START_PAUSED_RUN, {"run_id": run_id},
        )

    async def add_result(
        self,
        run_id: str,
        reviewer_id: str,
        payload: dict[str, Any],
    ) -> Result:
        row = await self.gateway.insert(
            TABLE_RESULTS,
            {"run_id": run_id, "reviewer_id": reviewer_id, "result": payload},
        )
        return Result.model_validate(row)

    async def list_run_results(self, run_id: str) -> list[Result]:
        rows = await self.gateway.query(TABLE_RESULTS, {"run_id": run_id})
        return [Result.model_validate(row) for row in rows]

    # -- Secrets --

    async def list_user_secrets(self, user_id: str) -> list[UserSecret]:
        rows = await self.gateway.query(TABLE_USER_SECRETS, {"user_id": user_id})
        return [UserSecret.model_validate(row) for row in rows]

    async def get_user_secret(self, secret_id: str) -> UserSecret:
        rows = await self.gateway.query(TABLE_USER_SECRETS, {"id": secret_id})
        if not rows:
            raise NotFoundError(f"Secret '{secret_id}' not found")
        return UserSecret.model_validate(rows[0])

    async def delete_user_secret(self, secret_id: str) -> UserSecret:
        """Delete one secret row and return it."""
        secret = await self.get_user_secret(secret_id)
        await self.gateway.delete(TABLE_USER_SECRETS, secret_id)
        return secret

    async def load_test_token(self, user_id: str) -> str:
        """Resolve the user's bearer token for the target system.

        Raises:
            ConfigurationError: If the user has no usable token.
        """
        return extract_test_token(await self.list_user_secrets(user_id))

    async def set_test_token(self, user_id: str, token: str) -> UserSecret:
        """Store token in the user's first secret row, creating it if needed.

        Other keys already present in the secret JSON are preserved.

        Raises:
            ConfigurationError: If the existing row does not hold a JSON
                object. The row is left untouched.
        """
        secrets = await self.list_user_secrets(user_id)
        if not secrets:
            row = await self.gateway.insert(
                TABLE_USER_SECRETS,
                {"user_id": user_id, "secret": json.dumps({TEST_TOKEN_KEY: token})},
            )
            return UserSecret.model_validate(row)

        existing = secrets[0]
        try:
            payload = json.loads(existing.secret)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                f"Secret '{existing.id}' is not valid JSON ({exc.msg}); "
                "refusing to overwrite it. Delete it with 'benchmarker secrets delete' first."
            ) from exc
        if not isinstance(payload, dict):
            raise ConfigurationError(
                f"Secret '{existing.id}' is not a JSON object; refusing to overwrite it. "
                "Delete it with 'benchmarker secrets delete' first."
            )
        payload[TEST_TOKEN_KEY] = token
        secret = json.dumps(payload)
        await self.gateway.update(TABLE_USER_SECRETS, existing.id, {"secret": secret})
        return existing.model_copy(update={"secret": secret})
