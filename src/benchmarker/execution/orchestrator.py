"""BenchmarkOrchestrator: runs selected scenarios against a target system.

For each selected scenario, strictly in selection order and one at a
time: impersonate a user, resolve the created project, persist a paused
run, ask the backend to start it, and record one result per reviewer.

The run-then-results sequence is a saga without compensation. A failure
part way through a batch leaves earlier runs (and a run whose results
were not all written) in place.
"""

from __future__ import annotations

import time
import uuid
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass, field

from benchmarker.errors import (
    BenchmarkError,
    ConfigurationError,
    NotFoundError,
    ValidationError,
    WarningCondition,
)
from benchmarker.impersonation.base import BaseImpersonator
from benchmarker.models.run import Result, Run
from benchmarker.models.scenario import Scenario
from benchmarker.observers.base import BenchmarkObserver
from benchmarker.storage.repository import BenchmarkRepository
from benchmarker.target import TargetSystemClient

_RECOVERABLE_ERRORS = (ValidationError, ConfigurationError)


def _check_selection(scenario_ids: Sequence[str], system_version: str) -> None:
    if not scenario_ids:
        raise ValidationError("Please select at least one scenario to run.")
    if not system_version.strip():
        raise ValidationError("Please select a system version.")


@dataclass
class ScenarioOutcome:
    """What one scenario of a batch produced.

    ``run`` is the row as re-read after the start request, so its state is
    whatever the backend reports. ``warning`` is set when the backend did
    not start the run.
    """

    scenario_id: str
    scenario_name: str
    run: Run
    results: list[Result]
    started: bool
    warning: WarningCondition | None = None


@dataclass
class BatchSummary:
    """Outcome of run_batch: per-scenario outcomes plus the halting error."""

    batch_id: str
    outcomes: list[ScenarioOutcome] = field(default_factory=list)
    error: Exception | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class BenchmarkOrchestrator:
    """Drives impersonation, project lookup and run bookkeeping per scenario.

    Args:
        repository: Typed access to the backend tables.
        impersonator: Client that provokes project creation on the target.
        target_client: Client for the target system's project endpoint.
        observer: Receives batch and scenario events.
        scenarios: The already-loaded scenario set, reviewers attached.
    """

    def __init__(
        self,
        repository: BenchmarkRepository,
        impersonator: BaseImpersonator,
        target_client: TargetSystemClient,
        observer: BenchmarkObserver,
        scenarios: Sequence[Scenario],
    ) -> None:
        self._repository = repository
        self._impersonator = impersonator
        self._target_client = target_client
        self._observer = observer
        self._scenarios = {scenario.id: scenario for scenario in scenarios}
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def run_benchmarks(
        self,
        scenario_ids: Sequence[str],
        system_version: str,
        user_id: str,
        batch_id: str | None = None,
    ) -> AsyncIterator[ScenarioOutcome]:
        """Run each selected scenario and yield its outcome.

        Preconditions are checked before any gateway or network call: the
        selection must be non-empty, the system version non-blank, and
        the user's test token resolvable.

        Raises:
            ValidationError: Empty selection or blank system version.
            ConfigurationError: The user has no usable test token.
            NotFoundError: A selected id is not in the loaded scenario set.
            UpstreamError: Impersonation or project lookup failed.
            GatewayError: The backend rejected a write or the start call.
        """
        _check_selection(scenario_ids, system_version)

        batch_id = batch_id or str(uuid.uuid4())
        token = await self._repository.load_test_token(user_id)

        total = len(scenario_ids)
        for position, scenario_id in enumerate(scenario_ids, 1):
            scenario = self._scenarios.get(scenario_id)
            if scenario is None:
                raise NotFoundError(f"Scenario '{scenario_id}' not found")

            self._observer.scenario_started(
                batch_id=batch_id,
                scenario_id=scenario.id,
                scenario_name=scenario.name,
                position=position,
                total=total,
            )
            yield await self._run_scenario(
                batch_id, scenario, system_version, user_id, token,
            )

    async def _run_scenario(
        self,
        batch_id: str,
        scenario: Scenario,
        system_version: str,
        user_id: str,
        token: str,
    ) -> ScenarioOutcome:
        outcome = await self._impersonator.impersonate(
            scenario.prompt, system_version, scenario.llm_temperature,
        )
        project = await self._target_client.fetch_project(
            system_version, outcome.project_id, token,
        )

        run = await self._repository.create_run(
            scenario_id=scenario.id,
            system_version=system_version,
            project_id=outcome.project_id,
            link=project.link,
            user_id=user_id,
        )
        started = bool(await self._repository.start_paused_run(run.id))

        payload = {
            "impersonation": outcome.transcript,
            "system_version": system_version,
            "project_id": outcome.project_id,
        }
        results = [
            await self._repository.add_result(run.id, reviewer.id, payload)
            for reviewer in scenario.reviewers
        ]

        run = await self._repository.get_run(run.id)
        warning: WarningCondition | None = None
        if started:
            self._observer.scenario_succeeded(
                batch_id=batch_id,
                scenario_id=scenario.id,
                scenario_name=scenario.name,
                run_id=run.id,
                state=run.state,
                results_recorded=len(results),
            )
        else:
            warning = WarningCondition(
                f"Benchmark created but not started for scenario: {scenario.name}"
            )
            self._observer.scenario_not_started(
                batch_id=batch_id,
                scenario_id=scenario.id,
                scenario_name=scenario.name,
                run_id=run.id,
                reason=warning.message,
            )

        return ScenarioOutcome(
            scenario_id=scenario.id,
            scenario_name=scenario.name,
            run=run,
            results=results,
            started=started,
            warning=warning,
        )

    async def run_batch(
        self,
        scenario_ids: Sequence[str],
        system_version: str,
        user_id: str,
    ) -> BatchSummary:
        """Run a batch to completion or to its first fatal error.

        This is the batch boundary: any error raised while running is
        caught here once, reported through the observer, and returned in
        the summary. Earlier outcomes are kept.

        Raises:
            ValidationError: If another batch is still running on this
                orchestrator.
        """
        if self._running:
            raise ValidationError("A benchmark batch is already running.")

        batch_id = str(uuid.uuid4())
        summary = BatchSummary(batch_id=batch_id)
        self._running = True
        started_at = time.perf_counter()
        try:
            _check_selection(scenario_ids, system_version)
            self._observer.batch_started(
                batch_id=batch_id,
                scenario_ids=list(scenario_ids),
                system_version=system_version,
                user_id=user_id,
            )
            async for outcome in self.run_benchmarks(
                scenario_ids, system_version, user_id, batch_id=batch_id,
            ):
                summary.outcomes.append(outcome)
        except Exception as exc:
            summary.error = exc
            reason = exc.message if isinstance(exc, BenchmarkError) else str(exc)
            self._observer.batch_failed(
                batch_id=batch_id,
                error_type=type(exc).__name__,
                reason=reason,
                recoverable=isinstance(exc, _RECOVERABLE_ERRORS),
            )
        else:
            self._observer.batch_completed(
                batch_id=batch_id,
                total_runs=len(summary.outcomes),
                elapsed_seconds=time.perf_counter() - started_at,
            )
        finally:
            self._running = False

        return summary
