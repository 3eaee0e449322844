"""StructlogBenchmarkObserver - logs orchestration events to structlog."""

from __future__ import annotations

import structlog


class StructlogBenchmarkObserver:
    """Logs every orchestration event, including full failure detail.

    Does NOT inherit from BenchmarkObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger("benchmarker")

    def batch_started(
        self,
        batch_id: str,
        scenario_ids: list[str],
        system_version: str,
        user_id: str,
    ) -> None:
        self._log.info(
            "batch.started",
            batch_id=batch_id,
            scenario_ids=scenario_ids,
            total_scenarios=len(scenario_ids),
            system_version=system_version,
            user_id=user_id,
        )

    def scenario_started(
        self,
        batch_id: str,
        scenario_id: str,
        scenario_name: str,
        position: int,
        total: int,
    ) -> None:
        self._log.info(
            "scenario.started",
            batch_id=batch_id,
            scenario_id=scenario_id,
            scenario_name=scenario_name,
            position=position,
            total=total,
        )

    def scenario_succeeded(
        self,
        batch_id: str,
        scenario_id: str,
        scenario_name: str,
        run_id: str,
        state: str,
        results_recorded: int,
    ) -> None:
        self._log.info(
            "scenario.succeeded",
            batch_id=batch_id,
            scenario_id=scenario_id,
            scenario_name=scenario_name,
            run_id=run_id,
            state=state,
            results_recorded=results_recorded,
        )

    def scenario_not_started(
        self,
        batch_id: str,
        scenario_id: str,
        scenario_name: str,
        run_id: str,
        reason: str,
    ) -> None:
        self._log.warning(
            "scenario.not_started",
            batch_id=batch_id,
            scenario_id=scenario_id,
            scenario_name=scenario_name,
            run_id=run_id,
            reason=reason,
        )

    def batch_completed(
        self,
        batch_id: str,
        total_runs: int,
        elapsed_seconds: float,
    ) -> None:
        self._log.info(
            "batch.completed",
            batch_id=batch_id,
            total_runs=total_runs,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def batch_failed(
        self,
        batch_id: str,
        error_type: str,
        reason: str,
        recoverable: bool,
    ) -> None:
        self._log.error(
            "batch.failed",
            batch_id=batch_id,
            error_type=error_type,
            reason=reason,
            recoverable=recoverable,
        )
