"""CompositeBenchmarkObserver - fans out every event to a list of observers."""

from __future__ import annotations

from benchmarker.observers.base import BenchmarkObserver


class CompositeBenchmarkObserver:
    """Delegates every event to each observer in order.

    Does NOT inherit from BenchmarkObserver (structural typing via Protocol).
    """

    def __init__(self, observers: list[BenchmarkObserver]) -> None:
        self._observers = observers

    def batch_started(
        self,
        batch_id: str,
        scenario_ids: list[str],
        system_version: str,
        user_id: str,
    ) -> None:
        for obs in self._observers:
            obs.batch_started(
                batch_id=batch_id,
                scenario_ids=scenario_ids,
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
        for obs in self._observers:
            obs.scenario_started(
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
        for obs in self._observers:
            obs.scenario_succeeded(
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
        for obs in self._observers:
            obs.scenario_not_started(
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
        for obs in self._observers:
            obs.batch_completed(
                batch_id=batch_id,
                total_runs=total_runs,
                elapsed_seconds=elapsed_seconds,
            )

    def batch_failed(
        self,
        batch_id: str,
        error_type: str,
        reason: str,
        recoverable: bool,
    ) -> None:
        for obs in self._observers:
            obs.batch_failed(
                batch_id=batch_id,
                error_type=error_type,
                reason=reason,
                recoverable=recoverable,
            )
