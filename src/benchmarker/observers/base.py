"""Observer port for benchmark orchestration events."""

from __future__ import annotations

from typing import Protocol


class BenchmarkObserver(Protocol):
    """Receives structured events while a batch of scenarios runs.

    Implementations may log to structlog, notify the user on the console,
    or record events for tests.
    """

    def batch_started(
        self,
        batch_id: str,
        scenario_ids: list[str],
        system_version: str,
        user_id: str,
    ) -> None: ...

    def scenario_started(
        self,
        batch_id: str,
        scenario_id: str,
        scenario_name: str,
        position: int,
        total: int,
    ) -> None: ...

    def scenario_succeeded(
        self,
        batch_id: str,
        scenario_id: str,
        scenario_name: str,
        run_id: str,
        state: str,
        results_recorded: int,
    ) -> None: ...

    def scenario_not_started(
        self,
        batch_id: str,
        scenario_id: str,
        scenario_name: str,
        run_id: str,
        reason: str,
    ) -> None: ...

    def batch_completed(
        self,
        batch_id: str,
        total_runs: int,
        elapsed_seconds: float,
    ) -> None: ...

    def batch_failed(
        self,
        batch_id: str,
        error_type: str,
        reason: str,
        recoverable: bool,
    ) -> None: ...
