"""ConsoleNotificationObserver - short user-facing notifications via Rich.

Fatal batch failures are shown with a generic message; the detail goes
to the log through StructlogBenchmarkObserver.
"""

from __future__ import annotations

from rich.console import Console

GENERIC_FAILURE_MESSAGE = "An error occurred while starting the benchmark. Please try again."
BATCH_SUCCESS_MESSAGE = "All benchmarks started successfully!"


class ConsoleNotificationObserver:
    """Prints one line per notable event.

    Does NOT inherit from BenchmarkObserver (structural typing via Protocol).
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def batch_started(
        self,
        batch_id: str,
        scenario_ids: list[str],
        system_version: str,
        user_id: str,
    ) -> None:
        self._console.print(
            f"[dim]Starting {len(scenario_ids)} scenario(s) against {system_version}[/dim]"
        )

    def scenario_started(
        self,
        batch_id: str,
        scenario_id: str,
        scenario_name: str,
        position: int,
        total: int,
    ) -> None:
        self._console.print(f"[dim]  [{position}/{total}] {scenario_name}[/dim]")

    def scenario_succeeded(
        self,
        batch_id: str,
        scenario_id: str,
        scenario_name: str,
        run_id: str,
        state: str,
        results_recorded: int,
    ) -> None:
        self._console.print(
            f"[green]✓[/green] Benchmark started for scenario: {scenario_name}"
        )

    def scenario_not_started(
        self,
        batch_id: str,
        scenario_id: str,
        scenario_name: str,
        run_id: str,
        reason: str,
    ) -> None:
        self._console.print(
            f"[yellow]![/yellow] Benchmark created but not started for scenario: {scenario_name}"
        )

    def batch_completed(
        self,
        batch_id: str,
        total_runs: int,
        elapsed_seconds: float,
    ) -> None:
        self._console.print(f"[bold green]{BATCH_SUCCESS_MESSAGE}[/bold green]")

    def batch_failed(
        self,
        batch_id: str,
        error_type: str,
        reason: str,
        recoverable: bool,
    ) -> None:
        message = reason if recoverable else GENERIC_FAILURE_MESSAGE
        self._console.print(f"[bold red]✗[/bold red] {message}")
