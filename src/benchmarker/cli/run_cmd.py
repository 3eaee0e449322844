"""benchmarker run -- start benchmark runs for selected scenarios.

Loads the scenario catalogue, resolves the impersonator and the target
system client from benchmarker.yaml, runs the batch through
BenchmarkOrchestrator, and exits 0 when every selected scenario was
started (or created with a warning) and 1 when the batch halted.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console

from benchmarker.cli.output import output_json, render_batch_summary
from benchmarker.cli.workspace import open_workspace
from benchmarker.errors import BenchmarkError
from benchmarker.execution.orchestrator import BatchSummary, BenchmarkOrchestrator
from benchmarker.impersonation.registry import get_impersonator
from benchmarker.observers import (
    CompositeBenchmarkObserver,
    ConsoleNotificationObserver,
    StructlogBenchmarkObserver,
)
from benchmarker.target import TargetSystemClient

console = Console(stderr=True)


def run(
    scenario_ids: Optional[list[str]] = typer.Argument(
        None, help="Scenario IDs to run, in the order given"
    ),
    all_scenarios: bool = typer.Option(False, "--all", help="Run every stored scenario"),
    system_version: Optional[str] = typer.Option(
        None,
        "--system-version",
        "-s",
        help="Base URL of the target system version (see 'benchmarker versions')",
    ),
    user_id: Optional[str] = typer.Option(
        None, "--user", "-u", help="User whose test token authorizes project lookups"
    ),
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
) -> None:
    """Start one benchmark run per selected scenario."""
    asyncio.run(
        _run_async(
            scenario_ids or [],
            all_scenarios=all_scenarios,
            system_version=system_version,
            user_id=user_id,
            format_json=format_json,
        )
    )


def _summary_dict(summary: BatchSummary) -> dict:
    error = summary.error
    return {
        "batch_id": summary.batch_id,
        "succeeded": summary.succeeded,
        "error": (
            {
                "type": type(error).__name__,
                "message": error.message if isinstance(error, BenchmarkError) else str(error),
            }
            if error is not None
            else None
        ),
        "runs": [
            {
                "scenario_id": outcome.scenario_id,
                "scenario_name": outcome.scenario_name,
                "run_id": outcome.run.id,
                "project_id": outcome.run.project_id,
                "state": outcome.run.state,
                "started": outcome.started,
                "results_recorded": len(outcome.results),
                "warning": outcome.warning.message if outcome.warning else None,
            }
            for outcome in summary.outcomes
        ],
    }


async def _run_async(
    scenario_ids: list[str],
    *,
    all_scenarios: bool,
    system_version: str | None,
    user_id: str | None,
    format_json: bool,
) -> None:
    try:
        async with open_workspace() as workspace:
            config = workspace.config
            user = user_id or config.user_id
            if not user:
                console.print(
                    "[red]Error:[/red] No user specified. "
                    "Pass --user or set user_id in benchmarker.yaml."
                )
                raise typer.Exit(code=1)

            version = system_version if system_version is not None else config.system_version
            if version not in config.selectable_versions():
                console.print(
                    f"[yellow]Warning:[/yellow] System version {version} is not listed in "
                    "benchmarker.yaml. See 'benchmarker versions'."
                )
            scenarios = await workspace.repository.load_scenarios()
            selection = [s.id for s in scenarios] if all_scenarios else scenario_ids

            observer = CompositeBenchmarkObserver([
                StructlogBenchmarkObserver(),
                ConsoleNotificationObserver(console),
            ])
            impersonator = get_impersonator(config.impersonation, config.http_timeout_seconds)
            target_client = TargetSystemClient(timeout=config.http_timeout_seconds)
            try:
                orchestrator = BenchmarkOrchestrator(
                    repository=workspace.repository,
                    impersonator=impersonator,
                    target_client=target_client,
                    observer=observer,
                    scenarios=scenarios,
                )
                summary = await orchestrator.run_batch(selection, version, user)
            finally:
                await impersonator.aclose()
                await target_client.aclose()
    except BenchmarkError as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(code=1)

    if format_json:
        output_json(_summary_dict(summary))
    else:
        render_batch_summary(summary, console)

    raise typer.Exit(code=0 if summary.succeeded else 1)
