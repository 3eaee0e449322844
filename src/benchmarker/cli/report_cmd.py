"""benchmarker result / runs -- inspect stored runs and their scores.

``result`` shows one run with its per-dimension average scores and the
reviewer results behind them. ``runs`` lists run history, optionally
for a single scenario.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console

from benchmarker.cli.output import output_json, render_run_report, render_runs
from benchmarker.cli.workspace import open_workspace
from benchmarker.errors import BenchmarkError, NotFoundError
from benchmarker.evaluation.report import build_run_report


def result(
    run_id: str = typer.Argument(..., help="Run ID to display"),
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
) -> None:
    """Show a run's details and average scores by dimension."""
    asyncio.run(_result_async(run_id, format_json=format_json))


async def _result_async(run_id: str, *, format_json: bool) -> None:
    console = Console()
    try:
        async with open_workspace() as workspace:
            report = await build_run_report(workspace.repository, run_id)
    except NotFoundError:
        console.print(f"Run '{run_id}' not found.")
        raise typer.Exit(code=1)
    except BenchmarkError as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(code=1)

    if format_json:
        output_json(report.to_dict())
        return
    render_run_report(report, console)


def runs(
    scenario: Optional[str] = typer.Option(
        None, "--scenario", "-s", help="Only show runs of this scenario ID"
    ),
    limit: int = typer.Option(20, "--limit", "-l", help="Number of most recent runs to show"),
) -> None:
    """List benchmark runs, newest last."""
    asyncio.run(_runs_async(scenario, limit=limit))


async def _runs_async(scenario: str | None, *, limit: int) -> None:
    console = Console()
    try:
        async with open_workspace() as workspace:
            history = await workspace.repository.list_runs(scenario_id=scenario)
            scenarios = {s.id: s for s in await workspace.repository.list_scenarios()}
    except BenchmarkError as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(code=1)

    history.sort(key=lambda run: (run.created_at is None, run.created_at))
    render_runs(history[-limit:] if limit > 0 else history, scenarios, console)
