"""Rich terminal output for batches, runs, reports and catalogue listings."""

from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING, Any

from rich import box
from rich.console import Console
from rich.table import Table

from benchmarker.evaluation.aggregation import UNKNOWN_DIMENSION

if TYPE_CHECKING:
    from benchmarker.evaluation.report import RunReport
    from benchmarker.execution.orchestrator import BatchSummary
    from benchmarker.models.run import Run
    from benchmarker.models.scenario import ReviewDimension, Reviewer, Scenario
    from benchmarker.models.secret import UserSecret

# Run state -> Rich style
_STATE_STYLES: dict[str, str] = {
    "created": "dim",
    "paused": "yellow",
    "running": "bold blue",
    "completed": "bold green",
    "failed": "bold red",
}

SCORE_BAR_WIDTH = 10


def _state_markup(state: str) -> str:
    style = _STATE_STYLES.get(state, "bold")
    return f"[{style}]{state}[/{style}]"


def score_bar(score: float) -> str:
    """Render a 0-10 score as a coloured bar, e.g. '███████░░░ 7.0'."""
    filled = max(0, min(SCORE_BAR_WIDTH, round(score)))
    if score >= 7:
        color = "green"
    elif score >= 4:
        color = "yellow"
    else:
        color = "red"
    bar = "█" * filled + "░" * (SCORE_BAR_WIDTH - filled)
    return f"[{color}]{bar}[/{color}] [bold]{score:.1f}[/bold]"


def render_batch_summary(summary: BatchSummary, console: Console) -> None:
    """Render a table of the runs a batch created."""
    if not summary.outcomes:
        return

    table = Table(box=box.ROUNDED, title="Runs Created")
    table.add_column("Scenario")
    table.add_column("Run ID")
    table.add_column("State")
    table.add_column("Results", justify="right")
    table.add_column("Link")

    for outcome in summary.outcomes:
        table.add_row(
            outcome.scenario_name,
            outcome.run.id,
            _state_markup(outcome.run.state),
            str(len(outcome.results)),
            outcome.run.link or "-",
        )

    console.print()
    console.print(table)


def render_run_report(report: RunReport, console: Console) -> None:
    """Render run details, per-dimension averages and reviewer results."""
    run = report.run
    console.print()
    console.print("[bold]Run Details[/bold]")
    details = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    details.add_column("Key", style="bold")
    details.add_column("Value")
    details.add_row("ID", run.id)
    details.add_row("Project ID", run.project_id)
    details.add_row("System Version", run.system_version)
    details.add_row("State", _state_markup(run.state))
    details.add_row(
        "Created At",
        run.created_at.strftime("%Y-%m-%d %H:%M:%S") if run.created_at else "-",
    )
    if run.link:
        details.add_row("Project", run.link)
    console.print(details)

    console.print("[bold]Average Scores by Dimension[/bold]")
    if report.scores:
        scores = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
        scores.add_column("Dimension", style="bold")
        scores.add_column("Score")
        scores.add_column("Reviews", justify="right", style="dim")
        for entry in report.scores:
            scores.add_row(entry.dimension, score_bar(entry.average_score), f"n={entry.count}")
        console.print(scores)
    else:
        console.print("[dim]No scored results yet.[/dim]")
        console.print()

    if report.results:
        console.print("[bold]Reviewer Results[/bold]")
        results = Table(box=box.ROUNDED)
        results.add_column("Result ID")
        results.add_column("Dimension")
        results.add_column("Score", justify="right")
        for result in report.results:
            reviewer = report.reviewers.get(result.reviewer_id)
            score = result.score
            results.add_row(
                result.id,
                reviewer.dimension if reviewer else UNKNOWN_DIMENSION,
                f"{score:.1f}" if score is not None else "[dim]pending[/dim]",
            )
        console.print(results)

    if report.inconsistent_result_ids:
        console.print(
            f"[yellow]Warning: {len(report.inconsistent_result_ids)} result(s) "
            f"reference reviewers outside this run's scenario.[/yellow]"
        )


def render_runs(
    runs: list[Run],
    scenarios: dict[str, Scenario],
    console: Console,
) -> None:
    """Render a history table of runs."""
    if not runs:
        console.print("[dim]No runs found. Run 'benchmarker run' first.[/dim]")
        return

    table = Table(box=box.ROUNDED, title="Runs")
    table.add_column("Run ID")
    table.add_column("Scenario")
    table.add_column("System Version")
    table.add_column("State")
    table.add_column("Created At")

    for run in runs:
        scenario = scenarios.get(run.scenario_id)
        table.add_row(
            run.id,
            scenario.name if scenario else run.scenario_id,
            run.system_version,
            _state_markup(run.state),
            run.created_at.strftime("%Y-%m-%d %H:%M") if run.created_at else "-",
        )
    console.print(table)


def render_scenarios(scenarios: list[Scenario], console: Console) -> None:
    """Render the scenario catalogue."""
    if not scenarios:
        console.print(
            "[dim]No scenarios found. Import one with 'benchmarker scenarios import'.[/dim]"
        )
        return

    table = Table(box=box.ROUNDED, title="Scenarios")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Model")
    table.add_column("Temp.", justify="right")
    table.add_column("Reviewers")

    for scenario in scenarios:
        temperature = scenario.llm_temperature
        table.add_row(
            scenario.id,
            scenario.name,
            scenario.llm_model or "-",
            f"{temperature:.1f}" if temperature is not None else "-",
            ", ".join(r.dimension for r in scenario.reviewers) or "-",
        )
    console.print(table)


def render_reviewers(reviewers: list[Reviewer], console: Console) -> None:
    if not reviewers:
        console.print("[dim]No reviewers found.[/dim]")
        return

    table = Table(box=box.ROUNDED, title="Reviewers")
    table.add_column("ID")
    table.add_column("Scenario")
    table.add_column("Dimension")
    table.add_column("Weight", justify="right")
    table.add_column("Model")
    table.add_column("Runs", justify="right")

    for reviewer in reviewers:
        table.add_row(
            reviewer.id,
            reviewer.scenario_id,
            reviewer.dimension,
            f"{reviewer.weight:g}",
            reviewer.llm_model or "-",
            str(reviewer.run_count),
        )
    console.print(table)


def render_dimensions(dimensions: list[ReviewDimension], console: Console) -> None:
    if not dimensions:
        console.print(
            "[dim]No review dimensions found. Add one with 'benchmarker dimensions add'.[/dim]"
        )
        return

    table = Table(box=box.ROUNDED, title="Review Dimensions")
    table.add_column("ID")
    table.add_column("Name")
    table.add_column("Description")
    for dimension in dimensions:
        table.add_row(dimension.id, dimension.name, dimension.description or "-")
    console.print(table)


def render_secrets(secrets: list[UserSecret], console: Console) -> None:
    """Render a user's secret rows by key name. Values are never shown."""
    if not secrets:
        console.print("[dim]No secrets stored for this user.[/dim]")
        return

    table = Table(box=box.ROUNDED, title="User Secrets")
    table.add_column("ID")
    table.add_column("Keys")
    table.add_column("Created At")
    for secret in secrets:
        try:
            payload = json.loads(secret.secret)
        except json.JSONDecodeError:
            keys = "[red]not valid JSON[/red]"
        else:
            keys = ", ".join(payload) if isinstance(payload, dict) else "[red]not an object[/red]"
        table.add_row(
            secret.id,
            keys or "-",
            secret.created_at.strftime("%Y-%m-%d %H:%M") if secret.created_at else "-",
        )
    console.print(table)


def render_versions(versions: list[str], default: str, console: Console) -> None:
    table = Table(box=box.SIMPLE, show_header=False, padding=(0, 2))
    table.add_column("Version")
    table.add_column("Default", style="dim")
    for version in versions:
        table.add_row(version, "default" if version == default else "")
    console.print(table)


def output_json(data: Any) -> None:
    """Write data as pure JSON to stdout for machine consumption."""
    sys.stdout.write(json.dumps(data, indent=2, ensure_ascii=False, default=str))
    sys.stdout.write("\n")
