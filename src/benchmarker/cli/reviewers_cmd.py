"""benchmarker reviewers -- manage the reviewers attached to scenarios."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from pydantic import ValidationError as PydanticValidationError
from rich.console import Console

from benchmarker.cli.output import output_json, render_reviewers
from benchmarker.cli.workspace import open_workspace
from benchmarker.errors import BenchmarkError
from benchmarker.models.scenario import ReviewerDefinition

reviewers_app = typer.Typer(
    name="reviewers",
    help="List, add, update and delete scenario reviewers.",
    no_args_is_help=True,
)

console = Console()


def _fail(exc: BenchmarkError) -> typer.Exit:
    console.print(f"[red]Error:[/red] {exc.message}")
    return typer.Exit(code=1)


@reviewers_app.command("list")
def list_reviewers(
    scenario_id: Optional[str] = typer.Option(
        None, "--scenario", "-s", help="Only show reviewers of this scenario ID"
    ),
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
) -> None:
    """List reviewers, optionally for one scenario."""
    asyncio.run(_list_async(scenario_id, format_json=format_json))


async def _list_async(scenario_id: str | None, *, format_json: bool) -> None:
    try:
        async with open_workspace() as workspace:
            reviewers = await workspace.repository.list_reviewers(scenario_id=scenario_id)
    except BenchmarkError as exc:
        raise _fail(exc)

    if format_json:
        output_json([reviewer.model_dump(mode="json") for reviewer in reviewers])
        return
    render_reviewers(reviewers, console)


@reviewers_app.command("add")
def add_reviewer(
    scenario_id: str = typer.Argument(..., help="Scenario the reviewer scores"),
    dimension: str = typer.Option(..., "--dimension", "-d", help="Dimension it scores"),
    prompt: str = typer.Option(..., "--prompt", help="Review prompt"),
    description: str = typer.Option("", "--description", help="What the reviewer checks"),
    weight: float = typer.Option(1.0, "--weight", help="Relative weight"),
    llm_model: str = typer.Option("gpt-4o", "--model", help="Model the reviewer runs on"),
    llm_temperature: float = typer.Option(0.0, "--temperature", help="Reviewer temperature"),
    run_count: int = typer.Option(1, "--run-count", help="Reviews per run"),
) -> None:
    """Attach a new reviewer to a scenario."""
    try:
        definition = ReviewerDefinition(
            dimension=dimension,
            prompt=prompt,
            description=description,
            weight=weight,
            llm_model=llm_model,
            llm_temperature=llm_temperature,
            run_count=run_count,
        )
    except PydanticValidationError as exc:
        for error in exc.errors():
            field = ".".join(str(part) for part in error["loc"])
            console.print(f"[red]Error:[/red] {field}: {error['msg']}")
        raise typer.Exit(code=1)
    asyncio.run(_add_async(scenario_id, definition))


async def _add_async(scenario_id: str, definition: ReviewerDefinition) -> None:
    try:
        async with open_workspace() as workspace:
            reviewer = await workspace.repository.add_reviewer(scenario_id, definition)
    except BenchmarkError as exc:
        raise _fail(exc)
    console.print(
        f"[green]Added[/green] {reviewer.dimension} reviewer {reviewer.id} to {scenario_id}"
    )


@reviewers_app.command("update")
def update_reviewer(
    reviewer_id: str = typer.Argument(..., help="ID of the reviewer to update"),
    dimension: Optional[str] = typer.Option(None, "--dimension", "-d", help="New dimension"),
    prompt: Optional[str] = typer.Option(None, "--prompt", help="New review prompt"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    weight: Optional[float] = typer.Option(None, "--weight", min=0.0, help="New weight"),
    llm_model: Optional[str] = typer.Option(None, "--model", help="New reviewer model"),
    llm_temperature: Optional[float] = typer.Option(
        None, "--temperature", min=0.0, max=2.0, help="New reviewer temperature"
    ),
    run_count: Optional[int] = typer.Option(None, "--run-count", min=1, help="Reviews per run"),
) -> None:
    """Change fields of a reviewer."""
    patch = {
        key: value
        for key, value in {
            "dimension": dimension,
            "prompt": prompt,
            "description": description,
            "weight": weight,
            "llm_model": llm_model,
            "llm_temperature": llm_temperature,
            "run_count": run_count,
        }.items()
        if value is not None
    }
    asyncio.run(_update_async(reviewer_id, patch))


async def _update_async(reviewer_id: str, patch: dict) -> None:
    try:
        async with open_workspace() as workspace:
            reviewer = await workspace.repository.update_reviewer(reviewer_id, patch)
    except BenchmarkError as exc:
        raise _fail(exc)
    console.print(f"Updated reviewer {reviewer.id} ({reviewer.dimension}): {', '.join(patch)}")


@reviewers_app.command("delete")
def delete_reviewer(
    reviewer_id: str = typer.Argument(..., help="ID of the reviewer to delete"),
) -> None:
    """Delete a reviewer. Results it already produced are kept."""
    asyncio.run(_delete_async(reviewer_id))


async def _delete_async(reviewer_id: str) -> None:
    try:
        async with open_workspace() as workspace:
            reviewer = await workspace.repository.delete_reviewer(reviewer_id)
    except BenchmarkError as exc:
        raise _fail(exc)
    console.print(f"Deleted {reviewer.dimension} reviewer {reviewer_id}")
