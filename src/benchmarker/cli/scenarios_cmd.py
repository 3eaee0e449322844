"""benchmarker scenarios -- manage the stored scenario catalogue."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console

from benchmarker.cli.output import output_json, render_scenarios
from benchmarker.cli.validate_cmd import check_files, resolve_scenario_files
from benchmarker.cli.workspace import open_workspace
from benchmarker.errors import BenchmarkError
from benchmarker.loader.errors import ErrorFormatter
from benchmarker.models.scenario import ScenarioDefinition

scenarios_app = typer.Typer(
    name="scenarios",
    help="List, import, update and delete benchmark scenarios.",
    no_args_is_help=True,
)

console = Console()


def _fail(exc: BenchmarkError) -> typer.Exit:
    console.print(f"[red]Error:[/red] {exc.message}")
    return typer.Exit(code=1)


@scenarios_app.command("list")
def list_scenarios(
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
) -> None:
    """List stored scenarios with their reviewers."""
    asyncio.run(_list_async(format_json=format_json))


async def _list_async(*, format_json: bool) -> None:
    try:
        async with open_workspace() as workspace:
            scenarios = await workspace.repository.load_scenarios()
    except BenchmarkError as exc:
        raise _fail(exc)

    if format_json:
        output_json([scenario.model_dump(mode="json") for scenario in scenarios])
        return
    render_scenarios(scenarios, console)


@scenarios_app.command("import")
def import_scenarios(
    files: Optional[list[str]] = typer.Argument(
        None, help="Scenario YAML files to import (default: all in scenarios/)"
    ),
) -> None:
    """Validate scenario YAML files and store them with their reviewers.

    Nothing is stored unless every file is valid.
    """
    paths = resolve_scenario_files(files)
    checked = check_files(paths, ErrorFormatter(ci_mode=False))
    if any(errors for _, _, errors in checked):
        typer.echo("No scenarios imported.")
        raise typer.Exit(code=1)

    definitions = [definition for _, definition, _ in checked if definition is not None]
    asyncio.run(_import_async(definitions))


async def _import_async(definitions: list[ScenarioDefinition]) -> None:
    try:
        async with open_workspace() as workspace:
            for definition in definitions:
                scenario = await workspace.repository.add_scenario(definition)
                console.print(
                    f"[green]Imported[/green] {scenario.name} "
                    f"({scenario.id}, {len(scenario.reviewers)} reviewer(s))"
                )
    except BenchmarkError as exc:
        raise _fail(exc)


@scenarios_app.command("delete")
def delete_scenario(
    scenario_id: str = typer.Argument(..., help="ID of the scenario to delete"),
) -> None:
    """Delete a scenario and its reviewers."""
    asyncio.run(_delete_async(scenario_id))


async def _delete_async(scenario_id: str) -> None:
    try:
        async with open_workspace() as workspace:
            scenario = await workspace.repository.delete_scenario(scenario_id)
    except BenchmarkError as exc:
        raise _fail(exc)
    console.print(f"Deleted scenario {scenario.name} ({scenario_id})")


@scenarios_app.command("update")
def update_scenario(
    scenario_id: str = typer.Argument(..., help="ID of the scenario to update"),
    name: Optional[str] = typer.Option(None, "--name", help="New scenario name"),
    prompt: Optional[str] = typer.Option(None, "--prompt", help="New initial request"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
    llm_model: Optional[str] = typer.Option(None, "--model", help="Model for impersonation"),
    llm_temperature: Optional[float] = typer.Option(
        None, "--temperature", min=0.0, max=2.0, help="Impersonation temperature"
    ),
) -> None:
    """Change fields of a stored scenario. Reviewers are left as they are."""
    patch = {
        key: value
        for key, value in {
            "name": name,
            "prompt": prompt,
            "description": description,
            "llm_model": llm_model,
            "llm_temperature": llm_temperature,
        }.items()
        if value is not None
    }
    asyncio.run(_update_async(scenario_id, patch))


async def _update_async(scenario_id: str, patch: dict) -> None:
    try:
        async with open_workspace() as workspace:
            scenario = await workspace.repository.update_scenario(scenario_id, patch)
    except BenchmarkError as exc:
        raise _fail(exc)
    console.print(f"Updated scenario {scenario.name} ({scenario.id}): {', '.join(patch)}")
