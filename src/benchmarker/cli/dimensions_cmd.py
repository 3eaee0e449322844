"""benchmarker dimensions -- manage the catalogue of review dimensions."""

from __future__ import annotations

import asyncio
from typing import Optional

import typer
from rich.console import Console

from benchmarker.cli.output import output_json, render_dimensions
from benchmarker.cli.workspace import open_workspace
from benchmarker.errors import BenchmarkError

dimensions_app = typer.Typer(
    name="dimensions",
    help="List, add, update and delete review dimensions.",
    no_args_is_help=True,
)

console = Console()


def _fail(exc: BenchmarkError) -> typer.Exit:
    console.print(f"[red]Error:[/red] {exc.message}")
    return typer.Exit(code=1)


@dimensions_app.command("list")
def list_dimensions(
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
) -> None:
    """List review dimensions."""
    asyncio.run(_list_async(format_json=format_json))


async def _list_async(*, format_json: bool) -> None:
    try:
        async with open_workspace() as workspace:
            dimensions = await workspace.repository.list_review_dimensions()
    except BenchmarkError as exc:
        raise _fail(exc)

    if format_json:
        output_json([dimension.model_dump(mode="json") for dimension in dimensions])
        return
    render_dimensions(dimensions, console)


@dimensions_app.command("add")
def add_dimension(
    name: str = typer.Argument(..., help="Dimension name, e.g. clarity"),
    description: Optional[str] = typer.Option(None, "--description", help="What it measures"),
) -> None:
    """Add a review dimension."""
    asyncio.run(_add_async(name, description))


async def _add_async(name: str, description: str | None) -> None:
    try:
        async with open_workspace() as workspace:
            dimension = await workspace.repository.add_review_dimension(name, description)
    except BenchmarkError as exc:
        raise _fail(exc)
    console.print(f"[green]Added[/green] dimension {dimension.name} ({dimension.id})")


@dimensions_app.command("update")
def update_dimension(
    dimension_id: str = typer.Argument(..., help="ID of the dimension to update"),
    name: Optional[str] = typer.Option(None, "--name", help="New name"),
    description: Optional[str] = typer.Option(None, "--description", help="New description"),
) -> None:
    """Rename a review dimension or change its description."""
    patch = {
        key: value
        for key, value in {"name": name, "description": description}.items()
        if value is not None
    }
    asyncio.run(_update_async(dimension_id, patch))


async def _update_async(dimension_id: str, patch: dict) -> None:
    try:
        async with open_workspace() as workspace:
            dimension = await workspace.repository.update_review_dimension(dimension_id, patch)
    except BenchmarkError as exc:
        raise _fail(exc)
    console.print(f"Updated dimension {dimension.name} ({dimension.id})")


@dimensions_app.command("delete")
def delete_dimension(
    dimension_id: str = typer.Argument(..., help="ID of the dimension to delete"),
) -> None:
    """Delete a review dimension. Reviewers keep their dimension name."""
    asyncio.run(_delete_async(dimension_id))


async def _delete_async(dimension_id: str) -> None:
    try:
        async with open_workspace() as workspace:
            dimension = await workspace.repository.delete_review_dimension(dimension_id)
    except BenchmarkError as exc:
        raise _fail(exc)
    console.print(f"Deleted dimension {dimension.name} ({dimension_id})")
