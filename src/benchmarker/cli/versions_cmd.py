"""benchmarker versions -- list the target system versions a run can use."""

from __future__ import annotations

import typer
from rich.console import Console

from benchmarker.cli.output import output_json, render_versions
from benchmarker.cli.workspace import load_workspace_config
from benchmarker.errors import BenchmarkError


def versions(
    format_json: bool = typer.Option(False, "--json", help="Output pure JSON to stdout"),
) -> None:
    """List the configured system versions, default first."""
    console = Console()
    try:
        config = load_workspace_config()
    except BenchmarkError as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(code=1)

    selectable = config.selectable_versions()
    if format_json:
        output_json({"default": config.system_version, "versions": selectable})
        return
    render_versions(selectable, config.system_version, console)
