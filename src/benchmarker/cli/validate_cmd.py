"""benchmarker validate -- check scenario definition files.

Validates YAML scenario definitions against the ScenarioDefinition
schema, reporting every error at once with rich or CI-friendly output.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from benchmarker.loader.errors import ErrorFormatter
from benchmarker.loader.validator import ValidationErrorDetail, validate_scenario_file
from benchmarker.models.scenario import ScenarioDefinition


def resolve_scenario_files(paths: list[str] | None) -> list[Path]:
    """Turn CLI arguments into scenario files, defaulting to scenarios/.

    Raises:
        typer.Exit: If a named file is missing or nothing was found.
    """
    files: list[Path] = []
    if paths:
        for entry in paths:
            path = Path(entry)
            if not path.exists():
                typer.echo(f"Error: File not found: {entry}", err=True)
                raise typer.Exit(code=1)
            files.append(path)
        return files

    scenarios_dir = Path.cwd() / "scenarios"
    if scenarios_dir.is_dir():
        files = sorted(
            list(scenarios_dir.glob("**/*.yaml")) + list(scenarios_dir.glob("**/*.yml"))
        )
    if not files:
        typer.echo("No scenario files found. Specify files or create a scenarios/ directory.")
        raise typer.Exit(code=1)
    return files


def check_files(
    files: list[Path],
    formatter: ErrorFormatter,
) -> list[tuple[Path, ScenarioDefinition | None, list[ValidationErrorDetail]]]:
    """Validate every file, echoing errors and a per-file status line."""
    checked = []
    for filepath in files:
        definition, errors = validate_scenario_file(filepath)
        if errors:
            source = filepath.read_text(encoding="utf-8")
            typer.echo(formatter.format_all(errors, source, str(filepath)), err=not formatter.ci_mode)
        else:
            typer.echo(f"  {filepath} ... valid")
        checked.append((filepath, definition, errors))
    return checked


def validate(
    scenarios: Optional[list[str]] = typer.Argument(
        None, help="Scenario files to validate (default: all in scenarios/)"
    ),
    ci: bool = typer.Option(False, "--ci", help="CI-friendly concise output"),
) -> None:
    """Validate scenario YAML files.

    Exits with code 0 if all are valid, 1 if any has errors.
    """
    files = resolve_scenario_files(scenarios)
    checked = check_files(files, ErrorFormatter(ci_mode=ci))

    valid_count = sum(1 for _, _, errors in checked if not errors)
    typer.echo(f"\n{valid_count}/{len(checked)} scenarios valid")

    if valid_count < len(checked):
        raise typer.Exit(code=1)
