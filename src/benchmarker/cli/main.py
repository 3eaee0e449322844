"""Benchmarker CLI entry point."""

import logging
import sys

import structlog
import typer

from benchmarker import __version__
from benchmarker.cli.dimensions_cmd import dimensions_app
from benchmarker.cli.report_cmd import result, runs
from benchmarker.cli.reviewers_cmd import reviewers_app
from benchmarker.cli.run_cmd import run
from benchmarker.cli.scenarios_cmd import scenarios_app
from benchmarker.cli.secrets_cmd import secrets_app
from benchmarker.cli.validate_cmd import validate
from benchmarker.cli.versions_cmd import versions

app = typer.Typer(
    name="benchmarker",
    help="Benchmark code-generation systems with impersonated users",
    no_args_is_help=True,
)

# Register subcommands
app.command()(run)
app.command()(result)
app.command()(runs)
app.command()(validate)
app.command()(versions)
app.add_typer(scenarios_app, name="scenarios")
app.add_typer(reviewers_app, name="reviewers")
app.add_typer(dimensions_app, name="dimensions")
app.add_typer(secrets_app, name="secrets")

LOG_LEVELS: dict[str, int] = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _stderr_logger_factory(*args: object) -> structlog.PrintLogger:
    return structlog.PrintLogger(file=sys.stderr)


def _configure_structlog(log_format: str, log_level: str) -> None:
    """Configure structlog to render to stderr in the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer(colors=False)
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)
    if log_level.lower() not in LOG_LEVELS:
        typer.echo(
            f"Invalid log level: {log_level!r}. Must be one of: {', '.join(LOG_LEVELS)}."
        )
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVELS[log_level.lower()]),
        context_class=dict,
        logger_factory=_stderr_logger_factory,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"benchmarker {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
    log_format: str = typer.Option(
        "console", "--log-format", help="Log output format: console or json"
    ),
    log_level: str = typer.Option(
        "warning", "--log-level", help="Minimum log level: debug, info, warning, error"
    ),
) -> None:
    """Benchmark code-generation systems with impersonated users."""
    _configure_structlog(log_format, log_level)
