"""benchmarker secrets -- store, list and delete per-user secrets."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from benchmarker.cli.output import render_secrets
from benchmarker.cli.workspace import open_workspace
from benchmarker.errors import BenchmarkError

secrets_app = typer.Typer(
    name="secrets",
    help="Manage per-user secrets.",
    no_args_is_help=True,
)


@secrets_app.command("set")
def set_token(
    user_id: str = typer.Option(..., "--user", "-u", help="User the token belongs to"),
    token: str = typer.Option(
        ..., "--token", prompt=True, hide_input=True, help="Test token for the target system"
    ),
) -> None:
    """Store the test token used to authorize project lookups."""
    asyncio.run(_set_async(user_id, token))


async def _set_async(user_id: str, token: str) -> None:
    console = Console()
    try:
        async with open_workspace() as workspace:
            await workspace.repository.set_test_token(user_id, token)
    except BenchmarkError as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(code=1)
    console.print(f"Test token saved for user {user_id}")


@secrets_app.command("list")
def list_secrets(
    user_id: str = typer.Option(..., "--user", "-u", help="User whose secrets to list"),
) -> None:
    """List a user's secret rows by key name."""
    asyncio.run(_list_async(user_id))


async def _list_async(user_id: str) -> None:
    console = Console()
    try:
        async with open_workspace() as workspace:
            secrets = await workspace.repository.list_user_secrets(user_id)
    except BenchmarkError as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(code=1)
    render_secrets(secrets, console)


@secrets_app.command("delete")
def delete_secret(
    secret_id: str = typer.Argument(..., help="ID of the secret row to delete"),
) -> None:
    """Delete one secret row."""
    asyncio.run(_delete_async(secret_id))


async def _delete_async(secret_id: str) -> None:
    console = Console()
    try:
        async with open_workspace() as workspace:
            secret = await workspace.repository.delete_user_secret(secret_id)
    except BenchmarkError as exc:
        console.print(f"[red]Error:[/red] {exc.message}")
        raise typer.Exit(code=1)
    console.print(f"Deleted secret {secret_id} of user {secret.user_id}")
