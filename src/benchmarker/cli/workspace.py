"""Shared setup for CLI commands: config, gateway and repository."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

from benchmarker.gateway.registry import get_gateway
from benchmarker.models.config import ProjectConfig, find_project_root, load_project_config
from benchmarker.storage.repository import BenchmarkRepository


@dataclass
class Workspace:
    """Everything a command needs to talk to the backend."""

    root: Path
    config: ProjectConfig
    repository: BenchmarkRepository


def load_workspace_config(project_root: Path | None = None) -> ProjectConfig:
    """Load benchmarker.yaml for commands that never touch the backend."""
    return load_project_config(project_root or find_project_root())


@asynccontextmanager
async def open_workspace(project_root: Path | None = None) -> AsyncIterator[Workspace]:
    """Load benchmarker.yaml, open the configured gateway and close it on exit.

    Raises:
        ConfigurationError: If the config or gateway settings are invalid.
    """
    root = project_root or find_project_root()
    config = load_project_config(root)
    gateway = get_gateway(config.gateway, root, config.http_timeout_seconds)
    async with gateway:
        yield Workspace(root=root, config=config, repository=BenchmarkRepository(gateway))
