"""Project configuration model for Benchmarker.

Captures benchmarker.yaml fields with sensible defaults for the
target system, the backend gateway, and impersonation settings.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from benchmarker.errors import ConfigurationError

CONFIG_FILENAME = "benchmarker.yaml"
DEFAULT_SYSTEM_VERSION = "http://localhost:8000"


def _default_system_version() -> str:
    return os.environ.get("BENCHMARKER_SYSTEM_VERSION") or DEFAULT_SYSTEM_VERSION


class GatewayConfig(BaseModel):
    """Where durable state lives.

    ``kind`` is "json" for the local file-backed store, "postgrest" for a
    Supabase-style REST backend, or a dotted path to a custom
    DataGateway subclass.
    """

    model_config = {"extra": "forbid"}

    kind: str = "json"
    url: str | None = None
    api_key: str | None = None
    storage_dir: str = ".benchmarker"


class ImpersonationConfig(BaseModel):
    """How user impersonation requests are sent to the target system."""

    model_config = {"extra": "forbid"}

    impersonator: str = "http"
    path: str = "impersonate"


class ProjectConfig(BaseModel):
    """Project-level configuration loaded from benchmarker.yaml."""

    model_config = {"extra": "forbid"}

    system_version: str = Field(default_factory=_default_system_version)
    system_versions: list[str] = Field(default_factory=list)
    user_id: str | None = None
    http_timeout_seconds: float = Field(default=60.0, gt=0)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    impersonation: ImpersonationConfig = Field(default_factory=ImpersonationConfig)

    def selectable_versions(self) -> list[str]:
        """Return the default system version followed by any extra ones."""
        versions = [self.system_version]
        for version in self.system_versions:
            if version not in versions:
                versions.append(version)
        return versions


def find_project_root(start: Path | None = None) -> Path:
    """Walk up from start (default: cwd) looking for benchmarker.yaml.

    Args:
        start: Starting path (file or directory). Defaults to cwd.

    Returns:
        Path to the directory containing benchmarker.yaml, or cwd if
        none is found.
    """
    current = (start or Path.cwd()).resolve()
    if current.is_file():
        current = current.parent
    while current != current.parent:
        if (current / CONFIG_FILENAME).exists():
            return current
        current = current.parent
    return Path.cwd()


def load_project_config(project_root: Path | None = None) -> ProjectConfig:
    """Load ProjectConfig from benchmarker.yaml. Returns defaults if not found.

    ``${VAR}`` references are replaced with environment values before
    validation.

    Args:
        project_root: Path to the project root directory. If None,
            uses find_project_root() to locate it.

    Returns:
        Validated ProjectConfig instance.

    Raises:
        ConfigurationError: If referenced environment variables are unset
            or the file does not match the schema.
    """
    if project_root is None:
        project_root = find_project_root()
    config_path = project_root / CONFIG_FILENAME
    if not config_path.exists():
        return ProjectConfig()
    import yaml

    from benchmarker.loader.env_interpolation import interpolate

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if raw is None:
        return ProjectConfig()

    data = interpolate(raw, source=config_path.name)
    try:
        return ProjectConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise ConfigurationError(f"Invalid {config_path.name}: {exc}") from exc
