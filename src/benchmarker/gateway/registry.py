"""Gateway registry for resolving gateway kinds to classes.

Supports builtin kinds ("json", "postgrest") and custom dotted-path
imports (e.g., "my.module.MyGateway").
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import TYPE_CHECKING

from benchmarker.errors import ConfigurationError
from benchmarker.gateway.base import DataGateway

if TYPE_CHECKING:
    from benchmarker.models.config import GatewayConfig

BUILTIN_GATEWAYS: dict[str, str] = {
    "json": "benchmarker.gateway.json_store.JsonGateway",
    "postgrest": "benchmarker.gateway.postgrest.PostgrestGateway",
}


def resolve_gateway_class(kind: str) -> type[DataGateway]:
    """Resolve a gateway kind or dotted path to a DataGateway subclass.

    Raises:
        ConfigurationError: If the kind is unknown, cannot be imported,
            or does not name a DataGateway subclass.
    """
    if kind in BUILTIN_GATEWAYS:
        dotted_path = BUILTIN_GATEWAYS[kind]
    elif "." in kind:
        dotted_path = kind
    else:
        available = ", ".join(sorted(BUILTIN_GATEWAYS))
        raise ConfigurationError(
            f"Unknown gateway '{kind}'. Available builtin gateways: {available}. "
            f"For custom gateways, provide the full dotted path."
        )

    module_path, _, class_name = dotted_path.rpartition(".")
    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import gateway module '{module_path}': {exc}") from exc

    cls = getattr(module, class_name, None)
    if not isinstance(cls, type) or not issubclass(cls, DataGateway):
        raise ConfigurationError(
            f"'{dotted_path}' is not a subclass of DataGateway."
        )
    return cls


def get_gateway(config: GatewayConfig, project_root: Path, timeout: float) -> DataGateway:
    """Build the gateway described by config."""
    return resolve_gateway_class(config.kind).from_config(config, project_root, timeout)
