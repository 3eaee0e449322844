"""Impersonator registry for resolving impersonator names to classes.

Supports the builtin "http" impersonator and custom dotted-path
imports (e.g., "my.module.MyImpersonator"). Custom classes are
instantiated without arguments.
"""

from __future__ import annotations

import importlib

from benchmarker.errors import ConfigurationError
from benchmarker.impersonation.base import BaseImpersonator
from benchmarker.impersonation.http_impersonator import HttpImpersonator
from benchmarker.models.config import ImpersonationConfig


def get_impersonator(config: ImpersonationConfig, timeout: float) -> BaseImpersonator:
    """Build the impersonator named by config.

    Raises:
        ConfigurationError: If the name is unknown, cannot be imported,
            or does not name a BaseImpersonator subclass.
    """
    name = config.impersonator
    if name == "http":
        return HttpImpersonator(path=config.path, timeout=timeout)
    if "." not in name:
        raise ConfigurationError(
            f"Unknown impersonator '{name}'. Available builtin impersonators: http. "
            f"For custom impersonators, provide the full dotted path."
        )

    module_path, _, class_name = name.rpartition(".")
    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise ConfigurationError(
            f"Cannot import impersonator module '{module_path}': {exc}"
        ) from exc

    cls = getattr(module, class_name, None)
    if not isinstance(cls, type) or not issubclass(cls, BaseImpersonator):
        raise ConfigurationError(f"'{name}' is not a subclass of BaseImpersonator.")
    return cls()
