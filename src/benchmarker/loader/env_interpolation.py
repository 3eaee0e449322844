"""``${VAR}`` substitution for benchmarker.yaml.

Lets gateway credentials and target URLs stay in the environment, e.g.
``api_key: ${SUPABASE_KEY}``. Substitution runs on the raw YAML tree
before ProjectConfig validation; only string leaves are touched.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterator, Mapping
from typing import Any

from benchmarker.errors import ConfigurationError

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def env_references(data: Any) -> list[str]:
    """Return every variable name referenced in data, in first-seen order."""
    names: dict[str, None] = {}
    for text in _strings(data):
        for match in _ENV_REF.finditer(text):
            names.setdefault(match.group(1))
    return list(names)


def _strings(data: Any) -> Iterator[str]:
    if isinstance(data, str):
        yield data
    elif isinstance(data, list):
        for item in data:
            yield from _strings(item)
    elif isinstance(data, dict):
        for value in data.values():
            yield from _strings(value)


def interpolate(
    data: Any,
    environ: Mapping[str, str] | None = None,
    source: str = "config",
) -> Any:
    """Return a copy of data with every ``${VAR}`` replaced by its value.

    Args:
        data: Raw YAML tree (dicts, lists and scalars).
        environ: Variables to read. Defaults to os.environ.
        source: Name used in the error message, usually the file name.

    Raises:
        ConfigurationError: If any referenced variable is unset. All
            missing names are listed, not just the first.
    """
    env = os.environ if environ is None else environ
    missing = [name for name in env_references(data) if name not in env]
    if missing:
        raise ConfigurationError(
            f"{source} references unset environment variables: " + ", ".join(missing)
        )
    return _substitute(data, env)


def _substitute(data: Any, env: Mapping[str, str]) -> Any:
    if isinstance(data, str):
        return _ENV_REF.sub(lambda match: env[match.group(1)], data)
    if isinstance(data, list):
        return [_substitute(item, env) for item in data]
    if isinstance(data, dict):
        return {key: _substitute(value, env) for key, value in data.items()}
    return data
