"""YAML configuration loading with ``${VAR}`` expansion.

Variables are looked up in an injectable environment mapping so tests and
the runtime context can supply their own. Anything left unresolved after
expansion is reported with the config key it sits under.
"""

import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from huxley.core.config.models import Config

ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}")


def expand_env_vars(value: str, env: Mapping[str, str] | None = None) -> str:
    """Replace ``${VAR}`` references in a string.

    Unknown variables are left in place for check_unexpanded_vars to report.

    Examples:
        >>> expand_env_vars("model: ${HUX_MODEL}", {"HUX_MODEL": "openai/gpt-4o-mini"})
        'model: openai/gpt-4o-mini'
    """
    env = os.environ if env is None else env
    return ENV_VAR_PATTERN.sub(lambda m: env.get(m.group(1), m.group(0)), value)


def expand_env_vars_recursive(obj: Any, env: Mapping[str, str] | None = None) -> Any:
    """Expand every string inside nested dicts and lists."""
    if isinstance(obj, dict):
        return {key: expand_env_vars_recursive(value, env) for key, value in obj.items()}
    if isinstance(obj, list):
        return [expand_env_vars_recursive(item, env) for item in obj]
    if isinstance(obj, str):
        return expand_env_vars(obj, env)
    return obj


def find_unexpanded_vars(obj: Any, key_path: str = "") -> list[tuple[str, str]]:
    """Collect ``(key path, ${VAR})`` pairs still present in the data.

    Key paths use dots for mapping keys and ``[i]`` for list items, e.g.
    ``agents.defaults.model.primary`` or ``identity.aliases[1]``.
    """
    found: list[tuple[str, str]] = []
    if isinstance(obj, dict):
        for key, value in obj.items():
            child = f"{key_path}.{key}" if key_path else str(key)
            found.extend(find_unexpanded_vars(value, child))
    elif isinstance(obj, list):
        for index, item in enumerate(obj):
            found.extend(find_unexpanded_vars(item, f"{key_path}[{index}]"))
    elif isinstance(obj, str):
        found.extend((key_path, f"${{{name}}}") for name in ENV_VAR_PATTERN.findall(obj))
    return found


def check_unexpanded_vars(data: Any, source: str) -> None:
    """Fail if any ``${VAR}`` survived expansion.

    Raises:
        ValueError: Listing each unresolved variable and where it appears,
            sorted by variable name.
    """
    unresolved = find_unexpanded_vars(data)
    if not unresolved:
        return

    details = ", ".join(f"{var} at {key_path}" for key_path, var in sorted(unresolved, key=lambda p: (p[1], p[0])))
    raise ValueError(
        f"Unresolved environment variable(s) in {source}: {details}. "
        f"Set these variables or remove the ${{VAR}} references."
    )


def load_config(path: Path | str, env: Mapping[str, str] | None = None) -> Config:
    """Load and validate a YAML configuration file.

    Args:
        path: Path to the YAML configuration file.
        env: Variables for ``${VAR}`` expansion (default: os.environ).

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        yaml.YAMLError: If the YAML is malformed.
        ValueError: If ``${VAR}`` references remain unresolved or the top
            level is not a mapping.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open() as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Top level of {config_path} must be a mapping, got {type(data).__name__}")

    data = expand_env_vars_recursive(data, env)
    check_unexpanded_vars(data, source=str(config_path))

    return Config(**data)
