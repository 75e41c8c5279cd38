"""Shared utility helpers for Huxley.

Environment flag parsing, session key sanitization, and text truncation.
"""

import os
import re
import time
from collections.abc import Mapping

TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})

_UNSAFE_KEY_CHARS = re.compile(r"[^a-zA-Z0-9:._-]")


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def is_truthy(value: str | None) -> bool:
    """Interpret an environment value as a boolean flag.

    Examples:
        >>> is_truthy("YES")
        True
        >>> is_truthy("0")
        False
    """
    if not value:
        return False
    return value.strip().lower() in TRUTHY_VALUES


def env_flag(name: str, env: Mapping[str, str] | None = None) -> bool | None:
    """Read a boolean flag from the environment.

    Returns:
        None when the variable is unset, otherwise its truthiness.
    """
    env = os.environ if env is None else env
    value = env.get(name)
    if value is None:
        return None
    return is_truthy(value)


def sanitize_session_key(session_key: str) -> str:
    """Make a session key safe to use as a file name.

    Every character outside ``[a-zA-Z0-9:._-]`` becomes ``_``.

    Examples:
        >>> sanitize_session_key("agent:main/discord #general")
        'agent:main_discord__general'
    """
    return _UNSAFE_KEY_CHARS.sub("_", session_key)


def truncate(text: str, limit: int, marker: str = "...") -> str:
    """Cut text to ``limit`` characters, appending ``marker`` when cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + marker
