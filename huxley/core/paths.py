"""Central path constants and state directory resolution.

Single source of truth for persisted file names. Task state lives in the
agent workspace; auto-resume sentinels live under the gateway state
directory.
"""

import os
from collections.abc import Mapping
from pathlib import Path

from huxley.core.config.models import Config

# ---------------------------------------------------------------------------
# Workspace files
# ---------------------------------------------------------------------------

TASKS_FILENAME = "natural-conversation-tasks.json"
INTERRUPT_MD = "INTERRUPT.md"

# ---------------------------------------------------------------------------
# State directory
# ---------------------------------------------------------------------------

AUTO_RESUME_DIRNAME = "auto-resume"
DEFAULT_STATE_DIR = Path("~/.openclaw")

STATE_DIR_ENV = "OPENCLAW_STATE_DIR"
TASK_STATE_DIR_ENV = "HUXLEY_STATE_DIR"


def resolve_state_dir(config: Config | None = None, env: Mapping[str, str] | None = None) -> Path:
    """Resolve the gateway state directory.

    Precedence: ``config.state_dir``, then ``OPENCLAW_STATE_DIR``, then
    ``~/.openclaw``.
    """
    env = os.environ if env is None else env
    if config is not None and config.state_dir is not None:
        return Path(config.state_dir).expanduser()
    override = env.get(STATE_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return DEFAULT_STATE_DIR.expanduser()


def resolve_auto_resume_dir(config: Config | None = None, env: Mapping[str, str] | None = None) -> Path:
    """Directory holding one sentinel file per session."""
    return resolve_state_dir(config, env) / AUTO_RESUME_DIRNAME


def resolve_workspace(config: Config) -> Path | None:
    """Configured workspace directory, if any."""
    workspace = config.defaults.workspace
    return Path(workspace).expanduser() if workspace is not None else None


def resolve_task_dir(config: Config, env: Mapping[str, str] | None = None) -> Path | None:
    """Directory holding the task registry: the workspace, then HUXLEY_STATE_DIR."""
    env = os.environ if env is None else env
    workspace = resolve_workspace(config)
    if workspace is not None:
        return workspace
    override = env.get(TASK_STATE_DIR_ENV, "").strip()
    if override:
        return Path(override).expanduser()
    return None
