"""Auto-resume sentinel storage.

A sentinel is written before a long-running response starts and consumed
when it finishes. A sentinel still on disk at startup means the process
died mid-response; recent ones are replayed as resume prompts.

Sentinels live at ``<state dir>/auto-resume/<sanitized session key>.json``.
"""

import json
import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from threading import Lock

from huxley.core.config import Config
from huxley.core.prompts.system_events import AUTO_RESUME_TEMPLATE
from huxley.core.utils import env_flag, now_ms, sanitize_session_key, truncate
from huxley.model.resume import AutoResumeSessionState

logger = logging.getLogger(__name__)

AUTO_RESUME_ENV = "OPENCLAW_AUTO_RESUME"
AUTO_RESUME_ENABLED_DEFAULT = False
AUTO_RESUME_TIMEOUT_MS = 5 * 60 * 1000
AUTO_RESUME_MAX_AGE_MS = 30 * 60 * 1000
RESUME_PROMPT_LIMIT = 200


def is_auto_resume_enabled(config: Config | None, env: Mapping[str, str] | None = None) -> bool:
    """Explicit ``agents.defaults.autoResume`` wins, then OPENCLAW_AUTO_RESUME, then off."""
    if config is not None and config.defaults.auto_resume is not None:
        return config.defaults.auto_resume
    flag = env_flag(AUTO_RESUME_ENV, os.environ if env is None else env)
    if flag is not None:
        return flag
    return AUTO_RESUME_ENABLED_DEFAULT


def format_resume_prompt(state: AutoResumeSessionState) -> str:
    """Build the prompt replayed for an interrupted response.

    The original prompt is cut to 200 characters with ``...`` appended.
    """
    return AUTO_RESUME_TEMPLATE.format(
        user_prompt=truncate(state.user_prompt, RESUME_PROMPT_LIMIT),
    )


class AutoResumeStore:
    """File-backed store of in-progress sentinels, one file per session.

    Reads return None on any I/O or parse failure. consume() is the only
    way to claim a sentinel for replay; it is not coordinated across
    processes.

    Example:
        >>> store = AutoResumeStore(Path("~/.openclaw/auto-resume"))
        >>> store.write(AutoResumeSessionState("agent:main:main", "Draft the memo", "run-1", now_ms()))
        >>> store.consume("agent:main:main").user_prompt
        'Draft the memo'
        >>> store.consume("agent:main:main") is None
        True
    """

    def __init__(
        self,
        directory: Path,
        clock: Callable[[], int] = now_ms,
        max_age_ms: int = AUTO_RESUME_MAX_AGE_MS,
    ):
        """Initialize the store.

        Args:
            directory: The auto-resume directory.
            clock: Returns the current time in epoch milliseconds.
            max_age_ms: Age after which sentinels are deleted unread.
        """
        self.directory = Path(directory).expanduser()
        self.max_age_ms = max_age_ms
        self._clock = clock
        self._lock = Lock()

    def path_for(self, session_key: str) -> Path:
        return self.directory / f"{sanitize_session_key(session_key)}.json"

    def write(self, state: AutoResumeSessionState) -> bool:
        """Write the sentinel for a session, replacing any earlier one.

        Returns:
            True on success. Failures are logged, not raised.
        """
        path = self.path_for(state.session_key)
        try:
            with self._lock:
                self.directory.mkdir(parents=True, exist_ok=True)
                temp_file = path.with_suffix(".tmp")
                temp_file.write_text(f"{json.dumps(state.to_dict(), indent=2)}\n", encoding="utf-8")
                temp_file.replace(path)
        except OSError as e:
            logger.error(f"Failed to write in-progress sentinel {path}: {e}", exc_info=True)
            return False
        logger.debug(f"Wrote in-progress sentinel: {state.session_key}")
        return True

    def _read_file(self, path: Path) -> AutoResumeSessionState | None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return AutoResumeSessionState.from_dict(data)
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.debug(f"Unreadable sentinel {path}: {e}")
            return None

    def _delete(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug(f"Could not delete sentinel {path}: {e}")

    def read(self, session_key: str) -> AutoResumeSessionState | None:
        return self._read_file(self.path_for(session_key))

    def consume(self, session_key: str) -> AutoResumeSessionState | None:
        """Read and delete a session's sentinel.

        Returns:
            The sentinel, or None if there was none. Delete failures are
            ignored.
        """
        path = self.path_for(session_key)
        with self._lock:
            state = self._read_file(path)
            if state is not None:
                self._delete(path)
        if state is not None:
            logger.debug(f"Consumed in-progress sentinel: {session_key}")
        return state

    def clear(self, session_key: str) -> None:
        """Delete a session's sentinel without reading it."""
        with self._lock:
            self._delete(self.path_for(session_key))
        logger.debug(f"Cleared in-progress sentinel: {session_key}")

    def _sweep(self) -> tuple[list[AutoResumeSessionState], int]:
        """Delete expired sentinels and return the rest with a removal count."""
        if not self.directory.is_dir():
            return [], 0

        try:
            paths = sorted(self.directory.glob("*.json"))
        except OSError as e:
            logger.debug(f"Could not list {self.directory}: {e}")
            return [], 0

        now = self._clock()
        states: list[AutoResumeSessionState] = []
        removed = 0
        with self._lock:
            for path in paths:
                state = self._read_file(path)
                if state is None:
                    continue
                if now - state.timestamp > self.max_age_ms:
                    self._delete(path)
                    removed += 1
                    logger.debug(f"Cleaned up old sentinel: {state.session_key}")
                    continue
                states.append(state)
        return states, removed

    def list_all(self) -> list[AutoResumeSessionState]:
        """All unexpired sentinels; expired ones are deleted on the way."""
        states, _ = self._sweep()
        return states

    def cleanup_old(self) -> int:
        """Delete sentinels older than the maximum age.

        Returns:
            Number of sentinels removed.
        """
        _, removed = self._sweep()
        return removed

    def format_resume_prompt(self, state: AutoResumeSessionState) -> str:
        return format_resume_prompt(state)
