"""Per-session interrupt signal register.

Inbound messages signal an interrupt for their session; the agent runner
consumes it between steps with check_and_clear(). Only the latest signal
per session is kept.
"""

import logging
import os
from collections.abc import Callable, Mapping

from huxley.core.config import Config
from huxley.core.utils import env_flag, now_ms
from huxley.model.interrupt import InterruptState, InterruptStatus
from huxley.model.session import NON_INTERRUPTABLE_KINDS, classify_session_key

logger = logging.getLogger(__name__)

INTERRUPT_ENABLED_ENV = "OPENCLAW_INTERRUPT_ENABLED"
DEFAULT_MAX_AGE_MS = 5 * 60 * 1000


def is_interrupt_enabled(config: Config | None, env: Mapping[str, str] | None = None) -> bool:
    """Resolve the interrupt policy.

    Explicit ``agents.defaults.interrupt.enabled`` wins, then the
    OPENCLAW_INTERRUPT_ENABLED environment variable, then enabled.
    """
    if config is not None and config.defaults.interrupt.enabled is not None:
        return config.defaults.interrupt.enabled
    flag = env_flag(INTERRUPT_ENABLED_ENV, os.environ if env is None else env)
    if flag is not None:
        return flag
    return True


class InterruptRegister:
    """In-memory interrupt state keyed by session.

    Operations are plain dict operations and never suspend, so each one is
    atomic with respect to other coroutines in the same process.

    Example:
        >>> register = InterruptRegister()
        >>> register.signal("agent:main:main", "what time is it?", config)
        True
        >>> register.check_and_clear("agent:main:main")
        True
        >>> register.check_and_clear("agent:main:main")
        False
    """

    def __init__(
        self,
        clock: Callable[[], int] = now_ms,
        env: Mapping[str, str] | None = None,
    ):
        """Initialize the register.

        Args:
            clock: Returns the current time in epoch milliseconds.
            env: Environment mapping for policy overrides (default os.environ).
        """
        self._clock = clock
        self._env = env
        self._states: dict[str, InterruptState] = {}

    def __len__(self) -> int:
        return len(self._states)

    def signal(
        self,
        session_key: str,
        reason: str,
        config: Config | None,
        is_heartbeat: bool = False,
    ) -> bool:
        """Record a pending interrupt for a session.

        No-op when interrupts are disabled, for heartbeat messages, and for
        cron, hook, node, and other automated sessions. A new signal
        overwrites any earlier one for the same session.

        Returns:
            True if the interrupt was recorded.
        """
        if not is_interrupt_enabled(config, self._env):
            return False
        if is_heartbeat:
            logger.debug(f"Heartbeat message, not interrupting session {session_key}")
            return False

        main_key = config.session.main_key if config is not None else "main"
        kind = classify_session_key(session_key, main_key)
        if kind in NON_INTERRUPTABLE_KINDS:
            logger.debug(f"Session {session_key} is {kind.value}, not interruptable")
            return False

        self._states[session_key] = InterruptState(
            pending=True,
            reason=reason,
            timestamp=self._clock(),
        )
        logger.debug(f"Interrupt queued for session {session_key}: {reason[:100]}")
        return True

    def check(self, session_key: str) -> InterruptStatus:
        """Read the interrupt status for a session without consuming it."""
        state = self._states.get(session_key)
        if state is None or not state.pending:
            return InterruptStatus(pending=False, reason=None, session_key=session_key)
        return InterruptStatus(pending=True, reason=state.reason, session_key=session_key)

    def clear(self, session_key: str) -> None:
        self._states.pop(session_key, None)

    def check_and_clear(self, session_key: str) -> bool:
        """Consume a pending interrupt.

        Returns:
            True exactly once per recorded signal.
        """
        state = self._states.pop(session_key, None)
        if state is not None and state.pending:
            logger.info(f"Interrupt consumed for session {session_key}")
            return True
        return False

    def cleanup(self, max_age_ms: int = DEFAULT_MAX_AGE_MS) -> int:
        """Drop signals strictly older than max_age_ms.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        stale = [key for key, state in self._states.items() if now - state.timestamp > max_age_ms]
        for key in stale:
            del self._states[key]
        if stale:
            logger.debug(f"Cleaned up {len(stale)} stale interrupt signal(s)")
        return len(stale)

    def reset(self) -> None:
        """Drop all interrupt state."""
        self._states.clear()

    def snapshot(self) -> dict[str, int | list[str] | None]:
        """Diagnostic view of pending sessions and the oldest signal age."""
        now = self._clock()
        ages = [now - state.timestamp for state in self._states.values()]
        return {
            "pending_sessions": sorted(self._states),
            "oldest_age_ms": max(ages) if ages else None,
        }
