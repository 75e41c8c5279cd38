"""Session kind classification from session key shape.

Session keys look like ``agent:<agent id>:<rest>``. The ``<rest>`` part
identifies the conversation: the main key (``main`` by default), a
channel conversation (``discord:channel:123``), or an automated source
(``cron:<job>``, ``hook:<name>``, ``node:<id>``).
"""

from enum import StrEnum

AGENT_PREFIX = "agent"
UNKNOWN_SESSION_KEY = "unknown"


class SessionKind(StrEnum):
    """Closed set of session kinds.

    Only ``main`` sessions carry human conversation and may be interrupted.
    """

    MAIN = "main"
    CRON = "cron"
    HOOK = "hook"
    NODE = "node"
    OTHER = "other"


NON_INTERRUPTABLE_KINDS: frozenset[SessionKind] = frozenset({
    SessionKind.CRON,
    SessionKind.HOOK,
    SessionKind.NODE,
    SessionKind.OTHER,
})

_AUTOMATED_PREFIXES: dict[str, SessionKind] = {
    "cron": SessionKind.CRON,
    "hook": SessionKind.HOOK,
    "node": SessionKind.NODE,
    "subagent": SessionKind.OTHER,
}


def _strip_agent_prefix(parts: list[str]) -> list[str]:
    if len(parts) >= 3 and parts[0] == AGENT_PREFIX:
        return parts[2:]
    return parts


def classify_session_key(session_key: str | None, main_key: str = "main") -> SessionKind:
    """Derive the session kind from a session key.

    Args:
        session_key: Opaque session key (may be None or empty).
        main_key: Key naming the main conversation session.

    Returns:
        The SessionKind for the key. Empty, ``unknown``, or bare
        ``agent:<id>`` keys are ``other``.

    Examples:
        >>> classify_session_key("agent:main:main")
        <SessionKind.MAIN: 'main'>
        >>> classify_session_key("agent:main:cron:daily-digest")
        <SessionKind.CRON: 'cron'>
        >>> classify_session_key("node-42")
        <SessionKind.NODE: 'node'>
    """
    key = (session_key or "").strip().lower()
    if not key or key == UNKNOWN_SESSION_KEY:
        return SessionKind.OTHER

    parts = _strip_agent_prefix(key.split(":"))
    if not parts or not parts[0]:
        return SessionKind.OTHER

    rest = ":".join(parts)
    if rest == main_key.lower():
        return SessionKind.MAIN

    head = parts[0]
    if head in _AUTOMATED_PREFIXES:
        return _AUTOMATED_PREFIXES[head]
    if head.startswith("node-"):
        return SessionKind.NODE
    if head == AGENT_PREFIX:
        # Bare "agent:<id>" without a conversation part
        return SessionKind.OTHER

    return SessionKind.MAIN


def is_interruptable(session_key: str | None, main_key: str = "main") -> bool:
    """Whether signals for this session may set an interrupt."""
    return classify_session_key(session_key, main_key) not in NON_INTERRUPTABLE_KINDS
