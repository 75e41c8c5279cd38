"""Bot identity detection for self-message filtering.

Keeps the agent's own messages (follow-up chains, internal notices) from
triggering interrupts on its own work.
"""

import logging

from huxley.core.config import Config
from huxley.model.message import InboundContext

logger = logging.getLogger(__name__)

INTERNAL_SOURCES = frozenset({"internal", "system"})
SYSTEM_SENDER = "system"


class BotIdentityCache:
    """Lower-cased names and IDs the agent is known by.

    Built from the configured agent name, the Discord display name, and
    any configured aliases. Rebuilt lazily whenever it is empty and a
    config is available.

    Example:
        >>> cache = BotIdentityCache()
        >>> cache.initialize(config)
        >>> cache.is_self_message(ctx, config)
        False
    """

    def __init__(self) -> None:
        self._markers: set[str] = set()

    @property
    def markers(self) -> frozenset[str]:
        return frozenset(self._markers)

    def __len__(self) -> int:
        return len(self._markers)

    def initialize(self, config: Config) -> None:
        """Clear and repopulate the cache from configuration."""
        self._markers.clear()

        defaults = config.defaults
        if defaults.identity.name:
            self._markers.add(defaults.identity.name.lower())

        discord_name = config.channels.discord.name
        if discord_name:
            self._markers.add(discord_name.lower())

        for alias in defaults.identity.aliases:
            if alias:
                self._markers.add(alias.lower())

        logger.debug(f"Bot identity cache initialized with {len(self._markers)} markers")

    def clear(self) -> None:
        self._markers.clear()

    def is_self_message(self, ctx: InboundContext, config: Config | None = None) -> bool:
        """Check whether a message was produced by the agent itself.

        Args:
            ctx: Inbound message context.
            config: Configuration used to build the cache if it is empty.

        Returns:
            True if the sender matches a known identity, the message comes
            from an internal/system source, or the sender is the origin
            address itself.
        """
        if not self._markers and config is not None:
            self.initialize(config)

        sender_id = (ctx.sender_id or "").lower()
        sender_name = (ctx.sender_name or "").lower()
        sender_username = (ctx.sender_username or "").lower()
        origin = (ctx.from_ or "").lower()
        source = (ctx.message_source or "").lower()

        for marker in self._markers:
            if marker in sender_id or marker in sender_name or marker in sender_username:
                return True

        if source in INTERNAL_SOURCES:
            return True

        # Follow-up chains address themselves
        if sender_id == SYSTEM_SENDER or (sender_id and sender_id == origin):
            return True

        return False
