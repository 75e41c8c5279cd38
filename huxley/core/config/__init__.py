"""Configuration package for Huxley.

This package provides Pydantic configuration models and loading utilities.
"""

from huxley.core.config.loader import (
    check_unexpanded_vars,
    expand_env_vars,
    expand_env_vars_recursive,
    find_unexpanded_vars,
    load_config,
)
from huxley.core.config.models import (
    AgentDefaultsConfig,
    AgentsConfig,
    ChannelsConfig,
    Config,
    DiscordChannelConfig,
    IdentityConfig,
    InterruptConfig,
    LoggingConfig,
    MaintenanceConfig,
    ModelRefConfig,
    NaturalConversationConfig,
    SessionConfig,
)

__all__ = [
    # Models
    "AgentDefaultsConfig",
    "AgentsConfig",
    "ChannelsConfig",
    "Config",
    "DiscordChannelConfig",
    "IdentityConfig",
    "InterruptConfig",
    "LoggingConfig",
    "MaintenanceConfig",
    "ModelRefConfig",
    "NaturalConversationConfig",
    "SessionConfig",
    # Loaders
    "check_unexpanded_vars",
    "expand_env_vars",
    "expand_env_vars_recursive",
    "find_unexpanded_vars",
    "load_config",
]
