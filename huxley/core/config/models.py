"""Pydantic configuration models for Huxley.

This module defines all configuration models used throughout Huxley.
For loading and merging logic, see loader.py.

Keys follow the gateway config layout (``agents.defaults.*``,
``channels.*``, ``session.*``). Both camelCase and snake_case spellings
are accepted when loading.
"""

from pathlib import Path

from pydantic import BaseModel, Field


class ModelRefConfig(BaseModel):
    """A model reference in ``provider/model`` form with optional fallbacks."""

    primary: str | None = Field(default=None, description="Primary model (provider/model)")
    fallbacks: list[str] = Field(default_factory=list, description="Fallback models (provider/model)")

    model_config = {"extra": "allow"}


class IdentityConfig(BaseModel):
    """Names the agent answers to, used to recognise its own messages."""

    name: str | None = Field(default=None, description="Configured agent name")
    aliases: list[str] = Field(default_factory=list, description="Additional names or IDs")

    model_config = {"extra": "allow"}


class InterruptConfig(BaseModel):
    """Interrupt signal policy."""

    enabled: bool | None = Field(
        default=None,
        description="Enable interrupt signals (None = OPENCLAW_INTERRUPT_ENABLED, then on)",
    )

    model_config = {"extra": "allow"}


class NaturalConversationConfig(BaseModel):
    """Interrupt classification and task tracking settings."""

    enabled: bool | None = Field(
        default=None,
        description="Enable natural conversation (None = HUXLEY_NATURAL_CONVERSATION, then on)",
    )
    classifier_model: ModelRefConfig | None = Field(
        default=None,
        alias="classifierModel",
        description="Cheaper model used for interrupt classification",
    )

    model_config = {"extra": "allow", "populate_by_name": True}


class AgentDefaultsConfig(BaseModel):
    """Defaults applied to every agent."""

    model: ModelRefConfig = Field(default_factory=ModelRefConfig, description="Primary agent model")
    workspace: Path | None = Field(default=None, description="Workspace directory for persisted state")
    identity: IdentityConfig = Field(default_factory=IdentityConfig, description="Agent identity")
    interrupt: InterruptConfig = Field(default_factory=InterruptConfig, description="Interrupt policy")
    auto_resume: bool | None = Field(
        default=None,
        alias="autoResume",
        description="Resume interrupted responses on restart (None = OPENCLAW_AUTO_RESUME, then off)",
    )
    natural_conversation: NaturalConversationConfig = Field(
        default_factory=NaturalConversationConfig,
        alias="naturalConversation",
        description="Natural conversation settings",
    )

    model_config = {"extra": "allow", "populate_by_name": True}


class AgentsConfig(BaseModel):
    """Agent configuration section."""

    defaults: AgentDefaultsConfig = Field(default_factory=AgentDefaultsConfig)

    model_config = {"extra": "allow"}


class DiscordChannelConfig(BaseModel):
    """Discord channel settings relevant to self-message detection."""

    name: str | None = Field(default=None, description="Bot display name on Discord")

    model_config = {"extra": "allow"}


class ChannelsConfig(BaseModel):
    """Channel adapter configuration section."""

    discord: DiscordChannelConfig = Field(default_factory=DiscordChannelConfig)

    model_config = {"extra": "allow"}


class SessionConfig(BaseModel):
    """Session key conventions."""

    main_key: str = Field(default="main", alias="mainKey", description="Key of the main conversation session")

    model_config = {"extra": "allow", "populate_by_name": True}


class MaintenanceConfig(BaseModel):
    """Periodic cleanup of interrupt, task, and sentinel state."""

    enabled: bool = Field(default=True, description="Run periodic cleanup sweeps")
    interval_seconds: int = Field(default=60, description="Seconds between cleanup sweeps")
    interrupt_max_age_ms: int = Field(
        default=5 * 60 * 1000,
        description="Age after which unconsumed interrupt signals are dropped",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging system."""

    level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    directory: str = Field(default="logs", description="Directory for log files")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB before rotation")
    backup_count: int = Field(default=5, description="Number of backup log files to keep")


class Config(BaseModel):
    """Root configuration for Huxley."""

    agents: AgentsConfig = Field(default_factory=AgentsConfig)
    channels: ChannelsConfig = Field(default_factory=ChannelsConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    state_dir: Path | None = Field(
        default=None,
        alias="stateDir",
        description="State directory (None = OPENCLAW_STATE_DIR, then ~/.openclaw)",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description="Logging configuration")
    maintenance: MaintenanceConfig = Field(default_factory=MaintenanceConfig)

    model_config = {"extra": "allow", "populate_by_name": True}

    @property
    def defaults(self) -> AgentDefaultsConfig:
        """Shortcut for ``agents.defaults``."""
        return self.agents.defaults
