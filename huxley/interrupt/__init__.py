"""Interrupt signalling: self-message detection and the per-session register."""

from huxley.interrupt.identity import BotIdentityCache
from huxley.interrupt.register import (
    DEFAULT_MAX_AGE_MS,
    INTERRUPT_ENABLED_ENV,
    InterruptRegister,
    is_interrupt_enabled,
)

__all__ = [
    "BotIdentityCache",
    "DEFAULT_MAX_AGE_MS",
    "INTERRUPT_ENABLED_ENV",
    "InterruptRegister",
    "is_interrupt_enabled",
]
