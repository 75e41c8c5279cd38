"""Huxley domain models - pure business entities.

This package contains dataclasses and enums for interrupts, tracked tasks,
auto-resume sentinels, inbound message context, and session kinds. These
models have no dependencies on infrastructure or application logic.
"""

from huxley.model.interrupt import (
    FALLBACK_DECISION,
    STOP_DECISION,
    Confidence,
    InterruptDecision,
    InterruptIntent,
    InterruptState,
    InterruptStatus,
)
from huxley.model.message import InboundContext
from huxley.model.resume import AutoResumeSessionState
from huxley.model.session import (
    NON_INTERRUPTABLE_KINDS,
    SessionKind,
    classify_session_key,
    is_interruptable,
)
from huxley.model.task import (
    LIVE_STATUSES,
    WORKING_STATUSES,
    ActiveTask,
    DeliveryTarget,
    TaskEstimate,
    TaskStatus,
    TaskType,
)
from huxley.model.validation import DoctorReport, ValidationResult

__all__ = [
    # Interrupt
    "Confidence",
    "FALLBACK_DECISION",
    "InterruptDecision",
    "InterruptIntent",
    "InterruptState",
    "InterruptStatus",
    "STOP_DECISION",
    # Message
    "InboundContext",
    # Resume
    "AutoResumeSessionState",
    # Session
    "NON_INTERRUPTABLE_KINDS",
    "SessionKind",
    "classify_session_key",
    "is_interruptable",
    # Task
    "ActiveTask",
    "DeliveryTarget",
    "LIVE_STATUSES",
    "TaskEstimate",
    "TaskStatus",
    "TaskType",
    "WORKING_STATUSES",
    # Validation
    "DoctorReport",
    "ValidationResult",
]
