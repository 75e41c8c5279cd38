"""Runtime services for Huxley.

This package wires the interrupt subsystem together: the runtime context,
message dispatch, background hand-off, startup resume, and maintenance.
"""

from huxley.runtime.background import BackgroundCheck, BackgroundWorkSpawner, SpawnResult
from huxley.runtime.context import RuntimeContext
from huxley.runtime.dispatch import DispatchOrchestrator, ReplyHandler, validate_natural_conversation
from huxley.runtime.resume import AutoResumeSweeper, ResumeReport
from huxley.runtime.scheduling.maintenance import MaintenanceScheduler

__all__ = [
    "AutoResumeSweeper",
    "BackgroundCheck",
    "BackgroundWorkSpawner",
    "DispatchOrchestrator",
    "MaintenanceScheduler",
    "ReplyHandler",
    "ResumeReport",
    "RuntimeContext",
    "SpawnResult",
    "validate_natural_conversation",
]
