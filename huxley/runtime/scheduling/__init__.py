"""Scheduling subsystem for Huxley.

Provides periodic maintenance of interrupt, task, and sentinel state.
"""

from huxley.runtime.scheduling.maintenance import MaintenanceScheduler

__all__ = ["MaintenanceScheduler"]
