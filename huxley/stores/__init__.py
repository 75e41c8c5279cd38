"""Persistence layer for Huxley.

This package contains store classes for managing persistent state:
- TaskTracker: per-workspace registry of what the agent is working on
- AutoResumeStore: in-progress sentinels replayed after a restart
"""

from huxley.stores.resume import (
    AUTO_RESUME_MAX_AGE_MS,
    AUTO_RESUME_TIMEOUT_MS,
    AutoResumeStore,
    format_resume_prompt,
    is_auto_resume_enabled,
)
from huxley.stores.task import (
    TASK_TTL_MS,
    TaskTracker,
    format_task_description,
    generate_task_id,
    validate_task_requirements,
)

__all__ = [
    # Task tracker
    "TASK_TTL_MS",
    "TaskTracker",
    "format_task_description",
    "generate_task_id",
    "validate_task_requirements",
    # Auto-resume store
    "AUTO_RESUME_MAX_AGE_MS",
    "AUTO_RESUME_TIMEOUT_MS",
    "AutoResumeStore",
    "format_resume_prompt",
    "is_auto_resume_enabled",
]
