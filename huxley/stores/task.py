"""Task tracking for natural conversation.

Records what the agent believes it is doing for each session so that new
messages can be recognised as interrupts of running work. Tasks are kept
as a JSON array in natural-conversation-tasks.json in the workspace.
"""

import json
import logging
import os
import random
import re
import string
from collections.abc import Callable, Mapping
from dataclasses import fields
from pathlib import Path
from threading import Lock
from typing import Any

from huxley.core.config import Config
from huxley.core.paths import TASK_STATE_DIR_ENV, TASKS_FILENAME
from huxley.core.utils import now_ms
from huxley.conversation.classifier import FALLBACK_ESTIMATE, InterruptClassifier
from huxley.model.task import (
    LIVE_STATUSES,
    WORKING_STATUSES,
    ActiveTask,
    DeliveryTarget,
    TaskStatus,
    TaskType,
)
from huxley.model.validation import ValidationResult

logger = logging.getLogger(__name__)

TASK_TTL_MS = 60 * 60 * 1000

_SENTENCE_END = re.compile(r"[.!?]\s")
_ID_ALPHABET = string.ascii_lowercase + string.digits
_TASK_FIELDS = frozenset(f.name for f in fields(ActiveTask))


def _coerce_task_field(key: str, value: Any) -> Any:
    """Convert raw update values to the ActiveTask field type.

    Raises:
        ValueError: Unknown enum value.
        KeyError: A deliver_to mapping without ``channel`` or ``to``.
    """
    if key == "status":
        return TaskStatus(value)
    if key == "type":
        return TaskType(value)
    if key == "deliver_to" and isinstance(value, dict):
        return DeliveryTarget.from_dict(value)
    return value


def generate_task_id(timestamp_ms: int | None = None) -> str:
    """Generate ``task-<epoch ms>-<5 char suffix>``."""
    stamp = now_ms() if timestamp_ms is None else timestamp_ms
    suffix = "".join(random.choices(_ID_ALPHABET, k=5))
    return f"task-{stamp}-{suffix}"


def format_task_description(message: str) -> str:
    """Shorten a request into a task description.

    Keeps the first sentence when it is between 20 and 150 characters,
    otherwise the first 100 characters with ``...`` when cut.

    Examples:
        >>> format_task_description("Refactor the billing module. Then add tests.")
        'Refactor the billing module'
    """
    first_sentence = _SENTENCE_END.split(message, maxsplit=1)[0]
    if 20 < len(first_sentence) < 150:
        return first_sentence
    return message[:100] + ("..." if len(message) > 100 else "")


def validate_task_requirements(config: Config, env: Mapping[str, str] | None = None) -> ValidationResult:
    """Check that task state has somewhere to live."""
    env = os.environ if env is None else env
    result = ValidationResult()

    workspace = config.defaults.workspace
    if workspace is None:
        result.errors.append("Natural conversation requires agents.defaults.workspace to be configured")

    state_dir = env.get(TASK_STATE_DIR_ENV) or workspace
    if not state_dir:
        result.errors.append(
            f"Natural conversation requires a state directory (workspace or {TASK_STATE_DIR_ENV})"
        )

    return result


class TaskTracker:
    """Manages the per-workspace registry of active tasks.

    Reads never raise: a missing or corrupt file is an empty registry.
    Writes replace the whole file atomically (temp file + rename) under a
    per-instance lock; separate processes sharing the file are not
    coordinated and the last full write wins.

    Example:
        >>> tracker = TaskTracker(Path("~/.openclaw/workspace"), classifier)
        >>> task = await tracker.create("Summarise the Q3 report", "agent:main:main", config)
        >>> tracker.has_running_work("agent:main:main")
        False
        >>> tracker.resume(task.id)
        True
    """

    def __init__(
        self,
        directory: Path,
        classifier: InterruptClassifier | None = None,
        clock: Callable[[], int] = now_ms,
        ttl_ms: int = TASK_TTL_MS,
    ):
        """Initialize the tracker.

        Args:
            directory: Workspace (or state) directory holding the task file.
            classifier: Used by create() to estimate task duration.
            clock: Returns the current time in epoch milliseconds.
            ttl_ms: Age after which finished tasks are dropped.
        """
        self.directory = Path(directory).expanduser()
        self.storage_file = self.directory / TASKS_FILENAME
        self.classifier = classifier
        self.ttl_ms = ttl_ms
        self.clock = clock
        self._lock = Lock()

        logger.info(f"TaskTracker initialized: {self.storage_file}")

    def _read_unlocked(self) -> list[ActiveTask]:
        """Read every parseable task from disk. Caller must hold self._lock."""
        if not self.storage_file.exists():
            return []

        try:
            with self.storage_file.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable task file {self.storage_file}: {e}")
            return []

        if not isinstance(data, list):
            logger.error(f"Invalid task file format (expected list): {self.storage_file}")
            return []

        tasks: list[ActiveTask] = []
        for item in data:
            try:
                tasks.append(ActiveTask.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                task_id = item.get("id", "unknown") if isinstance(item, dict) else "unknown"
                logger.error(f"Failed to parse task {task_id}: {e}")
        return tasks

    def _load_unlocked(self) -> list[ActiveTask]:
        cutoff = self.clock() - self.ttl_ms
        return [
            t for t in self._read_unlocked()
            if t.status != TaskStatus.COMPLETED or t.last_update_at > cutoff
        ]

    def _save_unlocked(self, tasks: list[ActiveTask]) -> bool:
        """Persist the full task list. Caller must hold self._lock.

        Returns:
            True on success. Failures are logged, not raised.
        """
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            temp_file = self.storage_file.with_suffix(".tmp")
            with temp_file.open("w", encoding="utf-8") as f:
                json.dump([t.to_dict() for t in tasks], f, indent=2)
            temp_file.replace(self.storage_file)
            logger.debug(f"Saved {len(tasks)} task(s) to {self.storage_file}")
            return True
        except OSError as e:
            logger.error(f"Failed to save tasks to {self.storage_file}: {e}", exc_info=True)
            return False

    def load(self) -> list[ActiveTask]:
        """Load tracked tasks, hiding completed tasks older than the TTL."""
        with self._lock:
            return self._load_unlocked()

    def save(self, tasks: list[ActiveTask]) -> bool:
        """Replace the registry with ``tasks``."""
        with self._lock:
            return self._save_unlocked(tasks)

    def add(self, task: ActiveTask) -> bool:
        """Append a task to the registry."""
        with self._lock:
            tasks = self._load_unlocked()
            tasks.append(task)
            saved = self._save_unlocked(tasks)
        logger.info(f"Added {task.type.value} task: {task.id}")
        return saved

    async def create(self, description: str, session_key: str, config: Config) -> ActiveTask:
        """Create and record a task, estimating its duration with the classifier.

        Quick tasks start ``inline``; medium and long tasks start ``spawning``.
        """
        if self.classifier is not None:
            estimate = await self.classifier.estimate_task_type(description, config)
            task_type, confidence = estimate.type, estimate.confidence
        else:
            task_type, confidence = FALLBACK_ESTIMATE.type, FALLBACK_ESTIMATE.confidence

        timestamp = self.clock()
        task = ActiveTask(
            id=generate_task_id(timestamp),
            description=format_task_description(description),
            type=task_type,
            confidence=confidence,
            status=TaskStatus.INLINE if task_type == TaskType.QUICK else TaskStatus.SPAWNING,
            session_key=session_key,
            started_at=timestamp,
            last_update_at=timestamp,
        )
        self.add(task)
        return task

    def get(self, task_id: str) -> ActiveTask | None:
        for task in self.load():
            if task.id == task_id:
                return task
        return None

    def update(self, task_id: str, **changes: Any) -> bool:
        """Merge field changes into a task and refresh last_update_at.

        Args:
            task_id: Task to update.
            **changes: ActiveTask fields to overwrite (status, progress, ...).

        Returns:
            True if the task was found and saved, False otherwise.
        """
        with self._lock:
            tasks = self._load_unlocked()
            for task in tasks:
                if task.id != task_id:
                    continue
                for key, value in changes.items():
                    if key not in _TASK_FIELDS or key in ("id", "last_update_at"):
                        logger.warning(f"Ignoring unknown or read-only task field: {key}")
                        continue
                    try:
                        value = _coerce_task_field(key, value)
                    except (ValueError, KeyError) as e:
                        logger.warning(f"Ignoring invalid value for task field {key}: {e!r}")
                        continue
                    setattr(task, key, value)
                task.last_update_at = self.clock()
                return self._save_unlocked(tasks)

        logger.debug(f"Task not found for update: {task_id}")
        return False

    def complete(self, task_id: str, result: str) -> bool:
        updated = self.update(task_id, status=TaskStatus.COMPLETED, result=result)
        if updated:
            logger.info(f"Completed task {task_id}")
        return updated

    def fail(self, task_id: str, error: str) -> bool:
        updated = self.update(task_id, status=TaskStatus.FAILED, result=error)
        if updated:
            logger.info(f"Failed task {task_id}: {error}")
        return updated

    def pause(self, task_id: str) -> bool:
        updated = self.update(task_id, status=TaskStatus.PAUSED)
        if updated:
            logger.info(f"Paused task {task_id}")
        return updated

    def resume(self, task_id: str) -> bool:
        updated = self.update(task_id, status=TaskStatus.RUNNING)
        if updated:
            logger.info(f"Resumed task {task_id}")
        return updated

    def get_for_session(self, session_key: str) -> ActiveTask | None:
        """First live (inline, spawning, running, paused) task for a session."""
        for task in self.load():
            if task.session_key == session_key and task.status in LIVE_STATUSES:
                return task
        return None

    def has_running_work(self, session_key: str) -> bool:
        """True only when the session's live task is inline or running."""
        task = self.get_for_session(session_key)
        return task is not None and task.status in WORKING_STATUSES

    def cleanup(self) -> int:
        """Drop tasks not updated within the TTL; running tasks are always kept.

        Returns:
            Number of tasks removed.
        """
        with self._lock:
            tasks = self._load_unlocked()
            cutoff = self.clock() - self.ttl_ms
            fresh = [t for t in tasks if t.last_update_at > cutoff or t.status == TaskStatus.RUNNING]
            removed = len(tasks) - len(fresh)
            if removed:
                self._save_unlocked(fresh)
                logger.info(f"Cleaned up {removed} old task(s)")
        return removed

    def list(self, session_key: str | None = None) -> list[ActiveTask]:
        """All tracked tasks, optionally for one session."""
        tasks = self.load()
        if session_key is None:
            return tasks
        return [t for t in tasks if t.session_key == session_key]
