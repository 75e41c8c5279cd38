"""Background work hand-off.

Medium and long tasks are recorded as ``spawning`` with a delivery target
so the agent stays available while the work runs elsewhere. The worker
reports back through TaskTracker.complete() / fail(), which check() reads.
"""

import logging
from dataclasses import dataclass

from huxley.model.interrupt import Confidence
from huxley.model.task import ActiveTask, DeliveryTarget, TaskStatus, TaskType
from huxley.stores.task import TaskTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpawnResult:
    """Outcome of handing a task to background work."""

    success: bool
    task_id: str
    sub_agent_key: str | None = None
    error: str | None = None


@dataclass(frozen=True)
class BackgroundCheck:
    """Progress of a background task as seen through the tracker."""

    done: bool
    result: str | None = None
    error: str | None = None


class BackgroundWorkSpawner:
    """Records background tasks and reports when they finish."""

    def __init__(self, tracker: TaskTracker):
        self.tracker = tracker

    def spawn(
        self,
        task_id: str,
        description: str,
        type: TaskType,
        session_key: str,
        deliver_to: DeliveryTarget,
        confidence: Confidence = Confidence.MEDIUM,
        sub_agent_key: str | None = None,
    ) -> SpawnResult:
        """Track a task as spawning with its delivery target.

        Args:
            task_id: Identifier from generate_task_id().
            description: Short task description.
            type: Estimated duration class.
            session_key: Session that requested the work.
            deliver_to: Where the result should be sent.
            confidence: Confidence of the duration estimate.
            sub_agent_key: Session key of the worker, when known.

        Returns:
            SpawnResult; storage failures are reported, not raised.
        """
        logger.info(f"Spawning {type.value} task: {task_id}")
        timestamp = self.tracker.clock()
        task = ActiveTask(
            id=task_id,
            description=description,
            type=type,
            confidence=confidence,
            status=TaskStatus.SPAWNING,
            session_key=session_key,
            started_at=timestamp,
            last_update_at=timestamp,
            sub_agent_key=sub_agent_key,
            deliver_to=deliver_to,
        )

        if not self.tracker.add(task):
            error = f"Failed to record task {task_id} in {self.tracker.storage_file}"
            logger.warning(f"Spawn failed: {error}")
            return SpawnResult(success=False, task_id=task_id, error=error)

        return SpawnResult(success=True, task_id=task_id, sub_agent_key=sub_agent_key)

    def check(self, task_id: str) -> BackgroundCheck:
        """Report whether a background task has finished."""
        task = self.tracker.get(task_id)
        if task is None:
            return BackgroundCheck(done=False)
        if task.status == TaskStatus.COMPLETED:
            return BackgroundCheck(done=True, result=task.result)
        if task.status == TaskStatus.FAILED:
            return BackgroundCheck(done=True, error=task.result)
        return BackgroundCheck(done=False)
