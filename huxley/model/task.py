"""Domain models for natural conversation task tracking."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from huxley.model.interrupt import Confidence


class TaskType(StrEnum):
    """Estimated duration class.

    quick: under 2 minutes
    medium: 2-30 minutes
    long: over 30 minutes
    """

    QUICK = "quick"
    MEDIUM = "medium"
    LONG = "long"


class TaskStatus(StrEnum):
    """Status values for task lifecycle.

    Lifecycle flow:
        inline -> completed | failed
        spawning -> running <-> paused
        running -> completed | failed
    """

    INLINE = "inline"
    SPAWNING = "spawning"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    PAUSED = "paused"


# Any status other than completed/failed
LIVE_STATUSES: frozenset[TaskStatus] = frozenset({
    TaskStatus.INLINE,
    TaskStatus.SPAWNING,
    TaskStatus.RUNNING,
    TaskStatus.PAUSED,
})

# Statuses that demand exclusivity of the session right now
WORKING_STATUSES: frozenset[TaskStatus] = frozenset({
    TaskStatus.INLINE,
    TaskStatus.RUNNING,
})


@dataclass
class DeliveryTarget:
    """Where results of background work should be sent."""

    channel: str
    to: str
    account_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"channel": self.channel, "to": self.to}
        if self.account_id is not None:
            data["accountId"] = self.account_id
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeliveryTarget":
        return cls(
            channel=data["channel"],
            to=data["to"],
            account_id=data.get("accountId"),
        )


@dataclass
class ActiveTask:
    """What the agent believes it is working on for one session.

    Persisted to natural-conversation-tasks.json in the workspace. The
    on-disk form uses camelCase keys and epoch millisecond timestamps.

    Attributes:
        id: Unique identifier (task-<ms>-<suffix>).
        description: Short human-readable description.
        type: Estimated duration class.
        confidence: Confidence of the duration estimate.
        status: Current lifecycle status.
        session_key: Session that owns the task.
        started_at: Creation time (epoch ms).
        last_update_at: Last modification time (epoch ms).
        sub_agent_key: Session key of the spawned worker, if delegated.
        progress: Free-form progress note.
        result: Outcome text, or the error message for failed tasks.
        deliver_to: Delivery target for background results.
    """

    id: str
    description: str
    type: TaskType
    confidence: Confidence
    status: TaskStatus
    session_key: str
    started_at: int
    last_update_at: int
    sub_agent_key: str | None = None
    progress: str | None = None
    result: str | None = None
    deliver_to: DeliveryTarget | None = None

    @property
    def is_live(self) -> bool:
        return self.status in LIVE_STATUSES

    def to_dict(self) -> dict[str, Any]:
        """Convert to the camelCase JSON form; optional fields are omitted when unset."""
        data: dict[str, Any] = {
            "id": self.id,
            "description": self.description,
            "type": self.type.value,
            "confidence": self.confidence.value,
            "status": self.status.value,
            "sessionKey": self.session_key,
            "startedAt": self.started_at,
            "lastUpdateAt": self.last_update_at,
        }
        if self.sub_agent_key is not None:
            data["subAgentKey"] = self.sub_agent_key
        if self.progress is not None:
            data["progress"] = self.progress
        if self.result is not None:
            data["result"] = self.result
        if self.deliver_to is not None:
            data["deliverTo"] = self.deliver_to.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActiveTask":
        """Create instance from the camelCase JSON form.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If an enum value is not recognised.
        """
        deliver_to = data.get("deliverTo")
        return cls(
            id=data["id"],
            description=data["description"],
            type=TaskType(data["type"]),
            confidence=Confidence(data.get("confidence", "low")),
            status=TaskStatus(data["status"]),
            session_key=data["sessionKey"],
            started_at=int(data["startedAt"]),
            last_update_at=int(data["lastUpdateAt"]),
            sub_agent_key=data.get("subAgentKey"),
            progress=data.get("progress"),
            result=data.get("result"),
            deliver_to=DeliveryTarget.from_dict(deliver_to) if deliver_to else None,
        )


@dataclass(frozen=True)
class TaskEstimate:
    """Duration estimate returned by the classifier."""

    type: TaskType
    confidence: Confidence
    reasoning: str = "No reasoning provided"
