"""Domain models for interrupt signalling and classification."""

from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any


class InterruptIntent(StrEnum):
    """Why a new message arrived while the agent was working.

    quick-question: answer immediately, don't pause
    correction: apply to current work, continue
    alternative: new approach, apply change, continue
    quick-task: do it quickly, auto-resume
    new-priority: pause main work, handle this, may not resume
    ambiguous: need to ask what they want
    """

    QUICK_QUESTION = "quick-question"
    CORRECTION = "correction"
    ALTERNATIVE = "alternative"
    QUICK_TASK = "quick-task"
    NEW_PRIORITY = "new-priority"
    AMBIGUOUS = "ambiguous"


class Confidence(StrEnum):
    """Confidence levels reported by the classifier."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass
class InterruptState:
    """Pending interrupt for one session.

    Attributes:
        pending: Whether an interrupt is waiting to be consumed.
        reason: Text of the message that caused it.
        timestamp: When the signal was recorded (epoch ms).
    """

    pending: bool
    reason: str
    timestamp: int


@dataclass(frozen=True)
class InterruptStatus:
    """Result of checking a session for a pending interrupt."""

    pending: bool
    reason: str | None
    session_key: str


@dataclass(frozen=True)
class InterruptDecision:
    """Classifier verdict for a message that arrived mid-task.

    Attributes:
        intent: Classified interrupt intent.
        confidence: How sure the classifier is.
        should_ask: Whether the agent should pause and ask the user.
        reasoning: Short explanation for logs and the reply pipeline.
    """

    intent: InterruptIntent
    confidence: Confidence
    should_ask: bool
    reasoning: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary with string enum values."""
        data = asdict(self)
        data["intent"] = self.intent.value
        data["confidence"] = self.confidence.value
        return data


FALLBACK_DECISION = InterruptDecision(
    intent=InterruptIntent.AMBIGUOUS,
    confidence=Confidence.LOW,
    should_ask=True,
    reasoning="classification unavailable",
)

STOP_DECISION = InterruptDecision(
    intent=InterruptIntent.NEW_PRIORITY,
    confidence=Confidence.HIGH,
    should_ask=False,
    reasoning="Explicit stop command detected",
)
