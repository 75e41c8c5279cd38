"""Inbound message context shared between channel adapters and dispatch."""

from dataclasses import dataclass, field
from typing import Any

from huxley.model.interrupt import InterruptDecision


@dataclass
class InboundContext:
    """Unified inbound message context produced by channel adapters.

    Adapters fill the sender and body fields. Dispatch attaches its
    decision fields before handing the context to the reply pipeline.

    Attributes:
        session_key: Session the message belongs to.
        body: Message text as delivered to the agent.
        raw_body: Unprocessed text, used when body is missing.
        sender_id: Platform sender identifier.
        sender_name: Sender display name.
        sender_username: Sender account handle.
        from_: Origin address (chat or channel identifier).
        message_source: Producer tag (``user``, ``internal``, ``system``...).
        interrupt_decision: Classifier verdict when work was running.
        current_task_description: Description of the interrupted task.
        is_new_task: True when no work was running for the session.
        is_auto_resume: True for prompts replayed after a restart.
        metadata: Adapter-specific extras.
    """

    session_key: str | None = None
    body: str | None = None
    raw_body: str | None = None
    sender_id: str | None = None
    sender_name: str | None = None
    sender_username: str | None = None
    from_: str | None = None
    message_source: str | None = None

    interrupt_decision: InterruptDecision | None = None
    current_task_description: str | None = None
    is_new_task: bool = False
    is_auto_resume: bool = False

    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def text(self) -> str:
        """Body text, falling back to the raw body."""
        if isinstance(self.body, str):
            return self.body
        if isinstance(self.raw_body, str):
            return self.raw_body
        return ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "InboundContext":
        """Build from the adapter wire form (``SenderId``, ``Body``, ...)."""
        return cls(
            session_key=data.get("SessionKey"),
            body=data.get("Body"),
            raw_body=data.get("RawBody"),
            sender_id=data.get("SenderId"),
            sender_name=data.get("SenderName"),
            sender_username=data.get("SenderUsername"),
            from_=data.get("From"),
            message_source=data.get("MessageSource"),
        )
