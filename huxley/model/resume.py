"""Domain model for auto-resume sentinels."""

from dataclasses import dataclass
from typing import Any


@dataclass
class AutoResumeSessionState:
    """Marker meaning "this session still owes a response".

    Written before a long-running response starts and consumed when it
    completes or when it is replayed after a restart.

    Attributes:
        session_key: Session the response belongs to.
        user_prompt: The prompt being answered.
        run_id: Identifier of the agent run.
        timestamp: When the sentinel was written (epoch ms).
        was_streaming: Whether the response was being streamed.
        provider: Model provider used for the run.
        model: Model name used for the run.
    """

    session_key: str
    user_prompt: str
    run_id: str
    timestamp: int
    was_streaming: bool = False
    provider: str | None = None
    model: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "sessionKey": self.session_key,
            "userPrompt": self.user_prompt,
            "runId": self.run_id,
            "timestamp": self.timestamp,
            "wasStreaming": self.was_streaming,
        }
        if self.provider is not None:
            data["provider"] = self.provider
        if self.model is not None:
            data["model"] = self.model
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AutoResumeSessionState":
        return cls(
            session_key=data["sessionKey"],
            user_prompt=data["userPrompt"],
            run_id=data["runId"],
            timestamp=int(data["timestamp"]),
            was_streaming=bool(data.get("wasStreaming", False)),
            provider=data.get("provider"),
            model=data.get("model"),
        )
