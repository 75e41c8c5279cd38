"""Model invocation boundary for classification prompts.

The classifier only owns prompt text and reply parsing; sending a prompt
to a model goes through a ModelInvoker. The default implementation uses
LangChain chat models.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from langchain.chat_models import init_chat_model
from langchain_core.language_models.chat_models import BaseChatModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ModelRef:
    """A ``provider/model`` reference."""

    provider: str
    model: str

    @property
    def qualified_name(self) -> str:
        """The ``provider/model`` string form."""
        return f"{self.provider}/{self.model}"

    @property
    def langchain_name(self) -> str:
        """The ``provider:model`` form understood by init_chat_model."""
        return f"{self.provider}:{self.model}"


def parse_model_ref(value: str | None) -> ModelRef | None:
    """Parse a ``provider/model`` string.

    Examples:
        >>> parse_model_ref("anthropic/claude-haiku-4-5")
        ModelRef(provider='anthropic', model='claude-haiku-4-5')
        >>> parse_model_ref("gpt-4o") is None
        True
    """
    if not value:
        return None
    provider, sep, model = value.strip().partition("/")
    if not sep or not provider or not model:
        return None
    return ModelRef(provider=provider, model=model)


class ModelInvoker(Protocol):
    """Text-in, text-out model call."""

    async def invoke(self, prompt: str, model: ModelRef) -> str | None:
        """Send a prompt and return the reply text, or None on failure."""
        ...


def _content_to_text(content: Any) -> str:
    """Flatten LangChain message content (str or list of blocks) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: list[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(str(block.get("text", "")))
        return "".join(parts)
    return str(content or "")


class ChatModelInvoker:
    """ModelInvoker backed by LangChain chat models.

    Models are created lazily with init_chat_model and cached per
    reference. Failures are logged and reported as None; there is no
    timeout and no retry.
    """

    def __init__(
        self,
        temperature: float = 0.0,
        model_factory: Callable[..., BaseChatModel] = init_chat_model,
    ):
        """Initialize the invoker.

        Args:
            temperature: Sampling temperature for classification calls.
            model_factory: Callable building a chat model from a
                ``provider:model`` string (init_chat_model by default).
        """
        self.temperature = temperature
        self._model_factory = model_factory
        self._models: dict[ModelRef, BaseChatModel] = {}

    def _get_model(self, ref: ModelRef) -> BaseChatModel:
        if ref not in self._models:
            logger.info(f"Creating classifier model: {ref.qualified_name}")
            self._models[ref] = self._model_factory(ref.langchain_name, temperature=self.temperature)
        return self._models[ref]

    async def invoke(self, prompt: str, model: ModelRef) -> str | None:
        try:
            llm = self._get_model(model)
            response = await llm.ainvoke(prompt)
        except Exception as e:
            logger.warning(f"Model call to {model.qualified_name} failed: {e}")
            return None

        text = _content_to_text(getattr(response, "content", response)).strip()
        return text or None
