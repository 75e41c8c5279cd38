"""Interrupt intent classifier.

Decides what a message that arrives mid-task means: a quick question, a
correction, a side task, a new priority. Explicit stop words are handled
without a model call; everything else goes through a short line-format
prompt whose reply is decoded and validated here.
"""

import logging
import re
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from huxley.core.config import Config
from huxley.core.prompts.classifier import (
    CLASSIFICATION_TEMPLATE,
    NO_TASK_PLACEHOLDER,
    TIME_ESTIMATE_TEMPLATE,
)
from huxley.conversation.llm import ModelInvoker, ModelRef, parse_model_ref
from huxley.model.interrupt import (
    FALLBACK_DECISION,
    STOP_DECISION,
    Confidence,
    InterruptDecision,
    InterruptIntent,
)
from huxley.model.task import TaskEstimate, TaskType
from huxley.model.validation import ValidationResult

logger = logging.getLogger(__name__)

DEFAULT_MODEL = ModelRef(provider="ollama", model="kimi-k2.5:cloud")
NO_REASONING = "No reasoning provided"

STOP_PATTERN = re.compile(r"^(stop|cancel|abort|kill|halt|shut\s*up)$", re.IGNORECASE)

FALLBACK_ESTIMATE = TaskEstimate(
    type=TaskType.MEDIUM,
    confidence=Confidence.LOW,
    reasoning="estimate unavailable",
)

_FIELD_PATTERNS = {
    "intent": re.compile(r"Intent:\s*(\S+)", re.IGNORECASE),
    "confidence": re.compile(r"Confidence:\s*(\S+)", re.IGNORECASE),
    "should_ask": re.compile(r"ShouldAsk:\s*(\S+)", re.IGNORECASE),
    "category": re.compile(r"Category:\s*(\S+)", re.IGNORECASE),
    "reasoning": re.compile(r"Reasoning:\s*(.+)", re.IGNORECASE),
}


def _extract_fields(raw: str, names: tuple[str, ...]) -> dict[str, str]:
    fields: dict[str, str] = {}
    for name in names:
        match = _FIELD_PATTERNS[name].search(raw)
        if match:
            fields[name] = match.group(1).strip()
    return fields


def _normalize_token(value: Any) -> str:
    """Lower-case a reply token and strip quotes, brackets, and trailing punctuation."""
    return str(value).strip().strip("\"'`<>[]*").rstrip(".,;:").lower()


def _coerce_confidence(value: Any) -> Confidence:
    try:
        return Confidence(_normalize_token(value))
    except ValueError:
        return Confidence.LOW


class ClassificationReply(BaseModel):
    """Validated classifier reply.

    Unknown intents become ``ambiguous`` and unknown confidence becomes
    ``low``. A low-confidence verdict always asks the user, whatever the
    model answered for ShouldAsk.
    """

    intent: InterruptIntent = InterruptIntent.AMBIGUOUS
    confidence: Confidence = Confidence.LOW
    should_ask: bool = False
    reasoning: str = NO_REASONING

    @field_validator("intent", mode="before")
    @classmethod
    def coerce_intent(cls, v: Any) -> InterruptIntent:
        try:
            return InterruptIntent(_normalize_token(v))
        except ValueError:
            return InterruptIntent.AMBIGUOUS

    @field_validator("confidence", mode="before")
    @classmethod
    def coerce_confidence(cls, v: Any) -> Confidence:
        return _coerce_confidence(v)

    @field_validator("should_ask", mode="before")
    @classmethod
    def coerce_should_ask(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        return _normalize_token(v) == "true"

    @model_validator(mode="after")
    def low_confidence_asks(self) -> "ClassificationReply":
        if self.confidence == Confidence.LOW:
            self.should_ask = True
        return self

    def to_decision(self) -> InterruptDecision:
        return InterruptDecision(
            intent=self.intent,
            confidence=self.confidence,
            should_ask=self.should_ask,
            reasoning=self.reasoning,
        )


class EstimateReply(BaseModel):
    """Validated duration estimate reply. Unknown categories become ``medium``."""

    category: TaskType = TaskType.MEDIUM
    confidence: Confidence = Confidence.LOW
    reasoning: str = NO_REASONING

    @field_validator("category", mode="before")
    @classmethod
    def coerce_category(cls, v: Any) -> TaskType:
        try:
            return TaskType(_normalize_token(v))
        except ValueError:
            return TaskType.MEDIUM

    @field_validator("confidence", mode="before")
    @classmethod
    def coerce_confidence(cls, v: Any) -> Confidence:
        return _coerce_confidence(v)

    def to_estimate(self) -> TaskEstimate:
        return TaskEstimate(type=self.category, confidence=self.confidence, reasoning=self.reasoning)


def parse_classification_response(raw: str) -> InterruptDecision:
    """Decode an ``Intent/Confidence/ShouldAsk/Reasoning`` reply.

    Returns:
        The decoded decision, or the fallback decision if the reply cannot
        be validated.
    """
    fields = _extract_fields(raw, ("intent", "confidence", "should_ask", "reasoning"))
    try:
        return ClassificationReply.model_validate(fields).to_decision()
    except ValidationError as e:
        logger.warning(f"Unusable classification reply, falling back: {e}")
        return FALLBACK_DECISION


def parse_time_estimate_response(raw: str) -> TaskEstimate:
    """Decode a ``Category/Confidence/MinutesEstimate/Reasoning`` reply."""
    fields = _extract_fields(raw, ("category", "confidence", "reasoning"))
    try:
        return EstimateReply.model_validate(fields).to_estimate()
    except ValidationError as e:
        logger.warning(f"Unusable estimate reply, falling back: {e}")
        return FALLBACK_ESTIMATE


def is_stop_command(message: str) -> bool:
    """Whether the whole message is an explicit stop word."""
    return STOP_PATTERN.match(message.strip().lower()) is not None


def resolve_classifier_model(config: Config) -> ModelRef:
    """Pick the model used for classification.

    The configured classifier model wins when it is a valid
    ``provider/model`` string, then the agent's primary model, then a
    built-in default.
    """
    classifier = config.defaults.natural_conversation.classifier_model
    if classifier is not None:
        ref = parse_model_ref(classifier.primary)
        if ref is not None:
            return ref

    ref = parse_model_ref(config.defaults.model.primary)
    if ref is not None:
        return ref

    return DEFAULT_MODEL


def validate_classifier_config(config: Config) -> ValidationResult:
    """Check that classification has a usable model configured."""
    result = ValidationResult()

    if not config.defaults.model.primary:
        result.errors.append("No default model configured (agents.defaults.model.primary)")

    classifier = config.defaults.natural_conversation.classifier_model
    classifier_model = classifier.primary if classifier is not None else None
    if classifier_model and parse_model_ref(classifier_model) is None:
        result.errors.append(
            f'Invalid classifier model format: "{classifier_model}" (expected "provider/model")'
        )

    return result


class InterruptClassifier:
    """Classifies interrupts and estimates task durations.

    Example:
        >>> classifier = InterruptClassifier(ChatModelInvoker())
        >>> decision = await classifier.classify("stop", None, config)
        >>> decision.intent
        <InterruptIntent.NEW_PRIORITY: 'new-priority'>
    """

    def __init__(self, invoker: ModelInvoker):
        """Initialize the classifier.

        Args:
            invoker: Model invocation boundary used for non-trivial messages.
        """
        self.invoker = invoker

    async def _ask(self, prompt: str, config: Config) -> str | None:
        model = resolve_classifier_model(config)
        try:
            return await self.invoker.invoke(prompt, model)
        except Exception as e:
            logger.warning(f"Classifier call to {model.qualified_name} raised: {e}")
            return None

    async def classify(
        self,
        message: str,
        current_task: str | None,
        config: Config,
    ) -> InterruptDecision:
        """Classify a message that arrived while the agent was working.

        Args:
            message: The new message text.
            current_task: Description of the task in progress, if known.
            config: Active configuration (selects the model).

        Returns:
            The decision. Never raises; an unavailable model yields the
            ambiguous/low/ask fallback.
        """
        if is_stop_command(message):
            return STOP_DECISION

        prompt = CLASSIFICATION_TEMPLATE.format(
            current_task=current_task or NO_TASK_PLACEHOLDER,
            new_message=message,
        )

        response = await self._ask(prompt, config)
        if not response:
            logger.info("Interrupt classification unavailable, falling back to ambiguous")
            return FALLBACK_DECISION

        return parse_classification_response(response)

    async def estimate_task_type(self, description: str, config: Config) -> TaskEstimate:
        """Estimate whether a task is quick, medium, or long.

        Returns:
            The estimate, or medium/low when the model is unavailable.
        """
        prompt = TIME_ESTIMATE_TEMPLATE.format(task_description=description)

        response = await self._ask(prompt, config)
        if not response:
            return FALLBACK_ESTIMATE

        return parse_time_estimate_response(response)
