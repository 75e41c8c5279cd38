"""Natural conversation: model invocation, interrupt classification, and prompt policy."""

from huxley.conversation.classifier import (
    DEFAULT_MODEL,
    FALLBACK_ESTIMATE,
    InterruptClassifier,
    is_stop_command,
    parse_classification_response,
    parse_time_estimate_response,
    resolve_classifier_model,
    validate_classifier_config,
)
from huxley.conversation.llm import ChatModelInvoker, ModelInvoker, ModelRef, parse_model_ref
from huxley.conversation.prompt import (
    NATURAL_CONVERSATION_ENV,
    is_natural_conversation_enabled,
    load_interrupt_prompt,
    validate_natural_conversation_config,
)

__all__ = [
    # Model invocation
    "ChatModelInvoker",
    "ModelInvoker",
    "ModelRef",
    "parse_model_ref",
    # Classifier
    "DEFAULT_MODEL",
    "FALLBACK_ESTIMATE",
    "InterruptClassifier",
    "is_stop_command",
    "parse_classification_response",
    "parse_time_estimate_response",
    "resolve_classifier_model",
    "validate_classifier_config",
    # Prompt policy
    "NATURAL_CONVERSATION_ENV",
    "is_natural_conversation_enabled",
    "load_interrupt_prompt",
    "validate_natural_conversation_config",
]
