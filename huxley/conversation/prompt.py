"""Natural conversation policy and interrupt-handling guide loader."""

import logging
import os
from collections.abc import Mapping

from huxley.core.config import Config
from huxley.core.paths import INTERRUPT_MD, resolve_workspace
from huxley.core.prompts.system_events import NATURAL_CONVERSATION_PROMPT
from huxley.core.utils import env_flag
from huxley.conversation.llm import parse_model_ref
from huxley.model.validation import ValidationResult

logger = logging.getLogger(__name__)

NATURAL_CONVERSATION_ENV = "HUXLEY_NATURAL_CONVERSATION"


def is_natural_conversation_enabled(config: Config, env: Mapping[str, str] | None = None) -> bool:
    """Explicit config wins, then HUXLEY_NATURAL_CONVERSATION, then enabled."""
    explicit = config.defaults.natural_conversation.enabled
    if explicit is not None:
        return explicit
    flag = env_flag(NATURAL_CONVERSATION_ENV, os.environ if env is None else env)
    if flag is not None:
        return flag
    return True


def load_interrupt_prompt(config: Config) -> str:
    """Load the interrupt handling guide from the workspace.

    Returns:
        Contents of ``<workspace>/INTERRUPT.md``, or the built-in guide when
        the file is absent or unreadable.
    """
    workspace = resolve_workspace(config)
    if workspace is not None:
        path = workspace / INTERRUPT_MD
        try:
            content = path.read_text(encoding="utf-8")
            logger.debug(f"Loaded custom {INTERRUPT_MD} from {path}")
            return content
        except OSError:
            logger.debug(f"No custom {INTERRUPT_MD} at {path}, using default")
    return NATURAL_CONVERSATION_PROMPT


def validate_natural_conversation_config(
    config: Config,
    env: Mapping[str, str] | None = None,
) -> ValidationResult:
    """Check the settings natural conversation depends on.

    A disabled feature is always valid.
    """
    result = ValidationResult()
    if not is_natural_conversation_enabled(config, env):
        return result

    if not config.defaults.model.primary:
        result.errors.append("Natural conversation requires agents.defaults.model.primary to be configured")

    if config.defaults.workspace is None:
        result.errors.append("Natural conversation requires agents.defaults.workspace to be configured")

    classifier = config.defaults.natural_conversation.classifier_model
    classifier_model = classifier.primary if classifier is not None else None
    if classifier_model and parse_model_ref(classifier_model) is None:
        result.errors.append(
            f'Invalid classifier model format: "{classifier_model}" (expected "provider/model")'
        )

    return result
