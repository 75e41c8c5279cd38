"""Inbound message dispatch with interrupt signalling and classification."""

import logging
import os
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from huxley.conversation.classifier import validate_classifier_config
from huxley.conversation.prompt import (
    is_natural_conversation_enabled,
    validate_natural_conversation_config,
)
from huxley.core.config import Config
from huxley.core.logging import get_decision_logger
from huxley.core.paths import INTERRUPT_MD, resolve_workspace
from huxley.model.message import InboundContext
from huxley.model.session import NON_INTERRUPTABLE_KINDS, classify_session_key
from huxley.model.validation import DoctorReport
from huxley.runtime.context import RuntimeContext
from huxley.stores.task import validate_task_requirements

logger = logging.getLogger(__name__)
decision_log = get_decision_logger()

UNKNOWN_SESSION = "unknown"

ReplyHandler = Callable[[InboundContext], Awaitable[Any]]


def validate_natural_conversation(config: Config, env: Mapping[str, str] | None = None) -> DoctorReport:
    """Collect every natural conversation problem for diagnostics.

    Combines the feature, task storage, and classifier checks, and warns
    about settings that work but are probably not what the operator wants.
    A disabled feature reports nothing.
    """
    env = os.environ if env is None else env
    report = DoctorReport()
    if not is_natural_conversation_enabled(config, env):
        return report

    errors = [
        *validate_natural_conversation_config(config, env).errors,
        *validate_task_requirements(config, env).errors,
        *validate_classifier_config(config).errors,
    ]
    report.errors.extend(dict.fromkeys(errors))

    if config.defaults.natural_conversation.classifier_model is None:
        report.warnings.append(
            "No classifier model configured - using primary model for interruptions (may increase costs). "
            "Define agents.defaults.naturalConversation.classifierModel.primary to use a cheaper model."
        )

    workspace = resolve_workspace(config)
    if workspace is not None and not (workspace / INTERRUPT_MD).is_file():
        report.warnings.append(
            f"No {INTERRUPT_MD} found in workspace ({workspace}) - using default interrupt behavior. "
            f"Create {INTERRUPT_MD} to customize."
        )

    return report


class DispatchOrchestrator:
    """Runs interrupt handling for each inbound message, then hands it on.

    Per message: heartbeats, the agent's own messages, and messages in
    automated sessions pass straight through; otherwise the session is signalled, and when natural
    conversation is on the message is classified against running work.
    Failures in this path are logged and never block the reply.

    Example:
        >>> orchestrator = DispatchOrchestrator(RuntimeContext(config))
        >>> await orchestrator.dispatch(ctx, reply_pipeline)
    """

    def __init__(self, runtime: RuntimeContext):
        self.runtime = runtime

    @property
    def config(self) -> Config:
        return self.runtime.config

    async def dispatch(
        self,
        ctx: InboundContext,
        reply_handler: ReplyHandler,
        is_heartbeat: bool = False,
    ) -> Any:
        """Annotate an inbound message and pass it to the reply pipeline.

        Args:
            ctx: Inbound message context; decision fields are set in place.
            reply_handler: Downstream reply pipeline.
            is_heartbeat: True for scheduled heartbeat prompts.

        Returns:
            Whatever the reply handler returns.
        """
        session_key = ctx.session_key or UNKNOWN_SESSION
        kind = classify_session_key(session_key, self.config.session.main_key)

        if is_heartbeat:
            logger.debug("Heartbeat - skipping interrupt check")
        elif self.runtime.identity.is_self_message(ctx, self.config):
            logger.debug(f"Self-message in session {session_key} - skipping interrupt check")
        elif kind in NON_INTERRUPTABLE_KINDS:
            logger.debug(f"Session {session_key} is {kind.value} - skipping interrupt check")
        else:
            self.runtime.register.signal(session_key, ctx.text, self.config)
            await self._apply_natural_conversation(ctx, session_key)

        return await reply_handler(ctx)

    async def _apply_natural_conversation(self, ctx: InboundContext, session_key: str) -> None:
        if not is_natural_conversation_enabled(self.config, self.runtime.env):
            return

        validation = validate_natural_conversation_config(self.config, self.runtime.env)
        if not validation.valid:
            logger.warning(f"Natural conversation misconfigured: {', '.join(validation.errors)}")
            return

        tracker = self.runtime.tracker
        if tracker is None:
            logger.debug("Task tracking unavailable - skipping natural conversation")
            return

        try:
            if tracker.has_running_work(session_key):
                current_task = tracker.get_for_session(session_key)
                description = current_task.description if current_task is not None else None
                decision = await self.runtime.classifier.classify(ctx.text, description, self.config)
                logger.info(
                    f"Interrupt detected: {decision.intent.value} "
                    f"(confidence: {decision.confidence.value}) - {decision.reasoning}"
                )
                decision_log.info(
                    f"session={session_key} intent={decision.intent.value} "
                    f"confidence={decision.confidence.value} ask={decision.should_ask} "
                    f"task={description!r} message={ctx.text[:100]!r}"
                )
                ctx.interrupt_decision = decision
                ctx.current_task_description = description
            else:
                ctx.is_new_task = True
        except Exception as e:
            logger.error(f"Natural conversation error in session {session_key}: {e}", exc_info=True)
