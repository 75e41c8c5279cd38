"""Startup replay of responses cut off by a restart."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from huxley.model.message import InboundContext
from huxley.runtime.dispatch import DispatchOrchestrator, ReplyHandler
from huxley.stores.resume import AUTO_RESUME_TIMEOUT_MS, is_auto_resume_enabled

logger = logging.getLogger(__name__)

TEST_ENV_MARKER = "PYTEST_CURRENT_TEST"
RESUME_MESSAGE_SOURCE = "internal"


@dataclass
class ResumeReport:
    """Counts from one startup sweep."""

    processed: int = 0
    resumed: int = 0
    failed: int = 0


class AutoResumeSweeper:
    """Replays recent in-progress sentinels through normal dispatch.

    Sentinels up to five minutes old are consumed and replayed once each.
    Older ones are left alone until they age out of the store.
    """

    def __init__(
        self,
        orchestrator: DispatchOrchestrator,
        reply_handler: ReplyHandler,
        env: Mapping[str, str] | None = None,
        timeout_ms: int = AUTO_RESUME_TIMEOUT_MS,
    ):
        """Initialize the sweeper.

        Args:
            orchestrator: Dispatch path the resume prompts go through.
            reply_handler: Downstream reply pipeline for resumed sessions.
            env: Environment mapping (default os.environ).
            timeout_ms: Maximum sentinel age that is still replayed.
        """
        self.orchestrator = orchestrator
        self.reply_handler = reply_handler
        self.env = os.environ if env is None else env
        self.timeout_ms = timeout_ms

    def should_run(self) -> bool:
        if not is_auto_resume_enabled(self.orchestrator.config, self.env):
            return False
        return not self.env.get(TEST_ENV_MARKER)

    async def run(self) -> ResumeReport:
        """Clean up, then replay each recent sentinel.

        A failed replay is logged and does not stop the sweep.
        """
        report = ResumeReport()
        if not self.should_run():
            logger.debug("Auto-resume disabled, skipping startup sweep")
            return report

        runtime = self.orchestrator.runtime
        sentinels = runtime.sentinels
        sentinels.cleanup_old()
        states = sentinels.list_all()
        report.processed = len(states)
        now = runtime.clock()

        for state in states:
            if now - state.timestamp > self.timeout_ms:
                continue

            consumed = sentinels.consume(state.session_key)
            if consumed is None:
                continue

            ctx = InboundContext(
                session_key=consumed.session_key,
                body=sentinels.format_resume_prompt(consumed),
                message_source=RESUME_MESSAGE_SOURCE,
                is_auto_resume=True,
            )
            try:
                await self.orchestrator.dispatch(ctx, self.reply_handler)
            except Exception as e:
                report.failed += 1
                logger.error(f"Failed to resume session {consumed.session_key}: {e}", exc_info=True)
                continue

            report.resumed += 1
            logger.info(f"Resumed interrupted session: {consumed.session_key}")

        if report.processed:
            logger.info(
                f"Processed {report.processed} saved state(s), "
                f"resumed {report.resumed}, failed {report.failed}"
            )
        return report
