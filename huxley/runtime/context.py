"""Runtime context owning the interrupt subsystem's stateful components."""

import logging
import os
from collections.abc import Callable, Mapping
from pathlib import Path

from huxley.conversation.classifier import InterruptClassifier
from huxley.conversation.llm import ChatModelInvoker, ModelInvoker
from huxley.core.config import Config
from huxley.core.paths import resolve_auto_resume_dir, resolve_task_dir
from huxley.core.utils import now_ms
from huxley.interrupt.identity import BotIdentityCache
from huxley.interrupt.register import InterruptRegister
from huxley.runtime.background import BackgroundWorkSpawner
from huxley.stores.resume import AutoResumeStore
from huxley.stores.task import TaskTracker

logger = logging.getLogger(__name__)


class RuntimeContext:
    """Holds one register, identity cache, classifier, and store set.

    Each context is independent, so tests and multiple agents in one
    process never share interrupt or task state.

    Attributes:
        config: Active configuration.
        register: Per-session interrupt signals.
        identity: Names and IDs treated as the agent itself.
        classifier: Interrupt classifier backed by the invoker.
        tracker: Task registry, or None when no task directory resolves.
        spawner: Background hand-off, present whenever tracker is.
        sentinels: Auto-resume sentinel store.
    """

    def __init__(
        self,
        config: Config,
        invoker: ModelInvoker | None = None,
        clock: Callable[[], int] = now_ms,
        env: Mapping[str, str] | None = None,
        task_dir: Path | None = None,
        resume_dir: Path | None = None,
    ):
        """Build the components for a configuration.

        Args:
            config: Active configuration.
            invoker: Model invocation boundary (default ChatModelInvoker).
            clock: Returns the current time in epoch milliseconds.
            env: Environment mapping for policy overrides (default os.environ).
            task_dir: Overrides the resolved task directory.
            resume_dir: Overrides the resolved auto-resume directory.
        """
        self.config = config
        self.clock = clock
        self.env = os.environ if env is None else env

        self.register = InterruptRegister(clock=clock, env=self.env)
        self.identity = BotIdentityCache()
        self.identity.initialize(config)
        self.classifier = InterruptClassifier(invoker if invoker is not None else ChatModelInvoker())

        task_dir = task_dir if task_dir is not None else resolve_task_dir(config, self.env)
        if task_dir is not None:
            self.tracker: TaskTracker | None = TaskTracker(task_dir, self.classifier, clock=clock)
            self.spawner: BackgroundWorkSpawner | None = BackgroundWorkSpawner(self.tracker)
        else:
            logger.info("No workspace or task state directory configured, task tracking disabled")
            self.tracker = None
            self.spawner = None

        resume_dir = resume_dir if resume_dir is not None else resolve_auto_resume_dir(config, self.env)
        self.sentinels = AutoResumeStore(resume_dir, clock=clock)

    def reset(self) -> None:
        """Forget in-memory state (pending interrupts and identity markers)."""
        self.register.reset()
        self.identity.clear()
        self.identity.initialize(self.config)
        logger.debug("Runtime context reset")
