"""MaintenanceScheduler for periodic cleanup of interrupt and task state."""

import asyncio
import logging
from typing import Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from huxley.core.config import MaintenanceConfig
from huxley.runtime.context import RuntimeContext

logger = logging.getLogger(__name__)

MAINTENANCE_JOB_ID = "huxley_maintenance"


class MaintenanceScheduler:
    """Expires stale interrupt signals, old tasks, and old sentinels on an interval.

    Each sweep is best-effort: a failing step is logged and the remaining
    steps still run.
    """

    def __init__(self, runtime: RuntimeContext, config: MaintenanceConfig | None = None):
        """Initialize the maintenance scheduler.

        Args:
            runtime: Runtime context whose components are cleaned up.
            config: Maintenance settings (default: runtime.config.maintenance).
        """
        self.runtime = runtime
        self.config = config if config is not None else runtime.config.maintenance
        self._scheduler: AsyncIOScheduler | None = None
        self._job: Any = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    async def start(self) -> None:
        """Start the maintenance scheduler with an interval trigger."""
        if not self.config.enabled:
            logger.info("Maintenance scheduler disabled")
            return

        self._scheduler = AsyncIOScheduler()
        trigger = IntervalTrigger(seconds=self.config.interval_seconds)

        self._job = self._scheduler.add_job(
            func=self.run_once,
            trigger=trigger,
            id=MAINTENANCE_JOB_ID,
            name="Huxley maintenance",
            replace_existing=True,
        )

        self._scheduler.start()
        logger.info(f"Maintenance scheduler started (interval: {self.config.interval_seconds}s)")

    async def stop(self) -> None:
        """Stop the maintenance scheduler gracefully. Safe to call twice."""
        scheduler, self._scheduler = self._scheduler, None
        self._job = None
        if scheduler is not None and scheduler.running:
            scheduler.shutdown(wait=True)
            # AsyncIOScheduler completes the shutdown on the next loop iteration.
            await asyncio.sleep(0)
            logger.info("Maintenance scheduler stopped")

    async def run_once(self) -> dict[str, int]:
        """Run one cleanup sweep.

        Returns:
            Removal counts keyed by component (``interrupts``, ``tasks``,
            ``sentinels``); a failed step is absent.
        """
        steps = {
            "interrupts": lambda: self.runtime.register.cleanup(self.config.interrupt_max_age_ms),
            "sentinels": self.runtime.sentinels.cleanup_old,
        }
        if self.runtime.tracker is not None:
            steps["tasks"] = self.runtime.tracker.cleanup

        removed: dict[str, int] = {}
        for name, step in steps.items():
            try:
                removed[name] = step()
            except Exception as e:
                logger.debug(f"Maintenance step '{name}' failed: {e}")

        if any(removed.values()):
            logger.info(f"Maintenance removed: {removed}")
        return removed
