"""Tests for MaintenanceScheduler."""

from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import pytest

from huxley.core.config import Config, MaintenanceConfig
from huxley.model.resume import AutoResumeSessionState
from huxley.runtime.context import RuntimeContext
from huxley.runtime.scheduling.maintenance import MAINTENANCE_JOB_ID, MaintenanceScheduler


class FakeClock:
    """Settable millisecond clock."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def runtime(tmp_path: Path, clock: FakeClock) -> RuntimeContext:
    config = Config(agents={"defaults": {"workspace": str(tmp_path / "workspace")}})
    return RuntimeContext(config, invoker=AsyncMock(), clock=clock, env={}, resume_dir=tmp_path / "auto-resume")


class TestRunOnce:
    """A sweep cleans every component."""

    @pytest.mark.asyncio
    async def test_removes_stale_state(self, runtime: RuntimeContext, clock: FakeClock):
        runtime.register.signal("agent:main:main", "hello", runtime.config)
        runtime.sentinels.write(
            AutoResumeSessionState(
                session_key="agent:main:main",
                user_prompt="x",
                run_id="r",
                timestamp=clock.now,
            )
        )
        clock.now += 31 * 60 * 1000

        removed = await MaintenanceScheduler(runtime).run_once()

        assert removed == {"interrupts": 1, "sentinels": 1, "tasks": 0}
        assert len(runtime.register) == 0

    @pytest.mark.asyncio
    async def test_nothing_stale(self, runtime: RuntimeContext):
        removed = await MaintenanceScheduler(runtime).run_once()
        assert removed == {"interrupts": 0, "sentinels": 0, "tasks": 0}

    @pytest.mark.asyncio
    async def test_failing_step_does_not_stop_others(self, runtime: RuntimeContext):
        with patch.object(runtime.sentinels, "cleanup_old", side_effect=OSError("denied")):
            removed = await MaintenanceScheduler(runtime).run_once()
        assert "sentinels" not in removed
        assert removed["interrupts"] == 0
        assert removed["tasks"] == 0

    @pytest.mark.asyncio
    async def test_without_tracker(self, tmp_path: Path):
        runtime = RuntimeContext(Config(), invoker=AsyncMock(), env={}, resume_dir=tmp_path / "ar")
        assert runtime.tracker is None
        removed = await MaintenanceScheduler(runtime).run_once()
        assert "tasks" not in removed

    @pytest.mark.asyncio
    async def test_uses_configured_interrupt_age(self, runtime: RuntimeContext, clock: FakeClock):
        runtime.register.signal("agent:main:main", "hello", runtime.config)
        clock.now += 2000
        scheduler = MaintenanceScheduler(runtime, MaintenanceConfig(interrupt_max_age_ms=1000))
        removed = await scheduler.run_once()
        assert removed["interrupts"] == 1


class TestLifecycle:
    """Tests for start() and stop()."""

    @pytest.mark.asyncio
    async def test_disabled_does_not_start(self, runtime: RuntimeContext):
        scheduler = MaintenanceScheduler(runtime, MaintenanceConfig(enabled=False))
        await scheduler.start()
        assert scheduler.running is False

    @pytest.mark.asyncio
    async def test_start_registers_interval_job(self, runtime: RuntimeContext):
        mock_scheduler = Mock()
        with patch(
            "huxley.runtime.scheduling.maintenance.AsyncIOScheduler",
            return_value=mock_scheduler,
        ):
            scheduler = MaintenanceScheduler(runtime, MaintenanceConfig(interval_seconds=30))
            await scheduler.start()

        mock_scheduler.add_job.assert_called_once()
        kwargs = mock_scheduler.add_job.call_args.kwargs
        assert kwargs["id"] == MAINTENANCE_JOB_ID
        assert kwargs["func"] == scheduler.run_once
        assert kwargs["trigger"].interval.total_seconds() == 30
        mock_scheduler.start.assert_called_once()

    @pytest.mark.asyncio
    async def test_start_and_stop(self, runtime: RuntimeContext):
        scheduler = MaintenanceScheduler(runtime)
        await scheduler.start()
        assert scheduler.running is True
        await scheduler.stop()
        assert scheduler.running is False

    @pytest.mark.asyncio
    async def test_stop_completes_apscheduler_shutdown(self, runtime: RuntimeContext):
        scheduler = MaintenanceScheduler(runtime)
        await scheduler.start()
        inner = scheduler._scheduler

        await scheduler.stop()

        assert inner.running is False

    @pytest.mark.asyncio
    async def test_double_stop_shuts_down_once(self, runtime: RuntimeContext):
        mock_scheduler = Mock()
        mock_scheduler.running = True
        with patch(
            "huxley.runtime.scheduling.maintenance.AsyncIOScheduler",
            return_value=mock_scheduler,
        ):
            scheduler = MaintenanceScheduler(runtime)
            await scheduler.start()

        await scheduler.stop()
        await scheduler.stop()

        mock_scheduler.shutdown.assert_called_once_with(wait=True)
        assert scheduler.running is False

    @pytest.mark.asyncio
    async def test_restart_after_stop(self, runtime: RuntimeContext):
        scheduler = MaintenanceScheduler(runtime)
        await scheduler.start()
        await scheduler.stop()
        await scheduler.start()
        assert scheduler.running is True
        await scheduler.stop()
        assert scheduler.running is False

    @pytest.mark.asyncio
    async def test_stop_without_start(self, runtime: RuntimeContext):
        await MaintenanceScheduler(runtime).stop()
