"""Tests for the huxley CLI."""

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
import yaml

from huxley.cli import main, run, run_resume
from huxley.core.config import Config
from huxley.model.interrupt import Confidence
from huxley.model.resume import AutoResumeSessionState
from huxley.model.task import ActiveTask, TaskStatus, TaskType
from huxley.runtime.context import RuntimeContext
from huxley.stores.task import TaskTracker


def write_config(tmp_path: Path, **defaults) -> Path:
    base = {"model": {"primary": "anthropic/claude-sonnet-4"}, "workspace": str(tmp_path / "workspace")}
    base.update(defaults)
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"agents": {"defaults": base}, "stateDir": str(tmp_path / "state")}))
    return path


def seed_task(workspace: Path, task_id: str, session_key: str, status: TaskStatus = TaskStatus.RUNNING) -> None:
    tracker = TaskTracker(workspace)
    now = tracker.clock()
    tracker.add(
        ActiveTask(
            id=task_id,
            description=f"Work for {session_key}",
            type=TaskType.MEDIUM,
            confidence=Confidence.MEDIUM,
            status=status,
            session_key=session_key,
            started_at=now,
            last_update_at=now,
        )
    )


class TestDoctor:
    """Tests for ``huxley doctor``."""

    @pytest.mark.asyncio
    async def test_valid_config_with_warnings(self, tmp_path: Path, capsys):
        code = await main(["--config", str(write_config(tmp_path)), "doctor"])
        out = capsys.readouterr().out
        assert code == 0
        assert "WARNING: No classifier model configured" in out
        assert "Natural conversation configuration OK" in out

    @pytest.mark.asyncio
    async def test_invalid_config_exits_1(self, tmp_path: Path, capsys):
        path = write_config(tmp_path, naturalConversation={"classifierModel": {"primary": "haiku"}})
        code = await main(["--config", str(path), "doctor"])
        assert code == 1
        assert 'ERROR: Invalid classifier model format: "haiku"' in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_dotenv_next_to_config(self, tmp_path: Path, capsys, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HUX_CLI_CLASSIFIER", "unset")
        monkeypatch.delenv("HUX_CLI_CLASSIFIER")
        (tmp_path / ".env").write_text("HUX_CLI_CLASSIFIER=openai/gpt-4o-mini\n")
        path = write_config(tmp_path, naturalConversation={"classifierModel": {"primary": "${HUX_CLI_CLASSIFIER}"}})

        code = await main(["--config", str(path), "doctor"])

        assert code == 0
        assert "No classifier model configured" not in capsys.readouterr().out


class TestTasks:
    """Tests for ``huxley tasks``."""

    @pytest.mark.asyncio
    async def test_lists_tasks(self, tmp_path: Path, capsys):
        path = write_config(tmp_path)
        seed_task(tmp_path / "workspace", "task-a", "agent:main:main")
        seed_task(tmp_path / "workspace", "task-b", "agent:main:discord:channel:1")

        code = await main(["--config", str(path), "tasks"])

        out = capsys.readouterr().out
        assert code == 0
        assert "task-a" in out
        assert "task-b" in out

    @pytest.mark.asyncio
    async def test_filter_by_session(self, tmp_path: Path, capsys):
        path = write_config(tmp_path)
        seed_task(tmp_path / "workspace", "task-a", "agent:main:main")
        seed_task(tmp_path / "workspace", "task-b", "agent:main:discord:channel:1")

        await main(["--config", str(path), "tasks", "--session", "agent:main:main"])

        out = capsys.readouterr().out
        assert "task-a" in out
        assert "task-b" not in out

    @pytest.mark.asyncio
    async def test_empty(self, tmp_path: Path, capsys):
        await main(["--config", str(write_config(tmp_path)), "tasks"])
        assert "No tracked tasks" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_cleanup(self, tmp_path: Path, capsys):
        await main(["--config", str(write_config(tmp_path)), "tasks", "cleanup"])
        assert "Removed 0 task(s)" in capsys.readouterr().out


class TestSentinels:
    """Tests for ``huxley sentinels``."""

    @pytest.mark.asyncio
    async def test_lists_sentinels(self, tmp_path: Path, capsys):
        path = write_config(tmp_path)
        runtime = RuntimeContext(Config(stateDir=str(tmp_path / "state")), invoker=AsyncMock(), env={})
        runtime.sentinels.write(
            AutoResumeSessionState(
                session_key="agent:main:main",
                user_prompt="Plan the offsite",
                run_id="run-7",
                timestamp=runtime.clock(),
            )
        )

        code = await main(["--config", str(path), "sentinels"])

        out = capsys.readouterr().out
        assert code == 0
        assert "agent:main:main  run-7" in out
        assert "Plan the offsite" in out

    @pytest.mark.asyncio
    async def test_none(self, tmp_path: Path, capsys):
        await main(["--config", str(write_config(tmp_path)), "sentinels"])
        assert "No in-progress sentinels" in capsys.readouterr().out


class TestResume:
    """Tests for the resume command handler."""

    @pytest.mark.asyncio
    async def test_disabled(self, tmp_path: Path, capsys):
        runtime = RuntimeContext(Config(), invoker=AsyncMock(), env={}, resume_dir=tmp_path / "ar")
        assert await run_resume(runtime) == 0
        assert "Auto-resume is disabled" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_replays_sentinel(self, tmp_path: Path, capsys):
        config = Config(agents={"defaults": {"autoResume": True, "workspace": str(tmp_path)}})
        runtime = RuntimeContext(config, invoker=AsyncMock(), env={}, resume_dir=tmp_path / "ar")
        runtime.sentinels.write(
            AutoResumeSessionState(
                session_key="agent:main:main",
                user_prompt="Plan the offsite",
                run_id="run-7",
                timestamp=runtime.clock(),
            )
        )

        assert await run_resume(runtime) == 0
        assert "Processed 1, resumed 1, failed 0" in capsys.readouterr().out
        assert runtime.sentinels.read("agent:main:main") is None


class TestRunErrorHandling:
    """Tests for clean error reporting in the run() entry point."""

    def test_keyboard_interrupt_exits_cleanly(self):
        with patch("huxley.cli.asyncio.run", side_effect=KeyboardInterrupt):
            run()

    def test_exit_code_propagated(self):
        with patch("huxley.cli.asyncio.run", return_value=1):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1

    def test_file_not_found_prints_error(self, capsys):
        with patch("huxley.cli.asyncio.run", side_effect=FileNotFoundError("Config file not found: config.yaml")):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_yaml_error_prints_message(self, capsys):
        with patch("huxley.cli.asyncio.run", side_effect=yaml.YAMLError("bad yaml")):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        assert "Invalid YAML" in capsys.readouterr().err

    def test_value_error_prints_config_error(self, capsys):
        with patch(
            "huxley.cli.asyncio.run",
            side_effect=ValueError("Unresolved environment variable(s) in config.yaml: ${MISSING_KEY}"),
        ):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Configuration error" in err
        assert "MISSING_KEY" in err

    def test_generic_exception_prints_startup_failed(self, capsys):
        with patch("huxley.cli.asyncio.run", side_effect=RuntimeError("something broke")):
            with pytest.raises(SystemExit) as exc_info:
                run()
            assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert "Startup failed" in err
        assert "-v" in err
