"""Tests for the per-session InterruptRegister."""

import pytest

from huxley.core.config import Config
from huxley.interrupt.register import InterruptRegister, is_interrupt_enabled

MAIN = "agent:main:main"


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
def register(clock: FakeClock) -> InterruptRegister:
    return InterruptRegister(clock=clock, env={})


@pytest.fixture
def config() -> Config:
    return Config()


class TestIsInterruptEnabled:
    """Policy resolution: config, then env, then on."""

    def test_default_enabled(self):
        assert is_interrupt_enabled(Config(), env={}) is True

    def test_env_disables(self):
        assert is_interrupt_enabled(Config(), env={"OPENCLAW_INTERRUPT_ENABLED": "0"}) is False

    def test_config_wins_over_env(self):
        config = Config(agents={"defaults": {"interrupt": {"enabled": True}}})
        assert is_interrupt_enabled(config, env={"OPENCLAW_INTERRUPT_ENABLED": "false"}) is True

    def test_none_config_uses_env(self):
        assert is_interrupt_enabled(None, env={"OPENCLAW_INTERRUPT_ENABLED": "yes"}) is True


class TestSignal:
    """Tests for signal() and its session policy."""

    def test_signal_then_check(self, register: InterruptRegister, config: Config, clock: FakeClock):
        assert register.signal(MAIN, "are you there?", config) is True
        status = register.check(MAIN)
        assert status.pending is True
        assert status.reason == "are you there?"
        assert status.session_key == MAIN

    def test_check_does_not_consume(self, register: InterruptRegister, config: Config):
        register.signal(MAIN, "x", config)
        register.check(MAIN)
        assert register.check(MAIN).pending is True

    def test_later_signal_overwrites(self, register: InterruptRegister, config: Config):
        register.signal(MAIN, "first", config)
        register.signal(MAIN, "second", config)
        assert register.check(MAIN).reason == "second"
        assert len(register) == 1

    def test_heartbeat_never_sets(self, register: InterruptRegister, config: Config):
        assert register.signal(MAIN, "HEARTBEAT", config, is_heartbeat=True) is False
        assert register.check(MAIN).pending is False

    @pytest.mark.parametrize(
        "session_key",
        ["agent:main:cron:digest", "agent:main:hook:gh", "agent:main:node:1", "node-3", "unknown", ""],
    )
    def test_automated_sessions_never_set(self, register: InterruptRegister, config: Config, session_key: str):
        assert register.signal(session_key, "x", config) is False
        assert register.check(session_key).pending is False
        assert len(register) == 0

    def test_disabled_by_config(self, register: InterruptRegister):
        config = Config(agents={"defaults": {"interrupt": {"enabled": False}}})
        assert register.signal(MAIN, "x", config) is False
        assert register.check(MAIN).pending is False

    def test_disabled_by_env(self, clock: FakeClock, config: Config):
        register = InterruptRegister(clock=clock, env={"OPENCLAW_INTERRUPT_ENABLED": "off"})
        assert register.signal(MAIN, "x", config) is False


class TestCheckAndClear:
    """A signal is consumed exactly once."""

    def test_no_double_fire(self, register: InterruptRegister, config: Config):
        register.signal(MAIN, "stop that", config)
        assert register.check_and_clear(MAIN) is True
        assert register.check_and_clear(MAIN) is False
        assert register.check(MAIN).pending is False

    def test_unknown_session(self, register: InterruptRegister):
        assert register.check_and_clear("agent:main:other-chat") is False

    def test_clear(self, register: InterruptRegister, config: Config):
        register.signal(MAIN, "x", config)
        register.clear(MAIN)
        assert register.check_and_clear(MAIN) is False

    def test_sessions_are_independent(self, register: InterruptRegister, config: Config):
        other = "agent:main:discord:channel:9"
        register.signal(MAIN, "a", config)
        register.signal(other, "b", config)
        assert register.check_and_clear(MAIN) is True
        assert register.check(other).reason == "b"


class TestCleanup:
    """Tests for age-based cleanup."""

    def test_boundary_is_kept(self, register: InterruptRegister, config: Config, clock: FakeClock):
        register.signal(MAIN, "x", config)
        clock.now += 1000
        assert register.cleanup(max_age_ms=1000) == 0
        assert register.check(MAIN).pending is True

    def test_older_than_max_age_removed(self, register: InterruptRegister, config: Config, clock: FakeClock):
        register.signal(MAIN, "x", config)
        clock.now += 1001
        assert register.cleanup(max_age_ms=1000) == 1
        assert register.check(MAIN).pending is False

    def test_default_max_age(self, register: InterruptRegister, config: Config, clock: FakeClock):
        register.signal(MAIN, "x", config)
        clock.now += 5 * 60 * 1000 + 1
        assert register.cleanup() == 1


class TestDiagnostics:
    """Tests for snapshot() and reset()."""

    def test_snapshot(self, register: InterruptRegister, config: Config, clock: FakeClock):
        register.signal(MAIN, "x", config)
        clock.now += 250
        snapshot = register.snapshot()
        assert snapshot == {"pending_sessions": [MAIN], "oldest_age_ms": 250}

    def test_empty_snapshot(self, register: InterruptRegister):
        assert register.snapshot() == {"pending_sessions": [], "oldest_age_ms": None}

    def test_reset(self, register: InterruptRegister, config: Config):
        register.signal(MAIN, "x", config)
        register.reset()
        assert len(register) == 0
