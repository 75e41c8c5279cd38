"""Tests for configuration models and YAML loading."""

from pathlib import Path

import pytest
import yaml

from huxley.core.config import (
    Config,
    check_unexpanded_vars,
    expand_env_vars,
    find_unexpanded_vars,
    load_config,
)


def write_config(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestLoadConfig:
    """Tests for load_config()."""

    def test_camel_case_keys(self, tmp_path: Path):
        path = write_config(
            tmp_path,
            {
                "agents": {
                    "defaults": {
                        "model": {"primary": "anthropic/claude-sonnet-4"},
                        "workspace": str(tmp_path),
                        "autoResume": True,
                        "identity": {"name": "Huxley", "aliases": ["hux"]},
                        "interrupt": {"enabled": False},
                        "naturalConversation": {
                            "enabled": True,
                            "classifierModel": {"primary": "openai/gpt-4o-mini"},
                        },
                    }
                },
                "channels": {"discord": {"name": "HuxBot"}},
                "session": {"mainKey": "home"},
                "stateDir": str(tmp_path / "state"),
            },
        )

        config = load_config(path)

        assert config.defaults.model.primary == "anthropic/claude-sonnet-4"
        assert config.defaults.workspace == tmp_path
        assert config.defaults.auto_resume is True
        assert config.defaults.identity.aliases == ["hux"]
        assert config.defaults.interrupt.enabled is False
        assert config.defaults.natural_conversation.classifier_model.primary == "openai/gpt-4o-mini"
        assert config.channels.discord.name == "HuxBot"
        assert config.session.main_key == "home"
        assert config.state_dir == tmp_path / "state"

    def test_snake_case_keys(self, tmp_path: Path):
        path = write_config(tmp_path, {"agents": {"defaults": {"auto_resume": False}}, "state_dir": "/tmp/s"})
        config = load_config(path)
        assert config.defaults.auto_resume is False
        assert config.state_dir == Path("/tmp/s")

    def test_empty_file_gives_defaults(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        config = load_config(path)
        assert config.defaults.workspace is None
        assert config.defaults.auto_resume is None
        assert config.session.main_key == "main"
        assert config.maintenance.interval_seconds == 60
        assert config.logging.level == "INFO"

    def test_unknown_keys_allowed(self, tmp_path: Path):
        path = write_config(tmp_path, {"agents": {"defaults": {"thinking": "low"}}, "gateway": {"port": 1}})
        load_config(path)

    def test_env_expansion(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("HUX_MODEL", "anthropic/claude-haiku-4-5")
        path = write_config(tmp_path, {"agents": {"defaults": {"model": {"primary": "${HUX_MODEL}"}}}})
        assert load_config(path).defaults.model.primary == "anthropic/claude-haiku-4-5"

    def test_unresolved_variable_raises(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("HUX_MISSING", raising=False)
        path = write_config(tmp_path, {"channels": {"discord": {"name": "${HUX_MISSING}"}}})
        with pytest.raises(ValueError, match="HUX_MISSING"):
            load_config(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")


class TestEnvHelpers:
    """Tests for ${VAR} helpers."""

    def test_unknown_variable_left_in_place(self):
        assert expand_env_vars("a ${HUX_NOPE} b", env={}) == "a ${HUX_NOPE} b"

    def test_explicit_env_mapping(self):
        assert expand_env_vars("${A}/${B}", env={"A": "openai", "B": "gpt-4o-mini"}) == "openai/gpt-4o-mini"

    def test_non_identifier_left_alone(self):
        assert find_unexpanded_vars({"x": "${not a var}"}) == []

    def test_find_reports_key_paths(self):
        data = {"agents": {"defaults": {"identity": {"aliases": ["hux", "${ALIAS}"]}}}}
        assert find_unexpanded_vars(data) == [("agents.defaults.identity.aliases[1]", "${ALIAS}")]

    def test_check_unexpanded_nested(self):
        with pytest.raises(ValueError, match=r"\$\{A\} at x\[1\]\.y, \$\{B\} at x\[0\]"):
            check_unexpanded_vars({"x": ["${B}", {"y": "${A}"}]}, source="test")

    def test_check_clean(self):
        check_unexpanded_vars({"x": ["plain", 1, None]}, source="test")

    def test_load_config_with_env_mapping(self, tmp_path: Path):
        path = write_config(tmp_path, {"channels": {"discord": {"name": "${BOT}"}}})
        assert load_config(path, env={"BOT": "HuxBot"}).channels.discord.name == "HuxBot"

    def test_non_mapping_top_level(self, tmp_path: Path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="must be a mapping"):
            load_config(path)


class TestConfigDefaults:
    """Tests for Config construction in code."""

    def test_defaults_shortcut(self):
        config = Config(agents={"defaults": {"workspace": "/w"}})
        assert config.defaults is config.agents.defaults
        assert config.defaults.workspace == Path("/w")

    def test_maintenance_defaults(self):
        maintenance = Config().maintenance
        assert maintenance.enabled is True
        assert maintenance.interrupt_max_age_ms == 300_000
