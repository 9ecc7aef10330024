# tests/unit/test_config.py
"""Tests for YAML + environment configuration loading."""

import pytest

from decisionboard.config import ConfigLoader, DecisionBoardConfig, SchedulerConfig

ENV_VARS = [
    "DECISIONBOARD_ENV",
    "DECISIONBOARD_LOG_LEVEL",
    "DECISIONBOARD_SEED_DEMO_DATA",
    "DECISIONBOARD_SCHEDULER_ENABLED",
    "DECISIONBOARD_TIMEZONE",
    "DECISIONBOARD_OVERDUE_CRON",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "default.yaml").write_text(
        "log_level: INFO\n"
        "scheduler:\n"
        "  timezone: UTC\n"
        "  overdue_sweep_cron: '0 0 * * *'\n"
    )
    return tmp_path


class TestDefaults:

    def test_model_defaults(self):
        config = DecisionBoardConfig()

        assert config.environment == "development"
        assert config.seed_demo_data is False
        assert config.scheduler == SchedulerConfig()
        assert config.scheduler.overdue_sweep_cron == "0 0 * * *"

    def test_missing_directory_falls_back_to_defaults(self, tmp_path):
        config = ConfigLoader(str(tmp_path / "nowhere")).get()

        assert config == DecisionBoardConfig()


class TestYamlLayers:

    def test_default_yaml(self, config_dir):
        config = ConfigLoader(str(config_dir)).get()

        assert config.log_level == "INFO"
        assert config.scheduler.enabled is True

    def test_environment_file_overrides_nested_keys(self, config_dir, monkeypatch):
        (config_dir / "test.yaml").write_text(
            "seed_demo_data: true\n"
            "scheduler:\n"
            "  enabled: false\n"
        )
        monkeypatch.setenv("DECISIONBOARD_ENV", "test")

        config = ConfigLoader(str(config_dir)).get()

        assert config.environment == "test"
        assert config.seed_demo_data is True
        assert config.scheduler.enabled is False
        # Untouched sibling keys survive the merge
        assert config.scheduler.timezone == "UTC"

    def test_broken_yaml_is_ignored(self, config_dir):
        (config_dir / "default.yaml").write_text("scheduler: [unclosed\n")

        assert ConfigLoader(str(config_dir)).get() == DecisionBoardConfig()


class TestEnvironmentOverrides:

    def test_env_wins_over_yaml(self, config_dir, monkeypatch):
        monkeypatch.setenv("DECISIONBOARD_LOG_LEVEL", "debug")
        monkeypatch.setenv("DECISIONBOARD_SCHEDULER_ENABLED", "no")
        monkeypatch.setenv("DECISIONBOARD_OVERDUE_CRON", "30 8 * * 1-5")
        monkeypatch.setenv("DECISIONBOARD_TIMEZONE", "Europe/Berlin")
        monkeypatch.setenv("DECISIONBOARD_SEED_DEMO_DATA", "1")

        config = ConfigLoader(str(config_dir)).get()

        assert config.log_level == "DEBUG"
        assert config.seed_demo_data is True
        assert config.scheduler.enabled is False
        assert config.scheduler.overdue_sweep_cron == "30 8 * * 1-5"
        assert config.scheduler.timezone == "Europe/Berlin"

    def test_reload_picks_up_changes(self, config_dir, monkeypatch):
        loader = ConfigLoader(str(config_dir))
        assert loader.get().seed_demo_data is False

        monkeypatch.setenv("DECISIONBOARD_SEED_DEMO_DATA", "true")
        loader.reload()

        assert loader.get().seed_demo_data is True
