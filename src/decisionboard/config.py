# src/decisionboard/config.py
"""
Configuration loader for Decision Board.
Loads configuration from YAML files and environment variables.
"""

from typing import Dict, Any, Optional
from pathlib import Path
import logging
import os

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class SchedulerConfig(BaseModel):
    """Reminder scheduler configuration."""

    # Arm the APScheduler thread at startup
    enabled: bool = True
    timezone: str = "UTC"

    # Daily overdue sweep (crontab syntax), midnight by default
    overdue_sweep_cron: str = "0 0 * * *"

    misfire_grace_seconds: int = 60 * 30  # 30 min grace period


class DecisionBoardConfig(BaseModel):
    """Main Decision Board configuration."""

    # Environment
    environment: str = "development"
    debug: bool = False

    # Logging
    log_level: str = "INFO"

    # Demo user and sample decisions on startup
    seed_demo_data: bool = False

    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)


class ConfigLoader:
    """Load and manage Decision Board configuration."""

    def __init__(self, config_dir: str = "config"):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing config files
        """
        self.config_dir = Path(config_dir)
        self.config: Optional[DecisionBoardConfig] = None
        self.load()

    def load(self) -> DecisionBoardConfig:
        """Load configuration from YAML and environment variables."""
        load_dotenv()

        env = os.getenv("DECISIONBOARD_ENV", "development")
        config_file = self.config_dir / f"{env}.yaml"

        data = self._load_yaml(self.config_dir / "default.yaml")
        data.setdefault("environment", env)

        # Override with environment-specific config
        if config_file.exists():
            _merge(data, self._load_yaml(config_file))
        else:
            logger.debug(f"Config file not found: {config_file}, using defaults")

        # Override with environment variables
        _merge(data, self._load_from_env())

        self.config = DecisionBoardConfig(**data)
        logger.info(f"Configuration loaded (environment: {self.config.environment})")
        return self.config

    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        """Load YAML config file."""
        if not path.exists():
            return {}

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
                return data or {}
        except Exception as e:
            logger.error(f"Failed to load YAML config {path}: {e}")
            return {}

    def _load_from_env(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        if log_level := os.getenv("DECISIONBOARD_LOG_LEVEL"):
            config["log_level"] = log_level.upper()
        if seed := os.getenv("DECISIONBOARD_SEED_DEMO_DATA"):
            config["seed_demo_data"] = _is_truthy(seed)

        scheduler: Dict[str, Any] = {}
        if enabled := os.getenv("DECISIONBOARD_SCHEDULER_ENABLED"):
            scheduler["enabled"] = _is_truthy(enabled)
        if timezone := os.getenv("DECISIONBOARD_TIMEZONE"):
            scheduler["timezone"] = timezone
        if cron := os.getenv("DECISIONBOARD_OVERDUE_CRON"):
            scheduler["overdue_sweep_cron"] = cron

        if scheduler:
            config["scheduler"] = scheduler

        return config

    def get(self) -> DecisionBoardConfig:
        """Get current configuration."""
        if not self.config:
            self.load()
        return self.config

    def reload(self):
        """Reload configuration."""
        logger.info("Reloading configuration...")
        self.load()


def _is_truthy(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """Merge override into base in place, one level of nesting deep."""
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key].update(value)
        else:
            base[key] = value


def configure_logging(level: str = "INFO") -> None:
    """Apply the process-wide logging format."""
    logging.basicConfig(format=LOG_FORMAT, level=getattr(logging, level.upper(), logging.INFO))


# Global config instance
_global_config_loader: Optional[ConfigLoader] = None


def get_config() -> DecisionBoardConfig:
    """Get the global Decision Board configuration."""
    global _global_config_loader
    if _global_config_loader is None:
        _global_config_loader = ConfigLoader()
    return _global_config_loader.get()


def initialize_config(config_dir: str = "config") -> DecisionBoardConfig:
    """Initialize the global configuration loader."""
    global _global_config_loader
    _global_config_loader = ConfigLoader(config_dir)
    return _global_config_loader.get()
