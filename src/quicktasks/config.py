"""Configuration models for quicktasks."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

DEFAULT_MOTIVATION = "Small steps > no steps. ✅"


class ConfigError(ValueError):
    """A config file that can't be parsed or has invalid values."""

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"Invalid config: {path}")
        self.path = path
        self.detail = detail


class StoreConfig(BaseModel):
    """Configuration for the task store."""

    notify_policy: Literal["always", "on_change"] = "always"
    strict_titles: bool = False
    id_strategy: Literal["counter", "clock", "uuid"] = "counter"
    id_start: int = Field(default=1, ge=0)


class DisplayConfig(BaseModel):
    """Configuration for the terminal front end."""

    show_motivation: bool = True
    motivation_text: str = DEFAULT_MOTIVATION
    stats_template: Literal["default", "minimal"] = "default"
    stats_template_path: str | None = None


class LoggingConfig(BaseModel):
    """Configuration for log output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    file: str | None = None


class QuickTasksConfig(BaseModel):
    """Main configuration for quicktasks."""

    store: StoreConfig = Field(default_factory=StoreConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    seed_sample_tasks: bool = False

    @classmethod
    def load(cls, path: Path | None = None) -> QuickTasksConfig:
        """Load configuration from file or return defaults.

        Raises:
            ConfigError: The file isn't JSON or doesn't validate.
        """
        if path is None:
            path = CONFIG_FILE

        if not path.exists():
            return cls()

        try:
            with open(path, encoding="utf-8") as f:
                return cls.model_validate(json.load(f))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(path, str(e)) from e

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = CONFIG_FILE

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(exclude_none=True), f, indent=2, ensure_ascii=False)


# Default config directory
QUICKTASKS_DIR = Path(".quicktasks")
CONFIG_FILE = QUICKTASKS_DIR / "config.json"
