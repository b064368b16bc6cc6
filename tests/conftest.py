"""Shared fixtures for quicktasks tests."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Generator
from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

from quicktasks.logging_setup import remove_handlers
from quicktasks.store import TaskStore


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """Drop handlers installed by setup_logging and restore the root level."""
    root = logging.getLogger()
    level = root.level
    try:
        yield
    finally:
        remove_handlers(root)
        root.setLevel(level)
        logging.captureWarnings(False)


@pytest.fixture
def temp_project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary project directory and change to it."""
    original_dir = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_dir)


@pytest.fixture
def temp_config_dir(temp_project: Path) -> Path:
    """Create a temporary .quicktasks directory."""
    config_dir = temp_project / ".quicktasks"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def sample_config_data() -> dict:
    """Sample configuration data."""
    return {
        "store": {
            "notify_policy": "on_change",
            "strict_titles": True,
            "id_strategy": "counter",
            "id_start": 100,
        },
        "display": {
            "show_motivation": False,
            "motivation_text": "Keep going!",
            "stats_template": "minimal",
        },
        "logging": {"level": "INFO"},
        "seed_sample_tasks": True,
    }


@pytest.fixture
def sample_config_file(temp_config_dir: Path, sample_config_data: dict) -> Path:
    """Write the sample configuration to .quicktasks/config.json."""
    config_path = temp_config_dir / "config.json"
    with open(config_path, "w") as f:
        json.dump(sample_config_data, f)
    return config_path


@pytest.fixture
def store() -> TaskStore:
    """An empty store with counter ids starting at 1."""
    return TaskStore()


@pytest.fixture
def output() -> StringIO:
    """Buffer that captures rendered console output."""
    return StringIO()


@pytest.fixture
def console(output: StringIO) -> Console:
    """A plain, fixed-width console writing into ``output``."""
    return Console(file=output, width=80, color_system=None, force_terminal=False)
