"""Global configuration storage for taskboard.

Stores user preferences (API location, timeout, log level) in
~/.taskboard/config.json. ``TASKBOARD_HOME`` moves the directory and
``TASKBOARD_API_URL`` overrides the stored API URL.
"""

import json
import os
from pathlib import Path

from pydantic import BaseModel

from taskboard.infrastructure.remote import DEFAULT_API_URL, DEFAULT_TIMEOUT


class TrackerConfig(BaseModel):
    """Client configuration."""

    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "WARNING"


def get_config_dir() -> Path:
    """Get the taskboard config directory."""
    config_dir = Path(os.environ.get("TASKBOARD_HOME") or Path.home() / ".taskboard")
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_global_config() -> TrackerConfig:
    """Load the global configuration, falling back to defaults."""
    config = TrackerConfig()
    config_file = get_config_dir() / "config.json"
    if config_file.exists():
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
            config = TrackerConfig(**data)
        except (json.JSONDecodeError, TypeError, ValueError):
            pass  # defaults

    env_url = os.environ.get("TASKBOARD_API_URL")
    if env_url:
        config = config.model_copy(update={"api_url": env_url})
    return config


def save_global_config(config: TrackerConfig) -> None:
    """Save the global configuration."""
    config_file = get_config_dir() / "config.json"
    config_file.write_text(
        json.dumps(config.model_dump(), indent=2),
        encoding="utf-8",
    )
