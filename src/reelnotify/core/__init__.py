"""
Core configuration for reelnotify.

Provides:
- Path constants (REELNOTIFY_HOME, REELNOTIFY_CONFIG_FILE, REELNOTIFY_STATE_FILE)
- The top-level ReelConfig model
- Config loading/saving functions
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from reelnotify.notifications.config import NotifierSettings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Path constants
# ---------------------------------------------------------------------------

REELNOTIFY_HOME: Path = Path.home() / ".reelnotify"
REELNOTIFY_CONFIG_FILE: Path = REELNOTIFY_HOME / "config.yaml"
REELNOTIFY_STATE_FILE: Path = REELNOTIFY_HOME / "messages.json"


# ---------------------------------------------------------------------------
# Configuration models
# ---------------------------------------------------------------------------


class ReelConfig(BaseModel):
    """Main configuration for reelnotify."""

    notifier: NotifierSettings = Field(default_factory=NotifierSettings)
    library_name: str = ""
    state_file: str = str(REELNOTIFY_STATE_FILE)


# ---------------------------------------------------------------------------
# Config loading/saving
# ---------------------------------------------------------------------------


def load_config(path: Optional[Path] = None) -> ReelConfig:
    """Load configuration from YAML file, or return defaults."""
    path = path or REELNOTIFY_CONFIG_FILE
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
            return ReelConfig(**data)
        except (OSError, yaml.YAMLError, ValidationError, TypeError):
            logger.warning("Ignoring unreadable config file %s", path)
    return ReelConfig()


def save_config(config: ReelConfig, path: Optional[Path] = None) -> Path:
    """Save configuration to YAML file."""
    path = path or REELNOTIFY_CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.dump(config.model_dump(), default_flow_style=False))
    return path


__all__ = [
    "REELNOTIFY_HOME",
    "REELNOTIFY_CONFIG_FILE",
    "REELNOTIFY_STATE_FILE",
    "ReelConfig",
    "NotifierSettings",
    "load_config",
    "save_config",
]
