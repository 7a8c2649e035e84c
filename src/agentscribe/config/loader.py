"""
Assistant settings management utilities.

Settings live in a YAML file at the project root (``assistant_settings.yaml``),
or wherever ``AGENTSCRIBE_SETTINGS`` points. Only two values matter to this
package: the default model used as fallback when replayed history names
none, and an optional override for the agent's conversation database.
"""

import logging
import os
import sys
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "AGENTSCRIBE_SETTINGS"
DATA_PATH_ENV_VAR = "AGENTSCRIBE_DATA_PATH"
DATA_FILE_NAME = "data.sqlite3"


@dataclass
class AssistantSettings:
    """Persisted user settings."""

    default_model: Optional[str] = None
    data_path: Optional[str] = None


def get_settings_path() -> Path:
    """
    Get the path to the settings file.

    Uses AGENTSCRIBE_SETTINGS if set, else assistant_settings.yaml in the
    current working directory (project root).
    """
    override = os.environ.get(SETTINGS_ENV_VAR)
    if override:
        return Path(override)
    return Path(os.getcwd()) / "assistant_settings.yaml"


def load_assistant_settings(path: Optional[Path] = None) -> AssistantSettings:
    """
    Load settings from YAML.

    A missing, unreadable or malformed file yields default settings.

    Args:
        path: Settings file; defaults to get_settings_path()
    """
    settings_path = path or get_settings_path()
    logger.debug(f"Loading settings from: {settings_path}")

    if not settings_path.exists():
        return AssistantSettings()

    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read settings from {settings_path}: {e}")
        return AssistantSettings()

    if not isinstance(config, dict):
        logger.warning(f"Ignoring settings in {settings_path}: expected a mapping")
        return AssistantSettings()

    default_model = config.get("default_model")
    if not isinstance(default_model, str) or not default_model.strip():
        default_model = None

    data_path = config.get("data_path")
    if not isinstance(data_path, str) or not data_path:
        data_path = None

    return AssistantSettings(
        default_model=default_model.strip() if default_model else None,
        data_path=data_path,
    )


def save_assistant_settings(settings: AssistantSettings, path: Optional[Path] = None) -> Path:
    """
    Write settings to YAML, creating the parent directory if needed.

    Raises:
        RuntimeError: If the file cannot be written
    """
    settings_path = path or get_settings_path()
    data = {key: value for key, value in asdict(settings).items() if value is not None}
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        with open(settings_path, "w") as f:
            yaml.safe_dump(data, f, sort_keys=False)
    except OSError as e:
        raise RuntimeError(f"Error saving settings to {settings_path}: {e}")
    return settings_path


def default_support_directory() -> Path:
    """Per-platform directory where the agent keeps its data."""
    home = Path.home()
    if sys.platform == "darwin":
        return home / "Library" / "Application Support" / "kiro-cli"
    if sys.platform == "win32":
        return home / "AppData" / "Roaming" / "kiro-cli"
    return home / ".kiro-cli"


def resolve_data_path(settings: Optional[AssistantSettings] = None) -> Optional[Path]:
    """
    Locate the agent's conversation database.

    Checks, in order: AGENTSCRIBE_DATA_PATH, settings.data_path, then the
    default support directory. Only existing files are returned.
    """
    candidates = [
        os.environ.get(DATA_PATH_ENV_VAR),
        settings.data_path if settings else None,
        str(default_support_directory() / DATA_FILE_NAME),
    ]
    for candidate in candidates:
        if candidate and Path(candidate).is_file():
            return Path(candidate)
    return None
