"""Configuration loading utilities."""

from .loader import (
    AssistantSettings,
    get_settings_path,
    load_assistant_settings,
    resolve_data_path,
    save_assistant_settings,
)

__all__ = [
    "AssistantSettings",
    "get_settings_path",
    "load_assistant_settings",
    "save_assistant_settings",
    "resolve_data_path",
]
