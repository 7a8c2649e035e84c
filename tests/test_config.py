"""
Config loading tests - verify assistant settings management.

Tests cover tolerant loading (missing/malformed files fall back to
defaults), saving, and data-path resolution.
"""

import pytest

from agentscribe.config import (
    AssistantSettings,
    get_settings_path,
    load_assistant_settings,
    resolve_data_path,
    save_assistant_settings,
)


def test_load_valid_settings(tmp_path):
    """Should load default_model and data_path from YAML."""
    settings_file = tmp_path / "assistant_settings.yaml"
    settings_file.write_text(
        """
default_model: "  claude-sonnet  "
data_path: /tmp/data.sqlite3
"""
    )

    settings = load_assistant_settings(settings_file)

    assert settings.default_model == "claude-sonnet"
    assert settings.data_path == "/tmp/data.sqlite3"


def test_missing_file_gives_defaults(tmp_path):
    settings = load_assistant_settings(tmp_path / "does_not_exist.yaml")

    assert settings == AssistantSettings()


def test_malformed_yaml_gives_defaults(tmp_path, caplog):
    settings_file = tmp_path / "assistant_settings.yaml"
    settings_file.write_text("default_model: [unclosed")

    settings = load_assistant_settings(settings_file)

    assert settings == AssistantSettings()
    assert "Failed to read settings" in caplog.text


def test_non_mapping_yaml_gives_defaults(tmp_path):
    settings_file = tmp_path / "assistant_settings.yaml"
    settings_file.write_text("- just\n- a list\n")

    assert load_assistant_settings(settings_file) == AssistantSettings()


def test_blank_or_wrong_typed_values_are_ignored(tmp_path):
    settings_file = tmp_path / "assistant_settings.yaml"
    settings_file.write_text("default_model: '   '\ndata_path: 42\n")

    settings = load_assistant_settings(settings_file)

    assert settings.default_model is None
    assert settings.data_path is None


def test_empty_file_gives_defaults(tmp_path):
    settings_file = tmp_path / "assistant_settings.yaml"
    settings_file.write_text("")

    assert load_assistant_settings(settings_file) == AssistantSettings()


def test_settings_path_env_override(tmp_path, monkeypatch):
    override = tmp_path / "custom.yaml"
    monkeypatch.setenv("AGENTSCRIBE_SETTINGS", str(override))

    assert get_settings_path() == override


def test_settings_path_defaults_to_cwd(tmp_path, monkeypatch):
    monkeypatch.delenv("AGENTSCRIBE_SETTINGS", raising=False)
    monkeypatch.chdir(tmp_path)

    assert get_settings_path() == tmp_path / "assistant_settings.yaml"


def test_load_uses_settings_path(tmp_path, monkeypatch):
    settings_file = tmp_path / "assistant_settings.yaml"
    settings_file.write_text("default_model: m1\n")
    monkeypatch.setattr("agentscribe.config.loader.get_settings_path", lambda: settings_file)

    assert load_assistant_settings().default_model == "m1"


def test_save_round_trip(tmp_path):
    settings_file = tmp_path / "nested" / "assistant_settings.yaml"

    written = save_assistant_settings(AssistantSettings(default_model="m1"), settings_file)

    assert written == settings_file
    assert settings_file.read_text() == "default_model: m1\n"
    assert load_assistant_settings(settings_file).default_model == "m1"


def test_save_failure_raises(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not a directory")

    with pytest.raises(RuntimeError) as exc_info:
        save_assistant_settings(AssistantSettings(), blocker / "assistant_settings.yaml")

    assert "Error saving settings" in str(exc_info.value)


class TestResolveDataPath:
    @pytest.fixture(autouse=True)
    def isolated_home(self, tmp_path, monkeypatch):
        monkeypatch.delenv("AGENTSCRIBE_DATA_PATH", raising=False)
        monkeypatch.setattr(
            "agentscribe.config.loader.default_support_directory",
            lambda: tmp_path / "support",
        )

    def test_env_var_wins(self, tmp_path, monkeypatch):
        env_db = tmp_path / "env.sqlite3"
        env_db.touch()
        settings_db = tmp_path / "settings.sqlite3"
        settings_db.touch()
        monkeypatch.setenv("AGENTSCRIBE_DATA_PATH", str(env_db))

        assert resolve_data_path(AssistantSettings(data_path=str(settings_db))) == env_db

    def test_settings_path(self, tmp_path):
        settings_db = tmp_path / "settings.sqlite3"
        settings_db.touch()

        assert resolve_data_path(AssistantSettings(data_path=str(settings_db))) == settings_db

    def test_default_support_directory(self, tmp_path):
        default_db = tmp_path / "support" / "data.sqlite3"
        default_db.parent.mkdir()
        default_db.touch()

        assert resolve_data_path() == default_db

    def test_missing_files_are_skipped(self, tmp_path):
        settings = AssistantSettings(data_path=str(tmp_path / "gone.sqlite3"))

        assert resolve_data_path(settings) is None


def test_undecodable_file_gives_defaults(tmp_path, caplog):
    settings_file = tmp_path / "assistant_settings.yaml"
    settings_file.write_bytes(b"default_model: \xff\xfe\n")

    settings = load_assistant_settings(settings_file)

    assert settings == AssistantSettings()
    assert "Failed to read settings" in caplog.text
