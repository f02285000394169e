"""Unit tests for SettingsManager."""

import os
import tempfile
from pathlib import Path

import pytest

from italian_practice.services import SettingsManager

SETTINGS_VARIABLES = (
    "ITALIAN_PRACTICE_DB",
    "MASTERY_THRESHOLD",
    "ENABLED_VERB_TENSES",
    "FILTER_PREFERENCES_PATH",
    "LOG_LEVEL",
)


@pytest.fixture
def temp_env_dir():
    """Provide a temporary directory for .env files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def clean_env():
    """Remove settings variables from the environment before and after each test."""
    saved = {name: os.environ.pop(name, None) for name in SETTINGS_VARIABLES}
    yield
    for name, value in saved.items():
        if value is not None:
            os.environ[name] = value
        else:
            os.environ.pop(name, None)


def make_settings(root: Path, content: str) -> SettingsManager:
    (root / ".env").write_text(content)
    return SettingsManager(project_root=root)


class TestSettingsManagerDefaults:
    def test_defaults_without_values(self, temp_env_dir, clean_env):
        settings = make_settings(temp_env_dir, "")

        assert settings.get_database_path() == temp_env_dir / "italian_practice.db"
        assert settings.get_filter_preferences_path() == temp_env_dir / ".practice-filters.json"
        assert settings.get_mastery_threshold() == 10
        assert settings.get_enabled_verb_tenses() == ["Indicativo.Presente"]
        assert settings.get_log_level() == "INFO"


class TestSettingsManagerFromEnvFile:
    def test_relative_paths_resolve_against_project_root(self, temp_env_dir, clean_env):
        settings = make_settings(
            temp_env_dir,
            "ITALIAN_PRACTICE_DB=data/words.db\nFILTER_PREFERENCES_PATH=prefs.json\n",
        )
        assert settings.get_database_path() == temp_env_dir / "data" / "words.db"
        assert settings.get_filter_preferences_path() == temp_env_dir / "prefs.json"

    def test_absolute_database_path_is_kept(self, temp_env_dir, clean_env):
        absolute = temp_env_dir / "elsewhere.db"
        settings = make_settings(temp_env_dir, f"ITALIAN_PRACTICE_DB={absolute}\n")
        assert settings.get_database_path() == absolute

    def test_mastery_threshold(self, temp_env_dir, clean_env):
        settings = make_settings(temp_env_dir, "MASTERY_THRESHOLD=3\n")
        assert settings.get_mastery_threshold() == 3

    def test_invalid_mastery_threshold_uses_default(self, temp_env_dir, clean_env):
        settings = make_settings(temp_env_dir, "MASTERY_THRESHOLD=lots\n")
        assert settings.get_mastery_threshold() == 10

    def test_enabled_tenses_are_split_and_trimmed(self, temp_env_dir, clean_env):
        settings = make_settings(
            temp_env_dir,
            "ENABLED_VERB_TENSES=Indicativo.Presente, Indicativo.Imperfetto ,,\n",
        )
        assert settings.get_enabled_verb_tenses() == [
            "Indicativo.Presente",
            "Indicativo.Imperfetto",
        ]

    def test_log_level_is_uppercased(self, temp_env_dir, clean_env):
        settings = make_settings(temp_env_dir, "LOG_LEVEL=debug\n")
        assert settings.get_log_level() == "DEBUG"

    def test_reload_env_picks_up_changes(self, temp_env_dir, clean_env):
        settings = make_settings(temp_env_dir, "MASTERY_THRESHOLD=5\n")
        assert settings.get_mastery_threshold() == 5

        (temp_env_dir / ".env").write_text("MASTERY_THRESHOLD=7\n")
        settings.reload_env()

        assert settings.get_mastery_threshold() == 7

    def test_process_environment_wins_over_file(self, temp_env_dir, clean_env):
        os.environ["MASTERY_THRESHOLD"] = "12"
        settings = make_settings(temp_env_dir, "MASTERY_THRESHOLD=5\n")
        assert settings.get_mastery_threshold() == 12
