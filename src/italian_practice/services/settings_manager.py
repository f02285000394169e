"""Settings Manager - Handles database location and practice configuration."""

import logging
import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from italian_practice.core.practice_kinds import DEFAULT_ENABLED_TENSES

logger = logging.getLogger(__name__)

DEFAULT_MASTERY_THRESHOLD = 10
DEFAULT_DB_FILENAME = "italian_practice.db"
DEFAULT_PREFERENCES_FILENAME = ".practice-filters.json"


class SettingsManager:
    """
    Manages settings read from the environment.

    Values come from a .env file in the project root; variables already set
    in the process environment take precedence.
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = project_root / ".env"
        load_dotenv(dotenv_path=env_path)

        self._project_root = project_root

    def get_database_path(self) -> Path:
        """Get the SQLite database path, relative paths resolved against the project root."""
        raw = (os.getenv("ITALIAN_PRACTICE_DB") or "").strip()
        path = Path(raw) if raw else Path(DEFAULT_DB_FILENAME)
        return path if path.is_absolute() else self._project_root / path

    def get_filter_preferences_path(self) -> Path:
        raw = (os.getenv("FILTER_PREFERENCES_PATH") or "").strip()
        path = Path(raw) if raw else Path(DEFAULT_PREFERENCES_FILENAME)
        return path if path.is_absolute() else self._project_root / path

    def get_mastery_threshold(self) -> int:
        """Net score (correct - wrong) from which an item counts as mastered."""
        raw = (os.getenv("MASTERY_THRESHOLD") or "").strip()
        if not raw:
            return DEFAULT_MASTERY_THRESHOLD
        try:
            return int(raw)
        except ValueError:
            logger.warning("Invalid MASTERY_THRESHOLD %r, using %s", raw, DEFAULT_MASTERY_THRESHOLD)
            return DEFAULT_MASTERY_THRESHOLD

    def get_enabled_verb_tenses(self) -> List[str]:
        """Enabled "Mood.Tense" pairs for conjugation practice, in display order."""
        raw = os.getenv("ENABLED_VERB_TENSES") or ""
        tenses = [t.strip() for t in raw.split(",") if t.strip()]
        return tenses or list(DEFAULT_ENABLED_TENSES)

    def get_log_level(self) -> str:
        level = (os.getenv("LOG_LEVEL") or "").strip().upper()
        return level or "INFO"

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)
