"""Main entry point for the Italian practice engine."""

import logging
import sys
from typing import Dict, Optional

from PySide6.QtCore import QCoreApplication, QThreadPool

from italian_practice.coordinators import PracticeSessionCoordinator
from italian_practice.core import PRACTICE_KINDS, get_practice_kind
from italian_practice.io import DatabaseManager
from italian_practice.services import (
    DatabasePracticeService,
    FilterPreferencesStore,
    SettingsManager,
    setup_logging,
)

logger = logging.getLogger(__name__)


def build_session(
    kind_name: str,
    db: DatabaseManager,
    settings: SettingsManager,
    preferences_store: Optional[FilterPreferencesStore] = None,
    thread_pool: Optional[QThreadPool] = None,
) -> PracticeSessionCoordinator:
    """Wire one practice session over the SQLite backend."""
    kind = get_practice_kind(kind_name)
    data_service = DatabasePracticeService(db, kind, settings.get_enabled_verb_tenses())
    return PracticeSessionCoordinator(
        kind=kind,
        data_service=data_service,
        preferences_store=preferences_store,
        mastery_threshold=settings.get_mastery_threshold(),
        thread_pool=thread_pool,
    )


def main():
    """
    Bootstrap the engine following the Composition Root pattern.
    This is the only place that knows how to instantiate and wire all components.

    Loads every practice list once and logs a summary of it.
    """
    # 1. Initialize Application
    app = QCoreApplication(sys.argv)
    app.setApplicationName("Italian Practice")
    app.setOrganizationName("ItalianPractice")

    # 2. Initialize Infrastructure
    settings = SettingsManager()
    setup_logging(settings.get_log_level())

    db = DatabaseManager(settings.get_database_path())
    db.ensure_schema()
    preferences_store = FilterPreferencesStore(settings.get_filter_preferences_path())

    # 3. Instantiate one session per practice kind
    sessions: Dict[str, PracticeSessionCoordinator] = {
        name: build_session(name, db, settings, preferences_store) for name in PRACTICE_KINDS
    }
    remaining = set(sessions)

    def finish(name: str) -> None:
        remaining.discard(name)
        if not remaining:
            app.quit()

    # 4. Signal Wiring
    for name, session in sessions.items():
        def on_loaded(name=name, session=session):
            logger.info(
                "%s: %d items, %d visible, %d mastered",
                name,
                len(session.items),
                len(session.visible_items),
                session.mastered_count,
            )
            finish(name)

        def on_failed(message, name=name):
            logger.error("%s could not be loaded: %s", name, message)
            finish(name)

        session.items_loaded.connect(on_loaded)
        session.load_failed.connect(on_failed)
        session.load()

    # 5. Run until every list has answered
    exit_code = app.exec() if remaining else 0
    QThreadPool.globalInstance().waitForDone()
    db.close()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
