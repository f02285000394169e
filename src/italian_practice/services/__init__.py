"""Services layer - answer checking, ordering, statistics and backend access."""

from italian_practice.services.answer_validation import is_blank, is_correct, normalize_answer
from italian_practice.services.ordering import (
    DISPLAY_ALL,
    DISPLAY_CAP_CHOICES,
    DisplayCap,
    SortMode,
    order_items,
    parse_display_cap,
    shuffle_with_seed,
)
from italian_practice.services.practice_data_service import (
    DatabasePracticeService,
    InMemoryPracticeDataService,
    PracticeDataError,
    PracticeDataService,
)
from italian_practice.services.api_workers import BackgroundCalls, ServiceCallWorker, WorkerSignals
from italian_practice.services.statistics_cache import StatisticsCache
from italian_practice.services.filter_preferences import (
    FilterPreferences,
    FilterPreferencesStore,
    VerbTypeFilter,
)
from italian_practice.services.settings_manager import SettingsManager
from italian_practice.services.logging_setup import setup_logging

__all__ = [
    "normalize_answer",
    "is_correct",
    "is_blank",
    "SortMode",
    "DisplayCap",
    "DISPLAY_ALL",
    "DISPLAY_CAP_CHOICES",
    "order_items",
    "parse_display_cap",
    "shuffle_with_seed",
    "PracticeDataService",
    "PracticeDataError",
    "DatabasePracticeService",
    "InMemoryPracticeDataService",
    "BackgroundCalls",
    "ServiceCallWorker",
    "WorkerSignals",
    "StatisticsCache",
    "FilterPreferences",
    "FilterPreferencesStore",
    "VerbTypeFilter",
    "SettingsManager",
    "setup_logging",
]
