"""Statistics cache - read-through cache of practice counters with background writes."""

import logging
from typing import Callable, Dict, Iterable, Optional

from PySide6.QtCore import QObject, QThreadPool, Signal

from italian_practice.core import Statistics, StatisticsKey, statistics_item_id
from italian_practice.services.api_workers import BackgroundCalls
from italian_practice.services.practice_data_service import PracticeDataService

logger = logging.getLogger(__name__)


class StatisticsCache(QObject):
    """
    Holds the last known counters of one practice kind and is the only writer
    to the backend's statistics.

    Reads never fail: unknown keys report zero counters. Writes run on the
    thread pool; their outcome is reported through signals, never raised.
    """

    statistics_refreshed = Signal()
    refetch_failed = Signal(str)
    attempt_recorded = Signal(object, bool)
    record_failed = Signal(object, str)

    def __init__(
        self,
        data_service: PracticeDataService,
        thread_pool: Optional[QThreadPool] = None,
    ):
        super().__init__()

        if data_service is None:
            raise ValueError("PracticeDataService must not be None")

        self.data_service = data_service
        self._calls = BackgroundCalls(thread_pool)
        self._cache: Dict[StatisticsKey, Statistics] = {}
        self.is_loaded = False

        # Only the latest refetch may replace the cache
        self._fetch_counter = 0
        self._active_fetch_id: Optional[int] = None

    def get(self, key: StatisticsKey) -> Statistics:
        """Return the cached counters of a key, zero-valued when absent."""
        return self._cache.get(key, Statistics())

    def snapshot(self, keys: Optional[Iterable[StatisticsKey]] = None) -> Dict[StatisticsKey, Statistics]:
        """Copy of the cache (or of the given keys) for stable ordering."""
        if keys is None:
            return dict(self._cache)
        return {key: self.get(key) for key in keys}

    def keys_for_item(self, item_id: str) -> list:
        return [key for key in self._cache if statistics_item_id(key) == item_id]

    def record(self, key: StatisticsKey, correct: bool) -> None:
        """Send one graded attempt to the backend without blocking the caller."""
        self._calls.submit(
            lambda: self.data_service.record_attempt(key, correct),
            on_success=lambda _result: self._handle_recorded(key, correct),
            on_error=lambda message: self._handle_record_error(key, message),
            description=f"Recording attempt for {key}",
        )

    def refetch(self) -> None:
        """Re-read every counter from the backend."""
        self._fetch_counter += 1
        fetch_id = self._fetch_counter
        self._active_fetch_id = fetch_id

        self._calls.submit(
            self.data_service.get_statistics,
            on_success=lambda statistics: self._handle_fetched(statistics, fetch_id),
            on_error=lambda message: self._handle_fetch_error(message, fetch_id),
            description="Fetching statistics",
        )

    def invalidate(self) -> None:
        """Drop every cached counter and read them again."""
        self._cache.clear()
        self.is_loaded = False
        self.refetch()

    def reset(
        self,
        item_id: str,
        on_success: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None:
        """Reset all counters of an item on the backend, then forget them locally."""
        self._calls.submit(
            lambda: self.data_service.reset_statistics(item_id),
            on_success=lambda _result: self._handle_reset(item_id, on_success),
            on_error=on_error,
            description=f"Resetting statistics for {item_id}",
        )

    def _handle_recorded(self, key: StatisticsKey, correct: bool) -> None:
        self._cache[key] = self.get(key).bumped(correct)
        self.attempt_recorded.emit(key, correct)

    def _handle_record_error(self, key: StatisticsKey, message: str) -> None:
        logger.error("Failed to update statistics for %s: %s", key, message)
        self.record_failed.emit(key, message)

    def _handle_fetched(self, statistics: Dict[StatisticsKey, Statistics], fetch_id: int) -> None:
        if fetch_id != self._active_fetch_id:
            logger.debug("Ignoring stale statistics (fetch %s, current %s)", fetch_id, self._active_fetch_id)
            return
        self._cache = dict(statistics)
        self.is_loaded = True
        self.statistics_refreshed.emit()

    def _handle_fetch_error(self, message: str, fetch_id: int) -> None:
        if fetch_id != self._active_fetch_id:
            return
        logger.error("Failed to fetch statistics: %s", message)
        self.refetch_failed.emit(message)

    def _handle_reset(self, item_id: str, on_success: Callable[[], None]) -> None:
        for key in self.keys_for_item(item_id):
            del self._cache[key]
        on_success()
