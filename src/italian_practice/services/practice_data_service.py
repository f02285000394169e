"""Practice data service - the backend the practice engine reads items and statistics from."""

import logging
import sqlite3
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Sequence

from italian_practice.core import (
    ADJECTIVES,
    CONJUGATIONS,
    NOUNS,
    VERBS,
    ConjugationKey,
    PracticeItem,
    PracticeKind,
    Statistics,
    StatisticsKey,
    build_adjective_item,
    build_conjugation_item,
    build_noun_item,
    build_verb_item,
    statistics_item_id,
)
from italian_practice.core.practice_kinds import DEFAULT_ENABLED_TENSES
from italian_practice.io import DatabaseManager

logger = logging.getLogger(__name__)


class PracticeDataError(RuntimeError):
    """Raised when the backing store cannot serve a practice request."""


class PracticeDataService(ABC):
    """
    Abstract interface for the store behind one practice kind.

    Implementations (DatabasePracticeService, InMemoryPracticeDataService) handle
    storage details so coordinators depend on this abstraction only.
    Every method may be called from a worker thread.
    """

    @abstractmethod
    def list_items_for_practice(self) -> List[PracticeItem]:
        """Return every item eligible for practice, in source order."""
        pass

    @abstractmethod
    def get_statistics(self) -> Dict[StatisticsKey, Statistics]:
        """Return all known counters keyed by item id or ConjugationKey."""
        pass

    @abstractmethod
    def record_attempt(self, key: StatisticsKey, correct: bool) -> None:
        """
        Increment the correct or wrong counter of a key.

        Raises:
            PracticeDataError: If the attempt could not be stored.
        """
        pass

    @abstractmethod
    def reset_statistics(self, item_id: str) -> None:
        """
        Reset every counter belonging to a top-level item (or verb).

        Raises:
            PracticeDataError: If the reset could not be stored.
        """
        pass


class DatabasePracticeService(PracticeDataService):
    """SQLite implementation serving one practice kind from a DatabaseManager."""

    def __init__(
        self,
        db: DatabaseManager,
        kind: PracticeKind,
        enabled_tenses: Optional[Sequence[str]] = None,
    ) -> None:
        if db is None:
            raise ValueError("DatabaseManager must not be None")
        self._db = db
        self._kind = kind
        self._enabled_tenses = list(enabled_tenses or DEFAULT_ENABLED_TENSES)

    @property
    def kind(self) -> PracticeKind:
        return self._kind

    def set_enabled_tenses(self, enabled_tenses: Iterable[str]) -> None:
        self._enabled_tenses = list(enabled_tenses)

    def list_items_for_practice(self) -> List[PracticeItem]:
        try:
            if self._kind is NOUNS:
                return [
                    build_noun_item(n.id, n.italian, n.italian_plural, n.translation)
                    for n in self._db.list_nouns()
                ]
            if self._kind is ADJECTIVES:
                return [
                    build_adjective_item(
                        a.id,
                        a.translation,
                        a.masculine_singular,
                        a.masculine_plural,
                        a.feminine_singular,
                        a.feminine_plural,
                    )
                    for a in self._db.list_adjectives()
                ]
            if self._kind is VERBS:
                return [
                    build_verb_item(v.id, v.italian, v.translation, v.regular, v.reflexive)
                    for v in self._db.list_verbs()
                ]
            return [
                build_conjugation_item(
                    v.id,
                    v.italian,
                    v.translation,
                    v.conjugation,
                    self._enabled_tenses,
                    v.regular,
                    v.reflexive,
                )
                for v in self._db.list_verbs()
                if v.conjugation
            ]
        except sqlite3.Error as e:
            raise PracticeDataError(f"Failed to load {self._kind.name}: {e}") from e

    def get_statistics(self) -> Dict[StatisticsKey, Statistics]:
        try:
            if self._kind is CONJUGATIONS:
                return dict(self._db.list_conjugation_statistics())
            return dict(self._db.list_item_statistics(self._kind.name))
        except sqlite3.Error as e:
            raise PracticeDataError(f"Failed to load {self._kind.name} statistics: {e}") from e

    def record_attempt(self, key: StatisticsKey, correct: bool) -> None:
        try:
            if isinstance(key, ConjugationKey):
                self._db.increment_conjugation_statistic(key, correct)
            else:
                self._db.increment_item_statistic(self._kind.name, key, correct)
        except sqlite3.Error as e:
            raise PracticeDataError(f"Failed to record attempt for {key}: {e}") from e

    def reset_statistics(self, item_id: str) -> None:
        try:
            if self._kind is CONJUGATIONS:
                self._db.reset_conjugation_statistics(item_id)
            else:
                self._db.reset_item_statistics(self._kind.name, item_id)
        except sqlite3.Error as e:
            raise PracticeDataError(f"Failed to reset statistics for {item_id}: {e}") from e


class InMemoryPracticeDataService(PracticeDataService):
    """
    Simple in-memory store.

    Used for testing and demos. No persistence. Failures can be switched on
    to exercise the error paths of the coordinators.
    """

    def __init__(
        self,
        items: Optional[Iterable[PracticeItem]] = None,
        statistics: Optional[Dict[StatisticsKey, Statistics]] = None,
    ):
        self._items: List[PracticeItem] = list(items or [])
        self._statistics: Dict[StatisticsKey, Statistics] = dict(statistics or {})
        self.fail_records = False
        self.fail_resets = False
        self.fail_reads = False
        self.recorded: List[tuple] = []
        self.reset_calls: List[str] = []

    def list_items_for_practice(self) -> List[PracticeItem]:
        if self.fail_reads:
            raise PracticeDataError("Items are unavailable")
        return list(self._items)

    def get_statistics(self) -> Dict[StatisticsKey, Statistics]:
        if self.fail_reads:
            raise PracticeDataError("Statistics are unavailable")
        return dict(self._statistics)

    def record_attempt(self, key: StatisticsKey, correct: bool) -> None:
        self.recorded.append((key, correct))
        if self.fail_records:
            raise PracticeDataError(f"Failed to record attempt for {key}")
        self._statistics[key] = self._statistics.get(key, Statistics()).bumped(correct)

    def reset_statistics(self, item_id: str) -> None:
        self.reset_calls.append(item_id)
        if self.fail_resets:
            raise PracticeDataError(f"Failed to reset statistics for {item_id}")
        for key in [k for k in self._statistics if statistics_item_id(k) == item_id]:
            del self._statistics[key]
