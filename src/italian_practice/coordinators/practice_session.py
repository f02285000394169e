"""Practice Session Coordinator - Input, grading, statistics and navigation for one practice list."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional, Tuple, Union

from PySide6.QtCore import QObject, Qt, QThreadPool, QTimer, Signal, Slot

from italian_practice.core import (
    ConjugationKey,
    Grading,
    PracticeItem,
    PracticeKind,
    Statistics,
    StatisticsKey,
    Verdict,
)
from italian_practice.services import (
    DISPLAY_ALL,
    BackgroundCalls,
    DisplayCap,
    FilterPreferences,
    FilterPreferencesStore,
    PracticeDataService,
    SortMode,
    StatisticsCache,
    VerbTypeFilter,
    is_blank,
    is_correct,
    order_items,
    parse_display_cap,
)
from italian_practice.services.settings_manager import DEFAULT_MASTERY_THRESHOLD

from .reset_dialog import ResetDialogCoordinator
from .statistics_notice import StatisticsErrorNotice

logger = logging.getLogger(__name__)

COMMIT_KEYS = (Qt.Key.Key_Return, Qt.Key.Key_Enter)
STATISTICS_SAVE_ERROR = "Failed to save statistics. Your progress may not be saved."

FieldRef = Tuple[str, str]


@dataclass(frozen=True)
class FocusTarget:
    item_id: str
    field: str


def _defer_to_event_loop(callback: Callable[[], None]) -> None:
    QTimer.singleShot(0, callback)


def _wall_clock_seed() -> int:
    return int(time.time() * 1000)


class PracticeSessionCoordinator(QObject):
    """
    Orchestrates one practice session over a list of vocabulary items.

    Responsibilities:
    - Own the typed input and the verdict of every (item, field).
    - Grade answers on blur / commit, debouncing repeated requests.
    - Push graded attempts to the statistics cache and surface failed writes.
    - Compute the visible, ordered list and keyboard navigation targets.
    - Host the reset-statistics dialog workflow.

    The behaviour differences between nouns, adjectives, verbs and
    conjugations come entirely from the PracticeKind.
    """

    items_loaded = Signal()
    load_failed = Signal(str)
    visible_items_changed = Signal()
    input_changed = Signal(str, str, str)
    verdict_changed = Signal(str, str, object)  # item id, field, Verdict
    focus_requested = Signal(str, str)

    def __init__(
        self,
        kind: PracticeKind,
        data_service: PracticeDataService,
        statistics_cache: Optional[StatisticsCache] = None,
        preferences_store: Optional[FilterPreferencesStore] = None,
        mastery_threshold: int = DEFAULT_MASTERY_THRESHOLD,
        thread_pool: Optional[QThreadPool] = None,
        clock: Optional[Callable[[], float]] = None,
        defer: Optional[Callable[[Callable[[], None]], None]] = None,
        seed_factory: Optional[Callable[[], int]] = None,
    ):
        """
        Args:
            kind: Practice parameters (fields, statistics keys, debounce window).
            data_service: Backend serving items and statistics for this kind.
            statistics_cache: Shared cache; one is created when omitted.
            preferences_store: Where filter preferences are remembered.
            mastery_threshold: Net score from which an item counts as mastered.
            thread_pool: Pool running backend calls.
            clock: Monotonic seconds, used for the debounce window.
            defer: Runs a callback after the current update cycle.
            seed_factory: Produces a new seed for random ordering.
        """
        super().__init__()

        if kind is None:
            raise ValueError("PracticeKind must not be None")
        if data_service is None:
            raise ValueError("PracticeDataService must not be None")

        self.kind = kind
        self.data_service = data_service
        if statistics_cache is None:
            statistics_cache = StatisticsCache(data_service, thread_pool)
        self.statistics_cache = statistics_cache
        self.preferences_store = preferences_store
        self.mastery_threshold = mastery_threshold

        self._calls = BackgroundCalls(thread_pool)
        self._clock = clock or time.monotonic
        self._defer = defer or _defer_to_event_loop
        self._seed_factory = seed_factory or _wall_clock_seed

        self._items: List[PracticeItem] = []
        self._items_by_id: Dict[str, PracticeItem] = {}
        self.is_loading = False
        self.selected_item_id: Optional[str] = None

        # Session state, keyed by (item id, field key)
        self._inputs: Dict[FieldRef, str] = {}
        self._verdicts: Dict[FieldRef, Verdict] = {}
        self._last_validated: Dict[str, float] = {}

        preferences = self._load_preferences()
        self.sort_mode: SortMode = preferences.sort_mode
        self.display_cap: DisplayCap = preferences.display_cap
        self.exclude_mastered: bool = preferences.exclude_mastered
        self.verb_type_filter: VerbTypeFilter = preferences.verb_type_filter
        self.random_seed = self._seed_factory() if self.sort_mode is SortMode.RANDOM else 0

        # Statistics used by error-based sorts; only replaced on sort change or
        # refresh so the list doesn't reorder while the user practices.
        self._sorting_snapshot: Dict[str, Statistics] = {}
        self._snapshot_pending = self.sort_mode.uses_statistics

        self.statistics_error = StatisticsErrorNotice(parent=self)
        self.reset_dialog = ResetDialogCoordinator(
            label_lookup=self._item_label,
            reset_statistics=self.statistics_cache.reset,
        )

        self.statistics_cache.statistics_refreshed.connect(self._on_statistics_refreshed)
        self.statistics_cache.record_failed.connect(self._on_record_failed)
        self.reset_dialog.reset_succeeded.connect(self._on_reset_succeeded)

    # ----- data -----

    def load(self) -> None:
        """Fetch items and statistics from the backend in the background."""
        self.is_loading = True
        self._calls.submit(
            self.data_service.list_items_for_practice,
            on_success=self._handle_items_loaded,
            on_error=self._handle_load_error,
            description=f"Loading {self.kind.name}",
        )
        self._snapshot_pending = True
        self.statistics_cache.refetch()

    def set_items(self, items: Iterable[PracticeItem]) -> None:
        """Replace the practice items (e.g. after a fetch)."""
        self._items = list(items)
        self._items_by_id = {item.id: item for item in self._items}
        if self.selected_item_id is not None and self.selected_item_id not in self._items_by_id:
            self.selected_item_id = None
        self.visible_items_changed.emit()

    @property
    def items(self) -> List[PracticeItem]:
        return list(self._items)

    def get_item(self, item_id: str) -> Optional[PracticeItem]:
        return self._items_by_id.get(item_id)

    @property
    def visible_items(self) -> List[PracticeItem]:
        """Filtered, ordered and capped items; navigation walks this list."""
        return order_items(
            self._items,
            self.sort_mode,
            self.display_cap,
            self.random_seed,
            self._sorting_statistics,
            self._passes_filters,
        )

    @property
    def selected_item(self) -> Optional[PracticeItem]:
        if self.selected_item_id is None:
            return None
        return self._items_by_id.get(self.selected_item_id)

    def select_item(self, item_id: Optional[str]) -> None:
        """Pick the item to practice (conjugation practice works on one verb at a time)."""
        self.selected_item_id = item_id or None
        self._clear_session_state()

    # ----- session state -----

    def input_value(self, item_id: str, field: str) -> str:
        return self._inputs.get((item_id, field), "")

    def verdict(self, item_id: str, field: str) -> Verdict:
        return self._verdicts.get((item_id, field), Verdict.UNVALIDATED)

    def on_input_change(self, item_id: str, field: str, value: str) -> None:
        """Store typed text; an edited field always loses its verdict."""
        if not self._has_field(item_id, field):
            return
        self._inputs[(item_id, field)] = value
        self.input_changed.emit(item_id, field, value)
        if self.verdict(item_id, field).is_graded:
            self._set_verdict(item_id, field, Verdict.UNVALIDATED)

    def on_validate(
        self,
        item_id: str,
        field: Optional[str] = None,
        persist_statistics: bool = True,
    ) -> None:
        """
        Grade typed answers.

        Item-graded kinds evaluate every non-blank field and record a single
        attempt, correct only if every field is, once no field is blank.
        Field-graded kinds grade (and record) the given field, or every field
        when `field` is None.
        """
        item = self._items_by_id.get(item_id)
        if item is None:
            return

        if self.kind.grading is Grading.ITEM:
            self._validate_item(item, persist_statistics)
            return

        fields = [field] if field is not None else list(item.field_keys)
        for field_key in fields:
            self._validate_field(item, field_key, persist_statistics)

    def on_clear(self, item_id: str, field: str) -> None:
        """Blank one field and hand focus back to it after the current update."""
        if not self._has_field(item_id, field):
            return
        self._inputs[(item_id, field)] = ""
        self.input_changed.emit(item_id, field, "")
        self._set_verdict(item_id, field, Verdict.UNVALIDATED)
        self._defer(lambda: self.focus_requested.emit(item_id, field))

    def on_clear_item(self, item_id: str) -> None:
        """Blank every field of an item."""
        item = self._items_by_id.get(item_id)
        if item is None:
            return
        for field_key in item.field_keys:
            self._inputs[(item_id, field_key)] = ""
            self.input_changed.emit(item_id, field_key, "")
            self._set_verdict(item_id, field_key, Verdict.UNVALIDATED)

    def on_show_answer(self, item_id: str, field: Optional[str] = None) -> None:
        """Fill in the expected answers and mark them correct. Never recorded."""
        item = self._items_by_id.get(item_id)
        if item is None:
            return
        answer_fields = item.fields if field is None else [f for f in item.fields if f.key == field]
        for answer_field in answer_fields:
            self._inputs[(item_id, answer_field.key)] = answer_field.expected
            self._verdicts[(item_id, answer_field.key)] = Verdict.CORRECT
        for answer_field in answer_fields:
            self.input_changed.emit(item_id, answer_field.key, answer_field.expected)
            self.verdict_changed.emit(item_id, answer_field.key, Verdict.CORRECT)

    def on_key_down(
        self,
        key: Union[Qt.Key, int],
        item_id: str,
        field: str,
        current_index: int,
    ) -> Optional[FocusTarget]:
        """
        React to the commit key (Return / Enter) in a field.

        Returns:
            The field focus moves to, or None when focus stays put.
        """
        if key not in COMMIT_KEYS:
            return None
        item = self._items_by_id.get(item_id)
        if item is None:
            return None

        next_field = item.next_field_key(field)

        if self.kind.grading is Grading.FIELD:
            self.on_validate(item_id, field)
            if next_field is None:
                return None
            target = FocusTarget(item_id, next_field)
            self._defer(lambda: self.focus_requested.emit(target.item_id, target.field))
            return target

        if next_field is not None:
            return self._request_focus(FocusTarget(item_id, next_field))

        # Resolve the next item before grading: a recorded attempt may
        # change which items pass the mastery filter.
        visible = self.visible_items
        self.on_validate(item_id)

        if 0 <= current_index < len(visible) - 1:
            next_item = visible[current_index + 1]
            if next_item.fields:
                return self._request_focus(FocusTarget(next_item.id, next_item.field_keys[0]))
        return None

    # ----- statistics -----

    def get_statistics(
        self,
        item_id: str,
        mood: Optional[str] = None,
        tense: Optional[str] = None,
        person: Optional[str] = None,
    ) -> Statistics:
        """Counters of an item, or of one conjugated form when mood/tense/person are given."""
        if mood is not None and tense is not None and person is not None:
            return self.statistics_cache.get(ConjugationKey(item_id, mood, tense, person))
        return self._item_statistics(item_id)

    def is_mastered(self, item_id: str) -> bool:
        return self._item_statistics(item_id).net_score >= self.mastery_threshold

    @property
    def mastered_count(self) -> int:
        return sum(1 for item in self._items if self.is_mastered(item.id))

    # ----- ordering and filters -----

    @property
    def should_show_refresh(self) -> bool:
        return self.sort_mode.supports_refresh

    def set_sort_mode(self, sort_mode: Union[SortMode, str]) -> None:
        """Switch ordering; a fresh seed or statistics snapshot is taken as needed."""
        self.sort_mode = SortMode.parse(sort_mode)
        if self.sort_mode is SortMode.RANDOM:
            self.random_seed = self._seed_factory()
        elif self.sort_mode.uses_statistics:
            self._capture_snapshot()
        self._clear_session_state()
        self._save_preferences()
        self.visible_items_changed.emit()

    def set_display_cap(self, display_cap: Union[int, str]) -> None:
        self.display_cap = parse_display_cap(display_cap)
        self._save_preferences()
        self.visible_items_changed.emit()

    def set_exclude_mastered(self, exclude: bool) -> None:
        self.exclude_mastered = bool(exclude)
        self._save_preferences()
        self.visible_items_changed.emit()

    def set_verb_type_filter(self, verb_type: Union[VerbTypeFilter, str]) -> None:
        self.verb_type_filter = VerbTypeFilter.parse(verb_type)
        self._save_preferences()
        self.visible_items_changed.emit()

    def refresh(self) -> None:
        """
        Re-roll the current order.

        Random order gets a new seed; error-based orders re-read statistics
        and re-sort once they arrive. Typed input is discarded either way.
        """
        if self.sort_mode is SortMode.RANDOM:
            self.random_seed = self._seed_factory()
        elif self.sort_mode.uses_statistics:
            self._capture_snapshot()
            self._snapshot_pending = True
            self.statistics_cache.refetch()
        self._clear_session_state()
        self.visible_items_changed.emit()

    # ----- reset dialog -----

    def open_reset_dialog(self, item_id: str) -> None:
        self.reset_dialog.open(item_id)

    def close_reset_dialog(self) -> None:
        self.reset_dialog.cancel()

    def confirm_reset(self) -> None:
        self.reset_dialog.confirm()

    # ----- internals -----

    def _validate_item(self, item: PracticeItem, persist_statistics: bool) -> None:
        values = {f.key: self.input_value(item.id, f.key) for f in item.fields}
        filled = [f for f in item.fields if not is_blank(values[f.key])]
        if not filled:
            return

        if not self._debounce_allows(self.kind.debounce_key(item.id, "")):
            return

        all_correct = True
        for answer_field in item.fields:
            value = values[answer_field.key]
            if is_blank(value):
                self._set_verdict(item.id, answer_field.key, Verdict.UNVALIDATED)
                continue
            correct = is_correct(value, answer_field.expected)
            all_correct = all_correct and correct
            self._set_verdict(
                item.id,
                answer_field.key,
                Verdict.CORRECT if correct else Verdict.INCORRECT,
            )

        if persist_statistics and len(filled) == len(item.fields):
            key = self.kind.statistics_key(item, item.fields[0].key)
            self._record(key, all_correct)

    def _validate_field(self, item: PracticeItem, field: str, persist_statistics: bool) -> None:
        answer_field = item.field(field)
        if answer_field is None:
            return
        value = self.input_value(item.id, field)
        if is_blank(value):
            return
        if self.kind.locks_graded_fields and self.verdict(item.id, field).is_graded:
            return
        if not self._debounce_allows(self.kind.debounce_key(item.id, field)):
            return

        correct = is_correct(value, answer_field.expected)
        self._set_verdict(item.id, field, Verdict.CORRECT if correct else Verdict.INCORRECT)

        if persist_statistics:
            self._record(self.kind.statistics_key(item, field), correct)

    def _debounce_allows(self, debounce_key: str) -> bool:
        now = self._clock()
        last = self._last_validated.get(debounce_key)
        if last is not None and (now - last) * 1000 < self.kind.debounce_ms:
            logger.debug("Dropping repeated validation of %s", debounce_key)
            return False
        self._last_validated[debounce_key] = now
        return True

    def _record(self, key: StatisticsKey, correct: bool) -> None:
        self.statistics_cache.record(key, correct)

    def _set_verdict(self, item_id: str, field: str, verdict: Verdict) -> None:
        previous = self.verdict(item_id, field)
        self._verdicts[(item_id, field)] = verdict
        if previous is not verdict:
            self.verdict_changed.emit(item_id, field, verdict)

    def _request_focus(self, target: FocusTarget) -> FocusTarget:
        self.focus_requested.emit(target.item_id, target.field)
        return target

    def _has_field(self, item_id: str, field: str) -> bool:
        item = self._items_by_id.get(item_id)
        return item is not None and item.field(field) is not None

    def _clear_session_state(self) -> None:
        self._inputs.clear()
        self._verdicts.clear()

    def _item_label(self, item_id: str) -> Optional[str]:
        item = self._items_by_id.get(item_id)
        return item.display_label if item is not None else None

    def _item_statistics(self, item_id: str) -> Statistics:
        item = self._items_by_id.get(item_id)
        if self.kind.grading is Grading.ITEM or item is None:
            return self.statistics_cache.get(item_id)
        correct = wrong = 0
        for field_key in item.field_keys:
            stats = self.statistics_cache.get(self.kind.statistics_key(item, field_key))
            correct += stats.correct
            wrong += stats.wrong
        return Statistics(correct, wrong)

    def _sorting_statistics(self, item_id: str) -> Statistics:
        return self._sorting_snapshot.get(item_id, Statistics())

    def _capture_snapshot(self) -> None:
        self._sorting_snapshot = {item.id: self._item_statistics(item.id) for item in self._items}

    def _passes_filters(self, item: PracticeItem) -> bool:
        if not self.verb_type_filter.matches(item):
            return False
        if self.exclude_mastered and self.is_mastered(item.id):
            return False
        return True

    def _default_preferences(self) -> FilterPreferences:
        if self.kind.grading is Grading.FIELD:
            # Verb pickers list every verb and don't hide mastered ones.
            return FilterPreferences(exclude_mastered=False, display_cap=DISPLAY_ALL)
        return FilterPreferences()

    def _load_preferences(self) -> FilterPreferences:
        defaults = self._default_preferences()
        if self.preferences_store is None:
            return defaults
        return self.preferences_store.load(self.kind.name, defaults)

    def _save_preferences(self) -> None:
        if self.preferences_store is None:
            return
        self.preferences_store.save(
            self.kind.name,
            FilterPreferences(
                exclude_mastered=self.exclude_mastered,
                sort_mode=self.sort_mode,
                display_cap=self.display_cap,
                verb_type_filter=self.verb_type_filter,
            ),
        )

    def _handle_items_loaded(self, items: List[PracticeItem]) -> None:
        self.is_loading = False
        self.set_items(items)
        if self.sort_mode.uses_statistics and self.statistics_cache.is_loaded:
            self._capture_snapshot()
            self.visible_items_changed.emit()
        self.items_loaded.emit()

    def _handle_load_error(self, message: str) -> None:
        self.is_loading = False
        logger.error("Failed to load %s: %s", self.kind.name, message)
        self.load_failed.emit(message)

    @Slot()
    def _on_statistics_refreshed(self) -> None:
        if self._snapshot_pending and self.sort_mode.uses_statistics:
            self._capture_snapshot()
        self._snapshot_pending = False
        self.visible_items_changed.emit()

    @Slot(object, str)
    def _on_record_failed(self, key, message: str) -> None:
        # The verdict already shown stays as it is.
        self.statistics_error.show(STATISTICS_SAVE_ERROR)

    @Slot(str)
    def _on_reset_succeeded(self, item_id: str) -> None:
        if self.sort_mode.uses_statistics:
            self._snapshot_pending = True
            self.statistics_cache.refetch()
        self.visible_items_changed.emit()
