"""Ordering of practice items - sorting, seeded shuffling and display caps."""

import locale
from enum import Enum
from typing import Callable, Iterator, List, Literal, Optional, Sequence, TypeVar, Union

from italian_practice.core import PracticeItem, Statistics
from italian_practice.services.answer_validation import normalize_answer

T = TypeVar("T")

DisplayCap = Union[int, Literal["all"]]
DISPLAY_ALL = "all"
DISPLAY_CAP_CHOICES = (10, 20, 30, DISPLAY_ALL)
DEFAULT_DISPLAY_CAP: DisplayCap = 10

_LCG_MULTIPLIER = 9301
_LCG_INCREMENT = 49297
_LCG_MODULUS = 233280


class SortMode(Enum):
    """Order in which practice items are displayed."""

    NONE = "none"
    ALPHABETICAL = "alphabetical"
    RANDOM = "random"
    MOST_ERRORS = "most-errors"
    WORST_PERFORMANCE = "worst-performance"

    @property
    def uses_statistics(self) -> bool:
        return self in (SortMode.MOST_ERRORS, SortMode.WORST_PERFORMANCE)

    @property
    def supports_refresh(self) -> bool:
        return self is SortMode.RANDOM or self.uses_statistics

    @classmethod
    def parse(cls, value: Union[str, "SortMode"]) -> "SortMode":
        if isinstance(value, SortMode):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown sort mode: {value!r}") from None


def parse_display_cap(value: Union[int, str]) -> DisplayCap:
    """Validate a display cap: a positive int or "all"."""
    if value == DISPLAY_ALL:
        return DISPLAY_ALL
    if isinstance(value, str) and value.isdigit():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"Display cap must be a positive integer or 'all', got {value!r}")
    return value


def seeded_random(seed: int) -> Iterator[float]:
    """Yield uniform draws in [0, 1) from a linear congruential generator."""
    current = seed
    while True:
        current = (current * _LCG_MULTIPLIER + _LCG_INCREMENT) % _LCG_MODULUS
        yield current / _LCG_MODULUS


def shuffle_with_seed(items: Sequence[T], seed: int) -> List[T]:
    """Fisher-Yates shuffle; the same seed always yields the same permutation."""
    shuffled = list(items)
    draws = seeded_random(seed)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(next(draws) * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def _alphabetical_key(item: PracticeItem):
    # Accent-insensitive primary key, exact text as tie breaker.
    return (locale.strxfrm(normalize_answer(item.prompt)), locale.strxfrm(item.prompt))


def apply_display_cap(items: List[T], display_cap: DisplayCap) -> List[T]:
    if display_cap == DISPLAY_ALL:
        return items
    return items[:display_cap]


def order_items(
    items: Sequence[PracticeItem],
    sort_mode: SortMode,
    display_cap: DisplayCap,
    random_seed: int,
    get_statistics: Callable[[str], Statistics],
    filter_fn: Optional[Callable[[PracticeItem], bool]] = None,
) -> List[PracticeItem]:
    """
    Produce the visible, ordered and capped view of a list of items.

    The function is pure: callers refresh the view by passing a new seed
    (random) or fresh statistics (most-errors / worst-performance).

    Args:
        items: Items in source order.
        sort_mode: How to order the items.
        display_cap: Maximum number of items, or "all".
        random_seed: Seed for the random order.
        get_statistics: Statistics lookup by item id.
        filter_fn: Optional predicate applied before sorting.

    Returns:
        A new list; the input is never modified.
    """
    result = [item for item in items if filter_fn(item)] if filter_fn else list(items)

    # sorted() is stable, so ties keep their source order.
    if sort_mode is SortMode.ALPHABETICAL:
        result = sorted(result, key=_alphabetical_key)
    elif sort_mode is SortMode.RANDOM:
        result = shuffle_with_seed(result, random_seed)
    elif sort_mode is SortMode.MOST_ERRORS:
        result = sorted(result, key=lambda item: get_statistics(item.id).wrong, reverse=True)
    elif sort_mode is SortMode.WORST_PERFORMANCE:
        result = sorted(result, key=lambda item: get_statistics(item.id).performance, reverse=True)

    return apply_display_cap(result, display_cap)
