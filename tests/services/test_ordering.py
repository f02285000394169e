"""Unit tests for item ordering."""

import pytest

from italian_practice.core import AnswerField, PracticeItem, Statistics
from italian_practice.services import (
    DISPLAY_ALL,
    SortMode,
    order_items,
    parse_display_cap,
    shuffle_with_seed,
)
from italian_practice.services.ordering import seeded_random


def make_item(item_id, prompt=None):
    return PracticeItem(id=item_id, prompt=prompt or item_id, fields=(AnswerField("italian", item_id),))


def prompts(items):
    return [item.prompt for item in items]


def ids(items):
    return [item.id for item in items]


def no_statistics(item_id):
    return Statistics()


def statistics_from(table):
    return lambda item_id: table.get(item_id, Statistics())


@pytest.fixture
def many_items():
    return [make_item(f"item{i:02d}") for i in range(25)]


class TestSortModes:
    def test_none_keeps_source_order(self):
        items = [make_item("c"), make_item("a"), make_item("b")]
        assert ids(order_items(items, SortMode.NONE, DISPLAY_ALL, 0, no_statistics)) == ["c", "a", "b"]

    def test_alphabetical(self):
        items = [make_item("1", "House"), make_item("2", "Book"), make_item("3", "Tree")]
        result = order_items(items, SortMode.ALPHABETICAL, DISPLAY_ALL, 0, no_statistics)
        assert prompts(result) == ["Book", "House", "Tree"]

    def test_alphabetical_ignores_case_and_accents(self):
        items = [make_item("1", "zebra"), make_item("2", "Élan"), make_item("3", "apple")]
        result = order_items(items, SortMode.ALPHABETICAL, DISPLAY_ALL, 0, no_statistics)
        assert prompts(result) == ["apple", "Élan", "zebra"]

    def test_most_errors(self):
        items = [make_item("A"), make_item("B"), make_item("C")]
        stats = statistics_from({"A": Statistics(0, 1), "B": Statistics(0, 3), "C": Statistics(5, 0)})
        assert ids(order_items(items, SortMode.MOST_ERRORS, DISPLAY_ALL, 0, stats)) == ["B", "A", "C"]

    def test_worst_performance(self):
        items = [make_item("A"), make_item("B"), make_item("C")]
        stats = statistics_from({"A": Statistics(5, 1), "B": Statistics(1, 2), "C": Statistics(2, 2)})
        result = order_items(items, SortMode.WORST_PERFORMANCE, DISPLAY_ALL, 0, stats)
        assert ids(result) == ["B", "C", "A"]

    def test_ties_keep_source_order(self):
        items = [make_item("A"), make_item("B"), make_item("C"), make_item("D")]
        stats = statistics_from({"B": Statistics(0, 2), "D": Statistics(0, 2)})
        assert ids(order_items(items, SortMode.MOST_ERRORS, DISPLAY_ALL, 0, stats)) == ["B", "D", "A", "C"]

    def test_input_is_not_modified(self):
        items = [make_item("b"), make_item("a")]
        order_items(items, SortMode.ALPHABETICAL, DISPLAY_ALL, 0, no_statistics)
        assert ids(items) == ["b", "a"]

    def test_filter_runs_before_sort_and_cap(self, many_items):
        result = order_items(
            many_items,
            SortMode.NONE,
            3,
            0,
            no_statistics,
            filter_fn=lambda item: item.id.endswith(("5", "7")),
        )
        assert ids(result) == ["item05", "item07", "item15"]


class TestRandomOrder:
    def test_same_seed_same_permutation(self, many_items):
        first = order_items(many_items, SortMode.RANDOM, DISPLAY_ALL, 42, no_statistics)
        second = order_items(many_items, SortMode.RANDOM, DISPLAY_ALL, 42, no_statistics)
        assert ids(first) == ids(second)

    def test_different_seeds_differ(self, many_items):
        first = order_items(many_items, SortMode.RANDOM, DISPLAY_ALL, 1, no_statistics)
        second = order_items(many_items, SortMode.RANDOM, DISPLAY_ALL, 2, no_statistics)
        assert ids(first) != ids(second)

    def test_shuffle_is_a_permutation(self, many_items):
        shuffled = shuffle_with_seed(many_items, 7)
        assert sorted(ids(shuffled)) == ids(many_items)

    def test_generator_follows_linear_congruence(self):
        draws = seeded_random(0)
        assert next(draws) == 49297 / 233280
        assert next(draws) == ((49297 * 9301 + 49297) % 233280) / 233280

    def test_two_items_swap_when_first_draw_is_low(self):
        # Seed 0 draws 0.211..., so j = 0 and the two items swap.
        assert shuffle_with_seed(["a", "b"], 0) == ["b", "a"]


class TestDisplayCap:
    def test_cap_keeps_pre_cap_order(self, many_items):
        result = order_items(many_items, SortMode.NONE, 10, 0, no_statistics)
        assert ids(result) == ids(many_items[:10])

    def test_all_keeps_every_item(self, many_items):
        assert len(order_items(many_items, SortMode.NONE, DISPLAY_ALL, 0, no_statistics)) == 25

    @pytest.mark.parametrize("raw,expected", [(10, 10), ("20", 20), ("all", "all"), (7, 7)])
    def test_parse_display_cap(self, raw, expected):
        assert parse_display_cap(raw) == expected

    @pytest.mark.parametrize("raw", [0, -5, "many", None, True])
    def test_parse_display_cap_rejects_invalid(self, raw):
        with pytest.raises(ValueError):
            parse_display_cap(raw)


class TestSortModeFlags:
    def test_parse(self):
        assert SortMode.parse("most-errors") is SortMode.MOST_ERRORS
        assert SortMode.parse(SortMode.RANDOM) is SortMode.RANDOM

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown sort mode"):
            SortMode.parse("by-length")

    def test_refresh_support(self):
        assert SortMode.RANDOM.supports_refresh
        assert SortMode.WORST_PERFORMANCE.supports_refresh
        assert not SortMode.ALPHABETICAL.supports_refresh
        assert not SortMode.NONE.supports_refresh
